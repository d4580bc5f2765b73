from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Commerce platform API
    COMMERCE_API_BASE_URL: str = "https://www.wixapis.com"
    COMMERCE_API_KEY: str = ""                # empty -> provider unconfigured, mock data served
    COMMERCE_SITE_ID: str = ""
    ORDERS_SEARCH_PATH: str = "/ecom/v1/orders/search"
    ORDER_TRANSACTIONS_PATH: str = "/ecom/v1/payments/orders"

    # Per-call provider timeout
    PROVIDER_TIMEOUT_SECONDS: float = 10.0

    # Order search windows
    ORDER_SEARCH_LIMIT: int = 10
    DEFAULT_LOOKBACK_DAYS: int = 30
    DEFAULT_PAGE_LIMIT: int = 50
    REFRESH_WINDOW_DAYS: int = 7
    REFRESH_ORDER_LIMIT: int = 100

    # Applied when neither the record nor its order carries a currency
    FALLBACK_CURRENCY: str = "EUR"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
