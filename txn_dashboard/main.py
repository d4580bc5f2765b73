import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from txn_dashboard.config import settings
from txn_dashboard.engine.fetch_orchestrator import TransactionFetcher
from txn_dashboard.providers.commerce_api import CommerceApiClient
from txn_dashboard.routers import transactions

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # --- Startup ---
    logger.info("Transactions Dashboard starting up...")

    provider = CommerceApiClient(settings)
    app.state.settings = settings
    app.state.provider = provider
    app.state.fetcher = TransactionFetcher(provider=provider, settings=settings)

    if provider.configured:
        logger.info(
            f"Commerce provider: {settings.COMMERCE_API_BASE_URL} | "
            f"timeout={settings.PROVIDER_TIMEOUT_SECONDS}s | "
            f"fallback_currency={settings.FALLBACK_CURRENCY}"
        )
    else:
        logger.warning("COMMERCE_API_KEY is not set; every fetch will serve mock data")

    yield

    # --- Shutdown ---
    logger.info("Transactions Dashboard shutting down.")


app = FastAPI(
    title="Merchant Transactions Dashboard",
    description=(
        "Normalizes commerce platform orders, payments and refunds into canonical "
        "transactions with headline metrics, falling back to a synthetic dataset "
        "when the platform is unavailable."
    ),
    version="1.0.0",
    lifespan=lifespan,
)

app.include_router(transactions.router, tags=["Transactions"])


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "Unhandled exception on %s %s: %s",
        request.method,
        request.url.path,
        type(exc).__name__,
        exc_info=True,
    )
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": "An internal error occurred. Please try again later."},
    )


@app.get("/", tags=["Health"])
async def root():
    return {
        "service": "Merchant Transactions Dashboard",
        "version": "1.0.0",
        "status": "running",
        "docs": "/docs",
    }
