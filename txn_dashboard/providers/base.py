from abc import ABC, abstractmethod
from typing import Optional

from txn_dashboard.models.provider import OrderQuery, OrderTransactions, ProviderOrder


class ProviderError(Exception):
    """Raised by a commerce provider when a call cannot produce usable records."""

    def __init__(
        self,
        msg: str,
        *,
        url: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        self.msg = msg
        self.url = url
        self.status_code = status_code
        super().__init__(msg)

    def __str__(self) -> str:
        text = self.msg
        if self.url:
            text += f" (url={self.url}"
            text += f", status={self.status_code})" if self.status_code is not None else ")"
        return text


class AbstractCommerceProvider(ABC):
    name: str

    @abstractmethod
    async def search_orders(self, query: OrderQuery) -> list[ProviderOrder]:
        """Return recent orders, newest first, bounded by query.limit."""

    @abstractmethod
    async def list_transactions_for_orders(self, order_ids: list[str]) -> list[OrderTransactions]:
        """Return the payments and refunds recorded against each of the given orders."""
