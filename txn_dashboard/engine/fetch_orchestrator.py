import asyncio
import logging
import time
from datetime import datetime, timedelta, timezone
from typing import Callable, Iterable, Optional

from txn_dashboard.config import Settings
from txn_dashboard.engine.filters import apply_filters, matches_status
from txn_dashboard.engine.transformer import transform_payment, transform_refund
from txn_dashboard.models.metrics import TransactionMetrics
from txn_dashboard.models.provider import OrderQuery
from txn_dashboard.models.result import Err, Ok, Result
from txn_dashboard.models.transaction import FetchResult, Transaction, TransactionFilters
from txn_dashboard.providers.base import AbstractCommerceProvider
from txn_dashboard.services.metrics_service import calculate_metrics
from txn_dashboard.services.mock_data import get_mock_transactions

logger = logging.getLogger(__name__)


class TransactionFetcher:
    """
    Loads transactions from the commerce provider: orders -> payments/refunds
    -> canonical Transactions.

    Fallback policy:
      Ok(transactions)  -> live data, using_mock_data=False
                           (an empty list is valid once orders were found)
      Err(reason)       -> synthetic dataset, using_mock_data=True

    Any failure of the live path (provider exception, timeout, no orders)
    becomes an Err; nothing from the provider reaches the caller as an
    exception. Only a failure of the mock source itself propagates.

    Holds no mutable state, so one instance serves any number of
    concurrent requests.
    """

    def __init__(
        self,
        provider: AbstractCommerceProvider,
        settings: Settings,
        mock_source: Callable[[], list[Transaction]] = get_mock_transactions,
    ):
        self._provider = provider
        self._settings = settings
        self._mock_source = mock_source

    def _order_query(self, filters: TransactionFilters) -> OrderQuery:
        created_from = filters.created_from
        if created_from is None and filters.date_range:
            created_from = datetime.now(timezone.utc) - timedelta(days=filters.date_range)
        return OrderQuery(
            created_from=created_from,
            created_to=filters.created_to,
            limit=filters.limit or self._settings.ORDER_SEARCH_LIMIT,
        )

    async def _call(self, awaitable):
        return await asyncio.wait_for(awaitable, timeout=self._settings.PROVIDER_TIMEOUT_SECONDS)

    async def _load_live(self, filters: TransactionFilters) -> Result[list[Transaction]]:
        try:
            orders = await self._call(self._provider.search_orders(self._order_query(filters)))
            orders_by_id = {o.id: o for o in orders if o.id is not None}
            if not orders_by_id:
                return Err("no orders found")

            logger.info(f"[{self._provider.name}] Getting transactions for {len(orders_by_id)} order(s)")
            order_transactions = await self._call(
                self._provider.list_transactions_for_orders(list(orders_by_id))
            )

            currency = self._settings.FALLBACK_CURRENCY
            transactions: list[Transaction] = []
            for entry in order_transactions:
                order = orders_by_id.get(entry.order_id)
                for payment in entry.payments:
                    txn = transform_payment(payment, order, fallback_currency=currency)
                    if matches_status(txn, filters.status):
                        transactions.append(txn)
                for refund in entry.refunds:
                    txn = transform_refund(refund, order, fallback_currency=currency)
                    if matches_status(txn, filters.status):
                        transactions.append(txn)
        except asyncio.TimeoutError as exc:
            return Err(f"provider timed out after {self._settings.PROVIDER_TIMEOUT_SECONDS}s", exc)
        except Exception as exc:
            return Err(f"{type(exc).__name__}: {exc}", exc)

        return Ok(transactions)

    async def fetch_transactions(self, filters: Optional[TransactionFilters] = None) -> FetchResult:
        filters = filters or TransactionFilters()
        start = time.monotonic()

        result = await self._load_live(filters)

        if isinstance(result, Err):
            logger.warning(
                f"[{self._provider.name}] Live fetch failed ({result.reason}); using mock data"
            )
            return FetchResult(data=self._mock_source(), using_mock_data=True)

        elapsed_ms = (time.monotonic() - start) * 1000
        logger.info(
            f"[{self._provider.name}] Processed {len(result.value)} transaction(s) "
            f"in {elapsed_ms:.1f}ms"
        )
        return FetchResult(data=result.value, using_mock_data=False)

    async def refresh_transactions(self) -> FetchResult:
        """Re-fetch restricted to the refresh window (last 7 days by default)."""
        return await self.fetch_transactions(
            TransactionFilters(
                date_range=self._settings.REFRESH_WINDOW_DAYS,
                limit=self._settings.REFRESH_ORDER_LIMIT,
            )
        )

    @staticmethod
    def calculate_metrics(transactions: Iterable[Transaction]) -> TransactionMetrics:
        return calculate_metrics(transactions)

    @staticmethod
    def apply_filters(
        transactions: Iterable[Transaction],
        filters: Optional[TransactionFilters] = None,
    ) -> list[Transaction]:
        return apply_filters(transactions, filters)
