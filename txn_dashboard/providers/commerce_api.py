import logging
from datetime import datetime, timezone
from typing import Any, Optional, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from txn_dashboard.config import Settings
from txn_dashboard.models.provider import OrderQuery, OrderTransactions, ProviderOrder
from txn_dashboard.providers.base import AbstractCommerceProvider, ProviderError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def _iso(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


class CommerceApiClient(AbstractCommerceProvider):
    """
    REST client for the commerce platform's order search and order
    transactions endpoints.

    Every failure (missing credentials, transport error, non-2xx status,
    undecodable body, record list of the wrong shape) is raised as
    ProviderError so callers only ever deal with one exception type.
    """

    name = "commerce-api"

    def __init__(
        self,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._settings = settings
        self._transport = transport

    @property
    def configured(self) -> bool:
        return bool(self._settings.COMMERCE_API_KEY)

    def _headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": self._settings.COMMERCE_API_KEY,
            "wix-site-id": self._settings.COMMERCE_SITE_ID,
        }

    async def _post(self, path: str, payload: dict) -> dict:
        if not self.configured:
            raise ProviderError("commerce API credentials are not configured")

        url = f"{self._settings.COMMERCE_API_BASE_URL.rstrip('/')}{path}"
        timeout = httpx.Timeout(self._settings.PROVIDER_TIMEOUT_SECONDS)
        try:
            async with httpx.AsyncClient(timeout=timeout, transport=self._transport) as client:
                response = await client.post(url, json=payload, headers=self._headers())
        except httpx.HTTPError as exc:
            raise ProviderError(f"request failed: {type(exc).__name__}", url=url) from exc

        if response.is_error:
            raise ProviderError(
                f"unexpected response: {response.text[:200]}",
                url=url,
                status_code=response.status_code,
            )
        try:
            body = response.json()
        except ValueError as exc:
            raise ProviderError(
                "response body is not JSON", url=url, status_code=response.status_code
            ) from exc
        if not isinstance(body, dict):
            raise ProviderError(
                "response body is not a JSON object", url=url, status_code=response.status_code
            )
        return body

    def _parse_records(self, model: type[ModelT], records: Any, kind: str) -> list[ModelT]:
        """Validate each record on its own; entries that are not objects are skipped."""
        if records is None:
            return []
        if not isinstance(records, list):
            raise ProviderError(f"malformed {kind} payload: expected a list")

        parsed: list[ModelT] = []
        for record in records:
            try:
                parsed.append(model.model_validate(record))
            except ValidationError:
                logger.warning(
                    f"[{self.name}] Skipping malformed {kind} record ({type(record).__name__})"
                )
        return parsed

    async def search_orders(self, query: OrderQuery) -> list[ProviderOrder]:
        created: dict[str, str] = {}
        if query.created_from:
            created["$gte"] = _iso(query.created_from)
        if query.created_to:
            created["$lte"] = _iso(query.created_to)

        search: dict = {
            "sort": [{"fieldName": "createdDate", "order": "DESC"}],
            "cursorPaging": {"limit": query.limit},
        }
        if created:
            search["filter"] = {"createdDate": created}

        body = await self._post(self._settings.ORDERS_SEARCH_PATH, {"search": search})
        orders = self._parse_records(ProviderOrder, body.get("orders"), "orders")

        logger.info(f"[{self.name}] search_orders returned {len(orders)} order(s)")
        return orders

    async def list_transactions_for_orders(self, order_ids: list[str]) -> list[OrderTransactions]:
        body = await self._post(self._settings.ORDER_TRANSACTIONS_PATH, {"orderIds": order_ids})
        result = self._parse_records(
            OrderTransactions, body.get("orderTransactions"), "order transactions"
        )

        logger.info(
            f"[{self.name}] list_transactions_for_orders returned {len(result)} entr(ies) "
            f"for {len(order_ids)} order(s)"
        )
        return result
