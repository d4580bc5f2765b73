"""Tests for CommerceApiClient against an in-process httpx.MockTransport."""

import json
from datetime import datetime, timezone
from decimal import Decimal

import httpx
import pytest

from txn_dashboard.config import Settings
from txn_dashboard.engine.fetch_orchestrator import TransactionFetcher
from txn_dashboard.models.provider import OrderQuery
from txn_dashboard.models.transaction import TransactionStatus
from txn_dashboard.providers.base import ProviderError
from txn_dashboard.providers.commerce_api import CommerceApiClient


def _settings(**overrides) -> Settings:
    values = {
        "COMMERCE_API_BASE_URL": "https://commerce.test",
        "COMMERCE_API_KEY": "test-key",
        "COMMERCE_SITE_ID": "site-1",
    }
    values.update(overrides)
    return Settings(**values)


def _client(handler, **overrides) -> CommerceApiClient:
    return CommerceApiClient(_settings(**overrides), transport=httpx.MockTransport(handler))


async def test_search_orders_sends_filter_and_parses_orders():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={
            "orders": [
                {"id": "o-1", "number": 10001, "currency": "USD",
                 "createdDate": "2025-01-10T08:00:00Z",
                 "buyerInfo": {"email": "ada@example.com", "contactId": "c-1"}},
            ],
            "metadata": {"count": 1},
        })

    orders = await _client(handler).search_orders(OrderQuery(
        created_from=datetime(2025, 1, 1, tzinfo=timezone.utc),
        created_to=datetime(2025, 1, 31, tzinfo=timezone.utc),
        limit=25,
    ))

    assert len(orders) == 1
    assert orders[0].id == "o-1"
    assert orders[0].number == "10001"
    assert orders[0].buyer_info.email == "ada@example.com"

    (request,) = seen
    assert request.method == "POST"
    assert str(request.url) == "https://commerce.test/ecom/v1/orders/search"
    assert request.headers["Authorization"] == "test-key"
    assert request.headers["wix-site-id"] == "site-1"

    search = json.loads(request.content)["search"]
    assert search["cursorPaging"] == {"limit": 25}
    assert search["sort"] == [{"fieldName": "createdDate", "order": "DESC"}]
    assert search["filter"] == {
        "createdDate": {"$gte": "2025-01-01T00:00:00Z", "$lte": "2025-01-31T00:00:00Z"}
    }


async def test_search_orders_without_window_sends_no_filter():
    seen: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(json.loads(request.content))
        return httpx.Response(200, json={"orders": []})

    assert await _client(handler).search_orders(OrderQuery(limit=10)) == []
    assert "filter" not in seen[0]["search"]


async def test_list_transactions_for_orders_parses_payments_and_refunds():
    def handler(request: httpx.Request) -> httpx.Response:
        assert json.loads(request.content) == {"orderIds": ["o-1"]}
        return httpx.Response(200, json={
            "orderTransactions": [{
                "orderId": "o-1",
                "payments": [{
                    "id": "pay-1",
                    "amount": {"amount": "12.00", "currency": "EUR"},
                    "regularPaymentDetails": {"status": "APPROVED", "paymentMethod": "Card"},
                }],
                "refunds": [{
                    "id": "ref-1",
                    "summary": {"refunded": {"amount": "2.00"}},
                    "transactions": [{"providerRefundId": "prf-1"}],
                }],
            }]
        })

    (entry,) = await _client(handler).list_transactions_for_orders(["o-1"])

    assert entry.order_id == "o-1"
    assert entry.payments[0].regular_payment_details.status == "APPROVED"
    assert entry.refunds[0].transactions[0].provider_refund_id == "prf-1"


async def test_missing_credentials_raise_provider_error_without_calling_out():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json={"orders": []})

    client = _client(handler, COMMERCE_API_KEY="")
    assert client.configured is False
    with pytest.raises(ProviderError, match="not configured"):
        await client.search_orders(OrderQuery())
    assert calls == []


async def test_error_status_raises_provider_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(503, text="maintenance")

    with pytest.raises(ProviderError) as exc_info:
        await _client(handler).search_orders(OrderQuery())
    assert exc_info.value.status_code == 503


async def test_non_json_body_raises_provider_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, text="<html>oops</html>")

    with pytest.raises(ProviderError, match="not JSON"):
        await _client(handler).list_transactions_for_orders(["o-1"])


async def test_transport_error_raises_provider_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(ProviderError, match="ConnectError"):
        await _client(handler).search_orders(OrderQuery())


async def test_records_list_of_wrong_shape_raises_provider_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"orders": {"id": "o-1"}})

    with pytest.raises(ProviderError, match="malformed orders payload"):
        await _client(handler).search_orders(OrderQuery())


async def test_wrongly_typed_fields_resolve_to_defaults():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={
            "orders": [
                "not-an-order",
                {"id": "o-1", "number": "1001", "buyerInfo": []},
                {"id": "o-2", "buyerInfo": {"firstName": "Ada", "email": "ada@example.com"}},
            ]
        })

    orders = await _client(handler).search_orders(OrderQuery())

    assert [o.id for o in orders] == ["o-1", "o-2"]
    assert orders[0].buyer_info is None
    assert orders[0].number == "1001"
    assert orders[1].buyer_info.first_name == "Ada"


async def test_one_malformed_payment_keeps_the_rest_of_the_batch():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/orders/search"):
            return httpx.Response(200, json={"orders": [{"id": "o-1", "currency": "USD"}]})
        return httpx.Response(200, json={
            "orderTransactions": [{
                "orderId": "o-1",
                "payments": [
                    {"id": "good", "amount": {"amount": "10.00"},
                     "regularPaymentDetails": {"status": "APPROVED"}},
                    {"id": "odd", "amount": "5.00", "regularPaymentDetails": "APPROVED"},
                    42,
                ],
                "refunds": [{"id": "ref-1", "summary": [], "transactions": ["x", {"providerRefundId": "prf-1"}]}],
            }]
        })

    fetcher = TransactionFetcher(provider=_client(handler), settings=_settings())
    result = await fetcher.fetch_transactions()

    assert result.using_mock_data is False
    assert [t.id for t in result.data] == ["good", "odd", "ref-1"]

    good, odd, refund = result.data
    assert good.amount == Decimal("10.00")
    assert good.status == TransactionStatus.APPROVED
    assert odd.amount == Decimal("0")
    assert odd.status == TransactionStatus.PENDING
    assert odd.currency == "USD"
    assert refund.amount == Decimal("0")
    assert refund.provider_transaction_id == "prf-1"
