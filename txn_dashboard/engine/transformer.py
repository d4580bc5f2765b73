"""
Record transformer: one provider payment or refund plus its parent order in,
one canonical Transaction out.

Both transforms are pure and never raise. Missing or malformed fields
resolve to fixed defaults so one bad record cannot abort a page.
"""

import time
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Optional

from txn_dashboard.engine.status_mapper import map_status
from txn_dashboard.models.provider import Money, ProviderOrder, ProviderPayment, ProviderRefund
from txn_dashboard.models.transaction import Transaction, TransactionStatus, TransactionType

DEFAULT_CURRENCY = "EUR"
DEFAULT_CUSTOMER_NAME = "Customer"
DEFAULT_CUSTOMER_EMAIL = "customer@example.com"
UNKNOWN_PAYMENT_METHOD = "Unknown"
REFUND_LABEL = "Refund"


def parse_amount(raw: Optional[str]) -> Decimal:
    if not raw:
        return Decimal("0")
    try:
        amount = Decimal(raw.strip())
    except InvalidOperation:
        return Decimal("0")
    if not amount.is_finite() or amount < 0:
        return Decimal("0")
    return amount


def parse_created_date(raw: Optional[str]) -> datetime:
    """ISO-8601 provider timestamp -> aware datetime; now (UTC) when absent or unparsable."""
    if raw:
        try:
            parsed = datetime.fromisoformat(raw.strip().replace("Z", "+00:00"))
        except ValueError:
            parsed = None
        if parsed is not None:
            if parsed.tzinfo is None:
                parsed = parsed.replace(tzinfo=timezone.utc)
            return parsed
    return datetime.now(timezone.utc)


def _fallback_id(prefix: str) -> str:
    # Millisecond timestamp only: two records in the same millisecond collide.
    return f"{prefix}-{int(time.time() * 1000)}"


def _is_currency_code(value: Optional[str]) -> bool:
    return bool(value) and len(value) == 3


def _resolve_currency(money: Optional[Money], order: Optional[ProviderOrder], fallback: str) -> str:
    if money and _is_currency_code(money.currency):
        return money.currency
    if order and _is_currency_code(order.currency):
        return order.currency
    return fallback


def customer_name_from_order(order: Optional[ProviderOrder]) -> str:
    if order is None:
        return DEFAULT_CUSTOMER_NAME

    contact = order.billing_info.contact_details if order.billing_info else None
    if contact and contact.first_name and contact.last_name:
        return f"{contact.first_name} {contact.last_name}"

    buyer = order.buyer_info
    if buyer and buyer.first_name and buyer.last_name:
        return f"{buyer.first_name} {buyer.last_name}"

    return DEFAULT_CUSTOMER_NAME


def customer_email_from_order(order: Optional[ProviderOrder]) -> str:
    if order and order.buyer_info and order.buyer_info.email:
        return order.buyer_info.email
    return DEFAULT_CUSTOMER_EMAIL


def _order_reference(order: Optional[ProviderOrder]) -> str:
    if order is None:
        return "unknown"
    return order.number or order.id or "unknown"


def transform_payment(
    payment: ProviderPayment,
    order: Optional[ProviderOrder],
    fallback_currency: str = DEFAULT_CURRENCY,
) -> Transaction:
    details = payment.regular_payment_details
    status = map_status(details.status if details else None)
    payment_method = details.payment_method if details else None

    return Transaction(
        id=payment.id or _fallback_id("TXN"),
        amount=parse_amount(payment.amount.amount if payment.amount else None),
        currency=_resolve_currency(payment.amount, order, fallback_currency),
        status=status,
        payment_method=payment_method or UNKNOWN_PAYMENT_METHOD,
        customer_name=customer_name_from_order(order),
        customer_email=customer_email_from_order(order),
        created_date=parse_created_date(payment.created_date),
        description=f"Order #{_order_reference(order)} payment",
        provider=payment_method,
        provider_transaction_id=details.provider_transaction_id if details else None,
        type=TransactionType.PAYMENT,
    )


def transform_refund(
    refund: ProviderRefund,
    order: Optional[ProviderOrder],
    fallback_currency: str = DEFAULT_CURRENCY,
) -> Transaction:
    refunded = refund.summary.refunded if refund.summary else None

    return Transaction(
        id=refund.id or _fallback_id("REF"),
        amount=parse_amount(refunded.amount if refunded else None),
        currency=_resolve_currency(refunded, order, fallback_currency),
        status=TransactionStatus.REFUNDED,
        payment_method=REFUND_LABEL,
        customer_name=customer_name_from_order(order),
        customer_email=customer_email_from_order(order),
        created_date=parse_created_date(refund.created_date),
        description=f"Order #{_order_reference(order)} refund",
        provider=REFUND_LABEL,
        provider_transaction_id=(
            refund.transactions[0].provider_refund_id if refund.transactions else None
        ),
        type=TransactionType.REFUND,
    )
