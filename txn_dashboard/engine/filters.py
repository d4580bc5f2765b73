from datetime import datetime, timedelta, timezone
from typing import Iterable, Optional

from txn_dashboard.models.transaction import Transaction, TransactionFilters

ALL_STATUSES = "all"


def matches_status(transaction: Transaction, status: Optional[str]) -> bool:
    """True when no status constraint applies or the canonical status matches, case-insensitively."""
    if not status or status.lower() == ALL_STATUSES:
        return True
    return transaction.status.value.lower() == status.lower()


def matches_search(transaction: Transaction, query: Optional[str]) -> bool:
    if not query:
        return True
    needle = query.lower()
    fields = (
        transaction.customer_name,
        transaction.customer_email,
        transaction.id,
        transaction.description,
    )
    return any(value and needle in value.lower() for value in fields)


def _as_aware(value: datetime) -> datetime:
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)


def matches_date_range(
    transaction: Transaction,
    date_range: Optional[int],
    now: Optional[datetime] = None,
) -> bool:
    if not date_range:
        return True
    cutoff = _as_aware(now or datetime.now(timezone.utc)) - timedelta(days=date_range)
    return _as_aware(transaction.created_date) >= cutoff


def apply_filters(
    transactions: Iterable[Transaction],
    filters: Optional[TransactionFilters] = None,
    now: Optional[datetime] = None,
) -> list[Transaction]:
    """
    Apply the status, search and date-range predicates (logical AND).

    Returns a new list; the input is never mutated. Without filters the
    result is a copy with the same content.
    """
    filtered = list(transactions)
    if filters is None:
        return filtered

    if filters.status and filters.status.lower() != ALL_STATUSES:
        filtered = [t for t in filtered if matches_status(t, filters.status)]

    if filters.search_query:
        filtered = [t for t in filtered if matches_search(t, filters.search_query)]

    if filters.date_range:
        reference = now or datetime.now(timezone.utc)
        filtered = [t for t in filtered if matches_date_range(t, filters.date_range, reference)]

    return filtered
