from decimal import Decimal
from typing import Iterable

from txn_dashboard.models.metrics import TransactionMetrics
from txn_dashboard.models.transaction import Transaction, TransactionStatus


def calculate_metrics(transactions: Iterable[Transaction]) -> TransactionMetrics:
    """
    Reduce a transaction collection to headline totals in one pass.

    APPROVED adds to revenue and REFUNDED subtracts from it; PENDING and
    DECLINED only feed their own bucket. CANCELLED is counted in
    total_transactions but lands in no bucket.
    """
    approved = pending = declined = refunded = Decimal("0")
    count = 0

    for transaction in transactions:
        count += 1
        amount = transaction.amount
        if transaction.status == TransactionStatus.APPROVED:
            approved += amount
        elif transaction.status == TransactionStatus.PENDING:
            pending += amount
        elif transaction.status == TransactionStatus.DECLINED:
            declined += amount
        elif transaction.status == TransactionStatus.REFUNDED:
            refunded += amount

    return TransactionMetrics(
        total_approved=approved,
        total_pending=pending,
        total_declined=declined,
        total_refunded=refunded,
        total_revenue=approved - refunded,
        total_transactions=count,
    )
