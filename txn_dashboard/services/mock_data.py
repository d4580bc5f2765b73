"""
Synthetic dataset served whenever the commerce platform cannot be reached.

The five records are fixed so the dashboard renders the same page (and the
same headline metrics) every time the live provider is unavailable.
"""

from datetime import datetime, timezone
from decimal import Decimal

from txn_dashboard.models.transaction import Transaction, TransactionStatus

# (id, amount, status, payment_method, customer, created_at, description)
_MOCK_ROWS = [
    ("TXN-001", "250.00", TransactionStatus.APPROVED, "Credit Card", "John Doe",
     datetime(2025, 1, 15, 10, 30, tzinfo=timezone.utc), "Invoice #INV-001 payment"),
    ("TXN-002", "180.50", TransactionStatus.APPROVED, "PayPal", "Jane Smith",
     datetime(2025, 1, 14, 14, 22, tzinfo=timezone.utc), "Invoice #INV-002 payment"),
    ("TXN-003", "320.75", TransactionStatus.PENDING, "Bank Transfer", "Mike Johnson",
     datetime(2025, 1, 13, 9, 45, tzinfo=timezone.utc), "Invoice #INV-003 payment"),
    ("TXN-004", "95.00", TransactionStatus.DECLINED, "Credit Card", "Sarah Wilson",
     datetime(2025, 1, 12, 16, 10, tzinfo=timezone.utc), "Invoice #INV-004 payment"),
    ("TXN-005", "450.25", TransactionStatus.REFUNDED, "Credit Card", "David Brown",
     datetime(2025, 1, 11, 11, 30, tzinfo=timezone.utc), "Invoice #INV-005 payment refund"),
]


def _email_for(customer: str) -> str:
    return f"{customer.lower().replace(' ', '.')}@example.com"


def get_mock_transactions() -> list[Transaction]:
    return [
        Transaction(
            id=txn_id,
            amount=Decimal(amount),
            currency="EUR",
            status=status,
            payment_method=method,
            customer_name=customer,
            customer_email=_email_for(customer),
            created_date=created,
            description=description,
        )
        for txn_id, amount, status, method, customer, created, description in _MOCK_ROWS
    ]
