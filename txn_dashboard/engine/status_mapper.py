from typing import Optional

from txn_dashboard.models.transaction import TransactionStatus

# Provider payment status -> canonical status. Keys are the provider's own
# enumerated values, matched case-sensitively.
_STATUS_MAP: dict[str, TransactionStatus] = {
    "APPROVED": TransactionStatus.APPROVED,
    "AUTHORIZED": TransactionStatus.APPROVED,
    "DECLINED": TransactionStatus.DECLINED,
    "CANCELED": TransactionStatus.DECLINED,
    "REFUNDED": TransactionStatus.REFUNDED,
    "PARTIALLY_REFUNDED": TransactionStatus.REFUNDED,
    "PENDING": TransactionStatus.PENDING,
    "PENDING_MERCHANT": TransactionStatus.PENDING,
}


def map_status(provider_status: Optional[str]) -> TransactionStatus:
    """
    Map a provider payment status onto the canonical taxonomy.
    Unknown, empty and missing statuses map to PENDING; never raises.
    """
    if not provider_status:
        return TransactionStatus.PENDING
    return _STATUS_MAP.get(provider_status, TransactionStatus.PENDING)
