from decimal import Decimal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class TransactionMetrics(BaseModel):
    """Headline totals derived from a transaction collection; never stored."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    total_approved: Decimal = Decimal("0")
    total_pending: Decimal = Decimal("0")
    total_declined: Decimal = Decimal("0")
    total_refunded: Decimal = Decimal("0")
    total_revenue: Decimal = Decimal("0")  # approved minus refunded
    total_transactions: int = 0
