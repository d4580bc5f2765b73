from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from txn_dashboard.models.metrics import TransactionMetrics


class TransactionStatus(str, Enum):
    APPROVED = "APPROVED"
    PENDING = "PENDING"
    DECLINED = "DECLINED"
    REFUNDED = "REFUNDED"
    CANCELLED = "CANCELLED"  # counted, but belongs to no metrics bucket


class TransactionType(str, Enum):
    PAYMENT = "PAYMENT"
    REFUND = "REFUND"


class Transaction(BaseModel):
    """Canonical transaction shown by the dashboard, independent of the provider."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    id: str
    amount: Decimal = Field(..., ge=0)
    currency: str = Field(..., min_length=3, max_length=3)
    status: TransactionStatus
    payment_method: str = "Unknown"
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    created_date: datetime
    description: Optional[str] = None
    provider: Optional[str] = None
    provider_transaction_id: Optional[str] = None
    type: Optional[TransactionType] = None


class TransactionFilters(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    status: Optional[str] = None           # canonical status, any case, or "all"
    date_range: Optional[int] = Field(None, ge=0, description="Days back from now")
    search_query: Optional[str] = None
    # Page size for the provider order search; never truncates transactions
    limit: Optional[int] = Field(None, gt=0)
    offset: Optional[int] = Field(None, ge=0)  # accepted, not applied
    created_from: Optional[datetime] = None
    created_to: Optional[datetime] = None


class FetchResult(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    data: list[Transaction] = Field(default_factory=list)
    using_mock_data: bool


class TransactionsResponse(BaseModel):
    """Envelope returned by GET /transactions; the refresh response adds `message`."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool = True
    data: list[Transaction]
    metrics: TransactionMetrics
    using_mock_data: bool


class RefreshResponse(TransactionsResponse):
    message: str
