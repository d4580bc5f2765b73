"""
Provider record shapes as returned by the commerce platform's order and
payment APIs.

Every field is optional and unknown fields are ignored: the transformer owns
the default-resolution rules. A field of the wrong shape (a bare string where
a money object belongs, a list where buyer info belongs) resolves to its
default instead of failing validation, and non-object entries in record lists
are dropped, so a single odd record never rejects the whole batch.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    ValidatorFunctionWrapHandler,
    field_validator,
)
from pydantic.alias_generators import to_camel


def _objects_only(value: Any) -> Any:
    if isinstance(value, list):
        return [item for item in value if isinstance(item, (dict, BaseModel))]
    return value


class ProviderModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        coerce_numbers_to_str=True,
    )

    @field_validator("*", mode="wrap")
    @classmethod
    def _default_on_wrong_type(
        cls, value: Any, handler: ValidatorFunctionWrapHandler, info: ValidationInfo
    ) -> Any:
        try:
            return handler(value)
        except ValidationError:
            return cls.model_fields[info.field_name].get_default(call_default_factory=True)


class Money(ProviderModel):
    amount: Optional[str] = None  # decimal string, e.g. "250.00"
    currency: Optional[str] = None


class ContactDetails(ProviderModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None


class BillingInfo(ProviderModel):
    contact_details: Optional[ContactDetails] = None


class BuyerInfo(ProviderModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None


class ProviderOrder(ProviderModel):
    id: Optional[str] = Field(None, validation_alias=AliasChoices("_id", "id"))
    number: Optional[str] = None
    currency: Optional[str] = None
    created_date: Optional[str] = Field(
        None, validation_alias=AliasChoices("_createdDate", "createdDate", "created_date")
    )
    buyer_info: Optional[BuyerInfo] = None
    billing_info: Optional[BillingInfo] = None


class RegularPaymentDetails(ProviderModel):
    status: Optional[str] = None
    payment_method: Optional[str] = None
    provider_transaction_id: Optional[str] = None


class ProviderPayment(ProviderModel):
    id: Optional[str] = Field(None, validation_alias=AliasChoices("_id", "id"))
    created_date: Optional[str] = Field(
        None, validation_alias=AliasChoices("_createdDate", "createdDate", "created_date")
    )
    amount: Optional[Money] = None
    regular_payment_details: Optional[RegularPaymentDetails] = None


class RefundSummary(ProviderModel):
    refunded: Optional[Money] = None


class RefundTransaction(ProviderModel):
    provider_refund_id: Optional[str] = None


class ProviderRefund(ProviderModel):
    id: Optional[str] = Field(None, validation_alias=AliasChoices("_id", "id"))
    created_date: Optional[str] = Field(
        None, validation_alias=AliasChoices("_createdDate", "createdDate", "created_date")
    )
    summary: Optional[RefundSummary] = None
    transactions: list[RefundTransaction] = Field(default_factory=list)

    @field_validator("transactions", mode="before")
    @classmethod
    def _drop_non_objects(cls, value: Any) -> Any:
        return _objects_only(value)


class OrderTransactions(ProviderModel):
    """Payments and refunds recorded against one order."""

    order_id: Optional[str] = None
    payments: list[ProviderPayment] = Field(default_factory=list)
    refunds: list[ProviderRefund] = Field(default_factory=list)

    @field_validator("payments", "refunds", mode="before")
    @classmethod
    def _drop_non_objects(cls, value: Any) -> Any:
        return _objects_only(value)


class OrderQuery(BaseModel):
    created_from: Optional[datetime] = None
    created_to: Optional[datetime] = None
    limit: int = Field(10, gt=0)
