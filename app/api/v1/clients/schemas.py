from __future__ import annotations

import logging
import re
from datetime import date, datetime
from typing import Annotated, Any, Optional
from uuid import UUID

from pydantic import BaseModel, BeforeValidator, Field, field_validator

from app.core.money import normalize_amount
from app.models.enums import SubscriptionStatus

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r"^\S+@\S+\.\S+$")


def _normalize_inbound_amount(value: Any) -> float:
    """Inbound boundary: coerce whatever the request carried and note when it had to."""
    amount = normalize_amount(value)
    if amount != value or isinstance(value, (str, bytes, bool)):
        logger.debug("quotation_amount %r coerced to %s", value, amount)
    return amount


# Any stored or transmitted amount: always a finite float
Amount = Annotated[float, BeforeValidator(normalize_amount)]
# Amount accepted from a request: normalized first, then must be >= 0
QuotationAmount = Annotated[
    float,
    BeforeValidator(_normalize_inbound_amount),
    Field(ge=0, description="Quotation amount; missing or malformed values become 0"),
]


def _strip_required(value: str) -> str:
    value = value.strip() if isinstance(value, str) else value
    if not value:
        raise ValueError("must not be empty")
    return value


def _clean_email(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip().lower()
    if not value:
        return None
    if not EMAIL_RE.match(value):
        raise ValueError("Please use a valid email address")
    return value


class ClientCreate(BaseModel):
    """Create a client. Any id in the body is ignored."""
    company_name: str = Field(..., max_length=255, description="Company name")
    contact_name: str = Field(..., max_length=255, description="Contact name")
    phone: str = Field(..., max_length=50, description="Phone number")
    email: Optional[str] = Field(None, max_length=255)
    subscription_date: date
    subscription_status: SubscriptionStatus = SubscriptionStatus.active
    subscription_end_date: Optional[date] = None
    payment_due_day: int = Field(..., ge=1, le=31, description="Day of month the payment is due")
    payment_due_month: Optional[int] = Field(None, ge=1, le=12)
    last_payment_date: Optional[date] = None
    quotation_file: Optional[str] = None
    quotation_amount: QuotationAmount = 0.0

    @field_validator("company_name", "contact_name", "phone")
    @classmethod
    def strip_names(cls, value: str) -> str:
        return _strip_required(value)

    @field_validator("email")
    @classmethod
    def clean_email(cls, value: Optional[str]) -> Optional[str]:
        return _clean_email(value)


class ClientUpdate(BaseModel):
    """
    Update a client. Only the fields sent are changed, except quotation_amount:
    a request without it stores 0.
    """
    company_name: Optional[str] = Field(None, max_length=255)
    contact_name: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=50)
    email: Optional[str] = Field(None, max_length=255)
    subscription_date: Optional[date] = None
    subscription_status: Optional[SubscriptionStatus] = None
    subscription_end_date: Optional[date] = None
    payment_due_day: Optional[int] = Field(None, ge=1, le=31)
    payment_due_month: Optional[int] = Field(None, ge=1, le=12)
    last_payment_date: Optional[date] = None
    quotation_file: Optional[str] = None
    quotation_amount: QuotationAmount = 0.0

    @field_validator("company_name", "contact_name", "phone")
    @classmethod
    def strip_names(cls, value: Optional[str]) -> Optional[str]:
        return None if value is None else _strip_required(value)

    @field_validator("email")
    @classmethod
    def clean_email(cls, value: Optional[str]) -> Optional[str]:
        return _clean_email(value)


class RecordPaymentRequest(BaseModel):
    payment_date: Optional[date] = Field(None, description="Payment date (YYYY-MM-DD); defaults to today")


class ClientResponse(BaseModel):
    id: UUID
    company_name: str
    contact_name: str
    phone: str
    email: Optional[str] = None
    subscription_date: date
    subscription_status: str
    subscription_end_date: Optional[date] = None
    payment_due_day: int
    payment_due_month: Optional[int] = None
    last_payment_date: Optional[date] = None
    quotation_file: Optional[str] = None
    quotation_amount: Amount = 0.0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
