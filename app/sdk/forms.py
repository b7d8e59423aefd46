"""Entry form: raw field values as typed by a user, turned into an API payload."""
from datetime import date
from typing import Any, Optional

from pydantic import BaseModel

from app.core.money import normalize_amount


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value.strip() if isinstance(value, str) else value


def _int_or_none(value: Any) -> Optional[int]:
    value = _blank_to_none(value)
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


class ClientEntryForm(BaseModel):
    """
    Values straight from an add/edit client form. Everything is optional and untyped
    on purpose; to_payload() is where they become API values. The server validates
    required fields and ranges.
    """
    company_name: Any = None
    contact_name: Any = None
    phone: Any = None
    email: Any = None
    subscription_date: Any = None
    subscription_status: Any = None
    payment_due_day: Any = None
    payment_due_month: Any = None
    last_payment_date: Any = None
    quotation_file: Any = None
    quotation_amount: Any = None

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "company_name": _blank_to_none(self.company_name),
            "contact_name": _blank_to_none(self.contact_name),
            "phone": _blank_to_none(self.phone),
            "email": _blank_to_none(self.email),
            "subscription_date": _blank_to_none(self.subscription_date) or date.today().isoformat(),
            "subscription_status": _blank_to_none(self.subscription_status),
            "payment_due_day": _int_or_none(self.payment_due_day),
            "payment_due_month": _int_or_none(self.payment_due_month),
            "last_payment_date": _blank_to_none(self.last_payment_date),
            "quotation_file": _blank_to_none(self.quotation_file),
            "quotation_amount": normalize_amount(self.quotation_amount),
        }
        # quotation_amount is always sent; other empty fields are left out
        return {k: v for k, v in payload.items() if v is not None or k == "quotation_amount"}
