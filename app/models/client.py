import uuid
from datetime import date, datetime

from sqlalchemy import CheckConstraint, Column, Date, DateTime, Integer, String, Uuid
from sqlalchemy.orm import validates

from app.core.database import Base
from app.core.money import normalize_amount
from app.models.enums import SubscriptionStatus
from app.models.types import MonetaryAmount


def _current_month() -> int:
    return date.today().month


class Client(Base):
    __tablename__ = "clients"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    company_name = Column(String(255), nullable=False, index=True)
    contact_name = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=False)
    email = Column(String(255), nullable=True)
    subscription_date = Column(Date, nullable=False)
    subscription_status = Column(String(20), default=SubscriptionStatus.active.value, nullable=False)
    subscription_end_date = Column(Date, nullable=True)
    payment_due_day = Column(Integer, nullable=False)  # 1-31, billed monthly on this day
    payment_due_month = Column(Integer, nullable=True, default=_current_month)  # 1-12
    last_payment_date = Column(Date, nullable=True)
    quotation_file = Column(String(1024), nullable=True)
    quotation_amount = Column(MonetaryAmount, nullable=False, default=0.0, server_default="0")
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        CheckConstraint("quotation_amount >= 0", name="ck_clients_quotation_amount_non_negative"),
        CheckConstraint("payment_due_day BETWEEN 1 AND 31", name="ck_clients_payment_due_day"),
        CheckConstraint(
            "payment_due_month IS NULL OR payment_due_month BETWEEN 1 AND 12",
            name="ck_clients_payment_due_month",
        ),
    )

    @validates("quotation_amount")
    def _normalize_quotation_amount(self, key, value):
        return normalize_amount(value)

    @property
    def is_active(self) -> bool:
        return self.subscription_status == SubscriptionStatus.active.value
