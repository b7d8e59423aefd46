"""Log of sent payment reminders for duplicate prevention and for the notifications feed."""
import uuid
from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, String, Uuid, UniqueConstraint

from app.core.database import Base


class PaymentReminderLog(Base):
    """
    One row per reminder sent.
    scope_key: "client:{client_id}:due:{YYYY-MM-DD}", unique per reminder_type.
    """
    __tablename__ = "payment_reminder_logs"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    reminder_type = Column(String(50), nullable=False)  # due_tomorrow, overdue
    scope_key = Column(String(255), nullable=False, index=True)
    client_id = Column(Uuid(as_uuid=True), ForeignKey("clients.id", ondelete="CASCADE"), nullable=False)
    title = Column(String(255), nullable=False)
    body = Column(String(1000), nullable=False)
    emailed = Column(Boolean, nullable=False, default=False)
    sent_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (UniqueConstraint("reminder_type", "scope_key", name="uq_reminder_type_scope_key"),)
