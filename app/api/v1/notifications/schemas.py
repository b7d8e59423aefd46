from datetime import datetime
from typing import List
from uuid import UUID

from pydantic import BaseModel, Field


class ReminderResponse(BaseModel):
    """A recorded payment reminder, ready to show as a desktop/browser notification."""
    id: UUID
    reminder_type: str
    scope_key: str = Field(..., description="Use as the notification tag to avoid showing it twice")
    client_id: UUID
    title: str
    body: str
    emailed: bool
    sent_at: datetime

    class Config:
        from_attributes = True


class ReminderListResponse(BaseModel):
    reminders: List[ReminderResponse]


class ReminderRunResponse(BaseModel):
    """Result of a reminder pass."""
    due_tomorrow_count: int = Field(..., description="New due-tomorrow reminders recorded")
    overdue_count: int = Field(..., description="New overdue reminders recorded")
    error_count: int = Field(..., description="Clients that failed processing")
