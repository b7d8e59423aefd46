from __future__ import annotations

from datetime import date as date_type
from typing import List
from uuid import UUID

from pydantic import BaseModel, Field

from app.api.v1.clients.schemas import Amount


class CalendarEvent(BaseModel):
    """A client payment falling on a calendar day."""
    client_id: UUID
    company_name: str
    day: int
    amount: Amount


class CalendarDay(BaseModel):
    day: int
    date: date_type
    events: List[CalendarEvent] = Field(default_factory=list)


class MonthCalendarResponse(BaseModel):
    """Payments due in a month, grouped by day."""
    year: int
    month: int
    days_in_month: int
    first_weekday: int = Field(..., description="Weekday of the 1st, 0 = Sunday .. 6 = Saturday")
    days: List[CalendarDay] = Field(default_factory=list, description="Only days with at least one payment")
    total_due: Amount
    total_clients: int


class UpcomingCalendarPayment(BaseModel):
    client_id: UUID
    company_name: str
    day: int
    due_date: date_type
    days_until_due: int
    amount: Amount


class UpcomingCalendarResponse(BaseModel):
    window_days: int
    payments: List[UpcomingCalendarPayment] = Field(default_factory=list)
