from __future__ import annotations

from datetime import date
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from app.api.v1.clients.schemas import Amount


class DashboardSummaryStats(BaseModel):
    """Summary statistics for the dashboard."""
    total_clients: int
    active_clients: int
    ended_clients: int
    total_due: Amount = Field(..., description="Sum of quotation amounts of active clients")
    clients_with_payments_due: int = Field(..., description="Active clients with an amount above 0")
    average_payment: Amount
    overdue_count: int


class ChartPoint(BaseModel):
    """One bar of the client payments distribution chart."""
    x: str
    y: Amount


class UpcomingPayment(BaseModel):
    """Upcoming payment information."""
    client_id: UUID
    company_name: str
    payment_due_day: int
    due_date: date
    days_until_due: int
    amount: Amount
    last_payment_date: Optional[date] = None
    overdue: bool = False


class UpcomingPaymentsResponse(BaseModel):
    upcoming_payments: List[UpcomingPayment]


class DashboardResponse(BaseModel):
    """Complete dashboard data response."""
    summary_stats: DashboardSummaryStats
    chart_data: List[ChartPoint]
    upcoming_payments: List[UpcomingPayment]
