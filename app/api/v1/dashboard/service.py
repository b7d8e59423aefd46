import logging
from datetime import date
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.dashboard.schemas import (
    ChartPoint,
    DashboardResponse,
    DashboardSummaryStats,
    UpcomingPayment,
)
from app.core.money import normalize_amount
from app.core.payment_schedule import (
    days_until_due,
    is_active,
    is_overdue,
    next_due_date,
    upcoming_sort_key,
)
from app.models.client import Client


class DashboardService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.logger = logging.getLogger(__name__)

    async def _all_clients(self) -> List[Client]:
        result = await self.db.execute(select(Client).order_by(Client.created_at.desc()))
        return list(result.scalars().all())

    async def get_dashboard_data(self, today: Optional[date] = None) -> DashboardResponse:
        """Summary stats, payment distribution chart and upcoming payments in one call."""
        today = today or date.today()
        clients = await self._all_clients()
        self.logger.debug("Dashboard: %s clients as of %s", len(clients), today)
        return DashboardResponse(
            summary_stats=self.summarize(clients, today),
            chart_data=self.chart_data(clients),
            upcoming_payments=self.upcoming_payments(clients, today, limit=6),
        )

    async def get_upcoming_payments(self, limit: int = 6, today: Optional[date] = None) -> List[UpcomingPayment]:
        clients = await self._all_clients()
        return self.upcoming_payments(clients, today or date.today(), limit=limit)

    @staticmethod
    def summarize(clients: List[Client], today: date) -> DashboardSummaryStats:
        active = [c for c in clients if is_active(c)]
        amounts = [normalize_amount(c.quotation_amount) for c in active]
        total_due = sum(amounts)
        with_due = [a for a in amounts if a > 0]
        return DashboardSummaryStats(
            total_clients=len(clients),
            active_clients=len(active),
            ended_clients=len(clients) - len(active),
            total_due=total_due,
            clients_with_payments_due=len(with_due),
            average_payment=total_due / len(with_due) if with_due else 0.0,
            overdue_count=sum(1 for c in active if is_overdue(c, today)),
        )

    @staticmethod
    def chart_data(clients: List[Client]) -> List[ChartPoint]:
        """Amount per active client with something to pay, largest first."""
        points = [
            ChartPoint(x=c.company_name, y=c.quotation_amount)
            for c in clients
            if is_active(c) and normalize_amount(c.quotation_amount) > 0
        ]
        points.sort(key=lambda p: p.y, reverse=True)
        return points

    @staticmethod
    def upcoming_payments(clients: List[Client], today: date, limit: int) -> List[UpcomingPayment]:
        active = sorted((c for c in clients if is_active(c)), key=lambda c: upcoming_sort_key(c, today))
        return [
            UpcomingPayment(
                client_id=c.id,
                company_name=c.company_name,
                payment_due_day=c.payment_due_day,
                due_date=next_due_date(c.payment_due_day, today),
                days_until_due=days_until_due(c.payment_due_day, today),
                amount=c.quotation_amount,
                last_payment_date=c.last_payment_date,
                overdue=is_overdue(c, today),
            )
            for c in active[:limit]
        ]
