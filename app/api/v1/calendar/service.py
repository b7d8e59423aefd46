from datetime import date
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.calendar.schemas import (
    CalendarDay,
    CalendarEvent,
    MonthCalendarResponse,
    UpcomingCalendarPayment,
    UpcomingCalendarResponse,
)
from app.core.money import normalize_amount
from app.core.payment_schedule import (
    days_in_month,
    days_until_due,
    due_date_in_month,
    is_active,
    is_due_within,
    next_due_date,
)
from app.models.client import Client
from app.models.enums import SubscriptionStatus


class CalendarService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def _active_clients(self) -> list[Client]:
        result = await self.db.execute(
            select(Client).where(Client.subscription_status == SubscriptionStatus.active.value)
        )
        return [c for c in result.scalars().all() if is_active(c)]

    async def get_month_calendar(self, year: int, month: int) -> MonthCalendarResponse:
        """
        Active clients grouped by due day. Clients whose due day does not exist
        in the month (e.g. 31 in April) are left out of that month.
        """
        by_day: dict[int, list[CalendarEvent]] = {}
        total_due = 0.0
        for client in await self._active_clients():
            day = client.payment_due_day
            if due_date_in_month(day, year, month, clamp=False) is None:
                continue
            amount = normalize_amount(client.quotation_amount)
            by_day.setdefault(day, []).append(
                CalendarEvent(client_id=client.id, company_name=client.company_name, day=day, amount=amount)
            )
            total_due += amount

        days = [
            CalendarDay(
                day=day,
                date=date(year, month, day),
                events=sorted(events, key=lambda e: e.company_name.lower()),
            )
            for day, events in sorted(by_day.items())
        ]
        # date.weekday(): Monday = 0; the calendar grid starts on Sunday
        first_weekday = (date(year, month, 1).weekday() + 1) % 7
        return MonthCalendarResponse(
            year=year,
            month=month,
            days_in_month=days_in_month(year, month),
            first_weekday=first_weekday,
            days=days,
            total_due=total_due,
            total_clients=sum(len(d.events) for d in days),
        )

    async def get_upcoming_payments(
        self,
        window_days: int,
        limit: int,
        today: Optional[date] = None,
    ) -> UpcomingCalendarResponse:
        """Active clients whose next due date is within window_days, soonest first."""
        today = today or date.today()
        payments = []
        for client in await self._active_clients():
            if not is_due_within(client, today, window_days):
                continue
            days_left = days_until_due(client.payment_due_day, today)
            payments.append(
                UpcomingCalendarPayment(
                    client_id=client.id,
                    company_name=client.company_name,
                    day=client.payment_due_day,
                    due_date=next_due_date(client.payment_due_day, today),
                    days_until_due=days_left,
                    amount=client.quotation_amount,
                )
            )
        payments.sort(key=lambda p: (p.days_until_due, p.company_name.lower()))
        return UpcomingCalendarResponse(window_days=window_days, payments=payments[:limit])
