from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.calendar.schemas import MonthCalendarResponse, UpcomingCalendarResponse
from app.api.v1.calendar.service import CalendarService
from app.core.config import settings
from app.core.deps import get_db

router = APIRouter()


@router.get(
    "/month",
    response_model=MonthCalendarResponse,
    summary="Payment calendar for a month",
    description="Active clients grouped by payment due day, with the month's total due and client count.",
    tags=["calendar"],
)
async def get_month_calendar(
    year: Optional[int] = Query(None, ge=1970, le=9999, description="Year; defaults to the current year"),
    month: Optional[int] = Query(None, ge=1, le=12, description="Month (1-12); defaults to the current month"),
    db: AsyncSession = Depends(get_db),
):
    today = date.today()
    service = CalendarService(db)
    return await service.get_month_calendar(year or today.year, month or today.month)


@router.get(
    "/upcoming",
    response_model=UpcomingCalendarResponse,
    summary="Upcoming payments",
    description="Active clients with a payment due within the next `days` days.",
    tags=["calendar"],
)
async def get_upcoming_payments(
    days: Optional[int] = Query(None, ge=0, le=62, description="Window in days; defaults to UPCOMING_PAYMENT_WINDOW_DAYS"),
    limit: int = Query(5, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    service = CalendarService(db)
    window = settings.UPCOMING_PAYMENT_WINDOW_DAYS if days is None else days
    return await service.get_upcoming_payments(window_days=window, limit=limit)
