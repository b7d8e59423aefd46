from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.dashboard.schemas import DashboardResponse, UpcomingPaymentsResponse
from app.api.v1.dashboard.service import DashboardService
from app.core.deps import get_db

router = APIRouter()


@router.get(
    "/",
    response_model=DashboardResponse,
    status_code=status.HTTP_200_OK,
    summary="Get dashboard data",
    description="Summary statistics, client payments distribution and upcoming payments.",
    tags=["dashboard"],
)
async def get_dashboard(db: AsyncSession = Depends(get_db)):
    dashboard_service = DashboardService(db)
    return await dashboard_service.get_dashboard_data()


@router.get(
    "/upcoming-payments",
    response_model=UpcomingPaymentsResponse,
    status_code=status.HTTP_200_OK,
    summary="Upcoming payments",
    description="Active clients ordered by next due date: this month's remaining days first, then next month's.",
    tags=["dashboard"],
)
async def get_upcoming_payments(
    db: AsyncSession = Depends(get_db),
    limit: int = Query(6, ge=1, le=100),
):
    dashboard_service = DashboardService(db)
    upcoming = await dashboard_service.get_upcoming_payments(limit=limit)
    return UpcomingPaymentsResponse(upcoming_payments=upcoming)
