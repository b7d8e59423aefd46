from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.notifications.schemas import (
    ReminderListResponse,
    ReminderResponse,
    ReminderRunResponse,
)
from app.api.v1.notifications.service import get_recent_reminders
from app.core.deps import get_db, get_session_maker
from app.cron.payment_reminders import check_and_send_payment_reminders

router = APIRouter()


@router.get(
    "/",
    response_model=ReminderListResponse,
    status_code=status.HTTP_200_OK,
    summary="Recent payment reminders",
    description="Reminders recorded by the payment reminder cron, newest first.",
    tags=["notifications"],
)
async def list_reminders(
    since: Optional[datetime] = Query(None, description="Only reminders sent after this time"),
    limit: int = Query(50, ge=1, le=500),
    db: AsyncSession = Depends(get_db),
):
    reminders = await get_recent_reminders(db, since=since, limit=limit)
    return ReminderListResponse(reminders=[ReminderResponse.model_validate(r) for r in reminders])


@router.post(
    "/run",
    response_model=ReminderRunResponse,
    status_code=status.HTTP_200_OK,
    summary="Run payment reminders now",
    description="Check all active clients and record due-tomorrow and overdue reminders immediately.",
    tags=["notifications"],
)
async def run_reminders(session_maker=Depends(get_session_maker)):
    outcome = await check_and_send_payment_reminders(session_maker=session_maker)
    return ReminderRunResponse(
        due_tomorrow_count=outcome.due_tomorrow,
        overdue_count=outcome.overdue,
        error_count=outcome.errors,
    )
