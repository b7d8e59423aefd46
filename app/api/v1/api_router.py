from fastapi import APIRouter

from app.api.v1.health import router as health_router
from app.api.v1.clients.router import router as clients_router
from app.api.v1.uploads.router import router as uploads_router
from app.api.v1.calendar.router import router as calendar_router
from app.api.v1.dashboard.router import router as dashboard_router
from app.api.v1.notifications.router import router as notifications_router

api_router = APIRouter()
api_router.include_router(health_router, prefix="/health", tags=["health"])
api_router.include_router(clients_router, prefix="/clients")  # Tags are defined in the router itself
api_router.include_router(uploads_router, prefix="/uploads")
api_router.include_router(calendar_router, prefix="/calendar")
api_router.include_router(dashboard_router, prefix="/dashboard")
api_router.include_router(notifications_router, prefix="/notifications")
