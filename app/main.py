import asyncio
import logging
from pathlib import Path

from starlette.middleware.base import BaseHTTPMiddleware

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from fastapi.responses import FileResponse

from app.api.v1.api_router import api_router
from app.core.config import settings
from app.core.error_handlers import register_exception_handlers
from app.core.startup import ensure_tables, ensure_upload_dir

logging.basicConfig(level=settings.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

# Built admin UI, when present
STATIC_DIR = Path(__file__).resolve().parent / "static"
NO_STORE = "no-store, max-age=0"

app = FastAPI(
    title="Subscription Desk API",
    description="Client subscription tracking: clients, payment due dates, calendar, reminders and exports",
    version="1.0.0",
    openapi_url="/openapi.json",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


async def no_store_pages(request: Request, call_next):
    """
    Pages, assets and uploaded quotations are never cached, so an edited client
    shows its current amount and file. Unknown non-API GETs fall back to index.html.
    """
    response = await call_next(request)
    if request.url.path.startswith("/api"):
        return response
    if response.status_code == 404 and request.method == "GET":
        index_path = STATIC_DIR / "index.html"
        if index_path.is_file():
            response = FileResponse(str(index_path))
    response.headers["Cache-Control"] = NO_STORE
    return response


app.add_middleware(BaseHTTPMiddleware, dispatch=no_store_pages)
register_exception_handlers(app)

app.include_router(api_router, prefix="/api/v1")

# Local quotation uploads are served back from the same prefix save_quotation_file() returns
if not settings.S3_BUCKET_NAME:
    ensure_upload_dir()
    app.mount(
        settings.UPLOAD_URL_PREFIX,
        StaticFiles(directory=settings.UPLOAD_DIR, check_dir=False),
        name="uploads",
    )

# Mounted last so /api and the upload prefix take precedence
if STATIC_DIR.is_dir():
    app.mount("/", StaticFiles(directory=str(STATIC_DIR), html=True), name="static")


@app.on_event("startup")
async def startup_event():
    await ensure_tables()
    if not settings.CRON_PAYMENT_REMINDER_ENABLED:
        logger.info("Payment reminder cron disabled")
        return
    from app.core.cron_runner import run_payment_reminder_cron_loop
    app.state.payment_reminder_cron_task = asyncio.create_task(run_payment_reminder_cron_loop())


@app.on_event("shutdown")
async def shutdown_event():
    task = getattr(app.state, "payment_reminder_cron_task", None)
    if task is None or task.done():
        return
    task.cancel()
    try:
        await task
    except asyncio.CancelledError:
        pass
