# bookcal/main.py
from __future__ import annotations

# Load .env early so settings and os.getenv agree
from dotenv import load_dotenv
load_dotenv()

import sqlalchemy as sa

from bookcal.core.config import settings
from bookcal.core.logging import setup_logging, LoggingMiddleware, get_logger
from bookcal.core.errors import InvalidViewError, NotFoundError, log_error

setup_logging(
    debug=settings.is_development,
    max_log_length=settings.MAX_LOG_LENGTH,
    level=settings.LOG_LEVEL,
)
logger = get_logger(__name__)

from fastapi import FastAPI, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from bookcal.db.base import init_db
from bookcal.db.session import AsyncSessionLocal, get_session
from bookcal.crud.directory import seed_directory

# Routers
from bookcal.api.routes.appointments import router as appointments_router
from bookcal.api.routes.calendar import router as calendar_router
from bookcal.api.routes.directory import router as directory_router

app = FastAPI(title="Bookcal", description="Appointment calendar with staff conflict detection")

app.middleware("http")(
    LoggingMiddleware(
        log_requests=settings.LOG_REQUESTS or settings.is_development,
        log_responses=settings.LOG_RESPONSES or settings.is_development,
        slow_threshold=settings.SLOW_REQUEST_THRESHOLD,
    )
)


# -------- Health / readiness (public) --------
@app.get("/healthz", include_in_schema=False)
async def healthz():
    return {"ok": True}


@app.get("/readyz", include_in_schema=False)
async def readyz(db: AsyncSession = Depends(get_session)):
    await db.execute(sa.text("SELECT 1"))
    return {"db": "ok"}


# -------- Error mapping --------
@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    log_error(exc, {"endpoint": request.url.path})
    return JSONResponse({"detail": str(exc)}, status_code=404)


@app.exception_handler(InvalidViewError)
async def invalid_view_handler(request: Request, exc: InvalidViewError):
    log_error(exc, {"endpoint": request.url.path})
    return JSONResponse({"detail": str(exc)}, status_code=400)


# -------- Include routers --------
app.include_router(appointments_router)
app.include_router(calendar_router)
app.include_router(directory_router)


# -------- Application startup --------
@app.on_event("startup")
async def startup_event():
    """Create tables and seed the demo directory."""
    logger.info("startup", env=settings.APP_ENV, locale=settings.LOCALE,
                week_start_day=settings.WEEK_START_DAY)
    await init_db()
    if settings.SEED_DIRECTORY:
        async with AsyncSessionLocal() as db:
            await seed_directory(db)
