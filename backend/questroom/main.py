# backend/questroom/main.py

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text

from .config import settings
from .database import SessionLocal
from .redis_client import redis_client
from .routers import chapters, prices, reservations, scenarios, time_slots
from .schemas.time_slots import BulkResponse
from .services.errors import BookingError, PartialBulkFailure

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Questroom Booking API")

app.include_router(scenarios.router)
app.include_router(chapters.router)
app.include_router(time_slots.router)
app.include_router(reservations.router)
app.include_router(prices.router)


# ===== Error mapping =====

@app.exception_handler(PartialBulkFailure)
def partial_bulk_failure_handler(request: Request, exc: PartialBulkFailure):
    logger.warning(f"{request.method} {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "detail": exc.message,
            "report": BulkResponse.from_report(exc.report).model_dump(mode="json", by_alias=True),
        },
    )


@app.exception_handler(BookingError)
def booking_error_handler(request: Request, exc: BookingError):
    logger.info(f"{request.method} {request.url.path} → {exc.status_code}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.exception_handler(Exception)
def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled exception on {request.method} {request.url.path}")
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


@app.get("/health")
def health():
    db = SessionLocal()
    try:
        database = db.execute(text("SELECT 1")).scalar() == 1
    finally:
        db.close()

    try:
        redis = bool(redis_client.ping())
    except Exception as e:
        logger.warning(f"Redis health check failed: {e}")
        redis = False

    return {"database": database, "redis": redis}
