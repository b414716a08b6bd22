"""
Hospital Bed Tracker API
Bed availability by category, patient admission/checkout, and nearest-hospital lookup.
"""
import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from .core.config import settings
from .core.errors import BedTrackerError, InternalError
from .core.request_log_middleware import RequestLogMiddleware
from .models.base import Base, engine
from . import models  # noqa: F401  Ensure all tables are registered
from .api import beds, patients, hospitals
from .seed import seed_bed_categories

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

# Create all database tables
# NOTE: In production, use Alembic migrations instead of create_all()
Base.metadata.create_all(bind=engine)

# Only creates missing categories; resetting counts is an explicit operator task
if settings.SEED_ON_STARTUP:
    seed_bed_categories()

app = FastAPI(
    title="Hospital Bed Tracker API",
    description=(
        "Bed availability by category, patient admission and checkout, "
        "and nearest-hospital lookup for emergencies."
    ),
    version=settings.VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(RequestLogMiddleware)

app.include_router(beds.router, prefix="/api")
app.include_router(patients.router, prefix="/api")
app.include_router(hospitals.router, prefix="/api")


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed input is a plain 400 across the API."""
    errors = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path"))
        errors.append(f"{loc}: {err['msg']}" if loc else err["msg"])
    return JSONResponse(status_code=400, content={"detail": "; ".join(errors) or "Invalid request"})


@app.exception_handler(BedTrackerError)
async def domain_error_handler(request: Request, exc: BedTrackerError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.exception_handler(SQLAlchemyError)
async def storage_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Storage failure on %s %s", request.method, request.url.path)
    return await domain_error_handler(request, InternalError("Internal server error"))


@app.get("/health")
def health_check():
    return {"status": "healthy", "service": settings.APP_NAME, "version": settings.VERSION}
