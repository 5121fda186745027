"""Main FastAPI application."""
import uuid
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import inspect

from snackdash.core.config import settings
from snackdash.core.logging import setup_logging, get_logger, request_id_var
from snackdash.core.database import engine
from snackdash.core.exceptions import SnackDashError, Transient
from snackdash.api.v1 import router as v1_router
from snackdash.services.auth import master_secret_hash


# Setup logging
setup_logging(settings.DEBUG)
logger = get_logger(__name__)

REQUIRED_TABLES = ["tenants", "products", "orders"]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    logger.info(f"Starting {settings.APP_NAME}")
    logger.info(f"Debug mode: {settings.DEBUG}")

    # Fail fast on a missing master secret instead of at first login
    master_secret_hash()

    try:
        async with engine.connect() as conn:
            existing = await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names())
        missing = [t for t in REQUIRED_TABLES if t not in existing]
        if missing:
            logger.error(f"Database is missing tables: {missing}. Run `alembic upgrade head`.")
        else:
            logger.info("Database schema check passed.")
    except Exception as e:
        # Not raising here to prevent boot-loop if DB is briefly unreachable
        logger.error(f"Schema check failed: {e}")

    yield
    logger.info(f"Shutting down {settings.APP_NAME}")
    await engine.dispose()


# Create FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    description="Multi-tenant digital menu and ordering API",
    version="1.0.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def request_context(request: Request, call_next):
    """Tag every log line of a request with one correlation id."""
    request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
    token = request_id_var.set(request_id)
    try:
        response = await call_next(request)
    finally:
        request_id_var.reset(token)
    response.headers["X-Request-ID"] = request_id
    return response


# Include API router
app.include_router(v1_router, prefix="/api")


@app.exception_handler(SnackDashError)
async def domain_exception_handler(request: Request, exc: SnackDashError):
    """Translate domain errors into HTTP responses."""
    content = {"detail": exc.detail, "error": type(exc).__name__}
    if exc.field:
        content["field"] = exc.field
    headers = {"Retry-After": "2"} if isinstance(exc, Transient) else None
    if exc.status_code == 401:
        headers = {"WWW-Authenticate": "Bearer"}
    if exc.status_code >= 500:
        logger.warning(f"{type(exc).__name__} on {request.method} {request.url.path}")
    return JSONResponse(status_code=exc.status_code, content=content, headers=headers)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Log validation errors for debugging 422s."""
    logger.info(f"Request validation error on {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=422,
        content={"detail": jsonable_errors(exc), "error": "ValidationError"},
    )


def jsonable_errors(exc: RequestValidationError) -> list:
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]


@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": settings.APP_NAME}


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "service": settings.APP_NAME,
        "version": "1.0.0",
        "docs": "/api/docs",
    }
