# feria/main.py
from contextlib import asynccontextmanager
import logging
import time

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from feria.core.config import get_settings
from feria.core.errors import AppError, InternalError
from feria.database import create_db_and_tables

# Import models so SQLModel metadata is populated before create_all()
from feria.models import company as _company_models  # noqa: F401
from feria.models import design as _design_models  # noqa: F401
from feria.models import offer as _offer_models  # noqa: F401
from feria.models import user as _user_models  # noqa: F401

# Routers
from feria.routers.auth import router as auth_router
from feria.routers.design import router as design_router
from feria.routers.files import router as files_router
from feria.routers.information import router as information_router
from feria.routers.offers import router as offers_router
from feria.routers.users import router as users_router
from feria.routers.videos import router as videos_router

settings = get_settings()

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger("feria")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup:
      - Verify DB connectivity and create tables.
    """
    logger.info("Startup: connecting to the database...")
    try:
        create_db_and_tables()
        logger.info("Startup: DB connection OK, tables verified.")
    except Exception as e:
        logger.error(f"Startup: DB connection FAILED: {e}")
        raise
    yield


app = FastAPI(
    title=settings.PROJECT_NAME,
    version="0.1.0",
    lifespan=lifespan,
)


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log every request with its status and latency; hide unhandled errors."""
    start = time.perf_counter()
    try:
        response = await call_next(request)
    except Exception:
        logger.exception("error handling %s %s", request.method, request.url.path)
        error = InternalError("internal_server_error", "Server error occurred")
        return JSONResponse(status_code=error.status_code, content=error.to_body())
    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info(
        "%s %s -> %s (%.1f ms)",
        request.method,
        request.url.path,
        response.status_code,
        elapsed_ms,
    )
    return response


# --- Error rendering ---


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_body(), headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    fields = [".".join(str(p) for p in err["loc"][1:]) for err in exc.errors()]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": "invalid_request",
            "message": f"Invalid or missing fields: {', '.join(fields)}",
        },
    )


app.include_router(auth_router, prefix=settings.API_PREFIX)
app.include_router(users_router, prefix=settings.API_PREFIX)
app.include_router(design_router, prefix=settings.API_PREFIX)
app.include_router(files_router, prefix=settings.API_PREFIX)
app.include_router(information_router, prefix=settings.API_PREFIX)
app.include_router(offers_router, prefix=settings.API_PREFIX)
app.include_router(videos_router, prefix=settings.API_PREFIX)


@app.get("/")
def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "feria-backend"}
