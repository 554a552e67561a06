import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from leave_api.core.config import settings
from leave_api.core.database import create_tables
from leave_api.core.dependencies import get_certificate_storage
from leave_api.core.exceptions import register_exception_handlers
from leave_api.core.logging_config import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    # Startup: make sure certificates have somewhere to go
    get_certificate_storage().ensure_directory()
    if settings.CREATE_TABLES_ON_STARTUP:
        import leave_api.models  # noqa: F401
        await create_tables()
        logger.info("Database tables ensured")
    logger.info("%s started", settings.APP_NAME)
    yield


app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# ── Routers ───────────────────────────────────────────────────────────────────
from leave_api.api.leave import router as leave_router  # noqa: E402
from leave_api.api.certificates import router as certificates_router  # noqa: E402

app.include_router(leave_router, prefix="/api")
app.include_router(certificates_router, prefix="/api")


@app.get("/health")
async def health_check():
    return {"status": "healthy", "service": settings.APP_NAME}
