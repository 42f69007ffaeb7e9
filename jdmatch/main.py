from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from jdmatch.middleware.error_handlers import ExceptionHandlerMiddleware, PerformanceMiddleware
from jdmatch.routers import match
from jdmatch.services.normalization import default_table
from jdmatch.utils.config import get_settings
from jdmatch.utils.logging_config import configure_for_environment, get_logger

# Configure logging first
settings = get_settings()
configure_for_environment(settings)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan context manager"""
    logger.info("JD match API starting up...")
    table = default_table()
    logger.info(f"Synonym table ready: {table.canonical_count} canonical skills")
    yield
    logger.info("JD match API shutting down...")


app = FastAPI(title="JD Match API", version="1.0.0", lifespan=lifespan)

# Exception handler should be the outermost middleware (added first, runs last-in)
app.add_middleware(PerformanceMiddleware, slow_request_threshold=settings.slow_request_threshold)
app.add_middleware(ExceptionHandlerMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
@app.head("/")
async def root():
    return {"message": "JD match API", "version": "1.0.0", "status": "ok"}


@app.get("/health")
@app.head("/health")
async def health_check():
    """Health check endpoint - handles both GET and HEAD requests"""
    return {"status": "healthy", "services": {"api": "healthy", "scoring": "healthy"}}


app.include_router(match.router, prefix="/api")

logger.info("JD match API initialized successfully")
