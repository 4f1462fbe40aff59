# medicamp_api/main.py
"""
MediCamp API
Camp catalog, participant registration, payments and analytics
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import get_settings
from .database.db import DatabaseConnection
from .errors import register_exception_handlers
from .router_config import setup_routers

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
logging.getLogger("pymongo").setLevel(logging.WARNING)

logger = logging.getLogger(__name__)

settings = get_settings()
allowed_origins = [origin.strip() for origin in settings.ALLOWED_ORIGINS.split(",") if origin.strip()]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the MongoDB connection on startup and close it on shutdown"""
    connection = DatabaseConnection(settings)
    logger.info("🚀 %s %s ready", settings.SERVICE_NAME, settings.SERVICE_VERSION)
    yield
    connection.close_connection()


app = FastAPI(
    title="MediCamp API",
    description="Medical camp management: camps, registrations, payments and participant analytics",
    version=settings.SERVICE_VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
    allow_methods=settings.CORS_ALLOW_METHODS.split(","),
    allow_headers=settings.CORS_ALLOW_HEADERS.split(","),
)

register_exception_handlers(app)
app = setup_routers(app)


@app.get("/")
async def root():
    return {"message": "MediCamp server is running"}


@app.get("/health")
async def health_check():
    """Simple health check endpoint"""
    return {"status": "healthy", "service": settings.SERVICE_NAME}


if __name__ == "__main__":
    uvicorn.run(app, host=settings.SERVICE_HOST, port=settings.SERVICE_PORT, log_level="info")
