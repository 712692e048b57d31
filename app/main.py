# app/main.py
from dotenv import load_dotenv

load_dotenv()

import logging
import logging.config
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config.appconfig import settings

# Apply logging configuration
logging.config.dictConfig(settings.LOGGING_CONFIG)

# Import routers
from app.AIsystem.ai_client import AIServiceClient
from app.database.connection import build_engine, build_session_factory, init_models
from app.shared.error_handlers import register_error_handlers
from app.system_services.chat_routes import router as chat_router
from app.system_services.patient_routes import router as patient_router
from app.users.auth_routers import router as auth_router

# Import configurations
from config.aiconfig import ai_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    engine = build_engine(
        settings.DATABASE_URL,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        pool_recycle=settings.DB_POOL_RECYCLE,
        echo=settings.DB_ECHO,
    )
    if settings.AUTO_CREATE_TABLES:
        await init_models(engine)

    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)

    http_client = httpx.AsyncClient(headers={"Content-Type": "application/json"})
    app.state.ai_client = AIServiceClient.from_settings(http_client)

    logger.info("===============================================================================")
    logger.info(" 🚀 Starting Dental Assistant API")
    logger.info(f" ✅ Database: {engine.url.render_as_string(hide_password=True)}")
    logger.info(f" ✅ DB Pool Size: {settings.DB_POOL_SIZE}")
    logger.info(f" ✅ AI Service Enabled: {ai_settings.AI_SERVICE_ENABLED}")
    if ai_settings.AI_SERVICE_ENABLED:
        logger.info(f" ✅ AI Service URL: {ai_settings.AI_SERVICE_URL}")
        logger.info(f" ✅ AI Timeout: {ai_settings.AI_SERVICE_TIMEOUT}s")
    logger.info("===============================================================================")
    try:
        yield
    finally:
        # Shutdown
        await http_client.aclose()
        await engine.dispose()
        logger.info("👋 Shutting down")


app = FastAPI(
    title="Dental Assistant API",
    description="Patient records and per-patient AI assistant chat for dental practices",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

# Include routers with prefixes
app.include_router(auth_router, prefix="/api/auth", tags=["Authentication"])
app.include_router(patient_router, prefix="/api/patients", tags=["Patients"])
app.include_router(chat_router, prefix="/api/chat", tags=["Chat"])


@app.get("/health", tags=["Health"])
async def health():
    return {"status": "OK", "ai_service_enabled": ai_settings.AI_SERVICE_ENABLED}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=True)
