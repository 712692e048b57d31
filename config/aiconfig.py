# config/aiconfig.py
"""
AI Service Configuration
Controls the external text-generation service used by the chat endpoints
"""
from pydantic_settings import BaseSettings


class AISettings(BaseSettings):
    """Configuration for the external AI reply service"""

    # When disabled, chat replies use the canned greeting and no request is made
    AI_SERVICE_ENABLED: bool = False
    AI_SERVICE_URL: str = "http://localhost:8000"
    AI_SERVICE_TIMEOUT: float = 30.0  # Seconds

    class Config:
        env_file = ".env"
        extra = "ignore"


ai_settings = AISettings()
