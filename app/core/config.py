"""
Configuration settings for the Fantasy Logo Studio application.
"""
from typing import List, Optional
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    """
    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "Fantasy Logo Studio"

    # Logging
    LOG_DIR: str = "logs"
    LOG_LEVEL: str = "INFO"

    # CORS
    CORS_ORIGINS: List[str] = ["*"]

    # Image generation endpoint (Pollinations-style GET locator)
    IMAGE_GENERATION_URL: str = "https://image.pollinations.ai/prompt"
    IMAGE_SIZE: int = 1024
    GENERATION_TIMEOUT: float = 120.0

    # Remote image fetch used by post-processing
    IMAGE_FETCH_TIMEOUT: float = 60.0

    # League import endpoint (external service, returns {league, teams})
    LEAGUE_IMPORT_URL: Optional[str] = None
    LEAGUE_IMPORT_TIMEOUT: float = 30.0

    # Batch generation tuning
    BATCH_MAX_CONCURRENCY: int = 2
    BATCH_MAX_ATTEMPTS: int = 3
    BATCH_RETRY_DELAY: float = 1.5

    # Post-processing
    VECTORIZE_BY_DEFAULT: bool = True

    # Where saved logos land
    EXPORT_DIR: str = "exports"

    model_config = {
        "env_file": ".env",
        "case_sensitive": True,
        "extra": "ignore"
    }

settings = Settings()
