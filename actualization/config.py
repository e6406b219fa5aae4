"""
Configuration settings for the application.
"""

import logging
import os

from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Application settings loaded from environment variables."""

    # Environment
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")

    # Redis / fact stream settings
    REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379/0")
    FACTS_STREAM_KEY: str = os.getenv("FACTS_STREAM_KEY", "catalog:facts")
    FACTS_CONSUMER_GROUP: str = os.getenv(
        "FACTS_CONSUMER_GROUP",
        "actualization-workers",
    )
    DLQ_STREAM_KEY: str = os.getenv("DLQ_STREAM_KEY", "catalog:facts:dlq")
    BATCH_MAX_MESSAGES: int = int(os.getenv("BATCH_MAX_MESSAGES", "32"))
    BATCH_MAX_WAIT_MS: int = int(os.getenv("BATCH_MAX_WAIT_MS", "200"))
    WORKER_CONCURRENCY: int = int(os.getenv("WORKER_CONCURRENCY", "1"))
    FACTS_MAX_BATCH_SIZE: int = int(os.getenv("FACTS_MAX_BATCH_SIZE", "500"))

    # Recovery cache for facts that arrive before their item is known
    RECOVERY_CACHE_KEY_PREFIX: str = os.getenv(
        "RECOVERY_CACHE_KEY_PREFIX", "actualization:cache:"
    )
    RECOVERY_CACHE_TTL_SECONDS: int = int(
        os.getenv("RECOVERY_CACHE_TTL_SECONDS", str(60 * 60 * 24))
    )

    # Document storage
    DOCUMENT_KEY_PREFIX: str = os.getenv("DOCUMENT_KEY_PREFIX", "actualization:doc:")

    # Store used when a request does not name one
    DEFAULT_STORE_TIMEZONE: str = os.getenv("DEFAULT_STORE_TIMEZONE", "moscow")

    @property
    def is_production(self) -> bool:
        """
        Check if running in production environment.
        """
        return self.ENVIRONMENT.lower() == "production"

    def __init__(self):
        self.log_level = os.getenv("LOG_LEVEL", "INFO")
        logging.basicConfig(level=self.log_level)


# Create a global settings instance for import
settings = Settings()
