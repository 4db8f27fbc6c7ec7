"""Application configuration settings"""

import os
from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes", "on"}


class Config:
    TESTING = _env_flag("TESTING")
    DEBUG = _env_flag("DEBUG")

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_PATH = os.getenv("LOG_PATH", "")
    LOG_FORMAT = os.getenv(
        "LOG_FORMAT",
        "%(asctime)s %(levelname)s [%(correlation_id)s] %(name)s: %(message)s",
    )

    # Auth (tokens are issued by the auth service, only verified here)
    SERVICE_AUTH_SECRET = os.getenv("SERVICE_AUTH_SECRET", "")
    SERVICE_AUTH_ISSUER = os.getenv("SERVICE_AUTH_ISSUER", "chatline-auth")
    SERVICE_AUTH_AUDIENCE = os.getenv("SERVICE_AUTH_AUDIENCE", "chatline")

    # CORS
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:5173").split(",")

    # Message store: "prisma" (PostgreSQL) or "memory" (single process, dev/tests)
    STORE_BACKEND: str = os.getenv("STORE_BACKEND", "prisma").lower()
    USER_SEED_FILE: str = os.getenv("USER_SEED_FILE", "")

    # Postgresql Database settings
    DATABASE_URL: str = os.getenv("DATABASE_URL", "")
    MESSAGE_HISTORY_LIMIT: int = int(os.getenv("MESSAGE_HISTORY_LIMIT", "500"))

    # Redis settings (optional read-through cache for pair history)
    REDIS_ENABLED: bool = _env_flag("REDIS_ENABLED")
    REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379")
    REDIS_CACHE_TTL: int = int(os.getenv("REDIS_CACHE_TTL", "3600"))
    REDIS_CACHE_LIMIT: int = int(os.getenv("REDIS_CACHE_LIMIT", "50"))

    # Message limits
    MAX_MESSAGE_TEXT_CHARS: int = int(os.getenv("MAX_MESSAGE_TEXT_CHARS", "5000"))
    # Media arrives base64-encoded (~4/3 of the raw size)
    MAX_IMAGE_ENCODED_MB: float = float(os.getenv("MAX_IMAGE_ENCODED_MB", "16"))
    MAX_VIDEO_ENCODED_MB: float = float(os.getenv("MAX_VIDEO_ENCODED_MB", "35"))

    # Realtime
    CONNECTION_QUEUE_SIZE: int = int(os.getenv("CONNECTION_QUEUE_SIZE", "100"))

    # Client library
    CLIENT_BASE_URL: str = os.getenv("CLIENT_BASE_URL", "http://localhost:5001")
    CLIENT_WS_URL: str = os.getenv("CLIENT_WS_URL", "ws://localhost:5001/ws")
    CLIENT_REQUEST_TIMEOUT: float = float(os.getenv("CLIENT_REQUEST_TIMEOUT", "30"))
    CLIENT_MEDIA_TIMEOUT: float = float(os.getenv("CLIENT_MEDIA_TIMEOUT", "300"))
    CLIENT_LARGE_MEDIA_CHARS: int = int(
        os.getenv("CLIENT_LARGE_MEDIA_CHARS", "3000000")
    )  # ~2.2MB of base64
    CLIENT_RECONNECT_DELAYS: list[float] = [
        float(d) for d in os.getenv("CLIENT_RECONNECT_DELAYS", "1,2,5,10").split(",")
    ]


class DevelopmentConfig(Config):
    """Development configuration"""

    DEBUG = True


class TestingConfig(Config):
    """Testing configuration"""

    TESTING = True
    STORE_BACKEND = "memory"


class ProductionConfig(Config):
    """Production configuration"""

    pass


# Configuration dictionary
config = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
    "default": DevelopmentConfig,
}


def get_config(env=None):
    """Get configuration based on environment"""
    if env is None:
        env = os.getenv("APP_ENV", "development")
    return config.get(env, config["default"])
