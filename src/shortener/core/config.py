from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache
from redis import Redis
import logging
import time


class Settings(BaseSettings):
    """
    Application settings with environment variable support.

    Settings can be overridden by environment variables or .env file.
    """

    DATABASE_URL: str = "sqlite:///./shortener.db"

    REDIS_URL: str = "redis://localhost:6379/0"
    CACHE_ENABLED: bool = True
    CACHE_TTL_SECONDS: int = 3600
    REDIS_RETRY_ATTEMPTS: int = 3
    REDIS_RETRY_DELAY: int = 1

    SECRET_KEY: str = "your-secret-key-here"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    BCRYPT_ROUNDS: int = 12

    BASE_URL: str = "http://localhost:8000"
    SHORT_CODE_LENGTH: int = 6
    SHORT_CODE_MAX_ATTEMPTS: int = 10

    # Answer documentation/tooling probes with JSON instead of a redirect
    REDIRECT_PROBE_DETECTION: bool = True

    ALLOWED_ORIGINS: str = "http://localhost:8000,http://localhost:3000"
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def allowed_origins(self) -> list[str]:
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",") if origin.strip()]


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to avoid loading .env file multiple times.
    """
    return Settings()


settings = get_settings()

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("shortener")


@lru_cache()
def get_redis() -> Redis:
    """
    Get Redis client or dummy implementation if unavailable.

    The connection is attempted once per process. When caching is disabled
    or Redis cannot be reached, a no-op client with the same interface is
    returned so callers never have to branch on cache availability.
    """
    if not settings.CACHE_ENABLED:
        return DummyRedis()

    retry_attempts = settings.REDIS_RETRY_ATTEMPTS
    retry_delay = settings.REDIS_RETRY_DELAY

    for attempt in range(retry_attempts):
        try:
            redis_client = Redis.from_url(settings.REDIS_URL, decode_responses=True)
            redis_client.ping()
            return redis_client
        except Exception as e:
            if attempt < retry_attempts - 1:
                logger.warning(f"Redis connection attempt {attempt+1} failed: {e}. Retrying in {retry_delay}s...")
                time.sleep(retry_delay)
            else:
                logger.error(f"Redis connection failed after {retry_attempts} attempts: {e}")
    return DummyRedis()


class DummyRedis:
    """
    A dummy Redis client for testing and development.

    Implements the subset of the Redis interface the services use but
    stores nothing.
    """

    def setex(self, *args, **kwargs):
        logger.debug("DummyRedis: setex called")

    def get(self, *args, **kwargs):
        logger.debug("DummyRedis: get called")
        return None

    def delete(self, *args, **kwargs):
        logger.debug("DummyRedis: delete called")

    def ping(self, *args, **kwargs):
        return True
