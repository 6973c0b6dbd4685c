import os
from typing import List
from dotenv import load_dotenv
from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings

# Load environment variables from the correct .env file
env_file = ".env.production" if os.getenv("APP_ENV") == "production" else ".env"
load_dotenv(env_file)

class Settings(BaseSettings):
    APP_ENV: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "info"

    # HTTP listener
    LISTEN_HOST: str = "localhost"
    LISTEN_PORT: int = 8080
    ALLOWED_ORIGINS: List[str] = ["*"]

    # Backing store
    REDIS_URL: str = "redis://localhost:6379/0"
    REDIS_SOCKET_TIMEOUT: float = 5.0
    LEADERBOARD_KEY: str = "leaderboard"

    # Rate limiting (use a redis:// URI to share limits across workers)
    RATE_LIMIT_DEFAULT: str = "60/minute"
    RATE_LIMIT_STORAGE_URI: str = "memory://"

    @field_validator("ALLOWED_ORIGINS", mode="before")
    def split_origins(cls, value):
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @model_validator(mode="after")
    def validate_production_redis(self):
        """Refuse plaintext, unauthenticated Redis connections in production."""
        if self.APP_ENV == "production":
            problems = []
            if not self.REDIS_URL.startswith("rediss://"):
                problems.append("REDIS_URL must use the rediss:// (TLS) scheme")
            if "@" not in self.REDIS_URL:
                problems.append("REDIS_URL must include credentials")
            if problems:
                raise ValueError(
                    f"Insecure backing store configuration for production: {'; '.join(problems)}"
                )
        return self

settings = Settings()
