# medicamp_api/config.py
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class MediCampSettings(BaseSettings):
    # Environment
    ENVIRONMENT: str = "development"

    # Security - JWT
    ACCESS_TOKEN_SECRET: str
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRE_DAYS: int = 7
    JWT_COOKIE_NAME: str = "token"

    # Database connections
    MONGODB_URI: str = "mongodb://localhost:27017/?replicaSet=rs0"
    DATABASE_NAME: str = "mediCampDB"
    # Multi-document transactions need a replica set or sharded cluster
    MONGODB_USE_TRANSACTIONS: bool = True
    MONGODB_CONNECT_RETRIES: int = 3

    # CORS settings
    ALLOWED_ORIGINS: str = "http://localhost:5173"
    CORS_ALLOW_CREDENTIALS: bool = True
    CORS_ALLOW_METHODS: str = "GET,POST,PUT,PATCH,DELETE,OPTIONS"
    CORS_ALLOW_HEADERS: str = "Authorization,Content-Type"

    # Stripe
    STRIPE_SECRET_KEY: str = ""
    STRIPE_API_VERSION: str = "2023-10-16"
    PAYMENT_CURRENCY: str = "usd"
    # Largest fee accepted for one charge, in minor units
    PAYMENT_MAX_CHARGE_MINOR_UNITS: int = 99_999_999

    # Listing defaults
    DEFAULT_PAGE_SIZE: int = 10
    MAX_PAGE_SIZE: int = 100
    POPULAR_CAMPS_LIMIT: int = 6

    # Server Configuration
    SERVICE_NAME: str = "medicamp-api"
    SERVICE_VERSION: str = "1.0.0"
    SERVICE_HOST: str = "0.0.0.0"
    SERVICE_PORT: int = 5000

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="allow")

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"


@lru_cache()
def get_settings() -> MediCampSettings:
    return MediCampSettings()
