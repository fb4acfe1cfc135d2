from pydantic_settings import BaseSettings
from pydantic import Field, ValidationError

"""
API CONFIGURATION
"""


#Class to load and read backend .env
class Settings(BaseSettings):

    APP_NAME: str = "Studio42 API"
    BASE_URL: str = "http://localhost:3000"

    DATABASE_URL: str = "sqlite:///./dev.db"

    JWT_SECRET_KEY: str = Field(..., min_length=1)
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7

    ADMIN_EMAIL: str = Field(..., min_length=1)
    ADMIN_PASSWORD: str = Field(..., min_length=1)

    CORS_ORIGINS: list[str] = ["http://localhost:3000"]

    LOG_LEVEL: str = "INFO"

    #Initial outbound email settings, copied into the database on first start
    SMTP_HOST: str | None = None
    SMTP_PORT: int | None = None
    SMTP_USER: str | None = None
    SMTP_PASSWORD: str | None = None
    SMTP_SECURE: bool = True
    SMTP_FROM_EMAIL: str | None = None
    SMTP_FROM_NAME: str = "Studio42"
    SMTP_ADMIN_EMAIL: str | None = None
    SMTP_TIMEOUT_SECONDS: float = 10.0

    class Config:
        env_file = ".env"
        case_sensitive = True


#Validate configuration once and fail fast with the names of missing options
def load_settings(**overrides) -> Settings:
    try:
        return Settings(**overrides)
    except ValidationError as e:
        missing = sorted(
            str(err["loc"][0])
            for err in e.errors()
            if err["type"] == "missing"
        )
        if missing:
            raise RuntimeError(
                f"Missing required configuration: {', '.join(missing)}"
            ) from e

        raise RuntimeError(f"Invalid configuration: {e}") from e


#Descriptions longer than this are cut on product listings
PRODUCT_DESCRIPTION_PREVIEW = 150

#Listing order for product status, available products first
PRODUCT_STATUS_ORDER = ("AVAILABLE", "COMING_SOON", "IN_DEVELOPMENT")

#Default and maximum page sizes for admin listings
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100

EMAIL_CONFIG_ID = "default_email_config"
