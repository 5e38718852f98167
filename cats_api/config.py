"""
Application Configuration
Uses Pydantic Settings for environment-based configuration
"""

from dotenv import load_dotenv
from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Application
    PROJECT_NAME: str = "Cats Catalog API"
    VERSION: str = "1.0.0"
    ENVIRONMENT: str = Field(default="development", pattern="^(development|staging|production)$")
    API_PREFIX: str = "/api"

    # CORS
    # Allow str because it can be a comma-separated string in .env
    CORS_ORIGINS: str | list[str] = Field(default=["*"])

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./cats.db"
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 10
    DB_ECHO: bool = False

    # Upstream image provider (TheCatAPI)
    CAT_API_BASE_URL: str = "https://api.thecatapi.com/v1/"
    CAT_API_KEY: SecretStr | None = None
    CAT_API_FETCH_LIMIT: int = Field(default=25, ge=1, le=100)
    CAT_API_TIMEOUT: float = 10.0

    # What ingestion does when an image download fails:
    # skip the item, keep the cat without image bytes, or abort the run
    IMAGE_FAILURE_POLICY: str = Field(
        default="skip",
        pattern="^(skip|store_without_image|abort)$",
    )

    # Pagination
    DEFAULT_PAGE_SIZE: int = 10
    MAX_PAGE_SIZE: int = 100

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = Field(default="console", pattern="^(console|json)$")

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: str | list[str]) -> list[str]:
        """Parse CORS origins from comma-separated string"""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",")]
        return v

    @field_validator("CAT_API_KEY", mode="before")
    @classmethod
    def blank_key_as_unset(cls, v: object) -> object:
        """CAT_API_KEY= in .env means no key"""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("CAT_API_BASE_URL")
    @classmethod
    def ensure_trailing_slash(cls, v: str) -> str:
        """Relative request paths are resolved against the base URL, so keep the trailing slash"""
        return v if v.endswith("/") else f"{v}/"


# Create global settings instance

load_dotenv()
settings = Settings()


class ImageFailurePolicy:
    """Image download failure policy constants"""

    SKIP = "skip"
    STORE_WITHOUT_IMAGE = "store_without_image"
    ABORT = "abort"
