from pydantic import field_validator
from pydantic_settings import BaseSettings

from .errors import UnsupportedFormat
from .formats import ImageFormat


class Settings(BaseSettings):
    # Load env from .env file, variables prefixed with THUMBD_
    model_config = {"env_file": ".env", "env_prefix": "THUMBD_", "extra": "ignore"}

    # Bounding box for every generated thumbnail
    THUMB_WIDTH: int = 200
    THUMB_HEIGHT: int = 200

    # Storage locations
    RAW_DIR: str = "raw"
    THUMB_DIR: str = "thumbs"

    # Single output format served by this process
    THUMB_FORMAT: str = "png"

    LOG_LEVEL: str = "INFO"

    # Server (only used by `python -m thumbd`)
    HOST: str = "127.0.0.1"
    PORT: int = 8080

    @field_validator("THUMB_WIDTH", "THUMB_HEIGHT")
    @classmethod
    def _positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("bounding box dimensions must be positive")
        return value

    @field_validator("THUMB_FORMAT")
    @classmethod
    def _whitelisted(cls, value: str) -> str:
        try:
            return ImageFormat.from_extension(value).value
        except UnsupportedFormat as exc:
            raise ValueError(str(exc)) from exc

    @field_validator("RAW_DIR", "THUMB_DIR")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = (value or "").strip()
        if not value:
            raise ValueError("directory must not be empty")
        return value


def get_settings() -> Settings:
    return Settings()
