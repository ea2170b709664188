from functools import lru_cache
from typing import Literal

from pydantic import Field, HttpUrl, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_IMAGE_TYPES = "image/jpeg,image/png,image/gif,image/webp,image/svg+xml"
DEFAULT_VIDEO_TYPES = "video/mp4,video/webm,video/quicktime,video/x-msvideo"
DEFAULT_DOCUMENT_TYPES = (
    "application/pdf,application/msword,"
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document,text/plain"
)
DEFAULT_AUDIO_TYPES = "audio/mpeg,audio/wav,audio/ogg,audio/webm"


def _split_types(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        protected_namespaces=(),
    )

    env: Literal["local", "prod", "test"] = Field(default="local", alias="ENV")
    debug: bool = Field(default=False, alias="DEBUG")
    service_name: str = Field(default="presigned-upload-service", alias="SERVICE_NAME")

    jwt_secret_key: str = Field(
        default="secret-key-change-me",
        alias="JWT_SECRET_KEY",
    )
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(default=1440, alias="ACCESS_TOKEN_EXPIRE_MINUTES")

    s3_endpoint: HttpUrl | None = Field(default=None, alias="S3_ENDPOINT_URL")
    s3_access_key: str = Field(default="change-me", alias="S3_ACCESS_KEY")
    s3_secret_key: str = Field(default="change-me", alias="S3_SECRET_KEY")
    s3_region: str = Field(default="us-east-1", alias="S3_REGION")
    s3_bucket: str = Field(default="uploads", alias="S3_BUCKET_NAME")
    s3_prefix: str = Field(default="uploads/", alias="S3_PREFIX")

    presign_upload_ttl: int = Field(default=900, gt=0, alias="PRESIGN_EXPIRY_SECONDS")
    presign_get_ttl: int = Field(default=3600, gt=0, alias="PRESIGN_GET_EXPIRY_SECONDS")

    max_file_size_mb: int = Field(default=100, gt=0, alias="MAX_FILE_SIZE_MB")
    allowed_image_types: str = Field(default=DEFAULT_IMAGE_TYPES, alias="ALLOWED_IMAGE_TYPES")
    allowed_video_types: str = Field(default=DEFAULT_VIDEO_TYPES, alias="ALLOWED_VIDEO_TYPES")
    allowed_document_types: str = Field(
        default=DEFAULT_DOCUMENT_TYPES, alias="ALLOWED_DOCUMENT_TYPES"
    )
    allowed_audio_types: str = Field(default=DEFAULT_AUDIO_TYPES, alias="ALLOWED_AUDIO_TYPES")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_json: bool = Field(default=True, alias="LOG_JSON")

    @field_validator("s3_prefix")
    @classmethod
    def _normalize_prefix(cls, value: str) -> str:
        value = value.strip().lstrip("/")
        if value and not value.endswith("/"):
            value = f"{value}/"
        return value

    @property
    def max_file_size_bytes(self) -> int:
        return self.max_file_size_mb * 1024 * 1024

    @property
    def allowed_mime_types(self) -> dict[str, list[str]]:
        return {
            "images": _split_types(self.allowed_image_types),
            "videos": _split_types(self.allowed_video_types),
            "documents": _split_types(self.allowed_document_types),
            "audio": _split_types(self.allowed_audio_types),
        }

    @property
    def all_allowed_types(self) -> list[str]:
        combined: list[str] = []
        for types in self.allowed_mime_types.values():
            combined.extend(t for t in types if t not in combined)
        return combined


@lru_cache
def get_settings() -> Settings:
    return Settings()
