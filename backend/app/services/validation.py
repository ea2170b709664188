from collections.abc import Iterable

from app.core.config import Settings
from app.core.errors import AppError

BYTES_PER_MB = 1024 * 1024


class UploadValidator:
    """Checks inbound upload requests against the configured limits."""

    def __init__(self, allowed_types: Iterable[str], max_size_bytes: int) -> None:
        self.allowed_types = list(allowed_types)
        self.max_size_bytes = max_size_bytes

    @classmethod
    def from_settings(cls, settings: Settings) -> "UploadValidator":
        return cls(settings.all_allowed_types, settings.max_file_size_bytes)

    def validate_content_type(self, content_type: str) -> None:
        if content_type not in self.allowed_types:
            raise AppError.validation(
                f"Content type {content_type} is not allowed. "
                f"Allowed types: {', '.join(self.allowed_types)}"
            )

    def validate_size(self, size: int | None) -> None:
        if size is not None and size > self.max_size_bytes:
            raise AppError.validation(
                f"File size {size} bytes exceeds maximum allowed size of "
                f"{self.max_size_bytes} bytes ({self.max_size_bytes // BYTES_PER_MB} MB)"
            )
