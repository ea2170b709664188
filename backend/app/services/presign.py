import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from app.core.config import Settings
from app.core.errors import AppError
from app.schemas.metadata import FileMetadata
from app.services.metadata import MetadataCodec
from app.services.object_store import ObjectStore

logger = logging.getLogger(__name__)


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class PresignedUrl:
    url: str
    expires_at: datetime


class PresignedUrlIssuer:
    """Turns object keys into time-bounded PUT and GET URLs.

    Nothing is recorded about issued URLs; the store enforces expiry through
    the signature itself.
    """

    def __init__(
        self,
        store: ObjectStore,
        bucket: str,
        prefix: str,
        upload_ttl: int,
        get_ttl: int,
        codec: MetadataCodec | None = None,
        clock: Callable[[], datetime] = now_utc,
    ) -> None:
        self.store = store
        self.bucket = bucket
        self.prefix = prefix
        self.upload_ttl = upload_ttl
        self.get_ttl = get_ttl
        self.codec = codec or MetadataCodec()
        self._clock = clock

    @classmethod
    def from_settings(
        cls, settings: Settings, store: ObjectStore, codec: MetadataCodec | None = None
    ) -> "PresignedUrlIssuer":
        return cls(
            store,
            bucket=settings.s3_bucket,
            prefix=settings.s3_prefix,
            upload_ttl=settings.presign_upload_ttl,
            get_ttl=settings.presign_get_ttl,
            codec=codec,
        )

    def storage_key(self, key: str) -> str:
        return f"{self.prefix}{key}"

    def issue_upload_url(
        self,
        key: str,
        content_type: str,
        metadata: FileMetadata | None = None,
        max_size: int | None = None,
    ) -> PresignedUrl:
        full_key = self.storage_key(key)
        headers = self.codec.encode(metadata) if metadata is not None else {}
        issued_at = self._clock()
        try:
            url = self.store.sign_put(
                self.bucket,
                full_key,
                content_type,
                headers,
                max_size,
                self.upload_ttl,
            )
        except Exception as exc:
            logger.error("Failed to generate presigned upload URL for %s: %s", full_key, exc)
            raise AppError.storage("Failed to generate presigned upload URL") from exc

        logger.info(
            "Generated presigned upload URL for %s (content_type=%s, expires_in=%ss)",
            full_key,
            content_type,
            self.upload_ttl,
        )
        return PresignedUrl(url=url, expires_at=issued_at + timedelta(seconds=self.upload_ttl))

    def issue_get_url(self, key: str) -> PresignedUrl:
        full_key = self.storage_key(key)
        issued_at = self._clock()
        try:
            url = self.store.sign_get(self.bucket, full_key, self.get_ttl)
        except Exception as exc:
            logger.error("Failed to generate presigned GET URL for %s: %s", full_key, exc)
            raise AppError.storage("Failed to generate presigned GET URL") from exc

        logger.info("Generated presigned GET URL for %s (expires_in=%ss)", full_key, self.get_ttl)
        return PresignedUrl(url=url, expires_at=issued_at + timedelta(seconds=self.get_ttl))
