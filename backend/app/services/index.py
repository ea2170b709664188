import logging
from dataclasses import dataclass, field
from datetime import datetime

from app.core.config import Settings
from app.core.errors import AppError
from app.schemas.metadata import FileMetadata
from app.services.metadata import MetadataCodec
from app.services.object_store import ListedObject, ObjectStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ObjectInfo:
    exists: bool
    content_type: str | None = None
    size: int | None = None
    metadata: FileMetadata | None = None
    last_modified: datetime | None = None


@dataclass(frozen=True)
class ObjectListing:
    files: list[ListedObject] = field(default_factory=list)
    next_token: str | None = None
    truncated: bool = False


class ObjectIndex:
    """Existence checks, deletes and listings within the service prefix.

    Keys passed in and handed back are relative to the prefix; the prefix is
    only ever visible to the store.
    """

    def __init__(
        self,
        store: ObjectStore,
        bucket: str,
        prefix: str,
        codec: MetadataCodec | None = None,
    ) -> None:
        self.store = store
        self.bucket = bucket
        self.prefix = prefix
        self.codec = codec or MetadataCodec()

    @classmethod
    def from_settings(
        cls, settings: Settings, store: ObjectStore, codec: MetadataCodec | None = None
    ) -> "ObjectIndex":
        return cls(store, bucket=settings.s3_bucket, prefix=settings.s3_prefix, codec=codec)

    def storage_key(self, key: str) -> str:
        return f"{self.prefix}{key}"

    def relative_key(self, storage_key: str) -> str:
        return storage_key.removeprefix(self.prefix) if self.prefix else storage_key

    async def exists(self, key: str, decode_metadata: bool = True) -> ObjectInfo:
        full_key = self.storage_key(key)
        try:
            head = await self.store.head(self.bucket, full_key)
        except Exception as exc:
            logger.error("Failed to get metadata for %s: %s", full_key, exc)
            raise AppError.storage("Failed to get file metadata") from exc

        if head is None:
            return ObjectInfo(exists=False)

        metadata = None
        if decode_metadata and self.codec.has_schema_fields(head.metadata):
            metadata = self.codec.decode(head.metadata)
        return ObjectInfo(
            exists=True,
            content_type=head.content_type,
            size=head.size,
            metadata=metadata,
            last_modified=head.last_modified,
        )

    async def delete(self, key: str) -> None:
        full_key = self.storage_key(key)
        try:
            await self.store.delete(self.bucket, full_key)
        except Exception as exc:
            logger.error("Failed to delete %s: %s", full_key, exc)
            raise AppError.storage("Failed to delete file") from exc
        logger.info("Deleted %s from bucket %s", full_key, self.bucket)

    async def list(
        self,
        prefix: str | None,
        max_keys: int,
        continuation_token: str | None = None,
    ) -> ObjectListing:
        search_prefix = self.storage_key(prefix or "")
        try:
            page = await self.store.list_objects(
                self.bucket, search_prefix, max_keys, continuation_token
            )
        except Exception as exc:
            logger.error("Failed to list objects under %s: %s", search_prefix, exc)
            raise AppError.storage("Failed to list files") from exc

        files = [
            ListedObject(
                key=self.relative_key(item.key),
                size=item.size,
                last_modified=item.last_modified,
            )
            for item in page.items
        ]
        return ObjectListing(files=files, next_token=page.next_token, truncated=page.truncated)
