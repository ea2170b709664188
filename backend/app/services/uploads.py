"""Request flows for direct-to-storage uploads.

The orchestrator is stateless: it never waits for a client's PUT and holds
nothing between calls. A completion check that runs before the client's
upload lands reports not-found; retrying is the caller's decision.
"""

import logging

from app.core.config import Settings
from app.core.errors import AppError
from app.schemas import (
    ActionResponse,
    FileMetadata,
    FileRecord,
    ListFilesQuery,
    ListFilesResponse,
    Pagination,
    PresignGetResponse,
    PresignUploadRequest,
    PresignUploadResponse,
    UploadCompleteRequest,
)
from app.schemas.files import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from app.services.index import ObjectIndex, ObjectListing
from app.services.keys import KeyGenerator
from app.services.metadata import MetadataCodec
from app.services.object_store import ObjectStore, S3ObjectStore
from app.services.presign import PresignedUrlIssuer
from app.services.validation import UploadValidator

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"


def clamp_pagination(page: int | None, limit: int | None) -> tuple[int, int]:
    page = max(1, page) if page is not None else 1
    limit = min(MAX_PAGE_SIZE, max(1, limit)) if limit is not None else DEFAULT_PAGE_SIZE
    return page, limit


class UploadOrchestrator:
    def __init__(
        self,
        validator: UploadValidator,
        keys: KeyGenerator,
        issuer: PresignedUrlIssuer,
        index: ObjectIndex,
    ) -> None:
        self.validator = validator
        self.keys = keys
        self.issuer = issuer
        self.index = index

    @classmethod
    def from_settings(
        cls, settings: Settings, store: ObjectStore | None = None
    ) -> "UploadOrchestrator":
        store = store or S3ObjectStore.from_settings(settings)
        codec = MetadataCodec()
        return cls(
            validator=UploadValidator.from_settings(settings),
            keys=KeyGenerator(),
            issuer=PresignedUrlIssuer.from_settings(settings, store, codec),
            index=ObjectIndex.from_settings(settings, store, codec),
        )

    async def issue_upload(self, request: PresignUploadRequest) -> PresignUploadResponse:
        self.validator.validate_content_type(request.content_type)
        self.validator.validate_size(request.size)

        file_id = self.keys.generate_file_id()
        key = self.keys.generate_key(request.filename, file_id)
        metadata = (request.metadata or FileMetadata()).with_updates(
            original_filename=request.filename
        )
        presigned = self.issuer.issue_upload_url(
            key, request.content_type, metadata, request.size
        )
        return PresignUploadResponse(
            upload_url=presigned.url,
            key=key,
            expires_at=presigned.expires_at,
            file_id=file_id,
        )

    async def complete_upload(self, request: UploadCompleteRequest) -> ActionResponse:
        await self._require_existing(request.key)
        return ActionResponse(message="Upload completed successfully", key=request.key)

    async def issue_download(self, key: str) -> PresignGetResponse:
        await self._require_existing(key)
        presigned = self.issuer.issue_get_url(key)
        return PresignGetResponse(url=presigned.url, expires_at=presigned.expires_at)

    async def list_files(self, query: ListFilesQuery) -> ListFilesResponse:
        page, limit = clamp_pagination(query.page, query.limit)
        if query.user_id or query.tag_list:
            # No metadata database: these filters cannot be applied to a listing.
            logger.debug(
                "Ignoring list filters user_id=%s tags=%s", query.user_id, query.tag_list
            )

        listing = await self._fetch_page(query.prefix, page, limit)
        files = [
            FileRecord(
                key=item.key,
                filename=self.keys.filename_from_key(item.key),
                content_type=DEFAULT_CONTENT_TYPE,
                size=item.size,
                uploaded_at=item.last_modified,
            )
            for item in listing.files
        ]
        return ListFilesResponse(
            files=files,
            pagination=Pagination(
                page=page,
                limit=limit,
                total=len(files),
                has_more=listing.truncated,
            ),
        )

    async def delete_file(self, key: str) -> ActionResponse:
        await self._require_existing(key)
        await self.index.delete(key)
        return ActionResponse(message="File deleted successfully", key=key)

    async def _require_existing(self, key: str) -> None:
        info = await self.index.exists(key, decode_metadata=False)
        if not info.exists:
            raise AppError.not_found(f"File with key {key} not found")

    async def _fetch_page(self, prefix: str | None, page: int, limit: int) -> ObjectListing:
        token: str | None = None
        for _ in range(page - 1):
            skipped = await self.index.list(prefix, limit, token)
            if not skipped.truncated or not skipped.next_token:
                return ObjectListing()
            token = skipped.next_token
        return await self.index.list(prefix, limit, token)
