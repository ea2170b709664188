from app.schemas.files import (
    FileRecord,
    ListFilesQuery,
    ListFilesResponse,
    Pagination,
    PresignGetResponse,
)
from app.schemas.metadata import FileMetadata
from app.schemas.uploads import (
    ActionResponse,
    PresignUploadRequest,
    PresignUploadResponse,
    UploadCompleteRequest,
)

__all__ = [
    "FileMetadata",
    "PresignUploadRequest",
    "PresignUploadResponse",
    "UploadCompleteRequest",
    "ActionResponse",
    "PresignGetResponse",
    "ListFilesQuery",
    "FileRecord",
    "Pagination",
    "ListFilesResponse",
]
