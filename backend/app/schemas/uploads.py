from datetime import datetime
from typing import Literal

from pydantic import Field, PositiveInt

from app.schemas.common import CamelModel
from app.schemas.metadata import FileMetadata


class PresignUploadRequest(CamelModel):
    filename: str = Field(..., min_length=1, max_length=255)
    content_type: str = Field(..., min_length=1)
    size: PositiveInt | None = None
    metadata: FileMetadata | None = None


class PresignUploadResponse(CamelModel):
    upload_url: str
    upload_method: Literal["PUT"] = "PUT"
    key: str
    expires_at: datetime
    file_id: str


class UploadCompleteRequest(CamelModel):
    key: str = Field(..., min_length=1)
    metadata: FileMetadata | None = None


class ActionResponse(CamelModel):
    success: bool = True
    message: str
    key: str
