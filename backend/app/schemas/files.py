from datetime import datetime

from pydantic import Field

from app.schemas.common import CamelModel

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


class PresignGetResponse(CamelModel):
    url: str
    expires_at: datetime


class ListFilesQuery(CamelModel):
    """Listing parameters as received.

    ``page`` and ``limit`` are not bounded here; the orchestrator
    clamps them instead of rejecting the request.
    """

    user_id: str | None = None
    tags: str | None = None
    page: int | None = None
    limit: int | None = None
    prefix: str | None = None

    @property
    def tag_list(self) -> list[str]:
        if not self.tags:
            return []
        return [tag.strip() for tag in self.tags.split(",") if tag.strip()]


class FileRecord(CamelModel):
    key: str
    filename: str
    content_type: str
    size: int
    uploaded_at: datetime


class Pagination(CamelModel):
    page: int
    limit: int
    # Items in this page only; the object store offers no cheap namespace count.
    total: int
    has_more: bool


class ListFilesResponse(CamelModel):
    files: list[FileRecord] = Field(default_factory=list)
    pagination: Pagination
