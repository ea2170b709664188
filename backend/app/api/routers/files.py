import logging

from fastapi import APIRouter, Depends, Query

from app.api.deps import get_current_user_id, get_optional_user_id, get_orchestrator
from app.schemas import ActionResponse, ListFilesQuery, ListFilesResponse, PresignGetResponse
from app.services.uploads import UploadOrchestrator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/files", tags=["files"])


@router.get("", response_model=ListFilesResponse)
async def list_files(
    user_id: str | None = Query(default=None, alias="userId"),
    tags: str | None = Query(default=None),
    page: int | None = Query(default=None),
    limit: int | None = Query(default=None),
    prefix: str | None = Query(default=None),
    current_user_id: str | None = Depends(get_optional_user_id),
    orchestrator: UploadOrchestrator = Depends(get_orchestrator),
) -> ListFilesResponse:
    query = ListFilesQuery(
        user_id=user_id or current_user_id,
        tags=tags,
        page=page,
        limit=limit,
        prefix=prefix,
    )
    result = await orchestrator.list_files(query)
    logger.info(
        "Files listed count=%d page=%d", len(result.files), result.pagination.page
    )
    return result


@router.get("/{key:path}/presign", response_model=PresignGetResponse)
async def presign_download(
    key: str,
    orchestrator: UploadOrchestrator = Depends(get_orchestrator),
) -> PresignGetResponse:
    result = await orchestrator.issue_download(key)
    logger.info("Presigned GET URL generated key=%s", key)
    return result


@router.delete("/{key:path}", response_model=ActionResponse)
async def delete_file(
    key: str,
    user_id: str = Depends(get_current_user_id),
    orchestrator: UploadOrchestrator = Depends(get_orchestrator),
) -> ActionResponse:
    result = await orchestrator.delete_file(key)
    logger.info("File deleted key=%s user_id=%s", key, user_id)
    return result
