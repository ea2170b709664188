import logging

from fastapi import APIRouter, Depends

from app.api.deps import get_optional_user_id, get_orchestrator
from app.schemas import (
    ActionResponse,
    FileMetadata,
    PresignUploadRequest,
    PresignUploadResponse,
    UploadCompleteRequest,
)
from app.services.uploads import UploadOrchestrator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/upload", tags=["upload"])


@router.post("/presign", response_model=PresignUploadResponse)
async def presign_upload(
    payload: PresignUploadRequest,
    user_id: str | None = Depends(get_optional_user_id),
    orchestrator: UploadOrchestrator = Depends(get_orchestrator),
) -> PresignUploadResponse:
    if user_id and not (payload.metadata and payload.metadata.user_id):
        metadata = payload.metadata or FileMetadata()
        payload = payload.model_copy(update={"metadata": metadata.with_updates(user_id=user_id)})

    result = await orchestrator.issue_upload(payload)
    logger.info(
        "Presigned upload URL generated key=%s file_id=%s content_type=%s",
        result.key,
        result.file_id,
        payload.content_type,
    )
    return result


@router.post("/complete", response_model=ActionResponse)
async def complete_upload(
    payload: UploadCompleteRequest,
    user_id: str | None = Depends(get_optional_user_id),
    orchestrator: UploadOrchestrator = Depends(get_orchestrator),
) -> ActionResponse:
    if user_id:
        metadata = payload.metadata or FileMetadata()
        payload = payload.model_copy(update={"metadata": metadata.with_updates(user_id=user_id)})

    result = await orchestrator.complete_upload(payload)
    logger.info("Upload completed key=%s", result.key)
    return result
