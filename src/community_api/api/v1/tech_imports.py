"""Tech stack bulk import API endpoints.

POST /techs/import/preview parses and validates an uploaded file;
POST /techs/import commits a reviewed batch.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, UploadFile, status
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from community_api.core.config import Settings, get_settings
from community_api.core.dependencies import get_async_session, require_role
from community_api.lib.tech_import import ImportParseError, ImportSession
from community_api.models.user import User
from community_api.schemas.tech_import import (
    ImportBatchResponse,
    ImportCommitRequest,
    ImportCountsResponse,
    ImportRecordResponse,
)
from community_api.services import tech_import_service

tech_imports_router = APIRouter(prefix="/techs/import", tags=["tech-imports"])

_NO_FILE_DETAIL = "No file provided"


def _batch_response(import_session: ImportSession) -> ImportBatchResponse:
    return ImportBatchResponse(
        records=[ImportRecordResponse.from_record(r) for r in import_session.records],
        counts=ImportCountsResponse.from_counts(import_session.counts()),
    )


@tech_imports_router.post("/preview")
async def preview_import(
    file: UploadFile,
    _user: Annotated[User, Depends(require_role("admin"))],
    session: Annotated[AsyncSession, Depends(get_async_session)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> ImportBatchResponse:
    """Parse and validate an uploaded CSV or JSON file without writing (admin only)."""
    if not file.filename:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=_NO_FILE_DETAIL)

    max_bytes = settings.import_max_file_size_kb * 1024
    raw = await file.read()
    if len(raw) > max_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File exceeds maximum size of {settings.import_max_file_size_kb} KB",
        )
    try:
        content = raw.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="File must be UTF-8 encoded",
        ) from e

    try:
        import_session = await tech_import_service.preview_import(session, filename=file.filename, content=content)
    except ImportParseError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e)) from e
    except Exception as e:
        logger.error(f"Unexpected error previewing tech stack import: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error previewing import.",
        ) from e
    return _batch_response(import_session)


@tech_imports_router.post("")
async def commit_import(
    body: ImportCommitRequest,
    current_user: Annotated[User, Depends(require_role("admin"))],
    session: Annotated[AsyncSession, Depends(get_async_session)],
) -> ImportBatchResponse:
    """Re-validate a reviewed batch and commit its valid records in order (admin only).

    Per-record failures are reported on the records; the response is 200
    even when some records fail.
    """
    temp_ids = [r.temp_id for r in body.records]
    if len(set(temp_ids)) != len(temp_ids):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Duplicate temp_id in batch")

    username = current_user.username
    try:
        import_session = await tech_import_service.commit_import(session, [r.to_candidate() for r in body.records])
    except Exception as e:
        logger.error(f"Unexpected error committing tech stack import: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error committing import.",
        ) from e
    counts = import_session.counts()
    logger.info(f"Admin {username} imported {counts.success} tech stacks ({counts.error} failed)")
    return _batch_response(import_session)
