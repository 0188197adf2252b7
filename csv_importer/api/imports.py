"""Import session endpoints."""
from typing import List

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from pydantic import BaseModel

from csv_importer.errors import ImportPreconditionError, UploadDisabledError
from csv_importer.logging_config import get_logger
from csv_importer.models import (
    ImporterConfig,
    ImporterStatus,
    ImportOutcome,
    NavigationAction,
    Notification,
)
from csv_importer.sessions import ImporterSession, SessionRegistry
from csv_importer.validation import RawFile

from .dependencies import SessionFactory, get_registry, get_session, get_session_factory

logger = get_logger(name=__name__)

router = APIRouter(prefix="/v2/imports", tags=["Imports"])


# ============== Response Models ==============

class SessionResponse(BaseModel):
    session_id: str
    status: ImporterStatus
    notifications: List[Notification]


class ValidationResponse(SessionResponse):
    validation: dict


class ImportResponse(SessionResponse):
    outcome: ImportOutcome


class NextResponse(SessionResponse):
    action: NavigationAction


def _session_response(session: ImporterSession) -> dict:
    return {
        "session_id": session.session_id,
        "status": session.importer.status(),
        "notifications": session.notifications.drain(),
    }


# ============== Endpoints ==============

@router.post("", response_model=SessionResponse, status_code=201)
async def create_session(
    config: ImporterConfig,
    registry: SessionRegistry = Depends(get_registry),
    factory: SessionFactory = Depends(get_session_factory),
):
    """Create an importer for the target entity type and fetch its schema."""
    session = registry.add(factory(config))
    await session.importer.connect()
    return _session_response(session)


@router.get("/{session_id}", response_model=SessionResponse)
async def get_session_status(session: ImporterSession = Depends(get_session)):
    return _session_response(session)


@router.post("/{session_id}/file", response_model=ValidationResponse)
async def upload_file(
    file: UploadFile = File(...),
    session: ImporterSession = Depends(get_session),
):
    """Validate an uploaded CSV file for this session."""
    raw_file = RawFile(filename=file.filename or "", content=await file.read())
    try:
        result = await session.importer.select_file(raw_file)
    except UploadDisabledError as exc:
        raise HTTPException(status_code=409, detail=exc.message)
    return {**_session_response(session), "validation": result.to_dict()}


@router.post("/{session_id}/import", response_model=ImportResponse)
async def run_import(session: ImporterSession = Depends(get_session)):
    """Submit the validated file to the import processor."""
    try:
        outcome = await session.importer.submit()
    except ImportPreconditionError as exc:
        raise HTTPException(status_code=409, detail=exc.message)
    return {**_session_response(session), "outcome": outcome}


@router.post("/{session_id}/next", response_model=NextResponse)
async def advance(session: ImporterSession = Depends(get_session)):
    """Finish the host workflow or get the batch review redirect."""
    action = session.importer.advance()
    return {**_session_response(session), "action": action}


@router.delete("/{session_id}", status_code=204)
async def delete_session(
    session_id: str,
    registry: SessionRegistry = Depends(get_registry),
):
    if not registry.discard(session_id):
        raise HTTPException(status_code=404, detail=f"Import session not found: {session_id}")
