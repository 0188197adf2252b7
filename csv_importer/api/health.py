"""Health check endpoint."""
from fastapi import APIRouter, Depends
from pydantic import BaseModel

from csv_importer.sessions import SessionRegistry

from .dependencies import get_registry

router = APIRouter(prefix="/v2/health", tags=["Health"])


class HealthResponse(BaseModel):
    status: str
    active_sessions: int


@router.get("", response_model=HealthResponse)
async def health_check(registry: SessionRegistry = Depends(get_registry)):
    return HealthResponse(status="healthy", active_sessions=len(registry))
