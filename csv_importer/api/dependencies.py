"""FastAPI dependencies for the import endpoints."""
from functools import lru_cache
from typing import Callable

from fastapi import Depends, HTTPException

from csv_importer.config.settings import Settings, get_settings
from csv_importer.models import ImporterConfig
from csv_importer.sessions import ImporterSession, SessionRegistry, build_http_session

SessionFactory = Callable[[ImporterConfig], ImporterSession]


@lru_cache()
def get_registry() -> SessionRegistry:
    return SessionRegistry(ttl_seconds=get_settings().session_ttl_seconds)


def get_session_factory(settings: Settings = Depends(get_settings)) -> SessionFactory:
    """Build sessions backed by the HTTP schema source and import processor."""
    return lambda config: build_http_session(config, settings)


def get_session(
    session_id: str,
    registry: SessionRegistry = Depends(get_registry),
) -> ImporterSession:
    session = registry.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail=f"Import session not found: {session_id}")
    return session
