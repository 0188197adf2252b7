"""In-memory registry of importer instances served over HTTP.

One session corresponds to one host component instance; sessions never share
files, validation results or outcomes.
"""
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

from csv_importer.config.settings import Settings
from csv_importer.importer import CsvImporter
from csv_importer.logging_config import get_logger
from csv_importer.models import ImporterConfig
from csv_importer.navigation import RecordingNavigator
from csv_importer.notifications import CollectingNotificationSink
from csv_importer.processor import HttpImportProcessor
from csv_importer.schema_source import HttpSchemaSource

logger = get_logger(name=__name__)


@dataclass
class ImporterSession:
    importer: CsvImporter
    notifications: CollectingNotificationSink
    navigator: RecordingNavigator
    session_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


def build_http_session(config: ImporterConfig, settings: Settings) -> ImporterSession:
    """Wire an importer to the HTTP collaborators named in settings."""
    notifications = CollectingNotificationSink()
    navigator = RecordingNavigator()
    importer = CsvImporter(
        config,
        schema_source=HttpSchemaSource(
            settings.schema_source_url,
            timeout_seconds=settings.request_timeout_seconds,
        ),
        processor=HttpImportProcessor(
            settings.import_processor_url,
            timeout_seconds=settings.request_timeout_seconds,
        ),
        notifier=notifications,
        navigator=navigator,
        settings=settings,
    )
    return ImporterSession(importer=importer, notifications=notifications, navigator=navigator)


class SessionRegistry:
    """Sessions expire ``ttl_seconds`` after creation and are dropped lazily."""

    def __init__(self, ttl_seconds: int = 3600) -> None:
        self.ttl = timedelta(seconds=ttl_seconds)
        self._sessions: Dict[str, ImporterSession] = {}

    def _is_expired(self, session: ImporterSession, now: Optional[datetime] = None) -> bool:
        now = now or datetime.now(timezone.utc)
        return now - session.created_at >= self.ttl

    def add(self, session: ImporterSession) -> ImporterSession:
        self.cleanup_expired()
        session.importer.bind_log_context(session=session.session_id)
        self._sessions[session.session_id] = session
        logger.info(
            "Created import session {} for {}",
            session.session_id, session.importer.config.target_entity_type,
        )
        return session

    def get(self, session_id: str) -> Optional[ImporterSession]:
        session = self._sessions.get(session_id)
        if session is not None and self._is_expired(session):
            del self._sessions[session_id]
            logger.info("Import session {} expired", session_id)
            return None
        return session

    def discard(self, session_id: str) -> bool:
        removed = self._sessions.pop(session_id, None)
        if removed is not None:
            logger.info("Discarded import session {}", session_id)
        return removed is not None

    def cleanup_expired(self) -> int:
        now = datetime.now(timezone.utc)
        expired = [sid for sid, session in self._sessions.items() if self._is_expired(session, now)]
        for session_id in expired:
            del self._sessions[session_id]
        if expired:
            logger.info("Removed {} expired import sessions", len(expired))
        return len(expired)

    def __len__(self) -> int:
        return len(self._sessions)
