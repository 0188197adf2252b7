"""Shared fixtures: in-memory collaborators for the importer."""
from typing import List, Optional

import pytest

from csv_importer.config.settings import Settings
from csv_importer.errors import SchemaFetchError
from csv_importer.importer import CsvImporter
from csv_importer.models import ImporterConfig, ImportOutcome, ImportRequest
from csv_importer.navigation import RecordingNavigator
from csv_importer.notifications import CollectingNotificationSink
from csv_importer.sessions import ImporterSession
from csv_importer.validation import SchemaFieldSet


class FakeSchemaSource:
    def __init__(self, fields=("Name", "Email"), error: Optional[Exception] = None):
        self.fields = tuple(fields)
        self.error = error
        self.calls: List[str] = []

    async def fetch_fields(self, entity_type: str) -> SchemaFieldSet:
        self.calls.append(entity_type)
        if self.error is not None:
            raise self.error
        return SchemaFieldSet(entity_type=entity_type, fields=self.fields)


class FakeProcessor:
    """Returns queued outcomes, or raises queued exceptions, in order."""

    def __init__(self, *results):
        self.results = list(results) or [ImportOutcome(success=True, message="ok")]
        self.requests: List[ImportRequest] = []
        self.in_progress_seen: List[bool] = []
        self.importer: Optional[CsvImporter] = None

    async def process(self, request: ImportRequest) -> ImportOutcome:
        self.requests.append(request)
        if self.importer is not None:
            self.in_progress_seen.append(self.importer.import_in_progress)
        result = self.results.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def schema_source():
    return FakeSchemaSource()


@pytest.fixture
def failing_schema_source():
    return FakeSchemaSource(error=SchemaFetchError("Object Contact__x not found"))


@pytest.fixture
def make_importer(settings, schema_source):
    """Build an importer around fakes; returns (importer, sink, navigator)."""

    def _make(
        processor=None,
        *,
        config: Optional[ImporterConfig] = None,
        source=None,
        settings_override: Optional[Settings] = None,
    ):
        sink = CollectingNotificationSink()
        navigator = RecordingNavigator()
        processor = processor or FakeProcessor()
        importer = CsvImporter(
            config or ImporterConfig(target_entity_type="Contact"),
            schema_source=source or schema_source,
            processor=processor,
            notifier=sink,
            navigator=navigator,
            settings=settings_override or settings,
        )
        processor.importer = importer
        return importer, sink, navigator

    return _make


@pytest.fixture
def make_session(make_importer):
    """Session factory suitable for overriding the API dependency."""

    def _factory_for(processor=None, source=None):
        def factory(config: ImporterConfig) -> ImporterSession:
            importer, sink, navigator = make_importer(processor, config=config, source=source)
            return ImporterSession(importer=importer, notifications=sink, navigator=navigator)

        return factory

    return _factory_for
