"""Client for the remote import processor."""

from __future__ import annotations

from typing import Optional, Protocol

import httpx
from pydantic import ValidationError

from csv_importer.errors import ProcessingError
from csv_importer.gateway import request_json
from csv_importer.logging_config import get_logger
from csv_importer.models import ImportOutcome, ImportRequest

logger = get_logger(name=__name__)


class ImportProcessor(Protocol):
    async def process(self, request: ImportRequest) -> ImportOutcome:
        """Import the request's content; raise ProcessingError on transport faults."""
        ...


class HttpImportProcessor:
    """POSTs ``{csvContent, objectApiName, batchId}`` and parses the outcome."""

    def __init__(
        self,
        url: str,
        *,
        timeout_seconds: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.url = url
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    async def process(self, request: ImportRequest) -> ImportOutcome:
        logger.info(
            "Submitting {} bytes for {} (batch={})",
            len(request.content), request.target_entity_type, request.batch_id,
        )
        body = await request_json(
            "POST",
            self.url,
            payload=request.to_wire(),
            timeout_seconds=self.timeout_seconds,
            transport=self._transport,
            error_cls=ProcessingError,
        )

        try:
            return ImportOutcome.model_validate(body)
        except ValidationError as exc:
            raise ProcessingError(
                "Import processor returned an unexpected response",
                details={"errors": exc.errors(include_url=False)},
            ) from exc
