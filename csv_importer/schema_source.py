"""Field metadata lookup for target entity types."""

from __future__ import annotations

from typing import Optional, Protocol
from urllib.parse import quote

import httpx

from csv_importer.errors import SchemaFetchError
from csv_importer.gateway import request_json
from csv_importer.logging_config import get_logger
from csv_importer.validation import SchemaFieldSet

logger = get_logger(name=__name__)


class SchemaSource(Protocol):
    async def fetch_fields(self, entity_type: str) -> SchemaFieldSet:
        ...


class HttpSchemaSource:
    """Reads field identifiers from ``GET {base_url}/objects/{entity}/fields``.

    The service is expected to answer ``{"fields": ["Name", "Email", ...]}``.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout_seconds: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    def fields_url(self, entity_type: str) -> str:
        return f"{self.base_url}/objects/{quote(entity_type, safe='')}/fields"

    async def fetch_fields(self, entity_type: str) -> SchemaFieldSet:
        body = await request_json(
            "GET",
            self.fields_url(entity_type),
            timeout_seconds=self.timeout_seconds,
            transport=self._transport,
            error_cls=SchemaFetchError,
        )

        fields = body.get("fields")
        if not isinstance(fields, list) or not all(isinstance(name, str) for name in fields):
            raise SchemaFetchError(
                "Field metadata response is missing a list of field names",
                details={"entity_type": entity_type},
            )

        logger.info("Fetched {} fields for {}", len(fields), entity_type)
        return SchemaFieldSet(entity_type=entity_type, fields=tuple(fields))
