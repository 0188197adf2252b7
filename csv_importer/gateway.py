"""HTTP gateway shared by the collaborator clients."""

from __future__ import annotations

from typing import Any, Dict, Optional, Type

import httpx

from csv_importer.errors import GatewayError


def _truncate(value: str, max_len: int = 1500) -> str:
    if len(value) <= max_len:
        return value
    return f"{value[:max_len]}..."


def _upstream_message(response: httpx.Response) -> Optional[str]:
    """Pull a ``message`` field out of an error body, if the body has one."""
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict) and isinstance(body.get("message"), str):
        return body["message"]
    if isinstance(body, list) and body and isinstance(body[0], dict):
        message = body[0].get("message")
        return message if isinstance(message, str) else None
    return None


async def request_json(
    method: str,
    url: str,
    *,
    payload: Optional[Dict[str, Any]] = None,
    params: Optional[Dict[str, Any]] = None,
    timeout_seconds: Optional[float] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    error_cls: Type[GatewayError] = GatewayError,
) -> Dict[str, Any]:
    """Send one request and return its JSON object body.

    ``timeout_seconds=None`` waits indefinitely. Every failure is raised as
    ``error_cls``.
    """
    timeout = httpx.Timeout(timeout_seconds)

    try:
        async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
            response = await client.request(method=method, url=url, params=params, json=payload)
    except httpx.TimeoutException as exc:
        raise error_cls(
            "Upstream request timed out",
            details={"timeout_seconds": timeout_seconds, "upstream_url": url},
        ) from exc
    except httpx.RequestError as exc:
        raise error_cls(
            "Upstream service is unavailable",
            details={"reason": str(exc), "upstream_url": url},
        ) from exc

    if response.status_code >= 400:
        raise error_cls(
            _upstream_message(response) or "Upstream returned an error response",
            upstream_status=response.status_code,
            details={
                "upstream_status": response.status_code,
                "upstream_body": _truncate(response.text or ""),
                "upstream_url": url,
            },
        )

    try:
        payload_json = response.json()
    except ValueError as exc:
        raise error_cls(
            "Upstream returned invalid JSON",
            upstream_status=response.status_code,
            details={"upstream_url": url},
        ) from exc

    if not isinstance(payload_json, dict):
        raise error_cls(
            "Upstream returned an unexpected payload shape",
            upstream_status=response.status_code,
            details={"payload_type": type(payload_json).__name__},
        )

    return payload_json
