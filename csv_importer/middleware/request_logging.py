import re
import time
import uuid
from typing import Awaitable, Callable, Optional

from loguru import logger as loguru_logger
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"
SESSION_PATH = re.compile(r"^/v2/imports/(?P<session>[^/]+)")


def session_from_path(path: str) -> str:
    match = SESSION_PATH.match(path)
    return match.group("session") if match else "-"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Tags each request with an id, logs its outcome and echoes the id back.

    The request id and the import session named in the path are placed in the
    loguru context, so importer records emitted while handling the request
    carry them too.
    """

    def __init__(self, app, logger: Optional[object] = None):
        super().__init__(app)
        self.logger = (logger or loguru_logger).bind(component="http")

    async def dispatch(self, request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        session = session_from_path(request.url.path)
        start_time = time.perf_counter()

        with loguru_logger.contextualize(request_id=request_id, session=session):
            try:
                response = await call_next(request)
            except Exception:
                duration_ms = (time.perf_counter() - start_time) * 1000
                self.logger.exception(
                    "{method} {path} -> unhandled error ({duration:.2f} ms)",
                    method=request.method,
                    path=request.url.path,
                    duration=duration_ms,
                )
                raise

            duration_ms = (time.perf_counter() - start_time) * 1000
            self.logger.info(
                "{method} {path} -> {status} ({duration:.2f} ms)",
                method=request.method,
                path=request.url.path,
                status=response.status_code,
                duration=duration_ms,
            )

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
