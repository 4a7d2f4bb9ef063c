"""
Request/response logging middleware.

``RequestLoggingMiddleware`` is a plain ASGI middleware: it wraps the
``receive`` and ``send`` callables to observe the request body, the
response status and the response body while passing every message
through untouched.  One line is logged per request once the response
has been sent (or the application raised), at INFO for successful
responses, WARNING for 4xx and ERROR for 5xx.

Bodies are logged after redaction: any mapping key whose name contains
one of ``SENSITIVE_KEY_PARTS`` has its value replaced with
``REDACTED``, at any nesting depth.  Bodies larger than
``max_body_size`` bytes are summarised by their size.
"""

import json
import logging
import time
from typing import Any, List, Optional

from starlette.types import ASGIApp, Message, Receive, Scope, Send


logger = logging.getLogger(__name__)

REDACTED = "[REDACTED]"
SENSITIVE_KEY_PARTS = ("password", "token", "secret", "key", "authorization", "auth", "credential")
MAX_LOGGED_BODY_SIZE = 10_000


def is_sensitive_key(key: Any) -> bool:
    lowered = str(key).lower()
    return any(part in lowered for part in SENSITIVE_KEY_PARTS)


def redact(value: Any) -> Any:
    """Return a copy of ``value`` with sensitive fields masked.

    Dictionaries are walked recursively and lists are redacted element
    by element.  Scalars are returned unchanged.
    """
    if isinstance(value, dict):
        return {
            key: REDACTED if is_sensitive_key(key) else redact(item)
            for key, item in value.items()
        }
    if isinstance(value, list):
        return [redact(item) for item in value]
    return value


def summarize_body(body: bytes, max_size: int = MAX_LOGGED_BODY_SIZE) -> Optional[Any]:
    """Turn a raw body into something safe and small enough to log."""
    if not body:
        return None
    if len(body) > max_size:
        return f"<{len(body)} bytes>"
    try:
        return redact(json.loads(body))
    except ValueError:
        return body.decode("utf-8", errors="replace")


class _BodyRecorder:
    """Collect body chunks, keeping at most ``limit`` bytes in memory.

    ``size`` always counts every byte seen, so an oversized body can
    still be reported by its length.
    """

    def __init__(self, limit: int) -> None:
        self.limit = limit
        self.size = 0
        self._chunks: List[bytes] = []

    def add(self, chunk: bytes) -> None:
        self.size += len(chunk)
        if self.size <= self.limit:
            self._chunks.append(chunk)
        elif self._chunks:
            self._chunks = []

    def summary(self) -> Optional[Any]:
        if self.size > self.limit:
            return f"<{self.size} bytes>"
        return summarize_body(b"".join(self._chunks), self.limit)


class RequestLoggingMiddleware:
    """Log method, path, client, status, latency and redacted bodies."""

    def __init__(self, app: ASGIApp, max_body_size: int = MAX_LOGGED_BODY_SIZE) -> None:
        self.app = app
        self.max_body_size = max_body_size

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        method = scope.get("method", "")
        path = scope.get("path", "")
        if scope.get("query_string"):
            path = f"{path}?{scope['query_string'].decode('latin-1')}"
        client = scope.get("client")
        client_address = client[0] if client else "-"
        user_agent = ""
        for name, value in scope.get("headers", []):
            if name == b"user-agent":
                user_agent = value.decode("latin-1")
                break

        logger.debug("> %s %s - %s - %s", method, path, client_address, user_agent)

        request_body = _BodyRecorder(self.max_body_size)
        response_body = _BodyRecorder(self.max_body_size)
        status_code = 500
        started = time.perf_counter()

        async def receive_wrapper() -> Message:
            message = await receive()
            if message["type"] == "http.request":
                request_body.add(message.get("body", b""))
            return message

        async def send_wrapper(message: Message) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
            elif message["type"] == "http.response.body":
                response_body.add(message.get("body", b""))
            await send(message)

        try:
            await self.app(scope, receive_wrapper, send_wrapper)
        except Exception:
            status_code = 500
            raise
        finally:
            elapsed_ms = (time.perf_counter() - started) * 1000
            self._log(
                method,
                path,
                client_address,
                status_code,
                elapsed_ms,
                request_body,
                response_body,
            )

    def _log(
        self,
        method: str,
        path: str,
        client_address: str,
        status_code: int,
        elapsed_ms: float,
        request_body: _BodyRecorder,
        response_body: _BodyRecorder,
    ) -> None:
        if status_code >= 500:
            level = logging.ERROR
        elif status_code >= 400:
            level = logging.WARNING
        else:
            level = logging.INFO
        logger.log(
            level,
            "%s %s - %d - %.1fms - %s - request=%s response=%s",
            method,
            path,
            status_code,
            elapsed_ms,
            client_address,
            json.dumps(request_body.summary(), default=str),
            json.dumps(response_body.summary(), default=str),
        )
