"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
hsdp-api, a product of Garudex Labs

Best-effort capture of full request/response traffic to a file.

The sink is opened in append mode when a client is constructed and is
written to from the transport hooks. Every I/O failure is discarded.
"""

from __future__ import annotations

import os
import threading
from typing import Optional, TextIO
from urllib.parse import urlsplit

import requests

from hsdp_api.logging_config import get_logger
from hsdp_api.transport.hooks import HookRegistry

logger = get_logger(__name__)

REQUEST_TEMPLATE = "[hsdp-api] --- Request start ---\n{dump}\n[hsdp-api] Request end ---\n"
RESPONSE_TEMPLATE = "[hsdp-api] --- Response start ---\n{dump}\n[hsdp-api] --- Response end ---\n"


def _body_text(body) -> str:
    if body is None:
        return ""
    if isinstance(body, (bytes, bytearray)):
        return bytes(body).decode("utf-8", errors="replace")
    return str(body)


def _header_lines(headers) -> str:
    return "".join(f"{name}: {value}\r\n" for name, value in headers.items())


def dump_request(request: requests.PreparedRequest) -> str:
    """Render a prepared request as HTTP/1.1 wire text, body included."""
    host = urlsplit(request.url).netloc
    return (
        f"{request.method} {request.path_url} HTTP/1.1\r\n"
        f"Host: {host}\r\n"
        f"{_header_lines(request.headers)}"
        "\r\n"
        f"{_body_text(request.body)}"
    )


def dump_response(response: requests.Response) -> str:
    """Render a response as HTTP/1.1 wire text.

    Reading the body buffers it on the response, so it stays available to
    whoever consumes the response next.
    """
    version = getattr(response.raw, "version", 11)
    proto = "HTTP/1.0" if version == 10 else "HTTP/1.1"
    return (
        f"{proto} {response.status_code} {response.reason or ''}\r\n"
        f"{_header_lines(response.headers)}"
        "\r\n"
        f"{_body_text(response.content)}"
    )


class DebugSink:
    """
    Append-only, thread-safe traffic capture file.

    Use :meth:`open` rather than the constructor when a failure to open the
    file should disable capture instead of raising.
    """

    def __init__(self, path: str) -> None:
        fd = os.open(path, os.O_APPEND | os.O_CREAT | os.O_WRONLY, 0o600)
        self.path = path
        self._file: Optional[TextIO] = os.fdopen(fd, "a", encoding="utf-8")
        self._lock = threading.Lock()

    @classmethod
    def open(cls, path: str) -> Optional["DebugSink"]:
        try:
            return cls(path)
        except (OSError, ValueError, TypeError) as exc:
            logger.warning(
                "debug_log_disabled",
                path=path,
                reason=str(exc),
            )
            return None

    @property
    def closed(self) -> bool:
        return self._file is None

    def install(self, hooks: HookRegistry) -> None:
        hooks.on_before_send(self.write_request)
        hooks.on_after_receive(self.write_response)

    def write_request(self, request: requests.PreparedRequest) -> None:
        if self._file is None:
            return
        try:
            dumped = dump_request(request)
        except Exception:
            dumped = ""
        self._write(REQUEST_TEMPLATE.format(dump=dumped))

    def write_response(self, response: requests.Response) -> None:
        if self._file is None:
            return
        try:
            dumped = dump_response(response)
        except Exception:
            dumped = ""
        self._write(RESPONSE_TEMPLATE.format(dump=dumped))

    def _write(self, text: str) -> None:
        with self._lock:
            if self._file is None:
                return
            try:
                self._file.write(text)
                self._file.flush()
            except (OSError, ValueError):
                pass

    def close(self) -> None:
        """Release the file handle. Closing twice is a no-op."""
        with self._lock:
            if self._file is None:
                return
            try:
                self._file.close()
            except OSError:
                pass
            self._file = None
