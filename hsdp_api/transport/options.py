"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
hsdp-api, a product of Garudex Labs

Per-call request options.

An option is a callable that mutates the in-progress :class:`Request` or
raises to reject it. Options run in the order given; the first one that
raises aborts request construction and its exception reaches the caller
unchanged.
"""

from __future__ import annotations

import uuid
from typing import Any, Callable, Iterable, Mapping, Optional

from hsdp_api.exceptions import OptionError
from hsdp_api.logging_config import get_correlation_id
from hsdp_api.transport.base import Request

OptionFunc = Callable[[Request], None]

REQUEST_ID_HEADER = "HSDP-Request-ID"


def apply_options(request: Request, options: Optional[Iterable[Optional[OptionFunc]]]) -> None:
    for fn in options or ():
        if fn is None:
            continue
        fn(request)


def _check_header(name: str, value: str) -> None:
    if not name:
        raise OptionError("header name cannot be empty")
    if any(c in name for c in ":\r\n") or any(c in str(value) for c in "\r\n"):
        raise OptionError(f"invalid header {name!r}")


def with_header(name: str, value: str) -> OptionFunc:
    def option(request: Request) -> None:
        _check_header(name, value)
        request.headers[name] = str(value)
    return option


def with_headers(headers: Mapping[str, str]) -> OptionFunc:
    def option(request: Request) -> None:
        for name, value in headers.items():
            _check_header(name, value)
            request.headers[name] = str(value)
    return option


def with_query(params: Mapping[str, Any]) -> OptionFunc:
    """Merge ``params`` into the query string.

    Sequence values repeat the parameter. Mutating methods drop the query
    string after options have run.
    """
    def option(request: Request) -> None:
        for key, value in params.items():
            if not key:
                raise OptionError("query parameter name cannot be empty")
            request.params[key] = value
    return option


def with_content_type(content_type: str) -> OptionFunc:
    return with_header("Content-Type", content_type)


def with_if_match(version_id: str) -> OptionFunc:
    """Conditional update on a FHIR resource version."""
    def option(request: Request) -> None:
        if not version_id:
            raise OptionError("version id cannot be empty")
        request.headers["If-Match"] = f'W/"{version_id}"'
    return option


def with_request_id(request_id: Optional[str] = None) -> OptionFunc:
    """Tag the request with ``request_id``.

    Without an explicit id the current log correlation id is used, or a new
    UUID when none is set.
    """
    def option(request: Request) -> None:
        request.headers[REQUEST_ID_HEADER] = (
            request_id or get_correlation_id() or str(uuid.uuid4())
        )
    return option
