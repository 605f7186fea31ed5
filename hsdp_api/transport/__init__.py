"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
hsdp-api, a product of Garudex Labs

Shared transport foundation.
"""

from hsdp_api.transport.base import MUTATING_METHODS, Request
from hsdp_api.transport.client import BaseClient, parse_base_url
from hsdp_api.transport.debug import DebugSink
from hsdp_api.transport.hooks import HookRegistry
from hsdp_api.transport.mock import MockAdapter, MockResponse
from hsdp_api.transport.options import (
    OptionFunc,
    with_content_type,
    with_header,
    with_headers,
    with_if_match,
    with_query,
    with_request_id,
)
from hsdp_api.transport.response import (
    SUCCESS_STATUS_CODES,
    Destination,
    RawSink,
    Response,
    Structured,
    check_response,
    is_success,
)

__all__ = [
    "MUTATING_METHODS",
    "SUCCESS_STATUS_CODES",
    "BaseClient",
    "DebugSink",
    "Destination",
    "HookRegistry",
    "MockAdapter",
    "MockResponse",
    "OptionFunc",
    "RawSink",
    "Request",
    "Response",
    "Structured",
    "check_response",
    "is_success",
    "parse_base_url",
    "with_content_type",
    "with_header",
    "with_headers",
    "with_if_match",
    "with_query",
    "with_request_id",
]
