"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
hsdp-api, a product of Garudex Labs

Response wrapper, status classification and body delivery.

A successful body goes to exactly one destination:

- ``RawSink(writer)``: streamed verbatim, no decoding
- ``Structured(factory)``: JSON-decoded, optionally passed through ``factory``,
  stored on ``destination.value``
- ``None``: buffered on the response for the caller to inspect
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, BinaryIO, Callable, Optional, Union

import requests

from hsdp_api.exceptions import DecodeError, NonSuccessStatusError
from hsdp_api.logging_config import get_logger

logger = get_logger(__name__)

SUCCESS_STATUS_CODES = frozenset({200, 201, 202, 204, 304})


@dataclass
class RawSink:
    """Destination that receives the raw body bytes."""
    writer: BinaryIO
    chunk_size: int = 8192


@dataclass
class Structured:
    """Destination that receives the decoded JSON body in ``value``."""
    factory: Optional[Callable[[Any], Any]] = None
    value: Any = None


Destination = Union[RawSink, Structured]


class Response:
    """Thin wrapper around ``requests.Response``.

    Attribute access falls through to the wrapped response, so ``status_code``,
    ``headers``, ``content``, ``text`` and ``json()`` behave as usual.
    """

    def __init__(self, raw: requests.Response) -> None:
        self.raw_response = raw

    def __getattr__(self, name: str) -> Any:
        return getattr(self.raw_response, name)

    def __repr__(self) -> str:
        return f"<Response [{self.raw_response.status_code}]>"

    @property
    def status_code(self) -> int:
        return self.raw_response.status_code

    @property
    def is_success(self) -> bool:
        return is_success(self.status_code)

    def buffer(self) -> None:
        """Read the remaining body into memory and release the connection."""
        try:
            self.raw_response.content
        except requests.exceptions.RequestException as exc:
            logger.warning("response_body_unreadable", reason=str(exc))
            self.raw_response.close()

    def close(self) -> None:
        self.raw_response.close()

    def __enter__(self) -> "Response":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


def is_success(status_code: int) -> bool:
    """Return whether ``status_code`` belongs to the success set."""
    return status_code in SUCCESS_STATUS_CODES


def check_response(response: Response) -> None:
    """Raise :class:`NonSuccessStatusError` unless the status is a success."""
    if not is_success(response.status_code):
        raise NonSuccessStatusError(response)


def _decode(response: Response, destination: Structured) -> Any:
    content = response.raw_response.content
    if not content:
        return None
    try:
        decoded = json.loads(content)
    except ValueError as exc:
        raise DecodeError(f"response body is not valid JSON: {exc}", response) from exc
    if destination.factory is None:
        return decoded
    try:
        return destination.factory(decoded)
    except (TypeError, ValueError, KeyError) as exc:
        raise DecodeError(f"cannot build destination from response body: {exc}", response) from exc


def _copy(response: Response, destination: RawSink) -> None:
    try:
        for chunk in response.raw_response.iter_content(chunk_size=destination.chunk_size):
            destination.writer.write(chunk)
    except (OSError, TypeError, ValueError, requests.exceptions.RequestException) as exc:
        raise DecodeError(f"failed to copy response body: {exc}", response) from exc


def read_into(response: Response, destination: Optional[Destination]) -> None:
    """Deliver a successful response body to ``destination``.

    The body stream is closed on every exit path once a destination was
    given. Without a destination the body is buffered instead.
    """
    if destination is None:
        response.buffer()
        return
    try:
        if isinstance(destination, RawSink):
            _copy(response, destination)
        elif isinstance(destination, Structured):
            destination.value = _decode(response, destination)
        else:
            raise TypeError(
                f"unsupported destination {type(destination).__name__}; "
                "use RawSink or Structured"
            )
    finally:
        response.close()
