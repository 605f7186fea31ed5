"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
hsdp-api, a product of Garudex Labs

Shared request/response foundation for every service client.

Service modules build a request with :meth:`BaseClient.new_request` and run
it with :meth:`BaseClient.do`::

    req = client.new_request("GET", "Patient/123", options=[with_request_id()])
    dest = Structured()
    response = client.do(req, dest)
    patient = dest.value

``do`` raises ``NonSuccessStatusError`` for any status outside
{200, 201, 202, 204, 304}; the response stays attached to the error.
"""

from __future__ import annotations

import time
from typing import Iterable, Optional, Union
from urllib.parse import SplitResult, urlsplit, urlunsplit

import requests

from hsdp_api._version import __version__
from hsdp_api.exceptions import ConfigurationError
from hsdp_api.iam.token import TokenProvider
from hsdp_api.logging_config import get_logger, log_request_sent, log_response_classified
from hsdp_api.transport.base import Request
from hsdp_api.transport.debug import DebugSink
from hsdp_api.transport.hooks import HookRegistry
from hsdp_api.transport.options import OptionFunc, apply_options
from hsdp_api.transport.response import Destination, Response, check_response, is_success, read_into

logger = get_logger(__name__)

DEFAULT_USER_AGENT = f"hsdp-api-python/{__version__}"


def parse_base_url(url_str: str) -> SplitResult:
    """Parse and normalize a base URL so its path always ends in ``/``.

    Raises:
        ConfigurationError: If the URL is empty, unparsable or not absolute
    """
    if not url_str:
        raise ConfigurationError("base URL cannot be empty")
    if not url_str.endswith("/"):
        url_str += "/"
    try:
        parsed = urlsplit(url_str)
    except ValueError as e:
        raise ConfigurationError(f"invalid base URL '{url_str}': {e}") from e
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ConfigurationError(
            f"invalid base URL '{url_str}': an absolute http(s) URL is required"
        )
    return parsed


class BaseClient:
    """
    Request builder and executor bound to a token provider.

    Args:
        token_provider: Source of bearer tokens and of the HTTP session
        base_url: Service base URL; a trailing ``/`` is added when missing
        root_org_id: Tenant segment inserted ahead of every relative path
        user_agent: ``User-Agent`` header value (omitted when empty)
        api_version: ``API-Version`` header value (omitted when None)
        debug_log: Optional path of a traffic capture file

    Raises:
        ConfigurationError: If ``base_url`` is empty or unparsable
    """

    def __init__(
        self,
        token_provider: TokenProvider,
        base_url: str,
        root_org_id: Optional[str] = None,
        user_agent: str = DEFAULT_USER_AGENT,
        api_version: Optional[str] = None,
        debug_log: Optional[str] = None,
    ) -> None:
        self._token_provider = token_provider
        self.root_org_id = root_org_id
        self.user_agent = user_agent
        self.api_version = api_version
        self.hooks = HookRegistry()
        self._base_url: Optional[SplitResult] = None
        self._debug_sink: Optional[DebugSink] = None

        self.set_base_url(base_url)

        if debug_log:
            self._debug_sink = DebugSink.open(debug_log)
            if self._debug_sink is not None:
                self._debug_sink.install(self.hooks)

    # -- Configuration -------------------------------------------------------

    @property
    def base_url(self) -> str:
        if self._base_url is None:
            return ""
        return urlunsplit(self._base_url)

    def set_base_url(self, url_str: str) -> None:
        """Point the client at a new base URL.

        On failure the client is left without a base URL and every later
        :meth:`new_request` raises ``ConfigurationError``.
        """
        self._base_url = None
        self._base_url = parse_base_url(url_str)

    @property
    def token_provider(self) -> TokenProvider:
        return self._token_provider

    @property
    def debug_enabled(self) -> bool:
        return self._debug_sink is not None and not self._debug_sink.closed

    # -- Request building ----------------------------------------------------

    def _resolve(self, path: str) -> str:
        base = self._base_url
        opaque = base.path
        if self.root_org_id:
            opaque += self.root_org_id + "/"
        opaque += path
        return urlunsplit((base.scheme, base.netloc, opaque, "", ""))

    def new_request(
        self,
        method: str,
        path: str,
        body: Optional[Union[bytes, bytearray, str]] = None,
        options: Optional[Iterable[Optional[OptionFunc]]] = None,
    ) -> Request:
        """
        Build a request for ``path`` relative to the base URL.

        Args:
            method: HTTP method
            path: Relative path, URL-safe and without a leading ``/``
            body: Pre-serialized body; only used by POST, PUT and PATCH
            options: Ordered option functions applied before the standard headers

        Returns:
            The built request, ready for :meth:`do`

        Raises:
            ConfigurationError: If no valid base URL is configured
            Exception: Whatever the first failing option raised
        """
        if self._base_url is None:
            raise ConfigurationError("base URL is not configured")

        request = Request(method=method.upper(), url=self._resolve(path))

        apply_options(request, options)

        if request.is_mutating:
            if isinstance(body, str):
                body = body.encode("utf-8")
            request.body = bytes(body or b"")
            request.clear_query()
            request.headers["Content-Length"] = str(len(request.body))
        else:
            request.body = None
            request.headers.pop("Content-Length", None)

        request.headers["Accept"] = "*/*"
        request.headers["Authorization"] = "Bearer " + self._token_provider.token()
        if self.api_version is not None:
            request.headers["API-Version"] = self.api_version
        if self.user_agent:
            request.headers["User-Agent"] = self.user_agent

        return request

    # -- Execution -----------------------------------------------------------

    def do(self, request: Request, destination: Optional[Destination] = None) -> Response:
        """
        Send ``request`` and classify the response.

        Args:
            request: Request built by :meth:`new_request`
            destination: ``RawSink``, ``Structured`` or None

        Returns:
            The wrapped response

        Raises:
            requests.exceptions.RequestException: On transport failure (no response)
            NonSuccessStatusError: Status outside the success set; carries the response
            DecodeError: Body could not be delivered to ``destination``
        """
        prepared = request.prepare()
        session = self._token_provider.session

        self.hooks.fire_before_send(prepared)
        log_request_sent(logger, prepared.method, prepared.url, request.content_length)

        start = time.monotonic()
        try:
            settings = session.merge_environment_settings(prepared.url, {}, True, None, None)
            raw = session.send(prepared, **settings)
        except requests.exceptions.RequestException as e:
            logger.error(
                "request_failed",
                method=prepared.method,
                url=prepared.url,
                error=str(e),
            )
            raise
        elapsed = (time.monotonic() - start) * 1000

        self.hooks.fire_after_receive(raw)

        response = Response(raw)
        log_response_classified(
            logger,
            prepared.method,
            prepared.url,
            raw.status_code,
            is_success(raw.status_code),
            round(elapsed, 2),
        )

        if not response.is_success:
            # keep the body readable on the error for the caller
            response.buffer()
        check_response(response)

        read_into(response, destination)
        return response

    # -- Lifecycle -----------------------------------------------------------

    def close(self) -> None:
        """Release the debug sink. Safe to call more than once."""
        if self._debug_sink is not None:
            self._debug_sink.close()
            self._debug_sink = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
