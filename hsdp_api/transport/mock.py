"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
hsdp-api, a product of Garudex Labs

Mock transport adapter for local testing.
"""

from __future__ import annotations

import io
import json
from dataclasses import dataclass, field
from http.client import responses as reason_phrases
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import urlsplit

import requests
from requests.adapters import BaseAdapter
from requests.structures import CaseInsensitiveDict
from requests.utils import get_encoding_from_headers


@dataclass
class MockResponse:
    """Canned reply served by :class:`MockAdapter`."""
    status_code: int = 200
    body: bytes = b""
    headers: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def json(cls, payload: Any, status_code: int = 200, **headers: str) -> "MockResponse":
        merged = {"Content-Type": "application/json"}
        merged.update(headers)
        return cls(status_code=status_code, body=json.dumps(payload).encode(), headers=merged)


class MockAdapter(BaseAdapter):
    """In-memory ``requests`` transport adapter for unit tests.

    Mount it on a token provider's session to intercept every call.

    Args:
        responses: Mapping from ``(method, path)`` tuples to ``MockResponse``
            instances. ``path`` excludes the query string.
        error: Exception raised for every send instead of replying

    Example::

        adapter = MockAdapter({
            ("GET", "/store/fhir/org1/Patient/123"): MockResponse.json({"id": "123"}),
        })
        provider.session.mount("https://", adapter)
    """

    def __init__(
        self,
        responses: Optional[Dict[Tuple[str, str], MockResponse]] = None,
        error: Optional[Exception] = None,
    ) -> None:
        super().__init__()
        self._responses: Dict[Tuple[str, str], MockResponse] = responses or {}
        self._error = error
        self._sent: List[requests.PreparedRequest] = []

    def add(self, method: str, path: str, reply: MockResponse) -> None:
        self._responses[(method.upper(), path)] = reply

    def send(self, request, stream=False, timeout=None, verify=True, cert=None, proxies=None):
        self._sent.append(request)
        if self._error is not None:
            raise self._error

        key = (request.method.upper(), urlsplit(request.url).path)
        reply = self._responses.get(key)
        if reply is None:
            reply = MockResponse.json({"error": "not mocked"}, status_code=404)

        resp = requests.Response()
        resp.status_code = reply.status_code
        resp.reason = reason_phrases.get(reply.status_code, "")
        resp.headers = CaseInsensitiveDict(reply.headers)
        resp.encoding = get_encoding_from_headers(resp.headers)
        resp.raw = io.BytesIO(reply.body)
        resp.url = request.url
        resp.request = request
        resp.connection = self
        return resp

    def close(self) -> None:
        self._responses.clear()
        self._sent.clear()

    @property
    def sent_requests(self) -> List[requests.PreparedRequest]:
        """All requests that have been sent through this adapter."""
        return list(self._sent)
