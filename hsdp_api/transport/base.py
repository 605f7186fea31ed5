"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
hsdp-api, a product of Garudex Labs

Outbound request representation shared by every service module.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional
from urllib.parse import urlencode

import requests
from requests.cookies import RequestsCookieJar
from requests.hooks import default_hooks
from requests.structures import CaseInsensitiveDict

MUTATING_METHODS = frozenset({"POST", "PUT", "PATCH"})


@dataclass
class Request:
    """In-progress outbound request.

    ``url`` is the fully resolved destination and is sent verbatim: it is
    never re-quoted when prepared for the wire. Query parameters live in
    ``params`` and are appended at preparation time.
    """
    method: str
    url: str
    headers: CaseInsensitiveDict = field(default_factory=CaseInsensitiveDict)
    body: Optional[bytes] = None
    params: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_mutating(self) -> bool:
        return self.method.upper() in MUTATING_METHODS

    @property
    def content_length(self) -> Optional[int]:
        if self.body is None:
            return None
        return len(self.body)

    @property
    def query(self) -> str:
        params = {k: v for k, v in self.params.items() if v is not None}
        return urlencode(params, doseq=True)

    @property
    def full_url(self) -> str:
        query = self.query
        if not query:
            return self.url
        separator = "&" if "?" in self.url else "?"
        return f"{self.url}{separator}{query}"

    def clear_query(self) -> None:
        """Drop the query parameters set by options. ``url`` is left as resolved."""
        self.params = {}

    def prepare(self) -> requests.PreparedRequest:
        """Turn this request into a ``requests.PreparedRequest``.

        ``PreparedRequest.prepare_url`` is bypassed: the resolved path keeps the
        caller's encoding.
        """
        prepared = requests.PreparedRequest()
        prepared.method = self.method.upper()
        prepared.url = self.full_url
        prepared.headers = CaseInsensitiveDict(self.headers)
        prepared.body = self.body
        prepared.hooks = default_hooks()
        # redirect handling in Session.send needs a cookie jar
        prepared.prepare_cookies(RequestsCookieJar())
        return prepared
