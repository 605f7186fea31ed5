"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
hsdp-api, a product of Garudex Labs

Generic FHIR STU3 interactions against the CDR store.

Resources travel as plain JSON mappings; no resource schema is enforced.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional, Tuple

from hsdp_api.transport.options import OptionFunc, with_content_type
from hsdp_api.transport.response import Response, Structured

if TYPE_CHECKING:
    from hsdp_api.transport.client import BaseClient

FHIR_JSON_STU3 = "application/fhir+json;fhirVersion=3.0"
JSON_PATCH = "application/json-patch+json"

Options = Optional[Iterable[Optional[OptionFunc]]]


class OperationsSTU3Service:
    """CRUD and patch interactions on arbitrary store paths."""

    def __init__(self, client: "BaseClient", time_zone: str = "UTC") -> None:
        self.client = client
        self.time_zone = time_zone

    def _call(
        self,
        method: str,
        path: str,
        payload: Any = None,
        content_type: Optional[str] = None,
        options: Options = None,
    ) -> Tuple[Optional[Dict[str, Any]], Response]:
        body = json.dumps(payload).encode("utf-8") if payload is not None else None
        opts: List[Optional[OptionFunc]] = []
        if content_type:
            opts.append(with_content_type(content_type))
        opts.extend(options or [])

        req = self.client.new_request(method, path, body, opts)
        dest = Structured()
        resp = self.client.do(req, dest)
        return dest.value, resp

    def get(self, path: str, options: Options = None) -> Tuple[Optional[Dict[str, Any]], Response]:
        """Read a resource or run a search, e.g. ``Patient/123`` or ``Patient``."""
        return self._call("GET", path, options=options)

    def post(
        self, path: str, resource: Dict[str, Any], options: Options = None
    ) -> Tuple[Optional[Dict[str, Any]], Response]:
        return self._call("POST", path, resource, FHIR_JSON_STU3, options)

    def put(
        self, path: str, resource: Dict[str, Any], options: Options = None
    ) -> Tuple[Optional[Dict[str, Any]], Response]:
        return self._call("PUT", path, resource, FHIR_JSON_STU3, options)

    def patch(
        self, path: str, operations: List[Dict[str, Any]], options: Options = None
    ) -> Tuple[Optional[Dict[str, Any]], Response]:
        """Apply a JSON Patch document (RFC 6902) to a resource."""
        return self._call("PATCH", path, operations, JSON_PATCH, options)

    def delete(self, path: str, options: Options = None) -> Tuple[bool, Response]:
        _, resp = self._call("DELETE", path, options=options)
        return True, resp
