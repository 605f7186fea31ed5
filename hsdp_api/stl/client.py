"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
hsdp-api, a product of Garudex Labs

Client for the STL device management GraphQL API.

Queries and mutations are plain GraphQL documents POSTed through the shared
transport, so they get the same headers, debug capture and status handling
as REST calls.
"""

from __future__ import annotations

import json
from typing import Any, Dict, Iterable, Optional

from hsdp_api._version import __version__
from hsdp_api.config.settings import STLConfig
from hsdp_api.exceptions import GraphQLError
from hsdp_api.iam.token import TokenProvider
from hsdp_api.logging_config import get_logger
from hsdp_api.transport.client import BaseClient
from hsdp_api.transport.options import OptionFunc, with_content_type
from hsdp_api.transport.response import Structured

logger = get_logger(__name__)

USER_AGENT = f"hsdp-api-python/stl/{__version__}"


class STLClient(BaseClient):
    """
    STL GraphQL client.

    The GraphQL endpoint is ``config.stl_url`` joined with
    ``config.graphql_path``. No root organization segment is used.

    Example::

        stl = STLClient(provider, STLConfig(stl_url="https://stl.example.org"))
        data = stl.query(
            "query($serial: String!) { device(serialNumber: $serial) { id } }",
            {"serial": "SN-1"},
        )
    """

    def __init__(self, token_provider: TokenProvider, config: STLConfig) -> None:
        super().__init__(
            token_provider,
            base_url=config.stl_url,
            root_org_id=None,
            user_agent=USER_AGENT,
            debug_log=config.debug_log or None,
        )
        self.config = config
        self.graphql_path = config.graphql_path.lstrip("/")
        logger.info("STLClient initialized", region=config.region, environment=config.environment)

    def query(
        self,
        document: str,
        variables: Optional[Dict[str, Any]] = None,
        options: Optional[Iterable[Optional[OptionFunc]]] = None,
    ) -> Dict[str, Any]:
        """
        Run a GraphQL query or mutation and return its ``data`` member.

        Raises:
            GraphQLError: If the response carries a non-empty ``errors`` array
            NonSuccessStatusError: If the HTTP status is outside the success set
        """
        payload = json.dumps({"query": document, "variables": variables or {}}).encode("utf-8")
        opts = [with_content_type("application/json")]
        opts.extend(options or [])

        req = self.new_request("POST", self.graphql_path, payload, opts)
        dest = Structured()
        self.do(req, dest)

        result = dest.value or {}
        if not isinstance(result, dict):
            raise GraphQLError([{"message": "response is not a GraphQL result object"}])
        if result.get("errors"):
            logger.warning("graphql_errors", count=len(result["errors"]))
            raise GraphQLError(result["errors"])
        return result.get("data") or {}

    mutate = query
