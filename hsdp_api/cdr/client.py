"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
hsdp-api, a product of Garudex Labs

Client for the Clinical Data Repository (CDR) FHIR store.

Only FHIR STU3 and newer stores are supported.
"""

from __future__ import annotations

from typing import Optional

from hsdp_api._version import __version__
from hsdp_api.cdr.operations import OperationsSTU3Service
from hsdp_api.cdr.tenant import TenantSTU3Service
from hsdp_api.config.settings import CDRConfig
from hsdp_api.iam.token import TokenProvider
from hsdp_api.logging_config import get_logger
from hsdp_api.transport.client import BaseClient

logger = get_logger(__name__)

API_VERSION = "1"
USER_AGENT = f"hsdp-api-python/cdr/{__version__}"


class CDRClient(BaseClient):
    """
    CDR API client.

    Requests go to ``<fhir store>/<root org>/<path>``. The store URL is
    ``config.fhir_store`` when set, otherwise ``config.cdr_url + "/store/fhir/"``.

    Example::

        provider = StaticTokenProvider(token=access_token)
        with CDRClient(provider, CDRConfig(cdr_url=url, root_org_id=org)) as cdr:
            patient, _ = cdr.operations_stu3.get("Patient/123")

    Raises:
        ConfigurationError: If no usable store URL can be derived
    """

    def __init__(self, token_provider: TokenProvider, config: CDRConfig) -> None:
        super().__init__(
            token_provider,
            base_url=config.store_url,
            root_org_id=config.root_org_id,
            user_agent=USER_AGENT,
            api_version=API_VERSION,
            debug_log=config.debug_log or None,
        )
        self.config = config
        self.operations_stu3 = OperationsSTU3Service(self, time_zone=config.time_zone)
        self.tenant_stu3 = TenantSTU3Service(self, time_zone=config.time_zone)
        logger.info(
            "CDRClient initialized",
            region=config.region,
            environment=config.environment,
            debug=self.debug_enabled,
        )

    @property
    def fhir_store_url(self) -> str:
        return self.base_url

    def set_fhir_store_url(self, url_str: str) -> None:
        self.set_base_url(url_str)

    @property
    def time_zone(self) -> Optional[str]:
        return self.config.time_zone
