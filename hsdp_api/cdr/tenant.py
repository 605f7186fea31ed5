"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
hsdp-api, a product of Garudex Labs

Tenant onboarding on a CDR store.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Optional, Tuple
from urllib.parse import quote

from hsdp_api.cdr.operations import OperationsSTU3Service, Options
from hsdp_api.logging_config import get_logger
from hsdp_api.transport.response import Response

if TYPE_CHECKING:
    from hsdp_api.transport.client import BaseClient

logger = get_logger(__name__)


class TenantSTU3Service:
    """Creates and reads the Organization resources that anchor tenants."""

    def __init__(self, client: "BaseClient", time_zone: str = "UTC") -> None:
        self._operations = OperationsSTU3Service(client, time_zone=time_zone)

    def onboard(
        self, organization: Dict[str, Any], options: Options = None
    ) -> Tuple[Optional[Dict[str, Any]], Response]:
        """
        Onboard an organization as a tenant of the store.

        Args:
            organization: FHIR Organization resource with an ``id``

        Raises:
            ValueError: If the resource is not an Organization or has no id
        """
        if organization.get("resourceType") != "Organization":
            raise ValueError("onboarding requires an Organization resource")
        org_id = organization.get("id")
        if not org_id:
            raise ValueError("Organization resource must have an id")

        logger.info("Onboarding tenant organization", organization_id=org_id)
        return self._operations.put(
            f"Organization/{quote(str(org_id), safe='')}", organization, options
        )

    def get_organization(
        self, org_id: str, options: Options = None
    ) -> Tuple[Optional[Dict[str, Any]], Response]:
        if not org_id:
            raise ValueError("org_id is required")
        return self._operations.get(f"Organization/{quote(org_id, safe='')}", options)
