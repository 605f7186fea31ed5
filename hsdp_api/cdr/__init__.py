"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
hsdp-api, a product of Garudex Labs

Clinical Data Repository (CDR) service module.
"""

from hsdp_api.cdr.client import API_VERSION, USER_AGENT, CDRClient
from hsdp_api.cdr.operations import FHIR_JSON_STU3, JSON_PATCH, OperationsSTU3Service
from hsdp_api.cdr.tenant import TenantSTU3Service

__all__ = [
    "API_VERSION",
    "USER_AGENT",
    "FHIR_JSON_STU3",
    "JSON_PATCH",
    "CDRClient",
    "OperationsSTU3Service",
    "TenantSTU3Service",
]
