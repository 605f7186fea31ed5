"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
hsdp-api, a product of Garudex Labs

hsdp-api - typed clients for HealthSuite platform services

Every service module (CDR FHIR store, STL GraphQL, ...) rides on the shared
transport foundation in ``hsdp_api.transport``: authenticated request
building, execution through the identity session, response classification
and optional debug capture.
"""

from hsdp_api._version import __version__

__all__ = ["__version__"]
