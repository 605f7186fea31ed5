"""
Identity boundary: bearer token providers consumed by every service client.
"""

from hsdp_api.iam.token import StaticTokenProvider, TokenProvider, build_session

__all__ = [
    "StaticTokenProvider",
    "TokenProvider",
    "build_session",
]
