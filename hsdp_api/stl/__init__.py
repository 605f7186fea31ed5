"""
STL device management service module (GraphQL).
"""

from hsdp_api.stl.client import USER_AGENT, STLClient

__all__ = ["USER_AGENT", "STLClient"]
