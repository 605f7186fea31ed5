"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
hsdp-api, a product of Garudex Labs

Bearer token providers.

Service clients never acquire tokens themselves. They ask a provider for
the current token each time a request is built, and send every request
through the provider's ``requests.Session`` so connection pooling and the
session's retry policy are shared across services.
"""

from abc import ABC, abstractmethod
from typing import Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from hsdp_api.logging_config import get_logger

logger = get_logger(__name__)


class TokenProvider(ABC):
    """Source of the current bearer token and the session to send with."""

    @abstractmethod
    def token(self) -> str:
        """Return the current access token.

        Never raises. An unauthenticated provider returns an empty string and
        the platform answers with a 401, which callers see as a
        ``NonSuccessStatusError``.
        """
        ...

    @property
    @abstractmethod
    def session(self) -> requests.Session:
        """The HTTP session every request is sent through."""
        ...

    def close(self) -> None:
        self.session.close()


def build_session(
    max_retries: int = 3,
    backoff_factor: float = 0.5,
    pool_connections: int = 10,
    pool_maxsize: int = 20,
) -> requests.Session:
    """
    Create a session with connection pooling and retry on transient statuses.

    The final response of an exhausted retry is returned rather than raised,
    so 5xx answers still reach the response classifier.

    Args:
        max_retries: Maximum number of retry attempts (0 disables retries)
        backoff_factor: Backoff factor for exponential retry
        pool_connections: Number of connection pools to cache
        pool_maxsize: Maximum connections kept per pool
    """
    session = requests.Session()

    retry_strategy = Retry(
        total=max_retries,
        backoff_factor=backoff_factor,
        status_forcelist=[429, 500, 502, 503, 504],
        allowed_methods=["HEAD", "GET", "PUT", "DELETE", "OPTIONS", "TRACE"],
        raise_on_status=False,
    )

    adapter = HTTPAdapter(
        max_retries=retry_strategy,
        pool_connections=pool_connections,
        pool_maxsize=pool_maxsize,
    )

    session.mount("http://", adapter)
    session.mount("https://", adapter)
    return session


class StaticTokenProvider(TokenProvider):
    """
    Provider holding an externally obtained token.

    The token can be rotated with :meth:`set_token`; requests built after the
    rotation carry the new value.

    Example::

        provider = StaticTokenProvider(token=access_token)
        cdr = CDRClient(provider, config)
        ...
        provider.set_token(refreshed_token)
    """

    def __init__(
        self,
        token: str = "",
        session: Optional[requests.Session] = None,
        max_retries: int = 3,
        backoff_factor: float = 0.5,
    ) -> None:
        self._token = token or ""
        self._session = session or build_session(
            max_retries=max_retries,
            backoff_factor=backoff_factor,
        )

    def token(self) -> str:
        return self._token

    def set_token(self, token: str) -> None:
        self._token = token or ""
        logger.debug("Access token rotated")

    @property
    def session(self) -> requests.Session:
        return self._session
