"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
hsdp-api, a product of Garudex Labs

HMAC request signing for platform services that accept signed requests.

A signed request carries two headers::

    SignedDate: 2026-01-01T10:00:00.000Z
    hsdp-api-signature: HmacSHA256;Credential:<shared key>;SignedHeaders:SignedDate;Signature:<b64>

where the signature is ``b64(HMAC-SHA256(prefix + secret, b64(SignedDate)))``.
"""

import base64
import hashlib
import hmac
from datetime import datetime, timezone
from typing import Callable, Optional

from hsdp_api.exceptions import ConfigurationError
from hsdp_api.logging_config import get_logger
from hsdp_api.transport.base import Request
from hsdp_api.transport.options import OptionFunc

logger = get_logger(__name__)

DEFAULT_PREFIX = "DHPWS"
SIGNATURE_HEADER = "hsdp-api-signature"
SIGNED_DATE_HEADER = "SignedDate"
ALGORITHM = "HmacSHA256"


def format_signed_date(moment: datetime) -> str:
    """UTC timestamp with millisecond precision and a ``Z`` suffix."""
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


class Signer:
    """
    Signs requests with a shared key / secret key pair.

    Args:
        shared_key: Public credential identifier
        secret_key: Secret used to derive the HMAC
        prefix: Key prefix mixed into the HMAC key
        now: Clock override, mainly for tests

    Raises:
        ConfigurationError: If either key is empty
    """

    def __init__(
        self,
        shared_key: str,
        secret_key: str,
        prefix: str = DEFAULT_PREFIX,
        now: Optional[Callable[[], datetime]] = None,
    ):
        if not shared_key or not secret_key:
            raise ConfigurationError("signer requires both shared_key and secret_key")
        self.shared_key = shared_key
        self._secret_key = secret_key
        self.prefix = prefix
        self._now = now or (lambda: datetime.now(timezone.utc))

    def signature(self, signed_date: str) -> str:
        seed = base64.b64encode(signed_date.encode("utf-8"))
        key = (self.prefix + self._secret_key).encode("utf-8")
        digest = hmac.new(key, seed, hashlib.sha256).digest()
        return base64.b64encode(digest).decode("ascii")

    def sign_request(self, request: Request) -> None:
        signed_date = format_signed_date(self._now())
        request.headers[SIGNED_DATE_HEADER] = signed_date
        request.headers[SIGNATURE_HEADER] = (
            f"{ALGORITHM};Credential:{self.shared_key};"
            f"SignedHeaders:{SIGNED_DATE_HEADER};"
            f"Signature:{self.signature(signed_date)}"
        )
        logger.debug("Signed request", url=request.url)

    def option(self) -> OptionFunc:
        """Signing as a request option."""
        return self.sign_request
