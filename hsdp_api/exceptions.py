"""
Exception hierarchy for hsdp-api.

All custom exceptions inherit from HSDPError base class.

Transport-level failures (connection refused, DNS, TLS, timeouts) are not
wrapped: the ``requests.exceptions.RequestException`` raised by the session
reaches the caller unchanged.
"""


class HSDPError(Exception):
    """Base exception for all hsdp-api errors."""
    pass


# Configuration Errors
class ConfigurationError(HSDPError):
    """Base exception for configuration-related errors."""
    pass


class InvalidConfigurationError(ConfigurationError):
    """Raised when configuration is invalid or malformed."""
    pass


# SDK Errors
class SDKError(HSDPError):
    """Base exception for SDK call errors."""
    pass


class OptionError(SDKError):
    """Raised by an option function that rejects the request being built."""
    pass


class ResponseError(SDKError):
    """Base for errors that still carry the received response."""

    def __init__(self, message: str, response=None):
        super().__init__(message)
        self.response = response

    @property
    def status_code(self):
        if self.response is None:
            return None
        return self.response.status_code


class NonSuccessStatusError(ResponseError):
    """Raised when a response status is outside the success set.

    The wrapped response stays attached as ``err.response`` so callers can
    inspect status, headers and body.
    """

    def __init__(self, response=None):
        status = response.status_code if response is not None else None
        super().__init__(f"non 20x response: status {status}", response)


class DecodeError(ResponseError):
    """Raised when a successful response body cannot be delivered to its destination."""
    pass


class GraphQLError(SDKError):
    """Raised when a GraphQL response carries an ``errors`` array."""

    def __init__(self, errors):
        self.errors = list(errors or [])
        messages = "; ".join(
            str(e.get("message", e)) if isinstance(e, dict) else str(e)
            for e in self.errors
        )
        super().__init__(f"GraphQL request failed: {messages}")
