"""Exception hierarchy for identity federation failures.

Each failure mode of the authorization-code flow has its own type so the
callback processor can decide between a plain failure, a forced sign-out,
and a startup abort.
"""

from __future__ import annotations


class FederationError(Exception):
    """Base exception for all federation related errors."""

    pass


class ConfigurationError(FederationError):
    """Raised when required provider settings are missing.

    Fatal at startup: a provider that raises this is never constructed.
    """

    pass


class InputError(FederationError):
    """Raised when a caller passes malformed input to a single call."""

    pass


class ProtocolError(FederationError):
    """Raised when the provider callback violates the expected contract."""

    pass


class AuthorizationDenied(FederationError):
    """Raised when the provider callback carries an explicit error parameter.

    Typically the user declined consent or the provider failed on its side.
    """

    def __init__(self, message: str, provider_error: str):
        super().__init__(message)
        self.provider_error = provider_error


class NetworkError(FederationError):
    """Raised when the provider cannot be reached.

    Wraps the underlying transport error (DNS, timeout, TLS, reset).
    """

    pass


class ProviderResponseError(FederationError):
    """Raised when the provider answers with a non-success status or a body
    that cannot be used.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        missing_fields: tuple[str, ...] = (),
    ):
        super().__init__(message)
        self.status_code = status_code
        self.missing_fields = missing_fields


class SecurityError(FederationError):
    """Raised when the returned state does not match the stored nonce.

    This indicates a possible CSRF attack, a replayed callback or an expired
    authorization attempt.
    """

    pass


class PolicyRejected(FederationError):
    """Raised when a fetched profile fails the local email-domain policy."""

    pass
