"""Security primitives for the authorization-code flow.

Provides state nonce generation and comparison, return-URL checks and
sanitizing of provider-supplied text before it reaches the user.
"""

from __future__ import annotations

import re
import secrets
import string
from urllib.parse import urlparse

from fedauth.models.errors import SecurityError

MAX_ALERT_TEXT_LENGTH = 200

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")
_WHITESPACE = re.compile(r"\s+")


def generate_state() -> str:
    """Generate a cryptographically secure state nonce.

    Returns:
        32 characters drawn from the URL-safe unreserved alphabet
    """
    alphabet = string.ascii_letters + string.digits + "-._~"
    return "".join(secrets.choice(alphabet) for _ in range(32))


def validate_state(expected: str | None, actual: str | None) -> None:
    """Validate that the callback state matches the stored nonce.

    Raises:
        SecurityError: If either value is missing or they differ
    """
    if not expected:
        raise SecurityError("No stored authorization state for this callback")
    if not actual:
        raise SecurityError("Callback missing required state parameter")
    if not secrets.compare_digest(expected.encode(), actual.encode()):
        raise SecurityError("State parameter mismatch - possible CSRF attack")


def is_local_redirect(target: str | None) -> bool:
    """Check that a return URL stays on this application.

    Only absolute paths are accepted; scheme-relative (``//host``) and
    absolute URLs are refused.
    """
    if not target or not target.startswith("/") or target.startswith("//"):
        return False
    if "\\" in target:
        return False
    parsed = urlparse(target)
    return not parsed.scheme and not parsed.netloc


def sanitize_provider_message(text: str | None) -> str:
    """Make provider-supplied error text safe to show to a user."""
    if not text:
        return "unknown error"
    cleaned = _CONTROL_CHARS.sub(" ", text)
    cleaned = _WHITESPACE.sub(" ", cleaned).strip()
    if len(cleaned) > MAX_ALERT_TEXT_LENGTH:
        cleaned = cleaned[: MAX_ALERT_TEXT_LENGTH - 3].rstrip() + "..."
    return cleaned or "unknown error"
