"""Helpers for reading provider HTTP responses."""

from __future__ import annotations

from typing import Any

import httpx

from fedauth.models.errors import ProviderResponseError


def describe_error_response(response: httpx.Response) -> str:
    """Summarize a non-success response for logs and error messages."""
    description = f"Response Status: {response.status_code} {response.reason_phrase}"
    try:
        body = response.json()
    except ValueError:
        return description

    if isinstance(body, dict) and body.get("error"):
        error = body["error"]
        # Google nests the error object for API (non-OAuth) endpoints
        if isinstance(error, dict):
            error = error.get("message") or error.get("status")
        detail = body.get("error_description")
        description += f". Error: {error}"
        if detail:
            description += f" ({detail})"
    return description


def parse_json_object(response: httpx.Response, context: str) -> dict[str, Any]:
    """Parse a 200 response body into a JSON object.

    Raises:
        ProviderResponseError: If the body is not a JSON object
    """
    try:
        body = response.json()
    except ValueError as e:
        raise ProviderResponseError(
            f"{context} response is not valid JSON: {e}",
            status_code=response.status_code,
        ) from e

    if not isinstance(body, dict):
        raise ProviderResponseError(
            f"{context} response is not a JSON object",
            status_code=response.status_code,
        )
    return body
