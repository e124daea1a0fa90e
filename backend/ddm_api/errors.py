"""Errors raised by the DDM backend client, and message helpers.

The backend reports failures either as an HTTP error status with an
``{"error": "..."}`` body, or as a 200 response whose payload carries
``success: false`` together with ``error``/``message``. The helpers below
pick the most specific text available for either shape.
"""

from __future__ import annotations

from typing import Any


class DDMApiError(Exception):
    """The DDM backend answered with an HTTP error status."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int = 502,
        backend_error: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.backend_error = backend_error


class DDMAuthenticationError(DDMApiError):
    """Credentials were missing or rejected (backend 401)."""

    def __init__(self, message: str = "Authentication required", backend_error: str | None = None) -> None:
        super().__init__(message, status_code=401, backend_error=backend_error)


class DDMConnectionError(DDMApiError):
    """The backend could not be reached or did not answer in time."""

    def __init__(self, message: str, *, status_code: int = 502) -> None:
        super().__init__(message, status_code=status_code)


def _text(value: Any) -> str | None:
    if isinstance(value, str) and value.strip():
        return value
    return None


def backend_error_from_body(body: Any) -> str | None:
    """Return the ``error`` field of a backend JSON body, if any."""
    if isinstance(body, dict):
        return _text(body.get("error"))
    return None


def api_error_message(exc: BaseException, fallback: str = "Request failed") -> str:
    """Best message for a failed call: backend error, then exception text."""
    backend = getattr(exc, "backend_error", None)
    if _text(backend):
        return backend
    message = getattr(exc, "message", None) or str(exc)
    return _text(message) or fallback


def response_error_message(response: Any, fallback: str) -> str:
    """Best message for a non-success payload (dict or response model)."""
    if isinstance(response, dict):
        error, message = response.get("error"), response.get("message")
    else:
        error, message = getattr(response, "error", None), getattr(response, "message", None)
    return _text(error) or _text(message) or fallback
