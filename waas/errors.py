"""WaaS error types and the classifier that maps failed exchanges onto them."""

from __future__ import annotations

import json
from typing import Any, Optional

import httpx


class WaasError(Exception):
    """Base class for every error raised by the WaaS client."""

    def __init__(self, message: str = "", status_code: int = 0) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def __repr__(self) -> str:
        return f"{type(self).__name__}(message={self.message!r}, status_code={self.status_code})"


class AuthenticationError(WaasError):
    """Credentials were rejected (HTTP 401) or are missing."""

    def __init__(self, message: str = "") -> None:
        super().__init__(message, status_code=401)


class NotFoundError(WaasError):
    """The referenced wallet, transaction or request does not exist (HTTP 404)."""

    def __init__(self, message: str = "") -> None:
        super().__init__(message, status_code=404)


class ConflictError(WaasError):
    """Naming or state conflict, e.g. an occupied wallet name (HTTP 409)."""

    def __init__(self, message: str = "") -> None:
        super().__init__(message, status_code=409)


class GeneralError(WaasError):
    """Any other failure, including exchanges that produced no response.

    ``status_code`` is 0 when the request never got a response.
    ``activity_id`` is the server-assigned correlation id, quote it when
    contacting support.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 0,
        activity_id: Optional[str] = None,
        body: Any = None,
    ) -> None:
        super().__init__(message, status_code=status_code)
        self.activity_id = activity_id
        self.body = body

    def __repr__(self) -> str:
        return (
            f"GeneralError(message={self.message!r}, status_code={self.status_code}, "
            f"activity_id={self.activity_id!r})"
        )


class OperationTimeoutError(WaasError):
    """An asynchronous request did not reach a terminal stage in time."""

    def __init__(self, request_id: str, timeout: float) -> None:
        super().__init__(
            f"Asynchronous request {request_id!r} did not complete within {timeout}s"
        )
        self.request_id = request_id
        self.timeout = timeout


def _body_field(body: Any, key: str) -> Any:
    if isinstance(body, dict):
        return body.get(key)
    return None


def _body_text(body: Any) -> str:
    if body is None:
        return ""
    if isinstance(body, (dict, list)):
        return json.dumps(body)
    return str(body)


def classify_error(status_code: int, body: Any) -> WaasError:
    """Map a failed HTTP exchange onto exactly one typed error.

    The error is returned, not raised, so the caller decides where the
    traceback starts.
    """
    message = _body_field(body, "message")
    if status_code == 401:
        error: WaasError = AuthenticationError(message or "")
    elif status_code == 404:
        error = NotFoundError(message or "")
    elif status_code == 409:
        error = ConflictError(message or "")
    else:
        if message is None:
            message = _body_text(body)
        error = GeneralError(
            str(message),
            status_code=status_code,
            activity_id=_body_field(body, "activityId"),
            body=body,
        )
    return error


def classify_transport_error(exc: httpx.RequestError) -> GeneralError:
    """Wrap a body-less transport failure (refused, timed out, ...)."""
    return GeneralError(str(exc) or type(exc).__name__, status_code=0)
