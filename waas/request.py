"""Handle for asynchronous requests accepted by the WaaS API."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any, Optional

from waas.errors import GeneralError, OperationTimeoutError
from waas.models import RequestStatus, StatusReference
from waas.polling import poll_until

if TYPE_CHECKING:
    from waas.client import WaasClient

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 1.0  # seconds
DEFAULT_WAIT_TIMEOUT = 20.0  # seconds


def extract_request_id(body: Any) -> str:
    """Return the request id from an accepted send-async response.

    The id is the last path segment of ``statusUri``, e.g.
    ``/v1.0/request/a7c1`` -> ``a7c1``.
    """
    status_uri = body.get("statusUri") if isinstance(body, dict) else None
    if not isinstance(status_uri, str) or not status_uri:
        raise GeneralError("Missing statusUri in asynchronous response", body=body)
    reference = StatusReference.model_validate(body)
    request_id = reference.status_uri.split("?", 1)[0].rstrip("/").rsplit("/", 1)[-1]
    if not request_id:
        raise GeneralError(f"Invalid statusUri: {reference.status_uri!r}", body=body)
    return request_id


class Request:
    """Tracks one asynchronous request, e.g. a transaction submitted via send-async.

    The handle keeps no status between calls; each ``get`` is a fresh fetch.
    To re-attach to a request after a restart, construct a handle from the
    stored id::

        req = client.request_handle("a7c1...")
        output = await req.wait(timeout=60)
    """

    def __init__(self, client: "WaasClient", request_id: str) -> None:
        if not isinstance(request_id, str) or not request_id:
            raise ValueError(f"Invalid request id: {request_id!r}")
        self._client = client
        self._id = request_id
        # one outstanding fetch per handle
        self._lock = asyncio.Lock()

    @property
    def id(self) -> str:
        return self._id

    def __repr__(self) -> str:
        return f"Request(id={self._id!r})"

    async def get(self) -> RequestStatus:
        """GET /request/:id -- Fetch the current status once, terminal or not."""
        async with self._lock:
            status = await self._client.request_model(
                RequestStatus, "GET", f"request/{self._id}"
            )
        logger.debug("Request %s is at stage %r", self._id, status.stage)
        return status

    async def wait_status(
        self,
        *,
        interval: float = DEFAULT_POLL_INTERVAL,
        timeout: Optional[float] = DEFAULT_WAIT_TIMEOUT,
    ) -> RequestStatus:
        """Poll until the request reaches a terminal stage and return that snapshot.

        A request that failed remotely is returned like a successful one;
        check ``RequestStatus.is_failed``.

        Args:
            interval: Seconds between the end of one poll and the next.
            timeout: Seconds to wait in total, or None to wait indefinitely.

        Raises:
            OperationTimeoutError: No terminal stage was seen within ``timeout``.
            WaasError: A poll failed; polling is not retried.
        """

        def _timed_out() -> OperationTimeoutError:
            logger.warning("Request %s timed out after %ss", self._id, timeout)
            return OperationTimeoutError(self._id, timeout or 0.0)

        status = await poll_until(
            self.get,
            lambda s: s.is_terminal,
            interval=interval,
            timeout=timeout,
            on_timeout=_timed_out,
        )
        logger.debug(
            "Request %s finished at stage %r (failed=%s)",
            self._id,
            status.stage,
            status.is_failed,
        )
        return status

    async def wait(
        self,
        *,
        interval: float = DEFAULT_POLL_INTERVAL,
        timeout: Optional[float] = DEFAULT_WAIT_TIMEOUT,
    ) -> dict[str, Any]:
        """Poll until the request is terminal and return its ``output``.

        For a request that failed remotely the output describes the failure;
        use ``wait_status`` to tell the two apart.

        Raises:
            GeneralError: The terminal status carries no output.
        """
        status = await self.wait_status(interval=interval, timeout=timeout)
        if status.output is None:
            raise GeneralError(
                f"Request {self._id} reached stage {status.stage!r} without output",
                body=status.model_dump(mode="json"),
            )
        return status.output
