"""WaaS async HTTP client for wallet and transaction operations."""

from __future__ import annotations

import logging
from typing import Any, Optional, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from waas.btc import Bitcoin
from waas.config import WaasOptions
from waas.errors import AuthenticationError, GeneralError, classify_error, classify_transport_error
from waas.eth import Ethereum
from waas.request import Request
from waas.wallet import Wallet

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

_REQUIRED_CREDENTIALS = ("client_id", "client_secret", "subscription")


class WaasClient:
    """Async client for the WaaS REST API.

    Usage:
        async with WaasClient(client_id="...", client_secret="...", subscription="...") as client:
            req = await client.wallet("my-wallet").eth().send_async(to="0x...", amount="0.1")
            output = await req.wait()
            print(output["hash"])

    Options omitted from the arguments are read from ``TANGANY_*``
    environment variables.
    """

    def __init__(
        self,
        options: Optional[WaasOptions] = None,
        *,
        http_client: Optional[httpx.AsyncClient] = None,
        **overrides: Any,
    ) -> None:
        if options is None:
            options = WaasOptions(**overrides)
        elif overrides:
            options = WaasOptions.model_validate({**options.model_dump(), **overrides})

        for name in _REQUIRED_CREDENTIALS:
            if not getattr(options, name):
                raise AuthenticationError(f"Missing variable '{name}'")

        self._options = options
        self._owns_client = http_client is None
        if http_client is None:
            self._client = httpx.AsyncClient(
                base_url=options.base_url,
                timeout=options.timeout,
                headers=options.headers(),
            )
        else:
            self._client = http_client
            self._client.headers.update(options.headers())

    @property
    def options(self) -> WaasOptions:
        return self._options

    @property
    def http_client(self) -> httpx.AsyncClient:
        """The preconfigured httpx client, for arbitrary API calls."""
        return self._client

    async def __aenter__(self) -> "WaasClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._owns_client:
            await self._client.aclose()

    # -----------------------------------------------------------------
    # Transport
    # -----------------------------------------------------------------

    async def request(
        self,
        method: str,
        path: str,
        *,
        json_body: Optional[Any] = None,
        params: Optional[dict[str, Any]] = None,
    ) -> Any:
        """Make an HTTP request and return the parsed JSON body.

        Every failure is raised as one of the typed ``WaasError`` kinds.
        Nothing is retried.

        Returns:
            The decoded JSON body, or None for an empty body.
        """
        _, body = await self._exchange(method, path, json_body=json_body, params=params)
        return body

    async def request_model(
        self,
        model: type[M],
        method: str,
        path: str,
        *,
        json_body: Optional[Any] = None,
        params: Optional[dict[str, Any]] = None,
    ) -> M:
        """Make an HTTP request and validate the JSON body as ``model``.

        Raises:
            GeneralError: The body does not match ``model``; carries the
                response status code and the raw body.
        """
        status_code, body = await self._exchange(
            method, path, json_body=json_body, params=params
        )
        try:
            return model.model_validate(body)
        except ValidationError as exc:
            logger.debug("%s %s returned an invalid %s body", method, path, model.__name__)
            raise GeneralError(
                "Invalid response body", status_code=status_code, body=body
            ) from exc

    async def _exchange(
        self,
        method: str,
        path: str,
        *,
        json_body: Optional[Any] = None,
        params: Optional[dict[str, Any]] = None,
    ) -> tuple[int, Any]:
        logger.debug("%s %s", method, path)
        try:
            response = await self._client.request(method, path, json=json_body, params=params)
        except httpx.RequestError as exc:
            logger.debug("%s %s failed without response: %r", method, path, exc)
            raise classify_transport_error(exc) from exc
        logger.debug("%s %s -> %s", method, path, response.status_code)

        if response.status_code >= 400:
            try:
                body = response.json()
            except ValueError:
                body = response.text or None
            error = classify_error(response.status_code, body)
            logger.debug(
                "%s %s raised %s (activity_id=%s)",
                method,
                path,
                type(error).__name__,
                getattr(error, "activity_id", None),
            )
            raise error

        if not response.content:
            return response.status_code, None
        try:
            return response.status_code, response.json()
        except ValueError as exc:
            raise GeneralError(
                "Invalid JSON in response", status_code=response.status_code, body=response.text
            ) from exc

    # -----------------------------------------------------------------
    # API namespaces
    # -----------------------------------------------------------------

    def wallet(self, name: Optional[str] = None) -> Wallet:
        """Wallet management calls, optionally bound to a wallet name."""
        return Wallet(self, name)

    def eth(self, tx_hash: Optional[str] = None) -> Ethereum:
        """Ethereum network calls, optionally bound to a transaction hash."""
        return Ethereum(self, tx_hash)

    def btc(self, tx_hash: Optional[str] = None) -> Bitcoin:
        """Bitcoin network calls, optionally bound to a transaction hash."""
        return Bitcoin(self, tx_hash)

    def request_handle(self, request_id: str) -> Request:
        """Attach to an asynchronous request by its id."""
        return Request(self, request_id)
