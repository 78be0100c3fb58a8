"""Shared base for wallet-bound blockchain interfaces."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from waas.request import Request, extract_request_id

if TYPE_CHECKING:
    from waas.client import WaasClient


class BlockchainWallet:
    """A wallet on one blockchain (or one token contract on it)."""

    def __init__(self, client: "WaasClient", wallet: str) -> None:
        if not isinstance(wallet, str) or not wallet:
            raise ValueError("Wallet name not set")
        self._client = client
        self._wallet = wallet

    @property
    def wallet(self) -> str:
        return self._wallet

    async def _submit_async(self, path: str, json_body: Any) -> Request:
        """POST an asynchronous operation and return a handle to track it."""
        body = await self._client.request("POST", path, json_body=json_body)
        return Request(self._client, extract_request_id(body))
