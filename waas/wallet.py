"""Wallet management calls."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from waas.btc import BtcWallet
from waas.eth import EthWallet
from waas.models import CreateWalletRequest, SoftDeletedWallet, WalletInfo, WalletList

if TYPE_CHECKING:
    from waas.client import WaasClient


class Wallet:
    """Wallet management, optionally bound to a wallet name."""

    def __init__(self, client: "WaasClient", name: Optional[str] = None) -> None:
        if name is not None and not isinstance(name, str):
            raise TypeError(f"Expected wallet name as str, got {type(name).__name__}")
        self._client = client
        self._name = name

    @property
    def client(self) -> "WaasClient":
        return self._client

    @property
    def name(self) -> str:
        """The bound wallet name; raises if the wallet was created without one."""
        if not self._name:
            raise ValueError("Wallet name not set")
        return self._name

    async def list(self, skiptoken: Optional[str] = None) -> WalletList:
        """GET /wallet -- List wallets page by page.

        Args:
            skiptoken: Token of the next page, from a previous ``WalletList``.
        """
        if skiptoken is not None and not isinstance(skiptoken, str):
            raise TypeError(f"Expected skiptoken as str, got {type(skiptoken).__name__}")
        params = {"skiptoken": skiptoken} if skiptoken else None
        return await self._client.request_model(WalletList, "GET", "wallet", params=params)

    async def create(self, name: Optional[str] = None, *, use_hsm: bool = False) -> WalletInfo:
        """POST /wallet -- Create a wallet.

        Args:
            name: Wallet name; the API generates one when omitted.
            use_hsm: Keep the wallet keys in a hardware security module.

        Raises:
            ConflictError: The name is already taken.
        """
        request = CreateWalletRequest(wallet=name, use_hsm=use_hsm)
        return await self._client.request_model(
            WalletInfo,
            "POST",
            "wallet",
            json_body=request.model_dump(exclude_none=True, by_alias=True),
        )

    async def get(self) -> WalletInfo:
        """GET /wallet/:name -- Get wallet details."""
        return await self._client.request_model(WalletInfo, "GET", f"wallet/{self.name}")

    async def delete(self) -> SoftDeletedWallet:
        """DELETE /wallet/:name -- Soft-delete the wallet."""
        return await self._client.request_model(
            SoftDeletedWallet, "DELETE", f"wallet/{self.name}"
        )

    def eth(self) -> EthWallet:
        """Ethereum calls for this wallet."""
        return EthWallet(self._client, self.name)

    def btc(self) -> BtcWallet:
        """Bitcoin calls for this wallet."""
        return BtcWallet(self._client, self.name)
