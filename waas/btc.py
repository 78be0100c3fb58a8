"""Bitcoin network and wallet calls."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Optional, Union

from waas.blockchain import BlockchainWallet
from waas.models import (
    BitcoinTransactionEstimation,
    BitcoinTransactionStatus,
    Recipient,
    Transaction,
    WalletBalance,
)
from waas.request import Request

if TYPE_CHECKING:
    from waas.client import WaasClient

RecipientLike = Union[Recipient, dict[str, Any]]


class Bitcoin:
    """Bitcoin network calls, optionally bound to a transaction hash."""

    def __init__(self, client: "WaasClient", tx_hash: Optional[str] = None) -> None:
        if tx_hash is not None and not isinstance(tx_hash, str):
            raise TypeError(f"Expected transaction hash as str, got {type(tx_hash).__name__}")
        self._client = client
        self._tx_hash = tx_hash

    @property
    def tx_hash(self) -> str:
        if not self._tx_hash:
            raise ValueError("Transaction hash not set")
        return self._tx_hash

    async def get(self) -> BitcoinTransactionStatus:
        """GET /btc/transaction/:hash -- Get the transaction status."""
        return await self._client.request_model(
            BitcoinTransactionStatus, "GET", f"btc/transaction/{self.tx_hash}"
        )


def _recipients_payload(recipients: Union[RecipientLike, list[RecipientLike]]) -> dict[str, Any]:
    if not isinstance(recipients, list):
        recipients = [recipients]
    if not recipients:
        raise ValueError("At least one recipient is required")
    return {
        "list": [Recipient.model_validate(r).model_dump() for r in recipients],
    }


class BtcWallet(BlockchainWallet):
    """Bitcoin transfers from one wallet; a transaction may pay several recipients."""

    async def get(self) -> WalletBalance:
        """GET /btc/wallet/:wallet -- Get the Bitcoin balance."""
        return await self._client.request_model(WalletBalance, "GET", f"btc/wallet/{self.wallet}")

    async def send(self, recipients: Union[RecipientLike, list[RecipientLike]]) -> Transaction:
        """POST /btc/wallet/:wallet/send -- Send Bitcoin to one or more recipients."""
        return await self._client.request_model(
            Transaction,
            "POST",
            f"btc/wallet/{self.wallet}/send",
            json_body=_recipients_payload(recipients),
        )

    async def send_async(self, recipients: Union[RecipientLike, list[RecipientLike]]) -> Request:
        """POST /btc/wallet/:wallet/send-async -- Submit a transfer without waiting."""
        return await self._submit_async(
            f"btc/wallet/{self.wallet}/send-async", _recipients_payload(recipients)
        )

    async def estimate_fee(
        self, recipients: Union[RecipientLike, list[RecipientLike]]
    ) -> BitcoinTransactionEstimation:
        """POST /btc/wallet/:wallet/estimate-fee -- Estimate the fee of a transfer."""
        return await self._client.request_model(
            BitcoinTransactionEstimation,
            "POST",
            f"btc/wallet/{self.wallet}/estimate-fee",
            json_body=_recipients_payload(recipients),
        )
