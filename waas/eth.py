"""Ethereum network, wallet, ERC20 token and smart contract calls."""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional

from waas.blockchain import BlockchainWallet
from waas.errors import OperationTimeoutError
from waas.models import (
    ContractMethod,
    EthereumRecipient,
    EthereumTransactionEstimation,
    EthereumTransactionStatus,
    TokenBalance,
    Transaction,
    WalletBalance,
)
from waas.polling import poll_until
from waas.request import DEFAULT_POLL_INTERVAL, DEFAULT_WAIT_TIMEOUT, Request

if TYPE_CHECKING:
    from waas.client import WaasClient

logger = logging.getLogger(__name__)

# Ethereum transaction states that may still change
UNSETTLED_TX_STATES = frozenset({"pending", "unknown"})


class Ethereum:
    """Ethereum network calls, optionally bound to a transaction hash."""

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

    async def get(self) -> EthereumTransactionStatus:
        """GET /eth/transaction/:hash -- Get the transaction status."""
        return await self._client.request_model(
            EthereumTransactionStatus, "GET", f"eth/transaction/{self.tx_hash}"
        )

    async def wait(
        self,
        *,
        interval: float = DEFAULT_POLL_INTERVAL,
        timeout: Optional[float] = DEFAULT_WAIT_TIMEOUT,
    ) -> EthereumTransactionStatus:
        """Poll the transaction until it is mined or rejected.

        Raises:
            OperationTimeoutError: The transaction was still pending at ``timeout``.
        """
        tx_hash = self.tx_hash

        def _timed_out() -> OperationTimeoutError:
            logger.warning("Transaction %s still pending after %ss", tx_hash, timeout)
            return OperationTimeoutError(tx_hash, timeout or 0.0)

        return await poll_until(
            self.get,
            lambda s: s.status.lower() not in UNSETTLED_TX_STATES,
            interval=interval,
            timeout=timeout,
            on_timeout=_timed_out,
        )


class EthWallet(BlockchainWallet):
    """Ether transfers from one wallet."""

    async def get(self) -> WalletBalance:
        """GET /eth/wallet/:wallet -- Get the Ether balance."""
        return await self._client.request_model(WalletBalance, "GET", f"eth/wallet/{self.wallet}")

    async def send(self, to: str, amount: str, *, data: Optional[str] = None) -> Transaction:
        """POST /eth/wallet/:wallet/send -- Send Ether and wait for the hash.

        Args:
            to: Recipient address.
            amount: Float Ether amount formatted as a string.
            data: Optional transaction data payload.
        """
        return await self._client.request_model(
            Transaction,
            "POST",
            f"eth/wallet/{self.wallet}/send",
            json_body=_recipient(to, amount, data),
        )

    async def send_async(self, to: str, amount: str, *, data: Optional[str] = None) -> Request:
        """POST /eth/wallet/:wallet/send-async -- Submit a transfer without waiting.

        Returns:
            Request handle tracking the submission; its output carries the hash.
        """
        return await self._submit_async(
            f"eth/wallet/{self.wallet}/send-async", _recipient(to, amount, data)
        )

    async def estimate_fee(
        self, to: str, amount: str, *, data: Optional[str] = None
    ) -> EthereumTransactionEstimation:
        """POST /eth/wallet/:wallet/estimate-fee -- Estimate gas and fee for a transfer."""
        return await self._client.request_model(
            EthereumTransactionEstimation,
            "POST",
            f"eth/wallet/{self.wallet}/estimate-fee",
            json_body=_recipient(to, amount, data),
        )

    def erc20(self, token_address: str) -> "EthErc20Wallet":
        """ERC20 calls for the token contract at ``token_address``."""
        return EthErc20Wallet(self._client, self.wallet, token_address)

    def contract(self, address: str) -> "EthContractWallet":
        """Smart contract calls for the contract at ``address``."""
        return EthContractWallet(self._client, self.wallet, address)


def _recipient(to: str, amount: str, data: Optional[str]) -> dict[str, Any]:
    recipient = EthereumRecipient(to=to, amount=amount, data=data)
    return recipient.model_dump(exclude_none=True)


class Erc20Method(str, Enum):
    TRANSFER = "transfer"
    APPROVE = "approve"
    TRANSFER_FROM = "transferFrom"
    BURN = "burn"
    MINT = "mint"


def erc20_payload(
    method: Erc20Method,
    *,
    to: Optional[str] = None,
    amount: Optional[str] = None,
    from_: Optional[str] = None,
) -> dict[str, str]:
    """Validate the arguments of an ERC20 method and build its request body.

    Raises:
        ValueError: A required argument is missing or a forbidden one is given.
    """
    if not amount:
        raise ValueError("Missing 'amount' argument")
    if method in (Erc20Method.TRANSFER, Erc20Method.APPROVE):
        required, forbidden = ("to",), ("from",)
    elif method is Erc20Method.TRANSFER_FROM:
        required, forbidden = ("from",), ("to",)
    elif method is Erc20Method.BURN:
        required, forbidden = (), ("to", "from")
    else:
        required, forbidden = (), ("from",)

    given = {"to": to, "from": from_}
    for name in required:
        if not given[name]:
            raise ValueError(f"Missing '{name}' argument")
    for name in forbidden:
        if given[name]:
            raise ValueError(f"Invalid '{name}' argument")

    payload = {name: value for name, value in given.items() if value}
    for name, value in payload.items():
        if not isinstance(value, str):
            raise TypeError(f"Expected '{name}' as str, got {type(value).__name__}")
    if not isinstance(amount, str):
        raise TypeError(f"Expected 'amount' as str, got {type(amount).__name__}")
    payload["amount"] = amount
    return payload


class EthErc20Wallet(BlockchainWallet):
    """ERC20 token operations of one wallet on one token contract."""

    def __init__(self, client: "WaasClient", wallet: str, address: str) -> None:
        super().__init__(client, wallet)
        if not isinstance(address, str) or not address:
            raise ValueError("Missing token address")
        self.address = address

    @property
    def _base_path(self) -> str:
        return f"eth/erc20/{self.address}/{self.wallet}"

    async def _post(self, operation: str, payload: dict[str, str]) -> Transaction:
        return await self._client.request_model(
            Transaction, "POST", f"{self._base_path}/{operation}", json_body=payload
        )

    async def get(self) -> TokenBalance:
        """GET /eth/erc20/:token/:wallet -- Get the token balance."""
        return await self._client.request_model(TokenBalance, "GET", self._base_path)

    async def send(self, to: str, amount: str) -> Transaction:
        """Transfer tokens to an Ethereum address."""
        return await self._post("send", erc20_payload(Erc20Method.TRANSFER, to=to, amount=amount))

    async def approve(self, to: str, amount: str) -> Transaction:
        """Allow ``to`` to withdraw up to ``amount`` tokens via ``transfer_from``."""
        return await self._post("approve", erc20_payload(Erc20Method.APPROVE, to=to, amount=amount))

    async def transfer_from(self, from_: str, amount: str) -> Transaction:
        """Withdraw pre-approved tokens from ``from_``; fails without a prior approval."""
        return await self._post(
            "transfer-from", erc20_payload(Erc20Method.TRANSFER_FROM, from_=from_, amount=amount)
        )

    async def burn(self, amount: str) -> Transaction:
        """Destroy ``amount`` tokens held by the wallet."""
        return await self._post("burn", erc20_payload(Erc20Method.BURN, amount=amount))

    async def mint(self, amount: str, to: Optional[str] = None) -> Transaction:
        """Mint tokens to ``to``, or to the wallet itself; the wallet must be a minter."""
        return await self._post("mint", erc20_payload(Erc20Method.MINT, to=to, amount=amount))


class EthContractWallet(BlockchainWallet):
    """Calls to known methods of an arbitrary smart contract."""

    def __init__(self, client: "WaasClient", wallet: str, address: str) -> None:
        super().__init__(client, wallet)
        if not isinstance(address, str) or not address:
            raise ValueError("Missing contract address")
        self.address = address

    async def send_async(self, function: str, inputs: Optional[list[str]] = None) -> Request:
        """POST /eth/contract/:address/:wallet/send-async -- Execute a contract method.

        Args:
            function: Method signature, e.g. ``"transfer(address,uint256)"``.
            inputs: Method arguments formatted as strings.
        """
        method = ContractMethod(function=function, inputs=inputs or [])
        return await self._submit_async(
            f"eth/contract/{self.address}/{self.wallet}/send-async", method.model_dump()
        )

    async def estimate_fee(
        self, function: str, inputs: Optional[list[str]] = None
    ) -> EthereumTransactionEstimation:
        """Estimate the fee of a contract method call.

        The estimate follows current network utilisation and may differ from
        the fee actually paid.
        """
        method = ContractMethod(function=function, inputs=inputs or [])
        return await self._client.request_model(
            EthereumTransactionEstimation,
            "POST",
            f"eth/contract/{self.address}/{self.wallet}/estimate-fee",
            json_body=method.model_dump(),
        )
