"""Pydantic v2 models for WaaS API request/response data."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field

# Stage vocabulary of asynchronous requests, compared case-insensitively.
PENDING_STAGES = frozenset({"pending", "processing", "running", "queued", "unknown"})
SUCCESS_STAGES = frozenset({"completed", "confirmed", "succeeded", "success"})
ERROR_STAGES = frozenset({"error", "errored", "failed", "failure"})
TERMINAL_STAGES = SUCCESS_STAGES | ERROR_STAGES


# ---------------------------------------------------------------------------
# Asynchronous request models
# ---------------------------------------------------------------------------


class StatusReference(BaseModel):
    """Response of an accepted asynchronous submission (202)."""

    status_uri: str = Field(alias="statusUri")

    model_config = {"populate_by_name": True}


class RequestStage(BaseModel):
    """The ``status`` object of a request: its stage plus free-form string fields."""

    stage: str

    model_config = {"extra": "allow"}


class RequestStatus(BaseModel):
    """Point-in-time snapshot of an asynchronous request (GET /request/:id)."""

    process: Optional[str] = None
    status: RequestStage
    created: Optional[datetime] = None
    updated: Optional[datetime] = None
    output: Optional[dict[str, Any]] = None

    @property
    def stage(self) -> str:
        return self.status.stage

    @property
    def is_terminal(self) -> bool:
        """True once no further state change can happen.

        Unknown stage names fall back to the presence of ``output``.
        """
        stage = self.stage.lower()
        if stage in TERMINAL_STAGES:
            return True
        if stage in PENDING_STAGES:
            return False
        return self.output is not None

    @property
    def is_failed(self) -> bool:
        """True if the operation itself finished with an error."""
        return self.stage.lower() in ERROR_STAGES


# ---------------------------------------------------------------------------
# Wallet models
# ---------------------------------------------------------------------------


class WalletInfo(BaseModel):
    wallet: str
    security: str
    updated: Optional[datetime] = None
    created: Optional[datetime] = None
    version: str


class WalletList(BaseModel):
    """Response from GET /wallet."""

    wallets: list[WalletInfo] = Field(alias="list")
    skiptoken: Optional[str] = None

    model_config = {"populate_by_name": True}


class CreateWalletRequest(BaseModel):
    """Request body for POST /wallet."""

    wallet: Optional[str] = None
    use_hsm: bool = Field(default=False, alias="useHsm")

    model_config = {"populate_by_name": True}


class SoftDeletedWallet(BaseModel):
    """Response from DELETE /wallet/:name."""

    recovery_id: str = Field(alias="recoveryId")
    scheduled_purge_date: str = Field(alias="scheduledPurgeDate")

    model_config = {"populate_by_name": True}


class WalletBalance(BaseModel):
    address: str
    balance: str
    currency: str


class TokenBalance(BaseModel):
    balance: str
    currency: str


# ---------------------------------------------------------------------------
# Transaction models
# ---------------------------------------------------------------------------


class Recipient(BaseModel):
    """Transaction recipient; ``amount`` is a float currency amount as string."""

    to: str
    amount: str


class EthereumRecipient(Recipient):
    data: Optional[str] = None


class ContractMethod(BaseModel):
    """Configuration of a smart contract method call."""

    function: str
    inputs: list[str] = Field(default_factory=list)


class Transaction(BaseModel):
    hash: str


class EthereumTransactionStatus(BaseModel):
    """Response from GET /eth/transaction/:hash."""

    is_error: bool = Field(default=False, alias="isError")
    block_nr: Optional[int] = Field(default=None, alias="blockNr")
    status: str
    confirmations: Optional[int] = None
    data: Optional[str] = None

    model_config = {"populate_by_name": True}


class BitcoinTransactionStatus(BaseModel):
    """Response from GET /btc/transaction/:hash."""

    status: str
    confirmations: Optional[int] = None
    block_nr: Optional[int] = Field(default=None, alias="blockNr")

    model_config = {"populate_by_name": True}


class EthereumTransactionEstimation(BaseModel):
    gas: str
    gas_price: str = Field(alias="gasPrice")
    fee: str

    model_config = {"populate_by_name": True}


class BitcoinTransactionEstimation(BaseModel):
    fee: str
    fee_rate: float = Field(alias="feeRate")

    model_config = {"populate_by_name": True}
