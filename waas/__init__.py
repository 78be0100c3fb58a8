"""WaaS Python SDK -- async client for a wallet-as-a-service API."""

from waas.btc import Bitcoin, BtcWallet
from waas.client import WaasClient
from waas.config import (
    BitcoinNetwork,
    BitcoinTxConfirmations,
    BitcoinTxSpeed,
    EthereumPublicNetwork,
    EthereumTxSpeed,
    WaasOptions,
)
from waas.errors import (
    AuthenticationError,
    ConflictError,
    GeneralError,
    NotFoundError,
    OperationTimeoutError,
    WaasError,
    classify_error,
)
from waas.eth import EthContractWallet, EthErc20Wallet, Ethereum, EthWallet
from waas.models import (
    BitcoinTransactionStatus,
    EthereumTransactionStatus,
    RequestStatus,
    Transaction,
    WalletBalance,
    WalletInfo,
    WalletList,
)
from waas.request import Request
from waas.wallet import Wallet

__version__ = "0.1.0"

__all__ = [
    "WaasClient",
    "WaasOptions",
    "Request",
    "RequestStatus",
    "Wallet",
    "Ethereum",
    "EthWallet",
    "EthErc20Wallet",
    "EthContractWallet",
    "Bitcoin",
    "BtcWallet",
    "WaasError",
    "AuthenticationError",
    "NotFoundError",
    "ConflictError",
    "GeneralError",
    "OperationTimeoutError",
    "classify_error",
    "EthereumPublicNetwork",
    "EthereumTxSpeed",
    "BitcoinNetwork",
    "BitcoinTxConfirmations",
    "BitcoinTxSpeed",
    "WalletInfo",
    "WalletList",
    "WalletBalance",
    "Transaction",
    "EthereumTransactionStatus",
    "BitcoinTransactionStatus",
]
