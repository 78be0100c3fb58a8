"""Client options, loadable from keyword arguments or TANGANY_* environment variables."""

from __future__ import annotations

from enum import Enum
from typing import Optional, Union

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_BASE_URL = "https://api.tangany.com/v1"
DEFAULT_TIMEOUT = 20.0  # seconds


class EthereumPublicNetwork(str, Enum):
    MAINNET = "mainnet"
    ROPSTEN = "ropsten"


class EthereumTxSpeed(str, Enum):
    DEFAULT = "default"
    FAST = "fast"
    SLOW = "slow"
    NONE = "none"


class BitcoinNetwork(str, Enum):
    BITCOIN = "bitcoin"
    TESTNET = "testnet"


class BitcoinTxConfirmations(str, Enum):
    NONE = "none"
    DEFAULT = "default"
    SECURE = "secure"


class BitcoinTxSpeed(str, Enum):
    SLOW = "slow"
    DEFAULT = "default"
    FAST = "fast"


class WaasOptions(BaseSettings):
    """Subscription credentials and per-client network settings.

    Missing credentials are not rejected here; ``WaasClient`` raises
    ``AuthenticationError`` for them so the failure carries a typed error.
    """

    client_id: str = ""
    client_secret: str = Field(default="", repr=False)
    subscription: str = ""
    vault_url: Optional[str] = None
    # public network name or the url of a private network
    ethereum_network: Optional[Union[EthereumPublicNetwork, str]] = None
    ethereum_tx_speed: Optional[EthereumTxSpeed] = None
    bitcoin_network: Optional[BitcoinNetwork] = None
    bitcoin_tx_confirmations: Optional[BitcoinTxConfirmations] = None
    bitcoin_tx_speed: Optional[BitcoinTxSpeed] = None
    bitcoin_max_fee_rate: Optional[int] = None  # satoshi per byte
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT

    model_config = SettingsConfigDict(
        env_prefix="TANGANY_",
        use_enum_values=True,
        extra="ignore",
    )

    def headers(self) -> dict[str, str]:
        """Build the request headers carried by every API call."""
        headers = {
            "Accept": "application/json",
            "tangany-client-id": self.client_id,
            "tangany-client-secret": self.client_secret,
            "tangany-subscription": self.subscription,
        }
        optional = {
            "tangany-vault-url": self.vault_url,
            "tangany-ethereum-network": self.ethereum_network,
            "tangany-ethereum-tx-speed": self.ethereum_tx_speed,
            "tangany-bitcoin-network": self.bitcoin_network,
            "tangany-bitcoin-tx-speed": self.bitcoin_tx_speed,
            "tangany-bitcoin-tx-confirmations": self.bitcoin_tx_confirmations,
            "tangany-bitcoin-max-fee-rate": self.bitcoin_max_fee_rate,
        }
        for name, value in optional.items():
            if value is not None:
                headers[name] = str(value)
        return headers
