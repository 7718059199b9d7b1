"""0G Compute Network inference demo client."""

from .broker import BridgeBroker, ComputeBroker, create_broker
from .config import DemoConfig
from .errors import (
    BrokerError,
    ConfigError,
    DemoError,
    InferenceError,
    LedgerNotFoundError,
    WalletError,
)
from .retry import RetryOutcome, parse_expected_fee, run_with_retry
from .types import InferenceResult, ServiceMetadata
from .wallet import WalletManager

__version__ = "0.1.0"
__all__ = [
    "BridgeBroker",
    "ComputeBroker",
    "create_broker",
    "DemoConfig",
    "DemoError",
    "ConfigError",
    "WalletError",
    "BrokerError",
    "LedgerNotFoundError",
    "InferenceError",
    "RetryOutcome",
    "parse_expected_fee",
    "run_with_retry",
    "InferenceResult",
    "ServiceMetadata",
    "WalletManager",
]
