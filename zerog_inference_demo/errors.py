"""Exception types raised by the 0G inference demo client."""

from typing import Optional


class DemoError(Exception):
    """Base class for every error raised by this package."""


class ConfigError(DemoError):
    """Raised when environment configuration cannot be parsed."""


class WalletError(DemoError):
    """Raised when the signing wallet cannot be created."""


class BrokerError(DemoError):
    """
    Raised when a broker operation fails.

    Covers transport failures, non-2xx bridge responses and bodies that
    are not valid JSON.
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class LedgerNotFoundError(BrokerError):
    """Raised when the wallet has no ledger account on the broker yet."""


class InferenceError(DemoError):
    """Raised when a provider returns a body that is not a JSON object."""
