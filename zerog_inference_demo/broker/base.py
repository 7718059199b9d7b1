"""
Broker interface.

The 0G serving broker owns ledger accounting, request signing and
settlement. The demo only ever talks to it through this interface, so the
retry logic can run against an in-memory fake.
"""

from abc import ABC, abstractmethod
from typing import Dict, List

from ..types import LedgerInfo, ServiceInfo, ServiceMetadata


class ComputeBroker(ABC):
    """Operations of the 0G compute network broker used by the demo."""

    @abstractmethod
    def get_ledger(self) -> LedgerInfo:
        """
        Return the ledger account of the current wallet.

        Raises:
            BrokerError: If the ledger does not exist or cannot be read
        """

    @abstractmethod
    def add_ledger(self, amount: float) -> None:
        """Create the ledger account funded with ``amount`` A0GI."""

    @abstractmethod
    def list_services(self) -> List[ServiceInfo]:
        """List the inference services registered on the network."""

    @abstractmethod
    def get_service_metadata(self, provider_address: str) -> ServiceMetadata:
        """Return the endpoint and model served by ``provider_address``."""

    @abstractmethod
    def get_request_headers(self, provider_address: str, content: str) -> Dict[str, str]:
        """
        Generate billing/authorization headers for one request.

        Headers are single-use; callers must ask for new ones per request.
        """

    @abstractmethod
    def settle_fee(self, provider_address: str, fee: float) -> None:
        """Settle an outstanding fee of ``fee`` A0GI with the provider."""
