"""
0G broker bridge client.

The official 0G serving broker is a TypeScript SDK. The demo reaches it
through a small Node.js bridge service that wraps the SDK and exposes each
broker operation as a JSON endpoint:

    GET  /health            liveness probe
    GET  /balance           ledger.getLedger()
    POST /add-funds         ledger.addLedger(amount)
    GET  /services          inference.listService()
    POST /get-metadata      inference.getServiceMetadata(provider)
    POST /request-headers   inference.getRequestHeaders(provider, content)
    POST /settle-fee        inference.settleFee(provider, fee)

Every call is signed by the demo wallet so the bridge can check it is
acting for the right account.
"""

import time
from typing import Any, Dict, List, Optional

import requests
from loguru import logger
from pydantic import ValidationError

from ..config import DemoConfig
from ..errors import BrokerError, LedgerNotFoundError
from ..types import LedgerInfo, ServiceInfo, ServiceMetadata
from ..wallet import WalletManager
from .base import ComputeBroker


class BridgeBroker(ComputeBroker):
    """ComputeBroker backed by the HTTP bridge around the 0G TypeScript SDK."""

    def __init__(
        self,
        wallet: WalletManager,
        bridge_url: str,
        timeout: float = 120,
        session: Optional[requests.Session] = None
    ):
        """
        Args:
            wallet: Wallet used to sign bridge calls
            bridge_url: Base URL of the bridge service
            timeout: Per-call timeout in seconds
            session: requests-compatible session (mainly for tests)
        """
        self.wallet = wallet
        self.bridge_url = bridge_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()

    def _auth_headers(self) -> Dict[str, str]:
        timestamp = str(int(time.time()))
        message = f"0g-bridge:{self.wallet.address}:{timestamp}"
        return {
            "X-Wallet-Address": self.wallet.address,
            "X-Wallet-Timestamp": timestamp,
            "X-Wallet-Signature": self.wallet.sign_message(message),
        }

    def _request(self, method: str, path: str, payload: Optional[Dict[str, Any]] = None) -> Any:
        url = f"{self.bridge_url}{path}"
        logger.debug(f"Bridge {method} {url}")

        try:
            response = self._session.request(
                method,
                url,
                json=payload,
                headers=self._auth_headers(),
                timeout=self.timeout
            )
        except requests.RequestException as e:
            raise BrokerError(f"Bridge call {method} {path} failed: {e}") from e

        if response.status_code == 404 and path == "/balance":
            raise LedgerNotFoundError("No ledger account exists for this wallet", 404)
        if not 200 <= response.status_code < 300:
            raise BrokerError(
                f"Bridge call {method} {path} returned {response.status_code}: {response.text}",
                response.status_code
            )

        try:
            return response.json()
        except ValueError as e:
            raise BrokerError(f"Bridge call {method} {path} returned invalid JSON") from e

    def health(self) -> bool:
        """Check whether the bridge service is reachable."""
        try:
            response = self._session.get(f"{self.bridge_url}/health", timeout=2)
        except requests.RequestException:
            return False
        return response.status_code == 200

    def get_ledger(self) -> LedgerInfo:
        data = self._request("GET", "/balance")
        try:
            return LedgerInfo.model_validate(data)
        except ValidationError as e:
            raise BrokerError(f"Unexpected ledger record: {data!r}") from e

    def add_ledger(self, amount: float) -> None:
        self._request("POST", "/add-funds", {"amount": amount})

    def list_services(self) -> List[ServiceInfo]:
        data = self._request("GET", "/services")
        if isinstance(data, dict):
            data = data.get("services", [])
        try:
            return [ServiceInfo.model_validate(item) for item in data]
        except (TypeError, ValidationError) as e:
            raise BrokerError(f"Unexpected service listing: {data!r}") from e

    def get_service_metadata(self, provider_address: str) -> ServiceMetadata:
        data = self._request("POST", "/get-metadata", {"provider_address": provider_address})
        try:
            return ServiceMetadata.model_validate(data)
        except ValidationError as e:
            raise BrokerError(f"Unexpected service metadata: {data!r}") from e

    def get_request_headers(self, provider_address: str, content: str) -> Dict[str, str]:
        data = self._request(
            "POST",
            "/request-headers",
            {"provider_address": provider_address, "content": content}
        )
        if isinstance(data, dict) and isinstance(data.get("headers"), dict):
            data = data["headers"]
        if not isinstance(data, dict):
            raise BrokerError(f"Unexpected request headers: {data!r}")
        return {str(k): str(v) for k, v in data.items()}

    def settle_fee(self, provider_address: str, fee: float) -> None:
        self._request("POST", "/settle-fee", {"provider_address": provider_address, "fee": fee})


def create_broker(config: DemoConfig, wallet: Optional[WalletManager] = None) -> BridgeBroker:
    """
    Build a bridge-backed broker for the configured wallet.

    Args:
        config: Demo configuration
        wallet: Existing wallet (built from config if omitted)

    Returns:
        BridgeBroker ready for use

    Raises:
        BrokerError: If the bridge service is not reachable
    """
    if wallet is None:
        wallet = WalletManager(private_key=config.private_key, rpc_url=config.rpc_url)

    broker = BridgeBroker(wallet, config.bridge_url, timeout=config.request_timeout)
    if not broker.health():
        raise BrokerError(
            f"0G broker bridge not reachable at {config.bridge_url}. "
            "Start it with: node zerog-inference-bridge.js"
        )

    logger.success("Inference Broker initialized")
    return broker
