"""
Shared fixtures for the 0G inference demo tests.

Everything runs against in-memory fakes: no bridge service, provider
endpoint or chain RPC is contacted.
"""

import json
from typing import Any, Dict, List, Optional

import pytest

from zerog_inference_demo.broker.base import ComputeBroker
from zerog_inference_demo.errors import LedgerNotFoundError
from zerog_inference_demo.types import LedgerInfo, ServiceInfo, ServiceMetadata
from zerog_inference_demo.wallet import WalletManager


# Well-known Anvil/Hardhat account 0
TEST_PRIVATE_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
TEST_ADDRESS = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"

PROVIDER = "0x3feE5a4dd5FDb8a32dDA97Bed899830605dBD9D3"
ENDPOINT = "https://provider.example/v1/proxy"
MODEL = "deepseek-r1-70b"


class FakeResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(self, body: Any = None, status_code: int = 200, text: Optional[str] = None):
        self._body = body
        self.status_code = status_code
        self.text = text if text is not None else json.dumps(body)

    def json(self) -> Any:
        if isinstance(self._body, Exception):
            raise self._body
        return self._body


class FakeSession:
    """
    requests.Session stand-in that replays queued responses.

    Each call is recorded in ``calls`` as (method, url, kwargs). Queue items
    may be FakeResponse objects or exceptions to raise.
    """

    def __init__(self, responses: Optional[List[Any]] = None):
        self.responses = list(responses or [])
        self.calls: List[tuple] = []

    def _next(self, method: str, url: str, **kwargs) -> FakeResponse:
        self.calls.append((method, url, kwargs))
        if not self.responses:
            raise AssertionError(f"Unexpected {method} {url}")
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def request(self, method: str, url: str, **kwargs) -> FakeResponse:
        return self._next(method, url, **kwargs)

    def get(self, url: str, **kwargs) -> FakeResponse:
        return self._next("GET", url, **kwargs)

    def post(self, url: str, **kwargs) -> FakeResponse:
        return self._next("POST", url, **kwargs)


class FakeBroker(ComputeBroker):
    """In-memory broker recording every call it receives."""

    def __init__(
        self,
        has_ledger: bool = True,
        services: Optional[List[Dict[str, Any]]] = None,
        header_error: Optional[Exception] = None,
        settle_error: Optional[Exception] = None
    ):
        self.has_ledger = has_ledger
        self.balance = 0.1 if has_ledger else 0.0
        self.services = services if services is not None else [
            {"provider": PROVIDER, "model": MODEL, "url": ENDPOINT}
        ]
        self.header_error = header_error
        self.settle_error = settle_error
        self.calls: List[tuple] = []
        self.header_count = 0

    def get_ledger(self) -> LedgerInfo:
        self.calls.append(("get_ledger",))
        if not self.has_ledger:
            raise LedgerNotFoundError("no ledger", 404)
        return LedgerInfo(ledgerInfo=[self.balance, 0], balance=self.balance)

    def add_ledger(self, amount: float) -> None:
        self.calls.append(("add_ledger", amount))
        self.has_ledger = True
        self.balance = amount

    def list_services(self) -> List[ServiceInfo]:
        self.calls.append(("list_services",))
        return [ServiceInfo.model_validate(s) for s in self.services]

    def get_service_metadata(self, provider_address: str) -> ServiceMetadata:
        self.calls.append(("get_service_metadata", provider_address))
        return ServiceMetadata(endpoint=ENDPOINT, model=MODEL)

    def get_request_headers(self, provider_address: str, content: str) -> Dict[str, str]:
        self.calls.append(("get_request_headers", provider_address, content))
        if self.header_error is not None:
            raise self.header_error
        self.header_count += 1
        return {"X-Phala-Signature-Type": "StandaloneApi", "Nonce": str(self.header_count)}

    def settle_fee(self, provider_address: str, fee: float) -> None:
        self.calls.append(("settle_fee", provider_address, fee))
        if self.settle_error is not None:
            raise self.settle_error

    def calls_named(self, name: str) -> List[tuple]:
        return [c for c in self.calls if c[0] == name]


def success_body(content: str = "Hello from the provider") -> Dict[str, Any]:
    return {
        "id": "chatcmpl-1",
        "choices": [{"index": 0, "message": {"role": "assistant", "content": content}}],
    }


def fee_error_body(fee: str = "0.0042") -> Dict[str, Any]:
    return {"error": f"invalid request: please call settleFee first, expected {fee} A0GI"}


@pytest.fixture
def broker() -> FakeBroker:
    return FakeBroker()


@pytest.fixture
def wallet() -> WalletManager:
    return WalletManager(private_key=TEST_PRIVATE_KEY)


@pytest.fixture
def sleeps() -> List[float]:
    """Collects delays instead of sleeping."""
    return []

