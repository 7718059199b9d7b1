"""Chat-completion calls against a 0G inference provider."""

from typing import Dict, Optional

import requests

from .broker.base import ComputeBroker
from .errors import InferenceError
from .types import InferenceResult


def get_new_headers(broker: ComputeBroker, provider_address: str, content: str) -> Dict[str, str]:
    """
    Get fresh request headers for one attempt.

    Broker headers carry a per-request nonce and fee, so they are never
    reused between attempts.
    """
    return broker.get_request_headers(provider_address, content)


def make_inference_request(
    endpoint: str,
    headers: Dict[str, str],
    content: str,
    model: str,
    timeout: float = 120,
    session: Optional[requests.Session] = None
) -> InferenceResult:
    """
    Make an inference request to a provider endpoint.

    The body is parsed whatever the HTTP status: providers report fee
    problems as ``{"error": ...}`` with a non-2xx code.

    Args:
        endpoint: Provider API base URL (from the service metadata)
        headers: Broker-generated request headers
        content: Message content
        model: Model name served by the provider
        timeout: Request timeout in seconds
        session: requests-compatible session (defaults to the requests module)

    Returns:
        The parsed inference result

    Raises:
        requests.RequestException: On transport failure
        InferenceError: If the body is not a JSON object
    """
    http = session or requests
    response = http.post(
        f"{endpoint.rstrip('/')}/chat/completions",
        headers={"Content-Type": "application/json", **headers},
        json={
            "messages": [{"role": "system", "content": content}],
            "model": model
        },
        timeout=timeout
    )

    try:
        body = response.json()
    except ValueError as e:
        raise InferenceError(
            f"Provider returned non-JSON body (status {response.status_code})"
        ) from e

    if not isinstance(body, dict):
        raise InferenceError(f"Provider returned unexpected body: {body!r}")

    return InferenceResult.model_validate(body)
