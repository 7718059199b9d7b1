"""
Retry-and-settle loop for 0G inference requests.

A provider refuses to serve a wallet that owes it fees, answering with an
error such as::

    "... settleFee ... expected 0.0042 A0GI"

When that happens the loop settles the quoted fee through the broker and
tries again. Any other failure is logged and retried after a fixed delay,
up to a fixed number of attempts.
"""

import re
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, List, Optional

import requests
from loguru import logger

from .broker.base import ComputeBroker
from .inference import get_new_headers, make_inference_request
from .types import InferenceResult


SETTLE_FEE_MARKER = "settleFee"
# Depends on the provider's error wording; a change upstream disables settlement.
FEE_PATTERN = re.compile(r"expected ([\d.]+) A0GI")


@dataclass
class RetryOutcome:
    """Result of a retry loop run."""
    success: bool
    attempts: int
    content: Optional[str] = None
    last_result: Optional[InferenceResult] = None
    settled_fees: List[float] = field(default_factory=list)


def parse_expected_fee(error: Optional[str]) -> Optional[float]:
    """
    Extract the expected fee from a provider fee-settlement error.

    Returns:
        The fee in A0GI, or None if ``error`` is not a recognized
        settlement error.
    """
    if not error or SETTLE_FEE_MARKER not in error:
        return None
    match = FEE_PATTERN.search(error)
    if not match:
        return None
    try:
        return float(match.group(1))
    except ValueError:
        # e.g. "1.2.3"
        return None


def _timestamp_ms() -> int:
    return int(time.time() * 1000)


def _iso(ms: int) -> str:
    return datetime.fromtimestamp(ms / 1000, tz=timezone.utc).isoformat(timespec="milliseconds")


def run_with_retry(
    broker: ComputeBroker,
    endpoint: str,
    model: str,
    provider_address: str,
    content: str,
    max_retries: int = 5,
    retry_delay: float = 1.0,
    timeout: float = 120,
    session: Optional[requests.Session] = None,
    sleep: Callable[[float], None] = time.sleep
) -> RetryOutcome:
    """
    Attempt an inference call up to ``max_retries`` times.

    Each attempt asks the broker for fresh headers, calls the provider and
    inspects the response. A response with message content ends the loop.
    A fee-settlement error settles the quoted fee before the next attempt.
    Exhausting all attempts is logged, never raised.

    Args:
        broker: Broker used for headers and fee settlement
        endpoint: Provider endpoint from the service metadata
        model: Model served by the provider
        provider_address: Provider to call and settle with
        content: Message content
        max_retries: Maximum number of attempts (0 means none)
        retry_delay: Fixed delay in seconds between attempts
        timeout: HTTP timeout per request
        session: requests-compatible session for the provider call
        sleep: Delay function (injectable for tests)

    Returns:
        RetryOutcome describing the run
    """
    outcome = RetryOutcome(success=False, attempts=0)

    while outcome.attempts < max_retries:
        attempt = outcome.attempts + 1
        try:
            headers = get_new_headers(broker, provider_address, content)

            logger.info("Preparing to call make_inference_request...")
            start_ms = _timestamp_ms()
            logger.info(f"Request start time: {_iso(start_ms)} (Timestamp: {start_ms})")

            result = make_inference_request(
                endpoint, headers, content, model, timeout=timeout, session=session
            )
            outcome.last_result = result

            end_ms = _timestamp_ms()
            logger.info(f"Request end time: {_iso(end_ms)} (Timestamp: {end_ms})")
            logger.info(f"Request completed, duration: {end_ms - start_ms} ms")
            logger.debug(f"Attempt {attempt} result: {result.model_dump(exclude_none=True)}")

            if result.is_success:
                outcome.success = True
                outcome.content = result.content
                outcome.attempts = attempt
                logger.success(f"Success! Message: {result.content}")
                break

            if result.error and SETTLE_FEE_MARKER in result.error:
                expected_fee = parse_expected_fee(result.error)
                if expected_fee is not None:
                    logger.info(f"Settling fee: {expected_fee}")
                    broker.settle_fee(provider_address, expected_fee)
                    outcome.settled_fees.append(expected_fee)
                    logger.success("Fee settled successfully")
                else:
                    logger.warning(f"Unrecognized fee settlement error: {result.error}")
            elif result.error:
                logger.warning(f"Provider error: {result.error}")

            logger.warning(f"Attempt {attempt} failed, retrying...")

        except Exception as e:
            logger.error(f"Error on attempt {attempt}: {e}")

        outcome.attempts = attempt
        if outcome.attempts < max_retries:
            sleep(retry_delay)

    if not outcome.success:
        logger.error(f"Failed to get valid response after {max_retries} attempts")

    return outcome
