"""
0G Compute Network inference demo.

Funds a broker ledger, discovers inference providers, sends one chat
message to the configured provider (retrying and settling fees as needed)
and prints the remaining ledger balance.

Usage:
    python -m zerog_inference_demo

Environment Variables:
    PRIVATE_KEY: Wallet private key used to pay for inference
    RPC_URL: 0G chain RPC endpoint
    PROVIDER_ADDRESS: Inference provider to call
    INITIAL_BALANCE: Amount used to fund a new ledger (default: 0.05)
    MAX_RETRIES: Maximum inference attempts (default: 5)
    CONTENT: Message to send
    ZEROG_INFERENCE_BRIDGE_URL: Broker bridge service URL
"""

import sys
from contextlib import suppress
from typing import Any, List, Optional

from loguru import logger
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .broker import ComputeBroker, create_broker
from .config import DemoConfig
from .retry import RetryOutcome, run_with_retry
from .types import LedgerInfo, ServiceInfo
from .wallet import WalletManager

console = Console()

# loguru's default stderr sink
_handler_ids: List[int] = [0]


def configure_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """
    Send loguru output to stderr, plus a rotating file if requested.

    New sinks are installed before the previous ones are removed, so a
    bad level or file path leaves the existing sinks in place.
    """
    new_ids = []
    try:
        new_ids.append(logger.add(sys.stderr, level=level))
        if log_file:
            new_ids.append(logger.add(
                log_file,
                rotation="1 day",
                retention="7 days",
                level=level
            ))
    except Exception:
        for handler_id in new_ids:
            logger.remove(handler_id)
        raise

    for handler_id in _handler_ids:
        # already removed elsewhere
        with suppress(ValueError):
            logger.remove(handler_id)
    _handler_ids[:] = new_ids


def ledger_balance(ledger: LedgerInfo) -> Any:
    """Balance to display: the broker's ledgerInfo, else the plain balance."""
    return ledger.ledger_info if ledger.ledger_info is not None else ledger.balance


def setup_ledger(broker: ComputeBroker, initial_balance: float) -> LedgerInfo:
    """Reuse the wallet's ledger, creating and funding one if none exists."""
    try:
        existing = broker.get_ledger()
        logger.info(f"Using existing ledger with balance: {ledger_balance(existing)}")
        return existing
    except Exception as e:
        logger.info(f"No existing ledger found ({e}). Creating new ledger...")

    broker.add_ledger(initial_balance)
    logger.success(f"New account created and funded with initial balance: {initial_balance}")
    return LedgerInfo(balance=initial_balance)


def _cell(value: Any) -> Text:
    return Text("-" if value is None or value == "" else str(value))


def print_services(services: List[ServiceInfo]) -> None:
    """Render the available inference providers as a table."""
    table = Table(title="Available inference providers")
    table.add_column("Provider", style="cyan")
    table.add_column("Model", style="green")
    table.add_column("Endpoint")
    table.add_column("Input price", justify="right")
    table.add_column("Output price", justify="right")
    table.add_column("Verifiability")

    for service in services:
        table.add_row(
            _cell(service.provider),
            _cell(service.model),
            _cell(service.url),
            _cell(service.input_price),
            _cell(service.output_price),
            _cell(service.verifiability)
        )

    console.print(table)


def print_outcome(outcome: RetryOutcome) -> None:
    if outcome.success:
        # provider text is untrusted; never parse it as markup
        console.print(Panel(
            Text(outcome.content),
            title=f"[green]Response (attempt {outcome.attempts})[/green]",
            border_style="green"
        ))
    else:
        console.print(f"[red]No valid response after {outcome.attempts} attempt(s)[/red]")


def run(config: DemoConfig, broker: Optional[ComputeBroker] = None) -> RetryOutcome:
    """
    Run the demo end to end.

    Args:
        config: Demo configuration
        broker: Broker to use (a bridge broker is created if omitted)

    Returns:
        The outcome of the inference retry loop
    """
    if broker is None:
        wallet = WalletManager(private_key=config.private_key, rpc_url=config.rpc_url)
        try:
            logger.info(f"Wallet native balance: {wallet.native_balance()} A0GI")
        except Exception as e:
            logger.warning(f"Could not read wallet balance from {config.rpc_url}: {e}")
        broker = create_broker(config, wallet)

    setup_ledger(broker, config.initial_balance)

    logger.info("Listing services...")
    services = broker.list_services()
    print_services(services)

    logger.info("Getting service metadata...")
    metadata = broker.get_service_metadata(config.provider_address)
    logger.info(f"Endpoint: {metadata.endpoint} Model: {metadata.model}")

    outcome = run_with_retry(
        broker,
        metadata.endpoint,
        metadata.model,
        config.provider_address,
        config.content,
        max_retries=config.max_retries,
        retry_delay=config.retry_delay,
        timeout=config.request_timeout
    )
    print_outcome(outcome)

    remaining = broker.get_ledger()
    console.print(f"Remaining balance in ledger: {escape(str(ledger_balance(remaining)))}")

    return outcome


def main(
    broker: Optional[ComputeBroker] = None,
    config: Optional[DemoConfig] = None
) -> int:
    """
    Entry point.

    Returns:
        0 on normal completion (even if no valid response was obtained),
        1 on any uncaught failure
    """
    try:
        if config is None:
            config = DemoConfig.from_env()
        configure_logging(config.log_level, config.log_file)
        logger.debug(f"Configuration: {config.redacted()}")

        run(config, broker)
    except Exception as e:
        logger.error(f"Error in main execution: {e}")
        return 1

    return 0