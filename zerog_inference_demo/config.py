"""
Demo configuration for the 0G inference client.

Every setting comes from the process environment (optionally seeded from a
``.env`` file) and falls back to a testnet-friendly default, so the demo
runs with nothing but a funded private key.
"""

import os
from typing import Dict, Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .errors import ConfigError


DEFAULT_RPC_URL = "https://evmrpc-testnet.0g.ai"
DEFAULT_PROVIDER_ADDRESS = "0x3feE5a4dd5FDb8a32dDA97Bed899830605dBD9D3"  # deepseek-r1-70b
DEFAULT_BRIDGE_URL = "http://localhost:3000"
DEFAULT_CONTENT = "Hello from 0g serving broker!"

LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")

# field name -> environment variable
ENV_VARS: Dict[str, str] = {
    "private_key": "PRIVATE_KEY",
    "rpc_url": "RPC_URL",
    "provider_address": "PROVIDER_ADDRESS",
    "initial_balance": "INITIAL_BALANCE",
    "max_retries": "MAX_RETRIES",
    "content": "CONTENT",
    "retry_delay": "RETRY_DELAY",
    "bridge_url": "ZEROG_INFERENCE_BRIDGE_URL",
    "request_timeout": "REQUEST_TIMEOUT",
    "log_level": "LOG_LEVEL",
    "log_file": "LOG_FILE",
}


class DemoConfig(BaseModel):
    """Settings for a single run of the demo client."""

    model_config = ConfigDict(validate_assignment=True)

    # Wallet / chain
    private_key: Optional[str] = Field(
        default=None,
        description="Private key of the paying wallet (a fresh one is generated if unset)"
    )
    rpc_url: str = Field(
        default=DEFAULT_RPC_URL,
        description="0G chain JSON-RPC endpoint"
    )

    # Broker / provider
    provider_address: str = Field(
        default=DEFAULT_PROVIDER_ADDRESS,
        description="Address of the inference provider to call"
    )
    bridge_url: str = Field(
        default=DEFAULT_BRIDGE_URL,
        description="Base URL of the broker bridge service"
    )
    initial_balance: float = Field(
        default=0.05,
        gt=0,
        description="Amount (A0GI) used to fund a new ledger"
    )

    # Inference
    content: str = Field(
        default=DEFAULT_CONTENT,
        description="Message content sent to the provider"
    )
    max_retries: int = Field(
        default=5,
        ge=0,
        description="Maximum number of inference attempts"
    )
    retry_delay: float = Field(
        default=1.0,
        ge=0,
        description="Fixed delay in seconds between attempts"
    )
    request_timeout: float = Field(
        default=120.0,
        gt=0,
        description="Timeout in seconds for bridge and provider HTTP calls"
    )

    # Logging
    log_level: str = Field(default="INFO", description="loguru level name")
    log_file: Optional[str] = Field(
        default=None,
        description="Optional path for a rotating log file"
    )

    @field_validator("log_level")
    @classmethod
    def _known_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"unknown log level {value!r}, expected one of {', '.join(LOG_LEVELS)}")
        return level

    @classmethod
    def from_env(
        cls,
        env: Optional[Mapping[str, str]] = None,
        dotenv_path: Optional[str] = None,
    ) -> "DemoConfig":
        """
        Build a config from environment variables.

        Args:
            env: Mapping to read instead of ``os.environ``. When given, no
                ``.env`` file is loaded.
            dotenv_path: Explicit ``.env`` file to load (default: search from cwd)

        Returns:
            DemoConfig populated from the environment

        Raises:
            ConfigError: If a variable holds a value of the wrong type or
                outside its allowed range.
        """
        if env is None:
            load_dotenv(dotenv_path)
            env = os.environ

        values = {}
        for field_name, var in ENV_VARS.items():
            raw = env.get(var)
            if raw is None or not raw.strip():
                continue
            # message content is sent verbatim
            values[field_name] = raw if field_name == "content" else raw.strip()

        try:
            return cls(**values)
        except ValidationError as e:
            problems = "; ".join(
                f"{ENV_VARS.get(str(err['loc'][0]), err['loc'][0])}: {err['msg']}"
                for err in e.errors()
            )
            raise ConfigError(f"Invalid configuration: {problems}") from e

    def redacted(self) -> Dict[str, object]:
        """Config as a dict with the private key masked, safe for logging."""
        data = self.model_dump()
        if data.get("private_key"):
            data["private_key"] = "***"
        return data
