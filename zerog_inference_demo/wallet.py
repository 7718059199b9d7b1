"""Wallet and chain client setup for the 0G inference demo."""

from typing import Optional

from eth_account import Account
from eth_account.messages import encode_defunct
from loguru import logger
from web3 import Web3

from .errors import WalletError


class WalletManager:
    """
    Signing wallet bound to a 0G chain RPC endpoint.

    Supports:
    - Private key import (with or without ``0x`` prefix)
    - Fresh wallet generation when no key is configured
    - Message signing used to authenticate broker bridge calls
    - Native balance lookup over web3
    """

    def __init__(
        self,
        private_key: Optional[str] = None,
        rpc_url: Optional[str] = None,
        w3: Optional[Web3] = None
    ):
        """
        Initialize wallet manager.

        Args:
            private_key: Hex private key; a new account is created if omitted
            rpc_url: JSON-RPC endpoint used for chain queries
            w3: Pre-built Web3 client (overrides rpc_url)
        """
        self.rpc_url = rpc_url
        self._account = None

        if w3 is not None:
            self.w3 = w3
        elif rpc_url:
            self.w3 = Web3(Web3.HTTPProvider(rpc_url))
        else:
            self.w3 = None

        if private_key:
            self._init_from_private_key(private_key)
        else:
            self._generate_new_wallet()

    def _init_from_private_key(self, private_key: str) -> None:
        """Initialize wallet from private key."""
        if not private_key.startswith('0x'):
            private_key = '0x' + private_key

        try:
            self._account = Account.from_key(private_key)
        except Exception as e:
            logger.error(f"Failed to initialize wallet from private key: {e}")
            raise WalletError(f"Invalid private key: {e}") from e
        logger.info(f"Initialized wallet from private key: {self.address}")

    def _generate_new_wallet(self) -> None:
        """Generate a new, unfunded wallet."""
        self._account = Account.create()
        logger.info(f"Generated new wallet: {self.address}")
        logger.warning("No PRIVATE_KEY configured; this wallet has no funds for the ledger")

    @property
    def address(self) -> str:
        """Get wallet address."""
        if not self._account:
            raise WalletError("Wallet not initialized")
        return self._account.address

    def sign_message(self, message: str) -> str:
        """
        Sign a message with EIP-191 personal_sign.

        Args:
            message: The message to sign

        Returns:
            Hex-encoded signature
        """
        if not self._account:
            raise WalletError("Wallet not initialized")

        signed_message = self._account.sign_message(encode_defunct(text=message))
        return signed_message.signature.hex()

    def verify_signature(self, message: str, signature: str, address: str) -> bool:
        """
        Verify a signature against a message and address.

        Args:
            message: Original message
            signature: Hex-encoded signature
            address: Expected signer address

        Returns:
            True if signature is valid
        """
        try:
            recovered_address = Account.recover_message(
                encode_defunct(text=message),
                signature=bytes.fromhex(signature.replace('0x', ''))
            )
        except Exception as e:
            logger.error(f"Error verifying signature: {e}")
            return False

        return recovered_address.lower() == address.lower()

    def native_balance(self) -> float:
        """
        Get the wallet's native token balance on chain.

        Returns:
            Balance in ether units

        Raises:
            WalletError: If no RPC endpoint was configured
        """
        if self.w3 is None:
            raise WalletError("No RPC endpoint configured")

        balance_wei = self.w3.eth.get_balance(self.address)
        return float(self.w3.from_wei(balance_wei, 'ether'))
