"""
Broker adapters.

- ComputeBroker: the interface the demo depends on
- BridgeBroker: HTTP bridge to the official 0G TypeScript broker SDK
"""

from .base import ComputeBroker
from .bridge import BridgeBroker, create_broker

__all__ = [
    'ComputeBroker',
    'BridgeBroker',
    'create_broker',
]
