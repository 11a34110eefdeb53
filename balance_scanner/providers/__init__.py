"""
Balance providers: registry, health tracking and round-robin dispatch.

Providers are registered via a config-driven priority list. The dispatcher
rotates across providers that are not currently suspended; a provider that
fails repeatedly is suspended for a fixed window and then re-admitted.
"""

from __future__ import annotations

from .base import LookupResult, LookupStatus, Provider, ProviderHealth, Transport
from .dispatcher import BalanceDispatcher
from .health import BLOCK_DURATION_S, FAIL_LIMIT, HealthTracker
from .parsers import parse_blockchain_info_balance, parse_esplora_balance
from .registry import ProviderRegistry
from .transport import RequestsTransport

__all__ = [
    "Provider",
    "ProviderHealth",
    "LookupResult",
    "LookupStatus",
    "Transport",
    "ProviderRegistry",
    "HealthTracker",
    "FAIL_LIMIT",
    "BLOCK_DURATION_S",
    "BalanceDispatcher",
    "RequestsTransport",
    "parse_esplora_balance",
    "parse_blockchain_info_balance",
]
