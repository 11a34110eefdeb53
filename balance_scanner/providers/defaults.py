"""
Default provider registry configuration.

Registers built-in providers and builds the dispatcher from config.yaml settings.
To add a new provider, register it here and add it to the priority list.
"""
from __future__ import annotations

import logging
from typing import Callable, List, Optional

from .. import config
from .base import Transport
from .dispatcher import BalanceDispatcher
from .health import HealthTracker
from .parsers import parse_blockchain_info_balance, parse_esplora_balance
from .registry import ProviderRegistry

logger = logging.getLogger(__name__)

MEMPOOL_BASE_URL = "https://mempool.space/api/address"
BLOCKSTREAM_BASE_URL = "https://blockstream.info/api/address"
BLOCKCHAIN_INFO_BASE_URL = "https://blockchain.info/rawaddr"


def create_default_registry() -> ProviderRegistry:
    """Create a registry with all built-in providers."""
    registry = ProviderRegistry()
    registry.register("mempool.space", MEMPOOL_BASE_URL, parse_esplora_balance)
    registry.register("blockstream.info", BLOCKSTREAM_BASE_URL, parse_esplora_balance)
    registry.register("blockchain.info", BLOCKCHAIN_INFO_BASE_URL, parse_blockchain_info_balance)
    return registry


def create_dispatcher(
    transport: Transport,
    *,
    registry: Optional[ProviderRegistry] = None,
    priority: Optional[List[str]] = None,
    cfg: Optional[dict] = None,
    clock: Optional[Callable[[], float]] = None,
) -> BalanceDispatcher:
    """Build tracker + dispatcher from config. Raises ConfigError on bad settings."""
    merged = cfg if cfg is not None else config.get_config()
    reg = registry or create_default_registry()
    providers = reg.build(priority or config.provider_priority(merged))
    tracker_kwargs = {}
    if clock is not None:
        tracker_kwargs["clock"] = clock
    tracker = HealthTracker(
        providers,
        fail_limit=config.fail_limit(merged),
        block_duration_s=config.block_duration_s(merged),
        **tracker_kwargs,
    )
    logger.info("Balance providers: %s", ", ".join(p.name for p in providers))
    return BalanceDispatcher(
        tracker, transport, timeout_s=config.provider_timeout_s(merged)
    )
