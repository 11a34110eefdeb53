"""
Provider registry: central catalog of balance providers.

Providers are registered once at startup. The registry is config-driven: a
YAML priority list determines which providers are used and in what order.
Malformed entries are a startup-fatal ConfigError.
"""
from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

from ..core.errors import ConfigError
from .base import BalanceParser, Provider

logger = logging.getLogger(__name__)


class ProviderRegistry:
    """
    Ordered mapping of provider names to immutable Provider records.

    Usage:
        registry = ProviderRegistry()
        registry.register("mempool.space", "https://mempool.space/api/address", parse_esplora_balance)
        registry.register("blockchain.info", "https://blockchain.info/rawaddr", parse_blockchain_info_balance)

        providers = registry.build(["blockchain.info", "mempool.space"])
    """

    def __init__(self) -> None:
        self._providers: Dict[str, Provider] = {}

    def register(self, name: str, base_url: str, parser: BalanceParser) -> Provider:
        """Register a provider by name. Rejects duplicates and malformed entries."""
        if not name or not name.strip():
            raise ConfigError("Provider name must be non-empty")
        if name in self._providers:
            raise ConfigError(f"Provider '{name}' is already registered")
        if not base_url.startswith(("http://", "https://")):
            raise ConfigError(f"Provider '{name}': base URL must be http(s), got {base_url!r}")
        if not callable(parser):
            raise ConfigError(f"Provider '{name}': parser is not callable")
        provider = Provider(name=name, base_url=base_url, parser=parser)
        self._providers[name] = provider
        logger.debug("Registered balance provider: %s -> %s", name, base_url)
        return provider

    def get(self, name: str) -> Provider:
        provider = self._providers.get(name)
        if provider is None:
            raise ConfigError(
                f"Unknown provider '{name}'. Available: {list(self._providers)}"
            )
        return provider

    @property
    def names(self) -> List[str]:
        return list(self._providers)

    def build(self, priority: Optional[List[str]] = None) -> Tuple[Provider, ...]:
        """Build the fixed, ordered provider sequence from a priority list."""
        names = priority or list(self._providers)
        if len(set(names)) != len(names):
            raise ConfigError(f"Duplicate provider in priority list: {names}")
        providers = tuple(self.get(n) for n in names)
        if not providers:
            raise ConfigError("No balance providers configured")
        return providers
