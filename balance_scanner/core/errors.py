"""
Shared exception types for balance_scanner.
Stable surface; extend only.
"""

from __future__ import annotations


class BalanceScannerError(Exception):
    """Base exception for balance_scanner; catch this for any package-raised error."""

    pass


class ConfigError(BalanceScannerError):
    """Invalid configuration detected at startup (registry, config.yaml, CLI)."""

    pass


class ProviderError(BalanceScannerError):
    """A provider call failed: timeout, transport error or HTTP error status."""

    def __init__(self, provider_name: str, message: str) -> None:
        super().__init__(f"{provider_name}: {message}")
        self.provider_name = provider_name


class ProviderResponseError(ProviderError):
    """A provider answered, but the payload could not be turned into a balance."""

    pass


class SinkError(BalanceScannerError):
    """A hit sink could not record a hit."""

    pass


__all__ = [
    "BalanceScannerError",
    "ConfigError",
    "ProviderError",
    "ProviderResponseError",
    "SinkError",
]
