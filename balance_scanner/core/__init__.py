"""
Stable facade: package-wide exception types only.
Do not add exports without updating __all__.
"""

from __future__ import annotations

from .errors import (
    BalanceScannerError,
    ConfigError,
    ProviderError,
    ProviderResponseError,
    SinkError,
)

# Do not add exports without updating __all__.
__all__ = [
    "BalanceScannerError",
    "ConfigError",
    "ProviderError",
    "ProviderResponseError",
    "SinkError",
]
