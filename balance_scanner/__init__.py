"""
Top-level public API surface. Stable facades only.
Canonical entrypoint: import balance_scanner; use balance_scanner.providers, balance_scanner.scan, etc.
Does not import cli.
"""

from __future__ import annotations

from . import core, providers, sinks
from ._version import __version__
from .pacing import AdaptivePacer, PacingConfig
from .scan import ScanLoop, ScanStats

# Do not add exports without updating __all__.
__all__ = [
    "__version__",
    "core",
    "providers",
    "sinks",
    "AdaptivePacer",
    "PacingConfig",
    "ScanLoop",
    "ScanStats",
]
