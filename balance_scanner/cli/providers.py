"""
List configured balance providers in the order the dispatcher rotates through them.
Use: balance-scanner providers [--config PATH]
"""

from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from balance_scanner import config
from balance_scanner.core.errors import ConfigError
from balance_scanner.providers.defaults import create_default_registry


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="balance-scanner providers", description=__doc__)
    parser.add_argument("--config", default=None, help="Path to config YAML (default: config.yaml at repo root)")
    args = parser.parse_args(argv)

    try:
        cfg = config.get_config(args.config)
        providers = create_default_registry().build(config.provider_priority(cfg))
    except ConfigError as e:
        print(f"Config error: {e}", file=sys.stderr)
        return 2

    for i, p in enumerate(providers, 1):
        print(f"  {i}. {p.name:<18} {p.base_url}")
    print(
        f"fail_limit={config.fail_limit(cfg)}  "
        f"block={config.block_duration_s(cfg):.0f}s  "
        f"timeout={config.provider_timeout_s(cfg):.0f}s"
    )
    return 0
