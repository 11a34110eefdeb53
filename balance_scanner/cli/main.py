"""
Top-level CLI dispatcher: balance-scanner <command> [args...].
All commands dispatch to package CLI modules.
"""

from __future__ import annotations

import argparse
import sys
from typing import List, Optional


def main(argv: Optional[List[str]] = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    parser = argparse.ArgumentParser(
        prog="balance-scanner",
        description="Watch-only address balance scanner with provider failover",
    )
    subparsers = parser.add_subparsers(dest="command", help="command")
    subparsers.add_parser("scan", help="Run the scan loop over watched addresses", add_help=False)
    subparsers.add_parser("providers", help="List configured providers in priority order", add_help=False)

    args, rest = parser.parse_known_args(argv)
    if not args.command:
        parser.print_help()
        return 0

    if args.command == "scan":
        from balance_scanner.cli import scan as mod

        return mod.main(rest)
    if args.command == "providers":
        from balance_scanner.cli import providers as mod

        return mod.main(rest)

    parser.print_help()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
