#!/usr/bin/env python3
"""
Scan:
- Cycle through watched addresses (--address, --addresses FILE, or scan.addresses in config)
- Look up each balance on mempool.space / blockstream.info / blockchain.info (round-robin, failover)
- Append hits to a JSONL file and send a push notification

Runs until Ctrl+C or --max-iterations.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
import threading
from typing import List, Optional

from balance_scanner import config
from balance_scanner.core.errors import ConfigError
from balance_scanner.identities import (
    Identity,
    cycle_identities,
    load_identities_file,
    parse_identities,
)
from balance_scanner.pacing import AdaptivePacer, PacingConfig
from balance_scanner.providers.defaults import create_dispatcher
from balance_scanner.providers.transport import RequestsTransport
from balance_scanner.scan import ScanLoop
from balance_scanner.sinks import JsonlHitStore, PushNotifier

logger = logging.getLogger("balance_scanner")

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def configure_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """Console handler always; append-mode file handler when log_file is set."""
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        os.makedirs(os.path.dirname(log_file) or ".", exist_ok=True)
        handlers.append(logging.FileHandler(log_file, mode="a", encoding="utf-8"))
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT, handlers=handlers, force=True)


def _collect_identities(args: argparse.Namespace, cfg: dict) -> List[Identity]:
    identities: List[Identity] = parse_identities(args.address)
    if args.addresses:
        identities.extend(load_identities_file(args.addresses))
    if not identities:
        identities = parse_identities(config.scan_addresses(cfg))
    return identities


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="balance-scanner scan",
        description="Watch address balances with provider failover and adaptive pacing",
    )
    parser.add_argument("--config", default=None, help="Path to config YAML (default: config.yaml at repo root)")
    parser.add_argument("--address", action="append", default=[], metavar="ADDR[,LABEL]", help="Address to watch (repeatable)")
    parser.add_argument("--addresses", default=None, metavar="FILE", help="File with one address per line (optional ',label')")
    parser.add_argument("--out", default=None, metavar="PATH", help="Hits JSONL file (default: scan.hits_path from config)")
    parser.add_argument("--max-iterations", type=int, default=None, metavar="N", help="Stop after N lookups (default: run forever)")
    parser.add_argument("--log-file", default=None, help="Also append all log output to this file")
    parser.add_argument(
        "--log-level",
        default="INFO",
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )
    args = parser.parse_args(argv)

    configure_logging(args.log_level, args.log_file)

    transport: Optional[RequestsTransport] = None
    try:
        cfg = config.get_config(args.config)
        identities = _collect_identities(args, cfg)
        source = cycle_identities(identities)
        pacing = PacingConfig(**config.pacing_settings(cfg))
        cooldown_s = config.exhaustion_cooldown_s(cfg)
        hits_path = args.out or config.hits_path(cfg)
        transport = RequestsTransport()
        dispatcher = create_dispatcher(transport, cfg=cfg)
        notify_token = config.notify_token(cfg)
        notify_endpoint = config.notify_endpoint(cfg)
    except ConfigError as e:
        if transport is not None:
            transport.close()
        print(f"Config error: {e}", file=sys.stderr)
        return 2

    stop = threading.Event()
    notifier = PushNotifier(notify_token, notify_endpoint)
    if not notifier.enabled:
        logger.warning("BALANCE_SCANNER_PUSH_TOKEN not set; hits will only be written to %s", hits_path)
    loop = ScanLoop(
        source,
        dispatcher,
        AdaptivePacer(pacing, sleep=stop.wait),
        sinks=[JsonlHitStore(hits_path), notifier],
        stop_event=stop,
        exhaustion_cooldown_s=cooldown_s,
    )

    logger.info("Watching %d address(es); hits -> %s", len(identities), hits_path)
    logger.info("Single worker, adaptive delay %.1f-%.1fs. Stop with Ctrl+C.", pacing.base_delay_s, pacing.max_delay_s)
    try:
        loop.run(max_iterations=args.max_iterations)
    except KeyboardInterrupt:
        loop.stop()
        logger.info("Stopped.")
    finally:
        transport.close()
        notifier.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
