"""
Watch-only identity source: the addresses the scan loop looks up.

An identity is an address plus an operator label. Addresses come from the
command line, a text file (one per line, optional ",label", "#" comments) or
the scan.addresses list in config.yaml. The scan loop cycles through them
forever.
"""
from __future__ import annotations

import itertools
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Iterator, List, Union

from .core.errors import ConfigError


@dataclass(frozen=True)
class Identity:
    address: str
    label: str = ""


def _parse_line(line: str) -> Identity:
    address, _, label = line.partition(",")
    address = address.strip()
    if not address or any(c.isspace() for c in address):
        raise ConfigError(f"Invalid address entry: {line!r}")
    return Identity(address=address, label=label.strip())


def parse_identities(entries: Iterable[Any]) -> List[Identity]:
    """Accept strings ("addr" or "addr,label") or mappings {address, label}."""
    out: List[Identity] = []
    for entry in entries:
        if isinstance(entry, dict):
            address = str(entry.get("address") or "").strip()
            if not address:
                raise ConfigError(f"Address entry missing 'address': {entry!r}")
            out.append(Identity(address=address, label=str(entry.get("label") or "")))
        else:
            line = str(entry).strip()
            if line and not line.startswith("#"):
                out.append(_parse_line(line))
    return out


def load_identities_file(path: Union[str, Path]) -> List[Identity]:
    p = Path(path)
    try:
        text = p.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Cannot read address file {p}: {exc}") from exc
    return parse_identities(text.splitlines())


def cycle_identities(identities: List[Identity]) -> Iterator[Identity]:
    """Endless round over the watch list. Empty list is a configuration error."""
    if not identities:
        raise ConfigError("No addresses to scan")
    return itertools.cycle(identities)
