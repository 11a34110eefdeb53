"""
Hit record and sink contracts.

A sink receives every hit (non-zero balance). The scan loop treats sinks as
best-effort: an exception from one is logged and scanning continues.
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Protocol, runtime_checkable


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


@dataclass(frozen=True)
class HitRecord:
    """Immutable record of one address found with a non-zero balance."""

    address: str
    label: str
    balance: Decimal
    provider_name: str
    timestamp: str

    def to_json(self) -> str:
        """One self-describing JSON object; balance as a decimal string to keep precision."""
        return json.dumps(
            {
                "address": self.address,
                "label": self.label,
                "balance": str(self.balance),
                "provider": self.provider_name,
                "timestamp": self.timestamp,
            },
            sort_keys=True,
        )

    def summary(self) -> str:
        lines = [f"Address: {self.address}"]
        if self.label:
            lines.append(f"Label: {self.label}")
        lines.append(f"Balance: {self.balance} BTC")
        lines.append(f"Source: {self.provider_name} at {self.timestamp}")
        return "\n".join(lines)


@runtime_checkable
class HitSink(Protocol):
    """Anything that can take a HitRecord."""

    def record(self, hit: HitRecord) -> None: ...
