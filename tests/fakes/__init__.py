"""Fake transport, clock and sinks for tests (no live network)."""

from .transport import (
    FakeClock,
    FakeTransport,
    RecordingSink,
    RecordingSleep,
    esplora_payload,
)

__all__ = [
    "FakeClock",
    "FakeTransport",
    "RecordingSink",
    "RecordingSleep",
    "esplora_payload",
]
