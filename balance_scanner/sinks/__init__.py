"""Hit sinks: append-only JSONL persistence and push notification."""
from __future__ import annotations

from .base import HitRecord, HitSink
from .jsonl import JsonlHitStore
from .notify import PushNotifier

__all__ = ["HitRecord", "HitSink", "JsonlHitStore", "PushNotifier"]
