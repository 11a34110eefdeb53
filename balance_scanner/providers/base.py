"""
Provider interfaces and data contracts.

A provider is a remote explorer that can answer "what is the balance of this
address" through a single HTTP GET on {base_url}/{address}. Each provider
carries its own parser that turns the decoded JSON payload into a Decimal
balance in whole coins.

Lookups are returned via frozen dataclasses for immutability; per-provider
health is the only mutable record and is owned by the HealthTracker.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Optional, Protocol, runtime_checkable

from ..core.errors import ProviderResponseError

BalanceParser = Callable[[Any], Decimal]


@dataclass(frozen=True)
class Provider:
    """Immutable provider record: name, endpoint base and response parser."""

    name: str
    base_url: str
    parser: BalanceParser

    def url_for(self, address: str) -> str:
        return f"{self.base_url.rstrip('/')}/{address}"

    def parse(self, payload: Any) -> Decimal:
        """Run the provider's parser; any schema problem becomes ProviderResponseError."""
        try:
            balance = self.parser(payload)
        except ProviderResponseError:
            raise
        except (KeyError, TypeError, ValueError, AttributeError, InvalidOperation) as exc:
            raise ProviderResponseError(
                self.name, f"malformed response: {type(exc).__name__}: {exc}"
            ) from exc
        if not isinstance(balance, Decimal):
            raise ProviderResponseError(
                self.name, f"parser returned {type(balance).__name__}, not Decimal"
            )
        if balance < 0:
            raise ProviderResponseError(self.name, f"negative balance {balance}")
        return balance


class LookupStatus(enum.Enum):
    """Outcome of a single dispatcher lookup."""

    OK = "OK"
    EXHAUSTED = "EXHAUSTED"
    FAILED = "FAILED"


@dataclass(frozen=True)
class LookupResult:
    """Either a non-negative balance or an explicit unavailable marker."""

    status: LookupStatus
    balance: Optional[Decimal] = None
    provider_name: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def found(cls, balance: Decimal, provider_name: str) -> LookupResult:
        return cls(LookupStatus.OK, balance=balance, provider_name=provider_name)

    @classmethod
    def exhausted(cls) -> LookupResult:
        return cls(LookupStatus.EXHAUSTED, error="no eligible provider")

    @classmethod
    def failed(cls, provider_name: str, error: str) -> LookupResult:
        return cls(LookupStatus.FAILED, provider_name=provider_name, error=error[:500])

    @property
    def ok(self) -> bool:
        return self.status == LookupStatus.OK

    @property
    def is_exhausted(self) -> bool:
        return self.status == LookupStatus.EXHAUSTED

    @property
    def is_hit(self) -> bool:
        return self.ok and self.balance is not None and self.balance > 0


@dataclass
class ProviderHealth:
    """Mutable health state for a single provider. Owned by HealthTracker."""

    provider_name: str
    consecutive_failures: int = 0
    blocked_until: float = 0.0
    last_ok_at: Optional[float] = None
    last_error: Optional[str] = None
    total_successes: int = 0
    total_failures: int = 0

    def is_eligible(self, now: float) -> bool:
        return self.blocked_until <= now


@runtime_checkable
class Transport(Protocol):
    """Issues one HTTP GET and returns the decoded JSON body, or raises ProviderError."""

    def get_json(self, provider_name: str, url: str, timeout: float) -> Any: ...
