"""
Integration tests: registry -> dispatcher -> RequestsTransport with mocked HTTP.

Verifies the full path from provider registration to a parsed balance without
any live network calls.
"""

from __future__ import annotations

from decimal import Decimal
from unittest.mock import MagicMock

import pytest
import requests

from balance_scanner.core.errors import ConfigError, ProviderError, ProviderResponseError
from balance_scanner.providers.base import LookupStatus
from balance_scanner.providers.defaults import (
    BLOCKCHAIN_INFO_BASE_URL,
    create_default_registry,
    create_dispatcher,
)
from balance_scanner.providers.parsers import parse_esplora_balance
from balance_scanner.providers.registry import ProviderRegistry
from balance_scanner.providers.transport import RequestsTransport
from tests.fakes import FakeClock, FakeTransport


def _mock_session(status_code=200, payload=None, side_effect=None, json_error=False):
    session = MagicMock(spec=requests.Session)
    session.headers = {}
    if side_effect is not None:
        session.get.side_effect = side_effect
        return session
    resp = MagicMock()
    resp.status_code = status_code
    if json_error:
        resp.json.side_effect = ValueError("No JSON object could be decoded")
    else:
        resp.json.return_value = payload
    if status_code >= 400:
        resp.raise_for_status.side_effect = requests.HTTPError(f"{status_code} error")
    else:
        resp.raise_for_status = MagicMock()
    session.get.return_value = resp
    return session


class TestRegistry:
    def test_default_registry_order(self):
        registry = create_default_registry()
        assert registry.names == ["mempool.space", "blockstream.info", "blockchain.info"]
        providers = registry.build(["blockchain.info", "mempool.space"])
        assert [p.name for p in providers] == ["blockchain.info", "mempool.space"]
        assert providers[0].base_url == BLOCKCHAIN_INFO_BASE_URL

    def test_unknown_priority_name(self):
        with pytest.raises(ConfigError, match="Unknown provider 'nope'"):
            create_default_registry().build(["nope"])

    def test_duplicate_registration(self):
        registry = ProviderRegistry()
        registry.register("a", "https://a.example", parse_esplora_balance)
        with pytest.raises(ConfigError, match="already registered"):
            registry.register("a", "https://a2.example", parse_esplora_balance)

    @pytest.mark.parametrize(
        "name,url,parser",
        [
            ("", "https://a.example", parse_esplora_balance),
            ("a", "ftp://a.example", parse_esplora_balance),
            ("a", "https://a.example", "not callable"),
        ],
    )
    def test_malformed_entries_rejected(self, name, url, parser):
        with pytest.raises(ConfigError):
            ProviderRegistry().register(name, url, parser)

    def test_empty_registry_cannot_build(self):
        with pytest.raises(ConfigError, match="No balance providers"):
            ProviderRegistry().build()

    def test_duplicate_in_priority(self):
        with pytest.raises(ConfigError, match="Duplicate"):
            create_default_registry().build(["mempool.space", "mempool.space"])


class TestRequestsTransport:
    def test_returns_decoded_json(self):
        session = _mock_session(payload={"final_balance": 0})
        transport = RequestsTransport(session)
        assert transport.get_json("blockchain.info", "https://x/abc", 10.0) == {"final_balance": 0}
        session.get.assert_called_once_with("https://x/abc", timeout=10.0)
        assert session.headers["User-Agent"].startswith("balance-scanner/")

    def test_rate_limit(self):
        transport = RequestsTransport(_mock_session(status_code=429))
        with pytest.raises(ProviderError, match="rate limit"):
            transport.get_json("mempool.space", "https://x/abc", 10.0)

    def test_http_error_status(self):
        transport = RequestsTransport(_mock_session(status_code=503))
        with pytest.raises(ProviderError, match="HTTP 503"):
            transport.get_json("mempool.space", "https://x/abc", 10.0)

    def test_timeout(self):
        transport = RequestsTransport(_mock_session(side_effect=requests.Timeout("slow")))
        with pytest.raises(ProviderError, match="timeout after 10.0s"):
            transport.get_json("mempool.space", "https://x/abc", 10.0)

    def test_connection_error(self):
        transport = RequestsTransport(_mock_session(side_effect=requests.ConnectionError("refused")))
        with pytest.raises(ProviderError, match="ConnectionError"):
            transport.get_json("mempool.space", "https://x/abc", 10.0)

    def test_invalid_json(self):
        transport = RequestsTransport(_mock_session(json_error=True))
        with pytest.raises(ProviderResponseError, match="not valid JSON"):
            transport.get_json("mempool.space", "https://x/abc", 10.0)


class TestMockedLookup:
    def test_esplora_lookup_through_real_transport(self):
        payload = {"chain_stats": {"funded_txo_sum": 500_000_000, "spent_txo_sum": 100_000_000}}
        transport = RequestsTransport(_mock_session(payload=payload))
        dispatcher = create_dispatcher(transport, priority=["mempool.space"], cfg=_cfg(), clock=FakeClock())

        result = dispatcher.lookup("bc1qabc")
        assert result.status == LookupStatus.OK
        assert result.balance == Decimal("4")
        assert result.provider_name == "mempool.space"

    def test_create_dispatcher_applies_config(self):
        cfg = _cfg()
        cfg["health"] = {"fail_limit": 2, "block_duration_s": 30}
        cfg["providers"]["timeout_s"] = 3
        transport = FakeTransport(failing=["mempool.space"])
        dispatcher = create_dispatcher(transport, cfg=cfg, clock=FakeClock())

        assert dispatcher.tracker.fail_limit == 2
        assert dispatcher.tracker.block_duration_s == 30.0
        dispatcher.lookup("addr")
        assert transport.calls[0][2] == 3.0


def _cfg() -> dict:
    return {
        "providers": {
            "priority": ["mempool.space", "blockstream.info", "blockchain.info"],
            "timeout_s": 10.0,
        },
        "health": {"fail_limit": 8, "block_duration_s": 600.0},
    }
