"""
Response parsers: turn each explorer's JSON schema into a Decimal balance in BTC.

Esplora (mempool.space, blockstream.info):
  GET {base}/api/address/{address}
  {"chain_stats": {"funded_txo_sum": int, "spent_txo_sum": int, ...}, ...}

blockchain.info:
  GET https://blockchain.info/rawaddr/{address}
  {"final_balance": int, ...}

Amounts are integer satoshis. Parsers raise ValueError/KeyError/TypeError on
schema problems; Provider.parse converts those into ProviderResponseError.
"""
from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict

SATOSHIS_PER_BTC = Decimal(100_000_000)


def _satoshis(value: Any, field: str) -> int:
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{field} must be an integer satoshi amount, got {value!r}")
    return value


def _require_dict(data: Any, what: str) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise TypeError(f"{what} must be an object, got {type(data).__name__}")
    return data


def satoshis_to_btc(sats: int) -> Decimal:
    return Decimal(sats) / SATOSHIS_PER_BTC


def parse_esplora_balance(data: Any) -> Decimal:
    """Confirmed balance = funded_txo_sum - spent_txo_sum from chain_stats."""
    stats = _require_dict(_require_dict(data, "response")["chain_stats"], "chain_stats")
    funded = _satoshis(stats["funded_txo_sum"], "funded_txo_sum")
    spent = _satoshis(stats["spent_txo_sum"], "spent_txo_sum")
    return satoshis_to_btc(funded - spent)


def parse_blockchain_info_balance(data: Any) -> Decimal:
    """final_balance in satoshis; absent or null means zero."""
    payload = _require_dict(data, "response")
    raw = payload.get("final_balance")
    if raw is None:
        return Decimal(0)
    return satoshis_to_btc(_satoshis(raw, "final_balance"))
