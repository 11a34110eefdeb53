"""
Load config from config.yaml with optional env overrides.
Single source of truth for provider order, health thresholds, pacing, scan and notify settings.
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Optional

import yaml
from dotenv import load_dotenv

from .core.errors import ConfigError

# Defaults if no YAML or env
_DEFAULTS = {
    "providers": {
        "priority": ["mempool.space", "blockstream.info", "blockchain.info"],
        "timeout_s": 10.0,
    },
    "health": {"fail_limit": 8, "block_duration_s": 600.0},
    "pacing": {
        "base_delay_s": 1.5,
        "max_delay_s": 4.0,
        "step_up_s": 0.8,
        "step_down_s": 0.4,
        "jitter_s": 1.5,
    },
    "scan": {
        "exhaustion_cooldown_s": 60.0,
        "hits_path": "balance_hits.jsonl",
        "addresses": [],
    },
    "notify": {
        "endpoint": "https://www.pushplus.plus/send",
        "token": None,
    },
}

CONFIG_ENV = "BALANCE_SCANNER_CONFIG"


def _default_yaml_path() -> Path:
    """Config.yaml lives at repo root (parent of package dir)."""
    return Path(__file__).resolve().parent.parent / "config.yaml"


def _explicit_yaml_path() -> Optional[Path]:
    override = os.environ.get(CONFIG_ENV, "").strip()
    return Path(override) if override else None


def _load_yaml(path: Optional[Path] = None) -> dict:
    """An explicit path (argument or BALANCE_SCANNER_CONFIG) must exist; the repo-root default may not."""
    config_path = path or _explicit_yaml_path()
    if config_path is None:
        config_path = _default_yaml_path()
        if not config_path.exists():
            return {}
    elif not config_path.exists():
        raise ConfigError(f"Config file not found: {config_path}")
    try:
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {config_path}: {exc}") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Cannot read config file {config_path}: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{config_path}: top level must be a mapping")
    return data


def _deep_merge(base: dict, override: dict) -> dict:
    out = dict(base)
    for k, v in override.items():
        if k in out and isinstance(out[k], dict) and isinstance(v, dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = v
    return out


def _env_overrides() -> dict:
    overrides: dict = {}
    hits_path = os.environ.get("BALANCE_SCANNER_HITS_PATH")
    if hits_path:
        overrides.setdefault("scan", {})["hits_path"] = hits_path
    token = os.environ.get("BALANCE_SCANNER_PUSH_TOKEN")
    if token:
        overrides.setdefault("notify", {})["token"] = token
    endpoint = os.environ.get("BALANCE_SCANNER_PUSH_ENDPOINT")
    if endpoint:
        overrides.setdefault("notify", {})["endpoint"] = endpoint
    return overrides


def get_config(path: Optional[str] = None) -> dict:
    """Return merged config: defaults <- config.yaml <- env (.env is loaded first)."""
    load_dotenv()
    merged = _deep_merge(_DEFAULTS, _load_yaml(Path(path) if path else None))
    merged = _deep_merge(merged, _env_overrides())
    return merged


def _section(cfg: Optional[dict], name: str) -> dict:
    section = (cfg if cfg is not None else get_config()).get(name)
    if not isinstance(section, dict):
        raise ConfigError(f"config section '{name}' must be a mapping")
    return section


def _number(section: dict, key: str, name: str) -> float:
    value: Any = section.get(key)
    try:
        out = float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{name}.{key} must be a number, got {value!r}") from exc
    if out < 0:
        raise ConfigError(f"{name}.{key} must be >= 0, got {out}")
    return out


# Convenience accessors; pass a merged config to avoid re-reading YAML.
def provider_priority(cfg: Optional[dict] = None) -> list:
    priority = _section(cfg, "providers").get("priority")
    if not isinstance(priority, list) or not priority:
        raise ConfigError("providers.priority must be a non-empty list")
    return [str(p) for p in priority]


def provider_timeout_s(cfg: Optional[dict] = None) -> float:
    return _number(_section(cfg, "providers"), "timeout_s", "providers")


def fail_limit(cfg: Optional[dict] = None) -> int:
    limit = int(_number(_section(cfg, "health"), "fail_limit", "health"))
    if limit < 1:
        raise ConfigError("health.fail_limit must be >= 1")
    return limit


def block_duration_s(cfg: Optional[dict] = None) -> float:
    return _number(_section(cfg, "health"), "block_duration_s", "health")


def pacing_settings(cfg: Optional[dict] = None) -> dict:
    section = _section(cfg, "pacing")
    keys = ("base_delay_s", "max_delay_s", "step_up_s", "step_down_s", "jitter_s")
    out = {k: _number(section, k, "pacing") for k in keys}
    if out["base_delay_s"] > out["max_delay_s"]:
        raise ConfigError("pacing.base_delay_s must not exceed pacing.max_delay_s")
    return out


def exhaustion_cooldown_s(cfg: Optional[dict] = None) -> float:
    return _number(_section(cfg, "scan"), "exhaustion_cooldown_s", "scan")


def hits_path(cfg: Optional[dict] = None) -> str:
    return str(_section(cfg, "scan").get("hits_path") or _DEFAULTS["scan"]["hits_path"])


def scan_addresses(cfg: Optional[dict] = None) -> list:
    addresses = _section(cfg, "scan").get("addresses") or []
    if not isinstance(addresses, list):
        raise ConfigError("scan.addresses must be a list")
    return list(addresses)


def notify_token(cfg: Optional[dict] = None) -> Optional[str]:
    token = _section(cfg, "notify").get("token")
    return str(token) if token else None


def notify_endpoint(cfg: Optional[dict] = None) -> str:
    return str(_section(cfg, "notify").get("endpoint") or _DEFAULTS["notify"]["endpoint"])
