from __future__ import annotations

import json
import os
import sys
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class AppConfig:
    relay_endpoint: str = "http://localhost:3001"
    rpc_url: str = "http://127.0.0.1:8545"
    evm_key_path: Optional[str] = None
    csv_filename: str = "voting_results.csv"
    request_timeout_s: float = 10.0
    receipt_poll_interval_s: float = 2.0
    confirm_transactions: bool = True


def is_frozen() -> bool:
    return bool(getattr(sys, "frozen", False))


def _read_json_file(path: Path) -> Dict[str, Any]:
    try:
        return json.loads(path.read_text())
    except Exception:
        return {}


def _find_dev_config_path() -> Optional[Path]:
    p = os.environ.get("VOTING_DASHBOARD_CONFIG")
    if p:
        return Path(p).expanduser().resolve()

    candidates = [
        Path.cwd() / "voting_dashboard_config.json",
        Path.home() / ".voting-dashboard" / "config.json",
    ]
    for c in candidates:
        if c.exists():
            return c.expanduser().resolve()
    return None


def _env_overrides() -> Dict[str, Any]:
    mapping = {
        "VOTING_RELAY_ENDPOINT": "relay_endpoint",
        "VOTING_RPC_URL": "rpc_url",
        "EVM_KEY_PATH": "evm_key_path",
    }
    return {key: os.environ[env] for env, key in mapping.items() if os.environ.get(env)}


def _apply_overrides(defaults: AppConfig, overrides: Dict[str, Any]) -> AppConfig:
    allowed_strings = {"relay_endpoint", "rpc_url", "evm_key_path", "csv_filename"}
    cleaned: Dict[str, Any] = {
        k: v for k, v in overrides.items() if k in allowed_strings and isinstance(v, str) and v
    }
    for key in ("request_timeout_s", "receipt_poll_interval_s"):
        raw = overrides.get(key)
        if raw is None:
            continue
        try:
            value = float(raw)
        except (TypeError, ValueError):
            continue
        if value > 0:
            cleaned[key] = value
    if "confirm_transactions" in overrides:
        cleaned["confirm_transactions"] = bool(overrides["confirm_transactions"])
    return replace(defaults, **cleaned) if cleaned else defaults


_CACHED: Optional[AppConfig] = None


def get_app_config(force_reload: bool = False) -> AppConfig:
    """
    Config policy:
    - Frozen build: hardcoded defaults plus environment overrides.
    - Local/dev: JSON file from `VOTING_DASHBOARD_CONFIG` or a well-known location,
      then environment overrides on top.
    """
    global _CACHED
    if _CACHED is not None and not force_reload:
        return _CACHED

    overrides: Dict[str, Any] = {}
    if not is_frozen():
        path = _find_dev_config_path()
        overrides.update(_read_json_file(path) if path else {})
    overrides.update(_env_overrides())

    _CACHED = _apply_overrides(AppConfig(), overrides)
    return _CACHED
