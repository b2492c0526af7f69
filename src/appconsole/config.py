"""
Console configuration — ~/.appconsole/config.json.

Keys: base_url, access_token, username. APPCONSOLE_CONFIG points at another
file; APPCONSOLE_BASE_URL overrides the stored base_url.
"""

import json
import os
from pathlib import Path
from typing import Any, Optional

DEFAULT_BASE_URL = "http://localhost:8080"
DEFAULT_CONFIG_FILE = Path.home() / ".appconsole" / "config.json"


def config_path() -> Path:
    override = os.environ.get("APPCONSOLE_CONFIG")
    return Path(override).expanduser() if override else DEFAULT_CONFIG_FILE


def load_config(path: Optional[Path] = None) -> dict[str, Any]:
    try:
        return json.loads((path or config_path()).read_text())
    except (FileNotFoundError, json.JSONDecodeError):
        return {}


def save_config(cfg: dict[str, Any], path: Optional[Path] = None) -> None:
    target = path or config_path()
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(json.dumps(cfg, indent=2))


def resolve_base_url(explicit: Optional[str] = None, cfg: Optional[dict[str, Any]] = None) -> str:
    """--base-url, then APPCONSOLE_BASE_URL, then the config file, then the default."""
    if explicit:
        return explicit
    env = os.environ.get("APPCONSOLE_BASE_URL")
    if env:
        return env
    cfg = load_config() if cfg is None else cfg
    return cfg.get("base_url") or DEFAULT_BASE_URL
