"""Settings storage for application configuration."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


SETTINGS_PATH = Path(
    os.environ.get(
        "EFI_RELABEL_SETTINGS_PATH",
        Path.home() / ".config" / "efi-relabel" / "settings.json",
    )
)

# Default values - use these constants instead of hardcoding values elsewhere
DEFAULT_WILDCARD_LABEL = "*"

DEFAULT_SETTINGS: dict[str, Any] = {
    "efibootmgr_path": "efibootmgr",
    "sfdisk_path": "sfdisk",
    "lsblk_path": "lsblk",
    "wildcard_label": DEFAULT_WILDCARD_LABEL,
    "log_dir": None,
}


@dataclass
class SettingsStore:
    values: dict[str, Any] = field(default_factory=dict)


settings_store = SettingsStore()


def load_settings(path: Path | None = None) -> None:
    settings_store.values = dict(DEFAULT_SETTINGS)
    path = path or SETTINGS_PATH
    if not path.exists():
        return
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        return
    if isinstance(data, dict):
        settings_store.values.update(data)


def get_setting(key: str, default: Any | None = None) -> Any:
    return settings_store.values.get(key, default)


def get_tool(name: str) -> str:
    """Return the configured executable for an external tool."""
    return str(get_setting(f"{name}_path") or name)


def get_wildcard_label() -> str:
    return str(get_setting("wildcard_label") or DEFAULT_WILDCARD_LABEL)


load_settings()
