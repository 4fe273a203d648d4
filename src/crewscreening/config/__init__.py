"""Configuration management utilities."""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any, Mapping

import yaml

from ..schemas.config import AppConfig, load_config

DEFAULT_CONFIG_DIR = Path(__file__).resolve().parent


class ConfigManager:
    """Simple YAML-backed configuration loader."""

    def __init__(self, base_path: str | Path = DEFAULT_CONFIG_DIR):
        self._base_path = Path(base_path)

    def load(self, name: str) -> dict[str, Any]:
        """Load a YAML configuration by name without file extension."""
        path = self._base_path / f"{name}.yaml"
        with path.open("r", encoding="utf-8") as handle:
            return yaml.safe_load(handle) or {}


def load_default_settings() -> dict[str, Any]:
    """Return the packaged scoring defaults."""
    return ConfigManager().load("maritime")


def load_default_questions() -> list[dict[str, Any]]:
    """Return the packaged competency question bank."""
    return list(ConfigManager().load("questions").get("questions", []))


def merge_settings(base: Mapping[str, Any], override: Mapping[str, Any] | None) -> dict[str, Any]:
    """Deep-merge ``override`` into a copy of ``base``.

    Nested mappings merge key by key; any other value in ``override`` replaces
    the base value outright.
    """
    merged = copy.deepcopy(dict(base))
    for key, value in (override or {}).items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = merge_settings(current, value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def build_app_config(overrides: Mapping[str, Any] | None = None) -> AppConfig:
    """Validate the packaged defaults with ``overrides`` merged on top."""
    return load_config(merge_settings(load_default_settings(), overrides))


__all__ = [
    "build_app_config",
    "ConfigManager",
    "DEFAULT_CONFIG_DIR",
    "load_default_questions",
    "load_default_settings",
    "merge_settings",
]
