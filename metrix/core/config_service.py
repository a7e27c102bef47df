"""Layered settings for metrix.

Later layers override earlier ones:

    built-in defaults < ~/.config/metrix/config.toml < ./.metrix.toml < METRIX_* env

Only two settings matter today: the viewer theme and the payload used when a
command is run without one.
"""
from __future__ import annotations

import copy
import logging
import os
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import tomli_w

from metrix.errors import ConfigError

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

logger = logging.getLogger("metrix.config")

THEMES = ("light", "dark")
DEFAULT_THEME = "light"

DEFAULTS: dict[str, Any] = {
    "ui": {"theme": DEFAULT_THEME, "plain_output": False},
    "report": {"payload": ""},
}

ENV_VAR_MAP = {
    "METRIX_THEME": "ui.theme",
    "METRIX_PLAIN": "ui.plain_output",
    "METRIX_PAYLOAD": "report.payload",
}

_TRUTHY = {"true", "1", "yes"}
_FALSY = {"false", "0", "no"}


def _global_config_dir() -> Path:
    return Path.home() / ".config" / "metrix"


def _global_config_path() -> Path:
    return _global_config_dir() / "config.toml"


def _project_config_path() -> Path:
    """.metrix.toml in the working directory."""
    return Path.cwd() / ".metrix.toml"


def _read_toml(path: Path) -> dict:
    """Load a settings file. Missing or broken files count as empty."""
    if not path.is_file():
        return {}
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError) as e:
        logger.warning("Ignoring unreadable settings file %s: %s", path, e)
        return {}


def _write_toml(data: dict, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(tomli_w.dumps(data), encoding="utf-8")


def _deep_merge(base: dict, override: dict) -> dict:
    """New dict with override layered onto base; nested tables merge."""
    merged = dict(base)
    for key, value in override.items():
        below = merged.get(key)
        if isinstance(below, dict) and isinstance(value, dict):
            value = _deep_merge(below, value)
        merged[key] = value
    return merged


def _get_nested(data: dict, dotted_key: str, default: Any = None) -> Any:
    node: Any = data
    for part in dotted_key.split("."):
        node = node.get(part) if isinstance(node, dict) else None
        if node is None:
            return default
    return node


def _set_nested(data: dict, dotted_key: str, value: Any) -> None:
    *parents, leaf = dotted_key.split(".")
    node = data
    for part in parents:
        child = node.get(part)
        if not isinstance(child, dict):
            child = node[part] = {}
        node = child
    node[leaf] = value


def _coerce_env(value: str) -> Any:
    lowered = value.lower()
    if lowered in _TRUTHY:
        return True
    if lowered in _FALSY:
        return False
    return value


def _describe(path: Path) -> str:
    return f"{path} ({'exists' if path.is_file() else 'not found'})"


@dataclass
class ResolvedConfig:
    """Merged settings plus the files that contributed to them."""
    data: dict = field(default_factory=dict)
    global_config_path: Optional[Path] = None
    project_config_path: Optional[Path] = None

    def get(self, dotted_key: str, default: Any = None) -> Any:
        return _get_nested(self.data, dotted_key, default)


class ConfigService:
    """Resolves and persists metrix settings.

    Resolution is cached until a write goes through set_global or a caller
    asks for resolve(force=True).
    """

    def __init__(self):
        self._resolved: Optional[ResolvedConfig] = None

    def resolve(self, force: bool = False) -> ResolvedConfig:
        if self._resolved is not None and not force:
            return self._resolved

        merged = copy.deepcopy(DEFAULTS)
        found: dict[str, Optional[Path]] = {}
        for layer, path in (("global", _global_config_path()), ("project", _project_config_path())):
            layer_data = _read_toml(path)
            found[layer] = path if path.is_file() else None
            if layer_data:
                merged = _deep_merge(merged, layer_data)
                logger.debug("Applied %s settings from %s", layer, path)

        for env_var, dotted_key in ENV_VAR_MAP.items():
            raw = os.environ.get(env_var)
            if raw is not None:
                _set_nested(merged, dotted_key, _coerce_env(raw))
                logger.debug("Applied %s from environment", env_var)

        self._resolved = ResolvedConfig(
            data=merged,
            global_config_path=found["global"],
            project_config_path=found["project"],
        )
        return self._resolved

    def get(self, dotted_key: str, default: Any = None) -> Any:
        return self.resolve().get(dotted_key, default)

    def get_theme(self) -> str:
        """The stored theme; anything other than light/dark reads as light."""
        theme = self.get("ui.theme", DEFAULT_THEME)
        if theme in THEMES:
            return theme
        logger.warning("Ignoring unknown theme %r, using %s", theme, DEFAULT_THEME)
        return DEFAULT_THEME

    def set_theme(self, theme: str) -> str:
        """Persist the theme preference to the global settings file."""
        if theme not in THEMES:
            raise ConfigError(
                f"Unknown theme '{theme}'. Choose one of: {', '.join(THEMES)}",
                context={"theme": theme},
            )
        self.set_global("ui.theme", theme)
        return theme

    def get_default_payload(self) -> Optional[Path]:
        """Payload path used when a command is not given one."""
        value = self.get("report.payload", "")
        return Path(value).expanduser() if value else None

    def set_global(self, dotted_key: str, value: Any) -> None:
        path = _global_config_path()
        stored = _read_toml(path)
        _set_nested(stored, dotted_key, value)
        _write_toml(stored, path)
        self._resolved = None
        logger.info("Stored %s = %r in %s", dotted_key, value, path)

    def show(self) -> dict:
        """Freshly resolved settings and the files they came from."""
        resolved = self.resolve(force=True)
        sources = {
            "global_config": resolved.global_config_path,
            "project_config": resolved.project_config_path,
        }
        return {
            "resolved": resolved.data,
            "sources": {name: str(p) if p else None for name, p in sources.items()},
        }

    def config_paths(self) -> dict[str, str]:
        return {
            "global_config": _describe(_global_config_path()),
            "project_config": _describe(_project_config_path()),
        }


_config_service: Optional[ConfigService] = None


def get_config_service() -> ConfigService:
    global _config_service
    if _config_service is None:
        _config_service = ConfigService()
    return _config_service


def reset_config_service() -> None:
    """Drop the shared instance so the next lookup re-reads every layer."""
    global _config_service
    _config_service = None
