from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Any, Dict

try:
    import tomllib  # type: ignore[attr-defined]
except ModuleNotFoundError:  # pragma: no cover
    import tomli as tomllib  # type: ignore[import]

from platformdirs import user_data_dir


log = logging.getLogger(__name__)

APP_NAME = "Storefront"
APP_AUTHOR = "Storefront"
DATA_DIR = Path(user_data_dir(APP_NAME, APP_AUTHOR))
SETTINGS_PATH = DATA_DIR / "settings.json"
DEFAULTS_PATH = Path(__file__).with_name("defaults.toml")
RETAIN_ENV = "STOREFRONT_RETAIN_HIDDEN_SELECTIONS"
_DEFAULTS_CACHE: Dict[str, Any] | None = None


def _load_defaults() -> Dict[str, Any]:
    global _DEFAULTS_CACHE
    if _DEFAULTS_CACHE is not None:
        return _DEFAULTS_CACHE
    if not DEFAULTS_PATH.exists():
        _DEFAULTS_CACHE = {}
        return _DEFAULTS_CACHE
    try:
        with DEFAULTS_PATH.open("rb") as fh:
            _DEFAULTS_CACHE = tomllib.load(fh)
    except Exception:
        log.warning("Could not read %s, using built-in defaults", DEFAULTS_PATH)
        _DEFAULTS_CACHE = {}
    return _DEFAULTS_CACHE


def _parse_bool(raw: str) -> bool | None:
    value = raw.strip().lower()
    if value in ("1", "true", "yes", "on"):
        return True
    if value in ("0", "false", "no", "off"):
        return False
    return None


def _coerce(name: str, current: Any, raw: Any) -> Any:
    """Value of `raw` as the type of `current`, or `current` when it does not fit."""
    if isinstance(current, bool):
        if isinstance(raw, bool):
            return raw
        if isinstance(raw, str):
            flag = _parse_bool(raw)
            if flag is not None:
                return flag
    elif isinstance(raw, type(current)) and not isinstance(raw, bool):
        if not isinstance(raw, str) or raw.strip():
            return raw
    log.warning("Ignoring setting %s=%r", name, raw)
    return current


@dataclass
class Settings:
    # Keep selected ids the current result no longer surfaces in the next query
    retain_hidden_selections: bool = True
    query_param: str = "q"
    facet_value_param: str = "fvid"

    @classmethod
    def defaults(cls) -> "Settings":
        settings = cls()
        settings._apply(_load_defaults())
        return settings

    def _apply(self, data: Dict[str, Any]) -> None:
        for f in fields(self):
            if f.name in data:
                setattr(self, f.name, _coerce(f.name, getattr(self, f.name), data[f.name]))

    @classmethod
    def load(cls, path: Path | None = None) -> "Settings":
        path = path or SETTINGS_PATH
        settings = cls.defaults()
        try:
            if path.exists():
                data = json.loads(path.read_text("utf-8"))
                settings._apply(data)
        except Exception:
            log.warning("Ignoring unreadable settings file %s", path)
            settings = cls.defaults()
        env = os.environ.get(RETAIN_ENV)
        if env:
            flag = _parse_bool(env)
            if flag is not None:
                settings.retain_hidden_selections = flag
        return settings

    def save(self, path: Path | None = None) -> None:
        path = path or SETTINGS_PATH
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(asdict(self), indent=2), encoding="utf-8")
