"""Load SiteConfig, merging tessera.yaml / tessera.toml if present.

Merges file config with CLI kwargs. CLI overrides file.
"""

from __future__ import annotations

import tomllib
from dataclasses import fields
from pathlib import Path

import yaml

from tessera._errors import ConfigError
from tessera.config import SiteConfig

_FIELD_TYPES: dict[str, type] = {
    f.name: f.type for f in fields(SiteConfig) if f.name not in ("source", "dest")
}
_CONFIG_KEYS = frozenset(_FIELD_TYPES)
_NON_NEGATIVE = frozenset({"debounce_ms", "fetch_timeout"})


def load_config(source: str | Path, dest: str | Path, **overrides: object) -> SiteConfig:
    """Load SiteConfig for *source* and *dest*, optionally merging a config file.

    Looks for tessera.yaml, tessera.yml, or tessera.toml in the source root.
    If found, loads and merges with overrides. Overrides take precedence.

    Raises:
        ConfigError: If the config file exists but cannot be parsed.

    """
    source = Path(source)
    file_config = _read_tessera_config(source)
    merged = {**file_config, **overrides}
    return SiteConfig(source=source, dest=Path(dest), **merged)


def _read_tessera_config(source: Path) -> dict[str, object]:
    """Read tessera config from yaml/toml if present. Returns empty dict otherwise."""
    for name in ("tessera.yaml", "tessera.yml"):
        path = source / name
        if path.is_file():
            return _parse_yaml(path)
    toml_path = source / "tessera.toml"
    if toml_path.is_file():
        return _parse_toml(toml_path)
    return {}


def _parse_yaml(path: Path) -> dict[str, object]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as exc:
        msg = f"Invalid config file {path.name}: {exc}"
        raise ConfigError(msg, path=path) from exc
    if not isinstance(data, dict):
        msg = f"Config file {path.name} must contain a mapping"
        raise ConfigError(msg, path=path)
    return _check_types(_flatten_tessera_section(data), path)


def _parse_toml(path: Path) -> dict[str, object]:
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError) as exc:
        msg = f"Invalid config file {path.name}: {exc}"
        raise ConfigError(msg, path=path) from exc
    return _check_types(_flatten_tessera_section(data), path)


def _flatten_tessera_section(data: dict[str, object]) -> dict[str, object]:
    """Extract tessera.* keys and known top-level keys into one flat dict."""
    result: dict[str, object] = {}
    for k, v in data.items():
        if k in _CONFIG_KEYS:
            result[k] = v
    section = data.get("tessera")
    if isinstance(section, dict):
        for k, v in section.items():
            if k in _CONFIG_KEYS:
                result[k] = v
    return result


def _check_types(values: dict[str, object], path: Path) -> dict[str, object]:
    """Validate file values against SiteConfig field types.

    Integers are accepted for float fields.  Booleans are never accepted as
    numbers.

    Raises:
        ConfigError: If a value has the wrong type or a negative duration.

    """
    checked: dict[str, object] = {}
    for key, value in values.items():
        expected = _FIELD_TYPES[key]
        if expected is float and type(value) is int:
            value = float(value)
        if not isinstance(value, expected) or (
            isinstance(value, bool) and expected is not bool
        ):
            msg = (
                f"Config key {key!r} in {path.name} must be {expected.__name__}, "
                f"got {type(value).__name__}"
            )
            raise ConfigError(msg, path=path)
        if key in _NON_NEGATIVE and value < 0:  # type: ignore[operator]
            msg = f"Config key {key!r} in {path.name} must not be negative"
            raise ConfigError(msg, path=path)
        checked[key] = value
    return checked
