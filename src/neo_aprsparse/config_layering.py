"""Configuration layering: config file < environment variables < CLI args."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

try:  # Python 3.11+
    import tomllib
except ModuleNotFoundError:  # pragma: no cover - fallback for <3.11
    import tomli as tomllib  # type: ignore[no-redef]

ENV_PREFIX = "NEO_APRSPARSE_"
# Variables under the prefix that are not config keys
RESERVED_ENV_KEYS = frozenset({"CONFIG_PATH", "LOG_LEVEL"})


def load_layered_config(
    path: Path | None = None,
    cli_overrides: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Load and merge configuration from the file, environment and CLI.

    Precedence (later overrides earlier):
    1. the TOML file at ``path`` (if given and present)
    2. environment variables (``NEO_APRSPARSE_SECTION__KEY``)
    3. CLI overrides (nested dict)
    """
    result: dict[str, Any] = {}
    if path is not None and path.exists():
        result = _load_toml_file(path)

    env_overrides = _extract_env_overrides()
    if env_overrides:
        result = _deep_merge(result, env_overrides)

    if cli_overrides:
        result = _deep_merge(result, cli_overrides)

    return result


def _load_toml_file(path: Path) -> dict[str, Any]:
    with path.open("rb") as handle:
        return tomllib.load(handle)  # type: ignore[no-any-return]


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge override into base, preferring override values."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _extract_env_overrides() -> dict[str, Any]:
    """Collect ``NEO_APRSPARSE_*`` variables into a nested dict.

    ``NEO_APRSPARSE_APRS__SERVER=localhost`` -> ``{"aprs": {"server": "localhost"}}``
    """
    overrides: dict[str, Any] = {}

    for env_key, env_value in os.environ.items():
        if not env_key.startswith(ENV_PREFIX):
            continue
        suffix = env_key[len(ENV_PREFIX) :]
        if not suffix or suffix in RESERVED_ENV_KEYS:
            continue

        parts = suffix.lower().split("__")
        if len(parts) == 1:
            overrides[parts[0]] = _parse_env_value(env_value)
        elif len(parts) == 2:
            section, key = parts
            section_values = overrides.setdefault(section, {})
            if isinstance(section_values, dict):
                section_values[key] = _parse_env_value(env_value)

    return overrides


def _parse_env_value(raw: str) -> Any:
    """Turn "true"/"false" into bool and numeric strings into int/float."""
    lower = raw.lower()
    if lower == "true":
        return True
    if lower == "false":
        return False
    try:
        return int(raw)
    except ValueError:
        pass
    try:
        return float(raw)
    except ValueError:
        pass
    return raw
