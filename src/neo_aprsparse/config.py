"""Configuration loading and persistence helpers."""

from __future__ import annotations

import os
import stat
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import tomli_w  # type: ignore[import]

from .aprsis_client import APRSISConfig
from .beaconing import KMH_TO_MS, BeaconingConfig
from .config_layering import load_layered_config

CONFIG_VERSION = 1
CONFIG_ENV_VAR = "NEO_APRSPARSE_CONFIG_PATH"
CONFIG_DIR_NAME = "neo-aprsparse"
CONFIG_FILENAME = "config.toml"

DEFAULT_APRS_SERVER = "rotate.aprs2.net"
DEFAULT_APRS_PORT = 14580
DEFAULT_CALLSIGN = "N0CALL"


def _xdg_path(env_var: str, default: Path) -> Path:
    value = os.environ.get(env_var)
    if value:
        return Path(value).expanduser()
    return default


def get_config_dir() -> Path:
    """Return the directory containing configuration files."""
    default = Path.home() / ".config"
    return _xdg_path("XDG_CONFIG_HOME", default) / CONFIG_DIR_NAME


def get_data_dir() -> Path:
    """Return the directory for runtime data/log files."""
    default = Path.home() / ".local" / "share"
    return _xdg_path("XDG_DATA_HOME", default) / CONFIG_DIR_NAME


def get_logs_dir() -> Path:
    return get_data_dir() / "logs"


def resolve_config_path(path: str | Path | None = None) -> Path:
    """Resolve the configuration file path, honouring overrides."""
    if path is not None:
        return Path(path).expanduser()
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path).expanduser()
    return get_config_dir() / CONFIG_FILENAME


@dataclass(slots=True)
class StationConfig:
    """Station identity and APRS-IS connection settings."""

    callsign: str = DEFAULT_CALLSIGN
    passcode: str | None = None
    aprs_server: str = DEFAULT_APRS_SERVER
    aprs_port: int = DEFAULT_APRS_PORT
    aprs_filter: str | None = None

    def to_aprsis_config(self, *, filter_string: str | None = None) -> APRSISConfig:
        """Build client settings; without a passcode the session is receive-only."""
        return APRSISConfig(
            host=self.aprs_server,
            port=self.aprs_port,
            callsign=self.callsign,
            passcode=self.passcode,
            filter_string=filter_string or self.aprs_filter,
            receive_only=self.passcode is None,
        )


@dataclass(slots=True)
class AppConfig:
    station: StationConfig = field(default_factory=StationConfig)
    beaconing: BeaconingConfig = field(default_factory=BeaconingConfig)

    def to_dict(self) -> dict[str, Any]:
        """Convert the configuration to a TOML-serialisable dictionary."""
        beaconing = self.beaconing
        return {
            "version": CONFIG_VERSION,
            "station": _drop_none(
                {
                    "callsign": self.station.callsign,
                    "passcode": self.station.passcode,
                }
            ),
            "aprs": _drop_none(
                {
                    "server": self.station.aprs_server,
                    "port": self.station.aprs_port,
                    "filter": self.station.aprs_filter,
                }
            ),
            "smartbeaconing": {
                "fast_speed_kmh": round(beaconing.fast_speed / KMH_TO_MS, 3),
                "fast_rate": beaconing.fast_rate,
                "slow_speed_kmh": round(beaconing.slow_speed / KMH_TO_MS, 3),
                "slow_rate": beaconing.slow_rate,
                "turn_time": beaconing.turn_time,
                "turn_min": beaconing.turn_min,
                "turn_slope": beaconing.turn_slope,
            },
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AppConfig:
        """Construct from a dictionary (typically parsed from TOML)."""
        version = data.get("version", CONFIG_VERSION)
        if version != CONFIG_VERSION:
            raise ValueError(f"Unsupported config version: {version}")

        station = data.get("station", {})
        aprs = data.get("aprs", {})
        smart = data.get("smartbeaconing", {})
        defaults = BeaconingConfig()

        try:
            station_config = StationConfig(
                callsign=str(station.get("callsign", DEFAULT_CALLSIGN)).upper(),
                passcode=_optional_str(station.get("passcode")),
                aprs_server=str(aprs.get("server", DEFAULT_APRS_SERVER)),
                aprs_port=int(aprs.get("port", DEFAULT_APRS_PORT)),
                aprs_filter=_optional_str(aprs.get("filter")),
            )
            beaconing = BeaconingConfig(
                fast_speed=_kmh(smart.get("fast_speed_kmh"), defaults.fast_speed),
                fast_rate=int(smart.get("fast_rate", defaults.fast_rate)),
                slow_speed=_kmh(smart.get("slow_speed_kmh"), defaults.slow_speed),
                slow_rate=int(smart.get("slow_rate", defaults.slow_rate)),
                turn_time=int(smart.get("turn_time", defaults.turn_time)),
                turn_min=float(smart.get("turn_min", defaults.turn_min)),
                turn_slope=float(smart.get("turn_slope", defaults.turn_slope)),
            )
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Invalid configuration value: {exc}") from exc
        return cls(station=station_config, beaconing=beaconing)


def _kmh(value: Any, default: float) -> float:
    if value in (None, ""):
        return default
    return float(value) * KMH_TO_MS


def _optional_str(value: Any) -> str | None:
    if value in (None, ""):
        return None
    return str(value)


def _drop_none(mapping: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in mapping.items() if value is not None}


def load_config(
    path: str | Path | None = None,
    cli_overrides: dict[str, Any] | None = None,
) -> AppConfig:
    """Load configuration; a missing file yields the defaults."""
    config_path = resolve_config_path(path)
    data = load_layered_config(config_path, cli_overrides)
    return AppConfig.from_dict(data)


def save_config(config: AppConfig, path: str | Path | None = None) -> Path:
    """Persist configuration to disk and return the file path."""
    config_path = resolve_config_path(path)
    config_path.parent.mkdir(parents=True, exist_ok=True)
    toml_text = tomli_w.dumps(config.to_dict())
    config_path.write_text(toml_text, encoding="utf-8")
    try:
        os.chmod(config_path, stat.S_IRUSR | stat.S_IWUSR)
    except PermissionError:  # pragma: no cover - some FS disallow chmod
        pass
    return config_path


def config_summary(config: AppConfig) -> str:
    """Generate a human-readable summary of key settings."""
    station = config.station
    beaconing = config.beaconing
    return (
        f"  Callsign : {station.callsign}\n"
        f"  APRS-IS  : {station.aprs_server}:{station.aprs_port}\n"
        f"  Filter   : {station.aprs_filter or 'none'}\n"
        f"  Beacon   : {beaconing.slow_rate}s slow / {beaconing.fast_rate}s fast"
    )
