"""neo-aprsparse: APRS packet decoding and SmartBeaconing.

``__version__`` is resolved before any submodule is imported so that
modules such as the APRS-IS client can report it without circular
imports.
"""

from importlib import metadata as _importlib_metadata
from pathlib import Path as _Path

_pkg_path = _Path(__file__).resolve()
_in_site = ("site-packages" in str(_pkg_path)) or ("dist-packages" in str(_pkg_path))


def _version_from_pyproject() -> str:
    try:
        import sys as _sys

        if _sys.version_info >= (3, 11):
            import tomllib as _toml
        else:  # pragma: no cover
            import tomli as _toml  # type: ignore
        _pyproj = _pkg_path.parents[2] / "pyproject.toml"
        if _pyproj.exists():
            with _pyproj.open("rb") as _f:
                _data = _toml.load(_f)
            return _data.get("project", {}).get("version", "0.0.0")
    except (OSError, ValueError):
        pass
    return "0.0.0"


if not _in_site:
    __version__ = _version_from_pyproject()
else:
    try:
        __version__ = _importlib_metadata.version("neo-aprsparse")
    except _importlib_metadata.PackageNotFoundError:
        __version__ = _version_from_pyproject()

from .beaconing import BeaconingConfig, Location, SmartBeaconing  # noqa: E402
from .callsign import Callsign  # noqa: E402
from .coordinates import (  # noqa: E402
    gridsquare_to_latlon,
    lat_to_nmea,
    latlon_to_gridsquare,
    lon_to_nmea,
    nmea_to_float,
)
from .data_type import PacketDataType, get_data_type  # noqa: E402
from .decoder import PacketDecoder, decode_packet, iter_decode  # noqa: E402
from .header import DecodeError, MalformedHeaderError, split_header  # noqa: E402
from .models import (  # noqa: E402
    Coordinate,
    CoordinateSet,
    DecodedPacket,
    DecodeResult,
    MessageData,
    MessageType,
    ParseDiagnostic,
    Position,
)

__all__ = [
    "BeaconingConfig",
    "Callsign",
    "Coordinate",
    "CoordinateSet",
    "DecodeError",
    "DecodeResult",
    "DecodedPacket",
    "Location",
    "MalformedHeaderError",
    "MessageData",
    "MessageType",
    "PacketDataType",
    "PacketDecoder",
    "ParseDiagnostic",
    "Position",
    "SmartBeaconing",
    "__version__",
    "decode_packet",
    "get_data_type",
    "gridsquare_to_latlon",
    "iter_decode",
    "lat_to_nmea",
    "latlon_to_gridsquare",
    "lon_to_nmea",
    "nmea_to_float",
    "split_header",
]
