"""Range checks applied to arguments before a request is sent.

The bounds are postcodes.io business rules, not transport limits.
"""

from collections.abc import Iterable, Mapping
from typing import Any, NamedTuple

from postcodes_io.exceptions import MissingRequired, OutOfRange

LIMIT_MAX = 100
POSTCODE_RADIUS_MAX = 2000
OUTCODE_RADIUS_MAX = 25000
POSTCODES_MAX = 100
GEOLOCATIONS_MAX = 100

LATITUDE_MIN = 49.85  # Pednathise Head, Western Rocks, Isles of Scilly
LATITUDE_MAX = 60.85  # Out Stack, Shetland
LONGITUDE_MIN = -8.638  # Soay, St Kilda
LONGITUDE_MAX = 52.483333  # Lowestoft Ness, Suffolk


class Range(NamedTuple):
    minimum: float
    maximum: float


LIMIT = Range(1, LIMIT_MAX)
POSTCODE_RADIUS = Range(1, POSTCODE_RADIUS_MAX)
OUTCODE_RADIUS = Range(1, OUTCODE_RADIUS_MAX)
POSTCODES_BATCH = Range(1, POSTCODES_MAX)
GEOLOCATIONS_BATCH = Range(1, GEOLOCATIONS_MAX)
LATITUDE = Range(LATITUDE_MIN, LATITUDE_MAX)
LONGITUDE = Range(LONGITUDE_MIN, LONGITUDE_MAX)


def check_range(param: str, value: float, bounds: Range, index: int | None = None) -> None:
    """Raise OutOfRange unless ``bounds.minimum <= value <= bounds.maximum``."""
    if not bounds.minimum <= value <= bounds.maximum:
        raise OutOfRange(param, value, bounds.minimum, bounds.maximum, index=index)


def check_ranges(checks: Iterable[tuple[str, float, Range]]) -> None:
    """Check ``(name, value, range)`` tuples in order, failing on the first violation."""
    for param, value, bounds in checks:
        check_range(param, value, bounds)


def check_batch_size(param: str, items: list[Any], bounds: Range) -> None:
    check_range(param, len(items), bounds)


def check_geolocation(item: Mapping[str, Any], index: int, radius: Range = POSTCODE_RADIUS) -> None:
    """Validate one bulk reverse geocoding item.

    Latitude and longitude are mandatory. ``limit`` and ``radius`` are optional
    per-item overrides, but when present they are held to the call-level ranges.
    """
    item_checks = (
        ("latitude", LATITUDE, True),
        ("longitude", LONGITUDE, True),
        ("limit", LIMIT, False),
        ("radius", radius, False),
    )
    for param, bounds, required in item_checks:
        value = item.get(param)
        if value is None:
            if required:
                raise MissingRequired(param, index)
            continue
        check_range(param, value, bounds, index=index)
