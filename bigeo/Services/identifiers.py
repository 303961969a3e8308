# bigeo/Services/identifiers.py

"""
Identifier and Timestamp Generation

Fabricates device/shipment identifiers and creation timestamps for records
created without them (quick manual entry from the dashboard).

- Device IDs:   iot-00042
- Shipment IDs: SHIP-00042 (same number as the device ID)
- Timestamps:   "YYYY-MM-DD HH:MM:SS" at UTC+05:30

Generated identifiers are NOT checked against the database. A collision is
reported by the unique constraints as a conflict.

The +05:30 offset is constant arithmetic on UTC, not a timezone lookup.
Consumers display created_at as-is and expect exactly this convention.
"""

import random
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple

IDENTIFIER_MAX = 99999
IDENTIFIER_WIDTH = 5

DEVICE_ID_PREFIX = "iot-"
SHIPMENT_ID_PREFIX = "SHIP-"

CREATED_AT_OFFSET = timedelta(hours=5, minutes=30)
CREATED_AT_FORMAT = "%Y-%m-%d %H:%M:%S"


def draw_identifier_number(rng=random) -> int:
    """Draw a pseudo-random integer in [0, 99999]."""
    return rng.randint(0, IDENTIFIER_MAX)


def format_device_id(number: int) -> str:
    return f"{DEVICE_ID_PREFIX}{number:0{IDENTIFIER_WIDTH}d}"


def format_shipment_id(number: int) -> str:
    return f"{SHIPMENT_ID_PREFIX}{number:0{IDENTIFIER_WIDTH}d}"


def generate_identifiers(rng=random) -> Tuple[str, str]:
    """
    Generate a matching (device_id, shipment_id) pair.

    Args:
        rng: Object with a randint(a, b) method (the random module by default)

    Returns:
        Tuple of device and shipment identifiers sharing one number.

    Example:
        >>> generate_identifiers()
        ('iot-04217', 'SHIP-04217')
    """
    number = draw_identifier_number(rng)
    return format_device_id(number), format_shipment_id(number)


def generate_created_at(now: Optional[datetime] = None) -> str:
    """
    Creation timestamp: UTC wall-clock time plus a fixed 5h30m.

    Args:
        now: UTC instant to convert (current time when omitted). Naive
            values are taken as UTC; aware values are converted to UTC first.

    Returns:
        str: "YYYY-MM-DD HH:MM:SS"
    """
    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is not None:
        now = now.astimezone(timezone.utc)

    shifted = now.replace(tzinfo=None) + CREATED_AT_OFFSET
    return shifted.strftime(CREATED_AT_FORMAT)


def normalize_created_at(value: str) -> str:
    """
    Bring a caller-supplied creation time to the stored format.

    Accepts ISO 8601 date-times ("2024-02-03T04:05:06", "2024-02-03 04:05:06",
    "2024-02-03T04:05:06Z"). The wall-clock value is kept as given; any UTC
    offset is dropped.

    Raises:
        ValueError: value is not an ISO 8601 date-time
    """
    value = value.strip()
    # fromisoformat only understands a "Z" suffix from Python 3.11 on
    if value[-1:] in ("Z", "z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    return parsed.replace(tzinfo=None).strftime(CREATED_AT_FORMAT)
