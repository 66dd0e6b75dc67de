"""NMEA field parsing utilities.

Fields are comma-separated and may be empty. Every helper takes the value the
field had before (``fallback``) and returns it whenever the new text is empty
or cannot be parsed, so a bad field never erases known data.
"""

from __future__ import annotations

from gnss_viewer.utils.angles import nmea_to_decimal

# Talker ids accepted on the sentence stream:
#   GP = GPS (and SBAS in GSV), GN = combined solution, GL = GLONASS,
#   GA = Galileo, GB/BD = BeiDou, GQ = QZSS, GI = NavIC/IRNSS
VALID_TALKER_IDS = ("GP", "GN", "GL", "GA", "GB", "BD", "GQ", "GI")

_DATE_CENTURY = 2000


def parse_float_field(value: str, fallback: float | None = None) -> float | None:
    if not value:
        return fallback
    try:
        return float(value)
    except ValueError:
        return fallback


def parse_int_field(value: str, fallback: int | None = None) -> int | None:
    if not value:
        return fallback
    try:
        return int(value)
    except ValueError:
        return fallback


def parse_string_field(value: str, fallback: str | None = None) -> str | None:
    if not value:
        return fallback
    return value


def parse_letter_field(value: str, fallback: str | None = None) -> str | None:
    """First character of a flag field (hemisphere, status, mode), upper-cased."""
    if not value:
        return fallback
    return value[0].upper()


def parse_time_field(value: str, fallback: str | None = None) -> str | None:
    """Convert ``hhmmss[.sss]`` to ``HH:MM:SS``.

    Example:
        >>> parse_time_field("172814.0")
        '17:28:14'
    """
    if not value or len(value) < 6:
        return fallback
    try:
        hours = int(value[0:2])
        minutes = int(value[2:4])
        seconds = int(value[4:6])
    except ValueError:
        return fallback
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def parse_date_field(value: str, fallback: str | None = None) -> str | None:
    """Convert ``ddmmyy`` to ``DD-MM-YYYY``.

    The two-digit year is always placed in 2000-2099.
    """
    if not value or len(value) != 6:
        return fallback
    try:
        day = int(value[0:2])
        month = int(value[2:4])
        year = _DATE_CENTURY + int(value[4:6])
    except ValueError:
        return fallback
    return f"{day:02d}-{month:02d}-{year:04d}"


def parse_coordinate_field(
    value: str,
    hemisphere: str,
    fallback: float | None = None,
) -> float | None:
    """Convert an NMEA ``(d)ddmm.mmmm`` coordinate to signed decimal degrees.

    South and west hemispheres give negative values; a missing hemisphere
    letter is read as north/east.

    Example:
        >>> parse_coordinate_field("4807.038", "N")
        48.1173
    """
    raw = parse_float_field(value)
    if raw is None:
        return fallback
    return nmea_to_decimal(raw, hemisphere or "")


def signed_by_direction(value: float | None, direction: str, negative: str) -> float | None:
    """Negate ``value`` when ``direction`` matches ``negative`` (case-insensitive)."""
    if value is None:
        return None
    if direction and direction.upper() == negative.upper():
        return -value
    return value
