"""NMEA 0183 checksum helpers.

The checksum is the XOR of every character between ``$`` and ``*``, written as
two uppercase hex digits after the ``*``. The parser does not require it; a
host on an untrusted link can opt in with ``ViewerConfig.validate_checksum``.
"""

from __future__ import annotations


def nmea_checksum(payload: str) -> str:
    """Return the NMEA XOR checksum as a 2-digit uppercase hex string."""
    checksum = 0
    for char in payload:
        checksum ^= ord(char)
    return f"{checksum:02X}"


def split_checksum(sentence: str) -> tuple[str, str | None]:
    """Split ``$body*hh`` into ``("$body", "hh")``; the suffix is None when absent."""
    sentence = sentence.strip()
    if "*" not in sentence:
        return sentence, None
    body, _, suffix = sentence.partition("*")
    return body, suffix[:2]


def checksum_matches(sentence: str) -> bool:
    """True when the sentence carries a ``*hh`` suffix matching its payload."""
    body, provided = split_checksum(sentence)
    if not body.startswith("$") or provided is None or len(provided) != 2:
        return False
    try:
        return int(provided, 16) == int(nmea_checksum(body[1:]), 16)
    except ValueError:
        return False
