"""NMEA 0183 sentence parsing."""

from gnss_viewer.nmea.checksum import checksum_matches, nmea_checksum, split_checksum
from gnss_viewer.nmea.gsv import GsvAccumulator, GsvPhase, constellation_for, normalize_prn
from gnss_viewer.nmea.parser import (
    parse_gbs,
    parse_gga,
    parse_gsa,
    parse_gsv,
    parse_rmc,
    parse_sentence,
    parse_vtg,
    sentence_id,
)

__all__ = [
    "GsvAccumulator",
    "GsvPhase",
    "checksum_matches",
    "constellation_for",
    "nmea_checksum",
    "normalize_prn",
    "parse_gbs",
    "parse_gga",
    "parse_gsa",
    "parse_gsv",
    "parse_rmc",
    "parse_sentence",
    "parse_vtg",
    "sentence_id",
    "split_checksum",
]
