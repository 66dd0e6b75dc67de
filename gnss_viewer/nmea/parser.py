"""NMEA sentence parsing.

Every parser takes the previously parsed record of the same type as
``prior``. Fields that are empty or unreadable in the new sentence keep the
prior's value, and a sentence that cannot be read at all returns ``prior``
itself. Parsing never raises.
"""

from __future__ import annotations

from typing import Callable, TypeVar

from gnss_viewer.models import (
    FixQuality,
    FixType,
    GbsRecord,
    GgaRecord,
    GsaRecord,
    GsvRecord,
    GsvSatellite,
    ParsedRecord,
    RmcRecord,
    VtgRecord,
)
from gnss_viewer.nmea.checksum import checksum_matches, split_checksum
from gnss_viewer.nmea.fields import (
    VALID_TALKER_IDS,
    parse_coordinate_field,
    parse_date_field,
    parse_float_field,
    parse_int_field,
    parse_letter_field,
    parse_string_field,
    parse_time_field,
    signed_by_direction,
)
from gnss_viewer.nmea.gsv import normalize_prn
from gnss_viewer.utils.logging import get_logger

_LOG = get_logger(__name__)

R = TypeVar("R")

# Minimum number of comma-separated fields, sentence id included.
MIN_FIELDS = {
    "GGA": 14,
    "RMC": 12,
    "GBS": 5,
    "GSA": 15,
    "VTG": 9,
    "GSV": 4,
}

_GSA_ID_FIELDS = slice(3, 15)
_GSV_FIRST_GROUP = 4
_GSV_GROUP_SIZE = 4


def sentence_id(sentence: str) -> tuple[str, str] | None:
    """Return ``(talker, type)`` of a ``$TTSSS,...`` sentence.

    Example:
        >>> sentence_id("$GPGGA,172814.0,...")
        ('GP', 'GGA')
    """

    sentence = sentence.strip()
    if not sentence.startswith("$"):
        return None
    head = sentence[1:].split(",", 1)[0].split("*", 1)[0].upper()
    if len(head) != 5:
        return None
    talker, kind = head[:2], head[2:]
    if talker not in VALID_TALKER_IDS:
        return None
    return talker, kind


def _fields(sentence: str, kind: str, validate: bool) -> list[str] | None:
    ident = sentence_id(sentence)
    if ident is None or ident[1] != kind:
        return None
    if validate and not checksum_matches(sentence):
        _LOG.debug("%s rejected: checksum mismatch", kind)
        return None
    body, _ = split_checksum(sentence)
    fields = body.split(",")
    if len(fields) < MIN_FIELDS[kind]:
        _LOG.debug("%s rejected: %d fields, need %d", kind, len(fields), MIN_FIELDS[kind])
        return None
    return fields


def _parse(
    sentence: str,
    kind: str,
    record_type: type[R],
    prior: object | None,
    validate: bool,
    build: Callable[[list[str], R], R | None],
) -> R | None:
    same_prior = prior if isinstance(prior, record_type) else None
    fields = _fields(sentence, kind, validate)
    if fields is None:
        return same_prior
    try:
        record = build(fields, same_prior if same_prior is not None else record_type())
    except (ValueError, IndexError) as exc:
        _LOG.debug("%s rejected: %s", kind, exc)
        return same_prior
    return same_prior if record is None else record


def _field(fields: list[str], index: int) -> str:
    return fields[index].strip() if index < len(fields) else ""


def _fix_quality(value: str, fallback: FixQuality | None) -> FixQuality | None:
    code = parse_int_field(value)
    if code is None:
        return fallback
    try:
        return FixQuality(code)
    except ValueError:
        return fallback


def _fix_type(value: str, fallback: FixType | None) -> FixType | None:
    code = parse_int_field(value)
    if code is None:
        return fallback
    try:
        return FixType(code)
    except ValueError:
        return fallback


def _build_gga(fields: list[str], prior: GgaRecord) -> GgaRecord:
    lat_hemisphere = parse_letter_field(fields[3], prior.lat_hemisphere)
    lon_hemisphere = parse_letter_field(fields[5], prior.lon_hemisphere)
    altitude = parse_float_field(fields[9])
    geoid = parse_float_field(fields[11])
    if altitude is not None and geoid is not None:
        msl_altitude = altitude + geoid
    else:
        msl_altitude = prior.msl_altitude_m

    return GgaRecord(
        time=parse_time_field(fields[1], prior.time),
        latitude_deg=parse_coordinate_field(fields[2], lat_hemisphere or "", prior.latitude_deg),
        lat_hemisphere=lat_hemisphere,
        longitude_deg=parse_coordinate_field(fields[4], lon_hemisphere or "", prior.longitude_deg),
        lon_hemisphere=lon_hemisphere,
        fix_quality=_fix_quality(fields[6], prior.fix_quality),
        num_satellites=parse_int_field(fields[7], prior.num_satellites),
        hdop=parse_float_field(fields[8], prior.hdop),
        altitude_m=altitude if altitude is not None else prior.altitude_m,
        geoid_separation_m=geoid if geoid is not None else prior.geoid_separation_m,
        msl_altitude_m=msl_altitude,
        dgps_age_s=parse_float_field(fields[13], prior.dgps_age_s),
        dgps_station_id=parse_string_field(_field(fields, 14), prior.dgps_station_id),
    )


def _build_rmc(fields: list[str], prior: RmcRecord) -> RmcRecord:
    lat_hemisphere = parse_letter_field(fields[4], prior.lat_hemisphere)
    lon_hemisphere = parse_letter_field(fields[6], prior.lon_hemisphere)
    variation = signed_by_direction(parse_float_field(fields[10]), fields[11], "W")

    return RmcRecord(
        time=parse_time_field(fields[1], prior.time),
        status=parse_letter_field(fields[2], prior.status),
        latitude_deg=parse_coordinate_field(fields[3], lat_hemisphere or "", prior.latitude_deg),
        lat_hemisphere=lat_hemisphere,
        longitude_deg=parse_coordinate_field(fields[5], lon_hemisphere or "", prior.longitude_deg),
        lon_hemisphere=lon_hemisphere,
        speed_knots=parse_float_field(fields[7], prior.speed_knots),
        course_deg=parse_float_field(fields[8], prior.course_deg),
        date=parse_date_field(fields[9], prior.date),
        magnetic_variation_deg=variation if variation is not None else prior.magnetic_variation_deg,
    )


def _build_gbs(fields: list[str], prior: GbsRecord) -> GbsRecord:
    return GbsRecord(
        time=parse_time_field(fields[1], prior.time),
        lat_error_m=parse_float_field(fields[2], prior.lat_error_m),
        lon_error_m=parse_float_field(fields[3], prior.lon_error_m),
        alt_error_m=parse_float_field(fields[4], prior.alt_error_m),
    )


def _build_gsa(fields: list[str], prior: GsaRecord) -> GsaRecord:
    fix_type = _fix_type(fields[2], prior.fix_type)
    satellite_ids = tuple(
        prn for prn in (parse_int_field(value.strip()) for value in fields[_GSA_ID_FIELDS]) if prn is not None
    )
    if not satellite_ids and fix_type is not FixType.NONE:
        satellite_ids = prior.satellite_ids

    return GsaRecord(
        mode=parse_letter_field(fields[1], prior.mode),
        fix_type=fix_type,
        satellite_ids=satellite_ids,
        pdop=parse_float_field(_field(fields, 15), prior.pdop),
        hdop=parse_float_field(_field(fields, 16), prior.hdop),
        vdop=parse_float_field(_field(fields, 17), prior.vdop),
        system_id=parse_int_field(_field(fields, 18), prior.system_id),
    )


def _build_vtg(fields: list[str], prior: VtgRecord) -> VtgRecord:
    return VtgRecord(
        course_true_deg=parse_float_field(fields[1], prior.course_true_deg),
        course_magnetic_deg=parse_float_field(fields[3], prior.course_magnetic_deg),
        speed_knots=parse_float_field(fields[5], prior.speed_knots),
        speed_kmh=parse_float_field(fields[7], prior.speed_kmh),
        mode=parse_letter_field(_field(fields, 9), prior.mode),
    )


def _build_gsv(fields: list[str], prior: GsvRecord) -> GsvRecord | None:
    talker = fields[0][1:3].upper()
    total = parse_int_field(fields[1])
    number = parse_int_field(fields[2])
    if total is None or number is None:
        return None

    in_view_fallback = prior.satellites_in_view if prior.talker == talker else None
    satellites = []
    # Only complete groups; an NMEA 4.10 signal id may trail the last one.
    for start in range(_GSV_FIRST_GROUP, len(fields) - _GSV_GROUP_SIZE + 1, _GSV_GROUP_SIZE):
        group = fields[start : start + _GSV_GROUP_SIZE]
        prn = parse_int_field(group[0].strip())
        if prn is None:
            continue
        satellites.append(
            GsvSatellite(
                prn=normalize_prn(talker, prn),
                elevation_deg=parse_float_field(group[1].strip()),
                azimuth_deg=parse_float_field(group[2].strip()),
                snr_dbhz=parse_float_field(group[3].strip()),
            )
        )

    return GsvRecord(
        talker=talker,
        total_messages=total,
        message_number=number,
        satellites_in_view=parse_int_field(fields[3], in_view_fallback),
        satellites=tuple(satellites),
    )


def parse_gga(sentence: str, prior: object | None = None, *, validate: bool = False) -> GgaRecord | None:
    """Parse a GGA sentence.

    Example:
        >>> record = parse_gga("$GPGGA,172814.0,3723.46587704,N,12202.26957864,W,"
        ...                    "2,6,1.2,18.893,M,25.669,M,2.00031*4F")
        >>> record.fix_quality, record.num_satellites
        (<FixQuality.DGPS: 2>, 6)
    """
    return _parse(sentence, "GGA", GgaRecord, prior, validate, _build_gga)


def parse_rmc(sentence: str, prior: object | None = None, *, validate: bool = False) -> RmcRecord | None:
    return _parse(sentence, "RMC", RmcRecord, prior, validate, _build_rmc)


def parse_gbs(sentence: str, prior: object | None = None, *, validate: bool = False) -> GbsRecord | None:
    return _parse(sentence, "GBS", GbsRecord, prior, validate, _build_gbs)


def parse_gsa(sentence: str, prior: object | None = None, *, validate: bool = False) -> GsaRecord | None:
    """Parse a GSA sentence.

    An empty id list keeps the prior ids unless the fix type reports no fix,
    in which case no satellite is in use.
    """
    return _parse(sentence, "GSA", GsaRecord, prior, validate, _build_gsa)


def parse_vtg(sentence: str, prior: object | None = None, *, validate: bool = False) -> VtgRecord | None:
    return _parse(sentence, "VTG", VtgRecord, prior, validate, _build_vtg)


def parse_gsv(sentence: str, prior: object | None = None, *, validate: bool = False) -> GsvRecord | None:
    """Parse one GSV message; cycle assembly is left to ``GsvAccumulator``."""
    same_prior = prior if isinstance(prior, GsvRecord) else None
    fields = _fields(sentence, "GSV", validate)
    if fields is None:
        return same_prior
    try:
        record = _build_gsv(fields, same_prior or GsvRecord(talker="", total_messages=0, message_number=0))
    except (ValueError, IndexError) as exc:
        _LOG.debug("GSV rejected: %s", exc)
        return same_prior
    if record is None:
        _LOG.debug("GSV rejected: missing message counters")
        return same_prior
    return record


_PARSERS: dict[str, Callable[..., ParsedRecord | None]] = {
    "GGA": parse_gga,
    "RMC": parse_rmc,
    "GBS": parse_gbs,
    "GSA": parse_gsa,
    "VTG": parse_vtg,
    "GSV": parse_gsv,
}


def parse_sentence(
    sentence: str,
    prior: ParsedRecord | None = None,
    *,
    validate: bool = False,
) -> ParsedRecord | None:
    """Parse any supported sentence, merging onto a prior of the same type.

    Unsupported or unreadable sentences return ``prior`` unchanged.
    """

    ident = sentence_id(sentence)
    if ident is None:
        return prior
    parser = _PARSERS.get(ident[1])
    if parser is None:
        return prior
    return parser(sentence, prior, validate=validate)
