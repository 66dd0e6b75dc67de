"""GSV (satellites in view) cycle assembly.

A receiver reports its satellites in view as a cycle of ``total`` GSV messages
per talker, numbered 1..total, up to four satellites each. Each talker runs a
small state machine:

    IDLE --msg 1--> ACCUMULATING(n/total) --msg total--> COMPLETE

Message 1 always starts a new cycle, discarding any partial one. A message
that is not the expected next number drops the partial cycle back to IDLE so
satellites from two different cycles never mix.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from gnss_viewer.models import Constellation, GsvRecord, GsvSatellite
from gnss_viewer.utils.logging import get_logger

_LOG = get_logger(__name__)

# Talker-specific PRN offsets used by receivers that number every system in
# one space: SBAS 120-151 are sent as 33-64 under GP, GLONASS slots 1-32 as
# 65-96, and BeiDou as 101+.
_SBAS_NMEA_RANGE = range(33, 65)
_SBAS_PRN_OFFSET = 87
_GLONASS_NMEA_RANGE = range(65, 97)
_GLONASS_PRN_OFFSET = 64
_BEIDOU_PRN_OFFSET = 100
_SBAS_FIRST_PRN = 120

_TALKER_CONSTELLATIONS = {
    "GP": Constellation.GPS,
    "GL": Constellation.GLONASS,
    "GA": Constellation.GALILEO,
    "GB": Constellation.BEIDOU,
    "BD": Constellation.BEIDOU,
    "GQ": Constellation.QZSS,
    "GI": Constellation.IRNSS,
}


def normalize_prn(talker: str, prn: int) -> int:
    """Map a GSV PRN into its constellation's own numbering."""

    talker = talker.upper()[:2]
    if talker == "GP" and prn in _SBAS_NMEA_RANGE:
        return prn + _SBAS_PRN_OFFSET
    if talker == "GL" and prn in _GLONASS_NMEA_RANGE:
        return prn - _GLONASS_PRN_OFFSET
    if talker in ("GB", "BD") and prn > _BEIDOU_PRN_OFFSET:
        return prn - _BEIDOU_PRN_OFFSET
    return prn


def constellation_for(talker: str, prn: int) -> Constellation:
    """Constellation of a (normalized) PRN reported under ``talker``."""

    talker = talker.upper()[:2]
    if talker == "GP" and prn >= _SBAS_FIRST_PRN:
        return Constellation.SBAS
    return _TALKER_CONSTELLATIONS.get(talker, Constellation.UNKNOWN)


class GsvPhase(Enum):
    IDLE = "idle"
    ACCUMULATING = "accumulating"
    COMPLETE = "complete"


@dataclass
class _TalkerCycle:
    phase: GsvPhase = GsvPhase.IDLE
    received: int = 0
    total: int = 0
    satellites: list[GsvSatellite] = field(default_factory=list)


class GsvAccumulator:
    """Per-talker GSV cycle assembly."""

    def __init__(self) -> None:
        self._cycles: dict[str, _TalkerCycle] = {}

    def phase(self, talker: str) -> GsvPhase:
        cycle = self._cycles.get(talker)
        return GsvPhase.IDLE if cycle is None else cycle.phase

    def progress(self, talker: str) -> tuple[int, int]:
        """(messages received, total) of the talker's current cycle."""
        cycle = self._cycles.get(talker)
        if cycle is None:
            return 0, 0
        return cycle.received, cycle.total

    def feed(self, record: GsvRecord) -> tuple[GsvSatellite, ...] | None:
        """Add one GSV message; return the cycle's satellites when it completes."""

        if record.total_messages < 1 or not 1 <= record.message_number <= record.total_messages:
            _LOG.debug("GSV %s: message %s/%s out of range", record.talker, record.message_number, record.total_messages)
            return None

        cycle = self._cycles.setdefault(record.talker, _TalkerCycle())
        if record.message_number == 1:
            cycle.phase = GsvPhase.ACCUMULATING
            cycle.received = 0
            cycle.total = record.total_messages
            cycle.satellites = []
        elif (
            cycle.phase is not GsvPhase.ACCUMULATING
            or record.total_messages != cycle.total
            or record.message_number != cycle.received + 1
        ):
            if cycle.phase is GsvPhase.ACCUMULATING:
                _LOG.debug(
                    "GSV %s: expected message %d/%d, got %d/%d; dropping partial cycle",
                    record.talker,
                    cycle.received + 1,
                    cycle.total,
                    record.message_number,
                    record.total_messages,
                )
            self._cycles[record.talker] = _TalkerCycle()
            return None

        cycle.satellites.extend(record.satellites)
        cycle.received = record.message_number
        if cycle.received < cycle.total:
            return None

        cycle.phase = GsvPhase.COMPLETE
        return tuple(cycle.satellites)

    def reset(self) -> None:
        self._cycles.clear()
