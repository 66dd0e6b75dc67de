"""Merge parsed NMEA records into one current-best-known fix."""

from __future__ import annotations

from dataclasses import replace
import threading
import time
from types import MappingProxyType
from typing import Any, Callable, Mapping

from gnss_viewer.config import ViewerConfig
from gnss_viewer.models import (
    FixSnapshot,
    GbsRecord,
    GgaRecord,
    GsaRecord,
    GsvRecord,
    GsvSatellite,
    ParsedRecord,
    RmcRecord,
    SatelliteRecord,
    VtgRecord,
)
from gnss_viewer.nmea.gsv import GsvAccumulator, constellation_for
from gnss_viewer.nmea.parser import parse_sentence, sentence_id
from gnss_viewer.utils.logging import get_logger

_LOG = get_logger(__name__)


class FixAggregator:
    """Cross-sentence fix state.

    Each record type owns a subset of the snapshot fields. A field is only
    overwritten by a value that is present in the new record, so a sentence
    without altitude does not erase the altitude a GGA reported earlier.

    The snapshot is immutable and swapped under a lock, so ``snapshot`` can be
    read from any thread without seeing a half-applied merge.
    """

    def __init__(
        self,
        cfg: ViewerConfig | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.cfg = cfg or ViewerConfig()
        self._clock = clock
        self._lock = threading.RLock()
        self.reset()

    def reset(self) -> None:
        with self._lock:
            self._snapshot = FixSnapshot()
            self._priors: dict[str, ParsedRecord] = {}
            self._gsv = GsvAccumulator()
            self._gsv_cycles: dict[str, tuple[GsvSatellite, ...]] = {}
            self._latest_sentences: dict[str, str] = {}
            self._last_activity_s: float | None = None

    @property
    def snapshot(self) -> FixSnapshot:
        return self._snapshot

    @property
    def last_activity_s(self) -> float | None:
        """Receive time of the last ``$`` line, valid or not."""
        return self._last_activity_s

    @property
    def latest_sentences(self) -> Mapping[str, str]:
        """Latest accepted raw line per sentence id (``GPGGA``, ``GLGSV``, ...)."""
        with self._lock:
            return MappingProxyType(dict(self._latest_sentences))

    def ingest(self, sentence: str, now: float | None = None) -> FixSnapshot:
        """Parse one raw line and merge it into the snapshot."""

        now = self._now(now)
        line = sentence.strip()
        with self._lock:
            if line.startswith("$"):
                self._last_activity_s = now

            ident = sentence_id(line)
            if ident is None:
                return self._snapshot
            talker, kind = ident
            # GSV cycles are per constellation; other types share one prior.
            prior_key = talker + kind if kind == "GSV" else kind
            prior = self._priors.get(prior_key)
            record = parse_sentence(line, prior, validate=self.cfg.validate_checksum)
            if record is None or record is prior:
                _LOG.debug("Ignored sentence %s", line[:6])
                return self._snapshot

            self._priors[prior_key] = record
            self._latest_sentences[talker + kind] = line
            return self._merge_locked(record, now)

    def merge(self, record: ParsedRecord, now: float | None = None) -> FixSnapshot:
        """Merge an already parsed record."""

        now = self._now(now)
        with self._lock:
            return self._merge_locked(record, now)

    def expire_if_stale(self, now: float | None = None) -> bool:
        """Invalidate the fix when the stream has been silent too long.

        Returns True when the snapshot was invalidated by this call.
        """

        now = self._now(now)
        with self._lock:
            if self._last_activity_s is None:
                return False
            silent_s = now - self._last_activity_s
            if silent_s < self.cfg.stale_timeout_s:
                return False
            _LOG.info("No NMEA data for %.1f s; fix invalidated", silent_s)
            self.reset()
            return True

    def gsv_satellites(self) -> list[SatelliteRecord]:
        """Satellites of the latest complete GSV cycle of each talker.

        Satellites without elevation or azimuth cannot be placed and are left
        out. ``used_in_fix`` comes from the latest GSA id list.
        """

        with self._lock:
            used = set(self._snapshot.satellites_used or ())
            cycles = list(self._gsv_cycles.items())

        satellites: list[SatelliteRecord] = []
        for talker, cycle in cycles:
            for sat in cycle:
                if sat.elevation_deg is None or sat.azimuth_deg is None:
                    continue
                satellites.append(
                    SatelliteRecord(
                        prn=sat.prn,
                        constellation=constellation_for(talker, sat.prn),
                        snr_dbhz=sat.snr_dbhz if sat.snr_dbhz is not None else 0.0,
                        used_in_fix=sat.prn in used,
                        azimuth_deg=sat.azimuth_deg,
                        elevation_deg=sat.elevation_deg,
                    )
                )
        return satellites

    def _now(self, now: float | None) -> float:
        return float(self._clock() if now is None else now)

    def _merge_locked(self, record: ParsedRecord, now: float) -> FixSnapshot:
        if isinstance(record, GgaRecord):
            updates = _gga_fields(record)
            updates["gga_t_s"] = now
        elif isinstance(record, RmcRecord):
            updates = _rmc_fields(record)
            updates["rmc_t_s"] = now
        elif isinstance(record, GbsRecord):
            updates = {"gbs_errors_m": record.errors or None, "gbs_t_s": now}
        elif isinstance(record, GsaRecord):
            updates = _gsa_fields(record)
            updates["gsa_t_s"] = now
        elif isinstance(record, VtgRecord):
            updates = _vtg_fields(record)
            updates["vtg_t_s"] = now
        elif isinstance(record, GsvRecord):
            updates = self._gsv_fields(record)
            updates["gsv_t_s"] = now
        else:
            raise TypeError(f"Unsupported record type: {type(record).__name__}")

        present = {key: value for key, value in updates.items() if value is not None}
        merged = replace(self._snapshot, known=True, **present)
        self._snapshot = replace(merged, accuracy_m=self._accuracy(merged))
        return self._snapshot

    def _gsv_fields(self, record: GsvRecord) -> dict[str, Any]:
        cycle = self._gsv.feed(record)
        if cycle is None:
            return {}
        self._gsv_cycles[record.talker] = cycle
        in_view = dict(self._snapshot.satellites_in_view)
        in_view[record.talker] = (
            record.satellites_in_view if record.satellites_in_view is not None else len(cycle)
        )
        return {"satellites_in_view": in_view}

    def _accuracy(self, snapshot: FixSnapshot) -> float | None:
        """HDOP scaled by the sensor accuracy plus the GBS error triple."""

        terms: list[float] = []
        if snapshot.hdop is not None:
            terms.append(snapshot.hdop * self.cfg.sensor_accuracy_m)
        if snapshot.gbs_errors_m:
            terms.append(sum(snapshot.gbs_errors_m))
        total = float(sum(terms))
        # A zero estimate means the receiver did not report one.
        if total <= 0.0:
            return None
        return total


def _gga_fields(record: GgaRecord) -> dict[str, Any]:
    return {
        "time": record.time,
        "latitude_deg": record.latitude_deg,
        "longitude_deg": record.longitude_deg,
        "lat_hemisphere": record.lat_hemisphere,
        "lon_hemisphere": record.lon_hemisphere,
        "fix_quality": record.fix_quality,
        "num_satellites": record.num_satellites,
        "hdop": record.hdop,
        "altitude_m": record.altitude_m,
        "geoid_separation_m": record.geoid_separation_m,
        "msl_altitude_m": record.msl_altitude_m,
    }


def _rmc_fields(record: RmcRecord) -> dict[str, Any]:
    return {
        "time": record.time,
        "date": record.date,
        "latitude_deg": record.latitude_deg,
        "longitude_deg": record.longitude_deg,
        "lat_hemisphere": record.lat_hemisphere,
        "lon_hemisphere": record.lon_hemisphere,
        "speed_knots": record.speed_knots,
        "course_deg": record.course_deg,
        "magnetic_variation_deg": record.magnetic_variation_deg,
    }


def _gsa_fields(record: GsaRecord) -> dict[str, Any]:
    return {
        "fix_type": record.fix_type,
        "satellites_used": record.satellite_ids,
        "pdop": record.pdop,
        "hdop": record.hdop,
        "vdop": record.vdop,
    }


def _vtg_fields(record: VtgRecord) -> dict[str, Any]:
    return {
        "course_deg": record.course_true_deg,
        "course_magnetic_deg": record.course_magnetic_deg,
        "speed_knots": record.speed_knots,
        "speed_kmh": record.speed_kmh,
    }
