import numpy as np

from gnss_viewer.config import ViewerConfig
from gnss_viewer.models import Constellation, FixQuality, FixType, GgaRecord
from gnss_viewer.receiver.fix_aggregator import FixAggregator


def test_initial_snapshot_is_unknown() -> None:
    snapshot = FixAggregator().snapshot
    assert snapshot.known is False
    assert snapshot.latitude_deg is None
    assert snapshot.accuracy_m is None


def test_gga_populates_position(gga_sentence: str) -> None:
    aggregator = FixAggregator()
    snapshot = aggregator.ingest(gga_sentence, now=5.0)

    assert snapshot.known is True
    assert np.isclose(snapshot.latitude_deg, 37.391097951)
    assert np.isclose(snapshot.longitude_deg, -122.037826311)
    assert snapshot.fix_quality is FixQuality.DGPS
    assert snapshot.num_satellites == 6
    assert snapshot.altitude_m == 18.893
    assert np.isclose(snapshot.msl_altitude_m, 44.562)
    assert snapshot.gga_t_s == 5.0
    assert snapshot.rmc_t_s is None


def test_rmc_merge_keeps_gga_altitude(gga_sentence: str, rmc_sentence: str) -> None:
    aggregator = FixAggregator()
    aggregator.ingest(gga_sentence, now=1.0)
    snapshot = aggregator.ingest(rmc_sentence, now=2.0)

    assert snapshot.altitude_m == 18.893
    assert snapshot.fix_quality is FixQuality.DGPS
    assert snapshot.time == "12:35:19"
    assert snapshot.date == "23-03-2094"
    assert snapshot.speed_knots == 22.4
    assert snapshot.magnetic_variation_deg == -3.1
    assert np.isclose(snapshot.latitude_deg, 48.1173)
    assert (snapshot.gga_t_s, snapshot.rmc_t_s) == (1.0, 2.0)


def test_gsa_and_vtg_merge(gsa_sentence: str, vtg_sentence: str) -> None:
    aggregator = FixAggregator()
    aggregator.ingest(gsa_sentence, now=1.0)
    snapshot = aggregator.ingest(vtg_sentence, now=2.0)

    assert snapshot.fix_type is FixType.FIX_3D
    assert snapshot.satellites_used == (4, 5, 9, 12, 24)
    assert (snapshot.pdop, snapshot.hdop, snapshot.vdop) == (2.5, 1.3, 2.1)
    assert snapshot.course_deg == 54.7
    assert snapshot.course_magnetic_deg == 34.4
    assert snapshot.speed_kmh == 10.2
    assert (snapshot.gsa_t_s, snapshot.vtg_t_s) == (1.0, 2.0)


def test_malformed_sentence_leaves_snapshot_identical(gga_sentence: str) -> None:
    aggregator = FixAggregator()
    before = aggregator.ingest(gga_sentence, now=1.0)

    assert aggregator.ingest("$GPGGA,172815.0,3723.4", now=2.0) is before
    assert aggregator.ingest("$GPZDA,172809.456,12,07,1996,00,00", now=3.0) is before
    assert aggregator.ingest("garbage", now=4.0) is before
    assert aggregator.snapshot is before


def test_accuracy_combines_hdop_and_gbs(
    gga_sentence: str, gbs_sentence: str, gsa_sentence: str
) -> None:
    aggregator = FixAggregator()

    assert np.isclose(aggregator.ingest(gga_sentence, now=1.0).accuracy_m, 1.2 * 4.5)
    assert np.isclose(aggregator.ingest(gbs_sentence, now=2.0).accuracy_m, 1.2 * 4.5 + 7.0)
    assert np.isclose(aggregator.ingest(gsa_sentence, now=3.0).accuracy_m, 1.3 * 4.5 + 7.0)


def test_accuracy_from_gbs_only(gbs_sentence: str) -> None:
    snapshot = FixAggregator().ingest(gbs_sentence, now=1.0)
    assert snapshot.gbs_errors_m == (1.5, 2.0, 3.5)
    assert np.isclose(snapshot.accuracy_m, 7.0)


def test_accuracy_unknown_without_hdop_or_gbs(rmc_sentence: str) -> None:
    assert FixAggregator().ingest(rmc_sentence, now=1.0).accuracy_m is None


def test_zero_error_terms_leave_accuracy_unknown() -> None:
    aggregator = FixAggregator()
    snapshot = aggregator.ingest("$GPGBS,172814.0,0.0,0.0,0.0,,,,", now=1.0)

    assert snapshot.gbs_errors_m == (0.0, 0.0, 0.0)
    assert snapshot.accuracy_m is None

    snapshot = aggregator.ingest("$GPGGA,172815.0,,,,,1,4,0.0,,M,,M,", now=2.0)
    assert snapshot.hdop == 0.0
    assert snapshot.accuracy_m is None


def test_sensor_accuracy_is_configurable(gga_sentence: str) -> None:
    aggregator = FixAggregator(ViewerConfig(sensor_accuracy_m=2.0))
    assert np.isclose(aggregator.ingest(gga_sentence, now=1.0).accuracy_m, 2.4)


def test_staleness_invalidates_everything(gga_sentence: str) -> None:
    aggregator = FixAggregator()
    aggregator.ingest(gga_sentence, now=0.0)

    assert aggregator.expire_if_stale(now=29.9) is False
    assert aggregator.snapshot.known is True
    assert aggregator.expire_if_stale(now=30.0) is True
    assert aggregator.snapshot.known is False
    assert aggregator.snapshot.latitude_deg is None
    assert aggregator.expire_if_stale(now=90.0) is False


def test_sentence_one_tick_before_timeout_keeps_fix(gga_sentence: str) -> None:
    aggregator = FixAggregator()
    aggregator.ingest(gga_sentence, now=0.0)
    aggregator.ingest("$GPGGA,bad", now=29.0)

    assert aggregator.expire_if_stale(now=30.0) is False
    assert aggregator.snapshot.known is True
    assert aggregator.expire_if_stale(now=59.0) is True


def test_expiry_clears_priors(gga_sentence: str) -> None:
    aggregator = FixAggregator()
    aggregator.ingest(gga_sentence, now=0.0)
    aggregator.expire_if_stale(now=31.0)

    snapshot = aggregator.ingest("$GPGGA,172815.0,,,,,2,6,1.2,,M,,M,", now=32.0)
    assert snapshot.known is True
    assert snapshot.latitude_deg is None
    assert snapshot.altitude_m is None


def test_expiry_uses_injected_clock(gga_sentence: str) -> None:
    now = [100.0]
    aggregator = FixAggregator(ViewerConfig(stale_timeout_s=5.0), clock=lambda: now[0])
    aggregator.ingest(gga_sentence)

    now[0] = 104.0
    assert aggregator.expire_if_stale() is False
    now[0] = 105.5
    assert aggregator.expire_if_stale() is True


def test_gsv_cycle_feeds_satellite_list(gsv_cycle: list[str], gsa_sentence: str) -> None:
    aggregator = FixAggregator()
    aggregator.ingest(gsa_sentence, now=0.5)
    for i, line in enumerate(gsv_cycle):
        aggregator.ingest(line, now=1.0 + i)

    snapshot = aggregator.snapshot
    assert snapshot.satellites_in_view == {"GP": 11}
    assert snapshot.gsv_t_s == 3.0

    satellites = aggregator.gsv_satellites()
    assert len(satellites) == 11
    assert all(sat.constellation is Constellation.GPS for sat in satellites)
    assert sorted(sat.prn for sat in satellites if sat.used_in_fix) == [4, 24]
    by_prn = {sat.prn: sat for sat in satellites}
    assert by_prn[18].elevation_deg == 67.0
    assert by_prn[18].azimuth_deg == 296.0
    assert by_prn[18].snr_dbhz == 40.0


def test_incomplete_gsv_cycle_reports_nothing(gsv_cycle: list[str]) -> None:
    aggregator = FixAggregator()
    aggregator.ingest(gsv_cycle[0], now=1.0)
    aggregator.ingest(gsv_cycle[2], now=2.0)

    assert aggregator.gsv_satellites() == []
    assert aggregator.snapshot.satellites_in_view == {}


def test_latest_sentences(gga_sentence: str, gsv_cycle: list[str]) -> None:
    aggregator = FixAggregator()
    aggregator.ingest(gga_sentence + "\r\n", now=1.0)
    aggregator.ingest(gsv_cycle[0], now=2.0)

    latest = aggregator.latest_sentences
    assert latest["GPGGA"] == gga_sentence
    assert latest["GPGSV"] == gsv_cycle[0]


def test_merge_parsed_record() -> None:
    aggregator = FixAggregator()
    snapshot = aggregator.merge(GgaRecord(hdop=2.0, altitude_m=None), now=7.0)

    assert snapshot.known is True
    assert snapshot.hdop == 2.0
    assert snapshot.altitude_m is None
    assert snapshot.gga_t_s == 7.0
    assert np.isclose(snapshot.accuracy_m, 9.0)


def test_reset_returns_to_initial_state(gga_sentence: str) -> None:
    aggregator = FixAggregator()
    aggregator.ingest(gga_sentence, now=1.0)
    aggregator.reset()

    assert aggregator.snapshot.known is False
    assert aggregator.last_activity_s is None
    assert dict(aggregator.latest_sentences) == {}
