#!/usr/bin/env python3
"""Test suite for ephemeris decoding and management"""

import dataclasses
import numpy as np
import pytest
from pysatpos.core.data_structures import EPHEMERIS_FIELDS
from pysatpos.core.errors import MalformedEphemeris
from pysatpos.satellite.ephemeris import (
    RAW_EPHEMERIS_INDEX, decode_ephemeris, is_ephemeris_valid,
    ephemeris_age, EphemerisManager
)


class TestDecodeEphemeris:
    """Test decoding of raw receiver records"""

    def test_field_mapping(self, make_raw):
        """Every orbital parameter lands in its canonical slot"""
        raw = make_raw(prn=12, tow=338400.0, week=2200)
        eph, tow = decode_ephemeris(raw)

        assert tow == 338400.0
        assert eph.reference_time == 338400.0
        assert eph.prn == 12
        assert eph.week == 2200
        assert eph.iode == 42
        assert eph.iodc == 42
        assert eph.ura == 4.0

        expected = [raw[RAW_EPHEMERIS_INDEX[name]] for name in EPHEMERIS_FIELDS]
        np.testing.assert_array_equal(eph.to_vector(), expected)

    def test_accepts_list(self, make_raw):
        eph, _ = decode_ephemeris(list(make_raw()))
        assert eph.prn == 5

    def test_unhealthy_flag_kept(self, make_raw):
        eph, _ = decode_ephemeris(make_raw(health=1))
        assert not eph.is_healthy

    @pytest.mark.parametrize("size", [0, 21, 31, 33])
    def test_wrong_size(self, size):
        with pytest.raises(MalformedEphemeris):
            decode_ephemeris(np.ones(size))

    def test_non_numeric(self):
        with pytest.raises(MalformedEphemeris):
            decode_ephemeris(['abc'] * 32)

    @pytest.mark.parametrize("prn", [0, 33, 2.5])
    def test_invalid_prn(self, make_raw, prn):
        with pytest.raises(MalformedEphemeris):
            decode_ephemeris(make_raw(prn=prn))

    @pytest.mark.parametrize("name", ['A', 'e', 'M0', 'toe', 'f0'])
    def test_non_finite_orbit(self, make_raw, name):
        raw = make_raw()
        raw[RAW_EPHEMERIS_INDEX[name]] = np.nan
        with pytest.raises(MalformedEphemeris):
            decode_ephemeris(raw)

    @pytest.mark.parametrize("name", ['prn', 'tow', 'week', 'health'])
    def test_non_finite_header(self, make_raw, name):
        raw = make_raw()
        raw[RAW_EPHEMERIS_INDEX[name]] = np.inf
        with pytest.raises(MalformedEphemeris):
            decode_ephemeris(raw)

    def test_invalid_orbit_shape(self, make_raw):
        with pytest.raises(MalformedEphemeris):
            decode_ephemeris(make_raw(A=0.0))
        with pytest.raises(MalformedEphemeris):
            decode_ephemeris(make_raw(e=1.0))
        with pytest.raises(MalformedEphemeris):
            decode_ephemeris(make_raw(e=-0.01))


class TestEphemerisValidity:
    """Test validity window helpers"""

    def test_valid_window(self, ephemeris):
        assert is_ephemeris_valid(ephemeris, 345600.0)
        assert is_ephemeris_valid(ephemeris, 345600.0 + 7200.0)
        assert not is_ephemeris_valid(ephemeris, 345600.0 + 7201.0)

    def test_unhealthy_invalid(self, make_eph):
        assert not is_ephemeris_valid(make_eph(svh=1), 345600.0)

    def test_age(self, make_eph):
        eph = make_eph(toc=604000.0)
        assert ephemeris_age(eph, 200.0) == pytest.approx(1000.0)


class TestEphemerisManager:
    """Test per-satellite ephemeris store"""

    def test_newest_record_kept(self, make_eph):
        manager = EphemerisManager()
        old = make_eph(reference_time=331200.0)
        new = make_eph(reference_time=338400.0, M0=0.1)

        assert manager.add(old)
        assert manager.add(new)
        assert manager.get(5) is new

        # Older and equally new records do not replace it
        assert not manager.add(old)
        assert not manager.add(dataclasses.replace(new, M0=0.2))
        assert manager.get(5) is new

    def test_new_week_replaces(self, make_eph):
        manager = EphemerisManager()
        manager.add(make_eph(week=2200, reference_time=590000.0))
        newer = make_eph(week=2201, reference_time=100.0)

        assert manager.add(newer)
        assert manager.get(5) is newer

    def test_decode_all_isolates_failures(self, make_raw):
        manager = EphemerisManager()
        bad = make_raw(prn=7)
        bad[RAW_EPHEMERIS_INDEX['e']] = np.nan

        rejected = manager.decode_all({
            3: make_raw(prn=3),
            7: bad,
            9: make_raw(prn=10),
            14: make_raw(prn=14),
            20: np.zeros(5),
        })

        assert sorted(rejected) == [7, 9, 20]
        assert manager.prns == [3, 14]
        assert len(manager) == 2
        assert 3 in manager
        assert 7 not in manager

    def test_get_with_time(self, ephemeris):
        manager = EphemerisManager()
        manager.add(ephemeris)

        assert manager.get(5, 345600.0) is ephemeris
        assert manager.get(5, 345600.0 + 10000.0) is None
        assert manager.get(6) is None

    def test_clean_old_ephemerides(self, make_eph):
        manager = EphemerisManager()
        manager.add(make_eph(prn=1, toc=345600.0))
        manager.add(make_eph(prn=2, toc=330000.0))

        manager.clean_old_ephemerides(345600.0)

        assert manager.prns == [1]


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
