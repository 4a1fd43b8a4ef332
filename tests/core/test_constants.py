#!/usr/bin/env python3
"""Test suite for GPS constants and time helpers"""

import unittest
import numpy as np
from pysatpos.core.constants import (
    CLIGHT, FREQ_L1, FREQ_L2, RE_WGS84, OMGE, MU_GPS, F_REL,
    WEEK_SECONDS, HALF_WEEK, lam_carr, is_gps_prn
)
from pysatpos.core.stats import (
    DEFAULT_TRANSIT_TIME, ORBIT_RADIUS_MIN, ORBIT_RADIUS_MAX,
    RAW_OBS_SIZE, RAW_OBS_TIME_INDEX
)
from pysatpos.core.time import timediff, gps_seconds_to_week_tow


class TestPhysicalConstants(unittest.TestCase):
    """Test physical constants values"""

    def test_speed_of_light(self):
        """Test speed of light constant"""
        self.assertEqual(CLIGHT, 299792458.0)

    def test_gps_frequencies(self):
        """Test GPS frequency constants"""
        self.assertAlmostEqual(FREQ_L1, 1575.42e6, delta=1e3)
        self.assertAlmostEqual(FREQ_L2, 1227.60e6, delta=1e3)

        # L1 wavelength ~19 cm
        self.assertAlmostEqual(lam_carr(FREQ_L1), 0.1903, delta=1e-4)
        self.assertEqual(lam_carr(0.0), 0.0)

    def test_earth_parameters(self):
        """Test Earth parameters"""
        self.assertAlmostEqual(RE_WGS84, 6378137.0, delta=1.0)
        self.assertEqual(OMGE, 7.2921151467e-5)
        self.assertEqual(MU_GPS, 3.986005e14)

    def test_relativistic_constant(self):
        """Relativistic constant matches the published -4.442807633e-10"""
        self.assertAlmostEqual(F_REL, -4.442807633e-10, delta=1e-16)

    def test_orbit_band(self):
        """Nominal GPS orbit radius lies inside the plausibility band"""
        nominal = 26560e3
        self.assertLess(ORBIT_RADIUS_MIN, nominal)
        self.assertGreater(ORBIT_RADIUS_MAX, nominal)

        # Default transit ~67 ms
        self.assertAlmostEqual(DEFAULT_TRANSIT_TIME, 0.0667, delta=1e-3)

    def test_raw_observation_layout(self):
        """Receive time follows the 32 PRN slots"""
        self.assertEqual(RAW_OBS_TIME_INDEX, 33)
        self.assertEqual(RAW_OBS_SIZE, RAW_OBS_TIME_INDEX + 1)

    def test_gps_prn_range(self):
        """Test PRN validity"""
        self.assertTrue(is_gps_prn(1))
        self.assertTrue(is_gps_prn(32))
        self.assertFalse(is_gps_prn(0))
        self.assertFalse(is_gps_prn(33))


class TestTimeHelpers(unittest.TestCase):
    """Test GPS time-of-week arithmetic"""

    def test_timediff_same_week(self):
        self.assertEqual(timediff(345700.0, 345600.0), 100.0)
        self.assertEqual(timediff(345500.0, 345600.0), -100.0)

    def test_timediff_week_rollover(self):
        """Epoch just after the week boundary, reference just before"""
        self.assertAlmostEqual(timediff(100.0, WEEK_SECONDS - 100.0), 200.0)
        self.assertAlmostEqual(timediff(WEEK_SECONDS - 100.0, 100.0), -200.0)

    def test_timediff_bounded(self):
        for t in np.linspace(0.0, WEEK_SECONDS, 13):
            dt = timediff(t, 1000.0)
            self.assertLessEqual(abs(dt), HALF_WEEK)

    def test_gps_seconds_to_week_tow(self):
        week, tow = gps_seconds_to_week_tow(2200 * WEEK_SECONDS + 345600.0)
        self.assertEqual(week, 2200)
        self.assertEqual(tow, 345600.0)

        with self.assertRaises(ValueError):
            gps_seconds_to_week_tow(-1.0)


if __name__ == '__main__':
    unittest.main()
