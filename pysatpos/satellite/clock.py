# Copyright 2024 inuex35
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Satellite clock computation and correction"""

import numpy as np

from ..core.constants import F_REL, FREQ_L1, FREQ_L2, MU_GPS
from ..core.data_structures import EphemerisRecord
from ..core.stats import KEPLER_MAX_ITER, KEPLER_TOL
from ..core.time import timediff
from .kepler import solve_kepler


def clock_polynomial(eph: EphemerisRecord, time: float) -> tuple[float, float]:
    """
    Evaluate the broadcast clock polynomial

    Parameters:
    -----------
    eph : EphemerisRecord
        Satellite ephemeris
    time : float
        Time of interest (s of week)

    Returns:
    --------
    dts : float
        Satellite clock bias (s)
    ddts : float
        Satellite clock drift (s/s)
    """
    # Time from clock reference epoch
    dt = timediff(time, eph.toc)

    dts = eph.f0 + eph.f1 * dt + eph.f2 * dt**2
    ddts = eph.f1 + 2.0 * eph.f2 * dt

    return dts, ddts


def relativistic_correction(eph: EphemerisRecord, E: float) -> float:
    """Relativistic clock correction F*e*sqrt(A)*sin(E) (s)"""
    return F_REL * eph.e * np.sqrt(eph.A) * np.sin(E)


def compute_satellite_clock(eph: EphemerisRecord, time: float,
                            tolerance: float = KEPLER_TOL,
                            max_iterations: int = KEPLER_MAX_ITER) -> tuple[float, float]:
    """
    Compute satellite clock bias and drift

    Parameters:
    -----------
    eph : EphemerisRecord
        Satellite ephemeris
    time : float
        Time of interest (s of week)
    tolerance : float
        Kepler convergence tolerance (rad)
    max_iterations : int
        Kepler iteration cap

    Returns:
    --------
    dts : float
        Satellite clock bias including relativistic correction (s)
    ddts : float
        Satellite clock drift including relativistic rate (s/s)
    """
    dts, ddts = clock_polynomial(eph, time)

    # Relativistic correction needs the eccentric anomaly
    n = np.sqrt(MU_GPS / eph.A**3) + eph.deln
    M = eph.M0 + n * timediff(time, eph.toe)
    E, _, _ = solve_kepler(M, eph.e, tolerance, max_iterations)

    dts += relativistic_correction(eph, E)

    dE_dt = n / (1.0 - eph.e * np.cos(E))
    ddts += F_REL * eph.e * np.sqrt(eph.A) * np.cos(E) * dE_dt

    return float(dts), float(ddts)


def apply_tgd_correction(eph: EphemerisRecord, freq_idx: int = 0) -> float:
    """
    Group delay correction for a GPS frequency.

    Parameters
    ----------
    eph : EphemerisRecord
        Satellite ephemeris containing TGD
    freq_idx : int
        0 for L1, 1 for L2

    Returns
    -------
    float
        TGD correction in seconds

    Notes
    -----
    TGD is broadcast for L1; the L2 value is scaled by gamma = (f1/f2)^2.
    """
    if freq_idx == 0:
        return eph.tgd
    if freq_idx == 1:
        gamma = (FREQ_L1 / FREQ_L2)**2
        return gamma * eph.tgd
    raise ValueError(f"Unsupported GPS frequency index: {freq_idx}")
