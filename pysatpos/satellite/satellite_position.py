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

"""Satellite position computation from ephemeris"""

import concurrent.futures
import logging
import warnings
from typing import Optional, Union

import numpy as np

from ..core.constants import MU_GPS, OMGE, WEEK_SECONDS
from ..core.data_structures import EphemerisRecord, SatelliteState, SatelliteStates
from ..core.errors import NonConvergentSolution
from ..core.stats import (
    DEFAULT_TRANSIT_TIME,
    KEPLER_MAX_ITER,
    KEPLER_TOL,
    ORBIT_RADIUS_MAX,
    ORBIT_RADIUS_MIN,
)
from ..core.time import gps_seconds_to_week_tow, timediff
from .clock import clock_polynomial, relativistic_correction
from .kepler import solve_kepler

logger = logging.getLogger(__name__)

__all__ = [
    "compute_satellite_state",
    "compute_satellite_states",
    "earth_rotation_correction",
    "in_orbit_band",
]


def compute_satellite_state(eph: EphemerisRecord,
                            observation_time: float,
                            transit_time: float = DEFAULT_TRANSIT_TIME,
                            *,
                            tolerance: float = KEPLER_TOL,
                            max_iterations: int = KEPLER_MAX_ITER,
                            apply_tgd: bool = False,
                            rotate_to_reception: bool = False) -> SatelliteState:
    """
    Compute satellite position and clock correction at signal transmission.

    Parameters
    ----------
    eph : EphemerisRecord
        Decoded broadcast ephemeris
    observation_time : float
        Signal reception time, seconds into the GPS week. Full GPS seconds
        (>= one week) are reduced to time of week.
    transit_time : float, optional
        Estimated signal transit time (s). Defaults to 20,000 km / c.
    tolerance : float, optional
        Kepler convergence tolerance (rad)
    max_iterations : int, optional
        Kepler iteration cap
    apply_tgd : bool, optional
        Subtract the L1 group delay from the clock correction
    rotate_to_reception : bool, optional
        Rotate the position by the Earth rotation during signal transit,
        expressing it in the ECEF frame of the reception epoch

    Returns
    -------
    SatelliteState
        Position (ECEF, m), clock correction (s), corrected transmission
        time, eccentric anomaly and solver diagnostics

    Warns
    -----
    NonConvergentSolution
        If Kepler's equation did not converge within ``max_iterations``.
        The best estimate is still returned with ``converged=False``.

    Notes
    -----
    Follows the user algorithm of IS-GPS-200 (Table 20-IV):

    1. Transmission time t = t_rx - transit - dts, where dts is the
       broadcast clock polynomial at t_rx - transit
    2. Mean anomaly M = M0 + (sqrt(mu/A^3) + deln) * tk
    3. Kepler's equation solved for E
    4. Second harmonic corrections to latitude, radius and inclination
    5. Rotation to ECEF with the corrected longitude of ascending node

    The returned clock correction is the polynomial term plus the
    relativistic term F*e*sqrt(A)*sin(E).

    Examples
    --------
    >>> state = compute_satellite_state(eph, 345600.0)
    >>> print(f"Satellite position: {state.position} m")
    >>> print(f"Clock correction: {state.clock_correction*1e6:.3f} us")
    """
    if observation_time >= WEEK_SECONDS:
        _, observation_time = gps_seconds_to_week_tow(observation_time)
    if not np.isfinite(transit_time) or transit_time < 0.0:
        raise ValueError(f"Transit time must be finite and non-negative: {transit_time}")

    # Clock polynomial at the uncorrected transmission time
    t_tx = observation_time - transit_time
    dts, _ = clock_polynomial(eph, t_tx)
    if apply_tgd:
        dts -= eph.tgd

    # Transmission time corrected for satellite clock offset
    t = t_tx - dts
    tk = timediff(t, eph.toe)

    # Mean anomaly
    n = np.sqrt(MU_GPS / eph.A**3) + eph.deln
    M = eph.M0 + n * tk

    E, iterations, converged = solve_kepler(M, eph.e, tolerance, max_iterations)
    if not converged:
        msg = (f"Kepler solve for PRN {eph.prn} did not converge in {iterations} "
               f"iterations (M={M:.6f}, e={eph.e:.6f})")
        logger.warning(msg)
        warnings.warn(msg, NonConvergentSolution, stacklevel=2)

    clock_correction = dts + relativistic_correction(eph, E)

    # True anomaly and argument of latitude
    sin_E = np.sin(E)
    cos_E = np.cos(E)
    nu = np.arctan2(np.sqrt(1.0 - eph.e**2) * sin_E, cos_E - eph.e)
    phi = nu + eph.omg

    # Second harmonic perturbations
    sin_2phi = np.sin(2.0 * phi)
    cos_2phi = np.cos(2.0 * phi)
    u = phi + eph.cus * sin_2phi + eph.cuc * cos_2phi
    r = eph.A * (1.0 - eph.e * cos_E) + eph.crs * sin_2phi + eph.crc * cos_2phi
    i = eph.i0 + eph.idot * tk + eph.cis * sin_2phi + eph.cic * cos_2phi

    # Corrected longitude of ascending node
    OMG = eph.OMG0 + (eph.OMGd - OMGE) * tk - OMGE * eph.toe

    # Position in orbital plane
    x_orb = r * np.cos(u)
    y_orb = r * np.sin(u)

    cos_OMG = np.cos(OMG)
    sin_OMG = np.sin(OMG)
    cos_i = np.cos(i)

    position = np.array([
        x_orb * cos_OMG - y_orb * cos_i * sin_OMG,
        x_orb * sin_OMG + y_orb * cos_i * cos_OMG,
        y_orb * np.sin(i),
    ])

    if rotate_to_reception:
        position = earth_rotation_correction(position, transit_time)

    if not in_orbit_band(position):
        logger.warning(f"PRN {eph.prn} position radius {np.linalg.norm(position)/1e3:.0f} km "
                       f"outside the GPS orbit band")

    return SatelliteState(
        position=position,
        clock_correction=float(clock_correction),
        transmit_time=float(t),
        eccentric_anomaly=E,
        iterations=iterations,
        converged=converged,
    )


def earth_rotation_correction(position: np.ndarray, transit_time: float) -> np.ndarray:
    """
    Rotate an ECEF position by the Earth rotation during signal transit.

    Parameters
    ----------
    position : np.ndarray
        Satellite position in the ECEF frame of transmission (m)
    transit_time : float
        Signal transit time (s)

    Returns
    -------
    np.ndarray
        Position in the ECEF frame of reception (m)
    """
    angle = OMGE * transit_time
    cos_a = np.cos(angle)
    sin_a = np.sin(angle)
    R = np.array([
        [cos_a, sin_a, 0.0],
        [-sin_a, cos_a, 0.0],
        [0.0, 0.0, 1.0],
    ])
    return R @ position


def in_orbit_band(position: np.ndarray,
                  r_min: float = ORBIT_RADIUS_MIN,
                  r_max: float = ORBIT_RADIUS_MAX) -> bool:
    """Check that a position lies within the plausible GPS orbit radius band"""
    radius = np.linalg.norm(position)
    return bool(r_min <= radius <= r_max)


def _satellite_row(eph: EphemerisRecord, times: np.ndarray, transit: np.ndarray,
                   kwargs: dict) -> tuple:
    n_epoch = len(times)
    positions = np.full((n_epoch, 3), np.nan)
    clocks = np.full(n_epoch, np.nan)
    converged = np.zeros(n_epoch, dtype=bool)
    available = np.zeros(n_epoch, dtype=bool)
    errors = {}

    for k in range(n_epoch):
        if not (np.isfinite(times[k]) and np.isfinite(transit[k])):
            continue
        try:
            state = compute_satellite_state(eph, times[k], transit[k], **kwargs)
        except Exception as e:
            logger.error(f"Satellite state computation failed for PRN {eph.prn} "
                         f"at epoch {k}: {e}")
            errors[k] = str(e)
            continue
        positions[k] = state.position
        clocks[k] = state.clock_correction
        converged[k] = state.converged
        available[k] = True

    return positions, clocks, converged, available, errors


def compute_satellite_states(ephemerides,
                             observation_times,
                             transit_time: Union[float, np.ndarray] = DEFAULT_TRANSIT_TIME,
                             satellites: Optional[list[int]] = None,
                             max_workers: Optional[int] = None,
                             **kwargs) -> SatelliteStates:
    """
    Compute satellite positions and clocks on a (satellite, epoch) grid.

    Each (satellite, epoch) slot is computed independently. A satellite
    without an ephemeris is reported in ``failed`` and its row left NaN.
    An epoch whose computation raises, including a ``NonConvergentSolution``
    escalated to an error, is reported in ``epoch_errors`` and only that
    slot is left NaN. ``available`` marks the slots that were computed.

    Parameters
    ----------
    ephemerides : dict or EphemerisManager
        PRN -> EphemerisRecord
    observation_times : array_like, shape (n_epoch,)
        Reception times (s of week)
    transit_time : float or np.ndarray, optional
        Scalar estimate, or an (n_sat, n_epoch) array in row order, e.g.
        a pseudorange matrix divided by the speed of light. NaN entries
        are skipped.
    satellites : list[int], optional
        Row order PRNs; defaults to all PRNs in ``ephemerides``, sorted
    max_workers : int, optional
        Spread satellites over a thread pool when greater than 1
    **kwargs
        Passed to ``compute_satellite_state``

    Returns
    -------
    SatelliteStates

    Examples
    --------
    >>> matrix = build_pseudorange_matrix(observations)
    >>> states = compute_satellite_states(manager, epoch_times,
    ...                                   transit_time=matrix.values / CLIGHT,
    ...                                   satellites=matrix.satellites)
    """
    if hasattr(ephemerides, 'ephemerides'):
        ephemerides = ephemerides.ephemerides
    if satellites is None:
        satellites = sorted(ephemerides)
    satellites = list(satellites)

    times = np.asarray(observation_times, dtype=float).ravel()
    n_sat, n_epoch = len(satellites), len(times)

    transit = np.asarray(transit_time, dtype=float)
    if transit.ndim == 0:
        transit = np.full((n_sat, n_epoch), float(transit))
    elif transit.shape != (n_sat, n_epoch):
        raise ValueError(f"Transit time array has shape {transit.shape}, "
                         f"expected {(n_sat, n_epoch)}")

    positions = np.full((n_sat, n_epoch, 3), np.nan)
    clocks = np.full((n_sat, n_epoch), np.nan)
    converged = np.zeros((n_sat, n_epoch), dtype=bool)
    available = np.zeros((n_sat, n_epoch), dtype=bool)
    failed = {}
    epoch_errors = {}

    rows = []
    for idx, prn in enumerate(satellites):
        eph = ephemerides.get(prn)
        if eph is None:
            logger.error(f"No ephemeris for PRN {prn}, skipping satellite")
            failed[prn] = f"No ephemeris for PRN {prn}"
            continue
        rows.append((idx, eph))

    def store(idx, row):
        positions[idx], clocks[idx], converged[idx], available[idx], errors = row
        for k, msg in errors.items():
            epoch_errors[(satellites[idx], k)] = msg

    if max_workers is not None and max_workers > 1:
        with concurrent.futures.ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = {executor.submit(_satellite_row, eph, times, transit[idx], kwargs): idx
                       for idx, eph in rows}
            for fut in concurrent.futures.as_completed(futures):
                store(futures[fut], fut.result())
    else:
        for idx, eph in rows:
            store(idx, _satellite_row(eph, times, transit[idx], kwargs))

    logger.debug(f"Computed {int(available.sum())} states for {len(rows)}/{n_sat} "
                 f"satellites over {n_epoch} epochs")

    return SatelliteStates(
        satellites=satellites,
        positions=positions,
        clock_corrections=clocks,
        converged=converged,
        available=available,
        failed=failed,
        epoch_errors=epoch_errors,
    )
