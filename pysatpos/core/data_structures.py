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

"""Core data structures for GPS satellite geometry"""

from dataclasses import dataclass, field

import numpy as np
import pandas as pd

from .errors import MalformedEphemeris
from .stats import EPHEMERIS_SIZE

# Canonical orbital-parameter order of an ephemeris vector
EPHEMERIS_FIELDS = (
    'A', 'e', 'i0', 'OMG0', 'omg', 'M0',
    'deln', 'OMGd', 'idot',
    'cuc', 'cus', 'crc', 'crs', 'cic', 'cis',
    'f0', 'f1', 'f2', 'tgd',
    'toc', 'toe',
)


def check_orbital_parameters(params: dict, label: str = "Ephemeris") -> None:
    """Reject orbital parameters that cannot describe an elliptical orbit.

    Raises
    ------
    MalformedEphemeris
        If any value is non-finite, the semi-major axis is not positive or
        the eccentricity is outside [0, 1)
    """
    bad = [name for name, v in params.items() if not np.isfinite(v)]
    if bad:
        raise MalformedEphemeris(f"{label}: non-finite values: {', '.join(bad)}")
    if params['A'] <= 0.0:
        raise MalformedEphemeris(f"{label}: semi-major axis must be positive, got {params['A']}")
    if not 0.0 <= params['e'] < 1.0:
        raise MalformedEphemeris(f"{label}: eccentricity out of range, got {params['e']}")


@dataclass(frozen=True)
class EphemerisRecord:
    """Broadcast GPS ephemeris for a single satellite.

    The first 21 fields form the canonical orbital-parameter vector
    (see ``EPHEMERIS_FIELDS``). All angles are in radians and all times
    in seconds into the GPS week.

    Attributes
    ----------
    A : float
        Semi-major axis (m)
    e : float
        Eccentricity
    i0 : float
        Inclination angle at reference time (rad)
    OMG0 : float
        Longitude of ascending node at weekly epoch (rad)
    omg : float
        Argument of perigee (rad)
    M0 : float
        Mean anomaly at reference time (rad)
    deln : float
        Mean motion difference from computed value (rad/s)
    OMGd : float
        Rate of right ascension (rad/s)
    idot : float
        Rate of inclination angle (rad/s)
    cuc, cus : float
        Argument of latitude harmonic corrections (rad)
    crc, crs : float
        Orbit radius harmonic corrections (m)
    cic, cis : float
        Inclination harmonic corrections (rad)
    f0, f1, f2 : float
        Clock bias (s), drift (s/s) and drift rate (s/s^2)
    tgd : float
        Group delay differential (s)
    toc : float
        Clock data reference time (s of week)
    toe : float
        Ephemeris reference time (s of week)
    reference_time : float
        Time of week at which the ephemeris was transmitted (s)
    prn : int
        Satellite PRN (0 if unknown)
    week : int
        GPS week number of the ephemeris
    svh : int
        Satellite health (0 = healthy)
    iode, iodc : int
        Issue of data, ephemeris and clock
    ura : float
        User range accuracy variance (m^2)
    """
    A: float
    e: float
    i0: float
    OMG0: float
    omg: float
    M0: float
    deln: float
    OMGd: float
    idot: float
    cuc: float
    cus: float
    crc: float
    crs: float
    cic: float
    cis: float
    f0: float
    f1: float
    f2: float
    tgd: float
    toc: float
    toe: float
    reference_time: float = 0.0
    prn: int = 0
    week: int = 0
    svh: int = 0
    iode: int = 0
    iodc: int = 0
    ura: float = 0.0

    def to_vector(self) -> np.ndarray:
        """Return the 21-element orbital-parameter vector in canonical order"""
        return np.array([getattr(self, name) for name in EPHEMERIS_FIELDS], dtype=float)

    @classmethod
    def from_vector(cls, vector, reference_time: float = 0.0, **metadata) -> 'EphemerisRecord':
        """Build a record from a canonical 21-element vector.

        Parameters
        ----------
        vector : array_like, shape (21,)
            Orbital parameters in ``EPHEMERIS_FIELDS`` order
        reference_time : float
            Transmission time of the ephemeris (s of week)
        **metadata
            Optional ``prn``, ``week``, ``svh``, ``iode``, ``iodc``, ``ura``

        Raises
        ------
        MalformedEphemeris
            If the vector does not hold exactly 21 numeric values or does
            not describe an elliptical orbit
        """
        try:
            values = np.asarray(vector, dtype=float).ravel()
        except (TypeError, ValueError) as e:
            raise MalformedEphemeris(f"Ephemeris vector is not numeric: {e}") from e
        if values.size != EPHEMERIS_SIZE:
            raise MalformedEphemeris(
                f"Ephemeris vector has {values.size} values, expected {EPHEMERIS_SIZE}")
        kwargs = {name: float(v) for name, v in zip(EPHEMERIS_FIELDS, values)}
        check_orbital_parameters(kwargs, f"PRN {metadata.get('prn', 0)}")
        return cls(reference_time=float(reference_time), **kwargs, **metadata)

    @property
    def sqrt_a(self) -> float:
        """Square root of the semi-major axis (m^0.5)"""
        return float(np.sqrt(self.A))

    @property
    def is_healthy(self) -> bool:
        return self.svh == 0


@dataclass(frozen=True)
class Observation:
    """GPS measurements for one satellite at one epoch.

    Attributes
    ----------
    pseudorange : float
        L1 pseudorange (m), NaN if not measured
    adr_l1 : float
        L1 accumulated Doppler range (cycles), NaN if not measured
    adr_l2 : float
        L2 accumulated Doppler range (cycles), NaN if not measured
    time : float
        Receive time (s of week)
    """
    pseudorange: float = np.nan
    adr_l1: float = np.nan
    adr_l2: float = np.nan
    time: float = np.nan

    @property
    def has_pseudorange(self) -> bool:
        return bool(np.isfinite(self.pseudorange) and self.pseudorange > 0.0)


# Observation fields that can be assembled into a matrix
OBSERVABLES = ('pseudorange', 'adr_l1', 'adr_l2')


@dataclass(frozen=True, eq=False)
class SatelliteState:
    """Satellite position and clock at signal transmission time.

    Derived from exactly one ``EphemerisRecord`` and one transit time
    estimate; recompute rather than modify.

    Attributes
    ----------
    position : np.ndarray
        Satellite position in ECEF (m), shape (3,)
    clock_correction : float
        Satellite clock correction including relativistic term (s)
    transmit_time : float
        Corrected signal transmission time (s of week)
    eccentric_anomaly : float
        Solved eccentric anomaly (rad)
    iterations : int
        Kepler iterations performed
    converged : bool
        False if the iteration cap was hit before the tolerance was met
    """
    position: np.ndarray
    clock_correction: float
    transmit_time: float
    eccentric_anomaly: float
    iterations: int
    converged: bool = True

    @property
    def radius(self) -> float:
        """Distance from Earth center (m)"""
        return float(np.linalg.norm(self.position))


@dataclass(frozen=True, eq=False)
class SatelliteStates:
    """Satellite positions and clocks on a (satellite, epoch) grid.

    Attributes
    ----------
    satellites : list[int]
        Row order PRNs
    positions : np.ndarray
        ECEF positions (m), shape (n_sat, n_epoch, 3), NaN where unavailable
    clock_corrections : np.ndarray
        Clock corrections (s), shape (n_sat, n_epoch), NaN where unavailable
    converged : np.ndarray
        Kepler convergence flags, shape (n_sat, n_epoch). Only meaningful
        where ``available`` is True.
    available : np.ndarray
        True where a state was computed, shape (n_sat, n_epoch)
    failed : dict[int, str]
        PRN -> error message for satellites that could not be computed at
        all (no ephemeris)
    epoch_errors : dict[tuple[int, int], str]
        (PRN, epoch column) -> error message for single epochs that raised
    """
    satellites: list
    positions: np.ndarray
    clock_corrections: np.ndarray
    converged: np.ndarray
    available: np.ndarray
    failed: dict = field(default_factory=dict)
    epoch_errors: dict = field(default_factory=dict)

    def row(self, prn: int) -> int:
        """Row index of a satellite"""
        return self.satellites.index(prn)


@dataclass(frozen=True, eq=False)
class PseudorangeMatrix:
    """Dense (satellite x epoch) observation matrix.

    Missing observations are NaN, never zero. Satellites with no
    observation in any epoch are not rows; they are listed in ``excluded``.

    Attributes
    ----------
    satellites : list[int]
        Row order PRNs (sorted)
    epochs : list[int]
        Column order epoch indices (sorted)
    values : np.ndarray
        Observation values, shape (len(satellites), len(epochs))
    excluded : list[int]
        PRNs dropped because they had no observation at all
    observable : str
        Observation field the matrix holds
    """
    satellites: list
    epochs: list
    values: np.ndarray
    excluded: list = field(default_factory=list)
    observable: str = 'pseudorange'

    @property
    def shape(self) -> tuple:
        return self.values.shape

    def get(self, prn: int, epoch: int) -> float:
        """Value at (prn, epoch); NaN if absent"""
        return float(self.values[self.satellites.index(prn), self.epochs.index(epoch)])

    def is_present(self) -> np.ndarray:
        """Boolean mask of present observations"""
        return ~np.isnan(self.values)

    def to_dataframe(self) -> pd.DataFrame:
        """Return the matrix as a DataFrame indexed by PRN with epoch columns"""
        df = pd.DataFrame(self.values, index=pd.Index(self.satellites, name='prn'),
                          columns=pd.Index(self.epochs, name='epoch'))
        return df
