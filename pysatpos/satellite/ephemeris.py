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

"""Ephemeris decoding, selection and validation"""

import logging
from typing import Optional

import numpy as np

from ..core.constants import is_gps_prn
from ..core.data_structures import EphemerisRecord, check_orbital_parameters
from ..core.errors import MalformedEphemeris
from ..core.stats import MAXDTOE, RAW_EPHEMERIS_SIZE
from ..core.time import timediff

logger = logging.getLogger(__name__)

__all__ = [
    "RAW_EPHEMERIS_INDEX",
    "decode_ephemeris",
    "is_ephemeris_valid",
    "ephemeris_age",
    "EphemerisManager",
]

# Slot of each value in a raw receiver ephemeris record
RAW_EPHEMERIS_INDEX = {
    'prn': 0, 'tow': 1, 'health': 2, 'iode1': 3, 'iode2': 4,
    'week': 5, 'zweek': 6, 'toe': 7, 'A': 8, 'deln': 9,
    'M0': 10, 'e': 11, 'omg': 12, 'cuc': 13, 'cus': 14,
    'crc': 15, 'crs': 16, 'cic': 17, 'cis': 18, 'i0': 19,
    'idot': 20, 'OMG0': 21, 'OMGd': 22, 'iodc': 23, 'toc': 24,
    'tgd': 25, 'f0': 26, 'f1': 27, 'f2': 28, 'AS': 29,
    'N': 30, 'ura': 31,
}

_ORBIT_KEYS = (
    'A', 'e', 'i0', 'OMG0', 'omg', 'M0', 'deln', 'OMGd', 'idot',
    'cuc', 'cus', 'crc', 'crs', 'cic', 'cis',
    'f0', 'f1', 'f2', 'tgd', 'toc', 'toe',
)


def decode_ephemeris(raw) -> tuple[EphemerisRecord, float]:
    """
    Decode a raw receiver ephemeris record.

    Converts the 32-value record logged by the receiver into an
    ``EphemerisRecord`` whose orbital parameters follow the canonical
    21-element order, and extracts the time the ephemeris was transmitted.

    Parameters
    ----------
    raw : array_like, shape (32,)
        Raw record in receiver order (see ``RAW_EPHEMERIS_INDEX``)

    Returns
    -------
    tuple[EphemerisRecord, float]
        - record : EphemerisRecord
            Decoded ephemeris
        - reference_time : float
            Seconds into the GPS week at which the ephemeris was transmitted

    Raises
    ------
    MalformedEphemeris
        If the record has the wrong length, non-numeric or non-finite
        orbital values, an invalid PRN, a non-positive semi-major axis or
        an eccentricity outside [0, 1)

    Examples
    --------
    >>> record, t_ref = decode_ephemeris(raw_vector)
    >>> vec = record.to_vector()  # 21 orbital parameters
    """
    try:
        values = np.asarray(raw, dtype=float).ravel()
    except (TypeError, ValueError) as e:
        raise MalformedEphemeris(f"Raw ephemeris is not numeric: {e}") from e

    if values.size != RAW_EPHEMERIS_SIZE:
        raise MalformedEphemeris(
            f"Raw ephemeris has {values.size} values, expected {RAW_EPHEMERIS_SIZE}")

    def get(name):
        return float(values[RAW_EPHEMERIS_INDEX[name]])

    bad = [key for key in ('prn', 'tow', 'week', 'health', 'iode1', 'iodc')
           if not np.isfinite(get(key))]
    if bad:
        raise MalformedEphemeris(f"Non-finite ephemeris header values: {', '.join(bad)}")

    prn = get('prn')
    if not (prn.is_integer() and is_gps_prn(int(prn))):
        raise MalformedEphemeris(f"Invalid GPS PRN: {prn}")

    orbit = {key: get(key) for key in _ORBIT_KEYS}
    check_orbital_parameters(orbit, f"PRN {int(prn)}")

    reference_time = get('tow')

    record = EphemerisRecord(
        **orbit,
        reference_time=reference_time,
        prn=int(prn),
        week=int(get('week')),
        svh=int(get('health')),
        iode=int(get('iode1')),
        iodc=int(get('iodc')),
        ura=get('ura'),
    )

    logger.debug(f"Decoded ephemeris PRN {record.prn}: toe={record.toe:.0f} "
                 f"week={record.week} tx={reference_time:.0f}")
    if not record.is_healthy:
        logger.warning(f"PRN {record.prn} ephemeris flagged unhealthy (health={record.svh})")

    return record, reference_time


def is_ephemeris_valid(eph: EphemerisRecord, time: float, max_dt: float = MAXDTOE) -> bool:
    """
    Check if ephemeris is valid at given time of week.

    Parameters
    ----------
    eph : EphemerisRecord
        Ephemeris record to validate
    time : float
        Time of week in seconds (0-604800 range)
    max_dt : float, optional
        Validity half-window around toe (default: 2 hours)

    Returns
    -------
    bool
        True if the satellite is healthy and time is within the window
    """
    if not eph.is_healthy:
        return False
    return abs(timediff(time, eph.toe)) <= max_dt


def ephemeris_age(eph: EphemerisRecord, time: float) -> float:
    """Age of the clock data relative to time (s), week rollover aware"""
    return abs(timediff(time, eph.toc))


class EphemerisManager:
    """
    Keep the current ephemeris of each satellite.

    Records are keyed by PRN. A newly decoded navigation message replaces
    the stored record when it was transmitted later; records are never
    modified in place.

    Attributes
    ----------
    ephemerides : dict
        Dictionary mapping PRN to its current ``EphemerisRecord``

    Examples
    --------
    >>> manager = EphemerisManager()
    >>> rejected = manager.decode_all({1: raw_prn1, 2: raw_prn2})
    >>> eph = manager.get(1)
    """

    def __init__(self):
        self.ephemerides = {}  # prn -> EphemerisRecord

    def __len__(self):
        return len(self.ephemerides)

    def __contains__(self, prn):
        return prn in self.ephemerides

    @property
    def prns(self) -> list[int]:
        """Sorted PRNs with a stored ephemeris"""
        return sorted(self.ephemerides)

    def add(self, eph: EphemerisRecord) -> bool:
        """
        Store a record unless an equally new or newer one is already held.

        Returns
        -------
        bool
            True if the record was stored
        """
        existing = self.ephemerides.get(eph.prn)
        if existing is not None and \
                (existing.week, existing.reference_time) >= (eph.week, eph.reference_time):
            return False

        self.ephemerides[eph.prn] = eph
        return True

    def get(self, prn: int, time: Optional[float] = None) -> Optional[EphemerisRecord]:
        """
        Get the stored ephemeris for a satellite.

        Parameters
        ----------
        prn : int
            Satellite PRN
        time : float, optional
            If given, return None unless the record is valid at this time

        Returns
        -------
        Optional[EphemerisRecord]
        """
        eph = self.ephemerides.get(prn)
        if eph is None or time is None:
            return eph
        return eph if is_ephemeris_valid(eph, time) else None

    def decode_all(self, raw_by_prn: dict) -> list[int]:
        """
        Decode and store a batch of raw records keyed by PRN.

        A malformed record is logged and skipped; it never prevents the
        other satellites from being decoded.

        Parameters
        ----------
        raw_by_prn : dict
            PRN -> raw 32-value record

        Returns
        -------
        list[int]
            PRNs whose record was rejected
        """
        rejected = []
        for prn, raw in raw_by_prn.items():
            try:
                eph, _ = decode_ephemeris(raw)
            except MalformedEphemeris as e:
                logger.warning(f"Skipping ephemeris for PRN {prn}: {e}")
                rejected.append(prn)
                continue

            if eph.prn != prn:
                logger.warning(f"Skipping ephemeris keyed as PRN {prn}: record is for PRN {eph.prn}")
                rejected.append(prn)
                continue

            self.add(eph)

        return rejected

    def clean_old_ephemerides(self, current_time: float, max_age: float = MAXDTOE) -> None:
        """Remove ephemerides whose clock data is older than max_age"""
        for prn in list(self.ephemerides.keys()):
            if ephemeris_age(self.ephemerides[prn], current_time) > max_age:
                del self.ephemerides[prn]
