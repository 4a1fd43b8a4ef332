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

"""Collection of raw per-epoch receiver measurements"""

import logging
from collections.abc import Sequence
from typing import Optional

import numpy as np

from ..core.constants import MAXPRNGPS, MINPRNGPS, is_gps_prn
from ..core.data_structures import Observation
from ..core.stats import RAW_OBS_SIZE, RAW_OBS_TIME_INDEX, RAW_OBS_TIME_SCALE

logger = logging.getLogger(__name__)

__all__ = ["collect_observations"]


def _epoch_vector(raw) -> Optional[np.ndarray]:
    if raw is None:
        return None
    vec = np.asarray(raw, dtype=float).ravel()
    if vec.size == 0:
        return None
    if vec.size < RAW_OBS_SIZE:
        logger.warning(f"Measurement vector has {vec.size} values, expected {RAW_OBS_SIZE}")
        return None
    return vec


def _absent_if_zero(value: float) -> float:
    return np.nan if value == 0.0 or not np.isfinite(value) else float(value)


def collect_observations(psr_epochs: Sequence,
                         adr_l1_epochs: Sequence,
                         adr_l2_epochs: Sequence,
                         prns: Optional[list[int]] = None,
                         time_scale: float = RAW_OBS_TIME_SCALE) -> tuple[dict, np.ndarray]:
    """
    Turn per-epoch receiver measurement vectors into keyed observations.

    Each epoch entry is a vector laid out as ``[slot0, PRN1, ..., PRN32,
    time]``: the value for PRN p sits at index p and the receive time at
    index 33. An epoch is kept only if all three vectors are present.

    Parameters
    ----------
    psr_epochs : Sequence
        L1 pseudorange vectors per epoch (m); None or empty if not logged
    adr_l1_epochs : Sequence
        L1 accumulated Doppler range vectors per epoch (cycles)
    adr_l2_epochs : Sequence
        L2 accumulated Doppler range vectors per epoch (cycles)
    prns : list[int], optional
        PRNs to extract; defaults to every GPS PRN
    time_scale : float, optional
        Factor converting the logged receive time to seconds of week
        (default 1e-3, milliseconds)

    Returns
    -------
    observations : dict
        (prn, epoch) -> Observation for the kept epochs, renumbered 0..n-1.
        Zero entries (untracked channels) are stored as NaN.
    epoch_times : np.ndarray
        Receive time of each kept epoch (s of week)

    Examples
    --------
    >>> observations, times = collect_observations(psr, adr1, adr2, prns=[1, 2, 4])
    >>> matrix = build_pseudorange_matrix(observations, satellites=[1, 2, 4])
    """
    if not len(psr_epochs) == len(adr_l1_epochs) == len(adr_l2_epochs):
        raise ValueError(
            f"Epoch counts differ: psr={len(psr_epochs)}, adr_l1={len(adr_l1_epochs)}, "
            f"adr_l2={len(adr_l2_epochs)}")

    if prns is None:
        prns = list(range(MINPRNGPS, MAXPRNGPS + 1))
    invalid = [prn for prn in prns if not is_gps_prn(prn)]
    if invalid:
        raise ValueError(f"Invalid GPS PRNs: {invalid}")

    observations = {}
    epoch_times = []
    skipped = 0

    for raw_psr, raw_adr1, raw_adr2 in zip(psr_epochs, adr_l1_epochs, adr_l2_epochs):
        psr = _epoch_vector(raw_psr)
        adr1 = _epoch_vector(raw_adr1)
        adr2 = _epoch_vector(raw_adr2)
        if psr is None or adr1 is None or adr2 is None:
            skipped += 1
            continue

        # All three logs are assumed to share the pseudorange receive time
        t = psr[RAW_OBS_TIME_INDEX] * time_scale
        epoch = len(epoch_times)
        epoch_times.append(t)

        for prn in prns:
            observations[(prn, epoch)] = Observation(
                pseudorange=_absent_if_zero(psr[prn]),
                adr_l1=_absent_if_zero(adr1[prn]),
                adr_l2=_absent_if_zero(adr2[prn]),
                time=t,
            )

    if skipped:
        logger.info(f"Skipped {skipped} incomplete epochs, kept {len(epoch_times)}")

    return observations, np.array(epoch_times, dtype=float)
