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

"""Pseudorange matrix assembly"""

import logging
from typing import Optional

import numpy as np

from ..core.data_structures import OBSERVABLES, Observation, PseudorangeMatrix

logger = logging.getLogger(__name__)

__all__ = ["observation_value", "build_pseudorange_matrix"]


def observation_value(obs: Optional[Observation], field: str = 'pseudorange') -> float:
    """
    Extract one observable, mapping "no measurement" to NaN.

    Parameters
    ----------
    obs : Observation or None
        Observation, None if the satellite was not observed
    field : str
        Observable name ('pseudorange', 'adr_l1', 'adr_l2')

    Returns
    -------
    float
        Observed value, or NaN if absent. Receivers log untracked channels
        as zero, so a zero (or negative pseudorange) counts as absent.
    """
    if obs is None:
        return np.nan
    value = float(getattr(obs, field))
    if not np.isfinite(value):
        return np.nan
    if field == 'pseudorange' and value <= 0.0:
        return np.nan
    if value == 0.0:
        return np.nan
    return value


def build_pseudorange_matrix(observations: dict,
                             satellites: Optional[list[int]] = None,
                             epochs: Optional[list[int]] = None,
                             field: str = 'pseudorange') -> PseudorangeMatrix:
    """
    Build a dense (satellite x epoch) observation matrix.

    Parameters
    ----------
    observations : dict
        (prn, epoch) -> Observation. Missing keys mean no measurement.
    satellites : list[int], optional
        Satellites to include, e.g. those with an ephemeris. Defaults to
        every PRN found in the keys.
    epochs : list[int], optional
        Epochs to include. Defaults to every epoch found in the keys.
    field : str, optional
        Observable to assemble (default 'pseudorange')

    Returns
    -------
    PseudorangeMatrix
        Rows are satellites with at least one observation, sorted by PRN;
        columns are epochs, sorted. Absent entries are NaN. Satellites
        without any observation are listed in ``excluded``.

    Notes
    -----
    Present values are copied unchanged. The function is stateless: the
    same input always yields the same matrix.

    Examples
    --------
    >>> matrix = build_pseudorange_matrix(observations, satellites=manager.prns)
    >>> print(f"{len(matrix.satellites)} satellites, excluded: {matrix.excluded}")
    """
    if field not in OBSERVABLES:
        raise ValueError(f"Unknown observable '{field}', expected one of {OBSERVABLES}")

    if satellites is None:
        satellites = {prn for prn, _ in observations}
    if epochs is None:
        epochs = {epoch for _, epoch in observations}
    satellites = sorted(set(satellites))
    epochs = sorted(set(epochs))

    values = np.full((len(satellites), len(epochs)), np.nan)
    for i, prn in enumerate(satellites):
        for k, epoch in enumerate(epochs):
            values[i, k] = observation_value(observations.get((prn, epoch)), field)

    has_data = ~np.all(np.isnan(values), axis=1)
    excluded = [prn for prn, keep in zip(satellites, has_data) if not keep]
    if excluded:
        logger.info(f"Excluding satellites without {field} observations: {excluded}")

    return PseudorangeMatrix(
        satellites=[prn for prn, keep in zip(satellites, has_data) if keep],
        epochs=epochs,
        values=values[has_data],
        excluded=excluded,
        observable=field,
    )
