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

"""
Kepler's equation solver.

Solves M = E - e*sin(E) for the eccentric anomaly E with Newton's method.
The iteration cap is the only mechanism guaranteeing termination; the
caller decides what to do with a non-converged estimate.

References:
    IS-GPS-200, Table 20-IV
    Principles of GNSS, Inertial, and Multisensor Integrated Navigation Systems
    - (2013) Paul D. Groves
"""

import numpy as np
from numba import njit

from ..core.stats import KEPLER_MAX_ITER, KEPLER_TOL


@njit(cache=True)
def _kepler_newton(M, e, tol, max_iter):
    E = M
    f = E - e * np.sin(E) - M
    if abs(f) < tol:
        return E, 0, True

    for k in range(max_iter):
        dE = f / (1.0 - e * np.cos(E))
        E = E - dE
        if abs(dE) < tol:
            return E, k + 1, True
        f = E - e * np.sin(E) - M

    return E, max_iter, False


def solve_kepler(M: float, e: float,
                 tolerance: float = KEPLER_TOL,
                 max_iterations: int = KEPLER_MAX_ITER) -> tuple[float, int, bool]:
    """
    Solve Kepler's equation for the eccentric anomaly.

    Parameters
    ----------
    M : float
        Mean anomaly (rad)
    e : float
        Eccentricity, 0 <= e < 1
    tolerance : float, optional
        Convergence tolerance on the Newton step (rad)
    max_iterations : int, optional
        Maximum number of Newton steps

    Returns
    -------
    tuple[float, int, bool]
        - E : float
            Eccentric anomaly (rad), best estimate if not converged
        - iterations : int
            Newton steps taken (0 when M itself satisfies the equation)
        - converged : bool
            True if the tolerance was met within the cap

    Notes
    -----
    The initial guess is E = M, which is exact for a circular orbit, so
    e = 0 returns M unchanged after zero iterations. Once the tolerance is
    met the iteration stops, so raising ``max_iterations`` never changes an
    already converged result.

    Examples
    --------
    >>> E, n, ok = solve_kepler(1.0, 0.01)
    >>> print(f"E = {E:.12f} rad after {n} iterations")
    """
    if max_iterations < 0:
        raise ValueError(f"max_iterations must be non-negative: {max_iterations}")
    if tolerance <= 0.0:
        raise ValueError(f"tolerance must be positive: {tolerance}")

    E, iterations, converged = _kepler_newton(float(M), float(e), float(tolerance),
                                              int(max_iterations))
    return float(E), int(iterations), bool(converged)
