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
Processing Parameters
=====================

Default numerical parameters for ephemeris handling and satellite
position computation. Every value can be overridden per call through the
matching keyword argument.
"""

from .constants import CLIGHT

# ============================================================================
# KEPLER SOLVER
# ============================================================================
KEPLER_TOL = 1e-12       # Eccentric anomaly convergence tolerance (rad)
KEPLER_MAX_ITER = 30     # Iteration cap, guarantees termination

# ============================================================================
# SIGNAL TRANSIT
# ============================================================================
NOMINAL_RANGE = 20.0e6   # Nominal receiver-satellite range (m)

# Default transit time estimate (s), ~0.0667 s
DEFAULT_TRANSIT_TIME = NOMINAL_RANGE / CLIGHT

# ============================================================================
# PLAUSIBILITY GATES
# ============================================================================
ORBIT_RADIUS_MIN = 20000e3   # Minimum plausible GPS orbit radius (m)
ORBIT_RADIUS_MAX = 30000e3   # Maximum plausible GPS orbit radius (m)

# ============================================================================
# EPHEMERIS VALIDITY
# ============================================================================
MAXDTOE = 7200.0         # GPS ephemeris validity window (s)
RAW_EPHEMERIS_SIZE = 32  # Values in a raw receiver ephemeris record
EPHEMERIS_SIZE = 21      # Values in a canonical orbital-parameter vector

# ============================================================================
# RAW OBSERVATION LAYOUT
# ============================================================================
RAW_OBS_TIME_INDEX = 33  # Receive time slot in a per-epoch vector
RAW_OBS_SIZE = 34        # Slot 0, PRN 1..32, receive time
RAW_OBS_TIME_SCALE = 1e-3  # Receive time is logged in milliseconds of week
