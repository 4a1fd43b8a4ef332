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
Satellite computation module for GPS positioning.

This module turns broadcast GPS ephemerides into satellite positions and
clock corrections at the time a signal left the satellite.

Modules
-------
ephemeris : module
    Raw ephemeris decoding, validation and per-PRN storage
kepler : module
    Newton solver for Kepler's equation with an iteration cap
clock : module
    Broadcast clock polynomial, relativistic and TGD corrections
satellite_position : module
    Satellite position at transmission time, single and batched

Usage Examples
--------------
Decode an ephemeris and compute a satellite position:

    >>> from pysatpos.satellite import decode_ephemeris, compute_satellite_state
    >>> eph, t_ref = decode_ephemeris(raw_vector)
    >>> state = compute_satellite_state(eph, 345600.0)
    >>> print(f"Satellite position: {state.position} m")

Batch computation with failure isolation:

    >>> from pysatpos.satellite import EphemerisManager, compute_satellite_states
    >>> manager = EphemerisManager()
    >>> rejected = manager.decode_all(raw_by_prn)
    >>> states = compute_satellite_states(manager, epoch_times, max_workers=4)

Notes
-----
Time system: all functions expect GPS time of week in seconds.

Coordinate system: positions are Earth-Centered Earth-Fixed (WGS-84).
All angles are handled in radians.
"""

from .clock import *
from .ephemeris import *
from .kepler import *
from .satellite_position import *
