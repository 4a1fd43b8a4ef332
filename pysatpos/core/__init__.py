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

"""Core GPS Processing Module.

This module provides the foundation shared by the satellite and observation
subpackages:

- **Constants**: physical and GPS system constants
- **Processing Parameters**: Kepler solver limits, transit time default,
  plausibility gates and raw record layouts
- **Data Structures**: ephemeris records, observations, satellite states
  and the pseudorange matrix
- **Time**: time-of-week arithmetic with week rollover
- **Errors**: ``MalformedEphemeris`` and ``NonConvergentSolution``

Example Usage:
    >>> from pysatpos.core import *
    >>>
    >>> obs = Observation(pseudorange=21234567.8, time=345600.0)
    >>> dt = timediff(10.0, 604790.0)  # 20.0 across the week boundary
"""

from .constants import *
from .data_structures import *
from .errors import *
from .stats import *
from .time import *
