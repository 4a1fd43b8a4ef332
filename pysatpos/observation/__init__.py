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
Observation handling for GPS measurements.

epochs : module
    Collects raw per-epoch receiver vectors into (prn, epoch) keyed
    observations, dropping incomplete epochs
pseudorange : module
    Assembles keyed observations into a dense (satellite x epoch) matrix
    with NaN marking missing measurements
"""

from .epochs import *
from .pseudorange import *
