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
pysatpos - GPS Satellite Position & Pseudorange Library

Decodes broadcast GPS ephemerides, computes satellite positions and clock
corrections at signal transmission time, and assembles receiver
pseudorange observations into matrices ready for a position fix.
"""

__version__ = "1.0.0"
__author__ = "pysatpos Development Team"
__title__ = "pysatpos"
__description__ = "GPS satellite position and pseudorange library"

import logging

from .core import *
from .satellite import *
from .observation import *

logging.getLogger(__name__).addHandler(logging.NullHandler())
