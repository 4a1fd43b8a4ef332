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

"""GPS Constants and System Parameters"""

import numpy as np

# Physical Constants
CLIGHT = 299792458.0  # speed of light (m/s)

# GPS frequencies
FREQ_L1 = 1.57542E9   # L1 frequency (Hz)
FREQ_L2 = 1.22760E9   # L2 frequency (Hz)

# Earth Parameters (WGS84 / IS-GPS-200)
RE_WGS84 = 6378137.0           # earth semimajor axis (m)
OMGE = 7.2921151467E-5         # earth angular velocity (rad/s)
MU_GPS = 3.9860050E14          # GPS gravitational constant (m^3/s^2)

# Relativistic clock correction constant, -2*sqrt(mu)/c^2 (s/m^0.5)
F_REL = -2.0 * np.sqrt(MU_GPS) / CLIGHT**2

# GPS week
WEEK_SECONDS = 604800.0        # seconds in a GPS week
HALF_WEEK = 302400.0           # half week, used for rollover checks

# Satellite identifiers
MAXPRNGPS = 32                 # highest GPS PRN
MINPRNGPS = 1                  # lowest GPS PRN

# Unit conversions
R2D = 180.0 / np.pi            # radians to degrees
D2R = np.pi / 180.0            # degrees to radians


# Wavelengths
def lam_carr(freq):
    """Get carrier wavelength"""
    return CLIGHT / freq if freq > 0 else 0.0


def is_gps_prn(prn):
    """Check if PRN is a valid GPS satellite identifier"""
    return MINPRNGPS <= prn <= MAXPRNGPS
