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

"""GPS time-of-week helpers"""

from .constants import HALF_WEEK, WEEK_SECONDS


def timediff(time, tref):
    """Time difference accounting for week rollover

    Both arguments are seconds into the GPS week. The result is folded
    into [-302400, 302400] so that an epoch just after the week boundary
    and a reference just before it stay a few seconds apart.
    """
    dt = time - tref

    # Handle week rollover
    if dt > HALF_WEEK:
        dt -= WEEK_SECONDS
    elif dt < -HALF_WEEK:
        dt += WEEK_SECONDS

    return dt


def gps_seconds_to_week_tow(gps_seconds: float) -> tuple:
    """
    Convert GPS seconds to GPS week number and time of week

    Parameters:
    -----------
    gps_seconds : float
        GPS seconds since GPS epoch (Jan 6, 1980 00:00:00 UTC)

    Returns:
    --------
    tuple : (week, tow)
        GPS week number and time of week in seconds
    """
    if gps_seconds < 0:
        raise ValueError(f"GPS seconds cannot be negative: {gps_seconds}")

    week = int(gps_seconds // WEEK_SECONDS)
    tow = gps_seconds % WEEK_SECONDS

    return week, tow
