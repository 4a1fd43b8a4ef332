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

"""Error and warning types"""


class MalformedEphemeris(ValueError):
    """Raised when a raw or canonical ephemeris vector cannot be decoded.

    Fatal for the affected satellite only; callers skip or substitute
    that record and continue with the others.
    """


class NonConvergentSolution(UserWarning):
    """Issued when Kepler's equation did not converge within the iteration cap.

    The returned state still holds the best available estimate.
    Escalate with ``warnings.simplefilter("error", NonConvergentSolution)``.
    """
