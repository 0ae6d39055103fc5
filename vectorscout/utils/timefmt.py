# Copyright (C) 2025 Richard Owen
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.
"""Wall-clock helpers and duration formatting for timers and summaries."""
import time


def now_ms() -> int:
    """Return the current wall-clock time in epoch milliseconds.

    Returns
    -------
    int
        Milliseconds since the Unix epoch.
    """
    return time.time_ns() // 1_000_000


def format_clock(milliseconds: int) -> str:
    """Format a duration as ``MM:SS``.

    Parameters
    ----------
    milliseconds : int
        Duration to format; fractional seconds are truncated.

    Returns
    -------
    str
        Zero-padded minutes and seconds, for example ``"01:07"``.
    """
    total_seconds = milliseconds // 1000
    minutes, seconds = divmod(total_seconds, 60)
    return f"{minutes:02d}:{seconds:02d}"


def format_seconds(milliseconds: int) -> str:
    """Format a duration in seconds with one decimal place.

    Parameters
    ----------
    milliseconds : int
        Duration to format.

    Returns
    -------
    str
        Seconds with a unit suffix, for example ``"3.4 s"``.
    """
    return f"{milliseconds / 1000.0:.1f} s"
