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
"""Central configuration for scouting sessions, transfer codes and schedules."""

from __future__ import annotations

import os
from dataclasses import dataclass, field


@dataclass(slots=True)
class TimerConfig:
    """Tick settings for the elapsed-time clock shown during an action.

    Parameters
    ----------
    tick_seconds : float, default=0.1
        Delay between elapsed-time updates.
    join_timeout : float, default=1.0
        Longest wait when joining the ticking thread on stop.
    """

    tick_seconds: float = 0.1  # 100 ms display resolution
    join_timeout: float = 1.0


@dataclass(slots=True)
class CodecConfig:
    """Transfer-code payload settings.

    Parameters
    ----------
    version : int, default=1
        Version tag written into every payload.
    pit_type : str, default="pit"
        Discriminator value marking a pit-inspection payload.
    qr_capacity : int, default=2331
        Character budget of a QR code at error-correction level M.
    """

    version: int = 1
    pit_type: str = "pit"
    qr_capacity: int = 2331


@dataclass(slots=True)
class ScheduleConfig:
    """Remote schedule provider and local cache settings.

    Parameters
    ----------
    base_url : str, default="https://www.thebluealliance.com/api/v3"
        Root URL of The Blue Alliance read API.
    api_key : str, default=$TBA_API_KEY
        Value sent in the ``X-TBA-Auth-Key`` header; empty disables remote fetches.
    timeout : float, default=10.0
        Request timeout in seconds.
    cache_dir : str, default="schedules"
        Directory holding cached ``<event>_schedule.json`` files.
    cache_suffix : str, default="_schedule.json"
        File-name suffix appended to the event code for cache files.
    qualification_level : str, default="qm"
        ``comp_level`` value retained when parsing match lists.
    team_key_prefix : str, default="frc"
        Prefix stripped from team keys to obtain team numbers.
    """

    base_url: str = "https://www.thebluealliance.com/api/v3"
    api_key: str = field(default_factory=lambda: os.environ.get("TBA_API_KEY", ""))
    timeout: float = 10.0
    cache_dir: str = "schedules"
    cache_suffix: str = "_schedule.json"
    qualification_level: str = "qm"
    team_key_prefix: str = "frc"


@dataclass(slots=True)
class SessionConfig:
    """Behavioural switches for match and pit sessions.

    Parameters
    ----------
    auto_path_prefix : str, default="A"
        Prefix used when naming auto-path tabs (``A1``, ``A2``...).
    climb_action : str, default="Climb"
        Auto-path action that terminates with a fixed location.
    climb_location : str, default="L1"
        Location appended automatically after ``climb_action``.
    cancel_removes_last : bool, default=False
        When set, cancelling a counted action also removes the most recent
        matching record instead of leaving the log untouched.
    grid_rows : int, default=5
        Number of rows in the general-purpose field grid.
    grid_columns : int, default=5
        Number of columns in the general-purpose field grid.
    """

    auto_path_prefix: str = "A"
    climb_action: str = "Climb"
    climb_location: str = "L1"
    cancel_removes_last: bool = False
    grid_rows: int = 5
    grid_columns: int = 5


@dataclass(slots=True)
class DebugConfig:
    """Defaults for the structured session log.

    Parameters
    ----------
    output_dir : str, default="debug_logs"
        Directory where session log files are created.
    recent_events : int, default=200
        Number of log lines kept in memory for live displays.
    """

    output_dir: str = "debug_logs"
    recent_events: int = 200


@dataclass(slots=True)
class ScoutConfig:
    """Top-level container for all scouting configuration structures.

    Parameters
    ----------
    timer : TimerConfig, default=TimerConfig()
        Elapsed-time clock settings.
    codec : CodecConfig, default=CodecConfig()
        Transfer-code payload settings.
    schedule : ScheduleConfig, default=ScheduleConfig()
        Schedule provider and cache settings.
    session : SessionConfig, default=SessionConfig()
        Session behaviour switches.
    debug : DebugConfig, default=DebugConfig()
        Structured log defaults.
    """

    timer: TimerConfig = field(default_factory=TimerConfig)
    codec: CodecConfig = field(default_factory=CodecConfig)
    schedule: ScheduleConfig = field(default_factory=ScheduleConfig)
    session: SessionConfig = field(default_factory=SessionConfig)
    debug: DebugConfig = field(default_factory=DebugConfig)


SCOUT_CONFIG = ScoutConfig()
"""Singleton-style access to the scouting configuration."""
