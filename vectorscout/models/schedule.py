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
"""Qualification schedule and event list models used for auto-fill."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

RED_DESIGNATIONS: Tuple[str, ...] = ("Red1", "Red2", "Red3")
BLUE_DESIGNATIONS: Tuple[str, ...] = ("Blue1", "Blue2", "Blue3")


@dataclass(frozen=True)
class MatchScheduleEntry:
    """Teams assigned to each alliance station in one qualification match.

    Parameters
    ----------
    match_number : int
        Qualification match number.
    red1 : int
        Team at the Red1 station.
    red2 : int
        Team at the Red2 station.
    red3 : int
        Team at the Red3 station.
    blue1 : int
        Team at the Blue1 station.
    blue2 : int
        Team at the Blue2 station.
    blue3 : int
        Team at the Blue3 station.
    """

    match_number: int
    red1: int
    red2: int
    red3: int
    blue1: int
    blue2: int
    blue3: int

    def team_number(self, robot_designation: str) -> Optional[int]:
        """Return the team at ``robot_designation``.

        Parameters
        ----------
        robot_designation : str
            Station name such as ``"Blue3"``.

        Returns
        -------
        Optional[int]
            Team number, or ``None`` for an unknown designation.
        """
        stations = self._stations()
        return stations.get(robot_designation)

    def opposing_teams(self, robot_designation: str) -> Dict[str, int]:
        """Return the other alliance's stations and teams.

        Parameters
        ----------
        robot_designation : str
            Station of the robot being scouted.

        Returns
        -------
        Dict[str, int]
            Blue stations when scouting a red robot, red stations otherwise.
        """
        stations = self._stations()
        opponents = BLUE_DESIGNATIONS if robot_designation.startswith("Red") else RED_DESIGNATIONS
        return {designation: stations[designation] for designation in opponents}

    def _stations(self) -> Dict[str, int]:
        """Map every station name to its team.

        Returns
        -------
        Dict[str, int]
            Six entries keyed ``Red1``..``Blue3``.
        """
        return {
            "Red1": self.red1,
            "Red2": self.red2,
            "Red3": self.red3,
            "Blue1": self.blue1,
            "Blue2": self.blue2,
            "Blue3": self.blue3,
        }


@dataclass(frozen=True)
class EventSchedule:
    """Qualification schedule of a single event.

    Parameters
    ----------
    event_code : str
        Provider event key, for example ``"2026miket"``.
    event_name : str
        Display name of the event.
    matches : Tuple[MatchScheduleEntry, ...]
        Matches sorted by match number.
    """

    event_code: str
    event_name: str
    matches: Tuple[MatchScheduleEntry, ...]

    def match(self, match_number: int) -> Optional[MatchScheduleEntry]:
        """Return the schedule entry for ``match_number``.

        Parameters
        ----------
        match_number : int
            Qualification match number.

        Returns
        -------
        Optional[MatchScheduleEntry]
            The entry, or ``None`` if the match is not scheduled.
        """
        for entry in self.matches:
            if entry.match_number == match_number:
                return entry
        return None

    def team_number(self, match_number: int, robot_designation: str) -> Optional[int]:
        """Return the team at a station in a match.

        Parameters
        ----------
        match_number : int
            Qualification match number.
        robot_designation : str
            Station name.

        Returns
        -------
        Optional[int]
            Team number, or ``None`` when the match or station is unknown.
        """
        entry = self.match(match_number)
        if entry is None:
            return None
        return entry.team_number(robot_designation)

    def opposing_teams(self, match_number: int, robot_designation: str) -> Optional[Dict[str, int]]:
        """Return the opposing alliance for a station in a match.

        Parameters
        ----------
        match_number : int
            Qualification match number.
        robot_designation : str
            Station of the robot being scouted.

        Returns
        -------
        Optional[Dict[str, int]]
            Opposing stations and teams, or ``None`` if the match is unknown.
        """
        entry = self.match(match_number)
        if entry is None:
            return None
        return entry.opposing_teams(robot_designation)


@dataclass(frozen=True)
class Event:
    """Competition offered in the event picker.

    Parameters
    ----------
    event_code : str
        Provider event key used for schedule lookups.
    event_name : str
        Display name.
    date : str
        ISO start date, used for ordering.
    """

    event_code: str
    event_name: str
    date: str
