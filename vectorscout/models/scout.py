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
"""Match and pit scouting records as persisted and transferred."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

from vectorscout.models.action import ActionRecord, ActionType, MatchPhase
from vectorscout.utils.timefmt import now_ms


@dataclass(frozen=True)
class MatchScoutData:
    """Everything one scout recorded about one robot in one match.

    Parameters
    ----------
    id : int, default=0
        Store identifier; zero until the record has been saved.
    event : str, default=""
        Event display name.
    match_number : str, default=""
        Qualification match number as typed by the scout.
    robot_designation : str, default=""
        Alliance station such as ``"Red2"``.
    scout_name : str, default=""
        Person who recorded the match.
    team_number : str, default=""
        Team number of the observed robot.
    start_position : str, default=""
        Start zone label picked on the start diagram.
    loaded : bool, default=False
        Whether the robot started with a preloaded game piece.
    no_show : bool, default=False
        Whether the robot never took the field.
    action_records : Tuple[ActionRecord, ...], default=()
        Committed actions in chronological order.
    timestamp : int, default=now
        Creation time in epoch milliseconds.
    qr_generated : bool, default=False
        Whether a transfer code has been produced for this record.
    """

    id: int = 0
    event: str = ""
    match_number: str = ""
    robot_designation: str = ""
    scout_name: str = ""
    team_number: str = ""
    start_position: str = ""
    loaded: bool = False
    no_show: bool = False
    action_records: Tuple[ActionRecord, ...] = ()
    timestamp: int = field(default_factory=now_ms)
    qr_generated: bool = False

    def action_count(self, phase: MatchPhase, action_type: ActionType) -> int:
        """Count records of ``action_type`` in ``phase``.

        Parameters
        ----------
        phase : MatchPhase
            Phase to filter on.
        action_type : ActionType
            Action type to filter on.

        Returns
        -------
        int
            Number of matching records.
        """
        return sum(1 for record in self.action_records if record.matches(phase, action_type))

    def total_action_time(self, phase: MatchPhase, action_type: ActionType) -> int:
        """Sum the durations of ``action_type`` records in ``phase``.

        Parameters
        ----------
        phase : MatchPhase
            Phase to filter on.
        action_type : ActionType
            Action type to filter on.

        Returns
        -------
        int
            Total duration in milliseconds.
        """
        return sum(record.duration_ms for record in self.action_records if record.matches(phase, action_type))


class StepType(Enum):
    """Kind of entry in an auto path."""

    START = "START"
    ACTION = "ACTION"
    LOCATION = "LOCATION"


class PathCategory(Enum):
    """Category of step an auto path expects next."""

    START = "START"
    ACTION = "ACTION"
    LOCATION = "LOCATION"


@dataclass(frozen=True)
class AutoPathStep:
    """Single start, action or location entry of an auto path.

    Parameters
    ----------
    type : StepType
        Kind of step.
    value : str
        Chosen option, for example ``"3a"``, ``"Load"`` or ``"Neutral"``.
    """

    type: StepType
    value: str

    def token(self) -> str:
        """Return the compact ``"<letter>:<value>"`` form of the step.

        Returns
        -------
        str
            First letter of the step type, a colon, then the value.
        """
        return f"{self.type.name[0]}:{self.value}"


@dataclass(frozen=True)
class AutoPath:
    """Named autonomous routine described by a team during pit inspection.

    Parameters
    ----------
    id : int, default=0
        Store identifier; zero until saved.
    name : str, default="A1"
        Tab name shown to the scout.
    steps : Tuple[AutoPathStep, ...], default=()
        Ordered steps, starting with a ``START`` step.
    drawing_path : Optional[str], default=None
        Location of the freehand drawing exported for this path.
    """

    id: int = 0
    name: str = "A1"
    steps: Tuple[AutoPathStep, ...] = ()
    drawing_path: Optional[str] = None


@dataclass(frozen=True)
class PitScoutData:
    """Team-level pit inspection record.

    Parameters
    ----------
    id : int, default=0
        Store identifier; zero until saved.
    event : str, default=""
        Event display name.
    team_number : int, default=0
        Inspected team.
    drivetrain_type : str, default=""
        Drivetrain option, for example ``"Swerve"``.
    preferred_role : str, default=""
        Role the team prefers to play.
    preferred_path : str, default=""
        Route across the field the team prefers.
    photo_path : Optional[str], default=None
        Robot photo reference; never transferred in codes.
    auto_paths : Tuple[AutoPath, ...], default=()
        Autonomous routines with at least one step.
    timestamp : int, default=now
        Creation time in epoch milliseconds.
    """

    id: int = 0
    event: str = ""
    team_number: int = 0
    drivetrain_type: str = ""
    preferred_role: str = ""
    preferred_path: str = ""
    photo_path: Optional[str] = None
    auto_paths: Tuple[AutoPath, ...] = ()
    timestamp: int = field(default_factory=now_ms)
