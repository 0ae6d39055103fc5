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
"""Match phases, the closed action-type registry and timed action records.

Every action a scout can log belongs to exactly one :class:`ActionType`
instance defined in this module. The same display name may appear in more
than one phase ("Climb" is both an autonomous and an end-game action), so
lookups by name always go through :func:`resolve_action_type` together with
the phase that asked for it.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Dict, List, Optional, Tuple

if TYPE_CHECKING:
    from vectorscout.models.qualitative import QualitativeData


class MatchPhase(Enum):
    """Period of a match an action was recorded in."""

    AUTON = "AUTON"
    TELEOP = "TELEOP"
    ENDGAME = "ENDGAME"


@dataclass(frozen=True)
class ActionType:
    """Descriptor for a loggable robot action.

    Parameters
    ----------
    key : str
        Unique registry identifier, for example ``"AUTON_CLIMB"``.
    name : str
        Display and wire name. Not unique across phases.
    has_timer : bool
        Whether the elapsed duration of the action is measured.
    has_counter : bool
        Whether repeated occurrences are tallied on the match screen.
    qualitative_kind : str
        Detail form shown for the action; selects the qualitative data variant.
    """

    key: str
    name: str
    has_timer: bool
    has_counter: bool
    qualitative_kind: str


LOAD = ActionType("LOAD", "Load", has_timer=True, has_counter=True, qualitative_kind="load")
SHOOT = ActionType("SHOOT", "Shoot", has_timer=True, has_counter=True, qualitative_kind="shoot")
FERRY = ActionType("FERRY", "Ferry", has_timer=True, has_counter=True, qualitative_kind="ferry")
AUTON_CLIMB = ActionType("AUTON_CLIMB", "Climb", has_timer=True, has_counter=True, qualitative_kind="climb")
DEFENSE = ActionType("DEFENSE", "Defense", has_timer=True, has_counter=True, qualitative_kind="defense")
INCAPACITATED = ActionType(
    "INCAPACITATED", "Incapacitated", has_timer=True, has_counter=True, qualitative_kind="empty"
)
TIPPED = ActionType("TIPPED", "Tipped", has_timer=True, has_counter=True, qualitative_kind="empty")
FOUL = ActionType("FOUL", "Foul", has_timer=False, has_counter=False, qualitative_kind="foul")
DAMAGED = ActionType("DAMAGED", "Damaged", has_timer=False, has_counter=False, qualitative_kind="damaged")
ENDGAME_CLIMB = ActionType("ENDGAME_CLIMB", "Climb", has_timer=True, has_counter=True, qualitative_kind="climb")

ACTION_TYPES: Tuple[ActionType, ...] = (
    LOAD,
    SHOOT,
    FERRY,
    AUTON_CLIMB,
    DEFENSE,
    INCAPACITATED,
    TIPPED,
    FOUL,
    DAMAGED,
    ENDGAME_CLIMB,
)

PHASE_ACTIONS: Dict[MatchPhase, Dict[str, ActionType]] = {
    MatchPhase.AUTON: {
        "LOAD": LOAD,
        "SHOOT": SHOOT,
        "FERRY": FERRY,
        "CLIMB": AUTON_CLIMB,
        "FOUL": FOUL,
    },
    MatchPhase.TELEOP: {
        "LOAD": LOAD,
        "SHOOT": SHOOT,
        "FERRY": FERRY,
        "DEFENSE": DEFENSE,
        "FOUL": FOUL,
        "INCAPACITATED": INCAPACITATED,
        "TIPPED": TIPPED,
        "DAMAGED": DAMAGED,
    },
    MatchPhase.ENDGAME: {
        "CLIMB": ENDGAME_CLIMB,
    },
}
"""Action names accepted in each phase, keyed by upper-cased name."""


def resolve_action_type(name: str, phase: MatchPhase) -> Optional[ActionType]:
    """Look up the action type a phase means by ``name``.

    Parameters
    ----------
    name : str
        Action name in any letter case, for example ``"climb"``.
    phase : MatchPhase
        Phase in which the action is being recorded.

    Returns
    -------
    Optional[ActionType]
        The matching registry entry, or ``None`` when the phase has no action
        of that name.
    """
    return PHASE_ACTIONS[phase].get(name.upper())


def legal_action_types(phase: MatchPhase) -> List[ActionType]:
    """Return the action types a scout may record during ``phase``.

    Parameters
    ----------
    phase : MatchPhase
        Phase whose actions are requested.

    Returns
    -------
    List[ActionType]
        Action types in the order the match screen lists them.
    """
    return list(PHASE_ACTIONS[phase].values())


def get_action_type(key: str) -> ActionType:
    """Return the registry entry with the unique ``key``.

    Parameters
    ----------
    key : str
        Registry identifier such as ``"ENDGAME_CLIMB"``.

    Returns
    -------
    ActionType
        The registered action type.

    Raises
    ------
    ValueError
        If ``key`` is not registered.
    """
    for action_type in ACTION_TYPES:
        if action_type.key == key:
            return action_type
    known_keys = ", ".join(sorted(a.key for a in ACTION_TYPES))
    raise ValueError(f"Unknown action type '{key}'. Known types: {known_keys}")


@dataclass(frozen=True)
class ActionRecord:
    """One committed action with its timing and detail data.

    Parameters
    ----------
    phase : MatchPhase
        Phase the action was recorded in.
    action_type : ActionType
        What the robot did.
    start_time_ms : int
        Wall-clock start of the action in epoch milliseconds.
    end_time_ms : Optional[int], default=None
        Wall-clock end of the action; ``None`` for instantaneous actions.
    qualitative_data : Optional[QualitativeData], default=None
        Detail form values captured on commit.
    """

    phase: MatchPhase
    action_type: ActionType
    start_time_ms: int
    end_time_ms: Optional[int] = None
    qualitative_data: Optional["QualitativeData"] = None

    def __post_init__(self) -> None:
        if self.end_time_ms is not None and self.end_time_ms < self.start_time_ms:
            raise ValueError(
                f"Action {self.action_type.key} ends at {self.end_time_ms} before it starts at {self.start_time_ms}"
            )

    @property
    def duration_ms(self) -> int:
        """Elapsed milliseconds between start and end, zero when open-ended."""
        if self.end_time_ms is None:
            return 0
        return self.end_time_ms - self.start_time_ms

    def matches(self, phase: MatchPhase, action_type: ActionType) -> bool:
        """Return whether this record belongs to ``phase`` and ``action_type``.

        Parameters
        ----------
        phase : MatchPhase
            Phase to compare against.
        action_type : ActionType
            Action type to compare against.

        Returns
        -------
        bool
            ``True`` when both the phase and the action type are equal.
        """
        return self.phase is phase and self.action_type == action_type
