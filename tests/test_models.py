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
"""Tests for action types, records, detail payloads and scouting records."""

import json

import pytest

from vectorscout.models.action import (
    ACTION_TYPES,
    AUTON_CLIMB,
    DAMAGED,
    ENDGAME_CLIMB,
    FOUL,
    LOAD,
    SHOOT,
    ActionRecord,
    MatchPhase,
    get_action_type,
    legal_action_types,
    resolve_action_type,
)
from vectorscout.models.qualitative import (
    ClimbData,
    DamagedData,
    DefenseData,
    EmptyData,
    FerryData,
    FoulData,
    LoadData,
    ShootData,
    qualitative_from_json,
)
from vectorscout.models.schedule import EventSchedule, MatchScheduleEntry
from vectorscout.models.scout import AutoPathStep, MatchScoutData, StepType


class TestActionTypes:
    """Tests for the action-type registry."""

    def test_keys_are_unique(self) -> None:
        """Every action type has its own key even when names repeat."""
        keys = [action_type.key for action_type in ACTION_TYPES]
        assert len(keys) == len(set(keys))
        assert AUTON_CLIMB.name == ENDGAME_CLIMB.name == "Climb"
        assert AUTON_CLIMB != ENDGAME_CLIMB

    def test_resolve_depends_on_phase(self) -> None:
        """The same name resolves to a different type in each phase."""
        assert resolve_action_type("Climb", MatchPhase.AUTON) is AUTON_CLIMB
        assert resolve_action_type("climb", MatchPhase.ENDGAME) is ENDGAME_CLIMB

    def test_resolve_rejects_illegal_actions(self) -> None:
        """Actions outside their phase resolve to nothing."""
        assert resolve_action_type("Climb", MatchPhase.TELEOP) is None
        assert resolve_action_type("Defense", MatchPhase.AUTON) is None
        assert resolve_action_type("Dance", MatchPhase.TELEOP) is None

    def test_legal_actions_per_phase(self) -> None:
        """Each phase offers its own list of actions."""
        assert [a.name for a in legal_action_types(MatchPhase.AUTON)] == ["Load", "Shoot", "Ferry", "Climb", "Foul"]
        assert len(legal_action_types(MatchPhase.TELEOP)) == 8
        assert legal_action_types(MatchPhase.ENDGAME) == [ENDGAME_CLIMB]

    def test_untimed_actions(self) -> None:
        """Foul and Damaged have neither a visible timer nor a counter."""
        assert not FOUL.has_timer and not FOUL.has_counter
        assert not DAMAGED.has_timer and not DAMAGED.has_counter
        assert LOAD.has_timer and LOAD.has_counter

    def test_get_by_key(self) -> None:
        """Lookup by key returns the registered type or raises."""
        assert get_action_type("ENDGAME_CLIMB") is ENDGAME_CLIMB
        with pytest.raises(ValueError, match="Unknown action type"):
            get_action_type("CLIMB")


class TestActionRecord:
    """Tests for committed action records."""

    def test_duration(self) -> None:
        """Duration is the gap between start and end."""
        record = ActionRecord(MatchPhase.TELEOP, SHOOT, start_time_ms=1000, end_time_ms=3500)
        assert record.duration_ms == 2500

    def test_open_ended_duration_is_zero(self) -> None:
        """A record without an end has no duration."""
        assert ActionRecord(MatchPhase.TELEOP, FOUL, start_time_ms=1000).duration_ms == 0

    def test_end_before_start_rejected(self) -> None:
        """Records cannot end before they start."""
        with pytest.raises(ValueError):
            ActionRecord(MatchPhase.TELEOP, LOAD, start_time_ms=2000, end_time_ms=1000)

    def test_matches_requires_phase_and_type(self) -> None:
        """Matching compares both the phase and the action type."""
        record = ActionRecord(MatchPhase.AUTON, LOAD, start_time_ms=0, end_time_ms=10)
        assert record.matches(MatchPhase.AUTON, LOAD)
        assert not record.matches(MatchPhase.TELEOP, LOAD)
        assert not record.matches(MatchPhase.AUTON, SHOOT)


class TestQualitativeData:
    """Tests for detail form payloads."""

    def test_wire_names(self) -> None:
        """Payloads serialise to the spreadsheet's field names."""
        assert json.loads(LoadData("Depot").to_json()) == {"loadLocation": "Depot"}
        assert json.loads(FerryData("Dump", "Alliance").to_json()) == {
            "ferryType": "Dump",
            "ferryDelivery": "Alliance",
        }
        assert json.loads(ClimbData("L3", MatchPhase.ENDGAME).to_json()) == {"result": "L3", "phase": "ENDGAME"}

    def test_compact_json(self) -> None:
        """Serialised payloads contain no insignificant whitespace."""
        assert ShootData("MZ").to_json() == '{"location":"MZ"}'

    def test_list_fields_keep_order(self) -> None:
        """Multi-select fields keep the order they were ticked in."""
        data = DefenseData(("Pin", "Block"), "Blue2")
        assert json.loads(data.to_json()) == {"types": ["Pin", "Block"], "targetRobot": "Blue2"}
        assert qualitative_from_json(data.to_json(), get_action_type("DEFENSE")) == data

    def test_parse_by_action(self) -> None:
        """Stored text is parsed into the variant the action produces."""
        assert qualitative_from_json('{"type":"Major"}', FOUL) == FoulData("Major")
        assert qualitative_from_json('{"components":["Intake"]}', DAMAGED) == DamagedData(("Intake",))
        assert qualitative_from_json('{"placeholder":""}', get_action_type("TIPPED")) == EmptyData()

    @pytest.mark.parametrize("text", [None, "", "   ", "not json", "[1, 2]", '{"wrong":"key"}'])
    def test_unusable_text_gives_none(self, text: str) -> None:
        """Blank, malformed or mismatched text yields no payload."""
        assert qualitative_from_json(text, LOAD) is None

    def test_bad_phase_gives_none(self) -> None:
        """A climb payload with an unknown phase is rejected."""
        assert qualitative_from_json('{"result":"L1","phase":"HALFTIME"}', AUTON_CLIMB) is None


class TestScoutRecords:
    """Tests for match records and auto-path steps."""

    def test_match_aggregates(self) -> None:
        """Counts and durations only include matching records."""
        data = MatchScoutData(
            action_records=(
                ActionRecord(MatchPhase.TELEOP, SHOOT, 0, 1200),
                ActionRecord(MatchPhase.TELEOP, SHOOT, 2000, 2800),
                ActionRecord(MatchPhase.AUTON, SHOOT, 0, 500),
            )
        )
        assert data.action_count(MatchPhase.TELEOP, SHOOT) == 2
        assert data.total_action_time(MatchPhase.TELEOP, SHOOT) == 2000
        assert data.action_count(MatchPhase.TELEOP, LOAD) == 0

    def test_step_tokens(self) -> None:
        """Steps are tokenised as their type letter and value."""
        assert AutoPathStep(StepType.START, "3a").token() == "S:3a"
        assert AutoPathStep(StepType.ACTION, "Load").token() == "A:Load"
        assert AutoPathStep(StepType.LOCATION, "Shoot Alliance").token() == "L:Shoot Alliance"


class TestSchedule:
    """Tests for schedule lookups."""

    @pytest.fixture
    def schedule(self) -> EventSchedule:
        """Two-match schedule."""
        return EventSchedule(
            "2026test",
            "Test Event",
            (
                MatchScheduleEntry(1, 111, 222, 333, 444, 555, 666),
                MatchScheduleEntry(2, 1, 2, 3, 4, 5, 6),
            ),
        )

    def test_team_lookup(self, schedule: EventSchedule) -> None:
        """The team at a station is found by match number."""
        assert schedule.team_number(1, "Blue2") == 555
        assert schedule.team_number(3, "Blue2") is None
        assert schedule.team_number(1, "Green1") is None

    def test_opposing_teams(self, schedule: EventSchedule) -> None:
        """Opponents are the other alliance's three stations."""
        assert schedule.opposing_teams(1, "Red1") == {"Blue1": 444, "Blue2": 555, "Blue3": 666}
        assert schedule.opposing_teams(2, "Blue3") == {"Red1": 1, "Red2": 2, "Red3": 3}
        assert schedule.opposing_teams(9, "Blue3") is None
