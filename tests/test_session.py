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
"""Tests for the match and pit scouting sessions."""

import pytest

from vectorscout.engine.config import SCOUT_CONFIG
from vectorscout.engine.session import MatchSession, PitSession, PitSessionState
from vectorscout.errors import StoreError
from vectorscout.models.action import ENDGAME_CLIMB, FOUL, LOAD, SHOOT, TIPPED, MatchPhase
from vectorscout.models.qualitative import ClimbData, EmptyData, FerryData, FoulData, ShootData
from vectorscout.models.schedule import MatchScheduleEntry
from vectorscout.models.scout import AutoPathStep, StepType
from vectorscout.utils.debug import ScoutDebugger
from vectorscout.utils.schedule import ScheduleCache, ScheduleFileCache
from vectorscout.utils.store import InMemoryRecordStore


class FakeClock:
    """Manually advanced millisecond clock."""

    def __init__(self, now: int = 1_000) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now


class CountingStore(InMemoryRecordStore):
    """In-memory store that counts save calls."""

    def __init__(self) -> None:
        super().__init__()
        self.saves = 0

    def save_match(self, data):
        self.saves += 1
        return super().save_match(data)


class FailingStore(InMemoryRecordStore):
    """Store whose saves always fail."""

    def save_match(self, data):
        raise StoreError("disk full")

    def save_pit(self, data):
        raise StoreError("disk full")


@pytest.fixture
def clock() -> FakeClock:
    """Fresh fake clock."""
    return FakeClock()


@pytest.fixture
def schedule_cache(tmp_path) -> ScheduleCache:
    """Schedule cache with two matches already on disk."""
    file_cache = ScheduleFileCache(tmp_path)
    file_cache.save(
        "2026test",
        [
            MatchScheduleEntry(1, 111, 222, 333, 444, 555, 666),
            MatchScheduleEntry(2, 1, 2, 3, 4, 5, 6),
        ],
    )
    return ScheduleCache(file_cache=file_cache)


def _ready_session(store, clock=None, **kwargs) -> MatchSession:
    session = MatchSession(store, clock=clock or FakeClock(), **kwargs)
    session.update_event("Houston", "2026test")
    session.update_match_number("12")
    session.update_robot_designation("Blue1")
    session.update_scout_name("Alex")
    session.update_team_number("4499")
    return session


class TestPreMatch:
    """Tests for the pre-match fields."""

    def test_start_zone_toggles(self) -> None:
        """Tapping a start zone selects it and tapping it again clears it."""
        session = _ready_session(InMemoryRecordStore())
        assert session.select_start_zone(0.46, 0.7) == "L2"
        assert session.state.start_position == "L2"
        assert session.select_start_zone(0.46, 0.7) == ""

    def test_start_zone_miss_keeps_selection(self) -> None:
        """A tap outside every start zone keeps the current selection."""
        session = _ready_session(InMemoryRecordStore())
        session.select_start_zone(0.46, 0.7)
        assert session.select_start_zone(0.05, 0.05) == "L2"

    def test_toggles(self) -> None:
        """Flags flip on each toggle."""
        session = MatchSession(InMemoryRecordStore())
        session.toggle_loaded()
        session.toggle_no_show()
        session.toggle_field_orientation()
        assert session.state.loaded and session.state.no_show
        assert not session.state.blue_right

    def test_orientation_follows_designation(self) -> None:
        """The orientation label follows the robot and the field flip."""
        session = _ready_session(InMemoryRecordStore())
        assert session.state.orientation.label == "Blue Right"
        session.toggle_field_orientation()
        assert session.state.orientation.label == "Blue Left"


class TestActionEntry:
    """Tests for timed action entry."""

    def test_commit_records_elapsed_time(self, clock: FakeClock) -> None:
        """A committed action ends now and lasts the timer's elapsed time."""
        session = _ready_session(InMemoryRecordStore(), clock)
        entry = session.begin_action("Shoot", MatchPhase.AUTON)
        clock.now = 3_500
        assert entry.select_zone(0.7, 0.5) == "MZ"

        record = entry.commit()

        assert record.start_time_ms == 1_000
        assert record.end_time_ms == 3_500
        assert record.qualitative_data == ShootData("MZ")
        assert session.action_count(MatchPhase.AUTON, SHOOT) == 1
        assert session.total_action_time(MatchPhase.AUTON, SHOOT) == 2_500
        assert not entry.is_open

    def test_missing_zone_keeps_entry_open(self) -> None:
        """Committing a location form without a location is rejected."""
        session = _ready_session(InMemoryRecordStore())
        entry = session.begin_action("Load", MatchPhase.TELEOP)
        entry.select_zone(0.92, 0.7)
        entry.select_zone(0.92, 0.7)
        with pytest.raises(ValueError):
            entry.commit()
        assert entry.is_open
        entry.cancel()
        assert len(session.state.action_records) == 0

    def test_ferry_needs_type_and_delivery(self) -> None:
        """Ferry actions need both a ferry type and a delivery zone."""
        session = _ready_session(InMemoryRecordStore())
        entry = session.begin_action("Ferry", MatchPhase.TELEOP)
        assert entry.select_zone(0.5, 0.5) == "Neutral"
        with pytest.raises(ValueError):
            entry.commit()
        entry.set_ferry_type("Dump")
        assert entry.commit().qualitative_data == FerryData("Dump", "Neutral")

    def test_explicit_details(self) -> None:
        """Forms without a map take their details from the caller."""
        session = _ready_session(InMemoryRecordStore())
        foul = session.begin_action("Foul", MatchPhase.TELEOP).commit(FoulData("Major"))
        climb = session.begin_action("Climb", MatchPhase.ENDGAME).commit(ClimbData("L2", MatchPhase.ENDGAME))
        assert foul.action_type is FOUL
        assert climb.action_type is ENDGAME_CLIMB

    def test_empty_form_needs_nothing(self) -> None:
        """Actions without detail fields commit an empty payload."""
        session = _ready_session(InMemoryRecordStore())
        record = session.begin_action("Tipped", MatchPhase.TELEOP).commit()
        assert record.action_type is TIPPED
        assert record.qualitative_data == EmptyData()

    def test_mismatched_details_rejected(self) -> None:
        """Details from another action's form are rejected."""
        session = _ready_session(InMemoryRecordStore())
        entry = session.begin_action("Load", MatchPhase.AUTON)
        with pytest.raises(ValueError):
            entry.commit(ShootData("MZ"))

    def test_entry_closes_once(self) -> None:
        """An entry cannot be committed after it was cancelled."""
        session = _ready_session(InMemoryRecordStore())
        entry = session.begin_action("Tipped", MatchPhase.TELEOP)
        entry.cancel()
        with pytest.raises(ValueError):
            entry.commit()
        with pytest.raises(ValueError):
            entry.cancel()

    def test_illegal_action_rejected(self) -> None:
        """Actions outside their phase cannot be started."""
        session = MatchSession(InMemoryRecordStore())
        with pytest.raises(ValueError):
            session.begin_action("Defense", MatchPhase.AUTON)

    def test_cancel_leaves_records_by_default(self) -> None:
        """Cancelling does not touch earlier records unless configured to."""
        session = _ready_session(InMemoryRecordStore())
        session.begin_action("Tipped", MatchPhase.TELEOP).commit()
        session.begin_action("Tipped", MatchPhase.TELEOP).cancel()
        assert session.action_count(MatchPhase.TELEOP, TIPPED) == 1

    def test_cancel_can_remove_last(self, monkeypatch) -> None:
        """With the undo option, cancelling removes the last matching record."""
        monkeypatch.setattr(SCOUT_CONFIG.session, "cancel_removes_last", True)
        session = _ready_session(InMemoryRecordStore())
        session.begin_action("Tipped", MatchPhase.TELEOP).commit()
        session.begin_action("Tipped", MatchPhase.TELEOP).cancel()
        assert session.action_count(MatchPhase.TELEOP, TIPPED) == 0

    def test_actions_are_logged(self) -> None:
        """Commits and cancels are reported to the debugger."""
        debugger = ScoutDebugger(output_dir=None)
        session = _ready_session(InMemoryRecordStore(), debugger=debugger)
        session.begin_action("Tipped", MatchPhase.TELEOP).commit()
        session.begin_action("Tipped", MatchPhase.TELEOP).cancel()
        actions = debugger.events_of_type("ACTION")
        assert len(actions) == 2
        assert "cancelled" in actions[1].details


class TestSubmitMatch:
    """Tests for submitting a match."""

    def test_validation_skips_store(self) -> None:
        """Missing fields are reported without calling the store."""
        store = CountingStore()
        session = MatchSession(store)
        result = session.submit()
        assert not result.ok
        assert result.errors == (
            "Event is required",
            "Match number is required",
            "Robot designation is required",
            "Scout name is required",
            "Team number is required",
        )
        assert session.state.errors == result.errors
        assert store.saves == 0
        session.clear_errors()
        assert session.state.errors == ()

    def test_whitespace_counts_as_missing(self) -> None:
        """A blank scout name is rejected."""
        session = _ready_session(CountingStore())
        session.update_scout_name("   ")
        assert session.submit().errors == ("Scout name is required",)

    def test_success_prepares_next_match(self, clock: FakeClock) -> None:
        """After a save the match number advances and per-match fields reset."""
        store = InMemoryRecordStore()
        session = _ready_session(store, clock)
        session.select_start_zone(0.46, 0.7)
        session.toggle_loaded()
        session.toggle_no_show()
        session.begin_action("Tipped", MatchPhase.TELEOP).commit()

        result = session.submit()

        assert result.ok
        saved = store.get_match(result.record_id)
        assert saved.match_number == "12"
        assert saved.no_show is True
        assert len(saved.action_records) == 1

        state = session.state
        assert state.match_number == "13"
        assert state.event == "Houston"
        assert state.robot_designation == "Blue1"
        assert state.scout_name == "Alex"
        assert state.team_number == ""
        assert state.start_position == ""
        assert not state.loaded and not state.no_show
        assert len(state.action_records) == 0

    def test_non_numeric_match_restarts_at_one(self) -> None:
        """An unreadable match number carries over as match 1."""
        session = _ready_session(InMemoryRecordStore())
        session.update_match_number("Q12")
        session.submit()
        assert session.state.match_number == "1"

    def test_store_failure_keeps_everything(self) -> None:
        """A failed save keeps the match and reports the error."""
        session = _ready_session(FailingStore())
        session.begin_action("Tipped", MatchPhase.TELEOP).commit()

        result = session.submit()

        assert not result.ok
        assert result.errors == ("Error saving match: disk full",)
        assert session.state.errors == result.errors
        assert session.state.match_number == "12"
        assert len(session.state.action_records) == 1
        assert not session.state.is_submitting

    def test_submit_is_logged(self) -> None:
        """Saves are reported with their transfer label."""
        debugger = ScoutDebugger(output_dir=None)
        session = _ready_session(InMemoryRecordStore(), debugger=debugger)
        session.submit()
        assert "Houston_12_Blue1_4499" in debugger.events_of_type("SUBMIT")[0].details


class TestScheduleAutoFill:
    """Tests for filling team numbers from the schedule."""

    def test_load_from_cache(self, schedule_cache: ScheduleCache) -> None:
        """Loading reports the source and match count."""
        session = MatchSession(InMemoryRecordStore(), schedule_cache=schedule_cache)
        assert session.load_schedule("2026test", "Test Event") == (True, "Loaded 2 matches from cache")
        assert session.state.schedule_loaded
        assert session.state.schedule_match_count == 2

    def test_load_failure(self, tmp_path) -> None:
        """Without a cache file or provider the load fails."""
        cache = ScheduleCache(file_cache=ScheduleFileCache(tmp_path))
        session = MatchSession(InMemoryRecordStore(), schedule_cache=cache)
        assert session.load_schedule("2026none", "None") == (False, "Failed to load schedule")
        assert not session.state.schedule_loaded

    def test_auto_fill(self, schedule_cache: ScheduleCache) -> None:
        """Match number and station fill the team and opponents."""
        session = MatchSession(InMemoryRecordStore(), schedule_cache=schedule_cache)
        session.load_schedule("2026test", "Test Event")
        session.update_match_number("1")
        assert session.state.team_number == ""
        session.update_robot_designation("Blue2")
        assert session.state.team_number == "555"
        assert session.state.team_number_auto_filled
        assert session.state.opposing_teams == {"Red1": 111, "Red2": 222, "Red3": 333}
        with pytest.raises(TypeError):
            session.state.opposing_teams["Red1"] = 1

    def test_unscheduled_match_keeps_team(self, schedule_cache: ScheduleCache) -> None:
        """A match missing from the schedule leaves the team alone."""
        session = MatchSession(InMemoryRecordStore(), schedule_cache=schedule_cache)
        session.load_schedule("2026test", "Test Event")
        session.update_team_number("9999")
        session.update_robot_designation("Red1")
        session.update_match_number("40")
        assert session.state.team_number == "9999"
        assert session.state.opposing_teams == {}

    def test_manual_mode_only_fills_opponents(self, schedule_cache: ScheduleCache) -> None:
        """In manual mode the team is typed but opponents still follow the schedule."""
        session = MatchSession(InMemoryRecordStore(), schedule_cache=schedule_cache)
        session.load_schedule("2026test", "Test Event")
        session.enable_manual_entry_mode()
        session.update_robot_designation("Red1")
        session.update_team_number("7777")
        session.update_match_number("2")
        assert session.state.team_number == "7777"
        assert session.state.opposing_teams == {"Blue1": 4, "Blue2": 5, "Blue3": 6}
        assert schedule_cache.manual_entry_mode

    def test_next_match_is_auto_filled(self, schedule_cache: ScheduleCache) -> None:
        """After a save the next match's team is filled in."""
        session = MatchSession(InMemoryRecordStore(), schedule_cache=schedule_cache)
        session.load_schedule("2026test", "Test Event")
        session.update_event("Test Event", "2026test")
        session.update_scout_name("Alex")
        session.update_robot_designation("Blue2")
        session.update_match_number("1")

        assert session.submit().ok
        assert session.state.match_number == "2"
        assert session.state.team_number == "5"
        assert session.state.schedule_loaded


class TestPitSession:
    """Tests for the pit scouting session."""

    @staticmethod
    def _complete(session: PitSession) -> None:
        session.update_event("Houston", "2026test")
        session.update_team_number("4499")
        session.update_drivetrain_type("Swerve")
        session.update_preferred_role("Score")
        session.update_preferred_path("Trench")
        session.add_step(AutoPathStep(StepType.START, "1"))
        session.add_step(AutoPathStep(StepType.ACTION, "Load"))

    def test_tabs(self) -> None:
        """Tabs are added, selected and renumbered on removal."""
        session = PitSession(InMemoryRecordStore())
        session.add_auto_path()
        session.add_auto_path()
        assert [p.name for p in session.state.auto_paths] == ["A1", "A2", "A3"]
        assert session.state.current_path_index == 2

        session.select_auto_path(1)
        session.remove_current_auto_path()
        assert [p.name for p in session.state.auto_paths] == ["A1", "A2"]
        assert session.state.current_path_index == 1

        session.remove_current_auto_path()
        session.remove_current_auto_path()
        assert len(session.state.auto_paths) == 1
        assert session.state.current_path_index == 0

    def test_select_out_of_range(self) -> None:
        """Selecting a missing tab is an error."""
        with pytest.raises(IndexError):
            PitSession(InMemoryRecordStore()).select_auto_path(3)

    def test_steps_edit_current_tab(self) -> None:
        """Steps and strokes only change the selected tab."""
        session = PitSession(InMemoryRecordStore())
        session.add_step(AutoPathStep(StepType.START, "2"))
        session.add_step(AutoPathStep(StepType.ACTION, "Climb"))
        session.add_auto_path()
        session.update_drawing_strokes([[(0.1, 0.2)]])
        first, second = session.state.auto_paths
        assert len(first.steps) == 3
        assert second.steps == ()
        assert len(second.drawing_strokes) == 1
        session.undo_last_stroke()
        assert session.state.current_path.drawing_strokes == ()

    def test_location_options(self) -> None:
        """Location choices follow the current tab's last action."""
        session = PitSession(InMemoryRecordStore())
        session.add_step(AutoPathStep(StepType.START, "2"))
        assert session.location_options_for_current_path() == []
        session.add_step(AutoPathStep(StepType.ACTION, "Climb"))
        assert session.location_options_for_current_path() == ["L1"]

    def test_delete_and_clear(self) -> None:
        """Deleting a step rewinds the tab; clearing empties it."""
        session = PitSession(InMemoryRecordStore())
        session.add_step(AutoPathStep(StepType.START, "2"))
        session.add_step(AutoPathStep(StepType.ACTION, "Load"))
        session.delete_step_and_after(1)
        assert len(session.state.current_path.steps) == 1
        session.clear_current_path()
        assert session.state.current_path.steps == ()

    def test_validation(self) -> None:
        """Every required field and at least one path step are checked."""
        result = PitSession(InMemoryRecordStore()).submit()
        assert result.errors == (
            "Event is required",
            "Team number is required",
            "Drivetrain type is required",
            "Preferred role is required",
            "Preferred path is required",
            "At least one auto path is required",
        )

    def test_submit_saves_non_empty_paths(self) -> None:
        """Only tabs with steps are saved, then the form resets keeping the event."""
        store = InMemoryRecordStore()
        session = PitSession(store)
        self._complete(session)
        session.add_auto_path()
        session.update_photo_path("/sdcard/photos/4499.jpg")

        result = session.submit()

        assert result.ok
        saved = store.get_pit(result.record_id)
        assert saved.team_number == 4499
        assert [p.name for p in saved.auto_paths] == ["A1"]
        assert saved.photo_path == "/sdcard/photos/4499.jpg"
        assert store.get_pit_by_team(4499) == saved

        state = session.state
        assert (state.event, state.event_code) == ("Houston", "2026test")
        assert state == PitSessionState(event="Houston", event_code="2026test")
        assert state.team_number == ""
        assert state.photo_path is None
        assert len(state.auto_paths) == 1 and state.current_path.steps == ()

    def test_store_failure(self) -> None:
        """A failed save is reported on the state."""
        session = PitSession(FailingStore())
        self._complete(session)
        result = session.submit()
        assert result.errors == ("Failed to save: disk full",)
        assert session.state.errors == result.errors
        assert not session.state.is_submitting

    def test_reset_for_new_scout_keeps_event(self) -> None:
        """Starting the next team keeps only the event."""
        session = PitSession(InMemoryRecordStore())
        self._complete(session)
        session.reset_for_new_scout()
        assert session.state.event == "Houston"
        assert session.state.team_number == ""
        assert session.state.auto_paths[0].steps == ()
        session.reset()
        assert session.state.event == ""
