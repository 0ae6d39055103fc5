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
"""Match and pit scouting sessions.

A session owns an immutable state snapshot and replaces it on every change.
Store and schedule collaborators are injected; their failures are turned into
messages on the snapshot and never leave it half updated.
"""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass, field, replace
from pathlib import Path
from types import MappingProxyType
from typing import Callable, List, Mapping, Optional, Sequence, Tuple, Union

from vectorscout.engine.auto_path import AutoPathBuilder
from vectorscout.engine.config import SCOUT_CONFIG
from vectorscout.engine.diagrams import START_DIAGRAM, Orientation, diagram_for_action, zone_for_action
from vectorscout.engine.geometry import toggle_selection
from vectorscout.engine.recorder import ActionLog
from vectorscout.engine.timer import ActionTimer
from vectorscout.errors import ScoutError, StoreError
from vectorscout.models.action import ActionRecord, ActionType, MatchPhase, resolve_action_type
from vectorscout.models.qualitative import EmptyData, FerryData, LoadData, QualitativeData, ShootData
from vectorscout.models.scout import AutoPathStep, MatchScoutData, PitScoutData
from vectorscout.utils.codec import transfer_label
from vectorscout.utils.debug import ScoutDebugger
from vectorscout.utils.schedule import ScheduleCache, ScheduleSource
from vectorscout.utils.store import RecordStore
from vectorscout.utils.timefmt import now_ms

_SAVE_ERRORS = (StoreError, OSError, sqlite3.Error)


def _error_text(exc: Exception) -> str:
    """Return the message shown to the scout for a failed save.

    Parameters
    ----------
    exc : Exception
        Failure raised by the store.

    Returns
    -------
    str
        The error's own message.
    """
    return exc.message if isinstance(exc, ScoutError) else str(exc)


@dataclass(frozen=True)
class SubmitResult:
    """Outcome of submitting a session.

    Parameters
    ----------
    ok : bool
        Whether the record was stored.
    record_id : Optional[int], default=None
        Identifier assigned by the store.
    errors : Tuple[str, ...], default=()
        Validation or save messages when ``ok`` is false.
    """

    ok: bool
    record_id: Optional[int] = None
    errors: Tuple[str, ...] = ()


@dataclass(frozen=True)
class MatchSessionState:
    """Snapshot of everything on the match scouting screen.

    Parameters
    ----------
    event : str, default=""
        Event display name.
    event_code : str, default=""
        Provider event key used for schedule lookups.
    match_number : str, default=""
        Match number as typed.
    robot_designation : str, default=""
        Station of the scouted robot.
    scout_name : str, default=""
        Person scouting.
    team_number : str, default=""
        Team being scouted.
    start_position : str, default=""
        Selected start zone.
    loaded : bool, default=False
        Robot started with a preloaded piece.
    no_show : bool, default=False
        Robot never took the field.
    blue_right : bool, default=True
        Field orientation of the diagrams.
    team_number_auto_filled : bool, default=False
        Whether ``team_number`` came from the schedule.
    opposing_teams : Mapping[str, int], default=empty
        Read-only view of the opposing stations and teams for the defense form.
    schedule_loaded : bool, default=False
        Whether a schedule is available.
    schedule_event_name : str, default=""
        Event the loaded schedule belongs to.
    schedule_match_count : int, default=0
        Matches in the loaded schedule.
    manual_entry_mode : bool, default=False
        Team numbers are typed rather than filled from the schedule.
    action_records : ActionLog, default=ActionLog()
        Committed actions.
    is_submitting : bool, default=False
        A save is in progress.
    errors : Tuple[str, ...], default=()
        Messages from the last failed submit.
    """

    event: str = ""
    event_code: str = ""
    match_number: str = ""
    robot_designation: str = ""
    scout_name: str = ""
    team_number: str = ""
    start_position: str = ""
    loaded: bool = False
    no_show: bool = False
    blue_right: bool = True
    team_number_auto_filled: bool = False
    opposing_teams: Mapping[str, int] = field(default_factory=lambda: MappingProxyType({}))
    schedule_loaded: bool = False
    schedule_event_name: str = ""
    schedule_match_count: int = 0
    manual_entry_mode: bool = False
    action_records: ActionLog = field(default_factory=ActionLog)
    is_submitting: bool = False
    errors: Tuple[str, ...] = ()

    @property
    def orientation(self) -> Orientation:
        """Orientation used to pick diagram tables."""
        return Orientation(self.robot_designation, self.blue_right)

    def action_count(self, phase: MatchPhase, action_type: ActionType) -> int:
        """Count committed ``action_type`` records in ``phase``.

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
        return self.action_records.count_matching(phase, action_type)

    def total_action_time(self, phase: MatchPhase, action_type: ActionType) -> int:
        """Sum the durations of committed ``action_type`` records in ``phase``.

        Parameters
        ----------
        phase : MatchPhase
            Phase to filter on.
        action_type : ActionType
            Action type to filter on.

        Returns
        -------
        int
            Total milliseconds.
        """
        return self.action_records.total_duration_matching(phase, action_type)


class MatchSession:
    """Controller behind the match scouting screen.

    Parameters
    ----------
    store : RecordStore
        Destination of submitted records.
    schedule_cache : Optional[ScheduleCache]
        Schedule used for team auto-fill; ``None`` disables auto-fill.
    clock : Callable[[], int]
        Source of wall-clock milliseconds.
    debugger : Optional[ScoutDebugger]
        Receives action, zone, schedule and submit lines.
    """

    def __init__(
        self,
        store: RecordStore,
        schedule_cache: Optional[ScheduleCache] = None,
        clock: Callable[[], int] = now_ms,
        debugger: Optional[ScoutDebugger] = None,
    ) -> None:
        """Start with an empty snapshot.

        Parameters
        ----------
        store : RecordStore
            Destination of submitted records.
        schedule_cache : Optional[ScheduleCache]
            Schedule used for team auto-fill.
        clock : Callable[[], int]
            Source of wall-clock milliseconds.
        debugger : Optional[ScoutDebugger]
            Receives action, zone, schedule and submit lines.
        """
        self.store = store
        self.schedule_cache = schedule_cache
        self.clock = clock
        self.debugger = debugger
        schedule = schedule_cache.current if schedule_cache is not None else None
        self._state = MatchSessionState(
            schedule_loaded=schedule is not None,
            schedule_event_name=schedule.event_name if schedule is not None else "",
            schedule_match_count=len(schedule.matches) if schedule is not None else 0,
            manual_entry_mode=schedule_cache.manual_entry_mode if schedule_cache is not None else False,
        )

    @property
    def state(self) -> MatchSessionState:
        """Current snapshot."""
        return self._state

    def _update(self, **changes: object) -> None:
        """Replace the snapshot with ``changes`` applied."""
        self._state = replace(self._state, **changes)

    def update_event(self, event: str, event_code: str = "") -> None:
        """Select the event being scouted.

        Parameters
        ----------
        event : str
            Event display name.
        event_code : str
            Provider event key.
        """
        self._update(event=event, event_code=event_code)
        self._auto_fill_team_number()

    def update_match_number(self, match_number: str) -> None:
        """Set the match number.

        Parameters
        ----------
        match_number : str
            Match number as typed.
        """
        self._update(match_number=match_number)
        self._auto_fill_team_number()

    def update_robot_designation(self, robot_designation: str) -> None:
        """Set the scouted station.

        Parameters
        ----------
        robot_designation : str
            Station such as ``"Red1"``.
        """
        self._update(robot_designation=robot_designation)
        self._auto_fill_team_number()

    def update_scout_name(self, scout_name: str) -> None:
        """Set the scout's name.

        Parameters
        ----------
        scout_name : str
            Person scouting.
        """
        self._update(scout_name=scout_name)

    def update_team_number(self, team_number: str) -> None:
        """Set the team number by hand.

        Parameters
        ----------
        team_number : str
            Team being scouted.
        """
        self._update(team_number=team_number)

    def update_start_position(self, start_position: str) -> None:
        """Set the start zone directly.

        Parameters
        ----------
        start_position : str
            Start zone label.
        """
        self._update(start_position=start_position)

    def select_start_zone(self, x: float, y: float) -> str:
        """Apply a tap on the start diagram.

        Tapping the selected zone again clears it; a tap outside every zone
        leaves the selection alone.

        Parameters
        ----------
        x : float
            Tap position as a fraction of the image width.
        y : float
            Tap position as a fraction of the image height.

        Returns
        -------
        str
            The start position after the tap.
        """
        orientation = self._state.orientation
        zone = START_DIAGRAM.resolve(x, y, orientation)
        if self.debugger is not None:
            self.debugger.log_zone(START_DIAGRAM.name, x, y, orientation.label, zone)
        start_position = toggle_selection(self._state.start_position, zone)
        self._update(start_position=start_position)
        return start_position

    def toggle_loaded(self) -> None:
        """Flip the preloaded flag."""
        self._update(loaded=not self._state.loaded)

    def toggle_no_show(self) -> None:
        """Flip the no-show flag."""
        self._update(no_show=not self._state.no_show)

    def toggle_field_orientation(self) -> None:
        """Swap which side the blue alliance is drawn on."""
        self._update(blue_right=not self._state.blue_right)

    def enable_manual_entry_mode(self) -> None:
        """Stop filling team numbers from the schedule."""
        if self.schedule_cache is not None:
            self.schedule_cache.set_manual_entry_mode(True)
        self._update(manual_entry_mode=True)

    def load_schedule(self, event_code: str, event_name: str) -> Tuple[bool, str]:
        """Load an event's schedule from the cache or the provider.

        Parameters
        ----------
        event_code : str
            Provider event key.
        event_name : str
            Event display name.

        Returns
        -------
        Tuple[bool, str]
            Success flag and the message shown to the scout.
        """
        if self.schedule_cache is None:
            return False, "Failed to load schedule"
        result = self.schedule_cache.get_or_load(event_code, event_name)
        if not result.ok:
            return False, "Failed to load schedule"
        self._schedule_installed(event_name, result.match_count)
        source = result.source.value if result.source is not None else ScheduleSource.CACHE.value
        return True, f"Loaded {result.match_count} matches from {source}"

    def import_schedule(self, path: Union[str, Path], event_code: str, event_name: str) -> Tuple[bool, str]:
        """Install a schedule from an exported provider file.

        Parameters
        ----------
        path : Union[str, Path]
            JSON export of the provider's match list.
        event_code : str
            Provider event key.
        event_name : str
            Event display name.

        Returns
        -------
        Tuple[bool, str]
            Success flag and the message shown to the scout.
        """
        if self.schedule_cache is None:
            return False, "Failed to import schedule"
        result = self.schedule_cache.import_file(path, event_code, event_name)
        if not result.ok:
            return False, "Failed to import schedule"
        self._schedule_installed(event_name, result.match_count)
        return True, f"Imported {result.match_count} matches from file"

    def _schedule_installed(self, event_name: str, match_count: int) -> None:
        """Record a freshly loaded schedule and re-run auto-fill.

        Parameters
        ----------
        event_name : str
            Event the schedule belongs to.
        match_count : int
            Number of matches loaded.
        """
        if self.schedule_cache is not None:
            self.schedule_cache.set_manual_entry_mode(False)
        self._update(
            schedule_loaded=True,
            schedule_event_name=event_name,
            schedule_match_count=match_count,
            manual_entry_mode=False,
        )
        self._auto_fill_team_number()

    def _auto_fill_team_number(self) -> None:
        """Fill the team number and opponents from the schedule when possible."""
        state = self._state
        try:
            match_number = int(state.match_number)
        except ValueError:
            return
        designation = state.robot_designation
        if not designation.strip() or self.schedule_cache is None:
            return

        opposing = MappingProxyType(dict(self.schedule_cache.opposing_teams(match_number, designation) or {}))
        if state.manual_entry_mode:
            self._update(opposing_teams=opposing)
            return

        team_number = self.schedule_cache.team_number(match_number, designation)
        if team_number is not None and team_number > 0:
            self._update(team_number=str(team_number), team_number_auto_filled=True, opposing_teams=opposing)
        else:
            self._update(opposing_teams=opposing)

    def add_action_record(self, record: ActionRecord) -> None:
        """Append a committed action.

        Parameters
        ----------
        record : ActionRecord
            Action to append.
        """
        self._update(action_records=self._state.action_records.append(record))

    def remove_last_action_record(self, phase: MatchPhase, action_type: ActionType) -> None:
        """Undo the most recent ``action_type`` record in ``phase``.

        Parameters
        ----------
        phase : MatchPhase
            Phase of the record to remove.
        action_type : ActionType
            Action type of the record to remove.
        """
        self._update(action_records=self._state.action_records.remove_last_matching(phase, action_type))

    def action_count(self, phase: MatchPhase, action_type: ActionType) -> int:
        """Count committed ``action_type`` records in ``phase``.

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
        return self._state.action_count(phase, action_type)

    def total_action_time(self, phase: MatchPhase, action_type: ActionType) -> int:
        """Sum the durations of committed ``action_type`` records in ``phase``.

        Parameters
        ----------
        phase : MatchPhase
            Phase to filter on.
        action_type : ActionType
            Action type to filter on.

        Returns
        -------
        int
            Total milliseconds.
        """
        return self._state.total_action_time(phase, action_type)

    def begin_action(self, name: str, phase: MatchPhase) -> "ActionEntry":
        """Open the detail form for an action and start its timer.

        Parameters
        ----------
        name : str
            Action name as shown on the button, for example ``"Climb"``.
        phase : MatchPhase
            Phase the action belongs to.

        Returns
        -------
        ActionEntry
            The open entry; commit or cancel it exactly once.

        Raises
        ------
        ValueError
            If ``phase`` has no action called ``name``.
        """
        action_type = resolve_action_type(name, phase)
        if action_type is None:
            raise ValueError(f"No action '{name}' during {phase.value}")
        return ActionEntry(self, action_type, phase)

    def clear_errors(self) -> None:
        """Dismiss the messages of the last failed submit."""
        self._update(errors=())

    def validate(self) -> List[str]:
        """Check the required pre-match fields.

        Returns
        -------
        List[str]
            One message per missing field, empty when the match can be saved.
        """
        state = self._state
        errors = []
        if not state.event.strip():
            errors.append("Event is required")
        if not state.match_number.strip():
            errors.append("Match number is required")
        if not state.robot_designation.strip():
            errors.append("Robot designation is required")
        if not state.scout_name.strip():
            errors.append("Scout name is required")
        if not state.team_number.strip():
            errors.append("Team number is required")
        return errors

    def build_record(self) -> MatchScoutData:
        """Assemble the record that submitting would store.

        Returns
        -------
        MatchScoutData
            Record built from the current snapshot.
        """
        state = self._state
        return MatchScoutData(
            event=state.event,
            match_number=state.match_number,
            robot_designation=state.robot_designation,
            scout_name=state.scout_name,
            team_number=state.team_number,
            start_position=state.start_position,
            loaded=state.loaded,
            no_show=state.no_show,
            action_records=state.action_records.records,
            timestamp=self.clock(),
        )

    def submit(self) -> SubmitResult:
        """Validate and store the match, then prepare the next one.

        Returns
        -------
        SubmitResult
            Stored record id, or the validation or save messages.
        """
        errors = self.validate()
        if errors:
            self._update(errors=tuple(errors))
            return SubmitResult(ok=False, errors=tuple(errors))

        previous = replace(self._state, errors=())
        self._state = replace(previous, is_submitting=True)
        record = self.build_record()
        label = transfer_label(record)
        try:
            record_id = self.store.save_match(record)
        except _SAVE_ERRORS as exc:
            message = f"Error saving match: {_error_text(exc)}"
            self._state = replace(previous, is_submitting=False, errors=(message,))
            if self.debugger is not None:
                self.debugger.log_submit("match", label, ok=False, details=message)
            return SubmitResult(ok=False, errors=(message,))

        if self.debugger is not None:
            self.debugger.log_submit("match", label, ok=True, details=f"id={record_id}")
        self._reset_for_next_match(previous)
        return SubmitResult(ok=True, record_id=record_id)

    def _reset_for_next_match(self, previous: MatchSessionState) -> None:
        """Clear per-match fields and advance the match number.

        Parameters
        ----------
        previous : MatchSessionState
            Snapshot that was just stored.
        """
        try:
            next_match = int(previous.match_number) + 1
        except ValueError:
            next_match = 1
        self._state = MatchSessionState(
            event=previous.event,
            event_code=previous.event_code,
            robot_designation=previous.robot_designation,
            scout_name=previous.scout_name,
            blue_right=previous.blue_right,
            match_number=str(next_match),
            schedule_loaded=previous.schedule_loaded,
            schedule_event_name=previous.schedule_event_name,
            schedule_match_count=previous.schedule_match_count,
            manual_entry_mode=previous.manual_entry_mode,
        )
        self._auto_fill_team_number()


class ActionEntry:
    """Timed detail form for one action.

    An entry starts timing as soon as it is opened and ends in exactly one of
    :meth:`commit` or :meth:`cancel`.

    Parameters
    ----------
    session : MatchSession
        Session the committed record is appended to.
    action_type : ActionType
        Action being recorded.
    phase : MatchPhase
        Phase the action belongs to.
    """

    def __init__(self, session: MatchSession, action_type: ActionType, phase: MatchPhase) -> None:
        """Open the form and start the timer.

        Parameters
        ----------
        session : MatchSession
            Session the committed record is appended to.
        action_type : ActionType
            Action being recorded.
        phase : MatchPhase
            Phase the action belongs to.
        """
        self.session = session
        self.action_type = action_type
        self.phase = phase
        self.selected_zone = ""
        self.ferry_type = ""
        self.timer = ActionTimer(clock=session.clock)
        self._closed = False

    @property
    def is_open(self) -> bool:
        """Whether the entry still awaits commit or cancel."""
        return not self._closed

    @property
    def elapsed_ms(self) -> int:
        """Milliseconds on the form's clock."""
        return self.timer.elapsed_ms

    def select_zone(self, x: float, y: float) -> str:
        """Apply a tap on the action's location map.

        Parameters
        ----------
        x : float
            Tap position as a fraction of the image width.
        y : float
            Tap position as a fraction of the image height.

        Returns
        -------
        str
            Selected zone after the tap; empty when cleared or never set.
        """
        orientation = self.session.state.orientation
        zone = zone_for_action(self.action_type, x, y, orientation)
        debugger = self.session.debugger
        diagram = diagram_for_action(self.action_type)
        if debugger is not None and diagram is not None:
            debugger.log_zone(diagram.name, x, y, orientation.label, zone)
        self.selected_zone = toggle_selection(self.selected_zone, zone)
        return self.selected_zone

    def set_ferry_type(self, ferry_type: str) -> None:
        """Choose how game pieces were ferried.

        Parameters
        ----------
        ferry_type : str
            ``"Shoot"`` or ``"Dump"``.
        """
        self.ferry_type = ferry_type

    def commit(self, qualitative_data: Optional[QualitativeData] = None) -> ActionRecord:
        """Stop the clock and append the action to the session.

        Parameters
        ----------
        qualitative_data : Optional[QualitativeData]
            Detail form values. Location-only forms fall back to the selected
            zone; forms without fields need nothing.

        Returns
        -------
        ActionRecord
            The appended record, ending now and lasting the elapsed time.

        Raises
        ------
        ValueError
            If the entry is already closed, or the detail form is incomplete
            or belongs to another action.
        """
        self._ensure_open()
        data = qualitative_data if qualitative_data is not None else self._data_from_form()
        if data is None:
            raise ValueError(f"{self.action_type.name} needs its details before it can be saved")
        if data.kind != self.action_type.qualitative_kind:
            raise ValueError(f"{type(data).__name__} does not describe a {self.action_type.name} action")

        self._closed = True
        elapsed = self.timer.stop()
        end = self.session.clock()
        record = ActionRecord(
            phase=self.phase,
            action_type=self.action_type,
            start_time_ms=end - elapsed,
            end_time_ms=end,
            qualitative_data=data,
        )
        self.session.add_action_record(record)
        if self.session.debugger is not None:
            self.session.debugger.log_action(self.phase.value, self.action_type.key, elapsed, data.to_json())
        return record

    def cancel(self) -> None:
        """Stop the clock without recording the action.

        Raises
        ------
        ValueError
            If the entry is already closed.
        """
        self._ensure_open()
        self._closed = True
        elapsed = self.timer.stop()
        if SCOUT_CONFIG.session.cancel_removes_last and self.action_type.has_counter:
            self.session.remove_last_action_record(self.phase, self.action_type)
        if self.session.debugger is not None:
            self.session.debugger.log_action(self.phase.value, self.action_type.key, elapsed, "cancelled")

    def _ensure_open(self) -> None:
        """Reject a second commit or cancel.

        Raises
        ------
        ValueError
            If the entry is already closed.
        """
        if self._closed:
            raise ValueError(f"{self.action_type.name} entry is already closed")

    def _data_from_form(self) -> Optional[QualitativeData]:
        """Build detail data from the form's own selections.

        Returns
        -------
        Optional[QualitativeData]
            Data for location-only and empty forms, ``None`` otherwise or
            when a required selection is missing.
        """
        kind = self.action_type.qualitative_kind
        if kind == EmptyData.kind:
            return EmptyData()
        if not self.selected_zone:
            return None
        if kind == LoadData.kind:
            return LoadData(self.selected_zone)
        if kind == ShootData.kind:
            return ShootData(self.selected_zone)
        if kind == FerryData.kind and self.ferry_type:
            return FerryData(self.ferry_type, self.selected_zone)
        return None


@dataclass(frozen=True)
class PitSessionState:
    """Snapshot of everything on the pit scouting screen.

    Parameters
    ----------
    event : str, default=""
        Event display name.
    event_code : str, default=""
        Provider event key.
    team_number : str, default=""
        Team number as typed.
    drivetrain_type : str, default=""
        Selected drivetrain option.
    preferred_role : str, default=""
        Selected role option.
    preferred_path : str, default=""
        Selected path option.
    photo_path : Optional[str], default=None
        Captured robot photo.
    auto_paths : Tuple[AutoPathBuilder, ...], default=(AutoPathBuilder(),)
        Auto-path tabs, never empty.
    current_path_index : int, default=0
        Tab being edited.
    is_submitting : bool, default=False
        A save is in progress.
    errors : Tuple[str, ...], default=()
        Messages from the last failed submit.
    """

    event: str = ""
    event_code: str = ""
    team_number: str = ""
    drivetrain_type: str = ""
    preferred_role: str = ""
    preferred_path: str = ""
    photo_path: Optional[str] = None
    auto_paths: Tuple[AutoPathBuilder, ...] = (AutoPathBuilder(),)
    current_path_index: int = 0
    is_submitting: bool = False
    errors: Tuple[str, ...] = ()

    @property
    def current_path(self) -> AutoPathBuilder:
        """Tab being edited."""
        return self.auto_paths[self.current_path_index]


def _path_name(index: int) -> str:
    """Return the tab name for the path at ``index``.

    Parameters
    ----------
    index : int
        Zero-based tab position.

    Returns
    -------
    str
        ``"A1"`` for the first tab, ``"A2"`` for the second and so on.
    """
    return f"{SCOUT_CONFIG.session.auto_path_prefix}{index + 1}"


class PitSession:
    """Controller behind the pit scouting screen.

    Parameters
    ----------
    store : RecordStore
        Destination of submitted records.
    clock : Callable[[], int]
        Source of wall-clock milliseconds for record timestamps.
    debugger : Optional[ScoutDebugger]
        Receives submit lines.
    """

    def __init__(
        self,
        store: RecordStore,
        clock: Callable[[], int] = now_ms,
        debugger: Optional[ScoutDebugger] = None,
    ) -> None:
        """Start with one empty auto-path tab.

        Parameters
        ----------
        store : RecordStore
            Destination of submitted records.
        clock : Callable[[], int]
            Source of wall-clock milliseconds.
        debugger : Optional[ScoutDebugger]
            Receives submit lines.
        """
        self.store = store
        self.clock = clock
        self.debugger = debugger
        self._state = PitSessionState()

    @property
    def state(self) -> PitSessionState:
        """Current snapshot."""
        return self._state

    def _update(self, **changes: object) -> None:
        """Replace the snapshot with ``changes`` applied."""
        self._state = replace(self._state, **changes)

    def _replace_current(self, path: AutoPathBuilder) -> None:
        """Swap in a new version of the tab being edited.

        Parameters
        ----------
        path : AutoPathBuilder
            Updated tab.
        """
        paths = list(self._state.auto_paths)
        paths[self._state.current_path_index] = path
        self._update(auto_paths=tuple(paths))

    def update_event(self, event: str, event_code: str = "") -> None:
        """Select the event.

        Parameters
        ----------
        event : str
            Event display name.
        event_code : str
            Provider event key.
        """
        self._update(event=event, event_code=event_code)

    def update_team_number(self, team_number: str) -> None:
        """Set the inspected team.

        Parameters
        ----------
        team_number : str
            Team number as typed.
        """
        self._update(team_number=team_number)

    def update_drivetrain_type(self, drivetrain_type: str) -> None:
        """Set the drivetrain option.

        Parameters
        ----------
        drivetrain_type : str
            Drivetrain option, for example ``"Swerve"``.
        """
        self._update(drivetrain_type=drivetrain_type)

    def update_preferred_role(self, preferred_role: str) -> None:
        """Set the preferred role option.

        Parameters
        ----------
        preferred_role : str
            Role option, for example ``"Score"``.
        """
        self._update(preferred_role=preferred_role)

    def update_preferred_path(self, preferred_path: str) -> None:
        """Set the preferred path option.

        Parameters
        ----------
        preferred_path : str
            Path option, for example ``"Trench"``.
        """
        self._update(preferred_path=preferred_path)

    def update_photo_path(self, photo_path: Optional[str]) -> None:
        """Attach or detach the robot photo.

        Parameters
        ----------
        photo_path : Optional[str]
            Photo location, ``None`` to detach.
        """
        self._update(photo_path=photo_path)

    def select_auto_path(self, index: int) -> None:
        """Switch to another auto-path tab.

        Parameters
        ----------
        index : int
            Zero-based tab position.

        Raises
        ------
        IndexError
            If there is no tab at ``index``.
        """
        if not 0 <= index < len(self._state.auto_paths):
            raise IndexError(f"No auto path tab at position {index}")
        self._update(current_path_index=index)

    def add_auto_path(self) -> None:
        """Add an empty tab and switch to it."""
        paths = self._state.auto_paths + (AutoPathBuilder(name=_path_name(len(self._state.auto_paths))),)
        self._update(auto_paths=paths, current_path_index=len(paths) - 1)

    def remove_current_auto_path(self) -> None:
        """Delete the current tab, keeping at least one, and renumber the rest."""
        paths = list(self._state.auto_paths)
        if len(paths) <= 1:
            return
        index = self._state.current_path_index
        del paths[index]
        renamed = tuple(path.renamed(_path_name(i)) for i, path in enumerate(paths))
        self._update(auto_paths=renamed, current_path_index=min(index, len(renamed) - 1))

    def add_step(self, step: AutoPathStep) -> None:
        """Append a step to the current tab.

        Parameters
        ----------
        step : AutoPathStep
            Step chosen by the scout.

        Raises
        ------
        ValueError
            If the step is not of the category the tab expects next.
        """
        self._replace_current(self._state.current_path.add_step(step))

    def delete_step_and_after(self, index: int) -> None:
        """Delete a step of the current tab and everything after it.

        Parameters
        ----------
        index : int
            Position of the first step to delete.
        """
        self._replace_current(self._state.current_path.delete_from_index(index))

    def clear_current_path(self) -> None:
        """Remove every step from the current tab."""
        self._replace_current(self._state.current_path.clear())

    def location_options_for_current_path(self) -> List[str]:
        """Return the locations offered after the current tab's last action.

        Returns
        -------
        List[str]
            Candidate locations, empty before the first action.
        """
        return self._state.current_path.location_options_for_last_action()

    def update_drawing_path(self, drawing_path: Optional[str]) -> None:
        """Attach an exported drawing to the current tab.

        Parameters
        ----------
        drawing_path : Optional[str]
            Drawing file, ``None`` to detach.
        """
        self._replace_current(self._state.current_path.with_drawing_path(drawing_path))

    def update_drawing_strokes(self, strokes: Sequence[Sequence[Tuple[float, float]]]) -> None:
        """Replace the freehand strokes of the current tab.

        Parameters
        ----------
        strokes : Sequence[Sequence[Tuple[float, float]]]
            Strokes as sequences of ``(x, y)`` points.
        """
        self._replace_current(self._state.current_path.with_strokes(strokes))

    def clear_drawing_strokes(self) -> None:
        """Erase the drawing on the current tab."""
        self.update_drawing_strokes(())

    def undo_last_stroke(self) -> None:
        """Remove the most recent stroke on the current tab."""
        self._replace_current(self._state.current_path.undo_last_stroke())

    def clear_errors(self) -> None:
        """Dismiss the messages of the last failed submit."""
        self._update(errors=())

    def validate(self) -> List[str]:
        """Check the required fields.

        Returns
        -------
        List[str]
            One message per missing field, empty when the record can be saved.
        """
        state = self._state
        errors = []
        if not state.event.strip():
            errors.append("Event is required")
        if not state.team_number.strip():
            errors.append("Team number is required")
        if not state.drivetrain_type.strip():
            errors.append("Drivetrain type is required")
        if not state.preferred_role.strip():
            errors.append("Preferred role is required")
        if not state.preferred_path.strip():
            errors.append("Preferred path is required")
        if not any(path.steps for path in state.auto_paths):
            errors.append("At least one auto path is required")
        return errors

    def build_record(self) -> PitScoutData:
        """Assemble the record that submitting would store.

        Tabs without steps are left out and an unreadable team number is
        stored as zero.

        Returns
        -------
        PitScoutData
            Record built from the current snapshot.
        """
        state = self._state
        try:
            team_number = int(state.team_number)
        except ValueError:
            team_number = 0
        return PitScoutData(
            event=state.event,
            team_number=team_number,
            drivetrain_type=state.drivetrain_type,
            preferred_role=state.preferred_role,
            preferred_path=state.preferred_path,
            photo_path=state.photo_path,
            auto_paths=tuple(path.to_auto_path() for path in state.auto_paths if path.steps),
            timestamp=self.clock(),
        )

    def submit(self) -> SubmitResult:
        """Validate and store the pit record.

        A successful save resets the form for the next team, keeping the
        event.

        Returns
        -------
        SubmitResult
            Stored record id, or the validation or save messages.
        """
        errors = self.validate()
        if errors:
            self._update(errors=tuple(errors))
            return SubmitResult(ok=False, errors=tuple(errors))

        self._update(is_submitting=True, errors=())
        record = self.build_record()
        label = transfer_label(record)
        try:
            record_id = self.store.save_pit(record)
        except _SAVE_ERRORS as exc:
            message = f"Failed to save: {_error_text(exc)}"
            self._update(is_submitting=False, errors=(message,))
            if self.debugger is not None:
                self.debugger.log_submit("pit", label, ok=False, details=message)
            return SubmitResult(ok=False, errors=(message,))

        if self.debugger is not None:
            self.debugger.log_submit("pit", label, ok=True, details=f"id={record_id}")
        self.reset_for_new_scout()
        return SubmitResult(ok=True, record_id=record_id)

    def reset_for_new_scout(self) -> None:
        """Start a new record, keeping the selected event."""
        self._state = PitSessionState(event=self._state.event, event_code=self._state.event_code)

    def reset(self) -> None:
        """Start over from an empty snapshot."""
        self._state = PitSessionState()
