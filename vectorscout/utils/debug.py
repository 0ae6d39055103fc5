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
"""Structured logging utilities used to trace scouting sessions."""
import time
from collections import deque
from dataclasses import dataclass
from pathlib import Path
from threading import Lock
from typing import Deque, List, Optional, TextIO, Tuple

from vectorscout.engine.config import SCOUT_CONFIG


@dataclass
class DebugEvent:
    """Record representing a single logged event.

    Parameters
    ----------
    timestamp : float
        Wall-clock time (epoch seconds) when the event was recorded.
    event_type : str
        Category label describing the event, for example ``"ACTION"``.
    details : str
        Human-readable description providing additional context.
    """

    timestamp: float
    event_type: str
    details: str


class ScoutDebugger:
    """Helper object that streams structured session telemetry to disk.

    Parameters
    ----------
    output_dir : Optional[str], default="debug_logs"
        Directory where new session logs are created; created automatically
        when missing. ``None`` keeps lines in memory only.
    recent_events : Optional[int]
        Number of lines retained for :meth:`get_recent_events`.
    """

    def __init__(
        self,
        output_dir: Optional[str] = SCOUT_CONFIG.debug.output_dir,
        recent_events: Optional[int] = None,
    ) -> None:
        """Initialise the debugger and start the first logging session.

        Parameters
        ----------
        output_dir : Optional[str]
            Filesystem directory where log files are created, or ``None``.
        recent_events : Optional[int]
            Size of the in-memory line buffer; defaults to the configured size.
        """
        self.output_dir = Path(output_dir) if output_dir is not None else None
        self.log_file: Optional[TextIO] = None
        self.session_start = time.strftime("%Y%m%d_%H%M%S")
        self._lock = Lock()
        self._line_number = 1
        capacity = recent_events if recent_events is not None else SCOUT_CONFIG.debug.recent_events
        self._recent_events: Deque[Tuple[int, str]] = deque(maxlen=capacity)
        self._events: Deque[DebugEvent] = deque(maxlen=capacity)
        if self.output_dir is not None:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            self.start_new_session()

    def start_new_session(self) -> None:
        """Start a new debug logging session."""
        if self.output_dir is None:
            return
        if self.log_file:
            self.log_file.close()

        filename = f"scout_debug_{self.session_start}.txt"
        self.log_file = open(self.output_dir / filename, "w", encoding="utf-8")
        self.log_file.write(f"=== Scout Debug Session: {time.strftime('%Y-%m-%d %H:%M:%S')} ===\n\n")

    def log_action(self, phase: str, action: str, duration_ms: int, details: str = "") -> None:
        """Log a committed or cancelled action.

        Parameters
        ----------
        phase : str
            Match phase name.
        action : str
            Action type key or display name.
        duration_ms : int
            Measured duration in milliseconds.
        details : str
            Extra context such as the detail payload or ``"cancelled"``.
        """
        details_str = f" | {details}" if details else ""
        self._write_log("ACTION", f"Phase: {phase} | Action: {action} | Duration: {duration_ms} ms{details_str}")

    def log_zone(self, diagram: str, x: float, y: float, orientation: str, zone: Optional[str]) -> None:
        """Log a tap resolved against a field diagram.

        Parameters
        ----------
        diagram : str
            Name of the diagram tapped.
        x : float
            Normalised tap x coordinate.
        y : float
            Normalised tap y coordinate.
        orientation : str
            Orientation label in effect.
        zone : Optional[str]
            Resolved zone label, ``None`` when the tap missed every region.
        """
        self._write_log(
            "ZONE",
            f"Diagram: {diagram} | Tap: ({x:.3f}, {y:.3f}) | Orientation: {orientation} | Zone: {zone or '-'}",
        )

    def log_submit(self, kind: str, label: str, ok: bool, details: str = "") -> None:
        """Log a submit attempt for a match or pit record.

        Parameters
        ----------
        kind : str
            ``"match"`` or ``"pit"``.
        label : str
            Human label of the record being submitted.
        ok : bool
            Whether the record was stored.
        details : str
            Record id on success or the error messages on failure.
        """
        status = "OK" if ok else "FAILED"
        details_str = f" | {details}" if details else ""
        self._write_log("SUBMIT", f"Kind: {kind} | Record: {label} | Status: {status}{details_str}")

    def log_schedule(self, event_code: str, source: Optional[str], match_count: int) -> None:
        """Log the outcome of a schedule load.

        Parameters
        ----------
        event_code : str
            Event key that was requested.
        source : Optional[str]
            Where the schedule came from, ``None`` when it was unavailable.
        match_count : int
            Number of qualification matches loaded.
        """
        self._write_log("SCHEDULE", f"Event: {event_code} | Source: {source or 'unavailable'} | Matches: {match_count}")

    def log_codec(self, operation: str, details: str) -> None:
        """Log a transfer-code encode or decode note.

        Parameters
        ----------
        operation : str
            ``"encode"`` or ``"decode"``.
        details : str
            Description of what happened.
        """
        self._write_log("CODEC", f"Op: {operation} | Details: {details}")

    def log_error(self, error_type: str, description: str) -> None:
        """Log a failure the session recovered from.

        Parameters
        ----------
        error_type : str
            Short failure category such as ``"SCHEDULE_CACHE"``.
        description : str
            What went wrong, including the underlying exception text.
        """
        self._write_log("ERROR", f"Type: {error_type} | Details: {description}")

    def _write_log(self, event_type: str, details: str) -> None:
        """Record one line in memory and append it to the session file.

        Parameters
        ----------
        event_type : str
            Category such as ``"ACTION"`` or ``"SUBMIT"``.
        details : str
            Pipe-separated fields describing the event.
        """
        timestamp = time.strftime("%H:%M:%S")
        log_entry = f"[{timestamp}] {event_type}: {details}"

        with self._lock:
            line_no = self._line_number
            self._line_number += 1
            self._recent_events.append((line_no, log_entry))
            self._events.append(DebugEvent(time.time(), event_type, details))

            if self.log_file:
                self.log_file.write(f"{log_entry}\n")
                self.log_file.flush()

    def get_recent_events(self, limit: int = 20) -> List[str]:
        """Return the newest lines, numbered in the order they were written.

        Parameters
        ----------
        limit : int
            Maximum number of entries to return.

        Returns
        -------
        List[str]
            Up to ``limit`` lines, each prefixed with a zero-padded line number.
        """
        with self._lock:
            selected = list(self._recent_events)[-limit:]
        return [f"{line_no:05d} {entry}" for line_no, entry in selected]

    def events_of_type(self, event_type: str) -> List[DebugEvent]:
        """Return retained events of one category, oldest first.

        Parameters
        ----------
        event_type : str
            Category label such as ``"ERROR"``.

        Returns
        -------
        List[DebugEvent]
            Matching events still held in memory.
        """
        with self._lock:
            return [event for event in self._events if event.event_type == event_type]

    def close(self) -> None:
        """Close the log file."""
        if self.log_file:
            self.log_file.close()
            self.log_file = None
