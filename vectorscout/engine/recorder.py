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
"""Append-only log of committed actions for the match in progress."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional, Tuple

from vectorscout.models.action import ActionRecord, ActionType, MatchPhase


@dataclass(frozen=True)
class ActionLog:
    """Immutable, ordered collection of committed action records.

    Every mutating operation returns a new log so sessions can swap whole
    snapshots instead of editing shared state.

    Parameters
    ----------
    records : Tuple[ActionRecord, ...], default=()
        Records in the order they were committed.
    """

    records: Tuple[ActionRecord, ...] = ()

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[ActionRecord]:
        return iter(self.records)

    def append(self, record: ActionRecord) -> "ActionLog":
        """Return a log with ``record`` added at the end.

        The records tuple is copied, so each append costs time proportional
        to the log length. Logs hold one match of actions and every session
        snapshot keeps its own log.

        Parameters
        ----------
        record : ActionRecord
            Newly committed action.

        Returns
        -------
        ActionLog
            Log containing every existing record followed by ``record``.
        """
        return ActionLog(self.records + (record,))

    def last_matching(self, phase: MatchPhase, action_type: ActionType) -> Optional[ActionRecord]:
        """Return the most recent record of ``action_type`` in ``phase``.

        Parameters
        ----------
        phase : MatchPhase
            Phase to match.
        action_type : ActionType
            Action type to match.

        Returns
        -------
        Optional[ActionRecord]
            The newest matching record, or ``None`` if there is none.
        """
        index = self._last_index(phase, action_type)
        return None if index is None else self.records[index]

    def remove_last_matching(self, phase: MatchPhase, action_type: ActionType) -> "ActionLog":
        """Return a log without the most recent record of ``action_type`` in ``phase``.

        Earlier records of the same type stay where they are; when nothing
        matches the log is returned unchanged.

        Parameters
        ----------
        phase : MatchPhase
            Phase to match.
        action_type : ActionType
            Action type to match.

        Returns
        -------
        ActionLog
            Log with exactly one fewer record, or ``self`` when nothing matched.
        """
        index = self._last_index(phase, action_type)
        if index is None:
            return self
        return ActionLog(self.records[:index] + self.records[index + 1 :])

    def count_matching(self, phase: MatchPhase, action_type: ActionType) -> int:
        """Count records of ``action_type`` in ``phase``.

        Parameters
        ----------
        phase : MatchPhase
            Phase to match.
        action_type : ActionType
            Action type to match.

        Returns
        -------
        int
            Number of matching records.
        """
        return sum(1 for record in self.records if record.matches(phase, action_type))

    def total_duration_matching(self, phase: MatchPhase, action_type: ActionType) -> int:
        """Sum the durations of records of ``action_type`` in ``phase``.

        Parameters
        ----------
        phase : MatchPhase
            Phase to match.
        action_type : ActionType
            Action type to match.

        Returns
        -------
        int
            Total duration in milliseconds.
        """
        return sum(record.duration_ms for record in self.records if record.matches(phase, action_type))

    def _last_index(self, phase: MatchPhase, action_type: ActionType) -> Optional[int]:
        """Return the position of the newest matching record.

        Parameters
        ----------
        phase : MatchPhase
            Phase to match.
        action_type : ActionType
            Action type to match.

        Returns
        -------
        Optional[int]
            Index into :attr:`records`, or ``None`` when nothing matches.
        """
        for index in range(len(self.records) - 1, -1, -1):
            if self.records[index].matches(phase, action_type):
                return index
        return None
