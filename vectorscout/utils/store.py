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
"""Local persistence for match and pit scouting records.

Two stores share the :class:`RecordStore` interface: an in-memory store used
by tests and demos, and a SQLite store with one table per aggregate part.
Each aggregate (a match with its actions, a pit record with its auto paths)
is written in a single transaction.
"""

from __future__ import annotations

import json
import sqlite3
from abc import ABC, abstractmethod
from dataclasses import replace
from pathlib import Path
from threading import Lock
from typing import Any, Callable, Dict, List, Optional, TypeVar, Union

from vectorscout.errors import StoreError
from vectorscout.models.action import ActionRecord, MatchPhase, get_action_type
from vectorscout.models.qualitative import qualitative_from_json
from vectorscout.models.scout import AutoPath, AutoPathStep, MatchScoutData, PitScoutData, StepType

T = TypeVar("T")


class RecordStore(ABC):
    """Interface every record store implements."""

    @abstractmethod
    def save_match(self, data: MatchScoutData) -> int:
        """Insert a match record with its actions.

        Parameters
        ----------
        data : MatchScoutData
            Record to store; a zero ``id`` asks for a new identifier.

        Returns
        -------
        int
            Identifier of the stored record.
        """

    @abstractmethod
    def update_match(self, data: MatchScoutData) -> None:
        """Replace a stored match record and all of its actions.

        Parameters
        ----------
        data : MatchScoutData
            Record carrying the identifier of the row to replace.
        """

    @abstractmethod
    def delete_match(self, record_id: int) -> None:
        """Delete a match record and its actions.

        Parameters
        ----------
        record_id : int
            Identifier of the record.
        """

    @abstractmethod
    def get_match(self, record_id: int) -> Optional[MatchScoutData]:
        """Fetch a match record.

        Parameters
        ----------
        record_id : int
            Identifier of the record.

        Returns
        -------
        Optional[MatchScoutData]
            The record, or ``None`` when it does not exist.
        """

    @abstractmethod
    def list_matches(self) -> List[MatchScoutData]:
        """Return every match record, newest first.

        Returns
        -------
        List[MatchScoutData]
            Stored records ordered by descending timestamp.
        """

    @abstractmethod
    def mark_qr_generated(self, record_id: int) -> None:
        """Flag a match record as transferred.

        Parameters
        ----------
        record_id : int
            Identifier of the record.
        """

    @abstractmethod
    def save_pit(self, data: PitScoutData) -> int:
        """Insert a pit record with its auto paths.

        Parameters
        ----------
        data : PitScoutData
            Record to store; a zero ``id`` asks for a new identifier.

        Returns
        -------
        int
            Identifier of the stored record.
        """

    @abstractmethod
    def update_pit(self, data: PitScoutData) -> None:
        """Replace a stored pit record and all of its auto paths.

        Parameters
        ----------
        data : PitScoutData
            Record carrying the identifier of the row to replace.
        """

    @abstractmethod
    def delete_pit(self, record_id: int) -> None:
        """Delete a pit record and its auto paths.

        Parameters
        ----------
        record_id : int
            Identifier of the record.
        """

    @abstractmethod
    def get_pit(self, record_id: int) -> Optional[PitScoutData]:
        """Fetch a pit record.

        Parameters
        ----------
        record_id : int
            Identifier of the record.

        Returns
        -------
        Optional[PitScoutData]
            The record, or ``None`` when it does not exist.
        """

    @abstractmethod
    def get_pit_by_team(self, team_number: int) -> Optional[PitScoutData]:
        """Fetch the most recent pit record for a team.

        Parameters
        ----------
        team_number : int
            Inspected team.

        Returns
        -------
        Optional[PitScoutData]
            Newest record for the team, or ``None``.
        """

    @abstractmethod
    def list_pits(self) -> List[PitScoutData]:
        """Return every pit record, newest first.

        Returns
        -------
        List[PitScoutData]
            Stored records ordered by descending timestamp.
        """


class InMemoryRecordStore(RecordStore):
    """Dictionary-backed store for tests, demos and throwaway sessions."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._last_match_id = 0
        self._last_pit_id = 0
        self._matches: Dict[int, MatchScoutData] = {}
        self._pits: Dict[int, PitScoutData] = {}

    def save_match(self, data: MatchScoutData) -> int:
        """Insert a match record with its actions.

        Parameters
        ----------
        data : MatchScoutData
            Record to store; a zero ``id`` asks for a new identifier.

        Returns
        -------
        int
            Identifier of the stored record.
        """
        with self._lock:
            record_id = data.id or self._last_match_id + 1
            self._last_match_id = max(self._last_match_id, record_id)
            self._matches[record_id] = replace(data, id=record_id)
        return record_id

    def update_match(self, data: MatchScoutData) -> None:
        """Replace a stored match record and all of its actions.

        Parameters
        ----------
        data : MatchScoutData
            Record carrying the identifier of the row to replace.

        Raises
        ------
        StoreError
            If no record has that identifier.
        """
        with self._lock:
            if data.id not in self._matches:
                raise StoreError(f"No match record with id {data.id}")
            self._matches[data.id] = data

    def delete_match(self, record_id: int) -> None:
        """Delete a match record and its actions.

        Parameters
        ----------
        record_id : int
            Identifier of the record.
        """
        with self._lock:
            self._matches.pop(record_id, None)

    def get_match(self, record_id: int) -> Optional[MatchScoutData]:
        """Fetch a match record.

        Parameters
        ----------
        record_id : int
            Identifier of the record.

        Returns
        -------
        Optional[MatchScoutData]
            The record, or ``None`` when it does not exist.
        """
        with self._lock:
            return self._matches.get(record_id)

    def list_matches(self) -> List[MatchScoutData]:
        """Return every match record, newest first.

        Returns
        -------
        List[MatchScoutData]
            Stored records ordered by descending timestamp.
        """
        with self._lock:
            records = list(self._matches.values())
        return sorted(records, key=lambda r: (r.timestamp, r.id), reverse=True)

    def mark_qr_generated(self, record_id: int) -> None:
        """Flag a match record as transferred.

        Parameters
        ----------
        record_id : int
            Identifier of the record.

        Raises
        ------
        StoreError
            If no record has that identifier.
        """
        with self._lock:
            record = self._matches.get(record_id)
            if record is None:
                raise StoreError(f"No match record with id {record_id}")
            self._matches[record_id] = replace(record, qr_generated=True)

    def save_pit(self, data: PitScoutData) -> int:
        """Insert a pit record with its auto paths.

        Parameters
        ----------
        data : PitScoutData
            Record to store; a zero ``id`` asks for a new identifier.

        Returns
        -------
        int
            Identifier of the stored record.
        """
        with self._lock:
            record_id = data.id or self._last_pit_id + 1
            self._last_pit_id = max(self._last_pit_id, record_id)
            self._pits[record_id] = replace(data, id=record_id)
        return record_id

    def update_pit(self, data: PitScoutData) -> None:
        """Replace a stored pit record and all of its auto paths.

        Parameters
        ----------
        data : PitScoutData
            Record carrying the identifier of the row to replace.

        Raises
        ------
        StoreError
            If no record has that identifier.
        """
        with self._lock:
            if data.id not in self._pits:
                raise StoreError(f"No pit record with id {data.id}")
            self._pits[data.id] = data

    def delete_pit(self, record_id: int) -> None:
        """Delete a pit record and its auto paths.

        Parameters
        ----------
        record_id : int
            Identifier of the record.
        """
        with self._lock:
            self._pits.pop(record_id, None)

    def get_pit(self, record_id: int) -> Optional[PitScoutData]:
        """Fetch a pit record.

        Parameters
        ----------
        record_id : int
            Identifier of the record.

        Returns
        -------
        Optional[PitScoutData]
            The record, or ``None`` when it does not exist.
        """
        with self._lock:
            return self._pits.get(record_id)

    def get_pit_by_team(self, team_number: int) -> Optional[PitScoutData]:
        """Fetch the most recent pit record for a team.

        Parameters
        ----------
        team_number : int
            Inspected team.

        Returns
        -------
        Optional[PitScoutData]
            Newest record for the team, or ``None``.
        """
        for record in self.list_pits():
            if record.team_number == team_number:
                return record
        return None

    def list_pits(self) -> List[PitScoutData]:
        """Return every pit record, newest first.

        Returns
        -------
        List[PitScoutData]
            Stored records ordered by descending timestamp.
        """
        with self._lock:
            records = list(self._pits.values())
        return sorted(records, key=lambda r: (r.timestamp, r.id), reverse=True)


_SCHEMA = """
CREATE TABLE IF NOT EXISTS match_scouts (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    event TEXT NOT NULL,
    match_number TEXT NOT NULL,
    robot_designation TEXT NOT NULL,
    scout_name TEXT NOT NULL,
    team_number TEXT NOT NULL,
    start_position TEXT NOT NULL,
    loaded INTEGER NOT NULL,
    no_show INTEGER NOT NULL,
    timestamp INTEGER NOT NULL,
    qr_generated INTEGER NOT NULL DEFAULT 0
);
CREATE TABLE IF NOT EXISTS action_records (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    match_scout_id INTEGER NOT NULL REFERENCES match_scouts(id) ON DELETE CASCADE,
    phase TEXT NOT NULL,
    action_type TEXT NOT NULL,
    start_time_ms INTEGER NOT NULL,
    end_time_ms INTEGER NOT NULL,
    qualitative_data TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_action_records_match ON action_records(match_scout_id);
CREATE TABLE IF NOT EXISTS pit_scouts (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    event TEXT NOT NULL,
    team_number INTEGER NOT NULL,
    drivetrain_type TEXT NOT NULL,
    preferred_role TEXT NOT NULL,
    preferred_path TEXT NOT NULL,
    photo_path TEXT,
    timestamp INTEGER NOT NULL
);
CREATE TABLE IF NOT EXISTS auto_paths (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    pit_scout_id INTEGER NOT NULL REFERENCES pit_scouts(id) ON DELETE CASCADE,
    name TEXT NOT NULL,
    steps_json TEXT NOT NULL,
    drawing_path TEXT
);
CREATE INDEX IF NOT EXISTS idx_auto_paths_pit ON auto_paths(pit_scout_id);
"""


class SqliteRecordStore(RecordStore):
    """Record store backed by a SQLite database file.

    Parameters
    ----------
    path : Union[str, Path], default=":memory:"
        Database file, created on first use.
    """

    def __init__(self, path: Union[str, Path] = ":memory:") -> None:
        """Open the database and create the schema when missing.

        Parameters
        ----------
        path : Union[str, Path]
            Database file, or ``":memory:"`` for a private in-memory database.

        Raises
        ------
        StoreError
            If the database cannot be opened or initialised.
        """
        self.path = str(path)
        self._lock = Lock()
        try:
            self._connection = sqlite3.connect(self.path, check_same_thread=False)
            self._connection.row_factory = sqlite3.Row
            self._connection.execute("PRAGMA foreign_keys = ON")
            self._connection.executescript(_SCHEMA)
        except sqlite3.Error as exc:
            raise StoreError(f"Could not open record store {self.path}: {exc}") from exc

    def close(self) -> None:
        """Close the underlying connection."""
        with self._lock:
            self._connection.close()

    def save_match(self, data: MatchScoutData) -> int:
        """Insert a match record with its actions.

        Parameters
        ----------
        data : MatchScoutData
            Record to store; a zero ``id`` asks for a new identifier.

        Returns
        -------
        int
            Identifier of the stored record.
        """

        def write(conn: sqlite3.Connection) -> int:
            """Insert the match row and its actions.

            Parameters
            ----------
            conn : sqlite3.Connection
                Connection inside the open transaction.

            Returns
            -------
            int
                Identifier of the inserted row.
            """
            row = _match_row(data)
            if data.id:
                conn.execute("DELETE FROM match_scouts WHERE id = ?", (data.id,))
                cursor = conn.execute(
                    "INSERT INTO match_scouts (id, event, match_number, robot_designation, scout_name, team_number, "
                    "start_position, loaded, no_show, timestamp, qr_generated) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                    (data.id, *row),
                )
            else:
                cursor = conn.execute(
                    "INSERT INTO match_scouts (event, match_number, robot_designation, scout_name, team_number, "
                    "start_position, loaded, no_show, timestamp, qr_generated) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                    row,
                )
            record_id = int(cursor.lastrowid)
            _insert_actions(conn, record_id, data.action_records)
            return record_id

        return self._transaction(write, "save match")

    def update_match(self, data: MatchScoutData) -> None:
        """Replace a stored match record and all of its actions.

        Parameters
        ----------
        data : MatchScoutData
            Record carrying the identifier of the row to replace.

        Raises
        ------
        StoreError
            If no record has that identifier or the write fails.
        """

        def write(conn: sqlite3.Connection) -> None:
            """Rewrite the match row and replace its actions.

            Parameters
            ----------
            conn : sqlite3.Connection
                Connection inside the open transaction.
            """
            cursor = conn.execute(
                "UPDATE match_scouts SET event = ?, match_number = ?, robot_designation = ?, scout_name = ?, "
                "team_number = ?, start_position = ?, loaded = ?, no_show = ?, timestamp = ?, qr_generated = ? "
                "WHERE id = ?",
                (*_match_row(data), data.id),
            )
            if cursor.rowcount == 0:
                raise StoreError(f"No match record with id {data.id}")
            conn.execute("DELETE FROM action_records WHERE match_scout_id = ?", (data.id,))
            _insert_actions(conn, data.id, data.action_records)

        self._transaction(write, "update match")

    def delete_match(self, record_id: int) -> None:
        """Delete a match record and its actions.

        Parameters
        ----------
        record_id : int
            Identifier of the record.
        """
        self._transaction(
            lambda conn: conn.execute("DELETE FROM match_scouts WHERE id = ?", (record_id,)), "delete match"
        )

    def get_match(self, record_id: int) -> Optional[MatchScoutData]:
        """Fetch a match record.

        Parameters
        ----------
        record_id : int
            Identifier of the record.

        Returns
        -------
        Optional[MatchScoutData]
            The record, or ``None`` when it does not exist.
        """

        def read(conn: sqlite3.Connection) -> Optional[MatchScoutData]:
            """Load one match row with its actions.

            Parameters
            ----------
            conn : sqlite3.Connection
                Connection inside the open transaction.

            Returns
            -------
            Optional[MatchScoutData]
                The record, or ``None``.
            """
            row = conn.execute("SELECT * FROM match_scouts WHERE id = ?", (record_id,)).fetchone()
            return _match_from_row(conn, row) if row is not None else None

        return self._transaction(read, "read match")

    def list_matches(self) -> List[MatchScoutData]:
        """Return every match record, newest first.

        Returns
        -------
        List[MatchScoutData]
            Stored records ordered by descending timestamp.
        """

        def read(conn: sqlite3.Connection) -> List[MatchScoutData]:
            """Load all match rows with their actions.

            Parameters
            ----------
            conn : sqlite3.Connection
                Connection inside the open transaction.

            Returns
            -------
            List[MatchScoutData]
                Records, newest first.
            """
            rows = conn.execute("SELECT * FROM match_scouts ORDER BY timestamp DESC, id DESC").fetchall()
            return [_match_from_row(conn, row) for row in rows]

        return self._transaction(read, "list matches")

    def mark_qr_generated(self, record_id: int) -> None:
        """Flag a match record as transferred.

        Parameters
        ----------
        record_id : int
            Identifier of the record.

        Raises
        ------
        StoreError
            If no record has that identifier.
        """

        def write(conn: sqlite3.Connection) -> None:
            """Set the transferred flag.

            Parameters
            ----------
            conn : sqlite3.Connection
                Connection inside the open transaction.
            """
            cursor = conn.execute("UPDATE match_scouts SET qr_generated = 1 WHERE id = ?", (record_id,))
            if cursor.rowcount == 0:
                raise StoreError(f"No match record with id {record_id}")

        self._transaction(write, "mark match transferred")

    def save_pit(self, data: PitScoutData) -> int:
        """Insert a pit record with its auto paths.

        Parameters
        ----------
        data : PitScoutData
            Record to store; a zero ``id`` asks for a new identifier.

        Returns
        -------
        int
            Identifier of the stored record.
        """

        def write(conn: sqlite3.Connection) -> int:
            """Insert the pit row and its auto paths.

            Parameters
            ----------
            conn : sqlite3.Connection
                Connection inside the open transaction.

            Returns
            -------
            int
                Identifier of the inserted row.
            """
            row = _pit_row(data)
            if data.id:
                conn.execute("DELETE FROM pit_scouts WHERE id = ?", (data.id,))
                cursor = conn.execute(
                    "INSERT INTO pit_scouts (id, event, team_number, drivetrain_type, preferred_role, "
                    "preferred_path, photo_path, timestamp) VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
                    (data.id, *row),
                )
            else:
                cursor = conn.execute(
                    "INSERT INTO pit_scouts (event, team_number, drivetrain_type, preferred_role, "
                    "preferred_path, photo_path, timestamp) VALUES (?, ?, ?, ?, ?, ?, ?)",
                    row,
                )
            record_id = int(cursor.lastrowid)
            _insert_paths(conn, record_id, data.auto_paths)
            return record_id

        return self._transaction(write, "save pit record")

    def update_pit(self, data: PitScoutData) -> None:
        """Replace a stored pit record and all of its auto paths.

        Parameters
        ----------
        data : PitScoutData
            Record carrying the identifier of the row to replace.

        Raises
        ------
        StoreError
            If no record has that identifier or the write fails.
        """

        def write(conn: sqlite3.Connection) -> None:
            """Rewrite the pit row and replace its auto paths.

            Parameters
            ----------
            conn : sqlite3.Connection
                Connection inside the open transaction.
            """
            cursor = conn.execute(
                "UPDATE pit_scouts SET event = ?, team_number = ?, drivetrain_type = ?, preferred_role = ?, "
                "preferred_path = ?, photo_path = ?, timestamp = ? WHERE id = ?",
                (*_pit_row(data), data.id),
            )
            if cursor.rowcount == 0:
                raise StoreError(f"No pit record with id {data.id}")
            conn.execute("DELETE FROM auto_paths WHERE pit_scout_id = ?", (data.id,))
            _insert_paths(conn, data.id, data.auto_paths)

        self._transaction(write, "update pit record")

    def delete_pit(self, record_id: int) -> None:
        """Delete a pit record and its auto paths.

        Parameters
        ----------
        record_id : int
            Identifier of the record.
        """
        self._transaction(
            lambda conn: conn.execute("DELETE FROM pit_scouts WHERE id = ?", (record_id,)), "delete pit record"
        )

    def get_pit(self, record_id: int) -> Optional[PitScoutData]:
        """Fetch a pit record.

        Parameters
        ----------
        record_id : int
            Identifier of the record.

        Returns
        -------
        Optional[PitScoutData]
            The record, or ``None`` when it does not exist.
        """
        return self._read_pit("SELECT * FROM pit_scouts WHERE id = ?", (record_id,))

    def get_pit_by_team(self, team_number: int) -> Optional[PitScoutData]:
        """Fetch the most recent pit record for a team.

        Parameters
        ----------
        team_number : int
            Inspected team.

        Returns
        -------
        Optional[PitScoutData]
            Newest record for the team, or ``None``.
        """
        return self._read_pit(
            "SELECT * FROM pit_scouts WHERE team_number = ? ORDER BY timestamp DESC, id DESC LIMIT 1",
            (team_number,),
        )

    def list_pits(self) -> List[PitScoutData]:
        """Return every pit record, newest first.

        Returns
        -------
        List[PitScoutData]
            Stored records ordered by descending timestamp.
        """

        def read(conn: sqlite3.Connection) -> List[PitScoutData]:
            """Load all pit rows with their auto paths.

            Parameters
            ----------
            conn : sqlite3.Connection
                Connection inside the open transaction.

            Returns
            -------
            List[PitScoutData]
                Records, newest first.
            """
            rows = conn.execute("SELECT * FROM pit_scouts ORDER BY timestamp DESC, id DESC").fetchall()
            return [_pit_from_row(conn, row) for row in rows]

        return self._transaction(read, "list pit records")

    def _read_pit(self, query: str, params: tuple) -> Optional[PitScoutData]:
        """Run a single-row pit query.

        Parameters
        ----------
        query : str
            SQL selecting at most one ``pit_scouts`` row.
        params : tuple
            Query parameters.

        Returns
        -------
        Optional[PitScoutData]
            The record, or ``None`` when no row matched.
        """

        def read(conn: sqlite3.Connection) -> Optional[PitScoutData]:
            """Load the selected pit row with its auto paths.

            Parameters
            ----------
            conn : sqlite3.Connection
                Connection inside the open transaction.

            Returns
            -------
            Optional[PitScoutData]
                The record, or ``None``.
            """
            row = conn.execute(query, params).fetchone()
            return _pit_from_row(conn, row) if row is not None else None

        return self._transaction(read, "read pit record")

    def _transaction(self, operation: Callable[[sqlite3.Connection], T], description: str) -> T:
        """Run ``operation`` in one transaction, translating driver errors.

        Parameters
        ----------
        operation : Callable[[sqlite3.Connection], T]
            Work to perform with the connection.
        description : str
            Short name of the work, used in error messages.

        Returns
        -------
        T
            Whatever ``operation`` returns.

        Raises
        ------
        StoreError
            If SQLite reports an error or a stored row is unreadable; the
            transaction is rolled back.
        """
        with self._lock:
            try:
                with self._connection:
                    return operation(self._connection)
            except (sqlite3.Error, ValueError) as exc:
                raise StoreError(f"Could not {description}: {exc}") from exc


def _match_row(data: MatchScoutData) -> tuple:
    """Return the ``match_scouts`` column values of a record, without ``id``.

    Parameters
    ----------
    data : MatchScoutData
        Record being written.

    Returns
    -------
    tuple
        Column values in schema order.
    """
    return (
        data.event,
        data.match_number,
        data.robot_designation,
        data.scout_name,
        data.team_number,
        data.start_position,
        int(data.loaded),
        int(data.no_show),
        data.timestamp,
        int(data.qr_generated),
    )


def _insert_actions(conn: sqlite3.Connection, record_id: int, records: tuple) -> None:
    """Insert the action rows of a match record.

    Parameters
    ----------
    conn : sqlite3.Connection
        Connection inside the open transaction.
    record_id : int
        Owning ``match_scouts`` row.
    records : tuple
        Action records in chronological order.
    """
    conn.executemany(
        "INSERT INTO action_records (match_scout_id, phase, action_type, start_time_ms, end_time_ms, "
        "qualitative_data) VALUES (?, ?, ?, ?, ?, ?)",
        [
            (
                record_id,
                record.phase.value,
                record.action_type.key,
                record.start_time_ms,
                record.end_time_ms if record.end_time_ms is not None else record.start_time_ms,
                record.qualitative_data.to_json() if record.qualitative_data is not None else "",
            )
            for record in records
        ],
    )


def _match_from_row(conn: sqlite3.Connection, row: sqlite3.Row) -> MatchScoutData:
    """Rebuild a match record and its actions from the database.

    Parameters
    ----------
    conn : sqlite3.Connection
        Connection inside the open transaction.
    row : sqlite3.Row
        ``match_scouts`` row.

    Returns
    -------
    MatchScoutData
        The record with actions in insertion order.
    """
    action_rows = conn.execute(
        "SELECT * FROM action_records WHERE match_scout_id = ? ORDER BY id", (row["id"],)
    ).fetchall()
    records = []
    for action in action_rows:
        action_type = get_action_type(action["action_type"])
        records.append(
            ActionRecord(
                phase=MatchPhase(action["phase"]),
                action_type=action_type,
                start_time_ms=action["start_time_ms"],
                end_time_ms=action["end_time_ms"],
                qualitative_data=qualitative_from_json(action["qualitative_data"], action_type),
            )
        )
    return MatchScoutData(
        id=row["id"],
        event=row["event"],
        match_number=row["match_number"],
        robot_designation=row["robot_designation"],
        scout_name=row["scout_name"],
        team_number=row["team_number"],
        start_position=row["start_position"],
        loaded=bool(row["loaded"]),
        no_show=bool(row["no_show"]),
        action_records=tuple(records),
        timestamp=row["timestamp"],
        qr_generated=bool(row["qr_generated"]),
    )


def _pit_row(data: PitScoutData) -> tuple:
    """Return the ``pit_scouts`` column values of a record, without ``id``.

    Parameters
    ----------
    data : PitScoutData
        Record being written.

    Returns
    -------
    tuple
        Column values in schema order.
    """
    return (
        data.event,
        data.team_number,
        data.drivetrain_type,
        data.preferred_role,
        data.preferred_path,
        data.photo_path,
        data.timestamp,
    )


def _insert_paths(conn: sqlite3.Connection, record_id: int, paths: tuple) -> None:
    """Insert the auto-path rows of a pit record.

    Parameters
    ----------
    conn : sqlite3.Connection
        Connection inside the open transaction.
    record_id : int
        Owning ``pit_scouts`` row.
    paths : tuple
        Auto paths in tab order.
    """
    conn.executemany(
        "INSERT INTO auto_paths (pit_scout_id, name, steps_json, drawing_path) VALUES (?, ?, ?, ?)",
        [
            (
                record_id,
                path.name,
                json.dumps([{"type": step.type.value, "value": step.value} for step in path.steps]),
                path.drawing_path,
            )
            for path in paths
        ],
    )


def _steps_from_json(text: str) -> tuple:
    """Parse the stored steps of an auto path.

    Parameters
    ----------
    text : str
        JSON array of ``{"type", "value"}`` objects.

    Returns
    -------
    tuple
        Steps, or an empty tuple when the text is unreadable.
    """
    try:
        raw: Any = json.loads(text)
        return tuple(AutoPathStep(StepType(item["type"]), str(item["value"])) for item in raw)
    except (json.JSONDecodeError, KeyError, TypeError, ValueError):
        return ()


def _pit_from_row(conn: sqlite3.Connection, row: sqlite3.Row) -> PitScoutData:
    """Rebuild a pit record and its auto paths from the database.

    Parameters
    ----------
    conn : sqlite3.Connection
        Connection inside the open transaction.
    row : sqlite3.Row
        ``pit_scouts`` row.

    Returns
    -------
    PitScoutData
        The record with auto paths in tab order.
    """
    path_rows = conn.execute("SELECT * FROM auto_paths WHERE pit_scout_id = ? ORDER BY id", (row["id"],)).fetchall()
    paths = tuple(
        AutoPath(
            id=path["id"],
            name=path["name"],
            steps=_steps_from_json(path["steps_json"]),
            drawing_path=path["drawing_path"],
        )
        for path in path_rows
    )
    return PitScoutData(
        id=row["id"],
        event=row["event"],
        team_number=row["team_number"],
        drivetrain_type=row["drivetrain_type"],
        preferred_role=row["preferred_role"],
        preferred_path=row["preferred_path"],
        photo_path=row["photo_path"],
        auto_paths=paths,
        timestamp=row["timestamp"],
    )
