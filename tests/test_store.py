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
"""Tests for the record stores."""

import sqlite3
from dataclasses import replace

import pytest

from vectorscout.errors import StoreError
from vectorscout.models.action import ENDGAME_CLIMB, FOUL, LOAD, ActionRecord, MatchPhase
from vectorscout.models.qualitative import ClimbData, FoulData, LoadData
from vectorscout.models.scout import AutoPath, AutoPathStep, MatchScoutData, PitScoutData, StepType
from vectorscout.utils.store import InMemoryRecordStore, SqliteRecordStore


def _match(match_number: str = "12", timestamp: int = 1_000) -> MatchScoutData:
    return MatchScoutData(
        event="Houston",
        match_number=match_number,
        robot_designation="Red1",
        scout_name="Alex",
        team_number="4499",
        start_position="L2",
        loaded=True,
        no_show=False,
        timestamp=timestamp,
        action_records=(
            ActionRecord(MatchPhase.AUTON, LOAD, 100, 900, LoadData("Depot")),
            ActionRecord(MatchPhase.TELEOP, FOUL, 5_000, 5_000, FoulData("Major")),
            ActionRecord(MatchPhase.ENDGAME, ENDGAME_CLIMB, 9_000, 12_000, ClimbData("L3", MatchPhase.ENDGAME)),
        ),
    )


def _pit(team_number: int = 4499, timestamp: int = 1_000) -> PitScoutData:
    return PitScoutData(
        event="Houston",
        team_number=team_number,
        drivetrain_type="Swerve",
        preferred_role="Score",
        preferred_path="Both",
        timestamp=timestamp,
        auto_paths=(
            AutoPath(
                name="A1",
                steps=(AutoPathStep(StepType.START, "1"), AutoPathStep(StepType.ACTION, "Climb")),
                drawing_path="/paths/a1.png",
            ),
        ),
    )


@pytest.fixture(params=["memory", "sqlite"])
def store(request, tmp_path):
    """Each store implementation in turn."""
    if request.param == "memory":
        yield InMemoryRecordStore()
        return
    sqlite_store = SqliteRecordStore(tmp_path / "scouting.db")
    yield sqlite_store
    sqlite_store.close()


class TestMatchRecords:
    """Tests for storing match records."""

    def test_save_and_get(self, store) -> None:
        """Saved records come back with their id, fields and actions."""
        record_id = store.save_match(_match())
        saved = store.get_match(record_id)
        assert saved.id == record_id
        assert saved.no_show is False and saved.loaded is True
        assert saved.action_records == _match().action_records

    def test_missing_record(self, store) -> None:
        """Unknown ids return nothing."""
        assert store.get_match(999) is None

    def test_new_ids_skip_explicit_and_deleted_ids(self, store) -> None:
        """Fresh ids never collide with a chosen id or reuse a deleted one."""
        assert store.save_match(replace(_match("1"), id=5)) == 5
        fresh = store.save_match(_match("2"))
        assert fresh == 6
        store.delete_match(fresh)
        assert store.save_match(_match("3")) == 7
        assert store.get_match(5).match_number == "1"

    def test_new_pit_ids_skip_explicit_ids(self, store) -> None:
        """Pit records get ids past any explicitly chosen one."""
        assert store.save_pit(replace(_pit(1), id=3)) == 3
        assert store.save_pit(_pit(2)) == 4
        assert store.get_pit(3).team_number == 1

    def test_list_newest_first(self, store) -> None:
        """Records are listed by descending timestamp."""
        store.save_match(_match("1", timestamp=1_000))
        store.save_match(_match("2", timestamp=3_000))
        store.save_match(_match("3", timestamp=2_000))
        assert [r.match_number for r in store.list_matches()] == ["2", "3", "1"]

    def test_update_replaces_actions(self, store) -> None:
        """Updating rewrites the scalar fields and the full action list."""
        record_id = store.save_match(_match())
        saved = store.get_match(record_id)
        store.update_match(
            MatchScoutData(
                id=record_id,
                event=saved.event,
                match_number="13",
                robot_designation=saved.robot_designation,
                scout_name=saved.scout_name,
                team_number=saved.team_number,
                timestamp=saved.timestamp,
                action_records=saved.action_records[:1],
            )
        )
        updated = store.get_match(record_id)
        assert updated.match_number == "13"
        assert len(updated.action_records) == 1

    def test_update_unknown_id(self, store) -> None:
        """Updating a missing record is an error."""
        with pytest.raises(StoreError):
            store.update_match(MatchScoutData(id=42))

    def test_mark_qr_generated(self, store) -> None:
        """The transfer flag is set on the stored record."""
        record_id = store.save_match(_match())
        store.mark_qr_generated(record_id)
        assert store.get_match(record_id).qr_generated
        with pytest.raises(StoreError):
            store.mark_qr_generated(999)

    def test_delete(self, store) -> None:
        """Deleted records disappear and deleting twice is harmless."""
        record_id = store.save_match(_match())
        store.delete_match(record_id)
        store.delete_match(record_id)
        assert store.get_match(record_id) is None
        assert store.list_matches() == []


class TestPitRecords:
    """Tests for storing pit records."""

    def test_save_and_get(self, store) -> None:
        """Auto paths are stored with their steps and drawings."""
        record_id = store.save_pit(_pit())
        saved = store.get_pit(record_id)
        assert saved.team_number == 4499
        path = saved.auto_paths[0]
        assert path.name == "A1"
        assert path.steps == _pit().auto_paths[0].steps
        assert path.drawing_path == "/paths/a1.png"

    def test_latest_by_team(self, store) -> None:
        """The newest pit record for a team is returned."""
        store.save_pit(_pit(timestamp=1_000))
        newer = store.save_pit(_pit(timestamp=5_000))
        store.save_pit(_pit(team_number=118, timestamp=9_000))
        assert store.get_pit_by_team(4499).id == newer
        assert store.get_pit_by_team(1) is None

    def test_update_and_delete(self, store) -> None:
        """Pit records can be replaced and removed."""
        record_id = store.save_pit(_pit())
        store.update_pit(PitScoutData(id=record_id, event="Houston", team_number=4499, drivetrain_type="Tank"))
        updated = store.get_pit(record_id)
        assert updated.drivetrain_type == "Tank"
        assert updated.auto_paths == ()
        store.delete_pit(record_id)
        assert store.list_pits() == []

    def test_update_unknown_id(self, store) -> None:
        """Updating a missing pit record is an error."""
        with pytest.raises(StoreError):
            store.update_pit(PitScoutData(id=7))


class TestSqliteRecordStore:
    """Tests specific to the SQLite store."""

    def test_records_survive_reopen(self, tmp_path) -> None:
        """Records written by one connection are read by the next."""
        path = tmp_path / "scouting.db"
        first = SqliteRecordStore(path)
        record_id = first.save_match(_match())
        first.close()

        second = SqliteRecordStore(path)
        assert second.get_match(record_id).action_records == _match().action_records
        second.close()

    def test_delete_cascades_to_actions(self, tmp_path) -> None:
        """Deleting a match removes its action rows."""
        path = tmp_path / "scouting.db"
        store = SqliteRecordStore(path)
        record_id = store.save_match(_match())
        store.delete_match(record_id)
        store.close()

        with sqlite3.connect(path) as conn:
            assert conn.execute("SELECT COUNT(*) FROM action_records").fetchone()[0] == 0

    def test_unopenable_database(self, tmp_path) -> None:
        """A path that cannot hold a database is reported as a store error."""
        with pytest.raises(StoreError):
            SqliteRecordStore(tmp_path / "missing" / "dir" / "scouting.db")

    def test_closed_store_raises_store_error(self) -> None:
        """Using a closed store fails with a store error."""
        store = SqliteRecordStore()
        store.close()
        with pytest.raises(StoreError):
            store.list_matches()
