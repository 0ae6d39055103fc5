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
"""Tests for schedule parsing, the provider client and the schedule cache."""

import json

import pytest
import requests

from vectorscout.models.schedule import MatchScheduleEntry
from vectorscout.utils.debug import ScoutDebugger
from vectorscout.utils.schedule import (
    ScheduleCache,
    ScheduleFileCache,
    ScheduleSource,
    TbaClient,
    import_schedule_file,
    parse_tba_matches,
)


def _tba_match(number: int, comp_level: str = "qm", base: int = 100) -> dict:
    return {
        "comp_level": comp_level,
        "match_number": number,
        "alliances": {
            "red": {"team_keys": [f"frc{base + 1}", f"frc{base + 2}", f"frc{base + 3}"]},
            "blue": {"team_keys": [f"frc{base + 4}", f"frc{base + 5}", f"frc{base + 6}"]},
        },
    }


class StubResponse:
    """Minimal stand-in for a requests response."""

    def __init__(self, status_code: int = 200, payload=None, bad_json: bool = False) -> None:
        self.status_code = status_code
        self._payload = payload
        self._bad_json = bad_json

    def json(self):
        if self._bad_json:
            raise ValueError("not json")
        return self._payload


class StubSession:
    """Records requests and replays a canned response or error."""

    def __init__(self, response=None, error=None) -> None:
        self.response = response
        self.error = error
        self.calls = []

    def get(self, url, headers=None, timeout=None):
        self.calls.append((url, headers, timeout))
        if self.error is not None:
            raise self.error
        return self.response


class TestParsing:
    """Tests for provider payload parsing."""

    def test_keeps_qualifications_sorted(self) -> None:
        """Only qualification matches are kept, ordered by number."""
        payload = [_tba_match(2), _tba_match(1, "sf"), _tba_match(1)]
        entries = parse_tba_matches(payload)
        assert [e.match_number for e in entries] == [1, 2]
        assert entries[0] == MatchScheduleEntry(1, 101, 102, 103, 104, 105, 106)

    def test_skips_malformed_entries(self) -> None:
        """Entries without a full alliance are dropped."""
        broken = _tba_match(3)
        broken["alliances"]["blue"]["team_keys"] = ["frc1"]
        assert [e.match_number for e in parse_tba_matches([broken, "junk", _tba_match(4)])] == [4]

    def test_unreadable_team_key(self) -> None:
        """Team keys without a number become zero."""
        match = _tba_match(1)
        match["alliances"]["red"]["team_keys"][0] = "frcB"
        assert parse_tba_matches([match])[0].red1 == 0

    def test_non_list_payload(self) -> None:
        """A payload that is not a list has no matches."""
        assert parse_tba_matches({"error": "bad key"}) == []

    def test_import_file(self, tmp_path) -> None:
        """Exported match lists are read from disk; bad files give nothing."""
        path = tmp_path / "export.json"
        path.write_text(json.dumps([_tba_match(1)]), encoding="utf-8")
        assert len(import_schedule_file(path)) == 1
        path.write_text("{not json", encoding="utf-8")
        assert import_schedule_file(path) == []
        assert import_schedule_file(tmp_path / "missing.json") == []


class TestTbaClient:
    """Tests for the provider client."""

    def test_request(self) -> None:
        """The client sends the auth header to the match endpoint."""
        session = StubSession(StubResponse(payload=[_tba_match(1)]))
        client = TbaClient(api_key="key", base_url="https://example.test/api/v3/", timeout=3, session=session)
        entries = client.fetch_event_schedule("2026test")
        assert len(entries) == 1
        url, headers, timeout = session.calls[0]
        assert url == "https://example.test/api/v3/event/2026test/matches"
        assert headers["X-TBA-Auth-Key"] == "key"
        assert timeout == 3

    def test_no_key_skips_request(self) -> None:
        """Without an API key nothing is requested."""
        session = StubSession(StubResponse(payload=[]))
        assert TbaClient(api_key="", session=session).fetch_event_schedule("2026test") is None
        assert session.calls == []

    @pytest.mark.parametrize(
        "session",
        [
            StubSession(error=requests.ConnectionError("offline")),
            StubSession(StubResponse(status_code=401)),
            StubSession(StubResponse(bad_json=True)),
        ],
    )
    def test_failures_give_none(self, session) -> None:
        """Network errors, bad statuses and bad bodies all give nothing."""
        assert TbaClient(api_key="key", session=session).fetch_event_schedule("2026test") is None


class TestScheduleFileCache:
    """Tests for the on-disk schedule cache."""

    def test_save_and_load(self, tmp_path) -> None:
        """Saved schedules load back unchanged."""
        cache = ScheduleFileCache(tmp_path / "schedules")
        entries = [MatchScheduleEntry(1, 1, 2, 3, 4, 5, 6)]
        path = cache.save("2026test", entries)
        assert path.name == "2026test_schedule.json"
        assert cache.exists("2026test")
        assert cache.load("2026test") == entries
        assert "matchNumber" in path.read_text(encoding="utf-8")

    def test_missing_and_corrupt(self, tmp_path) -> None:
        """Missing or corrupt files load as nothing."""
        cache = ScheduleFileCache(tmp_path)
        assert cache.load("2026none") is None
        cache.path_for("2026bad").write_text('[{"matchNumber": 1}]', encoding="utf-8")
        assert cache.load("2026bad") is None

    def test_delete(self, tmp_path) -> None:
        """Deleting removes the file and tolerates a missing one."""
        cache = ScheduleFileCache(tmp_path)
        cache.save("2026test", [])
        cache.delete("2026test")
        cache.delete("2026test")
        assert not cache.exists("2026test")


class TestScheduleCache:
    """Tests for the cache-then-provider loader."""

    def test_api_result_is_cached(self, tmp_path) -> None:
        """A fetched schedule is written to disk and served from it next time."""
        session = StubSession(StubResponse(payload=[_tba_match(1), _tba_match(2)]))
        file_cache = ScheduleFileCache(tmp_path)
        debugger = ScoutDebugger(output_dir=None)
        cache = ScheduleCache(TbaClient(api_key="key", session=session), file_cache, debugger)

        first = cache.get_or_load("2026test", "Test Event")
        second = cache.get_or_load("2026test", "Test Event")

        assert first.source is ScheduleSource.API and first.match_count == 2
        assert second.source is ScheduleSource.CACHE
        assert len(session.calls) == 1
        assert file_cache.exists("2026test")
        assert len(debugger.events_of_type("SCHEDULE")) == 2

    def test_empty_fetch_is_a_failure(self, tmp_path) -> None:
        """An empty schedule from the provider is not cached."""
        session = StubSession(StubResponse(payload=[]))
        file_cache = ScheduleFileCache(tmp_path)
        cache = ScheduleCache(TbaClient(api_key="key", session=session), file_cache)
        result = cache.get_or_load("2026test", "Test Event")
        assert not result.ok
        assert not file_cache.exists("2026test")
        assert cache.current is None

    def test_lookups(self, tmp_path) -> None:
        """Team and opponent lookups use the current schedule."""
        cache = ScheduleCache(file_cache=ScheduleFileCache(tmp_path))
        assert cache.team_number(1, "Red1") is None
        cache.file_cache.save("2026test", [MatchScheduleEntry(1, 1, 2, 3, 4, 5, 6)])
        cache.get_or_load("2026test", "Test Event")
        assert cache.team_number(1, "Red3") == 3
        assert cache.opposing_teams(1, "Red3") == {"Blue1": 4, "Blue2": 5, "Blue3": 6}
        assert cache.last_event_code == "2026test"

    def test_import_file(self, tmp_path) -> None:
        """Imported files become the current schedule and are cached."""
        export = tmp_path / "export.json"
        export.write_text(json.dumps([_tba_match(1)]), encoding="utf-8")
        cache = ScheduleCache(file_cache=ScheduleFileCache(tmp_path / "cache"))
        result = cache.import_file(export, "2026test", "Test Event")
        assert result.source is ScheduleSource.FILE
        assert cache.file_cache.exists("2026test")
        assert not cache.import_file(tmp_path / "missing.json", "2026test", "Test Event").ok

    def test_invalidate(self, tmp_path) -> None:
        """Invalidating an event removes its file and forgets it."""
        cache = ScheduleCache(file_cache=ScheduleFileCache(tmp_path))
        cache.file_cache.save("2026test", [MatchScheduleEntry(1, 1, 2, 3, 4, 5, 6)])
        cache.get_or_load("2026test", "Test Event")
        cache.invalidate("2026other")
        assert cache.current is not None
        cache.invalidate("2026test")
        assert cache.current is None
        assert not cache.file_cache.exists("2026test")

    def test_cache_write_failure_is_logged(self, tmp_path) -> None:
        """A schedule that cannot be cached is still installed."""
        blocker = tmp_path / "blocker"
        blocker.write_text("", encoding="utf-8")
        session = StubSession(StubResponse(payload=[_tba_match(1)]))
        debugger = ScoutDebugger(output_dir=None)
        cache = ScheduleCache(
            TbaClient(api_key="key", session=session), ScheduleFileCache(blocker / "sub"), debugger
        )
        assert cache.get_or_load("2026test", "Test Event").ok
        assert debugger.events_of_type("ERROR")
