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
"""Tests for the command line entry point."""

import json

import pytest

from vectorscout.main import main, run_decode, run_demo, run_zone
from vectorscout.models.action import MatchPhase
from vectorscout.utils.codec import decode_match
from vectorscout.utils.debug import ScoutDebugger


class TestZoneCommand:
    """Tests for diagram lookups from the command line."""

    def test_run_zone(self) -> None:
        """Taps resolve to labels and misses are reported."""
        assert run_zone("start", 0.46, 0.7, "Blue1", True) == "L2"
        assert run_zone("shoot", 0.7, 0.5, "Blue1", True) == "MZ"
        assert run_zone("shoot", 0.1, 0.5, "Blue1", True) == "no zone"

    def test_main_prints_zone(self, capsys) -> None:
        """The zone command prints the resolved label."""
        main(["zone", "shoot", "0.7", "0.5"])
        assert capsys.readouterr().out.strip() == "MZ"

    def test_unknown_diagram_rejected(self) -> None:
        """Only registered diagrams are accepted."""
        with pytest.raises(SystemExit):
            main(["zone", "pitch", "0.5", "0.5"])


class TestDecodeCommand:
    """Tests for turning scanned codes into spreadsheet rows."""

    def test_run_decode(self, tmp_path) -> None:
        """A scanned code becomes one match row and one row per action."""
        payload = {
            "e": "Test Event",
            "m": "3",
            "rd": "Red2",
            "sn": "Sam",
            "t": 5460,
            "sp": "L1",
            "l": True,
            "a": [{"p": "AUTON", "at": "Shoot", "d": 1500, "qd": json.dumps({"location": "MZ"})}],
        }
        path = tmp_path / "scan.txt"
        path.write_text(json.dumps(payload) + "\n", encoding="utf-8")

        lines = run_decode(path)

        assert lines[0].split("\t") == ["Test Event", "3", "Red2", "Sam", "5460", "L1", "True", "False"]
        action = lines[1].split("\t")
        assert action[:7] == ["Test Event", "3", "5460", "1", "AUTON", "Shoot", "1500"]
        assert action[7] == "MZ"

    def test_bad_payload_message(self, tmp_path, capsys) -> None:
        """Unreadable payloads print a message instead of raising."""
        path = tmp_path / "scan.txt"
        path.write_text("[1, 2]", encoding="utf-8")
        main(["decode", str(path)])
        assert capsys.readouterr().out.startswith(f"Could not decode {path}")

    def test_missing_file_message(self, tmp_path, capsys) -> None:
        """A missing file is reported like a bad payload."""
        main(["decode", str(tmp_path / "missing.txt")])
        assert "Could not decode" in capsys.readouterr().out


class TestScheduleCommand:
    """Tests for loading schedules from the command line."""

    def test_cached_schedule(self, tmp_path, capsys) -> None:
        """A cached schedule is loaded without contacting the provider."""
        cache_file = tmp_path / "2026test_schedule.json"
        entry = {"matchNumber": 1, "red1": 1, "red2": 2, "red3": 3, "blue1": 4, "blue2": 5, "blue3": 6}
        cache_file.write_text(json.dumps([entry]), encoding="utf-8")
        main(["schedule", "2026test", "--cache-dir", str(tmp_path)])
        assert capsys.readouterr().out.strip() == "Loaded 1 matches from cache"


class TestDemoCommand:
    """Tests for the scripted demo match."""

    def test_run_demo(self) -> None:
        """The demo match is stored and encodes its three actions."""
        debugger = ScoutDebugger(output_dir=None)
        label, payload = run_demo(debugger)
        assert label == "Demo Regional_12_Blue1_4499"

        record = decode_match(payload)
        assert record.start_position == "L2"
        assert [r.action_type.name for r in record.action_records] == ["Shoot", "Foul", "Climb"]
        assert record.action_records[2].phase is MatchPhase.ENDGAME
        assert debugger.events_of_type("SUBMIT")

    def test_main_prints_demo(self, capsys) -> None:
        """The demo command prints the label, the payload and its size."""
        main(["demo"])
        lines = capsys.readouterr().out.splitlines()
        assert lines[0] == "Demo Regional_12_Blue1_4499"
        assert json.loads(lines[1])["t"] == "4499"
        assert "fits one code: True" in lines[2]
