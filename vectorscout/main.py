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
"""Command line entry point for zone lookups, transfer-code decoding and a scripted demo match."""
from __future__ import annotations

import argparse
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from vectorscout.engine.diagrams import DIAGRAMS, Orientation, get_diagram
from vectorscout.engine.session import MatchSession
from vectorscout.errors import CodecError
from vectorscout.models.action import MatchPhase
from vectorscout.models.qualitative import ClimbData, FoulData
from vectorscout.utils.codec import decode_rows, encode_match, payload_fits, transfer_label
from vectorscout.utils.debug import ScoutDebugger
from vectorscout.utils.schedule import ScheduleCache, ScheduleFileCache, TbaClient
from vectorscout.utils.store import InMemoryRecordStore


def _build_parser() -> argparse.ArgumentParser:
    """Create the argument parser with one sub-command per tool.

    Returns
    -------
    argparse.ArgumentParser
        Parser for the ``vectorscout`` command.
    """
    parser = argparse.ArgumentParser(prog="vectorscout", description="Scouting core utilities")
    commands = parser.add_subparsers(dest="command", required=True)

    zone = commands.add_parser("zone", help="Resolve a tap on a field diagram")
    zone.add_argument("diagram", choices=sorted(DIAGRAMS), help="Diagram name")
    zone.add_argument("x", type=float, help="Tap x as a fraction of the image width")
    zone.add_argument("y", type=float, help="Tap y as a fraction of the image height")
    zone.add_argument("--robot", default="Blue1", help="Scouted robot designation")
    zone.add_argument("--red-right", action="store_true", help="Draw the red alliance on the right")

    decode = commands.add_parser("decode", help="Print the spreadsheet rows of a scanned match code")
    decode.add_argument("file", type=Path, help="Text file holding the scanned payload")

    schedule = commands.add_parser("schedule", help="Load an event schedule from the cache or the provider")
    schedule.add_argument("event_code", help="Provider event key, for example 2026txhou")
    schedule.add_argument("--name", default="", help="Event display name")
    schedule.add_argument("--cache-dir", type=Path, default=None, help="Schedule cache directory")

    commands.add_parser("demo", help="Script a short match and print its transfer code")
    return parser


def run_zone(diagram_name: str, x: float, y: float, robot: str, blue_right: bool) -> str:
    """Resolve a tap and describe the result.

    Parameters
    ----------
    diagram_name : str
        Registered diagram name.
    x : float
        Tap x as a fraction of the image width.
    y : float
        Tap y as a fraction of the image height.
    robot : str
        Scouted robot designation.
    blue_right : bool
        Whether the blue alliance is drawn on the right.

    Returns
    -------
    str
        The zone label, or ``"no zone"`` for a miss.
    """
    zone = get_diagram(diagram_name).resolve(x, y, Orientation(robot, blue_right))
    return zone if zone is not None else "no zone"


def run_decode(path: Path) -> List[str]:
    """Turn a scanned match code into tab-separated spreadsheet rows.

    Parameters
    ----------
    path : Path
        Text file holding the scanned payload.

    Returns
    -------
    List[str]
        The match row followed by one row per action.

    Raises
    ------
    CodecError
        If the payload is not a match transfer code.
    """
    rows = decode_rows(path.read_text(encoding="utf-8").strip())
    lines = ["\t".join(str(value) for value in rows.match_row)]
    lines.extend("\t".join(str(value) for value in row) for row in rows.action_rows)
    return lines


def run_demo(debugger: Optional[ScoutDebugger] = None) -> Tuple[str, str]:
    """Record a short scripted match and return its transfer code and label.

    Parameters
    ----------
    debugger : Optional[ScoutDebugger]
        Receives the session's action and submit lines.

    Returns
    -------
    Tuple[str, str]
        Transfer label and compact payload of the stored match.
    """
    store = InMemoryRecordStore()
    session = MatchSession(store, debugger=debugger)
    session.update_event("Demo Regional", "2026demo")
    session.update_match_number("12")
    session.update_robot_designation("Blue1")
    session.update_scout_name("Demo Scout")
    session.update_team_number("4499")
    session.select_start_zone(0.46, 0.7)
    session.toggle_loaded()

    shoot = session.begin_action("Shoot", MatchPhase.AUTON)
    shoot.select_zone(0.7, 0.5)
    shoot.commit()
    session.begin_action("Foul", MatchPhase.TELEOP).commit(FoulData("Minor"))
    session.begin_action("Climb", MatchPhase.ENDGAME).commit(ClimbData("L2", MatchPhase.ENDGAME))

    result = session.submit()
    record = store.get_match(result.record_id) if result.record_id is not None else None
    if record is None:
        raise RuntimeError("; ".join(result.errors) or "Demo match was not stored")
    return transfer_label(record), encode_match(record, debugger=debugger)


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Dispatch a ``vectorscout`` sub-command.

    Parameters
    ----------
    argv : Optional[Sequence[str]]
        Arguments without the program name; defaults to ``sys.argv[1:]``.
    """
    args = _build_parser().parse_args(argv)

    if args.command == "zone":
        print(run_zone(args.diagram, args.x, args.y, args.robot, not args.red_right))
    elif args.command == "decode":
        try:
            lines = run_decode(args.file)
        except (OSError, CodecError) as e:
            print(f"Could not decode {args.file}: {e}")
            return
        for line in lines:
            print(line)
    elif args.command == "schedule":
        cache = ScheduleCache(client=TbaClient(), file_cache=ScheduleFileCache(args.cache_dir))
        result = cache.get_or_load(args.event_code, args.name or args.event_code)
        if result.ok:
            print(f"Loaded {result.match_count} matches from {result.source.value}")
        else:
            print(f"Failed to load schedule for {args.event_code}")
    elif args.command == "demo":
        label, payload = run_demo()
        print(label)
        print(payload)
        print(f"{len(payload.encode('utf-8'))} bytes, fits one code: {payload_fits(payload)}")


if __name__ == "__main__":
    main()
