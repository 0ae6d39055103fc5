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
"""Qualification schedule loading from The Blue Alliance, cache files and imports.

Schedules are looked up in a local file cache first and fetched from the
remote API only when no cached copy exists; a successful fetch is written
back to the cache so later loads work offline.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import requests

from vectorscout.engine.config import SCOUT_CONFIG
from vectorscout.models.schedule import EventSchedule, MatchScheduleEntry
from vectorscout.utils.debug import ScoutDebugger

PathLike = Union[str, Path]


class ScheduleSource(Enum):
    """Where a loaded schedule came from."""

    CACHE = "cache"
    API = "The Blue Alliance"
    FILE = "file"


@dataclass(frozen=True)
class LoadResult:
    """Outcome of a schedule load.

    Parameters
    ----------
    source : Optional[ScheduleSource]
        Origin of the schedule, ``None`` when nothing could be loaded.
    match_count : int, default=0
        Number of qualification matches loaded.
    """

    source: Optional[ScheduleSource]
    match_count: int = 0

    @property
    def ok(self) -> bool:
        """Whether a schedule was loaded."""
        return self.source is not None


def _parse_team_key(team_key: Any) -> int:
    """Convert a ``"frc5460"`` style key into a team number.

    Parameters
    ----------
    team_key : Any
        Team key from the provider.

    Returns
    -------
    int
        The team number, or ``0`` if the key has no numeric part.
    """
    try:
        return int(str(team_key).removeprefix(SCOUT_CONFIG.schedule.team_key_prefix))
    except ValueError:
        return 0


def parse_tba_matches(payload: Any) -> List[MatchScheduleEntry]:
    """Extract qualification matches from a provider match list.

    Parameters
    ----------
    payload : Any
        Decoded JSON from the ``/event/{key}/matches`` endpoint or an
        equivalent export.

    Returns
    -------
    List[MatchScheduleEntry]
        Qualification matches sorted by match number. Entries with missing
        alliances or team keys are skipped.
    """
    if not isinstance(payload, list):
        return []

    entries: List[MatchScheduleEntry] = []
    for match in payload:
        if not isinstance(match, dict):
            continue
        if match.get("comp_level") != SCOUT_CONFIG.schedule.qualification_level:
            continue
        try:
            alliances = match["alliances"]
            red = alliances["red"]["team_keys"]
            blue = alliances["blue"]["team_keys"]
            entries.append(
                MatchScheduleEntry(
                    match_number=int(match["match_number"]),
                    red1=_parse_team_key(red[0]),
                    red2=_parse_team_key(red[1]),
                    red3=_parse_team_key(red[2]),
                    blue1=_parse_team_key(blue[0]),
                    blue2=_parse_team_key(blue[1]),
                    blue3=_parse_team_key(blue[2]),
                )
            )
        except (KeyError, IndexError, TypeError, ValueError):
            continue
    entries.sort(key=lambda entry: entry.match_number)
    return entries


def import_schedule_file(path: PathLike) -> List[MatchScheduleEntry]:
    """Read a schedule exported from the provider's match endpoint.

    Parameters
    ----------
    path : PathLike
        JSON file containing the provider's match list.

    Returns
    -------
    List[MatchScheduleEntry]
        Parsed qualification matches; empty when the file is unreadable.
    """
    try:
        text = Path(path).read_text(encoding="utf-8")
        return parse_tba_matches(json.loads(text))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError):
        return []


class TbaClient:
    """Minimal read client for The Blue Alliance API.

    Parameters
    ----------
    api_key : Optional[str]
        Auth key; defaults to the configured key.
    base_url : Optional[str]
        API root; defaults to the configured URL.
    timeout : Optional[float]
        Request timeout in seconds.
    session : Optional[requests.Session]
        HTTP session to reuse; a new one is created when omitted.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        """Store connection settings.

        Parameters
        ----------
        api_key : Optional[str]
            Auth key; defaults to the configured key.
        base_url : Optional[str]
            API root; defaults to the configured URL.
        timeout : Optional[float]
            Request timeout in seconds.
        session : Optional[requests.Session]
            HTTP session to reuse.
        """
        config = SCOUT_CONFIG.schedule
        self.api_key = api_key if api_key is not None else config.api_key
        self.base_url = (base_url or config.base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else config.timeout
        self.session = session if session is not None else requests.Session()

    def fetch_event_schedule(self, event_key: str) -> Optional[List[MatchScheduleEntry]]:
        """Download the qualification schedule of an event.

        Parameters
        ----------
        event_key : str
            Provider event key such as ``"2026miket"``.

        Returns
        -------
        Optional[List[MatchScheduleEntry]]
            Parsed matches, or ``None`` when no key is configured, the
            request fails or the response is not a successful JSON body.
        """
        if not self.api_key:
            return None
        url = f"{self.base_url}/event/{event_key}/matches"
        headers = {"X-TBA-Auth-Key": self.api_key, "Accept": "application/json"}
        try:
            response = self.session.get(url, headers=headers, timeout=self.timeout)
        except requests.RequestException:
            return None
        if response.status_code != requests.codes.ok:
            return None
        try:
            payload = response.json()
        except ValueError:
            return None
        return parse_tba_matches(payload)


class ScheduleFileCache:
    """Directory of ``<event>_schedule.json`` files.

    Parameters
    ----------
    directory : Optional[PathLike]
        Cache directory; defaults to the configured one.
    """

    def __init__(self, directory: Optional[PathLike] = None) -> None:
        """Remember the cache location without touching the filesystem.

        Parameters
        ----------
        directory : Optional[PathLike]
            Cache directory; defaults to the configured one.
        """
        self.directory = Path(directory if directory is not None else SCOUT_CONFIG.schedule.cache_dir)

    def path_for(self, event_code: str) -> Path:
        """Return the cache file used for ``event_code``.

        Parameters
        ----------
        event_code : str
            Provider event key.

        Returns
        -------
        Path
            Location of the event's cache file.
        """
        return self.directory / f"{event_code}{SCOUT_CONFIG.schedule.cache_suffix}"

    def exists(self, event_code: str) -> bool:
        """Return whether a cached schedule exists for ``event_code``.

        Parameters
        ----------
        event_code : str
            Provider event key.

        Returns
        -------
        bool
            ``True`` when the cache file is present.
        """
        return self.path_for(event_code).is_file()

    def load(self, event_code: str) -> Optional[List[MatchScheduleEntry]]:
        """Read a cached schedule.

        Parameters
        ----------
        event_code : str
            Provider event key.

        Returns
        -------
        Optional[List[MatchScheduleEntry]]
            Cached matches, or ``None`` when the file is missing or corrupt.
        """
        path = self.path_for(event_code)
        if not path.is_file():
            return None
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
            return [_entry_from_dict(item) for item in raw]
        except (OSError, UnicodeDecodeError, json.JSONDecodeError, KeyError, TypeError, ValueError):
            return None

    def save(self, event_code: str, matches: List[MatchScheduleEntry]) -> Path:
        """Write ``matches`` to the event's cache file.

        Parameters
        ----------
        event_code : str
            Provider event key.
        matches : List[MatchScheduleEntry]
            Schedule to cache.

        Returns
        -------
        Path
            The written file.

        Raises
        ------
        OSError
            If the directory or file cannot be written.
        """
        self.directory.mkdir(parents=True, exist_ok=True)
        path = self.path_for(event_code)
        path.write_text(json.dumps([_entry_to_dict(entry) for entry in matches]), encoding="utf-8")
        return path

    def delete(self, event_code: str) -> None:
        """Remove the cached schedule of ``event_code`` if present.

        Parameters
        ----------
        event_code : str
            Provider event key.
        """
        self.path_for(event_code).unlink(missing_ok=True)


def _entry_to_dict(entry: MatchScheduleEntry) -> Dict[str, int]:
    """Serialise a schedule entry for the cache file.

    Parameters
    ----------
    entry : MatchScheduleEntry
        Entry to serialise.

    Returns
    -------
    Dict[str, int]
        Mapping with ``matchNumber`` and the six station keys.
    """
    return {
        "matchNumber": entry.match_number,
        "red1": entry.red1,
        "red2": entry.red2,
        "red3": entry.red3,
        "blue1": entry.blue1,
        "blue2": entry.blue2,
        "blue3": entry.blue3,
    }


def _entry_from_dict(item: Dict[str, Any]) -> MatchScheduleEntry:
    """Rebuild a schedule entry from the cache file.

    Parameters
    ----------
    item : Dict[str, Any]
        Mapping written by :func:`_entry_to_dict`.

    Returns
    -------
    MatchScheduleEntry
        The entry.
    """
    return MatchScheduleEntry(
        match_number=int(item["matchNumber"]),
        red1=int(item["red1"]),
        red2=int(item["red2"]),
        red3=int(item["red3"]),
        blue1=int(item["blue1"]),
        blue2=int(item["blue2"]),
        blue3=int(item["blue3"]),
    )


class ScheduleCache:
    """Holds the schedule of the event currently being scouted.

    Parameters
    ----------
    client : Optional[TbaClient]
        Remote provider; ``None`` disables remote fetches.
    file_cache : Optional[ScheduleFileCache]
        Local cache; defaults to the configured directory.
    debugger : Optional[ScoutDebugger]
        Receives one line per load attempt.
    """

    def __init__(
        self,
        client: Optional[TbaClient] = None,
        file_cache: Optional[ScheduleFileCache] = None,
        debugger: Optional[ScoutDebugger] = None,
    ) -> None:
        """Create an empty schedule holder.

        Parameters
        ----------
        client : Optional[TbaClient]
            Remote provider; ``None`` disables remote fetches.
        file_cache : Optional[ScheduleFileCache]
            Local cache; defaults to the configured directory.
        debugger : Optional[ScoutDebugger]
            Receives one line per load attempt.
        """
        self.client = client
        self.file_cache = file_cache if file_cache is not None else ScheduleFileCache()
        self.debugger = debugger
        self.manual_entry_mode = False
        self.last_event_code: Optional[str] = None
        self._current: Optional[EventSchedule] = None

    @property
    def current(self) -> Optional[EventSchedule]:
        """Schedule loaded most recently, if any."""
        return self._current

    def get_or_load(self, event_code: str, event_name: str) -> LoadResult:
        """Load the schedule for an event from the cache or the provider.

        Parameters
        ----------
        event_code : str
            Provider event key.
        event_name : str
            Display name stored with the schedule.

        Returns
        -------
        LoadResult
            Source and match count, or a failed result.
        """
        cached = self.file_cache.load(event_code)
        if cached is not None:
            return self._install(event_code, event_name, cached, ScheduleSource.CACHE)

        fetched = self.client.fetch_event_schedule(event_code) if self.client is not None else None
        if fetched:
            self._write_cache(event_code, fetched)
            return self._install(event_code, event_name, fetched, ScheduleSource.API)

        self._log(event_code, None, 0)
        return LoadResult(None)

    def import_file(self, path: PathLike, event_code: str, event_name: str) -> LoadResult:
        """Install a schedule from an exported provider file.

        Parameters
        ----------
        path : PathLike
            JSON export of the provider's match list.
        event_code : str
            Event key the schedule belongs to.
        event_name : str
            Display name stored with the schedule.

        Returns
        -------
        LoadResult
            File source and match count, or a failed result when the file
            holds no qualification matches.
        """
        matches = import_schedule_file(path)
        if not matches:
            self._log(event_code, None, 0)
            return LoadResult(None)
        self._write_cache(event_code, matches)
        return self._install(event_code, event_name, matches, ScheduleSource.FILE)

    def invalidate(self, event_code: Optional[str] = None) -> None:
        """Forget loaded schedules.

        Parameters
        ----------
        event_code : Optional[str]
            When given, also delete that event's cache file and forget the
            current schedule only if it belongs to the event. When omitted,
            forget the current schedule and keep all files.
        """
        if event_code is None:
            self._current = None
            return
        self.file_cache.delete(event_code)
        if self._current is not None and self._current.event_code == event_code:
            self._current = None

    def set_manual_entry_mode(self, enabled: bool) -> None:
        """Switch between schedule auto-fill and manual team entry.

        Parameters
        ----------
        enabled : bool
            ``True`` to stop filling team numbers from the schedule.
        """
        self.manual_entry_mode = enabled

    def team_number(self, match_number: int, robot_designation: str) -> Optional[int]:
        """Return the scheduled team at a station.

        Parameters
        ----------
        match_number : int
            Qualification match number.
        robot_designation : str
            Station name.

        Returns
        -------
        Optional[int]
            Team number, or ``None`` without a schedule or matching entry.
        """
        if self._current is None:
            return None
        return self._current.team_number(match_number, robot_designation)

    def opposing_teams(self, match_number: int, robot_designation: str) -> Optional[Dict[str, int]]:
        """Return the scheduled opposing alliance.

        Parameters
        ----------
        match_number : int
            Qualification match number.
        robot_designation : str
            Station of the robot being scouted.

        Returns
        -------
        Optional[Dict[str, int]]
            Opposing stations and teams, or ``None`` without a schedule or
            matching entry.
        """
        if self._current is None:
            return None
        return self._current.opposing_teams(match_number, robot_designation)

    def _install(
        self, event_code: str, event_name: str, matches: List[MatchScheduleEntry], source: ScheduleSource
    ) -> LoadResult:
        """Make ``matches`` the current schedule.

        Parameters
        ----------
        event_code : str
            Event key.
        event_name : str
            Event display name.
        matches : List[MatchScheduleEntry]
            Parsed schedule.
        source : ScheduleSource
            Where the matches came from.

        Returns
        -------
        LoadResult
            Successful result for ``source``.
        """
        self._current = EventSchedule(event_code, event_name, tuple(matches))
        self.last_event_code = event_code
        self._log(event_code, source, len(matches))
        return LoadResult(source, len(matches))

    def _write_cache(self, event_code: str, matches: List[MatchScheduleEntry]) -> None:
        """Write matches to the file cache, reporting but tolerating failures.

        Parameters
        ----------
        event_code : str
            Event key.
        matches : List[MatchScheduleEntry]
            Schedule to cache.
        """
        try:
            self.file_cache.save(event_code, matches)
        except OSError as exc:
            if self.debugger is not None:
                self.debugger.log_error("SCHEDULE_CACHE", f"Could not cache {event_code}: {exc}")

    def _log(self, event_code: str, source: Optional[ScheduleSource], match_count: int) -> None:
        """Report a load attempt to the debugger.

        Parameters
        ----------
        event_code : str
            Event key.
        source : Optional[ScheduleSource]
            Origin of the schedule, ``None`` for a failed load.
        match_count : int
            Number of matches loaded.
        """
        if self.debugger is not None:
            self.debugger.log_schedule(event_code, source.name if source is not None else None, match_count)
