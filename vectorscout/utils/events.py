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
"""Event list shown in the event picker."""

from __future__ import annotations

import json
from pathlib import Path
from typing import List, Optional, Union

from vectorscout.models.schedule import Event


def load_events(path: Union[str, Path]) -> List[Event]:
    """Read an event list file.

    The file is a JSON array of ``{"eventCode", "eventName", "date"}``
    objects.

    Parameters
    ----------
    path : Union[str, Path]
        Location of the event list.

    Returns
    -------
    List[Event]
        Events ordered by date, then by name.

    Raises
    ------
    OSError
        If the file cannot be read.
    ValueError
        If the file is not a JSON array of event objects.
    """
    raw = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(raw, list):
        raise ValueError(f"Event list {path} must be a JSON array")
    try:
        events = [
            Event(event_code=str(item["eventCode"]), event_name=str(item["eventName"]), date=str(item["date"]))
            for item in raw
        ]
    except (KeyError, TypeError) as exc:
        raise ValueError(f"Malformed event entry in {path}: {exc}") from exc
    return sorted(events, key=lambda event: (event.date, event.event_name))


class EventCatalog:
    """Lazily loaded, cached event list.

    Parameters
    ----------
    path : Union[str, Path]
        Location of the event list file.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        """Remember where the event list lives.

        Parameters
        ----------
        path : Union[str, Path]
            Location of the event list file.
        """
        self.path = Path(path)
        self._events: Optional[List[Event]] = None

    def get_or_load(self) -> List[Event]:
        """Return the cached events, reading the file on first use.

        Returns
        -------
        List[Event]
            Events ordered by date, then by name.
        """
        if self._events is None:
            self._events = load_events(self.path)
        return list(self._events)

    def find(self, event_code: str) -> Optional[Event]:
        """Return the event with ``event_code``.

        Parameters
        ----------
        event_code : str
            Provider event key.

        Returns
        -------
        Optional[Event]
            The event, or ``None`` if it is not listed.
        """
        for event in self.get_or_load():
            if event.event_code == event_code:
                return event
        return None

    def invalidate(self) -> None:
        """Drop the cached list so the next call rereads the file."""
        self._events = None
