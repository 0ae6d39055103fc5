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
"""Background elapsed-time clock shown while an action is in progress."""
from __future__ import annotations

import threading
from typing import Callable, Optional

from vectorscout.engine.config import SCOUT_CONFIG
from vectorscout.utils.timefmt import now_ms


class ActionTimer:
    """Ticking stopwatch running on a daemon thread.

    The timer samples ``clock`` every tick and publishes the elapsed time. It
    never blocks the caller; :meth:`stop` takes a final sample so the value
    read on commit is exact rather than up to one tick stale.

    Parameters
    ----------
    clock : Callable[[], int]
        Source of wall-clock milliseconds.
    tick_seconds : Optional[float]
        Delay between samples; defaults to the configured tick.
    on_tick : Optional[Callable[[int], None]]
        Called with the elapsed milliseconds after every sample.
    autostart : bool
        Start ticking immediately.
    """

    def __init__(
        self,
        clock: Callable[[], int] = now_ms,
        tick_seconds: Optional[float] = None,
        on_tick: Optional[Callable[[int], None]] = None,
        autostart: bool = True,
    ) -> None:
        """Record the start time and optionally begin ticking.

        Parameters
        ----------
        clock : Callable[[], int]
            Source of wall-clock milliseconds.
        tick_seconds : Optional[float]
            Delay between samples; defaults to the configured tick.
        on_tick : Optional[Callable[[int], None]]
            Called with the elapsed milliseconds after every sample.
        autostart : bool
            Start ticking immediately.
        """
        self._clock = clock
        self._tick_seconds = tick_seconds if tick_seconds is not None else SCOUT_CONFIG.timer.tick_seconds
        self._on_tick = on_tick
        self._lock = threading.Lock()
        self._stopped = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self.start_time_ms = clock()
        self._elapsed_ms = 0
        if autostart:
            self.start()

    @property
    def elapsed_ms(self) -> int:
        """Milliseconds elapsed at the most recent sample."""
        with self._lock:
            return self._elapsed_ms

    @property
    def is_running(self) -> bool:
        """Whether the timer has been started and not yet stopped."""
        return self._thread is not None and not self._stopped.is_set()

    def start(self) -> None:
        """Start the ticking thread; calling it again has no effect."""
        if self._thread is not None or self._stopped.is_set():
            return
        self._thread = threading.Thread(target=self._run, name="action-timer", daemon=True)
        self._thread.start()

    def tick(self) -> int:
        """Sample the clock and publish the elapsed time.

        Returns
        -------
        int
            Elapsed milliseconds since the timer was created.
        """
        elapsed = max(self._clock() - self.start_time_ms, 0)
        with self._lock:
            self._elapsed_ms = elapsed
        if self._on_tick is not None:
            self._on_tick(elapsed)
        return elapsed

    def stop(self) -> int:
        """Stop ticking and return the final elapsed time.

        Only the first call samples the clock; later calls return the same
        value.

        Returns
        -------
        int
            Elapsed milliseconds at the moment the timer was stopped.
        """
        with self._lock:
            already_stopped = self._stopped.is_set()
            self._stopped.set()
        if already_stopped:
            return self.elapsed_ms
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=SCOUT_CONFIG.timer.join_timeout)
        return self.tick()

    def _run(self) -> None:
        """Tick until :meth:`stop` is called."""
        while not self._stopped.wait(self._tick_seconds):
            self.tick()

    def __enter__(self) -> "ActionTimer":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()
