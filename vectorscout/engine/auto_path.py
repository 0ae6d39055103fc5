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
"""Step-by-step construction of pit-inspection auto paths.

A path always begins with a start position and then alternates between an
action and the location it happened at. Choosing the climb action finishes
its own pair, because a climb can only end at the climb location.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import List, Optional, Sequence, Tuple

from vectorscout.engine.config import SCOUT_CONFIG
from vectorscout.models.options import PATH_LOCATIONS
from vectorscout.models.scout import AutoPath, AutoPathStep, PathCategory, StepType

Stroke = Tuple[Tuple[float, float], ...]

_CATEGORY_FOR_STEP = {
    StepType.START: PathCategory.START,
    StepType.ACTION: PathCategory.ACTION,
    StepType.LOCATION: PathCategory.LOCATION,
}


def next_expected_category(steps: Sequence[AutoPathStep]) -> PathCategory:
    """Return the category the next step of a path must belong to.

    Parameters
    ----------
    steps : Sequence[AutoPathStep]
        Steps recorded so far.

    Returns
    -------
    PathCategory
        ``START`` for an empty path, ``LOCATION`` after an action and
        ``ACTION`` after a start or a location.
    """
    if not steps:
        return PathCategory.START
    if steps[-1].type is StepType.ACTION:
        return PathCategory.LOCATION
    return PathCategory.ACTION


def find_last_action(steps: Sequence[AutoPathStep]) -> Optional[str]:
    """Return the value of the most recent action step.

    Parameters
    ----------
    steps : Sequence[AutoPathStep]
        Steps recorded so far.

    Returns
    -------
    Optional[str]
        Action name, or ``None`` when the path has no action yet.
    """
    for step in reversed(steps):
        if step.type is StepType.ACTION:
            return step.value
    return None


def location_options_for(action: Optional[str]) -> List[str]:
    """Return the locations a scout may pick after ``action``.

    Parameters
    ----------
    action : Optional[str]
        Auto-path action name such as ``"Load"``.

    Returns
    -------
    List[str]
        Candidate locations; empty for unknown or missing actions.
    """
    if action is None:
        return []
    return list(PATH_LOCATIONS.get(action, []))


@dataclass(frozen=True)
class AutoPathBuilder:
    """Immutable editor state for one auto-path tab.

    Parameters
    ----------
    name : str, default="A1"
        Tab name.
    steps : Tuple[AutoPathStep, ...], default=()
        Steps entered so far.
    drawing_path : Optional[str], default=None
        Exported drawing file for the tab.
    drawing_strokes : Tuple[Stroke, ...], default=()
        Freehand strokes drawn on the field image, each a tuple of points.
    """

    name: str = "A1"
    steps: Tuple[AutoPathStep, ...] = ()
    drawing_path: Optional[str] = None
    drawing_strokes: Tuple[Stroke, ...] = ()

    @property
    def expected_category(self) -> PathCategory:
        """Category the next step must belong to."""
        return next_expected_category(self.steps)

    def add_step(self, step: AutoPathStep) -> "AutoPathBuilder":
        """Return a builder with ``step`` appended.

        Adding the climb action also appends the climb location, leaving the
        builder ready for the next action.

        Parameters
        ----------
        step : AutoPathStep
            Step chosen by the scout.

        Returns
        -------
        AutoPathBuilder
            Updated builder.

        Raises
        ------
        ValueError
            If the step does not belong to :attr:`expected_category`.
        """
        expected = self.expected_category
        if _CATEGORY_FOR_STEP[step.type] is not expected:
            raise ValueError(f"Expected a {expected.value} step after {len(self.steps)} steps, got {step.type.value}")
        steps = self.steps + (step,)
        session_config = SCOUT_CONFIG.session
        if step.type is StepType.ACTION and step.value == session_config.climb_action:
            steps += (AutoPathStep(StepType.LOCATION, session_config.climb_location),)
        return replace(self, steps=steps)

    def delete_from_index(self, index: int) -> "AutoPathBuilder":
        """Return a builder rewound to its first ``index`` steps.

        Parameters
        ----------
        index : int
            Position of the first step to delete.

        Returns
        -------
        AutoPathBuilder
            Builder keeping ``steps[:index]``.
        """
        return replace(self, steps=self.steps[: max(index, 0)])

    def clear(self) -> "AutoPathBuilder":
        """Return a builder with no steps.

        Returns
        -------
        AutoPathBuilder
            Builder expecting a start position again.
        """
        return replace(self, steps=())

    def location_options_for_last_action(self) -> List[str]:
        """Return the locations offered after the most recent action.

        Returns
        -------
        List[str]
            Candidate locations, empty before the first action.
        """
        return location_options_for(find_last_action(self.steps))

    def renamed(self, name: str) -> "AutoPathBuilder":
        """Return the builder under a new tab name.

        Parameters
        ----------
        name : str
            New tab name.

        Returns
        -------
        AutoPathBuilder
            Builder with ``name`` replaced.
        """
        return replace(self, name=name)

    def with_drawing_path(self, drawing_path: Optional[str]) -> "AutoPathBuilder":
        """Return the builder pointing at an exported drawing file.

        Parameters
        ----------
        drawing_path : Optional[str]
            File written for the drawing, ``None`` to detach it.

        Returns
        -------
        AutoPathBuilder
            Updated builder.
        """
        return replace(self, drawing_path=drawing_path)

    def with_strokes(self, strokes: Sequence[Sequence[Tuple[float, float]]]) -> "AutoPathBuilder":
        """Return the builder with its freehand strokes replaced.

        Parameters
        ----------
        strokes : Sequence[Sequence[Tuple[float, float]]]
            Strokes as sequences of ``(x, y)`` points.

        Returns
        -------
        AutoPathBuilder
            Updated builder.
        """
        return replace(self, drawing_strokes=tuple(tuple(point for point in stroke) for stroke in strokes))

    def undo_last_stroke(self) -> "AutoPathBuilder":
        """Return the builder without its most recent stroke.

        Returns
        -------
        AutoPathBuilder
            Updated builder; unchanged when there are no strokes.
        """
        if not self.drawing_strokes:
            return self
        return replace(self, drawing_strokes=self.drawing_strokes[:-1])

    def to_auto_path(self) -> AutoPath:
        """Freeze the tab into a storable auto path.

        Returns
        -------
        AutoPath
            Path carrying the tab's name, steps and drawing file.
        """
        return AutoPath(name=self.name, steps=self.steps, drawing_path=self.drawing_path)
