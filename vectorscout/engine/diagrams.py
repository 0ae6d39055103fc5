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
"""Field diagrams used by the location pickers and their zone tables.

Each diagram carries two hand-measured region tables: one for when the
scouted robot's alliance wall is drawn on the right of the image and one for
when it is drawn on the left. The left tables were measured separately from
their own images and are not exact reflections of the right tables, so they
are kept verbatim rather than derived with :func:`mirror_regions`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from vectorscout.engine.config import SCOUT_CONFIG
from vectorscout.engine.geometry import (
    EllipseBound,
    EllipseSector,
    GridCell,
    Point,
    PolygonSector,
    Rect,
    Region,
    mirror_regions,
    resolve_zone,
)
from vectorscout.models.action import ActionType


@dataclass(frozen=True)
class Orientation:
    """Which way round the field is drawn for the scouted robot.

    Parameters
    ----------
    robot_designation : str
        Station of the scouted robot, for example ``"Blue2"``.
    blue_right : bool, default=True
        Whether the blue alliance wall is on the right of the scout's view.
    """

    robot_designation: str
    blue_right: bool = True

    @property
    def is_blue_robot(self) -> bool:
        """Whether the scouted robot is on the blue alliance."""
        return self.robot_designation.startswith("Blue")

    @property
    def robot_on_right(self) -> bool:
        """Whether the scouted robot's alliance wall is drawn on the right."""
        return self.is_blue_robot == self.blue_right

    @property
    def label(self) -> str:
        """Caption shown above the diagrams, for example ``"Red Right"``."""
        colour = "Blue" if self.is_blue_robot else "Red"
        side = "Right" if self.robot_on_right else "Left"
        return f"{colour} {side}"


@dataclass(frozen=True)
class FieldDiagram:
    """Named diagram with a region table per orientation.

    Parameters
    ----------
    name : str
        Registry name of the diagram.
    right_regions : Tuple[Region, ...]
        Regions in priority order when the robot's wall is on the right.
    left_regions : Tuple[Region, ...]
        Regions in priority order when the robot's wall is on the left.
    """

    name: str
    right_regions: Tuple[Region, ...]
    left_regions: Tuple[Region, ...]

    def regions_for(self, orientation: Orientation) -> Tuple[Region, ...]:
        """Return the region table that applies to ``orientation``.

        Parameters
        ----------
        orientation : Orientation
            Current field orientation and scouted robot.

        Returns
        -------
        Tuple[Region, ...]
            Right or left table.
        """
        return self.right_regions if orientation.robot_on_right else self.left_regions

    def resolve(self, x: float, y: float, orientation: Orientation) -> Optional[str]:
        """Resolve a normalised tap to a zone label.

        Parameters
        ----------
        x : float
            Tap position as a fraction of the image width.
        y : float
            Tap position as a fraction of the image height.
        orientation : Orientation
            Current field orientation and scouted robot.

        Returns
        -------
        Optional[str]
            Zone label, or ``None`` when the tap misses every zone.
        """
        return resolve_zone(Point(x, y), self.regions_for(orientation))

    def labels(self) -> Tuple[str, ...]:
        """Return the zone labels in declaration order of the right table.

        Returns
        -------
        Tuple[str, ...]
            Labels offered by the diagram.
        """
        return tuple(region.label for region in self.right_regions)


def _rect(label: str, left: float, top: float, right: float, bottom: float) -> Region:
    """Build a rectangular region.

    Parameters
    ----------
    label : str
        Zone label.
    left : float
        Left edge.
    top : float
        Top edge.
    right : float
        Right edge.
    bottom : float
        Bottom edge.

    Returns
    -------
    Region
        Labelled rectangle.
    """
    return Region(label, Rect(left, top, right, bottom))


def _sector(
    label: str,
    center: Tuple[float, float],
    inner: Tuple[float, float],
    outer: Tuple[float, float],
    start_angle: float,
    sweep_angle: float,
) -> Region:
    """Build an elliptical sector region.

    Parameters
    ----------
    label : str
        Zone label.
    center : Tuple[float, float]
        Ellipse centre.
    inner : Tuple[float, float]
        Inner radii, ``(0, 0)`` for a filled sector.
    outer : Tuple[float, float]
        Outer radii.
    start_angle : float
        Start of the sweep in screen degrees.
    sweep_angle : float
        Clockwise extent in degrees.

    Returns
    -------
    Region
        Labelled sector.
    """
    return Region(
        label,
        EllipseSector(center[0], center[1], inner[0], inner[1], outer[0], outer[1], start_angle, sweep_angle),
    )


def _remainder(label: str, bounds: Rect, *corners: Region) -> Region:
    """Build the catch-all zone: a rectangle minus the corner sectors' outer ellipses.

    Parameters
    ----------
    label : str
        Zone label.
    bounds : Rect
        Bounding rectangle of the zone.
    *corners : Region
        Corner sector regions whose outer ellipses are cut out.

    Returns
    -------
    Region
        Labelled polygon sector.
    """
    exclusions = tuple(
        EllipseBound(corner.shape.center_x, corner.shape.center_y, corner.shape.outer_rx, corner.shape.outer_ry)
        for corner in corners
        if isinstance(corner.shape, EllipseSector)
    )
    return Region(label, PolygonSector(bounds.corners(), exclusions))


START_DIAGRAM = FieldDiagram(
    name="start",
    right_regions=(
        _rect("L1", 0.412, 0.811, 0.515, 0.941),
        _rect("L2", 0.412, 0.594, 0.515, 0.811),
        _rect("L3a", 0.412, 0.508, 0.515, 0.594),
        _rect("L3b", 0.412, 0.427, 0.515, 0.511),
        _rect("L3", 0.515, 0.427, 0.605, 0.594),
        _rect("L4", 0.412, 0.204, 0.515, 0.427),
        _rect("L5", 0.412, 0.068, 0.515, 0.204),
    ),
    left_regions=(
        _rect("L1", 0.478, 0.068, 0.584, 0.198),
        _rect("L2", 0.478, 0.201, 0.584, 0.421),
        _rect("L3a", 0.481, 0.424, 0.584, 0.508),
        _rect("L3b", 0.481, 0.508, 0.584, 0.591),
        _rect("L3", 0.392, 0.424, 0.481, 0.594),
        _rect("L4", 0.481, 0.588, 0.584, 0.808),
        _rect("L5", 0.481, 0.808, 0.584, 0.938),
    ),
)

# Depot and Outpost sit inside Alliance and must be tested first.
LOAD_DIAGRAM = FieldDiagram(
    name="load",
    right_regions=(
        _rect("Depot", 0.887, 0.621, 0.952, 0.807),
        _rect("Outpost", 0.908, 0.086, 0.995, 0.186),
        _rect("Alliance", 0.734, 0.061, 0.952, 0.939),
        _rect("Neutral", 0.311, 0.061, 0.695, 0.939),
        _rect("Opponent", 0.048, 0.061, 0.269, 0.939),
    ),
    left_regions=(
        _rect("Depot", 0.048, 0.211, 0.115, 0.396),
        _rect("Outpost", 0.007, 0.821, 0.099, 0.939),
        _rect("Alliance", 0.048, 0.061, 0.269, 0.939),
        _rect("Neutral", 0.311, 0.061, 0.695, 0.939),
        _rect("Opponent", 0.734, 0.061, 0.952, 0.939),
    ),
)

FERRY_DIAGRAM = FieldDiagram(
    name="ferry",
    right_regions=(
        _rect("Outpost", 0.908, 0.086, 0.995, 0.186),
        _rect("Alliance", 0.734, 0.061, 0.952, 0.939),
        _rect("Neutral", 0.311, 0.061, 0.695, 0.939),
    ),
    left_regions=(
        _rect("Outpost", 0.007, 0.821, 0.099, 0.939),
        _rect("Alliance", 0.048, 0.061, 0.269, 0.939),
        _rect("Neutral", 0.311, 0.061, 0.695, 0.939),
    ),
)

_RIGHT_FRZ = _sector("FRZ", (0.98, 0.043), (0.332, 0.201), (0.612, 0.370), 90.0, 90.0)
_RIGHT_FLZ = _sector("FLZ", (0.98, 0.926), (0.332, 0.201), (0.612, 0.370), 180.0, 90.0)
_LEFT_FLZ = _sector("FLZ", (0.026, 0.065), (0.332, 0.201), (0.612, 0.370), 0.0, 90.0)
_LEFT_FRZ = _sector("FRZ", (0.026, 0.951), (0.332, 0.201), (0.612, 0.370), 270.0, 90.0)

SHOOT_DIAGRAM = FieldDiagram(
    name="shoot",
    right_regions=(
        _sector("PZ", (0.281, 0.497), (0.0, 0.0), (0.112, 0.068), -90.0, 180.0),
        _sector("CRZ", (0.98, 0.043), (0.0, 0.0), (0.332, 0.201), 90.0, 90.0),
        _RIGHT_FRZ,
        _sector("CLZ", (0.98, 0.926), (0.0, 0.0), (0.332, 0.201), 180.0, 90.0),
        _RIGHT_FLZ,
        _remainder(
            "MZ",
            Rect(0.40, 0.043, 0.98, 0.926),
            _RIGHT_FRZ,
            _RIGHT_FLZ,
        ),
    ),
    left_regions=(
        _sector("PZ", (0.719, 0.509), (0.0, 0.0), (0.112, 0.068), 90.0, 180.0),
        _sector("CLZ", (0.026, 0.065), (0.0, 0.0), (0.332, 0.201), 0.0, 90.0),
        _LEFT_FLZ,
        _sector("CRZ", (0.026, 0.951), (0.0, 0.0), (0.332, 0.201), 270.0, 90.0),
        _LEFT_FRZ,
        _remainder(
            "MZ",
            Rect(0.026, 0.065, 0.607, 0.951),
            _LEFT_FLZ,
            _LEFT_FRZ,
        ),
    ),
)


def _grid_regions(rows: int, columns: int) -> Tuple[Region, ...]:
    """Build the labelled cells of a uniform grid, row by row.

    Parameters
    ----------
    rows : int
        Number of grid rows.
    columns : int
        Number of grid columns.

    Returns
    -------
    Tuple[Region, ...]
        One region per cell labelled ``A1`` onwards.
    """
    return tuple(
        Region(f"{chr(ord('A') + row)}{column + 1}", GridCell(row, column, rows, columns))
        for row in range(rows)
        for column in range(columns)
    )


_GRID = _grid_regions(SCOUT_CONFIG.session.grid_rows, SCOUT_CONFIG.session.grid_columns)
GRID_DIAGRAM = FieldDiagram(name="grid", right_regions=_GRID, left_regions=_GRID)

DIAGRAMS: Dict[str, FieldDiagram] = {
    diagram.name: diagram
    for diagram in (START_DIAGRAM, LOAD_DIAGRAM, FERRY_DIAGRAM, SHOOT_DIAGRAM, GRID_DIAGRAM)
}

ACTION_DIAGRAMS: Dict[str, str] = {
    "load": "load",
    "shoot": "shoot",
    "ferry": "ferry",
}
"""Diagram shown by each detail form that picks a location."""


def get_diagram(name: str) -> FieldDiagram:
    """Return the registered diagram called ``name``.

    Parameters
    ----------
    name : str
        Diagram name such as ``"shoot"``.

    Returns
    -------
    FieldDiagram
        The registered diagram.

    Raises
    ------
    ValueError
        If no diagram has that name.
    """
    try:
        return DIAGRAMS[name]
    except KeyError as exc:
        known = ", ".join(sorted(DIAGRAMS))
        raise ValueError(f"Unknown diagram '{name}'. Known diagrams: {known}") from exc


def diagram_for_action(action_type: ActionType) -> Optional[FieldDiagram]:
    """Return the diagram an action's detail form picks its location on.

    Parameters
    ----------
    action_type : ActionType
        Action being recorded.

    Returns
    -------
    Optional[FieldDiagram]
        Load, shoot or ferry diagram, or ``None`` for actions without a map.
    """
    name = ACTION_DIAGRAMS.get(action_type.qualitative_kind)
    return DIAGRAMS[name] if name else None


def zone_for_action(action_type: ActionType, x: float, y: float, orientation: Orientation) -> Optional[str]:
    """Resolve a tap on the location map of ``action_type``'s detail form.

    Parameters
    ----------
    action_type : ActionType
        Action being recorded.
    x : float
        Tap position as a fraction of the image width.
    y : float
        Tap position as a fraction of the image height.
    orientation : Orientation
        Current field orientation and scouted robot.

    Returns
    -------
    Optional[str]
        Zone label, or ``None`` when the action has no map or the tap misses.
    """
    diagram = diagram_for_action(action_type)
    if diagram is None:
        return None
    return diagram.resolve(x, y, orientation)


def derived_left_regions(diagram: FieldDiagram) -> Tuple[Region, ...]:
    """Return the reflection of ``diagram``'s right table.

    Useful for checking how far the hand-measured left table drifts from an
    exact mirror image; the shipped diagrams keep their measured tables.

    Parameters
    ----------
    diagram : FieldDiagram
        Diagram to reflect.

    Returns
    -------
    Tuple[Region, ...]
        Mirrored right-hand regions in the same priority order.
    """
    return mirror_regions(diagram.right_regions)
