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
"""Point-in-region tests for the normalised field diagrams.

All coordinates live in the unit square of a diagram image with the origin at
the top-left corner, ``x`` growing to the right and ``y`` growing downwards.
Angles follow the same screen convention: 0 degrees points along ``+x`` and
90 degrees points along ``+y`` (down), with positive sweeps turning clockwise
on screen. Every boundary test is inclusive so repeated taps on the same
pixel always resolve the same way.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence, Tuple

from vectorscout.engine.config import SCOUT_CONFIG


@dataclass(frozen=True)
class Point:
    """Normalised tap position with small vector helpers.

    Parameters
    ----------
    x : float
        Horizontal position as a fraction of the diagram width.
    y : float
        Vertical position as a fraction of the diagram height.
    """

    x: float
    y: float

    def __sub__(self, other: "Point") -> "Point":
        """Return the offset from ``other`` to ``self``."""
        return Point(self.x - other.x, self.y - other.y)

    def mirrored(self) -> "Point":
        """Reflect the point across the vertical centre line of the diagram.

        Returns
        -------
        Point
            The point at ``(1 - x, y)``.
        """
        return Point(1.0 - self.x, self.y)

    def angle_from(self, origin: "Point") -> float:
        """Return the screen angle of ``self`` seen from ``origin``.

        Parameters
        ----------
        origin : Point
            Vertex of the angle.

        Returns
        -------
        float
            Angle in degrees normalised to ``[0, 360)``.
        """
        offset = self - origin
        return math.degrees(math.atan2(offset.y, offset.x)) % 360.0


def _normalise_angle(angle: float) -> float:
    """Wrap ``angle`` into ``[0, 360)``.

    Parameters
    ----------
    angle : float
        Angle in degrees, possibly negative or above a full turn.

    Returns
    -------
    float
        Equivalent angle in ``[0, 360)``.
    """
    return angle % 360.0


def _ellipse_distance(offset: Point, radius_x: float, radius_y: float) -> float:
    """Return the squared normalised distance of ``offset`` on an ellipse.

    Parameters
    ----------
    offset : Point
        Offset from the ellipse centre.
    radius_x : float
        Horizontal radius.
    radius_y : float
        Vertical radius.

    Returns
    -------
    float
        ``(dx/rx)^2 + (dy/ry)^2``; values up to 1 lie on or inside the ellipse.
    """
    return (offset.x * offset.x) / (radius_x * radius_x) + (offset.y * offset.y) / (radius_y * radius_y)


class Shape:
    """Base class for the region shapes a diagram can declare."""

    def contains(self, point: Point) -> bool:
        """Return whether ``point`` lies inside the shape, boundary included.

        Parameters
        ----------
        point : Point
            Normalised tap position.

        Returns
        -------
        bool
            ``True`` when the point is inside or on the boundary.
        """
        raise NotImplementedError

    def mirrored(self) -> "Shape":
        """Return the shape reflected across the vertical centre line.

        Returns
        -------
        Shape
            Reflected copy of the shape.
        """
        raise NotImplementedError

    def anchor(self) -> Point:
        """Return a representative interior point, used for highlighting.

        Returns
        -------
        Point
            A point that lies inside the shape.
        """
        raise NotImplementedError


@dataclass(frozen=True)
class Rect(Shape):
    """Axis-aligned rectangle.

    Parameters
    ----------
    left : float
        Left edge.
    top : float
        Top edge.
    right : float
        Right edge.
    bottom : float
        Bottom edge.
    """

    left: float
    top: float
    right: float
    bottom: float

    def __post_init__(self) -> None:
        if self.right < self.left or self.bottom < self.top:
            raise ValueError(f"Degenerate rectangle {self}")

    def contains(self, point: Point) -> bool:
        """Return whether ``point`` lies inside the rectangle, edges included.

        Parameters
        ----------
        point : Point
            Normalised tap position.

        Returns
        -------
        bool
            ``True`` when ``left <= x <= right`` and ``top <= y <= bottom``.
        """
        return self.left <= point.x <= self.right and self.top <= point.y <= self.bottom

    def mirrored(self) -> "Rect":
        """Return the rectangle reflected across the vertical centre line.

        Returns
        -------
        Rect
            Rectangle spanning ``1 - right`` to ``1 - left``.
        """
        return Rect(1.0 - self.right, self.top, 1.0 - self.left, self.bottom)

    def anchor(self) -> Point:
        """Return the centre of the rectangle.

        Returns
        -------
        Point
            Midpoint of both axes.
        """
        return Point((self.left + self.right) / 2.0, (self.top + self.bottom) / 2.0)

    def corners(self) -> Tuple[Point, Point, Point, Point]:
        """Return the corners clockwise from the top-left.

        Returns
        -------
        Tuple[Point, Point, Point, Point]
            Top-left, top-right, bottom-right and bottom-left corners.
        """
        return (
            Point(self.left, self.top),
            Point(self.right, self.top),
            Point(self.right, self.bottom),
            Point(self.left, self.bottom),
        )


@dataclass(frozen=True)
class GridCell(Shape):
    """One cell of a uniform grid laid over the whole diagram.

    A tap belongs to the cell whose row and column indices it truncates to,
    clamped so taps on the far edges still land in the last row or column.

    Parameters
    ----------
    row : int
        Zero-based row index.
    column : int
        Zero-based column index.
    rows : int, default=5
        Number of grid rows.
    columns : int, default=5
        Number of grid columns.
    """

    row: int
    column: int
    rows: int = 5
    columns: int = 5

    def contains(self, point: Point) -> bool:
        """Return whether ``point`` truncates to this cell.

        Parameters
        ----------
        point : Point
            Normalised tap position.

        Returns
        -------
        bool
            ``True`` when the clamped row and column match the cell.
        """
        return grid_indices(point, self.rows, self.columns) == (self.row, self.column)

    def mirrored(self) -> "GridCell":
        """Return the cell in the mirrored column.

        Returns
        -------
        GridCell
            Cell at ``columns - 1 - column`` in the same row.
        """
        return GridCell(self.row, self.columns - 1 - self.column, self.rows, self.columns)

    def anchor(self) -> Point:
        """Return the centre of the cell.

        Returns
        -------
        Point
            Midpoint of the cell.
        """
        return Point((self.column + 0.5) / self.columns, (self.row + 0.5) / self.rows)


@dataclass(frozen=True)
class EllipseSector(Shape):
    """Annular sector of an ellipse.

    Zero inner radii describe a filled sector; a zero outer radius disables the
    outer bound entirely.

    Parameters
    ----------
    center_x : float
        Horizontal centre of the ellipse.
    center_y : float
        Vertical centre of the ellipse.
    inner_rx : float
        Horizontal radius of the excluded inner ellipse.
    inner_ry : float
        Vertical radius of the excluded inner ellipse.
    outer_rx : float
        Horizontal radius of the bounding ellipse.
    outer_ry : float
        Vertical radius of the bounding ellipse.
    start_angle : float
        First angle of the sector in screen degrees.
    sweep_angle : float
        Clockwise extent of the sector in degrees.
    """

    center_x: float
    center_y: float
    inner_rx: float
    inner_ry: float
    outer_rx: float
    outer_ry: float
    start_angle: float
    sweep_angle: float

    @property
    def center(self) -> Point:
        """Centre of the ellipse."""
        return Point(self.center_x, self.center_y)

    def contains(self, point: Point) -> bool:
        """Return whether ``point`` lies in the annular sector.

        Parameters
        ----------
        point : Point
            Normalised tap position.

        Returns
        -------
        bool
            ``True`` when the point is inside the outer ellipse, outside the
            inner ellipse and within the angular sweep, boundaries included.
        """
        offset = point - self.center
        if self.outer_rx > 0 and self.outer_ry > 0:
            if _ellipse_distance(offset, self.outer_rx, self.outer_ry) > 1.0:
                return False
        if self.inner_rx > 0 and self.inner_ry > 0:
            if _ellipse_distance(offset, self.inner_rx, self.inner_ry) < 1.0:
                return False
        return self._within_sweep(point.angle_from(self.center))

    def _within_sweep(self, angle: float) -> bool:
        """Return whether ``angle`` falls inside the sector's sweep.

        Parameters
        ----------
        angle : float
            Point angle already normalised to ``[0, 360)``.

        Returns
        -------
        bool
            ``True`` for angles between start and end inclusive, wrapping past
            a full turn.
        """
        start = _normalise_angle(self.start_angle)
        end = start + self.sweep_angle
        if end > 360.0:
            return angle >= start or angle <= end - 360.0
        return start <= angle <= end

    def mirrored(self) -> "EllipseSector":
        """Return the sector reflected across the vertical centre line.

        Returns
        -------
        EllipseSector
            Sector with a reflected centre and the sweep ``[180 - end, 180 - start]``.
        """
        return EllipseSector(
            center_x=1.0 - self.center_x,
            center_y=self.center_y,
            inner_rx=self.inner_rx,
            inner_ry=self.inner_ry,
            outer_rx=self.outer_rx,
            outer_ry=self.outer_ry,
            start_angle=_normalise_angle(180.0 - self.start_angle - self.sweep_angle),
            sweep_angle=self.sweep_angle,
        )

    def anchor(self) -> Point:
        """Return the point halfway through the ring at the middle of the sweep.

        Returns
        -------
        Point
            Interior point of the sector.
        """
        radians = math.radians(self.start_angle + self.sweep_angle / 2.0)
        radius_x = (self.inner_rx + self.outer_rx) / 2.0
        radius_y = (self.inner_ry + self.outer_ry) / 2.0
        return Point(self.center_x + radius_x * math.cos(radians), self.center_y + radius_y * math.sin(radians))


@dataclass(frozen=True)
class EllipseBound:
    """Ellipse whose interior is cut out of a polygon sector.

    Parameters
    ----------
    center_x : float
        Horizontal centre.
    center_y : float
        Vertical centre.
    radius_x : float
        Horizontal radius.
    radius_y : float
        Vertical radius.
    """

    center_x: float
    center_y: float
    radius_x: float
    radius_y: float

    def excludes(self, point: Point) -> bool:
        """Return whether ``point`` lies strictly inside the ellipse.

        Parameters
        ----------
        point : Point
            Normalised tap position.

        Returns
        -------
        bool
            ``True`` when the point is cut out; points on the boundary are kept.
        """
        if self.radius_x <= 0 or self.radius_y <= 0:
            return False
        offset = point - Point(self.center_x, self.center_y)
        return _ellipse_distance(offset, self.radius_x, self.radius_y) < 1.0

    def mirrored(self) -> "EllipseBound":
        """Return the ellipse reflected across the vertical centre line.

        Returns
        -------
        EllipseBound
            Ellipse centred at ``(1 - center_x, center_y)``.
        """
        return EllipseBound(1.0 - self.center_x, self.center_y, self.radius_x, self.radius_y)


@dataclass(frozen=True)
class PolygonSector(Shape):
    """Quadrilateral with elliptical cut-outs.

    Parameters
    ----------
    corners : Tuple[Point, ...]
        Polygon vertices in drawing order.
    exclusions : Tuple[EllipseBound, ...], default=()
        Ellipses whose interiors are removed from the polygon.
    """

    corners: Tuple[Point, ...]
    exclusions: Tuple[EllipseBound, ...] = ()

    def __post_init__(self) -> None:
        if len(self.corners) < 3:
            raise ValueError("A polygon sector needs at least three corners")

    def contains(self, point: Point) -> bool:
        """Return whether ``point`` is inside the polygon and every cut-out.

        Parameters
        ----------
        point : Point
            Normalised tap position.

        Returns
        -------
        bool
            ``True`` when the point is on or inside the polygon and not strictly
            inside any excluded ellipse.
        """
        if not self._inside_polygon(point):
            return False
        return not any(exclusion.excludes(point) for exclusion in self.exclusions)

    def _edges(self) -> Iterable[Tuple[Point, Point]]:
        """Yield each polygon edge as a pair of consecutive vertices.

        Returns
        -------
        Iterable[Tuple[Point, Point]]
            Edges including the closing edge back to the first vertex.
        """
        count = len(self.corners)
        return ((self.corners[i], self.corners[(i + 1) % count]) for i in range(count))

    def _inside_polygon(self, point: Point) -> bool:
        """Ray-cast ``point`` against the polygon, counting edges as inside.

        Parameters
        ----------
        point : Point
            Normalised tap position.

        Returns
        -------
        bool
            ``True`` when the point is on an edge or an odd number of edges
            cross the horizontal ray towards ``+x``.
        """
        inside = False
        for start, end in self._edges():
            if _on_segment(point, start, end):
                return True
            if (start.y > point.y) != (end.y > point.y):
                crossing_x = start.x + (point.y - start.y) * (end.x - start.x) / (end.y - start.y)
                if point.x < crossing_x:
                    inside = not inside
        return inside

    def mirrored(self) -> "PolygonSector":
        """Return the polygon reflected across the vertical centre line.

        Returns
        -------
        PolygonSector
            Reflected corners and cut-outs.
        """
        return PolygonSector(
            corners=tuple(corner.mirrored() for corner in self.corners),
            exclusions=tuple(exclusion.mirrored() for exclusion in self.exclusions),
        )

    def anchor(self) -> Point:
        """Return the vertex centroid of the polygon.

        Returns
        -------
        Point
            Mean of the corner coordinates.
        """
        count = float(len(self.corners))
        return Point(sum(c.x for c in self.corners) / count, sum(c.y for c in self.corners) / count)


def _on_segment(point: Point, start: Point, end: Point, tolerance: float = 1e-9) -> bool:
    """Return whether ``point`` lies on the segment from ``start`` to ``end``.

    Parameters
    ----------
    point : Point
        Point being tested.
    start : Point
        First endpoint.
    end : Point
        Second endpoint.
    tolerance : float
        Allowed cross-product error for floating point input.

    Returns
    -------
    bool
        ``True`` when the point is collinear with and between the endpoints.
    """
    edge = end - start
    offset = point - start
    cross = edge.x * offset.y - edge.y * offset.x
    if abs(cross) > tolerance:
        return False
    return (
        min(start.x, end.x) - tolerance <= point.x <= max(start.x, end.x) + tolerance
        and min(start.y, end.y) - tolerance <= point.y <= max(start.y, end.y) + tolerance
    )


@dataclass(frozen=True)
class Region:
    """Labelled shape declared on a diagram.

    Parameters
    ----------
    label : str
        Zone name reported when the region is tapped.
    shape : Shape
        Geometry of the region.
    """

    label: str
    shape: Shape

    def mirrored(self) -> "Region":
        """Return the region with its shape reflected.

        Returns
        -------
        Region
            Region with the same label and a mirrored shape.
        """
        return Region(self.label, self.shape.mirrored())


def resolve_zone(point: Point, regions: Sequence[Region]) -> Optional[str]:
    """Return the label of the first region containing ``point``.

    Parameters
    ----------
    point : Point
        Normalised tap position.
    regions : Sequence[Region]
        Regions in priority order; earlier regions win on overlap.

    Returns
    -------
    Optional[str]
        Matching label, or ``None`` when the tap is outside every region.
    """
    for region in regions:
        if region.shape.contains(point):
            return region.label
    return None


def mirror_regions(regions: Sequence[Region]) -> Tuple[Region, ...]:
    """Reflect every region across the vertical centre line, keeping order.

    Parameters
    ----------
    regions : Sequence[Region]
        Regions drawn for one field orientation.

    Returns
    -------
    Tuple[Region, ...]
        Mirrored regions in the same priority order.
    """
    return tuple(region.mirrored() for region in regions)


def grid_indices(point: Point, rows: int, columns: int) -> Tuple[int, int]:
    """Return the clamped ``(row, column)`` a point truncates to.

    Parameters
    ----------
    point : Point
        Normalised tap position.
    rows : int
        Number of grid rows.
    columns : int
        Number of grid columns.

    Returns
    -------
    Tuple[int, int]
        Zero-based row and column, clamped to the grid.
    """
    column = min(max(int(point.x * columns), 0), columns - 1)
    row = min(max(int(point.y * rows), 0), rows - 1)
    return row, column


def grid_zone(point: Point, rows: Optional[int] = None, columns: Optional[int] = None) -> str:
    """Return the grid label for a tap, for example ``"A1"`` for the top-left cell.

    Parameters
    ----------
    point : Point
        Normalised tap position.
    rows : Optional[int]
        Number of grid rows; defaults to the configured grid.
    columns : Optional[int]
        Number of grid columns; defaults to the configured grid.

    Returns
    -------
    str
        Row letter followed by the one-based column number.
    """
    rows = rows or SCOUT_CONFIG.session.grid_rows
    columns = columns or SCOUT_CONFIG.session.grid_columns
    row, column = grid_indices(point, rows, columns)
    return f"{chr(ord('A') + row)}{column + 1}"


def grid_zone_center(label: str, rows: Optional[int] = None, columns: Optional[int] = None) -> Point:
    """Return the centre of a labelled grid cell.

    Parameters
    ----------
    label : str
        Cell label such as ``"C4"``.
    rows : Optional[int]
        Number of grid rows; defaults to the configured grid.
    columns : Optional[int]
        Number of grid columns; defaults to the configured grid.

    Returns
    -------
    Point
        Normalised centre of the cell.

    Raises
    ------
    ValueError
        If ``label`` does not name a cell of the grid.
    """
    rows = rows or SCOUT_CONFIG.session.grid_rows
    columns = columns or SCOUT_CONFIG.session.grid_columns
    if len(label) < 2 or not label[1:].isdigit():
        raise ValueError(f"Invalid grid zone '{label}'")
    row = ord(label[0].upper()) - ord("A")
    column = int(label[1:]) - 1
    if not (0 <= row < rows and 0 <= column < columns):
        raise ValueError(f"Grid zone '{label}' is outside a {rows}x{columns} grid")
    return GridCell(row, column, rows, columns).anchor()


def toggle_selection(current: str, tapped: Optional[str]) -> str:
    """Apply a tap to a single-zone selection.

    Parameters
    ----------
    current : str
        Currently selected zone label, empty when nothing is selected.
    tapped : Optional[str]
        Zone the tap resolved to, ``None`` when outside every zone.

    Returns
    -------
    str
        The new selection: cleared when the selected zone is tapped again,
        unchanged when the tap missed, otherwise the tapped zone.
    """
    if tapped is None:
        return current
    if tapped == current:
        return ""
    return tapped
