"""
Boustrophedon (Morse) cellular decomposition of an occupancy grid.

A horizontal slice is swept from the top row to the bottom row. Whenever the
number of obstacle segments along the slice changes, the pixels that caused the
change (critical points) are found and a dividing wall is drawn through them,
left and right until an obstacle is hit. The free regions left between the walls
are the cells, which are then pulled out of the map as polygons with OpenCV.
"""

from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple, Tuple

import cv2
import numpy as np

from boustrophedon_explorer.errors import EmptyMapError
from boustrophedon_explorer.grid import FREE, OCCUPIED


class Event(Enum):
    IN = "in"  # segments split, new cells open
    OUT = "out"  # segments merge, cells close


class CriticalPoint(NamedTuple):
    x: int
    y: int  # row the dividing wall is painted into
    event: Event


@dataclass(frozen=True, eq=False)
class CellMap:
    """Grid copy with the dividing walls painted in as obstacles"""

    data: np.ndarray
    walls: np.ndarray  # bool mask of the painted wall pixels
    critical_points: Tuple[CriticalPoint, ...]

    def free_mask(self):
        return self.data == FREE


def count_segments(row):
    """
    Count the obstacle runs of a slice that start after its first free pixel

    Args:
        row: 1D array of FREE / OCCUPIED values

    Returns:
        int: number of contiguous obstacle runs, each counted once
    """
    free = row == FREE
    if not free.any():
        return 0
    first_free = int(np.argmax(free))
    obstacle = ~free[first_free:]
    # a run starts where an obstacle follows a free pixel
    return int(np.count_nonzero(obstacle[1:] & ~obstacle[:-1]))


def _is_obstacle(data, y, x):
    """Out of bounds pixels are treated as obstacles"""
    if x < 0 or x >= data.shape[1]:
        return True
    return data[y, x] != FREE


def _critical_columns(data, y, check_y):
    """
    Columns of row y that are obstacles with nothing but free space at
    (x - 1, x, x + 1) in row check_y
    """
    free = np.flatnonzero(data[y] == FREE)
    if free.size == 0:
        return []

    columns = []
    for x in range(int(free[0]) + 1, data.shape[1]):
        if data[y, x] == FREE:
            continue
        if not any(_is_obstacle(data, check_y, x + dx) for dx in (-1, 0, 1)):
            columns.append(x)
    return columns


def find_critical_points(grid):
    """
    Sweep a slice through the map and collect the critical points.

    Args:
        grid: OccupancyGrid

    Returns:
        list of CriticalPoint in sweep order

    Raises:
        EmptyMapError: the map has no free pixel
    """
    data = grid.data
    rows_with_free = np.flatnonzero((data == FREE).any(axis=1))
    if rows_with_free.size == 0:
        raise EmptyMapError("The map does not contain any free pixel")

    y_start = int(rows_with_free[0])
    previous_segments = count_segments(data[y_start])

    critical_points = []
    for y in range(y_start + 1, grid.height):
        segments = count_segments(data[y])

        if segments > previous_segments:
            # new obstacle in this slice, look upwards for free space
            for x in _critical_columns(data, y, y - 1):
                critical_points.append(CriticalPoint(x, y, Event.IN))
        elif segments < previous_segments:
            # obstacle ended in the previous slice, look downwards
            for x in _critical_columns(data, y - 1, y):
                critical_points.append(CriticalPoint(x, y - 1, Event.OUT))

        previous_segments = segments

    return critical_points


def _paint_wall(source, target, x, y):
    """Turn free pixels left and right of (x, y) into obstacles until one is hit"""
    width = source.shape[1]
    for step in (-1, 1):
        wall_x = x + step
        while 0 <= wall_x < width and source[y, wall_x] == FREE:
            target[y, wall_x] = OCCUPIED
            wall_x += step


def decompose(grid):
    """
    Run the boustrophedon decomposition on an occupancy grid

    Args:
        grid: OccupancyGrid

    Returns:
        CellMap: the grid with a dividing wall through every critical point
    """
    critical_points = find_critical_points(grid)

    painted = np.array(grid.data, copy=True)
    for point in critical_points:
        _paint_wall(grid.data, painted, point.x, point.y)

    walls = (painted == OCCUPIED) & (grid.data == FREE)
    painted.flags.writeable = False
    walls.flags.writeable = False
    return CellMap(painted, walls, tuple(critical_points))


@dataclass(frozen=True, eq=False)
class Cell:
    """
    One obstacle free region of the decomposition.

    Attributes:
        polygon: (N, 2) int array of (x, y) boundary vertices, implicitly closed
        min_x, max_x, min_y, max_y: bounding box of the polygon
        center: (x, y) pixel inside the region
    """

    polygon: np.ndarray
    min_x: int
    max_x: int
    min_y: int
    max_y: int
    center: Tuple[int, int]

    @property
    def contour(self):
        """Polygon in the (N, 1, 2) int32 layout OpenCV expects"""
        return self.polygon.reshape(-1, 1, 2).astype(np.int32)

    def contains(self, point):
        """True if point lies inside the polygon or on its boundary"""
        return (
            cv2.pointPolygonTest(
                self.contour, (float(point[0]), float(point[1])), False
            )
            >= 0
        )

    def distance(self, point):
        """Signed distance to the polygon boundary, negative outside"""
        return cv2.pointPolygonTest(
            self.contour, (float(point[0]), float(point[1])), True
        )

    def mask(self, shape):
        """Bool mask of the filled polygon"""
        mask = np.zeros(shape, dtype=np.uint8)
        cv2.drawContours(mask, [self.contour], -1, 1, thickness=cv2.FILLED)
        return mask.astype(bool)


def _longest_run_middle(row_mask):
    """Middle index of the longest run of True values, None for an empty row"""
    columns = np.flatnonzero(row_mask)
    if columns.size == 0:
        return None
    breaks = np.flatnonzero(np.diff(columns) > 1)
    starts = np.concatenate(([0], breaks + 1))
    ends = np.concatenate((breaks, [columns.size - 1]))
    longest = int(np.argmax(ends - starts))
    return int((columns[starts[longest]] + columns[ends[longest]]) // 2)


def _find_center(polygon, region, min_x, max_x, min_y, max_y):
    """
    Pick a representative pixel of the region.

    Tries the polygon centroid, then the bounding box center, then the middle of
    the longest free run on the medial scanline, then any region pixel.
    """

    def inside(point):
        x, y = point
        return (
            0 <= y < region.shape[0] and 0 <= x < region.shape[1] and region[y, x]
        )

    moments = cv2.moments(polygon.reshape(-1, 1, 2).astype(np.int32))
    if moments["m00"] != 0:
        centroid = (
            int(round(moments["m10"] / moments["m00"])),
            int(round(moments["m01"] / moments["m00"])),
        )
        if inside(centroid):
            return centroid

    box_center = ((min_x + max_x) // 2, (min_y + max_y) // 2)
    if inside(box_center):
        return box_center

    rows = np.flatnonzero(region.any(axis=1))
    if rows.size == 0:
        # degenerate region that the fill did not cover, vertices are region pixels
        return (int(polygon[0][0]), int(polygon[0][1]))

    medial_y = (min_y + max_y) // 2
    y = int(rows[np.argmin(np.abs(rows - medial_y))])
    return (_longest_run_middle(region[y]), y)


def extract_cells(cell_map):
    """
    Find the cells of a decomposed map.

    Only outer contours are used, so obstacles fully inside a cell do not
    create extra cells.

    Args:
        cell_map: CellMap from decompose()

    Returns:
        list of Cell in contour discovery order
    """
    free = cell_map.free_mask()
    # zero border so regions touching the map edge are traced completely
    image = cv2.copyMakeBorder(
        free.astype(np.uint8) * 255, 1, 1, 1, 1, cv2.BORDER_CONSTANT, value=0
    )
    contours, _ = cv2.findContours(
        image, cv2.RETR_EXTERNAL, cv2.CHAIN_APPROX_SIMPLE, offset=(-1, -1)
    )

    cells = []
    for contour in contours:
        polygon = contour.reshape(-1, 2).astype(np.int32)
        min_x, min_y = (int(v) for v in polygon.min(axis=0))
        max_x, max_y = (int(v) for v in polygon.max(axis=0))

        region = np.zeros(free.shape, dtype=np.uint8)
        cv2.drawContours(region, [contour], -1, 1, thickness=cv2.FILLED)
        region = region.astype(bool) & free

        center = _find_center(polygon, region, min_x, max_x, min_y, max_y)
        cells.append(Cell(polygon, min_x, max_x, min_y, max_y, center))

    return cells


def cell_centers(cells):
    return [cell.center for cell in cells]
