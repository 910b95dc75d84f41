"""
Boustrophedon coverage path through the decomposed cells.

Each cell is covered by horizontal lines spaced one field of view radius apart,
travelled back and forth. The end of one line is connected to the start of the
next with the pathfinder, and the exit point of a cell is the entry point for
the next cell in the visiting order, so the result is one continuous path for
the center of the field of view.
"""

import math
from typing import NamedTuple, Tuple

from boustrophedon_explorer.a_star import AStarPathfinder
from boustrophedon_explorer.errors import DegenerateCellError, StitchingFailure
from boustrophedon_explorer.grid import FREE


class HorizontalSweepLine(NamedTuple):
    y: int
    left_x: int
    right_x: int

    @property
    def left_edge(self):
        return (self.left_x, self.y)

    @property
    def right_edge(self):
        return (self.right_x, self.y)


class Waypoint(NamedTuple):
    x: float
    y: float
    theta: float  # heading towards the next waypoint


class SweepState(NamedTuple):
    """Running state carried from one cell to the next"""

    position: Tuple[int, int]
    points: Tuple[Tuple[int, int], ...]


def _scan_for_free(grid, y, start_x, step):
    """
    First free pixel of row y walking from start_x in direction step.

    Returns:
        int x of the free pixel, or None if the scan leaves the grid
    """
    x = start_x
    while 0 <= x < grid.width:
        if grid.data[y, x] == FREE:
            return x
        x += step
    return None


def sweep_rows(cell, fov_radius):
    """
    Rows of the horizontal lines for a cell.

    A cell no taller than the field of view diameter is covered by a single
    line through its middle.
    """
    height = cell.max_y - cell.min_y
    if height <= 2 * fov_radius:
        return [cell.min_y + height // 2]
    return list(range(cell.min_y + fov_radius, cell.max_y + 1, fov_radius))


def compute_sweep_lines(grid, cell, fov_radius, cell_index=None):
    """
    Get the left and right edges of every sweep line of a cell.

    The edges are anchored to the walls of the original map: the row is scanned
    from the cell's min x to the right and from its max x to the left for the
    first free pixel, which is then moved inwards by the field of view radius so
    the field of view does not overlap the wall.

    Args:
        grid: OccupancyGrid the lines are anchored to
        cell: Cell
        fov_radius: int, field of view radius in pixels
        cell_index: index reported in the error

    Returns:
        list of HorizontalSweepLine from top to bottom

    Raises:
        DegenerateCellError: no row of the cell has a free pixel to anchor to
    """
    lines = []
    for y in sweep_rows(cell, fov_radius):
        if not 0 <= y < grid.height:
            continue
        left_free = _scan_for_free(grid, y, min(cell.min_x, grid.width - 1), 1)
        right_free = _scan_for_free(grid, y, min(cell.max_x, grid.width - 1), -1)
        if left_free is None or right_free is None:
            continue

        left_x = left_free + fov_radius
        right_x = right_free - fov_radius
        if left_x > right_x:
            # opening narrower than the field of view, one pass down the middle
            left_x = right_x = (left_free + right_free) // 2
        lines.append(HorizontalSweepLine(y, left_x, right_x))

    if not lines:
        raise DegenerateCellError(cell_index)
    return lines


def choose_entry(pathfinder, grid, position, lines):
    """
    Decide where to enter the cell.

    Returns:
        (from_top, left): start on the upper (True) or lower line, and on its
        left (True) or right edge
    """
    top, bottom = lines[0], lines[-1]
    dist1 = pathfinder.plan(grid, position, top.left_edge)[0]
    dist2 = pathfinder.plan(grid, position, top.right_edge)[0]
    dist3 = pathfinder.plan(grid, position, bottom.left_edge)[0]
    dist4 = pathfinder.plan(grid, position, bottom.right_edge)[0]

    if (dist3 < dist1 and dist3 < dist2) or (dist4 < dist1 and dist4 < dist2):
        return False, not dist4 < dist3
    return True, not dist2 < dist1


def line_samples(start_x, end_x, y, path_eps):
    """Points strictly between two edges of a line, path_eps apart from start_x"""
    samples = []
    if end_x >= start_x:
        x = start_x + path_eps
        while x < end_x:
            samples.append((x, y))
            x += path_eps
    else:
        x = start_x - path_eps
        while x > end_x:
            samples.append((x, y))
            x -= path_eps
    return samples


def stitch(pathfinder, grid, position, goal, path_eps):
    """
    Intermediate points of the path from position to goal.

    Points closer than path_eps to the previously kept point are dropped, the
    goal itself is left out.

    Raises:
        StitchingFailure: the pathfinder cannot reach the goal
    """
    if tuple(position) == tuple(goal):
        return []

    distance, path = pathfinder.plan(grid, position, goal)
    if math.isinf(distance):
        raise StitchingFailure(tuple(position), tuple(goal))

    points = []
    last = position
    for point in path[:-1]:
        if math.dist(last, point) >= path_eps:
            points.append(tuple(point))
            last = point
    return points


def cover_cell(pathfinder, grid, state, lines, path_eps):
    """
    Boustrophedon path over the lines of one cell.

    Args:
        state: SweepState at the moment the cell is entered

    Returns:
        SweepState after the last line of the cell
    """
    from_top, left = choose_entry(pathfinder, grid, state.position, lines)
    ordered = lines if from_top else lines[::-1]

    position = state.position
    points = list(state.points)
    for line in ordered:
        near, far = (
            (line.left_edge, line.right_edge)
            if left
            else (line.right_edge, line.left_edge)
        )
        points.extend(stitch(pathfinder, grid, position, near, path_eps))
        points.append(near)
        points.extend(line_samples(near[0], far[0], line.y, path_eps))
        if far != near:
            points.append(far)

        position = far
        left = not left

    return SweepState(position, tuple(points))


def assign_headings(points):
    """
    Turn points into waypoints facing the next point.

    The last point faces the first one, a single point faces angle 0.
    """
    if len(points) == 1:
        x, y = points[0]
        return [Waypoint(x, y, 0.0)]

    waypoints = []
    for index, (x, y) in enumerate(points):
        next_x, next_y = points[(index + 1) % len(points)]
        waypoints.append(Waypoint(x, y, math.atan2(next_y - y, next_x - x)))
    return waypoints


def generate_coverage_path(
    grid, cells, visit_order, start_position, fov_radius, path_eps, pathfinder=None
):
    """
    Compute the field of view path covering every cell.

    Args:
        grid: OccupancyGrid, the original map (without dividing walls)
        cells: list of Cell
        visit_order: list of cell indices, in the order they are covered
        start_position: (x, y) pixel the path starts from
        fov_radius: int, field of view radius in pixels
        path_eps: int, spacing of the waypoints in pixels
        pathfinder: object with plan(grid, start, goal) -> (distance, points)

    Returns:
        list of Waypoint in pixel coordinates of the field of view center
    """
    if fov_radius < 1:
        raise ValueError("Field of view radius must be at least 1 pixel")
    if path_eps < 1:
        raise ValueError("Path eps must be at least 1 pixel")
    pathfinder = pathfinder or AStarPathfinder()

    state = SweepState((int(start_position[0]), int(start_position[1])), ())
    for index in visit_order:
        lines = compute_sweep_lines(grid, cells[index], fov_radius, index)
        state = cover_cell(pathfinder, grid, state, lines, path_eps)

    if not state.points:
        return []
    return assign_headings(list(state.points))
