"""
Order in which the cells get covered
"""

import logging
import math

from boustrophedon_explorer.a_star import AStarPathfinder
from boustrophedon_explorer.errors import OrderingFailure, UnreachableStartError

logger = logging.getLogger(__name__)


def find_start_cell(cells, start_position, grid=None):
    """
    Index of the cell that contains the start position.

    Every cell is tested and the last one that contains the point wins, so a
    start point on the border shared by two cells picks the later cell. The
    choice is arbitrary but kept stable for reproducible plans.

    A free start pixel can sit on a dividing wall, which belongs to no cell.
    The cell whose polygon is closest to it is used then.

    Args:
        cells: list of Cell
        start_position: (x, y) pixel
        grid: OccupancyGrid the start has to be free in, without it a start
            outside every cell is rejected

    Raises:
        UnreachableStartError: the start is not in the free space of the map
    """
    start_index = None
    for index, cell in enumerate(cells):
        if cell.contains(start_position):
            start_index = index
    if start_index is not None:
        return start_index

    x, y = int(start_position[0]), int(start_position[1])
    if grid is None or not cells or not grid.is_free(x, y):
        raise UnreachableStartError(
            f"Start position {tuple(start_position)} is not inside any cell"
        )

    start_index = max(
        range(len(cells)), key=lambda index: cells[index].distance(start_position)
    )
    logger.debug(
        "Start position %s lies on a dividing wall, using closest cell %d",
        tuple(start_position),
        start_index,
    )
    return start_index


class NearestNeighbourTSPSolver:
    """
    Open path TSP over obstacle aware distances.

    The tour starts at the start index, greedily visits the nearest unvisited
    point and is then improved with 2-opt moves. The start index always stays
    first and the path does not return to it.
    """

    def __init__(self, pathfinder=None, max_two_opt_passes=50):
        self.pathfinder = pathfinder or AStarPathfinder()
        self.max_two_opt_passes = max_two_opt_passes

    def distance_matrix(self, grid, points):
        n = len(points)
        distances = [[0.0] * n for _ in range(n)]
        for i in range(n):
            for j in range(i + 1, n):
                d, _ = self.pathfinder.plan(grid, points[i], points[j])
                distances[i][j] = distances[j][i] = d
        return distances

    def solve(self, grid, points, start_index):
        n = len(points)
        if n == 0:
            return []
        if n == 1:
            return [start_index]

        distances = self.distance_matrix(grid, points)
        if any(math.isinf(d) for row in distances for d in row):
            raise OrderingFailure("Some cell centers cannot reach each other")

        tour = self.nearest_neighbour_tour(distances, start_index)
        return self.two_opt(tour, distances)

    @staticmethod
    def nearest_neighbour_tour(distances, start_index):
        remaining = set(range(len(distances)))
        remaining.remove(start_index)
        tour = [start_index]
        while remaining:
            current = tour[-1]
            # ties go to the lower index so the result is deterministic
            nearest = min(remaining, key=lambda j: (distances[current][j], j))
            tour.append(nearest)
            remaining.remove(nearest)
        return tour

    def two_opt(self, tour, distances):
        """
        Reverse segments of the tour while that shortens it.

        Only segments after the first element are reversed, and since the path is
        open, reversing a tail only changes the edge into the segment.
        """
        tour = list(tour)
        n = len(tour)
        for _ in range(self.max_two_opt_passes):
            improved = False
            for i in range(1, n - 1):
                for j in range(i + 1, n):
                    a, b = tour[i - 1], tour[i]
                    c = tour[j]
                    before = distances[a][b]
                    after = distances[a][c]
                    if j + 1 < n:
                        d = tour[j + 1]
                        before += distances[c][d]
                        after += distances[b][d]
                    if after < before - 1e-9:
                        tour[i : j + 1] = reversed(tour[i : j + 1])
                        improved = True
            if not improved:
                break
        return tour


def tour_length(tour, distances):
    return sum(distances[a][b] for a, b in zip(tour, tour[1:]))


def plan_visit_order(cells, centers, start_position, grid, tsp_solver=None):
    """
    Determine the visiting order of the cells.

    Args:
        cells: list of Cell
        centers: list of (x, y) cell centers, same order as cells
        start_position: (x, y) pixel the robot starts from
        grid: OccupancyGrid, passed on for obstacle aware distances
        tsp_solver: object with solve(grid, points, start_index)

    Returns:
        list of int: permutation of the cell indices, starting with the cell
        containing the start position

    Raises:
        UnreachableStartError: the start position is not in the free space
        OrderingFailure: the solver did not return a valid permutation
    """
    start_index = find_start_cell(cells, start_position, grid)
    tsp_solver = tsp_solver or NearestNeighbourTSPSolver()

    order = list(tsp_solver.solve(grid, list(centers), start_index))

    if sorted(order) != list(range(len(cells))):
        raise OrderingFailure(f"Solver returned an invalid permutation: {order}")
    if order[0] != start_index:
        raise OrderingFailure(
            f"Solver order starts at cell {order[0]}, expected {start_index}"
        )

    logger.debug("Start cell %d, visiting order %s", start_index, order)
    return order
