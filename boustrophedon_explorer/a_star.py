"""
Library of code to run A* on an occupancy grid, used to stitch coverage lines
together and to measure travel distances between cells
"""

import heapq
import math
from collections import defaultdict

from boustrophedon_explorer.grid import OCCUPIED

NEIGHBOR_DIFF = [
    (0, 1, 1.0),
    (1, 0, 1.0),
    (-1, 0, 1.0),
    (0, -1, 1.0),
    (1, 1, math.sqrt(2)),
    (1, -1, math.sqrt(2)),
    (-1, 1, math.sqrt(2)),
    (-1, -1, math.sqrt(2)),
]


def a_star(grid, start, target, heuristic_weight=1.01):
    """
    Run A* using octile movement on a 2d grid

    The start and target pixels themselves may be obstacles (a field of view
    edge can sit over a narrow obstacle), every pixel in between must be free.

    Args:
        grid (OccupancyGrid): Map
        start (tuple of int): Starting (x, y) pixel
        target (tuple of int): Target (x, y) pixel
        heuristic_weight (float): Weight applied to the octile heuristic

    Returns:
        list of tuples of ints: (x, y) pixels from start to target, or None
        if there is no possible path
    """
    start = (int(start[0]), int(start[1]))
    target = (int(target[0]), int(target[1]))

    if not grid.in_bounds(*start) or not grid.in_bounds(*target):
        return None

    visited = set()

    priority_queue = [(0, start[0], start[1])]

    came_from = {}
    g_score = defaultdict(lambda: float("inf"))

    g_score[start] = 0

    while priority_queue:
        current = heapq.heappop(priority_queue)

        current = (current[1], current[2])

        if current in visited:
            continue

        if current == target:
            return path_reconstruction(came_from, current)

        visited.add(current)

        for x_diff, y_diff, cost in NEIGHBOR_DIFF:

            neighbor = (current[0] + x_diff, current[1] + y_diff)

            if not grid.in_bounds(*neighbor):
                continue

            if neighbor != target and grid.data[neighbor[1], neighbor[0]] == OCCUPIED:
                continue

            if neighbor in visited:
                continue

            neighbor_g_score = g_score[current] + cost

            if neighbor_g_score < g_score[neighbor]:
                came_from[neighbor] = current
                g_score[neighbor] = neighbor_g_score
                f_score = (
                    neighbor_g_score
                    + octile_distance(neighbor, target) * heuristic_weight
                )

                heapq.heappush(priority_queue, (f_score, neighbor[0], neighbor[1]))

    return None


def octile_distance(current, target):
    """
    Calculate the octile distance between two points.

    Octile distance is optimal for 8-direction movement, meaning diagonals
    are included.

    Args:
        current (tuple of ints): Current point coordinates
        target (tuple of ints): Target point coordinates

    Returns:
        float: Octile distance between coords
    """
    x_diff = abs(target[0] - current[0])
    y_diff = abs(target[1] - current[1])

    return (max(x_diff, y_diff) - min(x_diff, y_diff)) + (
        min(x_diff, y_diff) * math.sqrt(2)
    )


def path_reconstruction(came_from, current):
    """
    Reconstruct the A* path

    Args:
        came_from (dict): A mapping from location to previous node
        current (tuple of ints): The current node

    Returns:
        list of tuples of ints: Path in order of visited node
    """
    complete_path = [current]

    while current in came_from:
        current = came_from[current]
        complete_path.append(current)

    return complete_path[::-1]


def path_length(path):
    """Sum of the octile step costs along a pixel path"""
    return sum(octile_distance(a, b) for a, b in zip(path, path[1:]))


class AStarPathfinder:
    """Point to point pathfinder backed by octile A*"""

    def __init__(self, heuristic_weight=1.01):
        self.heuristic_weight = heuristic_weight

    def plan(self, grid, start, goal):
        """
        Plan a path between two pixels.

        Returns:
            (distance, points): travel distance in pixels and the (x, y) pixels
            from start to goal. (math.inf, []) if the goal is unreachable.
        """
        path = a_star(grid, start, goal, self.heuristic_weight)
        if path is None:
            return math.inf, []
        return path_length(path), path
