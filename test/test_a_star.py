import math

import numpy as np

from boustrophedon_explorer.a_star import (
    AStarPathfinder,
    a_star,
    octile_distance,
    path_length,
)
from boustrophedon_explorer.grid import FREE, OCCUPIED, OccupancyGrid


def empty_grid(width=10, height=10):
    return OccupancyGrid(np.full((height, width), FREE))


def test_straight_line():
    path = a_star(empty_grid(), (0, 0), (4, 0))
    assert path == [(0, 0), (1, 0), (2, 0), (3, 0), (4, 0)]
    assert path_length(path) == 4


def test_start_equals_target():
    assert a_star(empty_grid(), (3, 3), (3, 3)) == [(3, 3)]


def test_path_goes_around_obstacle():
    data = np.full((5, 5), FREE)
    data[0:4, 2] = OCCUPIED  # wall with a gap in the bottom row
    grid = OccupancyGrid(data)

    path = a_star(grid, (0, 0), (4, 0))

    assert path[0] == (0, 0)
    assert path[-1] == (4, 0)
    assert all(grid.is_free(x, y) for x, y in path)
    assert (2, 4) in path


def test_blocked_target_returns_none():
    data = np.full((5, 5), FREE)
    data[:, 2] = OCCUPIED
    grid = OccupancyGrid(data)

    assert a_star(grid, (0, 0), (4, 4)) is None
    assert AStarPathfinder().plan(grid, (0, 0), (4, 4)) == (math.inf, [])


def test_occupied_target_can_be_reached():
    data = np.full((5, 5), FREE)
    data[2, 2] = OCCUPIED
    grid = OccupancyGrid(data)

    path = a_star(grid, (0, 2), (2, 2))

    assert path[-1] == (2, 2)
    assert all(grid.is_free(x, y) for x, y in path[:-1])


def test_out_of_bounds_target():
    assert a_star(empty_grid(), (0, 0), (10, 0)) is None


def test_octile_distance():
    assert octile_distance((0, 0), (3, 4)) == 1 + 3 * math.sqrt(2)
    assert octile_distance((2, 2), (2, 7)) == 5


def test_pathfinder_distance_matches_path():
    distance, path = AStarPathfinder().plan(empty_grid(), (0, 0), (3, 5))
    assert math.isclose(distance, octile_distance((0, 0), (3, 5)))
    assert math.isclose(distance, path_length(path))
