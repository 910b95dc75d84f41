import math

import numpy as np
import pytest

from boustrophedon_explorer.coverage_path import Waypoint
from boustrophedon_explorer.errors import PoseMappingFailure
from boustrophedon_explorer.grid import FREE, OCCUPIED, OccupancyGrid
from boustrophedon_explorer.pose_mapping import (
    PathFrame,
    circle_points,
    fov_path,
    map_path,
    robot_position,
)


def free_grid(size=20):
    return OccupancyGrid(np.full((size, size), FREE))


def test_footprint_mode_is_plain_conversion():
    waypoints = [Waypoint(3, 7, 0.5), Waypoint(4, 7, -1.0)]
    path = map_path(waypoints, True, 0.05, (-1.2, 3.4), (0.3, 0.0), None)

    assert path.frame is PathFrame.ROBOT_BODY
    assert len(path) == 2
    assert path[0] == Waypoint(3 * 0.05 + -1.2, 7 * 0.05 + 3.4, 0.5)
    assert path[1] == Waypoint(4 * 0.05 + -1.2, 7 * 0.05 + 3.4, -1.0)


def test_fov_path_frame():
    path = fov_path([Waypoint(2, 2, 0.0)], 0.5, (1.0, 1.0))
    assert path.frame is PathFrame.FOV_CENTER
    assert list(path) == [Waypoint(2.0, 2.0, 0.0)]


def test_direct_offset():
    grid = free_grid()
    path = map_path([Waypoint(5, 5, 0.0)], False, 0.5, (0.0, 0.0), (1.0, 0.0), grid)

    # 1 m is 2 pixels behind the field of view center
    assert path[0] == Waypoint(1.5, 2.5, 0.0)


def test_fallback_on_circle():
    data = np.full((20, 20), FREE)
    data[:, 8] = OCCUPIED
    grid = OccupancyGrid(data)

    path = map_path(
        [Waypoint(10, 10, 1.0)], False, 1.0, (0.0, 0.0), (2.0, 0.0), grid, (12, 10)
    )

    assert path[0].x == pytest.approx(12.0)
    assert path[0].y == pytest.approx(10.0)
    assert path[0].theta == 1.0


def test_fallback_point_lies_on_circle():
    data = np.full((20, 20), FREE)
    data[:, 6:9] = OCCUPIED
    grid = OccupancyGrid(data)

    x, y = robot_position(grid, (10, 10), (3, 0), (10, 4))

    assert math.dist((x, y), (10, 10)) == pytest.approx(3)
    assert grid.is_free(int(round(x)), int(round(y)))
    # the free point nearest to the previous position is picked
    assert y < 10


def test_no_free_position():
    grid = OccupancyGrid(np.full((10, 10), OCCUPIED))
    with pytest.raises(PoseMappingFailure):
        map_path([Waypoint(5, 5, 0.0)], False, 1.0, (0.0, 0.0), (1.0, 0.0), grid)


def test_circle_points():
    points = circle_points((0, 0), 0.5)
    assert len(points) == 8
    assert all(math.hypot(x, y) == pytest.approx(0.5) for x, y in points)
    assert len(circle_points((0, 0), 10)) == math.ceil(2 * math.pi * 10)
