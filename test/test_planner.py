import numpy as np
import pytest

from boustrophedon_explorer import (
    EmptyMapError,
    OccupancyGrid,
    PlannerConfig,
    UnreachableStartError,
    plan_exploration_path,
)
from boustrophedon_explorer.a_star import AStarPathfinder
from boustrophedon_explorer.grid import FREE, OCCUPIED
from boustrophedon_explorer.pose_mapping import PathFrame


class CountingPathfinder(AStarPathfinder):
    def __init__(self):
        super().__init__()
        self.calls = 0

    def plan(self, grid, start, goal):
        self.calls += 1
        return super().plan(grid, start, goal)


def pillar_room():
    data = np.full((12, 12), FREE)
    data[0, :] = data[-1, :] = data[:, 0] = data[:, -1] = OCCUPIED
    data[4:8, 4:8] = OCCUPIED
    return OccupancyGrid(data)


def pixel_config(**kwargs):
    params = dict(fov_radius=1.0, path_eps=1, plan_for_footprint=True)
    params.update(kwargs)
    return PlannerConfig(**params)


def test_free_room_footprint():
    grid = OccupancyGrid(np.full((10, 10), FREE))

    result = plan_exploration_path(grid, (0, 0), pixel_config())

    assert len(result.cells) == 1
    assert result.visit_order == [0]
    assert len(result.path) == 72
    assert result.path.frame is PathFrame.ROBOT_BODY
    assert (result.path[0].x, result.path[0].y) == (1.0, 1.0)


def test_pillar_room():
    grid = pillar_room()

    result = plan_exploration_path(grid, (2, 2), pixel_config())

    assert len(result.cells) == 4
    assert result.cells[result.visit_order[0]].contains((2, 2))
    assert sorted(result.visit_order) == [0, 1, 2, 3]
    assert all(grid.is_free(int(p.x), int(p.y)) for p in result.path)


def test_field_of_view_mode_keeps_one_pose_per_waypoint():
    grid = pillar_room()
    config = pixel_config(plan_for_footprint=False, robot_to_fov_vector=(0.0, 0.0))

    result = plan_exploration_path(grid, (2, 2), config)

    assert len(result.path) == len(result.fov_waypoints)
    assert result.path.frame is PathFrame.ROBOT_BODY
    assert all(grid.is_free(int(round(p.x)), int(round(p.y))) for p in result.path)


def test_empty_map():
    grid = OccupancyGrid(np.full((6, 6), OCCUPIED))
    with pytest.raises(EmptyMapError):
        plan_exploration_path(grid, (2, 2), pixel_config())


def test_start_outside_free_space():
    with pytest.raises(UnreachableStartError):
        plan_exploration_path(pillar_room(), (0, 0), pixel_config())


def test_injected_pathfinder_is_used():
    pathfinder = CountingPathfinder()
    plan_exploration_path(pillar_room(), (2, 2), pixel_config(), pathfinder=pathfinder)
    assert pathfinder.calls > 0


def test_inflation_shrinks_free_space():
    data = np.full((20, 20), FREE)
    data[10, 10] = OCCUPIED
    grid = OccupancyGrid(data)

    result = plan_exploration_path(
        grid, (2, 2), pixel_config(inflation_diameter=2.0)
    )

    assert result.cell_map.data[9:12, 9:12].tolist() == [[OCCUPIED] * 3] * 3


def test_config_from_dict():
    config = PlannerConfig.from_dict(
        {"fov_radius": 0.25, "robot_to_fov_vector": [0.1, 0.0]}
    )
    assert config.fov_radius == 0.25
    assert config.robot_to_fov_vector == (0.1, 0.0)
    assert config.path_eps == 2

    with pytest.raises(ValueError):
        PlannerConfig.from_dict({"fov_radius": 0.25, "speed": 1.0})


def test_fov_radius_pixels():
    assert PlannerConfig(fov_radius=1.0).fov_radius_pixels(0.25) == 4
    assert PlannerConfig(fov_radius=0.15).fov_radius_pixels(0.05) == 3
    assert PlannerConfig(fov_radius=0.01).fov_radius_pixels(0.05) == 1


def test_start_on_dividing_wall():
    grid = pillar_room()
    assert grid.is_free(2, 4)

    result = plan_exploration_path(grid, (2, 4), pixel_config())

    first_cell = result.cells[result.visit_order[0]]
    assert first_cell.distance((2, 4)) == pytest.approx(-1.0)
    assert sorted(result.visit_order) == [0, 1, 2, 3]
    assert len(result.path) > 0
