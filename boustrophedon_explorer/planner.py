"""
Room exploration planning: decomposition, cell order, coverage path and robot
path in one call.
"""

import logging
import math
import time
from dataclasses import dataclass, fields
from typing import List, Tuple

from boustrophedon_explorer.a_star import AStarPathfinder
from boustrophedon_explorer.b_decomp import (
    CellMap,
    cell_centers,
    decompose,
    extract_cells,
)
from boustrophedon_explorer.coverage_path import Waypoint, generate_coverage_path
from boustrophedon_explorer.errors import EmptyMapError
from boustrophedon_explorer.grid import inflate_obstacles
from boustrophedon_explorer.pose_mapping import Path, map_path
from boustrophedon_explorer.visit_order import (
    NearestNeighbourTSPSolver,
    plan_visit_order,
)

logger = logging.getLogger(__name__)


@dataclass
class PlannerConfig:
    fov_radius: float = 0.5  # radius of the field of view (m)
    path_eps: int = 2  # distance between two waypoints (pixels)
    plan_for_footprint: bool = False  # plan the robot path directly
    robot_to_fov_vector: Tuple[float, float] = (0.0, 0.0)  # robot center to fov (m)
    inflation_diameter: float = 0.0  # grow obstacles before planning (m)

    @classmethod
    def from_dict(cls, params):
        """Build a config from a parameter mapping, rejecting unknown keys"""
        known = {f.name for f in fields(cls)}
        unknown = set(params) - known
        if unknown:
            raise ValueError(f"Unknown planner parameters: {sorted(unknown)}")
        config = cls(**params)
        config.robot_to_fov_vector = tuple(config.robot_to_fov_vector)
        return config

    def fov_radius_pixels(self, resolution):
        """Field of view radius rounded down to whole pixels, at least one"""
        return max(1, int(math.floor(self.fov_radius / resolution + 1e-9)))


@dataclass
class PlanResult:
    path: Path  # robot poses in world coordinates
    fov_waypoints: List[Waypoint]  # field of view center path in pixels
    cells: list
    visit_order: List[int]
    cell_map: CellMap


def plan_exploration_path(
    grid, start_position, config=None, tsp_solver=None, pathfinder=None
):
    """
    Plan a path that sweeps the field of view over every free part of the map

    Args:
        grid: OccupancyGrid of the room
        start_position: (x, y) pixel the robot starts at
        config: PlannerConfig, defaults are used when None
        tsp_solver: object with solve(grid, points, start_index)
        pathfinder: object with plan(grid, start, goal) -> (distance, points)

    Returns:
        PlanResult

    Raises:
        CoveragePlanningError: any stage failed, no partial path is returned
    """
    config = config or PlannerConfig()
    pathfinder = pathfinder or AStarPathfinder()
    tsp_solver = tsp_solver or NearestNeighbourTSPSolver(pathfinder)
    start_position = (int(start_position[0]), int(start_position[1]))

    if config.inflation_diameter > 0:
        grid = inflate_obstacles(grid, config.inflation_diameter)

    logger.info("Planning the boustrophedon path through the room")
    started = time.perf_counter()

    cell_map = decompose(grid)
    cells = extract_cells(cell_map)
    if not cells:
        raise EmptyMapError("The decomposition did not leave any free cell")
    logger.info(
        "Found %d cells from %d critical points",
        len(cells),
        len(cell_map.critical_points),
    )

    centers = cell_centers(cells)
    visit_order = plan_visit_order(cells, centers, start_position, grid, tsp_solver)
    logger.info("Visiting order of the cells: %s", visit_order)

    fov_radius = config.fov_radius_pixels(grid.resolution)
    fov_waypoints = generate_coverage_path(
        grid,
        cells,
        visit_order,
        start_position,
        fov_radius,
        config.path_eps,
        pathfinder,
    )
    logger.info("Found the cell paths, %d waypoints", len(fov_waypoints))

    if not config.plan_for_footprint:
        logger.info("Mapping the field of view path to the robot path")
    path = map_path(
        fov_waypoints,
        config.plan_for_footprint,
        grid.resolution,
        grid.origin,
        config.robot_to_fov_vector,
        grid,
        start_position,
    )
    logger.debug("Planning took %.3f s", time.perf_counter() - started)

    return PlanResult(path, fov_waypoints, cells, visit_order, cell_map)
