"""Plan a coverage path on a sample room and plot it"""

import argparse
import logging

import numpy as np

from boustrophedon_explorer.grid import FREE, OCCUPIED, OccupancyGrid
from boustrophedon_explorer.planner import PlannerConfig, plan_exploration_path

logger = logging.getLogger(__name__)


def sample_map(resolution=0.05):
    """
    Generate a sample occupancy grid

    Output:
        OccupancyGrid of a walled room with a few obstacles
    """
    h = 40  # height
    w = 60  # width
    room = np.full((h, w), FREE, dtype=np.int16)
    # Add obstacles
    room[0:h, 0] = OCCUPIED  # left wall
    room[0:h, w - 1] = OCCUPIED  # right wall
    room[0, 1 : w - 1] = OCCUPIED  # top wall
    room[h - 1, 1 : w - 1] = OCCUPIED  # bottom wall
    room[10:22, 20:22] = OCCUPIED  # obstacle 1
    room[22:24, 10:30] = OCCUPIED  # obstacle 2
    room[36:38, 1:20] = OCCUPIED  # obstacle 3
    room[10:22, 42:58] = OCCUPIED  # obstacle 4
    return OccupancyGrid(room, resolution)


def main(args=None):
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--fov-radius", type=float, default=0.15, help="meters")
    parser.add_argument("--path-eps", type=int, default=2, help="pixels")
    parser.add_argument("--no-plot", action="store_true")
    options = parser.parse_args(args)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    grid = sample_map()
    config = PlannerConfig(
        fov_radius=options.fov_radius,
        path_eps=options.path_eps,
        plan_for_footprint=True,
    )
    result = plan_exploration_path(grid, (2, 2), config)
    logger.info(
        "Num Cells: %d, %d poses in the robot path",
        len(result.cells),
        len(result.path),
    )

    if not options.no_plot:
        from boustrophedon_explorer.plotting import plot_paths

        plot_paths(result)
    return result


if __name__ == "__main__":
    main()
