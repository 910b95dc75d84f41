"""
Occupancy grid container and the helpers used to prepare a map for planning
"""

import math
from dataclasses import dataclass, field
from typing import Tuple

import numpy as np

FREE = 0
OCCUPIED = 100
UNKNOWN = -1


@dataclass(frozen=True)
class OccupancyGrid:
    """
    Read-only binary occupancy grid.

    Attributes:
        data: 2D numpy array indexed [row, col] (= [y, x]), FREE or OCCUPIED
        resolution: meters per cell
        origin: world (x, y) of cell (0, 0)
    """

    data: np.ndarray
    resolution: float = 1.0
    origin: Tuple[float, float] = field(default=(0.0, 0.0))

    def __post_init__(self):
        data = np.array(self.data, copy=True)
        if data.ndim != 2:
            raise ValueError(f"Occupancy grid must be 2D, got shape {data.shape}")
        if self.resolution <= 0:
            raise ValueError("Grid resolution must be positive")
        # Anything that is not explicitly free is an obstacle
        data = np.where(data == FREE, FREE, OCCUPIED).astype(np.int16)
        data.flags.writeable = False
        object.__setattr__(self, "data", data)
        object.__setattr__(
            self, "origin", (float(self.origin[0]), float(self.origin[1]))
        )

    @classmethod
    def from_values(
        cls, values, width, height, resolution, origin=(0.0, 0.0), unknown_is_free=False
    ):
        """
        Build a grid from flat ROS style occupancy values.

        Args:
            values: row-major sequence of length width * height, -1 for unknown
                and 0..100 for the occupancy probability
            width, height: grid size in cells
            resolution: meters per cell
            origin: world (x, y) of cell (0, 0)
            unknown_is_free: treat unknown cells as free instead of occupied

        Returns:
            OccupancyGrid where only 100 (and unknown, by default) is an obstacle
        """
        raw = np.asarray(values).reshape((height, width))
        occupied = raw == OCCUPIED
        if not unknown_is_free:
            occupied |= raw < 0
        return cls(np.where(occupied, OCCUPIED, FREE), resolution, origin)

    @classmethod
    def from_image(cls, image, resolution=1.0, origin=(0.0, 0.0)):
        """Build a grid from a 0/255 room image where white (255) is free"""
        image = np.asarray(image)
        return cls(np.where(image == 255, FREE, OCCUPIED), resolution, origin)

    @property
    def height(self):
        return self.data.shape[0]

    @property
    def width(self):
        return self.data.shape[1]

    def in_bounds(self, x, y):
        return 0 <= x < self.width and 0 <= y < self.height

    def is_free(self, x, y):
        """True if pixel (x, y) is inside the grid and not an obstacle"""
        return self.in_bounds(x, y) and self.data[y, x] == FREE

    def free_mask(self):
        return self.data == FREE

    def to_world(self, x, y):
        """Pixel coordinates to world coordinates"""
        return (
            x * self.resolution + self.origin[0],
            y * self.resolution + self.origin[1],
        )

    def to_pixel(self, x, y):
        """World coordinates to the pixel that contains them"""
        col = int(math.floor((x - self.origin[0]) / self.resolution))
        row = int(math.floor((y - self.origin[1]) / self.resolution))
        return (col, row)


def inflate_obstacles(grid, robot_diameter):
    """
    Simple obstacle inflation using a square robot footprint.

    Args:
        grid: OccupancyGrid
        robot_diameter: meters

    Returns:
        New OccupancyGrid with inflated obstacles.
    """
    inflated = np.array(grid.data, copy=True)

    # robot radius in cells
    r = int(math.ceil((robot_diameter / 2.0) / grid.resolution))
    if r <= 0:
        return grid

    for row, col in np.argwhere(grid.data == OCCUPIED):
        r0 = max(0, row - r)
        r1 = min(grid.height, row + r + 1)
        c0 = max(0, col - r)
        c1 = min(grid.width, col + r + 1)

        inflated[r0:r1, c0:c1] = OCCUPIED

    return OccupancyGrid(inflated, grid.resolution, grid.origin)
