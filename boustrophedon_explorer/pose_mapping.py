"""
Mapping of the field of view path to the path of the robot body
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from boustrophedon_explorer.coverage_path import Waypoint
from boustrophedon_explorer.errors import PoseMappingFailure


class PathFrame(Enum):
    FOV_CENTER = "fov_center"
    ROBOT_BODY = "robot_body"


@dataclass(frozen=True)
class Path:
    """World frame poses, all of them for the same point of the robot"""

    poses: Tuple[Waypoint, ...]
    frame: PathFrame

    def __len__(self):
        return len(self.poses)

    def __iter__(self):
        return iter(self.poses)

    def __getitem__(self, index):
        return self.poses[index]


def _to_world(x, y, theta, resolution, origin):
    return Waypoint(x * resolution + origin[0], y * resolution + origin[1], theta)


def fov_path(waypoints, resolution, origin):
    """Field of view waypoints (pixels) as a world frame Path"""
    return Path(
        tuple(_to_world(p.x, p.y, p.theta, resolution, origin) for p in waypoints),
        PathFrame.FOV_CENTER,
    )


def _is_free(grid, point):
    return grid.is_free(int(round(point[0])), int(round(point[1])))


def circle_points(center, radius):
    """Points on a circle, spaced about one pixel of arc apart"""
    samples = max(8, int(math.ceil(2 * math.pi * radius)))
    return [
        (
            center[0] + radius * math.cos(2 * math.pi * k / samples),
            center[1] + radius * math.sin(2 * math.pi * k / samples),
        )
        for k in range(samples)
    ]


def robot_position(grid, fov_point, offset, previous):
    """
    Robot pixel position that puts the field of view center on fov_point.

    Args:
        grid: OccupancyGrid
        fov_point: (x, y) field of view center in pixels
        offset: (x, y) vector from robot center to field of view center, pixels
        previous: (x, y) last robot position, used to choose on the fallback circle

    Returns:
        (x, y) robot position in pixels

    Raises:
        PoseMappingFailure: neither the direct position nor any point on the
        circle around the field of view center is free
    """
    candidate = (fov_point[0] - offset[0], fov_point[1] - offset[1])
    if _is_free(grid, candidate):
        return candidate

    # any point on this circle keeps the field of view center reachable
    radius = math.hypot(offset[0], offset[1])
    free_points = [p for p in circle_points(fov_point, radius) if _is_free(grid, p)]
    if not free_points:
        raise PoseMappingFailure(
            f"No free robot position around field of view point {tuple(fov_point)}"
        )
    return min(free_points, key=lambda p: math.dist(p, previous))


def map_path(
    fov_waypoints,
    plan_for_footprint,
    resolution,
    origin,
    robot_to_fov_vector,
    grid,
    start_position=None,
):
    """
    Turn the field of view path into the robot path.

    Args:
        fov_waypoints: list of Waypoint, field of view center in pixels
        plan_for_footprint: the field of view path already is the robot path
        resolution: meters per pixel
        origin: world (x, y) of pixel (0, 0)
        robot_to_fov_vector: (x, y) from robot center to field of view center,
            meters
        grid: OccupancyGrid the robot positions have to be free in
        start_position: (x, y) pixel where the robot starts

    Returns:
        Path of robot poses in world coordinates
    """
    if plan_for_footprint:
        return Path(
            tuple(
                _to_world(p.x, p.y, p.theta, resolution, origin) for p in fov_waypoints
            ),
            PathFrame.ROBOT_BODY,
        )

    offset = (robot_to_fov_vector[0] / resolution, robot_to_fov_vector[1] / resolution)
    if start_position is not None:
        previous = tuple(start_position)
    elif fov_waypoints:
        previous = (fov_waypoints[0].x, fov_waypoints[0].y)
    else:
        previous = (0.0, 0.0)

    poses = []
    for pose in fov_waypoints:
        x, y = robot_position(grid, (pose.x, pose.y), offset, previous)
        poses.append(_to_world(x, y, pose.theta, resolution, origin))
        previous = (x, y)

    return Path(tuple(poses), PathFrame.ROBOT_BODY)
