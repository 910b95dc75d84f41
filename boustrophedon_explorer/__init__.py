"""Boustrophedon room exploration: full coverage paths for a field of view"""

from boustrophedon_explorer.errors import (
    CoveragePlanningError,
    DegenerateCellError,
    EmptyMapError,
    OrderingFailure,
    PoseMappingFailure,
    StitchingFailure,
    UnreachableStartError,
)
from boustrophedon_explorer.grid import OccupancyGrid, inflate_obstacles
from boustrophedon_explorer.planner import (
    PlannerConfig,
    PlanResult,
    plan_exploration_path,
)
