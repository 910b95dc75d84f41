"""
Errors raised while planning a coverage path.

Every error aborts the whole planning request, no partial path is returned.
"""


class CoveragePlanningError(Exception):
    """Base class for all planning failures"""


class EmptyMapError(CoveragePlanningError):
    """The map has no free pixel, so there is nothing to cover"""


class DegenerateCellError(CoveragePlanningError):
    """A cell did not produce a single sweep line"""

    def __init__(self, cell_index, message=None):
        self.cell_index = cell_index
        super().__init__(
            message or f"Cell {cell_index} does not produce any sweep line"
        )


class OrderingFailure(CoveragePlanningError):
    """The TSP solver could not produce a valid visiting order"""


class StitchingFailure(CoveragePlanningError):
    """The pathfinder could not connect two waypoints"""

    def __init__(self, start, goal):
        self.start = start
        self.goal = goal
        super().__init__(f"No path from {start} to {goal}")


class UnreachableStartError(CoveragePlanningError):
    """The start position is not inside any cell"""


class PoseMappingFailure(CoveragePlanningError):
    """No free robot position exists for a field of view pose"""
