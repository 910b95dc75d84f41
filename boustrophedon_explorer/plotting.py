"""Plot a decomposed map, its cells and a coverage path"""

import matplotlib.pyplot as plt

from boustrophedon_explorer.grid import FREE


def plot_plan(cell_map, cells, waypoints=None, ax=None):
    """
    Draw the cell map with the cell outlines, centers and the path on top

    Args:
        cell_map: CellMap (or anything with a 2D `data` array)
        cells: list of Cell
        waypoints: optional list of Waypoint in pixel coordinates
        ax: matplotlib Axes to draw on, a new figure is made when None

    Returns:
        the matplotlib Axes
    """
    if ax is None:
        _, ax = plt.subplots(figsize=(10, 6))

    ax.imshow(cell_map.data == FREE, cmap="gray", origin="upper")

    # Outline and number each cell
    for index, cell in enumerate(cells):
        xs = list(cell.polygon[:, 0]) + [cell.polygon[0, 0]]
        ys = list(cell.polygon[:, 1]) + [cell.polygon[0, 1]]
        ax.plot(xs, ys, linewidth=1)
        ax.plot(cell.center[0], cell.center[1], "k.")
        ax.annotate(str(index), cell.center, fontsize=8)

    if waypoints:
        ax.plot([p.x for p in waypoints], [p.y for p in waypoints], "r-", linewidth=0.8)
        ax.plot(waypoints[0].x, waypoints[0].y, "go")

    ax.set_title("Boustrophedon Coverage Path")
    ax.set_xlabel("X (pixels)")
    ax.set_ylabel("Y (pixels)")
    return ax


def plot_paths(result):
    """Plot a PlanResult and show the figure"""
    plot_plan(result.cell_map, result.cells, result.fov_waypoints)
    plt.show()
