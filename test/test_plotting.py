import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402

from boustrophedon_explorer import demo  # noqa: E402
from boustrophedon_explorer.plotting import plot_plan  # noqa: E402


def test_demo_plans_sample_room():
    result = demo.main(["--no-plot"])

    assert len(result.cells) > 1
    assert sorted(result.visit_order) == list(range(len(result.cells)))
    assert len(result.path) == len(result.fov_waypoints) > 0


def test_plot_plan_draws_on_given_axes():
    result = demo.main(["--no-plot"])
    _, ax = plt.subplots()

    returned = plot_plan(result.cell_map, result.cells, result.fov_waypoints, ax=ax)

    assert returned is ax
    assert len(ax.images) == 1
    # one outline and one center per cell, then the path and its start
    assert len(ax.lines) == 2 * len(result.cells) + 2
    plt.close("all")
