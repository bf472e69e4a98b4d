import os
from typing import Optional

import matplotlib

matplotlib.use("Agg")  # Must be set before importing pyplot
import matplotlib.pyplot as plt  # noqa: E402

from .models import ActionState  # noqa: E402
from .work_unit import WorkUnit  # noqa: E402


def plot_gantt(
    work_unit: WorkUnit,
    save_path: str,
    title: Optional[str] = None,
    show_legend: Optional[bool] = None,
) -> str:
    """Draw the realised schedule of a simulated work unit and save it.

    Completed actions are drawn solid, actions still holding their machine
    at the end of the simulation are hatched and started actions whose
    machine was freed by another action are faint with a dotted edge.
    Colours follow jobs.

    Returns:
        Path of the written image.
    """
    m = len(work_unit.machines)
    n = len(work_unit.jobs)
    machine_index = {id(machine): i for i, machine in enumerate(work_unit.machines)}

    base_w, base_h = 10, 0.5 * m + 2
    fig, ax = plt.subplots(
        figsize=(min(base_w + n * 0.05, 18), min(base_h, 16)),
        constrained_layout=True,
    )
    cmap = plt.get_cmap("tab20")
    colors = [cmap(i % 20) for i in range(n)]
    for job_id, job in enumerate(work_unit.jobs):
        for operation in job.operations:
            for action in operation.actions:
                if action.state is ActionState.PENDING or action.duration <= 0:
                    continue
                holding = action.state is ActionState.RUNNING and action.holds_machine()
                displaced = action.state is ActionState.RUNNING and not holding
                ax.barh(
                    machine_index[id(action.machine)],
                    action.duration,
                    left=action.start,
                    height=0.8,
                    color=colors[job_id],
                    alpha=0.3 if displaced else 0.5 if holding else 0.85,
                    hatch="//" if holding else None,
                    linestyle=":" if displaced else "-",
                    edgecolor="black",
                    linewidth=0.6,
                )
                ax.text(
                    action.start + action.duration / 2,
                    machine_index[id(action.machine)],
                    f"{job.name}/{operation.name}",
                    ha="center",
                    va="center",
                    fontsize=7,
                )
    if title is None:
        title = f"Gantt Chart - total time = {work_unit.total_time_used()}"
    ax.set_xlabel("Time", fontsize=12)
    ax.set_ylabel("Machine", fontsize=12)
    ax.set_title(title, fontsize=14, fontweight="bold")
    ax.set_yticks(range(m))
    ax.set_yticklabels([machine.name for machine in work_unit.machines])
    ax.grid(True, alpha=0.25, axis="x", linestyle="--", linewidth=0.7)
    ax.set_ylim(-0.5, m - 0.5)

    if show_legend is None:
        show_legend = n <= 40
    if show_legend and n:
        legend_elements = [
            plt.Rectangle(
                (0, 0),
                1,
                1,
                facecolor=colors[i],
                alpha=0.85,
                edgecolor="black",
                label=f"Job {job.name}",
            )
            for i, job in enumerate(work_unit.jobs)
        ]
        ax.legend(
            handles=legend_elements,
            bbox_to_anchor=(1.02, 1),
            loc="upper left",
            borderaxespad=0.0,
            fontsize=8,
            frameon=False,
            ncol=1 if n <= 25 else 2,
        )

    directory = os.path.dirname(save_path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    fig.savefig(save_path, dpi=180)
    plt.close(fig)
    return save_path

