# neuro_scoring/plotting.py
from __future__ import annotations

from typing import Optional

import matplotlib.pyplot as plt

from .domain import TaskResult, TaskType
from .interpretation import score_label
from .io import result_series_frame


def plot_result_series(result: TaskResult, show: bool = True, path: Optional[str] = None):
    """
    Plot the charting series of a result.

    Motor: wrist x/y over the trailing frames. Ocular: frame-to-frame gaze
    deltas.

    Args:
        result: Completed TaskResult
        show: Whether to call plt.show()
        path: Optional file path to save the figure

    Returns:
        The matplotlib figure
    """
    df = result_series_frame(result)
    fig, ax = plt.subplots(figsize=(8, 3))
    if result.task_type is TaskType.MOTOR:
        ax.plot(df.index, df["x"], label="x")
        ax.plot(df.index, df["y"], label="y")
        ax.set_ylabel("Wrist position [normalized]")
        ax.legend(loc="upper right")
    else:
        ax.plot(df.index, df["delta"])
        ax.set_ylabel("Gaze delta [normalized]")
    ax.set_xlabel("Frame")
    ax.set_title(
        f"{result.task_type.value} task: score {result.score:.1f} ({score_label(result.score)})"
    )
    fig.tight_layout()
    if path is not None:
        fig.savefig(path)
    if show:
        plt.show()
    return fig
