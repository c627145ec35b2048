"""
Chart rendering for collected series.

One PNG line chart per series label, x axis in ticks of the sampling
interval.
"""
from pathlib import Path
from typing import List

import matplotlib.pyplot as plt
import numpy as np

from procsnitch.models.metric_series import MetricSeriesStore
from procsnitch.models.plot_params import PlotParams
from procsnitch.util.duration_utils import format_duration
from procsnitch.util.file_utils import safe_file_part
from procsnitch.util.log_config import setup_logger

logger = setup_logger(__name__)


def plot_line_chart(params: PlotParams) -> None:
    x = np.arange(len(params.values))
    fig, ax = plt.subplots(figsize=params.figsize)

    ax.plot(x, params.values, marker=params.marker, label=params.label)

    ax.set_title(params.title)
    ax.set_xlabel(params.xlabel)
    ax.set_ylabel(params.ylabel)
    ax.legend(loc="best")

    if params.grid:
        ax.grid(True, alpha=0.3)

    fig.tight_layout()
    fig.savefig(params.output_path)
    plt.close(fig)


def plot_series(store: MetricSeriesStore, sampling: float, output_dir: Path, prefix: str) -> List[Path]:
    """
    Write one chart per series.

    Args:
        store: Collected series
        sampling: Sampling interval in seconds, shown on the x axis
        output_dir: Directory for the PNG files
        prefix: File name prefix, typically the command's base name

    Returns:
        Paths of the written charts, in label order
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    written = []
    for series in store:
        output_path = output_dir / f"{safe_file_part(prefix)}-{safe_file_part(series.label)}.png"
        plot_line_chart(PlotParams(
            values=series.values,
            label=series.label,
            xlabel=f"tick per {format_duration(sampling)}",
            ylabel=series.label,
            title=f"{series.label} graph",
            output_path=str(output_path),
        ))
        logger.debug(f"Chart written to {output_path}")
        written.append(output_path)
    return written
