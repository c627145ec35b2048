from dataclasses import dataclass, field
from typing import List, Tuple


@dataclass
class PlotParams:
    values: List[float]
    label: str
    xlabel: str
    ylabel: str
    title: str
    output_path: str
    figsize: Tuple[float, float] = field(default=(4, 4))
    marker: str = "o"
    grid : bool = True
