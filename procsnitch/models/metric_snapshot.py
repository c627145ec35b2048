from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class MetricSnapshot:
    """One observation of the sampled process at a single tick"""
    cpu_percent: float
    mem_percent: float
    virt_mb: float
    res_mb: float
    shr_mb: float

    def as_values(self) -> Tuple[float, float, float, float, float]:
        """Values in the order of the tracked series: CPU, MEM, VIRT, RES, SHR"""
        return (self.cpu_percent, self.mem_percent, self.virt_mb, self.res_mb, self.shr_mb)
