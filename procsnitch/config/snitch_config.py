from pathlib import Path
from typing import List, Optional

from procsnitch.consts.SamplerType import SamplerType


class SnitchConfig:
    command: str
    arguments: List[str]
    directory: str
    duration: float  # seconds
    sampling: float  # seconds
    executions: int
    sampler: SamplerType
    output_dir: Path
    process_name: Optional[str]  # attach to a running process instead of launching command
