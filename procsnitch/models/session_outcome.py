from dataclasses import dataclass
from typing import Dict, Optional

from procsnitch.consts.ProcessState import ProcessState
from procsnitch.models.metric_series import MetricSeriesStore


@dataclass
class SessionOutcome:
    """How the supervised process ended"""
    pid: int
    state: ProcessState
    returncode: Optional[int]
    elapsed: float
    kill_attempts: int = 0

    @property
    def killed(self) -> bool:
        return self.state == ProcessState.KILLED

    def to_dict(self) -> Dict:
        """Convert to dictionary for JSON serialization"""
        return {
            'pid': self.pid,
            'state': self.state.value,
            'returncode': self.returncode,
            'elapsed': self.elapsed,
            'kill_attempts': self.kill_attempts,
        }


@dataclass
class SessionResult:
    """Outcome of one session together with the series it collected"""
    outcome: SessionOutcome
    series: MetricSeriesStore

    def to_dict(self) -> Dict:
        return {
            'outcome': self.outcome.to_dict(),
            'samples_count': len(self.series),
            'series': self.series.to_dict(),
        }
