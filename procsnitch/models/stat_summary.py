import dataclasses


@dataclasses.dataclass
class StatSummary:
    """Statistical summary of a list of numeric values"""
    min: float
    max: float
    p50: float
    p95: float
    p99: float
    avg: float

    def to_summary_dict(self):
        """Convert to dictionary for JSON serialization"""
        return dataclasses.asdict(self)
