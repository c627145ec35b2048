"""Models for sampled metrics and session outcomes."""

from .metric_series import MetricSeries, MetricSeriesStore
from .metric_snapshot import MetricSnapshot
from .session_outcome import SessionOutcome, SessionResult

__all__ = ["MetricSeries", "MetricSeriesStore", "MetricSnapshot", "SessionOutcome", "SessionResult"]
