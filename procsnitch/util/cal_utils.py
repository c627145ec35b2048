from typing import Dict

from procsnitch.models.metric_series import MetricSeriesStore
from procsnitch.models.stat_summary import StatSummary


def calculate_stat_summary(values: list[float]) -> StatSummary:
    """Calculate statistical summary from a list of numeric values"""
    if not values:
        return StatSummary(min=0, max=0, p50=0, p95=0, p99=0, avg=0)

    sorted_values = sorted(values)
    n = len(sorted_values)

    return StatSummary(
        min=sorted_values[0],
        max=sorted_values[-1],
        p50=sorted_values[int(n * 0.50)],
        p95=sorted_values[int(n * 0.95)] if n > 1 else sorted_values[0],
        p99=sorted_values[int(n * 0.99)] if n > 1 else sorted_values[0],
        avg=sum(sorted_values) / n
    )


def summarize_store(store: MetricSeriesStore) -> Dict[str, StatSummary]:
    """One StatSummary per series label"""
    return {series.label: calculate_stat_summary(series.values) for series in store}
