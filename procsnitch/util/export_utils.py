import json
from pathlib import Path

import pandas as pd
from tabulate import tabulate

from procsnitch.models.metric_series import MetricSeriesStore
from procsnitch.models.session_outcome import SessionResult
from procsnitch.util.cal_utils import summarize_store


def series_to_frame(store: MetricSeriesStore) -> pd.DataFrame:
    """One column per label, one row per tick"""
    frame = pd.DataFrame(store.to_dict(), columns=store.labels)
    frame.index.name = "tick"
    return frame


def export_series_csv(store: MetricSeriesStore, path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    series_to_frame(store).to_csv(path)
    return path


def export_session_json(result: SessionResult, path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(result.to_dict(), f, indent=2)
    return path


def format_summary_table(store: MetricSeriesStore) -> str:
    """Render min/avg/p95/max per series for the console"""
    headers = ["Series", "Samples", "Min", "Avg", "P95", "Max"]
    rows = []
    summaries = summarize_store(store)
    for series in store:
        summary = summaries[series.label]
        rows.append([
            series.label,
            len(series),
            f"{summary.min:.2f}",
            f"{summary.avg:.2f}",
            f"{summary.p95:.2f}",
            f"{summary.max:.2f}",
        ])
    return tabulate(rows, headers=headers, tablefmt="github", stralign="left", numalign="right")
