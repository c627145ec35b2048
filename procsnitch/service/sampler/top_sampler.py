"""
Top-backed sampler

Runs `top` in batch mode for a single iteration, scoped to the sampled pid,
and reads CPU, memory share and VIRT/RES/SHR from the matching report line:

      PID USER      PR  NI    VIRT    RES    SHR S  %CPU  %MEM     TIME+ COMMAND
    12345 alice     20   0  2.1g   512m   32m S  12.5   3.2   0:01.23 server
"""
import logging
import re
import subprocess
from typing import List, Optional, Sequence

from procsnitch.exceptions import MetricParseError, SamplerToolError
from procsnitch.models.metric_snapshot import MetricSnapshot
from procsnitch.service.sampler.sampler import Sampler
from procsnitch.util.unit_utils import to_mb

TOP_CMD = "top"

VIRT_FIELD = 4
RES_FIELD = 5
SHR_FIELD = 6
CPU_FIELD = 8
MEM_FIELD = 9


def find_report_line(report: str, pid: int) -> Optional[str]:
    """Return the line of a top report that belongs to pid, if any."""
    match = re.search(rf"(?m)^\s*{pid}\s.*$", report)
    if match is None:
        return None
    return match.group(0)


def _parse_percent(fields: List[str], index: int, name: str) -> float:
    try:
        return float(fields[index])
    except ValueError as e:
        raise MetricParseError(f"{name} field is not a number: {fields[index]!r}") from e


def parse_report_line(line: str) -> MetricSnapshot:
    """
    Convert one top report line into a snapshot.

    Raises:
        MetricParseError: If the line is too short or a value is not numeric
    """
    fields = line.split()
    if len(fields) <= MEM_FIELD:
        raise MetricParseError(f"Report line has {len(fields)} fields, expected at least {MEM_FIELD + 1}: {line!r}")
    return MetricSnapshot(
        cpu_percent=_parse_percent(fields, CPU_FIELD, "%CPU"),
        mem_percent=_parse_percent(fields, MEM_FIELD, "%MEM"),
        virt_mb=to_mb(fields[VIRT_FIELD]),
        res_mb=to_mb(fields[RES_FIELD]),
        shr_mb=to_mb(fields[SHR_FIELD]),
    )


def parse_top_report(report: str, pid: int) -> Optional[MetricSnapshot]:
    """Snapshot for pid from a full top report, or None when pid is not listed."""
    line = find_report_line(report, pid)
    if line is None:
        return None
    return parse_report_line(line)


class TopSampler(Sampler):

    labels = ("CPU", "MEM", "VIRT (m)", "RES (m)", "SHR (m)")

    def __init__(self, cmd: str = TOP_CMD, logger: Optional[logging.Logger] = None) -> None:
        super().__init__(logger=logger)
        self.cmd = cmd

    def build_command(self, pid: int) -> Sequence[str]:
        return [self.cmd, "-b", "-n", "1", "-p", str(pid)]

    def run_tool(self, pid: int) -> str:
        """
        Run top once for pid and return its report.

        Raises:
            SamplerToolError: If top cannot be executed or exits with an error
        """
        try:
            result = subprocess.run(
                self.build_command(pid),
                check=True,
                capture_output=True,
                text=True,
            )
        except subprocess.CalledProcessError as e:
            raise SamplerToolError(f"`{self.cmd}` failed with return code {e.returncode}: {e.stderr}") from e
        except OSError as e:
            raise SamplerToolError(f"Failed to execute `{self.cmd}`: {e}") from e
        return result.stdout

    def probe(self, pid: int) -> Optional[MetricSnapshot]:
        """Take a single sample of the process"""
        report = self.run_tool(pid)
        snapshot = parse_top_report(report, pid)
        if snapshot is None:
            self.logger.info(f"No report line for pid {pid}, skipping sample")
            return None
        self.logger.debug(f"Sampled pid {pid}: {snapshot}")
        return snapshot
