"""Shared test fixtures for procsnitch."""

import logging
import sys
import threading
import time
from typing import Callable, List, Optional

import matplotlib
import pytest

matplotlib.use("Agg")

from procsnitch.models.metric_snapshot import MetricSnapshot  # noqa: E402
from procsnitch.service.runner.process_handle import ProcessHandle  # noqa: E402
from procsnitch.service.runner.runner import CommandRunner, Runner  # noqa: E402
from procsnitch.service.sampler.sampler import Sampler  # noqa: E402
from procsnitch.service.ticker.ticker import Ticker  # noqa: E402

TOP_HEADER = """\
top - 12:00:01 up 1 day,  2:03,  1 user,  load average: 0.00, 0.01, 0.05
Tasks:   1 total,   0 running,   1 sleeping,   0 stopped,   0 zombie
%Cpu(s):  1.0 us,  0.5 sy,  0.0 ni, 98.5 id,  0.0 wa,  0.0 hi,  0.0 si,  0.0 st
MiB Mem :  15928.3 total,   8123.4 free,   4021.7 used,   3783.2 buff/cache
MiB Swap:   2048.0 total,   2048.0 free,      0.0 used.  11512.9 avail Mem

    PID USER      PR  NI    VIRT    RES    SHR S  %CPU  %MEM     TIME+ COMMAND
"""


def make_top_report(pid: int, virt="2097152", res="524288", shr="32768", cpu="12.5", mem="3.2") -> str:
    """Build a `top -b -n 1 -p <pid>` report with a single process line."""
    line = f"{pid:>7} alice     20   0 {virt:>7} {res:>6} {shr:>6} S {cpu:>5} {mem:>5}   0:01.23 server"
    return TOP_HEADER + line + "\n"


def make_snapshot(value: float = 1.0) -> MetricSnapshot:
    return MetricSnapshot(
        cpu_percent=value,
        mem_percent=value,
        virt_mb=value,
        res_mb=value,
        shr_mb=value,
    )


def python_cmd(code: str) -> CommandRunner:
    """Runner launching the current interpreter with an inline script."""
    return CommandRunner(command=sys.executable, arguments=["-c", code])


class ManualTicker(Ticker):
    """Ticker whose ticks are fired by the test instead of a timer thread."""

    def __init__(self, interval: float = 1.0):
        super().__init__(interval)

    def start(self) -> None:
        pass

    def fire(self) -> None:
        self._queue.put_nowait(time.monotonic())
        self.ticks += 1


class FakeSampler(Sampler):
    """Sampler returning scripted snapshots.

    `script` is called with the tick number (starting at 1) and returns a
    snapshot, None to skip, or raises.
    """

    labels = ("CPU", "MEM", "VIRT (m)", "RES (m)", "SHR (m)")

    def __init__(self, script: Optional[Callable[[int], Optional[MetricSnapshot]]] = None, logger=None):
        super().__init__(logger=logger)
        self.script = script or (lambda n: make_snapshot(float(n)))
        self.probes = 0
        self.stop_calls = 0
        self.ticker_stopped_at_stop: Optional[bool] = None
        self.order: Optional[List[str]] = None

    def probe(self, pid: int) -> Optional[MetricSnapshot]:
        self.probes += 1
        return self.script(self.probes)

    def stop(self) -> None:
        self.stop_calls += 1
        if self._ticker is not None and self.ticker_stopped_at_stop is None:
            self.ticker_stopped_at_stop = self._ticker.stopped
        if self.order is not None:
            self.order.append("sampler.stop")
        super().stop()


class FakeHandle(ProcessHandle):
    """Process handle that exits when killed, or when `exit()` is called."""

    def __init__(self, pid: int = 4242, kill_error: Optional[OSError] = None, order: Optional[List[str]] = None):
        self._pid = pid
        self.kill_error = kill_error
        self.kill_calls = 0
        self.returncode: Optional[int] = None
        self.order = order if order is not None else []
        self._exited = threading.Event()

    @property
    def pid(self) -> int:
        return self._pid

    def exit(self, returncode: int) -> None:
        self.returncode = returncode
        self._exited.set()

    def wait(self) -> Optional[int]:
        self._exited.wait()
        self.order.append("reaped")
        return self.returncode

    def kill(self) -> None:
        self.kill_calls += 1
        self.order.append("kill")
        if self.kill_error is not None:
            raise self.kill_error
        self.exit(-9)


class FakeRunner(Runner):

    def __init__(self, handle: ProcessHandle):
        self.handle = handle
        self.after_run_calls = 0

    @property
    def name(self) -> str:
        return "fake"

    def _run_subprocess(self) -> ProcessHandle:
        return self.handle

    def after_run(self) -> None:
        self.after_run_calls += 1


@pytest.fixture
def test_logger() -> logging.Logger:
    """Logger that propagates so caplog can see supervisor messages."""
    logger = logging.getLogger("procsnitch.tests")
    logger.setLevel(logging.DEBUG)
    logger.propagate = True
    return logger
