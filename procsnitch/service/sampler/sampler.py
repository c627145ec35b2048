"""
Sampling capability

A Sampler owns one sampling session: it probes a process once per tick and
appends the result to its series store until it is told to stop. Concrete
samplers only decide how a single probe is taken; the tick/stop loop and
the session lifecycle live here.
"""
import logging
import threading
from abc import ABC, abstractmethod
from typing import Optional, Sequence

from procsnitch.consts.SessionState import SessionState
from procsnitch.exceptions import SamplerStateError
from procsnitch.models.metric_series import MetricSeriesStore
from procsnitch.models.metric_snapshot import MetricSnapshot
from procsnitch.service.ticker.ticker import Ticker
from procsnitch.util.log_config import setup_logger

module_logger = setup_logger(__name__)


class Sampler(ABC):
    """Abstract base Sampler.

    Subclasses implement probe() and declare their series labels. The
    session runs IDLE -> ACTIVE -> STOPPING -> STOPPED and cannot be
    restarted; sample() may be called once per instance.
    """

    labels: Sequence[str] = ()

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self.logger = logger or module_logger
        self.store = MetricSeriesStore(self.labels)
        self.state = SessionState.IDLE
        self._stop = threading.Event()
        self._lock = threading.Lock()
        self._ticker: Optional[Ticker] = None

    @abstractmethod
    def probe(self, pid: int) -> Optional[MetricSnapshot]:
        """
        Take a single measurement of the process.

        Returns:
            MetricSnapshot, or None to skip this tick
        """
        pass

    def sample(self, pid: int, ticker: Ticker) -> None:
        """
        Probe the process on every tick until stop() is called.

        Blocks the calling thread. A stop that is pending together with a
        tick wins: the tick is not consumed.

        Raises:
            SamplerStateError: If the session was already started
        """
        with self._lock:
            if self.state != SessionState.IDLE:
                raise SamplerStateError(f"Sampler session already {self.state.value}")
            self.state = SessionState.ACTIVE
            self._ticker = ticker

        self.logger.debug(f"Sampling pid {pid} every {ticker.interval}s")
        try:
            while not self._stop.is_set():
                ticker.get()
                if self._stop.is_set():
                    break
                self._record(pid)
        finally:
            with self._lock:
                self.state = SessionState.STOPPED
            self.logger.debug(f"Sampling of pid {pid} stopped after {len(self.store)} samples")

    def _record(self, pid: int) -> None:
        snapshot = self.probe(pid)
        if snapshot is None:
            return
        self.store.append_snapshot(snapshot.as_values())

    def get_data(self) -> MetricSeriesStore:
        """Collected series. Only consistent once the session has stopped."""
        return self.store

    def stop(self) -> None:
        """
        Assert the stop signal and wake the sampling loop.

        Must be called once per session. Later calls change nothing.
        """
        with self._lock:
            if self._stop.is_set():
                return
            self._stop.set()
            if self.state == SessionState.ACTIVE:
                self.state = SessionState.STOPPING
            ticker = self._ticker
        if ticker is not None:
            ticker.interrupt()
