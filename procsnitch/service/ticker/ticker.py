"""
Tick source

A repeating timer running in a background thread. Ticks go into a one-slot
queue: when the reader falls behind, further ticks are dropped instead of
piling up, so a slow probe never causes a burst of catch-up samples.
"""
import queue
import threading
import time
from typing import Optional

# Token that wakes a blocked reader without being a tick
INTERRUPT = None


class Ticker:

    def __init__(self, interval: float):
        """
        Args:
            interval: Seconds between ticks, must be positive
        """
        if interval <= 0:
            raise ValueError(f"Ticker interval must be positive, got {interval}")
        self.interval = interval
        self.ticks = 0
        self.dropped = 0
        self._queue: "queue.Queue[Optional[float]]" = queue.Queue(maxsize=1)
        self._stopped = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def start(self) -> None:
        if self._thread is not None:
            return
        self._thread = threading.Thread(target=self._tick_loop, name="ticker", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        """Silence the ticker. No tick is emitted once this returns."""
        self._stopped.set()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join()

    @property
    def stopped(self) -> bool:
        return self._stopped.is_set()

    def get(self) -> Optional[float]:
        """
        Block until the next tick or an interrupt.

        Returns:
            Tick timestamp (time.monotonic) or INTERRUPT
        """
        return self._queue.get()

    def interrupt(self) -> None:
        """Wake a reader blocked in get()."""
        try:
            self._queue.put_nowait(INTERRUPT)
        except queue.Full:
            # A pending item already wakes the reader
            pass

    def _tick_loop(self) -> None:
        # Schedule against the start time so ticks do not drift
        start = time.monotonic()
        n = 0
        while True:
            n += 1
            deadline = start + n * self.interval
            if self._stopped.wait(max(0.0, deadline - time.monotonic())):
                return
            try:
                self._queue.put_nowait(time.monotonic())
                self.ticks += 1
            except queue.Full:
                self.dropped += 1
