"""
Process Supervisor

Runs one process for at most `duration` seconds while a sampler probes it
every `sampling` seconds. Three threads take part in a session:

- the exit waiter, blocked in the process handle's wait();
- the sampling thread, running Sampler.sample() until told to stop;
- the caller's thread, racing the deadline against the process exit (and
  against a fatal sampler error) on a single event queue.

Shutdown always runs in the same order: silence the ticker, stop the
sampler, join the sampling thread. Only then is the series store frozen
and the delivery channel closed.
"""
import logging
import queue
import threading
import time
from typing import Optional

from procsnitch.consts.ProcessState import ProcessState
from procsnitch.consts.SessionState import SessionState
from procsnitch.exceptions import ProcessKillError, SamplerStateError
from procsnitch.models.metric_series import MetricSeriesStore
from procsnitch.models.session_outcome import SessionOutcome, SessionResult
from procsnitch.service.runner.process_handle import ProcessHandle
from procsnitch.service.runner.runner import Runner
from procsnitch.service.sampler.sampler import Sampler
from procsnitch.service.supervisor.delivery_channel import DeliveryChannel
from procsnitch.service.ticker.ticker import Ticker
from procsnitch.util.log_config import setup_logger

module_logger = setup_logger(__name__)

# Event kinds on the race queue
_EXITED = "exited"
_SAMPLER_FAILED = "sampler_failed"


class ProcessSupervisor:

    def __init__(
        self,
        runner: Runner,
        duration: float,
        sampling: float,
        sampler: Sampler,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Args:
            runner: Starts (or attaches to) the supervised process
            duration: Maximum run time in seconds before the process is killed
            sampling: Seconds between two samples
            sampler: Sampler instance used for this session only
            logger: Logger for session progress (default: module logger)
        """
        if duration <= 0:
            raise ValueError(f"duration must be positive, got {duration}")
        if sampling <= 0:
            raise ValueError(f"sampling interval must be positive, got {sampling}")

        self.runner = runner
        self.duration = duration
        self.sampling = sampling
        self.sampler = sampler
        self.logger = logger or module_logger

        self.state = ProcessState.NOT_STARTED
        self.pid: Optional[int] = None
        self.kill_attempts = 0
        self._sampler_error: Optional[BaseException] = None

        if sampling >= duration:
            self.logger.warning(
                f"Sampling interval {sampling}s is not shorter than duration {duration}s; "
                f"expect at most one sample"
            )

    def execute(self, channel: DeliveryChannel[MetricSeriesStore]) -> SessionOutcome:
        """
        Run one supervised session.

        The sampler's series are put on `channel`, which is closed once the
        sampling thread has returned. Nothing is put when the sampler fails.

        Returns:
            SessionOutcome: EXITED with the exit status, or KILLED after overrunning

        Raises:
            ProcessStartError: The process could not be started; nothing was sampled
            ProcessKillError: The overrunning process could not be killed
            SamplerError: The sampler hit a fatal error; the process was killed
        """
        if self.state != ProcessState.NOT_STARTED or self.sampler.state != SessionState.IDLE:
            channel.close()
            raise SamplerStateError("A supervisor and its sampler run a single session")

        try:
            handle = self.runner.run_subprocess()
        except Exception:
            channel.close()
            raise
        self.pid = handle.pid
        self.state = ProcessState.RUNNING
        started = time.monotonic()
        self.logger.info(f"Supervising pid {handle.pid} for {self.duration}s, sampling every {self.sampling}s")

        ticker = Ticker(self.sampling)
        ticker.start()

        events: "queue.Queue" = queue.Queue()

        sampling_thread = threading.Thread(
            target=self._sampling_loop,
            args=(handle.pid, ticker, channel, events),
            name=f"sampler-{handle.pid}",
            daemon=True,
        )
        closer = threading.Thread(
            target=self._close_when_done,
            args=(sampling_thread, channel),
            name=f"closer-{handle.pid}",
            daemon=True,
        )
        waiter = threading.Thread(
            target=self._wait_for_exit,
            args=(handle, events),
            name=f"waiter-{handle.pid}",
            daemon=True,
        )
        sampling_thread.start()
        closer.start()
        waiter.start()

        try:
            outcome = self._race(handle, events, started)
        finally:
            self.logger.info("Waiting for the ticker to stop")
            ticker.stop()
            if ticker.dropped:
                self.logger.warning(f"{ticker.dropped} tick(s) dropped while the sampler was busy")
            self.logger.info("Stopping samplers")
            self.sampler.stop()
            sampling_thread.join()
            closer.join()
            self.sampler.get_data().freeze()
            self.runner.after_run()

        if self._sampler_error is not None:
            raise self._sampler_error
        return outcome

    def run(self) -> SessionResult:
        """Execute a session and collect the delivered series."""
        channel: DeliveryChannel[MetricSeriesStore] = DeliveryChannel()
        outcome = self.execute(channel)
        delivered = list(channel)
        series = delivered[0] if delivered else self.sampler.get_data()
        return SessionResult(outcome=outcome, series=series)

    def _race(self, handle: ProcessHandle, events: "queue.Queue", started: float) -> SessionOutcome:
        try:
            kind, payload = events.get(timeout=self.duration)
        except queue.Empty:
            kind, payload = None, None
            self.logger.info(f"Process {handle.pid} overran {self.duration}s")

        if kind == _EXITED:
            return self._exited(handle, payload, started)

        if kind is None:
            # An exit that landed together with the deadline is still a natural exit
            try:
                kind, payload = events.get_nowait()
            except queue.Empty:
                pass
            if kind == _EXITED:
                return self._exited(handle, payload, started)

        self._kill(handle)
        returncode = self._wait_reaped(events)
        self.state = ProcessState.KILLED
        self.logger.info("Process killed")
        return SessionOutcome(
            pid=handle.pid,
            state=self.state,
            returncode=returncode,
            elapsed=time.monotonic() - started,
            kill_attempts=self.kill_attempts,
        )

    def _exited(self, handle: ProcessHandle, returncode: Optional[int], started: float) -> SessionOutcome:
        self.state = ProcessState.EXITED
        self.logger.info(f"Process done with returncode = {returncode}")
        return SessionOutcome(
            pid=handle.pid,
            state=self.state,
            returncode=returncode,
            elapsed=time.monotonic() - started,
            kill_attempts=self.kill_attempts,
        )

    def _kill(self, handle: ProcessHandle) -> None:
        self.kill_attempts += 1
        try:
            handle.kill()
        except OSError as e:
            self.logger.error(f"Failed to kill pid {handle.pid}: {e}")
            raise ProcessKillError(f"Failed to kill pid {handle.pid}: {e}") from e

    def _wait_reaped(self, events: "queue.Queue") -> Optional[int]:
        """Block until the exit waiter reports, skipping other events."""
        while True:
            kind, payload = events.get()
            if kind == _EXITED:
                return payload

    def _wait_for_exit(self, handle: ProcessHandle, events: "queue.Queue") -> None:
        returncode = handle.wait()
        events.put((_EXITED, returncode))

    def _sampling_loop(
        self,
        pid: int,
        ticker: Ticker,
        channel: DeliveryChannel[MetricSeriesStore],
        events: "queue.Queue",
    ) -> None:
        try:
            self.sampler.sample(pid, ticker)
        except Exception as e:
            # Handed to the supervising thread, which kills the process and re-raises
            self.logger.error(f"Sampler failed: {e}")
            self._sampler_error = e
            events.put((_SAMPLER_FAILED, e))
            return
        channel.put(self.sampler.get_data())

    @staticmethod
    def _close_when_done(sampling_thread: threading.Thread, channel: DeliveryChannel) -> None:
        sampling_thread.join()
        channel.close()
