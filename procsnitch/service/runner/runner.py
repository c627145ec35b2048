import subprocess
from abc import ABC, abstractmethod
from pathlib import Path
from typing import IO, List, Optional, Sequence, Union

import psutil

from procsnitch.exceptions import ProcessNotFoundError, ProcessStartError
from procsnitch.service.runner.process_handle import PopenHandle, ProcessHandle, PsutilHandle
from procsnitch.util.file_utils import resolve_cmd
from procsnitch.util.log_config import setup_logger
from procsnitch.util.process_utils import pidof

logger = setup_logger(__name__)


class Runner(ABC):
    """Abstract base Runner.

    Subclasses implement _run_subprocess. The supervisor calls
    run_subprocess() once per session and after_run() once the process has
    been reaped.
    """

    def run_subprocess(self) -> ProcessHandle:
        """
        Run before_run(), then start (or locate) the process and return its handle.

        Raises:
            ProcessStartError: If the process cannot be started
            ProcessNotFoundError: If an attach target does not exist
        """
        self.before_run()
        return self._run_subprocess()

    @abstractmethod
    def _run_subprocess(self) -> ProcessHandle:
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Short name of the target, used to prefix output files."""
        pass

    def before_run(self) -> None:
        pass

    def after_run(self) -> None:
        pass


class CommandRunner(Runner):
    """Launch a command as a child process."""

    def __init__(
        self,
        command: str,
        arguments: Sequence[str] = (),
        directory: Union[str, Path, None] = None,
        results_dir: Optional[Path] = None,
    ) -> None:
        self.command = command
        self.arguments: List[str] = [str(a) for a in arguments]
        self.directory = Path(directory) if directory else None
        self.results_dir = results_dir
        self._log_files: List[IO] = []

    @property
    def name(self) -> str:
        return Path(self.command).name

    def before_run(self) -> None:
        if self.results_dir is not None:
            self.results_dir.mkdir(parents=True, exist_ok=True)

    def _open_logs(self):
        if self.results_dir is None:
            return subprocess.DEVNULL, subprocess.DEVNULL
        stdout_file = open(self.results_dir / "stdout.log", 'w')
        stderr_file = open(self.results_dir / "stderr.log", 'w')
        self._log_files = [stdout_file, stderr_file]
        return stdout_file, stderr_file

    def _run_subprocess(self) -> ProcessHandle:
        try:
            cmd_args = [resolve_cmd(self.command, cwd=self.directory)] + self.arguments
        except FileNotFoundError as e:
            raise ProcessStartError(str(e)) from e

        if self.directory is not None:
            logger.info(f"Set project directory to: {self.directory}")

        stdout, stderr = self._open_logs()
        try:
            process = subprocess.Popen(
                cmd_args,
                stdout=stdout,
                stderr=stderr,
                cwd=self.directory,
            )
        except OSError as e:
            self.after_run()
            raise ProcessStartError(f"Failed to start {cmd_args[0]}: {e}") from e

        logger.debug(f"Started {' '.join(cmd_args)} as pid {process.pid}")
        return PopenHandle(process)

    def after_run(self) -> None:
        for f in self._log_files:
            f.close()
        self._log_files = []


class AttachRunner(Runner):
    """Target a process that is already running, by name or by pid."""

    def __init__(self, process_name: Optional[str] = None, pid: Optional[int] = None) -> None:
        if (process_name is None) == (pid is None):
            raise ValueError("Give exactly one of process_name or pid")
        self.process_name = process_name
        self.pid = pid

    @property
    def name(self) -> str:
        return self.process_name or str(self.pid)

    def _run_subprocess(self) -> ProcessHandle:
        pid = self.pid if self.pid is not None else pidof(self.process_name)
        try:
            process = psutil.Process(pid)
        except psutil.NoSuchProcess as e:
            raise ProcessNotFoundError(f"No running process with pid {pid}") from e
        logger.info(f"Attached to {self.name} (pid {pid})")
        return PsutilHandle(process)
