"""
Process handles

The supervisor only needs three things from the process it watches: its
pid, a blocking wait for its exit, and a way to kill it. A handle hides
whether the process is our own child (subprocess.Popen) or an already
running process we attached to (psutil.Process).
"""
import subprocess
from abc import ABC, abstractmethod
from typing import Optional

import psutil


class ProcessHandle(ABC):

    @property
    @abstractmethod
    def pid(self) -> int:
        pass

    @abstractmethod
    def wait(self) -> Optional[int]:
        """Block until the process exits and return its exit status, if known."""
        pass

    @abstractmethod
    def kill(self) -> None:
        """Send SIGKILL. Raises OSError if the signal cannot be delivered."""
        pass


class PopenHandle(ProcessHandle):

    def __init__(self, process: subprocess.Popen):
        self.process = process

    @property
    def pid(self) -> int:
        return self.process.pid

    def wait(self) -> Optional[int]:
        return self.process.wait()

    def kill(self) -> None:
        self.process.kill()


class PsutilHandle(ProcessHandle):
    """Handle on a process that was not started by us.

    Only a parent can reap a child, so the exit status is known only when
    psutil can still obtain it; otherwise wait() returns None.
    """

    def __init__(self, process: psutil.Process):
        self.process = process

    @property
    def pid(self) -> int:
        return self.process.pid

    def wait(self) -> Optional[int]:
        try:
            return self.process.wait()
        except psutil.NoSuchProcess:
            return None

    def kill(self) -> None:
        try:
            self.process.kill()
        except psutil.NoSuchProcess:
            # Already gone: nothing left to terminate
            pass
        except psutil.AccessDenied as e:
            raise PermissionError(f"Not allowed to kill pid {self.process.pid}") from e
