from enum import Enum


class ProcessState(Enum):
    """Lifecycle of the supervised process"""
    NOT_STARTED = "not_started"
    RUNNING = "running"
    EXITED = "exited"
    KILLED = "killed"
