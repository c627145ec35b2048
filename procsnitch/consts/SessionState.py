from enum import Enum


class SessionState(Enum):
    """Lifecycle of a sampling session: IDLE -> ACTIVE -> STOPPING -> STOPPED"""
    IDLE = "idle"
    ACTIVE = "active"
    STOPPING = "stopping"
    STOPPED = "stopped"
