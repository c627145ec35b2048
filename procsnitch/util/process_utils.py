import os
from typing import List

import psutil

from procsnitch.exceptions import ProcessNotFoundError
from procsnitch.util.log_config import setup_logger

logger = setup_logger(__name__)


def pids_by_name(name: str) -> List[int]:
    """Return the pids of all running processes whose name matches exactly."""
    pids = []
    for proc in psutil.process_iter(["pid", "name"]):
        try:
            if proc.info["name"] == name:
                pids.append(proc.info["pid"])
        except (psutil.NoSuchProcess, psutil.AccessDenied):
            continue
    return pids


def pidof(name: str) -> int:
    """
    Locate a running process by name.

    The current process is never returned. When several processes match,
    the lowest pid (usually the parent) wins.

    Raises:
        ProcessNotFoundError: If nothing matches
    """
    pids = [pid for pid in pids_by_name(name) if pid != os.getpid()]
    if not pids:
        raise ProcessNotFoundError(f"No running process named '{name}'")
    if len(pids) > 1:
        logger.debug(f"Several processes named '{name}': {pids}, using {min(pids)}")
    return min(pids)
