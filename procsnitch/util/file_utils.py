import re
import shutil
from pathlib import Path
from typing import Optional


def resolve_cmd(cmd: str, cwd: Optional[Path] = None) -> str:
    """Resolve cmd to an absolute path. Relative paths are taken from cwd when given."""
    p = Path(cmd)
    if not p.is_absolute() and cwd is not None:
        p = Path(cwd) / p
    if p.is_file() or ("/" in cmd or "\\" in cmd):
        return str(p.resolve())
    found = shutil.which(cmd)
    if found:
        return found
    raise FileNotFoundError(
        f"Executable '{cmd}' not found. "
        f"Either provide a path (e.g. './server') or ensure it's in PATH."
    )


def safe_file_part(label: str) -> str:
    """Turn a series label like 'VIRT (m)' into something usable in a file name."""
    part = re.sub(r"[^A-Za-z0-9._-]+", "_", label).strip("_")
    return part or "series"
