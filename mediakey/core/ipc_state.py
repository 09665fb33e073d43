from __future__ import annotations

import os
import stat
import tempfile
from pathlib import Path

STATE_FILENAME = ".mediakey_enabled"


def state_path(base_dir: Path | str | None = None, filename: str = STATE_FILENAME) -> Path:
    """
    Per-project flag file: lives in the current working directory unless
    a base directory is given.
    """
    base = Path(base_dir) if base_dir is not None else Path.cwd()
    return base / filename


def read_enabled(path: Path) -> bool:
    """
    Strict read: raises OSError / UnicodeDecodeError so callers can report them.
    """
    return path.read_text(encoding="utf-8").strip() == "1"


def get_enabled(path: Path) -> bool:
    # Missing, unreadable or garbled -> disabled.
    try:
        return read_enabled(path)
    except (OSError, UnicodeDecodeError):
        return False


def _file_mode(path: Path) -> int:
    # Keep the mode of the file being replaced, else what a plain open() would give.
    try:
        return stat.S_IMODE(os.stat(path).st_mode)
    except FileNotFoundError:
        mask = os.umask(0)
        os.umask(mask)
        return 0o666 & ~mask


def set_enabled(enabled: bool, path: Path) -> bool:
    """
    Replace-on-write: the value lands in a sibling temp file first and is
    swapped in with os.replace, so readers only ever see "1" or "0".
    Returns False (and leaves the old file untouched) if the write fails.
    """
    value = "1" if enabled else "0"
    tmp_name: str | None = None
    try:
        mode = _file_mode(path)
        fd, tmp_name = tempfile.mkstemp(prefix=path.name + ".", suffix=".tmp", dir=path.parent)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(value)
        os.chmod(tmp_name, mode)
        os.replace(tmp_name, path)
        return True
    except OSError:
        if tmp_name is not None:
            try:
                os.unlink(tmp_name)
            except OSError:
                pass
        return False
