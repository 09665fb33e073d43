from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from mediakey.core import ipc_state
from mediakey.core.config import DEFAULT_SETTINGS, Settings, debug_log


@dataclass
class ControlState:
    """
    In-process view of the enabled flag.
    The file is the source of truth; nothing is cached between calls.
    """
    path: Path
    settings: Settings = DEFAULT_SETTINGS

    def is_enabled(self) -> bool:
        try:
            return ipc_state.read_enabled(self.path)
        except FileNotFoundError:
            return False
        except (OSError, UnicodeDecodeError) as ex:
            debug_log(self.settings, f"reading {self.path} failed: {ex}")
            return False

    def set_enabled(self, value: bool) -> bool:
        ok = ipc_state.set_enabled(value, self.path)
        if not ok:
            debug_log(self.settings, f"writing {self.path} failed")
        return ok
