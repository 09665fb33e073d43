from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from mediakey.core.config import DEFAULT_SETTINGS, Settings, debug_log
from mediakey.core.control import ControlState
from mediakey.core.keys import MediaKey
from mediakey.injector.backend import MediaKeyInjector


@dataclass
class KillSwitch:
    """
    Central gate in front of the injector.
    Gated policy + flag OFF -> nothing reaches the OS.
    Injection errors are swallowed; the caller only learns whether a key went out.
    """
    state: ControlState
    injector: Optional[MediaKeyInjector]
    settings: Settings = DEFAULT_SETTINGS

    def allow(self) -> bool:
        if not self.settings.gated:
            return True
        return self.state.is_enabled()

    def apply(self, key: MediaKey) -> bool:
        if not self.allow():
            return False
        return self.inject(key)

    def inject(self, key: MediaKey) -> bool:
        """
        Send without consulting the flag; for callers that already asked allow().
        """
        if self.injector is None:
            debug_log(self.settings, f"no injector available, dropping {key.name}")
            return False
        try:
            self.injector.press(key)
        except Exception as ex:
            debug_log(self.settings, f"injecting {key.name} failed: {type(ex).__name__}: {ex}")
            return False
        return True
