from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Dict

from mediakey.core.keys import MediaKey

# pynput.keyboard.Key member names
KEY_NAMES = {
    MediaKey.PLAY: "media_play_pause",
    MediaKey.NEXT: "media_next",
    MediaKey.PREVIOUS: "media_previous",
    MediaKey.VOLUME_UP: "media_volume_up",
    MediaKey.VOLUME_DOWN: "media_volume_down",
}


@dataclass
class PynputMediaKeys:
    """
    Media key injector on top of pynput's keyboard controller.
    On macOS pynput posts the same system-defined NX events a real media key does;
    on Windows and X11 it goes through the native key injection APIs.
    """
    controller: Any
    keys: Dict[MediaKey, Any]
    key_delay_s: float = 0.010

    @classmethod
    def create(cls, key_delay_s: float = 0.010) -> "PynputMediaKeys":
        # Imported here: pynput picks its platform backend at import time and
        # fails without a display on Linux.
        from pynput import keyboard

        keys = {mk: getattr(keyboard.Key, name) for mk, name in KEY_NAMES.items()}
        return cls(controller=keyboard.Controller(), keys=keys, key_delay_s=key_delay_s)

    def press(self, key: MediaKey) -> None:
        k = self.keys[key]
        self.controller.press(k)
        try:
            time.sleep(self.key_delay_s)
        finally:
            self.controller.release(k)

    def close(self) -> None:
        pass
