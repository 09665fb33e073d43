from __future__ import annotations

import time
from dataclasses import dataclass

from evdev import UInput, ecodes as e

from mediakey.core.keys import MediaKey

KEYMAP = {
    MediaKey.PLAY: e.KEY_PLAYPAUSE,
    MediaKey.NEXT: e.KEY_NEXTSONG,
    MediaKey.PREVIOUS: e.KEY_PREVIOUSSONG,
    MediaKey.VOLUME_UP: e.KEY_VOLUMEUP,
    MediaKey.VOLUME_DOWN: e.KEY_VOLUMEDOWN,
}


@dataclass
class UInputMediaKeys:
    """
    Media key injector using Linux uinput.
    One short-lived virtual keyboard per invocation, media keys only.
    """
    ui: UInput
    key_delay_s: float = 0.010

    @classmethod
    def create(cls, key_delay_s: float = 0.010, settle_s: float = 0.25) -> "UInputMediaKeys":
        caps = {e.EV_KEY: list(KEYMAP.values())}
        ui = UInput(caps, name="mediakey Virtual Keyboard")
        if settle_s > 0:
            # udev/libinput need a moment before they read from a fresh device
            time.sleep(settle_s)
        return cls(ui=ui, key_delay_s=key_delay_s)

    def press(self, key: MediaKey) -> None:
        code = KEYMAP[key]
        self.ui.write(e.EV_KEY, code, 1)
        self.ui.syn()
        try:
            time.sleep(self.key_delay_s)
        finally:
            self.ui.write(e.EV_KEY, code, 0)
            self.ui.syn()

    def close(self) -> None:
        self.ui.close()
