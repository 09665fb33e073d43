from __future__ import annotations

from enum import IntEnum
from typing import Dict


class MediaKey(IntEnum):
    """
    System-defined media key codes (NX_KEYTYPE_*).
    Backends translate these into their own key identifiers.
    """
    VOLUME_UP = 0
    VOLUME_DOWN = 1
    PLAY = 16
    NEXT = 17
    PREVIOUS = 18


COMMANDS: Dict[str, MediaKey] = {
    "playpause": MediaKey.PLAY,
    "play": MediaKey.PLAY,
    "pause": MediaKey.PLAY,
    "next": MediaKey.NEXT,
    "prev": MediaKey.PREVIOUS,
    "previous": MediaKey.PREVIOUS,
    "volup": MediaKey.VOLUME_UP,
    "voldown": MediaKey.VOLUME_DOWN,
}

ENABLE = "enable"
DISABLE = "disable"
STATUS = "status"

DEFAULT_KEY = MediaKey.PLAY


def lookup(command: str) -> MediaKey | None:
    return COMMANDS.get(command.lower())
