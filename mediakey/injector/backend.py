from __future__ import annotations

import sys
from typing import Callable, List, Optional, Protocol

from mediakey.core.config import DEFAULT_SETTINGS, Settings, debug_log
from mediakey.core.keys import MediaKey


class MediaKeyInjector(Protocol):
    def press(self, key: MediaKey) -> None: ...

    def close(self) -> None: ...


def _uinput(settings: Settings) -> MediaKeyInjector:
    from mediakey.injector.uinput_keys import UInputMediaKeys

    return UInputMediaKeys.create(key_delay_s=settings.key_delay_s, settle_s=settings.settle_s)


def _pynput(settings: Settings) -> MediaKeyInjector:
    from mediakey.injector.pynput_keys import PynputMediaKeys

    return PynputMediaKeys.create(key_delay_s=settings.key_delay_s)


FACTORIES = {
    "uinput": _uinput,
    "pynput": _pynput,
}


def candidates(backend: str, platform: Optional[str] = None) -> List[str]:
    if backend != "auto":
        return [backend]
    platform = sys.platform if platform is None else platform
    if platform.startswith("linux"):
        return ["uinput", "pynput"]
    return ["pynput"]


def create_injector(
    settings: Settings = DEFAULT_SETTINGS,
    platform: Optional[str] = None,
    factories: Optional[dict[str, Callable[[Settings], MediaKeyInjector]]] = None,
) -> Optional[MediaKeyInjector]:
    """
    First backend that comes up wins. None means nothing could be created
    (missing library, no /dev/uinput access, no display...).
    """
    factories = FACTORIES if factories is None else factories
    for name in candidates(settings.backend, platform):
        factory = factories.get(name)
        if factory is None:
            continue
        try:
            return factory(settings)
        except Exception as ex:
            debug_log(settings, f"{name} backend unavailable: {type(ex).__name__}: {ex}")
    return None
