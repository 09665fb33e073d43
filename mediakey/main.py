from __future__ import annotations

import os
import sys
from typing import Callable, List, Optional

from mediakey.core import keys
from mediakey.core.config import Settings, debug_log, load_settings
from mediakey.core.control import ControlState
from mediakey.injector.backend import MediaKeyInjector, create_injector
from mediakey.runtime.kill_switch import KillSwitch
from mediakey.ui.notify import show_notification

EXIT_OK = 0
EXIT_UNKNOWN_COMMAND = 1
EXIT_INTERRUPTED = 130

InjectorFactory = Callable[[Settings], Optional[MediaKeyInjector]]


def usage(prog: str) -> str:
    return (
        f"Usage: {prog} [play|pause|playpause|next|prev|volup|voldown]\n"
        f"       {prog} [enable|disable|status]"
    )


def _set_enabled(state: ControlState, enabled: bool, settings: Settings) -> None:
    state.set_enabled(enabled)
    word = "enabled" if enabled else "disabled"
    print(f"mediakey {word}")
    if settings.notifications:
        show_notification("mediakey", word, settings=settings)


def _send(key: keys.MediaKey, state: ControlState, settings: Settings, make_injector: InjectorFactory) -> None:
    gate = KillSwitch(state=state, injector=None, settings=settings)
    # Disabled: leave without touching the input stack at all.
    if not gate.allow():
        return
    gate.injector = make_injector(settings)
    try:
        gate.inject(key)
    finally:
        if gate.injector is not None:
            try:
                gate.injector.close()
            except Exception as ex:
                debug_log(settings, f"closing injector failed: {ex}")


def main(
    argv: Optional[List[str]] = None,
    prog: Optional[str] = None,
    settings: Optional[Settings] = None,
    make_injector: Optional[InjectorFactory] = None,
) -> int:
    """
    mediakey [command]

    Returns the process exit code: 0 on success or silent no-op,
    1 on an unknown command.
    """
    argv = sys.argv[1:] if argv is None else argv
    prog = prog or os.path.basename(sys.argv[0]) or "mediakey"
    settings = load_settings() if settings is None else settings
    make_injector = create_injector if make_injector is None else make_injector

    state = ControlState(path=settings.resolve_state_path(), settings=settings)

    if not argv:
        _send(keys.DEFAULT_KEY, state, settings, make_injector)
        return EXIT_OK

    command = argv[0].lower()

    if command == keys.ENABLE:
        _set_enabled(state, True, settings)
        return EXIT_OK
    if command == keys.DISABLE:
        _set_enabled(state, False, settings)
        return EXIT_OK
    if command == keys.STATUS:
        print(f"mediakey is {'enabled' if state.is_enabled() else 'disabled'}")
        return EXIT_OK

    key = keys.lookup(command)
    if key is None:
        print(f"Unknown command: {command}")
        print(usage(prog))
        return EXIT_UNKNOWN_COMMAND

    _send(key, state, settings, make_injector)
    return EXIT_OK


def cli() -> None:
    try:
        code = main()
    except KeyboardInterrupt:
        code = EXIT_INTERRUPTED
    sys.exit(code)


if __name__ == "__main__":
    cli()
