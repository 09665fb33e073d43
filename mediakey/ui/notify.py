from __future__ import annotations

import subprocess
import sys
from typing import List, Optional

from mediakey.core.config import DEFAULT_SETTINGS, Settings, debug_log


def _escape_applescript(s: str) -> str:
    return s.replace("\\", "\\\\").replace('"', '\\"')


def notify_command(title: str, message: str, platform: Optional[str] = None) -> Optional[List[str]]:
    platform = sys.platform if platform is None else platform
    if platform == "darwin":
        script = f'display notification "{_escape_applescript(message)}" with title "{_escape_applescript(title)}"'
        return ["/usr/bin/osascript", "-e", script]
    if platform.startswith("linux"):
        return ["notify-send", "--app-name", title, title, message]
    return None


def show_notification(
    title: str,
    message: str,
    settings: Settings = DEFAULT_SETTINGS,
    platform: Optional[str] = None,
) -> bool:
    """
    Fire-and-forget desktop notification. Never waits for the helper and never raises.
    """
    cmd = notify_command(title, message, platform)
    if cmd is None:
        return False
    try:
        subprocess.Popen(
            cmd,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=True,
        )
    except (OSError, ValueError) as ex:
        debug_log(settings, f"notification failed: {ex}")
        return False
    return True
