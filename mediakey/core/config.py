"""
mediakey — runtime settings

Layering (later wins):
- policy preset
- ~/.config/mediakey/config.json (optional)
- MEDIAKEY_* environment variables
"""

from __future__ import annotations

import json
import math
import os
import sys
from dataclasses import dataclass, replace
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from mediakey.core.ipc_state import STATE_FILENAME, state_path as default_state_path


class PolicyName(str, Enum):
    GATED = "gated"
    UNGATED = "ungated"


@dataclass(frozen=True)
class Policy:
    name: PolicyName
    gated: bool
    notify: bool


GATED_POLICY = Policy(name=PolicyName.GATED, gated=True, notify=True)

# The flag-less variant: keys always go out, enable/disable stay quiet.
UNGATED_POLICY = Policy(name=PolicyName.UNGATED, gated=False, notify=False)

PRESETS = {
    PolicyName.GATED: GATED_POLICY,
    PolicyName.UNGATED: UNGATED_POLICY,
}

BACKENDS = ("auto", "uinput", "pynput")


@dataclass(frozen=True)
class Settings:
    policy: Policy = GATED_POLICY
    state_filename: str = STATE_FILENAME
    state_path: Optional[Path] = None
    backend: str = "auto"
    key_delay_s: float = 0.010     # between key down and key up
    settle_s: float = 0.25         # uinput: let the input stack pick up the new device
    notify: Optional[bool] = None  # None -> follow policy
    debug: bool = False

    @property
    def gated(self) -> bool:
        return self.policy.gated

    @property
    def notifications(self) -> bool:
        return self.policy.notify if self.notify is None else self.notify

    def resolve_state_path(self) -> Path:
        if self.state_path is not None:
            return self.state_path
        return default_state_path(filename=self.state_filename)


DEFAULT_SETTINGS = Settings()


def config_path() -> Path:
    return Path.home() / ".config" / "mediakey" / "config.json"


def debug_log(settings: Settings, msg: str) -> None:
    if settings.debug:
        print(f"[mediakey] {msg}", file=sys.stderr)


def _parse_bool(raw: Any) -> Optional[bool]:
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, (int, float)):
        return bool(raw)
    if isinstance(raw, str):
        v = raw.strip().lower()
        if v in ("1", "true", "yes", "on"):
            return True
        if v in ("0", "false", "no", "off"):
            return False
    return None


def _parse_ms(raw: Any) -> Optional[float]:
    try:
        ms = float(raw)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(ms) or ms < 0:
        return None
    return ms / 1000.0


def _apply(settings: Settings, values: Mapping[str, Any]) -> Settings:
    """
    Merge one layer of raw values. Anything that doesn't parse is skipped,
    so the layer below stays in effect.
    """
    changes: Dict[str, Any] = {}

    policy = values.get("policy")
    if isinstance(policy, str):
        try:
            changes["policy"] = PRESETS[PolicyName(policy.strip().lower())]
        except ValueError:
            pass

    path = values.get("state_path")
    if isinstance(path, str) and path.strip():
        changes["state_path"] = Path(path).expanduser()

    backend = values.get("backend")
    if isinstance(backend, str) and backend.strip().lower() in BACKENDS:
        changes["backend"] = backend.strip().lower()

    if "key_delay_ms" in values:
        delay = _parse_ms(values["key_delay_ms"])
        if delay is not None:
            changes["key_delay_s"] = delay

    if "settle_ms" in values:
        settle = _parse_ms(values["settle_ms"])
        if settle is not None:
            changes["settle_s"] = settle

    for key in ("notify", "debug"):
        if key in values:
            flag = _parse_bool(values[key])
            if flag is not None:
                changes[key] = flag

    return replace(settings, **changes) if changes else settings


def _load_file(path: Path, settings: Settings) -> Dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as e:
        debug_log(settings, f"ignoring config file {path}: {e}")
        return {}
    if not isinstance(data, dict):
        debug_log(settings, f"ignoring config file {path}: expected a JSON object")
        return {}
    return data


_ENV_KEYS = {
    "MEDIAKEY_POLICY": "policy",
    "MEDIAKEY_STATE_PATH": "state_path",
    "MEDIAKEY_BACKEND": "backend",
    "MEDIAKEY_KEY_DELAY_MS": "key_delay_ms",
    "MEDIAKEY_SETTLE_MS": "settle_ms",
    "MEDIAKEY_NOTIFY": "notify",
    "MEDIAKEY_DEBUG": "debug",
}


def load_settings(
    environ: Optional[Mapping[str, str]] = None,
    config_file: Optional[Path] = None,
) -> Settings:
    env = os.environ if environ is None else environ

    # debug comes first so a broken config file can be reported
    settings = DEFAULT_SETTINGS
    if "MEDIAKEY_DEBUG" in env:
        settings = _apply(settings, {"debug": env["MEDIAKEY_DEBUG"]})
    settings = _apply(settings, _load_file(config_file or config_path(), settings))
    env_values = {field: env[name] for name, field in _ENV_KEYS.items() if name in env}
    return _apply(settings, env_values)
