import pytest

from mediakey import main as cli_main
from mediakey.core.config import UNGATED_POLICY, Settings
from mediakey.core.keys import MediaKey
from mediakey.runtime.kill_switch import KillSwitch
from mediakey.core.control import ControlState


class FakeInjector:
    def __init__(self, fail=False):
        self.pressed = []
        self.closed = False
        self.fail = fail

    def press(self, key):
        if self.fail:
            raise OSError("injection failed")
        self.pressed.append(key)

    def close(self):
        self.closed = True


@pytest.fixture
def notes(monkeypatch):
    sent = []
    monkeypatch.setattr(cli_main, "show_notification", lambda title, msg, settings=None: sent.append((title, msg)))
    return sent


@pytest.fixture
def settings(tmp_path):
    return Settings(state_path=tmp_path / ".mediakey_enabled")


def run(args, settings, injector=None):
    made = []

    def make(s):
        made.append(s)
        return injector

    code = cli_main.main(args, prog="mediakey", settings=settings, make_injector=make)
    return code, made


def test_status_without_file_is_disabled(settings, notes, capsys):
    code, _ = run(["status"], settings)
    assert code == 0
    assert capsys.readouterr().out == "mediakey is disabled\n"


def test_enable_then_status(settings, notes, capsys):
    assert run(["enable"], settings)[0] == 0
    assert run(["status"], settings)[0] == 0
    out = capsys.readouterr().out
    assert out == "mediakey enabled\nmediakey is enabled\n"
    assert settings.state_path.read_text() == "1"


def test_disable_then_status(settings, notes, capsys):
    run(["enable"], settings)
    run(["disable"], settings)
    run(["status"], settings)
    assert capsys.readouterr().out.splitlines()[-1] == "mediakey is disabled"
    assert settings.state_path.read_text() == "0"


def test_enable_is_idempotent(settings, notes, capsys):
    for _ in range(3):
        run(["enable"], settings)
    run(["status"], settings)
    assert capsys.readouterr().out.splitlines()[-1] == "mediakey is enabled"


def test_toggles_notify_when_gated(settings, notes):
    run(["enable"], settings)
    run(["disable"], settings)
    assert notes == [("mediakey", "enabled"), ("mediakey", "disabled")]


def test_ungated_toggles_are_quiet(tmp_path, notes):
    s = Settings(policy=UNGATED_POLICY, state_path=tmp_path / "flag")
    run(["enable"], s)
    assert notes == []
    assert s.state_path.read_text() == "1"


def test_control_commands_are_case_insensitive(settings, notes, capsys):
    run(["ENABLE"], settings)
    run(["Status"], settings)
    assert capsys.readouterr().out.splitlines()[-1] == "mediakey is enabled"


@pytest.mark.parametrize("cmd,key", [
    ("playpause", MediaKey.PLAY),
    ("play", MediaKey.PLAY),
    ("pause", MediaKey.PLAY),
    ("next", MediaKey.NEXT),
    ("prev", MediaKey.PREVIOUS),
    ("previous", MediaKey.PREVIOUS),
    ("volup", MediaKey.VOLUME_UP),
    ("voldown", MediaKey.VOLUME_DOWN),
    ("NeXt", MediaKey.NEXT),
])
def test_key_commands_when_enabled(settings, notes, cmd, key):
    settings.state_path.write_text("1")
    inj = FakeInjector()
    code, _ = run([cmd], settings, inj)
    assert code == 0
    assert inj.pressed == [key]
    assert inj.closed


def test_no_argument_defaults_to_play(settings, capsys):
    settings.state_path.write_text("1")
    inj = FakeInjector()
    assert run([], settings, inj)[0] == 0
    assert inj.pressed == [MediaKey.PLAY]
    assert capsys.readouterr().out == ""


@pytest.mark.parametrize("args", [[], ["next"], ["volup"]])
def test_disabled_sends_nothing(settings, args, capsys):
    inj = FakeInjector()
    code, made = run(args, settings, inj)
    assert code == 0
    assert inj.pressed == []
    # the input device is never even created
    assert made == []
    assert capsys.readouterr().out == ""


def test_explicitly_disabled_sends_nothing(settings):
    settings.state_path.write_text("0")
    code, made = run(["play"], settings, FakeInjector())
    assert code == 0 and made == []


def test_ungated_ignores_flag(tmp_path):
    s = Settings(policy=UNGATED_POLICY, state_path=tmp_path / "flag")
    inj = FakeInjector()
    assert run(["prev"], s, inj)[0] == 0
    assert inj.pressed == [MediaKey.PREVIOUS]
    assert not s.state_path.exists()


def test_unknown_command_exits_1_with_usage(settings, capsys):
    code, made = run(["rewind"], settings, FakeInjector())
    assert code == 1
    assert made == []
    out = capsys.readouterr().out
    assert "Unknown command: rewind" in out
    assert "Usage: mediakey [play|pause|playpause|next|prev|volup|voldown]" in out
    assert "mediakey [enable|disable|status]" in out


def test_unknown_command_exits_1_even_when_enabled(settings, capsys):
    settings.state_path.write_text("1")
    code, _ = run(["bogus"], settings, FakeInjector())
    assert code == 1
    assert "Usage: mediakey" in capsys.readouterr().out


def test_usage_uses_program_name():
    text = cli_main.usage("/usr/local/bin/mk")
    assert text.count("/usr/local/bin/mk") == 2


def test_no_backend_is_silent_noop(settings, capsys):
    settings.state_path.write_text("1")
    code, made = run(["next"], settings, None)
    assert code == 0
    assert len(made) == 1
    assert capsys.readouterr().out == ""


def test_injection_failure_is_swallowed(settings):
    settings.state_path.write_text("1")
    inj = FakeInjector(fail=True)
    code, _ = run(["next"], settings, inj)
    assert code == 0
    assert inj.closed


def test_kill_switch_reports_injection(tmp_path):
    state = ControlState(path=tmp_path / "flag")
    inj = FakeInjector()
    ks = KillSwitch(state=state, injector=inj)
    assert ks.apply(MediaKey.PLAY) is False
    state.set_enabled(True)
    assert ks.apply(MediaKey.PLAY) is True
    assert inj.pressed == [MediaKey.PLAY]


def test_cli_wrapper_exit_codes(tmp_path, monkeypatch, capsys):
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("MEDIAKEY_STATE_PATH", str(tmp_path / "flag"))
    monkeypatch.setenv("MEDIAKEY_NOTIFY", "0")

    monkeypatch.setattr("sys.argv", ["mediakey", "status"])
    with pytest.raises(SystemExit) as exc:
        cli_main.cli()
    assert exc.value.code == 0
    assert capsys.readouterr().out == "mediakey is disabled\n"

    monkeypatch.setattr("sys.argv", ["mediakey", "wat"])
    with pytest.raises(SystemExit) as exc:
        cli_main.cli()
    assert exc.value.code == 1
    assert "Usage: mediakey" in capsys.readouterr().out


def test_cli_wrapper_keyboard_interrupt(monkeypatch):
    def interrupted():
        raise KeyboardInterrupt

    monkeypatch.setattr(cli_main, "main", interrupted)
    with pytest.raises(SystemExit) as exc:
        cli_main.cli()
    assert exc.value.code == 130


def test_failed_write_is_reported_in_debug(tmp_path, notes, capsys):
    s = Settings(state_path=tmp_path / "nope" / "flag", debug=True)
    code, _ = run(["enable"], s)
    assert code == 0
    captured = capsys.readouterr()
    assert captured.out == "mediakey enabled\n"
    assert "[mediakey] writing" in captured.err
    assert "failed" in captured.err


def test_failed_write_is_quiet_without_debug(tmp_path, notes, capsys):
    s = Settings(state_path=tmp_path / "nope" / "flag")
    run(["disable"], s)
    assert capsys.readouterr().err == ""


class CountingState(ControlState):
    reads = 0

    def is_enabled(self):
        self.reads += 1
        return super().is_enabled()


def test_key_command_reads_flag_once(settings):
    settings.state_path.write_text("1")
    state = CountingState(path=settings.state_path, settings=settings)
    inj = FakeInjector()
    cli_main._send(MediaKey.NEXT, state, settings, lambda s: inj)
    assert state.reads == 1
    assert inj.pressed == [MediaKey.NEXT]
