import pytest

from arch_setup import cli
from arch_setup.runner import CommandRunner
from arch_setup.settings import Settings


def test_verbose_zero_turns_on_quiet_mode() -> None:
    args = cli.build_cli().parse_args(["--verbose=0"])

    settings = Settings.from_args(args)

    assert settings.verbose is False
    assert settings.aur_helper == "yay"
    assert settings.debug is False


def test_defaults_are_verbose() -> None:
    settings = Settings.from_args(cli.build_cli().parse_args([]))

    assert settings.verbose is True
    assert settings.page_size == 10


def test_other_verbose_values_are_rejected() -> None:
    with pytest.raises(SystemExit):
        cli.build_cli().parse_args(["--verbose=2"])


def test_aur_helper_and_debug_flags() -> None:
    settings = Settings.from_args(cli.build_cli().parse_args(["--aur-helper", "paru", "--debug"]))

    assert settings.aur_helper == "paru"
    assert settings.debug is True


def test_exits_with_status_one_when_sudo_fails(monkeypatch) -> None:
    seen = []

    def fake_stream(self, argv, cwd=None, env=None):
        seen.append(list(argv))
        return False

    monkeypatch.setattr(CommandRunner, "stream", fake_stream)

    with pytest.raises(SystemExit) as exc:
        cli.main(["--verbose=0"])

    assert exc.value.code == 1
    assert seen == [["sudo", "-v"]]


def test_main_runs_menu_after_sudo(monkeypatch) -> None:
    titles = []

    monkeypatch.setattr(CommandRunner, "stream", lambda self, argv, cwd=None, env=None: True)
    monkeypatch.setattr(cli.Menu, "choose", lambda self, title, options: titles.append((title, len(options))))

    cli.main([])

    assert titles == [("Arch Linux Setup Menu", 9)]
