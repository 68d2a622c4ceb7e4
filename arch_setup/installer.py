"""
installer.py – install packages from the sync repositories, the AUR and
Flathub, and bootstrap yay and flatpak themselves.

In verbose mode command output goes straight to the terminal. In quiet
mode it is captured and a progress bar runs instead.
"""

import logging
import shutil
import tempfile
from typing import Callable, List, Optional, Sequence

from rich.console import Console

from .models import Origin, PackageRecord
from .progress import ProgressTicker
from .runner import CommandRunner
from .settings import FLATHUB_REPO_URL, YAY_AUR_URL, Settings

log = logging.getLogger(__name__)

Confirm = Callable[[str], bool]


class Installer:
    def __init__(
        self,
        runner: CommandRunner,
        settings: Optional[Settings] = None,
        console: Optional[Console] = None,
    ):
        self.runner = runner
        self.settings = settings or Settings()
        self.console = console or Console()

    # ------------------------------------------------------------------ #
    # Queries                                                            #
    # ------------------------------------------------------------------ #
    def is_installed(self, name: str) -> bool:
        return self.runner.succeeds(["pacman", "-Q", name]) or self.runner.succeeds(
            [self.settings.aur_helper, "-Q", name]
        )

    def is_flatpak_installed(self, name: str) -> bool:
        ok, out = self.runner.run(["flatpak", "list", "--app", "--columns=name"])
        if not ok:
            return False
        return any(line.strip() == name for line in out.splitlines())

    def is_record_installed(self, record: PackageRecord) -> bool:
        if record.installed:
            return True
        if record.origin is Origin.FLATPAK:
            return self.is_flatpak_installed(record.name)
        return self.is_installed(record.name)

    # ------------------------------------------------------------------ #
    # Command execution                                                  #
    # ------------------------------------------------------------------ #
    def _execute(self, argv: List[str], label: str) -> bool:
        """Run an install command, streaming or behind the progress bar."""
        self.console.print(f"[green]Installing {label}...[/]")
        if self.settings.verbose:
            return self.runner.stream(argv)

        # Refresh the sudo timestamp first; a password prompt would be
        # hidden behind the progress bar otherwise.
        self.runner.stream(["sudo", "-v"])
        with ProgressTicker(
            label,
            steps=self.settings.progress_steps,
            interval=self.settings.progress_interval,
            console=self.console,
        ):
            ok, out = self.runner.run(argv)
        if not ok:
            log.debug("output of failed install:\n%s", out)
        return ok

    @staticmethod
    def _merge_args(base: List[str], extra: Sequence[str]) -> List[str]:
        return base + [a for a in extra if a and a not in base]

    def pacman_command(self, name: str, extra_args: Sequence[str] = ()) -> List[str]:
        base = ["sudo", "pacman", "-S", "--noconfirm", "--needed"]
        if not self.settings.verbose:
            base.append("--quiet")
        return self._merge_args(base, extra_args) + [name]

    def aur_command(self, name: str, extra_args: Sequence[str] = ()) -> List[str]:
        base = [self.settings.aur_helper, "-S", "--noconfirm", "--needed"]
        if not self.settings.verbose:
            base += ["--quiet", "--sudoloop"]
        return self._merge_args(base, extra_args) + [name]

    def flatpak_command(self, app: str) -> List[str]:
        return [
            "flatpak", "install", "-y", "--noninteractive",
            self.settings.flatpak_remote, app,
        ]

    # ------------------------------------------------------------------ #
    # Installs                                                           #
    # ------------------------------------------------------------------ #
    def install(self, name: str, extra_args: Sequence[str] = ("--needed",)) -> bool:
        """
        Install *name* with pacman, falling back to the AUR helper once.

        Returns True when the package ends up installed.
        """
        if self.is_installed(name):
            self.console.print(f"[cyan]{name} is already installed.[/]")
            return True

        if self._execute(self.pacman_command(name, extra_args), name):
            self.console.print(f"[bold green]{name} installed successfully via pacman.[/]")
            return True

        helper = self.settings.aur_helper
        if self._execute(self.aur_command(name, extra_args), f"{name} ({helper})"):
            # yay exits 0 for names it could not resolve
            if not self.is_installed(name):
                self.console.print(
                    f"[bold red]Failed to install {name} via {helper}. Package not found.[/]"
                )
                return False
            self.console.print(f"[bold green]{name} installed successfully via {helper}.[/]")
            return True

        self.console.print(f"[bold red]Failed to install {name} via both pacman and {helper}.[/]")
        return False

    def install_many(self, names: Sequence[str], extra_args: Sequence[str] = ("--needed",)) -> List[str]:
        """Install each name in turn; return the ones that failed."""
        return [n for n in names if not self.install(n, extra_args)]

    def install_flatpak(self, app: str) -> bool:
        if self._execute(self.flatpak_command(app), f"{app} (flatpak)"):
            self.console.print(f"[bold green]{app} installed successfully via flatpak.[/]")
            return True
        self.console.print(f"[bold red]Failed to install {app} via flatpak.[/]")
        return False

    def flatpak_app_id(self, name: str) -> str:
        """
        Map a display name from the search table to its application ID.

        Falls back to *name* when no row matches it exactly.
        """
        ok, out = self.runner.run(["flatpak", "search", name, "--columns=name,application"])
        if not ok:
            return name
        for line in out.splitlines():
            display, sep, app_id = line.partition("\t")
            if sep and display.strip() == name and app_id.strip():
                return app_id.strip()
        return name

    def install_record(self, record: PackageRecord) -> bool:
        if record.origin is Origin.FLATPAK:
            return self.install_flatpak(self.flatpak_app_id(record.name))
        return self.install(record.name, ("--needed",))

    # ------------------------------------------------------------------ #
    # yay                                                                #
    # ------------------------------------------------------------------ #
    def setup_yay(self) -> bool:
        """Build and install yay from the AUR unless it is already there."""
        if self.is_installed("yay"):
            self.console.print("[cyan]Yay is already installed.[/]")
            return True

        self.console.print("[green]Installing yay (AUR helper)...[/]")
        self.install_many(["base-devel", "git"])

        build_dir = tempfile.mkdtemp(prefix="yay_install_")
        try:
            if self.runner.stream(["git", "clone", YAY_AUR_URL, build_dir]):
                self.runner.stream(["makepkg", "-si", "--noconfirm"], cwd=build_dir)
            else:
                self.console.print(f"[bold red]Command failed:[/] git clone {YAY_AUR_URL}")
        finally:
            shutil.rmtree(build_dir, ignore_errors=True)

        if self.is_installed("yay"):
            self.console.print("[bold green]Yay installed successfully.[/]")
            return True
        self.console.print("[bold red]Failed to install yay.[/]")
        return False

    def ensure_yay(self, confirm: Confirm) -> bool:
        if self.runner.which("yay"):
            return True
        if not confirm("The 'yay' AUR helper is not installed. Do you want to install it? (y/n): "):
            self.console.print("[yellow]Proceeding without 'yay'. AUR packages will not be available.[/]")
            return False
        if not self.setup_yay():
            self.console.print("[bold red]Failed to install 'yay'. AUR packages will not be available.[/]")
            return False
        return True

    # ------------------------------------------------------------------ #
    # flatpak                                                            #
    # ------------------------------------------------------------------ #
    def has_flathub(self) -> bool:
        ok, out = self.runner.run(["flatpak", "remote-list"])
        return ok and "flathub" in out

    def setup_flatpak(self) -> bool:
        """Install flatpak and register the Flathub remote."""
        if not self.install("flatpak"):
            return False
        if not self.has_flathub():
            self.console.print("[green]Adding Flathub repository to Flatpak...[/]")
            argv = ["sudo", "flatpak", "remote-add", "--if-not-exists", "flathub", FLATHUB_REPO_URL]
            if not self.runner.stream(argv):
                self.console.print("[bold red]Command failed:[/] flatpak remote-add flathub")
                return False
        return True

    def ensure_flatpak(self, confirm: Confirm) -> bool:
        if self.runner.which("flatpak"):
            return True
        if not confirm(
            "Flatpak is not installed. Do you want to install it to search for Flatpak packages? (y/n): "
        ):
            self.console.print("[yellow]Proceeding without Flatpak. Flatpak packages will not be available.[/]")
            return False
        if not self.setup_flatpak() or not self.runner.which("flatpak"):
            self.console.print("[bold red]Failed to install Flatpak. Flatpak packages will not be available.[/]")
            return False
        self.console.print("[bold green]Flatpak installed successfully.[/]")
        return True
