#!/usr/bin/env python3
"""
cli.py – entry point for arch-setup.

Usage:
  # Interactive menu, command output streamed to the terminal:
  arch-setup

  # Quiet mode: hide command output behind a progress bar:
  arch-setup --verbose=0

  # Show the commands being run:
  arch-setup --debug
"""

import argparse
import sys
from typing import List, Optional

from rich.console import Console

from . import __version__
from .installer import Installer
from .log import setup_logging
from .menu import Menu, ask_yes_no, main_menu_options
from .runner import CommandRunner
from .search import PackageSearch
from .selector import Selector
from .settings import Settings
from .setups import Setups


def build_cli() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="arch-setup",
        description="Interactive provisioning for Arch Linux workstations.",
    )
    p.add_argument(
        "--verbose", type=int, choices=(0, 1), default=1, metavar="{0,1}",
        help="1 streams command output (default), 0 shows a progress bar instead",
    )
    p.add_argument("--aur-helper", default="yay", help="AUR helper to search and install with (default: %(default)s)")
    p.add_argument("--debug", action="store_true", help="log every command that is run")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return p


def ask_for_sudo(runner: CommandRunner, console: Console) -> bool:
    console.print("[green]Entering Package Installation Mode...[/]")
    if runner.stream(["sudo", "-v"]):
        return True
    console.print("[bold red]Failed to authenticate with sudo. Exiting...[/]")
    return False


def main(argv: Optional[List[str]] = None) -> None:
    if argv is None:
        argv = sys.argv[1:]
    args = build_cli().parse_args(argv)
    settings = Settings.from_args(args)

    console = Console()
    setup_logging(settings.debug)

    runner = CommandRunner()
    if not ask_for_sudo(runner, console):
        sys.exit(1)

    installer = Installer(runner, settings, console)
    setups = Setups(installer, confirm=ask_yes_no, console=console)
    selector = Selector(PackageSearch(runner, settings), installer, settings, console)
    menu = Menu(console)

    try:
        menu.choose("Arch Linux Setup Menu", main_menu_options(menu, setups, installer, selector))
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted.[/]")


if __name__ == "__main__":
    main()
