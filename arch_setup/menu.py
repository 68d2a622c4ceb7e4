"""
menu.py – numbered text menus over stdin/stdout.

Every menu accepts an option number or q to go back. Ctrl-D on the
prompt behaves like q.
"""

from typing import Callable, List, Optional, Sequence, Tuple

from rich.console import Console

from .installer import Installer
from .selector import Selector
from .setups import Setups

Action = Callable[[], object]
Option = Tuple[str, Action]

QUIT = ("q", "Q")


def ask_yes_no(message: str, prompt: Callable[[str], str] = input) -> bool:
    try:
        return prompt(message).strip().lower() in ("y", "yes")
    except EOFError:
        return False


class Menu:
    def __init__(self, console: Optional[Console] = None, prompt: Callable[[str], str] = input):
        self.console = console or Console()
        self.prompt = prompt

    def _ask(self, message: str) -> Optional[str]:
        try:
            return self.prompt(message).strip()
        except EOFError:
            return None

    def pause(self) -> None:
        self._ask("\nPress Enter to continue...")

    def header(self, title: str) -> None:
        bar = "+--" + "-" * len(title) + "--+"
        self.console.print(f"[bold dark_orange]{bar}\n|  {title}  |\n{bar}[/]\n")

    def choose(self, title: str, options: Sequence[Option]) -> None:
        """Show *options* until the user backs out with q."""
        while True:
            self.console.clear()
            self.header(title)
            for i, (label, _) in enumerate(options, start=1):
                self.console.print(f" [yellow]\\[{i}][/] {label}")
            self.console.print("[blue]" + "-" * 30 + "[/]")

            choice = self._ask(f" Choose an option (1-{len(options)}), or [q] to go back: ")
            if choice is None or choice in QUIT:
                return

            if choice.isdigit() and 1 <= int(choice) <= len(options):
                self.console.clear()
                options[int(choice) - 1][1]()
                self.pause()
            else:
                self.console.print("[bold red]Invalid choice. Please try again.[/]")

    def single_action(self, title: str, description: str, action: Action) -> None:
        """One-item menu: Enter runs *action*, q goes back."""
        self.console.clear()
        self.console.print(f"[bold dark_orange]=== {title} ===[/]\n")
        self.console.print(f"[yellow]1.[/] {description}\n")
        choice = self._ask("Press Enter to proceed or [q] to go back: ")
        if choice is None or choice in QUIT:
            return
        self.console.clear()
        action()
        self.pause()


def main_menu_options(
    menu: Menu,
    setups: Setups,
    installer: Installer,
    selector: Selector,
) -> List[Option]:
    def shell_menu() -> None:
        menu.choose("Setup Shell (Zsh)", [
            ("Setup Zsh and dependencies", setups.setup_shell),
            ("Configure Starship theme", setups.setup_starship_theme),
        ])

    def terminal_menu() -> None:
        menu.choose("Install Terminals", [
            ("Install WezTerm", setups.setup_wezterm),
            ("Install Kitty", setups.setup_kitty),
        ])

    def search_screen() -> None:
        # searches reach into the AUR and Flathub; offer the missing tools first
        installer.ensure_yay(setups.confirm)
        installer.ensure_flatpak(setups.confirm)
        selector.run()

    return [
        ("Setup Shell (Zsh)", shell_menu),
        ("Install Developer Tools", lambda: menu.single_action(
            "Install Developer Tools", "Install developer tools", setups.developer_setup)),
        ("Setup Gaming", lambda: menu.single_action(
            "Setup Gaming", "Set up gaming environment", setups.gaming_setup)),
        ("Install LunarVim", lambda: menu.single_action(
            "Setup LVim", "Setup LunarVim", setups.setup_lvim)),
        ("Install Doom Emacs", lambda: menu.single_action(
            "Setup Doom-Emacs", "Setup Doom Emacs", setups.setup_doom_emacs)),
        ("Install Terminals", terminal_menu),
        ("Search & Download a Package", search_screen),
        ("Setup Yay (AUR Helper)", lambda: menu.single_action(
            "Setup Yay", "Setup Yay", installer.setup_yay)),
        ("Setup Flatpak", lambda: menu.single_action(
            "Setup Flatpak", "Setup Flatpak", installer.setup_flatpak)),
    ]
