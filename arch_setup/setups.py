"""
setups.py – the provisioning flows behind the main menu.

Each flow installs a package set and then wires up config: shell (zsh,
starship, plugins), developer tools, gaming, LunarVim, Doom Emacs and
terminal emulators. Failed steps are reported and the flow carries on,
except where a later step cannot work without the earlier one.
"""

import os
import shutil
import tempfile
from pathlib import Path
from typing import Callable, List, Mapping, Optional, Sequence

from rich.console import Console

from . import settings as cfg
from .config_applier import apply_config, download_file
from .installer import Installer
from .runner import format_cmd

# ---------------------------------------------------------------------------#
# 1. Package sets                                                            #
# ---------------------------------------------------------------------------#
ZSH_PACKAGES = [
    "zsh", "ttf-recursive", "ttf-recursive-nerd", "ttf-firacode-nerd",
    "pfetch", "starship", "eza",
]
DEV_TOOLS = ["git", "neovim", "clang", "llvm", "gdb", "lldb", "emacs"]

GAMING_BASE = ["mesa", "lib32-mesa"]
NVIDIA_PACKAGES = [
    "nvidia", "nvidia-utils", "lib32-nvidia-utils",
    "libvdpau", "lib32-libvdpau", "nvidia-settings",
]
INTEL_PACKAGES = ["vulkan-intel", "intel-media-driver", "libva-intel-driver"]
WINE_DEPENDENCIES = [
    "giflib", "lib32-giflib", "libpng", "lib32-libpng",
    "libldap", "lib32-libldap", "gnutls", "lib32-gnutls",
]
GAMING_TOOLS = [
    "lutris", "steam", "gamemode", "lib32-gamemode", "wine-staging",
    "wine", "vkd3d", "lib32-vkd3d", "faudio", "lib32-faudio",
]
LVIM_DEPENDENCIES = [
    "git", "make", "python-pip", "npm", "nodejs",
    "ripgrep", "lazygit", "python-pynvim", "curl",
]

# ---------------------------------------------------------------------------#
# 2. Remote sources                                                          #
# ---------------------------------------------------------------------------#
HOMEBREW_INSTALLER = "https://raw.githubusercontent.com/Homebrew/install/HEAD/install.sh"
HOMEBREW_BREW = "/home/linuxbrew/.linuxbrew/bin/brew"
RUSTUP_INSTALLER = "https://sh.rustup.rs"
LVIM_BRANCH = "release-1.4/neovim-0.9"
LVIM_INSTALLER = (
    "https://raw.githubusercontent.com/LunarVim/LunarVim/"
    "release-1.4/neovim-0.9/utils/installer/install.sh"
)
ZSH_AUTOSUGGESTIONS_REPO = "https://github.com/zsh-users/zsh-autosuggestions"
CATPPUCCIN_STARSHIP_REPO = "https://github.com/catppuccin/starship"
DOOM_EMACS_REPO = "https://github.com/doomemacs/doomemacs"
DOOM_CONFIG_REPO = "https://github.com/adityanav123/MyDoomEmacsSetup"

DOOM_HINTS = """\
doom sync    - Synchronize your config with Doom Emacs.
doom upgrade - Update Doom Emacs and all packages.
doom doctor  - Diagnose common issues.
doom env     - Regenerate the environment file."""


class Setups:
    def __init__(
        self,
        installer: Installer,
        prompt: Callable[[str], str] = input,
        confirm: Optional[Callable[[str], bool]] = None,
        console: Optional[Console] = None,
    ):
        self.installer = installer
        self.runner = installer.runner
        self.settings = installer.settings
        self.console = console or installer.console
        self.prompt = prompt
        self.confirm = confirm or (lambda msg: prompt(msg).strip().lower() in ("y", "yes"))

    # ------------------------------------------------------------------ #
    # helpers                                                            #
    # ------------------------------------------------------------------ #
    def step(
        self,
        argv: Sequence[str],
        cwd: Optional[str] = None,
        env: Optional[Mapping[str, str]] = None,
    ) -> bool:
        """Run one command with live output and report a failure."""
        ok = self.runner.stream(argv, cwd=cwd, env=env)
        if not ok:
            self.console.print(f"[bold red]Command failed:[/] {format_cmd(argv)}")
        return ok

    def run_remote_script(
        self,
        url: str,
        interpreter: str = "bash",
        args: Sequence[str] = (),
        env: Optional[Mapping[str, str]] = None,
    ) -> bool:
        """Download an installer script and run it with *interpreter*."""
        fd, script = tempfile.mkstemp(prefix="installer_", suffix=".sh")
        os.close(fd)
        try:
            if not download_file(url, script, timeout=self.settings.download_timeout):
                self.console.print(f"[bold red]Failed to download installer from {url}[/]")
                return False
            return self.step([interpreter, script, *args], env=env)
        finally:
            os.remove(script)

    def apply(self, url: str, path: Path) -> bool:
        return apply_config(url, path, self.settings, self.console)

    # ------------------------------------------------------------------ #
    # shell                                                              #
    # ------------------------------------------------------------------ #
    def set_zsh_as_default_shell(self) -> bool:
        if not self.runner.which("zsh"):
            self.console.print("[green]Zsh is not installed. Installing Zsh...[/]")
            self.installer.install("zsh")

        user = os.environ.get("USER")
        if not user:
            self.console.print(
                "[bold red]Failed to get the current user. Cannot set Zsh as the default shell.[/]"
            )
            return False

        zsh = shutil.which("zsh") or "/usr/bin/zsh"
        if self.runner.stream(["chsh", "-s", zsh, user]):
            self.console.print("[bold green]Zsh has been set as the default shell.[/]")
            return True
        self.console.print("[bold red]Failed to set Zsh as the default shell.[/]")
        return False

    def setup_starship_theme(self) -> bool:
        self.console.print("[green]Choose a theme for Starship:[/]")
        self.console.print("[yellow](1) Gruvbox\n(2) Catppuccin Mocha[/]")
        choice = self.prompt("Theme: ").strip()

        starship_config = cfg.config_dir() / "starship.toml"

        if choice == "1":
            if self.runner.succeeds(["starship", "preset", "gruvbox-rainbow", "-o", str(starship_config)]):
                self.console.print("[bold green]Gruvbox theme applied to Starship.[/]")
                return True
            self.console.print("[bold red]Failed to apply Gruvbox theme to Starship.[/]")
            return False

        if choice == "2":
            return self._apply_catppuccin(starship_config)

        self.console.print("[bold red]Invalid choice. No theme applied.[/]")
        return False

    def _apply_catppuccin(self, starship_config: Path) -> bool:
        clone_dir = Path(tempfile.mkdtemp(prefix="catppuccin_starship_"))
        try:
            if not self.runner.succeeds(["git", "clone", CATPPUCCIN_STARSHIP_REPO, str(clone_dir / "repo")]):
                self.console.print("[bold red]Failed to clone Catppuccin Starship theme repository.[/]")
                return False

            theme_file = clone_dir / "repo" / "themes" / "mocha.toml"
            try:
                theme = theme_file.read_text()
                starship_config.parent.mkdir(parents=True, exist_ok=True)
                with open(starship_config, "a") as fh:
                    fh.write('\npalette = "catppuccin_mocha"\n')
                    fh.write(theme)
            except OSError as e:
                self.console.print(
                    f"[bold red]Failed to configure Catppuccin Mocha theme for Starship:[/] {e}"
                )
                return False

            self.console.print("[bold green]Catppuccin Mocha theme applied to Starship.[/]")
            return True
        finally:
            shutil.rmtree(clone_dir, ignore_errors=True)

    def setup_shell(self) -> None:
        self.installer.ensure_yay(self.confirm)
        self.installer.install_many(ZSH_PACKAGES)

        self.console.print("[green]Installing Homebrew...[/]")
        self.run_remote_script(HOMEBREW_INSTALLER, "bash", env={"NONINTERACTIVE": "1"})
        brew = shutil.which("brew") or HOMEBREW_BREW
        self.step([brew, "install", "zsh-syntax-highlighting"])

        self.console.print("[green]Installing zsh-autosuggestions...[/]")
        target = cfg.home() / ".zsh" / "zsh-autosuggestions"
        if target.exists():
            self.console.print(f"[cyan]{target} already exists, skipping clone.[/]")
        else:
            self.step(["git", "clone", ZSH_AUTOSUGGESTIONS_REPO, str(target)])

        self.set_zsh_as_default_shell()
        self.apply(cfg.ZSHRC_URL, cfg.home() / ".zshrc")
        self.setup_starship_theme()
        self.console.print("[bold green].zshrc updated.[/]")

    # ------------------------------------------------------------------ #
    # package bundles                                                    #
    # ------------------------------------------------------------------ #
    def developer_setup(self) -> List[str]:
        self.console.print("[green]Installing developer tools...[/]")
        return self.installer.install_many(DEV_TOOLS)

    def gaming_setup(self) -> List[str]:
        self.console.print("[green]Installing gaming tools and libraries...[/]")
        failed: List[str] = []
        for group in (GAMING_BASE, NVIDIA_PACKAGES, INTEL_PACKAGES, WINE_DEPENDENCIES,
                      ["protonup-qt"], GAMING_TOOLS):
            failed += self.installer.install_many(group)

        self.console.print("[green]Setting up gamemode.[/]")
        user = os.environ.get("USER", "")
        if user:
            self.step(["sudo", "usermod", "-aG", "gamemode", user])
        else:
            self.console.print("[bold red]USER is not set; skipping gamemode group.[/]")

        self.console.print("[green]Running gamemode tests.[/]")
        self.step(["gamemoded", "-t"])

        self.console.print("[bold green]Gaming environment setup complete.[/]")
        return failed

    # ------------------------------------------------------------------ #
    # editors                                                            #
    # ------------------------------------------------------------------ #
    def setup_lvim(self) -> bool:
        self.console.print("[green]Setting up LunarVim...[/]")
        self.installer.install_many(LVIM_DEPENDENCIES)

        self.console.print("[green]Setting up npm global directory...[/]")
        npm_global = cfg.home() / ".npm-global"
        profile = cfg.home() / ".profile"
        try:
            (npm_global / "lib").mkdir(parents=True, exist_ok=True)
            self.step(["npm", "config", "set", "prefix", str(npm_global)])
            with open(profile, "a") as fh:
                fh.write("\nexport PATH=~/.npm-global/bin:$PATH\n")
        except OSError as e:
            self.console.print(f"[bold red]Failed to set up the npm global directory:[/] {e}")

        self.console.print("[green]Installing Rust.[/]")
        self.run_remote_script(RUSTUP_INSTALLER, "sh", args=["-y"])

        # the LunarVim installer needs cargo, which rustup put under ~/.cargo/bin
        cargo_bin = str(cfg.home() / ".cargo" / "bin")
        env = {
            "LV_BRANCH": LVIM_BRANCH,
            "PATH": os.pathsep.join([cargo_bin, str(npm_global / "bin"), os.environ.get("PATH", "")]),
        }
        if not self.run_remote_script(LVIM_INSTALLER, "bash", env=env):
            self.console.print("[bold red]Failed to install LunarVim.[/]")
            return False

        self.console.print("[bold green]LunarVim installed successfully.[/]")
        self.apply(cfg.LVIM_CONFIG_URL, cfg.config_dir() / "lvim" / "config.lua")
        return True

    def setup_doom_emacs(self) -> bool:
        self.console.print("[green]Setting up Doom Emacs...[/]")
        self.installer.install_many(["emacs", "git"])

        emacs_dir = cfg.config_dir() / "emacs"
        doom = str(emacs_dir / "bin" / "doom")

        if not self.step(["git", "clone", "--depth", "1", DOOM_EMACS_REPO, str(emacs_dir)]):
            self.console.print("[bold red]Failed to clone Doom Emacs.[/]")
            return False
        self.console.print("[bold green]Doom Emacs cloned successfully.[/]")

        self.console.print("[bold green]Starting Doom Install![/]")
        if not self.step([doom, "install"]):
            self.console.print("[bold red]Failed to install Doom Emacs.[/]")
            return False
        self.console.print("[bold green]Doom Emacs installed successfully.[/]")

        doom_config = cfg.config_dir() / "doom"
        for name in ("package.el", "config.el", "init.el"):
            path = doom_config / name
            if path.exists():
                self.console.print(f"[green]Removing existing file: {path}[/]")
                try:
                    path.unlink()
                except OSError as e:
                    self.console.print(f"[bold red]Could not remove {path}:[/] {e}")

        if not self.step(["git", "clone", DOOM_CONFIG_REPO, str(doom_config)]):
            self.console.print("[bold red]Failed to clone your Doom Emacs configuration.[/]")
            return False
        self.console.print("[bold green]Your Doom Emacs configuration cloned successfully.[/]")

        self.console.print("[green]Installing emms (Emacs Multimedia package)...[/]")
        if not self.installer.install("emms", ()):
            self.console.print("[bold red]Failed to install emms package.[/]")

        if self.step([doom, "sync"]):
            self.console.print("[bold green]Doom Emacs synchronized successfully.[/]")
        else:
            self.console.print("[bold red]Failed to synchronize Doom Emacs.[/]")

        self.add_doom_to_path(emacs_dir)

        self.console.print("[green]Doom Emacs setup complete. Useful commands:[/]")
        self.console.print(f"[yellow]{DOOM_HINTS}[/]")
        return True

    def add_doom_to_path(self, emacs_dir: Path) -> bool:
        rc_name = ".zshrc" if "zsh" in os.environ.get("SHELL", "") else ".bashrc"
        rc_file = cfg.home() / rc_name
        try:
            with open(rc_file, "a") as fh:
                fh.write("\n# Added by Arch Linux setup script\n")
                fh.write(f'export PATH="$PATH:{emacs_dir}/bin"\n')
        except OSError as e:
            self.console.print(f"[bold red]Failed to add Doom Emacs to PATH. Could not open {rc_file}:[/] {e}")
            return False
        self.console.print(f"[bold green]Added Doom Emacs bin directory to PATH in {rc_file}[/]")
        return True

    # ------------------------------------------------------------------ #
    # terminals                                                          #
    # ------------------------------------------------------------------ #
    def install_terminal(self, name: str, config_url: str = "", config_path: Optional[Path] = None) -> bool:
        if not self.installer.install(name):
            self.console.print(f"[bold red]Failed to install {name}. Aborting setup.[/]")
            return False

        if config_url and config_path is not None:
            self.apply(config_url, config_path)
            self.console.print(f"[bold green]{name} configuration applied from {config_url}.[/]")
        else:
            self.console.print(f"[bold green]{name} installed with no specific configuration applied.[/]")

        self.console.print(f"[bold green]{name} setup completed.[/]")
        return True

    def setup_wezterm(self) -> bool:
        return self.install_terminal(
            "wezterm", cfg.WEZTERM_CONFIG_URL, cfg.config_dir() / "wezterm" / "wezterm.lua"
        )

    def setup_kitty(self) -> bool:
        return self.install_terminal(
            "kitty", cfg.KITTY_CONFIG_URL, cfg.config_dir() / "kitty" / "kitty.conf"
        )
