"""
settings.py – runtime options and fixed locations.

Settings are built once from the command line and handed to every
component that assembles commands; nothing reads a global flag.
"""

import argparse
from dataclasses import dataclass
from pathlib import Path

# ---------------------------------------------------------------------------#
# 1. Remote config files                                                     #
# ---------------------------------------------------------------------------#
WEZTERM_CONFIG_URL = (
    "https://gist.githubusercontent.com/adityanav123/"
    "dd3031a3dd82b53d36dafdecc58f4257/raw/"
    "921bbc3b4346f21123cd8a4e6f8657f3b6fbfb64/wezterm.lua"
)
KITTY_CONFIG_URL = (
    "https://gist.githubusercontent.com/adityanav123/"
    "8afec13d17c5191bbbfc2f92e632d739/raw/"
    "c271c161ec0d74506a36900b6f2501c578cd6e18/kitty.conf"
)
ZSHRC_URL = (
    "https://gist.githubusercontent.com/adityanav123/"
    "00f0dd587acd1a664e0de5ccf295513e/raw"
)
LVIM_CONFIG_URL = (
    "https://gist.githubusercontent.com/adityanav123/"
    "2e708e777628d3914cf59e5d1f332f20/raw"
)

FLATHUB_REPO_URL = "https://flathub.org/repo/flathub.flatpakrepo"
YAY_AUR_URL = "https://aur.archlinux.org/yay.git"

# ---------------------------------------------------------------------------#
# 2. Local paths                                                             #
# ---------------------------------------------------------------------------#

def home() -> Path:
    return Path.home()


def config_dir() -> Path:
    return home() / ".config"


# ---------------------------------------------------------------------------#
# 3. Runtime settings                                                        #
# ---------------------------------------------------------------------------#

@dataclass
class Settings:
    """
    Options threaded through search, install and config application.

    verbose          stream command output (True) or hide it behind a
                     progress bar (False)
    page_size        search results shown per page
    aur_helper       AUR helper binary used for search and fallback installs
    flatpak_remote   remote that flatpak installs pull from
    progress_steps   ticks the quiet-mode progress bar runs for
    progress_interval seconds between ticks
    download_timeout seconds before a config download gives up
    """

    verbose: bool = True
    page_size: int = 10
    aur_helper: str = "yay"
    flatpak_remote: str = "flathub"
    progress_steps: int = 150
    progress_interval: float = 0.2
    download_timeout: float = 30.0
    debug: bool = False

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "Settings":
        return cls(
            verbose=bool(args.verbose),
            aur_helper=args.aur_helper,
            debug=args.debug,
        )
