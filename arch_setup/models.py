"""
models.py – search result records shared by the parsers, the search
aggregator and the interactive selector.
"""

from dataclasses import dataclass
from enum import Enum


class Origin(str, Enum):
    """Where a package was found; decides which installer handles it."""

    PACMAN = "pacman"
    AUR = "AUR"
    FLATPAK = "Flatpak"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class PackageRecord:
    """
    One search hit.

    The same package may show up once per origin; those are distinct
    choices because the origin selects the install command.
    """

    name: str
    version: str = ""
    description: str = ""
    origin: Origin = Origin.PACMAN
    installed: bool = False
