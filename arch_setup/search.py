"""
search.py – query pacman, the AUR helper and flatpak for one term and
merge the hits into a single list.

Order is fixed: sync repositories, then AUR, then Flatpak. Inside each
source the tool's own order is kept. A source that cannot be run simply
contributes nothing.
"""

import logging
from typing import List, Optional

from .models import Origin, PackageRecord
from .parsers import aur_search_to_blocks, parse_columns, parse_key_value, parse_tabular
from .runner import CommandRunner
from .settings import Settings

log = logging.getLogger(__name__)

FLATPAK_COLUMNS = ("name", "description", "version")


class PackageSearch:
    def __init__(self, runner: CommandRunner, settings: Optional[Settings] = None):
        self.runner = runner
        self.settings = settings or Settings()

    def _output(self, argv: List[str]) -> str:
        ok, out = self.runner.run(argv)
        if not ok:
            log.debug("no results from %s", argv[0])
            return ""
        return out

    def search_native(self, term: str) -> List[PackageRecord]:
        return parse_tabular(self._output(["pacman", "-Ss", term]), Origin.PACMAN)

    def search_aur(self, term: str) -> List[PackageRecord]:
        raw = self._output([self.settings.aur_helper, "-Ss", term])
        return parse_key_value(aur_search_to_blocks(raw), Origin.AUR)

    def search_flatpak(self, term: str) -> List[PackageRecord]:
        # flatpak search prints one column per call; all three are fetched
        # before the name column is checked for "No matches found".
        names, descriptions, versions = (
            self._flatpak_column(term, column) for column in FLATPAK_COLUMNS
        )
        return parse_columns(names, descriptions, versions, Origin.FLATPAK)

    def _flatpak_column(self, term: str, column: str) -> str:
        return self._output(["flatpak", "search", term, f"--columns={column}"])

    def search(self, term: str) -> List[PackageRecord]:
        native = self.search_native(term)
        aur = self.search_aur(term)
        flatpak = self.search_flatpak(term)
        log.debug(
            "search %r: %d native, %d aur, %d flatpak",
            term, len(native), len(aur), len(flatpak),
        )
        return native + aur + flatpak
