"""
selector.py – the "Search & Download a Package" screen.

  query         read a search term; q/quit goes back to the caller
  results page  ten records per page; n / p flip pages (wrapping),
                q returns to the query prompt, anything else is read
                as comma-separated 1-based numbers to install
"""

import logging
from typing import Callable, List, Optional, Sequence, Tuple

from rich.console import Console
from rich.table import Table

from .installer import Installer
from .models import PackageRecord
from .search import PackageSearch
from .settings import Settings

log = logging.getLogger(__name__)

QUIT = {"q", "quit"}
NEXT = {"n", "next"}
PREV = {"p", "prev"}

# ---------------------------------------------------------------------------#
# 1. Paging                                                                  #
# ---------------------------------------------------------------------------#

class Pager:
    """Page arithmetic over *total* items; moving past either end wraps."""

    def __init__(self, total: int, page_size: int = 10):
        if page_size < 1:
            raise ValueError("page_size must be at least 1")
        self.total = total
        self.page_size = page_size
        self.current = 0

    @property
    def pages(self) -> int:
        return max(1, -(-self.total // self.page_size))

    def next(self) -> int:
        self.current = (self.current + 1) % self.pages
        return self.current

    def prev(self) -> int:
        self.current = (self.current - 1) % self.pages
        return self.current

    def bounds(self) -> Tuple[int, int]:
        start = self.current * self.page_size
        return start, min(start + self.page_size, self.total)

# ---------------------------------------------------------------------------#
# 2. Selection parsing                                                       #
# ---------------------------------------------------------------------------#

def parse_selection(selection: str, max_index: int) -> Tuple[List[int], List[str]]:
    """
    Split "1, 3,x,99" into valid 1-based indices and rejected tokens.

    Bad tokens never stop the rest of the selection. Valid indices keep
    their input order; repeats are dropped.
    """
    chosen: List[int] = []
    invalid: List[str] = []

    for raw in selection.split(","):
        token = raw.strip()
        if not token:
            continue
        if not token.isdigit():
            invalid.append(token)
            continue
        idx = int(token)
        if idx < 1 or idx > max_index:
            invalid.append(token)
            continue
        if idx not in chosen:
            chosen.append(idx)

    return chosen, invalid

# ---------------------------------------------------------------------------#
# 3. Interactive loop                                                        #
# ---------------------------------------------------------------------------#

class Selector:
    def __init__(
        self,
        search: PackageSearch,
        installer: Installer,
        settings: Optional[Settings] = None,
        console: Optional[Console] = None,
        prompt: Callable[[str], str] = input,
    ):
        self.search = search
        self.installer = installer
        self.settings = settings or Settings()
        self.console = console or Console()
        self.prompt = prompt

    def _ask(self, message: str) -> Optional[str]:
        try:
            return self.prompt(message).strip()
        except EOFError:
            return None

    def run(self) -> None:
        while True:
            self.console.rule("[bold]Package Search and Download")
            term = self._ask(
                "Enter the package name you want to search for (or 'q' to return to the main menu): "
            )
            if term is None or term.lower() in QUIT:
                self.console.print("[green]Returning to the main menu...[/]")
                return
            if not term:
                continue

            with self.console.status(f"[green bold]Searching for {term}…"):
                records = self.search.search(term)

            if not records:
                self.console.print(f"[bold red]No matching packages found for:[/] {term}")
                continue

            self.browse(records)

    def render_page(self, records: Sequence[PackageRecord], pager: Pager) -> None:
        table = Table(
            title=f"Search Results (Page {pager.current + 1} of {pager.pages})",
            show_header=True,
            header_style="bold cyan",
        )
        table.add_column("#", style="dim", justify="right")
        table.add_column("Package", no_wrap=True)
        table.add_column("Version")
        table.add_column("Source", style="magenta")
        table.add_column("Description")

        start, end = pager.bounds()
        for idx in range(start, end):
            pkg = records[idx]
            installed = self.installer.is_record_installed(pkg)
            name = f"[bold green]{pkg.name}[/] [green]\\[installed][/]" if installed else f"[bold]{pkg.name}[/]"
            table.add_row(str(idx + 1), name, pkg.version, str(pkg.origin), pkg.description)

        self.console.print(table)

    def browse(self, records: Sequence[PackageRecord]) -> List[PackageRecord]:
        """
        Page through *records* until the user installs something or quits.

        Returns the records an install was attempted for.
        """
        pager = Pager(len(records), self.settings.page_size)

        while True:
            self.render_page(records, pager)
            answer = self._ask(
                "Enter package numbers to install (comma-separated), "
                "n for next page, p for previous page, or q to go back: "
            )
            if answer is None or answer.lower() in QUIT:
                return []
            if answer.lower() in NEXT:
                pager.next()
                continue
            if answer.lower() in PREV:
                pager.prev()
                continue

            indices, invalid = parse_selection(answer, len(records))
            for token in invalid:
                self.console.print(f"[bold red]Invalid input: {token}. Skipping.[/]")

            if not indices:
                self.console.print("[bold red]No valid packages selected.[/]")
                continue

            selected = [records[i - 1] for i in indices]
            self.install_selected(selected)
            return selected

    def install_selected(self, selected: Sequence[PackageRecord]) -> List[PackageRecord]:
        """Install one after another; a failure does not stop the batch."""
        self.console.rule("[bold]Installing Packages")
        failed: List[PackageRecord] = []
        for pkg in selected:
            self.console.print(f"[green]Installing {pkg.name} ({pkg.origin})...[/]")
            if not self.installer.install_record(pkg):
                failed.append(pkg)

        if failed:
            names = ", ".join(p.name for p in failed)
            self.console.print(f"[bold red]Failed:[/] {names}")
            log.debug("failed installs: %s", names)
        self.console.print("[bold green]Installation complete.[/]")
        return failed
