"""
progress.py – decorative progress bar shown while a quiet install runs.

The bar is cosmetic: it ticks on a timer in a background thread and says
nothing about how far the install really is. The caller stops it once the
command returns and joins it before printing the real result.
"""

import threading
from typing import Optional

from rich.console import Console
from rich.progress import BarColumn, Progress, TextColumn, TimeElapsedColumn


class ProgressTicker(threading.Thread):
    def __init__(
        self,
        description: str,
        steps: int = 150,
        interval: float = 0.2,
        console: Optional[Console] = None,
    ):
        super().__init__(daemon=True)
        self.description = description
        self.steps = max(1, steps)
        self.interval = interval
        self.console = console
        self.ticks = 0
        self._done = threading.Event()

    def run(self) -> None:
        progress = Progress(
            TextColumn("[bold blue]{task.description}"),
            BarColumn(),
            TextColumn("{task.percentage:>3.0f}%"),
            TimeElapsedColumn(),
            console=self.console,
            transient=True,
        )
        with progress:
            task = progress.add_task(self.description, total=self.steps)
            # Park just short of 100% until the command actually finishes.
            while not self._done.wait(self.interval):
                if self.ticks < self.steps - 1:
                    self.ticks += 1
                    progress.update(task, completed=self.ticks)
            self.ticks = self.steps
            progress.update(task, completed=self.steps)

    def stop(self) -> None:
        self._done.set()

    def __enter__(self) -> "ProgressTicker":
        self.start()
        return self

    def __exit__(self, *exc) -> None:
        self.stop()
        self.join()
