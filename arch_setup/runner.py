"""
runner.py – thin wrapper around subprocess for every external command.

Commands are argument vectors; nothing is handed to a shell unless the
caller spells out ["bash", "-c", ...] itself.
"""

import logging
import os
import shlex
import shutil
import subprocess
from typing import Mapping, Optional, Sequence, Tuple

log = logging.getLogger(__name__)


def format_cmd(argv: Sequence[str]) -> str:
    return shlex.join(list(argv))


class CommandRunner:
    """Runs commands synchronously; no timeouts, no retries."""

    def run(self, argv: Sequence[str], cwd: Optional[str] = None) -> Tuple[bool, str]:
        """
        Run *argv* and capture stdout and stderr as one text stream.

        Returns (exited_zero, output). A command that cannot be started
        at all returns (False, "").
        """
        log.debug("run: %s", format_cmd(argv))
        try:
            proc = subprocess.run(
                list(argv),
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                check=False,
                cwd=cwd,
            )
        except OSError as e:
            log.debug("could not start %s: %s", argv[0], e)
            return False, ""

        if proc.returncode != 0:
            log.debug("%s exited with %d", argv[0], proc.returncode)
        return proc.returncode == 0, proc.stdout or ""

    def succeeds(self, argv: Sequence[str], cwd: Optional[str] = None) -> bool:
        ok, _ = self.run(argv, cwd=cwd)
        return ok

    def stream(
        self,
        argv: Sequence[str],
        cwd: Optional[str] = None,
        env: Optional[Mapping[str, str]] = None,
    ) -> bool:
        """
        Run *argv* attached to the terminal so its output shows live.

        *env* entries are added on top of the current environment.
        """
        log.debug("stream: %s", format_cmd(argv))
        full_env = {**os.environ, **env} if env else None
        try:
            proc = subprocess.run(list(argv), check=False, cwd=cwd, env=full_env)
        except OSError as e:
            log.debug("could not start %s: %s", argv[0], e)
            return False
        return proc.returncode == 0

    def which(self, name: str) -> bool:
        return shutil.which(name) is not None
