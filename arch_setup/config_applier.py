"""
config_applier.py – replace a config file with a downloaded copy.

Steps:
  1. make sure the target directory exists
  2. copy a non-empty existing file to <path>_old.bak
  3. download the new file to a temporary location
  4. refuse an empty download
  5. move the download over the target

If anything after step 2 fails the backup stays where it is. A file
error at any step is reported and the call returns False.
"""

import logging
import os
import shutil
import stat
import tempfile
from pathlib import Path
from typing import Optional, Union

import requests
from rich.console import Console

from .settings import Settings

log = logging.getLogger(__name__)

PathLike = Union[str, Path]

DEFAULT_MODE = 0o644


def is_file_valid(path: PathLike) -> bool:
    """True when *path* is an existing, non-empty regular file."""
    p = Path(path)
    return p.is_file() and p.stat().st_size > 0


def backup_path_for(path: PathLike) -> Path:
    p = Path(path)
    return p.with_name(p.name + "_old.bak")


def download_file(url: str, dest: PathLike, timeout: float = 30.0) -> bool:
    """Stream *url* into *dest*, following redirects."""
    try:
        with requests.get(url, stream=True, timeout=timeout, allow_redirects=True) as resp:
            resp.raise_for_status()
            with open(dest, "wb") as fh:
                for chunk in resp.iter_content(chunk_size=8192):
                    if chunk:
                        fh.write(chunk)
    except requests.RequestException as e:
        log.debug("download of %s failed: %s", url, e)
        return False
    except OSError as e:
        log.debug("could not write %s: %s", dest, e)
        return False
    return True


def apply_config(
    url: str,
    config_path: PathLike,
    settings: Optional[Settings] = None,
    console: Optional[Console] = None,
) -> bool:
    settings = settings or Settings()
    console = console or Console()
    target = Path(config_path).expanduser()

    try:
        if not target.parent.is_dir():
            console.print(f"[green]Target directory does not exist. Creating: {target.parent}[/]")
            target.parent.mkdir(parents=True, exist_ok=True)

        if is_file_valid(target):
            backup = backup_path_for(target)
            console.print("[green]Backing up current config...[/]")
            shutil.copy2(target, backup)
            console.print(f"[bold green]Backup created at:[/] {backup}")
        else:
            console.print("[yellow]No valid config found to back up.[/]")

        fd, tmp_name = tempfile.mkstemp(prefix="config_", dir=target.parent)
        os.close(fd)
    except OSError as e:
        console.print(f"[bold red]Cannot prepare {target}:[/] {e}")
        return False

    console.print("[green]Downloading new config...[/]")
    try:
        if not download_file(url, tmp_name, timeout=settings.download_timeout):
            console.print(f"[bold red]Failed to download the config from {url}[/]")
            return False

        if not is_file_valid(tmp_name):
            console.print("[bold red]Downloaded config file is invalid or empty.[/]")
            return False

        console.print("[green]Applying new config...[/]")
        try:
            # mkstemp files are 0600; keep the old file's mode instead
            mode = stat.S_IMODE(target.stat().st_mode) if target.exists() else DEFAULT_MODE
            os.chmod(tmp_name, mode)
            os.replace(tmp_name, target)
        except OSError as e:
            console.print(f"[bold red]Error applying new config:[/] {e}")
            return False
        console.print("[bold green]Configuration applied successfully.[/]")
        return True
    finally:
        if os.path.exists(tmp_name):
            try:
                os.remove(tmp_name)
            except OSError as e:
                console.print(f"[bold red]Failed to remove temporary file:[/] {e}")
