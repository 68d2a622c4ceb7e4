"""
parsers.py – turn package-manager search output into PackageRecords.

Three output shapes are understood:

  tabular     pacman -Ss / yay -Ss
                  extra/neovim 0.10.2-1 [installed]
                      Fast, feature-rich Vim fork

  key/value   one field per line, blocks separated by blank lines
                  Package: yay-bin
                  Version: 12.4.2-1
                  Description: Yet another yogurt

  columnar    flatpak search --columns=<col>, one value per line, one
              invocation per column

Lines that do not fit the expected shape are skipped; none of these
functions raise on odd input.
"""

import re
from typing import Dict, Iterator, List, Optional, Tuple

from .models import Origin, PackageRecord

# ---------------------------------------------------------------------------#
# 1. Constants                                                               #
# ---------------------------------------------------------------------------#
_VERSION_RE = re.compile(r"\d+(\.\d+)*-\d+")
_INSTALLED_MARK = "[installed"

NO_MATCHES = "No matches found"

_KV_FIELDS = {
    "Package": "name",
    "Version": "version",
    "Description": "description",
}

Header = Tuple[str, str, str, bool]

# ---------------------------------------------------------------------------#
# 2. Tabular output (pacman -Ss, yay -Ss)                                    #
# ---------------------------------------------------------------------------#

def parse_header(line: str) -> Optional[Header]:
    """
    Split a "<repo>/<name> <version> [installed]" line.

    Returns (repo, name, version, installed) or None when the line is not
    a header. The name may come back empty; callers drop those.
    """
    tokens = line.split()
    if len(tokens) < 2:
        return None

    repo, sep, name = tokens[0].partition("/")
    if not sep or not repo:
        return None
    if not _VERSION_RE.fullmatch(tokens[1]):
        return None

    installed = any(t.startswith(_INSTALLED_MARK) for t in tokens[2:])
    return repo, name, tokens[1], installed


def scan_blocks(text: str) -> Iterator[Tuple[str, str, str, bool, str]]:
    """
    Walk header/description pairs top to bottom.

    A header on the last line has no description and is dropped. A header
    followed straight by another header is skipped and scanning resumes
    at the second one. Consumed lines are never looked at again.
    """
    lines = text.splitlines()
    i = 0
    while i < len(lines):
        header = parse_header(lines[i])
        if header is None:
            i += 1
            continue
        if i + 1 >= len(lines):
            break
        following = lines[i + 1]
        if parse_header(following) is not None:
            i += 1
            continue

        repo, name, version, installed = header
        yield repo, name, version, installed, following.strip()
        i += 2


def parse_tabular(text: str, origin: Origin = Origin.PACMAN) -> List[PackageRecord]:
    records: List[PackageRecord] = []
    for _repo, name, version, installed, description in scan_blocks(text):
        if not name:
            continue
        records.append(
            PackageRecord(
                name=name,
                version=version,
                description=description,
                origin=origin,
                installed=installed,
            )
        )
    return records


def _split_entry(line: str) -> Optional[Tuple[str, str, str]]:
    """Loose "<repo>/<name> <version>" split; the version is not checked."""
    tokens = line.split()
    if len(tokens) < 2:
        return None
    repo, sep, name = tokens[0].partition("/")
    if not sep or not repo or not name:
        return None
    return repo, name, tokens[1]


def aur_search_to_blocks(text: str, repo: str = "aur") -> str:
    """
    Rewrite the aur/ entries of `yay -Ss` output as key/value blocks.

    Entries from the sync repositories are left out; pacman already
    reports those. AUR versions are taken as they are (VCS builds and
    epochs included); the line after the header is the description.
    """
    lines = text.splitlines()
    out: List[str] = []
    i = 0
    while i < len(lines):
        entry = _split_entry(lines[i])
        if entry is None or lines[i][:1].isspace():
            i += 1
            continue
        if i + 1 >= len(lines):
            break
        following = lines[i + 1]
        if following[:1].strip() and _split_entry(following) is not None:
            i += 1
            continue

        block_repo, name, version = entry
        i += 2
        if block_repo != repo:
            continue
        description = following.strip()
        out.append(f"Package: {name}")
        out.append(f"Version: {version}")
        out.append(f"Description: {description}")
        out.append("")
    return "\n".join(out)

# ---------------------------------------------------------------------------#
# 3. Key/value blocks                                                        #
# ---------------------------------------------------------------------------#

def parse_key_value(text: str, origin: Origin = Origin.AUR) -> List[PackageRecord]:
    """
    Collect Package/Version/Description fields into records.

    Fields may come in any order. A blank line, or a "Package:" line once
    the current block already has a name, closes the block; a block
    without a name is discarded. The last block is kept even without a
    closing blank line.
    """
    records: List[PackageRecord] = []
    current: Dict[str, str] = {}

    def flush() -> None:
        if current.get("name"):
            records.append(
                PackageRecord(
                    name=current["name"],
                    version=current.get("version", ""),
                    description=current.get("description", ""),
                    origin=origin,
                )
            )
        current.clear()

    for raw in text.splitlines():
        line = raw.strip()
        if not line:
            flush()
            continue

        key, sep, value = line.partition(":")
        field = _KV_FIELDS.get(key.strip()) if sep else None
        if field is None:
            continue
        if field == "name" and current.get("name"):
            flush()
        current[field] = value.strip()

    flush()
    return records

# ---------------------------------------------------------------------------#
# 4. Columnar output (flatpak search --columns=...)                          #
# ---------------------------------------------------------------------------#

def parse_columns(
    names: str,
    descriptions: str,
    versions: str,
    origin: Origin = Origin.FLATPAK,
) -> List[PackageRecord]:
    """
    Zip three single-column outputs line by line.

    Only the name column is checked for flatpak's "No matches found"
    message. Extra lines in a longer column are dropped.
    """
    if NO_MATCHES in names:
        return []

    records: List[PackageRecord] = []
    for name, description, version in zip(
        names.splitlines(), descriptions.splitlines(), versions.splitlines()
    ):
        name = name.strip()
        if not name:
            continue
        records.append(
            PackageRecord(
                name=name,
                version=version.strip(),
                description=description.strip(),
                origin=origin,
            )
        )
    return records
