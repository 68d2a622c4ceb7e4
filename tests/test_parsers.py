from arch_setup.models import Origin, PackageRecord
from arch_setup.parsers import (
    aur_search_to_blocks,
    parse_columns,
    parse_header,
    parse_key_value,
    parse_tabular,
)

PACMAN_OUTPUT = """\
extra/neovim 0.10.2-1 [installed]
    Fast, feature-rich Vim fork
extra/neovim-qt 0.2.18-3
    Neovim client library and GUI, in Qt
extra/python-pynvim 0.5.0-2
    (no description)
"""

YAY_OUTPUT = """\
extra/neovim 0.10.2-1 [installed]
    Fast, feature-rich Vim fork
aur/neovim-git 0.11.0.1200-1 (+312 2.10) (Out-of-date: 2024-10-01)
    Fork of Vim aiming to improve user experience, plugins, and GUIs
aur/neovim-nightly-bin 0.11.0-1 (+40 0.52)
    Neovim nightly binary
"""


def test_parse_header_splits_repo_name_version_and_marker() -> None:
    assert parse_header("extra/neovim 0.10.2-1 [installed]") == ("extra", "neovim", "0.10.2-1", True)
    assert parse_header("core/bash 5.2.037-1") == ("core", "bash", "5.2.037-1", False)


def test_parse_header_rejects_non_headers() -> None:
    assert parse_header("    Fast, feature-rich Vim fork") is None
    assert parse_header("neovim 0.10.2-1") is None
    assert parse_header("extra/neovim latest") is None
    assert parse_header("/neovim 0.10.2-1") is None


def test_parse_tabular_reads_every_block() -> None:
    records = parse_tabular(PACMAN_OUTPUT, Origin.PACMAN)

    assert records == [
        PackageRecord("neovim", "0.10.2-1", "Fast, feature-rich Vim fork", Origin.PACMAN, True),
        PackageRecord("neovim-qt", "0.2.18-3", "Neovim client library and GUI, in Qt", Origin.PACMAN),
        PackageRecord("python-pynvim", "0.5.0-2", "(no description)", Origin.PACMAN),
    ]


def test_parse_tabular_returns_one_record_per_well_formed_block() -> None:
    blocks = "".join(f"extra/pkg{i} 1.{i}-1\n    package number {i}\n" for i in range(25))

    records = parse_tabular(blocks)

    assert len(records) == 25
    assert all(r.name for r in records)
    assert [r.name for r in records][:3] == ["pkg0", "pkg1", "pkg2"]


def test_parse_tabular_tolerates_surrounding_noise() -> None:
    text = (
        "\n\n:: Synchronizing package databases...\n"
        "extra/ripgrep 14.1.1-1\n"
        "    A search tool that combines the usability of ag with the raw speed of grep\n"
        "   \n"
        "extra/fd 10.2.0-1"
    )

    records = parse_tabular(text)

    assert [r.name for r in records] == ["ripgrep"]


def test_parse_tabular_skips_header_without_description() -> None:
    text = (
        "extra/broken 1.0-1\n"
        "extra/good 2.0-1\n"
        "    the description\n"
    )

    records = parse_tabular(text)

    assert records == [PackageRecord("good", "2.0-1", "the description", Origin.PACMAN)]


def test_parse_tabular_skips_unmatched_versions_and_empty_names() -> None:
    text = (
        "extra/epoch 1:2.0-1\n"
        "    has an epoch\n"
        "extra/ 1.0-1\n"
        "    no name\n"
        "extra/plain 3.0-2\n"
        "    fine\n"
    )

    records = parse_tabular(text)

    assert [r.name for r in records] == ["plain"]


def test_parse_tabular_keeps_empty_description() -> None:
    records = parse_tabular("extra/quiet 1.0-1\n\n")

    assert records == [PackageRecord("quiet", "1.0-1", "", Origin.PACMAN)]


def test_aur_search_to_blocks_keeps_only_aur_entries() -> None:
    blocks = aur_search_to_blocks(YAY_OUTPUT)

    assert blocks == (
        "Package: neovim-git\n"
        "Version: 0.11.0.1200-1\n"
        "Description: Fork of Vim aiming to improve user experience, plugins, and GUIs\n"
        "\n"
        "Package: neovim-nightly-bin\n"
        "Version: 0.11.0-1\n"
        "Description: Neovim nightly binary\n"
    )


def test_aur_blocks_feed_the_key_value_parser() -> None:
    records = parse_key_value(aur_search_to_blocks(YAY_OUTPUT))

    assert records == [
        PackageRecord(
            "neovim-git",
            "0.11.0.1200-1",
            "Fork of Vim aiming to improve user experience, plugins, and GUIs",
            Origin.AUR,
        ),
        PackageRecord("neovim-nightly-bin", "0.11.0-1", "Neovim nightly binary", Origin.AUR),
    ]


def test_aur_search_to_blocks_keeps_vcs_and_epoch_versions() -> None:
    text = (
        "aur/neovim-git 0.11.0.r1200.g1234abc-1 (+312 2.10)\n"
        "    Fork of Vim aiming to improve user experience\n"
        "aur/freetype2-git 1:2.13.3.r12.gabcdef-1 (+5 0.00)\n"
        "    Font rasterization library (git version)\n"
        "aur/foo 1.0-1\n"
        "    release\n"
    )

    records = parse_key_value(aur_search_to_blocks(text))

    assert [(r.name, r.version) for r in records] == [
        ("neovim-git", "0.11.0.r1200.g1234abc-1"),
        ("freetype2-git", "1:2.13.3.r12.gabcdef-1"),
        ("foo", "1.0-1"),
    ]
    assert records[1].description == "Font rasterization library (git version)"


def test_aur_search_to_blocks_skips_header_without_description() -> None:
    text = "aur/broken r1-1\naur/ok 2.0-1\n    fine\naur/last 1.0-1"

    assert aur_search_to_blocks(text) == "Package: ok\nVersion: 2.0-1\nDescription: fine\n"


def test_tabular_parser_still_requires_numeric_versions() -> None:
    text = "extra/foo-git r123.abc-1\n    vcs build\nextra/foo 1.0-1\n    release\n"

    assert [r.name for r in parse_tabular(text)] == ["foo"]


def test_parse_key_value_attributes_fields_in_any_order() -> None:
    text = (
        "Description: Yet another yogurt\n"
        "Package: yay\n"
        "Version: 12.4.2-1\n"
        "\n"
        "Version: 2.0-1\n"
        "Package: paru\n"
        "Description: Feature packed AUR helper\n"
        "Package: pikaur\n"
        "Description: AUR helper with minimal dependencies\n"
        "Version: 1.29-1\n"
    )

    records = parse_key_value(text)

    assert records == [
        PackageRecord("yay", "12.4.2-1", "Yet another yogurt", Origin.AUR),
        PackageRecord("paru", "2.0-1", "Feature packed AUR helper", Origin.AUR),
        PackageRecord("pikaur", "1.29-1", "AUR helper with minimal dependencies", Origin.AUR),
    ]


def test_parse_key_value_defaults_missing_fields_and_drops_nameless_blocks() -> None:
    text = (
        "Version: 9.9-9\n"
        "Description: orphaned fields\n"
        "\n"
        "Package: lonely\n"
        "Something: else\n"
    )

    records = parse_key_value(text)

    assert records == [PackageRecord("lonely", "", "", Origin.AUR)]


def test_parse_key_value_keeps_colons_inside_values() -> None:
    records = parse_key_value("Package: tool\nDescription: note: colons survive\n")

    assert records[0].description == "note: colons survive"


def test_parse_columns_zips_by_line_index() -> None:
    names = "Firefox\nLibreWolf\nFloorp\n"
    descriptions = "Fast, Private & Safe Web Browser\nA custom version of Firefox\nA Firefox-based browser\n"
    versions = "131.0.3\n131.0.2-1\n11.19.1\n"

    records = parse_columns(names, descriptions, versions)

    assert len(records) == 3
    assert records[1] == PackageRecord(
        "LibreWolf", "131.0.2-1", "A custom version of Firefox", Origin.FLATPAK
    )
    assert all(r.origin is Origin.FLATPAK for r in records)


def test_parse_columns_short_circuits_on_no_matches_in_name_column() -> None:
    records = parse_columns("No matches found\n", "something\nelse\n", "1.0\n2.0\n")

    assert records == []


def test_parse_columns_only_checks_name_column_for_no_matches() -> None:
    records = parse_columns("Firefox\n", "No matches found\n", "131.0\n")

    assert records == [PackageRecord("Firefox", "131.0", "No matches found", Origin.FLATPAK)]


def test_parse_columns_stops_at_shortest_column() -> None:
    records = parse_columns("a\nb\nc\n", "da\ndb\n", "1\n2\n3\n4\n")

    assert [r.name for r in records] == ["a", "b"]


def test_parse_columns_allows_empty_version() -> None:
    records = parse_columns("Kdenlive\n", "Video editor\n", "\n")

    assert records == [PackageRecord("Kdenlive", "", "Video editor", Origin.FLATPAK)]
