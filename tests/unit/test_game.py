"""
Unit tests for the game package loader (mse_ingest.game).

Game packages are unpacked directories written to tmp_path.
"""

import pytest

from mse_ingest.exceptions import ContainerError, StructuralError
from mse_ingest.game import GameVersion, load_game, read_game_text


def _write_package(root, files: dict[str, str]):
    root.mkdir(parents=True, exist_ok=True)
    for name, text in files.items():
        (root / name).write_text(text, encoding="utf-8")
    return root


GAME_TEXT = "\n".join([
    "mse version: 2.0.0",
    "# The classic game",
    "short name: Magic",
    "installer group: magic/game files",
    "icon: card-back.png",
    "position hint: 1",
    "version: 2009-01-20",
    "has keywords: true",
    "card field:",
    "\ttype: text",
    "\tname: name",
    "include file: keywords.txt",
    "",
])

KEYWORDS_TEXT = "\n".join([
    "keyword:",
    "\tkeyword: Flying",
    "\tmatch: flying",
    "\tmode: core",
    "\t# not a field",
    "\treminder: Evasion.",
    "keyword:",
    "\tkeyword: Haste",
])


# ---------------------------------------------------------------------------
# Preprocessing
# ---------------------------------------------------------------------------

class TestReadGameText:
    """Tests for include expansion and comment stripping."""

    def test_comments_removed(self, tmp_path):
        root = _write_package(tmp_path / "magic.mse-game", {
            "game": "# header\nname: x\n\t# indented comment\nother: y",
        })
        assert read_game_text(root) == "name: x\nother: y"

    def test_include_spliced(self, tmp_path):
        root = _write_package(tmp_path / "magic.mse-game", {
            "game": "a: 1\ninclude file: more.txt\nb: 2",
            "more.txt": "c: 3",
        })
        assert read_game_text(root) == "a: 1\nc: 3\nb: 2"

    def test_include_keeps_indentation(self, tmp_path):
        root = _write_package(tmp_path / "magic.mse-game", {
            "game": "block:\n\tinclude file: inner.txt",
            "inner.txt": "x: 1\n\ny: 2",
        })
        assert read_game_text(root) == "block:\n\tx: 1\n\n\ty: 2"

    def test_nested_includes(self, tmp_path):
        root = _write_package(tmp_path / "magic.mse-game", {
            "game": "include file: one.txt",
            "one.txt": "include file: two.txt",
            "two.txt": "deep: yes",
        })
        assert read_game_text(root) == "deep: yes"

    def test_include_cycle(self, tmp_path):
        root = _write_package(tmp_path / "magic.mse-game", {
            "game": "include file: a.txt",
            "a.txt": "include file: b.txt",
            "b.txt": "include file: a.txt",
        })
        with pytest.raises(StructuralError, match="Include cycle"):
            read_game_text(root)

    @pytest.mark.parametrize("target", ["../outside.txt", "sub/../../outside.txt"])
    def test_include_outside_package_rejected(self, tmp_path, target):
        (tmp_path / "outside.txt").write_text("secret: 1", encoding="utf-8")
        root = _write_package(tmp_path / "magic.mse-game", {
            "game": f"include file: {target}",
        })
        with pytest.raises(ContainerError, match="outside"):
            read_game_text(root)

    def test_absolute_include_rejected(self, tmp_path):
        outside = tmp_path / "outside.txt"
        outside.write_text("secret: 1", encoding="utf-8")
        root = _write_package(tmp_path / "magic.mse-game", {
            "game": f"include file: {outside}",
        })
        with pytest.raises(ContainerError, match="outside"):
            read_game_text(root)

    def test_cycle_through_equivalent_path(self, tmp_path):
        root = _write_package(tmp_path / "magic.mse-game", {
            "game": "include file: a.txt",
            "a.txt": "include file: ./a.txt",
        })
        with pytest.raises(StructuralError, match="Include cycle"):
            read_game_text(root)

    def test_missing_include(self, tmp_path):
        root = _write_package(tmp_path / "magic.mse-game", {
            "game": "include file: nowhere.txt",
        })
        with pytest.raises(ContainerError, match="nowhere.txt"):
            read_game_text(root)


# ---------------------------------------------------------------------------
# load_game
# ---------------------------------------------------------------------------

class TestLoadGame:
    """Tests for load_game() on a small package."""

    @pytest.fixture()
    def game_dir(self, tmp_path):
        root = _write_package(tmp_path / "magic.mse-game", {
            "game": GAME_TEXT,
            "keywords.txt": KEYWORDS_TEXT,
        })
        (root / "card-back.png").write_bytes(b"icon-bytes")
        return root

    def test_metadata(self, game_dir):
        info = load_game(game_dir)
        assert info.version == GameVersion("magic", "2009-01-20")
        assert info.installer_group == "magic/game files"
        assert info.position_hint == 1
        assert info.has_keywords is True
        assert info.icon == b"icon-bytes"

    def test_keywords_from_include(self, game_dir):
        info = load_game(game_dir)
        assert [k.keyword for k in info.keywords] == ["Flying", "Haste"]
        assert info.keywords[0].reminder == "Evasion."

    def test_extra_keeps_other_entries(self, game_dir):
        info = load_game(game_dir)
        assert info.extra.keys() == ["mse version", "short name", "card field"]
        assert info.extra.get_map("card field").get_str("type") == "text"

    def test_missing_icon_is_none(self, game_dir):
        (game_dir / "card-back.png").unlink()
        assert load_game(game_dir).icon is None

    def test_non_numeric_position_hint(self, tmp_path):
        root = _write_package(tmp_path / "odd.mse-game", {
            "game": "version: 1\nposition hint: first",
        })
        info = load_game(root)
        assert info.position_hint is None
        assert info.has_keywords is False

    def test_missing_directory(self, tmp_path):
        with pytest.raises(ContainerError):
            load_game(tmp_path / "absent.mse-game")


class TestGameVersion:

    def test_same_name_newer_version(self):
        old = GameVersion("magic", "2008-08-01")
        new = GameVersion("magic", "2009-01-20")
        assert old.compatible_with(new)
        assert not new.compatible_with(old)

    def test_equal_version(self):
        v = GameVersion("magic", "2.0.0")
        assert v.compatible_with(GameVersion("Magic", "2.0.0"))

    def test_different_name(self):
        assert not GameVersion("magic", "1").compatible_with(GameVersion("vs", "2"))

    def test_numeric_components(self):
        assert GameVersion("g", "2.9").compatible_with(GameVersion("g", "2.10"))
