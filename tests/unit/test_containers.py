"""
Unit tests for set package containers (mse_ingest.containers).

Archives and directories are written to tmp_path by the conftest fixtures.
"""

import pytest

from mse_ingest.containers import (
    DirectoryContainer,
    ZipContainer,
    is_image_entry,
    is_symbol_entry,
    open_container,
)
from mse_ingest.exceptions import ContainerError


EXPECTED_NAMES = ["image1", "image2", "readme.txt", "set", "symbol3.mse-symbol"]


class TestEntryRouting:

    @pytest.mark.parametrize("name,expected", [
        ("symbol3.mse-symbol", True),
        ("set", False),
        ("symbol.mse-symbol.bak", False),
    ])
    def test_is_symbol_entry(self, name, expected):
        assert is_symbol_entry(name) is expected

    @pytest.mark.parametrize("name,expected", [
        ("image1", True),
        ("image", True),
        ("set", False),
        ("card_image1", False),
    ])
    def test_is_image_entry(self, name, expected):
        assert is_image_entry(name) is expected


class TestZipContainer:

    def test_entry_names(self, set_archive):
        with ZipContainer(set_archive) as container:
            assert sorted(container.entry_names()) == EXPECTED_NAMES

    def test_read_text(self, set_archive, set_text):
        with ZipContainer(set_archive) as container:
            assert container.read_text("set") == set_text

    def test_read_bytes(self, set_archive, sample_entries):
        with ZipContainer(set_archive) as container:
            assert container.read_bytes("image1") == sample_entries["image1"]

    def test_missing_entry(self, set_archive):
        with ZipContainer(set_archive) as container:
            with pytest.raises(ContainerError, match="not found"):
                container.read_bytes("nope")

    def test_not_a_zip(self, tmp_path):
        path = tmp_path / "broken.mse-set"
        path.write_bytes(b"definitely not a zip")
        with pytest.raises(ContainerError, match="Cannot open"):
            ZipContainer(path)

    def test_bom_dropped(self, write_archive):
        path = write_archive({"set": b"\xef\xbb\xbfgame: magic\n"})
        with ZipContainer(path) as container:
            assert container.read_text("set") == "game: magic\n"

    def test_invalid_utf8(self, write_archive):
        path = write_archive({"set": b"game: \xff\xfe\n"})
        with ZipContainer(path) as container:
            with pytest.raises(ContainerError, match="UTF-8"):
                container.read_text("set")


class TestDirectoryContainer:

    def test_entry_names_sorted(self, set_directory):
        container = DirectoryContainer(set_directory)
        assert container.entry_names() == EXPECTED_NAMES

    def test_nested_names_are_posix(self, tmp_path):
        (tmp_path / "sub").mkdir()
        (tmp_path / "sub" / "image3").write_bytes(b"x")
        container = DirectoryContainer(tmp_path)
        assert container.entry_names() == ["sub/image3"]
        assert container.read_bytes("sub/image3") == b"x"

    def test_read_text(self, set_directory, set_text):
        with DirectoryContainer(set_directory) as container:
            assert container.read_text("set") == set_text

    def test_missing_entry(self, set_directory):
        container = DirectoryContainer(set_directory)
        with pytest.raises(ContainerError, match="not found"):
            container.open_entry("nope")

    def test_missing_directory(self, tmp_path):
        with pytest.raises(ContainerError):
            DirectoryContainer(tmp_path / "absent")


class TestOpenContainer:

    def test_zip(self, set_archive):
        with open_container(set_archive) as container:
            assert isinstance(container, ZipContainer)

    def test_directory(self, set_directory):
        with open_container(set_directory) as container:
            assert isinstance(container, DirectoryContainer)

    def test_missing_path(self, tmp_path):
        with pytest.raises(ContainerError, match="not found"):
            open_container(tmp_path / "absent.mse-set")
