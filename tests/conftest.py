"""
Shared test fixtures for mse-ingest tests.

Sample entry texts are built with explicit ``\\t`` escapes so that the
indentation under test is unambiguous. Set packages are written to
``tmp_path`` as zip archives or unpacked directories.
"""

import zipfile
from pathlib import Path

import pytest

# ---------------------------------------------------------------------------
# Sample entry texts
# ---------------------------------------------------------------------------
SAMPLE_SET_TEXT = "\n".join([
    "mse version: 2.0.2",
    "game: magic",
    "stylesheet: m15",
    "set info:",
    "\ttitle: Outcast Provocation",
    "\tdescription:",
    "\t\tA clan of outcasts has formed.",
    "\t\t",
    "\t\tThis is just the beginning.",
    "\tsymbol: symbol3.mse-symbol",
    "\tborder color: rgb(255,255,255)",
    "\tautomatic card numbers: no",
    "styling:",
    "\tmagic-m15:",
    "\t\tframe color: rgb(1,2,3)",
    "\t\ttext box mana symbols: magic-mana-small.mse-symbol-font",
    "card:",
    "\thas styling: false",
    "\tnotes: first card",
    "\ttime created: 2020-01-01 00:00:00",
    "\ttime modified: 2020-01-02 12:30:45",
    "\tname: Goblin Guide",
    "\tcasting cost: R",
    "\trule text:",
    "\t\tHaste",
    "",
    "\t\tWhenever this attacks, reveal.",
    "card:",
    "\ttime created: 2021-05-06 07:08:09",
    "\ttime modified: 2021-05-06 07:08:10",
    "\tname: Shock",
    "\tstyling data:",
    "\t\tframe: old",
    "\t\tcolor: rgb(10,20,30)",
    "keyword:",
    "\tkeyword: Flying",
    "\tmatch: flying",
    "\tmode: core",
    "\treminder: This creature can't be blocked except by creatures with flying.",
    "keyword:",
    "\tkeyword: Haste",
    "\tmatch: haste",
    "\tmode: core",
    "\treminder: It can attack this turn.",
    "\trules: unknown",
    "version control:",
    "\ttype: none",
    "apprentice code: ",
    "",
])

SAMPLE_SYMBOL_TEXT = "\n".join([
    "mse version: 0.3.8",
    "part:",
    "\ttype: shape",
    "\tname: Square",
    "\tpoint:",
    "\t\tposition: (0,0)",
    "\t\tlock: free",
    "\tpoint:",
    "\t\tposition: (1,0)",
    "\t\tlock: free",
    "",
])

IMAGE_BYTES = b"\x89PNG\r\n\x1a\nnot really a png"


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture()
def set_text() -> str:
    return SAMPLE_SET_TEXT


@pytest.fixture()
def symbol_text() -> str:
    return SAMPLE_SYMBOL_TEXT


@pytest.fixture()
def sample_entries() -> dict[str, bytes]:
    """Entries of a small but complete set package."""
    return {
        "set": SAMPLE_SET_TEXT.encode("utf-8"),
        "symbol3.mse-symbol": SAMPLE_SYMBOL_TEXT.encode("utf-8"),
        "image1": IMAGE_BYTES,
        "image2": IMAGE_BYTES + b"2",
        "readme.txt": b"ignored",
    }


@pytest.fixture()
def write_archive(tmp_path):
    """Factory: write a dict of entries into a zip archive under tmp_path."""
    def _write(entries: dict[str, bytes], name: str = "sample.mse-set") -> Path:
        path = tmp_path / name
        with zipfile.ZipFile(path, "w") as zf:
            for entry_name, data in entries.items():
                zf.writestr(entry_name, data)
        return path
    return _write


@pytest.fixture()
def set_archive(write_archive, sample_entries) -> Path:
    """A zipped ``.mse-set`` package in a temp directory."""
    return write_archive(sample_entries)


@pytest.fixture()
def set_directory(tmp_path, sample_entries) -> Path:
    """The same package, unpacked into a directory."""
    root = tmp_path / "unpacked.mse-set"
    root.mkdir()
    for name, data in sample_entries.items():
        (root / name).write_bytes(data)
    return root


# ---------------------------------------------------------------------------
# Pytest markers
# ---------------------------------------------------------------------------
def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers",
        "integration: mark test as integration test (builds full set packages on disk)",
    )
