"""
Shared fixtures for duplicate detection tests.
Creates isolated temporary directories with controlled test files.
"""
import pytest
import tempfile
from pathlib import Path
from typing import Dict


@pytest.fixture
def temp_dir():
    """Creates isolated temporary directory, auto-cleanup after test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def test_files(temp_dir) -> Dict[str, Path]:
    """
    Creates controlled test files for deduplication scenarios:
    - 3 identical 2048-byte files of 'A' (one in a subdirectory)
    - 2 identical 3000-byte files of 'B'
    - 1 unique file sharing the 'A' size but not its content
    - 1 unique file with a size of its own
    - 2 identical files below the default 1K minimum size
    - 1 empty file
    """
    files = {}

    content_a = b"A" * 2048
    files["dup1_a"] = temp_dir / "dup1_a.bin"
    files["dup1_b"] = temp_dir / "dup1_b.bin"
    files["dup1_a"].write_bytes(content_a)
    files["dup1_b"].write_bytes(content_a)

    content_b = b"B" * 3000
    files["dup2_a"] = temp_dir / "dup2_a.bin"
    files["dup2_b"] = temp_dir / "dup2_b.bin"
    files["dup2_a"].write_bytes(content_b)
    files["dup2_b"].write_bytes(content_b)

    files["unique1"] = temp_dir / "unique1.bin"
    files["unique1"].write_bytes(b"C" * 2048)
    files["unique2"] = temp_dir / "unique2.bin"
    files["unique2"].write_bytes(b"D" * 5000)

    files["small_a"] = temp_dir / "small_a.txt"
    files["small_b"] = temp_dir / "small_b.txt"
    files["small_a"].write_bytes(b"s" * 100)
    files["small_b"].write_bytes(b"s" * 100)

    files["empty"] = temp_dir / "empty.txt"
    files["empty"].write_bytes(b"")

    subdir = temp_dir / "subdir"
    subdir.mkdir()
    files["sub_dup"] = subdir / "dup_in_subdir.bin"
    files["sub_dup"].write_bytes(content_a)

    return files


class CountingReader:
    """File wrapper recording the size of every read."""

    def __init__(self, f, reads):
        self._f = f
        self._reads = reads

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self._f.close()
        return False

    def read(self, size=-1):
        data = self._f.read(size)
        self._reads.append(len(data))
        return data

    def seek(self, offset, whence=0):
        return self._f.seek(offset, whence)


@pytest.fixture
def counting_opener():
    """Opener for HasherImpl that records bytes read per call in `opener.reads`."""
    reads = []

    def opener(path, mode):
        return CountingReader(open(path, mode), reads)

    opener.reads = reads
    return opener
