"""
Tests for quick fingerprints and full digests.
The quick hash must stay cheap; the full hash must be exact.
"""
import hashlib
import pytest

from reclaim.core.exceptions import FileChangedError
from reclaim.core.hasher import HasherImpl, Sha256AlgorithmImpl, XXHashAlgorithmImpl
from reclaim.core.models import FileCandidate


def _candidate(path):
    return FileCandidate(path=str(path), size=path.stat().st_size)


class TestAlgorithms:
    def test_xxhash_state(self):
        state = XXHashAlgorithmImpl().new()
        state.update(b"data")
        assert len(state.digest()) == 8

    def test_sha256_state_matches_hashlib(self):
        state = Sha256AlgorithmImpl().new()
        state.update(b"data")
        assert state.hexdigest() == hashlib.sha256(b"data").hexdigest()


class TestQuickHash:
    """Head/tail fingerprint with bounded reads."""

    def test_identical_files_match(self, tmp_path):
        a, b = tmp_path / "a", tmp_path / "b"
        a.write_bytes(b"same" * 1000)
        b.write_bytes(b"same" * 1000)

        hasher = HasherImpl()
        assert hasher.compute_quick_hash(_candidate(a)) == hasher.compute_quick_hash(_candidate(b))

    def test_different_head_differs(self, tmp_path):
        a, b = tmp_path / "a", tmp_path / "b"
        a.write_bytes(b"X" + b"0" * 50_000)
        b.write_bytes(b"Y" + b"0" * 50_000)

        hasher = HasherImpl()
        assert hasher.compute_quick_hash(_candidate(a)) != hasher.compute_quick_hash(_candidate(b))

    def test_different_tail_differs(self, tmp_path):
        a, b = tmp_path / "a", tmp_path / "b"
        a.write_bytes(b"0" * 50_000 + b"X")
        b.write_bytes(b"0" * 50_000 + b"Y")

        hasher = HasherImpl()
        assert hasher.compute_quick_hash(_candidate(a)) != hasher.compute_quick_hash(_candidate(b))

    def test_middle_is_not_sampled(self, tmp_path):
        """Differences outside the sampled ends are left for the full hash to catch."""
        a, b = tmp_path / "a", tmp_path / "b"
        a.write_bytes(b"h" * 8192 + b"1" * 20_000 + b"t" * 8192)
        b.write_bytes(b"h" * 8192 + b"2" * 20_000 + b"t" * 8192)

        hasher = HasherImpl()
        assert hasher.compute_quick_hash(_candidate(a)) == hasher.compute_quick_hash(_candidate(b))

    def test_size_is_part_of_the_fingerprint(self, tmp_path):
        path = tmp_path / "a"
        path.write_bytes(b"z" * 4000)

        hasher = HasherImpl()
        real = FileCandidate(path=str(path), size=4000)
        claimed = FileCandidate(path=str(path), size=4001)
        assert hasher.compute_quick_hash(real) != hasher.compute_quick_hash(claimed)

    def test_large_file_reads_at_most_two_samples(self, tmp_path, counting_opener):
        path = tmp_path / "big.bin"
        path.write_bytes(b"b" * (5 * 1024 * 1024))

        hasher = HasherImpl(sample_size=8192, opener=counting_opener)
        hasher.compute_quick_hash(_candidate(path))

        assert sum(counting_opener.reads) <= 2 * 8192
        assert hasher.quick_read_bytes(5 * 1024 * 1024) == 2 * 8192

    def test_small_file_is_read_once(self, tmp_path, counting_opener):
        path = tmp_path / "small.bin"
        path.write_bytes(b"s" * 10_000)

        hasher = HasherImpl(sample_size=8192, opener=counting_opener)
        hasher.compute_quick_hash(_candidate(path))

        assert counting_opener.reads == [10_000]
        assert hasher.quick_read_bytes(10_000) == 10_000

    def test_missing_file_raises_os_error(self, tmp_path):
        ghost = FileCandidate(path=str(tmp_path / "ghost"), size=100)
        with pytest.raises(OSError):
            HasherImpl().compute_quick_hash(ghost)


class TestFullHash:
    """Whole-file SHA-256."""

    def test_matches_sha256_of_content(self, tmp_path):
        content = bytes(range(256)) * 3000
        path = tmp_path / "f.bin"
        path.write_bytes(content)

        digest = HasherImpl(buffer_size=4096).compute_full_hash(_candidate(path))
        assert digest == "sha256:" + hashlib.sha256(content).hexdigest()

    def test_buffer_size_does_not_change_digest(self, tmp_path):
        path = tmp_path / "f.bin"
        path.write_bytes(b"q" * 100_001)

        candidate = _candidate(path)
        assert HasherImpl(buffer_size=7).compute_full_hash(candidate) == \
            HasherImpl(buffer_size=256 * 1024).compute_full_hash(candidate)

    def test_differing_middles_differ(self, tmp_path):
        a, b = tmp_path / "a", tmp_path / "b"
        a.write_bytes(b"h" * 8192 + b"1" * 20_000 + b"t" * 8192)
        b.write_bytes(b"h" * 8192 + b"2" * 20_000 + b"t" * 8192)

        hasher = HasherImpl()
        assert hasher.compute_full_hash(_candidate(a)) != hasher.compute_full_hash(_candidate(b))

    def test_streams_through_fixed_buffer(self, tmp_path, counting_opener):
        path = tmp_path / "f.bin"
        path.write_bytes(b"x" * 10_000)

        HasherImpl(buffer_size=4096, opener=counting_opener).compute_full_hash(_candidate(path))
        assert max(counting_opener.reads) <= 4096
        assert sum(counting_opener.reads) == 10_000

    def test_size_change_raises_file_changed(self, tmp_path):
        path = tmp_path / "f.bin"
        path.write_bytes(b"x" * 500)
        stale = FileCandidate(path=str(path), size=400)

        with pytest.raises(FileChangedError, match="expected 400 bytes, read 500"):
            HasherImpl().compute_full_hash(stale)

    def test_file_changed_is_an_os_error(self):
        assert issubclass(FileChangedError, OSError)
