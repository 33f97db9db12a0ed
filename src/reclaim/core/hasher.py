"""
Copyright (c) 2026 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/hasher.py
Content hashing for the duplicate pipeline.

- Quick fingerprint: xxHash64 over the size plus a bounded head and tail sample.
  Never reads more than 2 * sample_size bytes, whatever the file size.
- Full digest: SHA-256 over the whole file, streamed through a fixed buffer.
  This is the only digest used to justify deletion.

Read errors are raised as OSError; the calling stage decides what to drop.
"""

import hashlib
from typing import Callable, IO, Optional

import xxhash

from reclaim.core.exceptions import FileChangedError
from reclaim.core.interfaces import HashAlgorithm, HashState, Hasher
from reclaim.core.models import EngineConfig, FileCandidate

Opener = Callable[[str, str], IO[bytes]]


# Use the same way to plug in any other hashing algorithm
class XXHashAlgorithmImpl(HashAlgorithm):
    name = "xxh64"

    def new(self) -> HashState:
        return xxhash.xxh64()


class Sha256AlgorithmImpl(HashAlgorithm):
    name = "sha256"

    def new(self) -> HashState:
        return hashlib.sha256()


class HasherImpl(Hasher):
    """
    Computes quick fingerprints and full digests for file candidates.
    `opener` defaults to the builtin open; tests swap in a counting reader.
    """

    def __init__(
        self,
        quick_algorithm: Optional[HashAlgorithm] = None,
        full_algorithm: Optional[HashAlgorithm] = None,
        sample_size: int = EngineConfig.QUICK_SAMPLE_SIZE,
        buffer_size: int = EngineConfig.FULL_HASH_BUFFER_SIZE,
        opener: Opener = open,
    ):
        self.quick_algorithm = quick_algorithm or XXHashAlgorithmImpl()
        self.full_algorithm = full_algorithm or Sha256AlgorithmImpl()
        self.sample_size = sample_size
        self.buffer_size = buffer_size
        self.opener = opener

    def quick_read_bytes(self, size: int) -> int:
        """Upper bound of bytes compute_quick_hash reads for a file of `size` bytes."""
        return min(size, 2 * self.sample_size)

    def compute_quick_hash(self, file: FileCandidate) -> bytes:
        """
        Digest of size + first sample + last sample.
        Files up to twice the sample size are read once, in full.
        """
        state = self.quick_algorithm.new()
        state.update(str(file.size).encode("ascii"))

        with self.opener(file.path, "rb") as f:
            if file.size <= 2 * self.sample_size:
                state.update(f.read(2 * self.sample_size))
            else:
                state.update(f.read(self.sample_size))
                f.seek(file.size - self.sample_size)
                state.update(f.read(self.sample_size))

        return state.digest()

    def compute_full_hash(self, file: FileCandidate) -> str:
        """
        Hex digest of the entire content.
        Raises FileChangedError if the byte count differs from the walked size.
        """
        state = self.full_algorithm.new()
        total = 0

        with self.opener(file.path, "rb") as f:
            while chunk := f.read(self.buffer_size):
                state.update(chunk)
                total += len(chunk)

        if total != file.size:
            raise FileChangedError(file.path, file.size, total)

        return f"{self.full_algorithm.name}:{state.hexdigest()}"
