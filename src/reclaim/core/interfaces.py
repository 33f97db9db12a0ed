"""
Copyright (c) 2026 initumX (initum.x@gmail.com)
Licensed under the MIT License

interfaces.py

Structural interfaces (Protocols) shared by the scan engine.

Key Components:
---------------
- HashAlgorithm: streaming hash factory (xxHash64 for sampling, SHA-256 for verification).
- Hasher: computes the quick fingerprint and the full digest of a candidate.
- DirectoryWalker: yields regular files under a root.
- CandidateStage / VerifyStage: individual stages of the duplicate pipeline.
- TrashBackend: the safe-delete capability used by cleanup.
"""

from typing import Protocol, Iterator, List, Optional, Callable

from reclaim.core.models import (
    FileCandidate,
    CandidateGroup,
    DuplicateGroup,
    ProgressEvent,
)

StoppedFlag = Callable[[], bool]
ProgressCallback = Callable[[ProgressEvent], None]


class HashState(Protocol):
    def update(self, data: bytes) -> None: ...
    def digest(self) -> bytes: ...
    def hexdigest(self) -> str: ...


class HashAlgorithm(Protocol):
    """
    Interface for streaming hash functions.
    Lets the sampling and verification stages plug in different functions
    without touching the read logic.
    """
    name: str

    def new(self) -> HashState:
        """Return a fresh incremental hash object."""
        ...


class Hasher(Protocol):
    def compute_quick_hash(self, file: FileCandidate) -> bytes: ...
    def compute_full_hash(self, file: FileCandidate) -> str: ...


class DirectoryWalker(Protocol):
    def walk(self, stopped_flag: Optional[StoppedFlag] = None) -> Iterator[FileCandidate]:
        """Lazily yield every regular, non-symlink file under the root."""
        ...


class CandidateStage(Protocol):
    """A stage that narrows candidate groups without proving equality."""

    def process(
        self,
        groups: List[CandidateGroup],
        stopped_flag: Optional[StoppedFlag] = None,
        progress_callback: Optional[ProgressCallback] = None
    ) -> List[CandidateGroup]:
        ...


class VerifyStage(Protocol):
    """The final stage: turns candidate groups into verified duplicate groups."""

    def process(
        self,
        groups: List[CandidateGroup],
        stopped_flag: Optional[StoppedFlag] = None,
        progress_callback: Optional[ProgressCallback] = None
    ) -> List[DuplicateGroup]:
        ...


class TrashBackend(Protocol):
    def __call__(self, file_path: str) -> None:
        """Move a file somewhere recoverable. Raises on failure."""
        ...
