"""
Core duplicate detection engine: walker, hashers, worker pool, stages and orchestrator.

- DirectoryWalkerImpl: depth-first traversal, symlinks never followed
- FileGrouperImpl: size and key based bucketing
- HasherImpl: xxHash64 head/tail fingerprint and streamed SHA-256 digest
- BoundedWorkerPool: fixed thread count with a bounded submission window
- DuplicateFinder: walk → size → quick hash → full hash → ranked groups
- Sorter: keep-newest / keep-oldest retention

No UI or trash dependencies; suitable for CLI and embedding.
"""

from .exceptions import ReclaimError, ScanError, FileChangedError
from .walker import DirectoryWalkerImpl
from .grouper import FileGrouperImpl
from .hasher import HasherImpl, XXHashAlgorithmImpl, Sha256AlgorithmImpl
from .pool import BoundedWorkerPool, WorkResult
from .deduplicator import DuplicateFinder
from .sorter import Sorter
from .progress import ProgressReporter, ProgressChannel
from .usage import measure_usage, find_large_files
from .models import (
    FileCandidate, CandidateGroup, FileRecord, DuplicateGroup, RetentionPolicy,
    RetentionSelection, ScanStage, ProgressEvent, ScanWarning, ScanStats, ScanResult,
    ScanParams, EngineConfig, CleanupReport, UsageReport, total_reclaimable)

__all__ = [
    "ReclaimError",
    "ScanError",
    "FileChangedError",
    "DirectoryWalkerImpl",
    "FileGrouperImpl",
    "HasherImpl",
    "XXHashAlgorithmImpl",
    "Sha256AlgorithmImpl",
    "BoundedWorkerPool",
    "WorkResult",
    "DuplicateFinder",
    "Sorter",
    "ProgressReporter",
    "ProgressChannel",
    "measure_usage",
    "find_large_files",
    "FileCandidate",
    "CandidateGroup",
    "FileRecord",
    "DuplicateGroup",
    "RetentionPolicy",
    "RetentionSelection",
    "ScanStage",
    "ProgressEvent",
    "ScanWarning",
    "ScanStats",
    "ScanResult",
    "ScanParams",
    "EngineConfig",
    "CleanupReport",
    "UsageReport",
    "total_reclaimable",
]
