"""
Copyright (c) 2026 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/models.py
Data models, enums and configuration for duplicate scanning and cleanup.
"""

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Dict, Optional, Tuple, Union

from reclaim.utils.convert_utils import ConvertUtils


# =============================
# Enums
# =============================

class ScanStage(str, Enum):
    """
    Per-scan state machine:
    IDLE → WALKING → CLASSIFYING → QUICK_HASHING → FULL_HASHING → GROUPED → IDLE
    """
    IDLE = "idle"
    WALKING = "walking"
    CLASSIFYING = "classifying"
    QUICK_HASHING = "quick-hashing"
    FULL_HASHING = "full-hashing"
    GROUPED = "grouped"

    @property
    def number(self) -> int:
        """Stage number shown to users (0 for the bookkeeping states)."""
        mapping = {
            ScanStage.WALKING: 1,
            ScanStage.CLASSIFYING: 1,
            ScanStage.QUICK_HASHING: 2,
            ScanStage.FULL_HASHING: 3,
        }
        return mapping.get(self, 0)

    @property
    def display_name(self) -> str:
        """Human-readable name for console output."""
        mapping = {
            ScanStage.IDLE: "Idle",
            ScanStage.WALKING: "Collecting file info",
            ScanStage.CLASSIFYING: "Size grouping",
            ScanStage.QUICK_HASHING: "Quick hash",
            ScanStage.FULL_HASHING: "Full hash",
            ScanStage.GROUPED: "Grouped",
        }
        return mapping.get(self, self.value)


class RetentionPolicy(Enum):
    """Which member of a duplicate group survives cleanup."""
    KEEP_NEWEST = "newest"
    KEEP_OLDEST = "oldest"

    @classmethod
    def from_keep_newest(cls, keep_newest: bool) -> "RetentionPolicy":
        return cls.KEEP_NEWEST if keep_newest else cls.KEEP_OLDEST

    @property
    def display_name(self) -> str:
        mapping = {
            RetentionPolicy.KEEP_NEWEST: "Keep newest",
            RetentionPolicy.KEEP_OLDEST: "Keep oldest",
        }
        return mapping.get(self, self.value)

    def __repr__(self) -> str:
        return self.value


# =============================
# Engine configuration
# =============================

class EngineConfig:
    QUICK_SAMPLE_SIZE = 8 * 1024  # bytes read from each end of a file by the quick stage
    FULL_HASH_BUFFER_SIZE = 256 * 1024
    DEFAULT_MIN_SIZE = 1024
    MIN_WORKERS = 2
    MAX_WORKERS = 8
    IN_FLIGHT_PER_WORKER = 4
    WALK_PROGRESS_INTERVAL = 5000
    HASH_PROGRESS_INTERVAL = 200

    @staticmethod
    def default_workers() -> int:
        """CPU count clamped to [MIN_WORKERS, MAX_WORKERS]; hashing is I/O-bound."""
        cpus = os.cpu_count() or EngineConfig.MIN_WORKERS
        return max(EngineConfig.MIN_WORKERS, min(cpus, EngineConfig.MAX_WORKERS))


# ======================
#  Core Data Models
# ======================

@dataclass(frozen=True)
class FileCandidate:
    """
    A regular file found by the walker.
    `identity` is the (st_dev, st_ino) pair; hard links share it.
    `discovery_index` is the walk order and the final tie-breaker for retention.
    """
    path: str
    size: int
    identity: Tuple[int, int] = (0, 0)
    modified_time: float = 0.0
    discovery_index: int = 0

    @property
    def name(self) -> str:
        return os.path.basename(self.path)

    def __repr__(self):
        return f"<FileCandidate path={self.path}, size={self.size}>"


@dataclass
class CandidateGroup:
    """Same-size files that may still turn out to be duplicates."""
    size: int
    files: List[FileCandidate]

    def __repr__(self):
        return f"<CandidateGroup size={self.size}, count={len(self.files)}>"


@dataclass(frozen=True)
class FileRecord:
    """Member of a verified duplicate group."""
    path: str
    name: str
    size: int
    modified_time: float
    discovery_index: int = 0

    @classmethod
    def from_candidate(cls, candidate: FileCandidate) -> "FileRecord":
        return cls(
            path=candidate.path,
            name=candidate.name,
            size=candidate.size,
            modified_time=candidate.modified_time,
            discovery_index=candidate.discovery_index,
        )


@dataclass
class DuplicateGroup:
    """
    Files proven byte-identical by their full content digest.
    Every member has exactly `file_size` bytes and a group always holds 2+ files.
    """
    content_digest: str
    file_size: int
    files: List[FileRecord]

    def __post_init__(self):
        if len(self.files) < 2:
            raise ValueError("A duplicate group needs at least two files")
        for record in self.files:
            if record.size != self.file_size:
                raise ValueError(
                    f"File {record.path} has {record.size} bytes, group expects {self.file_size}"
                )

    @property
    def duplicate_count(self) -> int:
        return len(self.files)

    @property
    def reclaimable_bytes(self) -> int:
        """Space freed by keeping exactly one copy."""
        return (len(self.files) - 1) * self.file_size

    def __repr__(self):
        return f"<DuplicateGroup size={self.file_size}, count={len(self.files)}>"


@dataclass(frozen=True)
class RetentionSelection:
    keep: FileRecord
    remove: List[FileRecord]


@dataclass(frozen=True)
class ScanWarning:
    """A file dropped from the scan because of a per-file error."""
    path: str
    stage: ScanStage
    message: str

    def __str__(self):
        return f"[{self.stage.display_name}] {self.path}: {self.message}"


@dataclass(frozen=True)
class ProgressEvent:
    """Typed progress notification; presentation is left to the listener."""
    stage: ScanStage
    processed: int = 0
    total: Optional[int] = None

    def describe(self) -> str:
        if self.stage == ScanStage.WALKING:
            return f"Stage 1: collecting file info ({self.processed} files found)"
        if self.stage == ScanStage.CLASSIFYING:
            return f"Stage 1: {self.processed} files share a size with another file"
        if self.stage == ScanStage.QUICK_HASHING:
            if self.processed == 0:
                return f"Stage 2: quick-hashing {self.total} candidates"
            return f"Quick hashing: {self.processed} / {self.total} files"
        if self.stage == ScanStage.FULL_HASHING:
            if self.processed == 0:
                return f"Stage 3: full-hashing {self.total} candidates"
            return f"Full hashing: {self.processed} / {self.total} files"
        if self.stage == ScanStage.GROUPED:
            return f"Done: {self.processed} duplicate groups"
        return self.stage.display_name


class ScanStats:
    """
    Statistics collected during a scan.
    """
    def __init__(self):
        self.total_time: float = 0.0
        self.files_walked: int = 0
        self.bytes_hashed: int = 0
        self.stage_stats: Dict[str, Dict[str, Union[int, float]]] = {}

    def update_stage(
            self,
            stage: ScanStage,
            groups_found: int,
            files_processed: int,
            duration: float
    ) -> None:
        if stage.value not in self.stage_stats:
            self.stage_stats[stage.value] = {
                "groups": 0,
                "files": 0,
                "time": 0.0
            }
        self.stage_stats[stage.value]["groups"] += groups_found
        self.stage_stats[stage.value]["files"] += files_processed
        self.stage_stats[stage.value]["time"] += duration

    def print_summary(self) -> str:
        lines = [
            "Scan Statistics:",
            f"Total Execution Time: {self.total_time:.3f}s",
            f"Files walked: {self.files_walked}, bytes hashed: {ConvertUtils.bytes_to_human(self.bytes_hashed)}\n",
            "Stage: GROUPS / FILES / TIME"
        ]

        for stage_value, data in self.stage_stats.items():
            label = ScanStage(stage_value).display_name
            lines.append(f"{label}: {data['groups']} / {data['files']} / {data['time']:.3f}s")

        return "\n".join(lines)


def total_reclaimable(groups: List[DuplicateGroup]) -> int:
    """Extra space held by all groups: sum of (count - 1) * size."""
    return sum(group.reclaimable_bytes for group in groups)


@dataclass
class ScanResult:
    groups: List[DuplicateGroup] = field(default_factory=list)
    warnings: List[ScanWarning] = field(default_factory=list)
    stats: ScanStats = field(default_factory=ScanStats)
    cancelled: bool = False

    @property
    def total_reclaimable_bytes(self) -> int:
        return total_reclaimable(self.groups)


@dataclass
class CleanupReport:
    """Outcome of moving non-retained duplicates to trash."""
    bytes_reclaimed: int = 0
    removed: List[str] = field(default_factory=list)
    failures: List[Tuple[str, str]] = field(default_factory=list)  # (path, error message)

    @property
    def ok(self) -> bool:
        return not self.failures

    def merge(self, other: "CleanupReport") -> None:
        self.bytes_reclaimed += other.bytes_reclaimed
        self.removed.extend(other.removed)
        self.failures.extend(other.failures)


@dataclass
class UsageReport:
    """Disk usage under a root, hard links counted once."""
    total_bytes: int = 0
    file_count: int = 0
    hard_links_skipped: int = 0
    warnings: List[ScanWarning] = field(default_factory=list)


# =============================
# Scan parameters
# =============================

@dataclass
class ScanParams:
    """Parameters for one scan, validated on creation. Used by both the API and the CLI."""
    root_dir: str
    min_size_bytes: int = EngineConfig.DEFAULT_MIN_SIZE
    workers: Optional[int] = None
    quick_sample_size: int = EngineConfig.QUICK_SAMPLE_SIZE
    full_buffer_size: int = EngineConfig.FULL_HASH_BUFFER_SIZE
    retention: RetentionPolicy = RetentionPolicy.KEEP_NEWEST
    full_hash_byte_budget: Optional[int] = None

    def __post_init__(self):
        if not self.root_dir:
            raise ValueError("Root directory cannot be empty")

        if self.min_size_bytes < 0:
            raise ValueError("Minimum size cannot be negative")

        if self.workers is None:
            self.workers = EngineConfig.default_workers()
        elif self.workers < 1:
            raise ValueError("Worker count must be at least 1")

        if self.quick_sample_size < 1:
            raise ValueError("Quick sample size must be positive")

        if self.full_buffer_size < 1:
            raise ValueError("Full hash buffer size must be positive")

        if self.full_hash_byte_budget is not None and self.full_hash_byte_budget < 0:
            raise ValueError("Full hash byte budget cannot be negative")

    @staticmethod
    def from_human_readable(
            root_dir: str,
            min_size_str: str = "1K",
            workers: Optional[int] = None,
            keep_newest: bool = True,
            budget_str: str = "",
    ) -> "ScanParams":
        """
        Build params from console-style inputs such as "500K" or "1.5GB".
        """
        budget = ConvertUtils.human_to_bytes(budget_str) if budget_str else None
        return ScanParams(
            root_dir=root_dir,
            min_size_bytes=ConvertUtils.human_to_bytes(min_size_str),
            workers=workers,
            retention=RetentionPolicy.from_keep_newest(keep_newest),
            full_hash_byte_budget=budget,
        )
