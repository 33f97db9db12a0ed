"""
Copyright (c) 2026 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/stages.py
Stages of the duplicate detection funnel.

CLASS HIERARCHY
---------------
SizeStageImpl      : buckets walked files by exact size (zero I/O)
HashStageBase      : shared worker-pool plumbing and soft-failure bookkeeping
QuickHashStage     : splits size buckets by (size, head+tail fingerprint)
FullHashStage      : proves equality with a whole-file SHA-256 and emits DuplicateGroups

STAGE CONTRACTS
---------------
Each stage only sees the survivors of the previous one and:
  • returns groups of 2+ files only
  • drops files that fail to read, recording a ScanWarning instead of raising
  • reports progress through ProgressEvent objects
  • returns an empty result once stopped_flag() is True
"""

import logging
from typing import Callable, Hashable, List, Optional, Tuple

from reclaim.core.grouper import FileGrouperImpl
from reclaim.core.hasher import HasherImpl
from reclaim.core.interfaces import CandidateStage, VerifyStage, StoppedFlag, ProgressCallback
from reclaim.core.models import (
    CandidateGroup,
    DuplicateGroup,
    EngineConfig,
    FileCandidate,
    FileRecord,
    ScanStage,
    ScanWarning,
)
from reclaim.core.pool import BoundedWorkerPool
from reclaim.core.progress import ProgressReporter

logger = logging.getLogger(__name__)


def _sort_groups(groups: List[CandidateGroup]) -> List[CandidateGroup]:
    # Largest files first, then walk order: stable across runs.
    return sorted(groups, key=lambda g: (-g.size, g.files[0].discovery_index))


class SizeStageImpl:
    def __init__(self, grouper: FileGrouperImpl):
        self.grouper = grouper

    def process(
            self,
            files: List[FileCandidate],
            stopped_flag: Optional[StoppedFlag] = None,
            progress_callback: Optional[ProgressCallback] = None
    ) -> List[CandidateGroup]:
        """
        Group by file size.
        Returns CandidateGroups with 2+ files of the same size.
        """
        if stopped_flag and stopped_flag():
            return []

        size_groups = self.grouper.group_by_size(files)
        groups = _sort_groups([
            CandidateGroup(size=size, files=files_list)
            for size, files_list in size_groups.items()
        ])

        survivors = sum(len(g.files) for g in groups)
        ProgressReporter(progress_callback).emit(ScanStage.CLASSIFYING, survivors, len(files))
        return groups


# =============================
# Hashing Base Class
# =============================
class HashStageBase:
    """
    Runs a hash function over every file of the incoming groups on a
    bounded pool and regroups the survivors by the computed key.
    """
    stage: ScanStage = ScanStage.IDLE

    def __init__(
        self,
        grouper: FileGrouperImpl,
        hasher: HasherImpl,
        pool: BoundedWorkerPool,
        warnings: Optional[List[ScanWarning]] = None,
    ):
        self.grouper = grouper
        self.hasher = hasher
        self.pool = pool
        self.warnings = warnings if warnings is not None else []
        self.bytes_read = 0

    def _bytes_for(self, file: FileCandidate) -> int:
        raise NotImplementedError

    def _hash_and_group(
        self,
        files: List[FileCandidate],
        hash_func: Callable[[FileCandidate], Hashable],
        stopped_flag: Optional[StoppedFlag],
        progress_callback: Optional[ProgressCallback],
    ) -> Optional[dict]:
        """
        Returns {(size, digest): [files]} for keys shared by 2+ files,
        or None if the scan was stopped.
        """
        total = len(files)
        reporter = ProgressReporter(progress_callback, EngineConfig.HASH_PROGRESS_INTERVAL)
        reporter.emit(self.stage, 0, total)

        pairs: List[Tuple[Hashable, FileCandidate]] = []
        processed = 0
        for result in self.pool.map_unordered(hash_func, files, stopped_flag=stopped_flag):
            processed += 1
            if result.ok:
                pairs.append(((result.item.size, result.value), result.item))
                self.bytes_read += self._bytes_for(result.item)
            else:
                self.skip(result.item, str(result.error))
            reporter.tick(self.stage, processed, total)

        if stopped_flag and stopped_flag():
            return None
        return self.grouper.group_by_key(pairs)

    def skip(self, file: FileCandidate, message: str) -> None:
        """Drop a file from consideration and remember why."""
        logger.warning(f"Skipping {file.path}: {message}")
        self.warnings.append(ScanWarning(path=file.path, stage=self.stage, message=message))


# =============================
# Individual Stages
# =============================
class QuickHashStage(HashStageBase, CandidateStage):
    stage = ScanStage.QUICK_HASHING

    def _bytes_for(self, file: FileCandidate) -> int:
        return self.hasher.quick_read_bytes(file.size)

    def process(
        self,
        groups: List[CandidateGroup],
        stopped_flag: Optional[StoppedFlag] = None,
        progress_callback: Optional[ProgressCallback] = None
    ) -> List[CandidateGroup]:
        if stopped_flag and stopped_flag():
            return []

        files = [f for group in groups for f in group.files]
        hash_groups = self._hash_and_group(files, self.hasher.compute_quick_hash, stopped_flag, progress_callback)
        if hash_groups is None:
            return []

        return _sort_groups([
            CandidateGroup(size=size, files=members)
            for (size, _digest), members in hash_groups.items()
        ])


class FullHashStage(HashStageBase, VerifyStage):
    """
    Final verification. With `byte_budget` set, whole candidate groups that
    would push the bytes re-read past the budget are skipped (a miss, never
    a false positive).
    """
    stage = ScanStage.FULL_HASHING

    def __init__(
        self,
        grouper: FileGrouperImpl,
        hasher: HasherImpl,
        pool: BoundedWorkerPool,
        warnings: Optional[List[ScanWarning]] = None,
        byte_budget: Optional[int] = None,
    ):
        super().__init__(grouper, hasher, pool, warnings)
        self.byte_budget = byte_budget

    def _bytes_for(self, file: FileCandidate) -> int:
        return file.size

    def process(
        self,
        groups: List[CandidateGroup],
        stopped_flag: Optional[StoppedFlag] = None,
        progress_callback: Optional[ProgressCallback] = None
    ) -> List[DuplicateGroup]:
        if stopped_flag and stopped_flag():
            return []

        files = [f for group in self._within_budget(groups) for f in group.files]
        hash_groups = self._hash_and_group(files, self.hasher.compute_full_hash, stopped_flag, progress_callback)
        if hash_groups is None:
            return []

        return [
            DuplicateGroup(
                content_digest=digest,
                file_size=size,
                files=[FileRecord.from_candidate(f) for f in members],
            )
            for (size, digest), members in hash_groups.items()
        ]

    def _within_budget(self, groups: List[CandidateGroup]) -> List[CandidateGroup]:
        if self.byte_budget is None:
            return groups

        accepted = []
        planned = 0
        for group in groups:
            cost = group.size * len(group.files)
            if planned + cost > self.byte_budget:
                for file in group.files:
                    self.skip(file, "full-hash byte budget exhausted")
                continue
            planned += cost
            accepted.append(group)
        return accepted
