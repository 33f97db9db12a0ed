"""
Copyright (c) 2026 initumX (initum.x@gmail.com)
Licensed under the MIT License

deduplicator.py
Pipeline orchestrator for duplicate detection:
    walk → size buckets → quick fingerprint → full SHA-256 → ranked groups

Each stage only processes the survivors of the previous one. All state is
created per scan and thrown away afterwards; nothing is cached across runs.
"""
import logging
import time
from typing import List, Optional

from reclaim.core.grouper import FileGrouperImpl
from reclaim.core.hasher import HasherImpl
from reclaim.core.interfaces import ProgressCallback, StoppedFlag
from reclaim.core.models import (
    DuplicateGroup,
    EngineConfig,
    FileCandidate,
    ScanParams,
    ScanResult,
    ScanStage,
    ScanStats,
    ScanWarning,
)
from reclaim.core.pool import BoundedWorkerPool
from reclaim.core.progress import ProgressReporter
from reclaim.core.sorter import Sorter
from reclaim.core.stages import FullHashStage, QuickHashStage, SizeStageImpl
from reclaim.core.walker import DirectoryWalkerImpl

logger = logging.getLogger(__name__)


# =============================
# Main Deduplicator Class
# =============================
class DuplicateFinder:
    """
    Runs one scan at a time and exposes its current stage as `state`.
    A cancelled or failed scan returns to IDLE with all in-flight data discarded.
    """

    def __init__(self, grouper: Optional[FileGrouperImpl] = None):
        self.grouper = grouper or FileGrouperImpl()
        self.state = ScanStage.IDLE

    def find_duplicates(
        self,
        params: ScanParams,
        stopped_flag: Optional[StoppedFlag] = None,
        progress_callback: Optional[ProgressCallback] = None,
        hasher: Optional[HasherImpl] = None,
    ) -> ScanResult:
        """
        Args:
            params: validated scan parameters
            stopped_flag: returns True when the caller wants the scan abandoned
            progress_callback: receives ProgressEvent objects; optional
            hasher: override the content hasher (tests use a counting opener)
        Returns:
            ScanResult with ranked groups and the soft-failure warnings
        Raises:
            ScanError: the root cannot be scanned at all
        """
        stats = ScanStats()
        warnings: List[ScanWarning] = []
        total_start_time = time.time()
        hasher = hasher or HasherImpl(sample_size=params.quick_sample_size, buffer_size=params.full_buffer_size)
        pool = BoundedWorkerPool(params.workers, name="reclaim-hash")

        logger.info(f"Scanning {params.root_dir} (min size {params.min_size_bytes}B, {params.workers} workers)")

        try:
            # Stage 1: walk
            self._enter(ScanStage.WALKING)
            start_time = time.time()
            files = self._walk(params, warnings, stats, stopped_flag, progress_callback)
            stats.update_stage(ScanStage.WALKING, 0, len(files), time.time() - start_time)
            if self._stopped(stopped_flag):
                return self._cancelled(stats, warnings, total_start_time)

            # Stage 1b: size buckets
            self._enter(ScanStage.CLASSIFYING)
            start_time = time.time()
            groups = SizeStageImpl(self.grouper).process(files, stopped_flag, progress_callback)
            del files
            stats.update_stage(ScanStage.CLASSIFYING, len(groups), _count(groups), time.time() - start_time)
            if self._stopped(stopped_flag):
                return self._cancelled(stats, warnings, total_start_time)

            # Stage 2: quick fingerprint
            self._enter(ScanStage.QUICK_HASHING)
            start_time = time.time()
            quick_stage = QuickHashStage(self.grouper, hasher, pool, warnings)
            groups = quick_stage.process(groups, stopped_flag, progress_callback)
            stats.bytes_hashed += quick_stage.bytes_read
            stats.update_stage(ScanStage.QUICK_HASHING, len(groups), _count(groups), time.time() - start_time)
            if self._stopped(stopped_flag):
                return self._cancelled(stats, warnings, total_start_time)

            # Stage 3: full verification
            self._enter(ScanStage.FULL_HASHING)
            start_time = time.time()
            full_stage = FullHashStage(self.grouper, hasher, pool, warnings, params.full_hash_byte_budget)
            duplicates = full_stage.process(groups, stopped_flag, progress_callback)
            stats.bytes_hashed += full_stage.bytes_read
            stats.update_stage(ScanStage.FULL_HASHING, len(duplicates), _count(duplicates), time.time() - start_time)
            if self._stopped(stopped_flag):
                return self._cancelled(stats, warnings, total_start_time)

            # Rank and order
            duplicates = self.rank_groups(duplicates)
            Sorter.sort_files_inside_groups(duplicates, params.retention)
            self.state = ScanStage.GROUPED
            ProgressReporter(progress_callback).emit(ScanStage.GROUPED, len(duplicates), len(duplicates))
        except BaseException:
            self.state = ScanStage.IDLE
            raise

        stats.total_time = time.time() - total_start_time
        self.state = ScanStage.IDLE
        logger.info(
            f"Scan finished: {len(duplicates)} duplicate groups, "
            f"{sum(g.reclaimable_bytes for g in duplicates)} reclaimable bytes, "
            f"{len(warnings)} files skipped, {stats.total_time:.2f}s"
        )
        return ScanResult(groups=duplicates, warnings=warnings, stats=stats)

    @staticmethod
    def rank_groups(groups: List[DuplicateGroup]) -> List[DuplicateGroup]:
        """Most reclaimable space first; ties by file size, then first path."""
        return sorted(
            groups,
            key=lambda g: (-g.reclaimable_bytes, -g.file_size, min(f.path for f in g.files)),
        )

    def _walk(
        self,
        params: ScanParams,
        warnings: List[ScanWarning],
        stats: ScanStats,
        stopped_flag: Optional[StoppedFlag],
        progress_callback: Optional[ProgressCallback],
    ) -> List[FileCandidate]:
        def on_error(path: str, error: OSError) -> None:
            warnings.append(ScanWarning(path=path, stage=ScanStage.WALKING, message=str(error)))

        walker = DirectoryWalkerImpl(params.root_dir, min_size=params.min_size_bytes, on_error=on_error)
        reporter = ProgressReporter(progress_callback, EngineConfig.WALK_PROGRESS_INTERVAL)

        reporter.emit(ScanStage.WALKING, 0)

        files = []
        for candidate in walker.walk(stopped_flag=stopped_flag):
            files.append(candidate)
            reporter.tick(ScanStage.WALKING, len(files))

        stats.files_walked = walker.files_seen
        logger.debug(f"Walk found {walker.files_seen} files, {len(files)} above the size threshold")
        return files

    def _enter(self, stage: ScanStage) -> None:
        self.state = stage
        logger.info(f"Entering stage: {stage.display_name}")

    @staticmethod
    def _stopped(stopped_flag: Optional[StoppedFlag]) -> bool:
        return bool(stopped_flag and stopped_flag())

    def _cancelled(self, stats: ScanStats, warnings: List[ScanWarning], start: float) -> ScanResult:
        logger.info("Scan cancelled; partial results discarded")
        self.state = ScanStage.IDLE
        stats.total_time = time.time() - start
        return ScanResult(groups=[], warnings=warnings, stats=stats, cancelled=True)


def _count(groups) -> int:
    return sum(len(g.files) for g in groups)


