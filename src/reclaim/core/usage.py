"""
Copyright (c) 2026 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/usage.py
Disk usage helpers built on the directory walker:
- measure_usage: bytes under a root with each hard-linked inode counted once
- find_large_files: the biggest files under a root, optionally only old ones
"""

import logging
import time
from typing import List, Optional, Set, Tuple

from reclaim.core.interfaces import StoppedFlag
from reclaim.core.models import FileRecord, ScanStage, ScanWarning, UsageReport
from reclaim.core.walker import DirectoryWalkerImpl

logger = logging.getLogger(__name__)

LARGE_FILE_MIN_SIZE = 10 * 1024 * 1024


def measure_usage(root_dir: str, stopped_flag: Optional[StoppedFlag] = None) -> UsageReport:
    """
    Total apparent size of regular files under `root_dir`.
    Symlinks are ignored and hard links to an already counted inode add nothing.
    Raises ScanError if the root cannot be walked.
    """
    report = UsageReport()

    def on_error(path: str, error: OSError) -> None:
        report.warnings.append(ScanWarning(path=path, stage=ScanStage.WALKING, message=str(error)))

    walker = DirectoryWalkerImpl(root_dir, on_error=on_error, skip_empty=False)
    seen: Set[Tuple[int, int]] = set()

    for candidate in walker.walk(stopped_flag=stopped_flag):
        if candidate.identity in seen:
            report.hard_links_skipped += 1
            continue
        seen.add(candidate.identity)
        report.total_bytes += candidate.size
        report.file_count += 1

    logger.debug(
        f"Usage of {root_dir}: {report.total_bytes} bytes in {report.file_count} files "
        f"({report.hard_links_skipped} hard links skipped)"
    )
    return report


def find_large_files(
    root_dir: str,
    min_size: int = LARGE_FILE_MIN_SIZE,
    max_age_days: int = 0,
    stopped_flag: Optional[StoppedFlag] = None,
) -> List[FileRecord]:
    """
    Files of at least `min_size` bytes, largest first.
    With `max_age_days` > 0 only files not modified for that many days are kept.
    """
    walker = DirectoryWalkerImpl(root_dir, min_size=min_size)
    cutoff = time.time() - max_age_days * 86400 if max_age_days > 0 else None

    results = []
    for candidate in walker.walk(stopped_flag=stopped_flag):
        if cutoff is not None and candidate.modified_time > cutoff:
            continue
        results.append(FileRecord.from_candidate(candidate))

    results.sort(key=lambda f: (-f.size, f.path))
    return results
