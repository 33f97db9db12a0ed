"""
Copyright (c) 2026 initumX (initum.x@gmail.com)
Licensed under the MIT License

services/duplicate_service.py
Applies the retention policy to verified duplicate groups and hands the
non-retained members to the trash backend.
"""
import logging
from typing import Callable, List, Optional, Tuple

from reclaim.core.interfaces import TrashBackend
from reclaim.core.models import CleanupReport, DuplicateGroup, RetentionPolicy
from reclaim.core.sorter import Sorter
from reclaim.services.file_service import FileService

logger = logging.getLogger(__name__)


class DuplicateService:
    @staticmethod
    def plan_removals(groups: List[DuplicateGroup], keep_newest: bool = True) -> List[str]:
        """Paths that cleanup would move to trash, in group order."""
        policy = RetentionPolicy.from_keep_newest(keep_newest)
        paths = []
        for group in groups:
            paths.extend(record.path for record in Sorter.select(group, policy).remove)
        return paths

    @staticmethod
    def clean_group(
            group: DuplicateGroup,
            keep_newest: bool = True,
            trash: Optional[TrashBackend] = None,
    ) -> CleanupReport:
        """
        Keeps one file of the group and trashes the rest.

        A failure on one file is recorded and the remaining files are still
        processed. Only successfully trashed files count towards
        `bytes_reclaimed`.
        """
        trash = trash or FileService.move_to_trash
        selection = Sorter.select(group, RetentionPolicy.from_keep_newest(keep_newest))
        report = CleanupReport()

        logger.debug(f"Keeping {selection.keep.path}, removing {len(selection.remove)} copies")
        for record in selection.remove:
            try:
                trash(record.path)
            except (RuntimeError, OSError) as e:
                logger.warning(f"Failed to remove {record.path}: {e}")
                report.failures.append((record.path, str(e)))
                continue
            report.removed.append(record.path)
            report.bytes_reclaimed += record.size

        return report

    @staticmethod
    def clean_groups(
            groups: List[DuplicateGroup],
            keep_newest: bool = True,
            trash: Optional[TrashBackend] = None,
            progress_callback: Optional[Callable[[int, int], None]] = None,
    ) -> CleanupReport:
        """Runs clean_group over every group and merges the reports."""
        total = CleanupReport()
        for index, group in enumerate(groups, 1):
            total.merge(DuplicateService.clean_group(group, keep_newest, trash))
            if progress_callback:
                progress_callback(index, len(groups))
        return total

    @staticmethod
    def remove_files_from_groups(groups: List[DuplicateGroup], file_paths: List[str]) -> List[DuplicateGroup]:
        """
        Drops the given paths from every group.
        Groups left with fewer than 2 files are discarded.
        """
        removed = set(file_paths)
        updated_groups = []
        for group in groups:
            remaining = [f for f in group.files if f.path not in removed]
            if len(remaining) >= 2:
                updated_groups.append(DuplicateGroup(
                    content_digest=group.content_digest,
                    file_size=group.file_size,
                    files=remaining,
                ))
        return updated_groups

    @staticmethod
    def split_report(report: CleanupReport, limit: int = 5) -> Tuple[List[Tuple[str, str]], int]:
        """First `limit` failures plus the count of the ones not shown."""
        shown = report.failures[:limit]
        return shown, max(0, len(report.failures) - limit)
