"""
Copyright (c) 2026 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/sorter.py
Retention policy: decides which member of a duplicate group is kept.
Pure logic, no filesystem access.
"""
from typing import Callable, List, Tuple

from reclaim.core.models import DuplicateGroup, FileRecord, RetentionPolicy, RetentionSelection


class Sorter:
    """
    Orders files inside duplicate groups so the retained file comes first.
    Sorting priority (applied lexicographically):
    1. Modification time: newest first for KEEP_NEWEST, oldest first for KEEP_OLDEST
    2. Discovery order, so equal timestamps always resolve the same way
    """

    @staticmethod
    def _key_func(policy: RetentionPolicy) -> Callable[[FileRecord], Tuple[float, int]]:
        if policy == RetentionPolicy.KEEP_NEWEST:
            return lambda f: (-f.modified_time, f.discovery_index)
        return lambda f: (f.modified_time, f.discovery_index)

    @staticmethod
    def select(group: DuplicateGroup, policy: RetentionPolicy = RetentionPolicy.KEEP_NEWEST) -> RetentionSelection:
        """Split a group into the file to keep and the deletion candidates."""
        ordered = sorted(group.files, key=Sorter._key_func(policy))
        return RetentionSelection(keep=ordered[0], remove=ordered[1:])

    @staticmethod
    def sort_files_inside_groups(groups: List[DuplicateGroup], policy: RetentionPolicy = RetentionPolicy.KEEP_NEWEST) -> None:
        """Reorder each group in place so files[0] is the one retained."""
        for group in groups:
            group.files.sort(key=Sorter._key_func(policy))
