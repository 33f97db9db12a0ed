"""
Copyright (c) 2026 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/grouper.py
Pure grouping helpers: bucket candidates by size or by a computed key
and drop every bucket that cannot hold a duplicate.
"""

from collections import defaultdict
from typing import Any, Callable, Dict, Hashable, Iterable, List, Tuple

from reclaim.core.models import FileCandidate


class FileGrouperImpl:
    """Groups candidates by size or any precomputed key; zero I/O."""

    def group_by_size(self, files: Iterable[FileCandidate]) -> Dict[int, List[FileCandidate]]:
        """Groups files by their size. Buckets with a single file are dropped."""
        return self._group_by(files, lambda f: f.size)

    def group_by_key(self, pairs: Iterable[Tuple[Hashable, FileCandidate]]) -> Dict[Any, List[FileCandidate]]:
        """
        Groups (key, file) pairs produced by a hashing stage.
        Members are returned in discovery order regardless of the order
        the pairs arrived in.
        """
        groups = defaultdict(list)
        for key, file in pairs:
            groups[key].append(file)
        return self._keep_duplicates(groups)

    @staticmethod
    def _group_by(files: Iterable[FileCandidate], key_func: Callable[[FileCandidate], Any]) -> Dict[Any, List[FileCandidate]]:
        groups = defaultdict(list)
        for file in files:
            groups[key_func(file)].append(file)
        return FileGrouperImpl._keep_duplicates(groups)

    @staticmethod
    def _keep_duplicates(groups: Dict[Any, List[FileCandidate]]) -> Dict[Any, List[FileCandidate]]:
        result = {}
        for key, group in groups.items():
            if len(group) >= 2:  # a single file cannot be a duplicate
                result[key] = sorted(group, key=lambda f: f.discovery_index)
        return result
