"""
Copyright (c) 2026 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/walker.py
Depth-first directory traversal producing FileCandidate objects.
Features:
- Never follows or yields symbolic links
- Each directory is entered once, keyed by (st_dev, st_ino)
- Per-entry errors are reported to a callback and skipped
- Applies the minimum size filter early to cut later work
"""

import logging
import os
import stat
from typing import Callable, Iterator, List, Optional, Set, Tuple

from reclaim.core.exceptions import ScanError
from reclaim.core.interfaces import DirectoryWalker, StoppedFlag
from reclaim.core.models import FileCandidate

logger = logging.getLogger(__name__)

ErrorCallback = Callable[[str, OSError], None]


class DirectoryWalkerImpl(DirectoryWalker):
    """
    Walks `root_dir` and yields every regular file of at least `min_size` bytes.

    Attributes:
        root_dir: directory to scan
        min_size: files smaller than this are dropped (zero-byte files always are)
        on_error: called with (path, exc) for entries that cannot be read
        skip_empty: drop zero-byte files
    """

    def __init__(
        self,
        root_dir: str,
        min_size: Optional[int] = None,
        on_error: Optional[ErrorCallback] = None,
        skip_empty: bool = True,
    ):
        self.root_dir = root_dir
        self.min_size = min_size
        self.on_error = on_error
        self.skip_empty = skip_empty
        self.files_seen = 0

    def check_root(self) -> os.stat_result:
        """Validate the root before walking; failures here are fatal."""
        try:
            root_stat = os.stat(self.root_dir)
        except FileNotFoundError:
            raise ScanError(f"Directory does not exist: {self.root_dir}")
        except OSError as e:
            raise ScanError(f"Cannot access {self.root_dir}: {e}") from e

        if not stat.S_ISDIR(root_stat.st_mode):
            raise ScanError(f"Not a directory: {self.root_dir}")

        try:
            with os.scandir(self.root_dir):
                pass
        except OSError as e:
            raise ScanError(f"Cannot read directory {self.root_dir}: {e}") from e

        return root_stat

    def walk(self, stopped_flag: Optional[StoppedFlag] = None) -> Iterator[FileCandidate]:
        """
        Yield candidates lazily. Raises ScanError up front if the root is unusable.
        Stops quietly when `stopped_flag()` turns True.
        """
        root_stat = self.check_root()
        logger.debug(f"Walking {self.root_dir} (min_size={self.min_size})")

        visited_dirs: Set[Tuple[int, int]] = {(root_stat.st_dev, root_stat.st_ino)}
        stack: List[str] = [self.root_dir]
        index = 0

        while stack:
            if stopped_flag and stopped_flag():
                logger.debug("Walk interrupted")
                return

            directory = stack.pop()
            try:
                with os.scandir(directory) as it:
                    entries = sorted(it, key=lambda e: e.name)
            except OSError as e:
                self._report(directory, e)
                continue

            subdirs = []
            for entry in entries:
                try:
                    st = entry.stat(follow_symlinks=False)
                except OSError as e:
                    self._report(entry.path, e)
                    continue

                if stat.S_ISLNK(st.st_mode):
                    logger.debug(f"Skipping symbolic link: {entry.path}")
                    continue

                if stat.S_ISDIR(st.st_mode):
                    key = (st.st_dev, st.st_ino)
                    if key in visited_dirs:
                        logger.debug(f"Directory already visited: {entry.path}")
                        continue
                    visited_dirs.add(key)
                    subdirs.append(entry.path)
                    continue

                if not stat.S_ISREG(st.st_mode):
                    continue

                self.files_seen += 1
                if not self._size_passes(st.st_size):
                    continue

                yield FileCandidate(
                    path=entry.path,
                    size=st.st_size,
                    identity=(st.st_dev, st.st_ino),
                    modified_time=st.st_mtime,
                    discovery_index=index,
                )
                index += 1

            # Reversed so the alphabetically first subdirectory is walked next.
            stack.extend(reversed(subdirs))

    def _size_passes(self, size: int) -> bool:
        if self.skip_empty and size == 0:
            return False
        if self.min_size is not None and size < self.min_size:
            return False
        return True

    def _report(self, path: str, error: OSError) -> None:
        logger.debug(f"Skipping unreadable entry {path}: {error}")
        if self.on_error:
            self.on_error(path, error)
