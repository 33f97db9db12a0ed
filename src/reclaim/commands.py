"""
Copyright (c) 2026 initumX (initum.x@gmail.com)
Licensed under the MIT License

commands.py
Scan entry points shared by the CLI and library callers.
No console or trash dependencies, pure engine orchestration.
"""
from typing import Optional

from reclaim.core.deduplicator import DuplicateFinder
from reclaim.core.hasher import HasherImpl
from reclaim.core.interfaces import ProgressCallback, StoppedFlag
from reclaim.core.models import EngineConfig, ScanParams, ScanResult, ScanStage


class ScanCommand:
    """
    Runs the duplicate scan for a ScanParams object.

    Usage:
        params = ScanParams(root_dir="/home/me/Downloads", min_size_bytes=1024)
        result = ScanCommand().execute(
            params,
            progress_callback=print_event,
            stopped_flag=cancel_event.is_set
        )
        for group in result.groups: ...
    """

    def __init__(self, finder: Optional[DuplicateFinder] = None):
        self._finder = finder or DuplicateFinder()

    @property
    def state(self) -> ScanStage:
        return self._finder.state

    def execute(
            self,
            params: ScanParams,
            progress_callback: Optional[ProgressCallback] = None,
            stopped_flag: Optional[StoppedFlag] = None,
            hasher: Optional[HasherImpl] = None,
    ) -> ScanResult:
        """
        Returns:
            ScanResult: ranked groups, soft-failure warnings and stats

        Raises:
            ValueError: invalid parameters
            ScanError: the root cannot be scanned
        """
        return self._finder.find_duplicates(
            params,
            stopped_flag=stopped_flag,
            progress_callback=progress_callback,
            hasher=hasher,
        )


def scan(
        root_path: str,
        min_size_bytes: int = EngineConfig.DEFAULT_MIN_SIZE,
        *,
        progress_callback: Optional[ProgressCallback] = None,
        stopped_flag: Optional[StoppedFlag] = None,
        workers: Optional[int] = None,
) -> ScanResult:
    """
    Find byte-identical files under `root_path`.

    Files smaller than `min_size_bytes` are ignored. Per-file failures end
    up in `ScanResult.warnings`; only an unusable root raises ScanError.
    """
    params = ScanParams(root_dir=root_path, min_size_bytes=min_size_bytes, workers=workers)
    return ScanCommand().execute(params, progress_callback=progress_callback, stopped_flag=stopped_flag)
