"""
reclaim: find reclaimable disk space and remove it safely.

Core features:
- Duplicate finder: size → head/tail fingerprint → full SHA-256, zero false positives
- Bounded parallel hashing with per-file soft failures
- Keep-newest / keep-oldest retention, deletion always via the system trash (send2trash)
- Hard-link aware disk usage and large-file listing
- CLI for headless/server usage
"""

from importlib.metadata import PackageNotFoundError, version as _version

try:
    __version__ = _version("reclaim")
except PackageNotFoundError:
    __version__ = "0.0.0"

# Public API: only what users should import directly
from reclaim.commands import ScanCommand, scan
from reclaim.core import (
    ScanParams, ScanResult, DuplicateGroup, FileRecord, RetentionPolicy, ProgressEvent,
    ProgressChannel, ScanStage, ScanWarning, ScanError, measure_usage, find_large_files,
    total_reclaimable)
from reclaim.utils.convert_utils import ConvertUtils
from reclaim.services import DuplicateService, FileService

__all__ = [
    "scan",
    "ScanCommand",
    "ScanParams",
    "ScanResult",
    "DuplicateGroup",
    "FileRecord",
    "RetentionPolicy",
    "ProgressEvent",
    "ProgressChannel",
    "ScanStage",
    "ScanWarning",
    "ScanError",
    "measure_usage",
    "find_large_files",
    "total_reclaimable",
    "ConvertUtils",
    "DuplicateService",
    "FileService",
    "__version__",
]
