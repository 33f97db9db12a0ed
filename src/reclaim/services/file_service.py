"""
Copyright (c) 2026 initumX (initum.x@gmail.com)
Licensed under the MIT License

services/file_service.py
Safe deletion: files are moved to the system trash with send2trash.
Nothing here removes a file permanently.
"""
import logging
from pathlib import Path
from typing import List, Tuple

from send2trash import send2trash

logger = logging.getLogger(__name__)


class FileService:
    """Recoverable file removal for Windows, macOS and Linux."""

    @staticmethod
    def move_to_trash(file_path: str) -> None:
        """Moves a file to the system trash. Raises RuntimeError on failure."""
        path = Path(file_path)

        if path.is_symlink():
            raise RuntimeError(f"Refusing to trash symbolic link: {path}")
        if not path.exists():
            raise RuntimeError(f"File not found: {path}")

        try:
            send2trash(str(path.resolve()))
        except Exception as e:
            raise RuntimeError(f"Failed to move to trash: {e}") from e

        logger.debug(f"Moved to trash: {path}")

    @classmethod
    def move_multiple_to_trash(cls, file_paths: List[str]) -> List[Tuple[str, str]]:
        """
        Trashes every path, continuing past failures.
        Returns (path, error message) for each file that could not be moved.
        """
        errors = []
        for path in file_paths:
            try:
                cls.move_to_trash(path)
            except RuntimeError as e:
                logger.warning(f"Could not trash {path}: {e}")
                errors.append((path, str(e)))
        return errors
