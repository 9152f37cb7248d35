"""File collection utilities for uploads."""
import logging
import os
import stat
from pathlib import Path
from typing import List, Optional, Tuple, Union

from ..errors import PathNotFoundError, UnsupportedPathTypeError
from .models import FileEntry

logger = logging.getLogger(__name__)


def default_workspace() -> Path:
    """Workspace root for relative paths: GITHUB_WORKSPACE, else the cwd."""
    return Path(os.getenv("GITHUB_WORKSPACE") or os.getcwd())


class FileCollector:
    """Resolves the local upload path and collects regular files under it."""

    @staticmethod
    def resolve_path(local_path: Union[str, Path], workspace: Optional[Path] = None) -> Path:
        """
        Resolve local path against the workspace and check it exists.

        Args:
            local_path: Absolute path, or path relative to the workspace
            workspace: Workspace root (default: see default_workspace)

        Returns:
            Absolute path

        Raises:
            PathNotFoundError: If the path does not exist or cannot be stat'ed
        """
        path = Path(local_path).expanduser()
        if not path.is_absolute():
            path = Path(workspace or default_workspace()) / path

        try:
            path.stat()
        except OSError as exc:
            raise PathNotFoundError(path) from exc
        return path

    def collect(self, path: Path) -> Tuple[Path, List[FileEntry]]:
        """
        Collect files to upload and the base directory for relative paths.

        Args:
            path: Resolved local path (file or directory)

        Returns:
            Tuple of (base_dir, entries)
        """
        try:
            mode = path.stat().st_mode
        except OSError as exc:
            raise PathNotFoundError(path) from exc

        if stat.S_ISDIR(mode):
            return path, list(self._walk(path, path))
        if stat.S_ISREG(mode):
            return path.parent, [FileEntry(absolute_path=path, relative_path=Path(path.name))]
        raise UnsupportedPathTypeError(path)

    def resolve(
        self, local_path: Union[str, Path], workspace: Optional[Path] = None
    ) -> Tuple[Path, List[FileEntry]]:
        return self.collect(self.resolve_path(local_path, workspace))

    def _walk(self, root: Path, folder: Path):
        """Depth-first walk; siblings in name order, symlinks not followed."""
        try:
            children = sorted(folder.iterdir(), key=lambda p: p.name)
        except OSError as exc:
            raise PathNotFoundError(folder, detail=exc.strerror) from exc

        for item in children:
            try:
                mode = item.lstat().st_mode
            except OSError as exc:
                raise PathNotFoundError(item, detail=exc.strerror) from exc

            if stat.S_ISLNK(mode):
                logger.debug("Skipping symbolic link %s", item)
                continue
            if stat.S_ISDIR(mode):
                yield from self._walk(root, item)
            elif stat.S_ISREG(mode):
                yield FileEntry(absolute_path=item, relative_path=item.relative_to(root))
            else:
                logger.debug("Skipping special file %s", item)
