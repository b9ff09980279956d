"""Synchronous filesystem primitives used while staging deploy artifacts."""

import os
import shutil
import logging
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class FileSystemHost:
    """Filesystem operations resolved against a root directory.

    Relative paths are interpreted from ``root`` (the workspace root), so the
    same relative output paths the build system reports can be used directly.
    Tests substitute this class to observe or fail individual operations.
    """

    def __init__(self, root: Optional[PathLike] = None):
        self.root = Path(root) if root is not None else Path.cwd()

    def resolve(self, path: PathLike) -> Path:
        path = Path(path)
        return path if path.is_absolute() else self.root / path

    def copy(self, src: PathLike, dest: PathLike) -> None:
        """Copy a file or a directory tree, creating parent directories."""
        source = self.resolve(src)
        target = self.resolve(dest)
        os.makedirs(target.parent, exist_ok=True)
        if source.is_dir():
            shutil.copytree(source, target, dirs_exist_ok=True)
        else:
            shutil.copy2(source, target)
        logger.debug(f"Copied {source} to {target}")

    def remove(self, path: PathLike) -> None:
        """Remove a file or directory tree; a missing path is not an error."""
        target = self.resolve(path)
        if target.is_dir() and not target.is_symlink():
            shutil.rmtree(target)
        elif target.exists() or target.is_symlink():
            target.unlink()
        else:
            return
        logger.debug(f"Removed {target}")

    def move(self, src: PathLike, dest: PathLike) -> None:
        """Copy then remove. Not atomic."""
        self.copy(src, dest)
        self.remove(src)

    def write(self, path: PathLike, content: str) -> None:
        target = self.resolve(path)
        os.makedirs(target.parent, exist_ok=True)
        with open(target, "w") as f:
            f.write(content)
        logger.debug(f"Wrote {target}")

    def rename(self, src: PathLike, dest: PathLike) -> None:
        os.rename(self.resolve(src), self.resolve(dest))
