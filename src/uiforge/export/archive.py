"""Writing synthesized projects to disk."""

import zipfile
from collections.abc import Mapping
from pathlib import Path, PurePosixPath

from ..core import get_logger

logger = get_logger(__name__)


def _safe_relative(path: str) -> PurePosixPath:
    relative = PurePosixPath(path)
    if relative.is_absolute() or ".." in relative.parts or not relative.parts:
        raise ValueError(f"Refusing to write outside the project root: {path}")
    return relative


def write_archive(files: Mapping[str, str], path: str | Path) -> Path:
    """Write project files into a zip archive; returns the archive path."""
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(target, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        for name in sorted(files):
            archive.writestr(str(_safe_relative(name)), files[name])
    logger.info("archive_written", path=str(target), files=len(files))
    return target


def write_tree(files: Mapping[str, str], directory: str | Path) -> Path:
    """Write project files under a directory; returns the directory."""
    root = Path(directory)
    for name in sorted(files):
        destination = root.joinpath(*_safe_relative(name).parts)
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_text(files[name], encoding="utf-8")
    logger.info("tree_written", path=str(root), files=len(files))
    return root


__all__ = ["write_archive", "write_tree"]
