"""
Filesystem helpers for the report output directory.

Errors of create_directory propagate so the caller decides whether they
are fatal. Zipping reports failure through its return value.
"""
import logging
import shutil
import zipfile
from pathlib import Path

logger = logging.getLogger(__name__)

ARCHIVE_SUFFIX = ".zip"


def create_directory(path: str | Path, *parts: str) -> Path:
    """
    Create a directory (and its parents) if it does not exist.

    Args:
        path: Base directory
        parts: Optional path components below the base directory

    Returns:
        The created directory

    Raises:
        OSError: If the directory cannot be created
    """
    directory = Path(path, *parts)
    directory.mkdir(parents=True, exist_ok=True)
    return directory


def archive_path_for(path: str | Path) -> Path:
    """
    Archive location for a directory: the same path plus ".zip".

    Paths without a usable name ("." or "..") are resolved first, so the
    archive lands next to the directory they point to.
    """
    path = Path(path)
    if path.name in ("", ".."):
        path = path.resolve()
    return path.with_name(path.name + ARCHIVE_SUFFIX)


def zip_directory(path: str | Path) -> bool:
    """
    Compress a directory into a sibling zip archive.

    Entries are stored relative to the directory. A partially written
    archive is removed on failure.

    Returns:
        True if the archive was written, False otherwise
    """
    directory = Path(path)
    archive = None
    try:
        archive = archive_path_for(directory)
        with zipfile.ZipFile(archive, "w", compression=zipfile.ZIP_DEFLATED) as zf:
            for file in sorted(directory.rglob("*")):
                if file.is_file():
                    zf.write(file, file.relative_to(directory).as_posix())
    except (OSError, ValueError) as e:
        logger.error(f"Could not zip directory {directory}: {e}")
        if archive is not None and archive.is_file():
            archive.unlink(missing_ok=True)
        return False
    return True


def delete_directory(path: str | Path) -> bool:
    """Delete a directory tree. Returns False if it could not be removed."""
    try:
        shutil.rmtree(path)
    except OSError as e:
        logger.error(f"Could not delete directory {path}: {e}")
        return False
    return True
