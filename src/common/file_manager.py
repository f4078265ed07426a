"""
File manager for library enumeration and file placement.

This module provides functions for scanning input paths, snapshotting the
library roots, and creating, moving and cleaning up files and directories
during materialization.
"""

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Generator, List

from .constants import VIDEO_EXTENSIONS

logger = logging.getLogger(__name__)


class FileOperationError(Exception):
    """Exception for file operation failures."""

    pass


@dataclass
class LibraryListing:
    """Immediate children of a library root, split by entry type."""

    files: List[str] = field(default_factory=list)
    dirs: List[str] = field(default_factory=list)


### Public functions ###
def scan_media_files(directory: Path, recursive: bool = True) -> Generator[Path, None, None]:
    """
    Scan a directory for media files.

    Args:
        directory: Directory to scan
        recursive: Whether to scan subdirectories

    Yields:
        Path objects for found media files, in sorted order
    """
    if not directory.exists():
        logger.warning(f"Directory does not exist: {directory}")
        return

    if not directory.is_dir():
        logger.error(f"Path is not a directory: {directory}")
        return

    pattern = "**/*" if recursive else "*"

    for path in sorted(directory.glob(pattern)):
        if path.is_file() and path.suffix.lower() in VIDEO_EXTENSIONS:
            yield path


def list_library_entries(root: Path) -> LibraryListing:
    """List the immediate children of a library root as files and directories."""
    listing = LibraryListing()

    if not root.is_dir():
        logger.warning(f"Library root is not a directory: {root}")
        return listing

    for entry in sorted(root.iterdir()):
        if entry.is_dir():
            listing.dirs.append(entry.name)
        elif entry.is_file():
            listing.files.append(entry.name)

    logger.debug(f"Library {root}: {len(listing.dirs)} directories, {len(listing.files)} files")
    return listing


def ensure_directory_exists(directory: Path) -> List[Path]:
    """
    Ensure a directory exists, creating it if necessary.

    Returns:
        The directories that were created, innermost first
    """
    created = []
    current = directory
    while not current.exists() and current != current.parent:
        created.append(current)
        current = current.parent

    try:
        directory.mkdir(parents=True, exist_ok=True)
        logger.debug(f"Ensured directory exists: {directory}")
    except OSError as e:
        raise FileOperationError(f"Failed to create directory {directory}: {e}")

    return created


def remove_empty_directories(directories: List[Path]) -> None:
    """Remove directories innermost first, stopping at the first non-empty one."""
    for directory in directories:
        try:
            directory.rmdir()
            logger.debug(f"Removed empty directory: {directory}")
        except OSError as e:
            logger.warning(f"Left directory in place {directory}: {e}")
            return


def move_file(source: Path, destination: Path) -> None:
    """
    Move a file from source to destination.

    Args:
        source: Source file path
        destination: Destination file path; its parent must exist
    """
    if not source.exists():
        raise FileOperationError(f"Source file does not exist: {source}")

    try:
        shutil.move(str(source), str(destination))
        logger.info(f"Moved file: {source} -> {destination}")
    except OSError as e:
        raise FileOperationError(f"Failed to move file {source} to {destination}: {e}")
