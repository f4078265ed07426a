"""
Common utilities package for the NAS media importer.

This package contains shared utilities used across all import stages.
"""

from .config import ConfigError, ImporterConfig, load_config
from .constants import (
    DEFAULT_LOG_LEVEL,
    LOG_DIR,
    MATROSKA_EXTENSION,
    VIDEO_EXTENSIONS,
    VISIBLE_RESULTS,
)
from .file_manager import (
    FileOperationError,
    LibraryListing,
    ensure_directory_exists,
    list_library_entries,
    move_file,
    remove_empty_directories,
    scan_media_files,
)
from .logger import ImportLogger, get_logger, setup_logging

__all__ = [
    # Config
    "ConfigError",
    "ImporterConfig",
    "load_config",
    # Constants
    "DEFAULT_LOG_LEVEL",
    "LOG_DIR",
    "MATROSKA_EXTENSION",
    "VIDEO_EXTENSIONS",
    "VISIBLE_RESULTS",
    # File manager
    "FileOperationError",
    "LibraryListing",
    "ensure_directory_exists",
    "list_library_entries",
    "move_file",
    "remove_empty_directories",
    "scan_media_files",
    # Logger
    "ImportLogger",
    "get_logger",
    "setup_logging",
]
