"""
Materialization of imported files at their library destination.

Matroska sources are moved into place. Anything else is remuxed into a
Matroska container with stream copy (no re-encode): first with the primary
tool, then, if that fails, with the secondary tool regenerating timestamps.
The source file is never modified by a remux.
"""

import atexit
import logging
import subprocess
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, List, Set

import ffmpeg

from common.constants import MATROSKA_EXTENSION, PARTIAL_SUFFIX, PRIMARY_REMUX_SETTINGS, SECONDARY_REMUX_SETTINGS
from common.file_manager import FileOperationError, ensure_directory_exists, move_file, remove_empty_directories

logger = logging.getLogger(__name__)

# Global set to track all active subprocesses
_active_processes: Set[subprocess.Popen] = set()


def cleanup_all_processes() -> None:
    """Terminate all tracked subprocesses."""
    if _active_processes:
        logger.info(f"Cleaning up {len(_active_processes)} active processes...")
    for process in list(_active_processes):
        try:
            if process.poll() is None:
                process.terminate()
                try:
                    process.wait(timeout=5)
                except subprocess.TimeoutExpired:
                    logger.warning("Process didn't terminate, killing...")
                    process.kill()
                    process.wait()
        except OSError as e:
            logger.error(f"Error cleaning up process: {e}")
    _active_processes.clear()


atexit.register(cleanup_all_processes)


class MaterializationError(Exception):
    """The file could not be placed at its destination."""

    pass


class RemuxError(MaterializationError):
    """Every remux tool in the fallback chain failed."""

    def __init__(self, source: Path, attempts: List["ToolResult"]):
        self.source = source
        self.attempts = attempts
        details = "; ".join(
            f"{attempt.tool} exited {attempt.returncode}: {attempt.output.strip()[-500:]}" for attempt in attempts
        )
        super().__init__(f"Remux failed for {source}: {details}")


class MaterializeOutcome(Enum):
    ALREADY_PRESENT = "already present"
    MOVED = "moved"
    REMUXED = "remuxed"


@dataclass
class ToolResult:
    """Exit status and output of one external tool run."""

    tool: str
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def output(self) -> str:
        return self.stderr or self.stdout


@dataclass
class RemuxTool:
    """An ffmpeg-compatible executable plus the options of one remux strategy."""

    name: str
    path: str
    input_options: Dict[str, Any] = field(default_factory=dict)
    output_options: Dict[str, Any] = field(default_factory=dict)

    def command(self, input_path: Path, output_path: Path) -> List[str]:
        stream = ffmpeg.input(str(input_path), **self.input_options)
        stream = ffmpeg.output(stream, str(output_path), **self.output_options)
        return ffmpeg.compile(stream, cmd=self.path, overwrite_output=True)


def primary_remux_tool(path: str) -> RemuxTool:
    """Stream copy into Matroska."""
    return RemuxTool("primary", path, dict(PRIMARY_REMUX_SETTINGS["input"]), dict(PRIMARY_REMUX_SETTINGS["output"]))


def secondary_remux_tool(path: str) -> RemuxTool:
    """Stream copy into Matroska, regenerating presentation timestamps."""
    return RemuxTool(
        "secondary", path, dict(SECONDARY_REMUX_SETTINGS["input"]), dict(SECONDARY_REMUX_SETTINGS["output"])
    )


def run_tool(name: str, command: List[str]) -> ToolResult:
    """Run an external tool to completion and capture its output."""
    logger.info(f"Running {name} remux: {' '.join(command)}")

    try:
        process = subprocess.Popen(command, stdout=subprocess.PIPE, stderr=subprocess.PIPE, text=True)
    except OSError as e:
        return ToolResult(name, 127, stderr=f"Failed to start {command[0]}: {e}")

    _active_processes.add(process)
    try:
        stdout, stderr = process.communicate()
    except KeyboardInterrupt:
        cleanup_all_processes()
        raise
    finally:
        _active_processes.discard(process)

    return ToolResult(name, process.returncode, stdout, stderr)


ToolRunner = Callable[[str, List[str]], ToolResult]


def _partial_path(destination: Path) -> Path:
    return destination.with_name(destination.name + PARTIAL_SUFFIX)


def _always_continue() -> bool:
    return True


class MediaMaterializer:
    """Places files at their library destination, idempotently."""

    def __init__(
            self,
            primary: RemuxTool,
            secondary: RemuxTool,
            runner: ToolRunner = run_tool,
            should_continue: Callable[[], bool] = _always_continue,
    ):
        """
        Args:
            primary: First remux strategy
            secondary: Fallback remux strategy
            runner: Runs one tool command to completion
            should_continue: Checked before every remux attempt; False stops
                the fallback chain
        """
        self.tools = [primary, secondary]
        self.runner = runner
        self.should_continue = should_continue

    def materialize(self, source: Path, destination: Path) -> MaterializeOutcome:
        """
        Produce the source file at the destination.

        An existing regular file at the destination means the file was
        imported before; nothing is done. Directories created for an import
        that then fails or is interrupted are removed again.

        Raises:
            MaterializationError: On a destination collision, a filesystem
                failure, a stop request, or when every remux tool fails
        """
        if destination.exists():
            if destination.is_file():
                logger.info(f"Already imported: {destination}")
                return MaterializeOutcome.ALREADY_PRESENT
            raise MaterializationError(f"Destination exists and is not a regular file: {destination}")

        try:
            created = ensure_directory_exists(destination.parent)
        except FileOperationError as e:
            raise MaterializationError(str(e))

        try:
            if source.suffix.lower() == MATROSKA_EXTENSION:
                move_file(source, destination)
                return MaterializeOutcome.MOVED

            self._remux(source, destination)
            return MaterializeOutcome.REMUXED
        except FileOperationError as e:
            remove_empty_directories(created)
            raise MaterializationError(str(e))
        except (MaterializationError, KeyboardInterrupt):
            remove_empty_directories(created)
            raise

    def _remux(self, source: Path, destination: Path) -> None:
        partial = _partial_path(destination)
        attempts = []

        for tool in self.tools:
            if not self.should_continue():
                raise MaterializationError(f"Remux of {source} interrupted before the {tool.name} tool")

            try:
                result = self.runner(tool.name, tool.command(source, partial))
            except KeyboardInterrupt:
                partial.unlink(missing_ok=True)
                raise
            attempts.append(result)

            if result.ok and partial.is_file():
                try:
                    partial.replace(destination)
                except OSError as e:
                    partial.unlink(missing_ok=True)
                    raise MaterializationError(f"Failed to move remuxed file into place {destination}: {e}")
                logger.info(f"Remuxed with {tool.name} tool: {source} -> {destination}")
                return

            logger.warning(f"{tool.name.capitalize()} remux failed for {source} (exit {result.returncode})")
            partial.unlink(missing_ok=True)

        raise RemuxError(source, attempts)
