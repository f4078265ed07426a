#!/usr/bin/env python3
"""
NAS Media Importer: identifies downloaded video files and files them into the library.

This script processes media files by:
- Classifying filenames as TV episodes, documentaries and movies
- Matching them against the existing library and the TMDb/OMDb catalogs
- Ranking every candidate identity and letting the user (or --auto) choose
- Moving or remuxing the file to its canonical library path
- Stopping at the first failed import unless told to keep going
"""

import argparse
import signal
import sys
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

from common import (
    DEFAULT_LOG_LEVEL,
    ConfigError,
    FileOperationError,
    ImporterConfig,
    ImportLogger,
    get_logger,
    list_library_entries,
    load_config,
    scan_media_files,
    setup_logging,
)
from import_utils import (
    AutomaticSelection,
    CandidateRanker,
    CatalogLookupError,
    InteractiveSelection,
    MediaKind,
    MetadataResolver,
    NoCandidatesError,
    OMDbClient,
    OMDbError,
    PathResolutionError,
    PathResolver,
    SelectionAbortedError,
    SelectionPolicy,
    TMDbClient,
    TMDbError,
    classify_all,
)
from remux_utils import (
    MaterializationError,
    MaterializeOutcome,
    MediaMaterializer,
    cleanup_all_processes,
    primary_remux_tool,
    secondary_remux_tool,
)

_IMPORT_ERRORS = (
    NoCandidatesError,
    PathResolutionError,
    CatalogLookupError,
    MaterializationError,
    FileOperationError,
)


class ImportStage(Enum):
    CLASSIFY = "classify"
    RESOLVE = "resolve"
    RANK = "rank"
    SELECT = "select"
    RESOLVE_PATH = "resolve path"
    MATERIALIZE = "materialize"
    DONE = "done"
    FAILED = "failed"


@dataclass
class ImportResult:
    """What happened to one input file."""

    source: Path
    stage: ImportStage
    destination: Optional[Path] = None
    outcome: Optional[MaterializeOutcome] = None
    failed_stage: Optional[ImportStage] = None
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.stage is ImportStage.DONE


def build_catalogs(config: ImporterConfig, logger: ImportLogger) -> Tuple[Optional[TMDbClient], Optional[OMDbClient]]:
    """Create the catalog clients; a catalog without an API key is left out."""
    try:
        series_catalog = TMDbClient(config.tmdb_api_key)
    except TMDbError as e:
        logger.warning(f"Series catalog disabled: {e}")
        series_catalog = None

    try:
        title_catalog = OMDbClient(config.omdb_api_key)
    except OMDbError as e:
        logger.warning(f"Title catalog disabled: {e}")
        title_catalog = None

    return series_catalog, title_catalog


def expand_inputs(paths: Iterable[Path]) -> List[Path]:
    """Input files as given, with directories replaced by the video files inside them."""
    files = []
    for path in paths:
        if path.is_dir():
            files.extend(scan_media_files(path))
        else:
            files.append(path)
    return files


class MediaImporter:
    """Runs input files one at a time through the import pipeline."""

    def __init__(
            self,
            config: ImporterConfig,
            selection: SelectionPolicy,
            logger: Optional[ImportLogger] = None,
            series_catalog: Optional[TMDbClient] = None,
            title_catalog: Optional[OMDbClient] = None,
            materializer: Optional[MediaMaterializer] = None,
            dry_run: bool = False,
            keep_going: bool = False,
    ):
        """
        Initialize the Media Importer.

        Args:
            config: Resolved importer configuration
            selection: How the candidate for each file is chosen
            logger: Logger facade, the global one if omitted
            series_catalog: Series catalog client, or None to skip series lookups
            title_catalog: Title catalog client, or None to skip title lookups
            materializer: Materializer, built from the configured remux tools if omitted
            dry_run: Resolve destinations without touching any file
            keep_going: Continue with the next file after a failed import
        """
        self.config = config
        self.selection = selection
        self.logger = logger or get_logger()
        self.dry_run = dry_run
        self.keep_going = keep_going

        self.roots: Dict[MediaKind, Path] = {
            MediaKind.TV_SHOW: config.tv_root,
            MediaKind.DOCUMENTARY: config.documentary_root,
            MediaKind.MOVIE: config.movie_root,
        }
        self.library: Dict[MediaKind, List[str]] = {kind: self._snapshot(kind) for kind in MediaKind}

        self.resolver = MetadataResolver(series_catalog, title_catalog, config.visible_results)
        self.ranker = CandidateRanker(self.resolver, self.library, config.visible_results)
        self.path_resolver = PathResolver(config, self.resolver)
        self.materializer = materializer or MediaMaterializer(
            primary_remux_tool(config.primary_remux_tool),
            secondary_remux_tool(config.secondary_remux_tool),
            should_continue=lambda: self.running,
        )

        self.running = True
        self.logger.info("Media Importer initialized", dry_run=dry_run, keep_going=keep_going)

    def install_signal_handlers(self, handle_sigint: bool = True) -> None:
        """
        Stop between files on SIGTERM, and on SIGINT when handle_sigint is set.

        Interactive runs leave SIGINT alone so Ctrl-C at the prompt raises
        KeyboardInterrupt instead of waiting for an answer.
        """
        if handle_sigint:
            signal.signal(signal.SIGINT, self._signal_handler)
        try:
            signal.signal(signal.SIGTERM, self._signal_handler)
        except (AttributeError, OSError):
            pass

    def _signal_handler(self, signum, _frame):
        """Handle shutdown signals gracefully."""
        self.logger.info(f"Received signal {signum}, stopping...")
        self.running = False
        cleanup_all_processes()

    def _snapshot(self, kind: MediaKind) -> List[str]:
        return list_library_entries(self.roots[kind]).dirs

    def run(self, paths: Iterable[Path]) -> List[ImportResult]:
        """Import files sequentially, stopping at the first failure unless keep_going."""
        results: List[ImportResult] = []

        try:
            for filepath in expand_inputs(paths):
                if not self.running:
                    break

                result = self.import_file(filepath)
                results.append(result)

                if not result.succeeded and not self.keep_going:
                    self.logger.error(f"Aborting after failed import of {filepath}")
                    break

        except KeyboardInterrupt:
            self.running = False
            self.logger.info("Import interrupted by user")
        finally:
            imported = sum(1 for r in results if r.succeeded and r.outcome is not MaterializeOutcome.ALREADY_PRESENT)
            already = sum(1 for r in results if r.outcome is MaterializeOutcome.ALREADY_PRESENT)
            failed = sum(1 for r in results if not r.succeeded)
            prefix = "DRY RUN COMPLETE" if self.dry_run else "Media import completed"
            self.logger.info(
                f"{prefix} - "
                f"Processed: {len(results)}, "
                f"Imported: {imported}, "
                f"Already present: {already}, "
                f"Failed: {failed}"
            )

        return results

    def import_file(self, filepath: Path) -> ImportResult:
        """Take one file from classification to materialization."""
        self.logger.info(f"Importing {filepath}")
        result = ImportResult(source=filepath, stage=ImportStage.CLASSIFY)

        try:
            if not filepath.is_file():
                raise FileOperationError(f"Source file does not exist: {filepath}")

            classifications = classify_all(filepath)
            self.logger.log_import_step(
                ImportStage.CLASSIFY.value, filepath, True, {"kinds": [kind.value for kind in classifications]}
            )

            result.stage = ImportStage.RESOLVE
            ranking = self.ranker.rank(classifications)
            result.stage = ImportStage.RANK
            self.logger.log_import_step(ImportStage.RANK.value, filepath, True, {"candidates": len(ranking)})

            result.stage = ImportStage.SELECT
            candidate = self.selection.select(ranking)
            self.logger.info(f"Selected {candidate.display_name} from {candidate.source.label}")

            result.stage = ImportStage.RESOLVE_PATH
            result.destination = self.path_resolver.resolve(candidate, ranking)

            result.stage = ImportStage.MATERIALIZE
            if self.dry_run:
                self.logger.info(f"DRY RUN: Would import {filepath} to {result.destination}")
            else:
                result.outcome = self.materializer.materialize(filepath, result.destination)
                self.logger.log_file_operation(result.outcome.value, filepath, result.destination)
                if result.outcome is not MaterializeOutcome.ALREADY_PRESENT:
                    self.library[candidate.kind] = self._snapshot(candidate.kind)

            result.stage = ImportStage.DONE

        except SelectionAbortedError as e:
            self.running = False
            self._record_failure(result, e)
        except _IMPORT_ERRORS as e:
            self._record_failure(result, e)

        return result

    def _record_failure(self, result: ImportResult, error: Exception) -> None:
        result.failed_stage = result.stage
        result.stage = ImportStage.FAILED
        result.error = str(error)
        self.logger.log_import_step(result.failed_stage.value, result.source, False, {"error_detail": str(error)})


def main():
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="NAS media importer - identifies video files and files them into the media library",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
 Examples:
   %(prog)s show.s01e01.avi                    # Import one file, choosing the match interactively
   %(prog)s --auto ~/Downloads/complete        # Import every video file, taking the best matches
   %(prog)s --config nas.json --dry-run *.mkv  # Show where files would go
   %(prog)s --log-level DEBUG movie.mp4        # Enable debug logging
        """,
    )

    parser.add_argument(
        "inputs",
        nargs="+",
        type=Path,
        help="Video files (or directories of video files) to import",
    )

    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        help="JSON configuration file",
    )

    parser.add_argument(
        "-a",
        "--auto",
        action="store_true",
        help="Always take the best-scored match instead of asking",
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Resolve destinations without moving or remuxing anything",
    )

    parser.add_argument(
        "--keep-going",
        action="store_true",
        help="Continue with the next file after a failed import",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARN", "ERROR"],
        default=DEFAULT_LOG_LEVEL,
        help="Logging level (default: INFO)",
    )

    args = parser.parse_args()

    try:
        config = load_config(args.config)
    except ConfigError as e:
        print(f"Error: {e}")
        sys.exit(1)

    logger = setup_logging(log_level=args.log_level, log_dir=config.log_dir, enable_console=True)
    series_catalog, title_catalog = build_catalogs(config, logger)
    selection = AutomaticSelection() if args.auto else InteractiveSelection()

    importer = MediaImporter(
        config,
        selection,
        logger=logger,
        series_catalog=series_catalog,
        title_catalog=title_catalog,
        dry_run=args.dry_run,
        keep_going=args.keep_going,
    )
    importer.install_signal_handlers(handle_sigint=args.auto)

    results = importer.run(args.inputs)

    if not importer.running or any(not result.succeeded for result in results):
        sys.exit(1)


if __name__ == "__main__":
    main()
