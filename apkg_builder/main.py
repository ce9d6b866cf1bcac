"""
Main entry point for the Anki package builder.

Builds an ``.apkg`` from a YAML deck description, or inspects an existing
package.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import Config
from .deck_file import load_deck_file
from .anki.naming import default_output_path
from .anki.package_generator import ContainerPacker
from .anki.reader import PackageValidator
from .errors import ApkgBuilderError, error_handler
from .progress import progress_tracker, ProcessingStage


def setup_logging(verbose: bool = False):
    """Set up logging configuration."""
    level = logging.DEBUG if verbose else logging.INFO

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stdout)
        ]
    )


def build_package(deck_file: Path, output_path: Optional[Path] = None,
                  timestamp: Optional[float] = None) -> bool:
    """
    Execute the build pipeline with error handling and progress tracking.

    Args:
        deck_file: YAML deck description
        output_path: Destination ``.apkg`` (defaults to the deck file's stem,
            in ``Config.OUTPUT_DIR`` when configured)
        timestamp: Pinned timestamp for reproducible output

    Returns:
        True if successful, False otherwise
    """
    logger = logging.getLogger(__name__)

    error_handler.clear_errors()
    progress_tracker.start_pipeline()
    stage = ProcessingStage.LOADING

    try:
        progress_tracker.start_stage(stage)
        package = load_deck_file(deck_file)
        progress_tracker.complete_stage(stage, details={'decks': len(package.decks)})

        stage = ProcessingStage.CARD_GENERATION
        notes = [note for deck in package.decks for note in deck.notes]
        progress_tracker.start_stage(stage, total_items=len(notes))
        snapshot = package.build_snapshot(timestamp)
        progress_tracker.update_stage_progress(stage, completed_items=len(notes))
        if not snapshot.cards:
            progress_tracker.log_warning(
                stage, "No cards were generated; check that notes fill the fields their templates need"
            )
        progress_tracker.complete_stage(stage)

        stage = ProcessingStage.PACKAGING
        if output_path is None:
            Config.ensure_directories()
            output_path = default_output_path(deck_file, Config.OUTPUT_DIR)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        progress_tracker.start_stage(stage, total_items=len(package.media_files))
        ContainerPacker().pack(snapshot, package.media_files, str(output_path))
        progress_tracker.complete_stage(stage)

        stage = ProcessingStage.FINALIZATION
        progress_tracker.start_stage(stage)
        valid = PackageValidator.validate_package(str(output_path))
        progress_tracker.complete_stage(stage, success=valid)

        progress_tracker.update_summary_data(
            decks=len(package.decks),
            notes=len(snapshot.notes),
            cards=len(snapshot.cards),
            media_files=len(package.media_files),
            output_path=str(output_path),
        )
        progress_tracker.complete_pipeline(success=valid)
        return valid

    except ApkgBuilderError as e:
        error_handler.add_error(e.processing_error)
        progress_tracker.complete_stage(stage, success=False)
        progress_tracker.complete_pipeline(success=False)
        for action in e.processing_error.suggested_actions:
            logger.info(f"Suggestion: {action}")
        return False
    except OSError as e:
        error_handler.add_error(error_handler.handle_io_error(e, {'output': str(output_path)}))
        progress_tracker.complete_stage(stage, success=False)
        progress_tracker.complete_pipeline(success=False)
        return False


def inspect_package(package_path: Path) -> bool:
    """Print a summary of an existing package."""
    info = PackageValidator.get_package_info(str(package_path))
    if not info['exists']:
        print(f"Package not found: {package_path}")
        return False

    print(f"Package: {info['path']} ({info['size_bytes']} bytes)")
    print(f"Valid: {'yes' if info['valid'] else 'no'}")
    if info['valid']:
        print(f"Decks: {', '.join(info['decks'])}")
        print(f"Note types: {', '.join(info['note_types'])}")
        print(f"Notes: {info['notes']}")
        print(f"Cards: {info['cards']}")
        for key, filename in sorted(info['media'].items(), key=lambda item: int(item[0])):
            print(f"Media {key}: {filename}")
    return info['valid']


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Build Anki .apkg packages from YAML deck descriptions"
    )
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument('-v', '--verbose', action='store_true', help="Enable debug logging")
    subparsers = parser.add_subparsers(dest='command', required=True)

    build = subparsers.add_parser('build', parents=[common], help="Build a package from a deck file")
    build.add_argument('deck_file', type=Path, help="YAML deck description")
    build.add_argument('-o', '--output', type=Path, default=None,
                       help=f"Output {Config.PACKAGE_EXTENSION} path (default: next to the deck file)")
    build.add_argument('--timestamp', type=float, default=None,
                       help="Pin the timestamp used for ids and modification times")

    inspect = subparsers.add_parser('inspect', parents=[common], help="Summarize an existing package")
    inspect.add_argument('package', type=Path, help="Path to an .apkg file")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Command-line entry point."""
    args = create_parser().parse_args(argv)
    setup_logging(args.verbose)

    if args.command == 'build':
        success = build_package(args.deck_file, args.output, args.timestamp)
    else:
        success = inspect_package(args.package)
    return 0 if success else 1


if __name__ == "__main__":
    sys.exit(main())
