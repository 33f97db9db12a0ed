#!/usr/bin/env python3
"""
reclaim CLI: find duplicate files and move the redundant copies to trash.
All deletions go through the system trash, never permanent erase.
"""
from __future__ import annotations  # Enable postponed evaluation of annotations (PEP 563)
import argparse
import logging
import os
import signal
import sys
import threading
import time
from pathlib import Path
from typing import List, NoReturn

from reclaim.aliases import EPILOG_TEXT, RETENTION_ALIASES, RETENTION_CHOICES, RETENTION_HELP_TEXT
from reclaim.commands import ScanCommand
from reclaim.core.exceptions import ScanError
from reclaim.core.models import (
    CleanupReport, DuplicateGroup, ProgressEvent, RetentionPolicy, ScanParams, ScanResult)
from reclaim.core.sorter import Sorter
from reclaim.core.usage import measure_usage
from reclaim.services.duplicate_service import DuplicateService
from reclaim.services.file_service import FileService
from reclaim.utils.convert_utils import ConvertUtils

LOG_FORMAT = "%(levelname)-8s | %(name)-25s | %(message)s"


class CLIApplication:
    """Main CLI application controller."""

    def __init__(self):
        self.start_time: float = time.time()
        self.verbose: bool = False
        self.quiet: bool = False
        self._stop_event = threading.Event()

        # Windows consoles default to a legacy code page.
        # Undecodable filename bytes arrive as surrogates and are printed escaped.
        for stream in (sys.stdout, sys.stderr):
            if hasattr(stream, "reconfigure"):
                stream.reconfigure(encoding='utf-8', errors='backslashreplace')

    @staticmethod
    def parse_args(args=None) -> argparse.Namespace:
        """Parse command-line arguments."""
        parser = argparse.ArgumentParser(
            prog="reclaim",
            description="reclaim: duplicate file finder with safe, trash-based cleanup",
            formatter_class=argparse.RawTextHelpFormatter,
            epilog=EPILOG_TEXT
        )

        parser.add_argument(
            "--input", "-i",
            required=True,
            type=str,
            help="Directory to scan for duplicates"
        )
        parser.add_argument(
            "--min-size", "-m",
            default="1K",
            type=str,
            metavar='',
            help="Ignore files smaller than this (e.g., 500KB, 1MB). Default: 1K\n"
                 "Empty files are always skipped, even with -m 0."
        )
        parser.add_argument(
            "--workers", "-w",
            default=None,
            type=int,
            metavar='',
            help="Hashing threads. Default: CPU count, between 2 and 8"
        )
        parser.add_argument(
            "--budget",
            default="",
            type=str,
            metavar='',
            help="Cap on bytes re-read by full verification (e.g., 20GB). Default: unlimited"
        )
        parser.add_argument(
            "--keep",
            choices=RETENTION_CHOICES,
            default="newest",
            type=str,
            help=RETENTION_HELP_TEXT
        )

        # Actions
        parser.add_argument(
            "--clean",
            action="store_true",
            help="Keep one file per duplicate group and move the rest to trash.\n"
                 "Always shows a preview before deletion."
        )
        parser.add_argument(
            "--usage",
            action="store_true",
            help="Print disk usage of the input directory (hard links counted once)"
        )

        # Output options
        parser.add_argument(
            "--force",
            action="store_true",
            help="Skip confirmation prompt when used with --clean (for automation/scripts)"
        )
        parser.add_argument(
            "--quiet", "-q",
            action="store_true",
            help="Suppress non-essential output"
        )
        parser.add_argument(
            "--verbose", "-v",
            action="store_true",
            help="Show progress, statistics and skipped files"
        )
        parser.add_argument(
            "--debug",
            action="store_true",
            help="Enable debug logging"
        )

        return parser.parse_args(args)

    def validate_args(self, args: argparse.Namespace) -> None:
        """Validate command-line arguments before execution."""
        if args.force and not args.clean:
            self.error_exit("--force can only be used with --clean")

        # Prevent interactive confirmation in non-TTY environments
        if args.clean and not args.force:
            if not sys.stdin.isatty() or not sys.stdout.isatty():
                self.error_exit(
                    "Cannot request interactive confirmation in non-interactive session.\n"
                    "Use --force flag to proceed without confirmation when piping output or running in scripts."
                )

        root_path = Path(args.input).expanduser()
        if not root_path.exists():
            self.error_exit(f"Directory not found: {args.input}")
        if not root_path.is_dir():
            self.error_exit(f"Path is not a directory: {args.input}")

        if not ConvertUtils.is_valid_size_format(args.min_size):
            self.error_exit(f"Invalid size format: {args.min_size}")
        if args.budget and not ConvertUtils.is_valid_size_format(args.budget):
            self.error_exit(f"Invalid size format: {args.budget}")

        if args.workers is not None and args.workers < 1:
            self.error_exit("Worker count must be at least 1")

    def create_params(self, args: argparse.Namespace) -> ScanParams:
        """Create ScanParams from CLI arguments."""
        try:
            params = ScanParams.from_human_readable(
                root_dir=str(Path(args.input).expanduser().resolve()),
                min_size_str=args.min_size,
                workers=args.workers,
                keep_newest=RETENTION_ALIASES[args.keep] == RetentionPolicy.KEEP_NEWEST,
                budget_str=args.budget,
            )
        except ValueError as e:
            self.error_exit(f"Parameter error: {e}")
        return params

    def progress_callback(self, event: ProgressEvent) -> None:
        """Stage progress on stderr, verbose mode only."""
        if not self.verbose:
            return
        sys.stderr.write(f"\r  {event.describe()}\033[K")
        sys.stderr.flush()

    def stopped_flag(self) -> bool:
        return self._stop_event.is_set()

    def stop(self) -> None:
        self._stop_event.set()

    def handle_interrupt(self, signum, frame) -> None:
        """First Ctrl+C asks the scan to wind down, a second one aborts."""
        if self._stop_event.is_set():
            raise KeyboardInterrupt
        self.stop()
        sys.stderr.write("\n⚠️  Stopping scan, press Ctrl+C again to abort\n")

    def print_usage(self, root_dir: str) -> None:
        report = measure_usage(root_dir, stopped_flag=self.stopped_flag)
        print(
            f"Disk usage: {ConvertUtils.bytes_to_human(report.total_bytes)} in {report.file_count} files"
            f" ({report.hard_links_skipped} hard links counted once)"
        )

    def run_scan(self, params: ScanParams) -> ScanResult:
        """Execute the duplicate scan."""
        command = ScanCommand()
        if self.verbose:
            print(f"Finding duplicates ({params.workers} workers, min size {ConvertUtils.bytes_to_human(params.min_size_bytes)})...")

        # signal.signal is only allowed from the main thread
        trap_sigint = threading.current_thread() is threading.main_thread()
        if trap_sigint:
            previous_handler = signal.signal(signal.SIGINT, self.handle_interrupt)
        try:
            result = command.execute(
                params,
                progress_callback=self.progress_callback if self.verbose else None,
                stopped_flag=self.stopped_flag
            )
        except ScanError as e:
            self.error_exit(f"Scan failed: {e}")
        finally:
            if trap_sigint:
                signal.signal(signal.SIGINT, previous_handler or signal.default_int_handler)

        if result.cancelled:
            print("\n⚠️  Operation cancelled by user (Ctrl+C)")
            sys.exit(130)

        if self.verbose:
            sys.stderr.write("\n")
            print("\n" + result.stats.print_summary())

        return result

    def output_results(self, groups: List[DuplicateGroup]) -> None:
        """Print duplicate groups, most reclaimable first."""
        if self.quiet:
            return

        if not groups:
            print("No duplicate groups found.")
            return

        total_files = sum(len(g.files) for g in groups)
        reclaimable = sum(g.reclaimable_bytes for g in groups)
        print(f"\nFound {len(groups)} duplicate groups ({total_files} files), "
              f"{ConvertUtils.bytes_to_human(reclaimable)} reclaimable")

        for idx, group in enumerate(groups, 1):
            print(f"\n📁 Group {idx} | Size: {ConvertUtils.bytes_to_human(group.file_size)} "
                  f"| Files: {len(group.files)} | Reclaimable: {ConvertUtils.bytes_to_human(group.reclaimable_bytes)}")
            for file in group.files:
                print(f"   {file.path} [{ConvertUtils.timestamp_to_human(file.modified_time)}]")

    def output_warnings(self, result: ScanResult) -> None:
        if not result.warnings or self.quiet:
            return
        self.warning(f"{len(result.warnings)} file(s) could not be read and were skipped")
        if self.verbose:
            for item in result.warnings:
                print(f"   • {item}", file=sys.stderr)

    def execute_clean(self, groups: List[DuplicateGroup], params: ScanParams, force: bool = False) -> CleanupReport:
        """Keep one file per group, trash the rest. Always shows a preview first."""
        report = CleanupReport()
        if not groups:
            if not self.quiet:
                print("No duplicate groups found.")
            return report

        keep_newest = params.retention == RetentionPolicy.KEEP_NEWEST
        files_to_delete = DuplicateService.plan_removals(groups, keep_newest=keep_newest)
        space_to_free = sum(g.reclaimable_bytes for g in groups)

        # Preview before any action
        print()
        for idx, group in enumerate(groups, 1):
            selection = Sorter.select(group, params.retention)
            print(f"📁 Group {idx} | Size: {ConvertUtils.bytes_to_human(group.file_size)} | Files: {len(group.files)}")
            print("-" * 60)
            print(f"   [KEEP] {selection.keep.path}")
            print(f"          Modified: {ConvertUtils.timestamp_to_human(selection.keep.modified_time)}")
            print(f"          Reason: {params.retention.display_name.lower()}")
            for file in selection.remove:
                print(f"   [DEL]  {file.path}")
            print()

        print("=" * 60)
        print(f"Summary: Keep 1 file per group ({len(groups)} files preserved, {len(files_to_delete)} files to trash)")
        print(f"Total space to free: {ConvertUtils.bytes_to_human(space_to_free)}")
        print()

        if force:
            print("⚠️  WARNING: --force flag skips confirmation. Proceeding with deletion...")
        else:
            if not sys.stdin.isatty() or not sys.stdout.isatty():
                self.error_exit(
                    "Lost interactive terminal during operation. "
                    "Use --force to proceed in non-interactive environments."
                )
            response = input(f"Are you sure you want to move {len(files_to_delete)} files to trash? [y/N]: ")
            if response.strip().lower() not in ("y", "yes"):
                print("Deletion cancelled by user.")
                return report

        print(f"\nMoving {len(files_to_delete)} files to trash...")
        report = DuplicateService.clean_groups(
            groups,
            keep_newest=keep_newest,
            trash=FileService.move_to_trash,
        )

        if report.failures:
            shown, hidden = DuplicateService.split_report(report)
            print(f"\n⚠️  Partial success: {len(report.removed)}/{len(files_to_delete)} files moved to trash.")
            print(f"Failed to delete {len(report.failures)} file(s):")
            for path, error in shown:
                print(f"  • {os.path.basename(path)}: {error}")
            if hidden:
                print(f"  ...and {hidden} more files")
        else:
            print(f"✅ Successfully moved {len(report.removed)} files to trash.")
        print(f"Total space reclaimed: {ConvertUtils.bytes_to_human(report.bytes_reclaimed)}")
        return report

    def warning(self, message: str) -> None:
        """Print a warning message to stderr."""
        if not self.quiet:
            print(f"⚠️  {message}", file=sys.stderr)

    @staticmethod
    def error_exit(message: str, code: int = 1) -> NoReturn:
        """Print error and exit."""
        print(f"❌ Error: {message}", file=sys.stderr)
        sys.exit(code)

    def run(self, argv=None) -> None:
        """Main entry point."""
        args = self.parse_args(argv)
        self.verbose = args.verbose
        self.quiet = args.quiet
        if args.debug:
            logging.getLogger().setLevel(logging.DEBUG)

        self.validate_args(args)
        params = self.create_params(args)

        if args.usage and not self.quiet:
            self.print_usage(params.root_dir)

        if not self.quiet:
            print(f"Scanning directory: {params.root_dir}")

        result = self.run_scan(params)
        self.output_warnings(result)

        if args.clean:
            self.execute_clean(result.groups, params=params, force=args.force)
        else:
            self.output_results(result.groups)

        if self.verbose:
            print(f"\n✅ Completed in {time.time() - self.start_time:.2f} seconds")


def main() -> None:
    """Application entry point."""
    logging.basicConfig(level=logging.ERROR, format=LOG_FORMAT)
    app = CLIApplication()
    try:
        app.run()
    except KeyboardInterrupt:
        app.stop()
        print("\n⚠️  Operation cancelled by user (Ctrl+C)")
        sys.exit(130)
    except Exception as e:
        if os.environ.get("DEBUG"):
            raise
        print(f"❌ Unexpected error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
