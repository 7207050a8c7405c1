"""
Walk a directory and collect the text of every file that survives the
ignore rules, the dot-file policy, the size limit and the binary check.
"""
import logging
import os
from typing import IO, List, Optional

from codedigest.config import ScannerConfig
from codedigest.errors import BinaryFileError, TraversalError
from codedigest.gitignore import EntryFilter, GitIgnoreManager
from codedigest.models import FileError, ScanEntry, ScanResult, ScanStats
from codedigest.renderer import Renderer
from codedigest.utils import is_binary_file, join_relative

logger = logging.getLogger(__name__)


class FileScanner:
    """
    Depth-first, pre-order scanner. Entries are visited in the order the
    filesystem lists them; nothing is sorted. Symlinks are never followed.

    Statistics live in an accumulator created per `scan_directory` call,
    so one scanner can serve several callers.
    """

    def __init__(self, config: Optional[ScannerConfig] = None):
        self.config = config or ScannerConfig()

    def scan_directory(
        self,
        dir_path: str,
        ignore_manager: Optional[GitIgnoreManager],
        config: Optional[ScannerConfig] = None,
    ) -> ScanResult:
        """Scan `dir_path` and return the digest entries with run statistics.

        Unreadable files and sub-directories are recorded in
        `stats.errors` and skipped. If the root itself cannot be listed the
        error is recorded and `TraversalError` is raised.
        """
        config = config or self.config
        stats = ScanStats()
        entries: List[ScanEntry] = []
        entry_filter = EntryFilter(ignore_manager, include_dot_files=config.include_dot_files)

        try:
            with os.scandir(dir_path) as it:
                listing = list(it)
        except OSError as exc:
            stats.errors.append(FileError(path=dir_path, error=str(exc)))
            raise TraversalError(dir_path, str(exc), stats=stats) from exc

        self._scan_entries(listing, "", entry_filter, entries, stats, config)
        logger.info(
            "Scanned %s: %d processed, %d skipped, %d errors",
            dir_path, stats.files_processed, stats.files_skipped, len(stats.errors),
        )
        return ScanResult(files=entries, stats=stats)

    def _scan_recursive(self, dir_path, rel_dir, entry_filter, entries, stats, config) -> None:
        try:
            with os.scandir(dir_path) as it:
                listing = list(it)
        except OSError as exc:
            logger.warning("Cannot read directory %s: %s", rel_dir, exc)
            stats.record_error(rel_dir, str(exc))
            return
        self._scan_entries(listing, rel_dir, entry_filter, entries, stats, config)

    def _scan_entries(self, listing, rel_dir, entry_filter, entries, stats, config) -> None:
        for entry in listing:
            rel_path = join_relative(rel_dir, entry.name)
            try:
                is_dir = entry.is_dir(follow_symlinks=False)
            except OSError:
                is_dir = False

            reason = entry_filter.reason(rel_path, entry.name, is_dir)
            if reason is not None:
                logger.debug("Skipping %s (%s)", rel_path, reason)
                stats.files_skipped += 1
                continue

            if is_dir:
                self._scan_recursive(entry.path, rel_path, entry_filter, entries, stats, config)
            elif entry.is_file(follow_symlinks=False):
                try:
                    content = self._process_file(entry.path, stats, config)
                except (OSError, UnicodeDecodeError) as exc:
                    logger.warning("Error reading file %s: %s", rel_path, exc)
                    stats.record_error(rel_path, str(exc))
                    continue
                if content is None:
                    stats.files_skipped += 1
                else:
                    entries.append(ScanEntry(path=rel_path, content=content))
                    stats.files_processed += 1
            else:
                logger.debug("Skipping %s (not a regular file)", rel_path)
                stats.files_skipped += 1

    def _process_file(self, path: str, stats: ScanStats, config: ScannerConfig) -> Optional[str]:
        """Return the decoded content, or None when the file is filtered out."""
        size = os.stat(path).st_size
        stats.total_size += size

        if size > config.max_file_size:
            logger.debug("Skipping %s (%d bytes, over the size limit)", path, size)
            return None
        if not config.include_binary_files and self.is_binary(path, config):
            logger.debug("Skipping %s (binary)", path)
            return None

        # newline="" keeps the file's own line endings
        with open(path, "r", encoding=config.encoding, newline="") as fh:
            return fh.read()

    def is_binary(self, path: str, config: Optional[ScannerConfig] = None) -> bool:
        config = config or self.config
        if config.binary_test is not None:
            return config.binary_test(path)
        return is_binary_file(path)

    def open_file(self, path: str, config: Optional[ScannerConfig] = None) -> IO[str]:
        """Open a file as a text stream, refusing binaries unless they are included."""
        config = config or self.config
        if not config.include_binary_files and self.is_binary(path, config):
            raise BinaryFileError(path)
        return open(path, "r", encoding=config.encoding, newline="")

    @staticmethod
    def digest_to_text(entries: List[ScanEntry]) -> str:
        return Renderer.render_files(entries)
