"""
CodeDigest ties the ignore engine, the scanner and the tree builder
together and adds run metadata.
"""
import logging
import time
from datetime import datetime, timezone
from typing import Optional

from codedigest.config import DigestConfig
from codedigest.errors import NotInitializedError
from codedigest.gitignore import GitIgnoreManager
from codedigest.models import (
    DigestMetadata,
    DigestResult,
    DigestStats,
    FilesSection,
    RepositoryInfo,
    ScanResult,
    TreeResult,
)
from codedigest.renderer import Renderer
from codedigest.scanner import FileScanner
from codedigest.tree import DirectoryTree
from codedigest.utils import format_execution_time

logger = logging.getLogger(__name__)


class CodeDigest:
    """
    Usage:

        digest = CodeDigest(DigestConfig(ignore_patterns=["*.json"])).initialize(base_dir=root)
        result = digest.generate_digest(root)

    `initialize` must run before any other operation.
    """

    def __init__(self, config: Optional[DigestConfig] = None):
        self.config = config or DigestConfig()
        self.ignore_manager: Optional[GitIgnoreManager] = None
        self.scanner = FileScanner(self.config.scanner_config())
        self.tree = DirectoryTree(self.config.tree_config())

    def initialize(self, base_dir: Optional[str] = None) -> "CodeDigest":
        """Load caller patterns, then the ignore file resolved against `base_dir`."""
        self.ignore_manager = GitIgnoreManager.initialize(
            additional_patterns=self.config.ignore_patterns,
            gitignore_path=self.config.gitignore_path,
            base_dir=base_dir,
            ignore_case=self.config.ignore_case,
        )
        logger.debug("Initialized with %d ignore rules", len(self.ignore_manager.patterns))
        return self

    def _require_manager(self) -> GitIgnoreManager:
        if self.ignore_manager is None:
            raise NotInitializedError()
        return self.ignore_manager

    def generate_digest(self, directory: str, repository: Optional[RepositoryInfo] = None) -> DigestResult:
        """Scan `directory`, build its tree and return both with run metadata."""
        manager = self._require_manager()
        started = time.perf_counter()

        scan = self.scanner.scan_directory(directory, manager)
        files_text = Renderer.render_files(scan.files)
        tree = self.tree.build(directory, manager)

        elapsed_ms = (time.perf_counter() - started) * 1000
        metadata = DigestMetadata(
            timestamp=datetime.now(timezone.utc).isoformat(),
            directory=directory,
            execution_time=format_execution_time(elapsed_ms),
            stats=self._with_patterns(scan, manager),
            repository=repository or RepositoryInfo(),
        )
        return DigestResult(
            metadata=metadata,
            files=FilesSection(text=files_text, entries=scan.files),
            tree=tree,
        )

    def generate_tree(self, directory: str) -> TreeResult:
        return self.tree.build(directory, self._require_manager())

    def scan_directory(self, directory: str) -> ScanResult:
        manager = self._require_manager()
        scan = self.scanner.scan_directory(directory, manager)
        return ScanResult(files=scan.files, stats=self._with_patterns(scan, manager))

    def get_config(self) -> DigestConfig:
        return self.config

    @staticmethod
    def _with_patterns(scan: ScanResult, manager: GitIgnoreManager) -> DigestStats:
        return DigestStats(
            **scan.stats.model_dump(exclude={"errors"}),
            errors=list(scan.stats.errors),
            ignored_patterns=manager.patterns,
        )
