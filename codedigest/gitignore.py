"""

this is a module for
applying .gitignore rules

"""


# gitignore.py
from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Dict, Iterable, List, NamedTuple, Optional, Union

from codedigest.config import DEFAULT_GITIGNORE
from codedigest.errors import IgnoreFileError
from codedigest.patterns import Rule, compile_pattern

logger = logging.getLogger(__name__)

# Hard-coded excludes that *always* apply
HARDCODED = (".git",)

_LINE_SPLIT = re.compile(r"\r?\n")


class IgnoreResult(NamedTuple):
    ignored: bool
    unignored: bool
    rule: Optional[Rule] = None


def _normalize(path: Union[str, os.PathLike], is_dir: bool) -> str:
    """Return the cache key for a relative path: posix separators, no
    leading "./", and a trailing slash for directories."""
    text = os.fspath(path)
    if os.sep != "/":
        text = text.replace(os.sep, "/")
    if os.path.isabs(text) or text.startswith("/"):
        raise ValueError(f"path should be relative to the scan root, got {text!r}")
    is_dir = is_dir or text.endswith("/")
    while text.startswith("./"):
        text = text[2:]
    text = text.strip("/")
    if not text or text == ".":
        raise ValueError("path must not be empty")
    if text == ".." or text.startswith("../"):
        raise ValueError(f"path should be relative to the scan root, got {text!r}")
    return text + "/" if is_dir else text


def _parent_key(key: str) -> Optional[str]:
    head, sep, _ = key.rstrip("/").rpartition("/")
    return head + "/" if sep else None


class GitIgnoreManager:
    """Ordered gitignore rules with per-path memoization.

    The last matching rule decides, except that nothing below an ignored
    directory can be re-included: parents are resolved (and cached)
    before their children.
    """

    def __init__(self, ignore_case: bool = True):
        self.ignore_case = ignore_case
        self._rules: List[Rule] = []
        self._init_cache()

    @classmethod
    def initialize(
        cls,
        additional_patterns: Iterable[str] = (),
        gitignore_path: Union[str, os.PathLike] = DEFAULT_GITIGNORE,
        base_dir: Optional[Union[str, os.PathLike]] = None,
        ignore_case: bool = True,
    ) -> "GitIgnoreManager":
        """Build a manager from caller patterns and one ignore file.

        Caller patterns go first so the file can override them. A relative
        `gitignore_path` is resolved against `base_dir` (default: cwd).
        """
        manager = cls(ignore_case=ignore_case)
        manager.add(list(additional_patterns))
        path = Path(gitignore_path)
        if not path.is_absolute():
            path = Path(base_dir if base_dir is not None else os.getcwd()) / path
        return manager.load_file(path)

    def _init_cache(self) -> None:
        self._ignore_cache: Dict[str, bool] = {}
        self._test_cache: Dict[str, IgnoreResult] = {}

    @property
    def rules(self) -> List[Rule]:
        return list(self._rules)

    @property
    def patterns(self) -> List[str]:
        """Source text of every compiled rule, in order."""
        return [rule.source for rule in self._rules]

    def add(self, patterns: Union[str, Iterable[str], None]) -> "GitIgnoreManager":
        """Compile and append patterns; invalid lines are dropped."""
        if not patterns:
            return self
        lines = _LINE_SPLIT.split(patterns) if isinstance(patterns, str) else patterns

        added = False
        for line in lines:
            rule = compile_pattern(line, ignore_case=self.ignore_case)
            if rule is None:
                continue
            self._rules.append(rule)
            added = True
        if added:
            self._init_cache()
        return self

    def load_file(self, path: Union[str, os.PathLike]) -> "GitIgnoreManager":
        """Add the rules of one ignore file. A missing file adds nothing."""
        try:
            text = Path(path).read_text(encoding="utf-8-sig")
        except FileNotFoundError:
            logger.debug("No ignore file at %s", path)
            return self
        except (OSError, UnicodeDecodeError) as exc:
            reason = exc.strerror if isinstance(exc, OSError) and exc.strerror else str(exc)
            raise IgnoreFileError(str(path), reason) from exc

        before = len(self._rules)
        self.add(text.splitlines())
        logger.debug("Loaded %d rules from %s", len(self._rules) - before, path)
        return self

    def ignores(self, path: Union[str, os.PathLike], is_dir: bool = False) -> bool:
        """Return True if the relative path is ignored."""
        return self._ignored(_normalize(path, is_dir))

    def test(self, path: Union[str, os.PathLike], is_dir: bool = False) -> bool:
        """Same answer as `ignores`: True if the relative path is ignored."""
        return self.ignores(path, is_dir)

    def explain(self, path: Union[str, os.PathLike], is_dir: bool = False) -> IgnoreResult:
        """Like `ignores`, but also report re-inclusion and the deciding rule."""
        return self._tested(_normalize(path, is_dir))

    def filter_paths(self, paths: Iterable[Union[str, os.PathLike]]) -> List[Union[str, os.PathLike]]:
        """Keep the paths that are not ignored. A trailing slash marks a directory."""
        return [path for path in paths if not self.ignores(path)]

    def _ignored(self, key: str) -> bool:
        cached = self._ignore_cache.get(key)
        if cached is not None:
            return cached

        parent = _parent_key(key)
        if parent is not None and self._ignored(parent):
            result = True
        else:
            result = False
            for rule in self._rules:
                if rule.matches(key):
                    result = not rule.negative
        self._ignore_cache[key] = result
        return result

    def _tested(self, key: str) -> IgnoreResult:
        cached = self._test_cache.get(key)
        if cached is not None:
            return cached

        parent = _parent_key(key)
        parent_result = self._tested(parent) if parent is not None else None
        if parent_result is not None and parent_result.ignored:
            result = parent_result
        else:
            result = IgnoreResult(False, False)
            for rule in self._rules:
                if rule.matches(key):
                    result = IgnoreResult(not rule.negative, rule.negative, rule)
        self._test_cache[key] = result
        return result


class EntryFilter:
    """Callable that answers: *should this entry be left out?*

    Shared by the scanner and the tree builder so both see the same set
    of paths.
    """

    def __init__(self, ignore_manager: Optional[GitIgnoreManager], include_dot_files: bool = False):
        self.ignore_manager = ignore_manager
        self.include_dot_files = include_dot_files

    def reason(self, rel_path: str, name: str, is_dir: bool) -> Optional[str]:
        """Return why the entry is excluded, or None to keep it."""
        if name in HARDCODED:
            return "hard-coded exclude"
        if not self.include_dot_files and name.startswith("."):
            return "dot file"
        if self.ignore_manager is not None and self.ignore_manager.ignores(rel_path, is_dir):
            return "ignore rule"
        return None

    def __call__(self, rel_path: str, name: str, is_dir: bool) -> bool:
        """Return True if the entry should be *excluded*."""
        return self.reason(rel_path, name, is_dir) is not None
