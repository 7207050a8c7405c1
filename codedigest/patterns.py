"""
Compile gitignore pattern lines into matchable rules.

The glob translation is pathspec's `GitIgnoreSpecPattern`. Its regex is
*searched* against a posix relative path, and directory candidates are
tested with a trailing slash ("build/"), which is what lets "build/"
match the directory while "build" matches both the directory and a file
of that name.

On top of pathspec a rule adds case folding, rejects lines with nothing
left to match once "!" and slashes are removed, and keeps "abc/**" from
matching the directory "abc/" itself.
"""
import logging
import re
from dataclasses import dataclass, field
from typing import Optional, Pattern

from pathspec.patterns.gitignore import GitIgnorePatternError
from pathspec.patterns.gitignore.spec import GitIgnoreSpecPattern

logger = logging.getLogger(__name__)

# A slash anywhere but the last character anchors the pattern.
_INNER_SLASH = re.compile(r"/(?!$)")


@dataclass(frozen=True)
class Rule:
    """A compiled ignore pattern."""
    source: str
    negative: bool
    directory_only: bool
    anchored: bool
    regex: Pattern[str] = field(repr=False, compare=False)
    contents_only: bool = field(default=False, repr=False)

    def matches(self, path: str, is_dir: bool = False) -> bool:
        """Test a normalized relative path; directories get a trailing slash."""
        if is_dir and not path.endswith("/"):
            path += "/"
        match = self.regex.search(path)
        if match is None:
            return False
        # "abc/**" matches what is inside abc, never "abc/"
        return not (self.contents_only and match.end() == len(path) and path.endswith("/"))


def translate(line: str) -> Optional[str]:
    """Regex source for a pattern line, or None when it matches nothing.

    Raises `GitIgnorePatternError` for a line git would reject, such as
    one ending in an unescaped backslash.
    """
    regex, _include = GitIgnoreSpecPattern.pattern_to_regex(line)
    return regex


def compile_pattern(line: str, ignore_case: bool = True) -> Optional[Rule]:
    """Compile one ignore-file line, or return None if it is not a pattern.

    Blank lines, comments, lines ending in an unescaped backslash, lines
    with an invalid bracket expression and lines with nothing to match
    once "!" and slashes are removed are rejected.
    """
    if not isinstance(line, str):
        return None
    text = line.lstrip("\ufeff")
    negative = text.startswith("!")
    body = text[1:] if negative else text
    if not body.endswith("\\ "):
        body = body.rstrip()
    if not body.strip("/"):
        return None

    flags = re.IGNORECASE if ignore_case else 0
    try:
        source = translate(text)
        if source is None:
            return None
        regex = re.compile(source, flags)
    except (GitIgnorePatternError, re.error) as exc:
        logger.debug("Dropping pattern %r: %s", line, exc)
        return None

    return Rule(
        source=line,
        negative=negative,
        directory_only=body.endswith("/"),
        anchored=_INNER_SLASH.search(body) is not None,
        regex=regex,
        contents_only=body.endswith("/**"),
    )
