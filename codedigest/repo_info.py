"""
Repository, branch and commit for the digest header, read through GitPython.

The digest core never looks this up itself; callers pass the result in.
"""
import logging
import os
import re
from typing import Optional

from git import InvalidGitRepositoryError, NoSuchPathError, Repo

from codedigest.models import RepositoryInfo

logger = logging.getLogger(__name__)

# git@github.com:owner/name.git, https://host/owner/name(.git)
_REMOTE_NAME = re.compile(r"[:/]([^/:]+/[^/]+?)(?:\.git)?/?$")


def repository_name(repo: Repo) -> str:
    """`owner/name` from the origin remote, else the working tree folder name."""
    try:
        url = repo.remotes.origin.url
    except (AttributeError, IndexError):
        url = None
    if url:
        match = _REMOTE_NAME.search(url)
        if match:
            return match.group(1)
    return os.path.basename(repo.working_tree_dir or repo.git_dir)


def detect_repository(path: str) -> RepositoryInfo:
    """Describe the git repository containing `path`, or return the "local" defaults."""
    try:
        repo = Repo(path, search_parent_directories=True)
    except (InvalidGitRepositoryError, NoSuchPathError):
        logger.debug("%s is not inside a git repository", path)
        return RepositoryInfo()

    try:
        branch = repo.active_branch.name
    except TypeError:
        # detached HEAD
        branch = "HEAD"

    try:
        commit = repo.head.commit.hexsha
    except ValueError:
        # no commits yet
        commit = "local"

    return RepositoryInfo(repository=repository_name(repo), branch=branch, commit=commit)


def resolve_repository(
    path: str,
    repository: Optional[str] = None,
    branch: Optional[str] = None,
    commit: Optional[str] = None,
) -> RepositoryInfo:
    """Explicit values win; anything missing comes from `detect_repository`."""
    if repository and branch and commit:
        return RepositoryInfo(repository=repository, branch=branch, commit=commit)
    detected = detect_repository(path)
    return RepositoryInfo(
        repository=repository or detected.repository,
        branch=branch or detected.branch,
        commit=commit or detected.commit,
    )
