"""Repository and per-file metadata gathered from the git CLI."""

from __future__ import annotations

import hashlib
import re
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from ..logging import get_logger

_HTTPS_REMOTE = re.compile(r"https?://([^/]+)/([^/]+)/([^/]+?)(?:\.git)?$")
_SSH_REMOTE = re.compile(r"git@([^:]+):([^/]+)/([^/]+?)(?:\.git)?$")
_SHORTLOG_LINE = re.compile(r"^\s*\d+\s+(.+?)\s+<(.+?)>$")
_NOREPLY_SUFFIX = "@users.noreply.github.com"

Runner = Callable[..., str]


class GitCommandError(RuntimeError):
    """Raised when a git invocation fails or git is unavailable."""


@dataclass(frozen=True)
class Author:
    name: str
    email: str


@dataclass(frozen=True)
class FileInfo:
    """History summary for a single tracked file."""

    last_commit_hash: str = ""
    last_commit_date: str = ""
    last_commit_message: str = ""
    last_author_name: str = ""
    last_author_email: str = ""
    authors: Tuple[Author, ...] = field(default_factory=tuple)
    total_commits: int = 0


@dataclass(frozen=True)
class RepoInfo:
    """Snapshot of the repository the scan root lives in.

    Computed once per run and passed explicitly to whatever needs it.
    """

    is_repo: bool = False
    remote_url: str = ""
    provider: str = ""
    owner: str = ""
    name: str = ""
    branch: str = ""
    git_root: str = ""


def _provider_for_host(host: str) -> str:
    if "github.com" in host:
        return "github"
    if "gitlab.com" in host:
        return "gitlab"
    if "gitea" in host:
        return "gitea"
    return "other"


def parse_remote_url(url: str) -> Tuple[str, str, str]:
    """Return ``(provider, owner, repo)`` for https or ssh remotes."""
    for pattern in (_HTTPS_REMOTE, _SSH_REMOTE):
        match = pattern.search(url)
        if match:
            host, owner, repo = match.groups()
            return _provider_for_host(host), owner, repo
    return "unknown", "", ""


def _has_remote_coordinates(repo: RepoInfo) -> bool:
    return repo.provider != "unknown" and bool(repo.owner) and bool(repo.name)


def commit_url(repo: RepoInfo, commit_hash: str) -> str:
    if not _has_remote_coordinates(repo):
        return ""
    if repo.provider == "github":
        return f"https://github.com/{repo.owner}/{repo.name}/commit/{commit_hash}"
    if repo.provider == "gitlab":
        return f"https://gitlab.com/{repo.owner}/{repo.name}/-/commit/{commit_hash}"
    if repo.provider == "gitea":
        return f"https://gitea.com/{repo.owner}/{repo.name}/commit/{commit_hash}"
    return ""


def file_url(repo: RepoInfo, commit_hash: str, file_path: str) -> str:
    if not _has_remote_coordinates(repo):
        return ""
    if repo.provider == "github":
        return f"https://github.com/{repo.owner}/{repo.name}/blob/{commit_hash}/{file_path}"
    if repo.provider == "gitlab":
        return f"https://gitlab.com/{repo.owner}/{repo.name}/-/blob/{commit_hash}/{file_path}"
    return ""


def gravatar_url(email: str, size: int) -> str:
    digest = hashlib.md5(email.strip().lower().encode("utf-8")).hexdigest()
    return f"https://www.gravatar.com/avatar/{digest}?s={size}&d=identicon"


def avatar_url(repo: RepoInfo, author: Author, size: int = 40) -> str:
    """GitHub noreply addresses map to the user's avatar, everything else to Gravatar."""
    if repo.provider == "github" and author.email.endswith(_NOREPLY_SUFFIX):
        user_part = author.email.split("@", 1)[0]
        if "+" in user_part:
            username = user_part.split("+", 1)[1]
            return f"https://github.com/{username}.png?size={size}"
    return gravatar_url(author.email, size)


class GitInspector:
    """Queries git for repository and file metadata."""

    def __init__(self, runner: Runner | None = None) -> None:
        self._runner = runner or self._default_runner
        self.logger = get_logger("git")

    def repo_info(self, path: Path) -> RepoInfo:
        """Return a snapshot describing the repository containing ``path``."""
        try:
            self._run(["git", "-C", str(path), "rev-parse", "--git-dir"])
        except GitCommandError:
            return RepoInfo()

        git_root = self._try(["git", "-C", str(path), "rev-parse", "--show-toplevel"]) or str(path)
        branch = self._try(["git", "-C", str(path), "rev-parse", "--abbrev-ref", "HEAD"]) or ""
        remote = self._try(["git", "-C", str(path), "config", "--get", "remote.origin.url"])
        if remote is None:
            return RepoInfo(is_repo=True, branch=branch, git_root=git_root)

        provider, owner, name = parse_remote_url(remote)
        return RepoInfo(
            is_repo=True,
            remote_url=remote,
            provider=provider,
            owner=owner,
            name=name,
            branch=branch,
            git_root=git_root,
        )

    def file_info(self, git_root: str, rel_path: str) -> FileInfo:
        """Return history for ``rel_path``; raises :class:`GitCommandError` when unavailable."""
        output = self._run(
            [
                "git",
                "-C",
                git_root,
                "log",
                "-1",
                "--format=%H|%an|%ae|%ad|%s",
                "--date=short",
                "--",
                rel_path,
            ]
        ).strip()
        if not output:
            raise GitCommandError(f"No git history for {rel_path}")

        last: Dict[str, str] = {}
        parts = output.split("|", 4)
        if len(parts) == 5:
            last = dict(zip(("hash", "author", "email", "date", "message"), parts))

        total_commits = 0
        history = self._try(["git", "-C", git_root, "log", "--follow", "--oneline", "--", rel_path])
        if history is not None:
            total_commits = len(history.splitlines())

        authors: List[Author] = []
        shortlog = self._try(["git", "-C", git_root, "shortlog", "-sne", "HEAD", "--", rel_path])
        if shortlog is not None:
            authors = _parse_shortlog(shortlog.splitlines())

        return FileInfo(
            last_commit_hash=last.get("hash", ""),
            last_commit_date=last.get("date", ""),
            last_commit_message=last.get("message", ""),
            last_author_name=last.get("author", ""),
            last_author_email=last.get("email", ""),
            authors=tuple(authors),
            total_commits=total_commits,
        )

    # ------------------------------------------------------------------
    # Helpers

    def _try(self, args: Iterable[str]) -> Optional[str]:
        try:
            return self._run(args).strip()
        except GitCommandError as exc:
            self.logger.debug("git command failed: %s", exc)
            return None

    def _run(self, args: Iterable[str]) -> str:
        args = list(args)
        try:
            return self._runner(args)
        except (subprocess.CalledProcessError, OSError) as exc:
            raise GitCommandError(f"{' '.join(args)}: {exc}") from exc

    @staticmethod
    def _default_runner(args: Iterable[str]) -> str:
        completed = subprocess.run(
            list(args),
            check=True,
            text=True,
            capture_output=True,
        )
        return completed.stdout


def _parse_shortlog(lines: Iterable[str]) -> List[Author]:
    # keyed by email so aliases with the same address collapse
    by_email: Dict[str, Author] = {}
    for line in lines:
        match = _SHORTLOG_LINE.match(line)
        if match:
            name, email = (part.strip() for part in match.groups())
            by_email[email] = Author(name=name, email=email)
    return list(by_email.values())


__all__ = [
    "Author",
    "FileInfo",
    "GitCommandError",
    "GitInspector",
    "RepoInfo",
    "avatar_url",
    "commit_url",
    "file_url",
    "gravatar_url",
    "parse_remote_url",
]
