"""Tests for kdoc.git.info."""

from __future__ import annotations

import hashlib
import subprocess
from pathlib import Path

import pytest

from kdoc.git.info import (
    Author,
    GitCommandError,
    GitInspector,
    RepoInfo,
    avatar_url,
    commit_url,
    file_url,
    parse_remote_url,
)

GITHUB = RepoInfo(is_repo=True, provider="github", owner="octo", name="widgets", branch="main", git_root="/repo")


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        ("https://github.com/octo/widgets.git", ("github", "octo", "widgets")),
        ("https://gitlab.com/group/tool", ("gitlab", "group", "tool")),
        ("git@github.com:octo/widgets.git", ("github", "octo", "widgets")),
        ("git@gitea.example.org:team/app.git", ("gitea", "team", "app")),
        ("https://example.org/team/app.git", ("other", "team", "app")),
        ("/srv/git/app.git", ("unknown", "", "")),
    ],
)
def test_parse_remote_url(url: str, expected: tuple[str, str, str]) -> None:
    assert parse_remote_url(url) == expected


def test_provider_urls() -> None:
    assert commit_url(GITHUB, "abc") == "https://github.com/octo/widgets/commit/abc"
    assert file_url(GITHUB, "abc", "src/a.c") == "https://github.com/octo/widgets/blob/abc/src/a.c"

    gitlab = RepoInfo(is_repo=True, provider="gitlab", owner="g", name="t")
    assert commit_url(gitlab, "abc") == "https://gitlab.com/g/t/-/commit/abc"
    assert file_url(gitlab, "abc", "a.c") == "https://gitlab.com/g/t/-/blob/abc/a.c"

    unknown = RepoInfo(is_repo=True, provider="unknown")
    assert commit_url(unknown, "abc") == ""
    assert file_url(unknown, "abc", "a.c") == ""


def test_avatar_url_prefers_github_noreply_username() -> None:
    noreply = Author(name="Octo", email="123+octocat@users.noreply.github.com")
    assert avatar_url(GITHUB, noreply, 40) == "https://github.com/octocat.png?size=40"

    person = Author(name="Dev", email=" Dev@Example.com ")
    digest = hashlib.md5(b"dev@example.com").hexdigest()
    assert avatar_url(GITHUB, person, 32) == f"https://www.gravatar.com/avatar/{digest}?s=32&d=identicon"


def _fake_runner(responses: dict[str, str]):
    calls: list[list[str]] = []

    def runner(args):
        args = list(args)
        calls.append(args)
        key = " ".join(args[3:])
        if key not in responses:
            raise subprocess.CalledProcessError(128, args)
        return responses[key]

    return runner, calls


def test_repo_info_outside_repository() -> None:
    runner, _ = _fake_runner({})
    assert GitInspector(runner=runner).repo_info(Path("/tmp/x")) == RepoInfo()


def test_repo_info_reads_remote_and_branch() -> None:
    runner, calls = _fake_runner(
        {
            "rev-parse --git-dir": ".git\n",
            "rev-parse --show-toplevel": "/repo\n",
            "rev-parse --abbrev-ref HEAD": "main\n",
            "config --get remote.origin.url": "git@github.com:octo/widgets.git\n",
        }
    )

    info = GitInspector(runner=runner).repo_info(Path("/repo/src"))

    assert info == RepoInfo(
        is_repo=True,
        remote_url="git@github.com:octo/widgets.git",
        provider="github",
        owner="octo",
        name="widgets",
        branch="main",
        git_root="/repo",
    )
    assert calls[0][:3] == ["git", "-C", "/repo/src"]


def test_repo_info_without_remote() -> None:
    runner, _ = _fake_runner({"rev-parse --git-dir": ".git\n", "rev-parse --show-toplevel": "/repo\n"})

    info = GitInspector(runner=runner).repo_info(Path("/repo"))

    assert info.is_repo is True
    assert info.git_root == "/repo"
    assert info.provider == ""


def test_file_info_collects_history_and_authors() -> None:
    runner, _ = _fake_runner(
        {
            "log -1 --format=%H|%an|%ae|%ad|%s --date=short -- src/a.c": (
                "0123456789abcdef|Ann|ann@example.com|2024-05-01|Fix | parsing\n"
            ),
            "log --follow --oneline -- src/a.c": "0123456 Fix\n89abcde Init\n",
            "shortlog -sne HEAD -- src/a.c": (
                "     2\tAnn <ann@example.com>\n     1\tAnn B <ann@example.com>\n     1\tBob <bob@example.com>\n"
            ),
        }
    )

    info = GitInspector(runner=runner).file_info("/repo", "src/a.c")

    assert info.last_commit_hash == "0123456789abcdef"
    assert info.last_author_name == "Ann"
    assert info.last_commit_date == "2024-05-01"
    assert info.last_commit_message == "Fix | parsing"
    assert info.total_commits == 2
    assert info.authors == (
        Author(name="Ann B", email="ann@example.com"),
        Author(name="Bob", email="bob@example.com"),
    )


def test_file_info_without_history_raises() -> None:
    runner, _ = _fake_runner({"log -1 --format=%H|%an|%ae|%ad|%s --date=short -- new.c": ""})

    with pytest.raises(GitCommandError):
        GitInspector(runner=runner).file_info("/repo", "new.c")


def test_missing_git_binary_is_reported_as_command_error() -> None:
    def runner(args):
        raise FileNotFoundError("git")

    assert GitInspector(runner=runner).repo_info(Path(".")) == RepoInfo()
