"""Markdown rendering for parsed source files."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List

from jinja2 import Environment, FileSystemLoader

from ..git.info import RepoInfo, avatar_url, commit_url, file_url
from ..models import SourceFile
from ..parser.backlinks import anchor_for

_SHORT_HASH_LENGTH = 7
_MESSAGE_LIMIT = 60


class MarkdownRenderer:
    """Renders a :class:`SourceFile` into a standalone markdown page."""

    def __init__(self, templates_dir: Path | None = None, *, avatar_size: int = 40) -> None:
        self.templates_dir = templates_dir or Path(__file__).with_name("templates")
        self.avatar_size = avatar_size
        self._env = self._create_env(self.templates_dir)

    def render(
        self,
        source_file: SourceFile,
        *,
        repo: RepoInfo | None = None,
        repo_path: str | None = None,
    ) -> str:
        """Return the markdown page for ``source_file``.

        The git card is only rendered when the file carries git info and the
        repository snapshot describes an actual repository.
        """
        card = ""
        if source_file.git_info is not None and repo is not None and repo.is_repo:
            card = self.render_card(source_file, repo, repo_path or source_file.path)

        template = self._env.get_template("file.md.j2")
        return template.render(
            title=Path(source_file.path).name,
            card=card,
            module_description=source_file.module_description,
            toc=self._toc_entries(source_file),
            elements=source_file.elements,
            language=source_file.language,
        )

    def render_card(self, source_file: SourceFile, repo: RepoInfo, repo_path: str) -> str:
        info = source_file.git_info
        if info is None:
            return ""

        contributors: List[Dict[str, str]] = [
            {"name": author.name, "avatar": avatar_url(repo, author, self.avatar_size)}
            for author in info.authors
        ]
        repo_label = f"{repo.owner}/{repo.name}" if repo.owner and repo.name else ""
        template = self._env.get_template("card.html.j2")
        rendered = template.render(
            short_hash=info.last_commit_hash[:_SHORT_HASH_LENGTH],
            commit_url=commit_url(repo, info.last_commit_hash),
            date=info.last_commit_date,
            message=_truncate(info.last_commit_message, _MESSAGE_LIMIT),
            repo_label=repo_label,
            file_url=file_url(repo, info.last_commit_hash, repo_path) if repo_label else "",
            branch=repo.branch,
            total_commits=info.total_commits,
            contributors=contributors,
        )
        return rendered.rstrip("\n") + "\n\n"

    @staticmethod
    def _toc_entries(source_file: SourceFile) -> List[Dict[str, str]]:
        entries: List[Dict[str, str]] = []
        for element in source_file.elements:
            text = element.identifier
            signature = _toc_signature(element.signature)
            if element.signature:
                text = f"{element.identifier} `{signature}`"
            entries.append({"text": text, "anchor": anchor_for(element.identifier)})
        return entries

    @staticmethod
    def _create_env(templates_dir: Path) -> Environment:
        directories = [str(templates_dir)]
        default_dir = str(Path(__file__).with_name("templates"))
        if default_dir not in directories:
            directories.append(default_dir)
        loader = FileSystemLoader(directories)
        return Environment(loader=loader, autoescape=False, trim_blocks=True, lstrip_blocks=True)


def _toc_signature(signature: str) -> str:
    first_line = signature.strip().split("\n", 1)[0]
    return first_line.removesuffix("{").strip()


def _truncate(message: str, limit: int) -> str:
    if len(message) > limit:
        return message[: limit - 3] + "..."
    return message


__all__ = ["MarkdownRenderer"]
