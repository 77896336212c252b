"""Pipeline orchestration for documentation generation runs."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from .config import CONFIG_FILENAME, KdocConfig
from .git.info import GitCommandError, GitInspector, RepoInfo
from .logging import get_logger
from .models import ElementIndex, SourceFile
from .parser import build_index, parse_file, resolve_file_backlinks
from .render.markdown import MarkdownRenderer
from .scanner import collect_files, language_for, output_filename


class NoInputFilesError(RuntimeError):
    """Raised when a run has no file left to document."""


@dataclass
class GenerationResult:
    """Outcome of a generation run."""

    scan_root: Path
    output_dir: Path
    files: List[SourceFile]
    index: ElementIndex
    written: List[Path] = field(default_factory=list)
    skipped: List[Path] = field(default_factory=list)


@dataclass(frozen=True)
class _ParsedFile:
    source: Path
    record: SourceFile
    output: Path


class Generator:
    """Runs the parse, index, resolve and write passes over a source tree."""

    def __init__(
        self,
        inspector: GitInspector | None = None,
        renderer: MarkdownRenderer | None = None,
        *,
        max_workers: Optional[int] = None,
    ) -> None:
        self.inspector = inspector or GitInspector()
        self.renderer = renderer
        self.max_workers = max_workers
        self.logger = get_logger("orchestrator")

    def generate(
        self,
        project_root: Path,
        config: KdocConfig,
        *,
        output_dir: Path | None = None,
        use_git: bool = True,
        recurse_scan: bool = False,
    ) -> GenerationResult:
        """Generate markdown docs for every matching file under the configured scan root."""
        project_root = project_root.expanduser().resolve()
        scan_root = self._resolve(project_root, config.scan_root or ".")
        out_dir = output_dir.expanduser().resolve() if output_dir else self._resolve(project_root, config.output_path)
        self.logger.info("Scanning %s", scan_root)

        repo = self._repo_snapshot(scan_root, use_git)

        excludes = list(config.scan_exclusions)
        excludes.append(str(project_root / CONFIG_FILENAME))
        if not recurse_scan:
            excludes.append(str(out_dir))

        matched = collect_files(scan_root, excludes, config.extensions_to_langs)
        if not matched:
            raise NoInputFilesError(
                f"No files matched extensions in {scan_root}. "
                f"Configured extensions: {', '.join(sorted(config.extensions_to_langs))}"
            )
        self.logger.debug("Scanner matched %d files", len(matched))

        parsed, skipped = self._parse_all(matched, scan_root, out_dir, config, repo)
        if not parsed:
            raise NoInputFilesError(f"None of the {len(matched)} matched files could be read")
        self.logger.info("Parsed %d/%d files", len(parsed), len(matched))

        # every file must be parsed before the index exists
        index = build_index((item.record, item.output.name) for item in parsed)
        self.logger.debug("Indexed %d identifiers", len(index))

        self._resolve_all(parsed, index, config.doc_comment)

        renderer = self.renderer or MarkdownRenderer(avatar_size=config.git_avatar_size)
        written = self._write_all(parsed, renderer, repo, scan_root)
        self.logger.info("Wrote %d/%d docs to %s", len(written), len(parsed), out_dir)

        return GenerationResult(
            scan_root=scan_root,
            output_dir=out_dir,
            files=[item.record for item in parsed],
            index=index,
            written=written,
            skipped=skipped,
        )

    # ------------------------------------------------------------------
    # Passes

    def _parse_all(
        self,
        matched: Sequence[Path],
        scan_root: Path,
        out_dir: Path,
        config: KdocConfig,
        repo: RepoInfo,
    ) -> Tuple[List[_ParsedFile], List[Path]]:
        parsed: List[_ParsedFile] = []
        skipped: List[Path] = []
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = [
                (path, executor.submit(self._parse_one, path, scan_root, out_dir, config, repo))
                for path in matched
            ]
            for position, (path, future) in enumerate(futures, start=1):
                try:
                    parsed.append(future.result())
                except (OSError, ValueError) as exc:
                    self._log_exception(f"Error parsing {path}", exc)
                    skipped.append(path)
                    continue
                self.logger.debug("[%d/%d] Processed %s", position, len(futures), self._display(path, scan_root))
        return parsed, skipped

    def _parse_one(
        self,
        path: Path,
        scan_root: Path,
        out_dir: Path,
        config: KdocConfig,
        repo: RepoInfo,
    ) -> _ParsedFile:
        language = language_for(path, config.extensions_to_langs) or ""
        record = parse_file(
            path,
            language=language,
            prefix=config.doc_comment,
            ignore_indented=config.ignore_indented,
        )
        if repo.is_repo and repo.git_root:
            try:
                record.git_info = self.inspector.file_info(repo.git_root, self._repo_relative(path, repo, scan_root))
            except GitCommandError as exc:
                self.logger.warning("Could not get git info for %s: %s", path, exc)
        return _ParsedFile(source=path, record=record, output=output_filename(scan_root, path, out_dir))

    def _resolve_all(self, parsed: Sequence[_ParsedFile], index: ElementIndex, prefix: str) -> None:
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            list(executor.map(lambda item: resolve_file_backlinks(item.record, index, prefix), parsed))

    def _write_all(
        self,
        parsed: Sequence[_ParsedFile],
        renderer: MarkdownRenderer,
        repo: RepoInfo,
        scan_root: Path,
    ) -> List[Path]:
        written: List[Path] = []
        for position, item in enumerate(parsed, start=1):
            try:
                item.output.parent.mkdir(parents=True, exist_ok=True)
                markdown = renderer.render(
                    item.record,
                    repo=repo,
                    repo_path=self._repo_relative(item.source, repo, scan_root),
                )
                item.output.write_text(markdown, encoding="utf-8")
            except OSError as exc:
                self._log_exception(f"Error writing {item.output}", exc)
                continue
            self.logger.debug("[%d/%d] Wrote %s", position, len(parsed), item.output)
            written.append(item.output)
        return written

    # ------------------------------------------------------------------
    # Helpers

    def _repo_snapshot(self, scan_root: Path, use_git: bool) -> RepoInfo:
        if not use_git:
            return RepoInfo()
        repo = self.inspector.repo_info(scan_root)
        if repo.is_repo:
            self.logger.info("Git repository detected: %s/%s", repo.owner, repo.name)
        else:
            self.logger.info("Not a git repository, skipping git metadata")
        return repo

    @staticmethod
    def _resolve(base: Path, value: str) -> Path:
        path = Path(value).expanduser()
        if not path.is_absolute():
            path = base / path
        return path.resolve()

    def _repo_relative(self, path: Path, repo: RepoInfo, scan_root: Path) -> str:
        if repo.is_repo and repo.git_root:
            try:
                return path.relative_to(Path(repo.git_root).resolve()).as_posix()
            except ValueError:
                self.logger.warning("%s is outside the git root %s", path, repo.git_root)
        return self._display(path, scan_root)

    @staticmethod
    def _display(path: Path, scan_root: Path) -> str:
        try:
            return path.relative_to(scan_root).as_posix()
        except ValueError:
            return path.as_posix()

    def _log_exception(self, message: str, exc: Exception) -> None:
        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.exception("%s: %s", message, exc)
        else:
            self.logger.error("%s: %s", message, exc)


__all__ = ["GenerationResult", "Generator", "NoInputFilesError"]
