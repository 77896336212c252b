"""Source tree traversal and exclusion matching."""

from __future__ import annotations

import os
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterator, List, Mapping, Sequence

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
}


@dataclass(frozen=True)
class ExcludeRule:
    """A glob exclusion matched against a scan-root relative POSIX path."""

    pattern: str

    def matches(self, rel_path: str) -> bool:
        if not self.pattern:
            return False
        if fnmatchcase(rel_path, self.pattern):
            return True
        if "/" in self.pattern:
            return rel_path.startswith(f"{self.pattern.rstrip('/')}/")
        return any(fnmatchcase(part, self.pattern) for part in rel_path.split("/"))


def build_exclude_rules(scan_root: Path, patterns: Sequence[str]) -> List[ExcludeRule]:
    """Normalise exclusion patterns, making absolute or ``./`` paths scan-root relative."""
    rules: List[ExcludeRule] = []
    root = scan_root.resolve()
    for raw in patterns:
        pattern = raw.strip().replace("\\", "/")
        if not pattern:
            continue
        candidate = Path(pattern)
        if candidate.is_absolute():
            try:
                pattern = candidate.resolve().relative_to(root).as_posix()
            except ValueError:
                continue
        while pattern.startswith("./"):
            pattern = pattern[2:]
        pattern = pattern.rstrip("/")
        if pattern and pattern != ".":
            rules.append(ExcludeRule(pattern))
    return rules


def _is_excluded(rel_path: str, rules: Sequence[ExcludeRule]) -> bool:
    return any(rule.matches(rel_path) for rule in rules)


def _iter_files(root: Path, rules: Sequence[ExcludeRule]) -> Iterator[Path]:
    for dirpath, dirnames, filenames in os.walk(root):
        current_dir = Path(dirpath)
        rel_dir = current_dir.relative_to(root).as_posix() if current_dir != root else ""

        kept_dirs = []
        for name in sorted(dirnames):
            if name in _EXCLUDED_DIRS:
                continue
            rel_path = f"{rel_dir}/{name}" if rel_dir else name
            if _is_excluded(rel_path, rules):
                continue
            kept_dirs.append(name)
        dirnames[:] = kept_dirs

        for filename in sorted(filenames):
            rel_path = f"{rel_dir}/{filename}" if rel_dir else filename
            if _is_excluded(rel_path, rules):
                continue
            yield current_dir / filename


def collect_files(
    scan_root: Path,
    excludes: Sequence[str],
    extensions_to_langs: Mapping[str, str],
) -> List[Path]:
    """Return files under ``scan_root`` with a configured extension, minus exclusions."""
    root = scan_root.expanduser().resolve()
    if not root.exists():
        raise FileNotFoundError(f"Scan root not found: {scan_root}")
    if not root.is_dir():
        raise NotADirectoryError(f"Scan root is not a directory: {scan_root}")

    rules = build_exclude_rules(root, excludes)
    return [path for path in _iter_files(root, rules) if path.suffix in extensions_to_langs]


def language_for(path: Path, extensions_to_langs: Mapping[str, str]) -> str | None:
    return extensions_to_langs.get(path.suffix)


def output_filename(scan_root: Path, file_path: Path, output_dir: Path) -> Path:
    """Mirror ``file_path`` under ``output_dir`` with a ``.md`` suffix.

    ``file_path`` must be the path as walked under ``scan_root``; symlinks are
    not resolved, so a link to a file outside the tree still maps inside it.
    """
    relative = file_path.relative_to(scan_root)
    return output_dir / relative.with_suffix(".md")


__all__ = ["ExcludeRule", "build_exclude_rules", "collect_files", "language_for", "output_filename"]
