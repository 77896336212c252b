"""Helper utilities for constructing temporary source trees in tests."""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Mapping

from kdoc.config import KdocConfig, save_config


class SourceTreeBuilder:
    """Utility for writing source files and a kdoc.yml into a throwaway project."""

    def __init__(self, tmp_path: Path) -> None:
        self.root = tmp_path / "project"
        self.root.mkdir()

    def write(self, files: Mapping[str, str]) -> None:
        """Write `path -> contents` entries into the project."""
        for relative, content in files.items():
            path = self.root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            normalised = textwrap.dedent(content).lstrip("\n")
            path.write_text(normalised, encoding="utf-8")

    def configure(self, config: KdocConfig | None = None) -> KdocConfig:
        """Persist ``config`` (or the defaults) as the project's kdoc.yml."""
        config = config or KdocConfig()
        save_config(config, self.root / "kdoc.yml")
        return config

    def path(self) -> Path:
        """Return the project root path."""
        return self.root


__all__ = ["SourceTreeBuilder"]
