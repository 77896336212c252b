"""Configuration loading for kdoc (kdoc.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List

import yaml

from .parser.comments import DEFAULT_PREFIX

CONFIG_FILENAME = "kdoc.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


def _default_exclusions() -> List[str]:
    return ["*.md", "*.txt", "*.cmake", "cmake-build-*"]


def _default_languages() -> Dict[str, str]:
    return {".cpp": "cpp", ".c": "c", ".h": "cpp", ".hpp": "cpp"}


@dataclass
class KdocConfig:
    """Represents the settings stored in kdoc.yml."""

    doc_comment: str = DEFAULT_PREFIX
    ignore_indented: bool = False
    scan_root: str = "./"
    scan_exclusions: List[str] = field(default_factory=_default_exclusions)
    output_path: str = "./docs"
    extensions_to_langs: Dict[str, str] = field(default_factory=_default_languages)
    git_avatar_size: int = 40

    def to_dict(self) -> Dict[str, Any]:
        return {
            "doc_comment": self.doc_comment,
            "ignore_indented": self.ignore_indented,
            "scan_root": self.scan_root,
            "scan_exclusions": list(self.scan_exclusions),
            "output_path": self.output_path,
            "extensions_to_langs": dict(self.extensions_to_langs),
            "git_avatar_size": self.git_avatar_size,
        }


def resolve_config_path(path: Path) -> Path:
    """Return the config file path for either a directory or a file argument."""
    path = path.expanduser()
    if path.is_dir():
        return (path / CONFIG_FILENAME).resolve()
    return path.resolve()


def load_config(config_path: Path) -> KdocConfig:
    """Load configuration from disk, writing the defaults when no file exists yet."""
    config_file = resolve_config_path(config_path)
    if not config_file.exists():
        config = KdocConfig()
        save_config(config, config_file)
        return config

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{config_file.name} must contain a mapping at the root")

    config = KdocConfig()
    if "doc_comment" in data:
        config.doc_comment = _expect_str(data, "doc_comment")
        if not config.doc_comment:
            raise ConfigError("doc_comment must not be empty")
    if "ignore_indented" in data:
        config.ignore_indented = _expect_bool(data, "ignore_indented")
    if "scan_root" in data:
        config.scan_root = _expect_str(data, "scan_root")
    if "scan_exclusions" in data:
        config.scan_exclusions = _expect_str_list(data, "scan_exclusions")
    if "output_path" in data:
        config.output_path = _expect_str(data, "output_path")
    if "extensions_to_langs" in data:
        config.extensions_to_langs = _expect_str_mapping(data, "extensions_to_langs")
    if "git_avatar_size" in data:
        config.git_avatar_size = _expect_int(data, "git_avatar_size")
    return config


def save_config(config: KdocConfig, config_path: Path) -> Path:
    """Write ``config`` as YAML, creating parent directories as needed."""
    config_file = resolve_config_path(config_path)
    config_file.parent.mkdir(parents=True, exist_ok=True)
    config_file.write_text(
        yaml.safe_dump(config.to_dict(), sort_keys=False, default_flow_style=False),
        encoding="utf-8",
    )
    return config_file


def _read_config(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _expect_str(data: Dict[str, Any], key: str) -> str:
    value = data[key]
    if not isinstance(value, str):
        raise ConfigError(f"{key} must be a string")
    return value


def _expect_bool(data: Dict[str, Any], key: str) -> bool:
    value = data[key]
    if not isinstance(value, bool):
        raise ConfigError(f"{key} must be true or false")
    return value


def _expect_int(data: Dict[str, Any], key: str) -> int:
    value = data[key]
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{key} must be an integer")
    return value


def _expect_str_list(data: Dict[str, Any], key: str) -> List[str]:
    value = data[key]
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ConfigError(f"{key} must be a list of strings")
    return list(value)


def _expect_str_mapping(data: Dict[str, Any], key: str) -> Dict[str, str]:
    value = data[key]
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f"{key} must be a mapping")
    result: Dict[str, str] = {}
    for ext, lang in value.items():
        if not isinstance(ext, str) or not isinstance(lang, str):
            raise ConfigError(f"{key} entries must map strings to strings")
        result[ext] = lang
    return result


__all__ = ["CONFIG_FILENAME", "ConfigError", "KdocConfig", "load_config", "resolve_config_path", "save_config"]
