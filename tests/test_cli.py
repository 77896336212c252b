"""CLI behaviour tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from kdoc import cli
from kdoc.cli import _build_parser


def test_cli_accepts_verbose_before_and_after_command() -> None:
    parser = _build_parser()
    assert parser.parse_args(["--verbose", "generate"]).verbose is True
    assert parser.parse_args(["generate", "--verbose"]).verbose is True


def test_cli_accepts_gen_alias_and_global_flags() -> None:
    parser = _build_parser()
    args = parser.parse_args(["-o", "out", "-r", "proj", "-s", "-g", "gen"])
    assert args.command == "gen"
    assert args.output == "out"
    assert args.root == "proj"
    assert args.recurse_scan is True
    assert args.no_git is True


def test_init_creates_config(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    cli.main(["--root", str(tmp_path), "init"])

    assert (tmp_path / "kdoc.yml").exists()
    assert "kdoc initialized successfully" in capsys.readouterr().out


def test_generate_writes_docs(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    (tmp_path / "main.c").write_text("/// Entry.\nint x;\n/// Runs.\nint main(void) {\n", encoding="utf-8")

    cli.main(["--root", str(tmp_path), "--no-git", "generate"])

    assert (tmp_path / "docs" / "main.md").exists()
    assert "Wrote 1 doc(s)" in capsys.readouterr().out


def test_generate_without_sources_exits_with_error(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--root", str(tmp_path), "--no-git", "gen"])

    assert excinfo.value.code == 1
    assert "No files matched" in capsys.readouterr().err


def test_invalid_config_exits_with_error(tmp_path: Path) -> None:
    (tmp_path / "kdoc.yml").write_text("- nope\n", encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--root", str(tmp_path), "init"])

    assert excinfo.value.code == 1


def test_cli_rejects_verbose_with_quiet() -> None:
    with pytest.raises(SystemExit):
        _build_parser().parse_args(["-v", "-q", "generate"])


def test_generate_writes_log_file(tmp_path: Path) -> None:
    (tmp_path / "lib.c").write_text("/// Lib.\nint x;\n", encoding="utf-8")
    log_file = tmp_path / "logs" / "kdoc.log"

    cli.main(["--root", str(tmp_path), "--no-git", "--quiet", "--log-file", str(log_file), "gen"])

    assert "Parsed 1/1 files" in log_file.read_text(encoding="utf-8")
