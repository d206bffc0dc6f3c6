"""Test the command line entry point"""

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest
import structlog

from ztr import __version__
from ztr.main import build_parser, main


@pytest.fixture(autouse=True)
def _reset_logging_state() -> Iterator[None]:
    yield
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()
    structlog.reset_defaults()


def created_notes(root: Path) -> list[Path]:
    return sorted(root.glob("*.md"))


class TestParser:
    """Test argument parsing"""

    def test_create_options(self) -> None:
        args = build_parser().parse_args(
            ["create", "--title", "t", "--tag", "a", "--tag", "b", "--strict"]
        )

        assert args.command == "create"
        assert args.title == "t"
        assert args.tags == ["a", "b"]
        assert args.strict is True
        assert args.content is None
        assert args.template is None

    def test_strict_defaults_to_settings(self) -> None:
        args = build_parser().parse_args(["create"])
        assert args.strict is None

    def test_template_options_are_exclusive(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args(
                ["create", "--template", "x", "--template-file", "t.md"]
            )


class TestMain:
    """Test running ztr"""

    def test_no_subcommand(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert main([]) == 0
        assert "No subcommand was used" in capsys.readouterr().out

    def test_version(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])

        assert exc_info.value.code == 0
        assert __version__ in capsys.readouterr().out

    def test_create_prints_path(
        self, zk_root: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        assert main(["create", "--root", str(zk_root)]) == 0

        notes = created_notes(zk_root)
        assert len(notes) == 1
        assert str(notes[0]) in capsys.readouterr().out
        assert notes[0].read_text(encoding="utf-8") == (
            "# New zettle\n\nNew note content\n\n#[[fleeting]] "
        )

    def test_create_with_fields(self, zk_root: Path) -> None:
        exit_code = main(
            [
                "create",
                "--root",
                str(zk_root),
                "--title",
                "Title",
                "--content",
                "Body",
                "--tag",
                "one",
                "--tag",
                "two",
            ]
        )

        assert exit_code == 0
        (note,) = created_notes(zk_root)
        assert note.read_text(encoding="utf-8") == (
            "# Title\n\nBody\n\n#[[one]] #[[two]] "
        )

    def test_create_with_no_tags(self, zk_root: Path) -> None:
        assert main(["create", "--root", str(zk_root), "--no-tags"]) == 0

        (note,) = created_notes(zk_root)
        assert note.read_text(encoding="utf-8") == (
            "# New zettle\n\nNew note content\n\n"
        )

    def test_create_with_template_file(self, zk_root: Path, tmp_path: Path) -> None:
        template_file = tmp_path / "note-template.md"
        template_file.write_text("title: {{title}}\n", encoding="utf-8")

        exit_code = main(
            [
                "create",
                "--root",
                str(zk_root),
                "--template-file",
                str(template_file),
                "--title",
                "From file",
            ]
        )

        assert exit_code == 0
        (note,) = created_notes(zk_root)
        assert note.read_text(encoding="utf-8") == "title: From file\n"

    def test_create_uses_configured_root(
        self, zk_root: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("ZTR_ZK_ROOT", str(zk_root))

        assert main(["create"]) == 0
        assert len(created_notes(zk_root)) == 1

    def test_missing_root_fails(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        missing = tmp_path / "missing"

        assert main(["create", "--root", str(missing)]) == 1
        assert "Failed to create note" in capsys.readouterr().err
        assert not missing.exists()

    def test_missing_template_file_fails(
        self, zk_root: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        exit_code = main(
            [
                "create",
                "--root",
                str(zk_root),
                "--template-file",
                str(tmp_path / "nope.md"),
            ]
        )

        assert exit_code == 1
        assert "Failed to create note" in capsys.readouterr().err
        assert created_notes(zk_root) == []

    def test_template_file_not_utf8_fails(
        self, zk_root: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        template_file = tmp_path / "latin1.md"
        template_file.write_bytes(b"\xff\xfe title: {{title}}\n")

        exit_code = main(
            [
                "create",
                "--root",
                str(zk_root),
                "--template-file",
                str(template_file),
            ]
        )

        assert exit_code == 1
        assert "Failed to create note" in capsys.readouterr().err
        assert created_notes(zk_root) == []

    def test_template_error_still_succeeds(self, zk_root: Path) -> None:
        exit_code = main(
            ["create", "--root", str(zk_root), "--template", "{{#if tags}}oops"]
        )

        assert exit_code == 0
        (note,) = created_notes(zk_root)
        assert note.read_text(encoding="utf-8") == ""

    def test_template_error_with_strict_fails(
        self, zk_root: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        exit_code = main(
            [
                "create",
                "--root",
                str(zk_root),
                "--template",
                "{{#if tags}}oops",
                "--strict",
            ]
        )

        assert exit_code == 1
        assert "Template error" in capsys.readouterr().err
        (note,) = created_notes(zk_root)
        assert note.read_text(encoding="utf-8") == ""
