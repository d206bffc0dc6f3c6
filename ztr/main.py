"""
Command line entry point for ztr
"""

import argparse
import sys
from collections.abc import Sequence
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from ztr import __version__
from ztr.config import get_settings
from ztr.notes import NoteRequest, generate_name
from ztr.notes.creator import create_note
from ztr.template_system import TemplateError
from ztr.utils import get_logger, setup_logging

console = Console()
error_console = Console(stderr=True)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ztr", description="Create zettelkasten notes from templates."
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    subparsers = parser.add_subparsers(dest="command")

    create_parser = subparsers.add_parser("create", help="Create a new Zettle")
    create_parser.add_argument(
        "--root",
        type=Path,
        default=None,
        help="Directory to write the note into (default: ZTR_ZK_ROOT or /tmp)",
    )
    create_parser.add_argument("--title", default=None, help="Note title.")
    create_parser.add_argument("--content", default=None, help="Note body.")
    create_parser.add_argument(
        "--tag",
        dest="tags",
        action="append",
        default=None,
        help="Tag to attach; repeat for several tags.",
    )
    create_parser.add_argument(
        "--no-tags",
        action="store_true",
        help="Create the note with an empty tag list instead of the default tags.",
    )
    template_group = create_parser.add_mutually_exclusive_group()
    template_group.add_argument(
        "--template", default=None, help="Template text to render."
    )
    template_group.add_argument(
        "--template-file",
        type=Path,
        default=None,
        help="Read the template from this file.",
    )
    create_parser.add_argument(
        "--strict",
        action="store_true",
        default=None,
        help="Fail on template errors instead of writing an empty note.",
    )
    return parser


def run_create(args: argparse.Namespace) -> int:
    """Handle ``ztr create``"""
    logger = get_logger("main")
    settings = get_settings()

    root_dir = args.root if args.root is not None else settings.zk_root

    tags = args.tags
    if args.no_tags:
        tags = []

    try:
        template = args.template
        if args.template_file is not None:
            template = args.template_file.read_text(encoding="utf-8")

        request = NoteRequest(
            template=template, title=args.title, content=args.content, tags=tags
        )
        note_path = create_note(
            root_dir,
            generate_name,
            request,
            settings.default_note(),
            strict=args.strict,
        )
    except (OSError, UnicodeDecodeError) as exc:
        logger.error("Failed to create note", root=str(root_dir), error=str(exc))
        error_console.print(
            f"[red]Failed to create note:[/red] {escape(str(exc))}", markup=True
        )
        return 1
    except TemplateError as exc:
        error_console.print(
            f"[red]Template error:[/red] {escape(str(exc))}", markup=True
        )
        return 1

    console.print(str(note_path), markup=False, highlight=False, soft_wrap=True)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Main application entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging()

    if args.command == "create":
        return run_create(args)

    console.print("No subcommand was used", highlight=False)
    return 0


if __name__ == "__main__":
    sys.exit(main())
