"""Create note files in a zettelkasten root"""

from pathlib import Path

import structlog

from ztr.config import get_settings
from ztr.template_system import ITemplateRenderer, TemplateError, render_note
from ztr.utils.error_handler import ErrorHandler

from .models import DefaultNote, NoteRequest
from .names import NameGenerator, generate_name
from .resolver import resolve_note

logger = structlog.get_logger(__name__)

NOTE_EXTENSION = ".md"


def create_note(
    root_dir: str | Path,
    name_generator: NameGenerator,
    request: NoteRequest,
    defaults: DefaultNote,
    *,
    strict: bool | None = None,
    renderer: ITemplateRenderer | None = None,
) -> Path:
    """Write a new note under ``root_dir`` and return its path.

    The file is named ``name_generator() + ".md"`` and is created (or
    truncated) before rendering. Filesystem errors propagate. A template that
    fails to render produces an empty note unless ``strict`` is set, in which
    case the ``TemplateError`` is raised after the empty file was created.
    ``strict=None`` falls back to the ``strict_templates`` setting.
    """
    if strict is None:
        strict = get_settings().strict_templates

    note_name = name_generator() + NOTE_EXTENSION
    note_path = Path(root_dir) / note_name

    with open(note_path, "w", encoding="utf-8", newline="") as f:
        resolved = resolve_note(note_name, request, defaults)

        try:
            content = render_note(resolved, renderer)
        except TemplateError as e:
            if strict:
                ErrorHandler.log_and_reraise(
                    "render note template", e, file_path=str(note_path)
                )
            content = ErrorHandler.log_and_return_default(
                "render note template", e, "", file_path=str(note_path)
            )

        f.write(content)

    logger.info(
        "Note created",
        file_path=str(note_path),
        title=resolved.title,
        tags=resolved.tags,
        size=len(content),
    )
    return note_path


def create(root_dir: str | Path) -> Path:
    """Create a note with a random name and the configured defaults"""
    return create_note(
        root_dir,
        generate_name,
        NoteRequest(),
        get_settings().default_note(),
    )
