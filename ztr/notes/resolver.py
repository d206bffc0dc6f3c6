"""Merge a note request with the default note"""

from typing import TypeVar

from .models import DefaultNote, NoteRequest, ResolvedNote

T = TypeVar("T")


def _coalesce(value: T | None, default: T) -> T:
    return default if value is None else value


def resolve_note(
    filename: str, request: NoteRequest, defaults: DefaultNote
) -> ResolvedNote:
    """Fill every unset field of ``request`` from ``defaults``.

    Fields are chosen independently. A request ``tags`` list, even an empty
    one, replaces the default list entirely. ``filename`` is always taken from
    the caller.
    """
    return ResolvedNote(
        template=_coalesce(request.template, defaults.template),
        filename=filename,
        title=_coalesce(request.title, defaults.title),
        content=_coalesce(request.content, defaults.content),
        tags=list(_coalesce(request.tags, defaults.tags)),
    )
