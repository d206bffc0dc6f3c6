"""Note models, default resolution and naming"""

from .models import DefaultNote, NoteRequest, ResolvedNote
from .names import NameGenerator, generate_name
from .resolver import resolve_note

__all__ = [
    "DefaultNote",
    "NoteRequest",
    "ResolvedNote",
    "NameGenerator",
    "generate_name",
    "resolve_note",
]
