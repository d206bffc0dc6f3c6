"""
Note data models
"""

from typing import Any

from pydantic import BaseModel, ConfigDict


class NoteRequest(BaseModel):
    """Caller-supplied note fields; ``None`` means "use the default"."""

    model_config = ConfigDict(frozen=True)

    template: str | None = None
    title: str | None = None
    content: str | None = None
    tags: list[str] | None = None


class DefaultNote(BaseModel):
    """Fallback values for every overridable note field."""

    model_config = ConfigDict(frozen=True)

    template: str
    title: str
    content: str
    tags: list[str]


class ResolvedNote(BaseModel):
    """Fully specified note, ready to be rendered."""

    model_config = ConfigDict(frozen=True)

    template: str
    filename: str
    title: str
    content: str
    tags: list[str]

    def to_context(self) -> dict[str, Any]:
        """Bindings available to the note template"""
        return self.model_dump()
