"""Configuration settings for ztr with caching utilities."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from threading import RLock
from typing import TYPE_CHECKING, Any

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

if TYPE_CHECKING:
    from ztr.notes.models import DefaultNote

DEFAULT_TEMPLATE = (
    "# {{title}}\n\n{{content}}\n\n"
    "{{#if tags}}{{#each tags}}#[[{{this}}]] {{/each}}{{/if}}"
)
DEFAULT_TITLE = "New zettle"
DEFAULT_CONTENT = "New note content"
DEFAULT_TAGS = ["fleeting"]


class Settings(BaseSettings):
    """ztr settings, read from ``ZTR_*`` environment variables or ``.env``"""

    model_config = SettingsConfigDict(
        env_prefix="ZTR_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Zettelkasten root (must already exist)
    zk_root: Path = Path("/tmp")

    # Logging
    log_level: str = "ERROR"
    log_format: str = "console"
    log_file: Path | None = None

    # Raise template errors instead of writing an empty note
    strict_templates: bool = False

    # Note defaults
    default_template: str = DEFAULT_TEMPLATE
    default_title: str = DEFAULT_TITLE
    default_content: str = DEFAULT_CONTENT
    default_tags: list[str] = Field(default_factory=lambda: list(DEFAULT_TAGS))

    def default_note(self) -> DefaultNote:
        """Build the fallback note values from the configured defaults"""
        from ztr.notes.models import DefaultNote

        return DefaultNote(
            template=self.default_template,
            title=self.default_title,
            content=self.default_content,
            tags=self.default_tags,
        )


_SETTINGS_LOCK = RLock()
_SETTINGS_CACHE: Settings | None = None


def get_settings(*, refresh: bool = False) -> Settings:
    """Return a cached ``Settings`` instance.

    Parameters
    ----------
    refresh:
        When ``True`` the cached instance is discarded and a new one is created.
    """

    global _SETTINGS_CACHE

    with _SETTINGS_LOCK:
        if refresh or _SETTINGS_CACHE is None:
            _SETTINGS_CACHE = Settings()
        return _SETTINGS_CACHE


def clear_settings_cache() -> None:
    """Clear the cached settings instance."""

    global _SETTINGS_CACHE

    with _SETTINGS_LOCK:
        _SETTINGS_CACHE = None


@contextmanager
def override_settings(**overrides: Any) -> Iterator[Settings]:
    """Temporarily override the cached settings within a context."""

    global _SETTINGS_CACHE

    with _SETTINGS_LOCK:
        previous_settings = _SETTINGS_CACHE

    base_settings = previous_settings or Settings()
    patched_settings = base_settings.model_copy(update=overrides)

    with _SETTINGS_LOCK:
        _SETTINGS_CACHE = patched_settings

    try:
        yield patched_settings
    finally:
        with _SETTINGS_LOCK:
            _SETTINGS_CACHE = previous_settings
