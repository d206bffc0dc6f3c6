"""
共通フィクスチャ。

- `ZTR_*` 環境変数を毎テストで隔離（autouse）
- 設定キャッシュを毎テストでリセット
- ルートを `sys.path` に追加して `import ztr.*` を解決
"""

from __future__ import annotations

import os
import sys
from collections.abc import Iterator
from pathlib import Path

import pytest

# プロジェクトルート（このファイルの親の親）をパスに追加
_PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))

from ztr.config import clear_settings_cache  # noqa: E402
from ztr.notes import DefaultNote  # noqa: E402


@pytest.fixture(autouse=True)
def _test_env(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> Iterator[None]:
    """Drop any ``ZTR_*`` variables from the real environment.

    Tests run from an empty working directory so a developer's ``.env`` is not
    picked up either.
    """
    for key in list(os.environ):
        if key.upper().startswith("ZTR_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)

    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def zk_root(tmp_path: Path) -> Path:
    """Existing, empty zettelkasten root."""
    root = tmp_path / "zk"
    root.mkdir()
    return root


@pytest.fixture
def note_defaults() -> DefaultNote:
    """Defaults with a frontmatter template and empty fields."""
    return DefaultNote(
        template=(
            "{{#if tags}}---\ntags:\n{{#each tags}}  - {{this}}\n{{/each}}\n---\n\n"
            "{{/if}}# {{title}}\n\n{{content}}"
        ),
        title="",
        content="",
        tags=[],
    )
