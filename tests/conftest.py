"""Pytest configuration and shared fixtures."""

import pytest
from pathlib import Path

from epub.document import Document


# PNGシグネチャ付きのダミーデータ（画像としての内容は検証しない）
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


@pytest.fixture
def cover_image(tmp_path) -> Path:
    """Existing cover image file."""
    path = tmp_path / "assets" / "cover.png"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(PNG_BYTES)
    return path


@pytest.fixture
def metadata(cover_image) -> dict:
    """Minimal valid metadata."""
    return {
        "title": "The Hunting of the Snark",
        "author": "Lewis Carroll",
        "cover": str(cover_image),
    }


@pytest.fixture
def document(metadata) -> Document:
    """Document with valid metadata and no sections."""
    return Document(metadata)
