"""Tests for the folder-based command line entry point."""

import asyncio
import zipfile
from pathlib import Path

import pytest

import main
from core.exceptions import EpubGenerationError, SourceReadError


@pytest.fixture
def source_folder(tmp_path) -> Path:
    """Folder of section fragments with its metadata file alongside."""
    folder = tmp_path / "snark"
    folder.mkdir()
    (folder / "fit10.xhtml").write_text("<h1>Fit the Tenth</h1><p>...</p>", encoding="utf-8")
    (folder / "fit2.xhtml").write_text("<h1>Fit the <em>Second</em></h1>", encoding="utf-8")
    (folder / "fit1.html").write_text("<p>No heading</p>", encoding="utf-8")
    (folder / "notes.txt").write_text("ignored", encoding="utf-8")
    (folder / "style.css").write_text("p { text-indent: 1em; }", encoding="utf-8")
    (tmp_path / "cover.png").write_bytes(b"\x89PNG\r\n\x1a\n")
    (tmp_path / "snark_metadata.txt").write_text(
        "title: The Hunting of the Snark\n"
        "author: Lewis Carroll\n"
        "cover: cover.png\n",
        encoding="utf-8",
    )
    return folder


def test_natural_sort_key():
    paths = [Path("s10.xhtml"), Path("s2.xhtml"), Path("S1.xhtml")]
    assert [p.name for p in sorted(paths, key=main.natural_sort_key)] == [
        "S1.xhtml", "s2.xhtml", "s10.xhtml"
    ]


@pytest.mark.parametrize("content, expected", [
    ("<h1 class='t'>Fit the <em>First</em></h1>", "Fit the First"),
    ("<H1>Tom &amp; Jerry</H1>", "Tom & Jerry"),
    ("<p>none</p>", "fallback"),
    ("<h1>  </h1>", "fallback"),
])
def test_get_section_title(content, expected):
    assert main.get_section_title(content, "fallback") == expected


def test_build_document(source_folder):
    document = main.build_document(source_folder)
    assert [s.title for s in document.sections] == ["fit1", "Fit the Second", "Fit the Tenth"]
    assert document.css == "p { text-indent: 1em; }"


def test_build_document_without_sections(tmp_path):
    empty = tmp_path / "empty"
    empty.mkdir()
    with pytest.raises(EpubGenerationError):
        main.build_document(empty)


def test_build_document_with_undecodable_section(source_folder):
    bad = source_folder / "fit3.xhtml"
    bad.write_bytes(b"\xff\xfe<h1>?</h1>")
    with pytest.raises(SourceReadError) as exc_info:
        main.build_document(source_folder)
    assert exc_info.value.path == str(bad)


def test_process_folder_writes_epub_and_tree(source_folder):
    output = asyncio.run(main.process_folder(source_folder, write_tree=True))
    assert output == source_folder.parent / "snark.epub"
    with zipfile.ZipFile(output) as z:
        assert z.namelist()[0] == "mimetype"
        assert "OEBPF/content/s3.xhtml" in z.namelist()
    assert (source_folder.parent / main.TREE_FOLDER_NAME / "mimetype").exists()


def test_main_with_arguments(source_folder):
    assert main.main([str(source_folder)]) == 0
    assert (source_folder.parent / "snark.epub").exists()


def test_main_reports_missing_folder(tmp_path):
    assert main.main([str(tmp_path / "absent")]) == 1


def test_main_reports_unreadable_stylesheet(source_folder):
    (source_folder / "style.css").write_bytes(b"\xff\xfe\xfd")
    assert main.main([str(source_folder)]) == 1
    assert not (source_folder.parent / "snark.epub").exists()
