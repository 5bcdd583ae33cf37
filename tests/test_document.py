"""Tests for the in-memory document model."""

import pytest

from epub.document import Document, Section


class TestAddSection:
    """Tests for Document.add_section and section naming."""

    @pytest.mark.parametrize("count", [1, 3, 12])
    def test_auto_filenames_follow_insertion_order(self, document, count):
        for i in range(count):
            document.add_section(f"Chapter {i + 1}", f"<p>{i}</p>")
        filenames = [s.filename for s in document.sections]
        assert filenames == [f"s{i}.xhtml" for i in range(1, count + 1)]
        assert len(set(filenames)) == count
        assert document.get_section_count() == count

    def test_override_filename_gets_extension(self, document):
        section = document.add_section("Preface", "<p>Hi</p>", override_filename="preface")
        assert section.filename == "preface.xhtml"

    @pytest.mark.parametrize("override", [None, "", "   "])
    def test_blank_override_uses_auto_name(self, document, override):
        document.add_section("One", "<p>1</p>")
        section = document.add_section("Two", "<p>2</p>", override_filename=override)
        assert section.filename == "s2.xhtml"

    def test_auto_name_counts_overridden_sections(self, document):
        document.add_section("Title page", "", override_filename="title")
        section = document.add_section("Chapter", "")
        assert section.filename == "s2.xhtml"

    def test_flags_default_to_false(self, document):
        section = document.add_section("Chapter", "<p/>")
        assert section == Section("Chapter", "<p/>", False, False, "s1.xhtml")

    def test_flags_are_kept(self, document):
        section = document.add_section("Copyright", "<p/>", True, True)
        assert section.exclude_from_contents is True
        assert section.is_front_matter is True

    def test_sections_are_immutable(self, document):
        section = document.add_section("Chapter", "<p/>")
        with pytest.raises(AttributeError):
            section.title = "Other"


class TestDocumentState:
    """Tests for stylesheet, fonts and flags."""

    def test_initial_state(self, document, metadata):
        assert document.css == ""
        assert document.sections == []
        assert document.images == []
        assert document.fonts == []
        assert document.show_contents is True
        assert document.get_section_count() == 0

    def test_add_css_replaces(self, document):
        document.add_css("p { margin: 0; }")
        document.add_css("h1 { color: red; }")
        assert document.css == "h1 { color: red; }"

    def test_add_font_appends_without_checking(self, document, tmp_path):
        document.add_font(tmp_path / "missing.ttf")
        document.add_font("fonts/other.otf")
        assert document.fonts == [str(tmp_path / "missing.ttf"), "fonts/other.otf"]

    def test_css_and_fonts_do_not_change_section_count(self, document):
        document.add_section("One", "")
        document.add_css("body {}")
        document.add_font("a.ttf")
        assert document.get_section_count() == 1

    def test_show_contents_override(self, metadata):
        metadata["show_contents"] = False
        assert Document(metadata).show_contents is False

    def test_assets_copied_from_metadata(self, metadata):
        metadata["images"] = ["a.png"]
        metadata["fonts"] = ["b.ttf"]
        document = Document(metadata)
        document.add_font("c.ttf")
        assert document.images == ["a.png"]
        assert document.fonts == ["b.ttf", "c.ttf"]
        assert document.metadata.fonts == ["b.ttf"]

    def test_documents_do_not_share_state(self, metadata):
        first = Document(metadata)
        second = Document(metadata)
        first.add_section("Only in first", "")
        assert second.get_section_count() == 0
