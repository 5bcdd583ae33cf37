"""Tests for metadata validation and the metadata file reader."""

import pytest

from core.exceptions import MissingMetadataError
from core.metadata_reader import (
    BookMetadata,
    MetadataFileNotFoundError,
    get_metadata_path_for_folder,
    load_metadata_file,
    load_metadata_for_folder,
    validate_metadata,
)
from epub.document import Document


class TestValidateMetadata:
    """Tests for validate_metadata."""

    def test_valid_mapping(self, metadata):
        result = validate_metadata(metadata)
        assert isinstance(result, BookMetadata)
        assert result.title == "The Hunting of the Snark"
        assert result.author == "Lewis Carroll"
        assert result.cover == metadata["cover"]

    def test_valid_dataclass_is_copied(self, cover_image):
        original = BookMetadata(title="T", author="A", cover=str(cover_image), images=["x.png"])
        result = validate_metadata(original)
        assert result is not original
        result.images.append("y.png")
        assert original.images == ["x.png"]

    def test_missing_object(self):
        with pytest.raises(MissingMetadataError) as exc_info:
            validate_metadata(None)
        assert exc_info.value.field is None

    @pytest.mark.parametrize("value", [42, "title: Snark", ["title", "author", "cover"]])
    def test_unsupported_type(self, value):
        with pytest.raises(MissingMetadataError) as exc_info:
            validate_metadata(value)
        assert exc_info.value.field is None

    @pytest.mark.parametrize("field", ["title", "author", "cover"])
    @pytest.mark.parametrize("value", [None, "", "   ", "\t\n"])
    def test_blank_required_field(self, metadata, field, value):
        metadata[field] = value
        with pytest.raises(MissingMetadataError) as exc_info:
            validate_metadata(metadata)
        assert exc_info.value.field == field
        assert field in str(exc_info.value)

    @pytest.mark.parametrize("field", ["title", "author", "cover"])
    def test_absent_required_field(self, metadata, field):
        del metadata[field]
        with pytest.raises(MissingMetadataError) as exc_info:
            validate_metadata(metadata)
        assert exc_info.value.field == field

    def test_non_string_values_are_coerced(self, metadata):
        metadata["title"] = 1984
        assert validate_metadata(metadata).title == "1984"

    def test_defaults(self, metadata):
        result = validate_metadata(metadata)
        assert result.language == "en"
        assert result.file_as == "Lewis Carroll"
        assert result.contents == "Contents"
        assert result.show_contents is None
        assert result.id.startswith("urn:uuid:")
        assert result.images == []
        assert result.fonts == []

    def test_contents_title_follows_language(self, metadata):
        metadata["language"] = "ja"
        assert validate_metadata(metadata).contents == "目次"

    def test_explicit_contents_title_kept(self, metadata):
        metadata["contents"] = "Chapters"
        assert validate_metadata(metadata).contents == "Chapters"

    def test_unknown_keys_are_ignored(self, metadata):
        metadata["colour"] = "blue"
        result = validate_metadata(metadata)
        assert not hasattr(result, "colour")


class TestDocumentConstruction:
    """Document construction runs the validator exactly once."""

    def test_cover_image_taken_from_metadata(self, metadata):
        document = Document(metadata)
        assert document.cover_image == metadata["cover"]

    def test_missing_field_fails(self, metadata):
        metadata["author"] = "  "
        with pytest.raises(MissingMetadataError):
            Document(metadata)

    def test_none_fails(self):
        with pytest.raises(MissingMetadataError):
            Document(None)


class TestMetadataFile:
    """Tests for the key: value metadata file reader."""

    def test_load_metadata_file(self, tmp_path):
        path = tmp_path / "book_metadata.txt"
        path.write_text(
            "# comment line\n"
            "title: Sylvie and Bruno\n"
            "author： Lewis Carroll\n"
            "cover: images/cover.jpg\n"
            "tags: fantasy, children\n"
            "showContents: no\n"
            "sequence: 2\n"
            "images: images/a.png, images/b.png\n"
            "fileAs: Carroll, Lewis\n"
            "publisher:\n"
            "unknown: ignored\n",
            encoding="utf-8",
        )
        result = load_metadata_file(path)
        assert result.title == "Sylvie and Bruno"
        assert result.author == "Lewis Carroll"
        assert result.cover == str(tmp_path / "images/cover.jpg")
        assert result.tags == ["fantasy", "children"]
        assert result.show_contents is False
        assert result.sequence == 2
        assert result.images == [str(tmp_path / "images/a.png"), str(tmp_path / "images/b.png")]
        assert result.file_as == "Carroll, Lewis"
        assert result.publisher is None

    def test_missing_required_field_in_file(self, tmp_path):
        path = tmp_path / "book_metadata.txt"
        path.write_text("title: Only a title\nauthor: Someone\n", encoding="utf-8")
        with pytest.raises(MissingMetadataError) as exc_info:
            load_metadata_file(path)
        assert exc_info.value.field == "cover"

    def test_missing_file(self, tmp_path):
        with pytest.raises(MetadataFileNotFoundError):
            load_metadata_file(tmp_path / "nothing.txt")

    def test_metadata_path_for_folder(self, tmp_path):
        assert get_metadata_path_for_folder(tmp_path / "book") == tmp_path / "book_metadata.txt"

    def test_load_metadata_for_folder(self, tmp_path):
        (tmp_path / "book").mkdir()
        (tmp_path / "book_metadata.txt").write_text(
            "title: T\nauthor: A\ncover: cover.png\n", encoding="utf-8"
        )
        result = load_metadata_for_folder(tmp_path / "book")
        assert result.cover == str(tmp_path / "cover.png")
