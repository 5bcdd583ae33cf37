"""
書誌情報の検証・読み取りモジュール。

EPUB生成に使用するメタデータの項目と既定値を定義し、
必須項目の検証とメタデータファイルからの読み込みを提供します。
"""
import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field, fields, replace
from pathlib import Path

from core import logger
from core.config import DEFAULT_LANGUAGE, get_language_config
from core.exceptions import MissingMetadataError
from core.messages import msg


class MetadataFileNotFoundError(Exception):
    """書誌情報ファイルが見つからない場合の例外。"""

    def __init__(self, metadata_path: str):
        self.metadata_path = metadata_path
        super().__init__(msg("metadata_not_found", path=metadata_path))


@dataclass
class BookMetadata:
    """書籍のメタデータを保持するデータクラス。"""

    title: str | None = None  # タイトル（必須）
    author: str | None = None  # 著者（必須）
    cover: str | None = None  # 表紙画像のパス（必須）
    id: str = field(default_factory=lambda: f"urn:uuid:{uuid.uuid4()}")
    series: str | None = None
    sequence: int | None = None  # シリーズ内の巻数
    file_as: str | None = None  # 著者の読み（未指定時は著者名）
    genre: str | None = None
    tags: list[str] = field(default_factory=list)
    copyright: str | None = None
    publisher: str | None = None
    published: str | None = None  # 発行日（例: 2024-01-31）
    language: str = DEFAULT_LANGUAGE
    description: str | None = None
    contents: str | None = None  # 目次ページのタイトル（未指定時は言語の既定値）
    source: str | None = None
    show_contents: bool | None = None  # None の場合は目次を出力する
    images: list[str] = field(default_factory=list)
    fonts: list[str] = field(default_factory=list)


REQUIRED_FIELDS: tuple[str, ...] = ("title", "author", "cover")

_KNOWN_FIELDS: frozenset[str] = frozenset(f.name for f in fields(BookMetadata))

# メタデータファイルのキーとフィールド名のマッピング
_FIELD_MAPPING: dict[str, str] = {
    "id": "id",
    "title": "title",
    "author": "author",
    "cover": "cover",
    "series": "series",
    "sequence": "sequence",
    "fileAs": "file_as",
    "genre": "genre",
    "tags": "tags",
    "copyright": "copyright",
    "publisher": "publisher",
    "published": "published",
    "language": "language",
    "description": "description",
    "contents": "contents",
    "source": "source",
    "showContents": "show_contents",
    "images": "images",
    "fonts": "fonts",
}

# カンマ区切りで複数値を持つ項目
_LIST_FIELDS: set[str] = {"tags", "images", "fonts"}

# メタデータファイルの位置を基準に解決するパス項目
_PATH_FIELDS: set[str] = {"cover", "images", "fonts"}

_TRUE_VALUES: set[str] = {"true", "yes", "on", "1"}


def _is_blank(value: object) -> bool:
    return value is None or str(value).strip() == ""


def validate_metadata(metadata: "BookMetadata | Mapping[str, object] | None") -> BookMetadata:
    """
    メタデータの必須項目を検証し、既定値を補完したメタデータを返す。

    Parameters
    ----------
    metadata : BookMetadata | Mapping[str, object] | None
        検証するメタデータ。辞書の場合はフィールド名をキーとする。

    Returns
    -------
    BookMetadata
        検証済みのメタデータ（入力とは別のオブジェクト）。

    Raises
    ------
    MissingMetadataError
        メタデータ自体がない（None、辞書でも BookMetadata でもない）場合、
        または title / author / cover のいずれかが
        ない・空白のみの場合。最初に見つかった項目名を field に保持する。
    """
    if isinstance(metadata, Mapping):
        values = {}
        for key, value in metadata.items():
            if key in _KNOWN_FIELDS:
                values[key] = value
            else:
                logger.warning(msg("metadata_unknown_field", field=key))
        result = BookMetadata(**values)
    elif isinstance(metadata, BookMetadata):
        result = replace(metadata)
    else:
        raise MissingMetadataError()

    for name in REQUIRED_FIELDS:
        if _is_blank(getattr(result, name)):
            raise MissingMetadataError(name)

    result.title = str(result.title)
    result.author = str(result.author)
    result.cover = str(result.cover)
    result.tags = list(result.tags or [])
    result.images = [str(p) for p in result.images or []]
    result.fonts = [str(p) for p in result.fonts or []]
    if _is_blank(result.id):
        result.id = f"urn:uuid:{uuid.uuid4()}"
    if _is_blank(result.language):
        result.language = DEFAULT_LANGUAGE
    if _is_blank(result.file_as):
        result.file_as = result.author
    if _is_blank(result.contents):
        result.contents = get_language_config(result.language).contents_title
    return result


def get_metadata_path_for_folder(source_folder: str | Path) -> Path:
    """
    フォルダ処理用のメタデータファイルパスを取得する。

    Parameters
    ----------
    source_folder : str | Path
        セクションファイルが格納されたフォルダのパス（例：/path/to/bar）

    Returns
    -------
    Path
        メタデータファイルのパス（例：/path/to/bar_metadata.txt）
    """
    folder_path = Path(source_folder)
    metadata_filename = f"{folder_path.name}_metadata.txt"
    return folder_path.parent / metadata_filename


def parse_metadata_file(metadata_path: Path) -> dict[str, object]:
    """
    メタデータファイルをパースしてフィールド名をキーとする辞書を返す。

    Parameters
    ----------
    metadata_path : Path
        メタデータファイルのパス

    Returns
    -------
    dict[str, object]
        フィールド名と値の辞書。パス項目はファイルの位置を基準に解決済み。

    Notes
    -----
    ファイルフォーマット:
        title: 〇〇
        author: 〇〇
        cover: images/cover.png
        tags: fiction, short stories
        showContents: false
        images: images/map.png, images/plan.png
    """
    result: dict[str, object] = {}
    base_dir = metadata_path.parent

    with open(metadata_path, "r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue

            # 「:」または「：」で分割（半角コロン優先）
            if ":" in line:
                key, _, value = line.partition(":")
            elif "：" in line:
                key, _, value = line.partition("：")
            else:
                continue

            key = key.strip()
            value = value.strip()

            if not value or key not in _FIELD_MAPPING:
                continue

            name = _FIELD_MAPPING[key]
            if name in _LIST_FIELDS:
                items = [item.strip() for item in value.split(",") if item.strip()]
                if name in _PATH_FIELDS:
                    items = [str(base_dir / item) for item in items]
                result[name] = items
            elif name in _PATH_FIELDS:
                result[name] = str(base_dir / value)
            elif name == "show_contents":
                result[name] = value.lower() in _TRUE_VALUES
            elif name == "sequence":
                result[name] = int(value) if value.isdigit() else None
            else:
                result[name] = value

    return result


def load_metadata_file(metadata_path: str | Path) -> BookMetadata:
    """
    メタデータファイルを読み込み、検証済みのメタデータを返す。

    Parameters
    ----------
    metadata_path : str | Path
        メタデータファイルのパス

    Returns
    -------
    BookMetadata
        検証済みのメタデータ

    Raises
    ------
    MetadataFileNotFoundError
        メタデータファイルが見つからない場合
    MissingMetadataError
        必須項目が記載されていない場合
    """
    path = Path(metadata_path)
    if not path.exists():
        raise MetadataFileNotFoundError(str(path))
    return validate_metadata(parse_metadata_file(path))


def load_metadata_for_folder(source_folder: str | Path) -> BookMetadata:
    """フォルダ処理用のメタデータ（<フォルダ名>_metadata.txt）を読み込む。"""
    return load_metadata_file(get_metadata_path_for_folder(source_folder))
