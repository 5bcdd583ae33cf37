"""
EPUBファイル一覧（マニフェスト）生成モジュール。

ドキュメントから、パッケージに格納すべきファイルを順序付きの一覧として生成する。
生成は2段階で行う:

1. 制御ファイル・スタイルシート・セクション・目次を同期的に生成する。
2. フォント・表紙画像・画像をスレッドで並行に読み込み、すべて揃ってから
   同期分の後ろに出現順のまま追加する。
"""
import asyncio
from dataclasses import dataclass, replace
from pathlib import Path
from typing import TYPE_CHECKING

from core import logger
from core.config import (
    MIMETYPE_FILENAME,
    META_INF_FOLDER,
    OEBPF_FOLDER,
    CSS_FOLDER,
    CONTENT_FOLDER,
    FONTS_FOLDER,
    IMAGES_FOLDER,
    CONTAINER_FILENAME,
    OPF_FILENAME,
    NCX_FILENAME,
    COVER_FILENAME,
    CSS_FILENAME,
    TOC_FILENAME,
)
from core.exceptions import AssetLoadError, DuplicateEntryError, InvalidEntryNameError
from core.messages import msg
from epub.templates import (
    asset_basename,
    get_mimetype,
    generate_container_xml,
    generate_opf,
    generate_ncx,
    generate_cover_xhtml,
    generate_css,
    generate_section_xhtml,
    generate_toc_xhtml,
)

if TYPE_CHECKING:
    from epub.document import Document


@dataclass(frozen=True)
class VirtualFile:
    """パッケージに格納するファイル1件分の情報。"""
    name: str                       # ファイル名（ディレクトリ部分なし）
    folder: str                     # 格納先フォルダ（空文字列はルート）
    compress: bool
    content: str | bytes | Path     # Path は読み込み前のアセット

    @property
    def path(self) -> str:
        """パッケージ内のパス（folder/name、フォルダなしは name のみ）。"""
        if self.folder:
            return f"{self.folder}/{self.name}"
        return self.name


def _render_files(document: "Document") -> list[VirtualFile]:
    """制御ファイル・スタイルシート・セクション・目次を出力順に生成する。"""
    files = [
        # mimetypeは無圧縮で先頭に
        VirtualFile(MIMETYPE_FILENAME, "", False, get_mimetype()),
        VirtualFile(CONTAINER_FILENAME, META_INF_FOLDER, True, generate_container_xml()),
        VirtualFile(OPF_FILENAME, OEBPF_FOLDER, True, generate_opf(document)),
        VirtualFile(NCX_FILENAME, OEBPF_FOLDER, True, generate_ncx(document)),
        VirtualFile(COVER_FILENAME, OEBPF_FOLDER, True, generate_cover_xhtml(document)),
        VirtualFile(CSS_FILENAME, CSS_FOLDER, True, generate_css(document)),
    ]
    for i, section in enumerate(document.sections, 1):
        files.append(
            VirtualFile(section.filename, CONTENT_FOLDER, True, generate_section_xhtml(document, i))
        )
    if document.show_contents:
        files.append(VirtualFile(TOC_FILENAME, CONTENT_FOLDER, True, generate_toc_xhtml(document)))
    return files


def _asset_files(document: "Document") -> list[VirtualFile]:
    """読み込み待ちのアセット（フォント → 表紙画像 → 画像）を出現順に返す。"""
    pending = [
        VirtualFile(asset_basename(font), FONTS_FOLDER, True, Path(font))
        for font in document.fonts
    ]
    pending.append(
        VirtualFile(asset_basename(document.cover_image), IMAGES_FOLDER, True, Path(document.cover_image))
    )
    pending.extend(
        VirtualFile(asset_basename(image), IMAGES_FOLDER, True, Path(image))
        for image in document.images
    )
    return pending


def _is_plain_name(name: str) -> bool:
    """ディレクトリ部分を含まない、単独のファイル名であるかを返す。"""
    if name in ("", ".", "..") or "\\" in name:
        return False
    return Path(name).name == name


def validate_entries(files: list[VirtualFile]) -> None:
    """パッケージ内のファイル名が単独の名前で、パスが重複していないことを確認する。"""
    seen: set[str] = set()
    for file in files:
        if not _is_plain_name(file.name):
            raise InvalidEntryNameError(file.path)
        if file.path in seen:
            raise DuplicateEntryError(file.path)
        seen.add(file.path)


def _read_asset(path: Path) -> bytes:
    try:
        data = path.read_bytes()
    except OSError as e:
        raise AssetLoadError(str(path)) from e
    logger.debug(msg("epub_asset_loaded", path=path, size=len(data)))
    return data


async def _load_asset(file: VirtualFile) -> VirtualFile:
    data = await asyncio.to_thread(_read_asset, file.content)
    return replace(file, content=data)


async def build_manifest(document: "Document") -> list[VirtualFile]:
    """
    ドキュメントからEPUBに必要なファイル一覧を生成する。

    Parameters
    ----------
    document : Document
        生成対象のドキュメント。生成中に変更してはならない。

    Returns
    -------
    list[VirtualFile]
        パッケージへの格納順に並んだファイル一覧。先頭は無圧縮のmimetype。
        アセットの content は読み込み済みのバイト列。

    Raises
    ------
    InvalidEntryNameError
        ファイル名がディレクトリ部分を含む場合、または "." / ".." の場合
        （アセットの読み込み前に検出）。
    DuplicateEntryError
        パッケージ内のパスが重複する場合（アセットの読み込み前に検出）。
    AssetLoadError
        フォント・表紙画像・画像のいずれかを読み込めない場合。
        この場合ファイル一覧は返されない。
    """
    logger.section(msg("epub_build_start"))
    logger.info(msg("epub_section_count", count=len(document.sections)))

    files = _render_files(document)
    pending = _asset_files(document)
    validate_entries(files + pending)

    logger.info(msg("epub_asset_count", count=len(pending)))
    # gather は引数の順序で結果を返すため、読み込み完了順に関係なく出現順が保たれる
    loaded = await asyncio.gather(*(_load_asset(file) for file in pending))

    files.extend(loaded)
    return files
