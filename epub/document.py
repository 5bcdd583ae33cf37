"""
EPUBドキュメントモデルモジュール。

メタデータ・セクション・スタイルシート・フォントを保持し、
ファイル一覧の生成とフォルダ/EPUBファイルへの書き出しを提供します。
"""
import asyncio
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from pathlib import Path

from core.config import SECTION_EXTENSION, SECTION_PREFIX
from core.metadata_reader import BookMetadata, validate_metadata
from epub.manifest import VirtualFile, build_manifest
from epub.packaging import package_epub, write_tree
from epub.templates import ContentsLink


ContentsRenderer = Callable[[list[ContentsLink]], str]


@dataclass(frozen=True)
class Section:
    """セクション1件分の情報。"""
    title: str
    content: str                        # XHTML断片（そのまま埋め込まれる）
    exclude_from_contents: bool = False
    is_front_matter: bool = False       # 目次より前に並ぶ前付け
    filename: str = ""                  # 拡張子付きのファイル名


class Document:
    """
    EPUBとして出力するドキュメント。

    生成時にメタデータを検証し、以降は add_section / add_css / add_font で
    内容を追加する。ファイル一覧の生成や書き出しの実行中に変更してはならない。

    Parameters
    ----------
    metadata : BookMetadata | Mapping[str, object]
        書籍のメタデータ。title / author / cover は必須。
    contents_renderer : Callable[[list[ContentsLink]], str] | None
        目次ページの本文を生成する関数。None の場合は既定の番号付きリスト。

    Raises
    ------
    MissingMetadataError
        必須のメタデータ項目がない場合。
    """

    def __init__(
        self,
        metadata: "BookMetadata | Mapping[str, object]",
        contents_renderer: ContentsRenderer | None = None
    ):
        self.metadata = validate_metadata(metadata)
        self.contents_renderer = contents_renderer
        self.css = ""
        self.sections: list[Section] = []
        self.images: list[str] = list(self.metadata.images)
        self.fonts: list[str] = list(self.metadata.fonts)
        self.cover_image: str = self.metadata.cover
        self.show_contents = True
        if self.metadata.show_contents is not None:
            self.show_contents = bool(self.metadata.show_contents)

    def add_section(
        self,
        title: str,
        content: str,
        exclude_from_contents: bool = False,
        is_front_matter: bool = False,
        override_filename: str | None = None
    ) -> Section:
        """
        セクションを末尾に追加する。

        override_filename には拡張子を付けない。省略時（空白のみを含む）は
        追加順の番号から s1, s2, ... と自動で命名する。
        ディレクトリ部分を含む名前はファイル一覧の生成時に InvalidEntryNameError となる。
        """
        filename = override_filename
        if filename is None or str(filename).strip() == "":
            filename = f"{SECTION_PREFIX}{len(self.sections) + 1}"
        section = Section(
            title=title,
            content=content,
            exclude_from_contents=bool(exclude_from_contents),
            is_front_matter=bool(is_front_matter),
            filename=f"{filename}{SECTION_EXTENSION}",
        )
        self.sections.append(section)
        return section

    def add_css(self, content: str) -> None:
        """共有スタイルシートを置き換える。"""
        self.css = content

    def add_font(self, font_path: str | Path) -> None:
        """フォントを追加する。ファイルの存在は読み込み時に確認される。"""
        self.fonts.append(str(font_path))

    def get_section_count(self) -> int:
        return len(self.sections)

    async def get_files_for_epub(self) -> list[VirtualFile]:
        """EPUBに必要なファイル一覧を格納順に返す。"""
        return await build_manifest(self)

    async def write_files_for_epub(self, folder: str | Path) -> Path:
        """EPUBに必要なファイルをフォルダ構造として書き出す。"""
        files = await self.get_files_for_epub()
        return await write_tree(files, folder)

    async def write_epub(self, folder: str | Path, filename: str) -> Path:
        """
        EPUBファイルを書き出す。

        Parameters
        ----------
        folder : str | Path
            出力先フォルダ。存在しない場合は作成する。
        filename : str
            出力ファイル名（拡張子なし）。

        Returns
        -------
        Path
            生成した <folder>/<filename>.epub のパス。
        """
        files = await self.get_files_for_epub()
        return await asyncio.to_thread(package_epub, files, folder, filename)
