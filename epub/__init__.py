"""
EPUB生成モジュール。

ドキュメントモデル、ファイル一覧の生成、パッケージング、テンプレート生成を提供する。
"""
from epub.document import Document, Section
from epub.manifest import VirtualFile, build_manifest
from epub.packaging import package_epub, write_tree
from epub.templates import (
    ContentsLink,
    collect_contents_links,
    get_media_type,
    get_mimetype,
    generate_container_xml,
    generate_opf,
    generate_ncx,
    generate_cover_xhtml,
    generate_css,
    generate_section_xhtml,
    generate_toc_xhtml,
)

__all__ = [
    "Document",
    "Section",
    "VirtualFile",
    "build_manifest",
    "package_epub",
    "write_tree",
    "ContentsLink",
    "collect_contents_links",
    "get_media_type",
    "get_mimetype",
    "generate_container_xml",
    "generate_opf",
    "generate_ncx",
    "generate_cover_xhtml",
    "generate_css",
    "generate_section_xhtml",
    "generate_toc_xhtml",
]
