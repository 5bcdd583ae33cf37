"""
EPUB用テンプレート生成モジュール。

mimetype、container.xml、OPF、NCX、表紙・セクション・目次のXHTMLなど、
パッケージに含める各ファイルの内容を生成します。
"""
from dataclasses import dataclass
from html import escape
from pathlib import Path
from typing import TYPE_CHECKING
from urllib.parse import quote

from core.config import (
    MIMETYPE,
    OPF_FILENAME,
    OEBPF_FOLDER,
    NCX_FILENAME,
    COVER_FILENAME,
    CSS_FILENAME,
    TOC_FILENAME,
)

if TYPE_CHECKING:
    from epub.document import Document


# ファイル拡張子からMIMEタイプへのマッピング
MEDIA_TYPES = {
    '.png': 'image/png',
    '.jpg': 'image/jpeg',
    '.jpeg': 'image/jpeg',
    '.gif': 'image/gif',
    '.svg': 'image/svg+xml',
    '.webp': 'image/webp',
    '.ttf': 'application/x-font-ttf',
    '.otf': 'application/vnd.ms-opentype',
    '.woff': 'application/font-woff',
    '.woff2': 'font/woff2',
}

_XHTML_DOCTYPE = (
    '<!DOCTYPE html PUBLIC "-//W3C//DTD XHTML 1.1//EN" '
    '"http://www.w3.org/TR/xhtml11/DTD/xhtml11.dtd">'
)


def get_media_type(filename: str) -> str:
    """
    ファイル名からMIMEタイプを取得する。

    Parameters
    ----------
    filename : str
        画像・フォントのファイル名（拡張子付き）。

    Returns
    -------
    str
        MIMEタイプ。未知の拡張子の場合は'application/octet-stream'。
    """
    ext = Path(filename).suffix.lower()
    return MEDIA_TYPES.get(ext, 'application/octet-stream')


def asset_basename(path: str | Path) -> str:
    """アセットのパスからディレクトリ部分を除いたファイル名を返す。"""
    return Path(path).name


def _href(path: str) -> str:
    """パッケージ内の相対パスをURLエンコードし、属性値としてエスケープする。"""
    return escape(quote(path))


@dataclass
class ContentsLink:
    """目次に並べるリンク1件分の情報。"""
    title: str
    link: str        # 目次ページからの相対パス（URLエンコード済み）
    item_type: str   # "front" / "contents" / "main"


def collect_contents_links(document: "Document") -> list[ContentsLink]:
    """
    読み順に沿って目次用のリンクを集める。

    目次から除外されたセクションは含めない。前付けのセクションが先頭に並び、
    目次ページ自体（show_contents が真の場合）、本文セクションの順に続く。
    """
    front = [
        ContentsLink(s.title, quote(s.filename), "front")
        for s in document.sections
        if s.is_front_matter and not s.exclude_from_contents
    ]
    main = [
        ContentsLink(s.title, quote(s.filename), "main")
        for s in document.sections
        if not s.is_front_matter and not s.exclude_from_contents
    ]
    contents = []
    if document.show_contents:
        contents.append(ContentsLink(document.metadata.contents, TOC_FILENAME, "contents"))
    return front + contents + main


def get_mimetype() -> str:
    """mimetypeファイルの内容を返す。"""
    return MIMETYPE


def generate_container_xml() -> str:
    """META-INF/container.xmlを生成する。"""
    return ('<?xml version="1.0" encoding="UTF-8"?>\n'
            '<container version="1.0" xmlns="urn:oasis:names:tc:opendocument:xmlns:container">\n'
            '    <rootfiles>\n'
            f'        <rootfile full-path="{OEBPF_FOLDER}/{OPF_FILENAME}" '
            'media-type="application/oebps-package+xml"/>\n'
            '    </rootfiles>\n'
            '</container>')


def _generate_optional_metadata_elements(document: "Document") -> list[str]:
    """OPFのオプション項目（説明、ジャンル、発行元など）を生成する。"""
    metadata = document.metadata
    elements: list[str] = []

    if metadata.description:
        elements.append(f"        <dc:description>{escape(metadata.description)}</dc:description>")
    if metadata.genre:
        elements.append(f"        <dc:subject>{escape(metadata.genre)}</dc:subject>")
    for tag in metadata.tags:
        elements.append(f"        <dc:subject>{escape(str(tag))}</dc:subject>")
    if metadata.publisher:
        elements.append(f"        <dc:publisher>{escape(metadata.publisher)}</dc:publisher>")
    if metadata.published:
        elements.append(f"        <dc:date>{escape(str(metadata.published))}</dc:date>")
    if metadata.copyright:
        elements.append(f"        <dc:rights>{escape(metadata.copyright)}</dc:rights>")
    if metadata.source:
        elements.append(f"        <dc:source>{escape(metadata.source)}</dc:source>")
    if metadata.series:
        elements.append(f'        <meta name="calibre:series" content="{escape(metadata.series)}"/>')
        if metadata.sequence is not None:
            elements.append(f'        <meta name="calibre:series_index" content="{metadata.sequence}"/>')

    return elements


def generate_opf(document: "Document") -> str:
    """
    OPF（パッケージ文書）を生成する。

    Parameters
    ----------
    document : Document
        生成対象のドキュメント。

    Returns
    -------
    str
        生成されたOPFドキュメント。

    Notes
    -----
    spineの順序は 表紙 → 前付け → 目次 → 本文 となる。
    パスはすべてOPFの置かれるフォルダからの相対パス。
    """
    metadata = document.metadata
    cover_name = asset_basename(document.cover_image)

    manifest_items = [
        f'        <item id="cover" href="{COVER_FILENAME}" media-type="application/xhtml+xml"/>',
        f'        <item id="ncx" href="{NCX_FILENAME}" media-type="application/x-dtbncx+xml"/>',
        f'        <item id="css" href="css/{CSS_FILENAME}" media-type="text/css"/>',
    ]
    for i, s in enumerate(document.sections, 1):
        manifest_items.append(
            f'        <item id="section{i}" href="{_href(f"content/{s.filename}")}" '
            f'media-type="application/xhtml+xml"/>'
        )
    if document.show_contents:
        manifest_items.append(
            f'        <item id="toc" href="content/{TOC_FILENAME}" media-type="application/xhtml+xml"/>'
        )
    manifest_items.append(
        f'        <item id="cover-image" href="{_href(f"images/{cover_name}")}" '
        f'media-type="{get_media_type(cover_name)}"/>'
    )
    for i, image in enumerate(document.images, 1):
        name = asset_basename(image)
        manifest_items.append(
            f'        <item id="img{i}" href="{_href(f"images/{name}")}" media-type="{get_media_type(name)}"/>'
        )
    for i, font in enumerate(document.fonts, 1):
        name = asset_basename(font)
        manifest_items.append(
            f'        <item id="font{i}" href="{_href(f"fonts/{name}")}" media-type="{get_media_type(name)}"/>'
        )

    spine_items = ['        <itemref idref="cover" linear="yes"/>']
    for i, s in enumerate(document.sections, 1):
        if s.is_front_matter:
            spine_items.append(f'        <itemref idref="section{i}"/>')
    if document.show_contents:
        spine_items.append('        <itemref idref="toc"/>')
    for i, s in enumerate(document.sections, 1):
        if not s.is_front_matter:
            spine_items.append(f'        <itemref idref="section{i}"/>')

    guide_items = [f'        <reference type="cover" title="Cover" href="{COVER_FILENAME}"/>']
    if document.show_contents:
        guide_items.append(
            f'        <reference type="toc" title="{escape(metadata.contents)}" '
            f'href="content/{TOC_FILENAME}"/>'
        )
    first_main = next((s for s in document.sections if not s.is_front_matter), None)
    if first_main is not None:
        guide_items.append(
            f'        <reference type="text" title="{escape(first_main.title)}" '
            f'href="{_href(f"content/{first_main.filename}")}"/>'
        )

    optional_metadata = _generate_optional_metadata_elements(document)
    optional_block = chr(10) + chr(10).join(optional_metadata) if optional_metadata else ""

    return f'''<?xml version="1.0" encoding="UTF-8"?>
<package xmlns="http://www.idpf.org/2007/opf" version="2.0" unique-identifier="BookId">
    <metadata xmlns:dc="http://purl.org/dc/elements/1.1/" xmlns:opf="http://www.idpf.org/2007/opf">
        <dc:identifier id="BookId">{escape(metadata.id)}</dc:identifier>
        <dc:title>{escape(metadata.title)}</dc:title>
        <dc:language>{escape(metadata.language)}</dc:language>
        <dc:creator opf:role="aut" opf:file-as="{escape(metadata.file_as)}">{escape(metadata.author)}</dc:creator>{optional_block}
        <meta name="cover" content="cover-image"/>
    </metadata>
    <manifest>
{chr(10).join(manifest_items)}
    </manifest>
    <spine toc="ncx">
{chr(10).join(spine_items)}
    </spine>
    <guide>
{chr(10).join(guide_items)}
    </guide>
</package>'''


def generate_ncx(document: "Document") -> str:
    """
    NCX（ナビゲーション文書）を生成する。

    navPointは目次と同じ順序で並び、playOrderは1から連番となる。
    リンクが1件もない場合は表紙ページを唯一のnavPointとする。
    """
    metadata = document.metadata
    nav_targets = [
        (link.title, f"content/{link.link}")
        for link in collect_contents_links(document)
    ]
    if not nav_targets:
        nav_targets = [("Cover", COVER_FILENAME)]

    nav_points = "\n".join(
        f'        <navPoint id="navpoint-{order}" playOrder="{order}">\n'
        f'            <navLabel><text>{escape(title)}</text></navLabel>\n'
        f'            <content src="{escape(src)}"/>\n'
        f'        </navPoint>'
        for order, (title, src) in enumerate(nav_targets, 1)
    )

    return f'''<?xml version="1.0" encoding="UTF-8"?>
<ncx xmlns="http://www.daisy.org/z3986/2005/ncx/" version="2005-1" xml:lang="{escape(metadata.language)}">
    <head>
        <meta name="dtb:uid" content="{escape(metadata.id)}"/>
        <meta name="dtb:depth" content="1"/>
        <meta name="dtb:totalPageCount" content="0"/>
        <meta name="dtb:maxPageNumber" content="0"/>
    </head>
    <docTitle><text>{escape(metadata.title)}</text></docTitle>
    <docAuthor><text>{escape(metadata.author)}</text></docAuthor>
    <navMap>
{nav_points}
    </navMap>
</ncx>'''


def _generate_xhtml_page(title: str, body: str, lang: str, head_extra: str = "") -> str:
    """XHTML 1.1 ページの共通部分を生成する。"""
    return f'''<?xml version="1.0" encoding="UTF-8"?>
{_XHTML_DOCTYPE}
<html xmlns="http://www.w3.org/1999/xhtml" xml:lang="{escape(lang)}" lang="{escape(lang)}">
<head>
    <title>{escape(title)}</title>{head_extra}
</head>
<body>
{body}
</body>
</html>'''


def generate_cover_xhtml(document: "Document") -> str:
    """表紙ページを生成する。"""
    cover_name = asset_basename(document.cover_image)
    body = (
        '    <div id="cover-image">\n'
        f'        <img src="{_href(f"images/{cover_name}")}" alt="Cover Image" title="Cover Image"/>\n'
        '    </div>'
    )
    head_extra = "\n    <style type=\"text/css\">img { max-width: 100%; }</style>"
    return _generate_xhtml_page(document.metadata.title, body, document.metadata.language, head_extra)


def generate_css(document: "Document") -> str:
    """共有スタイルシートの内容を返す（未設定の場合は空文字列）。"""
    return document.css


def generate_section_xhtml(document: "Document", index: int) -> str:
    """
    セクションのXHTMLを生成する。

    Parameters
    ----------
    document : Document
        生成対象のドキュメント。
    index : int
        セクションの番号（1始まり）。

    Returns
    -------
    str
        生成されたXHTMLドキュメント。content はそのまま埋め込まれる。
    """
    section = document.sections[index - 1]
    head_extra = f'\n    <link rel="stylesheet" type="text/css" href="../css/{CSS_FILENAME}"/>'
    return _generate_xhtml_page(section.title, section.content, document.metadata.language, head_extra)


def _default_contents_body(document: "Document", links: list[ContentsLink]) -> str:
    items = "\n".join(
        f'            <li><a href="{escape(link.link)}">{escape(link.title)}</a></li>'
        for link in links
        if link.item_type != "contents"
    )
    return (
        f'    <h1>{escape(document.metadata.contents)}</h1>\n'
        '    <div class="contents">\n'
        '        <ol>\n'
        f'{items}\n'
        '        </ol>\n'
        '    </div>'
    )


def generate_toc_xhtml(document: "Document") -> str:
    """
    目次ページを生成する。

    ドキュメントに contents_renderer が設定されている場合は、
    リンク一覧を渡してその戻り値を本文として使用する。
    """
    links = collect_contents_links(document)
    if document.contents_renderer is not None:
        body = document.contents_renderer(links)
    else:
        body = _default_contents_body(document, links)
    head_extra = f'\n    <link rel="stylesheet" type="text/css" href="../css/{CSS_FILENAME}"/>'
    return _generate_xhtml_page(document.metadata.contents, body, document.metadata.language, head_extra)
