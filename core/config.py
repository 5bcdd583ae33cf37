"""
EPUB生成ツールの設定定数モジュール。

パッケージ内のフォルダ構成やファイル名など、プロジェクト全体で使用される設定値を一元管理します。
"""
from dataclasses import dataclass


# --- 言語設定 ---
@dataclass
class LanguageConfig:
    """言語ごとの設定を保持するデータクラス。"""
    code: str                    # 言語コード（例: "ja", "en"）
    display_name: str            # 表示名
    contents_title: str          # 目次ページの既定タイトル


# 対応言語の設定
LANGUAGE_CONFIGS: dict[str, LanguageConfig] = {
    "en": LanguageConfig(
        code="en",
        display_name="English",
        contents_title="Contents",
    ),
    "ja": LanguageConfig(
        code="ja",
        display_name="日本語",
        contents_title="目次",
    ),
    "de": LanguageConfig(
        code="de",
        display_name="Deutsch",
        contents_title="Inhalt",
    ),
    "fr": LanguageConfig(
        code="fr",
        display_name="Français",
        contents_title="Table des matières",
    ),
}

# EPUBドキュメントのデフォルト言語
DEFAULT_LANGUAGE = "en"

# --- パッケージ構成 ---
MIMETYPE = "application/epub+zip"
MIMETYPE_FILENAME = "mimetype"

META_INF_FOLDER = "META-INF"
OEBPF_FOLDER = "OEBPF"
CSS_FOLDER = f"{OEBPF_FOLDER}/css"
CONTENT_FOLDER = f"{OEBPF_FOLDER}/content"
FONTS_FOLDER = f"{OEBPF_FOLDER}/fonts"
IMAGES_FOLDER = f"{OEBPF_FOLDER}/images"

CONTAINER_FILENAME = "container.xml"
OPF_FILENAME = "ebook.opf"
NCX_FILENAME = "navigation.ncx"
COVER_FILENAME = "cover.xhtml"
CSS_FILENAME = "ebook.css"
TOC_FILENAME = "toc.xhtml"

# セクションファイルの拡張子と自動命名の接頭辞
SECTION_EXTENSION = ".xhtml"
SECTION_PREFIX = "s"

# 出力パッケージの拡張子
EPUB_EXTENSION = ".epub"

# 書き込み中のアーカイブに付ける接尾辞
PARTIAL_SUFFIX = ".part"


def get_language_config(lang_code: str) -> LanguageConfig:
    """言語コードから設定を取得する。

    "en-GB" のような地域付きコードは主言語部分で検索し、
    未対応の言語はデフォルト言語の設定にフォールバックする。

    Parameters
    ----------
    lang_code : str
        言語コード（例: "ja", "en-US"）

    Returns
    -------
    LanguageConfig
        言語設定
    """
    primary = lang_code.replace("_", "-").split("-")[0].lower()
    return LANGUAGE_CONFIGS.get(primary, LANGUAGE_CONFIGS[DEFAULT_LANGUAGE])
