"""
EPUB生成ツールのメインモジュール。

フォルダ内のXHTML断片ファイルと書誌情報ファイルからEPUBを生成する。
"""
import asyncio
import re
import sys
from dataclasses import dataclass
from datetime import datetime
from html import unescape
from pathlib import Path

from core import logger
from core.messages import msg
from core.exceptions import EpubGenerationError, SourceReadError
from core.metadata_reader import load_metadata_for_folder, MetadataFileNotFoundError
from epub.document import Document


# =============================================================================
# 定数
# =============================================================================

# セクションとして扱うファイルの拡張子
SECTION_SUFFIXES: set[str] = {".xhtml", ".html"}

# 共有スタイルシートのファイル名
STYLESHEET_NAME = "style.css"

# 展開フォルダの出力先フォルダ名
TREE_FOLDER_NAME = "expanded_epub"

_H1_PATTERN = re.compile(r"<h1[^>]*>(.*?)</h1>", re.IGNORECASE | re.DOTALL)
_TAG_PATTERN = re.compile(r"<[^>]+>")


# =============================================================================
# データクラス
# =============================================================================

@dataclass
class ProcessingContext:
    """処理コンテキストを保持するデータクラス。"""
    start_time: datetime
    source_folder: Path
    output_dir: Path
    output_name: str
    write_tree: bool

    @classmethod
    def create(cls, source_folder: Path, write_tree: bool) -> "ProcessingContext":
        """ソースフォルダから出力先を決定してコンテキストを生成する。"""
        return cls(
            start_time=datetime.now(),
            source_folder=source_folder,
            output_dir=source_folder.parent,
            output_name=source_folder.name,
            write_tree=write_tree,
        )

    @property
    def tree_dir(self) -> Path:
        return self.output_dir / TREE_FOLDER_NAME


# =============================================================================
# ユーティリティ関数
# =============================================================================

def natural_sort_key(path: Path) -> list:
    """
    自然順ソートのためのキー関数。

    ファイル名内の数字を数値として扱い、人間が期待する順序でソートする。
    例: file1, file2, file10 → file1, file2, file10 (文字列だと file1, file10, file2)
    """
    def convert(text: str):
        return int(text) if text.isdigit() else text.lower()
    return [convert(c) for c in re.split(r'(\d+)', path.name)]


def get_section_title(content: str, fallback: str) -> str:
    """XHTML断片の最初の<h1>をプレーンテキストにして返す。見つからなければ fallback。"""
    match = _H1_PATTERN.search(content)
    if match:
        title = unescape(_TAG_PATTERN.sub("", match.group(1))).strip()
        if title:
            return title
    return fallback


def _log_processing_start(start_time: datetime) -> None:
    """処理開始ログを出力する。"""
    logger.info(msg("processing_start", time=start_time.strftime('%Y-%m-%d %H:%M:%S')))


def _log_processing_end(ctx: ProcessingContext, output_epub: Path) -> None:
    """処理終了ログを出力する。"""
    end_time = datetime.now()
    elapsed_time = end_time - ctx.start_time
    logger.separator("=", 50)
    logger.info(msg("processing_end", time=end_time.strftime('%Y-%m-%d %H:%M:%S')))
    logger.info(msg("elapsed_time", time=elapsed_time))
    logger.info(msg("output_file", path=output_epub))


# =============================================================================
# バリデーション関数
# =============================================================================

def _validate_folder_exists(folder_path: Path) -> None:
    """フォルダの存在をチェックする。"""
    if not folder_path.exists() or not folder_path.is_dir():
        raise EpubGenerationError(msg("folder_not_found", path=folder_path))


def _read_source(path: Path) -> str:
    """入力ファイルをUTF-8で読み込む。"""
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SourceReadError(str(path)) from e


def _collect_section_files(folder_path: Path) -> list[Path]:
    """フォルダ内のセクションファイルを自然順で返す。"""
    files = sorted(
        (p for p in folder_path.iterdir() if p.is_file() and p.suffix.lower() in SECTION_SUFFIXES),
        key=natural_sort_key
    )
    if not files:
        raise EpubGenerationError(msg("no_sections_in_folder", folder=folder_path))
    return files


# =============================================================================
# UI入力ヘルパー関数
# =============================================================================

def _prompt_choice(
    prompt: str,
    options: list[str],
    default: int = 1
) -> int:
    """
    選択肢を表示してユーザー入力を取得する。

    Parameters
    ----------
    prompt : str
        質問文
    options : list[str]
        選択肢のリスト
    default : int
        デフォルト値（1始まり）

    Returns
    -------
    int
        選択されたインデックス（1始まり）
    """
    print(prompt)
    for i, option in enumerate(options, 1):
        print(f"  {i}: {option}")
    logger.separator("-")

    choice = input(msg("choice_prompt", n=len(options), d=default)).strip()

    if not choice:
        return default

    try:
        value = int(choice)
        if 1 <= value <= len(options):
            return value
        print(msg("invalid_value", n=len(options), d=default))
    except ValueError:
        print(msg("invalid_input", n=len(options), d=default))

    return default


def _prompt_source_folder() -> str:
    """ソースフォルダの入力を行う。"""
    logger.separator("-")
    return input(msg("prompt_folder_path"))


def _prompt_write_tree(output_dir: Path) -> bool:
    """展開フォルダ出力の選択を行う。"""
    logger.separator("-")
    print(msg("keep_tree_question"))
    print(f"  {msg('keep_tree_dest', path=output_dir / TREE_FOLDER_NAME)}")

    options = [msg("opt_keep_no"), msg("opt_keep_yes")]
    choice = _prompt_choice("", options, default=1)
    return choice == 2


# =============================================================================
# 処理関数
# =============================================================================

def build_document(source_folder: Path) -> Document:
    """
    フォルダの内容からドキュメントを組み立てる。

    メタデータは <フォルダ名>_metadata.txt から読み込み、
    フォルダ内の style.css があれば共有スタイルシートとして使用する。
    """
    _validate_folder_exists(source_folder)
    section_files = _collect_section_files(source_folder)

    document = Document(load_metadata_for_folder(source_folder))

    stylesheet = source_folder / STYLESHEET_NAME
    if stylesheet.is_file():
        logger.info(msg("css_found", path=stylesheet))
        document.add_css(_read_source(stylesheet))

    logger.info(msg("file_count", count=len(section_files)))
    for path in section_files:
        content = _read_source(path)
        document.add_section(get_section_title(content, path.stem), content)

    return document


async def process_folder(source_folder: str | Path, write_tree: bool = False) -> Path:
    """フォルダ内のセクションファイルからEPUBを生成する。"""
    folder_path = Path(source_folder)
    ctx = ProcessingContext.create(folder_path, write_tree)
    _log_processing_start(ctx.start_time)

    document = build_document(folder_path)
    output_epub = await document.write_epub(ctx.output_dir, ctx.output_name)

    if ctx.write_tree:
        await document.write_files_for_epub(ctx.tree_dir)
        logger.info(msg("tree_saved", path=ctx.tree_dir))

    _log_processing_end(ctx, output_epub)
    return output_epub


# =============================================================================
# メイン関数
# =============================================================================

def main(argv: list[str] | None = None) -> int:
    """EPUB生成ツールのメイン処理。"""
    args = sys.argv[1:] if argv is None else argv
    logger.use_utf8_console()

    logger.separator("=")
    print(msg("tool_title"))
    logger.separator("=")

    if "--verbose" in args:
        logger.set_log_level(logger.LogLevel.DEBUG)
        args = [a for a in args if a != "--verbose"]

    # ソースパス取得（引用符付き入力への対応: "path" や 'path' をトリム）
    if args:
        source = args[0]
        write_tree = "--tree" in args[1:]
    else:
        source = _prompt_source_folder()
        write_tree = None
    source = source.strip().strip('"').strip("'")
    if write_tree is None:
        write_tree = _prompt_write_tree(Path(source).parent)

    try:
        asyncio.run(process_folder(source, write_tree))
    except MetadataFileNotFoundError as e:
        logger.error(str(e))
        return 1
    except EpubGenerationError as e:
        logger.error(str(e))
        print(msg("processing_aborted"))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
