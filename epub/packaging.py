"""
EPUBパッケージングモジュール。

ファイル一覧をフォルダ構造として書き出す処理と、
1つのZIPパッケージ（.epub）に格納する処理を提供します。
"""
import asyncio
import zipfile
from pathlib import Path

from core import logger
from core.config import EPUB_EXTENSION, MIMETYPE_FILENAME, PARTIAL_SUFFIX
from core.exceptions import ArchiveError, EpubGenerationError, PackageIOError
from core.messages import msg
from epub.manifest import VirtualFile, validate_entries


def _make_folder(folder: Path) -> None:
    """フォルダを作成する（既存の場合は何もしない）。"""
    try:
        folder.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise PackageIOError(str(folder), msg("operation_mkdir")) from e


def _write_file(root: Path, file: VirtualFile) -> None:
    """ファイル1件を root 以下の folder/name に書き出す。"""
    target_dir = root / file.folder if file.folder else root
    _make_folder(target_dir)
    target = target_dir / file.name
    try:
        if isinstance(file.content, bytes):
            target.write_bytes(file.content)
        else:
            target.write_text(file.content, encoding="utf-8")
    except OSError as e:
        raise PackageIOError(str(target), msg("operation_write")) from e
    logger.debug(msg("epub_file_written", path=target))


async def write_tree(files: list[VirtualFile], folder: str | Path) -> Path:
    """
    ファイル一覧をフォルダ構造として書き出す。

    Parameters
    ----------
    files : list[VirtualFile]
        読み込み済みのファイル一覧。
    folder : str | Path
        出力先フォルダ。存在しない場合は作成する。

    Returns
    -------
    Path
        出力先フォルダのパス。

    Raises
    ------
    InvalidEntryNameError, DuplicateEntryError
        ファイル名が不正、またはパスが重複する場合。何も書き込まない。
    PackageIOError
        フォルダ作成またはファイル書き込みに失敗した場合。
        書き込み済みのファイルは削除されない。

    Notes
    -----
    ファイル名と重複を先に検証するため、書き込みはスレッドで並行に行う。
    """
    validate_entries(files)
    root = Path(folder)
    logger.section(msg("epub_tree_start", folder=root))
    _make_folder(root)
    await asyncio.gather(*(asyncio.to_thread(_write_file, root, file) for file in files))
    logger.info(msg("epub_file_count_done", count=len(files)))
    return root


def _check_mimetype_first(files: list[VirtualFile], output_epub: Path) -> None:
    """先頭がmimetypeで、それが無圧縮であることを確認する。"""
    if not files:
        raise ArchiveError(msg("archive_mimetype_first", path=output_epub), str(output_epub))
    first = files[0]
    if first.path != MIMETYPE_FILENAME or first.compress:
        raise ArchiveError(msg("archive_mimetype_first", path=output_epub), str(output_epub))


def _append_entry(z: zipfile.ZipFile, file: VirtualFile) -> None:
    compress_type = zipfile.ZIP_DEFLATED if file.compress else zipfile.ZIP_STORED
    try:
        z.writestr(file.path, file.content, compress_type=compress_type)
    except (OSError, ValueError, TypeError, zipfile.LargeZipFile) as e:
        raise ArchiveError(msg("archive_failed", path=file.path), file.path) from e
    logger.debug(msg(
        "epub_entry_appended",
        path=file.path,
        method="deflated" if file.compress else "stored",
    ))


def _write_archive(files: list[VirtualFile], target: Path) -> None:
    """ファイル一覧を順に target へ格納し、最後に中央ディレクトリを書き込む。"""
    try:
        z = zipfile.ZipFile(target, "w")
    except OSError as e:
        raise PackageIOError(str(target), msg("operation_write")) from e
    try:
        with z:
            for file in files:
                _append_entry(z, file)
    except (OSError, ValueError) as e:
        raise ArchiveError(msg("archive_failed", path=target), str(target)) from e


def package_epub(files: list[VirtualFile], folder: str | Path, filename: str) -> Path:
    """
    ファイル一覧をEPUB形式でZIPパッケージングする。

    一覧の順序どおりに格納し、compress が偽のファイルは無圧縮（ZIP_STORED）、
    それ以外は圧縮（ZIP_DEFLATED）で格納します。

    Parameters
    ----------
    files : list[VirtualFile]
        読み込み済みのファイル一覧。先頭は無圧縮のmimetypeであること。
    folder : str | Path
        出力先フォルダ。存在しない場合は作成する。
    filename : str
        出力ファイル名（拡張子なし）。

    Returns
    -------
    Path
        生成したEPUBファイルのパス。

    Raises
    ------
    ArchiveError
        先頭がmimetypeでない場合、またはZIPへの格納に失敗した場合。
        この場合EPUBファイルは出力されない（既存の同名ファイルも変更しない）。
    InvalidEntryNameError, DuplicateEntryError
        ファイル名が不正、またはパスが重複する場合。
    PackageIOError
        出力先フォルダまたはファイルを作成できない場合。

    Notes
    -----
    EPUB仕様では mimetype を無圧縮でZIPの先頭に格納する必要があります。
    """
    root = Path(folder)
    output_epub = root / f"{filename}{EPUB_EXTENSION}"
    _check_mimetype_first(files, output_epub)
    validate_entries(files)

    logger.section(msg("epub_archive_start", file=output_epub))
    _make_folder(root)

    # 書き込み中のアーカイブは一時ファイルに置き、完成後に出力先へ移動する
    partial_epub = root / f"{filename}{EPUB_EXTENSION}{PARTIAL_SUFFIX}"
    try:
        _write_archive(files, partial_epub)
        partial_epub.replace(output_epub)
    except OSError as e:
        partial_epub.unlink(missing_ok=True)
        raise PackageIOError(str(output_epub), msg("operation_write")) from e
    except EpubGenerationError:
        partial_epub.unlink(missing_ok=True)
        raise

    logger.success(msg("epub_saved", file=output_epub))
    logger.info(msg("epub_file_count_done", count=len(files)))
    return output_epub
