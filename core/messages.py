"""
UIメッセージ国際化モジュール。

OSのロケールに基づいて日本語/英語のUIメッセージを自動切替する。
"""
import locale
import os
import sys

MESSAGES: dict[str, dict[str, str]] = {
    "ja": {
        # ツールタイトル
        "tool_title": "epubdoc - EPUB Document Builder",

        # 共通選択UI
        "choice_prompt": "選択 (1-{n}, デフォルト: {d}): ",
        "invalid_value": "無効な値です。1-{n}の範囲で入力してください。デフォルト値({d})を使用します。",
        "invalid_input": "無効な入力です。数値を入力してください。デフォルト値({d})を使用します。",

        # パス入力
        "prompt_folder_path": "セクションファイル（.xhtml/.html）が格納されたフォルダのパスを指定してください\n",

        # 展開フォルダ
        "keep_tree_question": "EPUBの展開フォルダも出力しますか？",
        "keep_tree_dest": "出力先: {path}",
        "opt_keep_no": "出力しない（デフォルト）",
        "opt_keep_yes": "出力する",

        # 処理ログ
        "processing_start": "処理開始: {time}",
        "processing_end": "処理終了: {time}",
        "elapsed_time": "所要時間: {time}",
        "output_file": "生成ファイル: {path}",
        "tree_saved": "展開フォルダを出力しました: {path}",
        "file_count": "{count} 個のセクションファイルを処理します。",
        "css_found": "スタイルシートを使用します: {path}",
        "processing_aborted": "処理を中断しました。",

        # エラー・バリデーション
        "folder_not_found": "フォルダが見つかりません: {path}",
        "no_sections_in_folder": "{folder} に.xhtmlまたは.htmlファイルが見つかりません。",

        # メタデータエラー
        "metadata_not_found": "エラー：書誌情報がありません\n期待されるファイル: {path}\n処理を中断しました。",
        "metadata_missing": "メタデータがありません",
        "metadata_missing_field": "メタデータがありません: {field}",
        "metadata_unknown_field": "未対応のメタデータ項目を無視します: {field}",

        # ロガープレフィックス
        "log_warning": "警告: {message}",
        "log_success": "成功: {message}",

        # 例外メッセージ
        "asset_load_failed": "アセットファイルを読み込めません: {path}",
        "duplicate_entry": "パッケージ内のパスが重複しています: {path}",
        "invalid_entry_name": "パッケージ内のファイル名として使用できません: {path}",
        "source_read_failed": "入力ファイルを読み込めません: {path}",
        "package_io_failed": "ファイル操作に失敗しました（{operation}）: {path}",
        "archive_failed": "アーカイブの書き込みに失敗しました: {path}",
        "archive_mimetype_first": "mimetypeは無圧縮で先頭に配置する必要があります: {path}",

        # 操作名（PackageIOError の operation 引数用）
        "operation_mkdir": "フォルダ作成",
        "operation_write": "ファイル書き込み",

        # EPUBビルダーログ
        "epub_build_start": "EPUBのファイル一覧を生成します。",
        "epub_section_count": "{count} 個のセクションを処理します。",
        "epub_asset_count": "{count} 個のアセットファイルを読み込みます。",
        "epub_asset_loaded": "  読み込み完了: {path} ({size} bytes)",
        "epub_file_written": "  書き込み完了: {path}",
        "epub_entry_appended": "  格納: {path} ({method})",
        "epub_tree_start": "EPUBの展開フォルダを出力します: {folder}",
        "epub_archive_start": "EPUBファイルを生成します: {file}",
        "epub_saved": "EPUBファイルを生成しました: {file}",
        "epub_file_count_done": "   ファイル数: {count}",
    },
    "en": {
        # Tool title
        "tool_title": "epubdoc - EPUB Document Builder",

        # Common selection UI
        "choice_prompt": "Selection (1-{n}, default: {d}): ",
        "invalid_value": "Invalid value. Enter a number between 1-{n}. Using default ({d}).",
        "invalid_input": "Invalid input. Enter a number. Using default ({d}).",

        # Path input
        "prompt_folder_path": "Specify the path to the folder containing section files (.xhtml/.html)\n",

        # Expanded folder
        "keep_tree_question": "Also write the expanded EPUB folder?",
        "keep_tree_dest": "Output destination: {path}",
        "opt_keep_no": "Do not write (default)",
        "opt_keep_yes": "Write",

        # Processing log
        "processing_start": "Processing started: {time}",
        "processing_end": "Processing finished: {time}",
        "elapsed_time": "Elapsed time: {time}",
        "output_file": "Output file: {path}",
        "tree_saved": "Expanded folder written: {path}",
        "file_count": "Processing {count} section file(s).",
        "css_found": "Using stylesheet: {path}",
        "processing_aborted": "Processing aborted.",

        # Error / validation
        "folder_not_found": "Folder not found: {path}",
        "no_sections_in_folder": "No .xhtml or .html files found in {folder}.",

        # Metadata errors
        "metadata_not_found": "Error: Metadata file not found\nExpected file: {path}\nProcessing aborted.",
        "metadata_missing": "Missing metadata",
        "metadata_missing_field": "Missing metadata: {field}",
        "metadata_unknown_field": "Ignoring unknown metadata field: {field}",

        # Logger prefixes
        "log_warning": "Warning: {message}",
        "log_success": "Success: {message}",

        # Exception messages
        "asset_load_failed": "Cannot read asset file: {path}",
        "duplicate_entry": "Duplicate path in package: {path}",
        "invalid_entry_name": "Not a valid file name inside the package: {path}",
        "source_read_failed": "Cannot read source file: {path}",
        "package_io_failed": "File operation failed ({operation}): {path}",
        "archive_failed": "Failed to write archive: {path}",
        "archive_mimetype_first": "mimetype must be the first entry and stored uncompressed: {path}",

        # Operation names (for PackageIOError operation argument)
        "operation_mkdir": "create folder",
        "operation_write": "write file",

        # EPUB builder log
        "epub_build_start": "Building the EPUB file list.",
        "epub_section_count": "Processing {count} section(s).",
        "epub_asset_count": "Loading {count} asset file(s).",
        "epub_asset_loaded": "  Loaded: {path} ({size} bytes)",
        "epub_file_written": "  Written: {path}",
        "epub_entry_appended": "  Stored: {path} ({method})",
        "epub_tree_start": "Writing expanded EPUB folder: {folder}",
        "epub_archive_start": "Generating EPUB file: {file}",
        "epub_saved": "EPUB file generated: {file}",
        "epub_file_count_done": "   Files: {count}",
    },
}

# OS言語判定
def _detect_ui_language() -> str:
    """OSのロケールから UI 言語を判定する。"""
    # macOS: システム言語設定（AppleLanguages）を最優先
    # LANG=C.UTF-8 等はシステム言語と無関係なため、macOS設定を先にチェック
    if sys.platform == "darwin":
        try:
            import subprocess
            result = subprocess.run(
                ["defaults", "read", "-g", "AppleLanguages"],
                capture_output=True, text=True, timeout=2
            )
            if result.returncode == 0:
                # 出力例: ("ja-JP", "en-US", ...) → 先頭の言語コードを取得
                for line in result.stdout.splitlines():
                    line = line.strip().strip('",() ')
                    if line:
                        return "ja" if line.startswith("ja") else "en"
        except (OSError, subprocess.SubprocessError):
            pass
    # 環境変数をチェック（LC_ALL, LC_MESSAGES, LANG）
    # C / C.UTF-8 / POSIX はデフォルト値のため言語指定なしとして除外
    for env_var in ("LC_ALL", "LC_MESSAGES", "LANG"):
        value = os.environ.get(env_var, "")
        if value and not value.startswith("C") and value != "POSIX":
            return "ja" if value.startswith("ja") else "en"
    # フォールバック: locale.getlocale()
    # Windows では "Japanese_Japan" のように返るため、大文字小文字を無視して判定
    try:
        loc = locale.getlocale()[0] or ""
    except ValueError:
        loc = ""
    return "ja" if loc.lower().startswith("ja") else "en"

_ui_lang = _detect_ui_language()


def set_ui_language(lang_code: str) -> None:
    """
    UIメッセージ言語を手動で設定する。

    Parameters
    ----------
    lang_code : str
        言語コード（例: "ja", "en_US"）。
        "ja" で始まる場合は日本語、それ以外は英語を使用する。
    """
    global _ui_lang
    _ui_lang = "ja" if lang_code.startswith("ja") else "en"


def msg(key: str, **kwargs) -> str:
    """
    指定キーのUIメッセージを現在のロケールに応じて返す。

    Parameters
    ----------
    key : str
        メッセージキー
    **kwargs
        メッセージ内のプレースホルダーに渡す値

    Returns
    -------
    str
        ロケールに応じたメッセージ文字列
    """
    template = MESSAGES[_ui_lang].get(key, key)
    if kwargs:
        return template.format(**kwargs)
    return template
