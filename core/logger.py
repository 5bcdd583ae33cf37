"""
ロギングユーティリティモジュール。

ロガー "epubdoc" に対する出力関数を提供します。
ライブラリとして読み込まれた場合も標準出力の設定は変更しません。
コンソールの文字コード調整は CLI から use_utf8_console() で行います。
"""
import io
import logging
import sys
from enum import IntEnum

from core.messages import msg


class LogLevel(IntEnum):
    """ログレベル定義。"""
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR


class _StdoutHandler(logging.StreamHandler):
    """出力のたびにその時点の sys.stdout へ書き込むハンドラ。"""

    @property
    def stream(self):
        return sys.stdout

    @stream.setter
    def stream(self, value):
        pass


_logger = logging.getLogger("epubdoc")
_handler = _StdoutHandler()
_handler.setFormatter(logging.Formatter("%(message)s"))
_logger.addHandler(_handler)
_logger.setLevel(logging.INFO)


def use_utf8_console() -> None:
    """Windows cp932 環境でのUnicodeEncodeError対策として標準出力をUTF-8にする。"""
    stdout = sys.stdout
    if isinstance(stdout, io.TextIOWrapper) and stdout.encoding.lower() != "utf-8":
        stdout.reconfigure(encoding="utf-8", errors="replace")


def set_log_level(level: LogLevel) -> None:
    _logger.setLevel(level)


def debug(message: str) -> None:
    _logger.debug(message)


def info(message: str) -> None:
    _logger.info(message)


def warning(message: str) -> None:
    _logger.warning(msg("log_warning", message=message))


def error(message: str) -> None:
    _logger.error(f"❌ {message}")


def success(message: str) -> None:
    """成功メッセージを出力する（ビルド完了時など）。"""
    _logger.info(f"✅ {msg('log_success', message=message)}")


def section(title: str) -> None:
    """処理段階ごとの見出しを出力する。"""
    _logger.info("-" * 30)
    _logger.info(f"★{title}")


def separator(char: str = "=", length: int = 60) -> None:
    _logger.info(char * length)
