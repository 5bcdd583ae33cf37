"""
EPUB生成処理用のカスタム例外クラス。

処理パイプラインの各段階で発生するエラーを明確に分類し、
適切なエラーハンドリングを可能にします。
"""
from core.messages import msg


class EpubGenerationError(Exception):
    """EPUB生成処理の基底例外クラス。"""
    pass


class MissingMetadataError(EpubGenerationError):
    """必須のメタデータ項目がない、または空白のみの場合の例外。"""

    def __init__(self, field: str | None = None):
        self.field = field
        if field is None:
            super().__init__(msg("metadata_missing"))
        else:
            super().__init__(msg("metadata_missing_field", field=field))


class AssetLoadError(EpubGenerationError):
    """フォント・画像・表紙画像を読み込めない場合の例外。"""

    def __init__(self, path: str):
        self.path = path
        super().__init__(msg("asset_load_failed", path=path))


class DuplicateEntryError(EpubGenerationError):
    """パッケージ内で同じパスに複数のファイルが割り当てられた場合の例外。"""

    def __init__(self, path: str):
        self.path = path
        super().__init__(msg("duplicate_entry", path=path))


class PackageIOError(EpubGenerationError):
    """出力先のフォルダ作成・ファイル書き込みに失敗した場合の例外。"""

    def __init__(self, path: str, operation: str = ""):
        self.path = path
        self.operation = operation
        super().__init__(msg("package_io_failed", operation=operation, path=path))


class ArchiveError(EpubGenerationError):
    """ZIPアーカイブへの格納に失敗した場合の例外。"""

    def __init__(self, message: str, path: str = ""):
        self.path = path
        super().__init__(message)


class InvalidEntryNameError(EpubGenerationError):
    """ファイル名がディレクトリ部分を含むなど、パッケージ内の名前として使えない場合の例外。"""

    def __init__(self, path: str):
        self.path = path
        super().__init__(msg("invalid_entry_name", path=path))


class SourceReadError(EpubGenerationError):
    """入力フォルダのセクションファイルやスタイルシートを読み込めない場合の例外。"""

    def __init__(self, path: str):
        self.path = path
        super().__init__(msg("source_read_failed", path=path))
