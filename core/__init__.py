"""
コアモジュール。

共通の例外、ロガー、設定、メタデータの検証と読み込みを提供する。
"""
from core.exceptions import (
    EpubGenerationError,
    MissingMetadataError,
    AssetLoadError,
    DuplicateEntryError,
    PackageIOError,
    ArchiveError,
    InvalidEntryNameError,
    SourceReadError,
)
from core.logger import (
    debug, info, warning, error, success, section, separator, use_utf8_console,
    set_log_level, LogLevel
)
from core.config import (
    DEFAULT_LANGUAGE,
    LANGUAGE_CONFIGS,
    get_language_config,
    LanguageConfig,
)
from core.metadata_reader import (
    BookMetadata,
    validate_metadata,
    load_metadata_file,
    load_metadata_for_folder,
    MetadataFileNotFoundError,
)

__all__ = [
    # exceptions
    "EpubGenerationError", "MissingMetadataError", "AssetLoadError",
    "DuplicateEntryError", "PackageIOError", "ArchiveError",
    "InvalidEntryNameError", "SourceReadError",
    # logger
    "debug", "info", "warning", "error", "success", "section", "separator", "use_utf8_console",
    "set_log_level", "LogLevel",
    # config
    "DEFAULT_LANGUAGE", "LANGUAGE_CONFIGS", "get_language_config", "LanguageConfig",
    # metadata_reader
    "BookMetadata", "validate_metadata", "load_metadata_file", "load_metadata_for_folder",
    "MetadataFileNotFoundError",
]
