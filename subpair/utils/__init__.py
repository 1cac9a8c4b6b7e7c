"""
工具函数包
"""

from .media_parser import MediaParser, ParsedInfo, parse_media_filename
from .file_filter import FileFilter, get_file_filter
from .languages import guess_language, normalize_language
from .release_name import get_release_from_subtitle_filename, clean_release_name

__all__ = [
    "MediaParser",
    "ParsedInfo",
    "parse_media_filename",
    "FileFilter",
    "get_file_filter",
    "guess_language",
    "normalize_language",
    "get_release_from_subtitle_filename",
    "clean_release_name",
]
