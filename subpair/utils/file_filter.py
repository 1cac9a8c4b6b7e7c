"""
文件种类判断

按扩展名把拖放的文件分成 视频 / 字幕 / 压缩包 / 其他，
并按排除模式跳过系统文件和隐藏目录。
"""

import fnmatch
import posixpath
from typing import Dict, Iterable, List, Optional

from subpair.config import get_config
from subpair.models import FileKind


def _extension_of(filename: str) -> str:
    return posixpath.splitext(filename.replace('\\', '/'))[1].lower()


def _dotted(extension: str) -> str:
    extension = extension.lower()
    return extension if extension.startswith('.') else f'.{extension}'


class FileFilter:
    """扩展名 → 文件种类 映射加排除模式"""

    def __init__(
        self,
        video_extensions: Optional[Iterable[str]] = None,
        subtitle_extensions: Optional[Iterable[str]] = None,
        archive_extensions: Optional[Iterable[str]] = None,
        exclude_patterns: Optional[List[str]] = None
    ):
        """
        Args:
            video_extensions: 视频扩展名，None 则取 scan 配置
            subtitle_extensions: 字幕扩展名，None 则取 scan 配置
            archive_extensions: 压缩包扩展名，None 则取 scan 配置
            exclude_patterns: 文件/目录名排除模式（fnmatch），None 则取 scan 配置
        """
        scan = get_config().scan

        groups = [
            (FileKind.ARCHIVE, archive_extensions, scan.archive_extensions),
            (FileKind.SUBTITLE, subtitle_extensions, scan.subtitle_extensions),
            (FileKind.VIDEO, video_extensions, scan.video_extensions),
        ]
        # 同一扩展名出现在多组时，后写入的优先（视频 > 字幕 > 压缩包）
        self.kinds: Dict[str, FileKind] = {}
        for kind, explicit, configured in groups:
            for extension in (explicit if explicit is not None else configured):
                self.kinds[_dotted(extension)] = kind

        self.exclude_patterns: List[str] = list(
            exclude_patterns if exclude_patterns is not None else scan.exclude_patterns
        )

    def get_file_kind(self, filename: str) -> FileKind:
        """
        按扩展名判断种类

        Args:
            filename: 文件名或路径

        Returns:
            FileKind，未知扩展名为 OTHER
        """
        return self.kinds.get(_extension_of(filename), FileKind.OTHER)

    def is_video_file(self, filename: str) -> bool:
        return self.get_file_kind(filename) == FileKind.VIDEO

    def is_subtitle_file(self, filename: str) -> bool:
        return self.get_file_kind(filename) == FileKind.SUBTITLE

    def is_media_file(self, filename: str) -> bool:
        """视频或字幕"""
        return self.get_file_kind(filename) in (FileKind.VIDEO, FileKind.SUBTITLE)

    def should_exclude(self, path: str) -> bool:
        """
        只看最后一段名字；上级目录在遍历时已经判断过

        Args:
            path: 文件或目录路径
        """
        name = posixpath.basename(path.replace('\\', '/').rstrip('/'))
        return any(fnmatch.fnmatch(name, pattern) for pattern in self.exclude_patterns)


# 全局过滤器实例
_filter: Optional[FileFilter] = None


def get_file_filter() -> FileFilter:
    """按当前配置构建的全局过滤器"""
    global _filter
    if _filter is None:
        _filter = FileFilter()
    return _filter


def get_file_kind(filename: str) -> FileKind:
    return get_file_filter().get_file_kind(filename)


def is_media_file(filename: str) -> bool:
    return get_file_filter().is_media_file(filename)
