"""
会话路径工具

- 会话路径统一使用 "/" 分隔，根目录为空字符串
- 校验拖放/收集得到的路径是否合法
- 目录邻近关系（父目录、兄弟目录、子目录），用于跨目录回退匹配
"""

import posixpath
from typing import Iterable, Optional, Set

from subpair.errors import ValidationError


def validate_session_path(full_path: str, name: str) -> None:
    """
    校验会话路径

    Raises:
        ValidationError: 路径为空、包含空片段/./..、以 / 开头或结尾、包含 NUL，
            或文件名与路径最后一段不一致
    """
    if not full_path or not full_path.strip():
        raise ValidationError("文件路径为空", path=full_path)
    if "\x00" in full_path:
        raise ValidationError(f"文件路径包含非法字符: {full_path!r}", path=full_path)
    if full_path.startswith("/") or full_path.endswith("/"):
        raise ValidationError(f"会话路径必须是相对路径且不以 / 结尾: {full_path}", path=full_path)

    segments = full_path.split("/")
    for segment in segments:
        if segment in ("", ".", ".."):
            raise ValidationError(f"文件路径格式错误: {full_path}", path=full_path)

    if segments[-1] != name:
        raise ValidationError(
            f"文件名与路径不一致: name={name!r}, path={full_path}", path=full_path
        )


def parent_directory(directory: str) -> Optional[str]:
    """
    上级目录

    Examples:
        >>> parent_directory("A/Subs")
        'A'
        >>> parent_directory("A")
        ''
        >>> parent_directory("") is None
        True
    """
    if directory == "":
        return None
    return posixpath.dirname(directory)


def nearby_directories(directory: str, known_directories: Iterable[str]) -> Set[str]:
    """
    一层范围内的邻近目录：父目录、兄弟目录、直接子目录（不含自身）

    Args:
        directory: 当前目录
        known_directories: 本次会话中出现过的所有目录

    Returns:
        邻近目录集合（只包含 known_directories 中存在的目录）
    """
    parent = parent_directory(directory)
    result = set()
    for other in known_directories:
        if other == directory:
            continue
        other_parent = parent_directory(other)
        if other == parent:
            result.add(other)
        elif parent is not None and other_parent == parent:
            result.add(other)
        elif other_parent == directory:
            result.add(other)
    return result
