"""
发布名清理工具

从字幕文件名中还原发布名：去掉扩展名、CD1 标记、地区变体、
末尾的语言代码/语言全名以及 SDH 标记。

Examples:
    Movie.Name.2024.eng.srt → Movie.Name.2024
    Movie.Name.CD1.eng.srt → Movie.Name
    Movie.Name.pt-BR.srt → Movie.Name
    Movie.Name.English.srt → Movie.Name
    Movie.Name.track3.eng.srt → Movie.Name
"""

import re
from typing import Optional

from subpair.utils.languages import language_patterns


# 额外的全名模式（下载站水印）
EXTRA_FULL_NAMES = ["addic7ed.com"]
# 额外的短代码（容器内未标注语言的字幕轨）
EXTRA_SHORT_CODES = ["und"]

_SEPARATORS = r'[.\-_]'

_CD_RE = re.compile(r'(^|[.\-_\s]+)cd\s*[1I](?=[.\-_\s]|$)', re.IGNORECASE)
_TRACK_RE = re.compile(r'[.\-_]+track\d+(?=[.\-_]|$)', re.IGNORECASE)
_REGION_RE = re.compile(r'([.\-_]+)(\w{2,3})-(\w{2,3})([.\-_]*(sdh)?)?$', re.IGNORECASE)
_SHORT_TAIL_RE = re.compile(r'[.\-_]+\w{2,3}[.\-_]*$')
_EDGE_TRIM_RE = re.compile(r'^[,.\-_\s=]+|[,.\-_\s=]+$')


def _build_tail_patterns(patterns):
    return [
        re.compile(rf'(.*?){_SEPARATORS}+{re.escape(p)}{_SEPARATORS}*(sdh)?$', re.IGNORECASE)
        for p in patterns
    ]


_SHORT_CODES, _FULL_NAMES = language_patterns()
_SHORT_CODE_PATTERNS = _build_tail_patterns(
    sorted(_SHORT_CODES + EXTRA_SHORT_CODES, key=lambda s: (-len(s), s))
)
_FULL_NAME_PATTERNS = _build_tail_patterns(
    sorted(_FULL_NAMES + EXTRA_FULL_NAMES, key=lambda s: (-len(s), s))
)


def get_release_from_subtitle_filename(
    subtitle_filename: str,
    is_release_name: bool = False
) -> Optional[str]:
    """
    从字幕文件名还原发布名

    Args:
        subtitle_filename: 字幕文件名或发布名
        is_release_name: True 表示输入已是发布名（不去扩展名）

    Returns:
        清理后的发布名；结果少于 3 个字符时返回 None
    """
    if not subtitle_filename:
        return None

    value = subtitle_filename
    if not is_release_name:
        last_dot = value.rfind('.')
        if last_dot > 0:
            value = value[:last_dot]

    # 去掉 CD1 / CD I
    value = _CD_RE.sub(r'\1', value)

    # 去掉提取字幕轨的序号 .track3
    value = _TRACK_RE.sub('', value)

    # 地区变体 pt-PT / pt-BR / en-US → 语言代码
    value = _REGION_RE.sub(lambda m: f"{m.group(1)}{m.group(2)}{m.group(4) or ''}", value)

    # 末尾是 2-3 个字符时按短代码处理，否则按语言全名处理
    patterns = _SHORT_CODE_PATTERNS if _SHORT_TAIL_RE.search(value) else _FULL_NAME_PATTERNS
    for pattern in patterns:
        match = pattern.match(value)
        if match:
            value = match.group(1)
            break

    value = _EDGE_TRIM_RE.sub('', value).strip()

    if len(value) < 3:
        return None
    return value


def clean_release_name(release_name: str) -> str:
    """
    清理发布名中的语言标识（便捷函数）

    清理失败时返回原始输入。
    """
    cleaned = get_release_from_subtitle_filename(release_name, is_release_name=True)
    if cleaned is None:
        return release_name
    return cleaned
