"""
字幕语言识别

ISO 639 代码和英文名由 babelfish 转换，这里只维护字幕站点自己的代码
（pb 巴西葡语、zt 繁体中文）和常见的非标准写法。用于：
- 从字幕文件名猜测语言
- 清理发布名时去掉末尾的语言标识
"""

import os
import re
from typing import List, Optional, Tuple

from babelfish import Error as BabelfishError
from babelfish import Language


# 上传站点支持的字幕语言（ISO 639-1）
SUPPORTED_LANGUAGES = [
    "en", "fr", "es", "de", "it", "pt", "nl", "sv", "no", "da", "fi", "pl",
    "cs", "sk", "hu", "ro", "bg", "ru", "uk", "el", "tr", "ar", "he", "fa",
    "hi", "ja", "ko", "zh", "vi", "th", "id", "ms", "hr", "sr", "sl", "bs",
    "mk", "sq", "et", "lv", "lt", "ca", "eu", "gl", "is",
]

# 站点代码（不是 ISO 639-1）
SITE_CODES = ["pb", "zt"]

# 非标准短代码 → 站点代码
CODE_ALIASES = {
    "pb": "pb", "pob": "pb", "pt-br": "pb", "ptbr": "pb",
    "zt": "zt", "zht": "zt", "cht": "zt", "tc": "zt", "big5": "zt", "zh-tw": "zt",
    "chs": "zh", "sc": "zh", "gb": "zh", "zh-cn": "zh",
    "jp": "ja", "jap": "ja", "esp": "es", "scc": "sr",
}

# 非标准语言名 → 站点代码
NAME_ALIASES = {
    "Brazilian": "pb",
    "Portuguese (BR)": "pb",
    "Simplified Chinese": "zh",
    "Traditional Chinese": "zt",
    "Farsi": "fa",
}

# 不参与文件名猜测的写法（作为普通单词太常见）
_AMBIGUOUS_WORDS = {"it", "no", "is", "id", "hi", "et", "ca", "may", "mac", "cat", "gb", "sc", "tc"}

_NAME_ALIASES_LOWER = {name.lower(): code for name, code in NAME_ALIASES.items()}


def _to_babelfish(value: str) -> Optional[Language]:
    """按写法尝试 alpha2 / alpha3b / alpha3t / IETF / 英文名"""
    code = value.lower()
    if "-" in code or "_" in code:
        lookups = [lambda: Language.fromietf(code.replace("_", "-"))]
    elif len(code) == 2:
        lookups = [lambda: Language.fromalpha2(code)]
    elif len(code) == 3:
        lookups = [lambda: Language.fromalpha3b(code), lambda: Language.fromalpha3t(code)]
    else:
        lookups = [lambda: Language.fromname(value.title())]

    for lookup in lookups:
        try:
            return lookup()
        except (BabelfishError, ValueError):
            continue
    return None


def _site_code(language: Language) -> Optional[str]:
    """babelfish 语言 → 站点代码（地区/文字变体映射到 pb、zt）"""
    country = language.country.alpha2 if language.country else None
    if language.alpha3 == "por" and country == "BR":
        return "pb"
    if language.alpha3 == "zho" and (
        country in ("TW", "HK") or (language.script and language.script.code == "Hant")
    ):
        return "zt"
    try:
        return language.alpha2
    except BabelfishError:
        return None


def normalize_language(value: Optional[str]) -> Optional[str]:
    """
    把任意语言标识转换为 ISO 639-1 代码（或站点代码 pb / zt）

    Examples:
        >>> normalize_language("eng")
        'en'
        >>> normalize_language("pt-BR")
        'pb'
        >>> normalize_language("klingon") is None
        True
    """
    if not value or not value.strip():
        return None
    value = value.strip()
    key = value.lower()
    if key in CODE_ALIASES:
        return CODE_ALIASES[key]
    if key in _NAME_ALIASES_LOWER:
        return _NAME_ALIASES_LOWER[key]

    language = _to_babelfish(value)
    if language is None:
        return None
    return _site_code(language)


def _supported(code: Optional[str]) -> Optional[str]:
    if code in SUPPORTED_LANGUAGES or code in SITE_CODES:
        return code
    return None


def language_patterns() -> Tuple[List[str], List[str]]:
    """
    返回 (短代码列表, 语言全名列表)，均按长度降序

    先匹配最长的模式，避免 "pt" 抢先匹配 "pt-br"。
    """
    short_codes = set(CODE_ALIASES)
    full_names = set(NAME_ALIASES)
    for code in SUPPORTED_LANGUAGES:
        language = Language.fromalpha2(code)
        short_codes.update((code, language.alpha3b, language.alpha3t))
        full_names.add(language.name)
    return (
        sorted(short_codes, key=lambda s: (-len(s), s)),
        sorted(full_names, key=lambda s: (-len(s), s)),
    )


def guess_language(filename: str) -> Optional[str]:
    """
    从字幕文件名猜测语言

    Examples:
        Movie.2020.en.srt → en
        Movie.2020.eng.sdh.srt → en
        Movie_chs_.ass → zh
        Movie.English.srt → en
        Movie.srt → None

    Returns:
        ISO 639-1 代码（或 pb / zt），无法判断或站点不支持时为 None
    """
    name = os.path.splitext(filename)[0]
    parts = [p for p in re.split(r'[._\s\[\]()]+', name) if p]
    if len(parts) < 2:
        return None

    # 末尾的 sdh / forced 标记不影响语言
    while len(parts) > 1 and parts[-1].lower() in ("sdh", "forced", "hi", "cc"):
        parts.pop()

    # 末尾优先（含 pt-BR 这种带连字符的写法）
    last = parts[-1].lower()
    code = _supported(normalize_language(last))
    if code:
        return code
    if "-" in last:
        tail = last.split("-")[-1]
        if tail not in _AMBIGUOUS_WORDS:
            code = _supported(normalize_language(tail))
            if code:
                return code

    # 再尝试中间的语言标识（跳过第一个片段，通常是标题）
    for part in reversed(parts[1:-1]):
        key = part.lower()
        if len(key) >= 3 and key not in _AMBIGUOUS_WORDS:
            code = _supported(normalize_language(key))
            if code:
                return code

    return None
