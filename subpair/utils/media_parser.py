"""
发布名解析器

配对打分只关心文件名里"不属于片名"的部分：
- 季集号、年份：不一致时降权
- 分辨率、编码、来源、音轨等发布标签：打分前剔除

解析结果同时给出去掉上述信息后的片名，供生成影片标识使用。
"""

import re
from dataclasses import dataclass
from typing import List, Optional, Tuple


@dataclass
class ParsedInfo:
    """发布名解析结果"""
    title: Optional[str] = None
    year: Optional[int] = None
    season: Optional[int] = None
    episode: Optional[int] = None

    @property
    def episode_key(self) -> Optional[Tuple[int, int]]:
        """(季, 集)，没有集数时为 None"""
        if self.episode is None:
            return None
        return (self.season or 1, self.episode)


# 片名截断标识：出现任一即认为片名结束
QUALITY_TAGS = [r'4K', r'2160[pi]', r'1080[pi]', r'720[pi]', r'576[pi]', r'480[pi]']
CODEC_TAGS = [r'[xh]\.?26[45]', r'HEVC', r'AVC', r'XviD', r'DivX', r'VP9', r'AV1']
SOURCE_TAGS = [
    r'BluRay', r'Blu-Ray', r'BD(?:Rip)?', r'BRRip', r'REMUX',
    r'WEB-?DL', r'WEBRip', r'HDTV', r'DVDRip', r'DVD',
    r'AMZN', r'NF', r'DSNP', r'HMAX', r'ATVP',  # 流媒体平台
]

# 切分后的单个 token 噪声
NOISE_TOKENS = [
    r'\d{3,4}[pi]', r'4k', r'uhd', r'hdr(?:10)?', r'dv', r'sdr',
    r'[xh]26[45]', r'hevc', r'avc', r'xvid', r'divx', r'av1', r'vp9', r'10bit', r'8bit',
    r'bluray', r'blu', r'ray', r'bdrip', r'brrip', r'bd', r'remux',
    r'web', r'dl', r'webdl', r'webrip', r'hdtv', r'dvdrip', r'dvd', r'hdrip',
    r'amzn', r'nf', r'dsnp', r'hmax', r'atvp',
    r'aac\d?', r'ac3', r'eac3', r'dts', r'ddp?\d?', r'atmos', r'truehd', r'flac', r'mp3',
    r'proper', r'repack', r'internal', r'limited', r'extended', r'unrated',
    r'multi', r'subs?', r'forced', r'sdh', r'hi',
]

# (正则, 第一组是否为季号)
EPISODE_PATTERNS = [
    (r'(?<![a-z0-9])s(\d{1,2})[ ._\-]?e(\d{1,3})(?:-?e\d{1,3})*', True),    # S01E01 / S01E01E02
    (r'season\s*(\d{1,2})\s*episode\s*(\d{1,3})', True),      # Season 1 Episode 1
    (r'(?<![a-z0-9])(\d{1,2})x(\d{1,3})(?:-\d{1,3})?(?!\d)', True),  # 1x01 / 1x01-02
    (r'(?<![a-z])ep\.?(\d{1,3})(?!\d)', False),               # EP01
    (r'第(\d{1,3})[集话話]', False),                            # 第1集
    (r'(?<![a-z])e(\d{1,3})(?:-e?\d{1,3})?(?!\d)', False),     # E01 / E01-E02
]

YEAR_PATTERNS = [
    r'\((\d{4})\)',
    r'\[(\d{4})\]',
    r'(?<=[._ ])(\d{4})(?=[._ ]|$)',
]
YEAR_RANGE = (1900, 2100)

_BRACKETED_NON_CJK_RE = re.compile(r'\[[^一-鿿]*?\]')
_TITLE_SEPARATORS_RE = re.compile(r'[._\-\s]+')


def _tag_regex(tags: List[str]) -> "re.Pattern":
    """标识必须是独立片段，避免命中单词内部（如 Infinity 中的 nf）"""
    return re.compile(
        r'(?<![a-z0-9])(?:' + '|'.join(tags) + r')(?![a-z0-9])',
        re.IGNORECASE,
    )


def _cut(name: str, match: "re.Match") -> str:
    """去掉匹配片段，保留分隔"""
    return f"{name[:match.start()]} {name[match.end():]}"


class MediaParser:
    """发布名解析器（无状态，可共享）"""

    def __init__(self):
        self.quality_re = _tag_regex(QUALITY_TAGS)
        self.codec_re = _tag_regex(CODEC_TAGS)
        self.source_re = _tag_regex(SOURCE_TAGS)
        self.noise_re = re.compile('^(?:' + '|'.join(NOISE_TOKENS) + ')$', re.IGNORECASE)
        self.episode_res = [(re.compile(p, re.IGNORECASE), seasonal) for p, seasonal in EPISODE_PATTERNS]
        self.year_res = [re.compile(p) for p in YEAR_PATTERNS]

    def parse(self, name: str) -> ParsedInfo:
        """
        解析发布名

        Args:
            name: 已去掉扩展名的文件名

        Returns:
            ParsedInfo
        """
        info = ParsedInfo()
        name = self._take_episode(name, info)
        name = self._take_year(name, info)
        info.title = self._clean_title(name) or None
        return info

    def is_noise_token(self, token: str) -> bool:
        """判断单个 token 是否为发布标签噪声"""
        return self.noise_re.match(token) is not None

    def _take_episode(self, name: str, info: ParsedInfo) -> str:
        """写入季集号，返回去掉季集片段后的名字"""
        for pattern, seasonal in self.episode_res:
            match = pattern.search(name)
            if match is None:
                continue
            if seasonal:
                info.season, info.episode = int(match.group(1)), int(match.group(2))
            else:
                info.season, info.episode = 1, int(match.group(1))
            return _cut(name, match)
        return name

    def _take_year(self, name: str, info: ParsedInfo) -> str:
        """写入年份，返回去掉年份片段后的名字"""
        low, high = YEAR_RANGE
        for pattern in self.year_res:
            for match in pattern.finditer(name):
                year = int(match.group(1))
                if low <= year <= high:
                    info.year = year
                    return _cut(name, match)
        return name

    def _clean_title(self, name: str) -> str:
        """片名：截到第一个发布标识为止，去掉非中文方括号内容和分隔符"""
        stops = [
            match.start()
            for match in (regex.search(name) for regex in (self.quality_re, self.codec_re, self.source_re))
            if match is not None
        ]
        title = name[:min(stops)] if stops else name
        title = _BRACKETED_NON_CJK_RE.sub(' ', title)
        return _TITLE_SEPARATORS_RE.sub(' ', title).strip()


_parser = MediaParser()


def parse_media_filename(name: str) -> ParsedInfo:
    """解析发布名的便捷函数"""
    return _parser.parse(name)


def is_noise_token(token: str) -> bool:
    """判断发布标签噪声的便捷函数"""
    return _parser.is_noise_token(token)
