"""
文件名相似度打分

- 视频：去扩展名
- 字幕：去扩展名 + 去末尾语言/SDH/CD1 标记（发布名清理）
- 切分 token，剔除发布标签噪声（分辨率、编码、来源、音轨、末尾发布组）
- 分数 = 最长公共前缀占比 + 剩余部分的编辑相似度
"""

import re
import difflib
from dataclasses import dataclass
from typing import Optional, Tuple

from subpair.config import PairingConfig
from subpair.models import DiscoveredFile, FileKind
from subpair.utils.media_parser import parse_media_filename, is_noise_token
from subpair.utils.release_name import get_release_from_subtitle_filename


# 非完全一致时的分数上限，保证完全一致的文件名始终排在最前
NON_EXACT_CAP = 0.99

_TOKEN_SPLIT_RE = re.compile(r'[.\-_\s\[\](){}]+')
_GROUP_TAG_RE = re.compile(r'-[A-Za-z0-9]+$')


@dataclass(frozen=True)
class NormalizedName:
    """归一化后的文件名"""
    stem: str                      # 小写，去扩展名
    release: str                   # 小写，字幕额外去掉语言标记
    tokens: Tuple[str, ...]        # 去噪后的 token
    episode_key: Optional[Tuple[int, int]] = None
    year: Optional[int] = None

    @property
    def text(self) -> str:
        return " ".join(self.tokens)


@dataclass(frozen=True)
class ScoreDetail:
    score: float
    exact: bool = False


def _tokenize(release: str) -> Tuple[str, ...]:
    tokens = [t.lower() for t in _TOKEN_SPLIT_RE.split(release) if t]
    has_noise = any(is_noise_token(t) for t in tokens)

    # 场景发布名末尾的 -GROUP
    if has_noise and len(tokens) > 1 and _GROUP_TAG_RE.search(release):
        tokens = tokens[:-1]

    return tuple(t for t in tokens if not is_noise_token(t))


def normalize_name(file: DiscoveredFile) -> NormalizedName:
    """
    归一化文件名

    Args:
        file: 视频或字幕文件

    Returns:
        NormalizedName
    """
    stem = file.stem
    release = stem
    if file.kind == FileKind.SUBTITLE:
        release = get_release_from_subtitle_filename(stem, is_release_name=True) or stem

    parsed = parse_media_filename(release)
    return NormalizedName(
        stem=stem.lower(),
        release=release.lower(),
        tokens=_tokenize(release),
        episode_key=parsed.episode_key,
        year=parsed.year,
    )


def _common_prefix_length(a: str, b: str) -> int:
    length = 0
    for ca, cb in zip(a, b):
        if ca != cb:
            break
        length += 1
    return length


def similarity(a: str, b: str) -> float:
    """
    最长公共前缀 + 剩余部分编辑相似度

    Examples:
        >>> similarity("movie 2020", "movie 2020")
        1.0
        >>> similarity("", "movie")
        0.0
    """
    if not a or not b:
        return 0.0
    if a == b:
        return 1.0

    prefix = _common_prefix_length(a, b)
    prefix_share = prefix / max(len(a), len(b))
    rest_a, rest_b = a[prefix:], b[prefix:]
    if rest_a and rest_b:
        rest_ratio = difflib.SequenceMatcher(None, rest_a, rest_b).ratio()
    else:
        rest_ratio = 0.0
    return prefix_share + (1.0 - prefix_share) * rest_ratio


def score_names(
    video: NormalizedName,
    subtitle: NormalizedName,
    config: PairingConfig
) -> ScoreDetail:
    """
    计算视频与字幕文件名的相似度

    去扩展名（字幕另去语言标记）后完全一致记 1.0 并标记 exact；
    否则按去噪 token 计算相似度，季集不一致、年份不一致时按配置降权。
    """
    if video.stem == subtitle.stem or video.stem == subtitle.release:
        return ScoreDetail(score=1.0, exact=True)

    score = similarity(video.text, subtitle.text)

    if video.episode_key and subtitle.episode_key and video.episode_key != subtitle.episode_key:
        score *= config.episode_mismatch_penalty
    if video.year and subtitle.year and video.year != subtitle.year:
        score *= config.year_mismatch_penalty

    return ScoreDetail(score=min(score, NON_EXACT_CAP))
