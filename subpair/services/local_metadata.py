"""
本地元数据服务

- 视频：计算影片哈希（文件大小 + 首尾各 64KB 的 64 位小端整数和）
- 字幕：从文件名猜测语言
- 视频和字幕：根据解析出的标题/年份/季集生成影片标识，用于配对平局时的判断
"""

import re
import struct
import asyncio
import logging
from pathlib import Path
from typing import Mapping, Optional

from subpair.models import DiscoveredFile, FileKind
from subpair.services.metadata_base import MetadataService
from subpair.utils.languages import guess_language
from subpair.utils.media_parser import parse_media_filename
from subpair.utils.release_name import get_release_from_subtitle_filename

logger = logging.getLogger(__name__)

HASH_CHUNK_SIZE = 64 * 1024
_UINT64_MASK = 0xFFFFFFFFFFFFFFFF


def compute_movie_hash(path: Path) -> str:
    """
    计算影片哈希

    Args:
        path: 视频文件路径

    Returns:
        16 位十六进制字符串

    Raises:
        ValueError: 文件小于 128KB
        OSError: 文件无法读取
    """
    size = path.stat().st_size
    if size < HASH_CHUNK_SIZE * 2:
        raise ValueError(f"文件太小，无法计算哈希: {size} 字节")

    value = size
    with open(path, "rb") as f:
        for offset in (0, size - HASH_CHUNK_SIZE):
            f.seek(offset)
            chunk = f.read(HASH_CHUNK_SIZE)
            for (word,) in struct.iter_unpack("<Q", chunk):
                value = (value + word) & _UINT64_MASK

    return f"{value:016x}"


def guess_movie_key(file: DiscoveredFile) -> Optional[str]:
    """
    根据文件名生成影片标识

    Examples:
        Movie.Name.2020.1080p.mkv → movie-name-2020
        Show.S01E02.720p.mkv → show-s01e02
        Movie.Name.2020.en.srt → movie-name-2020
    """
    name = file.stem
    if file.kind == FileKind.SUBTITLE:
        name = get_release_from_subtitle_filename(name, is_release_name=True) or name

    parsed = parse_media_filename(name)
    if not parsed.title:
        return None

    key = re.sub(r'[^0-9a-z]+', '-', parsed.title.lower()).strip('-')
    if not key:
        return None
    if parsed.episode_key:
        season, episode = parsed.episode_key
        key += f"-s{season:02d}e{episode:02d}"
    elif parsed.year:
        key += f"-{parsed.year}"
    return key


class LocalMetadataService(MetadataService):
    """基于本地文件的元数据服务"""

    def __init__(
        self,
        sources: Optional[Mapping[str, Path]] = None,
        compute_hash: bool = True
    ):
        """
        初始化本地元数据服务

        Args:
            sources: 会话路径 → 本地磁盘路径（来自 DirectoryCollector）
            compute_hash: 是否计算视频哈希
        """
        self.sources = dict(sources or {})
        self.compute_hash = compute_hash

    async def enrich(self, file: DiscoveredFile) -> DiscoveredFile:
        if file.kind == FileKind.VIDEO:
            return file.with_metadata(
                content_hash=await self._hash(file),
                movie_guess=guess_movie_key(file),
            )
        if file.kind == FileKind.SUBTITLE:
            return file.with_metadata(
                language_guess=guess_language(file.name),
                movie_guess=guess_movie_key(file),
            )
        return file

    async def _hash(self, file: DiscoveredFile) -> Optional[str]:
        if not self.compute_hash:
            return None
        source = self.sources.get(file.full_path)
        if source is None:
            return None
        try:
            return await asyncio.to_thread(compute_movie_hash, source)
        except (OSError, ValueError) as e:
            logger.debug(f"跳过哈希计算: {file.full_path}: {e}")
            return None
