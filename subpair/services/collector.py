"""
文件收集服务

把拖放/文件选择得到的路径整理成扁平的 DiscoveredFile 列表：
- 递归扫描目录（深度限制、排除模式）
- 列出 zip 压缩包内的视频/字幕（路径为 压缩包路径/成员路径）
- 桌面壳层只给出路径信息时，直接从条目构建
- 为视频容器内的字幕轨生成同目录字幕文件

单个文件/目录/压缩包出错只记录到 errors，不中断收集，也不混入配对诊断。
"""

import logging
import posixpath
import zipfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from subpair.models import DiscoveredFile, EmbeddedTrack, FileError, FileKind
from subpair.utils.file_filter import FileFilter, get_file_filter
from subpair.utils.languages import normalize_language

logger = logging.getLogger(__name__)


@dataclass
class CollectionResult:
    """收集结果"""
    files: List[DiscoveredFile] = field(default_factory=list)
    errors: List[FileError] = field(default_factory=list)
    # 会话路径 → 本地磁盘路径（压缩包成员没有独立的磁盘路径）
    sources: Dict[str, Path] = field(default_factory=dict)
    # 会话路径第一段 → 拖放的本地路径
    roots: Dict[str, Path] = field(default_factory=dict)

    @property
    def video_count(self) -> int:
        return sum(1 for f in self.files if f.kind == FileKind.VIDEO)

    @property
    def subtitle_count(self) -> int:
        return sum(1 for f in self.files if f.kind == FileKind.SUBTITLE)


class DirectoryCollector:
    """本地文件/目录收集器"""

    def __init__(
        self,
        file_filter: Optional[FileFilter] = None,
        max_depth: Optional[int] = 10
    ):
        """
        初始化收集器

        Args:
            file_filter: 文件过滤器，None 则使用全局过滤器
            max_depth: 最大递归深度，None 表示不限制
        """
        self.filter = file_filter or get_file_filter()
        self.max_depth = max_depth

    # ============================================================
    # 本地路径
    # ============================================================

    def collect(
        self,
        paths: Iterable[Union[str, Path]],
        roots: Optional[Mapping[str, Path]] = None
    ) -> CollectionResult:
        """
        收集拖放的文件和目录

        拖放的目录名保留为会话路径的第一段（Movie/Subs/Movie.en.srt），
        拖放的单个文件直接以文件名作为会话路径。
        不同位置的同名目录依次改名为 "Movie (2)"、"Movie (3)"；
        已拖放过的路径（或其中的子路径）再次拖放时跳过。

        Args:
            paths: 本地文件或目录路径
            roots: 会话中已占用的第一段路径 → 本地路径（向已有会话追加时传入）

        Returns:
            CollectionResult
        """
        result = CollectionResult(roots=dict(roots or {}))
        seen = set()

        for raw_path in paths:
            path = Path(raw_path)
            if not path.exists():
                result.errors.append(FileError(path=str(path), message="路径不存在"))
                continue
            if self.filter.should_exclude(path.name):
                continue

            resolved = path.resolve()
            if any(resolved.is_relative_to(root) for root in result.roots.values()):
                logger.debug(f"已拖放过，跳过: {path}")
                continue

            if path.is_dir():
                prefix = self._unique_root(path.name, result.roots)
                if prefix != path.name:
                    logger.info(f"📁 同名目录已存在，改名为: {prefix}")
                result.roots[prefix] = resolved
                self._scan_directory(path, prefix, 0, result, seen)
            elif path.name in result.roots:
                result.errors.append(FileError(path=str(path), message=f"会话中已有同名文件: {path.name}"))
            else:
                result.roots[path.name] = resolved
                self._add_file(path, path.name, result, seen)

        logger.info(
            f"📂 收集完成 | 视频: {result.video_count} | 字幕: {result.subtitle_count} | 错误: {len(result.errors)}"
        )
        return result

    @staticmethod
    def _unique_root(name: str, roots: Mapping[str, Path]) -> str:
        """第一段路径已被占用时追加序号"""
        if name not in roots:
            return name
        index = 2
        while f"{name} ({index})" in roots:
            index += 1
        return f"{name} ({index})"

    def _scan_directory(
        self,
        dir_path: Path,
        session_prefix: str,
        depth: int,
        result: CollectionResult,
        seen: set
    ):
        """递归扫描目录"""
        if self.max_depth is not None and depth > self.max_depth:
            logger.debug(f"超过最大深度，跳过: {dir_path}")
            return

        try:
            entries = sorted(dir_path.iterdir(), key=lambda p: p.name)
        except OSError as e:
            result.errors.append(FileError(path=session_prefix, message=f"无法读取目录: {e}"))
            return

        for entry in entries:
            if self.filter.should_exclude(entry.name):
                continue
            session_path = f"{session_prefix}/{entry.name}"
            if entry.is_dir():
                self._scan_directory(entry, session_path, depth + 1, result, seen)
            else:
                self._add_file(entry, session_path, result, seen)

    def _add_file(
        self,
        path: Path,
        session_path: str,
        result: CollectionResult,
        seen: set
    ):
        """按种类处理单个文件"""
        kind = self.filter.get_file_kind(path.name)
        if kind == FileKind.OTHER:
            return

        try:
            size = path.stat().st_size
        except OSError as e:
            result.errors.append(FileError(path=session_path, message=f"无法读取文件: {e}"))
            return

        if kind == FileKind.ARCHIVE and path.suffix.lower() == ".zip":
            self._list_zip(path, session_path, size, result, seen)
            return

        self._append(
            DiscoveredFile(full_path=session_path, name=path.name, size=size, kind=kind),
            result,
            seen,
            source=path,
        )

    def _list_zip(
        self,
        path: Path,
        session_path: str,
        size: int,
        result: CollectionResult,
        seen: set
    ):
        """
        列出 zip 内的视频/字幕

        压缩包损坏时记录错误，并把压缩包本身作为 ARCHIVE 交给引擎（引擎会跳过）。
        """
        try:
            with zipfile.ZipFile(path) as archive:
                members = archive.infolist()
        except (zipfile.BadZipFile, OSError) as e:
            result.errors.append(FileError(path=session_path, message=f"无法打开压缩包: {e}"))
            self._append(
                DiscoveredFile(full_path=session_path, name=path.name, size=size, kind=FileKind.ARCHIVE),
                result,
                seen,
                source=path,
            )
            return

        extracted = 0
        for info in members:
            if info.is_dir():
                continue
            member = info.filename.replace("\\", "/")
            segments = member.split("/")
            if member.startswith("/") or any(s in ("", ".", "..") for s in segments):
                result.errors.append(FileError(path=f"{session_path}/{member}", message="压缩包成员路径非法"))
                continue
            if segments[0] == "__MACOSX" or any(self.filter.should_exclude(s) for s in segments):
                continue

            name = segments[-1]
            kind = self.filter.get_file_kind(name)
            if kind not in (FileKind.VIDEO, FileKind.SUBTITLE):
                continue

            self._append(
                DiscoveredFile(
                    full_path=f"{session_path}/{member}",
                    name=name,
                    size=info.file_size,
                    kind=kind,
                ),
                result,
                seen,
            )
            extracted += 1

        logger.debug(f"📦 压缩包 {session_path}: {extracted} 个媒体文件")

    @staticmethod
    def _append(
        file: DiscoveredFile,
        result: CollectionResult,
        seen: set,
        source: Optional[Path] = None
    ):
        """追加文件；会话路径已被占用时保留第一个，并记录错误"""
        if file.full_path in seen:
            logger.warning(f"⚠️ 会话路径重复，未收集: {source or file.full_path}")
            result.errors.append(FileError(path=file.full_path, message="会话路径重复，已保留先收集的文件"))
            return
        seen.add(file.full_path)
        result.files.append(file)
        if source is not None:
            result.sources[file.full_path] = source

    # ============================================================
    # 路径条目（桌面壳层只提供路径和大小）
    # ============================================================

    def collect_entries(self, entries: Iterable[Mapping[str, Any]]) -> CollectionResult:
        """
        从路径条目构建文件列表

        条目格式: {"full_path" | "path": str, "name": str（可选）, "size": int（可选）}
        路径开头的 / 会被去掉；同一路径只收集一次；非媒体文件直接忽略。
        """
        result = CollectionResult()
        seen = set()

        for entry in entries:
            full_path = (entry.get("full_path") or entry.get("path") or "").replace("\\", "/").lstrip("/")
            name = entry.get("name") or posixpath.basename(full_path)
            if not full_path:
                result.errors.append(FileError(path="", message="条目缺少路径"))
                continue

            kind = self.filter.get_file_kind(name)
            if kind not in (FileKind.VIDEO, FileKind.SUBTITLE) or full_path in seen:
                continue

            self._append(
                DiscoveredFile(full_path=full_path, name=name, size=entry.get("size") or 0, kind=kind),
                result,
                seen,
            )

        return result


def expand_embedded_subtitles(
    video: DiscoveredFile,
    tracks: Sequence[EmbeddedTrack]
) -> List[DiscoveredFile]:
    """
    为视频容器内的字幕轨生成同目录字幕文件

    命名规则：
    - 某语言第一条轨道: <视频名>.<语言>.srt
    - 同语言后续轨道: <视频名>.track<序号>.<语言>.srt
    - 未知语言记为 und，0 字节轨道跳过

    Examples:
        Movie.mkv + [eng, eng, fre] →
            Movie.eng.srt, Movie.track1.eng.srt, Movie.fre.srt
    """
    language_counts: Dict[str, int] = {}
    subtitles = []

    for track in tracks:
        if track.size == 0:
            logger.warning(f"⚠️ 跳过空字幕轨: {video.name} #{track.stream_index}")
            continue

        language = track.language if track.language and track.language != "unknown" else "und"
        language_counts[language] = language_counts.get(language, 0) + 1

        extension = track.extension if track.extension.startswith(".") else f".{track.extension}"
        if language_counts[language] == 1:
            name = f"{video.stem}.{language}{extension}"
        else:
            name = f"{video.stem}.track{track.stream_index}.{language}{extension}"

        directory = video.directory
        full_path = posixpath.join(directory, name) if directory else name
        subtitles.append(
            DiscoveredFile(
                full_path=full_path,
                name=name,
                size=track.size,
                kind=FileKind.SUBTITLE,
                language_guess=normalize_language(language),
            )
        )

    return subtitles
