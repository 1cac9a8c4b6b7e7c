"""
配对引擎

把一批无序的文件（视频、字幕、压缩包……）映射为：
- 视频 ↔ 字幕配对（一个视频可以有多个字幕，一个字幕最多属于一个视频）
- 孤立字幕（没有可接受的视频）
- 每个字幕的诊断信息

核心规则：
1. 按父目录分组，同目录是最强信号
2. 去噪后的文件名相似度打分，完全一致直接最高分
3. 目录内只有字幕没有视频时，向上一层（父目录/兄弟目录/子目录）扩展
4. 每个字幕只归属分数最高的视频（过阈值的候选中按规则打破平局）
5. 最高分低于阈值不分配，记录被拒绝的最高分候选
6. 分数接近时：影片标识一致优先，其次文件更大者（正片优于样片）

引擎是纯函数：不做 I/O，不修改输入，不写日志；相同输入（相同顺序）输出相同。
"""

from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from subpair.config import PairingConfig
from subpair.errors import ValidationError
from subpair.models import (
    DiscoveredFile,
    FileKind,
    MatchDecision,
    MatchedPair,
    MatchReason,
    PairingResult,
)
from subpair.pairing.scoring import NormalizedName, normalize_name, score_names
from subpair.utils.path_utils import nearby_directories, validate_session_path


@dataclass(frozen=True)
class _Candidate:
    """字幕的一个候选视频"""
    video: DiscoveredFile
    score: float
    exact: bool
    cross_directory: bool


@dataclass(frozen=True)
class _Choice:
    """字幕的最终候选"""
    order: int
    subtitle: DiscoveredFile
    candidate: Optional[_Candidate]
    ambiguous: bool
    alternatives: List[str]

    @property
    def score(self) -> float:
        return self.candidate.score if self.candidate else 0.0


class PairingEngine:
    """视频/字幕配对引擎"""

    def __init__(self, config: Optional[PairingConfig] = None):
        """
        初始化配对引擎

        Args:
            config: 配对参数，None 则使用默认值（不读取全局配置文件）
        """
        self.config = config or PairingConfig()

    # ============================================================
    # 公共接口
    # ============================================================

    def pair(self, files: Sequence[DiscoveredFile]) -> PairingResult:
        """
        对一批文件执行配对

        Args:
            files: 收集到的文件，可以为空

        Returns:
            PairingResult: 每个视频恰好出现在一个配对中（字幕可为空），
                每个字幕恰好出现在某个配对或 orphans 之一

        Raises:
            ValidationError: 路径格式错误或路径重复（在任何配对工作之前）
        """
        files = list(files)
        self._validate(files)

        videos = [f for f in files if f.kind == FileKind.VIDEO]
        subtitles = [f for f in files if f.kind == FileKind.SUBTITLE]
        skipped = [f for f in files if f.kind not in (FileKind.VIDEO, FileKind.SUBTITLE)]

        videos_by_dir: Dict[str, List[DiscoveredFile]] = defaultdict(list)
        for video in videos:
            videos_by_dir[video.directory].append(video)

        names = {f.full_path: normalize_name(f) for f in videos + subtitles}

        choices = [
            self._choose(order, subtitle, self._candidates(subtitle, videos_by_dir, names))
            for order, subtitle in enumerate(subtitles)
        ]

        assigned = self._assign(choices)

        subtitles_by_video: Dict[str, List[DiscoveredFile]] = defaultdict(list)
        for subtitle in subtitles:
            video_path = assigned.get(subtitle.full_path)
            if video_path is not None:
                subtitles_by_video[video_path].append(subtitle)

        pairs = [
            MatchedPair(video=video, subtitles=subtitles_by_video.get(video.full_path, []))
            for video in videos
        ]
        orphans = [s for s in subtitles if s.full_path not in assigned]
        decisions = [self._decision(choice, choice.subtitle.full_path in assigned) for choice in choices]

        return PairingResult(
            pairs=pairs,
            orphans=orphans,
            decisions=decisions,
            skipped=skipped,
            files=files,
        )

    def repair(
        self,
        existing: PairingResult,
        updated_files: Sequence[DiscoveredFile]
    ) -> PairingResult:
        """
        元数据补全后重新打分

        用补全后的文件替换上次输入中相同路径的条目，再完整执行一次配对。
        上次结果本身不会被修改。

        Args:
            existing: 上一次 pair/repair 的结果
            updated_files: 补全了哈希/语言/影片标识的文件

        Raises:
            ValidationError: 更新的文件不在上次输入中、重复出现或种类改变
        """
        merged = list(existing.files)
        index = {f.full_path: i for i, f in enumerate(merged)}
        seen = set()

        for updated in updated_files:
            path = updated.full_path
            if path not in index:
                raise ValidationError(f"更新的文件不在本次会话中: {path}", path=path)
            if path in seen:
                raise ValidationError(f"重复的文件路径: {path}", path=path)
            seen.add(path)

            original = merged[index[path]]
            if original.kind != updated.kind or original.name != updated.name:
                raise ValidationError(f"更新的文件与原文件不一致: {path}", path=path)
            merged[index[path]] = updated

        return self.pair(merged)

    # ============================================================
    # 内部步骤
    # ============================================================

    @staticmethod
    def _validate(files: List[DiscoveredFile]):
        """校验输入，任何错误都在配对前抛出"""
        seen = set()
        for f in files:
            if not isinstance(f, DiscoveredFile):
                raise ValidationError(f"不支持的输入类型: {type(f).__name__}")
            validate_session_path(f.full_path, f.name)
            if f.full_path in seen:
                raise ValidationError(f"重复的文件路径: {f.full_path}", path=f.full_path)
            seen.add(f.full_path)

    def _candidates(
        self,
        subtitle: DiscoveredFile,
        videos_by_dir: Dict[str, List[DiscoveredFile]],
        names: Dict[str, NormalizedName]
    ) -> List[_Candidate]:
        """同目录视频；同目录没有视频时扩展到一层内的邻近目录"""
        same_dir = videos_by_dir.get(subtitle.directory, [])
        if same_dir:
            pool = [(video, False) for video in same_dir]
        else:
            pool = [
                (video, True)
                for directory in sorted(nearby_directories(subtitle.directory, videos_by_dir))
                for video in videos_by_dir[directory]
            ]

        sub_name = names[subtitle.full_path]
        candidates = []
        for video, cross in pool:
            detail = score_names(names[video.full_path], sub_name, self.config)
            score = detail.score * (self.config.cross_directory_factor if cross else 1.0)
            candidates.append(_Candidate(video=video, score=score, exact=detail.exact, cross_directory=cross))
        return candidates

    def _choose(
        self,
        order: int,
        subtitle: DiscoveredFile,
        candidates: List[_Candidate]
    ) -> _Choice:
        """
        在候选中选出一个

        完全一致的候选优先；最高分过阈值时只在过阈值的候选中打破平局，
        否则记录分数最高的候选（供诊断）。
        """
        if not candidates:
            return _Choice(order=order, subtitle=subtitle, candidate=None, ambiguous=False, alternatives=[])

        pool = [c for c in candidates if c.exact] or candidates
        best = max(c.score for c in pool)
        contenders = [c for c in pool if best - c.score <= self.config.ambiguity_epsilon]

        if best >= self.config.min_score:
            eligible = [c for c in contenders if c.score >= self.config.min_score]
            chosen = min(eligible, key=lambda c: self._tie_break_key(subtitle, c))
        else:
            chosen = min(contenders, key=lambda c: (-c.score, self._tie_break_key(subtitle, c)))

        alternatives = sorted(c.video.full_path for c in contenders if c is not chosen)
        return _Choice(
            order=order,
            subtitle=subtitle,
            candidate=chosen,
            ambiguous=len(contenders) > 1,
            alternatives=alternatives,
        )

    @staticmethod
    def _tie_break_key(subtitle: DiscoveredFile, candidate: _Candidate):
        video = candidate.video
        guess_match = bool(subtitle.movie_guess) and video.movie_guess == subtitle.movie_guess
        return (
            0 if guess_match else 1,
            -video.size,
            -candidate.score,
            video.full_path,
        )

    def _assign(self, choices: List[_Choice]) -> Dict[str, str]:
        """
        阈值过滤：每个字幕只有一个选择，分数不低于阈值的才分配

        Returns:
            {字幕路径: 视频路径}
        """
        return {
            choice.subtitle.full_path: choice.candidate.video.full_path
            for choice in choices
            if choice.candidate is not None and choice.score >= self.config.min_score
        }

    @staticmethod
    def _decision(choice: _Choice, matched: bool) -> MatchDecision:
        candidate = choice.candidate
        if candidate is None:
            reason = MatchReason.NO_CANDIDATE
        elif not matched:
            reason = MatchReason.BELOW_THRESHOLD
        elif choice.ambiguous:
            reason = MatchReason.AMBIGUOUS_MATCH
        elif candidate.cross_directory:
            reason = MatchReason.CROSS_DIRECTORY
        elif candidate.exact:
            reason = MatchReason.EXACT_MATCH
        else:
            reason = MatchReason.SIMILAR_NAME

        return MatchDecision(
            subtitle=choice.subtitle,
            candidate_video=candidate.video if candidate else None,
            score=choice.score,
            reason=reason,
            matched=matched,
            ambiguous=choice.ambiguous,
            alternatives=choice.alternatives,
        )
