"""
配对结果模型

包含：
- MatchedPair: 视频 + 关联字幕
- MatchDecision: 单个字幕的配对诊断
- PairingResult: 一次配对的完整输出
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .enums import FileKind, MatchReason
from .files import DiscoveredFile


class MatchedPair(BaseModel):
    """视频与字幕配对（字幕可以为空：视频已识别但还没有字幕）"""
    model_config = ConfigDict(frozen=True)

    video: DiscoveredFile = Field(description="视频文件")
    subtitles: List[DiscoveredFile] = Field(default_factory=list, description="关联字幕（有序）")

    @model_validator(mode="after")
    def _check_kinds(self) -> "MatchedPair":
        if self.video.kind != FileKind.VIDEO:
            raise ValueError(f"配对的视频文件种类错误: {self.video.full_path} ({self.video.kind.value})")
        for sub in self.subtitles:
            if sub.kind != FileKind.SUBTITLE:
                raise ValueError(f"配对的字幕文件种类错误: {sub.full_path} ({sub.kind.value})")
        return self


class MatchDecision(BaseModel):
    """
    字幕配对诊断

    不持久化，只用于界面提示和测试。ambiguous=True 即"不确定匹配"：
    多个候选视频分数在 epsilon 之内，引擎按规则选了其中一个。
    """
    model_config = ConfigDict(frozen=True)

    subtitle: DiscoveredFile = Field(description="字幕文件")
    candidate_video: Optional[DiscoveredFile] = Field(default=None, description="最佳候选视频")
    score: float = Field(default=0.0, description="最佳候选分数 0-1")
    reason: MatchReason = Field(description="决策原因")
    matched: bool = Field(default=False, description="是否已配对")
    ambiguous: bool = Field(default=False, description="是否为不确定匹配")
    alternatives: List[str] = Field(default_factory=list, description="分数接近的其他候选路径")


class PairingResult(BaseModel):
    """配对输出"""
    model_config = ConfigDict(frozen=True)

    pairs: List[MatchedPair] = Field(default_factory=list)
    orphans: List[DiscoveredFile] = Field(default_factory=list)
    decisions: List[MatchDecision] = Field(default_factory=list)
    skipped: List[DiscoveredFile] = Field(default_factory=list, description="压缩包/其他文件，不参与配对")
    files: List[DiscoveredFile] = Field(default_factory=list, description="输入快照，供 repair 使用")

    @property
    def successful_pairs(self) -> List[MatchedPair]:
        """至少有一个字幕的配对"""
        return [p for p in self.pairs if p.subtitles]

    @property
    def ambiguous_decisions(self) -> List[MatchDecision]:
        return [d for d in self.decisions if d.ambiguous]

    def pair_for(self, video_path: str) -> Optional[MatchedPair]:
        """按视频路径查找配对"""
        for pair in self.pairs:
            if pair.video.full_path == video_path:
                return pair
        return None

    def decision_for(self, subtitle_path: str) -> Optional[MatchDecision]:
        """按字幕路径查找诊断"""
        for decision in self.decisions:
            if decision.subtitle.full_path == subtitle_path:
                return decision
        return None
