"""
枚举类型

包含：
- FileKind: 文件种类（视频/字幕/压缩包/其他）
- MatchReason: 配对决策原因
"""

from enum import Enum


class FileKind(str, Enum):
    """文件种类"""
    VIDEO = "video"
    SUBTITLE = "subtitle"
    ARCHIVE = "archive"
    OTHER = "other"


class MatchReason(str, Enum):
    """配对决策原因（用于诊断展示）"""
    EXACT_MATCH = "exact_match"          # 去掉扩展名/语言后缀后文件名完全一致
    SIMILAR_NAME = "similar_name"        # 同目录相似文件名
    CROSS_DIRECTORY = "cross_directory"  # 通过上级/兄弟目录回退匹配
    AMBIGUOUS_MATCH = "ambiguous_match"  # 多个候选分数接近，按规则择一
    BELOW_THRESHOLD = "below_threshold"  # 最佳候选低于阈值
    NO_CANDIDATE = "no_candidate"        # 附近目录没有任何视频
