"""
数据模型定义

- 所有数据结构使用 Pydantic 模型
- 配对输入/输出均为不可变（frozen）模型，引擎不修改输入

模型分类：
- enums.py: 枚举类型
- files.py: 文件相关模型
- pairing.py: 配对结果模型
- output.py: 调用方摘要模型
"""

from .enums import FileKind, MatchReason
from .files import DiscoveredFile, FileError, EmbeddedTrack
from .pairing import MatchedPair, MatchDecision, PairingResult
from .output import PairingSummaryOutput

__all__ = [
    # 枚举
    "FileKind",
    "MatchReason",
    # 文件
    "DiscoveredFile",
    "FileError",
    "EmbeddedTrack",
    # 配对结果
    "MatchedPair",
    "MatchDecision",
    "PairingResult",
    # 摘要
    "PairingSummaryOutput",
]
