"""
subpair - 视频/字幕配对

把一批拖放的文件整理成 视频 ↔ 字幕 配对，供上传前的预览和提交使用。
"""

from subpair.errors import ValidationError
from subpair.models import (
    DiscoveredFile,
    FileKind,
    MatchDecision,
    MatchedPair,
    MatchReason,
    PairingResult,
)
from subpair.pairing import PairingEngine
from subpair.session import UploadSession

__version__ = "0.1.0"

__all__ = [
    "ValidationError",
    "DiscoveredFile",
    "FileKind",
    "MatchDecision",
    "MatchedPair",
    "MatchReason",
    "PairingResult",
    "PairingEngine",
    "UploadSession",
    "__version__",
]
