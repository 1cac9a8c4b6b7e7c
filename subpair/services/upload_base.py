"""
上传服务抽象基类

上传服务独立决定每个字幕是否可以上传（重复检查、等级限制等），
这里只定义配对结果的交接方式。
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List

from subpair.models import MatchedPair


@dataclass
class UploadOutcome:
    """单个字幕的上传结果"""
    video_path: str
    subtitle_path: str
    success: bool
    message: str = ""


class UploadService(ABC):
    """上传服务抽象基类"""

    @abstractmethod
    async def upload(self, pairs: List[MatchedPair]) -> List[UploadOutcome]:
        """
        上传配对结果

        Args:
            pairs: 至少带一个字幕的配对

        Returns:
            每个字幕一条上传结果
        """
        pass
