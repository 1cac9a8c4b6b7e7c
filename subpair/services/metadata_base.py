"""
元数据服务抽象基类

元数据补全是可选的、异步的：配对引擎在没有任何元数据时也能工作，
元数据到达后通过 PairingEngine.repair 重新打分。
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import List, Sequence

from subpair.models import DiscoveredFile

logger = logging.getLogger(__name__)


class MetadataService(ABC):
    """
    元数据服务抽象基类

    实现方只需提供单文件的 enrich，批量补全由基类负责并发和容错。
    """

    @abstractmethod
    async def enrich(self, file: DiscoveredFile) -> DiscoveredFile:
        """
        补全单个文件的元数据

        Args:
            file: 原始文件

        Returns:
            补全后的新实例（不修改原实例）
        """
        pass

    async def enrich_many(
        self,
        files: Sequence[DiscoveredFile],
        max_concurrency: int = 4
    ) -> List[DiscoveredFile]:
        """
        批量补全，保持输入顺序

        单个文件失败时记录警告并保留原文件。
        """
        semaphore = asyncio.Semaphore(max_concurrency)

        async def _enrich_one(file: DiscoveredFile) -> DiscoveredFile:
            async with semaphore:
                try:
                    return await self.enrich(file)
                except Exception as e:
                    logger.warning(f"⚠️ 元数据补全失败: {file.full_path}: {e}")
                    return file

        return list(await asyncio.gather(*(_enrich_one(f) for f in files)))
