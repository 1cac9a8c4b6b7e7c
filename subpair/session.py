"""
上传会话

一次拖放/文件选择对应一个会话。会话持有收集器、配对引擎、元数据服务和
本批次的结果，上传完成或重置后丢弃，不跨会话保存任何数据。

使用方式：
    session = UploadSession()
    session.add_paths(["/downloads/Movie.2020"])
    result = session.pair()
    result = await session.enrich()        # 元数据到达后重新打分
    outcomes = await session.upload(upload_service)
"""

import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, Union

from subpair.config import AppConfig, get_config
from subpair.models import (
    DiscoveredFile,
    FileError,
    FileKind,
    PairingResult,
    PairingSummaryOutput,
)
from subpair.pairing import PairingEngine
from subpair.services.collector import CollectionResult, DirectoryCollector
from subpair.services.local_metadata import LocalMetadataService
from subpair.services.metadata_base import MetadataService
from subpair.services.upload_base import UploadOutcome, UploadService

logger = logging.getLogger(__name__)


class UploadSession:
    """单批次上传会话"""

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        collector: Optional[DirectoryCollector] = None,
        engine: Optional[PairingEngine] = None,
        metadata_service: Optional[MetadataService] = None
    ):
        """
        初始化会话

        Args:
            config: 应用配置，None 则使用全局配置
            collector: 文件收集器
            engine: 配对引擎
            metadata_service: 元数据服务，None 则在 enrich 时使用本地元数据服务
        """
        self.config = config or get_config()
        self.collector = collector or DirectoryCollector(max_depth=self.config.scan.max_depth)
        self.engine = engine or PairingEngine(self.config.pairing)
        self.metadata_service = metadata_service
        self.reset()

    def reset(self):
        """清空本批次的文件和结果"""
        self.files: List[DiscoveredFile] = []
        self.errors: List[FileError] = []
        self.sources: Dict[str, Path] = {}
        self.roots: Dict[str, Path] = {}
        self.result: Optional[PairingResult] = None

    # ============================================================
    # 文件收集
    # ============================================================

    def add_paths(self, paths: Iterable[Union[str, Path]]) -> CollectionResult:
        """收集本地路径并加入会话（与已有文件同名的目录会改名）"""
        collected = self.collector.collect(paths, roots=self.roots)
        self.roots = collected.roots
        self.errors.extend(collected.errors)
        self.sources.update(collected.sources)
        self.add_files(collected.files)
        return collected

    def add_files(self, files: Sequence[DiscoveredFile]) -> int:
        """
        直接加入文件（如容器内提取出的字幕）

        已存在的路径会被跳过。

        Returns:
            实际加入的文件数
        """
        known = {f.full_path for f in self.files}
        added = 0
        for file in files:
            if file.full_path in known:
                logger.debug(f"会话中已存在，跳过: {file.full_path}")
                continue
            known.add(file.full_path)
            self.files.append(file)
            added += 1
        # 新文件加入后旧结果失效
        if added:
            self.result = None
        return added

    # ============================================================
    # 配对
    # ============================================================

    def pair(self) -> PairingResult:
        """对会话中的文件执行配对"""
        self.result = self.engine.pair(self.files)
        self._log_result(self.result)
        return self.result

    async def enrich(self) -> PairingResult:
        """
        补全元数据后重新打分

        还没有配对结果时先配对一次。
        """
        if self.result is None:
            self.pair()

        service = self.metadata_service or LocalMetadataService(
            self.sources, compute_hash=self.config.metadata.compute_hash
        )
        logger.info(f"🔍 补全元数据: {len(self.result.files)} 个文件")
        updated = await service.enrich_many(
            self.result.files, max_concurrency=self.config.metadata.max_concurrency
        )

        self.result = self.engine.repair(self.result, updated)
        self.files = list(self.result.files)
        self._log_result(self.result)
        return self.result

    def summary(self) -> PairingSummaryOutput:
        """配对摘要（界面展示用）"""
        result = self.result
        return PairingSummaryOutput(
            total_files=len(self.files),
            video_count=sum(1 for f in self.files if f.kind == FileKind.VIDEO),
            subtitle_count=sum(1 for f in self.files if f.kind == FileKind.SUBTITLE),
            pair_count=len(result.successful_pairs) if result else 0,
            orphan_count=len(result.orphans) if result else 0,
            ambiguous_count=len(result.ambiguous_decisions) if result else 0,
            skipped_count=len(result.skipped) if result else 0,
            error_count=len(self.errors),
        )

    # ============================================================
    # 上传交接
    # ============================================================

    async def upload(self, service: UploadService) -> List[UploadOutcome]:
        """把带字幕的配对交给上传服务"""
        if self.result is None:
            self.pair()

        pairs = self.result.successful_pairs
        if not pairs:
            logger.info("📭 没有可上传的配对")
            return []

        logger.info(f"🚀 提交上传: {len(pairs)} 个配对")
        return await service.upload(pairs)

    @staticmethod
    def _log_result(result: PairingResult):
        logger.info(
            f"🎯 配对完成 | 配对: {len(result.successful_pairs)} | "
            f"孤立字幕: {len(result.orphans)} | 跳过: {len(result.skipped)}"
        )
        for decision in result.ambiguous_decisions:
            logger.warning(
                f"⚠️ 不确定匹配: {decision.subtitle.full_path} → "
                f"{decision.candidate_video.full_path if decision.candidate_video else '-'} "
                f"(候选: {', '.join(decision.alternatives)})"
            )
        for orphan in result.orphans:
            decision = result.decision_for(orphan.full_path)
            logger.debug(
                f"孤立字幕: {orphan.full_path} ({decision.reason.value}, score={decision.score:.2f})"
            )
