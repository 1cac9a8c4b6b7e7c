"""
调用方输出模型

用于界面展示的配对摘要
"""

from pydantic import BaseModel, Field


class PairingSummaryOutput(BaseModel):
    """配对结果摘要"""
    total_files: int = Field(default=0, description="收集到的文件数")
    video_count: int = Field(default=0, description="视频文件数")
    subtitle_count: int = Field(default=0, description="字幕文件数")
    pair_count: int = Field(default=0, description="有字幕的配对数")
    orphan_count: int = Field(default=0, description="孤立字幕数")
    ambiguous_count: int = Field(default=0, description="不确定匹配数")
    skipped_count: int = Field(default=0, description="跳过的文件数")
    error_count: int = Field(default=0, description="收集阶段错误数")
