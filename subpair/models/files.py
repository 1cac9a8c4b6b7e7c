"""
文件相关模型

包含：
- DiscoveredFile: 收集到的文件（会话内不可变）
- FileError: 收集阶段的文件级错误
- EmbeddedTrack: 视频容器内的字幕轨
"""

import posixpath
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .enums import FileKind


class DiscoveredFile(BaseModel):
    """收集到的文件"""
    model_config = ConfigDict(frozen=True)

    full_path: str = Field(description="会话内完整路径，如 Movie/Subs/Movie.en.srt")
    name: str = Field(description="文件名")
    size: int = Field(default=0, ge=0, description="文件大小（字节）")
    kind: FileKind = Field(description="文件种类")
    content_hash: Optional[str] = Field(default=None, description="视频哈希")
    language_guess: Optional[str] = Field(default=None, description="ISO 639 语言代码")
    movie_guess: Optional[str] = Field(default=None, description="外部影片标识（不透明）")

    @field_validator("full_path")
    @classmethod
    def _normalize_separators(cls, value: str) -> str:
        return value.replace("\\", "/")

    @property
    def directory(self) -> str:
        """所在目录，会话根目录为空字符串"""
        return posixpath.dirname(self.full_path)

    @property
    def stem(self) -> str:
        """去掉最后一个扩展名的文件名"""
        return posixpath.splitext(self.name)[0]

    @property
    def extension(self) -> str:
        return posixpath.splitext(self.name)[1].lower()

    @property
    def is_video(self) -> bool:
        return self.kind == FileKind.VIDEO

    @property
    def is_subtitle(self) -> bool:
        return self.kind == FileKind.SUBTITLE

    def with_metadata(
        self,
        content_hash: Optional[str] = None,
        language_guess: Optional[str] = None,
        movie_guess: Optional[str] = None,
    ) -> "DiscoveredFile":
        """
        返回补全元数据后的新实例（原实例不变）

        只覆盖传入的非空字段。
        """
        update = {
            key: value
            for key, value in (
                ("content_hash", content_hash),
                ("language_guess", language_guess),
                ("movie_guess", movie_guess),
            )
            if value is not None
        }
        if not update:
            return self
        return self.model_copy(update=update)


class FileError(BaseModel):
    """收集阶段的文件级错误（压缩包损坏、目录不可读等）"""
    path: str = Field(description="出错的路径")
    message: str = Field(description="错误描述")


class EmbeddedTrack(BaseModel):
    """视频容器内的字幕轨"""
    stream_index: int = Field(ge=0, description="流序号")
    language: Optional[str] = Field(default=None, description="轨道语言，未知为 None")
    size: int = Field(default=0, ge=0, description="提取后的大小（字节）")
    extension: str = Field(default=".srt", description="提取格式")
