"""
配置加载模块

从 subpair.yaml / config.yaml 加载配置，支持环境变量覆盖
"""

import os
import logging
from pathlib import Path
from typing import Optional, List

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


logger = logging.getLogger(__name__)

CONFIG_FILE_NAMES = ["subpair.yaml", "subpair.yml", "config.yaml", "config.yml"]


class ScanConfig(BaseModel):
    """扫描配置（拖放文件收集）"""
    video_extensions: List[str] = Field(default_factory=lambda: [
        ".mkv", ".mp4", ".avi", ".mov", ".wmv", ".flv", ".m4v",
        ".ts", ".m2ts", ".mpg", ".mpeg", ".rmvb", ".webm", ".ogm", ".divx"
    ])
    subtitle_extensions: List[str] = Field(default_factory=lambda: [
        ".srt", ".ass", ".ssa", ".sub", ".vtt", ".smi", ".txt", ".mpl"
    ])
    archive_extensions: List[str] = Field(default_factory=lambda: [
        ".zip", ".rar", ".7z"
    ])
    exclude_patterns: List[str] = Field(default_factory=lambda: [
        ".*", "__MACOSX", "@eaDir", "#recycle", "lost+found",
        "System Volume Information", "$RECYCLE.BIN", "Thumbs.db", ".DS_Store"
    ])
    max_depth: Optional[int] = 10


class PairingConfig(BaseModel):
    """配对引擎参数"""
    min_score: float = Field(default=0.6, ge=0.0, le=1.0)
    ambiguity_epsilon: float = Field(default=0.02, ge=0.0)
    cross_directory_factor: float = Field(default=0.9, gt=0.0, le=1.0)
    episode_mismatch_penalty: float = Field(default=0.25, ge=0.0, le=1.0)
    year_mismatch_penalty: float = Field(default=0.5, ge=0.0, le=1.0)


class MetadataConfig(BaseModel):
    """元数据补全配置"""
    compute_hash: bool = True
    max_concurrency: int = Field(default=4, ge=1)


class LoggingConfig(BaseModel):
    """日志配置"""
    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class AppConfig(BaseModel):
    """应用总配置"""
    scan: ScanConfig = Field(default_factory=ScanConfig)
    pairing: PairingConfig = Field(default_factory=PairingConfig)
    metadata: MetadataConfig = Field(default_factory=MetadataConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


class EnvOverrides(BaseSettings):
    """
    环境变量覆盖项

    只收集显式设置的变量，未设置的字段保持 None，不覆盖配置文件。
    """
    model_config = SettingsConfigDict(env_prefix="SUBPAIR_")

    min_score: Optional[float] = None
    ambiguity_epsilon: Optional[float] = None
    log_level: Optional[str] = None
    compute_hash: Optional[bool] = None


def find_config_file() -> Optional[Path]:
    """
    查找配置文件

    顺序: SUBPAIR_CONFIG 指定的文件 > 当前目录 > 项目根目录（subpair 包的上级）
    """
    explicit = os.getenv("SUBPAIR_CONFIG")
    if explicit and Path(explicit).exists():
        return Path(explicit)

    for directory in (Path.cwd(), Path(__file__).resolve().parent.parent):
        found = next(
            (directory / name for name in CONFIG_FILE_NAMES if (directory / name).exists()),
            None,
        )
        if found is not None:
            return found

    return None


def _apply_env_overrides(raw_config: dict) -> dict:
    """把环境变量覆盖合并进原始配置字典"""
    overrides = EnvOverrides()

    if overrides.min_score is not None:
        raw_config.setdefault("pairing", {})["min_score"] = overrides.min_score
    if overrides.ambiguity_epsilon is not None:
        raw_config.setdefault("pairing", {})["ambiguity_epsilon"] = overrides.ambiguity_epsilon
    if overrides.log_level:
        raw_config.setdefault("logging", {})["level"] = overrides.log_level.upper()
    if overrides.compute_hash is not None:
        raw_config.setdefault("metadata", {})["compute_hash"] = overrides.compute_hash

    return raw_config


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """
    加载配置文件

    配置优先级: 环境变量 > 配置文件 > 默认值

    Args:
        config_path: 显式指定的配置文件，None 则自动查找

    Returns:
        AppConfig: 应用配置对象
    """
    if config_path is None:
        config_path = find_config_file()

    if config_path is None:
        logger.debug("未找到配置文件，使用默认配置")
        raw_config = {}
    else:
        logger.info(f"📄 加载配置文件: {config_path}")
        with open(config_path, "r", encoding="utf-8") as f:
            raw_config = yaml.safe_load(f) or {}

    raw_config = _apply_env_overrides(raw_config)
    return AppConfig(**raw_config)


def configure_logging(config: Optional[AppConfig] = None):
    """按配置初始化根日志"""
    config = config or get_config()
    logging.basicConfig(
        level=getattr(logging, config.logging.level.upper(), logging.INFO),
        format=config.logging.format,
    )


# 全局配置实例
_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """
    获取全局配置实例（单例模式）
    """
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reload_config() -> AppConfig:
    """
    重新加载配置
    """
    global _config
    _config = load_config()
    return _config
