import posixpath

import pytest

from subpair import config as config_module
from subpair.config import AppConfig
from subpair.models import DiscoveredFile, FileKind
from subpair.utils import file_filter as file_filter_module


_KINDS = {
    ".mkv": FileKind.VIDEO,
    ".mp4": FileKind.VIDEO,
    ".avi": FileKind.VIDEO,
    ".srt": FileKind.SUBTITLE,
    ".ass": FileKind.SUBTITLE,
    ".sub": FileKind.SUBTITLE,
    ".zip": FileKind.ARCHIVE,
    ".rar": FileKind.ARCHIVE,
}


def make_file(full_path: str, size: int = 0, **metadata) -> DiscoveredFile:
    """按扩展名推断种类构建 DiscoveredFile"""
    name = posixpath.basename(full_path)
    kind = _KINDS.get(posixpath.splitext(name)[1].lower(), FileKind.OTHER)
    return DiscoveredFile(full_path=full_path, name=name, size=size, kind=kind, **metadata)


@pytest.fixture(autouse=True)
def default_config(monkeypatch):
    """每个测试使用默认配置，不读取磁盘上的配置文件"""
    config = AppConfig()
    monkeypatch.setattr(config_module, "_config", config)
    monkeypatch.setattr(file_filter_module, "_filter", None)
    return config


@pytest.fixture
def file_factory():
    return make_file
