from subpair.config import get_config
from subpair.models import FileKind
from subpair.utils import FileFilter, get_file_filter
from subpair.utils.file_filter import get_file_kind, is_media_file


def test_default_kinds_from_config():
    assert get_file_kind("Movie.MKV") == FileKind.VIDEO
    assert get_file_kind("Movie.en.srt") == FileKind.SUBTITLE
    assert get_file_kind("Subs.zip") == FileKind.ARCHIVE
    assert get_file_kind("Movie.nfo") == FileKind.OTHER
    assert is_media_file("Movie.ass")
    assert not is_media_file("Subs.rar")


def test_explicit_extensions_override_config():
    file_filter = FileFilter(video_extensions=["mkv"], subtitle_extensions=[".SRT"], archive_extensions=[])

    assert file_filter.is_video_file("a.mkv")
    assert not file_filter.is_video_file("a.mp4")
    assert file_filter.is_subtitle_file("a.srt")
    assert file_filter.get_file_kind("a.zip") == FileKind.OTHER


def test_exclude_patterns():
    file_filter = get_file_filter()

    assert file_filter.should_exclude(".DS_Store")
    assert file_filter.should_exclude("__MACOSX")
    assert file_filter.should_exclude("A/.hidden")
    assert file_filter.should_exclude("Thumbs.db")
    assert not file_filter.should_exclude("Movie")
    assert not file_filter.should_exclude("A/Movie.mkv")


def test_global_filter_follows_config(default_config):
    default_config.scan.video_extensions.append(".foo")

    assert get_file_filter().is_video_file("clip.foo")
    assert get_config() is default_config
