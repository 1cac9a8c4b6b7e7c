import pytest

from subpair.utils import parse_media_filename
from subpair.utils.media_parser import is_noise_token


def test_parse_movie_release():
    info = parse_media_filename("Movie.Name.2020.1080p.BluRay.x264")

    assert info.title == "Movie Name"
    assert info.year == 2020
    assert info.episode_key is None


def test_parse_episode_release():
    info = parse_media_filename("Show.S01E02.720p")

    assert info.title == "Show"
    assert info.season == 1
    assert info.episode == 2
    assert info.episode_key == (1, 2)


@pytest.mark.parametrize(
    "name, key",
    [
        ("Show.1x05", (1, 5)),
        ("Show.S03E10E11", (3, 10)),
        ("Show.EP07", (1, 7)),
        ("Show.E05", (1, 5)),
        ("动画 第12集", (1, 12)),
    ],
)
def test_episode_patterns(name, key):
    assert parse_media_filename(name).episode_key == key


def test_release_tags_inside_words_do_not_cut_title():
    info = parse_media_filename("Infinity.Pool.2023")

    assert info.title == "Infinity Pool"
    assert info.year == 2023


def test_year_in_parentheses():
    info = parse_media_filename("Movie (1999)")

    assert info.year == 1999
    assert info.title == "Movie"


def test_noise_tokens():
    for token in ("1080p", "x264", "HEVC", "bluray", "web", "dl", "aac2", "proper"):
        assert is_noise_token(token), token
    for token in ("movie", "show", "2020", "s01e01"):
        assert not is_noise_token(token), token
