import pytest

from subpair import PairingEngine, ValidationError
from subpair.config import PairingConfig
from subpair.models import FileKind, MatchReason


def test_exact_stem_pairs_in_same_directory(file_factory):
    video = file_factory("Movie.2020.1080p.mkv", size=100)
    subtitle = file_factory("Movie.2020.1080p.srt", size=10)

    result = PairingEngine().pair([video, subtitle])

    assert len(result.pairs) == 1
    assert result.pairs[0].video == video
    assert result.pairs[0].subtitles == [subtitle]
    assert result.orphans == []
    decision = result.decisions[0]
    assert decision.reason == MatchReason.EXACT_MATCH
    assert decision.score == 1.0
    assert decision.matched


def test_mismatched_episode_is_orphaned_with_rejected_candidate(file_factory):
    video = file_factory("Show.S01E01.mkv")
    subtitle = file_factory("Show.S01E02.srt")

    result = PairingEngine().pair([video, subtitle])

    assert result.orphans == [subtitle]
    assert result.pairs[0].subtitles == []
    assert result.successful_pairs == []
    decision = result.decision_for(subtitle.full_path)
    assert decision.reason == MatchReason.BELOW_THRESHOLD
    assert decision.candidate_video == video
    assert 0.0 < decision.score < 0.6
    assert not decision.matched


def test_subtitles_folder_falls_back_to_parent(file_factory):
    video = file_factory("A/Movie.mkv")
    english = file_factory("A/Subs/Movie.en.srt")
    french = file_factory("A/Subs/Movie.fr.srt")

    result = PairingEngine().pair([video, english, french])

    assert len(result.pairs) == 1
    assert result.pairs[0].subtitles == [english, french]
    assert result.orphans == []
    for decision in result.decisions:
        assert decision.reason == MatchReason.CROSS_DIRECTORY
        assert decision.score == pytest.approx(0.9)


def test_identical_basenames_are_ambiguous_and_larger_file_wins(file_factory):
    sample = file_factory("X/Movie.mkv", size=10)
    feature = file_factory("Y/Movie.mkv", size=1000)
    subtitle = file_factory("Movie.srt")

    result = PairingEngine().pair([sample, feature, subtitle])

    decision = result.decisions[0]
    assert decision.reason == MatchReason.AMBIGUOUS_MATCH
    assert decision.ambiguous
    assert decision.candidate_video == feature
    assert decision.alternatives == ["X/Movie.mkv"]
    assert result.pair_for("Y/Movie.mkv").subtitles == [subtitle]
    assert result.pair_for("X/Movie.mkv").subtitles == []
    assert result.ambiguous_decisions == [decision]


def test_ambiguous_tie_prefers_matching_movie_guess(file_factory):
    sample = file_factory("X/Movie.mkv", size=10, movie_guess="tt123")
    feature = file_factory("Y/Movie.mkv", size=1000, movie_guess="tt999")
    subtitle = file_factory("Movie.srt", movie_guess="tt123")

    result = PairingEngine().pair([sample, feature, subtitle])

    assert result.decisions[0].candidate_video == sample
    assert result.pair_for("X/Movie.mkv").subtitles == [subtitle]


def test_empty_input():
    result = PairingEngine().pair([])

    assert result.pairs == []
    assert result.orphans == []
    assert result.decisions == []


def test_duplicate_path_raises(file_factory):
    video = file_factory("Movie.mkv")

    with pytest.raises(ValidationError) as exc_info:
        PairingEngine().pair([video, file_factory("Movie.mkv")])

    assert exc_info.value.path == "Movie.mkv"


@pytest.mark.parametrize("full_path", ["A//Movie.srt", "A/../Movie.srt", "./Movie.srt", "/A/Movie.srt"])
def test_malformed_path_raises(file_factory, full_path):
    with pytest.raises(ValidationError):
        PairingEngine().pair([file_factory(full_path)])


def test_name_must_match_last_segment(file_factory):
    bad = file_factory("A/Movie.srt").model_copy(update={"name": "Other.srt"})

    with pytest.raises(ValidationError):
        PairingEngine().pair([bad])


def test_non_file_input_raises():
    with pytest.raises(ValidationError):
        PairingEngine().pair(["Movie.mkv"])


def test_same_directory_beats_other_directories(file_factory):
    local = file_factory("A/Movie.mkv", size=1)
    remote = file_factory("B/Movie.mkv", size=1000)
    subtitle = file_factory("A/Movie.srt")

    result = PairingEngine().pair([remote, local, subtitle])

    decision = result.decisions[0]
    assert decision.candidate_video == local
    assert decision.reason == MatchReason.EXACT_MATCH
    assert not decision.ambiguous


def test_release_tags_are_ignored_for_similar_names(file_factory):
    video = file_factory("Movie.2020.1080p.BluRay.x264-GRP.mkv")
    subtitle = file_factory("Movie.2020.srt")

    result = PairingEngine().pair([video, subtitle])

    decision = result.decisions[0]
    assert decision.matched
    assert decision.reason == MatchReason.SIMILAR_NAME
    assert decision.score == pytest.approx(0.99)


def test_exact_candidate_preferred_over_similar(file_factory):
    exact = file_factory("Movie.Part.1.mkv")
    similar = file_factory("Movie.Part.2.mkv")
    subtitle = file_factory("Movie.Part.1.en.srt")

    result = PairingEngine().pair([exact, similar, subtitle])

    assert result.decisions[0].candidate_video == exact
    assert result.decisions[0].reason == MatchReason.EXACT_MATCH


def test_subtitle_without_nearby_video_has_no_candidate(file_factory):
    video = file_factory("A/B/C/Movie.mkv")
    subtitle = file_factory("Z/Movie.srt")

    result = PairingEngine().pair([video, subtitle])

    decision = result.decisions[0]
    assert decision.reason == MatchReason.NO_CANDIDATE
    assert decision.candidate_video is None
    assert decision.score == 0.0
    assert result.orphans == [subtitle]


def test_archives_and_other_files_are_skipped(file_factory):
    video = file_factory("Movie.mkv")
    archive = file_factory("Movie.zip")
    other = file_factory("Movie.nfo")

    result = PairingEngine().pair([archive, video, other])

    assert result.skipped == [archive, other]
    assert archive.kind == FileKind.ARCHIVE
    assert len(result.pairs) == 1
    assert result.decisions == []


def test_every_video_appears_once_in_input_order(file_factory):
    files = [
        file_factory("B.mkv"),
        file_factory("A.mkv"),
        file_factory("A.srt"),
    ]

    result = PairingEngine().pair(files)

    assert [p.video.full_path for p in result.pairs] == ["B.mkv", "A.mkv"]
    assert result.pair_for("A.mkv").subtitles == [files[2]]


def test_decisions_follow_subtitle_input_order(file_factory):
    files = [
        file_factory("Movie.mkv"),
        file_factory("Zeta.srt"),
        file_factory("Movie.srt"),
        file_factory("Alpha.srt"),
    ]

    result = PairingEngine().pair(files)

    assert [d.subtitle.full_path for d in result.decisions] == ["Zeta.srt", "Movie.srt", "Alpha.srt"]
    assert [s.full_path for s in result.orphans] == ["Zeta.srt", "Alpha.srt"]


def test_input_is_not_mutated(file_factory):
    files = [file_factory("Movie.mkv"), file_factory("Movie.srt")]
    snapshot = list(files)

    PairingEngine().pair(files)

    assert files == snapshot


def test_repair_uses_new_metadata(file_factory):
    sample = file_factory("X/Movie.mkv", size=10)
    feature = file_factory("Y/Movie.mkv", size=1000)
    subtitle = file_factory("Movie.srt")
    engine = PairingEngine()

    first = engine.pair([sample, feature, subtitle])
    assert first.decisions[0].candidate_video == feature

    repaired = engine.repair(
        first,
        [
            sample.with_metadata(movie_guess="tt123"),
            subtitle.with_metadata(movie_guess="tt123", language_guess="en"),
        ],
    )

    assert repaired.decisions[0].candidate_video.full_path == "X/Movie.mkv"
    assert repaired.pair_for("X/Movie.mkv").subtitles[0].language_guess == "en"
    # 原结果不变
    assert first.decisions[0].candidate_video == feature


def test_repair_rejects_unknown_path(file_factory):
    engine = PairingEngine()
    result = engine.pair([file_factory("Movie.mkv")])

    with pytest.raises(ValidationError):
        engine.repair(result, [file_factory("Other.mkv")])


def test_repair_rejects_kind_change(file_factory):
    engine = PairingEngine()
    result = engine.pair([file_factory("Movie.mkv")])
    changed = result.files[0].model_copy(update={"kind": FileKind.SUBTITLE})

    with pytest.raises(ValidationError):
        engine.repair(result, [changed])


def test_custom_threshold(file_factory):
    video = file_factory("Show.S01E01.mkv")
    subtitle = file_factory("Show.S01E02.srt")

    result = PairingEngine(PairingConfig(min_score=0.1)).pair([video, subtitle])

    assert result.pairs[0].subtitles == [subtitle]
    assert result.decisions[0].reason == MatchReason.SIMILAR_NAME


def test_tie_break_only_among_candidates_above_threshold(file_factory):
    closer = file_factory("Movie.Names.mkv", size=10)
    larger = file_factory("Movie.Nam.mkv", size=1000)
    subtitle = file_factory("Movie.Name.srt")

    result = PairingEngine(PairingConfig(min_score=0.905)).pair([closer, larger, subtitle])

    assert result.orphans == []
    assert result.pair_for(closer.full_path).subtitles == [subtitle]
    assert result.pair_for(larger.full_path).subtitles == []
    decision = result.decision_for(subtitle.full_path)
    assert decision.matched
    assert decision.candidate_video == closer
    assert decision.score == pytest.approx(10 / 11)
    assert decision.ambiguous
    assert decision.alternatives == [larger.full_path]


def test_rejected_subtitle_records_highest_scoring_candidate(file_factory):
    closer = file_factory("Movie.Names.mkv", size=10)
    larger = file_factory("Movie.Nam.mkv", size=1000)
    subtitle = file_factory("Movie.Name.srt")

    result = PairingEngine(PairingConfig(min_score=0.95)).pair([closer, larger, subtitle])

    assert result.orphans == [subtitle]
    decision = result.decision_for(subtitle.full_path)
    assert decision.reason == MatchReason.BELOW_THRESHOLD
    assert decision.candidate_video == closer
    assert decision.score == pytest.approx(10 / 11)
