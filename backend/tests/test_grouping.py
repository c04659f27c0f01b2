import pytest

from rallylog.schemas import MatchBoundary, ScoreEvent
from rallylog.services import (
    distribute_evenly,
    reconstruct,
    reconstruct_points,
    split_on_score_reset,
)


def _boundaries(*pairs):
    return [MatchBoundary.model_validate(p) for p in pairs]


def test_empty_match_is_a_single_empty_game():
    groups = reconstruct([])
    assert len(groups) == 1
    group = groups[0]
    assert group.title == "Game 1"
    assert (group.player1_games, group.player2_games) == (0, 0)
    assert group.points == []
    assert group.is_win is True


def test_without_boundaries_group_carries_final_score(make_events):
    groups = reconstruct(make_events("YYOYO"))
    assert [g.title for g in groups] == ["Game 1"]
    assert (groups[0].player1_games, groups[0].player2_games) == (3, 2)
    assert len(groups[0].points) == 5


@pytest.mark.parametrize("event_count", [0, 1, 4, 7, 10, 11])
@pytest.mark.parametrize("boundary_count", [0, 1, 2, 3, 5])
def test_group_count_and_concatenation(make_events, event_count, boundary_count):
    events = make_events(("YO" * 6)[:event_count])
    boundaries = _boundaries(*[(6, i) for i in range(boundary_count)])

    groups = reconstruct(events, boundaries)

    assert len(groups) == max(1, boundary_count)
    flattened = [p for g in groups for p in g.points]
    assert flattened == reconstruct_points(events)


def test_events_split_into_ceil_sized_chunks(make_events):
    groups = reconstruct(make_events("YOYOYOYOYO"), _boundaries((6, 4), (3, 6), (7, 6), (6, 2)))
    assert [len(g.points) for g in groups] == [3, 3, 3, 1]

    groups = reconstruct(make_events("YYOO"), _boundaries((11, 3), (9, 11), (11, 7)))
    assert [len(g.points) for g in groups] == [2, 2, 0]


def test_sequence_numbers_continue_across_groups(make_events):
    groups = reconstruct(make_events("YOYOY"), _boundaries((6, 3), (6, 4)))
    assert [p.sequence_number for p in groups[1].points] == [4, 5]


def test_titles_follow_sport():
    boundaries = _boundaries((11, 5), (8, 11))
    assert [g.title for g in reconstruct([], boundaries, sport="tennis")] == ["Set 1", "Set 2"]
    assert [g.title for g in reconstruct([], boundaries, sport="padel")] == ["Set 1", "Set 2"]
    assert [g.title for g in reconstruct([], boundaries, sport="pickleball")] == [
        "Game 1",
        "Game 2",
    ]


def test_boundary_scores_and_win_flag():
    boundaries = [
        MatchBoundary(player1_games=7, player2_games=6, tiebreak_player1=7, tiebreak_player2=5),
        MatchBoundary(player1_games=4, player2_games=6),
        MatchBoundary(player1_games=6, player2_games=6),
    ]
    groups = reconstruct([], boundaries, sport="tennis")
    assert (groups[0].tiebreak_player1, groups[0].tiebreak_player2) == (7, 5)
    assert groups[1].tiebreak_player1 is None
    assert [g.is_win for g in groups] == [True, False, True]


def test_half_a_tiebreak_score_is_rejected():
    with pytest.raises(ValueError):
        MatchBoundary(player1_games=7, player2_games=6, tiebreak_player1=7)


def test_empty_boundary_list_collapses_to_single_group(make_events):
    groups = reconstruct(make_events("YOY"), [])
    assert [g.title for g in groups] == ["Game 1"]
    assert len(groups[0].points) == 3


def test_distribute_evenly_non_positive_count_is_one_chunk(make_events):
    points = reconstruct_points(make_events("YOYO"))
    assert distribute_evenly(points, 0) == [points]
    assert distribute_evenly(points, -3) == [points]


def test_split_on_score_reset_finds_games():
    events = [
        ScoreEvent(player1_score=p1, player2_score=p2, scoring_player_hint=hint)
        for p1, p2, hint in [
            (1, 0, "you"),
            (2, 0, "you"),
            (3, 0, "you"),
            (4, 0, "you"),
            (0, 1, "opponent"),
            (1, 1, "you"),
        ]
    ]
    points = reconstruct_points(events, sport="tennis")
    chunks = split_on_score_reset(points)
    assert [len(c) for c in chunks] == [4, 2]

    groups = reconstruct(events, sport="tennis", distribute=split_on_score_reset)
    assert [g.title for g in groups] == ["Game 1", "Game 2"]
    assert [(g.player1_games, g.player2_games) for g in groups] == [(4, 0), (1, 1)]


def test_split_on_score_reset_with_no_points():
    assert split_on_score_reset([]) == [[]]


def test_point_groups_serialize_with_camel_case(scenario_a):
    payload = reconstruct(scenario_a)[0].model_dump(by_alias=True)
    assert payload["title"] == "Game 1"
    assert payload["isWin"] is True
    assert payload["points"][0]["server"] == "You S1"
    assert payload["points"][2]["isSideOut"] is False


def _reset_events():
    # three games: 3 points, 3 points, then 1 point
    scores = [(1, 0), (2, 0), (4, 0), (0, 1), (0, 2), (0, 4), (1, 0)]
    return [ScoreEvent(player1_score=p1, player2_score=p2) for p1, p2 in scores]


def test_score_reset_chunks_beyond_boundaries_fold_into_last_group():
    events = _reset_events()
    assert [len(c) for c in split_on_score_reset(reconstruct_points(events, "tennis"))] == [3, 3, 1]

    groups = reconstruct(
        events, _boundaries((6, 4)), sport="tennis", distribute=split_on_score_reset
    )
    assert len(groups) == 1
    assert groups[0].title == "Set 1"
    assert (groups[0].player1_games, groups[0].player2_games) == (6, 4)
    assert [p.sequence_number for p in groups[0].points] == list(range(1, 8))

    groups = reconstruct(
        events, _boundaries((6, 4), (2, 6)), sport="tennis", distribute=split_on_score_reset
    )
    assert [len(g.points) for g in groups] == [3, 4]
    assert [g.title for g in groups] == ["Set 1", "Set 2"]
