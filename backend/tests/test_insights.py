from rallylog.schemas import ScoreEvent
from rallylog.services import aggregate


def _event(p1, p2, hint="", serve=False, **kwargs):
    return ScoreEvent(
        player1_score=p1,
        player2_score=p2,
        scoring_player_hint=hint,
        is_serve_point=serve,
        **kwargs,
    )


def test_empty_match_is_all_zeros():
    insights = aggregate([])

    assert insights.total_points == 0
    assert insights.points_won == 0
    assert insights.point_win_pct == 0
    assert insights.is_win is False

    serve = insights.serve
    assert serve.you_served_points == serve.opponent_served_points == 0
    assert serve.your_serve_win_rate == 0.0
    assert serve.partner_serve_win_rate == 0.0
    assert serve.return_rate == 0.0
    assert serve.total_serve_points == 0

    momentum = insights.momentum
    assert momentum.your_max_streak == momentum.opponent_max_streak == 0
    assert momentum.lead_changes == 0
    assert momentum.rolling_win_pct == []

    clutch = insights.clutch
    assert clutch.game_points_played == 0
    assert clutch.clutch_rate == 0.0
    assert clutch.break_point_conversion_rate == 0.0

    assert insights.key_moments == []
    assert insights.story is None


def test_single_event_does_not_crash():
    insights = aggregate([_event(0, 1, "opponent")], sport_type="tennis")
    assert insights.total_points == 1
    assert insights.points_won == 0
    assert insights.momentum.opponent_max_streak == 1


def test_singles_serve_split(scenario_a):
    serve = aggregate(scenario_a).serve
    assert serve.you_served_points == 3
    assert serve.you_served_points_won == 2
    assert serve.your_serve_win_pct == 67
    assert serve.partner_served_points == 0
    assert serve.opponent_served_points == 0
    assert serve.return_rate == 0.0
    assert serve.points_won_on_serve == 2
    assert serve.total_serve_points == 3


def test_doubles_second_server_is_partner(scenario_a):
    serve = aggregate(scenario_a, is_doubles=True).serve
    assert (serve.you_served_points, serve.you_served_points_won) == (2, 2)
    assert (serve.partner_served_points, serve.partner_served_points_won) == (1, 0)
    assert serve.your_serve_win_rate == 1.0
    assert serve.partner_serve_win_rate == 0.0


def test_return_ratio_label_depends_on_sport():
    events = [
        _event(0, 1, "opponent", serve=True),
        _event(1, 1, "you"),
        _event(1, 2, "opponent"),
    ]
    pickleball = aggregate(events, sport_type="pickleball").serve
    tennis = aggregate(events, sport_type="tennis").serve

    assert pickleball.opponent_served_points == 2
    assert pickleball.opponent_served_points_won == 1
    assert pickleball.return_rate == 0.5
    assert pickleball.return_label == "Return defense rate"

    assert tennis.return_rate == pickleball.return_rate
    assert tennis.return_label == "Return win rate"


def test_alternating_points_have_no_lead_change(make_events):
    momentum = aggregate(make_events("YO" * 5)).momentum
    assert momentum.your_max_streak == 1
    assert momentum.opponent_max_streak == 1
    assert momentum.lead_changes == 0


def test_lead_changes_count_sign_flips(make_events):
    momentum = aggregate(make_events("YOOYYOOYYO")).momentum
    assert momentum.lead_changes == 4
    assert momentum.your_max_streak == 2
    assert momentum.opponent_max_streak == 2
    assert momentum.your_biggest_lead == 1
    assert momentum.opponent_biggest_lead == 1
    assert momentum.advantage == "Evenly contested match"
    assert momentum.summary.startswith("A closely contested match with 4 lead changes.")


def test_clutch_points_in_pickleball(make_events):
    # 9-9, then 10-9, 10-10, 11-10, 11-11, 12-11, 13-11
    events = make_events("YO" * 9 + "YOYOYY")
    insights = aggregate(events, sport_type="pickleball")
    clutch = insights.clutch

    assert clutch.game_points_played == 5
    assert clutch.game_points_won == 3
    assert clutch.clutch_rate == 0.6
    assert clutch.clutch_pct == 60
    assert clutch.break_points_played == 0

    titles = [m.title for m in insights.key_moments]
    assert "Clutch Point" in titles
    clutch_moment = next(m for m in insights.key_moments if m.title == "Clutch Point")
    assert clutch_moment.score == "13-11"
    assert clutch_moment.description == "Scored under pressure at 12-11"


def test_deuce_is_clutch_in_tennis():
    events = [
        _event(1, 0, "you", serve=True),
        _event(2, 0),
        _event(3, 0),
        _event(3, 1),
        _event(3, 2),
        _event(3, 3),
        _event(4, 3),
        _event(5, 3),
    ]
    clutch = aggregate(events, sport_type="tennis").clutch
    assert clutch.game_points_played == 3
    assert clutch.game_points_won == 2


def test_break_points_only_for_sports_that_have_them():
    events = [
        _event(1, 0, "you", serve=False),
        _event(2, 0),
        _event(3, 0),
        _event(3, 1),
        _event(4, 1),
    ]
    tennis = aggregate(events, sport_type="tennis").clutch
    assert tennis.break_points_played == 1
    assert tennis.break_points_converted == 1
    assert tennis.break_point_conversion_rate == 1.0

    pickleball = aggregate(events, sport_type="pickleball").clutch
    assert pickleball.break_points_played == 0


def test_comeback_and_run_moments(make_events):
    insights = aggregate(make_events("OOOOYYYYY"))
    assert insights.is_win is True
    assert [m.title for m in insights.key_moments] == ["5-Point Run", "Comeback"]
    run, comeback = insights.key_moments
    assert run.score == "5-4"
    assert comeback.description == "Overcame a 4-point deficit"
    assert comeback.score == "5-4"
    assert insights.story.headline == "Nice Win!"
    assert insights.momentum.summary == (
        "You dominated with a 5-point scoring run. This momentum carried you to victory."
    )


def test_opponent_run_reported_on_a_loss(make_events):
    insights = aggregate(make_events("YYYOOOO"))
    assert insights.is_win is False
    moments = {m.title: m for m in insights.key_moments}
    assert moments["3-Point Run"].score == "3-0"
    opponent_run = moments["Opponent's Run"]
    assert opponent_run.is_positive is False
    assert opponent_run.description == "They scored 4 in a row"
    assert opponent_run.score == "3-4"
    assert insights.story.headline == "So Close!"


def test_service_winner_moment():
    insights = aggregate([_event(1, 0, "you", serve=True, shot_type="Ace")])
    assert [m.title for m in insights.key_moments] == ["Service Winner"]


def test_explicit_is_win_overrides_final_score(make_events):
    insights = aggregate(make_events("YYYOOOO"), is_win=True)
    assert insights.is_win is True
    assert all(m.title != "Opponent's Run" for m in insights.key_moments)


def test_story_headlines(make_events):
    assert aggregate(make_events("YYYY")).story.headline == "Wire-to-Wire Victory!"
    comeback = aggregate(make_events("O" * 6 + "Y" * 8)).story
    assert comeback.headline == "Epic Comeback!"
    assert "down 6 points" in comeback.description


def test_point_totals_and_sport_normalization(scenario_a):
    insights = aggregate(scenario_a, sport_type="Pickleball")
    assert insights.sport_type == "pickleball"
    assert insights.total_points == 3
    assert insights.points_won == 2
    assert insights.point_win_pct == 67
    assert insights.momentum.rolling_win_pct == [1.0, 1.0, 2 / 3]


def test_aggregate_is_idempotent(make_events):
    events = make_events("YOOYYOYOOOYYYOYO")
    first = aggregate(events, is_doubles=True, sport_type="padel")
    second = aggregate(events, is_doubles=True, sport_type="padel")
    assert first == second
    assert first.model_dump() == second.model_dump()
