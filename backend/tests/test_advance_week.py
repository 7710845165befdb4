import threading

import pytest

from fakes import FakeScheduleSource, ext_game
from pickem.crud.crud_week import get_week_games
from pickem.models.game import GAME_FINAL
from pickem.models.pick import Pick
from pickem.models.results import SeasonStanding, WeekResult
from pickem.models.week import Week, WeekStatus
from pickem.services.advance_week import (
    ACTION_MANUAL,
    ACTION_SEASON_COMPLETE,
    ACTION_WAITING,
    ACTION_WEEK_ADVANCED,
    STAGES,
    AdvanceOutcome,
    advance_season,
    advance_week_state,
    create_next_week,
)
from pickem.core.errors import (
    AdvanceCancelledError,
    InvalidWeekStatusError,
    NoGamesFromSourceError,
    PreviousWeekNotFinalError,
    SeasonCompleteError,
    SeasonNotFoundError,
)
from pickem.services.week_admin import activate_week, set_spreads


def test_every_status_has_a_stage():
    assert set(STAGES) == set(WeekStatus)


def test_season_walks_through_every_status(db, season, users, teams, rules):
    src = FakeScheduleSource([ext_game(101, "KC", "BAL"), ext_game(102, "PHI", "GB")])

    # draft week is created, games imported, then the commissioner is needed
    res = advance_season(db, season.id, schedule_source=src, league_settings=rules)
    assert res.action == ACTION_MANUAL
    assert res.status == WeekStatus.GAMES_IMPORTED.value
    week_id = res.week_id

    games = {g.external_game_id: g for g in get_week_games(db, week_id)}
    assert sorted(games) == [101, 102]
    assert all(g.home_spread is None for g in games.values())

    set_spreads(db, week_id, [(games[101].id, -3.5), (games[102].id, 1.0)])
    res = advance_season(db, season.id, schedule_source=src, league_settings=rules)
    assert res.action == ACTION_MANUAL
    assert res.status == WeekStatus.SPREADS_SET.value

    activate_week(db, week_id)

    u1, u2, u3 = users
    db.add_all([
        Pick(user_id=u1, game_id=games[101].id, week_id=week_id, selected_team_id=teams["KC"]),
        Pick(user_id=u1, game_id=games[102].id, week_id=week_id, selected_team_id=teams["GB"]),
        Pick(user_id=u2, game_id=games[101].id, week_id=week_id, selected_team_id=teams["BAL"]),
    ])
    db.commit()

    # nothing final yet
    res = advance_season(db, season.id, schedule_source=src, league_settings=rules)
    assert res.action == ACTION_WAITING
    assert res.status == WeekStatus.ACTIVE.value

    src.games = [
        ext_game(101, "KC", "BAL", status="Final", home_score=27, away_score=20),
        ext_game(102, "PHI", "GB", status="Final/OT", home_score=17, away_score=20),
    ]
    res = advance_season(db, season.id, schedule_source=src, league_settings=rules)
    assert res.action == ACTION_WEEK_ADVANCED
    assert res.status == WeekStatus.FINAL.value

    week = db.get(Week, week_id)
    assert week.closed_at is not None

    results = {r.user_id: (r.points, r.rank) for r in db.query(WeekResult).filter_by(week_id=week_id)}
    assert results == {u1: (2, 1), u2: (0, 2), u3: (0, 2)}

    standings = {s.user_id: s.points for s in db.query(SeasonStanding).filter_by(week_id=week_id)}
    assert standings == {u1: 2, u2: 0, u3: 0}

    # next call opens week 2
    res = advance_season(db, season.id, schedule_source=src, league_settings=rules)
    assert res.action == ACTION_MANUAL
    week2 = db.get(Week, res.week_id)
    assert week2.number == 2

    db.query(Week).filter_by(id=week2.id).update({"status": WeekStatus.FINAL.value})
    db.commit()

    res = advance_season(db, season.id, schedule_source=src, league_settings=rules)
    assert res.action == ACTION_SEASON_COMPLETE
    assert res.week_id is None


def test_waiting_for_games_then_finishing(db, make_week, add_game, rules):
    week = make_week(status=WeekStatus.ACTIVE)
    add_game(week, "KC", "BAL", 201, spread=-3.5)
    add_game(week, "PHI", "GB", 202, spread=2.0)

    src = FakeScheduleSource([
        ext_game(201, "KC", "BAL", status="Final", home_score=24, away_score=20),
        ext_game(202, "PHI", "GB", status="In Progress", home_score=7, away_score=3),
    ])

    assert advance_week_state(db, week, schedule_source=src, league_settings=rules) == AdvanceOutcome.WAITING_FOR_GAMES
    db.refresh(week)
    assert week.status == WeekStatus.ACTIVE.value

    by_ext = {g.external_game_id: g for g in get_week_games(db, week.id)}
    assert by_ext[201].status == GAME_FINAL
    assert (by_ext[201].home_score, by_ext[201].away_score) == (24, 20)
    # live scores are not copied
    assert by_ext[202].home_score is None

    src.games[1] = ext_game(202, "PHI", "GB", status="Final", home_score=21, away_score=14)
    assert advance_week_state(db, week, schedule_source=src, league_settings=rules) == AdvanceOutcome.FINAL
    db.refresh(week)
    assert week.status == WeekStatus.FINAL.value


def test_final_without_scores_keeps_waiting(db, make_week, add_game, rules):
    week = make_week(status=WeekStatus.ACTIVE)
    add_game(week, "KC", "BAL", 201, spread=-3.5)

    src = FakeScheduleSource([ext_game(201, "KC", "BAL", status="Final")])

    assert advance_week_state(db, week, schedule_source=src, league_settings=rules) == AdvanceOutcome.WAITING_FOR_GAMES
    db.refresh(week)
    assert week.status == WeekStatus.ACTIVE.value
    game = get_week_games(db, week.id)[0]
    assert game.status != GAME_FINAL
    assert game.home_score is None

    src.games[0] = ext_game(201, "KC", "BAL", status="Final", home_score=24, away_score=20)
    assert advance_week_state(db, week, schedule_source=src, league_settings=rules) == AdvanceOutcome.FINAL


@pytest.mark.parametrize("status", [WeekStatus.GAMES_IMPORTED, WeekStatus.SPREADS_SET])
def test_manual_checkpoints_stop_without_touching_the_source(db, make_week, rules, status):
    week = make_week(status=status)
    src = FakeScheduleSource()

    assert advance_week_state(db, week, schedule_source=src, league_settings=rules) == AdvanceOutcome.MANUAL_ACTION_REQUIRED
    assert src.calls == []
    db.refresh(week)
    assert week.status == status.value


def test_final_week_is_a_no_op(db, make_week, rules):
    week = make_week(status=WeekStatus.FINAL)
    assert advance_week_state(db, week, league_settings=rules) == AdvanceOutcome.FINAL


def test_unknown_status_is_rejected(db, make_week):
    week = make_week()
    db.query(Week).filter_by(id=week.id).update({"status": "archived"})
    db.commit()
    db.refresh(week)

    with pytest.raises(InvalidWeekStatusError):
        advance_week_state(db, week)


def test_failed_stage_leaves_status_and_can_be_retried(db, make_week):
    week = make_week()
    src = FakeScheduleSource([])

    with pytest.raises(NoGamesFromSourceError):
        advance_week_state(db, week, schedule_source=src)

    db.refresh(week)
    assert week.status == WeekStatus.DRAFT.value

    src.games = [ext_game(301, "BUF", "MIA")]
    assert advance_week_state(db, week, schedule_source=src) == AdvanceOutcome.MANUAL_ACTION_REQUIRED
    assert len(get_week_games(db, week.id)) == 1


def test_cancel_before_fetch(db, make_week):
    week = make_week()
    cancel = threading.Event()
    cancel.set()
    src = FakeScheduleSource([ext_game(401, "KC", "BAL")])

    with pytest.raises(AdvanceCancelledError):
        advance_week_state(db, week, schedule_source=src, cancel=cancel)

    assert src.calls == []
    db.refresh(week)
    assert week.status == WeekStatus.DRAFT.value


def test_cancel_mid_stage_rolls_back_writes(db, make_week):
    week = make_week()
    cancel = threading.Event()

    class CancellingSource(FakeScheduleSource):
        def fetch_games(self, season, week, postseason):
            cancel.set()
            return super().fetch_games(season, week, postseason)

    src = CancellingSource([ext_game(501, "KC", "BAL")])

    with pytest.raises(AdvanceCancelledError):
        advance_week_state(db, week, schedule_source=src, cancel=cancel)

    db.refresh(week)
    assert week.status == WeekStatus.DRAFT.value
    assert get_week_games(db, week.id) == []


def test_create_next_week_numbers_from_one(db, season):
    week = create_next_week(db, season.id)
    assert week.number == 1
    assert week.status == WeekStatus.DRAFT.value


def test_create_next_week_needs_previous_week_final(db, season, make_week):
    make_week(number=1, status=WeekStatus.ACTIVE)
    with pytest.raises(PreviousWeekNotFinalError):
        create_next_week(db, season.id)


def test_create_next_week_stops_at_season_length(db, season, make_week):
    make_week(number=1, status=WeekStatus.FINAL)
    make_week(number=2, status=WeekStatus.FINAL)
    with pytest.raises(SeasonCompleteError):
        create_next_week(db, season.id)


def test_create_next_week_unknown_season(db):
    with pytest.raises(SeasonNotFoundError):
        create_next_week(db, 999)
