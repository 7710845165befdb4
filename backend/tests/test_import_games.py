import pytest

from fakes import FakeScheduleSource, ext_game
from pickem.crud.crud_week import get_week_games
from pickem.external.schedule_client import ExternalGame, ExternalTeam
from pickem.models.game import GAME_SCHEDULED
from pickem.models.week import Week, WeekStatus
from pickem.core.errors import (
    DataAvailabilityError,
    InvalidWeekStateError,
    NoGamesFromSourceError,
    TeamMappingError,
)
from pickem.services.import_games import import_games_for_week


def test_import_creates_games_and_moves_to_games_imported(db, make_week, users, teams):
    week = make_week()
    src = FakeScheduleSource([ext_game(11, "KC", "BAL"), ext_game(12, "PHI", "GB")])

    res = import_games_for_week(db, week.id, users[0], schedule_source=src)

    assert res.games_created == 2
    assert src.calls == [(2024, 1, False)]

    games = get_week_games(db, week.id)
    assert {g.external_game_id for g in games} == {11, 12}
    kc = next(g for g in games if g.external_game_id == 11)
    assert kc.home_team_id == teams["KC"]
    assert kc.away_team_id == teams["BAL"]
    assert kc.home_spread is None
    assert kc.status == GAME_SCHEDULED
    assert kc.created_by == users[0]

    db.refresh(week)
    assert week.status == WeekStatus.GAMES_IMPORTED.value


def test_one_unknown_team_imports_nothing(db, make_week):
    week = make_week()
    src = FakeScheduleSource([ext_game(11, "KC", "BAL"), ext_game(12, "XXX", "GB")])

    with pytest.raises(TeamMappingError) as exc:
        import_games_for_week(db, week.id, None, schedule_source=src)

    assert exc.value.abbreviation == "XXX"
    assert get_week_games(db, week.id) == []
    db.refresh(week)
    assert week.status == WeekStatus.DRAFT.value


def test_zero_games_is_an_error(db, make_week):
    week = make_week()
    with pytest.raises(NoGamesFromSourceError):
        import_games_for_week(db, week.id, None, schedule_source=FakeScheduleSource([]))


def test_game_without_kickoff_is_rejected(db, make_week):
    week = make_week()
    no_date = ExternalGame(
        id=13, season=2024, week=1, date=None,
        home_team=ExternalTeam("KC"), away_team=ExternalTeam("BAL"),
        status="Scheduled", home_team_score=None, away_team_score=None, postseason=False,
    )
    with pytest.raises(DataAvailabilityError):
        import_games_for_week(db, week.id, None, schedule_source=FakeScheduleSource([no_date]))
    assert get_week_games(db, week.id) == []


def test_reimport_replaces_previous_games(db, make_week):
    week = make_week()
    import_games_for_week(db, week.id, None, schedule_source=FakeScheduleSource([ext_game(11, "KC", "BAL")]))

    # back to draft, the schedule changed upstream
    db.query(Week).filter_by(id=week.id).update({"status": WeekStatus.DRAFT.value})
    db.commit()

    src = FakeScheduleSource([ext_game(21, "BUF", "MIA"), ext_game(22, "PHI", "GB")])
    import_games_for_week(db, week.id, None, schedule_source=src)

    assert sorted(g.external_game_id for g in get_week_games(db, week.id)) == [21, 22]


def test_import_needs_draft(db, make_week):
    week = make_week(status=WeekStatus.ACTIVE)
    src = FakeScheduleSource([ext_game(11, "KC", "BAL")])

    with pytest.raises(InvalidWeekStateError):
        import_games_for_week(db, week.id, None, schedule_source=src)
    assert src.calls == []
