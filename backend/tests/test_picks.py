from datetime import datetime, timedelta, timezone

import pytest

from pickem.models.pick import Pick
from pickem.models.user import User
from pickem.models.week import WeekStatus
from pickem.core.errors import (
    InvalidPickError,
    NotParticipantError,
    PickLockedError,
    PickWindowClosedError,
)
from pickem.services.league_settings import NO_CUTOFF, LeagueSettings
from pickem.services.picks import lock_week_picks, submit_picks

OPEN = LeagueSettings(pick_cutoff_minutes=120)


@pytest.fixture
def week_games(make_week, add_game, future_kickoff):
    week = make_week(status=WeekStatus.ACTIVE)
    g1 = add_game(week, "KC", "BAL", 1, kickoff=future_kickoff, spread=-3.5)
    g2 = add_game(week, "PHI", "GB", 2, kickoff=future_kickoff, spread=1.0)
    return week, g1, g2


def _picks(db, user_id):
    return {p.game_id: p for p in db.query(Pick).filter_by(user_id=user_id)}


def test_submit_then_change(db, users, teams, week_games):
    week, g1, g2 = week_games
    u1 = users[0]

    assert submit_picks(db, u1, week.id, [(g1.id, teams["KC"]), (g2.id, teams["GB"])], league_settings=OPEN) == 2
    assert submit_picks(db, u1, week.id, [(g1.id, teams["BAL"])], league_settings=OPEN) == 1

    mine = _picks(db, u1)
    assert mine[g1.id].selected_team_id == teams["BAL"]
    assert mine[g2.id].selected_team_id == teams["GB"]
    assert db.query(Pick).filter_by(user_id=u1).count() == 2


def test_null_selection_clears_a_pick(db, users, teams, week_games):
    week, g1, _ = week_games
    submit_picks(db, users[0], week.id, [(g1.id, teams["KC"])], league_settings=OPEN)
    submit_picks(db, users[0], week.id, [(g1.id, None)], league_settings=OPEN)
    assert _picks(db, users[0])[g1.id].selected_team_id is None


def test_outsider_cannot_pick(db, teams, week_games):
    week, g1, _ = week_games
    outsider = User(email="out@example.com", password_hash="x", username="outsider")
    db.add(outsider)
    db.commit()

    with pytest.raises(NotParticipantError):
        submit_picks(db, outsider.user_id, week.id, [(g1.id, teams["KC"])], league_settings=OPEN)


def test_duplicate_game_rejected(db, users, teams, week_games):
    week, g1, _ = week_games
    with pytest.raises(InvalidPickError):
        submit_picks(db, users[0], week.id, [(g1.id, teams["KC"]), (g1.id, teams["BAL"])], league_settings=OPEN)


def test_team_must_play_in_the_game(db, users, teams, week_games):
    week, g1, _ = week_games
    with pytest.raises(InvalidPickError) as exc:
        submit_picks(db, users[0], week.id, [(g1.id, teams["PHI"])], league_settings=OPEN)
    assert exc.value.game_id == g1.id
    assert _picks(db, users[0]) == {}


def test_game_from_another_week_rejected(db, users, teams, make_week, add_game, week_games, future_kickoff):
    week, _, _ = week_games
    other = make_week(number=2, status=WeekStatus.DRAFT)
    g = add_game(other, "BUF", "MIA", 9, kickoff=future_kickoff)
    with pytest.raises(InvalidPickError):
        submit_picks(db, users[0], week.id, [(g.id, teams["BUF"])], league_settings=OPEN)


def test_cutoff_closes_the_window(db, users, teams, make_week, add_game):
    week = make_week(status=WeekStatus.ACTIVE)
    soon = datetime.now(timezone.utc) + timedelta(minutes=30)
    g = add_game(week, "KC", "BAL", 1, kickoff=soon, spread=-3.5)

    with pytest.raises(PickWindowClosedError):
        submit_picks(db, users[0], week.id, [(g.id, teams["KC"])], league_settings=OPEN)

    # -1 turns the cutoff off
    no_cutoff = LeagueSettings(pick_cutoff_minutes=NO_CUTOFF)
    assert submit_picks(db, users[0], week.id, [(g.id, teams["KC"])], league_settings=no_cutoff) == 1


def test_started_game_is_locked_unless_allowed(db, users, teams, make_week, add_game):
    week = make_week(status=WeekStatus.ACTIVE)
    started = datetime.now(timezone.utc) - timedelta(minutes=10)
    g = add_game(week, "KC", "BAL", 1, kickoff=started, spread=-3.5)

    with pytest.raises(PickLockedError):
        submit_picks(db, users[0], week.id, [(g.id, teams["KC"])],
                     league_settings=LeagueSettings(pick_cutoff_minutes=NO_CUTOFF))

    late_ok = LeagueSettings(pick_cutoff_minutes=NO_CUTOFF, allow_picks_after_kickoff=True)
    assert submit_picks(db, users[0], week.id, [(g.id, teams["KC"])], league_settings=late_ok) == 1


def test_lock_freezes_picks(db, users, teams, week_games):
    week, g1, g2 = week_games
    u1 = users[0]
    submit_picks(db, u1, week.id, [(g1.id, teams["KC"]), (g2.id, teams["PHI"])], league_settings=OPEN)

    assert lock_week_picks(db, u1, week.id) == 2
    assert all(p.user_locked_at is not None for p in _picks(db, u1).values())

    with pytest.raises(PickLockedError):
        submit_picks(db, u1, week.id, [(g1.id, teams["BAL"])], league_settings=OPEN)
    assert _picks(db, u1)[g1.id].selected_team_id == teams["KC"]

    with pytest.raises(PickLockedError):
        lock_week_picks(db, u1, week.id)


def test_lock_refuses_empty_selection(db, users, teams, week_games):
    week, g1, g2 = week_games
    u1 = users[0]
    submit_picks(db, u1, week.id, [(g1.id, teams["KC"]), (g2.id, None)], league_settings=OPEN)

    with pytest.raises(InvalidPickError, match="All picks must be selected"):
        lock_week_picks(db, u1, week.id)
    assert all(p.user_locked_at is None for p in _picks(db, u1).values())

    # once every game has a team, locking goes through
    submit_picks(db, u1, week.id, [(g2.id, teams["GB"])], league_settings=OPEN)
    assert lock_week_picks(db, u1, week.id) == 2


def test_lock_without_picks(db, users, week_games):
    week, _, _ = week_games
    with pytest.raises(InvalidPickError):
        lock_week_picks(db, users[1], week.id)
