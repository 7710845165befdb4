from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from fakes import KICKOFF
from pickem.db.init_db import init_db
from pickem.models.game import GAME_SCHEDULED, Game
from pickem.models.season import Season, SeasonParticipant
from pickem.models.teams import Team
from pickem.models.user import User
from pickem.models.week import Week, WeekStatus
from pickem.services.league_settings import NO_CUTOFF, LeagueSettings

TEAMS = [
    ("KC", "Chiefs", "Kansas City"),
    ("BAL", "Ravens", "Baltimore"),
    ("PHI", "Eagles", "Philadelphia"),
    ("GB", "Packers", "Green Bay"),
    ("BUF", "Bills", "Buffalo"),
    ("MIA", "Dolphins", "Miami"),
]


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db(engine):
    TestingSession = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def teams(db):
    rows = [Team(abbreviation=a, name=n, city=c, is_active=True) for a, n, c in TEAMS]
    db.add_all(rows)
    db.commit()
    return {t.abbreviation: t.id for t in rows}


@pytest.fixture
def users(db):
    rows = [
        User(email=f"user{i}@example.com", password_hash="x", username=f"user{i}", role="user")
        for i in (1, 2, 3)
    ]
    db.add_all(rows)
    db.commit()
    return [u.user_id for u in rows]


@pytest.fixture
def season(db, teams, users):
    s = Season(year=2024, number_of_weeks=2, is_postseason=False, is_active=True)
    db.add(s)
    db.commit()
    db.add_all([SeasonParticipant(season_id=s.id, user_id=uid) for uid in users])
    db.commit()
    return s


@pytest.fixture
def rules():
    return LeagueSettings(pick_cutoff_minutes=NO_CUTOFF, points_per_correct_pick=1)


@pytest.fixture
def make_week(db, season):
    def _make(number=1, status=WeekStatus.DRAFT):
        w = Week(season_id=season.id, number=number, status=status.value)
        db.add(w)
        db.commit()
        return w

    return _make


@pytest.fixture
def add_game(db, season, teams):
    def _add(week, home, away, external_id, kickoff=KICKOFF, spread=None, home_score=None, away_score=None,
             status=GAME_SCHEDULED):
        g = Game(
            week_id=week.id,
            season_id=season.id,
            external_game_id=external_id,
            kickoff_time=kickoff,
            home_team_id=teams[home],
            away_team_id=teams[away],
            home_team_abbr=home,
            away_team_abbr=away,
            home_spread=spread,
            home_score=home_score,
            away_score=away_score,
            status=status,
        )
        db.add(g)
        db.commit()
        return g

    return _add


@pytest.fixture
def future_kickoff():
    return datetime.now(timezone.utc) + timedelta(days=3)
