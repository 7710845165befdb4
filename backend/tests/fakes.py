from datetime import datetime, timezone

from pickem.external.odds_client import SpreadQuote
from pickem.external.schedule_client import ExternalGame, ExternalTeam

KICKOFF = datetime(2024, 9, 6, 0, 20, tzinfo=timezone.utc)


class FakeScheduleSource:
    """Stands in for the balldontlie client; hands back whatever `games` holds."""

    def __init__(self, games=None):
        self.games = list(games or [])
        self.calls = []

    def fetch_games(self, season, week, postseason):
        self.calls.append((season, week, postseason))
        return list(self.games)


class FakeOddsSource:
    def __init__(self, quotes=None):
        self.quotes = list(quotes or [])
        self.calls = []

    def fetch_spreads(self, preferred_bookmaker=""):
        self.calls.append(preferred_bookmaker)
        return list(self.quotes)


def ext_game(game_id, home, away, kickoff=KICKOFF, status="Scheduled", home_score=None, away_score=None, week=1):
    return ExternalGame(
        id=game_id,
        season=2024,
        week=week,
        date=kickoff,
        home_team=ExternalTeam(abbreviation=home),
        away_team=ExternalTeam(abbreviation=away),
        status=status,
        home_team_score=home_score,
        away_team_score=away_score,
        postseason=False,
    )


def quote(home, away, home_spread, commence_time=KICKOFF, bookmaker="DraftKings"):
    return SpreadQuote(
        home_team_abbr=home,
        away_team_abbr=away,
        home_spread=home_spread,
        away_spread=-home_spread,
        bookmaker=bookmaker,
        last_update=None,
        commence_time=commence_time,
    )
