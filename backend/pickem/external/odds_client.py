# pickem/external/odds_client.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Protocol

import httpx

from pickem.core.config import settings
from pickem.external.http import make_client, parse_api_datetime
from pickem.core.errors import ExternalSourceError

SPORT_KEY = "americanfootball_nfl"

# Odds API full names -> our team abbreviations
ODDS_API_TO_ABBREVIATION = {
    "Arizona Cardinals": "ARI",
    "Atlanta Falcons": "ATL",
    "Baltimore Ravens": "BAL",
    "Buffalo Bills": "BUF",
    "Carolina Panthers": "CAR",
    "Chicago Bears": "CHI",
    "Cincinnati Bengals": "CIN",
    "Cleveland Browns": "CLE",
    "Dallas Cowboys": "DAL",
    "Denver Broncos": "DEN",
    "Detroit Lions": "DET",
    "Green Bay Packers": "GB",
    "Houston Texans": "HOU",
    "Indianapolis Colts": "IND",
    "Jacksonville Jaguars": "JAX",
    "Kansas City Chiefs": "KC",
    "Las Vegas Raiders": "LV",
    "Los Angeles Chargers": "LAC",
    "Los Angeles Rams": "LAR",
    "Miami Dolphins": "MIA",
    "Minnesota Vikings": "MIN",
    "New England Patriots": "NE",
    "New Orleans Saints": "NO",
    "New York Giants": "NYG",
    "New York Jets": "NYJ",
    "Philadelphia Eagles": "PHI",
    "Pittsburgh Steelers": "PIT",
    "San Francisco 49ers": "SF",
    "Seattle Seahawks": "SEA",
    "Tampa Bay Buccaneers": "TB",
    "Tennessee Titans": "TEN",
    "Washington Commanders": "WSH",
}


@dataclass(frozen=True)
class SpreadQuote:
    home_team_abbr: str
    away_team_abbr: str
    home_spread: float  # negative = home favored
    away_spread: float
    bookmaker: str
    last_update: Optional[datetime]
    commence_time: Optional[datetime]


class OddsSource(Protocol):
    def fetch_spreads(self, preferred_bookmaker: str = "") -> List[SpreadQuote]:
        ...


def team_abbreviation(odds_api_name: str) -> Optional[str]:
    return ODDS_API_TO_ABBREVIATION.get(odds_api_name)


def _pick_bookmaker(bookmakers: list, preferred: str) -> Optional[dict]:
    if preferred:
        for b in bookmakers:
            if b.get("key") == preferred:
                return b
    return bookmakers[0] if bookmakers else None


def parse_spreads(games: list, preferred_bookmaker: str = "") -> List[SpreadQuote]:
    spreads: List[SpreadQuote] = []

    for game in games:
        home_name = game.get("home_team") or ""
        away_name = game.get("away_team") or ""

        home_abbr = team_abbreviation(home_name)
        if home_abbr is None:
            raise ExternalSourceError(f"unknown team name: {home_name}")
        away_abbr = team_abbreviation(away_name)
        if away_abbr is None:
            raise ExternalSourceError(f"unknown team name: {away_name}")

        book = _pick_bookmaker(game.get("bookmakers") or [], preferred_bookmaker)
        if book is None:
            continue  # nobody is quoting this game yet

        for market in book.get("markets") or []:
            if market.get("key") != "spreads":
                continue

            home_spread = 0.0
            away_spread = 0.0
            for outcome in market.get("outcomes") or []:
                if outcome.get("name") == home_name:
                    home_spread = float(outcome.get("point") or 0.0)
                elif outcome.get("name") == away_name:
                    away_spread = float(outcome.get("point") or 0.0)

            spreads.append(
                SpreadQuote(
                    home_team_abbr=home_abbr,
                    away_team_abbr=away_abbr,
                    home_spread=home_spread,
                    away_spread=away_spread,
                    bookmaker=book.get("title") or book.get("key") or "",
                    last_update=parse_api_datetime(book.get("last_update")),
                    commence_time=parse_api_datetime(game.get("commence_time")),
                )
            )

    return spreads


class OddsClient:
    def __init__(self, api_key: str, base_url: str = "", client: Optional[httpx.Client] = None):
        if not api_key:
            raise ExternalSourceError("ODDS_API_KEY not set")

        self.api_key = api_key
        self.base_url = (base_url or "https://api.the-odds-api.com/v4").rstrip("/")
        self._client = client or make_client()

    @classmethod
    def from_settings(cls) -> "OddsClient":
        return cls(settings.ODDS_API_KEY, settings.ODDS_API_BASE_URL)

    def fetch_spreads(self, preferred_bookmaker: str = "") -> List[SpreadQuote]:
        r = self._client.get(
            f"{self.base_url}/sports/{SPORT_KEY}/odds/",
            params={"apiKey": self.api_key, "regions": "us", "markets": "spreads"},
        )
        if r.status_code != 200:
            raise ExternalSourceError(f"odds API returned {r.status_code} {r.reason_phrase}")

        return parse_spreads(r.json() or [], preferred_bookmaker)
