# pickem/external/schedule_client.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Protocol

import httpx

from pickem.core.config import settings
from pickem.external.http import make_client, parse_api_datetime
from pickem.core.errors import ExternalSourceError

logger = logging.getLogger(__name__)

FINAL_STATUSES = frozenset({"Final", "Final/OT"})

# balldontlie numbers the Pro Bowl as postseason week 4
PRO_BOWL_WEEK = 4


@dataclass(frozen=True)
class ExternalTeam:
    abbreviation: str
    name: str = ""
    city: str = ""


@dataclass(frozen=True)
class ExternalGame:
    id: int
    season: int
    week: int
    date: Optional[datetime]
    home_team: ExternalTeam
    away_team: ExternalTeam
    status: str
    home_team_score: Optional[int]
    away_team_score: Optional[int]
    postseason: bool

    @property
    def is_final(self) -> bool:
        return self.status in FINAL_STATUSES


class ScheduleSource(Protocol):
    def fetch_games(self, season: int, week: int, postseason: bool) -> List[ExternalGame]:
        ...


def api_week_for(week: int, postseason: bool) -> int:
    """Our postseason week N >= 4 lives at N+1 in the provider (Pro Bowl gap)."""
    if postseason and week >= PRO_BOWL_WEEK:
        return week + 1
    return week


def _parse_team(raw: Optional[dict]) -> ExternalTeam:
    raw = raw or {}
    return ExternalTeam(
        abbreviation=(raw.get("abbreviation") or "").strip(),
        name=raw.get("name") or "",
        city=raw.get("location") or raw.get("city") or "",
    )


def _parse_game(raw: dict) -> ExternalGame:
    return ExternalGame(
        id=int(raw["id"]),
        season=int(raw.get("season") or 0),
        week=int(raw.get("week") or 0),
        date=parse_api_datetime(raw.get("date")),
        home_team=_parse_team(raw.get("home_team")),
        away_team=_parse_team(raw.get("visitor_team")),
        status=raw.get("status") or "",
        home_team_score=raw.get("home_team_score"),
        away_team_score=raw.get("visitor_team_score"),
        postseason=bool(raw.get("postseason")),
    )


class BallDontLieClient:
    """HTTP client for the balldontlie NFL games endpoint."""

    def __init__(self, base_url: str, api_key: str, client: Optional[httpx.Client] = None):
        if not base_url:
            raise ExternalSourceError("EXTERNAL_API_BASE_URL not set")
        if not api_key:
            raise ExternalSourceError("EXTERNAL_API_KEY not set")

        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self._client = client or make_client()

    @classmethod
    def from_settings(cls) -> "BallDontLieClient":
        return cls(settings.EXTERNAL_API_BASE_URL, settings.EXTERNAL_API_KEY)

    def fetch_games(self, season: int, week: int, postseason: bool) -> List[ExternalGame]:
        api_week = api_week_for(week, postseason)

        params = {
            "seasons[]": str(season),
            "weeks[]": str(api_week),
            "postseason": "true" if postseason else "false",
        }
        logger.debug(
            "fetching games season=%s week=%s api_week=%s postseason=%s",
            season, week, api_week, postseason,
        )

        r = self._client.get(
            f"{self.base_url}/games",
            params=params,
            headers={"Authorization": self.api_key},
        )
        if r.status_code != 200:
            raise ExternalSourceError(
                f"external API (balldontlie) returned {r.status_code} {r.reason_phrase}"
            )

        payload = r.json()
        return [_parse_game(g) for g in payload.get("data") or []]
