from __future__ import annotations

import threading
from typing import Optional


class PickemError(Exception):
    """Base class for every workflow error raised by the services."""


# --- lookups ---

class WeekNotFoundError(PickemError):
    def __init__(self, week_id):
        super().__init__(f"week not found: {week_id}")
        self.week_id = week_id


class SeasonNotFoundError(PickemError):
    def __init__(self, season_id):
        super().__init__(f"season not found: {season_id}")
        self.season_id = season_id


# --- state machine ---

class InvalidWeekStateError(PickemError):
    """The week is not in the status the requested stage needs."""

    def __init__(self, week_id, expected, actual: str):
        if isinstance(expected, (list, tuple, set, frozenset)):
            expected_txt = " or ".join(sorted(str(getattr(e, "value", e)) for e in expected))
        else:
            expected_txt = str(getattr(expected, "value", expected))
        super().__init__(f"week {week_id} not in {expected_txt} state (current: {actual})")
        self.week_id = week_id
        self.expected = expected
        self.actual = actual


class InvalidWeekStatusError(PickemError):
    def __init__(self, status):
        super().__init__(f"invalid week status: {status!r}")
        self.status = status


class AdvanceCancelledError(PickemError):
    pass


class SeasonCompleteError(PickemError):
    def __init__(self, season_id):
        super().__init__(f"season complete: all weeks of season {season_id} have already been played")
        self.season_id = season_id


class PreviousWeekNotFinalError(PickemError):
    pass


# --- external data ---

class DataAvailabilityError(PickemError):
    """External data is missing or cannot be mapped; fix the data, then retry."""


class NoGamesFromSourceError(DataAvailabilityError):
    def __init__(self, year: int, week_number: int, postseason: bool):
        super().__init__(
            f"external API returned 0 games for week {week_number} "
            f"(year {year}, postseason={postseason})"
        )
        self.year = year
        self.week_number = week_number
        self.postseason = postseason


class TeamMappingError(DataAvailabilityError):
    def __init__(self, abbreviation: str):
        super().__init__(f"team mapping failed for abbr {abbreviation}")
        self.abbreviation = abbreviation


class ExternalSourceError(PickemError):
    """Provider misconfigured or answered with an error status."""


# --- commissioner checkpoints ---

class InvalidSpreadError(PickemError):
    def __init__(self, game_id, spread):
        super().__init__(f"invalid spread {spread} for game {game_id}: spreads must be multiples of 0.5")
        self.game_id = game_id
        self.spread = spread


class GameNotInWeekError(PickemError):
    def __init__(self, game_id, week_id):
        super().__init__(f"game {game_id} not found or doesn't belong to week {week_id}")
        self.game_id = game_id
        self.week_id = week_id


class MissingSpreadsError(PickemError):
    def __init__(self, week_id, missing: int):
        super().__init__(f"cannot activate week {week_id}: {missing} games are missing spreads")
        self.week_id = week_id
        self.missing = missing


class NoGamesInWeekError(PickemError):
    def __init__(self, week_id):
        super().__init__(f"no games found for week {week_id}")
        self.week_id = week_id


class NoSpreadsMatchedError(PickemError):
    def __init__(self, week_id):
        super().__init__(f"no spreads found for any games in week {week_id}")
        self.week_id = week_id


# --- picks ---

class NotParticipantError(PickemError):
    pass


class InvalidPickError(PickemError):
    def __init__(self, message: str, game_id=None):
        super().__init__(message)
        self.game_id = game_id


class PickWindowClosedError(InvalidPickError):
    pass


class PickLockedError(PickemError):
    def __init__(self, message: str, game_id=None):
        super().__init__(message)
        self.game_id = game_id


def raise_if_cancelled(cancel: Optional[threading.Event]) -> None:
    if cancel is not None and cancel.is_set():
        raise AdvanceCancelledError("week advancement cancelled")
