from fastapi import HTTPException

from pickem.core.errors import (
    DataAvailabilityError,
    ExternalSourceError,
    GameNotInWeekError,
    InvalidPickError,
    InvalidSpreadError,
    InvalidWeekStateError,
    MissingSpreadsError,
    NoGamesInWeekError,
    NoSpreadsMatchedError,
    NotParticipantError,
    PickemError,
    PickLockedError,
    PreviousWeekNotFinalError,
    SeasonCompleteError,
    SeasonNotFoundError,
    WeekNotFoundError,
)

# first match wins, so subclasses go before their bases
_STATUS_BY_ERROR = (
    (WeekNotFoundError, 404),
    (SeasonNotFoundError, 404),
    (NotParticipantError, 403),
    (InvalidWeekStateError, 409),
    (PreviousWeekNotFinalError, 409),
    (SeasonCompleteError, 409),
    (PickLockedError, 409),
    (DataAvailabilityError, 409),
    (InvalidSpreadError, 400),
    (GameNotInWeekError, 400),
    (MissingSpreadsError, 400),
    (NoGamesInWeekError, 400),
    (NoSpreadsMatchedError, 400),
    (InvalidPickError, 400),
    (ExternalSourceError, 502),
)


def http_error(exc: PickemError) -> HTTPException:
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            detail = str(exc)
            game_id = getattr(exc, "game_id", None)
            if game_id is not None:
                detail = {"message": str(exc), "game_id": game_id}
            return HTTPException(status_code=status_code, detail=detail)
    return HTTPException(status_code=500, detail=str(exc))
