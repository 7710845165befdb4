import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from pickem.api.errors import http_error
from pickem.core.security import get_current_user, get_db
from pickem.models.pick import Pick
from pickem.schemas.picks import PickOut, SubmitPicksRequest
from pickem.core.errors import PickemError
from pickem.services.picks import lock_week_picks, submit_picks

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/weeks/{week_id}/picks", tags=["picks"])


@router.get("", response_model=list[PickOut])
def my_picks(week_id: int, user=Depends(get_current_user), db: Session = Depends(get_db)):
    return (
        db.query(Pick)
        .filter(Pick.week_id == week_id, Pick.user_id == user.user_id)
        .order_by(Pick.game_id.asc())
        .all()
    )


@router.post("")
def post_picks(week_id: int, payload: SubmitPicksRequest, user=Depends(get_current_user), db: Session = Depends(get_db)):
    try:
        saved = submit_picks(
            db, user.user_id, week_id,
            [(p.game_id, p.selected_team_id) for p in payload.picks],
        )
    except PickemError as e:
        raise http_error(e)

    logger.info("picks saved user_id=%s week_id=%s count=%s", user.user_id, week_id, saved)
    return {"ok": True, "saved": saved}


@router.post("/lock")
def lock_picks(week_id: int, user=Depends(get_current_user), db: Session = Depends(get_db)):
    try:
        locked = lock_week_picks(db, user.user_id, week_id)
    except PickemError as e:
        raise http_error(e)

    logger.info("picks locked user_id=%s week_id=%s count=%s", user.user_id, week_id, locked)
    return {"ok": True, "locked": locked}
