import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from pickem.core.security import get_db, require_admin
from pickem.core.roles import ALL_ROLES
from pickem.models.user import User
from pickem.schemas.auth import RoleUpdate
from pickem.schemas.settings import LeagueSettingsOut, LeagueSettingsUpdate
from pickem.services.league_settings import get_or_create_global_settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/admin", tags=["admin"])

@router.get("/users")
def list_users(admin=Depends(require_admin), db: Session = Depends(get_db)):
    users = db.query(User).order_by(User.user_id.asc()).all()
    return [
        {
            "user_id": u.user_id,
            "email": u.email,
            "username": u.username,
            "role": u.role,
        }
        for u in users
    ]

@router.post("/users/{user_id}/role")
def set_role(user_id: int, payload: RoleUpdate, admin=Depends(require_admin), db: Session = Depends(get_db)):
    role = (payload.role or "").strip().lower()
    if role not in ALL_ROLES:
        raise HTTPException(status_code=400, detail=f"Invalid role. Allowed: {sorted(ALL_ROLES)}")

    u = db.query(User).filter_by(user_id=user_id).first()
    if not u:
        raise HTTPException(status_code=404, detail="User not found")

    u.role = role
    db.commit()
    logger.info("role changed user_id=%s role=%s by=%s", u.user_id, role, admin.user_id)
    return {"ok": True, "user_id": u.user_id, "role": u.role}


@router.get("/settings", response_model=LeagueSettingsOut)
def get_settings(admin=Depends(require_admin), db: Session = Depends(get_db)):
    return get_or_create_global_settings(db)


@router.put("/settings", response_model=LeagueSettingsOut)
def update_settings(payload: LeagueSettingsUpdate, admin=Depends(require_admin), db: Session = Depends(get_db)):
    row = get_or_create_global_settings(db)

    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    for field, value in changes.items():
        setattr(row, field, value)

    db.commit()
    db.refresh(row)
    logger.info("league settings updated fields=%s by=%s", sorted(changes), admin.user_id)
    return row
