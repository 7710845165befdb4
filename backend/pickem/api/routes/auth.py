from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from pickem.core.security import hash_password
from pickem.db.session import get_db
from pickem.models.user import User
from pickem.schemas.auth import RegisterRequest, LoginRequest
from pickem.core.security import verify_password, create_access_token, get_current_user
from pickem.core.roles import ROLE_USER


router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


@router.post("/register")
def register(data: RegisterRequest, db: Session = Depends(get_db)):
    if db.query(User).filter_by(email=data.email.lower().strip()).first():
        raise HTTPException(status_code=400, detail="Email already registered")

    if db.query(User).filter_by(username=data.username.strip()).first():
        raise HTTPException(status_code=400, detail="Username already in use")

    user = User(
        email=data.email.lower().strip(),
        password_hash=hash_password(data.password),
        username=data.username.strip(),
        role=ROLE_USER,
    )
    db.add(user)
    db.commit()
    db.refresh(user)

    return {"ok": True, "user_id": user.user_id}

@router.post("/login")
def login(data: LoginRequest, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.email == data.email.lower().strip()).first()

    if not user:
        raise HTTPException(status_code=401, detail="Invalid credentials")

    if not verify_password(data.password, user.password_hash):
        raise HTTPException(status_code=401, detail="Invalid credentials")

    token = create_access_token(
        {
            "sub": str(user.user_id),
            "role": user.role,
        }
    )

    return {
        "access_token": token,
        "token_type": "bearer",
    }


@router.get("/me")
def me(user: User = Depends(get_current_user)):
    return {
        "user_id": user.user_id,
        "username": user.username,
        "role": user.role,
    }
