# resolve360/routes/auth.py
from fastapi import APIRouter, Depends
from datetime import timedelta
import asyncpg

from ..database import get_db
from ..models.auth import SignInRequest, SessionOut, UserOut
from ..services import role_resolver
from ..services.roles import ROLE_LABELS, Role, reconcile_role
from ..utils.auth import (
    create_access_token,
    get_current_user,
    ACCESS_TOKEN_EXPIRE_MINUTES
)

auth_router = APIRouter(prefix="/auth", tags=["Authentication"])

@auth_router.post("/session", response_model=SessionOut)
async def start_session(
    identity: SignInRequest,
    conn: asyncpg.Connection = Depends(get_db)
):
    user, role_changed = await reconcile_role(
        conn,
        role_resolver,
        uid=identity.uid,
        email=identity.email,
        display_name=identity.display_name,
        photo_url=identity.photo_url,
    )

    access_token = create_access_token(
        data={"sub": str(user["user_id"]), "role": user["role"]},
        expires_delta=timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    )

    return {
        "access_token": access_token,
        "token_type": "bearer",
        "role": user["role"],
        "role_label": ROLE_LABELS[Role(user["role"])],
        "role_changed": role_changed
    }

@auth_router.get("/me", response_model=UserOut)
async def read_current_user(current_user: dict = Depends(get_current_user)):
    return current_user
