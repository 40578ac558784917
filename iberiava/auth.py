# iberiava/auth.py
"""
Who is calling: the signed session cookie for pages, a bearer JWT for /api.
Nothing here touches the collections.
"""
from __future__ import annotations
import jwt
from datetime import datetime, timezone
from flask import request, session
from typing import Optional
from .config import get_config
from .schemas import Identity


def issue_token(user_id: str) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "sub": user_id,
        "iat": int(now.timestamp()),
        "exp": int((now + get_config().TOKEN_TTL).timestamp()),
    }
    return jwt.encode(payload, get_config().JWT_SECRET, algorithm="HS256")


def _bearer_token() -> Optional[str]:
    auth = request.headers.get("Authorization", "")
    if not auth.startswith("Bearer "):
        return None
    return auth.split(" ", 1)[1].strip()


def session_user() -> Optional[dict]:
    user = session.get("user")
    return user if isinstance(user, dict) and user.get("id") else None


def current_user_id() -> Optional[str]:
    user = session_user()
    if user:
        return str(user["id"])
    token = _bearer_token()
    if not token:
        return None
    try:
        payload = jwt.decode(token, get_config().JWT_SECRET, algorithms=["HS256"])
    except jwt.PyJWTError:
        return None
    sub = payload.get("sub")
    return str(sub) if sub else None


def login_user(identity: Identity) -> None:
    session.clear()
    session["user"] = {"id": identity.id, "username": identity.username}


def logout_user() -> None:
    session.clear()
