# iberiava/users.py
from __future__ import annotations
from typing import List, Optional
from .schemas import Identity, User


def find_user(snapshot: List[User], user_id: str) -> Optional[User]:
    return next((u for u in snapshot if u.id == user_id), None)


def ensure_registered(snapshot: List[User], identity: Identity) -> bool:
    # Create-once: an existing record (and its username) is never touched
    if find_user(snapshot, identity.id) is not None:
        return False
    snapshot.append(User(id=identity.id, username=identity.username, flights=[]))
    return True
