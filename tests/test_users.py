# tests/test_users.py
from __future__ import annotations

from iberiava.schemas import Identity, User
from iberiava.users import ensure_registered, find_user


def test_first_registration_creates_record():
    snapshot = []
    assert ensure_registered(snapshot, Identity(id="42", username="pilot")) is True
    assert snapshot == [User(id="42", username="pilot", flights=[])]


def test_registration_is_create_once():
    snapshot = []
    ensure_registered(snapshot, Identity(id="42", username="first"))
    assert ensure_registered(snapshot, Identity(id="42", username="renamed")) is False
    assert len(snapshot) == 1
    assert find_user(snapshot, "42").username == "first"


def test_find_user_missing():
    assert find_user([User(id="1", username="a")], "2") is None


def test_numeric_identity_id_is_stored_as_string():
    assert Identity(id=123, username="x").id == "123"
