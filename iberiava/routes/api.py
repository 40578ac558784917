# iberiava/routes/api.py
from __future__ import annotations
from flask import Blueprint, current_app, jsonify, request
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from pydantic import ValidationError

from ..auth import current_user_id, issue_token, session_user
from ..catalog import aircraft_types, load_routes
from ..config import get_config
from ..errors import BookingError, NotFound, Unauthenticated
from ..schemas import BookingRequest, TokenResponse
from ..services import book_flight, check_in_flight, list_flights
from ..store import USERS, CollectionStore
from ..users import find_user

api = Blueprint("api", __name__, url_prefix="/api")
# Create the limiter here; app binding happens in app.py via limiter.init_app(app)
limiter: Limiter = Limiter(key_func=get_remote_address)


def get_store() -> CollectionStore:
    return current_app.extensions["iberiava.store"]


@api.errorhandler(BookingError)
def _booking_error(e: BookingError):
    return jsonify({"error": e.code, "message": e.message}), e.status


@api.errorhandler(ValidationError)
def _bad_payload(e: ValidationError):
    return jsonify({"error": "validation_failed", "message": "Invalid booking request",
                    "details": e.errors(include_url=False, include_context=False)}), 400


@api.post("/token")
def token():
    user = session_user()
    if not user:
        raise Unauthenticated("Sign in first")
    tok = issue_token(str(user["id"]))
    return jsonify(TokenResponse(token=tok, expires_in=int(get_config().TOKEN_TTL.total_seconds())).model_dump())


@api.get("/me")
def me():
    user_id = current_user_id()
    if not user_id:
        raise Unauthenticated("Sign in first")
    user = find_user(get_store().read(USERS), user_id)
    if not user:
        raise NotFound("User not registered")
    return jsonify(user.model_dump())


@api.get("/routes")
def routes():
    return jsonify(load_routes())


@api.get("/aircraft")
def aircraft():
    return jsonify(aircraft_types())


@api.get("/flights")
def get_flights():
    rows = list_flights(get_store(), current_user_id())
    return jsonify([f.model_dump(by_alias=True) for f in rows])


@api.post("/flights")
@limiter.limit(lambda: get_config().BOOK_RATE)
def post_flight():
    user_id = current_user_id()
    if not user_id:
        raise Unauthenticated("Sign in first")
    # Unparseable bodies come through as None and fail validation below
    payload = BookingRequest.model_validate(request.get_json(force=True, silent=True))
    flight_id = book_flight(get_store(), user_id, payload)
    return jsonify({"id": flight_id, "status": "booked"}), 201


@api.post("/flights/<flight_id>/checkin")
def checkin(flight_id: str):
    flight = check_in_flight(get_store(), current_user_id(), flight_id)
    return jsonify(flight.model_dump(by_alias=True))
