# iberiava/services.py
from __future__ import annotations
import logging
import time
from typing import Callable, List, Optional, Sequence
from . import flights as engine
from .catalog import aircraft_types, load_routes
from .config import get_config
from .errors import IdCollision, NotFound, Unauthenticated
from .schemas import BookingRequest, Flight, Identity
from .store import FLIGHTS, USERS, CollectionStore
from .users import ensure_registered

log = logging.getLogger(__name__)


def new_flight_id() -> int:
    # Milliseconds since the epoch; collisions are caught by flights.book
    return int(time.time() * 1000)


def _require(user_id: Optional[str]) -> str:
    if not user_id:
        raise Unauthenticated("Sign in first")
    return user_id


def register_user(store: CollectionStore, identity: Identity) -> bool:
    created = store.with_collection(USERS, lambda users: ensure_registered(users, identity))
    if created:
        log.info("registered user %s (%s)", identity.id, identity.username)
    return created


def book_flight(
    store: CollectionStore,
    user_id: Optional[str],
    request: BookingRequest,
    routes: Optional[Sequence[str]] = None,
    aircraft: Optional[Sequence[str]] = None,
    clock: Callable[[], int] = new_flight_id,
    retries: Optional[int] = None,
) -> int:
    user_id = _require(user_id)
    routes = load_routes() if routes is None else routes
    aircraft = aircraft_types() if aircraft is None else aircraft
    attempts = max(1, retries if retries is not None else get_config().BOOK_ID_RETRIES)

    def _book(snapshot: List[Flight]) -> int:
        candidate, attempt = clock(), 1
        while True:
            try:
                return engine.book(snapshot, user_id, request, routes, aircraft, candidate)
            except IdCollision as e:
                if attempt >= attempts:
                    raise
                log.warning("id collision on attempt %d: %s", attempt, e)
                candidate, attempt = max(clock(), (e.max_id or 0) + 1), attempt + 1

    flight_id = store.with_collection(FLIGHTS, _book)
    log.info("user %s booked flight %s %s->%s (%s)", user_id, flight_id, request.from_, request.to, request.aircraft)
    return flight_id


def check_in_flight(store: CollectionStore, user_id: Optional[str], flight_id) -> Flight:
    user_id = _require(user_id)
    try:
        fid = int(str(flight_id).strip())
    except (TypeError, ValueError):
        # Not a number can't match anything; same answer as an unknown id
        raise NotFound("Flight not found.") from None
    flight = store.with_collection(FLIGHTS, lambda snapshot: engine.check_in(snapshot, fid, user_id))
    log.info("user %s checked in flight %s", user_id, fid)
    return flight


def list_flights(store: CollectionStore, user_id: Optional[str]) -> List[Flight]:
    user_id = _require(user_id)
    return engine.flights_for(store.read(FLIGHTS), user_id)
