# iberiava/flights.py
"""
Booking and check-in over a loaded flights snapshot.

Everything here is in-memory work on the list handed over by the store; the
store commits whatever these functions leave in the list.
"""
from __future__ import annotations
from typing import Collection, List
from .errors import IdCollision, NotFound, ValidationFailed
from .schemas import BOOKED, COMPLETED, BookingRequest, Flight


def max_flight_id(snapshot: List[Flight]) -> int | None:
    return max((f.id for f in snapshot), default=None)


def book(
    snapshot: List[Flight],
    user_id: str,
    request: BookingRequest,
    routes: Collection[str],
    aircraft: Collection[str],
    flight_id: int,
) -> int:
    if request.from_ not in routes:
        raise ValidationFailed(f"Unknown route code: {request.from_}")
    if request.to not in routes:
        raise ValidationFailed(f"Unknown route code: {request.to}")
    if request.from_ == request.to:
        raise ValidationFailed("Origin and destination must differ")
    if request.aircraft not in aircraft:
        raise ValidationFailed(f"Unknown aircraft type: {request.aircraft}")

    top = max_flight_id(snapshot)
    if top is not None and flight_id <= top:
        raise IdCollision(flight_id, top)

    snapshot.append(Flight(
        id=flight_id,
        user_id=user_id,
        from_=request.from_,
        to=request.to,
        aircraft=request.aircraft,
        status=BOOKED,
    ))
    return flight_id


def check_in(snapshot: List[Flight], flight_id: int, user_id: str) -> Flight:
    # Wrong id and someone else's id look the same from outside
    flight = next((f for f in snapshot if f.id == flight_id and f.user_id == user_id), None)
    if flight is None:
        raise NotFound("Flight not found.")
    if flight.status == BOOKED:
        flight.status = COMPLETED
    return flight


def flights_for(snapshot: List[Flight], user_id: str) -> List[Flight]:
    return [f for f in snapshot if f.user_id == user_id]
