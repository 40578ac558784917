# iberiava/errors.py
from __future__ import annotations
from typing import Optional


class BookingError(Exception):
    status = 500
    code = "error"

    def __init__(self, message: str = ""):
        super().__init__(message or self.code.replace("_", " "))

    @property
    def message(self) -> str:
        return str(self)


class Unauthenticated(BookingError):
    status = 401
    code = "unauthenticated"


class ValidationFailed(BookingError):
    status = 400
    code = "validation_failed"


class NotFound(BookingError):
    status = 404
    code = "not_found"


class IdCollision(BookingError):
    """Generated flight id is not above every stored id. Retry with a fresh one."""
    status = 409
    code = "id_collision"

    def __init__(self, candidate: int, max_id: Optional[int]):
        super().__init__(f"flight id {candidate} collides (max stored id {max_id})")
        self.candidate = candidate
        self.max_id = max_id


class CorruptStore(BookingError):
    status = 500
    code = "corrupt_store"


class StoreUnavailable(BookingError):
    status = 503
    code = "store_unavailable"


class IdentityExchangeFailed(BookingError):
    status = 502
    code = "identity_exchange_failed"
