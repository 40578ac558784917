# iberiava/schemas.py
from __future__ import annotations
from typing import List, Literal
from pydantic import BaseModel, ConfigDict, Field, field_validator

FlightStatus = Literal["booked", "completed"]
BOOKED = "booked"
COMPLETED = "completed"


# Stored records: no coercion and no unknown keys, so a decode/encode cycle
# can never rewrite what is on disk
class User(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)

    id: str
    username: str
    flights: List[int] = Field(default_factory=list)


class Flight(BaseModel):
    # On disk the keys are userId/from, as the JSON files always had them
    model_config = ConfigDict(populate_by_name=True, extra="forbid", strict=True)

    id: int
    user_id: str = Field(alias="userId")
    from_: str = Field(alias="from")
    to: str
    aircraft: str
    status: FlightStatus = BOOKED


class Identity(BaseModel):
    id: str
    username: str

    @field_validator("id", mode="before")
    @classmethod
    def _str_id(cls, v):
        # Discord snowflakes arrive as strings, but be lenient with ints
        return str(v) if isinstance(v, int) else v


class BookingRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_: str = Field(alias="from")
    to: str
    aircraft: str

    @field_validator("from_", "to", "aircraft")
    @classmethod
    def _code(cls, v: str) -> str:
        return v.strip().upper()


class TokenResponse(BaseModel):
    token: str
    expires_in: int
