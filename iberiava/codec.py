# iberiava/codec.py
"""JSON codec for a collection file: a single array of records."""
from __future__ import annotations
import json
from functools import lru_cache
from typing import List, Optional, Sequence, Type, TypeVar
from pydantic import BaseModel, TypeAdapter, ValidationError
from .errors import CorruptStore

M = TypeVar("M", bound=BaseModel)


@lru_cache(maxsize=None)
def _adapter(model: Type[BaseModel]) -> TypeAdapter:
    return TypeAdapter(List[model])


def decode(data: Optional[bytes], model: Type[M]) -> List[M]:
    # Absent or blank file == empty collection; anything else must parse
    if data is None or not data.strip():
        return []
    try:
        records = _adapter(model).validate_json(data)
    except ValidationError as e:
        raise CorruptStore(f"undecodable {model.__name__} collection: {e.error_count()} error(s)") from e
    seen = set()
    for r in records:
        if r.id in seen:
            raise CorruptStore(f"duplicate {model.__name__} id {r.id!r}")
        seen.add(r.id)
    return records


def encode(records: Sequence[BaseModel]) -> bytes:
    rows = [r.model_dump(by_alias=True, mode="json") for r in records]
    return (json.dumps(rows, indent=2, ensure_ascii=False) + "\n").encode("utf-8")
