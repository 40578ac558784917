# iberiava/catalog.py
from __future__ import annotations
import json
import logging
from typing import List, Optional, Sequence
from .config import get_config
from .errors import StoreUnavailable

log = logging.getLogger(__name__)


def load_routes(path: Optional[str] = None) -> List[str]:
    """Route codes from routes.json ([{"code": "MAD", ...}, ...]); read fresh on every call."""
    path = path or get_config().ROUTES_FILE
    try:
        with open(path, "r", encoding="utf-8") as f:
            rows = json.load(f)
    except FileNotFoundError:
        log.warning("route table %s missing; no routes bookable", path)
        return []
    except OSError as e:
        raise StoreUnavailable(f"cannot read route table {path}") from e
    except ValueError as e:
        raise StoreUnavailable(f"route table {path} is not valid JSON") from e
    codes = []
    for r in rows:
        code = r.get("code") if isinstance(r, dict) else r
        if isinstance(code, str) and code.strip():
            codes.append(code.strip().upper())
    return codes


def aircraft_types(types: Optional[Sequence[str]] = None) -> List[str]:
    return list(types if types is not None else get_config().AIRCRAFT)
