import re
from typing import Any, Dict, Sequence

from fastapi import HTTPException, Request

from db.store import RecordStore

_ID_PATTERN = re.compile(r"-?[0-9]+")

# sqlite INTEGER is a signed 64-bit value
ID_MIN = -(2**63)
ID_MAX = 2**63 - 1


def get_store(request: Request) -> RecordStore:
    return request.app.state.store


def parse_id(raw: str):
    """Numeric path ids; anything else is treated as an id no record has."""
    if not isinstance(raw, str) or not _ID_PATTERN.fullmatch(raw):
        return None
    value = int(raw)
    if not ID_MIN <= value <= ID_MAX:
        return None
    return value


def require_id(raw: str) -> int:
    record_id = parse_id(raw)
    if record_id is None:
        raise HTTPException(status_code=404, detail="Not found")
    return record_id


def describe_errors(errors: Sequence[Dict[str, Any]]) -> str:
    """One-line message for the first pydantic/FastAPI validation error."""
    if not errors:
        return "Invalid request"
    first = errors[0]
    loc = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    if loc:
        return f"Invalid value for '{loc}': {first.get('msg')}"
    return f"Invalid request body: {first.get('msg')}"
