from typing import Any, Dict, Iterable, List
from uuid import UUID
from pydantic import BaseModel
from portal_backend.api.exceptions import BadRequestException


def is_uuid(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    try:
        UUID(value)
        return True
    except ValueError:
        return False


def unique_uuids(values: Iterable[Any]) -> List[str]:
    seen = []
    for value in values:
        if is_uuid(value) and value not in seen:
            seen.append(value)
    return seen


def clamp(value: int, lower: int, upper: int) -> int:
    return min(max(value, lower), upper)


def whitelisted_updates(payload: BaseModel) -> Dict[str, Any]:
    """Fields the client actually sent; an empty update is rejected."""
    updates = payload.model_dump(exclude_unset=True)
    if not updates:
        raise BadRequestException("No valid fields to update")
    return updates
