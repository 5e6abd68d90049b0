import math


class ArenaError(Exception):
    """Base class for errors raised while handling an inbound message."""


class MalformedMessage(ArenaError):
    def __init__(self, event: str, detail: str):
        super().__init__(f"{event}: {detail}")
        self.event = event
        self.detail = detail


def require_number(event, data, field):
    value = data.get(field) if isinstance(data, dict) else None
    # bool is an int subclass but never a coordinate
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        raise MalformedMessage(event, f"{field} must be a number")
    return value


def require_int(event, data, field):
    value = data.get(field) if isinstance(data, dict) else None
    if isinstance(value, bool) or not isinstance(value, int):
        raise MalformedMessage(event, f"{field} must be an integer")
    return value


def require_text(event, data, field):
    value = data.get(field) if isinstance(data, dict) else None
    if not isinstance(value, str) or not value.strip():
        raise MalformedMessage(event, f"{field} must be non-empty text")
    return value
