import json
import re

from portal.exceptions import RequestError
from .models import AuditLog

WHOLE_NUMBER = re.compile(r"([+-]?\d+)(?:\.0*)?", re.ASCII)


def log_event(user, action_type, **data):
    AuditLog.objects.create(
        user=user if getattr(user, "pk", None) else None,
        action_type=action_type,
        action_data=data,
    )


def read_json(request):
    """Decode a JSON object body; an empty body reads as ``{}``."""
    if not request.body:
        return {}
    try:
        payload = json.loads(request.body)
    except (ValueError, UnicodeDecodeError):
        raise RequestError(400, "Request body must be valid JSON")
    if not isinstance(payload, dict):
        raise RequestError(400, "Request body must be a JSON object")
    return payload


def parse_int(value):
    # Returns None for anything that is not a whole number.
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    match = WHOLE_NUMBER.fullmatch(str(value).strip())
    if match is None:
        return None
    return int(match.group(1))


def parse_positive_int(value, message):
    number = parse_int(value)
    if number is None or number <= 0:
        raise RequestError(400, message)
    return number


def is_blank(value):
    return value is None or value == ""


def clean_text(value):
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def truthy(value):
    return value is True or value in ("true", "1")


def falsy(value):
    return value is False or value in ("false", "0")
