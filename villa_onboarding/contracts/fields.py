"""Coercing field types shared by the stage and entity payload models.

Every type runs a ``BeforeValidator`` that turns blank input into ``None`` and
normalizes loosely typed client values (numeric strings, "yes"/"no", dates in
common formats, URLs without a scheme) before pydantic's own type check runs.
A value that cannot be normalized is passed through unchanged so the resulting
error names the offending input.
"""

import json
import math
from datetime import date, datetime, timezone
from typing import Annotated, Any, List, Optional

from pydantic import (
    AfterValidator,
    AnyUrl,
    BeforeValidator,
    EmailStr,
    Field,
    StrictBool,
    TypeAdapter,
)
from pydantic import ValidationError as PydanticValidationError

RICH_TEXT_MAX_LENGTH = 10000
TAG_MAX_LENGTH = 200

_URL_ADAPTER = TypeAdapter(AnyUrl)

_DATE_FORMATS = (
    "%m/%d/%Y",
    "%Y/%m/%d",
    "%d %B %Y",
    "%d %b %Y",
    "%B %d, %Y",
    "%b %d, %Y",
)


def is_blank(value: Any) -> bool:
    """True for None and for strings that are empty after trimming."""
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


def empty_to_none(value: Any) -> Any:
    return None if is_blank(value) else value


def coerce_string(value: Any) -> Any:
    value = empty_to_none(value)
    if value is None:
        return None
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, (bool, int, float)):
        return str(value).lower()
    return value


def coerce_rich_text(value: Any) -> Any:
    value = empty_to_none(value)
    if value is None:
        return None
    if isinstance(value, str):
        return value.strip()
    return str(value)


def coerce_number(value: Any) -> Any:
    value = empty_to_none(value)
    if value is None:
        return None
    if isinstance(value, str):
        normalized = value.strip()
        try:
            return int(normalized)
        except ValueError:
            pass
        try:
            parsed = float(normalized)
        except ValueError:
            return value
        return parsed if math.isfinite(parsed) else value
    return value


def coerce_boolean(value: Any) -> Any:
    value = empty_to_none(value)
    if value is None or isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "1", "yes"):
            return True
        if lowered in ("false", "0", "no"):
            return False
    if isinstance(value, (int, float)):
        if value == 1:
            return True
        if value == 0:
            return False
    return value


def coerce_enum(value: Any) -> Any:
    value = empty_to_none(value)
    if isinstance(value, str):
        return value.strip().upper()
    return value


def coerce_url(value: Any) -> Any:
    value = empty_to_none(value)
    if not isinstance(value, str):
        return value
    trimmed = value.strip()
    lowered = trimmed.lower()
    if (
        not lowered.startswith(("http://", "https://"))
        and "." in trimmed
        and " " not in trimmed
    ):
        return f"https://{trimmed}"
    return trimmed


def check_url(value: Optional[str]) -> Optional[str]:
    """Validate a URL string but keep the caller's spelling of it."""
    if value is None:
        return None
    try:
        _URL_ADAPTER.validate_python(value)
    except PydanticValidationError:
        raise ValueError(f"invalid URL '{value}'")
    return value


def coerce_datetime(value: Any) -> Any:
    """Normalize date-ish input to an aware datetime.

    Numbers are epoch milliseconds. Unparseable strings and out-of-range
    epochs are returned as given so the datetime check reports them.
    """
    value = empty_to_none(value)
    if value is None:
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=timezone.utc)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        if not math.isfinite(value):
            return value
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return value
    if isinstance(value, str):
        trimmed = value.strip()
        parsed = None
        try:
            parsed = datetime.fromisoformat(trimmed.replace("Z", "+00:00"))
        except ValueError:
            for fmt in _DATE_FORMATS:
                try:
                    parsed = datetime.strptime(trimmed, fmt)
                    break
                except ValueError:
                    continue
        if parsed is None:
            return trimmed
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)
    return value


def coerce_string_list(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, list):
        return value
    if isinstance(value, str):
        trimmed = value.strip()
        if not trimmed:
            return None
        try:
            parsed = json.loads(trimmed)
        except ValueError:
            return [trimmed]
        return parsed if isinstance(parsed, list) else None
    return value


def _string(max_length: Optional[int] = None):
    return Annotated[
        Optional[Annotated[str, Field(max_length=max_length)]], BeforeValidator(coerce_string)
    ]


# All scalar types accept None; required-ness is decided by the validator.
String = _string()
String8 = _string(8)
String10 = _string(10)
String11 = _string(11)
String20 = _string(20)
String30 = _string(30)
String34 = _string(34)
String40 = _string(40)
String60 = _string(60)
String80 = _string(80)
String120 = _string(120)
String160 = _string(160)
String200 = _string(200)
String260 = _string(260)
String400 = _string(400)

RichText = Annotated[
    Optional[Annotated[str, Field(max_length=RICH_TEXT_MAX_LENGTH)]],
    BeforeValidator(coerce_rich_text),
]
Number = Annotated[Optional[float], BeforeValidator(coerce_number)]
Integer = Annotated[Optional[int], BeforeValidator(coerce_number)]
Boolean = Annotated[Optional[StrictBool], BeforeValidator(coerce_boolean)]
Email = Annotated[Optional[EmailStr], BeforeValidator(coerce_string)]
Url = Annotated[Optional[str], BeforeValidator(coerce_url), AfterValidator(check_url)]
Timestamp = Annotated[Optional[datetime], BeforeValidator(coerce_datetime)]
StringList = Annotated[
    Optional[
        List[Annotated[str, BeforeValidator(coerce_string), Field(max_length=TAG_MAX_LENGTH)]]
    ],
    BeforeValidator(coerce_string_list),
]


def enum_of(enum_cls):
    """Annotated enum type that uppercases string input before matching."""
    return Annotated[Optional[enum_cls], BeforeValidator(coerce_enum)]
