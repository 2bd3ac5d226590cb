"""
Pokedex API — Field Validators
===============================

What:  Explicit, composable field constraints for Pokemon, Item and Move writes.
Why:   Every violation in a request is reported at once, keyed by field, so a
       form can highlight all bad inputs after a single round-trip.
How:   Each `check_*` function is pure: it takes a value and returns a list of
       messages (empty when valid). `ValidationErrors` collects them per field
       and raises `ValidationFailed` once everything has been checked.
       Uniqueness needs the database and lives in the services, which feed
       their findings into the same collector.

Message format:
    Numeric and enum failures embed the rejected value so the message still
    makes sense when shown away from the input: "'150' must be between 0 and 100".
"""

from typing import Any, Dict, Iterable, List, Optional

from pokedex_api.exceptions import ValidationFailed


BLANK_MESSAGE = "can't be blank"
BOOLEAN_MESSAGE = "must be true or false"

# Range of the INTEGER columns (int4 on PostgreSQL)
INTEGER_MIN = -2147483648
INTEGER_MAX = 2147483647


def _display(value: Any) -> str:
    return "" if value is None else str(value)


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, dict, set)):
        return len(value) == 0
    return False


def coerce_integer(value: Any) -> Optional[int]:
    """
    Returns `value` as an int, or None when it is not an integer.

    Form inputs arrive as strings ("49"), and JSON clients sometimes send
    integral floats (49.0); both are accepted. Booleans are not numbers here
    even though Python treats them as ints.
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


# ══════════════════════════════════════════════════════════════════════════
# Pure checks
# ══════════════════════════════════════════════════════════════════════════

def check_presence(value: Any) -> List[str]:
    return [BLANK_MESSAGE] if is_blank(value) else []


def check_integer(
    value: Any,
    *,
    greater_than: Optional[int] = None,
    minimum: Optional[int] = None,
    maximum: Optional[int] = None,
) -> List[str]:
    """
    Numericality check.

    `minimum`/`maximum` are inclusive; `greater_than` is exclusive. Values
    outside INTEGER_MIN..INTEGER_MAX always fail: the column cannot hold them.
    """
    shown = _display(value)
    if isinstance(value, float) and not value.is_integer():
        return [f"'{shown}' must be an integer"]
    number = coerce_integer(value)
    if number is None:
        return [f"'{shown}' is not a number"]
    if greater_than is not None and number <= greater_than:
        return [f"'{shown}' must be greater than {greater_than}"]
    if minimum is not None and maximum is not None:
        if not minimum <= number <= maximum:
            return [f"'{shown}' must be between {minimum} and {maximum}"]
        return []
    if minimum is not None and number < minimum:
        return [f"'{shown}' must be greater than or equal to {minimum}"]
    if maximum is not None and number > maximum:
        return [f"'{shown}' must be less than or equal to {maximum}"]
    if number < INTEGER_MIN:
        return [f"'{shown}' must be greater than or equal to {INTEGER_MIN}"]
    if number > INTEGER_MAX:
        return [f"'{shown}' must be less than or equal to {INTEGER_MAX}"]
    return []


def check_length(
    value: Any,
    *,
    minimum: Optional[int] = None,
    maximum: Optional[int] = None,
) -> List[str]:
    if value is None:
        value = ""
    if not isinstance(value, str):
        return ["must be a string"]
    messages = []
    if minimum is not None and len(value) < minimum:
        messages.append(f"is too short (minimum is {minimum} characters)")
    if maximum is not None and len(value) > maximum:
        messages.append(f"is too long (maximum is {maximum} characters)")
    return messages


def check_inclusion(value: Any, choices: Iterable[str], message: str) -> List[str]:
    """`message` may contain `{value}`, replaced by the rejected value."""
    # Lists and objects are unhashable; they are never a valid choice anyway
    if isinstance(value, str) and value in set(choices):
        return []
    return [message.format(value=_display(value))]


def check_boolean(value: Any) -> List[str]:
    # None is its own failure here, not a generic "can't be blank"
    if value is True or value is False:
        return []
    return [BOOLEAN_MESSAGE]


def uniqueness_message(value: Any) -> str:
    return f"'{_display(value)}' is already in use"


# ══════════════════════════════════════════════════════════════════════════
# Collector
# ══════════════════════════════════════════════════════════════════════════

class ValidationErrors:
    """
    Accumulates messages per field.

    Usage:
        errors = ValidationErrors()
        errors.add("number", check_integer(attrs.get("number"), greater_than=0))
        errors.add("name", check_length(attrs.get("name"), minimum=3, maximum=255))
        errors.raise_if_any()
    """

    def __init__(self) -> None:
        self._errors: Dict[str, List[str]] = {}

    def add(self, field: str, messages: Iterable[str]) -> None:
        for message in messages:
            bucket = self._errors.setdefault(field, [])
            if message not in bucket:
                bucket.append(message)

    def add_message(self, field: str, message: str) -> None:
        self.add(field, [message])

    def has(self, field: str) -> bool:
        return field in self._errors

    def __bool__(self) -> bool:
        return bool(self._errors)

    def __contains__(self, field: str) -> bool:
        return self.has(field)

    def as_dict(self) -> Dict[str, List[str]]:
        return {field: list(messages) for field, messages in self._errors.items()}

    def raise_if_any(self) -> None:
        if self._errors:
            raise ValidationFailed(self.as_dict())
