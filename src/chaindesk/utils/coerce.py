# src/chaindesk/utils/coerce.py
"""
Best-effort coercion of loosely-typed wire values.

Every helper here is total: it returns the canonical value or None, and
never guesses. None means "absent"; it is never replaced by 0 or False.
"""
import math
from typing import Any, Optional, Union

Number = Union[int, float]

def to_number(value: Any) -> Optional[Number]:
    """Return a finite number for numbers and numeric strings, else None"""
    # bool is an int subclass but never a number on the wire
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            return value if math.isfinite(value) else None
        except OverflowError:
            # ints past float range
            return None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            parsed = float(text)
        except ValueError:
            return None
        return parsed if math.isfinite(parsed) else None
    return None

def to_bool(value: Any) -> Optional[bool]:
    """Map true/false, 1/0 and "true"/"false" to a bool; anything else is None"""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        if value == 1:
            return True
        if value == 0:
            return False
        return None
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized == "true":
            return True
        if normalized == "false":
            return False
    return None

def to_index(value: Any) -> Optional[int]:
    """Coerce a block index; non-integral numbers are rejected"""
    number = to_number(value)
    if number is None or float(number) != int(number):
        return None
    return int(number)
