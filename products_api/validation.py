"""
Products API - Request Validation Rules
=======================================

What:  Declarative request rules as ordered lists of (predicate, message)
       checks, evaluated against a structured ``RequestData``.
How:   ``validate(rules, data)`` runs every check of every rule in order and
       returns one ``FieldError`` per failed check. Checks on the same field
       do not short-circuit, so an empty price reports "not numeric",
       "empty" and "not positive" as three separate errors.
Who:   Rule sets are attached to routes by ``products_api.routes.products``;
       this module has no HTTP dependency and is tested on its own.

Predicate semantics follow the string-based validators browser clients are
used to: numbers and numeric strings are both accepted as numeric, booleans
are never numeric, and "empty" means the string form of the value is "".
"""

import math
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence

PARAMS = "params"
BODY = "body"

_MISSING = object()

_INT_RE = re.compile(r"^[+-]?\d+$")
_NUMERIC_RE = re.compile(r"^[+-]?(\d*\.)?\d+$")
_BOOLEAN_STRINGS = {"true", "false", "1", "0"}


# ══════════════════════════════════════════════════════════════════════════
# Data Structures
# ══════════════════════════════════════════════════════════════════════════


@dataclass
class RequestData:
    """
    The parts of a request that rules can inspect.

    params: Path parameters exactly as they appeared in the URL (strings)
    body:   Decoded JSON object body, ``{}`` when absent
    """
    params: Dict[str, Any] = field(default_factory=dict)
    body: Dict[str, Any] = field(default_factory=dict)

    def source(self, location: str) -> Dict[str, Any]:
        return self.params if location == PARAMS else self.body

    def int_param(self, name: str) -> int:
        """Path parameter as int. Only call after an ``is_int`` rule has passed."""
        return int(str(self.params[name]).strip())


@dataclass(frozen=True)
class FieldError:
    """One failed check, serialized as an element of ``{"errors": [...]}``."""
    msg: str
    path: str
    location: str
    value: Any = _MISSING
    type: str = "field"

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"type": self.type}
        if self.value is not _MISSING:
            payload["value"] = self.value
        payload.update({"msg": self.msg, "path": self.path, "location": self.location})
        return payload


@dataclass(frozen=True)
class Check:
    predicate: Callable[[Any], bool]
    message: str


@dataclass(frozen=True)
class FieldRule:
    """All checks that apply to one field in one location, in order."""
    location: str
    path: str
    checks: Sequence[Check]

    def evaluate(self, data: RequestData) -> List[FieldError]:
        source = data.source(self.location)
        value = source.get(self.path, _MISSING)
        candidate = None if value is _MISSING else value
        return [
            FieldError(msg=check.message, path=self.path, location=self.location, value=value)
            for check in self.checks
            if not check.predicate(candidate)
        ]


def validate(rules: Sequence[FieldRule], data: RequestData) -> List[FieldError]:
    """Run ``rules`` in order and collect every violation (empty list = valid)."""
    errors: List[FieldError] = []
    for rule in rules:
        errors.extend(rule.evaluate(data))
    return errors


# ══════════════════════════════════════════════════════════════════════════
# Predicates
# ══════════════════════════════════════════════════════════════════════════


def _as_string(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (list, dict)) and not value:
        return ""
    return str(value)


def to_number(value: Any) -> Optional[float]:
    """Numeric value of ``value``, or None when it is not numeric."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        if not _NUMERIC_RE.match(value.strip()):
            return None
        value = value.strip()
    elif not isinstance(value, (int, float)):
        return None
    try:
        number = float(value)
    except OverflowError:
        return None
    # Values beyond float range ("1" followed by 400 zeros) parse to inf
    return number if math.isfinite(number) else None


def to_boolean(value: Any) -> Optional[bool]:
    """Boolean value of ``value``, or None when it is not boolean-like."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str) and value.strip().lower() in _BOOLEAN_STRINGS:
        return value.strip().lower() in ("true", "1")
    return None


def is_int(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, str) and bool(_INT_RE.match(value.strip()))


def is_numeric(value: Any) -> bool:
    return to_number(value) is not None


def not_empty(value: Any) -> bool:
    return _as_string(value) != ""


def is_positive(value: Any) -> bool:
    number = to_number(value)
    return number is not None and number > 0


def is_boolean(value: Any) -> bool:
    return to_boolean(value) is not None


# ══════════════════════════════════════════════════════════════════════════
# Rule Sets
# ══════════════════════════════════════════════════════════════════════════

ID_NOT_VALID = "Id not valid"
NAME_EMPTY = "The name can't be empty"
PRICE_NOT_VALID = "Price not valid"
PRICE_EMPTY = "The price can't be empty"
AVAILABILITY_NOT_VALID = "Availability's value not valid"

ID_RULE = FieldRule(PARAMS, "id", (Check(is_int, ID_NOT_VALID),))

NAME_RULE = FieldRule(BODY, "name", (Check(not_empty, NAME_EMPTY),))

PRICE_RULE = FieldRule(
    BODY,
    "price",
    (
        Check(is_numeric, PRICE_NOT_VALID),
        Check(not_empty, PRICE_EMPTY),
        Check(is_positive, PRICE_NOT_VALID),
    ),
)

AVAILABILITY_RULE = FieldRule(BODY, "availability", (Check(is_boolean, AVAILABILITY_NOT_VALID),))

PRODUCT_ID_RULES = (ID_RULE,)
CREATE_PRODUCT_RULES = (NAME_RULE, PRICE_RULE)
UPDATE_PRODUCT_RULES = (ID_RULE, NAME_RULE, PRICE_RULE, AVAILABILITY_RULE)
