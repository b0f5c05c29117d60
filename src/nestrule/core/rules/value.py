"""Tagged runtime values and the coercion rules shared by every operator.

A `Value` is what flows through evaluation: literals taken from the rule
tree, data materialized from the context, and operator results. Each value
carries a `ValueKind` tag and the Python object holding its content:

    NULL    None
    BOOL    bool
    INT     int (signed 64-bit range, arithmetic wraps)
    FLOAT   float
    STRING  str
    ARRAY   tuple of Value (only ever produced from context data or operators)
    EXPR    an unevaluated Expression (only ever present before evaluation)

Coercions never raise. Text that does not parse as a number becomes zero and
containers coerce to the neutral value of the target type.

Note: coercing a STRING to bool yields True only for the empty string. Rules
in the wild depend on this, so it is kept as is.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, Any

from .exceptions import DepthLimitExceededError

if TYPE_CHECKING:
    from .ast import Expression

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

_INT_RE = re.compile(r"[+-]?[0-9]+")
_FLOAT_RE = re.compile(
    r"[+-]?(?:[0-9]+\.?[0-9]*(?:[eE][+-]?[0-9]+)?|\.[0-9]+(?:[eE][+-]?[0-9]+)?|inf|infinity|nan)",
    re.IGNORECASE,
)


class ValueKind(Enum):
    """Value variants, declared in ordering rank."""

    NULL = 0
    BOOL = 1
    INT = 2
    FLOAT = 3
    STRING = 4
    ARRAY = 5
    EXPR = 6


def parse_int(text: str) -> int | None:
    """Parse a signed 64-bit integer, or return None."""
    if not _INT_RE.fullmatch(text):
        return None
    number = int(text)
    if not INT64_MIN <= number <= INT64_MAX:
        return None
    return number


def wrap_int(number: int) -> int:
    """Wrap an integer into the signed 64-bit range (two's complement)."""
    return (number - INT64_MIN) % 2**64 + INT64_MIN


def parse_float(text: str) -> float | None:
    """Parse a float literal, or return None."""
    if not _FLOAT_RE.fullmatch(text):
        return None
    return float(text)


def format_float(number: float) -> str:
    """Render a float in its canonical, exponent-free form."""
    if math.isnan(number):
        return "NaN"
    if math.isinf(number):
        return "inf" if number > 0 else "-inf"
    if number.is_integer():
        if number == 0 and math.copysign(1.0, number) < 0:
            return "-0"
        return str(int(number))
    return format(Decimal(repr(number)), "f")


def _truncate(number: float) -> int:
    if math.isnan(number):
        return 0
    if number >= INT64_MAX:
        return INT64_MAX
    if number <= INT64_MIN:
        return INT64_MIN
    return int(number)


@dataclass(frozen=True, eq=False)
class Value:
    """A single runtime datum."""

    kind: ValueKind
    data: Any = None

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def null(cls) -> Value:
        return NULL

    @classmethod
    def of_bool(cls, value: bool) -> Value:
        return TRUE if value else FALSE

    @classmethod
    def of_int(cls, value: int) -> Value:
        return cls(ValueKind.INT, int(value))

    @classmethod
    def of_float(cls, value: float) -> Value:
        return cls(ValueKind.FLOAT, float(value))

    @classmethod
    def of_str(cls, value: str) -> Value:
        return cls(ValueKind.STRING, value)

    @classmethod
    def of_array(cls, items: Any) -> Value:
        return cls(ValueKind.ARRAY, tuple(items))

    @classmethod
    def of_expr(cls, expression: Expression) -> Value:
        return cls(ValueKind.EXPR, expression)

    @classmethod
    def from_scalar(cls, node: Any) -> Value | None:
        """Map a JSON scalar onto a Value, or return None for containers.

        Integers outside the 64-bit range are kept as floats, the way a
        JSON reader hands them over.
        """
        if node is None:
            return NULL
        if isinstance(node, bool):
            return cls.of_bool(node)
        if isinstance(node, int):
            if INT64_MIN <= node <= INT64_MAX:
                return cls.of_int(node)
            return cls.of_float(float(node))
        if isinstance(node, float):
            return cls.of_float(node)
        if isinstance(node, str):
            return cls.of_str(node)
        return None

    @classmethod
    def from_context(cls, node: Any, max_depth: int, _depth: int = 0) -> Value:
        """Materialize context data.

        Lists and objects become ARRAY values (object values in iteration
        order). Context data is never read as rule syntax, so no EXPR is
        ever produced here.
        """
        scalar = cls.from_scalar(node)
        if scalar is not None:
            return scalar
        if _depth >= max_depth:
            raise DepthLimitExceededError(max_depth, where="context")
        if isinstance(node, dict):
            node = list(node.values())
        if isinstance(node, (list, tuple)):
            return cls.of_array(cls.from_context(item, max_depth, _depth + 1) for item in node)
        return NULL

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def is_expr(self) -> bool:
        return self.kind is ValueKind.EXPR

    def as_str(self) -> str | None:
        """Return the raw string held by a STRING value."""
        return self.data if self.kind is ValueKind.STRING else None

    def as_bool(self) -> bool | None:
        """Return the raw boolean held by a BOOL value."""
        return self.data if self.kind is ValueKind.BOOL else None

    def to_python(self) -> Any:
        """Convert back to plain Python data."""
        if self.kind is ValueKind.ARRAY:
            return [item.to_python() for item in self.data]
        return self.data

    # ------------------------------------------------------------------
    # Coercions
    # ------------------------------------------------------------------

    def to_bool(self) -> bool:
        kind = self.kind
        if kind is ValueKind.BOOL:
            return self.data
        if kind in (ValueKind.INT, ValueKind.FLOAT):
            return self.data != 0
        if kind is ValueKind.STRING:
            return self.data == ""
        return False

    def to_int(self) -> int:
        kind = self.kind
        if kind in (ValueKind.BOOL, ValueKind.INT):
            return int(self.data)
        if kind is ValueKind.FLOAT:
            return _truncate(self.data)
        if kind is ValueKind.STRING:
            return parse_int(self.data) or 0
        return 0

    def to_float(self) -> float:
        kind = self.kind
        if kind in (ValueKind.BOOL, ValueKind.INT, ValueKind.FLOAT):
            return float(self.data)
        if kind is ValueKind.STRING:
            parsed = parse_float(self.data)
            return 0.0 if parsed is None else parsed
        return 0.0

    def to_str(self) -> str:
        kind = self.kind
        if kind is ValueKind.STRING:
            return self.data
        if kind is ValueKind.BOOL:
            return "true" if self.data else "false"
        if kind is ValueKind.INT:
            return str(self.data)
        if kind is ValueKind.FLOAT:
            return format_float(self.data)
        return ""

    # ------------------------------------------------------------------
    # Ordering
    # ------------------------------------------------------------------

    def compare(self, other: Value) -> int | None:
        """Three-way compare; None when the pair is unordered (NaN)."""
        if self.kind is not other.kind:
            return -1 if self.kind.value < other.kind.value else 1
        kind = self.kind
        if kind is ValueKind.NULL:
            return 0
        if kind is ValueKind.ARRAY:
            for left, right in zip(self.data, other.data):
                result = left.compare(right)
                if result != 0:
                    return result
            return (len(self.data) > len(other.data)) - (len(self.data) < len(other.data))
        if kind is ValueKind.EXPR:
            return 0 if self.data == other.data else None
        left, right = self.data, other.data
        if left == right:
            return 0
        if left < right:
            return -1
        if left > right:
            return 1
        return None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        return self.compare(other) == 0

    def __ne__(self, other: object) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        return self.compare(other) != 0

    def __lt__(self, other: Value) -> bool:
        return self.compare(other) == -1

    def __le__(self, other: Value) -> bool:
        return self.compare(other) in (-1, 0)

    def __gt__(self, other: Value) -> bool:
        return self.compare(other) == 1

    def __ge__(self, other: Value) -> bool:
        return self.compare(other) in (0, 1)

    def __hash__(self) -> int:
        return hash((self.kind, self.data))

    def __repr__(self) -> str:
        if self.kind is ValueKind.NULL:
            return "Value(NULL)"
        return f"Value({self.kind.name}, {self.data!r})"


NULL = Value(ValueKind.NULL)
TRUE = Value(ValueKind.BOOL, True)
FALSE = Value(ValueKind.BOOL, False)
