"""Builtin operator catalog.

Every operator is a plain function taking the fully resolved argument list
and returning a Value. Operators are total: a missing argument reads as
NULL and an unsupported argument shape degrades to a neutral result. The
only error an operator raises is DivisionByZeroError.
"""

import fnmatch
import math
import operator
from typing import Callable, Sequence

import re2

from .exceptions import DivisionByZeroError
from .value import NULL, Value, ValueKind, parse_float, parse_int, wrap_int

OperatorFunc = Callable[[Sequence[Value]], Value]


def _arg(args: Sequence[Value], index: int) -> Value:
    return args[index] if index < len(args) else NULL


# =============================================================================
# Special
# =============================================================================


def var(args: Sequence[Value]) -> Value:
    """Context lookup. Resolved by the evaluator, never dispatched."""
    return _arg(args, 0)


# =============================================================================
# Comparison (chained over adjacent pairs)
# =============================================================================


def _chained(relation: Callable[[Value, Value], bool]) -> OperatorFunc:
    def compare(args: Sequence[Value]) -> Value:
        return Value.of_bool(all(relation(left, right) for left, right in zip(args, args[1:])))

    return compare


eq = _chained(operator.eq)
lt = _chained(operator.lt)
le = _chained(operator.le)
ne = _chained(operator.ne)
ge = _chained(operator.ge)
gt = _chained(operator.gt)


# =============================================================================
# Logic
# =============================================================================


def and_(args: Sequence[Value]) -> Value:
    return Value.of_bool(all(arg.to_bool() for arg in args))


def or_(args: Sequence[Value]) -> Value:
    return Value.of_bool(any(arg.to_bool() for arg in args))


def not_(args: Sequence[Value]) -> Value:
    return Value.of_bool(not _arg(args, 0).to_bool())


# =============================================================================
# Arithmetic
# =============================================================================


def _int_div(name: str) -> Callable[[int, int], int]:
    def divide(left: int, right: int) -> int:
        if right == 0:
            raise DivisionByZeroError(name)
        quotient = abs(left) // abs(right)
        return quotient if (left < 0) == (right < 0) else -quotient

    return divide


def _int_mod(left: int, right: int) -> int:
    if right == 0:
        raise DivisionByZeroError("%")
    return left - right * _int_div("%")(left, right)


def _float_div(left: float, right: float) -> float:
    if right == 0:
        raise DivisionByZeroError("/")
    return left / right


def _float_mod(left: float, right: float) -> float:
    if right == 0:
        raise DivisionByZeroError("%")
    if math.isinf(left) or math.isnan(left) or math.isnan(right):
        return math.nan
    return math.fmod(left, right)


def _fold(
    args: Sequence[Value],
    int_op: Callable[[int, int], int],
    float_op: Callable[[float, float], float],
    concat: bool = False,
) -> Value:
    """Fold left to right using the arithmetic of the first operand's kind."""
    if not args:
        return NULL
    head, rest = args[0], args[1:]
    kind = head.kind

    if kind is ValueKind.FLOAT:
        total = head.data
        for arg in rest:
            total = float_op(total, arg.to_float())
        return Value.of_float(total)

    if kind is ValueKind.STRING and concat:
        return Value.of_str(head.data + "".join(arg.to_str() for arg in rest))

    if kind in (ValueKind.NULL, ValueKind.BOOL, ValueKind.INT, ValueKind.STRING):
        number = head.to_int()
        for arg in rest:
            number = wrap_int(int_op(number, arg.to_int()))
        return Value.of_int(number)

    return NULL


def add(args: Sequence[Value]) -> Value:
    return _fold(args, operator.add, operator.add, concat=True)


def sub(args: Sequence[Value]) -> Value:
    return _fold(args, operator.sub, operator.sub)


def mul(args: Sequence[Value]) -> Value:
    return _fold(args, operator.mul, operator.mul)


def div(args: Sequence[Value]) -> Value:
    return _fold(args, _int_div("/"), _float_div)


def mod(args: Sequence[Value]) -> Value:
    return _fold(args, _int_mod, _float_mod)


def neg(args: Sequence[Value]) -> Value:
    return Value.of_int(wrap_int(-_arg(args, 0).to_int()))


def abs_(args: Sequence[Value]) -> Value:
    # Floats are truncated to integers first. abs(INT64_MIN) wraps to itself.
    return Value.of_int(wrap_int(abs(_arg(args, 0).to_int())))


# =============================================================================
# Collection
# =============================================================================


def in_(args: Sequence[Value]) -> Value:
    if not args:
        return Value.of_bool(False)
    return Value.of_bool(args[0] in args[1:])


def startswith(args: Sequence[Value]) -> Value:
    subject = _arg(args, 0)
    if subject.kind is ValueKind.STRING:
        return Value.of_bool(subject.data.startswith(_arg(args, 1).to_str()))
    if subject.kind is ValueKind.ARRAY:
        prefix = tuple(args[1:])
        return Value.of_bool(subject.data[: len(prefix)] == prefix)
    return Value.of_bool(False)


def endswith(args: Sequence[Value]) -> Value:
    subject = _arg(args, 0)
    if subject.kind is ValueKind.STRING:
        return Value.of_bool(subject.data.endswith(_arg(args, 1).to_str()))
    if subject.kind is ValueKind.ARRAY:
        suffix = tuple(args[1:])
        if len(suffix) > len(subject.data):
            return Value.of_bool(False)
        return Value.of_bool(subject.data[len(subject.data) - len(suffix):] == suffix)
    return Value.of_bool(False)


def split(args: Sequence[Value]) -> Value:
    text = _arg(args, 0).to_str()
    separator = _arg(args, 1).to_str()
    if separator:
        parts = text.split(separator)
    else:
        parts = ["", *text, ""]
    return Value.of_array(Value.of_str(part) for part in parts)


def join(args: Sequence[Value]) -> Value:
    separator = _arg(args, 0).to_str()
    return Value.of_str(separator.join(arg.to_str() for arg in args[1:]))


# =============================================================================
# String
# =============================================================================


def lower(args: Sequence[Value]) -> Value:
    return Value.of_str(_arg(args, 0).to_str().lower())


def upper(args: Sequence[Value]) -> Value:
    return Value.of_str(_arg(args, 0).to_str().upper())


def _valid_glob(pattern: str) -> bool:
    """Reject character classes that are never closed."""
    index = 0
    while index < len(pattern):
        if pattern[index] == "[":
            end = index + 1
            if end < len(pattern) and pattern[end] == "!":
                end += 1
            if end < len(pattern) and pattern[end] == "]":
                end += 1
            end = pattern.find("]", end)
            if end == -1:
                return False
            index = end
        index += 1
    return True


def match(args: Sequence[Value]) -> Value:
    """Shell-style glob match of args[1] against args[0]."""
    pattern = _arg(args, 1).to_str()
    if not _valid_glob(pattern):
        return Value.of_bool(False)
    return Value.of_bool(fnmatch.fnmatchcase(_arg(args, 0).to_str(), pattern))


def regex(args: Sequence[Value]) -> Value:
    """Regular expression search of args[1] in args[0].

    Patterns use RE2 syntax and match in linear time, so a rule received as
    data cannot stall evaluation. Backreferences and lookaround are not
    supported and, like any invalid pattern, never match.
    """
    try:
        compiled = re2.compile(_arg(args, 1).to_str())
    except re2.error:
        return Value.of_bool(False)
    return Value.of_bool(compiled.search(_arg(args, 0).to_str()) is not None)


# =============================================================================
# Casting
# =============================================================================


def num(args: Sequence[Value]) -> Value:
    subject = _arg(args, 0)
    if subject.kind in (ValueKind.INT, ValueKind.FLOAT):
        return subject
    if subject.kind is ValueKind.STRING:
        number = parse_int(subject.data)
        if number is not None:
            return Value.of_int(number)
        real = parse_float(subject.data)
        if real is not None:
            return Value.of_float(real)
        return Value.of_int(0)
    return Value.of_int(subject.to_int())


def string(args: Sequence[Value]) -> Value:
    return Value.of_str(_arg(args, 0).to_str())


# Names (first entry) and aliases for each builtin.
BUILTINS: tuple[tuple[tuple[str, ...], OperatorFunc], ...] = (
    (("var",), var),
    (("=",), eq),
    (("<",), lt),
    (("<=",), le),
    (("!=",), ne),
    ((">=",), ge),
    ((">",), gt),
    (("&", "&&", "all"), and_),
    (("|", "||", "any"), or_),
    (("!",), not_),
    (("+", "sum"), add),
    (("-", "minus"), sub),
    (("neg",), neg),
    (("*",), mul),
    (("/",), div),
    (("%", "mod"), mod),
    (("abs",), abs_),
    (("in",), in_),
    (("startswith",), startswith),
    (("endswith",), endswith),
    (("split",), split),
    (("join",), join),
    (("lower",), lower),
    (("upper",), upper),
    (("match",), match),
    (("regex",), regex),
    (("num",), num),
    (("string",), string),
)
