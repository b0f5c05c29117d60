"""Exceptions for rule construction and evaluation."""

from typing import Any


class RuleError(Exception):
    """Base class for all rule-related errors."""
    pass


class RuleSyntaxError(RuleError):
    """Raised when a rule tree cannot be turned into an expression."""
    def __init__(self, message: str, path: tuple[int, ...] | None = None):
        self.path = path
        if path:
            location = "".join(f"[{index}]" for index in path)
            message = f"{message} at {location}"
        super().__init__(message)


class MalformedInputError(RuleSyntaxError):
    """Raised when text or a host object does not yield a usable tree."""
    pass


class ExprNotArrayError(RuleSyntaxError):
    """Raised when an expression node is not an array."""
    def __init__(self, path: tuple[int, ...] | None = None):
        super().__init__("Expression must be an array", path)


class ExprOpNotStringError(RuleSyntaxError):
    """Raised when the head of an expression is not a string."""
    def __init__(self, path: tuple[int, ...] | None = None):
        super().__init__("Expression operator must be a string", path)


class UnknownOperatorError(RuleSyntaxError):
    """Raised when the operator name is not registered."""
    def __init__(self, name: str, path: tuple[int, ...] | None = None):
        self.name = name
        super().__init__(f"Unknown operator: {name!r}", path)


class EmptyExpressionError(RuleSyntaxError):
    """Raised when an expression array has no operator."""
    def __init__(self, path: tuple[int, ...] | None = None):
        super().__init__("Expression is empty", path)


class RuleEvaluationError(RuleError):
    """Raised when rule evaluation fails."""
    pass


class ContextNotObjectError(RuleEvaluationError):
    """Raised when the evaluation context is not a mapping."""
    def __init__(self, kind: str):
        super().__init__(f"Context must be an object, got {kind}")


class ContextKeyMissingError(RuleEvaluationError):
    """Raised when `var` names a key absent from the context."""
    def __init__(self, key: str):
        self.key = key
        super().__init__(f"No such variable in context: {key!r}")


class VarArgNotStringError(RuleEvaluationError):
    """Raised when the argument of `var` is not a string."""
    def __init__(self) -> None:
        super().__init__("Argument of 'var' must be a string")


class NonBooleanResultError(RuleEvaluationError):
    """Raised when a rule evaluates to something other than a boolean."""
    def __init__(self, value: Any):
        self.value = value
        super().__init__(f"Rule result must be a boolean, got {value!r}")


class DivisionByZeroError(RuleEvaluationError, ZeroDivisionError):
    """Raised on division or remainder by a zero divisor."""
    def __init__(self, operator: str):
        self.operator = operator
        super().__init__(f"Division by zero in {operator!r}")


class DepthLimitExceededError(RuleError):
    """Raised when rule or context nesting is deeper than allowed."""
    def __init__(self, max_depth: int, where: str = "rule"):
        self.max_depth = max_depth
        super().__init__(f"{where.capitalize()} nesting exceeds maximum depth of {max_depth}")


class OperatorRegistrationError(RuleError):
    """Raised when an operator cannot be added to a registry."""
    pass
