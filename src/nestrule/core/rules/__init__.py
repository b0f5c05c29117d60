"""Rule expression engine API."""

from typing import Any

from .ast import Expression
from .builder import ExpressionBuilder
from .evaluator import Evaluator
from .exceptions import (
    ContextKeyMissingError,
    ContextNotObjectError,
    DepthLimitExceededError,
    DivisionByZeroError,
    EmptyExpressionError,
    ExprNotArrayError,
    ExprOpNotStringError,
    MalformedInputError,
    NonBooleanResultError,
    OperatorRegistrationError,
    RuleError,
    RuleEvaluationError,
    RuleSyntaxError,
    UnknownOperatorError,
    VarArgNotStringError,
)
from .registry import Operator, OperatorRegistry, get_registry
from .rule import Rule, rule
from .value import Value, ValueKind


def evaluate_rule(tree: Any, context: Any) -> bool:
    """Build and evaluate a rule in one call."""
    return Rule(tree).evaluate(context)


__all__ = [
    "Rule",
    "rule",
    "evaluate_rule",
    "Expression",
    "ExpressionBuilder",
    "Evaluator",
    "Operator",
    "OperatorRegistry",
    "get_registry",
    "Value",
    "ValueKind",
    "RuleError",
    "RuleSyntaxError",
    "RuleEvaluationError",
    "MalformedInputError",
    "ExprNotArrayError",
    "ExprOpNotStringError",
    "UnknownOperatorError",
    "EmptyExpressionError",
    "ContextNotObjectError",
    "ContextKeyMissingError",
    "VarArgNotStringError",
    "NonBooleanResultError",
    "DivisionByZeroError",
    "DepthLimitExceededError",
    "OperatorRegistrationError",
]
