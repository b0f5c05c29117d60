"""nestrule - embeddable rule evaluator.

Rules are nested lists headed by an operator name, such as
``["=", ["var", "a"], 1]``, evaluated against a flat context mapping to a
boolean verdict.
"""

__version__ = "0.1.0"

from nestrule.core.rules import (
    ContextKeyMissingError,
    ContextNotObjectError,
    DepthLimitExceededError,
    DivisionByZeroError,
    EmptyExpressionError,
    ExprNotArrayError,
    ExprOpNotStringError,
    Expression,
    MalformedInputError,
    NonBooleanResultError,
    Operator,
    OperatorRegistrationError,
    OperatorRegistry,
    Rule,
    RuleError,
    RuleEvaluationError,
    RuleSyntaxError,
    UnknownOperatorError,
    Value,
    ValueKind,
    VarArgNotStringError,
    evaluate_rule,
    get_registry,
    rule,
)

__all__ = [
    "__version__",
    "Rule",
    "rule",
    "evaluate_rule",
    "Expression",
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
