"""Evaluator for expression trees."""

from typing import Any, Optional

from nestrule.core.config import get_settings

from .ast import Expression
from .exceptions import ContextKeyMissingError, VarArgNotStringError
from .registry import VAR
from .value import Value


class Evaluator:
    """Evaluates an expression tree bottom-up against a context."""

    def __init__(self, context: dict[str, Any], max_depth: Optional[int] = None):
        """Initialize the evaluator.

        Args:
            context: Flat mapping of JSON-compatible data.
            max_depth: Nesting limit for materialized context data.
        """
        self.context = context
        self.max_depth = max_depth if max_depth is not None else get_settings().max_depth

    def evaluate(self, expression: Expression) -> Value:
        """Evaluate an expression to a single value."""
        args = [
            self.evaluate(arg.data) if arg.is_expr else arg
            for arg in expression.args
        ]

        if expression.operator.name == VAR:
            return self.lookup(args[0] if args else Value.null())

        if args:
            args[0] = self.try_lookup(args[0])

        return expression.operator(args)

    def lookup(self, key: Value) -> Value:
        """Resolve a context variable.

        Raises:
            VarArgNotStringError: If `key` is not a string.
            ContextKeyMissingError: If the context has no such key.
        """
        name = key.as_str()
        if name is None:
            raise VarArgNotStringError()
        if name not in self.context:
            raise ContextKeyMissingError(name)
        return Value.from_context(self.context[name], self.max_depth)

    def try_lookup(self, candidate: Value) -> Value:
        """Resolve `candidate` if it names a context key, else return it unchanged."""
        name = candidate.as_str()
        if name is None or name not in self.context:
            return candidate
        return Value.from_context(self.context[name], self.max_depth)
