"""Builder turning untyped nested lists into expression trees."""

from typing import Any, Optional

from nestrule.core.config import get_settings

from .ast import Expression
from .exceptions import (
    DepthLimitExceededError,
    EmptyExpressionError,
    ExprNotArrayError,
    ExprOpNotStringError,
    MalformedInputError,
    UnknownOperatorError,
)
from .registry import OperatorRegistry, get_registry
from .value import Value


class ExpressionBuilder:
    """Recursive, validating builder for expression trees.

    A node is a list headed by an operator name. Objects are accepted as
    nodes too and read positionally, in iteration order, with their keys
    discarded.
    """

    def __init__(
        self,
        registry: Optional[OperatorRegistry] = None,
        max_depth: Optional[int] = None,
    ):
        self.registry = registry if registry is not None else get_registry()
        self.max_depth = max_depth if max_depth is not None else get_settings().max_depth

    def build(self, tree: Any) -> Expression:
        """Build the root expression.

        Raises:
            RuleSyntaxError: If any node is malformed.
            DepthLimitExceededError: If nesting exceeds `max_depth`.
        """
        return self._build(tree, (), 1)

    def _build(self, node: Any, path: tuple[int, ...], depth: int) -> Expression:
        if depth > self.max_depth:
            raise DepthLimitExceededError(self.max_depth)

        items = self._positional(node, path)
        if not items:
            raise EmptyExpressionError(path)

        head = items[0]
        if not isinstance(head, str):
            raise ExprOpNotStringError(path + (0,))

        operator = self.registry.lookup(head)
        if operator is None:
            raise UnknownOperatorError(head, path + (0,))

        args = tuple(
            self._argument(item, path + (index,), depth)
            for index, item in enumerate(items[1:], start=1)
        )
        return Expression(operator, args)

    def _argument(self, node: Any, path: tuple[int, ...], depth: int) -> Value:
        value = Value.from_scalar(node)
        if value is not None:
            return value
        if isinstance(node, (list, tuple, dict)):
            return Value.of_expr(self._build(node, path, depth + 1))
        raise MalformedInputError(f"Unsupported node type {type(node).__name__}", path)

    @staticmethod
    def _positional(node: Any, path: tuple[int, ...]) -> list[Any]:
        if isinstance(node, dict):
            return list(node.values())
        if isinstance(node, (list, tuple)):
            return list(node)
        raise ExprNotArrayError(path or None)
