"""Expression tree nodes."""

from dataclasses import dataclass
from typing import Any

from .registry import Operator
from .value import Value


@dataclass(frozen=True)
class Expression:
    """One operator applied to an ordered list of arguments.

    Arguments are literal values or nested expressions wrapped in
    `Value.of_expr`. The operator is resolved once, when the tree is built.
    """

    operator: Operator
    args: tuple[Value, ...]

    @classmethod
    def build(cls, tree: Any, **options: Any) -> "Expression":
        """Build an expression from an untyped nested list."""
        from .builder import ExpressionBuilder

        return ExpressionBuilder(**options).build(tree)

    def evaluate(self, context: dict[str, Any], **options: Any) -> Value:
        """Evaluate against a context mapping."""
        from .evaluator import Evaluator

        return Evaluator(context, **options).evaluate(self)

    @property
    def depth(self) -> int:
        """Nesting depth; a leaf expression has depth 1."""
        nested = [arg.data.depth for arg in self.args if arg.is_expr]
        return 1 + max(nested, default=0)

    def to_tree(self) -> list[Any]:
        """Convert back to the nested-list form."""
        return [
            self.operator.name,
            *(arg.data.to_tree() if arg.is_expr else arg.to_python() for arg in self.args),
        ]
