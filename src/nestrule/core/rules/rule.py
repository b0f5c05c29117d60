"""Rule facade - build once, evaluate against many contexts."""

import json
from typing import Any, Optional

from pydantic_core import PydanticSerializationError, to_jsonable_python

from nestrule.core.logging import get_logger

from .ast import Expression
from .builder import ExpressionBuilder
from .evaluator import Evaluator
from .exceptions import ContextNotObjectError, MalformedInputError, NonBooleanResultError
from .registry import OperatorRegistry
from .value import ValueKind

logger = get_logger(__name__)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def transcode(obj: Any) -> Any:
    """Transcode a host object into JSON-compatible data.

    Dataclasses, pydantic models, tuples, sets, enums, dates and the like
    are converted the way they would be serialized to JSON.

    Raises:
        MalformedInputError: If the object cannot be serialized, refers to
            itself or is nested too deeply to walk.
    """
    try:
        return to_jsonable_python(obj)
    except (PydanticSerializationError, ValueError, RecursionError) as e:
        raise MalformedInputError(f"Cannot convert {type(obj).__name__} to a rule tree: {e}") from e


class Rule:
    """A validated, immutable expression tree evaluated to a boolean verdict.

    A Rule holds no mutable state, so one instance can be evaluated
    concurrently from many threads.

    Example:
        rule = Rule(["all", [">=", "age", 18], ["in", "country", "DE", "FR"]])
        rule.evaluate({"age": 30, "country": "FR"})  # True
    """

    __slots__ = ("_root", "_max_depth")

    def __init__(
        self,
        tree: Any,
        *,
        registry: Optional[OperatorRegistry] = None,
        max_depth: Optional[int] = None,
    ):
        """Build a rule from an already parsed nested list.

        Args:
            tree: Nested list (or object) headed by an operator name.
            registry: Operator registry to resolve names against. Defaults
                to the builtin registry.
            max_depth: Nesting limit. Defaults to the configured limit.

        Raises:
            RuleSyntaxError: If the tree is not a valid expression.
            DepthLimitExceededError: If the tree is nested too deeply.
        """
        builder = ExpressionBuilder(registry=registry, max_depth=max_depth)
        self._root = builder.build(tree)
        self._max_depth = builder.max_depth
        logger.debug("Rule built", operator=self._root.operator.name, depth=self._root.depth)

    @classmethod
    def from_text(cls, text: str | bytes, **options: Any) -> "Rule":
        """Build a rule from its JSON text form.

        Raises:
            MalformedInputError: If the text is not strict JSON (NaN and
                Infinity are rejected) or is nested too deeply to decode.
        """
        try:
            tree = json.loads(text, parse_constant=_reject_constant)
        except RecursionError as e:
            raise MalformedInputError("Invalid rule text: nested too deeply") from e
        except ValueError as e:
            raise MalformedInputError(f"Invalid rule text: {e}") from e
        return cls(tree, **options)

    @classmethod
    def from_native(cls, obj: Any, **options: Any) -> "Rule":
        """Build a rule from any JSON-serializable host object."""
        return cls(transcode(obj), **options)

    @property
    def expression(self) -> Expression:
        return self._root

    def evaluate(self, context: Any) -> bool:
        """Evaluate the rule against a context.

        Args:
            context: A mapping, or a host object serializing to one
                (dataclass, pydantic model...).

        Returns:
            The boolean verdict.

        Raises:
            ContextNotObjectError: If the context is not a mapping.
            RuleEvaluationError: If evaluation fails.
        """
        data = transcode(context)
        if not isinstance(data, dict):
            raise ContextNotObjectError(type(data).__name__)

        result = Evaluator(data, max_depth=self._max_depth).evaluate(self._root)
        if result.kind is not ValueKind.BOOL:
            raise NonBooleanResultError(result)

        logger.debug("Rule evaluated", operator=self._root.operator.name, result=result.data)
        return result.data

    matches = evaluate

    def to_tree(self) -> list[Any]:
        """Return the nested-list form of the rule."""
        return self._root.to_tree()

    def to_text(self) -> str:
        """Return the JSON text form of the rule."""
        return json.dumps(self.to_tree())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Rule):
            return NotImplemented
        return self._root == other._root

    def __hash__(self) -> int:
        return hash(self._root)

    def __repr__(self) -> str:
        return f"Rule({self.to_text()})"


def rule(*items: Any, **options: Any) -> Rule:
    """Build a rule from its items: ``rule("=", "a", 1)``."""
    return Rule(list(items), **options)
