"""Operator registry - name to function dispatch table.

The builtin registry is created once, on first use, and is read-only from
then on. Any number of threads may look operators up concurrently.

Custom operators never modify the builtin registry. `extend` returns a new
registry that callers pass explicitly when building rules:

    registry = get_registry().extend("double", lambda args: Value.of_int(args[0].to_int() * 2))
    rule = Rule(["=", ["double", "a"], 4], registry=registry)
"""

import threading
from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping, Optional, Sequence

from nestrule.core.logging import get_logger

from .exceptions import OperatorRegistrationError
from .operators import BUILTINS, OperatorFunc
from .value import Value

logger = get_logger(__name__)

VAR = "var"


@dataclass(frozen=True)
class Operator:
    """A named, pure function over a list of argument values.

    Attributes:
        name: The key the operator was registered under.
        func: The function invoked with the resolved arguments.
    """

    name: str
    func: OperatorFunc

    def __call__(self, args: Sequence[Value]) -> Value:
        return self.func(args)

    def __repr__(self) -> str:
        return f"Operator({self.name!r})"


class OperatorRegistry:
    """Immutable mapping from operator name (aliases included) to Operator."""

    def __init__(self, operators: Mapping[str, Operator]) -> None:
        self._operators = MappingProxyType(dict(operators))

    @classmethod
    def from_catalog(
        cls, catalog: Iterable[tuple[tuple[str, ...], OperatorFunc]] = BUILTINS
    ) -> "OperatorRegistry":
        """Build a registry inserting every alias under its own key."""
        operators: dict[str, Operator] = {}
        for names, func in catalog:
            for name in names:
                operators[name] = Operator(name, func)
        return cls(operators)

    def lookup(self, name: str) -> Optional[Operator]:
        """Return the operator registered under `name`, if any."""
        return self._operators.get(name)

    def names(self) -> list[str]:
        return sorted(self._operators)

    def extend(self, name: str, func: OperatorFunc, *aliases: str) -> "OperatorRegistry":
        """Return a new registry with `func` added under `name` and `aliases`.

        Args:
            name: Operator name.
            func: Function taking the resolved argument list and returning a Value.
            *aliases: Additional names bound to the same function.

        Returns:
            A new OperatorRegistry; this one is left untouched.

        Raises:
            OperatorRegistrationError: If a name is empty or reserved, or
                `func` is not callable.
        """
        if not callable(func):
            raise OperatorRegistrationError(f"Operator {name!r} must be callable")

        operators = dict(self._operators)
        for key in (name, *aliases):
            if not isinstance(key, str) or not key:
                raise OperatorRegistrationError("Operator name must be a non-empty string")
            if key == VAR:
                raise OperatorRegistrationError(f"Operator name {VAR!r} is reserved")
            operators[key] = Operator(key, func)

        logger.debug(
            "Operator registered",
            operator=name,
            aliases=list(aliases),
            replaced=[key for key in (name, *aliases) if key in self._operators],
        )
        return OperatorRegistry(operators)

    def __contains__(self, name: object) -> bool:
        return name in self._operators

    def __len__(self) -> int:
        return len(self._operators)

    def __iter__(self) -> Iterator[str]:
        return iter(self._operators)


_registry: Optional[OperatorRegistry] = None
_registry_lock = threading.Lock()


def get_registry() -> OperatorRegistry:
    """Get the builtin registry, creating it exactly once."""
    global _registry
    if _registry is None:
        with _registry_lock:
            if _registry is None:
                _registry = OperatorRegistry.from_catalog()
                logger.debug("Operator registry initialized", operators=len(_registry))
    return _registry
