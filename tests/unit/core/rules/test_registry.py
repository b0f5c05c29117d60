"""Unit tests for the operator registry."""

import threading

import pytest

from nestrule.core.rules import operators as ops
from nestrule.core.rules import registry as registry_module
from nestrule.core.rules.exceptions import OperatorRegistrationError
from nestrule.core.rules.registry import Operator, OperatorRegistry, get_registry
from nestrule.core.rules.value import Value


def double(args):
    return Value.of_int(args[0].to_int() * 2)


class TestLookup:
    """Test name resolution in the builtin registry."""

    @pytest.mark.parametrize(
        "name",
        ["var", "=", "<", "<=", "!=", ">=", ">", "&", "&&", "all", "|", "||", "any", "!",
         "+", "sum", "-", "minus", "neg", "*", "/", "%", "mod", "abs", "in", "startswith",
         "endswith", "split", "join", "lower", "upper", "match", "regex", "num", "string"],
    )
    def test_builtin_names(self, name):
        """Test every builtin name and alias resolves."""
        operator = get_registry().lookup(name)
        assert isinstance(operator, Operator)
        assert operator.name == name

    def test_aliases_share_function(self):
        """Test aliases are separate keys bound to one function."""
        registry = get_registry()
        assert registry.lookup("&").func is registry.lookup("all").func is ops.and_
        assert registry.lookup("||").func is registry.lookup("any").func is ops.or_
        assert registry.lookup("sum").func is ops.add

    def test_unknown_and_case_sensitive(self):
        """Test misses return None without fallback."""
        registry = get_registry()
        assert registry.lookup("ALL") is None
        assert registry.lookup("nope") is None
        assert "nope" not in registry
        assert "all" in registry

    def test_operator_is_callable(self):
        """Test an operator dispatches to its function."""
        operator = get_registry().lookup("+")
        assert operator([Value.of_int(1), Value.of_int(2)]) == Value.of_int(3)


class TestSingleInitialization:
    """Test the builtin registry is created once."""

    def test_same_instance(self):
        """Test repeated calls return one registry."""
        assert get_registry() is get_registry()

    def test_concurrent_first_use(self, monkeypatch):
        """Test concurrent first access builds the registry once."""
        monkeypatch.setattr(registry_module, "_registry", None)
        original = OperatorRegistry.from_catalog
        calls = []

        def counting_from_catalog(*args, **kwargs):
            calls.append(1)
            return original(*args, **kwargs)

        monkeypatch.setattr(OperatorRegistry, "from_catalog", counting_from_catalog)

        barrier = threading.Barrier(8)
        seen = []

        def worker():
            barrier.wait()
            seen.append(get_registry())

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(calls) == 1
        assert len({id(registry) for registry in seen}) == 1


class TestExtend:
    """Test custom operator registration."""

    def test_extend_returns_new_registry(self):
        """Test the builtin registry is left untouched."""
        base = get_registry()
        extended = base.extend("double", double, "twice")

        assert extended is not base
        assert "double" not in base
        assert extended.lookup("double").func is double
        assert extended.lookup("twice").name == "twice"
        assert len(extended) == len(base) + 2
        assert extended.lookup("=") == base.lookup("=")

    def test_extend_can_replace(self):
        """Test an existing name can be rebound."""
        extended = get_registry().extend("+", double)
        assert extended.lookup("+").func is double
        assert get_registry().lookup("+").func is ops.add

    @pytest.mark.parametrize("name", ["var", ""])
    def test_rejected_names(self, name):
        """Test reserved and empty names are refused."""
        with pytest.raises(OperatorRegistrationError):
            get_registry().extend(name, double)

    def test_rejected_alias(self):
        """Test aliases are validated too."""
        with pytest.raises(OperatorRegistrationError):
            get_registry().extend("double", double, "var")

    def test_rejected_function(self):
        """Test non-callables are refused."""
        with pytest.raises(OperatorRegistrationError):
            get_registry().extend("double", 42)

    def test_from_catalog(self):
        """Test a registry can be built from a custom catalog."""
        registry = OperatorRegistry.from_catalog(((("twice", "x2"), double),))
        assert registry.names() == ["twice", "x2"]
        assert list(registry) == ["twice", "x2"]

    def test_from_catalog_iterable(self):
        """Test any iterable of name groups and functions is accepted."""
        catalog = ((names, func) for names, func in ops.BUILTINS if "abs" in names)
        registry = OperatorRegistry.from_catalog(catalog)
        assert registry.names() == ["abs"]
        assert registry.lookup("abs")([Value.of_int(-2)]) == Value.of_int(2)
