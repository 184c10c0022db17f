"""Value transformers and the registry resolving them by name."""
from datetime import date
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional, Union


class _UnmappedValue:
    """Result of an enumerated lookup that has no entry for the value."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self):
        return False

    def __repr__(self):
        return "UNMAPPED_VALUE"

    def __reduce__(self):
        return (_UnmappedValue, ())


UNMAPPED_VALUE = _UnmappedValue()


class EnumRule:
    """Enumerated substitution table (symbolic value -> wire value)."""

    def __init__(self, table: Mapping[Any, Any]):
        self.table = MappingProxyType(dict(table))

    def lookup(self, value: Any) -> Any:
        """Return the wire value, or UNMAPPED_VALUE when there is no entry."""
        return self.table.get(value, UNMAPPED_VALUE)

    def reverse_lookup(self, wire_value: Any) -> Any:
        """Return the symbolic value for a wire value, or the wire value itself."""
        for symbolic, wire in self.table.items():
            if wire == wire_value:
                return symbolic
        return wire_value

    def __eq__(self, other):
        if isinstance(other, EnumRule):
            return dict(self.table) == dict(other.table)
        return False

    def __hash__(self):
        return hash(tuple(self.table.items()))

    def __repr__(self):
        return f"EnumRule({dict(self.table)!r})"


ValueRule = Union[Callable[[Any], Any], EnumRule]


def format_date(value: Any) -> str:
    """Format a date as YYYY-MM-DD. ISO strings are parsed first."""
    if isinstance(value, str):
        value = date.fromisoformat(value[:10])
    return value.strftime("%Y-%m-%d")


def strip_spaces(value: Any) -> Optional[str]:
    """Remove every space character (bank account numbers)."""
    if value is None:
        return value
    return str(value).replace(" ", "")


def percent_to_decimal(value: Any) -> str:
    """Rescale a percentage to a decimal string, e.g. 23 -> "0.23"."""
    return str(float(value) / 100)


def transform(value: Any, rule: Optional[ValueRule]) -> Any:
    """
    Produce the wire-ready value for a scalar

    Args:
        value: Symbolic value from the attribute tree
        rule: Callable, EnumRule or None

    Returns:
        Transformed value, the value unchanged when there is no rule, or
        UNMAPPED_VALUE when an enumerated table has no entry for it
    """
    if rule is None:
        return value

    if isinstance(rule, EnumRule):
        return rule.lookup(value)

    if isinstance(rule, Mapping):
        return rule.get(value, UNMAPPED_VALUE)

    return rule(value)


class TransformerRegistry:
    """Registry of available transformers."""

    def __init__(self):
        """Initialize registry."""
        self.transformers: Dict[str, Callable[[Any], Any]] = {
            "NONE": lambda x: x,
            "FORMAT_DATE": format_date,
            "STRIP_SPACES": strip_spaces,
            "PERCENT_TO_DECIMAL": percent_to_decimal,
            "UPPERCASE": lambda x: str(x).upper() if x else x,
            "LOWERCASE": lambda x: str(x).lower() if x else x,
            "TRIM": lambda x: str(x).strip() if x else x,
        }

    def get(self, name: str) -> Callable[[Any], Any]:
        """
        Get transformer by name

        Raises:
            KeyError: If no transformer is registered under that name
        """
        try:
            return self.transformers[name.upper()]
        except KeyError:
            raise KeyError(
                f"Unknown transformer: {name}. Available: {sorted(self.transformers)}"
            ) from None

    def register(self, name: str, func: Callable[[Any], Any]) -> None:
        """Register a custom transformer function"""
        self.transformers[name.upper()] = func

    def transform(self, value: Any, transformer_name: str) -> Any:
        """Apply transformation."""
        return transform(value, self.get(transformer_name))


# Shared instance used by the mapping loader
default_registry = TransformerRegistry()
