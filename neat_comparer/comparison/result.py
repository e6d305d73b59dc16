"""Outcome of one property comparison."""

from dataclasses import dataclass, field
from typing import Any, Dict

from neat_comparer.comparison.accessors import PropertyAccessor


def qualified_name(cls: type) -> str:
    """Return "module.QualName" for a class."""
    return f"{cls.__module__}.{cls.__qualname__}"


@dataclass(frozen=True)
class PropertyComparisonResult:
    """
    Result of comparing one property pair of two instances.

    Attributes:
        first_value: Value read from the first instance, converted to its declared type
        second_value: Value read from the second instance, converted to its declared type
        first_accessor: Accessor of the first instance's property
        second_accessor: Accessor of the second instance's property
        first_type: Class of the first compared instance
        second_type: Class of the second compared instance
        is_equal: Outcome of the equality predicate
    """

    first_value: Any
    second_value: Any
    first_accessor: PropertyAccessor = field(repr=False)
    second_accessor: PropertyAccessor = field(repr=False)
    first_type: type
    second_type: type
    is_equal: bool

    @property
    def has_difference(self) -> bool:
        return not self.is_equal

    @property
    def first_property_name(self) -> str:
        return self.first_accessor.name

    @property
    def second_property_name(self) -> str:
        return self.second_accessor.name

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "first_value": self.first_value,
            "second_value": self.second_value,
            "first_property_name": self.first_property_name,
            "second_property_name": self.second_property_name,
            "first_type": qualified_name(self.first_type),
            "second_type": qualified_name(self.second_type),
            "is_equal": self.is_equal,
            "has_difference": self.has_difference,
        }
