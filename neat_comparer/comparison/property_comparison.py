"""
Property Comparison Descriptors

A PropertyComparison binds one property of a "first" class and one property
of a "second" class (possibly the same class, possibly different names) to an
equality predicate, and evaluates that predicate against instance pairs.

Construction modes:
- Single property name, default equality (==)
- Single property name + custom predicate
- Two property names + custom predicate (the predicate is mandatory)

Predicates receive the two instances, not the extracted values, so they can
apply derived or cross-property logic.
"""

from typing import Any, Callable, Optional

from neat_comparer.comparison.accessors import AccessorRegistry, coerce_value, resolve_accessor
from neat_comparer.comparison.exceptions import AbsentValueError, DescriptorConfigurationError
from neat_comparer.comparison.result import PropertyComparisonResult
from neat_comparer.utils.logger import get_logger

logger = get_logger(__name__)

IsPropertyEqual = Callable[[Any, Any], bool]


class PropertyComparison:
    """
    Compares one property pair of two instances of the given classes.

    Accessors are resolved once at construction and never change afterwards;
    compare() keeps no state between calls.
    """

    def __init__(
        self,
        first_type: type,
        second_type: type,
        first_property_name: str,
        is_property_equal: Optional[IsPropertyEqual] = None,
        second_property_name: Optional[str] = None,
        registry: Optional[AccessorRegistry] = None,
    ):
        """
        Initialize a property comparison.

        Args:
            first_type: Class of the first instance
            second_type: Class of the second instance
            first_property_name: Property name on the first class (and on the
                second class when second_property_name is omitted)
            is_property_equal: Callable (first_instance, second_instance) -> bool,
                defaults to == on both property values
            second_property_name: Property name on the second class when it is
                named differently; requires is_property_equal
            registry: Accessor registry to resolve properties with

        Raises:
            MissingMemberError: If a property does not exist on its class
            DescriptorConfigurationError: If the predicate is missing for two
                property names or is not callable
        """
        if second_property_name is None:
            second_property_name = first_property_name
        elif is_property_equal is None:
            raise DescriptorConfigurationError(
                f"Comparing '{first_property_name}' with '{second_property_name}' "
                "requires an is_property_equal predicate"
            )

        if is_property_equal is not None and not callable(is_property_equal):
            raise DescriptorConfigurationError(
                f"is_property_equal must be callable, got {type(is_property_equal)}"
            )

        self.first_type = first_type
        self.second_type = second_type
        self.first_accessor = resolve_accessor(first_type, first_property_name, registry)
        self.second_accessor = resolve_accessor(second_type, second_property_name, registry)
        self.uses_default_equality = is_property_equal is None
        self._is_property_equal: IsPropertyEqual = (
            is_property_equal if is_property_equal is not None else self._default_is_property_equal
        )

        logger.debug(
            f"Created comparison {self}",
            operation="create_comparison",
            context={
                "first_type": first_type.__qualname__,
                "second_type": second_type.__qualname__,
                "first_property": first_property_name,
                "second_property": second_property_name,
                "default_equality": self.uses_default_equality,
            },
        )

    @staticmethod
    def between(
        first_type: type,
        second_type: type,
        first_property_name: str,
        second_property_name: str,
        is_property_equal: IsPropertyEqual,
        registry: Optional[AccessorRegistry] = None,
    ) -> "PropertyComparison":
        """Compare two differently named properties with a custom predicate."""
        return PropertyComparison(
            first_type,
            second_type,
            first_property_name,
            is_property_equal,
            second_property_name=second_property_name,
            registry=registry,
        )

    @property
    def first_property_name(self) -> str:
        return self.first_accessor.name

    @property
    def second_property_name(self) -> str:
        return self.second_accessor.name

    def _default_is_property_equal(self, first_instance: Any, second_instance: Any) -> bool:
        first_value = self.first_accessor.get(first_instance)
        second_value = self.second_accessor.get(second_instance)

        # No value to evaluate equality on
        if first_value is None:
            raise AbsentValueError(self.first_type.__qualname__, self.first_accessor.name)

        return bool(first_value == second_value)

    def compare(self, first_instance: Any, second_instance: Any) -> PropertyComparisonResult:
        """
        Evaluate the equality predicate against an instance pair.

        Args:
            first_instance: Instance of first_type
            second_instance: Instance of second_type

        Returns:
            PropertyComparisonResult with both values, property metadata and outcome

        Raises:
            AbsentValueError: If the default predicate reads a None first value
            TypeCoercionError: If a value cannot be converted to its declared type
        """
        is_equal = bool(self._is_property_equal(first_instance, second_instance))

        return PropertyComparisonResult(
            first_value=coerce_value(
                self.first_accessor.get(first_instance), self.first_accessor.declared_type
            ),
            second_value=coerce_value(
                self.second_accessor.get(second_instance), self.second_accessor.declared_type
            ),
            first_accessor=self.first_accessor,
            second_accessor=self.second_accessor,
            first_type=self.first_type,
            second_type=self.second_type,
            is_equal=is_equal,
        )

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}("
            f"{self.first_type.__qualname__}.{self.first_property_name} <-> "
            f"{self.second_type.__qualname__}.{self.second_property_name})"
        )


class SameTypePropertyComparison(PropertyComparison):
    """Compares one property of two instances of the same class."""

    def __init__(
        self,
        compared_type: type,
        property_name: str,
        is_property_equal: Optional[IsPropertyEqual] = None,
        second_property_name: Optional[str] = None,
        registry: Optional[AccessorRegistry] = None,
    ):
        super().__init__(
            compared_type,
            compared_type,
            property_name,
            is_property_equal,
            second_property_name=second_property_name,
            registry=registry,
        )
