"""
Object Comparer

Runs an ordered collection of PropertyComparison descriptors against pairs of
instances and:
- Returns one result per descriptor, in descriptor order
- Filters results down to the differing properties
- Builds a new instance populated with only the differing values

Any descriptor failure aborts the whole operation; no partial results are returned.
"""

from typing import Any, Iterable, List, Tuple, Type, TypeVar

from neat_comparer.comparison.exceptions import (
    DescriptorConfigurationError,
    InvalidTargetTypeError,
)
from neat_comparer.comparison.property_comparison import PropertyComparison
from neat_comparer.comparison.result import PropertyComparisonResult
from neat_comparer.utils.logger import get_logger, log_operation

logger = get_logger(__name__)

T = TypeVar("T")


class ObjectComparer:
    """
    Compares instances of a first class with instances of a second class.

    The descriptor sequence is fixed at construction; every call produces
    fresh result lists.
    """

    def __init__(
        self,
        first_type: type,
        second_type: type,
        comparisons: Iterable[PropertyComparison],
    ):
        """
        Initialize comparer with the comparisons to execute.

        Args:
            first_type: Class of the first instances
            second_type: Class of the second instances
            comparisons: PropertyComparison descriptors, evaluated in this order

        Raises:
            DescriptorConfigurationError: If a descriptor is bound to other classes
        """
        self.first_type = first_type
        self.second_type = second_type
        self.comparisons: Tuple[PropertyComparison, ...] = tuple(comparisons)

        for index, comparison in enumerate(self.comparisons):
            if comparison.first_type is not first_type or comparison.second_type is not second_type:
                raise DescriptorConfigurationError(
                    f"Comparison [{index}] {comparison!r} does not compare "
                    f"{first_type.__qualname__} with {second_type.__qualname__}"
                )

        logger.debug(
            f"Created comparer with {len(self.comparisons)} comparisons",
            operation="create_comparer",
            context={
                "first_type": first_type.__qualname__,
                "second_type": second_type.__qualname__,
                "comparisons_count": len(self.comparisons),
            },
        )

    @property
    def is_same_type(self) -> bool:
        return self.first_type is self.second_type

    def __len__(self) -> int:
        return len(self.comparisons)

    @log_operation("compare")
    def compare(self, first_instance: Any, second_instance: Any) -> List[PropertyComparisonResult]:
        """
        Compare the two instances.

        Args:
            first_instance: The first instance to compare
            second_instance: The second instance to compare

        Returns:
            One PropertyComparisonResult per descriptor, in descriptor order
        """
        return self._compare(first_instance, second_instance)

    @log_operation("get_differences")
    def get_differences(
        self, first_instance: Any, second_instance: Any
    ) -> List[PropertyComparisonResult]:
        """
        Compare the two instances and return only the differences.

        Returns:
            Results whose has_difference is True, in descriptor order
        """
        return self._differences(first_instance, second_instance)

    def _compare(self, first_instance: Any, second_instance: Any) -> List[PropertyComparisonResult]:
        # Failures are logged by the public caller
        results = [
            comparison.compare(first_instance, second_instance) for comparison in self.comparisons
        ]

        logger.debug(
            "Compared instances",
            operation="compare",
            context={
                "first_type": self.first_type.__qualname__,
                "second_type": self.second_type.__qualname__,
                "comparisons_count": len(results),
                "differences_count": sum(1 for result in results if result.has_difference),
            },
        )
        return results

    def _differences(
        self, first_instance: Any, second_instance: Any
    ) -> List[PropertyComparisonResult]:
        return [
            result
            for result in self._compare(first_instance, second_instance)
            if result.has_difference
        ]

    @log_operation("new_including_only_differences")
    def new_including_only_differences(
        self, target_type: Type[T], first_instance: Any, second_instance: Any
    ) -> T:
        """
        Compare the two instances and build a new target_type instance with
        only the differing properties set.

        For a same-type comparer the second instance's values are written.
        Otherwise the values of the side matching target_type are written.
        Properties without a difference keep the default value of target_type().

        Args:
            target_type: Class to construct, must be first_type or second_type
            first_instance: The first instance to compare
            second_instance: The second instance to compare

        Returns:
            New target_type instance holding only the differing values

        Raises:
            InvalidTargetTypeError: If target_type is neither compared class
        """
        if target_type is not self.first_type and target_type is not self.second_type:
            raise InvalidTargetTypeError(
                f"Target type must be {self.first_type.__qualname__} or "
                f"{self.second_type.__qualname__}, got {getattr(target_type, '__qualname__', target_type)}"
            )

        differences = self._differences(first_instance, second_instance)
        target = target_type()

        for difference in differences:
            if self.is_same_type:
                difference.second_accessor.set(target, difference.second_value)
                continue

            if target_type is self.first_type:
                difference.first_accessor.set(target, difference.first_value)

            if target_type is self.second_type:
                difference.second_accessor.set(target, difference.second_value)

        return target


class SameTypeObjectComparer(ObjectComparer):
    """Compares two instances of the same class."""

    def __init__(self, compared_type: type, comparisons: Iterable[PropertyComparison]):
        super().__init__(compared_type, compared_type, comparisons)
