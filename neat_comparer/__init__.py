"""
neat_comparer - compare configured property pairs of two objects.

Build PropertyComparison descriptors, hand them to an ObjectComparer and call
compare(), get_differences() or new_including_only_differences().
"""

from neat_comparer.comparison import (
    AbsentValueError,
    AccessorRegistry,
    ComparerError,
    DescriptorConfigurationError,
    InvalidTargetTypeError,
    MissingMemberError,
    ObjectComparer,
    PropertyAccessor,
    PropertyComparison,
    PropertyComparisonResult,
    SameTypeObjectComparer,
    SameTypePropertyComparison,
    TypeCoercionError,
    coerce_value,
    resolve_accessor,
)
from neat_comparer.reporting import ComparisonStatus, ComparisonSummary, DiffReporter, summarize

__version__ = "1.0.0"
__all__ = [
    "AbsentValueError",
    "AccessorRegistry",
    "ComparerError",
    "DescriptorConfigurationError",
    "InvalidTargetTypeError",
    "MissingMemberError",
    "ObjectComparer",
    "PropertyAccessor",
    "PropertyComparison",
    "PropertyComparisonResult",
    "SameTypeObjectComparer",
    "SameTypePropertyComparison",
    "TypeCoercionError",
    "coerce_value",
    "resolve_accessor",
    "ComparisonStatus",
    "ComparisonSummary",
    "DiffReporter",
    "summarize",
]
