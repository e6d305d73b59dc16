"""Property comparison engine: accessors, descriptors, comparers and results."""

from .accessors import (
    AccessorRegistry,
    PropertyAccessor,
    coerce_value,
    default_registry,
    introspect_accessor,
    resolve_accessor,
)
from .exceptions import (
    AbsentValueError,
    ComparerError,
    DescriptorConfigurationError,
    InvalidTargetTypeError,
    MissingMemberError,
    TypeCoercionError,
)
from .object_comparer import ObjectComparer, SameTypeObjectComparer
from .property_comparison import IsPropertyEqual, PropertyComparison, SameTypePropertyComparison
from .result import PropertyComparisonResult

__all__ = [
    "AccessorRegistry",
    "PropertyAccessor",
    "coerce_value",
    "default_registry",
    "introspect_accessor",
    "resolve_accessor",
    "AbsentValueError",
    "ComparerError",
    "DescriptorConfigurationError",
    "InvalidTargetTypeError",
    "MissingMemberError",
    "TypeCoercionError",
    "ObjectComparer",
    "SameTypeObjectComparer",
    "IsPropertyEqual",
    "PropertyComparison",
    "SameTypePropertyComparison",
    "PropertyComparisonResult",
]
