"""
Custom exception hierarchy for property comparisons.

Every error raised by the comparison package derives from ComparerError and
from the builtin exception a caller would naturally catch for that failure,
so existing ``except AttributeError`` / ``except TypeError`` handlers keep working.
"""


class ComparerError(Exception):
    """
    Base exception for all comparison-related errors.
    """

    pass


class MissingMemberError(ComparerError, AttributeError):
    """
    Raised when a property name cannot be resolved on a class.

    Raised while a PropertyComparison is being constructed, never while
    comparing instances.
    """

    def __init__(self, type_name: str, member_name: str):
        self.type_name = type_name
        self.member_name = member_name
        super().__init__(f"Member '{type_name}.{member_name}' not found.")


class InvalidTargetTypeError(ComparerError, TypeError):
    """
    Raised when a diff instance is requested for a class that is neither
    the first nor the second compared class.
    """

    pass


class AbsentValueError(ComparerError, AttributeError):
    """
    Raised by the default equality check when the first value is None.

    There is no value to evaluate equality on, so the comparison fails loudly
    instead of guessing whether two absent values are equal.
    """

    def __init__(self, type_name: str, member_name: str):
        self.type_name = type_name
        self.member_name = member_name
        super().__init__(
            f"Cannot evaluate equality: '{type_name}.{member_name}' has no value."
        )


class TypeCoercionError(ComparerError, TypeError):
    """
    Raised when a value cannot be converted to a property's declared type.
    """

    def __init__(self, value, declared_type: type):
        self.value = value
        self.declared_type = declared_type
        super().__init__(
            f"Cannot convert {type(value).__name__} value {value!r} "
            f"to {declared_type.__qualname__}."
        )


class DescriptorConfigurationError(ComparerError, ValueError):
    """
    Raised when a comparison is configured inconsistently
    (missing or non-callable predicate, descriptor bound to other classes).
    """

    pass
