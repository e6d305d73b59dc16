"""
Property Accessor Resolution

Binds a (class, property name) pair to a reusable get/set capability:
- Introspects annotated attributes, ``property`` objects and ``__slots__``
  members through the class MRO
- Provides an explicit registry for accessors introspection cannot see
- Caches resolved accessors per (class, name)
- Converts read values to the property's declared type

Resolution fails fast with MissingMemberError when the name is unknown.
"""

import inspect
import numbers
import operator
import typing
from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_EVEN
from enum import Enum
from fractions import Fraction
from typing import Any, Callable, Dict, Optional, Tuple

from neat_comparer.comparison.exceptions import MissingMemberError, TypeCoercionError
from neat_comparer.utils.logger import get_logger

logger = get_logger(__name__)

Getter = Callable[[Any], Any]
Setter = Callable[[Any, Any], None]

# Declared types converted by calling the type itself
_CALLABLE_CONVERSIONS = (float, complex, str, Decimal, Fraction)

_TRUE_STRINGS = {"true"}
_FALSE_STRINGS = {"false"}


@dataclass(frozen=True)
class PropertyAccessor:
    """
    Resolved capability to read and write one named property of a class.

    Attributes:
        owner: Class the property was resolved on
        name: Property name
        declared_type: Declared class of the property, or None when unknown
        getter: Callable returning the property value of an instance
        setter: Callable assigning the property on an instance, None if read-only
    """

    owner: type
    name: str
    declared_type: Optional[type] = None
    getter: Getter = field(default=None, repr=False, compare=False)
    setter: Optional[Setter] = field(default=None, repr=False, compare=False)

    def __post_init__(self):
        if self.getter is None:
            object.__setattr__(self, "getter", operator.attrgetter(self.name))

    @property
    def is_read_only(self) -> bool:
        return self.setter is None

    def get(self, instance: Any) -> Any:
        """Read the property from an instance."""
        return self.getter(instance)

    def set(self, instance: Any, value: Any) -> None:
        """
        Write the property on an instance.

        Raises:
            AttributeError: If the property has no setter
        """
        if self.setter is None:
            raise AttributeError(
                f"Property '{self.owner.__qualname__}.{self.name}' is read-only"
            )
        self.setter(instance, value)


def _attribute_setter(name: str) -> Setter:
    def setter(instance: Any, value: Any) -> None:
        setattr(instance, name, value)

    return setter


def _unwrap_declared_type(annotation: Any) -> Optional[type]:
    """
    Reduce an annotation to a concrete class.

    Optional[X] becomes X. Generic aliases, unions of several classes, Any and
    string forward references that could not be evaluated give None.
    """
    origin = typing.get_origin(annotation)
    if origin is typing.Union or (origin is not None and _is_union_type(origin)):
        args = [arg for arg in typing.get_args(annotation) if arg is not type(None)]
        if len(args) != 1:
            return None
        return _unwrap_declared_type(args[0])
    if origin is not None:
        # ClassVar and parameterized generics such as list[int], which are
        # instances of type on Python 3.9 and 3.10
        return None
    if isinstance(annotation, type):
        return annotation
    return None


def _is_union_type(origin: Any) -> bool:
    # PEP 604 unions (X | None) report types.UnionType as their origin
    return getattr(origin, "__name__", "") == "UnionType"


def _is_class_var(annotation: Any) -> bool:
    if annotation is typing.ClassVar or typing.get_origin(annotation) is typing.ClassVar:
        return True
    return isinstance(annotation, str) and annotation.startswith(("ClassVar", "typing.ClassVar"))


def _class_annotations(owner: type) -> Dict[str, Any]:
    """Resolved annotations across the MRO, raw ones if forward references fail."""
    try:
        return typing.get_type_hints(owner)
    except (NameError, TypeError) as e:
        logger.debug(
            f"Could not evaluate annotations of {owner.__qualname__}, using raw values",
            operation="resolve_accessor",
            context={"type": owner.__qualname__},
            error=str(e),
        )
        annotations: Dict[str, Any] = {}
        for klass in reversed(inspect.getmro(owner)):
            annotations.update(vars(klass).get("__annotations__", {}))
        return annotations


def _property_type(prop: property) -> Optional[type]:
    if prop.fget is None:
        return None
    try:
        hints = typing.get_type_hints(prop.fget)
    except (NameError, TypeError):
        return None
    return _unwrap_declared_type(hints.get("return"))


def introspect_accessor(owner: type, name: str) -> PropertyAccessor:
    """
    Resolve a property on a class by introspection.

    Args:
        owner: Class declaring (or inheriting) the property
        name: Exact, case-sensitive property name

    Returns:
        PropertyAccessor for the property

    Raises:
        MissingMemberError: If the class has no such property
    """
    annotations = _class_annotations(owner)

    for klass in inspect.getmro(owner):
        member = vars(klass).get(name)

        if isinstance(member, property):
            setter = _attribute_setter(name) if member.fset is not None else None
            return PropertyAccessor(owner, name, _property_type(member), setter=setter)

        # __slots__ entries are stored as member descriptors on the class
        if inspect.ismemberdescriptor(member):
            declared = _unwrap_declared_type(annotations.get(name))
            return PropertyAccessor(owner, name, declared, setter=_attribute_setter(name))

        if member is not None and (inspect.isroutine(member) or isinstance(member, type)):
            break

    if name in annotations and not _is_class_var(annotations[name]):
        declared = _unwrap_declared_type(annotations[name])
        return PropertyAccessor(owner, name, declared, setter=_attribute_setter(name))

    raise MissingMemberError(owner.__qualname__, name)


class AccessorRegistry:
    """
    Registry mapping (class, property name) to accessors.

    Explicitly registered accessors win over introspection and also apply to
    subclasses of the class they were registered for. Introspected accessors
    are cached so each property is resolved once.
    """

    def __init__(self):
        self._registered: Dict[Tuple[type, str], PropertyAccessor] = {}
        self._resolved: Dict[Tuple[type, str], PropertyAccessor] = {}

    def register(
        self,
        owner: type,
        name: str,
        getter: Getter,
        setter: Optional[Setter] = None,
        declared_type: Optional[type] = None,
    ) -> PropertyAccessor:
        """
        Register accessor functions for a property.

        Args:
            owner: Class the property belongs to
            name: Property name
            getter: Callable taking (instance) and returning the value
            setter: Callable taking (instance, value), None for read-only
            declared_type: Class read values are converted to

        Returns:
            The registered PropertyAccessor

        Raises:
            TypeError: If getter or setter is not callable
        """
        if not callable(getter):
            raise TypeError(f"Accessor getter must be callable, got {type(getter)}")
        if setter is not None and not callable(setter):
            raise TypeError(f"Accessor setter must be callable, got {type(setter)}")

        accessor = PropertyAccessor(owner, name, declared_type, getter=getter, setter=setter)
        self._registered[(owner, name)] = accessor

        # Cached lookups of subclasses may now resolve differently
        self._resolved = {
            key: value
            for key, value in self._resolved.items()
            if not (key[1] == name and issubclass(key[0], owner))
        }

        logger.debug(
            f"Registered accessor: {owner.__qualname__}.{name}",
            operation="register_accessor",
        )
        return accessor

    def resolve(self, owner: type, name: str) -> PropertyAccessor:
        """
        Resolve a property to an accessor.

        Raises:
            MissingMemberError: If neither the registry nor the class knows the property
        """
        key = (owner, name)
        cached = self._resolved.get(key)
        if cached is not None:
            return cached

        accessor = self._lookup_registered(owner, name)
        if accessor is None:
            try:
                accessor = introspect_accessor(owner, name)
            except MissingMemberError:
                logger.error(
                    f"Property '{name}' not found on {owner.__qualname__}",
                    operation="resolve_accessor",
                    context={"type": owner.__qualname__, "property": name},
                )
                raise

        self._resolved[key] = accessor
        return accessor

    def _lookup_registered(self, owner: type, name: str) -> Optional[PropertyAccessor]:
        for klass in inspect.getmro(owner):
            accessor = self._registered.get((klass, name))
            if accessor is not None:
                return accessor
        return None

    def __contains__(self, key: Tuple[type, str]) -> bool:
        return key in self._registered

    def clear(self) -> None:
        """Drop all registered and cached accessors."""
        self._registered.clear()
        self._resolved.clear()


default_registry = AccessorRegistry()


def resolve_accessor(
    owner: type, name: str, registry: Optional[AccessorRegistry] = None
) -> PropertyAccessor:
    """
    Resolve a named property on a class to a PropertyAccessor.

    Args:
        owner: Class declaring (or inheriting) the property
        name: Exact, case-sensitive property name
        registry: Registry to consult, the module default when None

    Raises:
        MissingMemberError: If the property does not exist
    """
    return (registry or default_registry).resolve(owner, name)


def _to_bool(value: Any) -> bool:
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in _TRUE_STRINGS:
            return True
        if normalized in _FALSE_STRINGS:
            return False
        raise ValueError(f"String {value!r} is not a valid boolean")
    if isinstance(value, numbers.Number):
        return value != 0
    raise TypeCoercionError(value, bool)


def _to_int(value: Any) -> int:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, numbers.Integral):
        return int(value)
    if isinstance(value, Decimal):
        return int(value.to_integral_value(rounding=ROUND_HALF_EVEN))
    if isinstance(value, numbers.Real):
        # round() uses banker's rounding on floats and Fractions
        return int(round(value))
    if isinstance(value, (str, bytes)):
        return int(value)
    raise TypeCoercionError(value, int)


def coerce_value(value: Any, declared_type: Optional[type]) -> Any:
    """
    Convert a value to a property's declared type.

    None and values of properties without a declared type are returned as-is.
    Numeric conversions narrow or widen (floats round half-to-even into ints).

    Raises:
        TypeCoercionError: If the declared type cannot be reached from the value
        ValueError: Propagated from the converter (e.g. int("abc"))
    """
    if value is None or declared_type is None:
        return value

    if declared_type is bool:
        return value if isinstance(value, bool) else _to_bool(value)

    if declared_type is int:
        return value if type(value) is int else _to_int(value)

    if isinstance(value, declared_type):
        return value

    if declared_type in _CALLABLE_CONVERSIONS or issubclass(declared_type, Enum):
        return declared_type(value)

    raise TypeCoercionError(value, declared_type)
