"""
Optionaut utilities (internal helpers, carefully exposed)

Scope
- Core building blocks used across the package for consistent semantics and UX.
- Public-but-internal leaning: stable enough for consumers, designed primarily
  to support the options/registry/resolver layers.

Overview
- UnsetType / Unset
  • Singleton sentinel to represent “value not provided” without conflating with None.
  • Falsey (bool(Unset) is False), printable as "Unset", and non-subclassable.

- coalesce(value, default=None)
  • Replace Unset with a concrete default, but preserve legitimate falsey values like None/0/"".

- rename(callable, name) / @rename("name")
  • Assign stable __name__/__qualname__ to generated wrappers for clean tracebacks.

- mirror("attr")
  • Read-only property factory exposing a private backing field (self._attr) as an
    immutable snapshot (tuple / frozenset / mapping proxy).

- IntrospectableType
  • Metaclass wiring mirror() properties, __typename__, __repr__ and __rich_repr__.

- Token helpers
  • strip_hyphens(token): remove one or two leading hyphens.
  • strip_quotes(token): remove one pair of surrounding double quotes.
  • is_negative_number(token): True when the token parses as a negative number.

Quick examples
    >>> coalesce(Unset, "fallback")
    'fallback'
    >>> strip_hyphens("--verbose")
    'verbose'
    >>> is_negative_number("-12.5")
    True
"""
import builtins
import functools
import operator
import re
from collections.abc import Sequence, Mapping, Set
from types import MappingProxyType
from typing import final


@final
class UnsetType:
    """
    Internal sentinel type representing a value that was not provided.

    This is used when None is a legitimate user value, but the API needs a way
    to distinguish “not provided” from “provided as None”. A single instance,
    Unset, is exposed for use as the default in internal parameters.

    Characteristics
    - Boolean-false: bool(Unset) is False, but it is distinct from None and 0.
    - Printable: repr(Unset) -> "Unset" for friendly diagnostics.
    - Non-subclassable: this type is sealed; do not subclass.
    - Singleton per process: UnsetType() always yields the same instance.
    """

    def __or__(self, other, /):
        """
        Support PEP 604 unions in isinstance checks (e.g., str | Unset).
        """
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        """
        Support reversed PEP 604 unions when Unset appears on the right.
        """
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        """
        Ensure a single instance for this sentinel type.
        """
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


Unset = UnsetType()
"""
Internal sentinel for “not provided”.

Use Unset as a default when None is a valid, user-meaningful value but you still
need to distinguish “no input” from “explicitly passed None”.
"""


def coalesce(object, default=None, /):
    """
    Resolve the Unset sentinel to a concrete default.

    Falsey values like None, 0, or "" are preserved as-is; only Unset is replaced.

    Examples
    - coalesce("name", "fallback") -> "name"
    - coalesce(Unset, "fallback")  -> "fallback"
    - coalesce(None, "fallback")   -> None
    """
    return object if object is not Unset else default


def rename(*parameters):
    """
    Set a stable __name__/__qualname__ on a callable, or return a decorator
    that will do so later.

    Forms
    - rename(callable, name) -> callable (renamed in place)
    - rename(name)           -> decorator

    Errors
    - TypeError on a non-callable, a non-string name, or a wrong argument count.
    """
    match len(parameters):
        case 2:
            callable, name = parameters
            if not builtins.callable(callable):
                raise TypeError("rename() first argument must be callable")
            if not isinstance(name, str):
                raise TypeError("rename() second argument must be a string")
            try:
                callable.__qualname__ = name
                callable.__name__ = name
            except (AttributeError, TypeError):
                raise TypeError("rename() first argument must be a updatable callable") from None
            return callable
        case 1:
            name, = parameters
            if not isinstance(name, str):
                raise TypeError("@rename() argument must be a string")

            def wrapper(callable):
                if not builtins.callable(callable):
                    raise TypeError("@rename() must be applied to a callable")
                return rename(callable, name)

            return rename(wrapper, "rename")
        case _:
            raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))


def _freeze(object):
    """
    Shallow snapshot of a container as its immutable counterpart.

    - Sequence (non-string) → tuple
    - Mapping               → MappingProxyType over a copy
    - Set                   → frozenset
    - anything else         → returned as-is
    """
    if isinstance(object, Sequence) and not isinstance(object, str):
        return tuple(object)
    elif isinstance(object, Mapping):
        return MappingProxyType(dict(object))
    elif isinstance(object, Set):
        return frozenset(object)
    return object


def mirror(name, /):
    """
    Define a read-only property that mirrors a private backing attribute.

    The generated property reads "_{name}" on the instance and returns an
    immutable snapshot for container types, so callers cannot mutate the
    backing state (e.g., the values captured by an occurrence).

    Example
    - Given self._values, declare values = mirror("values") to expose it safely.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _freeze(getattr(self, "_" + name))

    return property(getter)


class IntrospectableType(type):
    """
    Metaclass for the data model classes (options, groups, occurrences, results).

    Responsibilities
    - Expose every name listed in __introspectable__ as a read-only property
      built with mirror().
    - Derive __typename__ from the class name (camel-case split with hyphens),
      used in validation messages.
    - Provide stable __repr__/__rich_repr__ implementations. __displayable__
      (if set) narrows which properties are shown; otherwise __introspectable__
      is used.
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
            **options
        )

        if "__repr__" not in namespace:
            @rename("__repr__")
            def __repr__(self):
                return f"{type(self).__typename__}({
                    ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
                })"
            self.__repr__ = __repr__

        if "__rich_repr__" not in namespace:
            @rename("__rich_repr__")
            def __rich_repr__(self):
                """
                Yield (name, object) pairs for pretty printers such as rich.
                """
                for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                    yield name, getattr(self, name)
            self.__rich_repr__ = __rich_repr__

        return self


def strip_hyphens(token, /):
    """
    Remove the leading hyphens of an option spelling ("--name" → "name", "-n" → "n").

    At most two hyphens are removed; a token without hyphens is returned unchanged.
    """
    if token.startswith("--"):
        return token[2:]
    elif token.startswith("-"):
        return token[1:]
    return token


def strip_quotes(token, /):
    """
    Remove one pair of surrounding double quotes when the inner text holds no other quote.

    '"hello world"' → 'hello world', while '"a"b"' is kept verbatim.
    """
    if len(token) > 1 and token.startswith('"') and token.endswith('"') and '"' not in token[1:-1]:
        return token[1:-1]
    return token


def is_negative_number(token, /):
    """
    Tell whether a token spells a negative decimal number ("-1", "-2.5", "-.5", "-1e3", "-0").

    Only digits, one dot and an exponent are accepted; "-inf", "-nan" or "-1_0"
    stay option-shaped.
    """
    return re.fullmatch(r"-(\d+\.?\d*|\.\d+)([eE][-+]?\d+)?", token) is not None


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",
    "strip_hyphens",
    "strip_quotes",
    "is_negative_number",

    # Types
    "UnsetType",
    "IntrospectableType",

    # Constants
    "Unset",
)
