"""
Optionaut resolution results.

Overview
- Occurrence: per-pass clone of a matched Option, owning its captured values.
  The registry's canonical Option is never written to.
- ParseResult: ordered occurrences plus leftover positional tokens, with the
  query surface used by callers (presence, first/all values, properties).
- ResultBuilder / builder(): an independent, single-use builder created per
  resolution pass.

Example
    >>> result = resolve(registry, ["-o", "out.txt", "-v", "input.txt"])
    >>> result.value("--output"), result.has("v"), result.args
    ('out.txt', True, ('input.txt',))
"""
from .options import Option
from .utils import IntrospectableType, strip_hyphens


class Occurrence(metaclass=IntrospectableType):
    """
    One appearance of an option during a resolution pass.

    Values are fed raw; when the option declares a separator, each fed value is
    split on it into successive values, stopping once only one slot of an
    exactly-N contract remains (the rest is captured verbatim).
    """

    __introspectable__ = (
        "option",
        "values",
    )

    __displayable__ = (
        "key",
        "values",
    )

    def __init__(self, option, /):
        if not isinstance(option, Option):
            raise TypeError(f"{type(self).__typename__} argument must be an option")
        self._option = option
        self._values = []
        self._sealed = False

    @property
    def key(self):
        return self._option.key

    @property
    def short(self):
        return self._option.short

    @property
    def long(self):
        return self._option.long

    @property
    def value(self):
        return self._values[0] if self._values else None

    def add(self, value, /):
        """
        Feed a raw value, applying separator splitting.

        Raises
        - TypeError: when the value is not a string.
        - ValueError: when the occurrence cannot take any more values.
        - RuntimeError: once the owning result has been built.
        """
        if not isinstance(value, str):
            raise TypeError(f"{type(self).__typename__} values must be strings")
        if self._sealed:
            raise RuntimeError(f"{type(self).__typename__} {self.key!r} belongs to a built result")

        nargs = self._option.nargs
        if (separator := self._option.separator) is not None:
            while separator in value and (nargs is ... or len(self._values) != nargs - 1):
                head, value = value.split(separator, 1)
                self._append(head)
        self._append(value)

    def _append(self, value):
        if not self.accepts_arg():
            raise ValueError(f"{type(self).__typename__} {self.key!r} cannot take more values")
        self._values.append(value)

    def accepts_arg(self):
        """
        Whether another value can still be captured.
        """
        nargs = self._option.nargs
        return nargs is not None and (nargs is ... or len(self._values) < nargs)

    def requires_arg(self):
        """
        Whether a value must still be captured for the contract to hold.

        Optional contracts never require one; unlimited ones require a first value.
        """
        if self._option.optional:
            return False
        if self._option.nargs is ...:
            return not self._values
        return self.accepts_arg()


class ParseResult(metaclass=IntrospectableType):
    """
    Outcome of one resolution pass.

    Queries accept an Option, a shell spelling ("-o", "--output") or a bare
    name ("o", "output"). Values of repeated occurrences are aggregated in
    the order they were captured.
    """

    __introspectable__ = (
        "occurrences",
        "args",
    )

    def __init__(self, occurrences=(), args=()):
        self._occurrences = tuple(occurrences)
        self._args = tuple(args)

    def _lookup(self, name):
        if isinstance(name, Option):
            return [occurrence for occurrence in self._occurrences if occurrence.option == name]
        name = strip_hyphens(name)
        return [occurrence for occurrence in self._occurrences if name in (occurrence.short, occurrence.long)]

    def has(self, name, /):
        return bool(self._lookup(name))

    def __contains__(self, name):
        return self.has(name)

    def value(self, name, /, default=None):
        """
        First captured value of the option, or default when it has none.
        """
        values = self.values(name)
        return values[0] if values else default

    def values(self, name, /, default=None):
        """
        Every captured value of the option across its occurrences, or default.
        """
        values = tuple(value for occurrence in self._lookup(name) for value in occurrence.values)
        return values if values else default

    def properties(self, name, /):
        """
        Key/value pairs captured by a property-style option ("-Dkey=value").

        A lone key maps to "true"; extra values beyond the second are ignored.
        """
        properties = {}
        for occurrence in self._lookup(name):
            match occurrence.values:
                case (key, value, *_):
                    properties[key] = value
                case (key,):
                    properties[key] = "true"
        return properties

    def __iter__(self):
        return iter(self._occurrences)

    def __len__(self):
        return len(self._occurrences)


class ResultBuilder:
    """
    Single-use accumulator for a ParseResult.

    build() seals the builder and every recorded occurrence; later additions
    raise RuntimeError.
    """

    def __init__(self):
        self._occurrences = []
        self._args = []
        self._built = False

    def _ensure_open(self):
        if self._built:
            raise RuntimeError("result builder was already built")

    def add_option(self, occurrence, /):
        self._ensure_open()
        if not isinstance(occurrence, Occurrence):
            raise TypeError("add_option() argument must be an occurrence")
        self._occurrences.append(occurrence)
        return self

    def add_arg(self, token, /):
        self._ensure_open()
        if not isinstance(token, str):
            raise TypeError("add_arg() argument must be a string")
        self._args.append(token)
        return self

    def has(self, name, /):
        name = strip_hyphens(name)
        return any(name in (occurrence.short, occurrence.long) for occurrence in self._occurrences)

    def build(self):
        self._ensure_open()
        self._built = True
        for occurrence in self._occurrences:
            occurrence._sealed = True
        return ParseResult(self._occurrences, self._args)


def builder():
    """
    Return a fresh, independent ResultBuilder.
    """
    return ResultBuilder()


__all__ = (
    "Occurrence",
    "ParseResult",
    "ResultBuilder",
    "builder",
)
