r"""
Optionaut option specifications and mutual-exclusion groups.

Overview
- Option: immutable description of one recognized option (short and/or long
  spelling, argument-count contract, separator, help metadata, required flag).
- Arity: classification of an option's argument-count contract.
- OptionGroup: a cluster of options where at most one member may be selected
  during a single resolution pass.

Metadata (sanitized on construction)
- names: one or two shell-style spellings, "-x" (short) and/or "--name" (long).
- nargs: Unset (no argument) | int (>= 1) | Ellipsis (unlimited) | "?" | "+" | "*".
  • "?" → 1 value, optional
  • "+" → unlimited values
  • "*" → unlimited values, optional
  • optional=True without nargs → 1 value, optional
- separator: Unset | single character splitting a captured value into several.
- metavar/descr: Unset | non-empty string (trimmed), None when Unset.
- required: bool (forced to False when the option joins a group in a registry).

Quick example:
    >>> from optionaut.options import Option, OptionGroup
    >>> verbose = Option("-v", "--verbose")
    >>> define = Option("-D", nargs=..., separator="=")
    >>> output = Option("-o", "--output", nargs=1, metavar="FILE", required=True)
    >>> modes = OptionGroup(Option("-f", "--fast"), Option("-m", "--memory"), required=True)
"""
import re
from enum import Enum
from types import EllipsisType

from .faults import FaultCode, ResolutionError, getdoc
from .utils import IntrospectableType, Unset, coalesce


class Arity(Enum):
    """
    Shape of an option's argument-count contract.

    - NONE: presence-only switch.
    - ONE: exactly one value.
    - MANY: exactly N values (N >= 2), e.g. property-style "-Dkey=value".
    - UNLIMITED: any number of values.
    """
    NONE = "none"
    ONE = "one"
    MANY = "many"
    UNLIMITED = "unlimited"


def _sanitize_names(cls, metadata, /):
    """
    Internal: split shell-style spellings into the short and long names.

    Accepted forms
    - short: "-x" where x is any single character except "-", "=" or whitespace.
    - long:  "--name" where name has no "=" nor whitespace and does not start with "-".

    Raises
    - TypeError: when no name is given or a name is not a string.
    - ValueError: on a malformed spelling, a duplicate, or a second short/long name.
    """
    if not (names := metadata.pop("names")):
        raise TypeError(f"{cls.__typename__} must specify at least one name")

    short = long = None
    for name in names:
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} names must be strings")
        elif re.fullmatch(r"-[^\s=-]", name):
            if short is not None:
                raise ValueError(f"{cls.__typename__} cannot have more than one short name")
            short = name[1:]
        elif re.fullmatch(r"--[^\s=-][^\s=]*", name):
            if long is not None:
                raise ValueError(f"{cls.__typename__} cannot have more than one long name")
            long = name[2:]
        else:
            raise ValueError(f"{cls.__typename__} name {name!r} must be a valid shell-style option name (-x or --name)")

    metadata["short"] = short
    metadata["long"] = long


def _sanitize_parametric_metadata(cls, metadata, /):
    """
    Internal: validate and normalize the value-bearing fields (nargs, optional,
    separator, metavar).

    Side effects
    - Mutates the provided metadata dict in place; nargs shorthands are
      expanded into (nargs, optional) pairs.
    """
    if not isinstance(nargs := metadata["nargs"], str | int | EllipsisType | Unset) or isinstance(nargs, bool):
        raise TypeError(f"{cls.__typename__} 'nargs' must be a string, an integer, or ellipsis")
    if isinstance(nargs, str):
        try:
            nargs, optional = {"?": (1, True), "+": (..., False), "*": (..., True)}[nargs]
        except KeyError:
            raise ValueError(f"{cls.__typename__} 'nargs' must be one of '?', '+', or '*'") from None
        metadata["optional"] |= optional
    elif isinstance(nargs, int) and nargs < 1:
        raise ValueError(f"{cls.__typename__} 'nargs' must be a positive integer")

    # an optional value without an explicit contract stands for a single value
    if nargs is Unset and metadata["optional"]:
        nargs = 1
    metadata["nargs"] = coalesce(nargs)

    if not isinstance(separator := metadata["separator"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'separator' must be a string")
    elif isinstance(separator, str) and len(separator) != 1:
        raise ValueError(f"{cls.__typename__} 'separator' must be a single character")
    elif separator is not Unset and metadata["nargs"] is None:
        raise ValueError(f"{cls.__typename__} 'separator' requires an argument-taking option")
    metadata["separator"] = coalesce(separator)

    if not isinstance(metavar := metadata["metavar"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'metavar' must be a string")
    elif isinstance(metavar, str) and not (metavar := metavar.strip()):
        raise ValueError(f"{cls.__typename__} 'metavar' cannot be empty")
    metadata["metavar"] = coalesce(metavar)


def _sanitize_metadata(cls, metadata, /):
    # Validate and normalize the 'descr' metadata
    if not isinstance(descr := metadata["descr"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")
    metadata["descr"] = coalesce(descr)


class Option(metaclass=IntrospectableType):
    """
    Named option specification.

    Option declares how a named option (e.g., -o/--output) is recognized and
    how many raw string values it captures. The resolver never mutates it:
    every match produces an independent Occurrence carrying the values.

    Identity
    - key: the short name when present, the long name otherwise.
    - Two options are equal when they share the same (short, long) pair.

    Properties
    - The names listed in __introspectable__ are exposed as read-only attributes
      on instances, mirroring the sanitized metadata values.
    """

    __introspectable__ = (
        "short",
        "long",
        "nargs",
        "optional",
        "separator",
        "metavar",
        "descr",
        "required",
    )

    __displayable__ = (
        "names",
        "nargs",
        "optional",
        "separator",
        "metavar",
        "descr",
        "required",
    )

    def __init__(
            self,
            *names,
            nargs=Unset,
            optional=False,
            separator=Unset,
            metavar=Unset,
            descr=Unset,
            required=False
    ):
        """
        Construct an Option spec with the provided metadata.

        Parameters
        - names: one or two str
          "-x" for the short name and/or "--name" for the long name.
        - nargs: Unset | "?" | "+" | "*" | int | Ellipsis
          Argument-count contract. Unset declares a presence-only switch.
        - optional: bool
          The values may be omitted even though the option accepts them.
        - separator: Unset | str
          Single character splitting a fed value into successive values
          (e.g. "=" for "-Dkey=value").
        - metavar: Unset | str
          Display name for the value in help. Must be non-empty if provided.
        - descr: Unset | str
          Short description for help. If Unset, becomes None.
        - required: bool
          The option must appear (or be defaulted) for a resolution to succeed.
        """
        metadata = {
            "names": names,
            "nargs": nargs,
            "optional": bool(optional),
            "separator": separator,
            "metavar": metavar,
            "descr": descr,
            "required": bool(required),
        }
        _sanitize_names(type(self), metadata)
        _sanitize_parametric_metadata(type(self), metadata)
        _sanitize_metadata(type(self), metadata)

        for name, object in metadata.items():
            setattr(self, "_" + name, object)

    @property
    def names(self):
        """
        Shell-style spellings, short first ("-x", "--name").
        """
        names = ()
        if self._short is not None:
            names += ("-" + self._short,)
        if self._long is not None:
            names += ("--" + self._long,)
        return names

    @property
    def key(self):
        return self._short if self._short is not None else self._long

    @property
    def arity(self):
        if self._nargs is None:
            return Arity.NONE
        elif self._nargs is ...:
            return Arity.UNLIMITED
        elif self._nargs == 1:
            return Arity.ONE
        return Arity.MANY

    def has_arg(self):
        """
        Whether the option accepts at least one value.
        """
        return self._nargs is not None

    def has_args(self):
        """
        Whether the option accepts more than one value.
        """
        return self._nargs is ... or (self._nargs is not None and self._nargs > 1)

    def __eq__(self, other):
        if not isinstance(other, Option):
            return NotImplemented
        return (self._short, self._long) == (other._short, other._long)

    def __hash__(self):
        return hash((self._short, self._long))

    def __str__(self):
        return "/".join(self.names)


class OptionGroup(metaclass=IntrospectableType):
    """
    Mutual-exclusion cluster of options.

    At most one member may be selected during a resolution pass. The selection
    is transient: the resolver resets it at the start of every pass, and
    select() refuses a second, different member with an ALREADY_SELECTED
    ResolutionError.

    Members of a group are never individually required; make the group
    required instead (the registry enforces this on registration).
    """

    __introspectable__ = (
        "options",
        "required",
        "selected",
    )

    __displayable__ = (
        "names",
        "required",
        "selected",
    )

    def __init__(self, *options, required=False):
        self._options = []
        self._required = bool(required)
        self._selected = None
        for option in options:
            self.add(option)

    def add(self, option, /):
        """
        Append a member; returns the group for chaining.
        """
        if not isinstance(option, Option):
            raise TypeError(f"{type(self).__typename__} members must be options")
        if option.key in self.names:
            raise ValueError(f"{type(self).__typename__} member {option.key!r} is already in use")
        self._options.append(option)
        return self

    @property
    def names(self):
        return tuple(option.key for option in self._options)

    def select(self, option, /):
        """
        Mark a member (or its key) as the selected one for the current pass.

        Selecting None clears the selection; re-selecting the same key is a no-op.
        """
        if option is None:
            self._selected = None
            return
        key = option.key if isinstance(option, Option) else option
        if self._selected is None or self._selected == key:
            self._selected = key
            return
        raise ResolutionError(
            "option %r cannot be used together with option %r" % (key, self._selected),
            title="option already selected",
            code=FaultCode.ALREADY_SELECTED,
            hint="pass only one of %s" % ", ".join(map(repr, self.names)),
            group=self,
            key=key,
            selected=self._selected,
            docs=getdoc(FaultCode.ALREADY_SELECTED)
        )

    def reset(self):
        self._selected = None

    def __contains__(self, option):
        key = option.key if isinstance(option, Option) else option
        return key in self.names

    def __iter__(self):
        return iter(self._options)

    def __len__(self):
        return len(self._options)

    def __str__(self):
        return "[%s]" % ", ".join(str(option) for option in self._options)


__all__ = (
    "Arity",
    "Option",
    "OptionGroup",
)
