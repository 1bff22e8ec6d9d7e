"""
Optionaut option registry.

The registry is the catalog the resolver works against: every Option indexed
by its key (short name, or long name when there is no short one) and by its
long name, the ordered required entries (option keys and required groups),
and the key → group membership map.

It is built once, before any resolution, and read-only afterwards:

    >>> registry = (
    ...     Registry()
    ...     .register(Option("-v", "--verbose"), Option("-o", "--output", nargs=1, required=True))
    ...     .register_group(OptionGroup(Option("-f", "--fast"), Option("-m", "--memory"), required=True))
    ... )
    >>> registry["--output"] is registry["o"]
    True
    >>> registry.matching("--out")
    ('output',)
"""
from collections.abc import Mapping

from .options import Option, OptionGroup
from .utils import strip_hyphens


class Registry(Mapping):
    """
    Read-only mapping from option key to Option, plus the indices the resolver needs.

    Lookups accept shell spellings ("-v", "--verbose") or bare names ("v",
    "verbose"); at most two leading hyphens are stripped.
    """

    def __init__(self):
        self._options = {}
        self._longs = {}
        self._required = []
        self._groups = {}

    def register(self, *options):
        """
        Add options to both name indices; returns the registry for chaining.

        A required option appends its key to the required entries, replacing
        any earlier entry for the same key.
        """
        for option in options:
            if not isinstance(option, Option):
                raise TypeError(f"register() arguments must be options, not {type(option).__name__}")
            key = option.key
            if option.long is not None:
                self._longs[option.long] = option
            if option.required:
                if key in self._required:
                    self._required.remove(key)
                self._required.append(key)
            self._options[key] = option
        return self

    def register_group(self, group, /):
        """
        Register every member of a group; returns the registry for chaining.

        Members are never individually required: their required flag is cleared
        and the group itself becomes the required entry when it is required.
        """
        if not isinstance(group, OptionGroup):
            raise TypeError(f"register_group() argument must be an option-group, not {type(group).__name__}")
        if group.required and group not in self._required:
            self._required.append(group)
        for option in group.options:
            option._required = False
            if option.key in self._required:
                self._required.remove(option.key)
            self.register(option)
            self._groups[option.key] = group
        return self

    def __getitem__(self, name):
        if isinstance(name, str):
            stripped = strip_hyphens(name)
            try:
                return self._options[stripped]
            except KeyError:
                pass
            try:
                return self._longs[stripped]
            except KeyError:
                pass
        raise KeyError(name)

    def __iter__(self):
        return iter(self._options)

    def __len__(self):
        return len(self._options)

    def has_short(self, name, /):
        """
        Whether the name is a registered option key (the short-name index).
        """
        return strip_hyphens(name) in self._options

    def has_long(self, name, /):
        return strip_hyphens(name) in self._longs

    def matching(self, name, /):
        """
        Long names having the given text as a prefix.

        An exact long match is returned alone, so "--debug" never counts as
        ambiguous against "--debug-all".
        """
        if not (stripped := strip_hyphens(name)):
            return ()
        if stripped in self._longs:
            return (stripped,)
        return tuple(long for long in self._longs if long.startswith(stripped))

    def long(self, name, /):
        """
        The option registered under a long name, bypassing the key index.

        Raises KeyError when no option has that long name.
        """
        try:
            return self._longs[strip_hyphens(name)]
        except KeyError:
            raise KeyError(name) from None

    def group_of(self, option, /):
        """
        The group owning an option (or key), None when it is not grouped.
        """
        key = option.key if isinstance(option, Option) else strip_hyphens(option)
        return self._groups.get(key)

    @property
    def groups(self):
        return tuple(dict.fromkeys(self._groups.values()))

    @property
    def options(self):
        return tuple(self._options.values())

    @property
    def required(self):
        """
        Snapshot of the ordered required entries (keys and groups).
        """
        return tuple(self._required)

    def __repr__(self):
        return "registry(options=%r, required=%r)" % (self.options, self.required)

    def __rich_repr__(self):
        yield "options", self.options
        yield "groups", self.groups
        yield "required", self.required


__all__ = (
    "Registry",
)
