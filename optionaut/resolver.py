r"""
Optionaut token resolver.

The resolver walks a token sequence once, left to right, against a Registry and
produces a ParseResult (or triggers a ResolutionError).

States
- NORMAL: no option is waiting for a value.
- AWAITING: the last recorded occurrence can still take a value.
- PASSTHROUGH: a bare "--" (or, in permissive mode, the first unknown token)
  was seen; every remaining token is positional.

Decision table (evaluated in this order for every token)
1. PASSTHROUGH               → positional argument
2. "--"                      → enter PASSTHROUGH (the "--" itself is dropped)
3. AWAITING and value-shaped → captured by the awaiting occurrence
   (a negative number is always value-shaped)
4. "--..."                   → long option ("--name", "--name=value", prefixes)
5. "-..." (not "-")          → short option, single-dash long option, "-Dkey=value",
                               "-ovalue", or a cluster such as "-abc"
6. anything else             → unknown token

Unknown tokens
- strict mode: an option-shaped token ("-x...") is an UNRECOGNIZED_OPTION error.
- otherwise the token is positional; permissive mode also enters PASSTHROUGH
  (stop at the first non-option).

Finalization
- a pending occurrence that still requires a value → MISSING_ARGUMENT
- defaults are applied as if they had been typed
- unmet required keys/groups → MISSING_REQUIRED_OPTIONS (all of them at once)

Example
    >>> registry = Registry().register(Option("-a"), Option("-b"), Option("-c"))
    >>> [occurrence.key for occurrence in resolve(registry, ["-abc"])]
    ['a', 'b', 'c']
"""
import difflib
from collections.abc import Mapping
from enum import Enum

from .faults import FaultCode, ResolutionError, ResolutionWarning, getdoc, trigger
from .registry import Registry
from .results import Occurrence, builder
from .utils import IntrospectableType, Unset, coalesce, is_negative_number, strip_hyphens, strip_quotes


class State(Enum):
    NORMAL = "normal"
    AWAITING = "awaiting"
    PASSTHROUGH = "passthrough"


def _ordinal(number):
    """
    Return a human-friendly ordinal label for a 1-based position.

    - 1..10 are rendered as words ("first"…"tenth").
    - Other numbers use numeric ordinals with correct English suffixes.
    """
    try:
        return {
            1: "first",
            2: "second",
            3: "third",
            4: "fourth",
            5: "fifth",
            6: "sixth",
            7: "seventh",
            8: "eighth",
            9: "ninth",
            10: "tenth",
        }[number]
    except KeyError:
        pass

    # Handle the “teens” exception: 11th, 12th, 13th (and 111th, 112th, 113th, …)
    if 10 < number % 100 < 20:
        return "%dth" % number
    return "%d%s" % (number, {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th"))


class Resolver(metaclass=IntrospectableType):
    """
    Default token resolver.

    Parameters
    - partial: bool
      Accept unambiguous prefixes of long names ("--verb" for "--verbose").
      When False only exact long names match.
    - shell: bool
      Render faults on stderr and exit with status 1 instead of raising.
    - fancy: bool
      Render faults inside a rich Panel (shell mode).
    - colorful: bool
      Style rendered faults (shell mode).

    A Resolver keeps its pass state on the instance, so one instance serves
    one pass at a time; the module-level resolve() uses a fresh one per call.
    """

    __introspectable__ = (
        "partial",
        "shell",
        "fancy",
        "colorful",
    )

    def __init__(self, partial=True, *, shell=False, fancy=False, colorful=False):
        self._partial = bool(partial)
        self._shell = bool(shell)
        self._fancy = bool(fancy)
        self._colorful = bool(colorful)

        self._registry = None
        self._builder = None
        self._expected = []
        self._permissive = False
        self._awaiting = None
        self._passthrough = False
        self._index = 0

    @property
    def state(self):
        if self._passthrough:
            return State.PASSTHROUGH
        if self._awaiting is not None:
            return State.AWAITING
        return State.NORMAL

    def trigger(self, fault, /, **options):
        trigger(fault, **options, shell=self._shell, fancy=self._fancy, colorful=self._colorful)

    def resolve(self, registry, tokens, defaults=Unset, permissive=False):
        """
        Resolve tokens against the registry.

        Forms
        - resolve(registry, tokens)
        - resolve(registry, tokens, permissive)
        - resolve(registry, tokens, defaults, permissive)

        Parameters
        - registry: Registry
        - tokens: iterable of str
        - defaults: Unset | Mapping[str, str]
          Values applied after the pass for options that did not appear.
          Presence-only options take "yes", "true" or "1" (any case); any
          other value leaves them out.
        - permissive: bool
          Unknown tokens become positional and stop option parsing.

        Returns
        - ParseResult

        Raises
        - ResolutionError (outside shell mode) tagged with one of
          UNRECOGNIZED_OPTION, AMBIGUOUS_OPTION, MISSING_ARGUMENT,
          MISSING_REQUIRED_OPTIONS, ALREADY_SELECTED.
        """
        if isinstance(defaults, bool):
            defaults, permissive = Unset, defaults
        if not isinstance(registry, Registry):
            raise TypeError("resolve() registry must be a registry")
        if not isinstance(defaults, Mapping | Unset):
            raise TypeError("resolve() defaults must be a mapping")

        self._registry = registry
        self._builder = builder()
        self._expected = list(registry.required)
        self._permissive = bool(permissive)
        self._awaiting = None
        self._passthrough = False
        self._index = 0

        for group in registry.groups:
            group.reset()

        for self._index, token in enumerate(tokens, 1):
            if not isinstance(token, str):
                raise TypeError(f"resolve() tokens must be strings, not {type(token).__name__}")
            self._handle_token(token)

        self._check_required_args()
        self._handle_defaults(coalesce(defaults, {}))
        self._check_required_options()

        return self._builder.build()

    def _handle_token(self, token):
        if self._passthrough:
            self._builder.add_arg(token)
        elif token == "--":
            self._passthrough = True
        elif self._awaiting is not None and self._is_argument(token):
            self._awaiting.add(strip_quotes(token))
        elif token.startswith("--"):
            self._handle_long_option(token)
        elif token.startswith("-") and token != "-":
            self._handle_short_and_long_option(token)
        else:
            self._handle_unknown_token(token)

        if self._awaiting is not None and not self._awaiting.accepts_arg():
            self._awaiting = None

    def _is_argument(self, token):
        if not self._is_option(token):
            return True
        if not is_negative_number(token):
            return False
        self.trigger(ResolutionWarning(
            "token %r at %s position was taken as a value of option %r" % (token, _ordinal(self._index), self._awaiting.key),
            title="negative number taken as value",
            code=FaultCode.NEGATIVE_NUMBER_VALUE,
            hint="put '--' before %r if you meant an option or a positional argument" % token,
            token=token,
            option=self._awaiting.option,
            docs=getdoc(FaultCode.NEGATIVE_NUMBER_VALUE)
        ))
        return True

    def _is_option(self, token):
        return self._is_long_option(token) or self._is_short_option(token)

    def _is_short_option(self, token):
        # "-S", "-SV", "-S=V", "-SV1=V2", "-S1S2"
        if not token.startswith("-") or len(token) == 1:
            return False
        position = token.find("=")
        name = token[1:] if position == -1 else token[1:position]
        if self._registry.has_short(name):
            return True
        return bool(name) and self._registry.has_short(name[0])

    def _is_long_option(self, token):
        # "-L", "-L=V", "-l", "--L", "--L=V", "--l"
        if not token.startswith("-") or len(token) == 1:
            return False
        position = token.find("=")
        name = token if position == -1 else token[:position]
        if self._matching(name):
            return True
        return self._long_prefix(token) is not None and not token.startswith("--")

    def _matching(self, name):
        if self._partial:
            return self._registry.matching(name)
        return (strip_hyphens(name),) if self._registry.has_long(name) else ()

    def _long_prefix(self, token):
        # longest registered long name that is a strict prefix of the token, leaving a value
        name = strip_hyphens(token)
        for index in range(len(name) - 2, 1, -1):
            if self._registry.has_long(prefix := name[:index]):
                return prefix
        return None

    def _is_property(self, name):
        option = self._registry.get(name[:1]) if name else None
        return option is not None and option.nargs is not None and (option.nargs is ... or option.nargs >= 2)

    def _handle_long_option(self, token):
        if "=" in token:
            self._handle_long_option_with_equal(token)
        else:
            self._handle_long_option_without_equal(token)

    def _handle_long_option_without_equal(self, token):
        # "--L", "-L", "--l", "-l"
        matching = self._matching(token)
        if not matching:
            self._handle_unknown_token(token)
        elif len(matching) > 1:
            self._ambiguous(token, matching)
        else:
            self._handle_option(self._registry.long(matching[0]))

    def _handle_long_option_with_equal(self, token):
        # "--L=V", "-L=V", "--l=V", "-l=V"
        name, _, value = token.partition("=")
        matching = self._matching(name)
        if not matching:
            self._handle_unknown_token(token)
        elif len(matching) > 1:
            self._ambiguous(name, matching)
        elif (option := self._registry.long(matching[0])).has_arg():
            self._handle_option(option)
            self._awaiting.add(value)
            self._awaiting = None
        else:
            self._handle_unknown_token(token)

    def _handle_short_and_long_option(self, token):
        name = strip_hyphens(token)
        position = name.find("=")

        if len(name) == 1:
            # "-S"
            if self._registry.has_short(name):
                self._handle_option(self._registry[name])
            else:
                self._handle_unknown_token(token)
        elif position == -1:
            # "-SV", "-S1S2", "-L", "-l", "-LV"
            if self._registry.has_short(name):
                self._handle_option(self._registry[name])
            elif self._matching(name):
                self._handle_long_option_without_equal(token)
            elif (prefix := self._long_prefix(name)) is not None and self._registry.long(prefix).has_arg():
                self._handle_option(self._registry.long(prefix))
                self._awaiting.add(name[len(prefix):])
                self._awaiting = None
            elif self._is_property(name):
                self._handle_option(self._registry[name[0]])
                self._awaiting.add(name[1:])
                self._awaiting = None
            else:
                self._handle_concatenated_options(token)
        else:
            # "-S=V", "-SV1=V2", "-L=V", "-l=V"
            key, value = name[:position], name[position + 1:]
            if len(key) == 1:
                option = self._registry.get(key)
                if option is not None and option.has_arg():
                    self._handle_option(option)
                    self._awaiting.add(value)
                    self._awaiting = None
                else:
                    self._handle_unknown_token(token)
            elif self._is_property(key):
                self._handle_option(self._registry[key[0]])
                self._awaiting.add(key[1:])
                self._awaiting.add(value)
                self._awaiting = None
            else:
                self._handle_long_option_with_equal(token)

    def _handle_concatenated_options(self, token):
        # "-abc": every character names an option; an argument-taking one swallows the rest
        for index in range(1, len(token)):
            character = token[index]
            if character not in self._registry:
                self._handle_unknown_token(token[index:] if self._permissive and index > 1 else token)
                break
            self._handle_option(self._registry[character])
            if self._awaiting is not None and len(token) != index + 1:
                self._awaiting.add(token[index + 1:])
                break

    def _handle_unknown_token(self, token):
        if token.startswith("-") and len(token) > 1 and not self._permissive:
            names = [name for option in self._registry.options for name in option.names]
            suggestions = difflib.get_close_matches(token, names, 5)
            try:
                hint = "did you mean %r?" % suggestions[0]
            except IndexError:
                hint = "put '--' before %r to pass it as a positional argument" % token
            return self.trigger(ResolutionError(
                "unrecognized option %r at %s position" % (token, _ordinal(self._index)),
                title="unrecognized option",
                code=FaultCode.UNRECOGNIZED_OPTION,
                hint=hint,
                token=token,
                suggestions=suggestions,
                docs=getdoc(FaultCode.UNRECOGNIZED_OPTION)
            ))

        self._builder.add_arg(token)
        if self._permissive:
            self._passthrough = True

    def _ambiguous(self, prefix, candidates):
        self.trigger(ResolutionError(
            "ambiguous option %r at %s position could be %s" % (
                prefix,
                _ordinal(self._index),
                ", ".join("--" + candidate for candidate in candidates)
            ),
            title="ambiguous option",
            code=FaultCode.AMBIGUOUS_OPTION,
            hint="type more of the name (for example: --%s)" % candidates[0],
            prefix=prefix,
            candidates=tuple(candidates),
            docs=getdoc(FaultCode.AMBIGUOUS_OPTION)
        ))

    def _handle_option(self, option):
        self._check_required_args()
        occurrence = Occurrence(option)
        self._update_required(option)
        self._builder.add_option(occurrence)
        self._awaiting = occurrence if option.has_arg() else None

    def _update_required(self, option):
        if option.required and option.key in self._expected:
            self._expected.remove(option.key)

        if (group := self._registry.group_of(option)) is not None:
            if group.required and group in self._expected:
                self._expected.remove(group)
            try:
                group.select(option)
            except ResolutionError as error:
                self.trigger(error)

    def _check_required_args(self):
        if self._awaiting is None or not self._awaiting.requires_arg():
            return
        option = self._awaiting.option
        self.trigger(ResolutionError(
            "missing value for option %r" % str(option),
            title="missing argument",
            code=FaultCode.MISSING_ARGUMENT,
            hint="pass %s %s" % (option.names[0], option.metavar or "<value>"),
            option=option,
            key=option.key,
            docs=getdoc(FaultCode.MISSING_ARGUMENT)
        ))

    def _handle_defaults(self, defaults):
        for name, value in defaults.items():
            if (option := self._registry.get(name)) is None:
                self.trigger(ResolutionError(
                    "default option %r was not defined" % name,
                    title="unrecognized option",
                    code=FaultCode.UNRECOGNIZED_OPTION,
                    hint="remove %r from the defaults or register it" % name,
                    token=name,
                    suggestions=[],
                    docs=getdoc(FaultCode.UNRECOGNIZED_OPTION)
                ))
                continue

            group = self._registry.group_of(option)
            if self._builder.has(name) or (group is not None and group.selected is not None):
                continue

            if option.has_arg():
                self._handle_option(option)
                self._awaiting.add(value)
            elif str(value).lower() in ("yes", "true", "1"):
                self._handle_option(option)
            self._awaiting = None

    def _check_required_options(self):
        if not self._expected:
            return
        missing = tuple(self._expected)
        self.trigger(ResolutionError(
            "missing required option%s: %s" % ("s" if len(missing) > 1 else "", ", ".join(map(str, missing))),
            title="missing required options",
            code=FaultCode.MISSING_REQUIRED_OPTIONS,
            hint="pass %s" % " and ".join(
                "one of %s" % entry if not isinstance(entry, str) else self._spelling(entry) for entry in missing
            ),
            missing=missing,
            docs=getdoc(FaultCode.MISSING_REQUIRED_OPTIONS)
        ))

    def _spelling(self, key):
        return self._registry[key].names[0]


def resolve(registry, tokens, defaults=Unset, permissive=False, *, partial=True, shell=False, fancy=False, colorful=False):
    """
    Resolve tokens with a fresh Resolver (see Resolver.resolve for the forms).
    """
    resolver = Resolver(partial, shell=shell, fancy=fancy, colorful=colorful)
    return resolver.resolve(registry, tokens, defaults, permissive)


__all__ = (
    "State",
    "Resolver",
    "resolve",
)
