"""
Optionaut faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every resolution issue
  (errors and warnings).
- ResolutionError / ResolutionWarning: tagged fault types that carry a message
  plus options (code, title, hint, docs and a per-code payload) and know how to
  render themselves in a friendly, lowercased and actionable way.
- trigger(): central entry point to surface any fault (respecting shell/fancy/colorful).
- getdoc(): optional description lookup for a code from the host application.

Payload per code
- UNRECOGNIZED_OPTION      → token, suggestions
- AMBIGUOUS_OPTION         → prefix, candidates
- MISSING_ARGUMENT         → option, key
- MISSING_REQUIRED_OPTIONS → missing (keys and groups, in registration order)
- ALREADY_SELECTED         → group, key, selected
- NEGATIVE_NUMBER_VALUE    → token, option

Integration
- The resolver builds faults during a pass and calls trigger(fault, **ctx).
- In non-shell mode, errors are raised and warnings go through warnings.warn;
  in shell mode, they are rendered via rich on stderr (errors then exit with 1).
"""
import inspect
import sys
import warnings
from collections import defaultdict
from enum import IntEnum
from pathlib import Path
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used by the resolver (stable identifiers).

    grouping (by high-level domain)
    - option lookup (2111x)
      • UNRECOGNIZED_OPTION, AMBIGUOUS_OPTION
    - values (2112x)
      • MISSING_ARGUMENT
    - completeness and exclusivity (2113x)
      • MISSING_REQUIRED_OPTIONS, ALREADY_SELECTED
    - warnings (2211x)
      • NEGATIVE_NUMBER_VALUE

    rationale
    - codes are discoverable (searchable in logs and docs) and normalized to a string
      via normalize() so hosts can remap them if desired (e.g., to shorter labels).
    """
    # --- option lookup errors (21xxx) ---
    UNRECOGNIZED_OPTION      = 21111
    AMBIGUOUS_OPTION         = 21112

    # --- value errors (21xxx) ---
    MISSING_ARGUMENT         = 21121

    # --- completeness/exclusivity errors (21xxx) ---
    MISSING_REQUIRED_OPTIONS = 21131
    ALREADY_SELECTED         = 21132

    # --- warnings (22xxx) ---
    NEGATIVE_NUMBER_VALUE    = 22111

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _prog(main):
    try:
        return main.__prog__
    except AttributeError:
        return Path(sys.argv[0]).name or "optionaut"


class Fault:
    """
    shared shape of errors and warnings: a message plus read-only options.

    subclasses provide a __palette__ (style name → rich style) and the
    __trigger__ behaviour; everything else (rendering, replacement, the code
    tag) lives here.
    """
    __palette__ = {}

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return str(self.message) if self.message is not Unset else ""

    @property
    def code(self):
        return self.options.get("code")

    def __rich__(self):
        main = __import__("__main__")
        colorful = self.options.get("colorful", False)
        fancy = self.options.get("fancy", False)

        styles = defaultdict(str, self.__palette__ | getattr(main, "__styles__", {}))

        def styler(style):
            return styles[style] if colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), style)

        kind = "error" if isinstance(self, Exception) and not isinstance(self, Warning) else "warning"

        header = Text.assemble(
            "[ ",
            text(_prog(main), styler("prog-name")),
            " — ",
            text(self.code.normalize() if self.code is not None else "", styler("code")),
            " | ",
            text(self.options.get("title", kind).title(), styler(kind + "-title")),
            " ]"
        )
        message = text(self.message, styler(kind + "-message"))
        hint = Text.assemble(text(" → ", styler("hint-arrow")), text(self.options.get("hint"), styler("hint")))

        if fancy:
            try:
                width = int((console.width - 4) * self.options["ratio"])
            except KeyError:
                width = None
            return Panel(Group(message, hint), title=header, title_align="left", width=width)

        return Group(header, message, hint)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class ResolutionError(Fault, Exception):
    """
    the single error type raised while resolving tokens.

    the variant is carried by options["code"] (also exposed as .code) so
    callers branch on the tag rather than on a class hierarchy:

        try:
            result = resolve(registry, argv)
        except ResolutionError as error:
            match error.code:
                case FaultCode.MISSING_REQUIRED_OPTIONS:
                    print(error.options["missing"])
    """
    __palette__ = {
        # header parts
        "prog-name": "bold #E6E6F0",  # near-white program name
        "code": "bold #00E5FF",  # neon cyan fault code
        "error-title": "bold #FF4DA6",  # friendly pinky title

        # body
        "error-message": "#C8C8D0",  # soft light gray message
        "hint-arrow": "#9CE19C dim",  # gentle green arrow
        "hint": "italic #9CE19C",  # gentle green hint text
    }

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        sys.exit(1)


class ResolutionWarning(Fault, Warning):
    __palette__ = {
        # header parts
        "prog-name": "bold #E6E6F0",  # near-white program name
        "code": "bold #FFB400",  # amber fault code for warnings
        "warning-title": "bold #FFC2E0",  # softer pinky title for warnings

        # body
        "warning-message": "#D6D6DE",  # slightly lighter gray body
        "hint-arrow": "#B8EFAF dim",  # softer green arrow
        "hint": "italic #B8EFAF",  # softer green hint text
    }

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            return warnings.warn(self, stacklevel=len(inspect.stack()))
        console.print(self)


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see Fault).
    - options are merged into the fault via __replace__(**options) before triggering.
    - in shell mode, rendering happens via rich console; otherwise, errors are raised
      and warnings are emitted through the warnings module.

    typical options
    - shell, fancy, colorful, title, code, hint, docs, and the payload of the code.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    fault.__replace__(**options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    lookup
    - the host application may expose a __docs__ mapping in __main__ where keys
      are FaultCode instances and values are short documentation strings.
    - when not found, returns None (renderers treat docs as optional).
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "Fault",
    "ResolutionError",
    "ResolutionWarning",
    "FaultCode",
    "trigger",
    "getdoc",
)
