"""
getopts faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for all user-facing issues
  (errors and warnings). Codes are grouped by domain to keep copy consistent
  and make logs/searches predictable.
- ParseError / ParseWarning: base types that carry message + options and
  know how to render themselves in a friendly, lowercased, and actionable way.
- DuplicateNameError: declaration-time programming error. It is NOT a parse
  fault and never goes through trigger().
- trigger(): central entry point to surface any fault (respecting shell/fancy/colorful).

UX goals
- Position-first messages: every parse message includes the ordinal position of
  the offending token (“at third position”, etc.).
- Soft but technical language: short titles, one-sentence bodies, a single clear hint.
- Lowercased tone with readable styling (configurable via __styles__ in __main__).

Integration
- The parser raises faults as soon as it meets them; the accumulated rest entries
  travel with the fault (fault.rest).
- Registry.getopts() hands faults to trigger(fault, shell=...): in shell mode they
  are rendered via rich and the process exits, otherwise they are raised.
"""
import copy
import os.path
import sys
import warnings
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the parser (stable identifiers).

    grouping (by high-level domain)
    - switches (short/long options and flags) (1111x)
      • UNRECOGNIZED_SHORT_OPTION, UNRECOGNIZED_LONG_OPTION, NEGATED_OPTION,
        INVALID_BOOLEAN, MISSING_OPTION_VALUE
    - warnings (1211x)
      • DANGLING_OPTION

    rationale
    - codes are discoverable (searchable in logs and docs) and normalized to a string
      via normalize() so hosts can remap them if desired (e.g., to shorter labels).
    """
    # --- switch/flag/option errors (11xxx) ---
    UNRECOGNIZED_SHORT_OPTION   = 11111
    UNRECOGNIZED_LONG_OPTION    = 11112
    NEGATED_OPTION              = 11113
    INVALID_BOOLEAN             = 11114
    MISSING_OPTION_VALUE        = 11115

    # --- warnings (12xxx) ---
    DANGLING_OPTION             = 12111

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _render(fault, palette, title_style, message_style):
    """
    shared rich rendering for errors and warnings: "[ prog — code | title ]",
    the message, then an arrowed hint. wrapped in a Panel when fancy.
    """
    main = __import__("__main__")
    options = fault.options
    colorful = options.get("colorful", True)
    fancy = options.get("fancy", False)

    styles = defaultdict(str, palette | getattr(main, "__styles__", {}))

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

    prog = text(getattr(main, "__prog__", options.get("prog") or "getopts"), styler("prog-name"))

    header = Text.assemble(
        "[ ",
        prog,
        " — ",
        text(options["code"].normalize(), styler("code")),
        " | ",
        text(options["title"].title(), styler(title_style)),
        " ]"
    )
    message = text(fault.message, styler(message_style))
    body = [message]
    if hint := options.get("hint"):
        body.append(Text.assemble(text(" → ", styler("hint-arrow")), text(hint, styler("hint"))))

    if fancy:
        return Panel(Group(*body), title=header, title_align="left")

    return Group(header, *body)


class ParseError(Exception):
    """
    base type of every parse-time fault.

    options
    - title, code, hint: rendering metadata.
    - token, index: the offending argv token and its position in argv.
    - rest: the rest entries accumulated before the failure.
    - fault-specific fields (char, name, value) documented on each subclass.

    every option is also readable as an attribute (fault.rest, fault.char, ...).
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __getattr__(self, name):
        if name == "options":
            raise AttributeError(name)
        try:
            return self.options[name]
        except KeyError:
            raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}") from None

    def __str__(self):
        return str(self.message)

    def __rich__(self):
        return _render(self, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        }, "error-title", "error-message")

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class UnrecognizedShortOptionError(ParseError):
    """a short name (single, clumped or negated) that was never declared. options: char."""


class UnrecognizedLongOptionError(ParseError):
    """a long name that was never declared. options: name."""


class NegatedOptionError(ParseError):
    """'+x' or a negated clump reached an option that takes an argument. options: char."""


class InvalidBooleanError(ParseError):
    """'--name=value' against a flag where value is not a boolean spelling. options: name, value."""


class MissingOptionValueError(ParseError):
    """input ended while an option was awaiting its value (strict parsing only). options: name (as typed, e.g. '-f')."""


class ParseWarning(Warning):
    """
    base type of every parse-time warning; renders like ParseError but never stops the parse.
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __getattr__(self, name):
        if name == "options":
            raise AttributeError(name)
        try:
            return self.options[name]
        except KeyError:
            raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}") from None

    def __str__(self):
        return str(self.message)

    def __rich__(self):
        return _render(self, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #FFB400",  # amber fault code for warnings
            "warning-title": "bold #FFC2E0",  # softer pinky title for warnings

            # body
            "warning-message": "#D6D6DE",  # slightly lighter gray body
            "hint-arrow": "#B8EFAF dim",  # softer green arrow
            "hint": "italic #B8EFAF",  # softer green hint text
        }, "warning-title", "warning-message")

    def __trigger__(self):
        if not self.options.get("shell", False):
            return warnings.warn(self, skip_file_prefixes=(os.path.dirname(__file__) + os.sep,))
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class DanglingOptionWarning(ParseWarning):
    """input ended while an option was awaiting its value; the option stays unset. options: name (as typed), option."""


class DuplicateNameError(ValueError):
    """
    raised at declaration time when a short or long name is already registered.

    this is a programming error in the host application, not user input: it is
    raised immediately and is deliberately unrelated to ParseError.
    """

    def __init__(self, kind, name, /):
        self.kind = kind
        self.name = name
        prefix = "-" if kind == "short" else "--"
        super().__init__(f"another flag or option is already registered as {prefix}{name}")


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via __replace__(**options) before triggering.
    - in shell mode, rendering happens via rich console; otherwise, errors are raised
      and warnings go through warnings.warn.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


__all__ = (
    "FaultCode",
    "ParseError",
    "UnrecognizedShortOptionError",
    "UnrecognizedLongOptionError",
    "NegatedOptionError",
    "InvalidBooleanError",
    "MissingOptionValueError",
    "ParseWarning",
    "DanglingOptionWarning",
    "DuplicateNameError",
    "trigger",
)
