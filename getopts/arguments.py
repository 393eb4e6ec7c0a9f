r"""
getopts flag and option specifications.

Overview
- Specs
  • Flag: boolean, countable switch (no payload), e.g. -v/--verbose, negated with +v
    or --verbose=false.
  • Option: string-valued switch that consumes a value, e.g. -f file, -ffile,
    --file file or --file=file.

- Handles
  Both specs are the handles stored by a Registry. The parser only relies on the
  `takes_argument` discriminant and on `deliver(...)`:
  • Flag.deliver(bool): updates value and net count, then calls on_true/on_false.
  • Option.deliver(str): appends to the history, overwrites the most recent value,
    marks the option as passed, then calls action(value).

- Introspection & representation
  • ArgumentType metaclass provides stable __repr__/__rich_repr__ and exposes the
    fields declared in __introspectable__ via read-only properties (see mirror()).

Metadata (sanitized on construction)
- short: Unset | str, exactly one character, not whitespace, '-', '+' or '='.
- long: Unset | str, non-empty, no whitespace or '=', not starting with '-'.
- help: Unset | str | Text, trimmed and non-empty when provided.
- callbacks: Unset | callable.
At least one of short/long is required.

Quick example:
    >>> from getopts.arguments import Flag, Option
    >>> verbose = Flag("v", "verbose", "increase verbosity")
    >>> @verbose.ontrue
    ... def louder(): ...
    ...
    >>> output = Option("o", "output", "write to file")
"""
import functools
import operator
import re

from rich.text import Text

from .utils import *


class ArgumentType(type):
    """
    Metaclass that turns specs into introspectable handles.

    Responsibilities
    - Expose selected fields as read-only properties using mirror() for all
      names listed in __introspectable__.
    - Provide stable, readable __repr__/__rich_repr__ implementations for
      diagnostics and help output.

    Conventions
    - __typename__ is derived from the class name (camel-case split with hyphens)
      and used in messages.
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                field: mirror(field) for field in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            """
            Example
            - flag(short='v', long='verbose', help=None, value=False, count=0)
            """
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for field in type(self).__introspectable__:
                yield field, getattr(self, field)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: validate and normalize the names and help shared by Flag and Option.

    Raises
    - TypeError: missing names, or a field of the wrong type.
    - ValueError: a name that cannot be typed on a command line, or an empty help.

    Notes
    - Mutates metadata in place; Unset names and help become None.
    """
    if metadata["short"] is Unset and metadata["long"] is Unset:
        raise TypeError(f"{cls.__typename__} must specify a short or a long name")

    if not isinstance(short := metadata["short"], str | Unset):
        raise TypeError(f"{cls.__typename__} short name must be a string")
    elif isinstance(short, str) and not re.fullmatch(r"[^\s=+\-]", short):
        raise ValueError(f"{cls.__typename__} short name must be a single character other than '-', '+' and '='")
    metadata["short"] = coalesce(short)

    if not isinstance(long := metadata["long"], str | Unset):
        raise TypeError(f"{cls.__typename__} long name must be a string")
    elif isinstance(long, str) and not re.fullmatch(r"[^\s=\-][^\s=]*", long):
        raise ValueError(f"{cls.__typename__} long name must be non-empty, without spaces or '=', and not start with '-'")
    metadata["long"] = coalesce(long)

    if not isinstance(help := metadata["help"], str | Text | Unset):
        raise TypeError(f"{cls.__typename__} 'help' must be a string")
    elif isinstance(help, str) and not (help := help.strip()):
        raise ValueError(f"{cls.__typename__} 'help' cannot be empty")
    metadata["help"] = coalesce(help)


def _sanitize_callback(cls, name, callback, /):
    if callback is not Unset and not callable(callback):
        raise TypeError(f"{cls.__typename__} {name!r} must be callable")
    return callback


class Flag(metaclass=ArgumentType):
    """
    Boolean, countable switch.

    State
    - value: the last delivered boolean (False until delivered).
    - count: net count, +1 for every true delivery and -1 for every false one.
      Unbounded and may go negative, which makes it usable as a verbosity level.

    Callbacks
    - on_true(): called on every true delivery (-v, --verbose, --verbose=yes).
    - on_false(): called on every false delivery (+v, --verbose=no).
    """

    __introspectable__ = (
        "short",
        "long",
        "help",
        "value",
        "count",
    )

    takes_argument = False

    def __init__(self, short=Unset, long=Unset, help=Unset, *, on_true=Unset, on_false=Unset):
        metadata = {
            "short": short,
            "long": long,
            "help": help,
        }
        _sanitize_metadata(type(self), metadata)

        for name, object in metadata.items():
            setattr(self, "_" + name, object)

        self._on_true = _sanitize_callback(type(self), "on_true", on_true)
        self._on_false = _sanitize_callback(type(self), "on_false", on_false)
        self._value = False
        self._count = 0

    def deliver(self, value, /):
        """
        Apply a boolean delivery: update value and count, then notify.
        """
        if not isinstance(value, bool):
            raise TypeError("flag deliveries must be booleans")

        self._count += 1 if value else -1
        self._value = value

        callback = self._on_true if value else self._on_false
        if callback is not Unset:
            callback()

    def ontrue(self, callback, /):
        """
        Decorator: bind `callback` as the zero-argument on_true notification.
        """
        self._on_true = _sanitize_callback(type(self), "on_true", callback)
        return callback

    def onfalse(self, callback, /):
        """
        Decorator: bind `callback` as the zero-argument on_false notification.
        """
        self._on_false = _sanitize_callback(type(self), "on_false", callback)
        return callback


class Option(metaclass=ArgumentType):
    """
    String-valued switch that consumes a value.

    State
    - value: the most recent value ("last write wins"); None until passed.
    - values: every delivered value, in delivery order, duplicates preserved.
    - passed: whether at least one value was delivered.

    Callbacks
    - action(value): called with every delivered value.
    """

    __introspectable__ = (
        "short",
        "long",
        "help",
        "value",
        "values",
        "passed",
    )

    takes_argument = True

    def __init__(self, short=Unset, long=Unset, help=Unset, *, action=Unset):
        metadata = {
            "short": short,
            "long": long,
            "help": help,
        }
        _sanitize_metadata(type(self), metadata)

        for name, object in metadata.items():
            setattr(self, "_" + name, object)

        self._action = _sanitize_callback(type(self), "action", action)
        self._value = None
        self._values = []
        self._passed = False

    def deliver(self, value, /):
        """
        Apply a value delivery: record it, then notify.
        """
        if not isinstance(value, str):
            raise TypeError("option deliveries must be strings")

        self._values.append(value)
        self._value = value
        self._passed = True

        if self._action is not Unset:
            self._action(value)

    def onvalue(self, callback, /):
        """
        Decorator: bind `callback` as the one-argument action notification.
        """
        self._action = _sanitize_callback(type(self), "action", callback)
        return callback


__all__ = (
    "Flag",
    "Option",
)

# Keep the metaclass out of star-imports; it is not part of the public API.
del ArgumentType
