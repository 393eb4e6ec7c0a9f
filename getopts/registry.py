"""
getopts registry: declared flags and options, indexed by short and long name.

A Registry owns its lookup tables; programs usually hold one per run, tests one
per case (or call reset() between cases). Names are unique per registry: a
second declaration of the same short or long name raises DuplicateNameError
immediately, before either table is touched.

Typical usage
    >>> registry = Registry("tool")
    >>> verbose = registry.flag("v", "verbose", "increase verbosity")
    >>> output = registry.option("o", "output", "write to file")
    >>> rest = registry.parse(["tool", "-vo", "out.txt", "input.txt"])
    >>> verbose.value, output.value, rest
    (True, 'out.txt', [Rest(argument='input.txt', after_terminator=False)])
"""
import sys
from contextlib import contextmanager

from rich.console import Console

from .arguments import Flag, Option
from .faults import DuplicateNameError, ParseError, trigger
from .helper import compose
from .parser import Parser
from .utils import Unset, coalesce, mirror


class Registry:
    """
    Declaration and lookup tables for one parse run.

    parameters
    - prog: Unset | str
      program name used in help and fault headers (defaults to "getopts").
    - descr: Unset | str
      short description rendered under the usage line.
    - shell: bool (keyword-only)
      when True, getopts() prints faults with rich and exits instead of raising,
      and parse warnings are printed instead of going through warnings.warn.
    - fancy: bool (keyword-only)
      render help and faults inside panels.
    - colorful: bool (keyword-only)
      enable the colour palette (overridable via __styles__ in __main__).
    """

    prog = mirror("prog")
    descr = mirror("descr")
    shell = mirror("shell")
    fancy = mirror("fancy")
    colorful = mirror("colorful")
    flags = mirror("flags")
    options = mirror("options")

    def __init__(self, prog=Unset, descr=Unset, *, shell=False, fancy=False, colorful=True):
        if not isinstance(prog, str | Unset):
            raise TypeError("registry 'prog' must be a string")
        elif isinstance(prog, str) and not (prog := prog.strip()):
            raise ValueError("registry 'prog' cannot be empty")
        if not isinstance(descr, str | Unset):
            raise TypeError("registry 'descr' must be a string")

        self._prog = coalesce(prog, "getopts")
        self._descr = coalesce(descr)
        self._shell = bool(shell)
        self._fancy = bool(fancy)
        self._colorful = bool(colorful)
        self._parsing = False
        self.reset()

    def __repr__(self):
        return f"registry(prog={self._prog!r}, flags={len(self._flags)}, options={len(self._options)})"

    @property
    def presentation(self):
        """
        rendering options merged into every fault raised on behalf of this registry.
        """
        return {"prog": self._prog, "fancy": self._fancy, "colorful": self._colorful}

    @property
    def rest_filter(self):
        return self._rest_filter

    def reset(self):
        """
        Forget every declared flag and option and the rest filter.

        Handles returned before the reset keep their state but are no longer reachable
        through lookups.
        """
        self._flags = []
        self._options = []
        self._shorts = {}
        self._longs = {}
        self._rest_filter = Unset

    def declare(self, kind, short=Unset, long=Unset, help=Unset, **callbacks):
        """
        Build a `kind` (Flag or Option) and register it under its names.

        Raises
        - DuplicateNameError: short or long name already registered.
        - RuntimeError: called while a parse is running (e.g. from a callback).
        - TypeError/ValueError: invalid names, help or callbacks (see arguments).
        """
        if kind not in (Flag, Option):
            raise TypeError("declare() kind must be Flag or Option")
        if self._parsing:
            raise RuntimeError("cannot declare flags or options while parsing")

        argument = kind(short, long, help, **callbacks)

        # check both names before touching either table
        if argument.short is not None and argument.short in self._shorts:
            raise DuplicateNameError("short", argument.short)
        if argument.long is not None and argument.long in self._longs:
            raise DuplicateNameError("long", argument.long)

        if argument.short is not None:
            self._shorts[argument.short] = argument
        if argument.long is not None:
            self._longs[argument.long] = argument
        (self._options if argument.takes_argument else self._flags).append(argument)
        return argument

    def flag(self, short=Unset, long=Unset, help=Unset, *, on_true=Unset, on_false=Unset):
        """
        Declare a Flag; see declare().
        """
        return self.declare(Flag, short, long, help, on_true=on_true, on_false=on_false)

    def option(self, short=Unset, long=Unset, help=Unset, *, action=Unset):
        """
        Declare an Option; see declare().
        """
        return self.declare(Option, short, long, help, action=action)

    def lookup_short(self, char, /):
        return self._shorts.get(char)

    def lookup_long(self, name, /):
        return self._longs.get(name)

    def onrest(self, callback, /):
        """
        Decorator: install the rest filter.

        callback(argument, after_terminator) is called for every positional argument;
        the argument is kept in the returned rest list only when it returns a truthy value.
        This lets a program consume a command language inline while parsing.
        """
        if not callable(callback):
            raise TypeError("@onrest() must be applied to a callable")
        self._rest_filter = callback
        return callback

    @contextmanager
    def parsing(self):
        """
        Mark the registry as busy for the duration of a parse; parses do not nest.
        """
        if self._parsing:
            raise RuntimeError("registry is already parsing")
        self._parsing = True
        try:
            yield self
        finally:
            self._parsing = False

    def parse(self, argv, /, *, strict=False):
        """
        Parse argv once (argv[0] is the program name) and return its rest entries.

        Raises the ParseError of the first offending token; see getopts.parser.
        """
        return Parser(self, strict=strict)(argv)

    def getopts(self, *, strict=False):
        """
        Parse the process command line (sys.argv).

        Faults are surfaced through trigger(): with shell=True they are printed and the
        process exits with status 1, otherwise they are raised to the caller.
        """
        try:
            return self.parse(sys.argv, strict=strict)
        except ParseError as fault:
            trigger(fault, shell=self._shell)

    def help(self, *, file=Unset):
        """
        Print the help screen to `file` (stdout by default).
        """
        console = Console(file=coalesce(file))
        console.print(compose(self))


__all__ = (
    "Registry",
)
