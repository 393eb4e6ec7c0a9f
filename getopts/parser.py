"""
getopts parser: a single pass over an argument vector.

Grammar (token shapes, checked in this order)
- any token right after an option that still awaits its value → that value
- ''                → ignored
- 'x', '-'          → rest
- '--'              → terminator; every remaining token is rest (after_terminator=True)
- '-x'              → flag set / option awaiting its value
- '+x'              → flag negated
- '--name'          → flag set / option awaiting its value
- '--name=value'    → option value / flag boolean (t, f, y, n, yes, no, true, false)
- '-abc'            → clump; an option inside it takes the remainder as its value
- '+abc'            → negated clump (flags only)
- anything else     → rest

Index 0 of argv is the program name and is never classified.

Failures raise the matching ParseError at the first offending token; the rest
entries collected so far travel with it (fault.rest).
"""
from typing import NamedTuple

from .faults import *
from .utils import Unset, ordinal


class Rest(NamedTuple):
    """
    One positional argument and whether it came after the '--' terminator.
    """
    argument: str
    after_terminator: bool = False


# Case-insensitive spellings accepted by '--flag=value'.
BOOLEANS = {
    "t": True,
    "f": False,
    "y": True,
    "n": False,
    "yes": True,
    "no": False,
    "true": True,
    "false": False,
}


class Parser:
    """
    Two-state machine (idle, awaiting-value) over argv, bound to one registry.

    The registry provides the lookups (lookup_short/lookup_long), the rest filter
    and the presentation options merged into every fault. Loop state (rest list,
    pending option, current token and index) lives on the instance and is reset
    at the start of every call, so each call starts idle with an empty rest list.

    parameters
    - registry: Registry
    - strict: bool (keyword-only)
      when True, ending the input while an option awaits its value raises
      MissingOptionValueError; otherwise the option is left unset and a
      DanglingOptionWarning is triggered.
    """

    def __init__(self, registry, /, *, strict=False):
        self._registry = registry
        self._strict = bool(strict)

    def __call__(self, argv, /):
        """
        parse argv and return the rest entries in order of appearance.
        """
        tokens = list(argv)
        if not all(isinstance(token, str) for token in tokens):
            raise TypeError("parse() argument must be an iterable of strings")

        self._rest = []
        self._pending = None
        self._pending_input = None

        with self._registry.parsing():
            index = 1
            while index < len(tokens):
                token = tokens[index]
                self._index = index
                self._token = token
                index += 1

                # a single option at most may be awaiting its value; it takes this token wholesale
                if self._pending is not None:
                    option, self._pending = self._pending, None
                    option.deliver(token)
                    continue

                match len(token):
                    case 0:
                        continue
                    case 1:
                        self._append(token)
                    case 2 if token == "--":
                        for token in tokens[index:]:
                            self._append(token, after_terminator=True)
                        break
                    case 2 if token[0] == "-":
                        self._parse_short(token[1])
                    case 2 if token[0] == "+":
                        self._negate_short(token[1])
                    case 2:
                        self._append(token)
                    case _ if token.startswith("--"):
                        self._parse_long(token[2:])
                    case _ if token[0] == "-":
                        self._parse_clump(token[1:])
                    case _ if token[0] == "+":
                        self._negate_clump(token[1:])
                    case _:
                        self._append(token)

            if self._pending is not None:
                self._dangling()

        return self._rest

    def _append(self, argument, *, after_terminator=False):
        """
        record a rest entry, unless the registry's rest filter rejects it.
        """
        if (filter := self._registry.rest_filter) is not Unset:
            if not filter(argument, after_terminator):
                return
        self._rest.append(Rest(argument, after_terminator))

    def _await(self, option, input):
        self._pending = option
        self._pending_input = input

    def _lookup_short(self, char):
        if (argument := self._registry.lookup_short(char)) is None:
            self._fail(UnrecognizedShortOptionError(
                "unrecognized short option %r in %r at %s position" % (char, self._token, ordinal(self._index)),
                title="unrecognized short option",
                code=FaultCode.UNRECOGNIZED_SHORT_OPTION,
                hint="check the spelling of '-%s' or run with --help to see all options" % char,
                char=char,
            ))
        return argument

    def _parse_short(self, char):
        argument = self._lookup_short(char)
        if argument.takes_argument:
            self._await(argument, "-" + char)
        else:
            argument.deliver(True)

    def _negate_short(self, char):
        argument = self._lookup_short(char)
        if argument.takes_argument:
            self._fail(NegatedOptionError(
                "option '-%s' in %r at %s position takes a value and cannot be negated" % (
                    char, self._token, ordinal(self._index)
                ),
                title="negated option",
                code=FaultCode.NEGATED_OPTION,
                hint="only flags accept '+'; pass a value instead (for example: -%s <value>)" % char,
                char=char,
            ))
        argument.deliver(False)

    def _parse_long(self, body):
        name, equals, value = body.partition("=")

        if (argument := self._registry.lookup_long(name)) is None:
            self._fail(UnrecognizedLongOptionError(
                "unrecognized long option %r at %s position" % ("--" + name, ordinal(self._index)),
                title="unrecognized long option",
                code=FaultCode.UNRECOGNIZED_LONG_OPTION,
                hint="check the spelling of '--%s' or run with --help to see all options" % name,
                name=name,
            ))

        if not equals:
            if argument.takes_argument:
                self._await(argument, "--" + name)
            else:
                argument.deliver(True)
        elif argument.takes_argument:
            argument.deliver(value)
        else:
            try:
                boolean = BOOLEANS[value.lower()]
            except KeyError:
                self._fail(InvalidBooleanError(
                    "flag '--%s' at %s position cannot take %r" % (name, ordinal(self._index), value),
                    title="invalid boolean for flag",
                    code=FaultCode.INVALID_BOOLEAN,
                    hint="use one of %s (for example: --%s=false)" % (", ".join(BOOLEANS), name),
                    name=name,
                    value=value,
                ))
            argument.deliver(boolean)

    def _parse_clump(self, chars):
        for position, char in enumerate(chars):
            argument = self._lookup_short(char)
            if not argument.takes_argument:
                argument.deliver(True)
                continue
            # an option ends the clump: the remainder is its value, or the next token is
            if value := chars[position + 1:]:
                argument.deliver(value)
            else:
                self._await(argument, "-" + char)
            return

    def _negate_clump(self, chars):
        for char in chars:
            self._negate_short(char)

    def _dangling(self):
        option, input = self._pending, self._pending_input
        self._pending = None
        if self._strict:
            self._fail(MissingOptionValueError(
                "option %r at %s position expects a value but none was given" % (input, ordinal(self._index)),
                title="missing option value",
                code=FaultCode.MISSING_OPTION_VALUE,
                hint="pass a value after it (for example: %s <value>)" % input,
                name=input,
            ))
        trigger(
            DanglingOptionWarning(
                "option %r at %s position expects a value; it was left unset" % (input, ordinal(self._index)),
                title="dangling option",
                code=FaultCode.DANGLING_OPTION,
                hint="pass a value after it (for example: %s <value>)" % input,
                name=input,
                token=self._token,
                index=self._index,
                option=option,
            ),
            **self._registry.presentation,
            shell=self._registry.shell,
        )

    def _fail(self, fault):
        """
        raise fault, stamped with the offending token, its argv index and the rest so far.
        """
        trigger(
            fault,
            token=self._token,
            index=self._index,
            rest=list(self._rest),
            **self._registry.presentation,
            shell=False,
        )


def parse(registry, argv, /, *, strict=False):
    """
    Parse argv against registry once and return the list of Rest entries.

    Shorthand for Parser(registry, strict=strict)(argv).
    """
    return Parser(registry, strict=strict)(argv)


__all__ = (
    "Rest",
    "Parser",
    "parse",
)
