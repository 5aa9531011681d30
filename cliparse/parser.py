"""
cliparse parse engine: turn a flat token list into a CommandLine.

What this module provides
- Cursor: index-based, rewindable iteration over the flattened tokens.
- Parser: abstract engine. Subclasses supply flatten(); parse() runs the single
  classification pass, value consumption and required-option bookkeeping.
- BasicParser: a Parser whose flatten() is the identity (tokens are expected to
  be split already: no "--name=value" expansion, no short-flag clustering).
- parse(...): one-shot helper using a module-level BasicParser.

Classification (first match wins, per token)
1. "--"        → every remaining token is positional (the marker itself is dropped).
2. "-"         → stop_at_non_option: every remaining token is positional;
                 otherwise "-" is positional itself.
3. "-..."      → stop_at_non_option and unknown: positional, then every
                 remaining token is positional; otherwise process the option.
4. anything    → positional; stop_at_non_option: every remaining token too.

Value consumption is greedy until a boundary: the end of the tokens, a token
naming a known option, or a value the option refuses. The boundary token is
given back to the main loop through Cursor.previous().

Faults (see cliparse.faults) abort the parse at the first violation:
UnrecognizedOptionError, MissingArgumentError, AlreadySelectedError, and
MissingOptionError once the tokens are exhausted.

Quick start
    from cliparse import Option, Options, parse

    options = Options(Option("-n", "--number", nargs=1, required=True), Option("-v"))
    line = parse(options, ["-v", "-n", "5", "file.txt"])
    line.get_option_value("--number")   # "5"
    line.args                           # ("file.txt",)
"""
from abc import ABC, abstractmethod

from .faults import *
from .options import Options
from .results import CommandLine
from .utils import pluralize

TERMINATOR = "--"
DASH = "-"


class Cursor:
    """
    Rewindable cursor over a token list.

    next() advances and returns the token under the cursor; previous() steps
    back by one and returns the token that next() will yield again.
    """

    def __init__(self, tokens):
        self._tokens = list(tokens)
        self._index = 0

    @property
    def index(self):
        return self._index

    def has_next(self):
        return self._index < len(self._tokens)

    def next(self):
        if not self.has_next():
            raise StopIteration
        self._index += 1
        return self._tokens[self._index - 1]

    def previous(self):
        if self._index == 0:
            raise IndexError("cursor is already at the first token")
        self._index -= 1
        return self._tokens[self._index]

    def rest(self):
        """Consume and return every remaining token."""
        tokens, self._index = self._tokens[self._index:], len(self._tokens)
        return tokens

    def __len__(self):
        return len(self._tokens) - self._index


class Parser(ABC):
    """
    Parse engine over a registry of declared options.

    Flags (forwarded to every fault)
    - shell: print faults with rich and exit(1) instead of raising them.
    - fancy: render faults inside a panel.
    - colorful: colour the rendered faults.

    A parser keeps no per-parse state on itself; the working registry, the
    required-options set, the cursor and the result all live in a _Session
    created by parse().
    """

    def __init__(self, *, shell=False, fancy=False, colorful=True):
        self.shell = bool(shell)
        self.fancy = bool(fancy)
        self.colorful = bool(colorful)

    @abstractmethod
    def flatten(self, options, arguments, stop_at_non_option):
        """
        Reduce raw arguments to a flat list of independently classifiable tokens.
        """

    def trigger(self, fault, /, **options):
        trigger(fault, **options, shell=self.shell, fancy=self.fancy, colorful=self.colorful)

    def parse(self, options, arguments, stop_at_non_option=False):
        """
        Parse 'arguments' against the options declared in 'options'.

        The registry is forked first: values and group selections end up on the
        fork (reachable through the returned CommandLine), never on 'options'.
        """
        if not isinstance(options, Options):
            raise TypeError("parse() first argument must be an options registry")
        if isinstance(arguments, str):
            raise TypeError("parse() second argument must be a sequence of strings, not a string")

        session = _Session(options.fork())
        cursor = Cursor(self.flatten(session.options, list(arguments), stop_at_non_option))
        rest = False

        while cursor.has_next():
            token = cursor.next()

            if token == TERMINATOR:
                rest = True
            elif token == DASH:
                if stop_at_non_option:
                    rest = True
                else:
                    session.result.add_arg(token)
            elif token.startswith(DASH):
                if stop_at_non_option and not session.options.has_option(token):
                    rest = True
                    session.result.add_arg(token)
                else:
                    self.process_option(session, token, cursor)
            else:
                session.result.add_arg(token)
                if stop_at_non_option:
                    rest = True

            if rest:
                # later terminators are plain data
                for token in cursor.rest():
                    session.result.add_arg(token)

        self.check_required_options(session)
        return session.result

    def check_required_options(self, session):
        """Fail with MissingOptionError while the required working set is not empty."""
        if not session.required:
            return
        missing = tuple(session.required)
        names = ", ".join(map(str, missing))
        self.trigger(MissingOptionError(
            "missing required %s: %s" % (pluralize("option", len(missing)), names),
            title="missing required option",
            code=FaultCode.MISSING_OPTION,
            input=names,
            missing=missing,
            hint="provide %s" % names,
            docs=getdoc(FaultCode.MISSING_OPTION),
        ))

    def process_args(self, session, option, cursor):
        """
        Greedily attach the following tokens to 'option'.

        Stops at the end of the tokens, at a known option name, or at a token
        the option refuses; the stopping token is stepped back over so the main
        loop classifies it.
        """
        while cursor.has_next():
            token = cursor.next()
            if session.options.has_option(token) or not option.add_value(token):
                cursor.previous()
                break

        if not option.values and not option.accepts_empty:
            self.trigger(MissingArgumentError(
                "no argument for option %r" % option.key,
                title="missing option value",
                code=FaultCode.MISSING_ARGUMENT,
                input=option.key,
                option=option,
                hint="provide a value after %s" % option.key,
                docs=getdoc(FaultCode.MISSING_ARGUMENT),
            ))

    def process_option(self, session, token, cursor):
        """
        Handle one option token: bookkeeping, group selection, values, result.
        """
        if not session.options.has_option(token):
            return self.trigger(UnrecognizedOptionError(
                "unrecognized option %r" % token,
                title="unrecognized option",
                code=FaultCode.UNRECOGNIZED_OPTION,
                input=token,
                hint="use '--' before arguments that only look like options",
                docs=getdoc(FaultCode.UNRECOGNIZED_OPTION),
            ))
        option = session.options.get_option(token)

        if option.required:
            session.required.pop(option.key, None)

        if (group := session.options.get_option_group(option)) is not None:
            if group.required:
                session.required.pop(group, None)
            try:
                group.select(option)
            except AlreadySelectedError as fault:
                self.trigger(fault)

        if option.takes_values:
            self.process_args(session, option, cursor)

        session.result.add_option(option)


class _Session:
    """Per-parse working state: forked registry, required working set, result."""

    __slots__ = ("options", "required", "result")

    def __init__(self, options):
        self.options = options
        self.required = options.get_required_options()
        self.result = CommandLine()


class BasicParser(Parser):
    """Parser whose tokens are the raw arguments, unchanged."""

    def flatten(self, options, arguments, stop_at_non_option):
        return list(arguments)


_parser = BasicParser()


def parse(options, arguments, stop_at_non_option=False):
    """
    Parse with a default BasicParser (faults are raised, never printed).
    """
    return _parser.parse(options, arguments, stop_at_non_option)


__all__ = (
    "Cursor",
    "Parser",
    "BasicParser",
    "parse",
)
