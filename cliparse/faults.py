"""
cliparse faults (parse errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every way a parse can
  fail. Codes are shared with the host application through normalize() so logs
  and docs stay searchable.
- ParseException: base type carrying a message + options that knows how to
  render itself (rich) and how to surface itself (raise or print-and-exit).
- UnrecognizedOptionError / MissingArgumentError / MissingOptionError /
  AlreadySelectedError: the four failure conditions of the parse engine.
- trigger(): central entry point to surface a fault (respecting shell/fancy/colorful).
- getdoc(): optional description lookup for a code from the host application.

Integration
- The parser builds a fault with a one-sentence message plus context
  (input, option, group, missing, hint) and calls trigger(fault, **flags).
- In non-shell mode the fault is raised; in shell mode it is rendered to
  stderr via rich and the process exits with status 1.
- Every fault aborts the parse: there are no partial results.
"""
import os.path
import sys
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
    canonical fault codes used by the parser (stable identifiers).

    grouping
    - options (1111x/1112x)
      • UNRECOGNIZED_OPTION, MISSING_ARGUMENT, MISSING_OPTION, ALREADY_SELECTED

    normalize() allows host remapping to custom labels while keeping the
    numeric values stable.
    """
    UNRECOGNIZED_OPTION = 11112
    MISSING_ARGUMENT    = 11117
    MISSING_OPTION      = 11125
    ALREADY_SELECTED    = 11126

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _progname():
    main = __import__("__main__")
    try:
        return getattr(main, "__prog__")
    except AttributeError:
        return os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "cliparse"


class ParseException(Exception):
    """
    base class of every parse fault.

    attributes
    - message: one-sentence, lowercased description (first positional argument).
    - options: read-only mapping with the fault context. keys used by the
      parser: title, code, hint, input, option, group, missing, plus the
      surfacing flags shell, fancy and colorful.
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def code(self):
        return self.options.get("code")

    def __str__(self):
        return str(self.message) if self.message else ""

    def __rich__(self):
        main = __import__("__main__")

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        } | getattr(main, "__styles__", {}))

        colorful = self.options.get("colorful", True)
        fancy = self.options.get("fancy", False)

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

        code = self.options.get("code")
        header = Text.assemble(
            "[ ",
            text(_progname(), styler("prog-name")),
            " — ",
            text(code.normalize() if code else "", styler("code")),
            " | ",
            text(self.options.get("title", "parse error").title(), styler("error-title")),
            " ]"
        )
        message = text(self.message, styler("error-message"))
        hint = Text.assemble(text(" → ", styler("hint-arrow")), text(self.options.get("hint", ""), styler("hint")))

        if fancy:
            return Panel(Group(message, hint), title=header, title_align="left")

        return Group(header, message, hint)

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class UnrecognizedOptionError(ParseException): ...
class MissingArgumentError(ParseException): ...
class MissingOptionError(ParseException): ...
class AlreadySelectedError(ParseException): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see ParseException).
    - options are merged into the fault via __replace__(**options) before triggering.
    - in shell mode, rendering happens via the rich console; otherwise, the fault is raised.
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

    the host application may expose a __docs__ mapping in __main__ where keys
    are FaultCode instances and values are short documentation strings.
    returns None when nothing is registered.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "FaultCode",
    "ParseException",
    "UnrecognizedOptionError",
    "MissingArgumentError",
    "MissingOptionError",
    "AlreadySelectedError",
    "trigger",
    "getdoc",
)
