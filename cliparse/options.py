r"""
cliparse option declarations: Option, OptionGroup and the Options registry.

Overview
- Option: a named switch (-v/--verbose) or value-bearing option (-n/--number),
  with an arity ('nargs'), a required flag and the values it accumulated
  during the last parse.
- OptionGroup: a mutual-exclusion set of options; remembers which member was
  selected and refuses a second, different one.
- Options: the registry the parser consults. Maps every dash-prefixed name to
  its Option, every option to its group, and hands out the working set of
  required options/groups for one parse.

Arity ('nargs')
- Unset  → none: a presence-only switch, never holds a value.
- int n  → up to n values, at least one (1 is the common "exactly one").
- "?"    → optional single value.
- "*"    → any number of values, zero included.
- "+"    → any number of values, at least one.

Names
- Each name must match r"--?[^\W\d_](-?[^\W_]+)*": "-x", "-long", "--long",
  "--long-name" (unicode letters allowed, no underscores, no leading digit).
- The first name is the option's key; it is what the parser reports in
  faults and what the required-options working set is keyed by.

Lifecycle
- Declarations are built once and registered on an Options instance.
- Options.fork() deep-copies the registry and clears every value/selection;
  the parser only ever mutates such a fork, so a declared registry can be
  parsed against many times (and from many threads) without leaking state.

Quick example:
    >>> options = Options(
    ...     Option("-v", "--verbose"),
    ...     Option("-n", "--number", nargs=1, required=True),
    ...     OptionGroup(Option("-a"), Option("-b"), required=True),
    ... )
    >>> options.has_option("--number")
    True
"""
import copy
import functools
import operator
import re

from .faults import AlreadySelectedError, FaultCode, getdoc
from .utils import *


class OptionType(type):
    """
    Metaclass giving declarations stable, readable representations.

    Responsibilities
    - Derive __typename__ from the class name (camel-case split with hyphens);
      it prefixes every construction-time TypeError/ValueError.
    - Expose every name listed in __introspectable__ as a read-only property
      (see mirror()), backed by the private "_{name}" attribute.
    - Provide __repr__ and __rich_repr__ over __displayable__ (or
      __introspectable__ when no narrower set is declared).
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__typename__}({', '.join(map(functools.partial(operator.mod, '%s=%r'), self.__rich_repr__()))})"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_names(cls, metadata, /):
    """
    Internal: validate option names and keep their declaration order.

    Raises
    - TypeError: when no name is given, more than two are given, or a name is
      not a string.
    - ValueError: when a name is empty, fails the shell-style pattern, or is
      repeated.
    """
    names = []
    if not metadata["names"]:
        raise TypeError(f"{cls.__typename__} must specify at least one name")
    if len(metadata["names"]) > 2:
        raise TypeError(f"{cls.__typename__} takes a short and an optional long name, not more")

    for name in metadata["names"]:
        if not isinstance(name, str):
            raise TypeError(f"{cls.__typename__} names must be strings")
        elif not (name := name.strip()):
            raise ValueError(f"{cls.__typename__} names cannot be empty-strings")
        elif not re.fullmatch(r"--?[^\W\d_](-?[^\W_]+)*", name):
            raise ValueError(f"{cls.__typename__} names must be valid shell-style option names (unicodes are allowed)")
        elif name in names:
            raise ValueError(f"{cls.__typename__} names cannot contain duplicates")
        names.append(name)

    metadata["names"] = tuple(names)


def _sanitize_arity(cls, metadata, /):
    """
    Internal: validate 'nargs', 'separator' and 'descr'.

    - nargs: Unset | "?" | "*" | "+" | int (>= 1). bool is rejected even
      though it is an int subclass.
    - separator: Unset | a single character; only meaningful with values.
    - descr: Unset | non-empty str (trimmed), Unset becomes None.
    """
    if isinstance(nargs := metadata["nargs"], bool) or not isinstance(nargs, str | int | Unset):
        raise TypeError(f"{cls.__typename__} 'nargs' must be a string or an integer")
    if isinstance(nargs, str) and nargs not in ("?", "+", "*"):
        raise ValueError(f"{cls.__typename__} 'nargs' must be one of '?', '+', or '*'")
    if isinstance(nargs, int) and nargs < 1:
        raise ValueError(f"{cls.__typename__} 'nargs' must be a positive integer")

    if not isinstance(separator := metadata["separator"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'separator' must be a string")
    if isinstance(separator, str) and len(separator) != 1:
        raise ValueError(f"{cls.__typename__} 'separator' must be a single character")
    if separator and nargs is Unset:
        raise TypeError(f"{cls.__typename__} without values cannot have a 'separator'")

    if not isinstance(descr := metadata["descr"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")
    metadata["descr"] = coalesce(descr)


class Option(metaclass=OptionType):
    """
    Named option declaration plus the values it accumulated in a parse.

    Properties (read-only)
    - names: tuple of one or two names, key first.
    - nargs: arity (see module docs), Unset for presence-only switches.
    - required: whether a parse fails when the option is absent.
    - separator: Unset, or the character splitting one token into many values
      (e.g. "-D" with separator "=" turns "key=value" into two values).
    - descr: short description or None.
    - values: tuple of accumulated values, in the order they were accepted.
    """

    __introspectable__ = (
        "names",
        "nargs",
        "required",
        "separator",
        "descr",
        "values",
    )

    __displayable__ = (
        "names",
        "nargs",
        "required",
        "values",
    )

    def __init__(self, *names, nargs=Unset, required=False, separator=Unset, descr=Unset):
        metadata = {
            "names": names,
            "nargs": nargs,
            "required": bool(required),
            "separator": separator,
            "descr": descr,
        }
        _sanitize_names(type(self), metadata)
        _sanitize_arity(type(self), metadata)

        for name, object in metadata.items():
            setattr(self, "_" + name, object)
        self._values = []

    @property
    def key(self):
        """The first declared name; identifies the option in faults and bookkeeping."""
        return self._names[0]

    @property
    def value(self):
        """The first accumulated value, or None."""
        return self._values[0] if self._values else None

    @property
    def takes_values(self):
        return self._nargs is not Unset

    @property
    def accepts_empty(self):
        """True when finishing a parse with no value is fine ("?" and "*")."""
        return self._nargs in ("?", "*")

    @property
    def capacity(self):
        """Maximum number of values, None when unbounded."""
        match self._nargs:
            case UnsetType():
                return 0
            case "?":
                return 1
            case "*" | "+":
                return None
            case int(count):
                return count

    def add_value(self, token, /):
        """
        Try to attach the value(s) carried by one token.

        With a separator the token is split first. Either every piece fits in
        the remaining capacity and all of them are appended, or nothing is
        attached. Returns whether the token was accepted; a presence-only
        option always refuses.
        """
        if not isinstance(token, str):
            raise TypeError(f"{type(self).__typename__} values must be strings")
        pieces = token.split(self._separator) if self._separator else [token]
        capacity = self.capacity
        if capacity is not None and len(self._values) + len(pieces) > capacity:
            return False
        self._values.extend(pieces)
        return True

    def reset(self):
        self._values.clear()

    def __str__(self):
        return " ".join(self._names)


class OptionGroup(metaclass=OptionType):
    """
    Mutually exclusive set of options.

    At most one member may be selected per parse. Selecting the member that is
    already selected is harmless; selecting a different one raises
    AlreadySelectedError and leaves the first selection in place.
    """

    __introspectable__ = (
        "options",
        "required",
        "selected",
    )

    def __init__(self, *options, required=False):
        if not options:
            raise TypeError(f"{type(self).__typename__} must contain at least one option")
        members = []
        for option in options:
            if not isinstance(option, Option):
                raise TypeError(f"{type(self).__typename__} members must be options")
            if any(option.key == member.key for member in members):
                raise ValueError(f"{type(self).__typename__} members cannot contain duplicates")
            members.append(option)

        self._options = members
        self._required = bool(required)
        self._selected = None

    @property
    def names(self):
        return tuple(option.key for option in self._options)

    def select(self, option, /):
        """
        Mark a member as the group's choice for the current parse.

        Raises
        - ValueError: the option is not a member of this group.
        - AlreadySelectedError: another member was selected before.
        """
        if option.key not in self.names:
            raise ValueError(f"option {option.key!r} is not a member of {self}")
        if self._selected is None or self._selected == option.key:
            self._selected = option.key
            return
        raise AlreadySelectedError(
            "option %r cannot be used together with %r" % (option.key, self._selected),
            title="conflicting options",
            code=FaultCode.ALREADY_SELECTED,
            input=option.key,
            option=option,
            group=self,
            hint="keep only one of %s" % ", ".join(map(repr, self.names)),
            docs=getdoc(FaultCode.ALREADY_SELECTED),
        )

    def reset(self):
        self._selected = None

    def __str__(self):
        return "[%s]" % ", ".join(self.names)


class Options(metaclass=OptionType):
    """
    Registry of declared options and groups.

    Lookup tables
    - every name (short and long) → Option
    - option key → OptionGroup (only for grouped options)

    The registry is built once; parsers work on fork() copies of it.
    """

    __displayable__ = (
        "options",
        "groups",
    )

    def __init__(self, *declarations):
        self._options = {}
        self._names = {}
        self._memberships = {}
        self._groups = []
        for declaration in declarations:
            if isinstance(declaration, OptionGroup):
                self.add_group(declaration)
            elif isinstance(declaration, Option):
                self.add_option(declaration)
            else:
                raise TypeError(f"{type(self).__typename__} accepts only options and option groups")

    @property
    def options(self):
        return tuple(self._options.values())

    @property
    def groups(self):
        return tuple(self._groups)

    def add_option(self, option, /):
        """Register an option under all of its names; returns the registry."""
        if not isinstance(option, Option):
            raise TypeError("add_option() argument must be an option")
        for name in option.names:
            if name in self._names:
                raise ValueError(f"option name {name!r} is already in use")
        self._options[option.key] = option
        self._names.update(dict.fromkeys(option.names, option))
        return self

    def add_group(self, group, /):
        """Register a group and every member not registered yet; returns the registry."""
        if not isinstance(group, OptionGroup):
            raise TypeError("add_group() argument must be an option group")
        for option in group.options:
            if option.key in self._memberships:
                raise ValueError(f"option {option.key!r} already belongs to {self._memberships[option.key]}")
            if self._names.get(option.key) is not option:
                self.add_option(option)
        self._memberships.update(dict.fromkeys(group.names, group))
        self._groups.append(group)
        return self

    def has_option(self, token, /):
        return token in self._names

    def get_option(self, token, /):
        return self._names[token]

    def get_option_group(self, option, /):
        return self._memberships.get(option.key)

    def get_required_options(self):
        """
        Fresh working set of everything a parse must satisfy.

        Ordered dict used as a mutable set: required option keys map to their
        option, required groups map to themselves.
        """
        required = {option.key: option for option in self._options.values() if option.required}
        required.update({group: group for group in self._groups if group.required})
        return required

    def fork(self):
        """Deep copy of the registry with every value and selection cleared."""
        clone = copy.deepcopy(self)
        for option in clone._options.values():
            option.reset()
        for group in clone._groups:
            group.reset()
        return clone

    def __contains__(self, token, /):
        return self.has_option(token)

    def __iter__(self):
        return iter(self._options.values())

    def __len__(self):
        return len(self._options)


__all__ = (
    "Option",
    "OptionGroup",
    "Options",
)
