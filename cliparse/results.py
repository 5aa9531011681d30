"""
cliparse parse results.

CommandLine is what Parser.parse() hands back: the options that appeared (in
order of first appearance, each carrying its accumulated values) and the
positional arguments left over. The parser fills it in during one parse; the
caller only reads it.

Lookups accept any of an option's names:
    >>> line.has_option("-n") == line.has_option("--number")
    True
"""
from .options import OptionType


class CommandLine(metaclass=OptionType):
    __introspectable__ = (
        "options",
        "args",
    )

    def __init__(self):
        self._options = []
        self._args = []

    def add_option(self, option, /):
        # a repeated option is listed once; its values already accumulate on the object
        if option not in self._options:
            self._options.append(option)

    def add_arg(self, arg, /):
        self._args.append(arg)

    def get_option(self, name, /):
        """Return the recognized option known under 'name', or None."""
        for option in self._options:
            if name in option.names:
                return option
        return None

    def has_option(self, name, /):
        return self.get_option(name) is not None

    def get_option_value(self, name, default=None, /):
        """First value of the option, or 'default' when absent or value-less."""
        option = self.get_option(name)
        if option is None or not option.values:
            return default
        return option.value

    def get_option_values(self, name, /):
        """All values of the option as a tuple, or None when absent or value-less."""
        option = self.get_option(name)
        if option is None or not option.values:
            return None
        return option.values

    def __contains__(self, name, /):
        return self.has_option(name)

    def __iter__(self):
        return iter(tuple(self._options))


__all__ = (
    "CommandLine",
)
