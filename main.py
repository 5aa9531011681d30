import sys

from rich.pretty import pprint

from cliparse import *

__prog__ = "demo"

options = Options(
    Option("-v", "--verbose"),
    Option("-o", "--output", nargs=1, required=True),
    Option("-D", nargs=2, separator="="),
    OptionGroup(Option("-q", "--quiet"), Option("-l", "--loud")),
)


if __name__ == '__main__':
    pprint(BasicParser(shell=True, fancy=True).parse(options, sys.argv[1:]))
