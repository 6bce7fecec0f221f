"""Command-line options for running the interpreter."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence


class ArgumentError(ValueError):
    """Raised when the command line cannot be understood."""


@dataclass
class CmdArgsConfig:
    """Options selected on the command line."""

    print_lex: bool = False
    print_parse: bool = False
    repl: bool = False
    in_filename: Optional[str] = None
    out_filename: Optional[str] = None


def parse_cmd_args(args: Sequence[str]) -> CmdArgsConfig:
    """Build a configuration from arguments (without the program name).

    Options are matched by their two-character prefix; unknown arguments
    are ignored. With no arguments at all the REPL is selected.
    """
    config = CmdArgsConfig(repl=not args)
    items = iter(args)
    for arg in items:
        if arg.startswith("-l"):
            config.print_lex = True
        elif arg.startswith("-p"):
            config.print_parse = True
        elif arg.startswith("-i") or arg.startswith("-o"):
            filename = next(items, None)
            if filename is None:
                raise ArgumentError("Filename not specified")
            if arg.startswith("-i"):
                config.in_filename = filename
            else:
                config.out_filename = filename
    return config