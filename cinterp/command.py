"""Parsed commands and their human-readable rendering."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable, Union

Value = Union[int, str]


class CommandType(IntEnum):
    """Kinds of commands the interpreter can execute."""

    ADD = 0
    AND = 1
    ASR = 2
    BRANCH = 3
    CALL = 4
    CMP = 5
    CMP_U = 6
    ERR = 7
    EOR = 8
    LOAD = 9
    LSL = 10
    LSR = 11
    MOV = 12
    ORR = 13
    PRINT = 14
    PUT = 15
    RET = 16
    STORE = 17
    SUB = 18


class BranchCondition(IntEnum):
    """Conditions under which a branch is taken."""

    NONE = -1
    ALWAYS = 0
    EQUAL = 1
    NOT_EQUAL = 2
    GREATER = 3
    LESS = 4
    GREATER_EQUAL = 5
    LESS_EQUAL = 6


@dataclass
class Command:
    """A single parsed command with its operands.

    ``destination`` is a variable index for most commands, and a label or
    string for branches, calls and puts. Operands are variable indices,
    immediate numbers, strings, or a single base character for ``print``.
    """

    type: CommandType
    destination: Value = 0
    val_a: Value = 0
    val_b: Value = 0
    is_a_immediate: bool = False
    is_b_immediate: bool = False
    is_a_string: bool = False
    is_b_string: bool = False
    branch_condition: BranchCondition = BranchCondition.NONE


def _as_number(value: Value) -> Value:
    if isinstance(value, str) and len(value) == 1:
        return ord(value)
    return value


def format_operand(value: Value, is_immediate: bool, is_string: bool) -> str:
    """Render one operand with its immediate and string flags."""
    shown = value if is_string else _as_number(value)
    return (
        f"Is immediate: {int(is_immediate)}\n"
        f"Is a string: {int(is_string)}\n"
        f"Value: {shown}\n"
    )


def format_command(command: Command) -> str:
    """Render a command's type, destination, operands and branch condition."""
    return (
        f"Command type: {int(command.type)}\n"
        f"Destination: {command.destination}\n"
        "Operands:\n"
        "A:\n"
        f"{format_operand(command.val_a, command.is_a_immediate, command.is_a_string)}"
        "\n"
        "B:\n"
        f"{format_operand(command.val_b, command.is_b_immediate, command.is_b_string)}"
        "\n"
        f"Branch condition: {int(command.branch_condition)}\n"
        "\n\n"
    )


def format_commands(commands: Iterable[Command]) -> str:
    """Render a sequence of commands separated by blank lines."""
    blocks = [format_command(command) for command in commands]
    if not blocks:
        return "No commands found.\n"
    return "\n".join(blocks)