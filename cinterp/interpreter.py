"""Execution of parsed commands against variables, flags, memory and a call stack."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, TextIO, Tuple

from cinterp.command import BranchCondition, Command, CommandType, Value
from cinterp.labels import LabelMap
from cinterp.memory import Memory, MemoryError_

NUM_VARIABLES = 32

_MASK = (1 << 64) - 1
_SIGN = 1 << 63
_ACCESS_SIZES = frozenset({1, 2, 4, 8})


def _to_signed(value: int) -> int:
    value &= _MASK
    return value - (1 << 64) if value & _SIGN else value


def _to_unsigned(value: int) -> int:
    return value & _MASK


@dataclass(frozen=True)
class StackFrame:
    """A saved call site and the variables at the time of the call."""

    return_index: int
    variables: Tuple[int, ...]


class Interpreter:
    """Runs a sequence of commands and keeps the machine state."""

    def __init__(
        self,
        labels: LabelMap,
        memory: Optional[Memory] = None,
        out: Optional[TextIO] = None,
    ) -> None:
        self.labels = labels
        self.memory = memory if memory is not None else Memory()
        self._out = out if out is not None else sys.stdout
        self.variables: List[int] = [0] * NUM_VARIABLES
        self.had_error = False
        self.is_greater = False
        self.is_equal = False
        self.is_less = False
        self.stack: List[StackFrame] = []
        self._commands: List[Command] = []
        self._handlers: Dict[CommandType, Callable[[Command, int], Optional[int]]] = {
            CommandType.MOV: self._mov,
            CommandType.ADD: self._add,
            CommandType.SUB: self._sub,
            CommandType.CMP: self._cmp,
            CommandType.CMP_U: self._cmp_u,
            CommandType.PRINT: self._print,
            CommandType.AND: self._and,
            CommandType.ORR: self._orr,
            CommandType.EOR: self._eor,
            CommandType.LSL: self._lsl,
            CommandType.LSR: self._lsr,
            CommandType.ASR: self._asr,
            CommandType.LOAD: self._load,
            CommandType.STORE: self._store,
            CommandType.PUT: self._put,
            CommandType.BRANCH: self._branch,
            CommandType.CALL: self._call,
            CommandType.RET: self._ret,
        }

    # -- execution -----------------------------------------------------

    def interpret(self, commands: Sequence[Command]) -> None:
        """Execute ``commands`` from the first until the end, a top-level ret, or an error."""
        self._commands = list(commands)
        pc: Optional[int] = 0
        try:
            while pc is not None and 0 <= pc < len(self._commands) and not self.had_error:
                command = self._commands[pc]
                handler = self._handlers.get(command.type)
                if handler is None:
                    self.had_error = True
                    break
                pc = handler(command, pc)
        finally:
            self.stack.clear()

    def _fetch(self, value: Value, immediate: bool) -> int:
        if immediate:
            return int(value)
        return self.variables[int(value)]

    def _set(self, command: Command, value: int) -> None:
        self.variables[int(command.destination)] = _to_signed(value)

    def _operands(self, command: Command, b_immediate: bool) -> Tuple[int, int]:
        return self._fetch(command.val_a, False), self._fetch(command.val_b, b_immediate)

    def _mov(self, command: Command, pc: int) -> int:
        self._set(command, self._fetch(command.val_a, True))
        return pc + 1

    def _add(self, command: Command, pc: int) -> int:
        a, b = self._operands(command, command.is_b_immediate)
        self._set(command, a + b)
        return pc + 1

    def _sub(self, command: Command, pc: int) -> int:
        a, b = self._operands(command, command.is_b_immediate)
        self._set(command, a - b)
        return pc + 1

    def _compare(self, a: int, b: int) -> None:
        self.is_greater = a > b
        self.is_less = a < b
        self.is_equal = a == b

    def _cmp(self, command: Command, pc: int) -> int:
        self._compare(*self._operands(command, command.is_b_immediate))
        return pc + 1

    def _cmp_u(self, command: Command, pc: int) -> int:
        a, b = self._operands(command, command.is_b_immediate)
        self._compare(_to_unsigned(a), _to_unsigned(b))
        return pc + 1

    def _and(self, command: Command, pc: int) -> int:
        a, b = self._operands(command, False)
        self._set(command, a & b)
        return pc + 1

    def _orr(self, command: Command, pc: int) -> int:
        a, b = self._operands(command, False)
        self._set(command, a | b)
        return pc + 1

    def _eor(self, command: Command, pc: int) -> int:
        a, b = self._operands(command, False)
        self._set(command, a ^ b)
        return pc + 1

    def _lsl(self, command: Command, pc: int) -> int:
        a, b = self._operands(command, True)
        self._set(command, _to_unsigned(a) << _to_unsigned(b))
        return pc + 1

    def _lsr(self, command: Command, pc: int) -> int:
        a, b = self._operands(command, True)
        self._set(command, _to_unsigned(a) >> _to_unsigned(b))
        return pc + 1

    def _asr(self, command: Command, pc: int) -> int:
        a, b = self._operands(command, True)
        self._set(command, a >> b)
        return pc + 1

    def _load(self, command: Command, pc: int) -> int:
        offset = self._fetch(command.val_b, command.is_b_immediate)
        size = self._fetch(command.val_a, True)
        value = 0
        try:
            value = int.from_bytes(self.memory.load(offset, size), "little")
        except MemoryError_:
            self.had_error = True
        self._set(command, value)
        return pc + 1

    def _store(self, command: Command, pc: int) -> int:
        offset = self._fetch(command.val_a, command.is_a_immediate)
        size = self._fetch(command.val_b, True)
        value = self.variables[int(command.destination)]
        if size not in _ACCESS_SIZES:
            self.had_error = True
            return pc + 1
        data = _to_unsigned(value).to_bytes(8, "little")[:size]
        try:
            self.memory.store(offset, data)
        except MemoryError_:
            self.had_error = True
        return pc + 1

    def _put(self, command: Command, pc: int) -> int:
        base = self._fetch(command.val_a, command.is_a_immediate)
        data = str(command.destination).encode("utf-8") + b"\0"
        try:
            for count, byte in enumerate(data):
                self.memory.store(base + count, bytes([byte]))
        except MemoryError_:
            self.had_error = True
        return pc + 1

    def _print(self, command: Command, pc: int) -> int:
        value = self._fetch(command.val_a, command.is_a_immediate)
        base = command.val_b if isinstance(command.val_b, str) else chr(command.val_b)
        if base == "d":
            self._out.write(f"{value}\n")
        elif base == "x":
            self._out.write(f"0x{_to_unsigned(value):x}\n")
        elif base == "b":
            self._out.write(f"0b{_to_unsigned(value):b}\n")
        elif base == "s":
            self._print_string(value)
        return pc + 1

    def _print_string(self, address: int) -> None:
        collected = bytearray()
        count = 0
        while True:
            try:
                byte = self.memory.load(address + count, 1)[0]
            except MemoryError_:
                self._out.write(collected.decode("utf-8", errors="replace"))
                return
            if byte == 0:
                break
            collected.append(byte)
            count += 1
        self._out.write(collected.decode("utf-8", errors="replace") + "\n")

    def _condition_holds(self, condition: BranchCondition) -> bool:
        if condition is BranchCondition.ALWAYS:
            return True
        if condition is BranchCondition.EQUAL:
            return self.is_equal
        if condition is BranchCondition.GREATER:
            return self.is_greater
        if condition is BranchCondition.GREATER_EQUAL:
            return self.is_greater or self.is_equal
        if condition is BranchCondition.LESS:
            return self.is_less
        if condition is BranchCondition.LESS_EQUAL:
            return self.is_less or self.is_equal
        if condition is BranchCondition.NOT_EQUAL:
            return not self.is_equal
        return False

    def _resolve(self, target: object) -> Optional[int]:
        """Turn a label target (index, command or None) into a command index."""
        if target is None:
            return None
        if isinstance(target, int):
            return target
        for index, command in enumerate(self._commands):
            if command is target:
                return index
        return None

    def _label_not_found(self, label: Value) -> None:
        self._out.write(f"Label not found: {label}\n")
        self.had_error = True

    def _branch(self, command: Command, pc: int) -> Optional[int]:
        if not self._condition_holds(command.branch_condition):
            return pc + 1
        label = str(command.destination)
        if label not in self.labels:
            self._label_not_found(label)
            return None
        return self._resolve(self.labels.get(label))

    def _call(self, command: Command, pc: int) -> Optional[int]:
        label = str(command.destination)
        target = self.labels.get(label) if label in self.labels else None
        index = self._resolve(target)
        if index is None:
            self._label_not_found(label)
            return None
        self.stack.append(StackFrame(pc, tuple(self.variables)))
        return index

    def _ret(self, command: Command, pc: int) -> Optional[int]:
        if not self.stack:
            return None
        frame = self.stack.pop()
        # x0 carries the return value; every other variable is restored.
        self.variables[1:] = frame.variables[1:]
        return frame.return_index + 1

    # -- reporting -----------------------------------------------------

    def state_report(self) -> str:
        """Render the error flag, comparison flags and all variables."""
        parts = [
            f"Error: {int(self.had_error)}\n",
            "Flags:\n",
            f"Is greater: {int(self.is_greater)}\n",
            f"Is equal: {int(self.is_equal)}\n",
            f"Is less: {int(self.is_less)}\n",
            "\n",
            "Variable values:\n",
        ]
        for index, value in enumerate(self.variables):
            parts.append(f"x{index}: {value}")
            if index < NUM_VARIABLES - 1:
                parts.append(", ")
            if (index + 1) % 8 == 0:
                parts.append("\n")
        parts.append("\n")
        return "".join(parts)