# cinterp

`cinterp` holds the pieces of an interpreter for a small register-based,
assembly-like language: a lexer, a byte-addressable memory, a command model,
a label map, the interpreter that runs commands, and a command-line option
reader.

A running program works on 32 signed 64-bit variables (`x0` to `x31`), a
1024-byte memory, three comparison flags (greater, equal, less) and a call
stack.

## What the package does not do

There is no parser: nothing turns source text or a token stream into
`Command` objects. Programs are run by building the command list (and its
label map) in Python. There is also no `cinterp` command and no interactive
prompt; `parse_cmd_args` only reads options into a `CmdArgsConfig`, and
nothing in the package acts on them.

## Lexing

Source text is one instruction per line. A `;` also ends an instruction, `//`
starts a comment running to the end of the line, and commas, spaces, tabs and
carriage returns are skipped. Numbers are decimal, binary with `0b`, or
hexadecimal with `0x`; strings are written in double quotes.

`cinterp.lexer.Lexer` turns text into `cinterp.tokens.Token` values (type,
lexeme, 1-based line and column). `next_token()` returns tokens one at a time
and keeps returning an EOF token at the end; iterating a `Lexer` yields tokens
up to and including the first EOF or error token. Error tokens carry the
message as their lexeme.

```python
from cinterp.lexer import Lexer, format_lexed_tokens

for token in Lexer("mov x1 0b101\n"):
    print(token.type.name, token.lexeme, token.line, token.column)

print(format_lexed_tokens("add x0 x1 5"))
```

Keywords: `add`, `and`, `asr`, `b`, `b.eq`, `b.ne`, `b.gt`, `b.ge`, `b.lt`,
`b.le`, `call`, `cmp`, `cmp_u`, `eor`, `load`, `lsl`, `lsr`, `mov`, `orr`,
`print`, `put`, `ret`, `store`, `sub`. Any other word of letters, digits, `_`
and `.` is an identifier. `cinterp.tokens.format_token` renders one token in
a readable block.

## Memory

`cinterp.memory.Memory(capacity=1024)` is zero-filled. `load(offset, size)`
returns bytes and `store(offset, data)` writes them; sizes other than 1, 2, 4
or 8 and out-of-range accesses raise `MemoryError_`. `dump()` returns a hex
listing of the 16-byte rows spanning the written region, or `Unmodified`.

## Commands and labels

`cinterp.command.Command` is a dataclass with a `CommandType`, a
`destination`, operands `val_a` and `val_b`, their `is_*_immediate` and
`is_*_string` flags, and a `BranchCondition`. Non-immediate operands are
variable indices. Operand meaning by command:

| Command | destination | val_a | val_b |
|---------|-------------|-------|-------|
| `MOV` | variable | number | |
| `ADD`, `SUB`, `CMP`, `CMP_U` | variable (not for compares) | variable | variable or number |
| `AND`, `ORR`, `EOR` | variable | variable | variable |
| `LSL`, `LSR`, `ASR` | variable | variable | number |
| `LOAD` | variable | byte count | address |
| `STORE` | source variable | address | byte count |
| `PUT` | string | address | |
| `PRINT` | | value | base `d`, `x`, `b` or `s` |
| `BRANCH`, `CALL` | label | | |

`format_operand`, `format_command` and `format_commands` render commands;
an empty list gives `No commands found.`.

`cinterp.labels.LabelMap` maps label names to targets: a command index or a
`Command` from the list. `put` raises `DuplicateLabelError` for a name
already present, `get` raises `KeyError` for an unknown one, and `in` and
`len()` work as expected.

## Running

```python
import io
from cinterp.command import BranchCondition, Command, CommandType
from cinterp.interpreter import Interpreter
from cinterp.labels import LabelMap

commands = [
    Command(CommandType.MOV, destination=1, val_a=10),
    Command(CommandType.ADD, destination=2, val_a=1, val_b=5, is_b_immediate=True),
    Command(CommandType.PRINT, val_a=2, val_b="d"),
    Command(CommandType.BRANCH, destination="end", branch_condition=BranchCondition.ALWAYS),
    Command(CommandType.PRINT, val_a=1, val_b="d"),
    Command(CommandType.RET),
]
labels = LabelMap()
labels.put("end", 5)

out = io.StringIO()
interp = Interpreter(labels, out=out)
interp.interpret(commands)
print(out.getvalue())        # "15\n"
print(interp.state_report())
```

`Interpreter(labels, memory=None, out=None)` creates a fresh `Memory` and
writes to standard output unless given others. `interpret` runs until the
list ends, a `ret` with an empty call stack, or an error. Arithmetic wraps to
signed 64 bits; `cmp_u`, `lsl` and `lsr` treat values as unsigned. `print`
writes decimal, `0x` hex, `0b` binary, or the NUL-terminated string at an
address. `call` pushes a `StackFrame`; `ret` returns after the call and
restores every variable except `x0`, which carries the result. A bad memory
access, an unknown command or a missing label (reported as
`Label not found: NAME`) sets `had_error` and stops. `state_report()` returns
the error flag, comparison flags and all variable values.

## Command-line options

`cinterp.config.parse_cmd_args(args)` reads `-l` (print tokens), `-p` (print
parsed commands), `-i FILE` (input) and `-o FILE` (output) into a
`CmdArgsConfig`. Options match on their first two characters and unknown
arguments are ignored; with no arguments `repl` is set. A missing file name
raises `ArgumentError`.