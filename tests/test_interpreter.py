import io

import pytest

from cinterp.command import BranchCondition, Command, CommandType
from cinterp.interpreter import Interpreter, StackFrame
from cinterp.labels import LabelMap
from cinterp.memory import Memory


def make_interpreter(labels=None):
    out = io.StringIO()
    intr = Interpreter(labels if labels is not None else LabelMap(), Memory(), out)
    return intr, out


def mov(dest, value):
    return Command(CommandType.MOV, destination=dest, val_a=value, is_a_immediate=True)


def binop(kind, dest, a, b, b_imm=False):
    return Command(kind, destination=dest, val_a=a, val_b=b, is_b_immediate=b_imm)


def cmp(a, b, b_imm=False, unsigned=False):
    kind = CommandType.CMP_U if unsigned else CommandType.CMP
    return Command(kind, val_a=a, val_b=b, is_b_immediate=b_imm)


def printv(var, base):
    return Command(CommandType.PRINT, val_a=var, val_b=base)


def branch(label, cond):
    return Command(CommandType.BRANCH, destination=label, branch_condition=cond)


def test_mov_sets_variable():
    intr, _ = make_interpreter()
    intr.interpret([mov(3, 42)])
    assert intr.variables[3] == 42
    assert not intr.had_error


def test_add_then_sub_round_trip():
    intr, _ = make_interpreter()
    intr.interpret([
        mov(1, 1234),
        binop(CommandType.ADD, 2, 1, 999, b_imm=True),
        binop(CommandType.SUB, 3, 2, 999, b_imm=True),
    ])
    assert intr.variables[3] == intr.variables[1] == 1234


def test_add_wraps_to_signed_64_bits():
    intr, _ = make_interpreter()
    intr.interpret([mov(1, (1 << 63) - 1), binop(CommandType.ADD, 2, 1, 1, b_imm=True)])
    assert intr.variables[2] == -(1 << 63)


def test_signed_compare_sets_exactly_one_flag():
    intr, _ = make_interpreter()
    intr.interpret([mov(1, -1), cmp(1, 1, b_imm=True)])
    assert intr.is_less
    assert not intr.is_greater and not intr.is_equal


def test_unsigned_compare_treats_negative_as_large():
    intr, _ = make_interpreter()
    intr.interpret([mov(1, -1), cmp(1, 1, b_imm=True, unsigned=True)])
    assert intr.is_greater
    assert not intr.is_less and not intr.is_equal


def test_bitwise_ops_invariants():
    intr, _ = make_interpreter()
    intr.interpret([
        mov(1, 0b1100),
        mov(2, 0b1010),
        binop(CommandType.EOR, 3, 1, 1),
        binop(CommandType.AND, 4, 1, 1),
        binop(CommandType.ORR, 5, 1, 2),
        binop(CommandType.AND, 6, 5, 1),
    ])
    assert intr.variables[3] == 0
    assert intr.variables[4] == 0b1100
    assert intr.variables[6] == 0b1100


def test_shift_left_then_right_round_trip():
    intr, _ = make_interpreter()
    intr.interpret([
        mov(1, 5),
        binop(CommandType.LSL, 2, 1, 4, b_imm=True),
        binop(CommandType.LSR, 3, 2, 4, b_imm=True),
    ])
    assert intr.variables[3] == 5


def test_arithmetic_shift_keeps_sign():
    intr, _ = make_interpreter()
    intr.interpret([
        mov(1, -1),
        binop(CommandType.ASR, 2, 1, 7, b_imm=True),
        binop(CommandType.LSR, 3, 1, 63, b_imm=True),
    ])
    assert intr.variables[2] == -1
    assert intr.variables[3] == 1


@pytest.mark.parametrize(
    "value, base, expected",
    [
        (42, "d", "42\n"),
        (-1, "x", "0xffffffffffffffff\n"),
        (0, "b", "0b0\n"),
        (5, "b", "0b101\n"),
    ],
)
def test_print_bases(value, base, expected):
    intr, out = make_interpreter()
    intr.interpret([mov(1, value), printv(1, base)])
    assert out.getvalue() == expected


def test_put_then_print_string():
    intr, out = make_interpreter()
    intr.interpret([
        Command(CommandType.PUT, destination="hello", val_a=100, is_a_immediate=True),
        Command(CommandType.PRINT, val_a=100, is_a_immediate=True, val_b="s"),
    ])
    assert out.getvalue() == "hello\n"
    assert intr.memory.load(105, 1) == b"\0"


def test_store_then_load_round_trip():
    intr, _ = make_interpreter()
    intr.interpret([
        mov(1, -123456789),
        Command(CommandType.STORE, destination=1, val_a=200, is_a_immediate=True, val_b=8),
        Command(CommandType.LOAD, destination=2, val_a=8, val_b=200, is_b_immediate=True),
    ])
    assert intr.variables[2] == -123456789
    assert not intr.had_error


def test_load_with_invalid_size_is_error():
    intr, _ = make_interpreter()
    intr.interpret([
        mov(2, 7),
        Command(CommandType.LOAD, destination=2, val_a=3, val_b=0, is_b_immediate=True),
        mov(4, 9),
    ])
    assert intr.had_error
    assert intr.variables[2] == 0
    assert intr.variables[4] == 0


def test_store_out_of_range_is_error():
    intr, _ = make_interpreter()
    intr.interpret([
        Command(CommandType.STORE, destination=1, val_a=1020, is_a_immediate=True, val_b=8),
    ])
    assert intr.had_error


def test_branch_loop_counts_up():
    labels = LabelMap()
    labels.put("loop", 1)
    intr, _ = make_interpreter(labels)
    intr.interpret([
        mov(1, 0),
        binop(CommandType.ADD, 1, 1, 1, b_imm=True),
        cmp(1, 3, b_imm=True),
        branch("loop", BranchCondition.LESS),
    ])
    assert intr.variables[1] == 3
    assert intr.is_equal


def test_branch_to_command_object():
    program = [mov(1, 1), branch("skip", BranchCondition.ALWAYS), mov(1, 2), mov(2, 5)]
    labels = LabelMap()
    labels.put("skip", program[3])
    intr, _ = make_interpreter(labels)
    intr.interpret(program)
    assert intr.variables[1] == 1
    assert intr.variables[2] == 5


def test_missing_label_reports_error():
    intr, out = make_interpreter()
    intr.interpret([branch("nowhere", BranchCondition.ALWAYS), mov(1, 1)])
    assert intr.had_error
    assert out.getvalue() == "Label not found: nowhere\n"
    assert intr.variables[1] == 0


def test_call_and_ret_restore_all_but_x0():
    labels = LabelMap()
    labels.put("func", 4)
    intr, _ = make_interpreter(labels)
    intr.interpret([
        mov(1, 10),
        Command(CommandType.CALL, destination="func"),
        mov(2, 20),
        Command(CommandType.RET),
        mov(0, 77),
        mov(1, 99),
        Command(CommandType.RET),
    ])
    assert intr.variables[0] == 77
    assert intr.variables[1] == 10
    assert intr.variables[2] == 20
    assert intr.stack == []


def test_call_missing_label_reports_error():
    intr, out = make_interpreter()
    intr.interpret([Command(CommandType.CALL, destination="gone")])
    assert intr.had_error
    assert out.getvalue() == "Label not found: gone\n"


def test_top_level_ret_stops_program():
    intr, _ = make_interpreter()
    intr.interpret([mov(1, 1), Command(CommandType.RET), mov(1, 2)])
    assert intr.variables[1] == 1
    assert not intr.had_error


def test_error_command_sets_error():
    intr, _ = make_interpreter()
    intr.interpret([Command(CommandType.ERR), mov(1, 1)])
    assert intr.had_error
    assert intr.variables[1] == 0


def test_stack_frame_holds_snapshot():
    frame = StackFrame(3, (1, 2))
    assert frame.return_index == 3
    assert frame.variables == (1, 2)