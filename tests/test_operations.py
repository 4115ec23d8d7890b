import pytest

from interpreter import ConversionError, DivisionByZeroError, TypeMismatchError, UndefinedVariableError


@pytest.mark.parametrize(
    "opcode, a, b, expected",
    [
        ("ADD", 2, 3, 5),
        ("SUB", 2, 3, -1),
        ("MUL", -4, 3, -12),
        ("ADD", 10**20, 1, 10**20 + 1),
        ("ADD", 1.5, 2.25, 3.75),
        ("SUB", 0.5, 2.0, -1.5),
        ("MUL", 1.5, -2.0, -3.0),
    ],
)
def test_native_arithmetic(value_of, opcode, a, b, expected):
    type_name = "INT" if isinstance(a, int) else "FLOAT"
    source = (
        f"DECL x {type_name}\nSET x {a}\nDECL y {type_name}\nSET y {b}\n"
        f"DECL z {type_name}\n{opcode} z x y"
    )
    assert value_of(source, "z") == expected


@pytest.mark.parametrize(
    "opcode, a, b, expected",
    [
        ("DIV", 7, 2, 3),
        ("DIV", -7, 2, -3),
        ("DIV", 7, -2, -3),
        ("MOD", 7, 2, 1),
        ("MOD", -7, 2, -1),
        ("MOD", 7, -2, 1),
        ("DIV", 7.0, 2.0, 3.5),
        ("MOD", -7.5, 2.0, -1.5),
        ("MOD", 7.5, -2.0, 1.5),
    ],
)
def test_division_truncates(value_of, opcode, a, b, expected):
    type_name = "INT" if isinstance(a, int) else "FLOAT"
    assert value_of(f"DECL z {type_name}\n{opcode} z {a} {b}", "z") == expected


@pytest.mark.parametrize("opcode", ["DIV", "MOD"])
@pytest.mark.parametrize("type_name, zero, one", [("INT", "0", "1"), ("FLOAT", "0.0", "1.0")])
def test_division_by_zero(machine, opcode, type_name, zero, one):
    interpreter, _ = machine(f"DECL z {type_name}\n{opcode} z {one} {zero}")
    with pytest.raises(DivisionByZeroError) as exc:
        interpreter.run()
    assert exc.value.address == 1
    assert exc.value.opcode == opcode


def test_mixed_numeric_types_are_rejected(machine):
    interpreter, _ = machine("DECL z INT\nADD z 1 1.0")
    with pytest.raises(TypeMismatchError):
        interpreter.run()


def test_arithmetic_rejects_strings(machine):
    interpreter, _ = machine('DECL z STRING\nADD z "a" "b"')
    with pytest.raises(TypeMismatchError):
        interpreter.run()


def test_destination_type_must_match(machine):
    interpreter, _ = machine("DECL z FLOAT\nADD z 1 2")
    with pytest.raises(TypeMismatchError) as exc:
        interpreter.run()
    assert "'z'" in exc.value.message


@pytest.mark.parametrize(
    "opcode, x, expected",
    [
        ("ROUND", "2.5", 3),
        ("ROUND", "-2.5", -3),
        ("ROUND", "2.4", 2),
        ("ROUND", "0.49999999999999994", 0),
        ("ROUND", "-0.5", -1),
        ("FLOOR", "-1.5", -2),
        ("FLOOR", "1.9", 1),
        ("CEIL", "-1.5", -1),
        ("CEIL", "1.1", 2),
    ],
)
def test_rounding(value_of, opcode, x, expected):
    assert value_of(f"DECL r INT\n{opcode} r {x}", "r") == expected


def test_rounding_requires_float(machine):
    interpreter, _ = machine("DECL r INT\nROUND r 2")
    with pytest.raises(TypeMismatchError):
        interpreter.run()


def test_rounding_writes_int(machine):
    interpreter, _ = machine("DECL r FLOAT\nFLOOR r 2.5")
    with pytest.raises(TypeMismatchError):
        interpreter.run()


@pytest.mark.parametrize(
    "opcode, a, b, expected",
    [
        ("AND", "true", "false", False),
        ("AND", "true", "true", True),
        ("OR", "false", "true", True),
        ("OR", "false", "false", False),
        ("XOR", "true", "true", False),
        ("XOR", "true", "false", True),
    ],
)
def test_boolean(value_of, opcode, a, b, expected):
    assert value_of(f"DECL r BOOL\n{opcode} r {a} {b}", "r") is expected


def test_not(value_of):
    assert value_of("DECL r BOOL\nNOT r false", "r") is True


def test_not_ignores_second_operand(value_of):
    # The second operand is never evaluated, so an undeclared name is fine.
    assert value_of("DECL r BOOL\nNOT r true ghost", "r") is False


def test_boolean_requires_bool(machine):
    interpreter, _ = machine("DECL r BOOL\nAND r true 1")
    with pytest.raises(TypeMismatchError):
        interpreter.run()


@pytest.mark.parametrize(
    "opcode, a, b, taken",
    [
        ("JEQ", "3", "3", True),
        ("JNE", "3", "3", False),
        ("JGT", "4", "3", True),
        ("JLT", "4", "3", False),
        ("JLT", "1.5", "2.5", True),
        ("JGT", '"b"', '"a"', True),
        ("JLT", '"apple"', '"apricot"', True),
        ("JEQ", "true", "true", True),
        ("JNE", "true", "false", True),
        ("JEQ", "[1, 2]", "[1, 2]", True),
        ("JNE", "[1, 2]", "[2, 1]", True),
    ],
)
def test_comparisons(run_program, opcode, a, b, taken):
    _, bridge = run_program(f"{opcode} hit {a} {b}\nPRINT miss\nLABEL hit\nPRINT end")
    assert bridge.output == (["end"] if taken else ["miss", "end"])


@pytest.mark.parametrize(
    "source",
    [
        "JGT L true false",
        "JLT L [1] [2]",
        "JEQ L 1 1.0",
        'JNE L "1" 1',
    ],
)
def test_invalid_comparisons(machine, source):
    interpreter, _ = machine(source + "\nLABEL L")
    with pytest.raises(TypeMismatchError):
        interpreter.run()


@pytest.mark.parametrize("n", [0, 7, -1, 123456789, 2**80, -(10**30)])
def test_convert_int_string_round_trip(value_of, n):
    source = (
        f"DECL a INT\nSET a {n}\nDECL s STRING\nCONVERT s a\n"
        "DECL b INT\nCONVERT b s"
    )
    assert value_of(source, "b") == n


@pytest.mark.parametrize(
    "decl, source_value, expected",
    [
        ("STRING", "2.5", "2.5"),
        ("STRING", "-3", "-3"),
        ("STRING", "true", "true"),
        ("STRING", "false", "false"),
        ("INT", '" 12 "', 12),
        ("FLOAT", '"1e-3"', 0.001),
        ("FLOAT", '"-4"', -4.0),
        ("BOOL", '"true"', True),
        ("BOOL", '"false"', False),
        ("INT", "-2.7", -2),
        ("FLOAT", "3", 3.0),
        ("INT", "5", 5),
    ],
)
def test_convert(value_of, decl, source_value, expected):
    result = value_of(f"DECL r {decl}\nCONVERT r {source_value}", "r")
    assert result == expected
    assert type(result) is type(expected)


@pytest.mark.parametrize(
    "decl, source_value",
    [
        ("INT", '"abc"'),
        ("INT", '"1_000"'),
        ("INT", '"1.5"'),
        ("FLOAT", '"one"'),
        ("BOOL", '"yes"'),
        ("BOOL", '"True"'),
    ],
)
def test_convert_rejects_bad_text(machine, decl, source_value):
    interpreter, _ = machine(f"DECL r {decl}\nCONVERT r {source_value}")
    with pytest.raises(ConversionError):
        interpreter.run()


@pytest.mark.parametrize("source", ["DECL r INT\nCONVERT r true", 'DECL r ARRAY\nCONVERT r "x"'])
def test_convert_unsupported_pairs(machine, source):
    interpreter, _ = machine(source)
    with pytest.raises(TypeMismatchError):
        interpreter.run()


def test_convert_needs_declared_target(machine):
    interpreter, _ = machine("CONVERT r 1")
    with pytest.raises(UndefinedVariableError):
        interpreter.run()


def test_convert_round_trip_past_digit_limit(run_program):
    digits = "9" * 5000
    source = (
        f"DECL a INT\nSET a {digits}\nMUL a a 10\n"
        "DECL s STRING\nCONVERT s a\nDECL b INT\nCONVERT b s\nPRINT {a}"
    )
    interpreter, bridge = run_program(source)
    assert interpreter.symbols.lookup("s").value == digits + "0"
    assert interpreter.symbols.lookup("b").value == (10**5000 - 1) * 10
    assert bridge.output == [digits + "0"]
