import pytest

from interpreter import RedeclarationError, SymbolTable, TypeMismatchError, UndefinedVariableError
from values import Array, Value


@pytest.mark.parametrize(
    "type_name, zero",
    [("INT", 0), ("FLOAT", 0.0), ("BOOL", False), ("STRING", "")],
)
def test_declare_binds_zero_value(type_name, zero):
    table = SymbolTable()
    table.declare("v", type_name)
    value = table.lookup("v")
    assert value.type == type_name
    assert value.value == zero
    assert type(value.value) is type(zero)


def test_declare_array_is_empty():
    table = SymbolTable()
    table.declare("xs", "ARRAY", "STRING")
    value = table.lookup("xs")
    assert value.type == "ARRAY"
    assert len(value.value) == 0
    assert value.value.element_type == "STRING"


def test_redeclaration():
    table = SymbolTable()
    table.declare("x", "INT")
    with pytest.raises(RedeclarationError):
        table.declare("x", "STRING")


def test_assign_checks_type():
    table = SymbolTable()
    table.declare("x", "INT")
    table.assign("x", Value("INT", 7))
    assert table.lookup("x").value == 7
    with pytest.raises(TypeMismatchError):
        table.assign("x", Value("FLOAT", 7.0))
    assert table.lookup("x").value == 7


def test_assign_undeclared():
    with pytest.raises(UndefinedVariableError):
        SymbolTable().assign("ghost", Value("INT", 1))


def test_free_removes_binding():
    table = SymbolTable()
    table.declare("x", "INT")
    table.free("x")
    assert not table.has("x")
    with pytest.raises(UndefinedVariableError):
        table.lookup("x")
    with pytest.raises(UndefinedVariableError):
        table.free("x")


def test_untyped_array_adopts_element_type():
    table = SymbolTable()
    table.declare("xs", "ARRAY")
    table.assign("xs", Value("ARRAY", Array.from_items("BOOL", [True])))
    assert table.binding("xs").element_type == "BOOL"
    with pytest.raises(TypeMismatchError):
        table.assign("xs", Value("ARRAY", Array.from_items("INT", [1])))


def test_empty_array_keeps_declared_element_type():
    table = SymbolTable()
    table.declare("xs", "ARRAY", "INT")
    table.assign("xs", Value("ARRAY", Array.from_items(None, [])))
    assert table.lookup("xs").value.element_type == "INT"


def test_assigned_array_is_not_shared():
    table = SymbolTable()
    table.declare("xs", "ARRAY", "INT")
    source = Array.from_items("INT", [1, 2])
    table.assign("xs", Value("ARRAY", source))
    source.data[0] = 99
    assert table.lookup("xs").value.items() == [1, 2]


def test_snapshot():
    table = SymbolTable()
    table.declare("x", "INT")
    table.declare("xs", "ARRAY", "INT")
    assert table.snapshot() == {"x": "INT:0", "xs": "ARRAY<INT>:[0]"}
