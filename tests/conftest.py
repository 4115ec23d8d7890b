from typing import Iterable, Tuple

import pytest

from bridge import BufferedBridge
from interpreter import Interpreter


def build(source: str, inputs: Iterable[str] = (), **kwargs) -> Tuple[Interpreter, BufferedBridge]:
    bridge = BufferedBridge(inputs)
    interpreter = Interpreter(source=source, filename="test.lasm", bridge=bridge, **kwargs)
    return interpreter, bridge


@pytest.fixture
def machine():
    """Factory for an interpreter wired to a buffered bridge, not yet run."""
    return build


@pytest.fixture
def run_program():
    """Run a program to completion and return (interpreter, bridge)."""

    def _run(source: str, inputs: Iterable[str] = (), **kwargs):
        interpreter, bridge = build(source, inputs, **kwargs)
        interpreter.run()
        return interpreter, bridge

    return _run


@pytest.fixture
def value_of(run_program):
    """Run a program and return the raw value of one variable."""

    def _value(source: str, name: str):
        interpreter, _ = run_program(source)
        return interpreter.symbols.lookup(name).value

    return _value
