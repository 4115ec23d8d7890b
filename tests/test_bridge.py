import io

import pytest

from bridge import BufferedBridge, ConsoleBridge
from hooks import HookError, HookRegistry
from interpreter import Interpreter


def test_console_bridge_round_trip():
    stdin = io.StringIO("first line\r\nsecond\n")
    stdout = io.StringIO()
    bridge = ConsoleBridge(stdin=stdin, stdout=stdout)
    assert bridge.read_line() == "first line"
    assert bridge.read_line() == "second"
    with pytest.raises(EOFError):
        bridge.read_line()
    bridge.write_line("out")
    assert stdout.getvalue() == "out\n"


def test_console_bridge_drives_interpreter():
    stdout = io.StringIO()
    bridge = ConsoleBridge(stdin=io.StringIO("42\n"), stdout=stdout)
    interpreter = Interpreter(source="DECL s STRING\nINPUT s\nPRINT got {s}", bridge=bridge)
    interpreter.run()
    assert stdout.getvalue() == "got 42\n"


def test_buffered_bridge():
    bridge = BufferedBridge(["a"])
    assert bridge.read_line() == "a"
    with pytest.raises(EOFError):
        bridge.read_line()
    bridge.write_line("x")
    bridge.write_line("y")
    assert bridge.text == "x\ny\n"


def test_unknown_hook_event():
    with pytest.raises(HookError):
        HookRegistry().on_event("on_everything", lambda *args: None)


def test_step_rule_interval_must_be_positive():
    with pytest.raises(HookError):
        HookRegistry().add_step_rule(name="never", every_n=0, handler=lambda interp, ctx: None)


def test_emit_rejects_unknown_event():
    with pytest.raises(HookError):
        HookRegistry().emit("on_everything", None, None)


def test_decorator_registration_keeps_function():
    hooks = HookRegistry()

    @hooks.on_event("program_end", priority=3, owner="tests")
    def done(interp, status):
        return None

    [hook] = hooks.hooks["program_end"]
    assert hook.handler is done
    assert (hook.priority, hook.owner) == (3, "tests")
