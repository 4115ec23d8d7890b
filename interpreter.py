from __future__ import annotations
import json
import math
import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

from bridge import ConsoleBridge, IOBridge
from hooks import HookRegistry, StepContext
from lexer import LineAsmError
from loader import Program, compile_source
from parser import Instruction, LabelRef, Literal, Operand, SourceLocation, Text, TypeName, VariableRef
from values import (
    NUMERIC_TYPES,
    TYPE_ARRAY,
    TYPE_BOOL,
    TYPE_FLOAT,
    TYPE_INT,
    TYPE_STRING,
    Array,
    Value,
    format_value,
    int_text,
    parse_bool,
    parse_float,
    parse_int,
    round_half_away,
    snapshot,
    trunc_div,
    trunc_mod,
    values_equal,
    zero_value,
)


RUNNING = "RUNNING"
HALTED = "HALTED"
FAULTED = "FAULTED"


class RuntimeFault(LineAsmError):
    """Raised for runtime faults."""

    def __init__(
        self,
        message: str,
        *,
        location: Optional[SourceLocation] = None,
        opcode: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.location = location
        self.opcode = opcode
        self.address: Optional[int] = None
        self.step_index: Optional[int] = None


class UndefinedVariableError(RuntimeFault):
    pass


class RedeclarationError(RuntimeFault):
    pass


class TypeMismatchError(RuntimeFault):
    pass


class DivisionByZeroError(RuntimeFault):
    pass


class IndexOutOfBoundsError(RuntimeFault):
    pass


class ConversionError(RuntimeFault):
    pass


class InputClosedError(RuntimeFault):
    pass


class StepLimitError(RuntimeFault):
    pass


@dataclass
class Binding:
    name: str
    declared_type: str
    element_type: Optional[str]
    value: Value

    def describe(self) -> str:
        if self.declared_type == TYPE_ARRAY and self.element_type:
            return f"ARRAY of {self.element_type}"
        return self.declared_type


class SymbolTable:
    def __init__(self) -> None:
        self.bindings: Dict[str, Binding] = {}

    def declare(self, name: str, type_name: str, element_type: Optional[str] = None) -> Binding:
        if name in self.bindings:
            raise RedeclarationError(f"Variable '{name}' is already declared", opcode="DECL")
        binding = Binding(name, type_name, element_type, zero_value(type_name, element_type))
        self.bindings[name] = binding
        return binding

    def binding(self, name: str) -> Binding:
        try:
            return self.bindings[name]
        except KeyError:
            raise UndefinedVariableError(f"Undefined variable '{name}'") from None

    def lookup(self, name: str) -> Value:
        return self.binding(name).value

    def assign(self, name: str, value: Value) -> None:
        binding = self.binding(name)
        if value.type != binding.declared_type:
            raise TypeMismatchError(
                f"Type mismatch for '{name}': declared {binding.describe()} but got {value.type}"
            )
        if value.type == TYPE_ARRAY:
            array: Array = value.value
            if array.element_type is None:
                array = Array.from_items(binding.element_type, [])
            elif binding.element_type is None:
                binding.element_type = array.element_type
            elif array.element_type != binding.element_type:
                raise TypeMismatchError(
                    f"Type mismatch for '{name}': declared {binding.describe()} "
                    f"but got ARRAY of {array.element_type}"
                )
            # Each binding owns its own storage.
            binding.value = Value(TYPE_ARRAY, Array(array.element_type, array.data.copy()))
            return
        binding.value = Value(value.type, value.value)

    def free(self, name: str) -> None:
        if name not in self.bindings:
            raise UndefinedVariableError(f"Cannot free undefined variable '{name}'", opcode="FREE")
        del self.bindings[name]

    def has(self, name: str) -> bool:
        return name in self.bindings

    def snapshot(self) -> Dict[str, str]:
        return {name: snapshot(binding.value) for name, binding in self.bindings.items()}


@dataclass
class StateEntry:
    step_index: int
    state_id: str
    address: Optional[int]
    opcode: Optional[str]
    source_location: Optional[SourceLocation]
    statement: Optional[str]
    env_snapshot: Optional[Dict[str, str]]


class StateLogger:
    def __init__(self, verbose: bool) -> None:
        self.verbose = verbose
        self.entries: List[StateEntry] = []
        self.next_state_index = 0

    def record(
        self,
        *,
        address: Optional[int],
        opcode: Optional[str],
        location: Optional[SourceLocation],
        env_snapshot: Optional[Dict[str, str]] = None,
    ) -> StateEntry:
        step_index = self.next_state_index
        entry = StateEntry(
            step_index=step_index,
            state_id=f"s_{step_index:06d}",
            address=address,
            opcode=opcode,
            source_location=location,
            statement=location.statement if location else None,
            env_snapshot=env_snapshot,
        )
        self.entries.append(entry)
        self.next_state_index += 1
        return entry

    def tail(self, count: int) -> List[StateEntry]:
        executed = [entry for entry in self.entries if entry.address is not None]
        return executed[-count:] if count > 0 else []


Handler = Callable[["Interpreter", Instruction], Optional[int]]

_PLACEHOLDER = re.compile(r"\{\{|\}\}|\{([A-Za-z_][A-Za-z0-9_]*)\}")


class Operations:
    def __init__(self) -> None:
        self.table: Dict[str, Handler] = {}
        self._register("DECL", self._decl)
        self._register("SET", self._set)
        self._register("FREE", self._free)
        self._register_numeric("ADD", lambda a, b: a + b, lambda a, b: a + b)
        self._register_numeric("SUB", lambda a, b: a - b, lambda a, b: a - b)
        self._register_numeric("MUL", lambda a, b: a * b, lambda a, b: a * b)
        self._register_numeric("DIV", trunc_div, lambda a, b: a / b, zero_checked=True)
        self._register_numeric("MOD", trunc_mod, math.fmod, zero_checked=True)
        self._register_rounding("ROUND", round_half_away)
        self._register_rounding("FLOOR", math.floor)
        self._register_rounding("CEIL", math.ceil)
        self._register_boolean("AND", lambda a, b: a and b)
        self._register_boolean("OR", lambda a, b: a or b)
        self._register_boolean("XOR", lambda a, b: a != b)
        self._register("NOT", self._not)
        self._register("CONVERT", self._convert)
        self._register("LABEL", self._label)
        self._register("JMP", self._jmp)
        self._register_jump("JEQ", values_equal, ordered=False)
        self._register_jump("JNE", lambda a, b: not values_equal(a, b), ordered=False)
        self._register_jump("JGT", lambda a, b: a.value > b.value, ordered=True)
        self._register_jump("JLT", lambda a, b: a.value < b.value, ordered=True)
        self._register("SLICE", self._slice)
        self._register("INDEX", self._index)
        self._register("LEN", self._len)
        self._register("PUSH", self._push)
        self._register("PRINT", self._print)
        self._register("INPUT", self._input)

    def _register(self, name: str, handler: Handler) -> None:
        self.table[name] = handler

    def _register_numeric(
        self,
        name: str,
        int_op: Callable[[int, int], int],
        float_op: Callable[[float, float], float],
        *,
        zero_checked: bool = False,
    ) -> None:
        def impl(interpreter: "Interpreter", ins: Instruction) -> Optional[int]:
            left = interpreter.resolve(ins.operands[1])
            right = interpreter.resolve(ins.operands[2])
            t, a, b = self._expect_num_pair(left, right, name)
            if zero_checked and b == 0:
                raise DivisionByZeroError("Division by zero", opcode=name)
            if t == TYPE_INT:
                result = Value(TYPE_INT, int_op(a, b))
            else:
                result = Value(TYPE_FLOAT, float(float_op(a, b)))
            interpreter.write(ins.operands[0], result)
            return None

        self._register(name, impl)

    def _register_rounding(self, name: str, func: Callable[[float], int]) -> None:
        def impl(interpreter: "Interpreter", ins: Instruction) -> Optional[int]:
            x = self._expect_float(interpreter.resolve(ins.operands[1]), name)
            if not math.isfinite(x):
                raise ConversionError(f"{name} cannot convert {x} to INT", opcode=name)
            interpreter.write(ins.operands[0], Value(TYPE_INT, int(func(x))))
            return None

        self._register(name, impl)

    def _register_boolean(self, name: str, func: Callable[[bool, bool], bool]) -> None:
        def impl(interpreter: "Interpreter", ins: Instruction) -> Optional[int]:
            a = self._expect_bool(interpreter.resolve(ins.operands[1]), name)
            b = self._expect_bool(interpreter.resolve(ins.operands[2]), name)
            interpreter.write(ins.operands[0], Value(TYPE_BOOL, bool(func(a, b))))
            return None

        self._register(name, impl)

    def _register_jump(self, name: str, test: Callable[[Value, Value], bool], *, ordered: bool) -> None:
        def impl(interpreter: "Interpreter", ins: Instruction) -> Optional[int]:
            left = interpreter.resolve(ins.operands[1])
            right = interpreter.resolve(ins.operands[2])
            if left.type != right.type:
                raise TypeMismatchError(f"{name} cannot compare {left.type} with {right.type}", opcode=name)
            if ordered and left.type not in (TYPE_INT, TYPE_FLOAT, TYPE_STRING):
                raise TypeMismatchError(f"{name} cannot order {left.type} values", opcode=name)
            if test(left, right):
                return interpreter.label_address(ins.operands[0])
            return None

        self._register(name, impl)

    def execute(self, interpreter: "Interpreter", ins: Instruction) -> Optional[int]:
        handler = self.table.get(ins.opcode)
        if handler is None:
            raise RuntimeFault(f"Unknown opcode '{ins.opcode}'", opcode=ins.opcode)
        return handler(interpreter, ins)

    # Helpers
    def _expect_int(self, value: Value, rule: str) -> int:
        if value.type != TYPE_INT:
            raise TypeMismatchError(f"{rule} expects INT but got {value.type}", opcode=rule)
        return value.value

    def _expect_float(self, value: Value, rule: str) -> float:
        if value.type != TYPE_FLOAT:
            raise TypeMismatchError(f"{rule} expects FLOAT but got {value.type}", opcode=rule)
        return value.value

    def _expect_bool(self, value: Value, rule: str) -> bool:
        if value.type != TYPE_BOOL:
            raise TypeMismatchError(f"{rule} expects BOOL but got {value.type}", opcode=rule)
        return value.value

    def _expect_num_pair(self, a: Value, b: Value, rule: str) -> Tuple[str, Any, Any]:
        if a.type not in NUMERIC_TYPES or b.type not in NUMERIC_TYPES:
            raise TypeMismatchError(f"{rule} expects INT or FLOAT arguments", opcode=rule)
        if a.type != b.type:
            raise TypeMismatchError(f"{rule} cannot mix INT and FLOAT", opcode=rule)
        return a.type, a.value, b.value

    def _expect_sequence(self, value: Value, rule: str) -> int:
        if value.type == TYPE_ARRAY:
            return len(value.value)
        if value.type == TYPE_STRING:
            return len(value.value)
        raise TypeMismatchError(f"{rule} expects ARRAY or STRING but got {value.type}", opcode=rule)

    # Declarations
    def _decl(self, interpreter: "Interpreter", ins: Instruction) -> Optional[int]:
        target = ins.operands[0]
        declared = ins.operands[1]
        assert isinstance(target, VariableRef) and isinstance(declared, TypeName)
        element: Optional[str] = None
        if len(ins.operands) > 2:
            element_op = ins.operands[2]
            assert isinstance(element_op, TypeName)
            element = element_op.name
        interpreter.symbols.declare(target.name, declared.name, element)
        return None

    def _set(self, interpreter: "Interpreter", ins: Instruction) -> Optional[int]:
        literal = ins.operands[1]
        assert isinstance(literal, Literal)
        interpreter.write(ins.operands[0], Value(literal.literal_type, literal.value))
        return None

    def _free(self, interpreter: "Interpreter", ins: Instruction) -> Optional[int]:
        target = ins.operands[0]
        assert isinstance(target, VariableRef)
        interpreter.symbols.free(target.name)
        return None

    def _not(self, interpreter: "Interpreter", ins: Instruction) -> Optional[int]:
        # The optional second source operand is accepted but never evaluated.
        a = self._expect_bool(interpreter.resolve(ins.operands[1]), "NOT")
        interpreter.write(ins.operands[0], Value(TYPE_BOOL, not a))
        return None

    def _convert(self, interpreter: "Interpreter", ins: Instruction) -> Optional[int]:
        target = ins.operands[0]
        assert isinstance(target, VariableRef)
        source = interpreter.resolve(ins.operands[1])
        binding = interpreter.symbols.binding(target.name)
        result = self._convert_value(source, binding.declared_type)
        interpreter.write(target, result)
        return None

    def _convert_value(self, source: Value, target_type: str) -> Value:
        if source.type == target_type:
            return Value(source.type, source.value)
        if target_type == TYPE_STRING and source.type in (TYPE_INT, TYPE_FLOAT, TYPE_BOOL):
            return Value(TYPE_STRING, format_value(source))
        if source.type == TYPE_STRING and target_type in (TYPE_INT, TYPE_FLOAT, TYPE_BOOL):
            text = source.value
            try:
                if target_type == TYPE_INT:
                    return Value(TYPE_INT, parse_int(text))
                if target_type == TYPE_FLOAT:
                    return Value(TYPE_FLOAT, parse_float(text))
                return Value(TYPE_BOOL, parse_bool(text))
            except ValueError as exc:
                raise ConversionError(f"Cannot convert to {target_type}: {exc}", opcode="CONVERT") from None
        if source.type == TYPE_INT and target_type == TYPE_FLOAT:
            try:
                return Value(TYPE_FLOAT, float(source.value))
            except OverflowError:
                raise ConversionError("INT value too large for FLOAT", opcode="CONVERT") from None
        if source.type == TYPE_FLOAT and target_type == TYPE_INT:
            if not math.isfinite(source.value):
                raise ConversionError(f"Cannot convert {format_value(source)} to INT", opcode="CONVERT")
            # Explicit conversion only; truncate toward zero.
            return Value(TYPE_INT, int(source.value))
        raise TypeMismatchError(f"CONVERT cannot turn {source.type} into {target_type}", opcode="CONVERT")

    # Control flow
    def _label(self, _: "Interpreter", __: Instruction) -> Optional[int]:
        return None

    def _jmp(self, interpreter: "Interpreter", ins: Instruction) -> Optional[int]:
        return interpreter.label_address(ins.operands[0])

    # Arrays and strings
    def _slice(self, interpreter: "Interpreter", ins: Instruction) -> Optional[int]:
        source = interpreter.resolve(ins.operands[1])
        start = self._expect_int(interpreter.resolve(ins.operands[2]), "SLICE")
        end = self._expect_int(interpreter.resolve(ins.operands[3]), "SLICE")
        length = self._expect_sequence(source, "SLICE")
        if not (0 <= start <= end <= length):
            raise IndexOutOfBoundsError(
                f"SLICE bounds [{int_text(start)}, {int_text(end)}) out of range for length {length}", opcode="SLICE"
            )
        if source.type == TYPE_STRING:
            result = Value(TYPE_STRING, source.value[start:end])
        else:
            result = Value(TYPE_ARRAY, source.value.slice(start, end))
        interpreter.write(ins.operands[0], result)
        return None

    def _index(self, interpreter: "Interpreter", ins: Instruction) -> Optional[int]:
        source = interpreter.resolve(ins.operands[1])
        index = self._expect_int(interpreter.resolve(ins.operands[2]), "INDEX")
        length = self._expect_sequence(source, "INDEX")
        if not (0 <= index < length):
            raise IndexOutOfBoundsError(f"INDEX {int_text(index)} out of range for length {length}", opcode="INDEX")
        if source.type == TYPE_STRING:
            result = Value(TYPE_STRING, source.value[index])
        else:
            array: Array = source.value
            result = Value(array.element_type, array.data[index])
        interpreter.write(ins.operands[0], result)
        return None

    def _len(self, interpreter: "Interpreter", ins: Instruction) -> Optional[int]:
        source = interpreter.resolve(ins.operands[1])
        length = self._expect_sequence(source, "LEN")
        interpreter.write(ins.operands[0], Value(TYPE_INT, length))
        return None

    def _push(self, interpreter: "Interpreter", ins: Instruction) -> Optional[int]:
        target = ins.operands[0]
        assert isinstance(target, VariableRef)
        item = interpreter.resolve(ins.operands[1])
        binding = interpreter.symbols.binding(target.name)
        if binding.declared_type != TYPE_ARRAY:
            raise TypeMismatchError(f"PUSH target '{target.name}' is {binding.declared_type}, not ARRAY", opcode="PUSH")
        if item.type == TYPE_ARRAY:
            raise TypeMismatchError("PUSH cannot append an ARRAY to an ARRAY", opcode="PUSH")
        if binding.element_type is not None and item.type != binding.element_type:
            raise TypeMismatchError(
                f"PUSH cannot append {item.type} to {binding.describe()}", opcode="PUSH"
            )
        array: Array = binding.value.value
        interpreter.write(target, Value(TYPE_ARRAY, array.appended(item.value, item.type)))
        return None

    # I/O
    def _print(self, interpreter: "Interpreter", ins: Instruction) -> Optional[int]:
        operand = ins.operands[0]
        assert isinstance(operand, Text)

        def _replace(match: "re.Match[str]") -> str:
            name = match.group(1)
            if name is None:
                return match.group(0)[0]
            return format_value(interpreter.symbols.lookup(name))

        text = _PLACEHOLDER.sub(_replace, operand.text) if operand.interpolate else operand.text
        interpreter.bridge.write_line(text)
        interpreter.io_log.append({"event": "PRINT", "text": text})
        return None

    def _input(self, interpreter: "Interpreter", ins: Instruction) -> Optional[int]:
        target = ins.operands[0]
        assert isinstance(target, VariableRef)
        binding = interpreter.symbols.binding(target.name)
        try:
            text = interpreter.bridge.read_line()
        except EOFError:
            raise InputClosedError("INPUT failed: input channel closed", opcode="INPUT") from None
        interpreter.io_log.append({"event": "INPUT", "text": text})
        if binding.declared_type != TYPE_STRING:
            raise TypeMismatchError(
                f"INPUT target '{target.name}' must be STRING, not {binding.describe()}", opcode="INPUT"
            )
        interpreter.write(target, Value(TYPE_STRING, text))
        return None


@dataclass
class ExecutionState:
    pc: int = 0
    status: str = RUNNING
    steps: int = 0


class Interpreter:
    def __init__(
        self,
        *,
        source: str,
        filename: str = "<string>",
        verbose: bool = False,
        bridge: Optional[IOBridge] = None,
        hooks: Optional[HookRegistry] = None,
        max_steps: Optional[int] = None,
        symbols: Optional[SymbolTable] = None,
    ) -> None:
        self.source = source
        self.filename = filename
        self.verbose = verbose
        self.bridge: IOBridge = bridge or ConsoleBridge()
        self.hook_registry: HookRegistry = hooks or HookRegistry()
        self.max_steps = max_steps
        self.symbols = symbols if symbols is not None else SymbolTable()
        self.operations = Operations()
        self.program: Optional[Program] = None
        self.state = ExecutionState()
        self.logger = StateLogger(verbose=verbose)
        self.logger.record(address=None, opcode=None, location=None)
        self.io_log: List[Dict[str, Any]] = []
        self.last_error: Optional[RuntimeFault] = None

    def load(self) -> Program:
        if self.program is None:
            self.program = compile_source(self.source, self.filename)
        return self.program

    def run(self) -> None:
        program = self.load()
        self._emit_event("program_start", program)
        while self.step():
            pass
        self._emit_event("program_end", self.state.status)

    def step(self) -> bool:
        """Execute one instruction; return True while the program is still running."""
        program = self.load()
        state = self.state
        if state.status != RUNNING:
            return False
        if state.pc >= len(program):
            state.status = HALTED
            return False

        instruction = program.instructions[state.pc]
        # Stays None when the fault comes before the step is logged.
        entry: Optional[StateEntry] = None
        try:
            if self.max_steps is not None and state.steps >= self.max_steps:
                raise StepLimitError(f"Step limit of {self.max_steps} exceeded", opcode=instruction.opcode)
            self._emit_event("before_instruction", instruction)
            entry = self._log_step(instruction)
            self._run_step_rules(entry, instruction)
            target = self.operations.execute(self, instruction)
            self._emit_event("after_instruction", instruction)
        except RuntimeFault as error:
            self._fault(error, instruction, entry)
            raise
        except Exception as exc:
            # Convert unexpected Python-level exceptions so hosts only ever
            # see structured faults.
            wrapped = RuntimeFault(f"Internal interpreter error: {exc}", opcode="internal")
            self._fault(wrapped, instruction, entry)
            raise wrapped from exc

        state.steps += 1
        state.pc = state.pc + 1 if target is None else target
        if state.pc >= len(program):
            state.status = HALTED
        return state.status == RUNNING

    def resolve(self, operand: Operand) -> Value:
        if isinstance(operand, Literal):
            return Value(operand.literal_type, operand.value)
        if isinstance(operand, VariableRef):
            return self.symbols.lookup(operand.name)
        raise RuntimeFault(f"Operand {operand!r} has no value")

    def write(self, operand: Operand, value: Value) -> None:
        assert isinstance(operand, VariableRef)
        self.symbols.assign(operand.name, value)

    def label_address(self, operand: Operand) -> int:
        assert isinstance(operand, LabelRef)
        assert self.program is not None
        return self.program.address_of(operand.name)

    def _fault(self, error: RuntimeFault, instruction: Instruction, entry: Optional[StateEntry]) -> None:
        if error.location is None:
            error.location = instruction.location
        if error.opcode is None:
            error.opcode = instruction.opcode
        error.address = instruction.address
        error.step_index = entry.step_index if entry is not None else None
        self.state.status = FAULTED
        self.last_error = error
        self._emit_event("on_error", error)

    def _emit_event(self, event: str, payload: Any) -> None:
        try:
            self.hook_registry.emit(event, self, payload)
        except RuntimeFault:
            raise
        except Exception as exc:
            raise RuntimeFault(f"Hook '{event}' failed: {exc}", opcode="HOOK") from exc

    def _log_step(self, instruction: Instruction) -> StateEntry:
        env_snapshot = self.symbols.snapshot() if self.verbose else None
        return self.logger.record(
            address=instruction.address,
            opcode=instruction.opcode,
            location=instruction.location,
            env_snapshot=env_snapshot,
        )

    def _run_step_rules(self, entry: StateEntry, instruction: Instruction) -> None:
        try:
            self.hook_registry.after_step(
                self,
                StepContext(
                    step_index=entry.step_index,
                    address=instruction.address,
                    opcode=instruction.opcode,
                    location=instruction.location,
                ),
            )
        except RuntimeFault:
            raise
        except Exception as exc:
            raise RuntimeFault(f"Step rule failed: {exc}", opcode="HOOK") from exc


class TracebackFormatter:
    def __init__(self, interpreter: Interpreter, depth: int = 5) -> None:
        self.interpreter = interpreter
        self.depth = depth

    def format_text(self, error: RuntimeFault, verbose: bool) -> str:
        lines = ["Traceback (most recent step last):"]
        for entry in self.interpreter.logger.tail(self.depth):
            location = entry.source_location
            if location:
                lines.append(
                    f"  File \"{location.file}\", line {location.line}, address {entry.address}, in {entry.opcode}"
                )
                if entry.statement:
                    lines.append(f"    {entry.statement}")
            else:
                lines.append(f"  <unknown location> address {entry.address}, in {entry.opcode}")
            lines.append(f"    State log index: {entry.step_index}  State id: {entry.state_id}")
            if verbose and entry.env_snapshot is not None:
                snapshot_text = ", ".join(f"{k}={v}" for k, v in entry.env_snapshot.items())
                lines.append(f"    Env snapshot: {snapshot_text}")
        opcode = error.opcode or "runtime"
        lines.append(f"{error.__class__.__name__}: {error.message} (opcode: {opcode}, address: {error.address})")
        return "\n".join(lines)

    def to_json(self, error: RuntimeFault) -> str:
        steps_json: List[Dict[str, Any]] = []
        for entry in self.interpreter.logger.tail(self.depth):
            item: Dict[str, Any] = {
                "step_index": entry.step_index,
                "state_id": entry.state_id,
                "address": entry.address,
                "opcode": entry.opcode,
            }
            if entry.source_location:
                item["source_location"] = {
                    "file": entry.source_location.file,
                    "line": entry.source_location.line,
                    "statement": entry.source_location.statement,
                }
            if entry.env_snapshot is not None:
                item["env_snapshot"] = entry.env_snapshot
            steps_json.append(item)
        data = {
            "error": {
                "type": error.__class__.__name__,
                "message": error.message,
                "opcode": error.opcode,
                "address": error.address,
                "failing_step_index": error.step_index,
            },
            "traceback": steps_json,
        }
        return json.dumps(data, indent=2)
