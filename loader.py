"""Program loading: address assignment and static label validation."""

from __future__ import annotations
import dataclasses
from dataclasses import dataclass
from typing import Dict, List, Mapping, Sequence, Tuple

from lexer import Lexer, StaticError
from parser import JUMP_OPCODES, Instruction, LabelRef, Parser


class DuplicateLabelError(StaticError):
    """Raised when a label name is defined twice."""

    def __init__(self, message: str, *, line: int, label: str) -> None:
        super().__init__(message, line=line)
        self.label = label


class UnresolvedLabelError(StaticError):
    """Raised when a jump names a label that is never defined."""

    def __init__(self, message: str, *, line: int, label: str) -> None:
        super().__init__(message, line=line)
        self.label = label


@dataclass(frozen=True)
class Program:
    instructions: Tuple[Instruction, ...]
    labels: Mapping[str, int]
    filename: str = "<string>"

    def __len__(self) -> int:
        return len(self.instructions)

    def address_of(self, label: str) -> int:
        return self.labels[label]


def load_program(instructions: Sequence[Instruction], filename: str = "<string>") -> Program:
    placed: List[Instruction] = [
        dataclasses.replace(instruction, address=address) for address, instruction in enumerate(instructions)
    ]

    labels: Dict[str, int] = {}
    for instruction in placed:
        if instruction.opcode != "LABEL":
            continue
        target = instruction.operands[0]
        assert isinstance(target, LabelRef)
        if target.name in labels:
            first = placed[labels[target.name]]
            raise DuplicateLabelError(
                f"Label '{target.name}' at {filename}:{instruction.location.line} "
                f"already defined at line {first.location.line}",
                line=instruction.location.line,
                label=target.name,
            )
        labels[target.name] = instruction.address

    # Second pass so forward references resolve.
    for instruction in placed:
        if instruction.opcode not in JUMP_OPCODES:
            continue
        target = instruction.operands[0]
        assert isinstance(target, LabelRef)
        if target.name not in labels:
            raise UnresolvedLabelError(
                f"{instruction.opcode} at {filename}:{instruction.location.line} "
                f"targets undefined label '{target.name}'",
                line=instruction.location.line,
                label=target.name,
            )

    return Program(instructions=tuple(placed), labels=dict(labels), filename=filename)


def compile_source(text: str, filename: str = "<string>") -> Program:
    lexer = Lexer(text, filename)
    tokens = lexer.tokenize()
    parser = Parser(tokens, filename, text.splitlines())
    return load_program(parser.parse(), filename)
