from __future__ import annotations
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, Union

from lexer import ParseError, Token
from values import ALL_TYPES, SCALAR_TYPES, TYPE_ARRAY, TYPE_BOOL, TYPE_FLOAT, TYPE_INT, TYPE_STRING, Array, parse_int


@dataclass(frozen=True)
class SourceLocation:
    file: str
    line: int
    column: int
    statement: str


@dataclass(frozen=True)
class Literal:
    value: Union[int, float, bool, str, Array]
    literal_type: str


@dataclass(frozen=True)
class VariableRef:
    name: str


@dataclass(frozen=True)
class LabelRef:
    name: str


@dataclass(frozen=True)
class TypeName:
    name: str


@dataclass(frozen=True)
class Text:
    text: str
    interpolate: bool = True


Operand = Union[Literal, VariableRef, LabelRef, TypeName, Text]


@dataclass(frozen=True)
class Instruction:
    opcode: str
    operands: Tuple[Operand, ...]
    location: SourceLocation
    address: int = field(default=-1, compare=False)


# Operand grammar per opcode, written as "kind:role". A trailing "?" marks an
# optional operand. Kinds: var (variable name), value (variable name or
# literal), literal, label, type, text (rest of the line).
GRAMMAR: Dict[str, Tuple[str, ...]] = {
    "DECL": ("var:name", "type:type", "type:element?"),
    "SET": ("var:name", "literal:value"),
    "FREE": ("var:name",),
    "ADD": ("var:dest", "value:op1", "value:op2"),
    "SUB": ("var:dest", "value:op1", "value:op2"),
    "MUL": ("var:dest", "value:op1", "value:op2"),
    "DIV": ("var:dest", "value:op1", "value:op2"),
    "MOD": ("var:dest", "value:op1", "value:op2"),
    "ROUND": ("var:dest", "value:op"),
    "FLOOR": ("var:dest", "value:op"),
    "CEIL": ("var:dest", "value:op"),
    "AND": ("var:dest", "value:op1", "value:op2"),
    "OR": ("var:dest", "value:op1", "value:op2"),
    "XOR": ("var:dest", "value:op1", "value:op2"),
    "NOT": ("var:dest", "value:op1", "value:op2?"),
    "CONVERT": ("var:dest", "value:source"),
    "LABEL": ("label:name",),
    "JMP": ("label:target",),
    "JEQ": ("label:target", "value:op1", "value:op2"),
    "JNE": ("label:target", "value:op1", "value:op2"),
    "JGT": ("label:target", "value:op1", "value:op2"),
    "JLT": ("label:target", "value:op1", "value:op2"),
    "SLICE": ("var:dest", "value:source", "value:start", "value:end"),
    "INDEX": ("var:dest", "value:source", "value:index"),
    "LEN": ("var:dest", "value:source"),
    "PUSH": ("var:dest", "value:item"),
    "PRINT": ("text:text",),
    "INPUT": ("var:dest",),
}

JUMP_OPCODES = frozenset({"JMP", "JEQ", "JNE", "JGT", "JLT"})

_NAME = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_INT = re.compile(r"-?[0-9]+")
_FLOAT = re.compile(r"-?[0-9]+(?:\.[0-9]+(?:[eE][+-]?[0-9]+)?|[eE][+-]?[0-9]+)")
_RESERVED = {"true", "false"}


def usage(opcode: str) -> str:
    parts = [opcode]
    for entry in GRAMMAR[opcode]:
        _kind, role = entry.split(":", 1)
        if role.endswith("?"):
            parts.append(f"[{role[:-1]}]")
        else:
            parts.append(f"<{role}>")
    return " ".join(parts)


class Parser:
    def __init__(self, tokens: List[Token], filename: str, source_lines: List[str]):
        self.tokens = tokens
        self.filename = filename
        self.source_lines = source_lines
        self.index = 0

    def parse(self) -> List[Instruction]:
        instructions: List[Instruction] = []
        while self._peek().type != "EOF":
            if self._match("NEWLINE"):
                continue
            instructions.append(self._parse_instruction())
        return instructions

    def _parse_instruction(self) -> Instruction:
        head = self._peek()
        location = self._location_from_token(head)
        if head.type != "WORD":
            raise self._error(f"Expected an opcode but found '{head.raw or head.value}'", head, None)
        self.index += 1
        opcode = head.value.upper()
        grammar = GRAMMAR.get(opcode)
        if grammar is None:
            raise self._error(f"Unknown opcode '{head.value}'", head, "one of " + ", ".join(sorted(GRAMMAR)))

        operands: List[Operand] = []
        for entry in grammar:
            kind, role = entry.split(":", 1)
            optional = role.endswith("?")
            if kind == "text":
                operands.append(self._parse_text())
                continue
            if self._at_statement_end():
                if optional:
                    break
                raise self._error(
                    f"{opcode} is missing operand <{role}>", self._peek(), usage(opcode)
                )
            operands.append(self._parse_operand(opcode, kind))

        if not self._at_statement_end():
            extra = self._peek()
            raise self._error(f"Too many operands for {opcode}", extra, usage(opcode))

        if opcode == "DECL":
            self._check_decl(operands, head)
        return Instruction(opcode=opcode, operands=tuple(operands), location=location)

    def _check_decl(self, operands: List[Operand], head: Token) -> None:
        declared = operands[1]
        assert isinstance(declared, TypeName)
        if len(operands) == 3:
            element = operands[2]
            assert isinstance(element, TypeName)
            if declared.name != TYPE_ARRAY:
                raise self._error(
                    f"Only ARRAY takes an element type, not {declared.name}", head, usage("DECL")
                )
            if element.name not in SCALAR_TYPES:
                raise self._error(
                    f"Array element type must be one of {', '.join(SCALAR_TYPES)}", head, usage("DECL")
                )

    def _parse_operand(self, opcode: str, kind: str) -> Operand:
        token = self._peek()
        if kind == "var":
            name = self._consume_name(opcode)
            return VariableRef(name)
        if kind == "label":
            name = self._consume_name(opcode)
            return LabelRef(name)
        if kind == "type":
            word = self._consume_word(opcode)
            type_name = word.value.upper()
            if type_name not in ALL_TYPES:
                raise self._error(f"Unknown type '{word.value}'", word, "one of " + ", ".join(ALL_TYPES))
            return TypeName(type_name)
        if kind == "literal":
            literal = self._parse_literal()
            if literal is None:
                raise self._error(f"Expected a literal but found '{token.raw}'", token, usage(opcode))
            return literal
        # value: a literal or a variable name
        literal = self._parse_literal()
        if literal is not None:
            return literal
        return VariableRef(self._consume_name(opcode))

    def _parse_literal(self) -> Optional[Literal]:
        token = self._peek()
        if token.type == "STRING":
            self.index += 1
            return Literal(token.value, TYPE_STRING)
        if token.type == "LBRACKET":
            return self._parse_array_literal()
        if token.type != "WORD":
            return None
        scalar = self._scalar_from_word(token)
        if scalar is not None:
            self.index += 1
        return scalar

    def _scalar_from_word(self, token: Token) -> Optional[Literal]:
        text = token.value
        if _INT.fullmatch(text):
            try:
                return Literal(parse_int(text), TYPE_INT)
            except ValueError as exc:
                raise self._error(f"Unreadable integer literal '{text[:20]}...'", token, None) from exc
        if _FLOAT.fullmatch(text):
            return Literal(float(text), TYPE_FLOAT)
        if text == "true":
            return Literal(True, TYPE_BOOL)
        if text == "false":
            return Literal(False, TYPE_BOOL)
        return None

    def _parse_array_literal(self) -> Literal:
        lbracket = self._consume("LBRACKET")
        items: List[Literal] = []
        if self._peek().type != "RBRACKET":
            while True:
                item = self._parse_literal()
                if item is None or item.literal_type == TYPE_ARRAY:
                    bad = self._peek()
                    raise self._error(
                        f"Array items must be scalar literals, found '{bad.raw or bad.value}'",
                        bad,
                        "[<literal>, <literal>, ...]",
                    )
                items.append(item)
                if not self._match("COMMA"):
                    break
        self._consume("RBRACKET")
        element_type: Optional[str] = None
        for item in items:
            if element_type is None:
                element_type = item.literal_type
            elif item.literal_type != element_type:
                raise self._error(
                    f"Array literal mixes {element_type} and {item.literal_type}",
                    lbracket,
                    "[<literal>, <literal>, ...]",
                )
        return Literal(Array.from_items(element_type, [item.value for item in items]), TYPE_ARRAY)

    def _parse_text(self) -> Text:
        tokens: List[Token] = []
        while not self._at_statement_end():
            tokens.append(self._peek())
            self.index += 1
        if not tokens:
            return Text("")
        if len(tokens) == 1 and tokens[0].type == "STRING":
            return Text(tokens[0].value, interpolate=False)
        first, last = tokens[0], tokens[-1]
        line_text = self.source_lines[first.line - 1] if 0 < first.line <= len(self.source_lines) else ""
        end = last.column - 1 + len(last.raw)
        return Text(line_text[first.column - 1 : end])

    def _consume_name(self, opcode: str) -> str:
        token = self._peek()
        if token.type != "WORD" or not _NAME.fullmatch(token.value) or token.value in _RESERVED:
            raise self._error(f"Expected a name but found '{token.raw or token.value}'", token, usage(opcode))
        self.index += 1
        return token.value

    def _consume_word(self, opcode: str) -> Token:
        token = self._peek()
        if token.type != "WORD":
            raise self._error(f"Expected a word but found '{token.raw or token.value}'", token, usage(opcode))
        self.index += 1
        return token

    def _consume(self, token_type: str) -> Token:
        token = self._peek()
        if token.type != token_type:
            raise self._error(
                f"Expected token {token_type} but found {token.type}", token, None
            )
        self.index += 1
        return token

    def _match(self, token_type: str) -> bool:
        if self._peek().type == token_type:
            self.index += 1
            return True
        return False

    def _at_statement_end(self) -> bool:
        return self._peek().type in ("NEWLINE", "EOF")

    def _peek(self) -> Token:
        return self.tokens[self.index]

    def _error(self, message: str, token: Token, expected: Optional[str]) -> ParseError:
        text = f"{message} at {self.filename}:{token.line}:{token.column}"
        if expected:
            text += f" (expected: {expected})"
        return ParseError(text, line=token.line, token=token.raw or token.value, expected=expected)

    def _location_from_token(self, token: Token) -> SourceLocation:
        line_index = token.line - 1
        statement = ""
        if 0 <= line_index < len(self.source_lines):
            statement = self.source_lines[line_index].strip()
        return SourceLocation(file=self.filename, line=token.line, column=token.column, statement=statement)
