from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional


class LineAsmError(Exception):
    """Base class for interpreter errors."""


class StaticError(LineAsmError):
    """Raised before execution when a program is malformed."""

    def __init__(self, message: str, *, line: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.line = line


class ParseError(StaticError):
    """Raised when parsing fails."""

    def __init__(
        self,
        message: str,
        *,
        line: Optional[int] = None,
        token: Optional[str] = None,
        expected: Optional[str] = None,
    ) -> None:
        super().__init__(message, line=line)
        self.token = token
        self.expected = expected


@dataclass
class Token:
    type: str
    value: str
    line: int
    column: int
    raw: str = ""


SYMBOLS = {
    "[": "LBRACKET",
    "]": "RBRACKET",
    ",": "COMMA",
}

ESCAPES = {
    "n": "\n",
    "t": "\t",
    "\\": "\\",
    '"': '"',
    "'": "'",
}

# Characters that end a bare word. Quotes only open a string at the start of
# a token, so words such as don't stay whole.
_WORD_BREAK = set(" \t\r\n;#") | set(SYMBOLS)


class Lexer:
    def __init__(self, text: str, filename: str) -> None:
        self.text = text
        self.filename = filename
        self.index = 0
        self.line = 1
        self.column = 1

    def tokenize(self) -> List[Token]:
        tokens: List[Token] = []
        tokens_append = tokens.append
        _advance = self._advance
        symbols = SYMBOLS
        text = self.text
        n = len(text)

        while self.index < n:
            ch: str = text[self.index]
            if ch == " " or ch == "\t" or ch == "\r":
                _advance()
                continue
            if ch == "\n":
                tokens_append(Token("NEWLINE", "\n", self.line, self.column, "\n"))
                _advance()
                continue
            # Semicolon acts as a newline-token alias (outside string literals)
            if ch == ";":
                tokens_append(Token("NEWLINE", "\n", self.line, self.column, ";"))
                _advance()
                continue
            if ch == "#":
                self._consume_comment()
                continue
            if ch in symbols:
                tokens_append(Token(symbols[ch], ch, self.line, self.column, ch))
                _advance()
                continue
            if ch in ('"', "'"):
                tokens_append(self._consume_string())
                continue
            tokens_append(self._consume_word())
        tokens_append(Token("EOF", "", self.line, self.column))
        return tokens

    def _consume_comment(self) -> None:
        text = self.text
        n = len(text)
        _advance = self._advance
        while self.index < n and text[self.index] != "\n":
            _advance()

    def _consume_word(self) -> Token:
        # Words are classified later: the parser decides whether a word is an
        # opcode, a name, a type keyword or a numeric literal.
        line, col = self.line, self.column
        start = self.index
        text = self.text
        n = len(text)
        while self.index < n and text[self.index] not in _WORD_BREAK:
            self._advance()
        value = text[start:self.index]
        return Token("WORD", value, line, col, value)

    def _consume_string(self) -> Token:
        line, col = self.line, self.column
        start = self.index
        opening = self._peek()
        self._advance()  # consume opening quote
        chars: List[str] = []
        while not self._eof:
            ch = self._peek()
            if ch == opening:
                self._advance()
                return Token("STRING", "".join(chars), line, col, self.text[start:self.index])
            if ch == "\n":
                break
            if ch == "\\":
                self._advance()
                if self._eof:
                    break
                escaped = self._peek()
                if escaped not in ESCAPES:
                    raise ParseError(
                        f"Unknown escape '\\{escaped}' at {self.filename}:{self.line}:{self.column}",
                        line=self.line,
                        token="\\" + escaped,
                    )
                chars.append(ESCAPES[escaped])
                self._advance()
                continue
            chars.append(ch)
            self._advance()
        raise ParseError(
            f"Unterminated string literal at {self.filename}:{line}:{col}",
            line=line,
            token=self.text[start:self.index],
        )

    @property
    def _eof(self) -> bool:
        return self.index >= len(self.text)

    def _peek(self) -> str:
        return self.text[self.index]

    def _advance(self) -> None:
        if self.text[self.index] == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1
        self.index += 1
