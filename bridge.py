"""I/O channels used by PRINT and INPUT."""

from __future__ import annotations
import sys
from typing import Iterable, List, Optional, TextIO


class IOBridge:
    """Output and input channels consumed by the interpreter.

    ``read_line`` blocks until a line is available and raises ``EOFError``
    once the channel is closed.
    """

    def write_line(self, text: str) -> None:
        raise NotImplementedError

    def read_line(self) -> str:
        raise NotImplementedError


class ConsoleBridge(IOBridge):
    def __init__(self, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None) -> None:
        self.stdin = stdin
        self.stdout = stdout

    def write_line(self, text: str) -> None:
        out = self.stdout or sys.stdout
        out.write(text + "\n")
        out.flush()

    def read_line(self) -> str:
        handle = self.stdin or sys.stdin
        line = handle.readline()
        if line == "":
            raise EOFError("input channel closed")
        return line.rstrip("\r\n")


class BufferedBridge(IOBridge):
    """Scripted input lines and captured output, for embedding and tests."""

    def __init__(self, inputs: Iterable[str] = ()) -> None:
        self.pending: List[str] = list(inputs)
        self.output: List[str] = []
        self.closed = False

    def write_line(self, text: str) -> None:
        self.output.append(text)

    def read_line(self) -> str:
        if self.closed or not self.pending:
            raise EOFError("input channel closed")
        return self.pending.pop(0)

    def close(self) -> None:
        self.closed = True

    @property
    def text(self) -> str:
        return "".join(line + "\n" for line in self.output)
