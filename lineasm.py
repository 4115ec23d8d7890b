"""LineASM entry point and REPL wiring."""
from __future__ import annotations
import argparse
import sys
from typing import List, Optional

from bridge import ConsoleBridge, IOBridge
from hooks import HookRegistry
from interpreter import Interpreter, RuntimeFault, SymbolTable, TracebackFormatter
from lexer import StaticError
from parser import Instruction


def _trace_hook(interpreter: Interpreter, instruction: Instruction) -> None:
    print(
        f"[trace] {instruction.address:04d} {instruction.location.line:>4}: {instruction.location.statement}",
        file=sys.stderr,
    )


def run_repl(verbose: bool, bridge: Optional[IOBridge] = None) -> int:
    print("\x1b[38;2;153;221;255mLineASM\033[0m REPL. Enter instructions, blank line to run buffer.")
    bridge = bridge or ConsoleBridge()
    symbols = SymbolTable()
    buffer: List[str] = []

    while True:
        prompt = "\x1b[38;2;153;221;255m>>>\033[0m " if not buffer else "\x1b[38;2;153;221;255m..>\033[0m "
        try:
            line = input(prompt)
        except EOFError:
            print()
            break

        if line.strip() != "":
            buffer.append(line)
            continue
        if not buffer:
            continue

        source_text = "\n".join(buffer)
        buffer.clear()
        # Labels are scoped to one buffer; variables persist across buffers.
        interpreter = Interpreter(source=source_text, filename="<repl>", verbose=verbose, bridge=bridge, symbols=symbols)
        try:
            interpreter.run()
        except StaticError as error:
            print(f"{error.__class__.__name__}: {error}", file=sys.stderr)
        except RuntimeFault as error:
            formatter = TracebackFormatter(interpreter)
            print(formatter.format_text(error, verbose=verbose), file=sys.stderr)

    return 0


def run_cli(argv: Optional[List[str]] = None, bridge: Optional[IOBridge] = None) -> int:
    parser = argparse.ArgumentParser(description="LineASM reference interpreter")
    parser.add_argument("program", nargs="?", help="Source file path or literal source with -source")
    parser.add_argument("-source", "--source", dest="source_mode", action="store_true", help="Treat program argument as literal source text")
    parser.add_argument("-verbose", "--verbose", dest="verbose", action="store_true", help="Emit env snapshots in tracebacks")
    parser.add_argument("--traceback-json", action="store_true", help="Also emit JSON traceback")
    parser.add_argument("--max-steps", type=int, default=None, help="Fault after executing this many instructions")
    parser.add_argument("--trace", action="store_true", help="Print each instruction to stderr before it executes")
    args = parser.parse_args(argv)

    if args.program is None:
        if args.source_mode:
            print("-source requires a program string", file=sys.stderr)
            return 1
        return run_repl(verbose=args.verbose, bridge=bridge)

    if args.source_mode:
        source_text = args.program
        filename = "<string>"
    else:
        filename = args.program
        try:
            with open(filename, "r", encoding="utf-8") as handle:
                source_text = handle.read()
        except OSError as exc:
            print(f"Failed to read {filename}: {exc}", file=sys.stderr)
            return 1

    hooks = HookRegistry()
    if args.trace:
        hooks.on_event("before_instruction", _trace_hook)

    interpreter = Interpreter(
        source=source_text,
        filename=filename,
        verbose=args.verbose,
        bridge=bridge,
        hooks=hooks,
        max_steps=args.max_steps,
    )
    try:
        interpreter.run()
    except StaticError as error:
        print(f"{error.__class__.__name__}: {error}", file=sys.stderr)
        return 1
    except RuntimeFault as error:
        formatter = TracebackFormatter(interpreter)
        print(formatter.format_text(error, verbose=args.verbose), file=sys.stderr)
        if args.traceback_json:
            print(formatter.to_json(error), file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(run_cli())
