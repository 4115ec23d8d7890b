"""Observer hooks fired by the interpreter around each executed instruction."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from lexer import LineAsmError


# Arguments each event passes after the interpreter itself.
EVENT_ARGS: Dict[str, str] = {
    "program_start": "program",
    "before_instruction": "instruction",
    "after_instruction": "instruction",
    "on_error": "fault",
    "program_end": "status",
}
EVENTS = frozenset(EVENT_ARGS)


class HookError(LineAsmError):
    pass


@dataclass(frozen=True)
class StepContext:
    step_index: int
    address: int
    opcode: str
    location: Any  # SourceLocation | None


@dataclass(frozen=True)
class Hook:
    handler: Callable[..., None]
    priority: int
    owner: str


@dataclass(frozen=True)
class StepRule:
    name: str
    every_n: int
    handler: Callable[[Any, StepContext], None]

    def due(self, ctx: StepContext) -> bool:
        return ctx.step_index % self.every_n == 0


def _check_event(event: str) -> None:
    if event not in EVENT_ARGS:
        raise HookError(f"Unknown event '{event}' (known: {', '.join(sorted(EVENT_ARGS))})")


@dataclass
class HookRegistry:
    hooks: Dict[str, List[Hook]] = field(default_factory=lambda: {event: [] for event in EVENT_ARGS})
    step_rules: List[StepRule] = field(default_factory=list)

    def on_event(
        self,
        event: str,
        handler: Optional[Callable[..., None]] = None,
        *,
        priority: int = 0,
        owner: str = "",
    ):
        """Register ``handler(interpreter, <event arg>)`` for ``event``.

        Without a handler this returns a decorator. Higher priorities run
        first; equal priorities keep registration order.
        """
        _check_event(event)

        def register(fn: Callable[..., None]) -> Callable[..., None]:
            hooks = self.hooks[event]
            hooks.append(Hook(fn, priority, owner or getattr(fn, "__name__", "")))
            hooks.sort(key=lambda hook: -hook.priority)
            return fn

        if handler is None:
            return register
        return register(handler)

    def emit(self, event: str, interpreter: Any, payload: Any) -> None:
        _check_event(event)
        for hook in list(self.hooks[event]):
            hook.handler(interpreter, payload)

    def add_step_rule(self, *, name: str, every_n: int, handler: Callable[[Any, StepContext], None]) -> None:
        if every_n < 1:
            raise HookError(f"Step rule '{name}' needs every_n >= 1, got {every_n}")
        self.step_rules.append(StepRule(name, every_n, handler))

    def after_step(self, interpreter: Any, ctx: StepContext) -> None:
        for rule in self.step_rules:
            if rule.due(ctx):
                rule.handler(interpreter, ctx)
