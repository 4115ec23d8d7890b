"""Runtime value model: type tags, scalar values and arrays."""

from __future__ import annotations
import json
import math
import re
from dataclasses import dataclass
from decimal import Decimal
from fractions import Fraction
from typing import Any, Iterable, List, Optional

import numpy as np
from numpy.typing import NDArray


TYPE_INT = "INT"
TYPE_FLOAT = "FLOAT"
TYPE_BOOL = "BOOL"
TYPE_STRING = "STRING"
TYPE_ARRAY = "ARRAY"

SCALAR_TYPES = (TYPE_INT, TYPE_FLOAT, TYPE_BOOL, TYPE_STRING)
ALL_TYPES = SCALAR_TYPES + (TYPE_ARRAY,)
NUMERIC_TYPES = (TYPE_INT, TYPE_FLOAT)

_INT_TEXT = re.compile(r"[+-]?[0-9]+")
_FLOAT_TEXT = re.compile(r"[+-]?(?:[0-9]+\.[0-9]*|\.[0-9]+|[0-9]+)(?:[eE][+-]?[0-9]+)?|[+-]?(?:inf|infinity|nan)", re.IGNORECASE)


@dataclass(frozen=True, eq=False)
class Array:
    element_type: Optional[str]
    data: NDArray[Any]

    @classmethod
    def from_items(cls, element_type: Optional[str], items: Iterable[Any]) -> "Array":
        items = list(items)
        # Filled element by element so numpy never broadcasts string items.
        data = np.empty(len(items), dtype=object)
        for i, item in enumerate(items):
            data[i] = item
        return cls(element_type=element_type, data=data)

    def __len__(self) -> int:
        return int(self.data.shape[0])

    def items(self) -> List[Any]:
        return list(self.data)

    def slice(self, start: int, end: int) -> "Array":
        return Array(element_type=self.element_type, data=self.data[start:end].copy())

    def appended(self, item: Any, element_type: str) -> "Array":
        data = np.empty(len(self) + 1, dtype=object)
        data[: len(self)] = self.data
        data[len(self)] = item
        return Array(element_type=element_type, data=data)


@dataclass
class Value:
    type: str
    value: Any


def zero_value(type_name: str, element_type: Optional[str] = None) -> Value:
    if type_name == TYPE_INT:
        return Value(TYPE_INT, 0)
    if type_name == TYPE_FLOAT:
        return Value(TYPE_FLOAT, 0.0)
    if type_name == TYPE_BOOL:
        return Value(TYPE_BOOL, False)
    if type_name == TYPE_STRING:
        return Value(TYPE_STRING, "")
    if type_name == TYPE_ARRAY:
        return Value(TYPE_ARRAY, Array.from_items(element_type, []))
    raise ValueError(f"Unknown type '{type_name}'")


def format_float(x: float) -> str:
    if math.isnan(x):
        return "nan"
    if math.isinf(x):
        return "inf" if x > 0 else "-inf"
    return repr(x)


def int_text(number: int) -> str:
    """Decimal digits of an INT.

    Goes through Decimal so integers past the interpreter's int/str digit
    limit still render without touching the process-wide setting.
    """
    return str(Decimal(number))


def format_scalar(type_name: str, raw: Any) -> str:
    if type_name == TYPE_INT:
        return int_text(raw)
    if type_name == TYPE_FLOAT:
        return format_float(raw)
    if type_name == TYPE_BOOL:
        return "true" if raw else "false"
    if type_name == TYPE_STRING:
        return raw
    raise ValueError(f"Not a scalar type '{type_name}'")


def format_value(value: Value) -> str:
    """Canonical text for a value, used by PRINT and CONVERT."""
    if value.type == TYPE_ARRAY:
        array: Array = value.value
        rendered: List[str] = []
        for item in array.items():
            if array.element_type == TYPE_STRING:
                rendered.append(json.dumps(item))
            else:
                rendered.append(format_scalar(array.element_type or TYPE_INT, item))
        return "[" + ", ".join(rendered) + "]"
    return format_scalar(value.type, value.value)


def parse_int(text: str) -> int:
    stripped = text.strip()
    if not _INT_TEXT.fullmatch(stripped):
        raise ValueError(f"'{text}' is not an integer")
    return int(Decimal(stripped))


def parse_float(text: str) -> float:
    stripped = text.strip()
    if not _FLOAT_TEXT.fullmatch(stripped):
        raise ValueError(f"'{text}' is not a number")
    return float(stripped)


def parse_bool(text: str) -> bool:
    if text == "true":
        return True
    if text == "false":
        return False
    raise ValueError(f"'{text}' is not 'true' or 'false'")


def round_half_away(x: float) -> int:
    # Exact rational arithmetic so 0.49999999999999994 does not round up.
    frac = Fraction(*float(x).as_integer_ratio())
    n, d = frac.numerator, frac.denominator
    if n >= 0:
        return (2 * n + d) // (2 * d)
    return -((-2 * n + d) // (2 * d))


def trunc_div(a: int, b: int) -> int:
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b >= 0) else -q


def trunc_mod(a: int, b: int) -> int:
    r = abs(a) % abs(b)
    return r if a >= 0 else -r


def values_equal(left: Value, right: Value) -> bool:
    if left.type != right.type:
        return False
    if left.type == TYPE_ARRAY:
        a, b = left.value, right.value
        if len(a) and len(b) and a.element_type != b.element_type:
            return False
        return a.items() == b.items()
    return left.value == right.value


def snapshot(value: Value) -> str:
    if value.type == TYPE_ARRAY:
        array: Array = value.value
        return f"{value.type}<{array.element_type or '?'}>:[{len(array)}]"
    rendered = format_value(value)
    if len(rendered) > 80:
        rendered = rendered[:77] + "..."
    return f"{value.type}:{rendered}"
