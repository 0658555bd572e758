"""
Script value model.

Script values are plain Python values: `None` is null, `list` is an array,
`dict` is an object, `int`/`float` are numbers. `UNDEFINED` is the only
value without a Python counterpart.
"""

from __future__ import annotations

import math
import re
from decimal import Decimal
from typing import Any, List, Union

Number = Union[int, float]

MAX_SAFE_INTEGER = 2**53 - 1


class _Undefined:
    _instance = None

    def __new__(cls) -> "_Undefined":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "undefined"

    def __bool__(self) -> bool:
        return False

    def __copy__(self) -> "_Undefined":
        return self

    def __deepcopy__(self, memo: dict) -> "_Undefined":
        return self

    def __reduce__(self) -> str:
        return "UNDEFINED"


UNDEFINED = _Undefined()
NAN = float("nan")
INFINITY = float("inf")


class ScriptObject(dict):
    """Object created by `new` on a script function; remembers its constructor."""

    def __init__(self, *args: Any, constructor: Any = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.constructor = constructor


class ErrorObject(dict):
    """Script-visible error value (`new Error(...)`, or a caught host exception)."""

    def __init__(self, message: str = "", name: str = "Error") -> None:
        super().__init__(name=name, message=message)

    @property
    def name(self) -> str:
        return str(self.get("name", "Error"))

    @property
    def message(self) -> str:
        return str(self.get("message", ""))


def is_nullish(value: Any) -> bool:
    return value is None or value is UNDEFINED


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def normalize_number(value: Number) -> Number:
    """Collapse integral floats to int so that `10 / 2` prints as `5`."""
    if isinstance(value, float) and value.is_integer() and abs(value) <= MAX_SAFE_INTEGER:
        return int(value)
    return value


def format_number(value: Number) -> str:
    if isinstance(value, int):
        return str(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    text = repr(value)
    if "e" not in text:
        return text
    if abs(value) >= 1e-6 and abs(value) < 1e21:
        return format(Decimal(text), "f")
    mantissa, exponent = text.split("e")
    exp_value = int(exponent)
    sign = "+" if exp_value > 0 else "-"
    return f"{mantissa}e{sign}{abs(exp_value)}"


def to_primitive(value: Any, hint: str = "default") -> Any:
    if value is None or value is UNDEFINED or isinstance(value, (str, bool, int, float)):
        return value
    convert = getattr(value, "js_primitive", None)
    if convert is not None:
        return convert(hint)
    return to_string(value)


def to_string(value: Any) -> str:
    if isinstance(value, str):
        return value
    if value is UNDEFINED:
        return "undefined"
    if value is None:
        return "null"
    if value is True:
        return "true"
    if value is False:
        return "false"
    if isinstance(value, (int, float)):
        return format_number(value)
    if isinstance(value, list):
        return ",".join("" if is_nullish(item) else to_string(item) for item in value)
    if isinstance(value, ErrorObject):
        return f"{value.name}: {value.message}" if value.message else value.name
    if isinstance(value, dict):
        return "[object Object]"
    convert = getattr(value, "js_primitive", None)
    if convert is not None:
        return to_string(convert("string"))
    if callable(value):
        name = getattr(value, "name", None) or getattr(value, "__name__", "")
        return f"function {name}() {{ [native code] }}"
    return str(value)


_NUMERIC_LITERAL = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


def _string_to_number(text: str) -> Number:
    stripped = text.strip()
    if not stripped:
        return 0
    if stripped in {"Infinity", "+Infinity"}:
        return INFINITY
    if stripped == "-Infinity":
        return -INFINITY
    lowered = stripped.lower()
    for prefix, base in (("0x", 16), ("0o", 8), ("0b", 2)):
        if lowered.startswith(prefix):
            try:
                return int(stripped[2:], base)
            except ValueError:
                return NAN
    if not _NUMERIC_LITERAL.fullmatch(stripped):
        return NAN
    if stripped.lstrip("+-").isdigit():
        return int(stripped)
    return normalize_number(float(stripped))


def to_number(value: Any) -> Number:
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return value
    if value is UNDEFINED:
        return NAN
    if value is None:
        return 0
    if isinstance(value, str):
        return _string_to_number(value)
    return to_number(to_primitive(value, "number"))


def to_integer(value: Any) -> Number:
    number = to_number(value)
    if isinstance(number, int):
        return number
    if math.isnan(number):
        return 0
    if math.isinf(number):
        return number
    return int(number)


def to_int32(value: Any) -> int:
    number = to_number(value)
    if isinstance(number, float) and (math.isnan(number) or math.isinf(number)):
        return 0
    result = int(number) % 2**32
    return result - 2**32 if result >= 2**31 else result


def to_uint32(value: Any) -> int:
    return to_int32(value) % 2**32


def truthy(value: Any) -> bool:
    if value is UNDEFINED or value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0 and value == value
    if isinstance(value, str):
        return bool(value)
    return True


def typeof(value: Any) -> str:
    if value is UNDEFINED:
        return "undefined"
    if value is None:
        return "object"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (dict, list)):
        return "object"
    if callable(value):
        return "function"
    return "object"


def _category(value: Any) -> str:
    if value is UNDEFINED:
        return "undefined"
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    return "object"


def strict_equals(left: Any, right: Any) -> bool:
    kind = _category(left)
    if kind != _category(right):
        return False
    if kind in {"number", "string", "boolean"}:
        return left == right
    return left is right


def same_value_zero(left: Any, right: Any) -> bool:
    if is_number(left) and is_number(right) and left != left and right != right:
        return True
    return strict_equals(left, right)


def loose_equals(left: Any, right: Any) -> bool:
    left_kind = _category(left)
    right_kind = _category(right)
    if left_kind in {"undefined", "null"} or right_kind in {"undefined", "null"}:
        return left_kind in {"undefined", "null"} and right_kind in {"undefined", "null"}
    if left_kind == right_kind:
        return strict_equals(left, right)
    if left_kind == "boolean":
        return loose_equals(int(left), right)
    if right_kind == "boolean":
        return loose_equals(left, int(right))
    if left_kind == "number" and right_kind == "string":
        return left == to_number(right)
    if left_kind == "string" and right_kind == "number":
        return to_number(left) == right
    if left_kind == "object":
        return loose_equals(to_primitive(left), right)
    if right_kind == "object":
        return loose_equals(left, to_primitive(right))
    return False


def to_property_key(value: Any) -> str:
    if isinstance(value, str):
        return value
    return to_string(value)


def array_index(key: Any) -> int | None:
    """Return the list index a property key denotes, or None."""
    if isinstance(key, bool):
        return None
    if isinstance(key, int):
        return key if key >= 0 else None
    if isinstance(key, float):
        return int(key) if key.is_integer() and key >= 0 else None
    if isinstance(key, str) and key.isdigit() and (key == "0" or not key.startswith("0")):
        return int(key)
    return None


def object_keys(value: Any) -> List[str]:
    if isinstance(value, dict):
        return [to_property_key(key) for key in value.keys()]
    if isinstance(value, (list, str)):
        return [str(index) for index in range(len(value))]
    return []
