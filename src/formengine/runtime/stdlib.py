"""
Standard global objects available to every script: Object, Array, JSON,
Math, String, Number, Boolean, Date, Set, Map, errors, parsing helpers,
console and timers.
"""

from __future__ import annotations

import json
import logging
import math
import random
import re
import time
from datetime import datetime, timedelta, timezone
from itertools import count
from typing import Any, Callable, Dict, List, Optional
from urllib.parse import quote, unquote

from ..errors import EvaluationError
from .functions import NativeFunction, ScriptFunction, call_value
from .members import iterate, spread_object
from .values import (
    INFINITY,
    MAX_SAFE_INTEGER,
    NAN,
    UNDEFINED,
    ErrorObject,
    format_number,
    is_nullish,
    is_number,
    normalize_number,
    object_keys,
    same_value_zero,
    to_integer,
    to_number,
    to_property_key,
    to_string,
    truthy,
)

console_logger = logging.getLogger("formengine.console")


def _native(name: str, func: Callable[..., Any], **properties: Any) -> NativeFunction:
    return NativeFunction(name, func, properties)


# ---------------------------------------------------------------------------
# JSON
# ---------------------------------------------------------------------------


def _json_value(value: Any, indent: str, depth: int, stack: List[int]) -> Optional[str]:
    to_json = getattr(value, "js_json", None)
    if to_json is not None:
        value = to_json()
    if value is None:
        return "null"
    if value is True:
        return "true"
    if value is False:
        return "false"
    if is_number(value):
        if isinstance(value, float) and (math.isnan(value) or math.isinf(value)):
            return "null"
        return format_number(value)
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)
    if value is UNDEFINED or callable(value):
        return None
    if id(value) in stack:
        raise EvaluationError("Converting circular structure to JSON")
    stack.append(id(value))
    try:
        inner = "\n" + indent * (depth + 1) if indent else ""
        outer = "\n" + indent * depth if indent else ""
        if isinstance(value, list):
            items = [_json_value(item, indent, depth + 1, stack) or "null" for item in value]
            if not items:
                return "[]"
            return "[" + inner + ("," + inner).join(items) + outer + "]"
        if isinstance(value, dict):
            colon = ": " if indent else ":"
            entries = []
            for key, item in value.items():
                encoded = _json_value(item, indent, depth + 1, stack)
                if encoded is not None:
                    entries.append(json.dumps(to_property_key(key), ensure_ascii=False) + colon + encoded)
            if not entries:
                return "{}"
            return "{" + inner + ("," + inner).join(entries) + outer + "}"
        return "{}"
    finally:
        stack.pop()


def json_stringify(value: Any, replacer: Any = UNDEFINED, space: Any = UNDEFINED) -> Any:
    if isinstance(space, str):
        indent = space[:10]
    elif is_number(space):
        indent = " " * int(max(min(to_integer(space), 10), 0))
    else:
        indent = ""
    result = _json_value(value, indent, 0, [])
    return UNDEFINED if result is None else result


def _from_json(value: Any) -> Any:
    if isinstance(value, float):
        return normalize_number(value)
    if isinstance(value, list):
        return [_from_json(item) for item in value]
    if isinstance(value, dict):
        return {key: _from_json(item) for key, item in value.items()}
    return value


def json_parse(text: Any = UNDEFINED, reviver: Any = UNDEFINED) -> Any:
    try:
        return _from_json(json.loads(to_string(text)))
    except json.JSONDecodeError as exc:
        raise EvaluationError(f"Unexpected token in JSON at position {exc.pos}") from exc


# ---------------------------------------------------------------------------
# Object / Array
# ---------------------------------------------------------------------------


def _require_object(value: Any) -> Any:
    if is_nullish(value):
        raise EvaluationError("Cannot convert undefined or null to object")
    return value


def _object_assign(target: Any = UNDEFINED, *sources: Any) -> Any:
    _require_object(target)
    for source in sources:
        if isinstance(target, dict):
            target.update(spread_object(source))
    return target


def _object_keys(value: Any = UNDEFINED) -> List[str]:
    return object_keys(_require_object(value))


def _object_entries(value: Any = UNDEFINED) -> List[List[Any]]:
    _require_object(value)
    if isinstance(value, dict):
        return [[to_property_key(key), item] for key, item in value.items()]
    if isinstance(value, (list, str)):
        return [[str(index), item] for index, item in enumerate(value)]
    return []


def _object_values(value: Any = UNDEFINED) -> List[Any]:
    return [entry[1] for entry in _object_entries(value)]


def _object_from_entries(entries: Any = UNDEFINED) -> Dict[str, Any]:
    result: Dict[str, Any] = {}
    for entry in iterate(entries):
        pair = iterate(entry)
        result[to_property_key(pair[0] if pair else UNDEFINED)] = pair[1] if len(pair) > 1 else UNDEFINED
    return result


def _object_create(proto: Any = UNDEFINED, *_: Any) -> Dict[str, Any]:
    return dict(proto) if isinstance(proto, dict) else {}


def _object_is(left: Any = UNDEFINED, right: Any = UNDEFINED) -> bool:
    if is_number(left) and is_number(right) and left == 0 and right == 0:
        return math.copysign(1, left) == math.copysign(1, right)
    return same_value_zero(left, right)


def _object_call(value: Any = UNDEFINED) -> Any:
    return {} if is_nullish(value) else value


def build_object() -> NativeFunction:
    return NativeFunction(
        "Object",
        _object_call,
        {
            "keys": _native("keys", _object_keys),
            "values": _native("values", _object_values),
            "entries": _native("entries", _object_entries),
            "assign": _native("assign", _object_assign),
            "fromEntries": _native("fromEntries", _object_from_entries),
            "freeze": _native("freeze", lambda value=UNDEFINED: value),
            "seal": _native("seal", lambda value=UNDEFINED: value),
            "isFrozen": _native("isFrozen", lambda value=UNDEFINED: False),
            "create": _native("create", _object_create),
            "is": _native("is", _object_is),
            "hasOwn": _native("hasOwn", lambda value=UNDEFINED, key=UNDEFINED: isinstance(value, dict) and to_property_key(key) in value),
            "getOwnPropertyNames": _native("getOwnPropertyNames", _object_keys),
        },
        construct=lambda value=UNDEFINED: {} if is_nullish(value) else value,
    )


def _array_from(source: Any = UNDEFINED, mapper: Any = UNDEFINED) -> List[Any]:
    if isinstance(source, dict) and "length" in source:
        items = [source.get(str(index), UNDEFINED) for index in range(int(to_integer(source["length"])))]
    elif is_nullish(source):
        raise EvaluationError("Array.from requires an array-like object")
    else:
        items = iterate(source)
    if mapper is UNDEFINED:
        return items
    return [call_value(mapper, [item, index]) for index, item in enumerate(items)]


def _array_construct(*args: Any) -> List[Any]:
    if len(args) == 1 and is_number(args[0]):
        return [UNDEFINED] * int(to_integer(args[0]))
    return list(args)


def build_array() -> NativeFunction:
    return NativeFunction(
        "Array",
        _array_construct,
        {
            "isArray": _native("isArray", lambda value=UNDEFINED: isinstance(value, list)),
            "from": _native("from", _array_from),
            "of": _native("of", lambda *items: list(items)),
        },
        construct=_array_construct,
        instance_check=lambda value: isinstance(value, list),
    )


# ---------------------------------------------------------------------------
# Math
# ---------------------------------------------------------------------------


def _math_round(value: Any = UNDEFINED) -> Any:
    number = to_number(value)
    if isinstance(number, float) and (math.isnan(number) or math.isinf(number)):
        return number
    return int(math.floor(number + 0.5))


def _math_extreme(pick: Callable[..., Any], empty: float) -> Callable[..., Any]:
    def compute(*values: Any) -> Any:
        numbers = [to_number(value) for value in values]
        if not numbers:
            return empty
        if any(number != number for number in numbers):
            return NAN
        return pick(numbers)

    return compute


def _unary_math(func: Callable[[float], float]) -> Callable[..., Any]:
    def compute(value: Any = UNDEFINED) -> Any:
        number = to_number(value)
        try:
            return normalize_number(func(number))
        except (ValueError, OverflowError):
            return NAN

    return compute


def _math_pow(base: Any = UNDEFINED, exponent: Any = UNDEFINED) -> Any:
    return power(to_number(base), to_number(exponent))


def power(base: Any, exponent: Any) -> Any:
    try:
        result = base ** exponent
    except ZeroDivisionError:
        return INFINITY
    except OverflowError:
        return INFINITY
    if isinstance(result, complex):
        return NAN
    return normalize_number(result) if isinstance(result, float) else result


def _sign(value: float) -> Any:
    if value != value:
        return NAN
    return (value > 0) - (value < 0)


def build_math() -> Dict[str, Any]:
    return {
        "PI": math.pi,
        "E": math.e,
        "LN2": math.log(2),
        "LN10": math.log(10),
        "SQRT2": math.sqrt(2),
        "abs": _native("abs", _unary_math(abs)),
        "floor": _native("floor", _unary_math(lambda x: x if math.isinf(x) or x != x else math.floor(x))),
        "ceil": _native("ceil", _unary_math(lambda x: x if math.isinf(x) or x != x else math.ceil(x))),
        "trunc": _native("trunc", _unary_math(lambda x: x if math.isinf(x) or x != x else math.trunc(x))),
        "round": _native("round", _math_round),
        "sign": _native("sign", _unary_math(_sign)),
        "sqrt": _native("sqrt", _unary_math(math.sqrt)),
        "cbrt": _native("cbrt", _unary_math(lambda x: math.copysign(abs(x) ** (1 / 3), x))),
        "exp": _native("exp", _unary_math(math.exp)),
        "log": _native("log", _unary_math(lambda x: -INFINITY if x == 0 else math.log(x))),
        "log10": _native("log10", _unary_math(lambda x: -INFINITY if x == 0 else math.log10(x))),
        "log2": _native("log2", _unary_math(lambda x: -INFINITY if x == 0 else math.log2(x))),
        "sin": _native("sin", _unary_math(math.sin)),
        "cos": _native("cos", _unary_math(math.cos)),
        "tan": _native("tan", _unary_math(math.tan)),
        "atan": _native("atan", _unary_math(math.atan)),
        "atan2": _native("atan2", lambda y=UNDEFINED, x=UNDEFINED: math.atan2(to_number(y), to_number(x))),
        "hypot": _native("hypot", lambda *values: normalize_number(math.hypot(*(to_number(v) for v in values)))),
        "pow": _native("pow", _math_pow),
        "min": _native("min", _math_extreme(min, INFINITY)),
        "max": _native("max", _math_extreme(max, -INFINITY)),
        "random": _native("random", random.random),
    }


# ---------------------------------------------------------------------------
# String / Number / Boolean
# ---------------------------------------------------------------------------


def _string_call(*args: Any) -> str:
    return to_string(args[0]) if args else ""


def build_string() -> NativeFunction:
    return NativeFunction(
        "String",
        _string_call,
        {"fromCharCode": _native("fromCharCode", lambda *codes: "".join(chr(int(to_integer(code))) for code in codes))},
        construct=_string_call,
        instance_check=lambda value: isinstance(value, str),
    )


_INT_PREFIX = re.compile(r"^\s*([+-]?)(0[xX])?")


def parse_int(value: Any = UNDEFINED, radix: Any = UNDEFINED) -> Any:
    text = to_string(value)
    match = _INT_PREFIX.match(text)
    sign = -1 if match and match.group(1) == "-" else 1
    base = 0 if radix is UNDEFINED else int(to_integer(radix))
    rest = text[match.end():] if match else text
    if match and match.group(2):
        if base in (0, 16):
            base = 16
        else:
            rest = text[match.end(1):]
    if base == 0:
        base = 10
    if base < 2 or base > 36:
        return NAN
    digits = "0123456789abcdefghijklmnopqrstuvwxyz"[:base]
    end = 0
    while end < len(rest) and rest[end].lower() in digits:
        end += 1
    if end == 0:
        return NAN
    return sign * int(rest[:end], base)


_FLOAT_PREFIX = re.compile(r"^\s*([+-]?(?:Infinity|\d+\.?\d*(?:[eE][+-]?\d+)?|\.\d+(?:[eE][+-]?\d+)?))")


def parse_float(value: Any = UNDEFINED) -> Any:
    match = _FLOAT_PREFIX.match(to_string(value))
    if not match:
        return NAN
    text = match.group(1)
    if text.lstrip("+-") == "Infinity":
        return -INFINITY if text.startswith("-") else INFINITY
    return normalize_number(float(text))


def _is_nan(value: Any = UNDEFINED) -> bool:
    number = to_number(value)
    return number != number


def _is_finite(value: Any = UNDEFINED) -> bool:
    number = to_number(value)
    return not (isinstance(number, float) and (math.isnan(number) or math.isinf(number)))


def _number_call(*args: Any) -> Any:
    if not args:
        return 0
    number = to_number(args[0])
    return normalize_number(number) if isinstance(number, float) else number


def build_number() -> NativeFunction:
    return NativeFunction(
        "Number",
        _number_call,
        {
            "isInteger": _native(
                "isInteger",
                lambda value=UNDEFINED: is_number(value) and _is_finite(value) and float(value).is_integer(),
            ),
            "isSafeInteger": _native(
                "isSafeInteger",
                lambda value=UNDEFINED: is_number(value)
                and _is_finite(value)
                and float(value).is_integer()
                and abs(value) <= MAX_SAFE_INTEGER,
            ),
            "isFinite": _native("isFinite", lambda value=UNDEFINED: is_number(value) and _is_finite(value)),
            "isNaN": _native("isNaN", lambda value=UNDEFINED: is_number(value) and value != value),
            "parseFloat": _native("parseFloat", parse_float),
            "parseInt": _native("parseInt", parse_int),
            "MAX_SAFE_INTEGER": MAX_SAFE_INTEGER,
            "MIN_SAFE_INTEGER": -MAX_SAFE_INTEGER,
            "EPSILON": 2.0**-52,
            "MAX_VALUE": 1.7976931348623157e308,
            "POSITIVE_INFINITY": INFINITY,
            "NEGATIVE_INFINITY": -INFINITY,
            "NaN": NAN,
        },
        construct=_number_call,
        instance_check=is_number,
    )


def build_boolean() -> NativeFunction:
    return NativeFunction(
        "Boolean",
        lambda *args: truthy(args[0]) if args else False,
        construct=lambda *args: truthy(args[0]) if args else False,
        instance_check=lambda value: isinstance(value, bool),
    )


# ---------------------------------------------------------------------------
# Date
# ---------------------------------------------------------------------------


_DAY_NAMES = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
_MONTH_NAMES = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def _local_ms(year: int, month: int, day: int = 1, hours: int = 0, minutes: int = 0, seconds: int = 0, ms: int = 0) -> float:
    extra_years, month = divmod(month, 12)
    base = datetime(year + extra_years, month + 1, 1)
    moment = base + timedelta(days=day - 1, hours=hours, minutes=minutes, seconds=seconds, milliseconds=ms)
    return moment.timestamp() * 1000


def _parse_date_text(text: str) -> float:
    stripped = text.strip()
    if re.fullmatch(r"\d{4}-\d{2}-\d{2}", stripped):
        return datetime.fromisoformat(stripped).replace(tzinfo=timezone.utc).timestamp() * 1000
    candidate = stripped.replace("Z", "+00:00")
    try:
        parsed = datetime.fromisoformat(candidate)
    except ValueError:
        return NAN
    return parsed.timestamp() * 1000


class JSDate:
    """Millisecond timestamp with the Date accessors form code uses."""

    def __init__(self, *args: Any) -> None:
        if not args:
            self.time: float = float(int(time.time() * 1000))
        elif len(args) == 1:
            value = args[0]
            if isinstance(value, JSDate):
                self.time = value.time
            elif isinstance(value, str):
                self.time = _parse_date_text(value)
            else:
                self.time = float(to_number(value))
        else:
            parts = [int(to_integer(arg)) for arg in args[:7]]
            self.time = _local_ms(*parts)

    @property
    def valid(self) -> bool:
        return not (math.isnan(self.time) or math.isinf(self.time))

    def local(self) -> datetime:
        if not self.valid:
            raise EvaluationError("Invalid time value")
        return datetime.fromtimestamp(self.time / 1000)

    def utc(self) -> datetime:
        if not self.valid:
            raise EvaluationError("Invalid time value")
        return datetime.fromtimestamp(self.time / 1000, tz=timezone.utc)

    def iso(self) -> str:
        moment = self.utc()
        return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"

    def js_primitive(self, hint: str) -> Any:
        if hint == "string":
            return self.to_display_string()
        return normalize_number(self.time)

    def js_json(self) -> Any:
        return self.iso() if self.valid else None

    def to_display_string(self) -> str:
        if not self.valid:
            return "Invalid Date"
        moment = self.local()
        offset = moment.astimezone().strftime("%z")
        return (
            f"{_DAY_NAMES[moment.weekday()]} {_MONTH_NAMES[moment.month - 1]} {moment.day:02d} {moment.year} "
            f"{moment.strftime('%H:%M:%S')} GMT{offset}"
        )

    def _getter(self, attribute: str) -> Callable[[], Any]:
        def read() -> Any:
            if not self.valid:
                return NAN
            moment = self.local()
            if attribute == "month":
                return moment.month - 1
            if attribute == "weekday":
                return (moment.weekday() + 1) % 7
            if attribute == "millisecond":
                return moment.microsecond // 1000
            return getattr(moment, attribute)

        return read

    def _setter(self, index: int) -> Callable[..., Any]:
        def write(*values: Any) -> Any:
            moment = self.local()
            parts = [moment.year, moment.month - 1, moment.day, moment.hour, moment.minute, moment.second, moment.microsecond // 1000]
            for offset, value in enumerate(values):
                if index + offset < len(parts):
                    parts[index + offset] = int(to_integer(value))
            self.time = _local_ms(*parts)
            return normalize_number(self.time)

        return write

    def _set_time(self, value: Any = UNDEFINED) -> Any:
        self.time = float(to_number(value))
        return normalize_number(self.time)

    def _timezone_offset(self) -> int:
        offset = self.local().astimezone().utcoffset() or timedelta(0)
        return -int(offset.total_seconds() // 60)

    def js_get(self, name: str) -> Any:
        methods: Dict[str, Callable[..., Any]] = {
            "getTime": lambda: normalize_number(self.time),
            "valueOf": lambda: normalize_number(self.time),
            "getFullYear": self._getter("year"),
            "getMonth": self._getter("month"),
            "getDate": self._getter("day"),
            "getDay": self._getter("weekday"),
            "getHours": self._getter("hour"),
            "getMinutes": self._getter("minute"),
            "getSeconds": self._getter("second"),
            "getMilliseconds": self._getter("millisecond"),
            "getTimezoneOffset": self._timezone_offset,
            "setFullYear": self._setter(0),
            "setMonth": self._setter(1),
            "setDate": self._setter(2),
            "setHours": self._setter(3),
            "setMinutes": self._setter(4),
            "setSeconds": self._setter(5),
            "setMilliseconds": self._setter(6),
            "setTime": self._set_time,
            "toISOString": self.iso,
            "toJSON": self.js_json,
            "toString": self.to_display_string,
            "toDateString": lambda: self.to_display_string()[:15],
            "toTimeString": lambda: self.to_display_string()[16:],
            "toLocaleDateString": lambda *_: self.local().strftime("%m/%d/%Y").lstrip("0").replace("/0", "/"),
            "toLocaleTimeString": lambda *_: self.local().strftime("%I:%M:%S %p").lstrip("0"),
            "toLocaleString": lambda *_: (
                self.local().strftime("%m/%d/%Y").lstrip("0").replace("/0", "/")
                + ", "
                + self.local().strftime("%I:%M:%S %p").lstrip("0")
            ),
        }
        method = methods.get(name)
        if method is None:
            return UNDEFINED
        return NativeFunction(name, method)

    def __repr__(self) -> str:
        return f"<Date {self.iso() if self.valid else 'Invalid Date'}>"


def build_date() -> NativeFunction:
    return NativeFunction(
        "Date",
        lambda *_: JSDate().to_display_string(),
        {
            "now": _native("now", lambda: int(time.time() * 1000)),
            "parse": _native("parse", lambda text=UNDEFINED: normalize_number(_parse_date_text(to_string(text)))),
        },
        construct=JSDate,
        instance_check=lambda value: isinstance(value, JSDate),
    )


# ---------------------------------------------------------------------------
# Set / Map
# ---------------------------------------------------------------------------


def _hash_key(value: Any) -> Any:
    if is_number(value) and value != value:
        return ("nan",)
    if isinstance(value, bool):
        return ("bool", value)
    if is_number(value):
        return ("number", float(value))
    if isinstance(value, str):
        return ("string", value)
    if value is None or value is UNDEFINED:
        return ("nullish", value is None)
    return ("object", id(value))


class JSMap:
    def __init__(self, entries: Any = UNDEFINED) -> None:
        self._entries: Dict[Any, List[Any]] = {}
        if not is_nullish(entries):
            for entry in iterate(entries):
                pair = iterate(entry)
                self.set(pair[0] if pair else UNDEFINED, pair[1] if len(pair) > 1 else UNDEFINED)

    def set(self, key: Any = UNDEFINED, value: Any = UNDEFINED) -> "JSMap":
        slot = _hash_key(key)
        if slot in self._entries:
            self._entries[slot][1] = value
        else:
            self._entries[slot] = [key, value]
        return self

    def get(self, key: Any = UNDEFINED) -> Any:
        entry = self._entries.get(_hash_key(key))
        return entry[1] if entry else UNDEFINED

    def has(self, key: Any = UNDEFINED) -> bool:
        return _hash_key(key) in self._entries

    def delete(self, key: Any = UNDEFINED) -> bool:
        return self._entries.pop(_hash_key(key), None) is not None

    def clear(self) -> None:
        self._entries.clear()

    def for_each(self, callback: Any) -> None:
        for key, value in list(self._entries.values()):
            call_value(callback, [value, key, self])

    def js_iter(self) -> List[List[Any]]:
        return [[key, value] for key, value in self._entries.values()]

    def js_get(self, name: str) -> Any:
        if name == "size":
            return len(self._entries)
        methods: Dict[str, Callable[..., Any]] = {
            "set": self.set,
            "get": self.get,
            "has": self.has,
            "delete": self.delete,
            "clear": self.clear,
            "forEach": self.for_each,
            "keys": lambda: [key for key, _ in self._entries.values()],
            "values": lambda: [value for _, value in self._entries.values()],
            "entries": self.js_iter,
        }
        method = methods.get(name)
        return NativeFunction(name, method) if method is not None else UNDEFINED


class JSSet:
    def __init__(self, values: Any = UNDEFINED) -> None:
        self._values: Dict[Any, Any] = {}
        if not is_nullish(values):
            for value in iterate(values):
                self.add(value)

    def add(self, value: Any = UNDEFINED) -> "JSSet":
        self._values.setdefault(_hash_key(value), value)
        return self

    def has(self, value: Any = UNDEFINED) -> bool:
        return _hash_key(value) in self._values

    def delete(self, value: Any = UNDEFINED) -> bool:
        slot = _hash_key(value)
        if slot not in self._values:
            return False
        del self._values[slot]
        return True

    def clear(self) -> None:
        self._values.clear()

    def for_each(self, callback: Any) -> None:
        for value in list(self._values.values()):
            call_value(callback, [value, value, self])

    def js_iter(self) -> List[Any]:
        return list(self._values.values())

    def js_get(self, name: str) -> Any:
        if name == "size":
            return len(self._values)
        methods: Dict[str, Callable[..., Any]] = {
            "add": self.add,
            "has": self.has,
            "delete": self.delete,
            "clear": self.clear,
            "forEach": self.for_each,
            "keys": self.js_iter,
            "values": self.js_iter,
            "entries": lambda: [[value, value] for value in self._values.values()],
        }
        method = methods.get(name)
        return NativeFunction(name, method) if method is not None else UNDEFINED


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


def build_error(name: str) -> NativeFunction:
    def create(message: Any = UNDEFINED, *_: Any) -> ErrorObject:
        return ErrorObject("" if message is UNDEFINED else to_string(message), name)

    def check(value: Any) -> bool:
        return isinstance(value, ErrorObject) and (name == "Error" or value.name == name)

    return NativeFunction(name, create, construct=create, instance_check=check)


# ---------------------------------------------------------------------------
# console / timers / URI helpers
# ---------------------------------------------------------------------------


def _console_method(level: int) -> Callable[..., Any]:
    def emit(*args: Any) -> Any:
        if console_logger.isEnabledFor(level):
            console_logger.log(level, " ".join(_console_text(arg) for arg in args))
        return UNDEFINED

    return emit


def _console_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (dict, list)):
        try:
            encoded = json_stringify(value)
        except EvaluationError:
            return to_string(value)
        return encoded if isinstance(encoded, str) else to_string(value)
    return to_string(value)


def build_console() -> Dict[str, Any]:
    return {
        "log": _native("log", _console_method(logging.INFO)),
        "info": _native("info", _console_method(logging.INFO)),
        "debug": _native("debug", _console_method(logging.DEBUG)),
        "warn": _native("warn", _console_method(logging.WARNING)),
        "error": _native("error", _console_method(logging.ERROR)),
        "table": _native("table", _console_method(logging.INFO)),
    }


def build_timers() -> Dict[str, Any]:
    """Timers never fire: rendering is synchronous and single-pass per request."""
    ids = count(1)

    def schedule(*_: Any) -> int:
        return next(ids)

    def cancel(*_: Any) -> Any:
        return UNDEFINED

    return {
        "setTimeout": _native("setTimeout", schedule),
        "setInterval": _native("setInterval", schedule),
        "requestAnimationFrame": _native("requestAnimationFrame", schedule),
        "clearTimeout": _native("clearTimeout", cancel),
        "clearInterval": _native("clearInterval", cancel),
        "cancelAnimationFrame": _native("cancelAnimationFrame", cancel),
    }


_URI_COMPONENT_SAFE = "-_.!~*'()"
_URI_SAFE = _URI_COMPONENT_SAFE + ";,/?:@&=+$#"


def build_standard_globals() -> Dict[str, Any]:
    """Fresh global table; script code may mutate the namespace objects."""
    globals_: Dict[str, Any] = {
        "Object": build_object(),
        "Array": build_array(),
        "String": build_string(),
        "Number": build_number(),
        "Boolean": build_boolean(),
        "Math": build_math(),
        "Date": build_date(),
        "JSON": {"stringify": _native("stringify", json_stringify), "parse": _native("parse", json_parse)},
        "Map": NativeFunction("Map", JSMap, construct=JSMap, instance_check=lambda value: isinstance(value, JSMap)),
        "Set": NativeFunction("Set", JSSet, construct=JSSet, instance_check=lambda value: isinstance(value, JSSet)),
        "parseInt": _native("parseInt", parse_int),
        "parseFloat": _native("parseFloat", parse_float),
        "isNaN": _native("isNaN", _is_nan),
        "isFinite": _native("isFinite", _is_finite),
        "encodeURIComponent": _native("encodeURIComponent", lambda text=UNDEFINED: quote(to_string(text), safe=_URI_COMPONENT_SAFE)),
        "encodeURI": _native("encodeURI", lambda text=UNDEFINED: quote(to_string(text), safe=_URI_SAFE)),
        "decodeURIComponent": _native("decodeURIComponent", lambda text=UNDEFINED: unquote(to_string(text))),
        "decodeURI": _native("decodeURI", lambda text=UNDEFINED: unquote(to_string(text))),
        "console": build_console(),
        "document": UNDEFINED,
        "window": UNDEFINED,
        "undefined": UNDEFINED,
        "NaN": NAN,
        "Infinity": INFINITY,
        "Error": build_error("Error"),
        "TypeError": build_error("TypeError"),
        "RangeError": build_error("RangeError"),
    }
    globals_.update(build_timers())
    return globals_


def is_instance(value: Any, constructor: Any) -> bool:
    """`value instanceof constructor`."""
    if isinstance(constructor, NativeFunction):
        if constructor.instance_check is not None:
            return bool(constructor.instance_check(value))
        return False
    if isinstance(constructor, ScriptFunction):
        return getattr(value, "constructor", None) is constructor
    if isinstance(constructor, type):
        return isinstance(value, constructor)
    if not callable(constructor):
        raise EvaluationError("Right-hand side of 'instanceof' is not callable")
    return False
