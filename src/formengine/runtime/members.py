"""
Property access for script values.

Arrays, strings, and numbers expose the method sets form code relies on;
dicts behave as plain objects; host objects opt in through `js_get` /
`js_set`, or fall back to public attributes.
"""

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal
from functools import cmp_to_key, partial
from typing import Any, Callable, Dict, List

from ..errors import EvaluationError
from .functions import BoundFunction, NativeFunction, ScriptFunction, call_value, function_arity
from .placeholder import Placeholder
from .values import (
    NAN,
    UNDEFINED,
    ErrorObject,
    array_index,
    format_number,
    is_nullish,
    is_number,
    normalize_number,
    same_value_zero,
    strict_equals,
    to_integer,
    to_number,
    to_property_key,
    to_string,
    truthy,
    typeof,
)


def _relative(value: Any, length: int, default: int) -> int:
    if value is UNDEFINED:
        return default
    index = to_integer(value)
    if index < 0:
        return int(max(length + index, 0))
    return int(min(index, length))


def _native(name: str, func: Callable[..., Any]) -> NativeFunction:
    return NativeFunction(name, func)


def iterate(value: Any) -> List[Any]:
    """Materialise a value for `for...of`, spread, and `Array.from`."""
    if isinstance(value, list):
        return list(value)
    if isinstance(value, str):
        return list(value)
    js_iter = getattr(value, "js_iter", None)
    if js_iter is not None:
        return list(js_iter())
    if isinstance(value, (tuple, set, frozenset)):
        return list(value)
    if is_nullish(value):
        raise EvaluationError(f"{to_string(value)} is not iterable")
    raise EvaluationError(f"{typeof(value)} is not iterable")


# ---------------------------------------------------------------------------
# Arrays
# ---------------------------------------------------------------------------


def _callback(func: Any, name: str) -> Any:
    if not callable(func):
        raise EvaluationError(f"{to_string(func)} is not a function (in Array.{name})")
    return func


def _array_map(arr: List[Any], func: Any, this: Any = UNDEFINED) -> List[Any]:
    func = _callback(func, "map")
    return [call_value(func, [item, index, arr], this) for index, item in enumerate(list(arr))]


def _array_filter(arr: List[Any], func: Any, this: Any = UNDEFINED) -> List[Any]:
    func = _callback(func, "filter")
    return [item for index, item in enumerate(list(arr)) if truthy(call_value(func, [item, index, arr], this))]


def _array_for_each(arr: List[Any], func: Any, this: Any = UNDEFINED) -> Any:
    func = _callback(func, "forEach")
    for index, item in enumerate(list(arr)):
        call_value(func, [item, index, arr], this)
    return UNDEFINED


def _array_reduce(arr: List[Any], func: Any, *initial: Any) -> Any:
    func = _callback(func, "reduce")
    items = list(enumerate(arr))
    if initial:
        acc = initial[0]
    elif items:
        acc = items.pop(0)[1]
    else:
        raise EvaluationError("Reduce of empty array with no initial value")
    for index, item in items:
        acc = call_value(func, [acc, item, index, arr])
    return acc


def _array_reduce_right(arr: List[Any], func: Any, *initial: Any) -> Any:
    func = _callback(func, "reduceRight")
    items = list(reversed(list(enumerate(arr))))
    if initial:
        acc = initial[0]
    elif items:
        acc = items.pop(0)[1]
    else:
        raise EvaluationError("Reduce of empty array with no initial value")
    for index, item in items:
        acc = call_value(func, [acc, item, index, arr])
    return acc


def _array_find(arr: List[Any], func: Any, this: Any = UNDEFINED) -> Any:
    func = _callback(func, "find")
    for index, item in enumerate(list(arr)):
        if truthy(call_value(func, [item, index, arr], this)):
            return item
    return UNDEFINED


def _array_find_index(arr: List[Any], func: Any, this: Any = UNDEFINED) -> int:
    func = _callback(func, "findIndex")
    for index, item in enumerate(list(arr)):
        if truthy(call_value(func, [item, index, arr], this)):
            return index
    return -1


def _array_find_last(arr: List[Any], func: Any, this: Any = UNDEFINED) -> Any:
    func = _callback(func, "findLast")
    for index in range(len(arr) - 1, -1, -1):
        if truthy(call_value(func, [arr[index], index, arr], this)):
            return arr[index]
    return UNDEFINED


def _array_find_last_index(arr: List[Any], func: Any, this: Any = UNDEFINED) -> int:
    func = _callback(func, "findLastIndex")
    for index in range(len(arr) - 1, -1, -1):
        if truthy(call_value(func, [arr[index], index, arr], this)):
            return index
    return -1


def _array_some(arr: List[Any], func: Any, this: Any = UNDEFINED) -> bool:
    func = _callback(func, "some")
    return any(truthy(call_value(func, [item, index, arr], this)) for index, item in enumerate(list(arr)))


def _array_every(arr: List[Any], func: Any, this: Any = UNDEFINED) -> bool:
    func = _callback(func, "every")
    return all(truthy(call_value(func, [item, index, arr], this)) for index, item in enumerate(list(arr)))


def _array_includes(arr: List[Any], value: Any = UNDEFINED, start: Any = 0) -> bool:
    begin = _relative(start, len(arr), 0)
    return any(same_value_zero(item, value) for item in arr[begin:])


def _array_index_of(arr: List[Any], value: Any = UNDEFINED, start: Any = 0) -> int:
    begin = _relative(start, len(arr), 0)
    for index in range(begin, len(arr)):
        if strict_equals(arr[index], value):
            return index
    return -1


def _array_last_index_of(arr: List[Any], value: Any = UNDEFINED) -> int:
    for index in range(len(arr) - 1, -1, -1):
        if strict_equals(arr[index], value):
            return index
    return -1


def _array_join(arr: List[Any], separator: Any = UNDEFINED) -> str:
    sep = "," if separator is UNDEFINED else to_string(separator)
    return sep.join("" if is_nullish(item) else to_string(item) for item in arr)


def _array_slice(arr: List[Any], start: Any = UNDEFINED, end: Any = UNDEFINED) -> List[Any]:
    length = len(arr)
    return arr[_relative(start, length, 0):_relative(end, length, length)]


def _array_concat(arr: List[Any], *others: Any) -> List[Any]:
    result = list(arr)
    for other in others:
        if isinstance(other, list):
            result.extend(other)
        else:
            result.append(other)
    return result


def _array_push(arr: List[Any], *items: Any) -> int:
    arr.extend(items)
    return len(arr)


def _array_pop(arr: List[Any]) -> Any:
    return arr.pop() if arr else UNDEFINED


def _array_shift(arr: List[Any]) -> Any:
    return arr.pop(0) if arr else UNDEFINED


def _array_unshift(arr: List[Any], *items: Any) -> int:
    arr[0:0] = list(items)
    return len(arr)


def _array_splice(arr: List[Any], start: Any = UNDEFINED, *rest: Any) -> List[Any]:
    length = len(arr)
    begin = _relative(start, length, 0) if start is not UNDEFINED else length
    if not rest:
        count = length - begin
    else:
        count = int(max(min(to_integer(rest[0]), length - begin), 0))
    removed = arr[begin:begin + count]
    arr[begin:begin + count] = list(rest[1:])
    return removed


def _default_compare(left: Any, right: Any) -> int:
    if left is UNDEFINED:
        return 0 if right is UNDEFINED else 1
    if right is UNDEFINED:
        return -1
    left_text, right_text = to_string(left), to_string(right)
    return (left_text > right_text) - (left_text < right_text)


def _array_sort(arr: List[Any], compare: Any = UNDEFINED) -> List[Any]:
    if compare is UNDEFINED:
        key = cmp_to_key(_default_compare)
    else:
        def script_compare(left: Any, right: Any) -> int:
            result = to_number(call_value(compare, [left, right]))
            if result != result or result == 0:
                return 0
            return -1 if result < 0 else 1

        key = cmp_to_key(script_compare)
    arr.sort(key=key)
    return arr


def _array_reverse(arr: List[Any]) -> List[Any]:
    arr.reverse()
    return arr


def _flatten(items: List[Any], depth: float) -> List[Any]:
    result: List[Any] = []
    for item in items:
        if isinstance(item, list) and depth >= 1:
            result.extend(_flatten(item, depth - 1))
        else:
            result.append(item)
    return result


def _array_flat(arr: List[Any], depth: Any = 1) -> List[Any]:
    return _flatten(arr, to_number(depth) if depth is not UNDEFINED else 1)


def _array_flat_map(arr: List[Any], func: Any, this: Any = UNDEFINED) -> List[Any]:
    return _flatten(_array_map(arr, func, this), 1)


def _array_fill(arr: List[Any], value: Any = UNDEFINED, start: Any = UNDEFINED, end: Any = UNDEFINED) -> List[Any]:
    length = len(arr)
    for index in range(_relative(start, length, 0), _relative(end, length, length)):
        arr[index] = value
    return arr


def _array_at(arr: List[Any], index: Any = 0) -> Any:
    position = to_integer(index)
    if position < 0:
        position += len(arr)
    if 0 <= position < len(arr):
        return arr[int(position)]
    return UNDEFINED


def _array_keys(arr: List[Any]) -> List[int]:
    return list(range(len(arr)))


def _array_values(arr: List[Any]) -> List[Any]:
    return list(arr)


def _array_entries(arr: List[Any]) -> List[List[Any]]:
    return [[index, item] for index, item in enumerate(arr)]


ARRAY_METHODS: Dict[str, Callable[..., Any]] = {
    "map": _array_map,
    "filter": _array_filter,
    "forEach": _array_for_each,
    "reduce": _array_reduce,
    "reduceRight": _array_reduce_right,
    "find": _array_find,
    "findIndex": _array_find_index,
    "findLast": _array_find_last,
    "findLastIndex": _array_find_last_index,
    "some": _array_some,
    "every": _array_every,
    "includes": _array_includes,
    "indexOf": _array_index_of,
    "lastIndexOf": _array_last_index_of,
    "join": _array_join,
    "slice": _array_slice,
    "concat": _array_concat,
    "push": _array_push,
    "pop": _array_pop,
    "shift": _array_shift,
    "unshift": _array_unshift,
    "splice": _array_splice,
    "sort": _array_sort,
    "reverse": _array_reverse,
    "flat": _array_flat,
    "flatMap": _array_flat_map,
    "fill": _array_fill,
    "at": _array_at,
    "keys": _array_keys,
    "values": _array_values,
    "entries": _array_entries,
    "toString": _array_join,
}


def _array_member(arr: List[Any], key: Any) -> Any:
    index = array_index(key)
    if index is not None:
        return arr[index] if index < len(arr) else UNDEFINED
    name = to_property_key(key)
    if name == "length":
        return len(arr)
    method = ARRAY_METHODS.get(name)
    if method is not None:
        return _native(name, partial(method, arr))
    return UNDEFINED


# ---------------------------------------------------------------------------
# Strings
# ---------------------------------------------------------------------------


def _string_split(text: str, separator: Any = UNDEFINED, limit: Any = UNDEFINED) -> List[str]:
    if separator is UNDEFINED:
        parts = [text]
    else:
        sep = to_string(separator)
        parts = list(text) if sep == "" else text.split(sep)
    if limit is not UNDEFINED:
        parts = parts[: int(max(to_integer(limit), 0))]
    return parts


def _string_includes(text: str, search: Any = UNDEFINED, position: Any = 0) -> bool:
    return to_string(search) in text[_relative(position, len(text), 0):]


def _string_starts_with(text: str, search: Any = UNDEFINED, position: Any = 0) -> bool:
    return text.startswith(to_string(search), _relative(position, len(text), 0))


def _string_ends_with(text: str, search: Any = UNDEFINED, end: Any = UNDEFINED) -> bool:
    return text[: _relative(end, len(text), len(text))].endswith(to_string(search))


def _string_index_of(text: str, search: Any = UNDEFINED, position: Any = 0) -> int:
    return text.find(to_string(search), _relative(position, len(text), 0))


def _string_last_index_of(text: str, search: Any = UNDEFINED) -> int:
    return text.rfind(to_string(search))


def _string_slice(text: str, start: Any = UNDEFINED, end: Any = UNDEFINED) -> str:
    length = len(text)
    return text[_relative(start, length, 0):_relative(end, length, length)]


def _string_substring(text: str, start: Any = UNDEFINED, end: Any = UNDEFINED) -> str:
    length = len(text)

    def clamp(value: Any, default: int) -> int:
        if value is UNDEFINED:
            return default
        return int(min(max(to_integer(value), 0), length))

    begin, finish = clamp(start, 0), clamp(end, length)
    if begin > finish:
        begin, finish = finish, begin
    return text[begin:finish]


def _string_substr(text: str, start: Any = UNDEFINED, length: Any = UNDEFINED) -> str:
    begin = _relative(start, len(text), 0)
    if length is UNDEFINED:
        return text[begin:]
    return text[begin:begin + int(max(to_integer(length), 0))]


def _replacement(replacement: Any, match: str, offset: int, text: str) -> str:
    if callable(replacement):
        return to_string(call_value(replacement, [match, offset, text]))
    return to_string(replacement).replace("$&", match)


def _string_replace(text: str, pattern: Any = UNDEFINED, replacement: Any = UNDEFINED) -> str:
    needle = to_string(pattern)
    offset = text.find(needle)
    if offset == -1:
        return text
    return text[:offset] + _replacement(replacement, needle, offset, text) + text[offset + len(needle):]


def _string_replace_all(text: str, pattern: Any = UNDEFINED, replacement: Any = UNDEFINED) -> str:
    needle = to_string(pattern)
    if not callable(replacement):
        return text.replace(needle, to_string(replacement).replace("$&", needle))
    pieces: List[str] = []
    position = 0
    while True:
        offset = text.find(needle, position)
        if offset == -1 or (needle == "" and offset >= len(text) + 1):
            break
        pieces.append(text[position:offset])
        pieces.append(_replacement(replacement, needle, offset, text))
        position = offset + max(len(needle), 1)
        if needle == "":
            if offset < len(text):
                pieces.append(text[offset])
            if offset >= len(text):
                break
    pieces.append(text[position:])
    return "".join(pieces)


# Longest string a script may build.
MAX_STRING_LENGTH = (1 << 29) - 24


def _check_string_length(length: Any) -> None:
    if length > MAX_STRING_LENGTH:
        raise EvaluationError("Invalid string length")


def _pad(text: str, target: Any, fill: Any, at_start: bool) -> str:
    length = to_integer(target)
    filler = " " if fill is UNDEFINED else to_string(fill)
    if length <= len(text) or not filler:
        return text
    _check_string_length(length)
    length = int(length)
    needed = length - len(text)
    padding = (filler * (needed // len(filler) + 1))[:needed]
    return padding + text if at_start else text + padding


def _string_char_at(text: str, index: Any = 0) -> str:
    position = to_integer(index)
    return text[int(position)] if 0 <= position < len(text) else ""


def _string_char_code_at(text: str, index: Any = 0) -> Any:
    position = to_integer(index)
    return ord(text[int(position)]) if 0 <= position < len(text) else NAN


def _string_at(text: str, index: Any = 0) -> Any:
    position = to_integer(index)
    if position < 0:
        position += len(text)
    return text[int(position)] if 0 <= position < len(text) else UNDEFINED


def _string_locale_compare(text: str, other: Any = UNDEFINED) -> int:
    other_text = to_string(other)
    left, right = text.casefold(), other_text.casefold()
    if left == right:
        left, right = text, other_text
    return (left > right) - (left < right)


def _string_repeat(text: str, count: Any = 0) -> str:
    times = to_integer(count)
    if times < 0 or math.isinf(times):
        raise EvaluationError("Invalid count value")
    _check_string_length(len(text) * times)
    return text * int(times)


def _string_concat(text: str, *others: Any) -> str:
    return text + "".join(to_string(other) for other in others)


STRING_METHODS: Dict[str, Callable[..., Any]] = {
    "toUpperCase": lambda text: text.upper(),
    "toLowerCase": lambda text: text.lower(),
    "toLocaleUpperCase": lambda text: text.upper(),
    "toLocaleLowerCase": lambda text: text.lower(),
    "trim": lambda text: text.strip(),
    "trimStart": lambda text: text.lstrip(),
    "trimEnd": lambda text: text.rstrip(),
    "split": _string_split,
    "includes": _string_includes,
    "startsWith": _string_starts_with,
    "endsWith": _string_ends_with,
    "indexOf": _string_index_of,
    "lastIndexOf": _string_last_index_of,
    "slice": _string_slice,
    "substring": _string_substring,
    "substr": _string_substr,
    "replace": _string_replace,
    "replaceAll": _string_replace_all,
    "padStart": lambda text, target=0, fill=UNDEFINED: _pad(text, target, fill, True),
    "padEnd": lambda text, target=0, fill=UNDEFINED: _pad(text, target, fill, False),
    "charAt": _string_char_at,
    "charCodeAt": _string_char_code_at,
    "codePointAt": _string_char_code_at,
    "at": _string_at,
    "localeCompare": _string_locale_compare,
    "repeat": _string_repeat,
    "concat": _string_concat,
    "toString": lambda text: text,
    "valueOf": lambda text: text,
}


def _string_member(text: str, key: Any) -> Any:
    index = array_index(key)
    if index is not None:
        return text[index] if index < len(text) else UNDEFINED
    name = to_property_key(key)
    if name == "length":
        return len(text)
    method = STRING_METHODS.get(name)
    if method is not None:
        return _native(name, partial(method, text))
    return UNDEFINED


# ---------------------------------------------------------------------------
# Numbers and booleans
# ---------------------------------------------------------------------------


def to_fixed(value: Any, digits: Any = 0) -> str:
    number = to_number(value)
    places = int(to_integer(digits))
    if places < 0 or places > 100:
        raise EvaluationError("toFixed() digits argument must be between 0 and 100")
    if isinstance(number, float) and (math.isnan(number) or math.isinf(number)):
        return format_number(number)
    if abs(number) >= 1e21:
        return format_number(number)
    quantum = Decimal(1).scaleb(-places)
    result = Decimal(number).quantize(quantum, rounding=ROUND_HALF_UP)
    text = format(result, "f")
    if text.startswith("-") and result == 0:
        text = text[1:]
    return text


def _number_to_string(number: Any, radix: Any = 10) -> str:
    base = 10 if radix is UNDEFINED else int(to_integer(radix))
    if base == 10:
        return format_number(number)
    if base < 2 or base > 36:
        raise EvaluationError("toString() radix must be between 2 and 36")
    if isinstance(number, float) and not number.is_integer():
        return format_number(number)
    value = int(number)
    digits = "0123456789abcdefghijklmnopqrstuvwxyz"
    if value == 0:
        return "0"
    sign = "-" if value < 0 else ""
    value = abs(value)
    out = []
    while value:
        value, rem = divmod(value, base)
        out.append(digits[rem])
    return sign + "".join(reversed(out))


def to_locale_string(number: Any) -> str:
    if isinstance(number, float) and (math.isnan(number) or math.isinf(number)):
        return format_number(number)
    rounded = Decimal(number).quantize(Decimal("0.001"), rounding=ROUND_HALF_UP)
    text = f"{rounded:,f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def _number_to_precision(number: Any, precision: Any = UNDEFINED) -> str:
    if precision is UNDEFINED:
        return format_number(number)
    digits = int(to_integer(precision))
    if number == 0:
        return to_fixed(0, digits - 1)
    magnitude = math.floor(math.log10(abs(number)))
    if magnitude < -6 or magnitude >= digits:
        return f"{number:.{digits - 1}e}".replace("e+0", "e+").replace("e-0", "e-")
    return to_fixed(number, max(digits - 1 - magnitude, 0))


NUMBER_METHODS: Dict[str, Callable[..., Any]] = {
    "toFixed": to_fixed,
    "toString": _number_to_string,
    "toLocaleString": lambda number, *_: to_locale_string(number),
    "toPrecision": _number_to_precision,
    "valueOf": lambda number: number,
}


def _number_member(number: Any, key: Any) -> Any:
    name = to_property_key(key)
    method = NUMBER_METHODS.get(name)
    if method is not None:
        return _native(name, partial(method, number))
    return UNDEFINED


def _boolean_member(value: bool, key: Any) -> Any:
    name = to_property_key(key)
    if name == "toString":
        return _native(name, lambda: to_string(value))
    if name == "valueOf":
        return _native(name, lambda: value)
    return UNDEFINED


# ---------------------------------------------------------------------------
# Objects and functions
# ---------------------------------------------------------------------------


def _object_member(obj: Dict[str, Any], name: str) -> Any:
    if name == "hasOwnProperty":
        return _native(name, lambda key=UNDEFINED: to_property_key(key) in obj)
    if name == "toString":
        return _native(name, lambda: to_string(obj))
    if name == "valueOf":
        return _native(name, lambda: obj)
    if name == "constructor":
        return getattr(obj, "constructor", UNDEFINED) or UNDEFINED
    return UNDEFINED


def _function_member(func: Any, name: str) -> Any:
    properties = getattr(func, "properties", None)
    if properties is not None and name in properties:
        return properties[name]
    if name == "name":
        return getattr(func, "name", "")
    if name == "length":
        return function_arity(func)
    if name == "call":
        return _native("call", lambda this=UNDEFINED, *args: call_value(func, list(args), this))
    if name == "apply":
        return _native(
            "apply",
            lambda this=UNDEFINED, args=UNDEFINED: call_value(func, [] if is_nullish(args) else iterate(args), this),
        )
    if name == "bind":
        return _native("bind", lambda this=UNDEFINED, *args: BoundFunction(func, this, args))
    if name == "prototype" and isinstance(func, ScriptFunction) and not func.is_arrow:
        return func.properties.setdefault("prototype", {})
    if name == "toString":
        return _native("toString", lambda: to_string(func))
    return UNDEFINED


def get_member(obj: Any, key: Any) -> Any:
    if obj is UNDEFINED or obj is None:
        raise EvaluationError(
            f"Cannot read properties of {to_string(obj)} (reading '{to_property_key(key)}')"
        )
    if isinstance(obj, dict):
        name = to_property_key(key)
        if name in obj:
            return obj[name]
        if isinstance(obj, ErrorObject) and name == "stack":
            return to_string(obj)
        return _object_member(obj, name)
    if isinstance(obj, list):
        return _array_member(obj, key)
    if isinstance(obj, str):
        return _string_member(obj, key)
    if isinstance(obj, bool):
        return _boolean_member(obj, key)
    if is_number(obj):
        return _number_member(obj, key)
    if isinstance(obj, Placeholder):
        return obj.member(to_property_key(key))
    js_get = getattr(obj, "js_get", None)
    if js_get is not None:
        return js_get(to_property_key(key))
    name = to_property_key(key)
    if isinstance(obj, (ScriptFunction, NativeFunction, BoundFunction)):
        return _function_member(obj, name)
    if name.startswith("_"):
        return UNDEFINED
    value = getattr(obj, name, UNDEFINED)
    if value is UNDEFINED and callable(obj):
        return _function_member(obj, name)
    return value


def set_member(obj: Any, key: Any, value: Any) -> None:
    if obj is UNDEFINED or obj is None:
        raise EvaluationError(
            f"Cannot set properties of {to_string(obj)} (setting '{to_property_key(key)}')"
        )
    if isinstance(obj, dict):
        obj[to_property_key(key)] = value
        return
    if isinstance(obj, list):
        index = array_index(key)
        if index is not None:
            if index >= len(obj):
                obj.extend([UNDEFINED] * (index + 1 - len(obj)))
            obj[index] = value
            return
        if to_property_key(key) == "length":
            length = int(to_integer(value))
            if length < len(obj):
                del obj[length:]
            else:
                obj.extend([UNDEFINED] * (length - len(obj)))
            return
        raise EvaluationError(f"Cannot set property '{to_property_key(key)}' on an array")
    if isinstance(obj, (str, bool, int, float, Placeholder)):
        return
    js_set = getattr(obj, "js_set", None)
    if js_set is not None:
        js_set(to_property_key(key), value)
        return
    name = to_property_key(key)
    properties = getattr(obj, "properties", None)
    if isinstance(properties, dict):
        properties[name] = value
        return
    try:
        setattr(obj, name, value)
    except (AttributeError, TypeError) as exc:
        raise EvaluationError(f"Cannot assign to property '{name}'") from exc


def delete_member(obj: Any, key: Any) -> bool:
    if isinstance(obj, dict):
        obj.pop(to_property_key(key), None)
    elif isinstance(obj, list):
        index = array_index(key)
        if index is not None and index < len(obj):
            obj[index] = UNDEFINED
    elif isinstance(getattr(obj, "properties", None), dict):
        obj.properties.pop(to_property_key(key), None)
    return True


def has_property(obj: Any, key: Any) -> bool:
    if isinstance(obj, dict):
        return to_property_key(key) in obj
    if isinstance(obj, list):
        index = array_index(key)
        if index is not None:
            return index < len(obj)
        name = to_property_key(key)
        return name == "length" or name in ARRAY_METHODS
    if obj is UNDEFINED or obj is None or isinstance(obj, (str, bool, int, float)):
        raise EvaluationError(f"Cannot use 'in' operator to search for '{to_property_key(key)}' in {to_string(obj)}")
    return get_member(obj, key) is not UNDEFINED


def spread_object(value: Any) -> Dict[str, Any]:
    """Own enumerable entries of a value, as `{...value}` copies them."""
    if isinstance(value, dict):
        return {to_property_key(key): item for key, item in value.items()}
    if isinstance(value, (list, str)):
        return {str(index): item for index, item in enumerate(value)}
    return {}


def number_result(value: Any) -> Any:
    return normalize_number(value) if isinstance(value, float) else value
