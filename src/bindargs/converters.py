"""
String-to-value conversion for parameter types.

Every converter takes the raw command-line text and returns a Result: Ok with
the converted value, or Err with a ConversionFailure. The table of converters
is keyed by type and can be extended with register_converter().
"""

import math
import pathlib
import re
import types
import typing
from typing import Any, Callable, Union

from result import Err, Ok, Result

from .errors import ConversionFailure, ErrorKind

Converter = Callable[[str], Result[Any, ConversionFailure]]

_INT_PATTERN = re.compile(r"[+-]?\d+")
_FLOAT_PATTERN = re.compile(
    r"[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan)",
    re.IGNORECASE,
)


def _invalid(raw: str, type_name: str) -> Err[ConversionFailure]:
    return Err(
        ConversionFailure(
            ErrorKind.INVALID_ARGUMENT, f"'{raw}' is not a valid {type_name}"
        )
    )


def _out_of_range(raw: str, type_name: str) -> Err[ConversionFailure]:
    return Err(
        ConversionFailure(
            ErrorKind.OUT_OF_RANGE, f"'{raw}' is out of range for {type_name}"
        )
    )


def convert_flag(raw: str) -> Result[bool, ConversionFailure]:
    """Boolean parameters are pure flags: being present means True."""
    return Ok(True)


def convert_str(raw: str) -> Result[str, ConversionFailure]:
    return Ok(raw)


def convert_path(raw: str) -> Result[pathlib.Path, ConversionFailure]:
    return Ok(pathlib.Path(raw))


class IntegerConverter:
    """
    Parse a whole decimal number bounded to a signed integer width.

    Args:
        bits: Width of the signed target integer. Values outside
            [-2**(bits-1), 2**(bits-1) - 1] are reported as out of range.
    """

    def __init__(self, bits: int = 32) -> None:
        self.bits = bits
        self.minimum = -(2 ** (bits - 1))
        self.maximum = 2 ** (bits - 1) - 1

    def __call__(self, raw: str) -> Result[int, ConversionFailure]:
        text = raw.strip()
        if not _INT_PATTERN.fullmatch(text):
            return _invalid(raw, "integer")
        try:
            value = int(text)
        except ValueError:
            # digit count above the interpreter's int/str conversion limit
            return _out_of_range(raw, f"a {self.bits}-bit integer")
        if not self.minimum <= value <= self.maximum:
            return _out_of_range(raw, f"a {self.bits}-bit integer")
        return Ok(value)


def convert_float(raw: str) -> Result[float, ConversionFailure]:
    """Parse a decimal or exponential literal; overflow to infinity is an error."""
    text = raw.strip()
    if not _FLOAT_PATTERN.fullmatch(text):
        return _invalid(raw, "floating point number")
    value = float(text)
    if math.isinf(value) and "inf" not in text.lower():
        return _out_of_range(raw, "a floating point number")
    mantissa = re.split(r"[eE]", text)[0]
    if value == 0.0 and any(digit in mantissa for digit in "123456789"):
        # nonzero literal that underflowed
        return _out_of_range(raw, "a floating point number")
    return Ok(value)


_CONVERTERS: dict[Any, Converter] = {
    bool: convert_flag,
    int: IntegerConverter(32),
    float: convert_float,
    str: convert_str,
    pathlib.Path: convert_path,
}


def register_converter(value_type: Any, converter: Converter) -> None:
    """
    Register (or replace) the converter used for a value type.

    Args:
        value_type: The type parameters are declared with.
        converter: Callable taking the raw string and returning Ok(value) or
            Err(ConversionFailure).
    """
    _CONVERTERS[value_type] = converter


def _fallback_converter(value_type: Any) -> Converter:
    """Build a converter that calls the type itself on the raw string."""
    type_name = getattr(value_type, "__name__", str(value_type))

    def convert(raw: str) -> Result[Any, ConversionFailure]:
        try:
            return Ok(value_type(raw))
        except OverflowError:
            return _out_of_range(raw, type_name)
        except (ValueError, TypeError):
            return _invalid(raw, type_name)

    return convert


def get_converter(value_type: Any) -> Converter:
    """
    Return the registered converter for a type, or a constructor-based fallback.

    Raises:
        TypeError: If the type is a generic alias such as list[str] with no
            registered converter. Calling it on a string would not parse it.
    """
    if value_type in _CONVERTERS:
        return _CONVERTERS[value_type]
    if typing.get_origin(value_type) is not None:
        raise TypeError(
            f"No converter registered for {value_type}; "
            "register one with register_converter() or pass converter="
        )
    return _fallback_converter(value_type)


def convert(raw: str, value_type: Any) -> Result[Any, ConversionFailure]:
    """Convert a raw string to `value_type`."""
    return get_converter(value_type)(raw)


def is_flag_type(value_type: Any) -> bool:
    return value_type is bool


def format_value(value: Any) -> str:
    """Render a value for help text. Booleans are shown lowercase."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def get_optional_inner_type(type_hint: Any) -> Any:
    """
    If type_hint is Optional[T] (i.e., Union[T, None]), return T.
    Otherwise, return None.
    """
    origin = typing.get_origin(type_hint)
    if origin is Union or origin is types.UnionType:
        args = typing.get_args(type_hint)
        # Optional[T] is Union[T, None], so we check for exactly two args with one being NoneType
        non_none_args = [a for a in args if a is not type(None)]
        if len(non_none_args) == 1 and type(None) in args:
            return non_none_args[0]
    return None


def normalize_type(type_hint: Any) -> Any:
    """Unwrap Optional[T] and resolve string annotations that name builtin types."""
    inner_type = get_optional_inner_type(type_hint)
    if inner_type is not None:
        type_hint = inner_type
    if isinstance(type_hint, str):
        builtin_names = {t.__name__: t for t in (bool, int, float, str)}
        type_hint = builtin_names.get(type_hint, str)
    if type_hint is typing.Any:
        return str
    return type_hint
