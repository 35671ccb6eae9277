"""
bindargs - parse command-line arguments straight into your own fields.

Each parameter is declared once, bound to a field of a caller-owned object
(a dataclass instance, any attribute holder, or a mapping), and written in
place while parsing. Supports boolean flags, integers, floats and strings,
single-character keys, long names, flag clusters such as `-dv`, and a trailing
remainder. Errors are collected instead of raised, and help/usage text is
generated from the declarations.
"""

from .args import Args
from .converters import IntegerConverter, convert, format_value, register_converter
from .errors import ConversionFailure, DuplicateRegistrationError, ErrorKind, ParseError
from .parameter import MISSING, Parameter, TypedParameter
from .registry import ParameterRegistry
from .scanner import ScanResult, ScanState, Scanner, scan
from .targets import AttrRef, ItemRef, Target, ref

__version__ = "1.0.0"
__all__ = [
    "Args",
    "AttrRef",
    "ConversionFailure",
    "DuplicateRegistrationError",
    "ErrorKind",
    "IntegerConverter",
    "ItemRef",
    "MISSING",
    "Parameter",
    "ParameterRegistry",
    "ParseError",
    "ScanResult",
    "ScanState",
    "Scanner",
    "Target",
    "TypedParameter",
    "convert",
    "format_value",
    "ref",
    "register_converter",
    "scan",
]
