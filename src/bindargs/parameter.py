"""
Declared parameters.

Parameter is the type-erased interface the registry and the scanner work with.
TypedParameter is its single generic implementation: it owns the converter for
its value type, the optional default, the help text and the write-target into
caller memory.
"""

import abc
import logging
from typing import Any, Generic, Optional, TypeVar

from result import Err, Ok, Result

from .converters import Converter, format_value, get_converter, is_flag_type
from .errors import ParseError
from .targets import Target

logger = logging.getLogger(__name__)

T = TypeVar("T")


class _Missing:
    """Sentinel for "no default given"; None is a legitimate default."""

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


class Parameter(abc.ABC):
    """A single declared parameter, independent of its value type."""

    def __init__(self, key: Optional[str], name: str) -> None:
        self._key = key
        self._name = name
        self._is_set = False

    @property
    def key(self) -> Optional[str]:
        return self._key

    @property
    def name(self) -> str:
        return self._name

    @property
    def is_set(self) -> bool:
        """True once a value was parsed from the command line."""
        return self._is_set

    def mark_set(self) -> None:
        self._is_set = True

    def reset(self) -> None:
        """Forget that a value was parsed; the target is left as is."""
        self._is_set = False

    @property
    @abc.abstractmethod
    def is_flag(self) -> bool:
        """True for boolean parameters, which never consume a value."""

    @property
    @abc.abstractmethod
    def has_default(self) -> bool: ...

    @abc.abstractmethod
    def help(self) -> str:
        """One fixed-column help line, newline terminated."""

    @abc.abstractmethod
    def usage(self) -> str:
        """Fragment of the usage line for this parameter."""

    @abc.abstractmethod
    def default_str(self) -> str: ...

    @abc.abstractmethod
    def parse_value(self, raw: str, position: int = -1) -> Result[Any, ParseError]:
        """
        Convert `raw` and write it into the target.

        Args:
            raw: The value text from the command line.
            position: Index of the token holding the value, for error reports.

        Returns:
            Ok(value) after writing through the target, or Err(ParseError) with
            the target left untouched.
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}(key={self.key!r}, name={self.name!r})"


class TypedParameter(Parameter, Generic[T]):
    """
    A parameter whose value has type T.

    Args:
        target: Where parsed values are written.
        key: Single character for `-k`, or None.
        name: Long name for `--name`.
        help_text: Description shown in help output.
        value_type: The type T, used to pick the converter.
        default: Value written into the target by apply_default(), or MISSING
            to leave the target alone.
        converter: Overrides the converter registered for `value_type`.
    """

    # Column widths of the help block: key, long name, default annotation.
    KEY_WIDTH = 5
    NAME_WIDTH = 14
    DEFAULT_WIDTH = 24

    def __init__(
        self,
        target: Target,
        key: Optional[str],
        name: str,
        help_text: str,
        value_type: type,
        default: Any = MISSING,
        converter: Optional[Converter] = None,
    ) -> None:
        super().__init__(key, name)
        self.target = target
        self.help_text = help_text
        self.value_type = value_type
        self.default = default
        self.converter: Converter = converter or get_converter(value_type)

    def apply_default(self) -> None:
        """Write the default into the target. No-op without a default."""
        if self.has_default:
            self.target.set(self.default)

    @property
    def is_flag(self) -> bool:
        return is_flag_type(self.value_type)

    @property
    def has_default(self) -> bool:
        return self.default is not MISSING

    def usage(self) -> str:
        return self.key or ""

    def default_str(self) -> str:
        if not self.has_default:
            return ""
        return format_value(self.default)

    def help(self) -> str:
        key_col = f" -{self.key}" if self.key else ""
        name_col = f"  --{self.name}"
        default_col = f"[default: {self.default_str()}] " if self.has_default else ""
        return (
            f"{key_col:<{self.KEY_WIDTH}}"
            f"{name_col:<{self.NAME_WIDTH}}"
            f"{default_col:<{self.DEFAULT_WIDTH}}"
            f"{self.help_text}\n"
        )

    def parse_value(self, raw: str, position: int = -1) -> Result[T, ParseError]:
        converted = self.converter(raw)
        if isinstance(converted, Err):
            failure = converted.err_value
            return Err(
                ParseError(
                    kind=failure.kind,
                    source=raw,
                    position=position,
                    detail=f"--{self.name}: {failure.detail}",
                    parameter=self,
                )
            )
        value = converted.ok_value
        self.target.set(value)
        self.mark_set()
        logger.debug("Set %s = %r from --%s", self.target.describe(), value, self.name)
        return Ok(value)
