"""
Args - the parsing session.

An Args object owns the parameter registry, borrows the argument vector and
collects the errors and remainder of the last parse. Parsed values are written
directly into the caller's own objects; there is no separate result namespace.

Example:
    @dataclass
    class Options:
        infile: str = ""
        rate: float = 0.0
        debug: bool = False

    opts = Options()
    args = Args(["prog", "-d", "--rate", "0.9", "-i", "in.txt", "out.txt"])
    args.arg((opts, "infile"), "i", "input", "Specify the input file", "./in.foo")
    args.arg((opts, "rate"), "r", "rate", "Rate of entropy", 0.75)
    args.arg((opts, "debug"), "d", "debug", "Start in daemon mode")
    args.remainder("output path")
    if not args.parse():
        print(args.errors())
        print(args.help())
"""

import dataclasses
import logging
import sys
from collections.abc import Sequence
from typing import Any, Optional

from result import Err, Ok, Result

from .config import apply_config, load_config_file
from .converters import Converter, normalize_type
from .errors import DuplicateRegistrationError, ParseError
from .parameter import MISSING, Parameter, TypedParameter
from .registry import ParameterRegistry
from .scanner import scan
from .targets import Target, as_target

logger = logging.getLogger(__name__)


class Args:
    """
    A command-line parsing session.

    Args:
        argv: The argument vector, program name first. Defaults to sys.argv.
            The sequence is read, never modified.
    """

    def __init__(self, argv: Optional[Sequence[str]] = None) -> None:
        self.argv: Sequence[str] = sys.argv if argv is None else argv
        self.process_name: str = self.argv[0] if self.argv else ""
        self.parameters = ParameterRegistry()
        self.error_list: list[ParseError] = []
        self.remaining: list[str] = []
        self._remainder_declared = False
        self._remainder_label: Optional[str] = None
        self._remainder_target: Optional[Target] = None

    def arg(
        self,
        target: Any,
        key: Optional[str],
        name: str,
        help: str = "",
        default: Any = MISSING,
        *,
        type: Any = None,
        converter: Optional[Converter] = None,
    ) -> Parameter:
        """
        Declare a parameter bound to a caller-owned field.

        Args:
            target: A write-target, or an (owner, attribute) pair. A mutable
                mapping as owner binds to one of its keys.
            key: Single character for `-k`, or None for a long-name-only
                parameter.
            name: Long name for `--name`.
            help: Description shown by help().
            default: Written into the target right away and shown in help().
                Omit it to keep the field's current value.
            type: Value type. Inferred when omitted, from the field annotation,
                then the default, then the field's current value.
            converter: Custom converter for this parameter only.

        Returns:
            Parameter: The registered parameter.

        Raises:
            DuplicateRegistrationError: If key or name is already declared.
        """
        write_target = as_target(target)
        value_type = self._resolve_type(write_target, default, type)
        param = TypedParameter(
            write_target,
            key,
            name,
            help,
            value_type,
            default=default,
            converter=converter,
        )
        self.parameters.register(param)
        param.apply_default()
        return param

    def _resolve_type(self, target: Target, default: Any, explicit: Any) -> Any:
        if explicit is not None:
            return normalize_type(explicit)
        annotation = target.annotation()
        if annotation is not None:
            return normalize_type(annotation)
        if default is not MISSING and default is not None:
            return type(default)
        current = target.get()
        if current is not None:
            return type(current)
        return str

    def remainder(self, label: str, target: Any = None) -> None:
        """
        Name the trailing positional arguments for usage text.

        Args:
            label: Shown as `<label>` in the usage line.
            target: Optional write-target that receives the list of remaining
                tokens after each parse.

        Raises:
            DuplicateRegistrationError: If a remainder was already declared.
        """
        if self._remainder_declared:
            raise DuplicateRegistrationError(
                label, f"Remainder already declared as '{self._remainder_label}'"
            )
        self._remainder_declared = True
        self._remainder_label = label
        self._remainder_target = as_target(target) if target is not None else None

    def bind(self, instance: Any) -> list[Parameter]:
        """
        Declare a parameter for every field of a dataclass instance.

        Field metadata controls the declaration:
            "key": single-character key
            "name": long name (default: field name with '_' replaced by '-')
            "help": help text
            "remainder": label; the field receives the remainder instead
            "skip": if true, the field is not declared

        Fields that declare a default use the instance's current value as their
        default; fields without one keep their value and show no default.

        Returns:
            list[Parameter]: The registered parameters, in field order.
        """
        if not dataclasses.is_dataclass(instance) or isinstance(instance, type):
            raise TypeError(
                f"bind() expects a dataclass instance, got {type(instance).__name__}"
            )
        params = []
        for field in dataclasses.fields(instance):
            metadata = field.metadata
            if metadata.get("skip"):
                continue
            if "remainder" in metadata:
                self.remainder(metadata["remainder"], (instance, field.name))
                continue
            has_default = (
                field.default is not dataclasses.MISSING
                or field.default_factory is not dataclasses.MISSING
            )
            params.append(
                self.arg(
                    (instance, field.name),
                    metadata.get("key"),
                    metadata.get("name", field.name.replace("_", "-")),
                    metadata.get("help", ""),
                    getattr(instance, field.name) if has_default else MISSING,
                )
            )
        return params

    def load_config(self, config_path: str) -> None:
        """
        Apply values from a YAML or JSON file keyed by long name.

        Call before parse() so the command line takes precedence.

        Raises:
            FileNotFoundError: If the config file doesn't exist.
            ValueError: If the file is invalid or names an unknown parameter.
            TypeError: If a value has the wrong type.
        """
        logger.debug("Loading configuration from %s", config_path)
        apply_config(self.parameters, load_config_file(config_path))

    def parse(self) -> bool:
        """
        Parse the argument vector into the bound fields.

        Every recognized parameter is written even when other tokens fail;
        errors are collected and available from errors() and error_list.

        Returns:
            bool: True if no errors were found.
        """
        for param in self.parameters:
            param.reset()
        outcome = scan(self.parameters, self.argv)
        self.error_list = outcome.errors
        self.remaining = outcome.remainder
        if self._remainder_target is not None:
            self._remainder_target.set(list(self.remaining))
        logger.debug(
            "Parsed %d tokens: %d errors, %d remaining",
            max(len(self.argv) - 1, 0),
            len(self.error_list),
            len(self.remaining),
        )
        return outcome.ok

    def safe_parse(self) -> Result[list[str], list[ParseError]]:
        """
        Parse and return the outcome as a Result.

        Returns:
            Result[list[str], list[ParseError]]:
                - Ok with the remainder tokens if parsing succeeded,
                - Err with the collected errors otherwise.
        """
        if self.parse():
            return Ok(list(self.remaining))
        return Err(list(self.error_list))

    def errors(self) -> str:
        """All errors of the last parse, one per line; empty if there were none."""
        return "\n".join(str(error) for error in self.error_list)

    def usage(self) -> str:
        return self.parameters.render_usage_line(
            self.process_name, self._remainder_label
        )

    def help(self) -> str:
        """Usage line followed by one line per parameter."""
        return f"{self.usage()}\n{self.parameters.render_help()}\n"
