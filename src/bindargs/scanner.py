"""
Command-line scanner.

Walks the argument tokens left to right, classifies each one and dispatches it
to the matching parameter. Errors are collected rather than raised so that a
single pass reports every malformed token.

Accepted syntax:
    --name, --name=value, --name value   long names
    -k, -k=value, -kvalue, -k value      single keys
    -abc                                 cluster of flag keys; the last key
                                         may take a value
    --                                   end of arguments
Everything from the first token that is not a flag onwards is the remainder.
"""

import enum
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Optional

from result import Err

from .errors import ErrorKind, ParseError
from .parameter import Parameter
from .registry import ParameterRegistry

logger = logging.getLogger(__name__)

END_OF_ARGUMENTS = "--"


class ScanState(enum.Enum):
    EXPECTING_FLAG_OR_REMAINDER = "expecting flag or remainder"
    CONSUMING_REMAINDER = "consuming remainder"


@dataclass
class ScanResult:
    """Outcome of one scan: the ordered errors and the leftover tokens."""

    errors: list[ParseError] = field(default_factory=list)
    remainder: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


class Scanner:
    """
    Scan a token sequence against a registry.

    Args:
        registry: The declared parameters.
        tokens: The full argument vector. Position 0 is the program name and is
            skipped; positions reported in errors index into this sequence.
    """

    def __init__(self, registry: ParameterRegistry, tokens: Sequence[str]) -> None:
        self.registry = registry
        self.tokens = tokens
        self.state = ScanState.EXPECTING_FLAG_OR_REMAINDER
        self.result = ScanResult()
        self._pos = 1

    def scan(self) -> ScanResult:
        """Consume every token and return the collected result."""
        while self._pos < len(self.tokens):
            token = self.tokens[self._pos]
            if self.state is ScanState.CONSUMING_REMAINDER:
                self.result.remainder.append(token)
            elif token == END_OF_ARGUMENTS:
                self._enter_remainder(token)
            elif token.startswith("--"):
                self._long_name(token)
            elif token.startswith("-") and len(token) > 1:
                self._cluster(token)
            else:
                self._enter_remainder(token)
                self.result.remainder.append(token)
            self._pos += 1
        return self.result

    def _enter_remainder(self, token: str) -> None:
        logger.debug("Remainder starts at position %d (%r)", self._pos, token)
        self.state = ScanState.CONSUMING_REMAINDER

    def _long_name(self, token: str) -> None:
        name, sep, inline = token[2:].partition("=")
        param = self.registry.resolve_by_name(name)
        if param is None:
            self._error(ErrorKind.UNKNOWN_KEY, token, f"No parameter named '--{name}'")
            return
        logger.debug("Token %r resolved to --%s", token, param.name)
        if param.is_flag:
            self._set_flag(param)
        elif sep:
            self._apply(param, inline, self._pos)
        else:
            self._consume_next(param, token)

    def _cluster(self, token: str) -> None:
        """Handle `-k`, `-k=value`, `-kvalue` and clusters such as `-dvi`."""
        body = token[1:]
        for index, key in enumerate(body):
            param = self.registry.resolve_by_key(key)
            rest = body[index + 1 :]
            if param is None:
                self._error(
                    ErrorKind.UNKNOWN_KEY,
                    f"-{key}",
                    f"No parameter with key '{key}' in '{token}'",
                )
                if rest.startswith("="):
                    return
                continue
            if param.is_flag:
                self._set_flag(param)
                if rest.startswith("="):
                    # flags ignore inline values, as with --name=value
                    return
                continue
            # A value-taking key ends the cluster; the rest of the token is its value.
            if rest:
                self._apply(param, rest[1:] if rest.startswith("=") else rest, self._pos)
            else:
                self._consume_next(param, token)
            return

    def _set_flag(self, param: Parameter) -> None:
        self._apply(param, "", self._pos)

    def _consume_next(self, param: Parameter, token: str) -> None:
        if self._pos + 1 >= len(self.tokens):
            self._error(
                ErrorKind.MISSING_VALUE,
                token,
                f"--{param.name} expects a value",
                param,
            )
            return
        self._pos += 1
        self._apply(param, self.tokens[self._pos], self._pos)

    def _apply(self, param: Parameter, raw: str, position: int) -> None:
        outcome = param.parse_value(raw, position)
        if isinstance(outcome, Err):
            self.result.errors.append(outcome.err_value)

    def _error(
        self,
        kind: ErrorKind,
        source: str,
        detail: str,
        param: Optional[Parameter] = None,
    ) -> None:
        logger.debug("%s at position %d: %s", kind.description, self._pos, detail)
        self.result.errors.append(
            ParseError(
                kind=kind,
                source=source,
                position=self._pos,
                detail=detail,
                parameter=param,
            )
        )


def scan(registry: ParameterRegistry, tokens: Sequence[str]) -> ScanResult:
    """Scan `tokens` (argv, including the program name) against `registry`."""
    return Scanner(registry, tokens).scan()
