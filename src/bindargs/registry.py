"""
Registry of declared parameters, indexed by key and by long name.
"""

import logging
from collections.abc import Iterator
from typing import Optional

from .errors import DuplicateRegistrationError
from .parameter import Parameter

logger = logging.getLogger(__name__)


class ParameterRegistry:
    """
    Holds every declared parameter in registration order.

    Keys and long names are unique. Registering a second parameter with a key
    or name already in use raises DuplicateRegistrationError before anything is
    added, so the registry is never left half-updated.
    """

    def __init__(self) -> None:
        self._params: list[Parameter] = []
        self._by_key: dict[str, Parameter] = {}
        self._by_name: dict[str, Parameter] = {}

    def register(self, param: Parameter) -> Parameter:
        """
        Add a parameter.

        Args:
            param: The parameter to add.

        Returns:
            Parameter: The same parameter, for chaining.

        Raises:
            ValueError: If the name is empty or contains '=', or the key is not
                a single character other than '-' and '='.
            DuplicateRegistrationError: If the key or name is already taken.
        """
        validate_identity(param.key, param.name)
        if param.name in self._by_name:
            raise DuplicateRegistrationError(
                f"--{param.name}", f"Long name '{param.name}' is already registered"
            )
        if param.key is not None and param.key in self._by_key:
            owner = self._by_key[param.key]
            raise DuplicateRegistrationError(
                f"-{param.key}",
                f"Key '{param.key}' is already registered for --{owner.name}",
            )

        self._params.append(param)
        self._by_name[param.name] = param
        if param.key is not None:
            self._by_key[param.key] = param
        logger.debug("Registered %r", param)
        return param

    def resolve_by_key(self, key: str) -> Optional[Parameter]:
        return self._by_key.get(key)

    def resolve_by_name(self, name: str) -> Optional[Parameter]:
        return self._by_name.get(name)

    def render_help(self) -> str:
        """One fixed-column line per parameter, in registration order."""
        return "".join(param.help() for param in self._params)

    def render_usage_line(
        self, process_name: str, remainder_label: Optional[str] = None
    ) -> str:
        """
        Summarize the command line on one line.

        Example:
            Usage: foo -itrdv <output path>
        """
        parts = [f"Usage: {process_name}"]
        keys = "".join(param.usage() for param in self._params)
        if keys:
            parts.append(f"-{keys}")
        if remainder_label:
            parts.append(f"<{remainder_label}>")
        return " ".join(parts)

    def __iter__(self) -> Iterator[Parameter]:
        return iter(self._params)

    def __len__(self) -> int:
        return len(self._params)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name


def validate_identity(key: Optional[str], name: str) -> None:
    """Reject keys and names the scanner could never match."""
    if not name:
        raise ValueError("A parameter needs a non-empty long name")
    if "=" in name or name.startswith("-"):
        raise ValueError(f"Invalid long name '{name}': must not contain '=' or start with '-'")
    if key is not None:
        if len(key) != 1:
            raise ValueError(f"Invalid key '{key}': must be a single character")
        if key in ("-", "="):
            raise ValueError(f"Invalid key '{key}'")
