"""
Write-targets: explicit references to caller-owned storage.

A parameter never owns the value it parses. It holds a target built by the
caller at registration time and writes through it. AttrRef points at an
attribute of an object (typically a dataclass instance), ItemRef at a key of a
mutable mapping.
"""

import typing
from collections.abc import MutableMapping
from typing import Any, Optional, Protocol, runtime_checkable


@runtime_checkable
class Target(Protocol):
    """Anything a parameter can read from and write through."""

    def get(self) -> Any: ...

    def set(self, value: Any) -> None: ...

    def annotation(self) -> Optional[Any]: ...

    def describe(self) -> str: ...


class AttrRef:
    """Reference to `owner.<attr>`."""

    def __init__(self, owner: Any, attr: str) -> None:
        if not hasattr(owner, attr) and attr not in _class_hints(owner):
            raise AttributeError(
                f"{type(owner).__name__} has no attribute or annotation '{attr}'"
            )
        self.owner = owner
        self.attr = attr

    def get(self) -> Any:
        return getattr(self.owner, self.attr, None)

    def set(self, value: Any) -> None:
        setattr(self.owner, self.attr, value)

    def annotation(self) -> Optional[Any]:
        return _class_hints(self.owner).get(self.attr)

    def describe(self) -> str:
        return f"{type(self.owner).__name__}.{self.attr}"

    def __repr__(self) -> str:
        return f"AttrRef({self.describe()})"


class ItemRef:
    """Reference to `mapping[key]`."""

    def __init__(self, mapping: MutableMapping, key: Any) -> None:
        self.mapping = mapping
        self.key = key

    def get(self) -> Any:
        return self.mapping.get(self.key)

    def set(self, value: Any) -> None:
        self.mapping[self.key] = value

    def annotation(self) -> Optional[Any]:
        return None

    def describe(self) -> str:
        return f"[{self.key!r}]"

    def __repr__(self) -> str:
        return f"ItemRef({self.describe()})"


def ref(owner: Any, name: Any) -> Target:
    """
    Build a write-target for `name` inside `owner`.

    Mutable mappings get an ItemRef, every other object an AttrRef.
    """
    if isinstance(owner, MutableMapping):
        return ItemRef(owner, name)
    return AttrRef(owner, name)


def as_target(target: Any) -> Target:
    """Accept a ready-made target or an `(owner, name)` pair."""
    if isinstance(target, tuple) and len(target) == 2:
        return ref(*target)
    if isinstance(target, Target):
        return target
    raise TypeError(
        f"Expected a write-target or an (owner, name) pair, got {type(target).__name__}"
    )


def _class_hints(owner: Any) -> dict[str, Any]:
    """Resolved type hints of the owner's class; empty if they cannot be resolved."""
    try:
        return typing.get_type_hints(type(owner))
    except (NameError, TypeError):
        return dict(getattr(type(owner), "__annotations__", {}))
