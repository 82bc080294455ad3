"""The two call shapes accepted by a cached dispatch."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Union

_MISSING: Any = object()


@dataclass(frozen=True)
class PositionalCall:
    """``dispatch(action, payload=None, options=None)``."""

    action: Any
    payload: Any = None
    options: Any = _MISSING

    @property
    def has_options(self) -> bool:
        return self.options is not _MISSING


@dataclass(frozen=True)
class DescriptorCall:
    """``dispatch({"type": action, "timeout": ...})``."""

    descriptor: Mapping[str, Any]

    @property
    def action(self) -> Any:
        return self.descriptor["type"]


CallSignature = Union[PositionalCall, DescriptorCall]


def is_descriptor(value: Any) -> bool:
    """Return whether value is an action descriptor (a mapping carrying ``type``)."""
    return isinstance(value, Mapping) and "type" in value


def parse_call(args: tuple[Any, ...]) -> CallSignature:
    """Classify raw dispatch arguments into one of the two call shapes.

    A single mapping argument with a ``type`` key is a descriptor. Anything
    else is read positionally; extra arguments beyond the third are ignored
    here and still forwarded to the wrapped dispatcher untouched.
    """
    if len(args) == 1 and is_descriptor(args[0]):
        return DescriptorCall(descriptor=args[0])
    if not args:
        return PositionalCall(action=None)
    if len(args) == 1:
        return PositionalCall(action=args[0])
    if len(args) == 2:
        return PositionalCall(action=args[0], payload=args[1])
    return PositionalCall(action=args[0], payload=args[1], options=args[2])
