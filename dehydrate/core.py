"""
Core types for dehydrated calls.

This module contains the building blocks shared by capture and hydration:
capability tagging, capability tree navigation, and the CallDescriptor
record that travels over the wire.
"""

import inspect
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional, Sequence, Tuple

from .errors import DescriptorError, dotted

CapabilityPath = Tuple[str, ...]

# Wire keys of a call descriptor
PATH_KEY = "path"
ARGS_KEY = "args"
CONSTRUCTOR_KEY = "isConstructor"

MISSING = object()


class Kind(Enum):
    """How a callable capability must be invoked."""

    PLAIN = "plain"
    CONSTRUCTOR = "constructor"


class Capability:
    """
    Explicit registration tag for a callable in a capability tree.

    Python classes are constructor-style and other callables are plain by
    default. Wrap a leaf in a Capability to override that, e.g. to expose
    ``int`` as a plain function or a factory function as a constructor.
    """

    __slots__ = ("target", "kind")

    def __init__(self, target: Callable[..., Any], kind: Kind):
        if not callable(target):
            raise TypeError(f"Capability target must be callable, got {type(target).__name__}")
        self.target = target
        self.kind = kind

    def __call__(self, *args: Any) -> Any:
        return self.target(*args)

    def __repr__(self) -> str:
        name = getattr(self.target, "__qualname__", repr(self.target))
        return f"Capability({name}, {self.kind.name})"


def as_constructor(target: Callable[..., Any]) -> Capability:
    """Mark a callable as constructor-style."""
    return Capability(target, Kind.CONSTRUCTOR)


def as_function(target: Callable[..., Any]) -> Capability:
    """Mark a callable (typically a class) as a plain function."""
    return Capability(target, Kind.PLAIN)


def callable_kind(value: Any) -> Optional[Kind]:
    """Return the invocation kind of a capability leaf, or None if it is not callable."""
    if isinstance(value, Capability):
        return value.kind
    if inspect.isclass(value):
        return Kind.CONSTRUCTOR
    if callable(value):
        return Kind.PLAIN
    return None


def is_namespace(value: Any) -> bool:
    """Check whether a capability tree node can be navigated into."""
    if value is None or isinstance(value, (bool, int, float, complex, str, bytes, bytearray)):
        return False
    return callable_kind(value) is None


def get_child(node: Any, key: str, allow_private: bool = False) -> Any:
    """
    Look up ``key`` on a namespace node.

    Mappings are indexed; every other namespace is read by attribute.
    Private attributes are never reachable unless ``allow_private`` is set.
    Returns ``MISSING`` when there is no such child.
    """
    if isinstance(node, Mapping):
        return node.get(key, MISSING)
    if not isinstance(key, str) or (key.startswith("_") and not allow_private):
        return MISSING
    return getattr(node, key, MISSING)


def walk_path(tree: Any, path: Sequence[str], allow_private: bool = False) -> Any:
    """Follow ``path`` from the root of ``tree``, returning ``MISSING`` if it breaks off."""
    node = tree
    for key in path:
        if not is_namespace(node):
            return MISSING
        node = get_child(node, key, allow_private)
        if node is MISSING:
            return MISSING
    return node


@dataclass(frozen=True)
class CallDescriptor:
    """
    A dehydrated invocation.

    ``args is None`` makes this a reference to the capability at ``path``;
    any tuple (including an empty one) means "invoke with these arguments".
    """

    path: CapabilityPath
    args: Optional[Tuple[Any, ...]] = None
    is_constructor: bool = False

    def __post_init__(self):
        if not self.path:
            raise DescriptorError("Call descriptor path must not be empty")
        if self.is_constructor and self.args is None:
            raise DescriptorError(
                f"Reference descriptor for {dotted(self.path)} cannot be a construction",
                self.path,
            )

    @property
    def is_reference(self) -> bool:
        return self.args is None

    def to_json(self) -> Dict[str, Any]:
        """Return the wire form. Arguments are copied as-is; see serialize.to_json."""
        result: Dict[str, Any] = {PATH_KEY: list(self.path)}
        if self.args is not None:
            result[ARGS_KEY] = list(self.args)
        if self.is_constructor:
            result[CONSTRUCTOR_KEY] = True
        return result

    @classmethod
    def from_json(cls, value: Mapping) -> "CallDescriptor":
        """Validate a wire object and convert it into a CallDescriptor."""
        path = value.get(PATH_KEY)
        if not isinstance(path, (list, tuple)) or not path:
            raise DescriptorError(f"Call descriptor path must be a non-empty array, got {path!r}")
        if not all(isinstance(key, str) for key in path):
            raise DescriptorError(
                f"Call descriptor path must contain only strings: {path!r}", tuple(map(str, path))
            )

        args = value.get(ARGS_KEY)
        if args is not None and not isinstance(args, (list, tuple)):
            raise DescriptorError(f"Call arguments for {dotted(path)} must be an array", path)

        is_constructor = value.get(CONSTRUCTOR_KEY, False)
        if not isinstance(is_constructor, bool):
            raise DescriptorError(f"isConstructor for {dotted(path)} must be a boolean", path)

        return cls(tuple(path), None if args is None else tuple(args), is_constructor)


def is_descriptor_like(value: Any) -> bool:
    """Structural check used by hydration: a mapping with a ``path`` key."""
    return isinstance(value, Mapping) and PATH_KEY in value

