"""
Call capturing for dehydration.

A CallCapturer mirrors a capability tree: navigating it by attribute or
item behaves like navigating the tree, but calling a reached capability
returns a CallDescriptor instead of running it.

Example:
    ```python
    import math
    from dehydrate import dehydrate

    payload = dehydrate({"math": math}, lambda cap: {"a": cap.math.sqrt(2)})
    # {"a": CallDescriptor(path=("math", "sqrt"), args=(2,))}
    ```
"""

from typing import Any, Callable, Dict, TypeVar

from .core import CallDescriptor, CapabilityPath, Kind, MISSING, callable_kind, get_child, is_namespace
from .errors import InvocationModeError, NotAConstructorError, PathError

T = TypeVar('T')


class CapturedCallable:
    """
    Stand-in for a callable capability during capture.

    Calling it yields a plain call descriptor, ``new()`` yields a
    construction descriptor, and leaving it uncalled keeps it a reference
    (serialized as a path-only descriptor).
    """

    __slots__ = ("_path", "_kind")

    def __init__(self, path: CapabilityPath, kind: Kind):
        self._path = path
        self._kind = kind

    @property
    def path(self) -> CapabilityPath:
        return self._path

    @property
    def kind(self) -> Kind:
        return self._kind

    @property
    def reference(self) -> CallDescriptor:
        """The path-only descriptor for this capability."""
        return CallDescriptor(self._path)

    def __call__(self, *args: Any) -> CallDescriptor:
        if self._kind is Kind.CONSTRUCTOR:
            raise InvocationModeError(self._path)
        return CallDescriptor(self._path, args)

    def new(self, *args: Any) -> CallDescriptor:
        """Capture a construction of this capability."""
        if self._kind is not Kind.CONSTRUCTOR:
            raise NotAConstructorError(self._path)
        return CallDescriptor(self._path, args, is_constructor=True)

    def to_json(self) -> Dict[str, Any]:
        return self.reference.to_json()

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, CapturedCallable):
            return self._path == other._path and self._kind is other._kind
        return NotImplemented

    def __hash__(self) -> int:
        return hash((self._path, self._kind))

    def __repr__(self) -> str:
        return f"CapturedCallable({'.'.join(self._path)})"


class CallCapturer:
    """
    Proxy over one namespace of a capability tree.

    Attribute access (``cap.math``) and item access (``cap["math"]``) are
    equivalent; item access also reaches keys that are not identifiers.
    """

    def __init__(self, node: Any, path: CapabilityPath = ()):
        object.__setattr__(self, '_node', node)
        object.__setattr__(self, '_path', path)

    def _child(self, key: str) -> Any:
        path = self._path + (key,)
        value = get_child(self._node, key)

        if value is not MISSING:
            kind = callable_kind(value)
            if kind is not None:
                return CapturedCallable(path, kind)
            if is_namespace(value):
                return CallCapturer(value, path)

        raise PathError(path)

    def __getattr__(self, name: str) -> Any:
        # Leave Python protocol lookups (copy, pickle, IPython) alone
        if name.startswith('_'):
            raise AttributeError(name)
        return self._child(name)

    def __getitem__(self, key: str) -> Any:
        if not isinstance(key, str):
            raise TypeError(f"Capability names must be strings, got {type(key).__name__}")
        return self._child(key)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("Cannot set attributes on a call capturer")

    def __repr__(self) -> str:
        return f"CallCapturer({'.'.join(self._path) or '<root>'})"


def create_call_capturer(tree: Any) -> CallCapturer:
    """Wrap a capability tree so that calls through it are captured."""
    return CallCapturer(tree)


def dehydrate(tree: Any, builder: Callable[[CallCapturer], T]) -> T:
    """
    Run ``builder`` against a capturer for ``tree`` and return its result.

    The result is returned unmodified; it may hold CallDescriptor and
    CapturedCallable values anywhere. Use ``serialize.to_json`` to turn it
    into wire data. Nothing is validated here: a descriptor the hydrating
    side cannot resolve fails at hydration time.
    """
    return builder(create_call_capturer(tree))
