"""
Error types for dehydration and hydration.

Every error records the capability path involved so that mismatches
between the dehydrating and hydrating capability trees can be traced.
"""

from typing import Optional, Sequence, Tuple


def dotted(path: Sequence[str]) -> str:
    """Render a capability path as ``a.b.c``."""
    return ".".join(str(key) for key in path)


class DehydrationError(Exception):
    """Base class for all errors raised by this package."""

    def __init__(self, message: str, path: Sequence[str] = ()):
        self.path: Tuple[str, ...] = tuple(path)
        super().__init__(message)


class PathError(DehydrationError):
    """Capturer navigation reached a value that is neither a namespace nor callable."""

    def __init__(self, path: Sequence[str]):
        super().__init__(f"No function or namespace at path: {dotted(path)}", path)


class InvocationModeError(DehydrationError):
    """A constructor-style capability was invoked as a plain call."""

    def __init__(self, path: Sequence[str]):
        super().__init__(f"{dotted(path)} must be invoked as a construction", path)


class UnresolvedPathError(DehydrationError):
    """A descriptor path does not resolve to a callable in the capability tree."""

    def __init__(self, path: Sequence[str]):
        super().__init__(f"Capability tree has no function at path: {dotted(path)}", path)


class NotAConstructorError(DehydrationError):
    """Construction was requested for a capability not marked constructor-style."""

    def __init__(self, path: Sequence[str]):
        super().__init__(f"Capability at path {dotted(path)} is not a constructor", path)


class DescriptorError(DehydrationError, ValueError):
    """A value carrying a ``path`` key is not a well-formed call descriptor."""


class HydrationDepthError(DehydrationError):
    """
    Hydration nested deeper than allowed.

    ``max_depth`` is the configured limit, or None when the interpreter's
    recursion limit was hit. ``path`` is the innermost enclosing descriptor
    path when one is known.
    """

    def __init__(self, max_depth: Optional[int] = None, path: Sequence[str] = ()):
        self.max_depth = max_depth
        if max_depth is None:
            message = "Hydration exceeded the interpreter recursion limit"
        else:
            message = f"Hydration exceeded maximum allowed depth of {max_depth}"
        if path:
            message += f" at path: {dotted(path)}"
        super().__init__(message, path)
