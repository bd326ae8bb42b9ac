"""
Hydration of dehydrated payloads.

This module walks arbitrary JSON-shaped data, recognizes call descriptors,
resolves them against a capability tree and substitutes their results in
place. Descriptors nested in arguments are resolved before the call that
receives them.
"""

import asyncio
import inspect
import logging
from collections.abc import Mapping
from typing import Any, Optional, Union

from .capture import CapturedCallable
from .core import MISSING, CallDescriptor, CapabilityPath, Capability, Kind, callable_kind, is_descriptor_like, walk_path
from .errors import HydrationDepthError, InvocationModeError, NotAConstructorError, UnresolvedPathError, dotted

logger = logging.getLogger(__name__)

Descriptor = Union[CallDescriptor, CapturedCallable, Mapping]


class HydrationOptions:
    """Configuration options for hydration."""

    def __init__(self,
                 debug: bool = False,
                 max_depth: Optional[int] = None,
                 allow_private: bool = False):
        """
        Initialize hydration options.

        Args:
            debug: Log every descriptor resolution
            max_depth: Maximum nesting depth of a payload, or None for no limit
            allow_private: Allow paths to reach attributes starting with ``_``
        """
        if max_depth is not None and max_depth < 1:
            raise ValueError("max_depth must be a positive integer or None")
        self.debug = debug
        self.max_depth = max_depth
        self.allow_private = allow_private


DEFAULT_OPTIONS = HydrationOptions()


class Hydrator:
    """
    Converts dehydrated payloads into live values using a capability tree.

    A Hydrator holds no state between payloads beyond its tree and options.
    """

    def __init__(self, tree: Any, options: Optional[HydrationOptions] = None):
        self.tree = tree
        self.options = options or DEFAULT_OPTIONS

    def hydrate(self, value: Any) -> Any:
        """Hydrate a payload, resolving every descriptor in it."""
        try:
            return self._hydrate_impl(value, 0, ())
        except RecursionError as e:
            raise HydrationDepthError() from e

    def resolve(self, descriptor: Descriptor) -> Any:
        """Resolve a single descriptor."""
        try:
            return self._resolve_impl(_as_descriptor(descriptor), 0)
        except RecursionError as e:
            raise HydrationDepthError() from e

    def _hydrate_impl(self, value: Any, depth: int, path: CapabilityPath) -> Any:
        """Internal implementation of hydration. ``path`` is the enclosing descriptor's path."""
        max_depth = self.options.max_depth
        if max_depth is not None and depth >= max_depth:
            raise HydrationDepthError(max_depth, path)

        if isinstance(value, list):
            return [self._hydrate_impl(item, depth + 1, path) for item in value]

        elif isinstance(value, tuple):
            items = [self._hydrate_impl(item, depth + 1, path) for item in value]
            # namedtuples take their fields positionally
            if hasattr(value, '_fields'):
                return type(value)(*items)
            return type(value)(items)

        elif isinstance(value, (CallDescriptor, CapturedCallable)) or is_descriptor_like(value):
            return self._resolve_impl(_as_descriptor(value), depth)

        elif isinstance(value, Mapping):
            result = {}
            for key, val in value.items():
                result[key] = self._hydrate_impl(val, depth + 1, path)
            return result

        else:
            return value

    def _resolve_impl(self, descriptor: CallDescriptor, depth: int) -> Any:
        """Internal implementation of descriptor resolution."""
        path = descriptor.path
        target = walk_path(self.tree, path, self.options.allow_private)
        kind = None if target is MISSING else callable_kind(target)

        if kind is None:
            logger.debug(f"Unresolved capability path: {dotted(path)}")
            raise UnresolvedPathError(path)

        if descriptor.args is None:
            if self.options.debug:
                logger.debug(f"Resolved reference to {dotted(path)}")
            return target

        if descriptor.is_constructor and kind is not Kind.CONSTRUCTOR:
            logger.debug(f"Construction requested for non-constructor: {dotted(path)}")
            raise NotAConstructorError(path)
        if not descriptor.is_constructor and kind is Kind.CONSTRUCTOR:
            logger.debug(f"Plain call of constructor: {dotted(path)}")
            raise InvocationModeError(path)

        args = [self._hydrate_impl(arg, depth + 1, path) for arg in descriptor.args]

        if self.options.debug:
            action = "Constructing" if descriptor.is_constructor else "Calling"
            logger.debug(f"{action} {dotted(path)} with {len(args)} argument(s)")

        if isinstance(target, Capability):
            return target.target(*args)
        return target(*args)


def _as_descriptor(value: Descriptor) -> CallDescriptor:
    """Normalize the accepted descriptor forms into a CallDescriptor."""
    if isinstance(value, CallDescriptor):
        return value
    if isinstance(value, CapturedCallable):
        return value.reference
    return CallDescriptor.from_json(value)


def hydrate(payload: Any, tree: Any, options: Optional[HydrationOptions] = None) -> Any:
    """
    Hydrate a payload against a capability tree.

    Example:
        ```python
        import math
        hydrate({"a": {"path": ["math", "sqrt"], "args": [16]}}, {"math": math})
        # {"a": 4.0}
        ```
    """
    return Hydrator(tree, options).hydrate(payload)


def resolve_descriptor(tree: Any, descriptor: Descriptor, options: Optional[HydrationOptions] = None) -> Any:
    """Resolve a single call descriptor against a capability tree."""
    return Hydrator(tree, options).resolve(descriptor)


async def settle(value: Any) -> Any:
    """
    Await every awaitable inside a hydrated value.

    Hydration itself never waits on asynchronous capabilities; this is the
    post-processing step that does. Sibling awaitables run concurrently.
    """
    if inspect.isawaitable(value):
        return await settle(await value)

    if isinstance(value, (list, tuple)):
        items = await asyncio.gather(*(settle(item) for item in value))
        if isinstance(value, list):
            return items
        if hasattr(value, '_fields'):
            return type(value)(*items)
        return type(value)(items)

    if isinstance(value, dict):
        keys = list(value.keys())
        values = await asyncio.gather(*(settle(value[key]) for key in keys))
        return dict(zip(keys, values))

    return value


async def hydrate_async(payload: Any, tree: Any, options: Optional[HydrationOptions] = None) -> Any:
    """Hydrate a payload and settle any awaitables produced by its capabilities."""
    return await settle(hydrate(payload, tree, options))
