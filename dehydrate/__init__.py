"""
Dehydrate - encode whitelisted calls as JSON data and run them later

This module lets a caller describe invocations against a capability tree
as plain JSON-safe data, and lets the receiving side execute that data
against its own capability tree.
"""

from .core import CallDescriptor, Capability, Kind, as_constructor, as_function
from .capture import CallCapturer, CapturedCallable, create_call_capturer, dehydrate
from .hydrate import HydrationOptions, Hydrator, hydrate, hydrate_async, resolve_descriptor, settle
from .serialize import serialize, deserialize, to_json
from .errors import (
    DehydrationError,
    DescriptorError,
    HydrationDepthError,
    InvocationModeError,
    NotAConstructorError,
    PathError,
    UnresolvedPathError,
)

__version__ = "0.1.0"
__all__ = [
    "CallDescriptor",
    "Capability",
    "Kind",
    "as_constructor",
    "as_function",
    "CallCapturer",
    "CapturedCallable",
    "create_call_capturer",
    "dehydrate",
    "HydrationOptions",
    "Hydrator",
    "hydrate",
    "hydrate_async",
    "resolve_descriptor",
    "settle",
    "serialize",
    "deserialize",
    "to_json",
    "DehydrationError",
    "DescriptorError",
    "HydrationDepthError",
    "InvocationModeError",
    "NotAConstructorError",
    "PathError",
    "UnresolvedPathError",
]
