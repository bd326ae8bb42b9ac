"""
Serialization of dehydrated payloads.

Captured descriptors and references are Python objects; this module turns
them into plain JSON data (and text) explicitly, at any position in a
payload including the top level.
"""

import json
import math
from collections.abc import Mapping
from typing import Any

from .capture import CapturedCallable
from .core import CallDescriptor


class Devaluator:
    """
    Converts a dehydrated payload into JSON-compatible data.

    Call descriptors become ``{"path", "args", "isConstructor"}`` objects,
    uncalled capture functions become path-only references, tuples become
    arrays.
    """

    @classmethod
    def devaluate(cls, value: Any) -> Any:
        """Devaluate a payload for transmission."""
        return cls()._devaluate_impl(value)

    def _devaluate_impl(self, value: Any) -> Any:
        """Internal implementation of devaluation."""
        if isinstance(value, float) and not math.isfinite(value):
            raise TypeError(f"Cannot serialize non-finite float {value!r}")

        elif value is None or isinstance(value, (bool, int, float, str)):
            return value

        elif isinstance(value, CapturedCallable):
            return value.to_json()

        elif isinstance(value, CallDescriptor):
            result = value.to_json()
            if "args" in result:
                result["args"] = [self._devaluate_impl(arg) for arg in result["args"]]
            return result

        elif isinstance(value, (list, tuple)):
            return [self._devaluate_impl(item) for item in value]

        elif isinstance(value, Mapping):
            result = {}
            for key, val in value.items():
                if not isinstance(key, str):
                    raise TypeError(f"Cannot serialize mapping key of type {type(key).__name__}")
                result[key] = self._devaluate_impl(val)
            return result

        else:
            raise TypeError(f"Cannot serialize value of type {type(value).__name__}")


def to_json(payload: Any) -> Any:
    """Convert a dehydrated payload into JSON-compatible data."""
    return Devaluator.devaluate(payload)


def serialize(payload: Any) -> str:
    """
    Serialize a dehydrated payload to a JSON string.

    Example:
        ```python
        serialize(dehydrate({"math": math}, lambda cap: [cap.math.sqrt(2), cap.math.floor]))
        # '[{"path": ["math", "sqrt"], "args": [2]}, {"path": ["math", "floor"]}]'
        ```
    """
    return json.dumps(to_json(payload), allow_nan=False)


def deserialize(data: str) -> Any:
    """Parse a JSON string into a payload ready for hydration."""
    return json.loads(data)
