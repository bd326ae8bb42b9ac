#!/usr/bin/env python3
"""
Simple example demonstrating dehydration and hydration.

The "client" captures calls against a capability tree and serializes them;
the "server" hydrates the text against its own capability tree.
"""

import asyncio
import logging
import math
import os
import sys
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dehydrate import HydrationOptions, DehydrationError, dehydrate, deserialize, hydrate_async, serialize

# Configure logging
logging.basicConfig(level=logging.DEBUG)
logger = logging.getLogger(__name__)


class Counter:
    """A simple counter constructed on the server."""

    def __init__(self, initial_value: int = 0):
        self.value = initial_value

    def __repr__(self) -> str:
        return f"Counter({self.value})"


async def fetch_greeting(name: str) -> str:
    """Asynchronous capability."""
    await asyncio.sleep(0.01)
    return f"Hello, {name}!"


def apply(fn, values):
    """Apply a function reference to every value."""
    return [fn(value) for value in values]


def capabilities() -> dict:
    return {
        "Math": math,
        "Counter": Counter,
        "greetings": {"fetch": fetch_greeting},
        "apply": apply,
    }


def run_client() -> str:
    """Capture calls and return the request body."""
    payload = dehydrate(capabilities(), lambda cap: {
        "greeting": cap.greetings.fetch("World"),
        "hypotenuse": cap.Math.hypot(3, 4),
        "counter": cap.Counter.new(10),
        "floors": cap.apply(cap.Math.floor, [1.5, 2.7, cap.Math.sqrt(10)]),
    })
    body = serialize(payload)
    logger.info(f"Request body: {body}")
    return body


async def run_server(body: str) -> dict:
    """Hydrate a request body against the server's capabilities."""
    options = HydrationOptions(debug=True)
    try:
        return await hydrate_async(deserialize(body), capabilities(), options)
    except DehydrationError as e:
        logger.error(f"Rejected request at {'.'.join(e.path)}: {e}")
        raise


async def main():
    """Run both sides in one process."""
    body = run_client()
    result = await run_server(body)
    logger.info(f"Result: {result}")


if __name__ == "__main__":
    asyncio.run(main())
