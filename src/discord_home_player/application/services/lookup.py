"""Bounded wrapper for catalog lookups."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable
from typing import TypeVar

from ...domain.shared.exceptions import TransientMediaError
from ...domain.shared.messages import ErrorMessages

T = TypeVar("T")


async def bounded_lookup(awaitable: Awaitable[T], *, timeout: float, reference: str) -> T:
    """Await a catalog call, converting a timeout into ``TransientMediaError``."""
    try:
        async with asyncio.timeout(timeout):
            return await awaitable
    except TimeoutError as e:
        raise TransientMediaError(
            ErrorMessages.LOOKUP_TIMED_OUT.format(seconds=timeout), reference=reference
        ) from e
