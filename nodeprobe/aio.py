"""Asyncio facade over the blocking entry points.

Each call runs in the loop's default executor so DNS lookups, connects and
HTTP requests never block the event loop. ``timeout`` bounds the whole call;
on expiry ``asyncio.TimeoutError`` is raised to the caller. Cache writes are
whole-record replacements, so an abandoned call never leaves partial state.
"""

import asyncio
import functools
from typing import Callable, Iterable, Optional, TypeVar

from . import service
from .proxy_core.models import LocationRecord, PurityRecord

T = TypeVar('T')


async def _run_blocking(fn: Callable[..., T], *args, timeout: Optional[float] = None) -> T:
    loop = asyncio.get_running_loop()
    future = loop.run_in_executor(None, functools.partial(fn, *args))
    if timeout is None:
        return await future
    return await asyncio.wait_for(future, timeout)


async def get_location(address: str, timeout: Optional[float] = None) -> Optional[LocationRecord]:
    return await _run_blocking(service.get_location, address, timeout=timeout)


async def get_purity(address: str, port: int, timeout: Optional[float] = None) -> PurityRecord:
    return await _run_blocking(service.get_purity, address, port, timeout=timeout)


async def preload_locations(addresses: Iterable[str], timeout: Optional[float] = None):
    await _run_blocking(service.preload_locations, list(addresses), timeout=timeout)
