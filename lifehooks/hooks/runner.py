"""
Lifecycle Hook Runner for lifehooks
====================================
Entry points executed by the launcher at each lifecycle point: before the
launch, before each worker session and after the run has completed.

Every entry point starts all hooks of its hook set in declaration order
and then joins them, so asynchronous hooks run concurrently. Ordinary hook
errors are logged and swallowed; a SevereServiceError stops dispatching and
is re-raised to the caller as a HookError.
"""

from __future__ import annotations

import asyncio
import logging
import time
from enum import Enum
from typing import Any, Dict, Iterable, List, Sequence

from .errors import HookError
from .invoke import HookOutcome, dispatch
from .normalize import normalize_hooks, service_hooks

# Configure module logger
logger = logging.getLogger(__name__)


class Lifecycle(str, Enum):
    """Lifecycle points the launcher runs hooks at"""
    ON_PREPARE = "onPrepare"
    ON_WORKER_START = "onWorkerStart"
    ON_COMPLETE = "onComplete"

    @classmethod
    def parse(cls, name: str) -> "Lifecycle":
        """Accept both camelCase and snake_case names"""
        for lifecycle in cls:
            if name in (lifecycle.value, _snake(lifecycle.value)):
                return lifecycle
        raise ValueError(f"Unknown lifecycle: {name}")


def _snake(name: str) -> str:
    return "".join(f"_{c.lower()}" if c.isupper() else c for c in name)


async def _run_hook_set(
    entries: Sequence[Any],
    args: Sequence[Any],
    lifecycle: str
) -> List[HookOutcome]:
    """
    Start every entry in order, then wait for all of them to settle.

    Dispatching stops at the first entry that escalates synchronously, so
    later entries are never invoked. As soon as any outcome escalates, the
    hooks still in flight are cancelled and the error is raised without
    waiting for them.

    Raises:
        HookError: If any hook raised a SevereServiceError
    """
    start = time.monotonic()
    pending = []

    for index, entry in enumerate(entries):
        future = dispatch(entry, args, lifecycle, index)
        pending.append(future)
        if future.done() and future.result().is_escalated:
            skipped = len(entries) - index - 1
            if skipped:
                logger.debug(f"Skipping {skipped} remaining '{lifecycle}' hook(s)")
            break

    settled: Dict[int, HookOutcome] = {}
    remaining = set(pending)

    while remaining:
        done, remaining = await asyncio.wait(remaining, return_when=asyncio.FIRST_COMPLETED)
        for future in done:
            outcome = future.result()
            settled[outcome.index] = outcome

        if any(settled[i].is_escalated for i in settled):
            for future in remaining:
                future.cancel()
            if remaining:
                logger.debug(f"Cancelled {len(remaining)} running '{lifecycle}' hook(s)")
            raise HookError.from_outcomes(lifecycle, [settled[i] for i in sorted(settled)])

    logger.debug(
        f"Finished {len(settled)} '{lifecycle}' hook(s) "
        f"in {(time.monotonic() - start) * 1000:.0f}ms"
    )

    return [settled[i] for i in sorted(settled)]


async def run_launcher_hook(hook: Any, *args: Any) -> None:
    """
    Run the `onPrepare` hooks before the launch.

    Args:
        hook: A hook, a list of hooks or None
        *args: Forwarded verbatim to every hook
    """
    await _run_hook_set(normalize_hooks(hook), args, Lifecycle.ON_PREPARE.value)


async def run_worker_hook(hook: Any, *args: Any) -> None:
    """
    Run the `onWorkerStart` hooks before a worker session starts.

    Args:
        hook: A hook, a list of hooks or None
        *args: Forwarded verbatim to every hook
    """
    await _run_hook_set(normalize_hooks(hook), args, Lifecycle.ON_WORKER_START.value)


async def run_service_hook(services: Iterable[Any], hook_name: str, *args: Any) -> None:
    """
    Run the `hook_name` hook of every launcher service.

    Args:
        services: Service instances (objects or mappings)
        hook_name: Name of the hook, e.g. "onPrepare"
        *args: Forwarded verbatim to every hook
    """
    await _run_hook_set(service_hooks(services, hook_name), args, hook_name)


async def run_on_complete_hook(
    hook: Any,
    config: Any,
    capabilities: Any,
    exit_code: int,
    results: Any
) -> List[int]:
    """
    Run the `onComplete` hooks after the run.

    Hooks are called as `hook(exit_code, config, capabilities, results)`.

    Returns:
        One marker per hook entry: 1 if the hook failed, 0 otherwise

    Raises:
        HookError: If any hook raised a SevereServiceError
    """
    outcomes = await _run_hook_set(
        normalize_hooks(hook),
        (exit_code, config, capabilities, results),
        Lifecycle.ON_COMPLETE.value
    )
    return [outcome.marker for outcome in outcomes]


__all__ = [
    'Lifecycle',
    'run_launcher_hook',
    'run_worker_hook',
    'run_service_hook',
    'run_on_complete_hook',
]
