"""
Hook Invoker for lifehooks
===========================
Calls a single hook and turns whatever it does (return, raise, return an
awaitable that later fails) into exactly one HookOutcome.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Awaitable, Optional, Sequence

from .errors import classify

# Configure module logger
logger = logging.getLogger(__name__)


class OutcomeStatus(Enum):
    """How a single hook invocation ended"""
    COMPLETED = auto()
    FAILED = auto()
    ESCALATED = auto()


@dataclass(frozen=True)
class HookOutcome:
    """
    Immutable result of one hook invocation.

    Attributes:
        index: Position of the hook in its normalized hook set
        status: Completed, failed (ordinary error) or escalated (severe error)
        error: The captured exception, if any
        message: Descriptive message of the failure
    """
    index: int
    status: OutcomeStatus = OutcomeStatus.COMPLETED
    error: Optional[BaseException] = None
    message: str = ""

    @classmethod
    def completed(cls, index: int) -> "HookOutcome":
        return cls(index=index)

    @classmethod
    def failed(cls, index: int, error: BaseException, message: str) -> "HookOutcome":
        return cls(index=index, status=OutcomeStatus.FAILED, error=error, message=message)

    @classmethod
    def escalated(cls, index: int, error: BaseException, message: str) -> "HookOutcome":
        return cls(index=index, status=OutcomeStatus.ESCALATED, error=error, message=message)

    @property
    def is_escalated(self) -> bool:
        return self.status is OutcomeStatus.ESCALATED

    @property
    def marker(self) -> int:
        """1 if the hook failed in any way, 0 otherwise"""
        return 0 if self.status is OutcomeStatus.COMPLETED else 1


def _settled(outcome: HookOutcome) -> "asyncio.Future[HookOutcome]":
    """Wrap an outcome known at dispatch time into an already-resolved future"""
    future = asyncio.get_running_loop().create_future()
    future.set_result(outcome)
    return future


async def _join(awaitable: Awaitable[Any], lifecycle: str, index: int) -> HookOutcome:
    try:
        await awaitable
    except Exception as e:
        return classify(e, lifecycle, index)
    return HookOutcome.completed(index)


def dispatch(
    entry: Any,
    args: Sequence[Any],
    lifecycle: str,
    index: int
) -> "asyncio.Future[HookOutcome]":
    """
    Start a single hook.

    Synchronous hooks run to completion before this returns. Hooks returning
    an awaitable are scheduled as a task so they run concurrently with the
    rest of the hook set. The returned future never raises.

    Args:
        entry: Hook set entry; non-callables are skipped as a success
        args: Argument tuple forwarded to the hook
        lifecycle: Lifecycle name, used for logging
        index: Position of the entry in its hook set

    Returns:
        Future resolving to the hook's outcome
    """
    if not callable(entry):
        logger.debug(f"Skipping non-callable '{lifecycle}' hook #{index}: {entry!r}")
        return _settled(HookOutcome.completed(index))

    try:
        result = entry(*args)
    except Exception as e:
        return _settled(classify(e, lifecycle, index))

    if inspect.isawaitable(result):
        return asyncio.ensure_future(_join(result, lifecycle, index))

    return _settled(HookOutcome.completed(index))


__all__ = ['OutcomeStatus', 'HookOutcome', 'dispatch']
