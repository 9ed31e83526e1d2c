"""
Hook Failure Classification for lifehooks
==========================================
Severe vs. ordinary hook failures and the error raised to the caller
when a lifecycle point has to stop the runner.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, TYPE_CHECKING

if TYPE_CHECKING:
    from .invoke import HookOutcome

# Configure module logger
logger = logging.getLogger(__name__)

STOP_MESSAGE = "Stopping runner..."


class SevereServiceError(Exception):
    """
    Raised by a hook or service to signal that the environment is unusable.

    Unlike any other exception, this one aborts the remaining hooks of the
    lifecycle point and is re-raised to the caller as a HookError.
    """

    def __init__(self, message: str = "Severe service error occurred."):
        super().__init__(message)
        self.message = message


class HookError(Exception):
    """
    Fatal error raised by a lifecycle entry point after a severe failure.

    Attributes:
        origin: Lifecycle name the failure happened in (e.g. "onPrepare")
        outcomes: Outcomes of every hook that was dispatched
    """

    def __init__(
        self,
        message: str,
        origin: str,
        outcomes: Optional[Sequence["HookOutcome"]] = None
    ):
        super().__init__(message)
        self.origin = origin
        self.outcomes: List["HookOutcome"] = list(outcomes or [])

    @classmethod
    def from_outcomes(cls, origin: str, outcomes: Sequence["HookOutcome"]) -> "HookError":
        """Build the runner-stopping error out of the escalated outcomes"""
        reasons = [
            f"A service failed in the '{origin}' hook (#{o.index})\n{o.message}"
            for o in outcomes if o.is_escalated
        ]
        message = "\n" + "\n\n".join(reasons) + f"\n\n{STOP_MESSAGE}"
        return cls(message, origin, outcomes)


def is_severe(error: BaseException) -> bool:
    """Check whether an error asks to stop the runner"""
    if isinstance(error, SevereServiceError):
        return True
    # plugins may ship their own copy of the class
    return type(error).__name__ == SevereServiceError.__name__


def describe(error: BaseException) -> str:
    """Render an error as "<TypeName>: <message>" """
    text = str(error)
    name = type(error).__name__
    return f"{name}: {text}" if text else name


def classify(error: BaseException, lifecycle: str, index: int) -> "HookOutcome":
    """
    Classify a captured hook failure and log it.

    Args:
        error: Exception raised by the hook
        lifecycle: Lifecycle name the hook ran in
        index: Position of the hook in its hook set

    Returns:
        FAILED outcome for ordinary errors, ESCALATED for severe ones
    """
    from .invoke import HookOutcome

    message = describe(error)
    extra = {"lifecycle": lifecycle, "hook_index": index}

    if is_severe(error):
        logger.critical(
            f"Severe error in '{lifecycle}' hook #{index}: {message}\n{STOP_MESSAGE}",
            exc_info=error,
            extra=extra
        )
        return HookOutcome.escalated(index, error, message)

    logger.error(
        f"Error in '{lifecycle}' hook #{index}: {message}\nContinue...",
        exc_info=error,
        extra=extra
    )
    return HookOutcome.failed(index, error, message)


__all__ = [
    'SevereServiceError',
    'HookError',
    'STOP_MESSAGE',
    'is_severe',
    'describe',
    'classify',
]
