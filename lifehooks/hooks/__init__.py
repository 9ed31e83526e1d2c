"""
lifehooks Hooks Package
========================
Lifecycle hook execution and failure escalation.
"""

from .errors import HookError, SevereServiceError, is_severe
from .invoke import HookOutcome, OutcomeStatus, dispatch
from .normalize import normalize_hooks, service_hooks
from .runner import (
    Lifecycle,
    run_launcher_hook,
    run_worker_hook,
    run_service_hook,
    run_on_complete_hook,
)

__all__ = [
    'HookError',
    'SevereServiceError',
    'is_severe',
    'HookOutcome',
    'OutcomeStatus',
    'dispatch',
    'normalize_hooks',
    'service_hooks',
    'Lifecycle',
    'run_launcher_hook',
    'run_worker_hook',
    'run_service_hook',
    'run_on_complete_hook',
]
