"""lifehooks - Lifecycle hook orchestration for browser test runners"""

__version__ = "1.0.0"

from .config import RunnerConfig, load_config
from .hooks import (
    HookError,
    SevereServiceError,
    run_launcher_hook,
    run_worker_hook,
    run_service_hook,
    run_on_complete_hook,
)
from .launcher import Launcher

__all__ = [
    "RunnerConfig",
    "load_config",
    "HookError",
    "SevereServiceError",
    "run_launcher_hook",
    "run_worker_hook",
    "run_service_hook",
    "run_on_complete_hook",
    "Launcher",
]
