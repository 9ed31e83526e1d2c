"""
Launcher for lifehooks
=======================
Drives a configuration through its lifecycle points: prepare, one worker
start per capability, complete. Spawning the workers themselves is left to
the caller.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from .config import RunnerConfig
from .hooks import (
    Lifecycle,
    run_launcher_hook,
    run_on_complete_hook,
    run_service_hook,
    run_worker_hook,
)

# Configure module logger
logger = logging.getLogger(__name__)


class Launcher:
    """
    Run the lifecycle hooks of a configuration.

    A HookError raised by any lifecycle point propagates to the caller,
    which must treat it as fatal.
    """

    def __init__(self, config: RunnerConfig, services: Optional[List[Any]] = None):
        """
        Initialize the launcher.

        Args:
            config: Runner configuration
            services: Service instances; resolved from the config when omitted
        """
        self.config = config
        self.services = services if services is not None else config.resolved_services()
        self.hook_failures: List[int] = []

    async def prepare(self) -> None:
        """Run the onPrepare hooks of the config and the services"""
        logger.info("Running onPrepare hooks")
        args = (self.config, self.config.capabilities)
        await run_launcher_hook(self.config.resolved_hooks(Lifecycle.ON_PREPARE), *args)
        await run_service_hook(self.services, Lifecycle.ON_PREPARE.value, *args)

    async def start_worker(
        self,
        cid: str,
        capabilities: Dict[str, Any],
        specs: Optional[List[str]] = None
    ) -> None:
        """Run the onWorkerStart hooks for a single worker"""
        logger.debug(f"Running onWorkerStart hooks for worker {cid}")
        args = (cid, capabilities, specs or [], self.config)
        await run_worker_hook(self.config.resolved_hooks(Lifecycle.ON_WORKER_START), *args)
        await run_service_hook(self.services, Lifecycle.ON_WORKER_START.value, *args)

    async def complete(self, exit_code: int, results: Optional[Dict[str, Any]] = None) -> int:
        """
        Run the onComplete hooks.

        Returns:
            The final exit code: 1 if an onComplete hook failed and
            `fail_on_hook_error` is set, `exit_code` otherwise
        """
        logger.info("Running onComplete hooks")
        results = results or {}
        await run_service_hook(
            self.services,
            Lifecycle.ON_COMPLETE.value,
            exit_code, self.config, self.config.capabilities, results
        )
        self.hook_failures = await run_on_complete_hook(
            self.config.resolved_hooks(Lifecycle.ON_COMPLETE),
            self.config,
            self.config.capabilities,
            exit_code,
            results
        )

        if 1 in self.hook_failures:
            logger.warning(f"{self.hook_failures.count(1)} onComplete hook(s) failed")
            if self.config.fail_on_hook_error:
                return 1
        return exit_code

    async def run(self, results: Optional[Dict[str, Any]] = None, exit_code: int = 0) -> int:
        """
        Run every lifecycle point in order.

        Returns:
            The final exit code
        """
        await self.prepare()
        for index, capabilities in enumerate(self.config.capabilities):
            await self.start_worker(f"0-{index}", capabilities)

        if results is None:
            workers = len(self.config.capabilities)
            results = {"finished": workers, "passed": workers, "failed": 0}

        return await self.complete(exit_code, results)


__all__ = ['Launcher']
