"""
Runner Configuration for lifehooks
===================================
YAML configuration naming the lifecycle hooks and launcher services to run,
the capabilities to start workers for, and logging settings.

Example:

    log_level: info
    capabilities:
      - browserName: chrome
    hooks:
      onPrepare:
        - mypkg.hooks:start_tunnel
      on_complete: mypkg.hooks:upload_report
    services:
      - mypkg.services:SauceService
      - service: mypkg.services:DevtoolsService
        options:
          port: 9222
"""

from __future__ import annotations

import importlib
import inspect
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from .hooks.runner import Lifecycle

# Configure module logger
logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "lifehooks.yaml"


class ConfigError(ValueError):
    """Raised when a configuration file cannot be used"""


def resolve_reference(ref: Any) -> Any:
    """
    Resolve a "package.module:attribute" reference to the object it names.

    Non-string references are returned unchanged. References that cannot be
    imported are logged and returned as is, which leaves a non-callable
    placeholder the hook runner will skip.
    """
    if not isinstance(ref, str):
        return ref

    if ":" in ref:
        module_name, _, attr_path = ref.partition(":")
    else:
        module_name, _, attr_path = ref.rpartition(".")

    if not module_name or not attr_path:
        logger.warning(f"Invalid hook reference: {ref!r}")
        return ref

    try:
        target = importlib.import_module(module_name)
        for attr in attr_path.split("."):
            target = getattr(target, attr)
    except Exception as e:
        logger.warning(f"Failed to resolve {ref!r}: {e}")
        return ref

    return target


@dataclass
class ServiceDefinition:
    """A launcher service entry of the configuration"""
    service: Any
    options: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_value(cls, data: Any) -> "ServiceDefinition":
        """Create from a bare reference or a {service, options} mapping"""
        if isinstance(data, dict):
            if "service" not in data:
                raise ConfigError(f"Service entry without 'service' key: {data!r}")
            options = data.get("options") or {}
            if not isinstance(options, dict):
                raise ConfigError(f"Service options must be a mapping: {options!r}")
            return cls(service=data["service"], options=options)
        return cls(service=data)

    def instantiate(self) -> Any:
        """Resolve the reference, instantiating it with its options if it is a class"""
        target = resolve_reference(self.service)
        if not inspect.isclass(target):
            return target
        try:
            return target(self.options)
        except Exception as e:
            raise ConfigError(f"Failed to initialise service {target.__name__}: {e}") from e


@dataclass
class RunnerConfig:
    """Configuration of a run"""
    hooks: Dict[str, List[Any]] = field(default_factory=dict)
    services: List[ServiceDefinition] = field(default_factory=list)
    capabilities: List[Dict[str, Any]] = field(default_factory=list)
    log_level: str = "info"
    log_dir: Optional[Path] = None
    log_file: Optional[Path] = None
    fail_on_hook_error: bool = True
    source: Optional[Path] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any], source: Optional[Path] = None) -> "RunnerConfig":
        """
        Create from a dictionary.

        Raises:
            ConfigError: If a section has the wrong shape or names an unknown lifecycle
        """
        if not isinstance(data, dict):
            raise ConfigError(f"Configuration must be a mapping, got {type(data).__name__}")

        hooks: Dict[str, List[Any]] = {}
        raw_hooks = data.get("hooks") or {}
        if not isinstance(raw_hooks, dict):
            raise ConfigError("'hooks' must map lifecycle names to hook references")
        for name, refs in raw_hooks.items():
            try:
                lifecycle = Lifecycle.parse(str(name))
            except ValueError as e:
                raise ConfigError(str(e)) from e
            if refs is None:
                refs = []
            elif not isinstance(refs, list):
                refs = [refs]
            hooks.setdefault(lifecycle.value, []).extend(refs)

        raw_services = data.get("services") or []
        if not isinstance(raw_services, list):
            raise ConfigError("'services' must be a list")

        capabilities = data.get("capabilities") or []
        if isinstance(capabilities, dict):
            capabilities = [capabilities]
        if not isinstance(capabilities, list):
            raise ConfigError("'capabilities' must be a list of mappings")

        log_dir = data.get("log_dir")
        if log_dir is not None:
            log_dir = Path(log_dir)
            if source is not None and not log_dir.is_absolute():
                log_dir = source.parent / log_dir

        log_file = data.get("log_file")
        if log_file is not None:
            log_file = Path(log_file)
            if not log_file.is_absolute():
                if log_dir is not None:
                    log_file = log_dir / log_file
                elif source is not None:
                    log_file = source.parent / log_file

        fail_on_hook_error = data.get("fail_on_hook_error", True)
        if not isinstance(fail_on_hook_error, bool):
            raise ConfigError(f"'fail_on_hook_error' must be true or false, got {fail_on_hook_error!r}")

        return cls(
            hooks=hooks,
            services=[ServiceDefinition.from_value(s) for s in raw_services],
            capabilities=capabilities,
            log_level=str(data.get("log_level", "info")),
            log_dir=log_dir,
            log_file=log_file,
            fail_on_hook_error=fail_on_hook_error,
            source=source
        )

    def hook_references(self, lifecycle: Union[str, Lifecycle]) -> List[Any]:
        """Raw hook references configured for a lifecycle"""
        if not isinstance(lifecycle, Lifecycle):
            lifecycle = Lifecycle.parse(lifecycle)
        return list(self.hooks.get(lifecycle.value, []))

    def resolved_hooks(self, lifecycle: Union[str, Lifecycle]) -> List[Any]:
        """Hooks configured for a lifecycle, with references resolved"""
        return [resolve_reference(ref) for ref in self.hook_references(lifecycle)]

    def resolved_services(self) -> List[Any]:
        """Service instances, in configuration order"""
        return [definition.instantiate() for definition in self.services]


def load_config(path: Union[str, Path]) -> RunnerConfig:
    """
    Load a configuration file.

    Args:
        path: Path to a YAML file

    Returns:
        RunnerConfig; an empty file yields the defaults

    Raises:
        ConfigError: If the file is missing, unreadable or malformed
    """
    path = Path(path)

    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except FileNotFoundError as e:
        raise ConfigError(f"Configuration file not found: {path}") from e
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Failed to load configuration file {path}: {e}") from e

    logger.debug(f"Loaded configuration from {path}")
    return RunnerConfig.from_dict(data or {}, source=path)


__all__ = [
    'ConfigError',
    'RunnerConfig',
    'ServiceDefinition',
    'DEFAULT_CONFIG_FILE',
    'load_config',
    'resolve_reference',
]
