"""Turn hook references into ordered hook sets."""

from __future__ import annotations

from typing import Any, Iterable, List, Mapping


def normalize_hooks(hook: Any) -> List[Any]:
    """
    Expose a hook reference as an ordered list of entries.

    None yields an empty list, a list or tuple is copied as is, anything else
    (a callable or a malformed value) becomes a one-entry list. Non-callable
    entries are kept in place; the invoker skips them.
    """
    if hook is None:
        return []
    if isinstance(hook, (list, tuple)):
        return list(hook)
    return [hook]


def service_hooks(services: Iterable[Any], hook_name: str) -> List[Any]:
    """
    Collect the `hook_name` hook of every service, one entry per service.

    Services may be objects exposing the hook as an attribute or plain
    mappings; a service without the hook contributes a None placeholder.
    """
    entries = []
    for service in services or []:
        if isinstance(service, Mapping):
            entries.append(service.get(hook_name))
        else:
            entries.append(getattr(service, hook_name, None))
    return entries


__all__ = ['normalize_hooks', 'service_hooks']
