# tests/conftest.py

import asyncio
from unittest.mock import MagicMock

import pytest


def make_async_hook(delay: float, marker: MagicMock):
    """An async hook that sleeps for `delay` seconds, then calls `marker`"""
    async def hook(*args):
        await asyncio.sleep(delay)
        marker(*args)
    return hook


@pytest.fixture
def hook_ok():
    """A synchronous hook that succeeds."""
    return MagicMock(return_value=None)


@pytest.fixture
def hook_failing():
    """A synchronous hook raising an ordinary error."""
    return MagicMock(side_effect=RuntimeError("buhh"))


@pytest.fixture
def slow_setup():
    """Called by the async hook once its delay elapsed."""
    return MagicMock(return_value=None)


@pytest.fixture
def async_hook_ok(slow_setup):
    """An asynchronous hook settling after 20ms."""
    return make_async_hook(0.02, slow_setup)
