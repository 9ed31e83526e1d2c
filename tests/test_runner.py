# tests/test_runner.py

import asyncio
import logging
import time
from unittest.mock import MagicMock, call

import pytest

from lifehooks.hooks import (
    HookError,
    Lifecycle,
    SevereServiceError,
    run_launcher_hook,
    run_on_complete_hook,
    run_service_hook,
    run_worker_hook,
)
from tests.conftest import make_async_hook


class TestRunServiceHook:
    """Service hooks fan out over every launcher service."""

    @pytest.mark.asyncio
    async def test_run_sync_and_async_hooks_successfully(self, hook_ok, async_hook_ok, slow_setup):
        await run_service_hook([
            {"onPrepare": hook_ok},
            {"onPrepare": async_hook_ok},
            {"onPrepare": "foobar"},
        ], "onPrepare", 1, True, "abc")

        hook_ok.assert_called_once_with(1, True, "abc")
        slow_setup.assert_called_once_with(1, True, "abc")

    @pytest.mark.asyncio
    async def test_continues_after_a_hook_throws(self, hook_ok, hook_failing, async_hook_ok, slow_setup):
        await run_service_hook([
            {"onPrepare": hook_ok},
            {"onPrepare": "foobar"},
            {"onPrepare": async_hook_ok},
            {"onPrepare": hook_failing},
        ], "onPrepare", 1, True, "abc")

        hook_ok.assert_called_once()
        hook_failing.assert_called_once()
        slow_setup.assert_called_once()

    @pytest.mark.asyncio
    async def test_stops_after_severe_service_error(self, hook_ok, async_hook_ok, slow_setup):
        hook_severe = MagicMock(side_effect=SevereServiceError())
        after = MagicMock(return_value=None)

        with pytest.raises(HookError) as exc_info:
            await run_service_hook([
                {"onPrepare": hook_ok},
                {"onPrepare": "foobar"},
                {"onPrepare": async_hook_ok},
                {"onPrepare": hook_severe},
                {"onPrepare": after},
            ], "onPrepare", 1, True, "abc")

        assert "SevereServiceError" in str(exc_info.value)
        assert "Stopping runner..." in str(exc_info.value)
        assert exc_info.value.origin == "onPrepare"
        hook_ok.assert_called_once()
        hook_severe.assert_called_once()
        # the running async hook is cancelled before it finishes
        slow_setup.assert_not_called()
        after.assert_not_called()

    @pytest.mark.asyncio
    async def test_services_without_the_hook_are_skipped(self, hook_ok):
        class Service:
            def onComplete(self, *args):
                raise AssertionError("wrong hook")

        await run_service_hook([Service(), {"onPrepare": hook_ok}], "onPrepare")
        hook_ok.assert_called_once_with()


class TestRunLauncherHook:

    @pytest.mark.asyncio
    async def test_handles_array_of_functions(self, hook_ok, hook_failing):
        await run_launcher_hook([hook_ok, hook_failing], 1, 2, 3, 4, 5, 6)

        hook_ok.assert_called_once_with(1, 2, 3, 4, 5, 6)
        hook_failing.assert_called_once_with(1, 2, 3, 4, 5, 6)

    @pytest.mark.asyncio
    async def test_handles_a_single_function(self, hook_ok):
        await run_launcher_hook(hook_ok, 1, 2, 3, 4, 5, 6)
        hook_ok.assert_called_once_with(1, 2, 3, 4, 5, 6)

    @pytest.mark.asyncio
    async def test_handles_no_hook(self):
        assert await run_launcher_hook(None, {}, {}) is None

    @pytest.mark.asyncio
    async def test_waits_for_async_functions(self, hook_ok, async_hook_ok, slow_setup):
        start = time.monotonic()
        await run_launcher_hook([hook_ok, async_hook_ok], 1, 2, 3, 4, 5, 6)

        assert time.monotonic() - start >= 0.019
        hook_ok.assert_called_once_with(1, 2, 3, 4, 5, 6)
        slow_setup.assert_called_once_with(1, 2, 3, 4, 5, 6)

    @pytest.mark.asyncio
    async def test_mixed_set_with_ordinary_failure_resolves(self, hook_ok, hook_failing, async_hook_ok,
                                                            slow_setup, caplog):
        with caplog.at_level(logging.ERROR):
            await run_launcher_hook([hook_ok, "not-a-function", async_hook_ok, hook_failing], "x")

        hook_ok.assert_called_once_with("x")
        slow_setup.assert_called_once_with("x")
        hook_failing.assert_called_once_with("x")
        errors = [r for r in caplog.records if r.levelno == logging.ERROR]
        assert len(errors) == 1
        assert errors[0].hook_index == 3
        assert errors[0].lifecycle == "onPrepare"

    @pytest.mark.asyncio
    async def test_async_hooks_run_concurrently(self):
        fast, slow = MagicMock(), MagicMock()

        start = time.monotonic()
        await run_launcher_hook([make_async_hook(0.3, slow), make_async_hook(0.1, fast)])
        elapsed = time.monotonic() - start

        fast.assert_called_once()
        slow.assert_called_once()
        assert elapsed >= 0.29
        assert elapsed < 0.38

    @pytest.mark.asyncio
    async def test_start_order_matches_declaration_order(self):
        started = []

        def sync_hook(name):
            return lambda: started.append(name)

        def async_hook(name):
            async def hook():
                started.append(name)
                await asyncio.sleep(0)
            return hook

        await run_launcher_hook([async_hook("a"), sync_hook("b"), async_hook("c"), sync_hook("d")])

        # sync hooks run at dispatch, async bodies start in order afterwards
        assert started == ["b", "d", "a", "c"]

    @pytest.mark.asyncio
    async def test_severe_error_skips_remaining_hooks(self, hook_ok):
        later = MagicMock(return_value=None)

        def severe(*args):
            raise SevereServiceError("bad env")

        with pytest.raises(HookError) as exc_info:
            await run_launcher_hook([hook_ok, severe, later], 1)

        hook_ok.assert_called_once_with(1)
        later.assert_not_called()
        assert "bad env" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_async_severe_error_propagates(self, hook_ok):
        async def severe():
            await asyncio.sleep(0.01)
            raise SevereServiceError("late")

        with pytest.raises(HookError):
            await run_launcher_hook([severe, hook_ok])

        # dispatched before the async failure surfaced
        hook_ok.assert_called_once_with()

    @pytest.mark.asyncio
    async def test_sync_severe_error_does_not_wait_for_slow_hook(self):
        slow = MagicMock()

        def severe(*args):
            raise SevereServiceError("bad env")

        start = time.monotonic()
        with pytest.raises(HookError) as exc_info:
            await run_launcher_hook([make_async_hook(1.0, slow), severe])

        assert time.monotonic() - start < 0.2
        await asyncio.sleep(0)
        slow.assert_not_called()
        assert [o.index for o in exc_info.value.outcomes] == [1]


class TestRunWorkerHook:

    @pytest.mark.asyncio
    async def test_forwards_arguments(self, hook_ok):
        await run_worker_hook([hook_ok], "0-0", {"browserName": "chrome"}, [], {})
        hook_ok.assert_called_once_with("0-0", {"browserName": "chrome"}, [], {})

    @pytest.mark.asyncio
    async def test_ordinary_failure_does_not_propagate(self, hook_failing):
        assert await run_worker_hook(hook_failing, "0-0") is None

    @pytest.mark.asyncio
    async def test_severe_failure_uses_worker_lifecycle(self):
        with pytest.raises(HookError) as exc_info:
            await run_worker_hook(MagicMock(side_effect=SevereServiceError()), "0-0")
        assert exc_info.value.origin == Lifecycle.ON_WORKER_START.value


class TestRunOnCompleteHook:
    config = {"capabilities": {}}

    @pytest.mark.asyncio
    async def test_handles_array_of_functions(self, hook_ok):
        second = MagicMock(return_value=None)
        results = {"finished": 1}

        markers = await run_on_complete_hook([hook_ok, second], self.config, {}, 0, results)

        assert markers == [0, 0]
        hook_ok.assert_called_once_with(0, self.config, {}, results)
        second.assert_called_once_with(0, self.config, {}, results)

    @pytest.mark.asyncio
    async def test_handles_a_single_function(self, hook_ok):
        assert await run_on_complete_hook(hook_ok, self.config, {}, 0, {}) == [0]

    @pytest.mark.asyncio
    async def test_waits_for_async_functions(self, async_hook_ok, slow_setup):
        start = time.monotonic()
        markers = await run_on_complete_hook([async_hook_ok], self.config, {}, 0, {})
        assert time.monotonic() - start >= 0.019
        assert markers == [0]
        slow_setup.assert_called_once()

    @pytest.mark.asyncio
    async def test_failure_returns_marker(self, hook_ok, hook_failing):
        markers = await run_on_complete_hook([hook_ok, hook_failing], self.config, {}, 0, {})
        assert markers == [0, 1]
        hook_ok.assert_called_once()
        hook_failing.assert_called_once()

    @pytest.mark.asyncio
    async def test_async_failure_returns_marker(self, hook_ok):
        async def failing(*args):
            raise RuntimeError("upload failed")

        markers = await run_on_complete_hook([failing, hook_ok], self.config, {}, 1, {})
        assert markers == [1, 0]

    @pytest.mark.asyncio
    async def test_non_callables_count_as_success(self):
        markers = await run_on_complete_hook(["foo", None, 3], self.config, {}, 0, {})
        assert markers == [0, 0, 0]

    @pytest.mark.asyncio
    async def test_no_hook_returns_empty_markers(self):
        assert await run_on_complete_hook(None, self.config, {}, 0, {}) == []

    @pytest.mark.asyncio
    async def test_severe_error_rejects(self, hook_ok):
        hook_severe = MagicMock(side_effect=SevereServiceError("buhh"))

        with pytest.raises(HookError) as exc_info:
            await run_on_complete_hook([hook_ok, hook_severe], self.config, {}, 0, {})

        assert exc_info.value.origin == "onComplete"
        hook_ok.assert_called_once()
        hook_severe.assert_called_once()

    @pytest.mark.asyncio
    async def test_async_severe_error_does_not_wait_for_slow_hook(self):
        slow = MagicMock()

        async def severe(*args):
            await asyncio.sleep(0.01)
            raise SevereServiceError("device lost")

        start = time.monotonic()
        with pytest.raises(HookError, match="device lost"):
            await run_on_complete_hook([severe, make_async_hook(1.0, slow)], self.config, {}, 0, {})

        assert time.monotonic() - start < 0.2
        # let the cancellation reach the slow hook
        await asyncio.sleep(0)
        slow.assert_not_called()

    @pytest.mark.asyncio
    async def test_repeated_runs_give_identical_markers(self, hook_ok, hook_failing):
        hooks = [hook_ok, hook_failing, "skip"]
        first = await run_on_complete_hook(hooks, self.config, {}, 0, {})
        second = await run_on_complete_hook(hooks, self.config, {}, 0, {})
        assert first == second == [0, 1, 0]
        assert hook_ok.call_args_list == [call(0, self.config, {}, {})] * 2


def test_lifecycle_parse_accepts_both_spellings():
    assert Lifecycle.parse("onPrepare") is Lifecycle.ON_PREPARE
    assert Lifecycle.parse("on_worker_start") is Lifecycle.ON_WORKER_START
    assert Lifecycle.parse("on_complete") is Lifecycle.ON_COMPLETE
    with pytest.raises(ValueError):
        Lifecycle.parse("onReload")
