"""Sequential execution of a run's steps."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from datetime import datetime
from typing import TYPE_CHECKING, Any

from walnut.config import WalnutConfig
from walnut.context.factory import ContextFactory, RunEnvironment
from walnut.core.metadata import Platform
from walnut.core.models import RunResult, StepInvocation, StepResult
from walnut.core.registry import MethodRegistry
from walnut.core.variables import VariableStore
from walnut.errors import CancelledError, PluginNotFoundError
from walnut.http.transport import HttpxTransport
from walnut.runner.invoker import PluginInvoker

if TYPE_CHECKING:
    from playwright.async_api import Page

    from walnut.http.transport import Transport

logger = logging.getLogger(__name__)


class TestRun:
    """Runs steps one after another against a fresh variable store.

    Each call to :meth:`execute` owns its own :class:`VariableStore`, seeded
    from ``variables``, and discards it when the run ends; the final values
    are kept on the :class:`RunResult`. A step starts only after the previous
    one settled. By default the first failure halts the run and the remaining
    steps are reported as skipped.

    One ``TestRun`` executes one run at a time. Independent runs use
    independent ``TestRun`` instances and may share an event loop.

    Example:
        >>> run = TestRun(registry, base_url="https://shop.example")
        >>> result = await run.execute([StepInvocation("custom_login", params={...})])
        >>> result.success
        True
    """

    __test__ = False

    def __init__(
        self,
        registry: MethodRegistry,
        *,
        base_url: str | None = None,
        page: Page | None = None,
        transport: Transport | None = None,
        config: WalnutConfig | None = None,
        variables: dict[str, Any] | None = None,
        invoker: PluginInvoker | None = None,
    ) -> None:
        self.registry = registry
        self.config = config or WalnutConfig()
        self.base_url = base_url if base_url is not None else self.config.base_url
        self.page = page
        self.transport = transport
        self.initial_variables = dict(variables or {})
        self.invoker = invoker or PluginInvoker(ContextFactory(self.config))
        self._current: asyncio.Future[StepResult] | None = None
        self._aborted = False
        self._abort_reason: str | None = None

    @property
    def aborted(self) -> bool:
        return self._aborted

    def abort(self, reason: str = "run aborted") -> None:
        """Stop the run: cancel the step in flight and start no further steps."""
        if self._aborted:
            return
        self._aborted = True
        self._abort_reason = reason
        logger.warning(f"Aborting run: {reason}")
        if self._current is not None and not self._current.done():
            self._current.cancel()

    async def execute(self, steps: Iterable[StepInvocation]) -> RunResult:
        """Execute ``steps`` in order and return the run's result.

        Raises:
            asyncio.CancelledError: If the task running ``execute`` itself is
                cancelled from outside. Use :meth:`abort` to stop a run and
                still get its result.
        """
        steps = list(steps)
        self._aborted = False
        self._abort_reason = None
        store = VariableStore(self.initial_variables)
        run_result = RunResult()

        transport = self.transport
        owns_transport = False
        if transport is None and self._needs_transport(steps):
            transport = HttpxTransport(timeout=self.config.request_timeout)
            owns_transport = True
        environment = RunEnvironment(test_base_url=self.base_url, page=self.page, transport=transport)

        timer = None
        if self.config.run_timeout is not None:
            loop = asyncio.get_running_loop()
            timer = loop.call_later(
                self.config.run_timeout, self.abort, f"run exceeded {self.config.run_timeout}s"
            )

        halted = False
        try:
            for invocation in steps:
                if halted or self._aborted:
                    run_result.steps.append(StepResult.skipped(invocation))
                    continue

                result = StepResult(action_type=invocation.action_type, name=invocation.display_name)
                run_result.steps.append(result)
                await self._run_step(invocation, environment, store, result)

                if not result.success and self.config.stop_on_failure:
                    halted = True
        finally:
            if timer is not None:
                timer.cancel()
            run_result.variables = store.snapshot()
            store.clear()
            run_result.finished_at = datetime.now()
            run_result.aborted = self._aborted
            run_result.abort_reason = self._abort_reason
            if owns_transport and transport is not None:
                await transport.aclose()

        logger.info(
            f"Run finished: {sum(s.success for s in run_result.steps)}/{len(run_result.steps)} steps completed"
        )
        return run_result

    async def _run_step(
        self,
        invocation: StepInvocation,
        environment: RunEnvironment,
        store: VariableStore,
        result: StepResult,
    ) -> None:
        plugin = self.registry.get(invocation.action_type)
        if plugin is None:
            result.fail(PluginNotFoundError(invocation.action_type))
            return

        self._current = asyncio.ensure_future(
            self.invoker.invoke(plugin, invocation, environment, store, result)
        )
        try:
            await self._current
        except asyncio.CancelledError:
            if not self._aborted:
                raise
            result.fail(CancelledError(self._abort_reason or "run aborted"))
        finally:
            self._current = None

    def _needs_transport(self, steps: list[StepInvocation]) -> bool:
        for invocation in steps:
            plugin = self.registry.get(invocation.action_type)
            if plugin is not None and plugin.metadata.context is Platform.API:
                return True
        return False
