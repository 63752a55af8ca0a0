"""Invocation of a single custom method.

The invoker owns the per-step contract:

1. Resolve placeholders in params, description and locator. Any failure
   here ends the step before a context exists, so no browser or HTTP call
   is made with raw ``{{...}}`` text.
2. Refuse to run a method that needs a locator when none resolved.
3. Build the context the metadata declares, call the method, await it.
4. Report the outcome as a :class:`StepResult`: ``COMPLETED`` or ``FAILED``
   with a structured error. Captured ``log``/``warn`` calls ride along.

Variable writes made before a failure stay committed.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import time
from datetime import datetime
from typing import Any

from walnut.context.base import ExecutionContext
from walnut.context.factory import ContextFactory, RunEnvironment
from walnut.core.models import LogEntry, StepInvocation, StepResult, StepStatus
from walnut.core.placeholders import PlaceholderResolver
from walnut.core.registry import MethodCallable, MethodPlugin
from walnut.core.variables import VariableStore, VariableView
from walnut.errors import (
    CancelledError,
    LocatorResolutionError,
    PluginExecutionError,
    WalnutError,
)

logger = logging.getLogger(__name__)


class PluginInvoker:
    """Runs one method for one step and reports its result."""

    def __init__(self, factory: ContextFactory | None = None) -> None:
        self.factory = factory or ContextFactory()

    @property
    def resolver(self) -> PlaceholderResolver:
        return self.factory.resolver

    async def invoke(
        self,
        plugin: MethodPlugin | MethodCallable,
        invocation: StepInvocation,
        environment: RunEnvironment,
        store: VariableStore,
        result: StepResult | None = None,
    ) -> StepResult:
        """Invoke ``plugin`` for ``invocation``.

        Args:
            plugin: The method, or a function carrying method metadata.
            invocation: The step's action type, params, description, locator.
            environment: Base URL, page and transport of the run.
            store: The run's variable store.
            result: Result object to fill in. Callers that may cancel the
                step pass their own so the outcome survives cancellation.

        Returns:
            The filled-in step result.

        Raises:
            asyncio.CancelledError: If the step was cancelled. ``result`` is
                marked FAILED with :class:`~walnut.errors.CancelledError`
                before the cancellation propagates.
        """
        if not isinstance(plugin, MethodPlugin):
            plugin = MethodPlugin.from_function(plugin)
        metadata = plugin.metadata

        if result is None:
            result = StepResult(action_type=metadata.action_type, name=invocation.display_name)
        result.description = invocation.description
        result.started_at = datetime.now()
        log_sink: list[LogEntry] = []
        start = time.perf_counter()

        try:
            try:
                context = self._build(plugin, invocation, environment, store, result, log_sink)
            except WalnutError as e:
                logger.warning(f"Step {result.name} failed before invocation: {e.report_line()}")
                return result.fail(e)

            result.status = StepStatus.INVOKED
            try:
                value: Any = plugin.func(context)
                if inspect.isawaitable(value):
                    value = await value
            except asyncio.CancelledError:
                result.fail(CancelledError(action_type=metadata.action_type))
                raise
            except WalnutError as e:
                result.fail(e)
            except Exception as e:
                result.fail(PluginExecutionError(metadata.action_type, e))
            else:
                result.value = value
                result.status = StepStatus.COMPLETED
        finally:
            result.logs = log_sink
            result.finished_at = datetime.now()
            result.duration_ms = (time.perf_counter() - start) * 1000

        if result.error is not None:
            logger.warning(f"Step {result.name} failed: {result.error.report_line()}")
        else:
            logger.info(f"Step {result.name} completed in {result.duration_ms:.1f}ms")
        return result

    def _build(
        self,
        plugin: MethodPlugin,
        invocation: StepInvocation,
        environment: RunEnvironment,
        store: VariableStore,
        result: StepResult,
        log_sink: list[LogEntry],
    ) -> ExecutionContext:
        metadata = plugin.metadata
        resolver = self.resolver
        variables = VariableView(store)

        params = resolver.resolve_value(dict(invocation.params), invocation.params, variables)
        args: tuple[Any, ...] = ()
        description = invocation.description
        if description is None:
            description = metadata.description or None
        if description:
            args = resolver.extract_args(description, params, variables)
            description = resolver.resolve(description, params, variables, args)
            result.description = description
        locator = invocation.locator
        if locator:
            locator = resolver.resolve(locator, params, variables, args)

        if metadata.needs_locator and not locator:
            raise LocatorResolutionError(metadata.action_type)

        context = self.factory.build(
            metadata,
            environment,
            store,
            params=params,
            args=args,
            description=description,
            locator=locator,
            log_sink=log_sink,
        )
        result.status = StepStatus.BUILT
        return context
