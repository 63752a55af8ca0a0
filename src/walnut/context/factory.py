"""Builds the context variant a method declares."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from walnut.config import WalnutConfig
from walnut.context.api import ApiContext
from walnut.context.base import ExecutionContext
from walnut.context.shared import SharedContext
from walnut.context.web import WebContext
from walnut.core.metadata import Platform, PluginMetadata
from walnut.core.models import LogEntry
from walnut.core.placeholders import PlaceholderResolver
from walnut.core.variables import VariableStore
from walnut.errors import ContextBuildError

if TYPE_CHECKING:
    from playwright.async_api import Page

    from walnut.http.transport import Transport

logger = logging.getLogger(__name__)


@dataclass
class RunEnvironment:
    """Ambient state of a run that contexts are built from.

    Attributes:
        test_base_url: Base URL of the application under test.
        page: Live page handle; required for web methods.
        transport: HTTP transport; required for api methods.
    """

    test_base_url: str = ""
    page: Page | None = None
    transport: Transport | None = None


class ContextFactory:
    """Chooses and constructs a context from ``metadata.context``.

    The variant is fixed here, at construction time; nothing dispatches on
    the platform once the method is running.
    """

    def __init__(self, config: WalnutConfig | None = None, resolver: PlaceholderResolver | None = None) -> None:
        self.config = config or WalnutConfig()
        self.resolver = resolver or PlaceholderResolver(self.config.placeholder_precedence)

    def build(
        self,
        metadata: PluginMetadata,
        environment: RunEnvironment,
        store: VariableStore,
        *,
        params: Mapping[str, Any] | None = None,
        args: Sequence[Any] = (),
        description: str | None = None,
        locator: str | None = None,
        log_sink: list[LogEntry] | None = None,
    ) -> ExecutionContext:
        common: dict[str, Any] = {
            "test_base_url": environment.test_base_url,
            "store": store,
            "params": params,
            "args": args,
            "description": description,
            "locator": locator,
            "resolver": self.resolver,
            "log_sink": log_sink,
            "action_type": metadata.action_type,
        }

        if metadata.context is Platform.WEB:
            if environment.page is None:
                raise ContextBuildError(
                    "web methods need a page handle", action_type=metadata.action_type
                )
            context: ExecutionContext = WebContext(
                page=environment.page,
                wait_timeout_ms=self.config.wait_timeout_ms,
                verify_timeout_ms=self.config.verify_timeout_ms,
                poll_interval_ms=self.config.poll_interval_ms,
                **common,
            )
        elif metadata.context is Platform.API:
            if environment.transport is None:
                raise ContextBuildError(
                    "api methods need an HTTP transport", action_type=metadata.action_type
                )
            context = ApiContext(
                transport=environment.transport,
                request_timeout=self.config.request_timeout,
                **common,
            )
        else:
            context = SharedContext(**common)

        logger.debug(f"Built {type(context).__name__} for {metadata.action_type}")
        return context
