"""Core building blocks: variables, placeholders, metadata, registry."""

from walnut.core.metadata import (
    Platform,
    PluginMetadata,
    get_metadata,
    parse_metadata_block,
    walnut_method,
)
from walnut.core.models import LogEntry, RunResult, StepInvocation, StepResult, StepStatus
from walnut.core.placeholders import PlaceholderResolver, Precedence
from walnut.core.polling import poll_until
from walnut.core.registry import MethodPlugin, MethodRegistry, default_registry
from walnut.core.variables import ABSENT, VariableStore, VariableView

__all__ = [
    "ABSENT",
    "VariableStore",
    "VariableView",
    "PlaceholderResolver",
    "Precedence",
    "Platform",
    "PluginMetadata",
    "walnut_method",
    "get_metadata",
    "parse_metadata_block",
    "MethodPlugin",
    "MethodRegistry",
    "default_registry",
    "poll_until",
    "LogEntry",
    "StepInvocation",
    "StepResult",
    "StepStatus",
    "RunResult",
]
