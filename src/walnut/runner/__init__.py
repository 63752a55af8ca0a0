"""Running steps: the per-step invoker, the run loop, suites and reporting."""

from walnut.runner.formatter import ConsoleReporter, format_step_line
from walnut.runner.invoker import PluginInvoker
from walnut.runner.run import TestRun
from walnut.runner.suite import StepSpec, SuiteSpec, load_suite, parse_suite

__all__ = [
    "PluginInvoker",
    "TestRun",
    "StepSpec",
    "SuiteSpec",
    "load_suite",
    "parse_suite",
    "ConsoleReporter",
    "format_step_line",
]
