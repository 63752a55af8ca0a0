"""YAML suite files: a base URL, seed variables and a list of steps.

Example suite::

    base_url: https://shop.example
    variables:
      greeting: hello
    steps:
      - action: custom_login
        description: login with {{username}}
        params:
          username: bob
          password: secret
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from walnut.core.models import StepInvocation
from walnut.errors import ConfigValidationError


class StepSpec(BaseModel):
    """One step entry in a suite file."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    action: str = Field(alias="action_type", min_length=1)
    name: str | None = None
    description: str | None = None
    params: dict[str, Any] = Field(default_factory=dict)
    locator: str | None = None

    def to_invocation(self) -> StepInvocation:
        return StepInvocation(
            action_type=self.action,
            params=dict(self.params),
            description=self.description,
            locator=self.locator,
            name=self.name,
        )


class SuiteSpec(BaseModel):
    """A parsed suite file."""

    model_config = ConfigDict(extra="forbid")

    base_url: str | None = None
    variables: dict[str, Any] = Field(default_factory=dict)
    steps: list[StepSpec] = Field(default_factory=list)

    def to_invocations(self) -> list[StepInvocation]:
        return [step.to_invocation() for step in self.steps]


def parse_suite(data: dict[str, Any]) -> SuiteSpec:
    """Validate suite data loaded from YAML or built in code."""
    try:
        return SuiteSpec.model_validate(data)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"]) or "suite"
        raise ConfigValidationError(
            message=f"Invalid suite: {first['msg']}",
            field=field,
            value=first.get("input"),
        ) from e


def load_suite(path: str | Path) -> SuiteSpec:
    """Load a suite from a YAML file."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Suite file not found: {path}")

    with open(path) as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ConfigValidationError(
            message="Suite file must contain a mapping",
            field="suite",
            value=type(data).__name__,
        )
    return parse_suite(data)
