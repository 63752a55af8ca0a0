"""Placeholder substitution for step descriptions and dataset arguments.

Two syntaxes are recognized:

- ``{{name}}`` and ``${name}``: looked up by name in the run's variables and
  the step's params. Which one wins when both define a name is controlled by
  :class:`Precedence` (variables shadow params by default). Dotted names
  (``{{user.id}}``) walk into mappings and lists.
- ``${0}``, ``${1}`` ...: positional, resolved strictly from the ordered
  argument list derived from the step description.

A placeholder that cannot be resolved raises
:class:`~walnut.errors.PlaceholderResolutionError`; the raw marker is never
passed through.
"""

from __future__ import annotations

import json
import re
from collections.abc import Mapping, Sequence
from enum import Enum
from typing import Any

from walnut.core.variables import ABSENT
from walnut.errors import PlaceholderResolutionError

_MISSING = object()


class Precedence(str, Enum):
    """Lookup order for named placeholders."""

    VARIABLES_FIRST = "variables"
    PARAMS_FIRST = "params"


class PlaceholderResolver:
    """Resolves placeholders against params, variables and positional args.

    Markers inside a substituted value are resolved in turn, so the result
    never carries a marker and resolving it again returns it unchanged.
    A value that refers back to itself fails instead of looping.

    Example:
        >>> resolver = PlaceholderResolver()
        >>> resolver.resolve("login with {{username}}", {"username": "bob"}, {})
        'login with bob'
    """

    PATTERN = re.compile(r"\{\{\s*(?P<named>[^{}]+?)\s*\}\}|\$\{\s*(?P<dollar>[^{}]+?)\s*\}")
    POSITIONAL = re.compile(r"^\d+$")
    MAX_DEPTH = 10

    def __init__(self, precedence: Precedence | str = Precedence.VARIABLES_FIRST) -> None:
        self.precedence = Precedence(precedence)

    def resolve(
        self,
        text: str,
        params: Mapping[str, Any],
        variables: Mapping[str, Any],
        args: Sequence[Any] | None = None,
    ) -> str:
        """Substitute every placeholder in ``text``.

        Args:
            text: Text containing ``{{name}}``, ``${name}`` or ``${N}`` markers.
            params: The step's params.
            variables: The run's variables (a store snapshot or view).
            args: Positional arguments for ``${N}`` markers.

        Returns:
            The text with every marker replaced.

        Raises:
            PlaceholderResolutionError: If any marker has no value.
        """

        return self._resolve(text, params, variables, args, ())

    def _resolve(
        self,
        text: str,
        params: Mapping[str, Any],
        variables: Mapping[str, Any],
        args: Sequence[Any] | None,
        chain: tuple[str, ...],
    ) -> str:
        def replace(match: re.Match[str]) -> str:
            key = match.group("named")
            if key is not None:
                value = self.lookup(key, params, variables, text=text)
            else:
                key = match.group("dollar")
                if self.POSITIONAL.match(key):
                    value = self._positional(int(key), args, text)
                    key = f"${{{key}}}"
                else:
                    value = self.lookup(key, params, variables, text=text)
            return self._render(self._expand(value, key, params, variables, args, chain))

        return self.PATTERN.sub(replace, text)

    def _expand(
        self,
        value: Any,
        key: str,
        params: Mapping[str, Any],
        variables: Mapping[str, Any],
        args: Sequence[Any] | None,
        chain: tuple[str, ...],
    ) -> Any:
        """Resolve markers carried by a substituted value.

        ``chain`` holds the names being expanded above this one; meeting a
        name twice, or nesting deeper than ``MAX_DEPTH``, fails.
        """
        if isinstance(value, str):
            if self.PATTERN.search(value) is None:
                return value
            if key in chain or len(chain) >= self.MAX_DEPTH:
                raise PlaceholderResolutionError(key, text=value, chain=(*chain, key))
            return self._resolve(value, params, variables, args, (*chain, key))
        if isinstance(value, Mapping):
            return {k: self._expand(v, key, params, variables, args, chain) for k, v in value.items()}
        if isinstance(value, list):
            return [self._expand(v, key, params, variables, args, chain) for v in value]
        return value

    def resolve_value(
        self,
        value: Any,
        params: Mapping[str, Any],
        variables: Mapping[str, Any],
        args: Sequence[Any] | None = None,
    ) -> Any:
        """Resolve placeholders inside strings nested in lists and dicts."""
        if isinstance(value, str):
            return self.resolve(value, params, variables, args)
        if isinstance(value, Mapping):
            return {k: self.resolve_value(v, params, variables, args) for k, v in value.items()}
        if isinstance(value, list):
            return [self.resolve_value(v, params, variables, args) for v in value]
        return value

    def extract_args(
        self,
        description: str,
        params: Mapping[str, Any],
        variables: Mapping[str, Any],
    ) -> tuple[Any, ...]:
        """Build the ordered argument list from ``${name}`` markers.

        A description like ``"Zip ${folderPath} to ${outputPath}"`` yields
        ``(params["folderPath"], params["outputPath"])``. Values keep their
        original type.
        """
        args: list[Any] = []
        for match in self.PATTERN.finditer(description):
            token = match.group("dollar")
            if token is None:
                continue
            if self.POSITIONAL.match(token):
                raise PlaceholderResolutionError(
                    f"${{{token}}}",
                    text=description,
                )
            value = self.lookup(token, params, variables, text=description)
            args.append(self._expand(value, token, params, variables, None, ()))
        return tuple(args)

    def lookup(
        self,
        name: str,
        params: Mapping[str, Any],
        variables: Mapping[str, Any],
        text: str | None = None,
    ) -> Any:
        """Look up one named value honoring the configured precedence."""
        sources = (variables, params)
        if self.precedence is Precedence.PARAMS_FIRST:
            sources = (params, variables)
        for source in sources:
            value = _find(source, name)
            if value is not _MISSING:
                return value
        raise PlaceholderResolutionError(name, text=text)

    def _positional(self, index: int, args: Sequence[Any] | None, text: str) -> Any:
        if args is None or index >= len(args):
            raise PlaceholderResolutionError(f"${{{index}}}", text=text)
        return args[index]

    @staticmethod
    def _render(value: Any) -> str:
        if isinstance(value, str):
            return value
        return json.dumps(value, default=str)


def _find(source: Mapping[str, Any], name: str) -> Any:
    if name in source:
        value = source[name]
        return _MISSING if value is ABSENT else value

    if "." not in name:
        return _MISSING

    head, *rest = name.split(".")
    if head not in source:
        return _MISSING
    value = source[head]
    for part in rest:
        if isinstance(value, Mapping) and part in value:
            value = value[part]
        elif isinstance(value, list) and part.isdigit() and int(part) < len(value):
            value = value[int(part)]
        else:
            return _MISSING
    return _MISSING if value is ABSENT else value
