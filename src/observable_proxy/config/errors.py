"""Errors raised while loading ``OBSERVABLE_PROXY_*`` settings."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable


class ConfigurationError(RuntimeError):
    """One or more environment values failed validation.

    ``variables`` names the offending variables, sorted.
    """

    def __init__(self, variables: Iterable[str]) -> None:
        self.variables = tuple(sorted(variables))
        super().__init__(f"Invalid configuration for: {', '.join(self.variables)}")
