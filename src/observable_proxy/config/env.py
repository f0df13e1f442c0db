"""Environment variable loaders for configuration."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

from dotenv import dotenv_values

if TYPE_CHECKING:
    from pathlib import Path

ENV_PREFIX = "OBSERVABLE_PROXY_"


def read_environment(*, env_file: Path | None = None, prefix: str = ENV_PREFIX) -> dict[str, str]:
    """Return ``prefix``-ed variables from the environment, layered over ``env_file``.

    Values set in the process environment win over those read from the dotenv file. Blank
    values are treated as unset.
    """

    values: dict[str, str | None] = {}
    if env_file is not None:
        values.update(dotenv_values(env_file))
    values.update(os.environ)
    return {
        key: value
        for key, value in values.items()
        if key.startswith(prefix) and value is not None and value.strip()
    }
