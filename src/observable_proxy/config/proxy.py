"""Observable proxy engine configuration."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .env import read_environment
from .errors import ConfigurationError

if TYPE_CHECKING:
    from pathlib import Path

log = getLogger(__name__)

DEFAULT_TYPE_NAME_SUFFIX: Final[str] = "Proxy"


@dataclass(frozen=True, slots=True)
class ObservableConfig:
    """Settings for proxy synthesis and change dispatch.

    ``type_name_suffix`` names generated types ``<Contract>_<suffix>``; with
    ``unique_type_names`` a random hex token is appended as well. ``wrap_handler_errors``
    re-raises handler failures as ``HandlerInvocationError`` instead of letting the
    handler's own exception through. ``log_level``, when set, is applied to the
    package's loggers by the default factory at startup.
    """

    type_name_suffix: str = DEFAULT_TYPE_NAME_SUFFIX
    unique_type_names: bool = True
    wrap_handler_errors: bool = False
    log_level: str | None = None


class _EnvironmentSchema(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True, str_strip_whitespace=True)

    type_name_suffix: str = Field(
        default=DEFAULT_TYPE_NAME_SUFFIX,
        alias="OBSERVABLE_PROXY_TYPE_SUFFIX",
        pattern=r"^[A-Za-z_][A-Za-z0-9_]*$",
    )
    unique_type_names: bool = Field(default=True, alias="OBSERVABLE_PROXY_UNIQUE_TYPE_NAMES")
    wrap_handler_errors: bool = Field(default=False, alias="OBSERVABLE_PROXY_WRAP_HANDLER_ERRORS")
    log_level: str | None = Field(
        default=None,
        alias="OBSERVABLE_PROXY_LOG_LEVEL",
        pattern=r"(?i)^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
    )


def get_observable_config(*, env_file: Path | None = None) -> ObservableConfig:
    """Build the configuration from ``OBSERVABLE_PROXY_*`` variables and an optional dotenv file."""

    values = read_environment(env_file=env_file)
    try:
        schema = _EnvironmentSchema.model_validate(values)
    except ValidationError as exc:
        invalid = {str(error["loc"][0]) for error in exc.errors()}
        log.warning("Invalid observable proxy configuration: %s", ", ".join(sorted(invalid)))
        raise ConfigurationError(invalid) from exc
    return ObservableConfig(
        type_name_suffix=schema.type_name_suffix,
        unique_type_names=schema.unique_type_names,
        wrap_handler_errors=schema.wrap_handler_errors,
        log_level=schema.log_level.upper() if schema.log_level else None,
    )
