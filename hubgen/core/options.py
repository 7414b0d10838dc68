"""
Options — Generator configuration.

Options are a plain frozen value passed explicitly down the call chain.
They take part in cache keys, so changing any option recompiles.

Configuration sources, lowest to highest precedence:
- Defaults on GeneratorOptions
- YAML options file (load_options)
- Environment: HUBGEN_DEFAULT_LIFETIME, HUBGEN_WARN_DUPLICATES,
  HUBGEN_FAKE_PREFIX, HUBGEN_CANCELLATION_TYPE
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml
from pydantic import Field, field_validator

from hubgen.core.errors import OptionsError
from hubgen.ir.bindings import ReconnectPolicy
from hubgen.ir.enums import ServiceLifetime
from hubgen.ir.schema import IRModel
from hubgen.synthesis import naming


class GeneratorOptions(IRModel):
    """Settings that shape generated output."""

    reconnect_policy: ReconnectPolicy = Field(
        default_factory=ReconnectPolicy,
        description="Backoff applied by the registration helper when the caller supplies none",
    )
    default_lifetime: ServiceLifetime = ServiceLifetime.SINGLETON
    registration_function: str = "register_hub_clients"
    registration_builder: str = "HubClientRegistrations"
    fake_prefix: str = "Fake"
    cancellation_type: str = "CancellationToken"
    warn_on_duplicate_signatures: bool = Field(
        False,
        description="Report dropped duplicate signatures as warnings instead of info",
    )

    @field_validator("registration_function", "registration_builder", "cancellation_type")
    @classmethod
    def _identifier(cls, value: str) -> str:
        if not naming.is_identifier(value):
            raise ValueError(f"{value!r} is not a Python identifier")
        return value

    @field_validator("fake_prefix")
    @classmethod
    def _prefix(cls, value: str) -> str:
        # Prefixed onto a binding name, which is already an identifier
        if value and not naming.is_identifier(value):
            raise ValueError(f"{value!r} can't start a Python class name")
        return value


_ENV_KEYS = {
    "HUBGEN_DEFAULT_LIFETIME": "default_lifetime",
    "HUBGEN_WARN_DUPLICATES": "warn_on_duplicate_signatures",
    "HUBGEN_FAKE_PREFIX": "fake_prefix",
    "HUBGEN_CANCELLATION_TYPE": "cancellation_type",
}


def parse_options(data: Optional[Mapping[str, Any]]) -> GeneratorOptions:
    """
    Build options from a parsed YAML mapping.

    The reconnect policy may be written as a list of tiers:

        reconnect:
          - {attempts: 10, delay: 1}
          - {attempts: 5, delay: 3}
    """
    if data is None:
        data = {}
    if not isinstance(data, Mapping):
        raise OptionsError("Options must be a mapping")
    data = dict(data)

    tiers = data.pop("reconnect", None)
    if tiers is not None:
        if not isinstance(tiers, list) or not all(isinstance(t, Mapping) for t in tiers):
            raise OptionsError("'reconnect' must be a list of {attempts, delay} mappings")
        # Missing or mistyped values are left to pydantic
        data["reconnect_policy"] = {"tiers": [
            {
                "attempts": tier.get("attempts"),
                "delay_seconds": tier.get("delay", tier.get("delay_seconds", 0.0)),
            }
            for tier in tiers
        ]}

    return GeneratorOptions.model_validate(data)


def load_options(
    path: Optional[Path | str] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> GeneratorOptions:
    """
    Load generator options from a YAML file and the environment.

    Args:
        path: Optional YAML file; None means defaults
        environ: Environment mapping (default: os.environ)

    Returns:
        GeneratorOptions

    Raises:
        FileNotFoundError: If an explicit path doesn't exist
        OptionsError: If the file isn't valid YAML or has the wrong shape
        ValidationError: If a value is invalid
    """
    data: dict[str, Any] = {}

    if path is not None:
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Options file not found: {path}")
        with open(path) as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise OptionsError(f"{path}: invalid YAML: {e}") from e
        if not isinstance(data, dict):
            raise OptionsError(f"{path}: options must be a mapping")

    env = os.environ if environ is None else environ
    for env_key, field_name in _ENV_KEYS.items():
        if env_key in env:
            data[field_name] = env[env_key]

    return parse_options(data)
