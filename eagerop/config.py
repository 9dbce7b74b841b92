# Copyright 2025 Wahyu Ardiansyah
# Licensed under the Apache License, Version 2.0

"""
EagerOp Configuration

Process-wide defaults, read from ``EAGEROP_*`` environment variables:

    EAGEROP_LIBRARY_PATH       path to libtensorflow (or the TF pywrap module)
    EAGEROP_DEVICE             default device hint for new op descriptors
    EAGEROP_ASYNC              "1"/"true" to make contexts asynchronous
    EAGEROP_PLACEMENT_POLICY   explicit | warn | silent | silent_for_int32
    EAGEROP_VERBOSITY          0-4, see eagerop.observability.Verbosity

Example:
    import eagerop

    eagerop.configure(default_device="/job:localhost/replica:0/task:0/device:CPU:0")
"""

import os
from dataclasses import dataclass, fields, replace
from typing import Optional

from .core.types import DevicePlacementPolicy
from .errors import ConfigurationError

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}

_POLICY_NAMES = {
    "explicit": DevicePlacementPolicy.Explicit,
    "warn": DevicePlacementPolicy.Warn,
    "silent": DevicePlacementPolicy.Silent,
    "silent_for_int32": DevicePlacementPolicy.SilentForInt32,
}


@dataclass(frozen=True)
class EagerOpConfig:
    """Configuration for the eager op binding."""

    # Native library
    library_path: Optional[str] = None

    # Op descriptors
    default_device: Optional[str] = None

    # Context defaults
    async_execution: bool = False
    placement_policy: Optional[DevicePlacementPolicy] = None

    # Logging
    verbosity: Optional[int] = None

    @classmethod
    def from_env(cls) -> "EagerOpConfig":
        """Build a configuration from the environment."""
        env = os.environ

        async_raw = env.get("EAGEROP_ASYNC", "").strip().lower()
        if async_raw in _TRUE_VALUES:
            async_execution = True
        elif async_raw in _FALSE_VALUES:
            async_execution = False
        else:
            raise ConfigurationError(
                "EAGEROP_ASYNC must be a boolean",
                config_key="EAGEROP_ASYNC",
                config_value=async_raw,
            )

        policy = None
        policy_raw = env.get("EAGEROP_PLACEMENT_POLICY", "").strip().lower()
        if policy_raw:
            if policy_raw not in _POLICY_NAMES:
                raise ConfigurationError(
                    f"unknown placement policy, expected one of {sorted(_POLICY_NAMES)}",
                    config_key="EAGEROP_PLACEMENT_POLICY",
                    config_value=policy_raw,
                )
            policy = _POLICY_NAMES[policy_raw]

        verbosity = None
        verbosity_raw = env.get("EAGEROP_VERBOSITY")
        if verbosity_raw is not None:
            try:
                verbosity = int(verbosity_raw)
            except ValueError:
                raise ConfigurationError(
                    "EAGEROP_VERBOSITY must be an integer",
                    config_key="EAGEROP_VERBOSITY",
                    config_value=verbosity_raw,
                ) from None

        return cls(
            library_path=env.get("EAGEROP_LIBRARY_PATH") or None,
            default_device=env.get("EAGEROP_DEVICE") or None,
            async_execution=async_execution,
            placement_policy=policy,
            verbosity=verbosity,
        )


_config: Optional[EagerOpConfig] = None


def get_config() -> EagerOpConfig:
    """Get the active configuration, reading the environment on first use."""
    global _config
    if _config is None:
        _config = EagerOpConfig.from_env()
    return _config


def configure(**kwargs) -> EagerOpConfig:
    """
    Override fields of the active configuration.

    Args:
        **kwargs: Field values (see EagerOpConfig).

    Returns:
        The new active configuration.

    Raises:
        ConfigurationError: On unknown field names.
    """
    global _config
    known = {f.name for f in fields(EagerOpConfig)}
    unknown = set(kwargs) - known
    if unknown:
        raise ConfigurationError(
            f"unknown configuration keys: {sorted(unknown)}",
            config_key=", ".join(sorted(unknown)),
        )
    _config = replace(get_config(), **kwargs)
    return _config


def reset_config() -> None:
    """Forget overrides; the environment is read again on next access."""
    global _config
    _config = None
