from __future__ import annotations

import os
from typing import Literal, Optional

import yaml
from pydantic import BaseModel


class ProviderConfig(BaseModel):
    """Crypto provider selection."""

    backend: Literal["cryptography"] = "cryptography"


class JoseConfig(BaseModel):
    """Top-level configuration model."""

    provider: ProviderConfig = ProviderConfig()
    enforce_constraints: bool = True
    keyset_path: Optional[str] = None


def _env_flag(value: str) -> bool:
    return value.strip().lower() not in ("0", "false", "no", "off", "")


def load_config(path: Optional[str] = None) -> JoseConfig:
    """Load configuration from YAML file.

    Args:
        path: Optional path to config file. Falls back to JOSECORE_CONFIG env
            variable or 'josecore.yaml' in the current directory.
    """

    config_path = path or os.getenv("JOSECORE_CONFIG", "josecore.yaml")
    if os.path.exists(config_path):
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
        config = JoseConfig.model_validate(data)
    else:
        config = JoseConfig()

    env_keyset = os.getenv("JOSECORE_KEYSET")
    if env_keyset:
        config.keyset_path = env_keyset
    env_constraints = os.getenv("JOSECORE_ENFORCE_CONSTRAINTS")
    if env_constraints is not None:
        config.enforce_constraints = _env_flag(env_constraints)
    return config
