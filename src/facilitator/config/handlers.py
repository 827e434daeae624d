"""Defaults for transaction handlers."""

from __future__ import annotations

from dataclasses import dataclass

from facilitator.domain.handlers import DuplicateKeyPolicy

from .env import optional_env_var
from .errors import ConfigurationError

DUPLICATE_KEY_POLICY_ENV = "FACILITATOR_DUPLICATE_KEY_POLICY"


@dataclass(frozen=True, slots=True)
class HandlerConfig:
    duplicate_key_policy: DuplicateKeyPolicy = DuplicateKeyPolicy.CONCURRENT


def parse_duplicate_key_policy(value: str) -> DuplicateKeyPolicy:
    try:
        return DuplicateKeyPolicy(value.strip().lower())
    except ValueError as exc:
        allowed = ", ".join(policy.value for policy in DuplicateKeyPolicy)
        raise ConfigurationError(
            f"Invalid duplicate key policy {value!r}; expected one of: {allowed}"
        ) from exc


def get_handler_config() -> HandlerConfig:
    value = optional_env_var(DUPLICATE_KEY_POLICY_ENV)
    if value is None:
        return HandlerConfig()
    return HandlerConfig(duplicate_key_policy=parse_duplicate_key_policy(value))
