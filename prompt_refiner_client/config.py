"""Configuration management for prompt-refiner-client"""

import math
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml


@dataclass(frozen=True)
class RetryConfig:
    """Backoff policy for a single refine call.

    Delays are in seconds. The delay before attempt ``n`` (n >= 1) is
    ``min(initial_delay * multiplier ** (n - 1), max_delay)``; the first
    attempt is never delayed.
    """

    max_retries: int = 3
    initial_delay: float = 0.1
    max_delay: float = 2.0
    multiplier: float = 2.0

    def __post_init__(self) -> None:
        if isinstance(self.max_retries, bool) or not isinstance(self.max_retries, int):
            raise ValueError("max_retries must be an integer")
        if self.max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        for name in ('initial_delay', 'max_delay', 'multiplier'):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError(f"{name} must be a number, got {value!r}")
            if not math.isfinite(value):
                raise ValueError(f"{name} must be finite, got {value!r}")
        if self.initial_delay < 0:
            raise ValueError("initial_delay must be >= 0")
        if self.max_delay < 0:
            raise ValueError("max_delay must be >= 0")
        if self.multiplier < 1.0:
            raise ValueError("multiplier must be >= 1.0")

    def delay_for(self, attempt: int) -> float:
        """Seconds to wait before the given zero-based attempt"""
        if attempt <= 0:
            return 0.0
        try:
            delay = self.initial_delay * self.multiplier ** (attempt - 1)
        except OverflowError:
            return self.max_delay
        return min(delay, self.max_delay)

    def delays(self) -> Tuple[float, ...]:
        """The full backoff schedule, one entry per retry"""
        return tuple(self.delay_for(attempt) for attempt in range(1, self.max_retries + 1))


DEFAULT_RETRY_CONFIG = RetryConfig()


@dataclass(frozen=True)
class ClientSettings:
    base_url: str = 'http://localhost:8080'
    timeout_seconds: float = 30


@dataclass(frozen=True)
class Config:
    client: ClientSettings = field(default_factory=ClientSettings)
    retry: RetryConfig = field(default_factory=RetryConfig)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'Config':
        """Create Config from dictionary"""
        if not data:
            return cls()

        client_data = data.get('client') or {}
        retry_data = data.get('retry') or {}

        return cls(
            client=ClientSettings(
                base_url=client_data.get('base_url') or 'http://localhost:8080',
                timeout_seconds=client_data.get('timeout_seconds', 30),
            ),
            retry=RetryConfig(
                max_retries=retry_data.get('max_retries', 3),
                initial_delay=retry_data.get('initial_delay', 0.1),
                max_delay=retry_data.get('max_delay', 2.0),
                multiplier=retry_data.get('multiplier', 2.0),
            ),
        )


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """Load configuration from YAML file"""
    # Check environment variable first
    env_config = os.environ.get('PROMPT_REFINER_CLIENT_CONFIG')
    if env_config and Path(env_config).exists():
        config_file = Path(env_config)
    elif config_path and Path(config_path).exists():
        config_file = Path(config_path)
    else:
        default_file = Path.home() / ".config" / "prompt-refiner-client" / "config.yaml"
        if not default_file.exists():
            # Return empty dict to use defaults
            return {}
        config_file = default_file

    with open(config_file) as f:
        data = yaml.safe_load(f)
        return data if data is not None else {}
