"""Configuration module for Stack Keeper.

Available Configurations:
- FacilitationConfig: Recent-speaker window, direct-response lookback,
  pass threshold and PIN generation
"""

from src.config.facilitation_config import (
    DEFAULT_FACILITATION_CONFIG,
    TEST_FACILITATION_CONFIG,
    FacilitationConfig,
)

__all__ = [
    "FacilitationConfig",
    "DEFAULT_FACILITATION_CONFIG",
    "TEST_FACILITATION_CONFIG",
]
