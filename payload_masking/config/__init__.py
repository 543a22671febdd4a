"""Configuration helpers for the masking engine."""

from .models import DEFAULT_FIELDS, MaskingConfig, build_allowlist
from .loader import load_config, create_engine

__all__ = ["DEFAULT_FIELDS", "MaskingConfig", "build_allowlist", "load_config", "create_engine"]
