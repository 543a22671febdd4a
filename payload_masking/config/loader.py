"""Configuration loader for the masking engine."""
from __future__ import annotations

import logging
import os
import warnings
from typing import Any, Dict, Optional

from .models import MaskingConfig, build_allowlist
from ..core.registry import StrategyRegistry
from ..core.strategies import (
    DEFAULT_MASK_CHAR,
    DEFAULT_STRATEGY_ORDER,
    PatternMaskingStrategy,
    build_strategy,
)
from ..utils.io import read_yaml
from ..core.engine import MaskingEngine

logger = logging.getLogger(__name__)

ENABLED_ENV_VAR = "MASKING_ENABLED"
FIELDS_ENV_VAR = "MASKING_FIELDS"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


def parse_bool(value: Any, setting: str) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ValueError(f"Invalid boolean value {value!r} for {setting}")


def load_config(path: Optional[str] = None) -> MaskingConfig:
    """Load configuration from a YAML file.

    Parameters
    ----------
    path: Optional[str]
        Path to the YAML configuration file.  When ``None`` only the
        built-in defaults and environment overrides are used.
    """
    raw: Dict[str, Any] = read_yaml(path) if path else {}
    masking = raw.get("masking") or {}
    if not isinstance(masking, dict):
        raise ValueError(f"'masking' must be a mapping, got {type(masking).__name__}")

    enabled = parse_bool(masking.get("enabled", True), "masking.enabled")
    if os.getenv(ENABLED_ENV_VAR) is not None:
        enabled = parse_bool(os.environ[ENABLED_ENV_VAR], ENABLED_ENV_VAR)

    fields_cfg = masking.get("fields")
    if os.getenv(FIELDS_ENV_VAR) is not None:
        fields_cfg = os.environ[FIELDS_ENV_VAR]
    fields = build_allowlist(fields_cfg)

    mask_char = str(masking.get("mask_char", DEFAULT_MASK_CHAR))
    kinds = masking.get("strategies") or list(DEFAULT_STRATEGY_ORDER)
    if isinstance(kinds, str):
        kinds = [k for k in kinds.split(",") if k.strip()]
    registry = StrategyRegistry(build_strategy(k, mask_char) for k in kinds)

    # Custom rules
    for rule in masking.get("custom_rules") or []:
        if not isinstance(rule, dict) or "key" not in rule:
            raise ValueError("custom_rules entries require a 'key' pattern")
        registry = registry.with_strategy(
            PatternMaskingStrategy.from_expression(
                rule["key"], keep_last=int(rule.get("keep_last", 4)), mask_char=mask_char
            )
        )

    for name in sorted(fields):
        if registry.find(name) is None:
            warnings.warn(
                f"Field '{name}' is allowlisted but no masking strategy matches it; it will never be masked.",
                UserWarning,
            )

    cfg = MaskingConfig(
        enabled=enabled,
        fields=fields,
        registry=registry,
        fail_closed=parse_bool(masking.get("fail_closed", False), "masking.fail_closed"),
    )
    logger.info(
        "Data masking configured. Masking enabled: %s, Fields: %s, Strategies: %s",
        cfg.enabled,
        ", ".join(sorted(cfg.fields)),
        ", ".join(type(s).__name__ for s in cfg.registry),
    )
    return cfg


__all__ = ["load_config", "parse_bool"]


def create_engine(config_path: Optional[str] = None) -> MaskingEngine:
    """Application factory creating a configured :class:`MaskingEngine`."""

    return MaskingEngine(load_config(config_path))


__all__.append("create_engine")
