"""Configuration models for the payload masking engine."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, Optional, Union

from ..core.registry import StrategyRegistry
from ..core.strategies import DEFAULT_MASK_CHAR, DEFAULT_STRATEGY_ORDER, build_strategy

DEFAULT_FIELDS: FrozenSet[str] = frozenset(
    {
        "name",
        "phone",
        "phonenumber",
        "phone_number",
        "email",
        "emailaddress",
        "email_address",
    }
)


def normalize_field(name: str) -> str:
    return name.strip().lower()


def build_allowlist(fields: Union[str, Iterable[str], None]) -> FrozenSet[str]:
    """Return the normalized set of field names eligible for masking.

    ``fields`` may be a comma-separated string or an iterable of names.  A
    non-empty list replaces :data:`DEFAULT_FIELDS` entirely; an empty or
    missing one falls back to it.
    """
    if fields is None:
        return DEFAULT_FIELDS
    if isinstance(fields, str):
        fields = fields.split(",")
    names = frozenset(
        normalize_field(str(f)) for f in fields if f is not None and str(f).strip()
    )
    return names or DEFAULT_FIELDS


def default_registry(mask_char: str = DEFAULT_MASK_CHAR) -> StrategyRegistry:
    return StrategyRegistry(build_strategy(k, mask_char) for k in DEFAULT_STRATEGY_ORDER)


@dataclass(frozen=True)
class MaskingConfig:
    """Runtime configuration for the masking engine.

    Instances are immutable; the engine swaps the whole value when strategies
    are registered or the configuration is reloaded.
    """

    enabled: bool = True
    fields: FrozenSet[str] = DEFAULT_FIELDS
    registry: StrategyRegistry = field(default_factory=default_registry)
    fail_closed: bool = False

    @classmethod
    def from_yaml(cls, path: Optional[str]) -> "MaskingConfig":
        """Load configuration from *path* applying environment overrides."""
        from .loader import load_config

        return load_config(path)

    def allows(self, field_name: str) -> bool:
        return normalize_field(field_name) in self.fields


__all__ = [
    "DEFAULT_FIELDS",
    "MaskingConfig",
    "build_allowlist",
    "default_registry",
    "normalize_field",
]
