"""Ordered, immutable collection of masking strategies."""
from __future__ import annotations

from typing import Iterable, Iterator, Optional, Tuple

from .strategies import MaskingStrategy


class StrategyRegistry:
    """Resolve a field name to the first strategy that matches it.

    Order is significant: when several strategies could handle a field the
    earliest registered one wins.  Registries are never mutated;
    :meth:`with_strategy` returns a new instance.
    """

    def __init__(self, strategies: Iterable[MaskingStrategy] = ()):
        self._strategies: Tuple[MaskingStrategy, ...] = tuple(strategies)

    def find(self, field_name: str) -> Optional[MaskingStrategy]:
        for strategy in self._strategies:
            if strategy.matches(field_name):
                return strategy
        return None

    def with_strategy(self, strategy: MaskingStrategy) -> "StrategyRegistry":
        return StrategyRegistry(self._strategies + (strategy,))

    def __iter__(self) -> Iterator[MaskingStrategy]:
        return iter(self._strategies)

    def __len__(self) -> int:
        return len(self._strategies)

    def __repr__(self) -> str:
        return f"StrategyRegistry({list(self._strategies)!r})"


__all__ = ["StrategyRegistry"]
