"""Field masking strategies.

A strategy pairs a field-name test (``matches``) with a value transform
(``apply``).  Strategies are pure: they hold only immutable settings and
never touch the document they are applied to.
"""
from __future__ import annotations

import re
from typing import Optional, Pattern

DEFAULT_MASK_CHAR = "*"

_WHITESPACE = re.compile(r"\s+")


class MaskingStrategy:
    """Base class for all masking strategies."""

    kind = "base"

    def __init__(self, mask_char: str = DEFAULT_MASK_CHAR):
        if len(mask_char) != 1:
            raise ValueError(f"mask_char must be a single character, got {mask_char!r}")
        self.mask_char = mask_char

    def matches(self, field_name: str) -> bool:
        raise NotImplementedError

    def apply(self, value: Optional[str]) -> Optional[str]:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}(mask_char={self.mask_char!r})"


class _KeywordStrategy(MaskingStrategy):
    """Strategy selected by keywords appearing anywhere in the field name."""

    keywords: tuple = ()

    def matches(self, field_name: str) -> bool:
        lower = field_name.lower()
        return any(k in lower for k in self.keywords)


# -----------------------------
# Built-in strategies
# -----------------------------
class NameMaskingStrategy(_KeywordStrategy):
    """``John Smith`` -> ``J*** S****``."""

    kind = "name"
    keywords = ("name",)

    def apply(self, value: Optional[str]) -> Optional[str]:
        if value is None or not value.strip():
            return value
        parts = _WHITESPACE.split(value.strip())
        return " ".join(p[0] + self.mask_char * (len(p) - 1) for p in parts if p)


class EmailMaskingStrategy(_KeywordStrategy):
    """``test@example.com`` -> ``t***@example.com``.

    Values without ``@`` or with a single-character local part are not
    masked.
    """

    kind = "email"
    keywords = ("email",)

    def apply(self, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        at = value.find("@")
        if at <= 1:
            return value
        return value[0] + self.mask_char * (at - 1) + value[at:]


class TrailingDigitsMaskingStrategy(_KeywordStrategy):
    """Mask every digit except the trailing ``keep_last`` characters.

    Separators such as ``-``, spaces or parentheses are preserved so the
    masked value keeps its original shape.  Values no longer than
    ``keep_last`` are returned unchanged.
    """

    keep_last = 3

    def _should_mask(self, ch: str) -> bool:
        return ch.isdigit()

    def apply(self, value: Optional[str]) -> Optional[str]:
        if value is None or len(value) <= self.keep_last:
            return value
        cut = len(value) - self.keep_last
        head = "".join(self.mask_char if self._should_mask(ch) else ch for ch in value[:cut])
        return head + value[cut:]


class PhoneNumberMaskingStrategy(TrailingDigitsMaskingStrategy):
    """``123-456-7890`` -> ``***-***-*890``."""

    kind = "phone"
    keywords = ("phone",)
    keep_last = 3


class AccountNumberMaskingStrategy(TrailingDigitsMaskingStrategy):
    """Card, IBAN and account numbers keep their last four characters."""

    kind = "account"
    keywords = ("account", "card", "iban")
    keep_last = 4


class PatternMaskingStrategy(TrailingDigitsMaskingStrategy):
    """Custom rule matching field names against a regular expression.

    Unlike the numeric strategies, letters are masked too, which suits
    identifiers such as national ids or passport numbers.
    """

    kind = "pattern"

    def __init__(self, pattern: Pattern, keep_last: int = 4, mask_char: str = DEFAULT_MASK_CHAR):
        super().__init__(mask_char)
        if keep_last < 0:
            raise ValueError("keep_last must not be negative")
        self.pattern = pattern
        self.keep_last = keep_last

    @classmethod
    def from_expression(cls, expression: str, keep_last: int = 4, mask_char: str = DEFAULT_MASK_CHAR) -> "PatternMaskingStrategy":
        try:
            compiled = re.compile(expression, re.IGNORECASE)
        except re.error as e:
            raise ValueError(f"Invalid custom rule pattern {expression!r}: {e}") from e
        return cls(compiled, keep_last=keep_last, mask_char=mask_char)

    def matches(self, field_name: str) -> bool:
        return self.pattern.search(field_name) is not None

    def _should_mask(self, ch: str) -> bool:
        return ch.isalnum()

    def __repr__(self) -> str:
        return f"PatternMaskingStrategy(pattern={self.pattern.pattern!r}, keep_last={self.keep_last})"


BUILTIN_STRATEGIES = {
    cls.kind: cls
    for cls in (
        NameMaskingStrategy,
        EmailMaskingStrategy,
        PhoneNumberMaskingStrategy,
        AccountNumberMaskingStrategy,
    )
}

DEFAULT_STRATEGY_ORDER = ("name", "email", "phone")


def build_strategy(kind: str, mask_char: str = DEFAULT_MASK_CHAR) -> MaskingStrategy:
    """Instantiate a built-in strategy by its ``kind``."""
    try:
        cls = BUILTIN_STRATEGIES[kind.strip().lower()]
    except KeyError:
        known = ", ".join(sorted(BUILTIN_STRATEGIES))
        raise ValueError(f"Unknown masking strategy {kind!r} (known: {known})") from None
    return cls(mask_char)


__all__ = [
    "MaskingStrategy",
    "NameMaskingStrategy",
    "EmailMaskingStrategy",
    "PhoneNumberMaskingStrategy",
    "AccountNumberMaskingStrategy",
    "PatternMaskingStrategy",
    "BUILTIN_STRATEGIES",
    "DEFAULT_STRATEGY_ORDER",
    "build_strategy",
]
