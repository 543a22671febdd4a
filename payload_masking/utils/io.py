"""Utility helpers for I/O operations."""
from __future__ import annotations

from typing import IO, Any, Dict

import yaml


def read_yaml(path: str) -> Dict[str, Any]:
    """Read a YAML file and return its content as a dictionary."""
    with open(path, "r", encoding="utf-8") as fh:
        return yaml.safe_load(fh) or {}


def read_text(source: IO[bytes]) -> str:
    """Drain a binary stream and decode it as UTF-8.

    Invalid byte sequences become U+FFFD so a stray byte in one field does
    not block the whole payload.
    """
    return source.read().decode("utf-8", errors="replace")


__all__ = ["read_yaml", "read_text"]
