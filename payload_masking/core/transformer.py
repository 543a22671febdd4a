"""Byte-stream boundary for the masking engine."""
from __future__ import annotations

import io
import logging
from typing import IO, List, Optional, Protocol

from .engine import MaskingEngine
from ..utils.io import read_text

logger = logging.getLogger(__name__)


class TransformerContext(Protocol):
    """Pipeline callback used to signal a failed transformation."""

    def report_problem(self, problem: str) -> None: ...


class ProblemCollector:
    """In-memory :class:`TransformerContext` collecting reported problems."""

    def __init__(self):
        self.problems: List[str] = []

    def report_problem(self, problem: str) -> None:
        self.problems.append(problem)

    @property
    def has_problems(self) -> bool:
        return bool(self.problems)


class DataMaskingTransformer:
    """Mask UTF-8 JSON payloads flowing through a byte stream.

    ``transform`` drains the input, masks it and returns a fresh stream.  When
    the input cannot be read or masking fails in a way the engine does not
    absorb itself, a problem is reported to the context and ``None`` is
    returned so callers can tell a failure from a no-op.
    """

    input_type = io.BufferedIOBase
    output_type = io.BytesIO

    def __init__(self, engine: MaskingEngine):
        self.engine = engine

    def transform(self, data: IO[bytes], context: TransformerContext) -> Optional[IO[bytes]]:
        try:
            text = read_text(data)
        except OSError as e:
            logger.error("Failed to read input stream for data masking: %s", e)
            context.report_problem(f"Failed to read input stream: {e}")
            return None
        except Exception as e:
            logger.error("Failed to decode input stream for data masking: %s", e)
            context.report_problem(f"Data masking failed: {e}")
            return None

        try:
            masked = self.engine.mask_document(text)
            # lone surrogates from \u escapes cannot be encoded strictly
            return io.BytesIO(masked.encode("utf-8", errors="replace"))
        except Exception as e:
            logger.error("Failed to apply data masking transformation: %s", e)
            context.report_problem(f"Data masking failed: {e}")
            return None


__all__ = ["DataMaskingTransformer", "ProblemCollector", "TransformerContext"]
