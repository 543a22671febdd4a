"""Top-level package for JSON payload field masking."""

from .config import MaskingConfig, create_engine, load_config
from .core.engine import MaskingEngine, MaskingError
from .core.transformer import DataMaskingTransformer, ProblemCollector

__all__ = [
    "MaskingConfig",
    "MaskingEngine",
    "MaskingError",
    "DataMaskingTransformer",
    "ProblemCollector",
    "create_engine",
    "load_config",
]
