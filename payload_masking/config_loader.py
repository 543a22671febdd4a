import os
from functools import lru_cache
from typing import Optional

from payload_masking.config import MaskingConfig
from payload_masking.core.engine import MaskingEngine
from payload_masking.core.transformer import DataMaskingTransformer

DEFAULT_CONFIG_PATH = "masking_config.yaml"


def resolve_config_path(path: Optional[str] = None) -> Optional[str]:
    """Return the config file to load, or ``None`` to run on defaults.

    An explicit ``path`` is returned as given.  Otherwise ``MASKING_CONFIG_PATH`` is
    used, falling back to ``masking_config.yaml`` when that file is present.
    """
    if path:
        return path
    env_path = os.getenv("MASKING_CONFIG_PATH")
    if env_path:
        return env_path
    return DEFAULT_CONFIG_PATH if os.path.exists(DEFAULT_CONFIG_PATH) else None


@lru_cache()
def load_config(path: Optional[str] = None) -> MaskingConfig:
    """Load the masking configuration.

    Parameters
    ----------
    path: Optional[str]
        Explicit path to the config file. If not provided, the
        ``MASKING_CONFIG_PATH`` environment variable is used. Defaults
        to ``masking_config.yaml`` when it exists, built-in settings
        otherwise.
    """
    return MaskingConfig.from_yaml(resolve_config_path(path))


@lru_cache()
def get_engine(path: Optional[str] = None) -> MaskingEngine:
    """Initialise and cache a :class:`MaskingEngine` instance."""

    cfg = load_config(path)
    return MaskingEngine(cfg)


@lru_cache()
def get_transformer(path: Optional[str] = None) -> DataMaskingTransformer:
    """Return a stream transformer bound to the cached engine."""

    return DataMaskingTransformer(get_engine(path))
