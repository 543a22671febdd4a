from __future__ import annotations

import json
import logging
import threading
from dataclasses import replace
from typing import Any, Dict, List, Optional

from typing import TYPE_CHECKING

from .strategies import MaskingStrategy

if TYPE_CHECKING:  # pragma: no cover
    from ..config.models import MaskingConfig

logger = logging.getLogger(__name__)


class MaskingError(ValueError):
    """Raised by a fail-closed engine when a document cannot be masked."""


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Non-standard JSON constant {name}")


# -----------------------------
# Orchestrator
# -----------------------------
class MaskingEngine:
    """Facade providing field masking over JSON documents and single values."""

    def __init__(self, cfg: MaskingConfig):
        """Create a new instance bound to ``cfg``."""

        self._cfg = cfg
        self._lock = threading.Lock()

    @property
    def cfg(self) -> MaskingConfig:
        return self._cfg

    @property
    def enabled(self) -> bool:
        return self._cfg.enabled

    # --- runtime reconfiguration
    def register_strategy(self, strategy: MaskingStrategy) -> None:
        """Append ``strategy`` after the existing ones.

        The configuration is replaced as a whole so an in-flight
        :meth:`mask_document` keeps using the list it started with.
        """
        with self._lock:
            cfg = self._cfg
            self._cfg = replace(cfg, registry=cfg.registry.with_strategy(strategy))
        logger.info("Registered masking strategy %s", type(strategy).__name__)

    def reload(self, cfg: MaskingConfig) -> None:
        with self._lock:
            self._cfg = cfg
        logger.info("Masking configuration reloaded. Masking enabled: %s", cfg.enabled)

    # --- single values
    def find_strategy(self, field_name: str) -> Optional[MaskingStrategy]:
        return self._cfg.registry.find(field_name)

    def is_masking_enabled_for_field(self, field_name: str) -> bool:
        cfg = self._cfg
        return cfg.enabled and cfg.allows(field_name)

    def mask_value(self, field_name: str, value: Optional[str]) -> Optional[str]:
        """Mask ``value`` if ``field_name`` is allowlisted and has a strategy."""

        cfg = self._cfg
        if not cfg.allows(field_name):
            return value
        strategy = cfg.registry.find(field_name)
        if strategy is None:
            return value
        return strategy.apply(value)

    def _mask_as(self, category: str, value: Optional[str]) -> Optional[str]:
        strategy = self.find_strategy(category)
        return strategy.apply(value) if strategy else value

    def mask_name(self, name: Optional[str]) -> Optional[str]:
        return self._mask_as("name", name)

    def mask_phone_number(self, phone_number: Optional[str]) -> Optional[str]:
        return self._mask_as("phone", phone_number)

    def mask_email(self, email: Optional[str]) -> Optional[str]:
        return self._mask_as("email", email)

    # --- documents
    def mask_document(self, text: Optional[str]) -> Optional[str]:
        """Mask allowlisted string fields anywhere inside a JSON object.

        Disabled engines, blank input and non-object roots are returned
        unchanged.  Malformed input and unexpected failures are logged and
        the original text is returned, unless the configuration is
        ``fail_closed`` in which case :class:`MaskingError` is raised.
        """
        cfg = self._cfg
        if not cfg.enabled or text is None or not text.strip():
            return text

        try:
            root = json.loads(text, parse_constant=_reject_constant)
            if not isinstance(root, dict):
                logger.debug("Skipping masking for non-object JSON root (%s)", type(root).__name__)
                return text
            self._walk_object(root, cfg)
            return json.dumps(root, ensure_ascii=False, separators=(",", ":"))
        except Exception as e:
            logger.exception("Data masking failed: %s", e)
            if cfg.fail_closed:
                raise MaskingError(f"Data masking failed: {e}") from e
            return text

    def _walk_object(self, node: Dict[str, Any], cfg: MaskingConfig) -> None:
        for key, child in node.items():
            if isinstance(child, str) and cfg.allows(key):
                strategy = cfg.registry.find(key)
                if strategy is not None:
                    node[key] = strategy.apply(child)
            elif isinstance(child, dict):
                self._walk_object(child, cfg)
            elif isinstance(child, list):
                self._walk_array(child, cfg)

    def _walk_array(self, items: List[Any], cfg: MaskingConfig) -> None:
        for item in items:
            if isinstance(item, dict):
                self._walk_object(item, cfg)
            elif isinstance(item, list):
                self._walk_array(item, cfg)
