"""Query engine factory: registry and lazy import."""

from __future__ import annotations

import importlib
import logging

from iquery.engine.base import QueryEngine

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Engine registry: (engine_key, module_path, class_name)
# ---------------------------------------------------------------------------

_ENGINE_REGISTRY: list[tuple[str, str, str]] = [
    ("memory", "iquery.engine.memory_engine", "MemoryEngine"),
]

# Older configurations name the query manager class
_ENGINE_ALIASES: dict[str, str] = {
    "manager": "memory",
}


def get_query_engine(
    engine: str = "memory",
    **kwargs,
) -> QueryEngine:
    """Create a query engine by name.

    Args:
        engine: One of ``memory`` (``Manager`` is accepted as an alias).
        **kwargs: Passed to the engine constructor.

    Returns:
        A new ``QueryEngine`` instance; the caller owns and closes it.

    Raises:
        ValueError: if the name is not registered.
        EngineLoadFailure: if the engine cannot load its index.
    """
    key = engine.lower()
    key = _ENGINE_ALIASES.get(key, key)

    for reg_key, module_path, cls_name in _ENGINE_REGISTRY:
        if reg_key == key:
            mod = importlib.import_module(module_path)
            cls = getattr(mod, cls_name)
            logger.debug("Creating %s query engine", reg_key)
            return cls(**kwargs)

    available = [k for k, _, _ in _ENGINE_REGISTRY]
    raise ValueError(f"Unknown query engine '{engine}'. Available: {available}")


def available_engines() -> list[str]:
    """Return names of registered query engines."""
    return [k for k, _, _ in _ENGINE_REGISTRY]
