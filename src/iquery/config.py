"""Application settings loaded from YAML with ``-D`` property overrides."""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)

_LIST_SPLIT = re.compile(r"\s*,\s*")


def _split_list(value: Any) -> Any:
    if isinstance(value, str):
        return [v for v in _LIST_SPLIT.split(value.strip()) if v]
    return value


# ---------------------------------------------------------------------------
# Settings sections
# ---------------------------------------------------------------------------


class IndexSettings(BaseModel):
    engine: str = "memory"
    path: str = "local_data/collection.jsonl"
    embedded_meta_keys: list[str] = Field(default_factory=list)

    @field_validator("embedded_meta_keys", mode="before")
    @classmethod
    def split_keys(cls, value: Any) -> Any:
        return _split_list(value)


class QueryingSettings(BaseModel):
    matching_model: str = "Matching"
    weighting_model: str = "PL2"
    lowercase: bool = True
    retrieved_set_size: int = Field(default=1000, ge=0)
    stopwords: list[str] = Field(default_factory=list)
    # Inclusive rank window applied after matching
    start: int | None = Field(default=None, ge=0)
    end: int | None = Field(default=None, ge=0)

    @field_validator("stopwords", mode="before")
    @classmethod
    def split_stopwords(cls, value: Any) -> Any:
        return _split_list(value)


class OutputSettings(BaseModel):
    meta_keys: list[str] = Field(default_factory=lambda: ["docno"])
    max_rows: int = Field(default=1000, ge=0)

    @field_validator("meta_keys", mode="before")
    @classmethod
    def split_keys(cls, value: Any) -> Any:
        return _split_list(value)


# ---------------------------------------------------------------------------
# Root settings
# ---------------------------------------------------------------------------


class Settings(BaseModel):
    index: IndexSettings = Field(default_factory=IndexSettings)
    querying: QueryingSettings = Field(default_factory=QueryingSettings)
    output: OutputSettings = Field(default_factory=OutputSettings)
    properties: dict[str, str] = Field(default_factory=dict)


# Classic property names -> settings paths
PROPERTY_ALIASES: dict[str, str] = {
    "interactive.model": "querying.weighting_model",
    "interactive.matching": "querying.matching_model",
    "interactive.manager": "index.engine",
    "interactive.output.meta.keys": "output.meta_keys",
    "interactive.output.format.length": "output.max_rows",
    "lowercase": "querying.lowercase",
    "matching.retrieved_set_size": "querying.retrieved_set_size",
    "terrier.index.path": "index.path",
    "stopwords": "querying.stopwords",
}

_SECTIONS: dict[str, type[BaseModel]] = {
    "index": IndexSettings,
    "querying": QueryingSettings,
    "output": OutputSettings,
}


def _find_settings_file() -> Path | None:
    """Walk up from cwd looking for settings.yaml."""
    profile = os.getenv("IQUERY_PROFILE", "")
    names = [f"settings-{profile}.yaml", "settings.yaml"] if profile else ["settings.yaml"]

    cwd = Path.cwd()
    for parent in [cwd, *cwd.parents]:
        for name in names:
            candidate = parent / name
            if candidate.exists():
                return candidate
    return None


def load_settings(path: str | Path | None = None) -> Settings:
    """Load settings from YAML file, falling back to defaults."""
    path = Path(path) if path is not None else _find_settings_file()
    if path is None:
        return Settings()

    with open(path, encoding="utf-8") as fh:
        raw = yaml.safe_load(fh) or {}

    logger.debug("Loaded settings from %s", path)
    return Settings(**raw)


def resolve_property(name: str) -> tuple[str, str] | None:
    """Map a property name to a ``(section, field)`` pair, or ``None``."""
    dotted = PROPERTY_ALIASES.get(name, name)
    section, _, field = dotted.partition(".")
    if section not in _SECTIONS or not field:
        return None
    if field not in _SECTIONS[section].model_fields:
        return None
    return section, field


def apply_properties(settings: Settings, overrides: dict[str, str]) -> Settings:
    """Return a new ``Settings`` with property overrides applied.

    Recognised names update the matching settings field; anything else is
    kept verbatim under ``properties``.

    Raises:
        pydantic.ValidationError: if an override has an invalid value.
    """
    if not overrides:
        return settings

    raw = settings.model_dump()
    for name, value in overrides.items():
        target = resolve_property(name)
        if target is None:
            raw["properties"][name] = value
            continue
        section, field = target
        raw[section][field] = value
        logger.debug("Property %s -> %s.%s = %r", name, section, field, value)

    return Settings.model_validate(raw)
