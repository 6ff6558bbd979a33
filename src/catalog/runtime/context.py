"""Process-wide application context.

The active :class:`ConfigData` lives in a ``ContextVar`` so tests and request
handlers can scope overrides with :func:`with_context` without mutating the
defaults loaded from ``config.yaml``.
"""

import os
from contextlib import contextmanager
from contextvars import ContextVar, Token
from dataclasses import dataclass, replace
from pathlib import Path

from pydantic import BaseModel

from src.catalog.runtime.config.config_data import ConfigData
from src.catalog.runtime.config.config_template import load_templated_yaml


@dataclass
class AppContext:
    """Application context containing configuration and other app-wide state."""

    config: ConfigData


_default_config = load_templated_yaml(Path(os.getenv("CATALOG_CONFIG", "config.yaml")))
_default_context = AppContext(config=_default_config)

_app_context: ContextVar[AppContext] = ContextVar(
    "app_context", default=_default_context
)


def get_context() -> AppContext:
    """Return the current application context."""
    return _app_context.get()


def set_context(context: AppContext) -> Token[AppContext]:
    """Install ``context`` as the current application context."""
    return _app_context.set(context)


def _explicitly_set_fields(model: BaseModel) -> dict:
    """Dump only the fields that were explicitly assigned, at every nesting level.

    A nested model assigned as a whole is included in full.
    """
    result = {}
    for field_name in model.__class__.model_fields:
        value = getattr(model, field_name)
        if isinstance(value, BaseModel):
            if field_name in model.model_fields_set:
                result[field_name] = value.model_dump()
            elif nested := _explicitly_set_fields(value):
                result[field_name] = nested
        elif field_name in model.model_fields_set:
            result[field_name] = value
    return result


def _merge_dicts(base: dict, override: dict) -> dict:
    merged = base.copy()
    for key, value in override.items():
        if isinstance(merged.get(key), dict) and isinstance(value, dict):
            merged[key] = _merge_dicts(merged[key], value)
        else:
            merged[key] = value
    return merged


def merge_configs(base_config: ConfigData, override_config: ConfigData) -> ConfigData:
    """Overlay the explicitly-set values of ``override_config`` onto ``base_config``."""
    merged = _merge_dicts(
        base_config.model_dump(), _explicitly_set_fields(override_config)
    )
    return ConfigData.model_validate(merged)


@contextmanager
def with_context(config_override: ConfigData | None = None):
    """Temporarily run with ``config_override`` merged over the current config.

    Example:
        override = ConfigData()
        override.catalog.max_page_size = 5
        with with_context(override):
            assert get_config().catalog.max_page_size == 5
            # every other setting is inherited from the enclosing context
    """
    if config_override is None:
        yield
        return

    if not isinstance(config_override, ConfigData):
        raise ValueError(
            f"config_override must be ConfigData, or None, got {type(config_override)}"
        )

    merged_config = merge_configs(get_context().config, config_override)
    token = set_context(replace(get_context(), config=merged_config))
    try:
        yield
    finally:
        _app_context.reset(token)


def set_config(config: ConfigData) -> None:
    """Replace the current configuration wholesale."""
    set_context(replace(get_context(), config=config))


def get_config() -> ConfigData:
    """Return the configuration from the current application context."""
    return get_context().config
