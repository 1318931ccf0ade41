from __future__ import annotations

"""Cartoon ID photo generation on top of Google's image models."""

from importlib import import_module
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:  # pragma: no cover - type checking helper
    from .config import StudioConfig, load_config
    from .service import StudioService

__all__ = ["StudioConfig", "StudioService", "load_config"]


def __getattr__(name: str) -> Any:  # pragma: no cover - dispatch helper
    if name in {"StudioConfig", "load_config"}:
        module = import_module(".config", __name__)
    elif name == "StudioService":
        module = import_module(".service", __name__)
    else:
        raise AttributeError(name)

    value = getattr(module, name)
    globals()[name] = value
    return value
