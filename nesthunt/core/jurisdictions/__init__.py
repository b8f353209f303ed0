from __future__ import annotations

import threading
from typing import Dict, Iterable, List

from nesthunt.core.jurisdictions.base import JurisdictionConfig, TaxLevel
from nesthunt.core.jurisdictions.bc2025 import config as bc_2025
from nesthunt.core.jurisdictions.on2025 import config as on_2025

DEFAULT_JURISDICTION = "BC"


class UnknownJurisdictionError(KeyError):
    pass


_REGISTRY: Dict[str, JurisdictionConfig] = {}
_REGISTRY_LOCK = threading.Lock()


def register_jurisdiction(config: JurisdictionConfig) -> None:
    # Whole-object swap; readers never see a half-updated table.
    global _REGISTRY
    with _REGISTRY_LOCK:
        updated = dict(_REGISTRY)
        updated[config.code] = config
        _REGISTRY = updated


def register_jurisdictions(configs: Iterable[JurisdictionConfig]) -> None:
    for config in configs:
        register_jurisdiction(config)


register_jurisdictions((bc_2025, on_2025))


def get_jurisdiction(code: str | None = None) -> JurisdictionConfig:
    key = (code or DEFAULT_JURISDICTION).upper()
    try:
        return _REGISTRY[key]
    except KeyError as exc:
        raise UnknownJurisdictionError(f"No tax configuration registered for {key}") from exc


def list_jurisdictions() -> List[str]:
    return sorted(_REGISTRY)


__all__ = [
    "DEFAULT_JURISDICTION",
    "JurisdictionConfig",
    "TaxLevel",
    "UnknownJurisdictionError",
    "get_jurisdiction",
    "list_jurisdictions",
    "register_jurisdiction",
    "register_jurisdictions",
]
