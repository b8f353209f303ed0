"""Preference fingerprinting and the recommendation cache built on it.

Area recommendations are expensive to produce, so the last set is kept
alongside the hash of the preferences that produced it. A lookup with
different preferences misses; there is no time-based expiry.
"""
from __future__ import annotations

import hashlib
import json
import logging
import threading
from dataclasses import dataclass
from typing import Any, Sequence

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

logger = logging.getLogger("nesthunt.preferences")


class CustomDesire(BaseModel):
    label: str
    enabled: bool = True


class Preferences(BaseModel):
    natural_light: bool = False
    bedrooms_min: int = Field(1, ge=0)
    bedrooms_max: int = Field(2, ge=0)
    outdoors_access: bool = False
    public_transport: bool = False
    budget_min: int = Field(1500, ge=0)
    budget_max: int = Field(2500, ge=0)
    pet_friendly: bool = False
    laundry_in_unit: bool = False
    parking: bool = False
    quiet_neighbourhood: bool = False
    modern_finishes: bool = False
    storage_space: bool = False
    gym_amenities: bool = False
    custom_desires: list[CustomDesire] = Field(default_factory=list)

    # Field order and camelCase names are part of the hash input.
    model_config = ConfigDict(extra="forbid", alias_generator=to_camel, populate_by_name=True)

    @model_validator(mode="after")
    def _check_ranges(self) -> "Preferences":
        if self.bedrooms_max < self.bedrooms_min:
            raise ValueError("bedrooms_max must be >= bedrooms_min")
        if self.budget_max < self.budget_min:
            raise ValueError("budget_max must be >= budget_min")
        return self


def _desire_sort_key(desire: CustomDesire) -> tuple[str, str]:
    return (desire.label.casefold(), desire.label)


def _canonical_payload(prefs: Preferences) -> dict[str, Any]:
    payload = prefs.model_dump(by_alias=True, exclude={"custom_desires"})
    desires = sorted((d for d in prefs.custom_desires if d.enabled), key=_desire_sort_key)
    payload["customDesires"] = [{"label": d.label, "enabled": d.enabled} for d in desires]
    return payload


def compute_preferences_hash(prefs: Preferences) -> str:
    encoded = json.dumps(_canonical_payload(prefs), separators=(",", ":"), ensure_ascii=False)
    return hashlib.md5(encoded.encode("utf-8")).hexdigest()


@dataclass(frozen=True)
class CachedRecommendations:
    preferences_hash: str
    items: tuple[Any, ...]


class RecommendationCache:
    def __init__(self) -> None:
        self._entry: CachedRecommendations | None = None
        self._lock = threading.Lock()

    @property
    def current_hash(self) -> str | None:
        entry = self._entry
        return entry.preferences_hash if entry else None

    def is_stale(self, prefs: Preferences) -> bool:
        return self.current_hash != compute_preferences_hash(prefs)

    def get(self, prefs: Preferences) -> tuple[Any, ...] | None:
        entry = self._entry
        if entry is None:
            return None
        digest = compute_preferences_hash(prefs)
        if entry.preferences_hash != digest:
            logger.debug("Recommendation cache miss: stored=%s requested=%s", entry.preferences_hash, digest)
            return None
        return entry.items

    def put(self, prefs: Preferences, items: Sequence[Any]) -> str:
        digest = compute_preferences_hash(prefs)
        with self._lock:
            self._entry = CachedRecommendations(digest, tuple(items))
        logger.info("Stored %s recommendations for preferences %s", len(items), digest)
        return digest

    def invalidate(self) -> None:
        with self._lock:
            self._entry = None


__all__ = [
    "CachedRecommendations",
    "CustomDesire",
    "Preferences",
    "RecommendationCache",
    "compute_preferences_hash",
]
