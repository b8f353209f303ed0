import hashlib

import pytest
from pydantic import ValidationError

from nesthunt.preferences import (
    CustomDesire,
    Preferences,
    RecommendationCache,
    compute_preferences_hash,
)


def _prefs(**overrides) -> Preferences:
    base = {
        "natural_light": True,
        "public_transport": True,
        "budget_min": 1800,
        "budget_max": 2600,
        "custom_desires": [
            CustomDesire(label="near climbing gym"),
            CustomDesire(label="balcony"),
        ],
    }
    base.update(overrides)
    return Preferences(**base)


def test_hash_is_stable_and_hex():
    digest = compute_preferences_hash(_prefs())
    assert digest == compute_preferences_hash(_prefs())
    assert len(digest) == 32
    int(digest, 16)


def test_hash_ignores_desire_order_and_disabled_desires():
    reordered = _prefs(
        custom_desires=[
            CustomDesire(label="balcony"),
            CustomDesire(label="rooftop", enabled=False),
            CustomDesire(label="near climbing gym"),
        ]
    )
    assert compute_preferences_hash(reordered) == compute_preferences_hash(_prefs())


def test_hash_changes_with_budget():
    assert compute_preferences_hash(_prefs(budget_max=2700)) != compute_preferences_hash(_prefs())


def test_preferences_reject_inverted_ranges():
    with pytest.raises(ValidationError):
        Preferences(bedrooms_min=3, bedrooms_max=1)
    with pytest.raises(ValidationError):
        Preferences(budget_min=3000, budget_max=2000)


def test_cache_hit_miss_and_invalidate():
    cache = RecommendationCache()
    prefs = _prefs()
    assert cache.get(prefs) is None
    assert cache.is_stale(prefs)

    digest = cache.put(prefs, [{"area": "Mount Pleasant"}, {"area": "Kitsilano"}])
    assert digest == cache.current_hash
    assert cache.get(prefs) == ({"area": "Mount Pleasant"}, {"area": "Kitsilano"})
    assert not cache.is_stale(prefs)

    changed = _prefs(pet_friendly=True)
    assert cache.get(changed) is None
    assert cache.is_stale(changed)

    cache.invalidate()
    assert cache.get(prefs) is None
    assert cache.current_hash is None


def test_cache_put_replaces_previous_entry():
    cache = RecommendationCache()
    cache.put(_prefs(), [{"area": "West End"}])
    updated = _prefs(parking=True)
    cache.put(updated, [{"area": "Burnaby"}])
    assert cache.get(_prefs()) is None
    assert cache.get(updated) == ({"area": "Burnaby"},)


def test_hash_uses_camel_case_json_of_the_tracker():
    prefs = Preferences(
        naturalLight=True,
        budgetMax=2600,
        customDesires=[
            {"label": "balcony"},
            {"label": "Attic", "enabled": True},
            {"label": "rooftop", "enabled": False},
        ],
    )
    expected = (
        '{"naturalLight":true,"bedroomsMin":1,"bedroomsMax":2,"outdoorsAccess":false,'
        '"publicTransport":false,"budgetMin":1500,"budgetMax":2600,"petFriendly":false,'
        '"laundryInUnit":false,"parking":false,"quietNeighbourhood":false,'
        '"modernFinishes":false,"storageSpace":false,"gymAmenities":false,'
        '"customDesires":[{"label":"Attic","enabled":true},{"label":"balcony","enabled":true}]}'
    )
    assert compute_preferences_hash(prefs) == hashlib.md5(expected.encode("utf-8")).hexdigest()


def test_snake_and_camel_payloads_hash_the_same():
    camel = Preferences(petFriendly=True, laundryInUnit=True)
    snake = Preferences(pet_friendly=True, laundry_in_unit=True)
    assert compute_preferences_hash(camel) == compute_preferences_hash(snake)
