from indiamap.fallback import FALLBACK_STATE_NAMES, fallback_collection, fallback_geojson

EXPECTED_STATES = {
    "Maharashtra", "Uttar Pradesh", "West Bengal", "Tamil Nadu", "Karnataka",
    "Gujarat", "Rajasthan", "Andhra Pradesh", "Madhya Pradesh", "Kerala",
}


def test_fallback_has_the_ten_named_states():
    collection = fallback_collection()

    assert len(collection) == 10
    assert set(collection.names) == EXPECTED_STATES
    assert collection.names == list(FALLBACK_STATE_NAMES)
    assert collection.source == "fallback"


def test_every_fallback_state_is_well_formed():
    for feature in fallback_collection():
        ring = feature.boundary
        assert feature.population >= 0
        assert feature.capital
        assert len(ring) >= 6
        assert ring[0] == ring[-1]
        assert len(set(ring)) >= 3


def test_fallback_is_deterministic_and_isolated():
    first = fallback_geojson()
    first["features"][0]["properties"]["population"] = -1

    assert fallback_collection() == fallback_collection()
    assert fallback_collection().get("Maharashtra").population == 112374333


def test_uttar_pradesh_is_most_populous():
    collection = fallback_collection()
    top = max(collection, key=lambda f: f.population)
    assert top.name == "Uttar Pradesh"
    assert top.capital == "Lucknow"
