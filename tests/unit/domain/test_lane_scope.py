"""Tests for the LaneScope value object."""

from sourcing.domain.value_objects.lane_scope import LaneScope


def test_empty_input_gives_none():
    assert LaneScope.from_dict(None) is None
    assert LaneScope.from_dict({}) is None


def test_default_scope_is_empty():
    assert LaneScope().is_empty()
    assert not LaneScope(volume="0").is_empty()


def test_legacy_single_value_keys():
    scope = LaneScope.from_dict({"mode": " LTL ", "origin": "TX", "destination": "CA, NV"})
    assert scope.mode == "ltl"
    assert scope.origins == ("TX",)
    assert scope.destinations == ("CA", "NV")


def test_list_keys_win_over_legacy_keys():
    scope = LaneScope.from_dict({"origins": ["IL", "IN"], "origin": "TX"})
    assert scope.origins == ("IL", "IN")


def test_unknown_keys_are_dropped():
    scope = LaneScope.from_dict({"equipment": ["dry van"], "rate_per_mile": 2.1})
    assert scope.to_dict() == {
        "mode": None,
        "origins": [],
        "destinations": [],
        "equipment": ["dry van"],
        "volume": None,
        "include_regions": [],
        "exclude_regions": [],
    }


def test_blank_values_are_ignored():
    scope = LaneScope.from_dict({"mode": "  ", "origins": ["", " "], "volume": ""})
    assert scope.is_empty()


def test_volume_is_kept_as_text():
    assert LaneScope.from_dict({"volume": 1200}).volume == "1200"
    scope = LaneScope.from_dict({"origins": "Chicago", "volume": "500 loads/week"})
    assert scope.volume == "500 loads/week"
    assert scope.origins == ("Chicago",)


def test_editor_keys_are_read():
    scope = LaneScope.from_dict({"equipmentTypes": "Dry Van, Reefer", "estimatedVolume": "500 loads/week"})
    assert scope.equipment == ("Dry Van", "Reefer")
    assert scope.volume == "500 loads/week"
    assert not scope.is_empty()


def test_canonical_keys_win_over_editor_keys():
    scope = LaneScope.from_dict({"equipment": ["flatbed"], "equipmentTypes": "Dry Van", "volume": "10"})
    assert scope.equipment == ("flatbed",)
    assert scope.volume == "10"
