import pytest

from flt import Bitfield, Features, FieldSpec


def test_named_fields_read_from_hex() -> None:
    flags = Bitfield({"type": (0, 2), "reset": 2}, "0x0007")

    assert flags.get("type") == 3
    assert flags.get("reset") == 1
    assert flags.value == 7


def test_set_field_updates_value_and_hex() -> None:
    flags = Bitfield({"type": FieldSpec(0, 2), "bold": FieldSpec(5)})

    flags.set("type", 1)
    flags.set("bold", 1)

    assert flags.value == 0x21
    assert flags.hex() == "21"
    assert flags.hex(4) == "0021"


def test_set_rejects_values_wider_than_field() -> None:
    flags = Bitfield({"type": (0, 2)})

    with pytest.raises(ValueError):
        flags.set("type", 4)


def test_unknown_field_raises_key_error() -> None:
    with pytest.raises(KeyError):
        Bitfield().get("missing")


def test_define_after_construction() -> None:
    flags = Bitfield(value="f0")

    flags.define("destination", 4, 4)

    assert flags.get("destination") == 0xF
    assert flags.has("destination")


def test_features_default_enables_dcmeta() -> None:
    assert Features().dcmeta is True
    assert Features("0").dcmeta is False


def test_features_toggle_dcmeta() -> None:
    features = Features("0")

    features.dcmeta = True

    assert features.value == 1
    assert str(features) == "1"
