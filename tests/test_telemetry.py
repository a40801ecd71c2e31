import pytest

from flt.runtime import telemetry


def test_configure_rejects_unknown_preset() -> None:
    with pytest.raises(ValueError):
        telemetry.configure("verbose")


def test_configure_drops_cached_loggers() -> None:
    telemetry.configure()
    first = telemetry.get_logger("flt.tests")

    telemetry.configure()

    assert telemetry.get_logger("flt.tests") is not first


def test_span_reraises_errors() -> None:
    with pytest.raises(KeyError):
        with telemetry.span("tests::span", component="tests") as handle:
            handle.add_metadata("step", 1)
            raise KeyError("boom")


def test_span_collects_metadata() -> None:
    with telemetry.span("tests::meta", metadata={"lines": 3}) as handle:
        handle.add_metadata("length", 12)

    assert handle.metadata == {"lines": "3", "length": "12"}


def test_loggers_are_cached() -> None:
    telemetry.configure()

    assert telemetry.get_logger("flt.tests") is telemetry.get_logger("flt.tests")
