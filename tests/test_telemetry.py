from __future__ import annotations

import pytest

from paper_engine.runtime import telemetry


def test_configure_rejects_unknown_preset() -> None:
    with pytest.raises(ValueError):
        telemetry.configure(preset="verbose-ish")


def test_configure_rejects_config_and_preset_together() -> None:
    with pytest.raises(ValueError):
        telemetry.configure(config=object(), preset="development")


def test_span_reraises_block_errors() -> None:
    with pytest.raises(KeyError):
        with telemetry.span("paper::test", metadata={"case": "error"}):
            raise KeyError("missing")


def test_get_logger_is_cached() -> None:
    assert telemetry.get_logger("paper_engine.tests") is telemetry.get_logger(
        "paper_engine.tests"
    )


def test_span_handle_stringifies_metadata() -> None:
    with telemetry.span("paper::test", component="tests", metadata={"rows": 3}) as handle:
        handle.add_metadata("changed", True)

    assert handle.component == "tests"
    assert handle.metadata == {"rows": "3", "changed": "True"}
