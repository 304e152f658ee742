import logging

import pytest

from nbfc.model_config import (
    ConfigError,
    EmbeddedControllerType,
    OverrideTargetOperation,
    RegisterWriteMode,
    RegisterWriteOccasion,
    TemperatureAlgorithmType,
    TemperatureThreshold,
    default_temperature_thresholds,
    validate_temperature_thresholds,
)
from nbfc.trace import Trace


@pytest.mark.parametrize(
    "text, expected",
    [
        ("ec_sys", EmbeddedControllerType.EC_SYS_LINUX),
        ("acpi_ec", EmbeddedControllerType.EC_SYS_LINUX_ACPI),
        ("dev_port", EmbeddedControllerType.EC_LINUX),
        ("dummy", EmbeddedControllerType.EC_DUMMY),
        ("ec_sys_linux", EmbeddedControllerType.EC_SYS_LINUX),
        ("ec_acpi", EmbeddedControllerType.EC_SYS_LINUX_ACPI),
        ("ec_linux", EmbeddedControllerType.EC_LINUX),
    ],
)
def test_embedded_controller_from_string(text, expected):
    assert EmbeddedControllerType.from_string(text) is expected


def test_embedded_controller_round_trip():
    for member in EmbeddedControllerType:
        assert EmbeddedControllerType.from_string(str(member)) is member


def test_embedded_controller_invalid():
    with pytest.raises(ConfigError, match="Invalid value for EmbeddedControllerType: foo"):
        EmbeddedControllerType.from_string("foo")


@pytest.mark.parametrize(
    "cls", [TemperatureAlgorithmType, RegisterWriteMode, RegisterWriteOccasion, OverrideTargetOperation]
)
def test_enum_round_trip(cls):
    for member in cls:
        assert cls.from_string(str(member)) is member


@pytest.mark.parametrize(
    "cls", [TemperatureAlgorithmType, RegisterWriteMode, RegisterWriteOccasion, OverrideTargetOperation]
)
def test_enum_invalid(cls):
    with pytest.raises(ConfigError):
        cls.from_string("nonsense")


def test_override_target_values():
    assert OverrideTargetOperation.from_string("ReadWrite").value == 0x3
    assert RegisterWriteMode.from_string("Or") is RegisterWriteMode.OR


def test_default_thresholds():
    normal = default_temperature_thresholds(False)
    legacy = default_temperature_thresholds(True)
    assert normal[0] == TemperatureThreshold(60, 0, 0)
    assert legacy[0] == TemperatureThreshold(0, 0, 0)
    assert normal[-1].fan_speed == 100
    assert len(normal) == len(legacy) == 6


def test_default_thresholds_are_copies():
    first = default_temperature_thresholds()
    first[0].fan_speed = 42
    assert default_temperature_thresholds()[0].fan_speed == 0


def test_defaults_validate_cleanly(caplog):
    with caplog.at_level(logging.WARNING, logger="nbfc"):
        validate_temperature_thresholds(default_temperature_thresholds(), 100)
        validate_temperature_thresholds(default_temperature_thresholds(True), 100)
    assert caplog.records == []


def test_up_less_than_down():
    thresholds = [TemperatureThreshold(60, 0, 0), TemperatureThreshold(50, 55, 100)]
    trace = Trace()
    trace.push("model.json")
    with pytest.raises(ConfigError) as info:
        validate_temperature_thresholds(thresholds, 100, trace)
    assert info.value.message == "UpThreshold cannot be less than DownThreshold"
    assert info.value.path == "model.json: TemperatureThresholds[1]"
    assert str(trace) == "model.json"


def test_duplicate_up_threshold():
    thresholds = [TemperatureThreshold(60, 0, 0), TemperatureThreshold(60, 50, 100)]
    with pytest.raises(ConfigError, match="Duplicate UpThreshold"):
        validate_temperature_thresholds(thresholds, 100)


def test_warnings_for_missing_speeds_and_critical(caplog):
    thresholds = [TemperatureThreshold(60, 0, 10), TemperatureThreshold(90, 50, 50)]
    with caplog.at_level(logging.WARNING, logger="nbfc"):
        validate_temperature_thresholds(thresholds, 80)
    messages = [r.getMessage() for r in caplog.records]
    assert any("UpThreshold cannot be greater than CriticalTemperature" in m for m in messages)
    assert any("FanSpeed == 0" in m for m in messages)
    assert any("FanSpeed == 100" in m for m in messages)