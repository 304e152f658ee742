"""Model configuration enums, temperature thresholds and their validation."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass

from nbfc.trace import Trace

__all__ = [
    "RegisterWriteMode",
    "RegisterWriteOccasion",
    "OverrideTargetOperation",
    "EmbeddedControllerType",
    "TemperatureAlgorithmType",
    "TemperatureThreshold",
    "ConfigError",
    "default_temperature_thresholds",
    "validate_temperature_thresholds",
]

_log = logging.getLogger("nbfc")


class ConfigError(ValueError):
    """Raised when a configuration value is invalid; `path` says where it was found."""

    def __init__(self, message: str, path: str = "") -> None:
        self.message = message
        self.path = path
        super().__init__(f"{path}: {message}" if path else message)


def _lookup(cls, names: dict, text: str):
    try:
        return names[text]
    except KeyError:
        raise ConfigError(f"Invalid value for {cls.__name__}: {text}") from None


class RegisterWriteMode(enum.Enum):
    """How a value is combined with the register's current content."""

    SET = "Set"
    AND = "And"
    OR = "Or"

    @classmethod
    def from_string(cls, text: str) -> "RegisterWriteMode":
        """Parse "Set", "And" or "Or"."""
        return _lookup(cls, {m.value: m for m in cls}, text)

    def __str__(self) -> str:
        return self.value


class RegisterWriteOccasion(enum.Enum):
    """When a register write configuration is applied."""

    ON_WRITE_FAN_SPEED = "OnWriteFanSpeed"
    ON_INITIALIZATION = "OnInitialization"

    @classmethod
    def from_string(cls, text: str) -> "RegisterWriteOccasion":
        """Parse "OnWriteFanSpeed" or "OnInitialization"."""
        return _lookup(cls, {m.value: m for m in cls}, text)

    def __str__(self) -> str:
        return self.value


class OverrideTargetOperation(enum.Enum):
    """Whether a fan speed override applies to reading, writing or both."""

    READ = 0x1
    WRITE = 0x2
    READ_WRITE = 0x3

    @classmethod
    def from_string(cls, text: str) -> "OverrideTargetOperation":
        """Parse "Read", "Write" or "ReadWrite"."""
        names = {"Read": cls.READ, "Write": cls.WRITE, "ReadWrite": cls.READ_WRITE}
        return _lookup(cls, names, text)

    def __str__(self) -> str:
        return {0x1: "Read", 0x2: "Write", 0x3: "ReadWrite"}[self.value]


class EmbeddedControllerType(enum.Enum):
    """The available ways of talking to the embedded controller."""

    EC_SYS_LINUX = "ec_sys"
    EC_SYS_LINUX_ACPI = "acpi_ec"
    EC_LINUX = "dev_port"
    EC_DUMMY = "dummy"

    @classmethod
    def from_string(cls, text: str) -> "EmbeddedControllerType":
        """Parse a controller name; older names are accepted too."""
        names = {m.value: m for m in cls}
        names.update(
            {
                "ec_sys_linux": cls.EC_SYS_LINUX,
                "ec_acpi": cls.EC_SYS_LINUX_ACPI,
                "ec_linux": cls.EC_LINUX,
            }
        )
        return _lookup(cls, names, text)

    def __str__(self) -> str:
        return self.value


class TemperatureAlgorithmType(enum.Enum):
    """How several sensor readings are combined into one temperature."""

    AVERAGE = "Average"
    MIN = "Min"
    MAX = "Max"

    @classmethod
    def from_string(cls, text: str) -> "TemperatureAlgorithmType":
        """Parse "Average", "Min" or "Max"."""
        return _lookup(cls, {m.value: m for m in cls}, text)

    def __str__(self) -> str:
        return self.value


@dataclass
class TemperatureThreshold:
    """A fan speed used once the temperature reaches up_threshold, kept until it drops to down_threshold."""

    up_threshold: int
    down_threshold: int
    fan_speed: float


_DEFAULT_THRESHOLDS = (
    (60, 0, 0),
    (63, 48, 10),
    (66, 55, 20),
    (68, 59, 50),
    (71, 63, 70),
    (75, 67, 100),
)

_DEFAULT_LEGACY_THRESHOLDS = (
    (0, 0, 0),
    (60, 48, 10),
    (63, 55, 20),
    (66, 59, 50),
    (68, 63, 70),
    (71, 67, 100),
)


def default_temperature_thresholds(legacy: bool = False) -> list[TemperatureThreshold]:
    """Return a fresh copy of the default thresholds."""
    table = _DEFAULT_LEGACY_THRESHOLDS if legacy else _DEFAULT_THRESHOLDS
    return [TemperatureThreshold(up, down, speed) for up, down, speed in table]


def validate_temperature_thresholds(
    thresholds: list[TemperatureThreshold],
    critical_temperature: int,
    trace: Trace | None = None,
) -> None:
    """Raise ConfigError for inconsistent thresholds; log warnings for doubtful ones."""
    if trace is None:
        trace = Trace()

    has_0 = False
    has_100 = False

    for index, threshold in enumerate(thresholds):
        trace.push(f"TemperatureThresholds[{index}]")
        try:
            has_0 |= threshold.fan_speed == 0
            has_100 |= threshold.fan_speed == 100

            if threshold.up_threshold < threshold.down_threshold:
                raise ConfigError(
                    "UpThreshold cannot be less than DownThreshold", str(trace)
                )

            if threshold.up_threshold > critical_temperature:
                _log.warning(
                    "%s: UpThreshold cannot be greater than CriticalTemperature", trace
                )

            if any(
                other is not threshold and other.up_threshold == threshold.up_threshold
                for other in thresholds
            ):
                raise ConfigError("Duplicate UpThreshold", str(trace))
        finally:
            trace.pop()

    if not has_0:
        _log.warning("%s: No threshold with FanSpeed == %d found", trace, 0)
    if not has_100:
        _log.warning("%s: No threshold with FanSpeed == %d found", trace, 100)