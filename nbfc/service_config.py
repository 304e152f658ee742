"""The service state file: selected model config, controller type, target speeds and sensors."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any

from nbfc import jsonc
from nbfc.log import Logger
from nbfc.model_config import ConfigError, EmbeddedControllerType, TemperatureAlgorithmType
from nbfc.trace import Trace

__all__ = ["FanTemperatureSourceConfig", "ServiceConfig"]

_FILE_MODE = 0o664


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _string(value: Any, name: str, trace: Trace) -> str:
    if not isinstance(value, str):
        raise ConfigError(f"{name}: Not a string", str(trace))
    return value


def _array(value: Any, name: str, trace: Trace) -> list:
    if not isinstance(value, list):
        raise ConfigError(f"{name}: Not an array", str(trace))
    return value


@dataclass
class FanTemperatureSourceConfig:
    """Which sensors feed which fan, and how their readings are combined."""

    fan_index: int
    temperature_algorithm_type: TemperatureAlgorithmType | None = None
    sensors: list[str] = field(default_factory=list)

    @classmethod
    def _from_json(cls, data: Any, trace: Trace) -> "FanTemperatureSourceConfig":
        if not isinstance(data, dict):
            raise ConfigError("Not an object", str(trace))
        if "FanIndex" not in data:
            raise ConfigError("Missing option: FanIndex", str(trace))
        fan_index = data["FanIndex"]
        if not isinstance(fan_index, int) or isinstance(fan_index, bool):
            raise ConfigError("FanIndex: Not an integer", str(trace))
        if fan_index < 0:
            raise ConfigError(f"FanIndex: Value not in range: {fan_index}", str(trace))
        algorithm = None
        if "TemperatureAlgorithmType" in data:
            text = _string(data["TemperatureAlgorithmType"], "TemperatureAlgorithmType", trace)
            try:
                algorithm = TemperatureAlgorithmType.from_string(text)
            except ConfigError as exc:
                raise ConfigError(exc.message, str(trace)) from None
        sensors = [
            _string(item, "Sensors", trace)
            for item in _array(data.get("Sensors", []), "Sensors", trace)
        ]
        return cls(fan_index, algorithm, sensors)

    def to_json(self) -> dict[str, Any]:
        """Return the JSON object for this entry."""
        result: dict[str, Any] = {"FanIndex": self.fan_index}
        if self.temperature_algorithm_type is not None:
            result["TemperatureAlgorithmType"] = str(self.temperature_algorithm_type)
        if self.sensors:
            result["Sensors"] = list(self.sensors)
        return result


@dataclass
class ServiceConfig:
    """The persisted state of the service."""

    selected_config_id: str | None = None
    embedded_controller_type: EmbeddedControllerType | None = None
    target_fan_speeds: list[float] = field(default_factory=list)
    fan_temperature_sources: list[FanTemperatureSourceConfig] = field(default_factory=list)

    @classmethod
    def from_json(
        cls, data: Any, trace: Trace | None = None, logger: Logger | None = None
    ) -> "ServiceConfig":
        """Build and validate a config from parsed JSON; out-of-range speeds are corrected with a warning."""
        if trace is None:
            trace = Trace()
        if logger is None:
            logger = Logger()
        if not isinstance(data, dict):
            raise ConfigError("Not an object", str(trace))

        config = cls()
        if "SelectedConfigId" in data:
            config.selected_config_id = _string(data["SelectedConfigId"], "SelectedConfigId", trace)

        if "EmbeddedControllerType" in data:
            text = _string(data["EmbeddedControllerType"], "EmbeddedControllerType", trace)
            try:
                config.embedded_controller_type = EmbeddedControllerType.from_string(text)
            except ConfigError as exc:
                raise ConfigError(exc.message, str(trace)) from None

        for index, speed in enumerate(_array(data.get("TargetFanSpeeds", []), "TargetFanSpeeds", trace)):
            trace.push(f"TargetFanSpeeds[{index}]")
            if not _is_number(speed):
                raise ConfigError("Not a double", str(trace))
            speed = float(speed)
            if speed > 100.0:
                logger.warn(f"{trace}: Value cannot be greater than 100.0")
                speed = 100.0
            if speed < 0.0 and speed != -1.0:
                logger.warn(f"{trace}: Please use `-1' for selecting auto mode")
                speed = -1.0
            config.target_fan_speeds.append(speed)
            trace.pop()

        items = _array(data.get("FanTemperatureSources", []), "FanTemperatureSources", trace)
        for index, item in enumerate(items):
            trace.push(f"FanTemperatureSources[{index}]")
            source = FanTemperatureSourceConfig._from_json(item, trace)
            if any(other.fan_index == source.fan_index for other in config.fan_temperature_sources):
                raise ConfigError("Duplicate FanIndex", str(trace))
            config.fan_temperature_sources.append(source)
            trace.pop()

        return config

    @classmethod
    def load(cls, path: str | os.PathLike, logger: Logger | None = None) -> "ServiceConfig":
        """Read, parse and validate the config file at `path`."""
        trace = Trace()
        trace.push(os.fspath(path))
        try:
            with open(path, encoding="utf-8") as fh:
                text = fh.read()
        except OSError as exc:
            raise ConfigError(exc.strerror or str(exc), str(trace)) from exc
        try:
            data = jsonc.parse(text)
        except jsonc.JsonError as exc:
            raise ConfigError(str(exc), str(trace)) from exc
        return cls.from_json(data, trace, logger)

    def to_json(self) -> dict[str, Any]:
        """Return the JSON object written to disk; unset fields are left out."""
        result: dict[str, Any] = {}
        if self.selected_config_id is not None:
            result["SelectedConfigId"] = self.selected_config_id
        if self.embedded_controller_type is not None:
            result["EmbeddedControllerType"] = str(self.embedded_controller_type)
        if self.target_fan_speeds:
            result["TargetFanSpeeds"] = [float(speed) for speed in self.target_fan_speeds]
        if self.fan_temperature_sources:
            result["FanTemperatureSources"] = [s.to_json() for s in self.fan_temperature_sources]
        return result

    def write(self, path: str | os.PathLike) -> None:
        """Write the config to `path`, creating or truncating it."""
        data = jsonc.dumps(self.to_json()).encode("utf-8")
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, _FILE_MODE)
        with os.fdopen(fd, "wb") as fh:
            fh.write(data)