# nbfc

Building blocks for a notebook fan control service on Linux. The package reads
and checks configuration. It smooths temperature readings and picks the fan
speed threshold that applies to a temperature. It has no command-line entry
point. You import its modules from your own code.

## Installation

```
pip install .
```

To run the test suite, install the test extra and run pytest:

```
pip install ".[test]"
pytest
```

## Modules

- `nbfc.jsonc`: a lenient JSON reader.
  - `parse(text)` accepts `//` and `/* */` comments and stray commas. It
    ignores text after the first value and returns plain Python values.
  - `dumps(value)` writes JSON in an indented layout, with each element on its
    own line.
  - `escape_string(text)` escapes `"`, backslash and control characters as
    `\uXXXX`.
  - A parse failure raises `JsonError`. The error has a `kind` (a
    `JsonErrorKind`) and a `position`.
- `nbfc.trace`: `Trace` records where validation currently is, for example
  `config.json: TargetFanSpeeds[2]`. `push` adds a segment and `pop` removes
  one. `str()` gives the text.
- `nbfc.optparse`: `OptionParser` parses a command line one option at a time.
  - It handles short and long options and positionals.
  - `ExclusiveGroup` and `EndExclusiveGroup` mark options that exclude each
    other. `IncludeOptions` splices in another option list.
  - `check_required()` checks the options flagged `REQUIRED`.
  - `get_opt()` returns the value of each matched option and puts its argument
    in `optarg`. It returns `None` at the end.
  - `get_arg()`, `get_optarg()` and `at_end()` read the remaining arguments.
  - Errors raise `OptionError`, which carries a `ParseErrorKind`.
    `explain_error()` prints the error to standard error. `str_error(code)`
    gives the message for an error code.
- `nbfc.model_config`:
  - Enums for model configuration values: `RegisterWriteMode`,
    `RegisterWriteOccasion`, `OverrideTargetOperation`,
    `EmbeddedControllerType` and `TemperatureAlgorithmType`. Each has a
    `from_string`.
  - The `TemperatureThreshold` record.
  - `default_temperature_thresholds(legacy)` returns the default thresholds.
  - `validate_temperature_thresholds(thresholds, critical_temperature, trace)`
    checks thresholds. It raises `ConfigError` when an up threshold is below
    its down threshold or appears twice. Doubtful values, such as a missing 0%
    or 100% step, are logged as warnings on the `nbfc` logger.
- `nbfc.temperature_filter`: `TemperatureFilter(poll_interval, timespan)`
  averages the last `ceil(timespan / poll_interval)` readings. Call
  `filter(temperature)` with each reading.
- `nbfc.threshold_manager`: `ThresholdManager(thresholds, legacy)` sorts the
  thresholds by `up_threshold`. Its `auto_select(temperature)` moves to the
  matching threshold with hysteresis, in either the current or the legacy
  style.
- `nbfc.log`:
  - `Logger` writes `name: LEVEL: message` lines to standard error, or to a
    stream you give it. It filters by `LogLevel` and can mirror messages to
    syslog.
  - `program_name(path)` returns the base name of a program path.
- `nbfc.service_config`: `ServiceConfig` and `FanTemperatureSourceConfig`
  hold the service's state file.
  - `ServiceConfig.load(path)` reads and validates the file.
  - `from_json(data)` does the same for data already parsed.
  - Target speeds above 100 are clamped to 100 with a warning. Other negative
    speeds become `-1`, which means auto mode.
  - A duplicate `FanIndex` raises `ConfigError`.
  - `to_json()` and `write(path)` save the state again.
- `nbfc.pidfile`: `write_pid(path, acquire_lock)` writes the process ID. With
  `acquire_lock` set, the file must not exist yet; if it does,
  `PidFileLockedError` is raised. `remove_pid(path)` deletes the file.

## Example

```python
from nbfc.jsonc import parse
from nbfc.model_config import default_temperature_thresholds
from nbfc.temperature_filter import TemperatureFilter
from nbfc.threshold_manager import ThresholdManager

config = parse('{"SelectedConfigId": "Some Model", /* comment */ "TargetFanSpeeds": [-1]}')

smoothing = TemperatureFilter(poll_interval=500, timespan=2000)
manager = ThresholdManager(default_temperature_thresholds())
for reading in (50.0, 62.0, 70.0):
    temperature = smoothing.filter(reading)
    print(temperature, manager.auto_select(temperature).fan_speed)
```

## What this package does not do

The package has none of the following:

- a running fan control service or daemon
- a command-line client
- a way to talk to a running service
- access to the embedded controller
- code that reads hardware temperature sensors

Temperatures must come from your own code. The package turns them into a
smoothed value and a threshold. Setting the fans is left to the caller.