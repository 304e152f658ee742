from nbfc.model_config import TemperatureThreshold, default_temperature_thresholds
from nbfc.threshold_manager import ThresholdManager


def test_empty_returns_none():
    manager = ThresholdManager([])
    assert manager.auto_select(50.0) is None
    assert manager.current is None


def test_sorted_by_up_threshold():
    manager = ThresholdManager(list(reversed(default_temperature_thresholds())))
    ups = [t.up_threshold for t in manager.thresholds]
    assert ups == sorted(ups)
    assert manager.auto_select(0.0).fan_speed == 0


def test_extremes():
    manager = ThresholdManager(default_temperature_thresholds())
    assert manager.auto_select(0.0).fan_speed == 0
    assert manager.auto_select(200.0).fan_speed == 100
    assert manager.current.fan_speed == 100


def test_hysteresis():
    manager = ThresholdManager(default_temperature_thresholds())
    assert manager.auto_select(61.0).fan_speed == 10
    # Staying above DownThreshold keeps the threshold.
    assert manager.auto_select(50.0).fan_speed == 10
    assert manager.auto_select(47.0).fan_speed == 0


def test_legacy_behaviour():
    manager = ThresholdManager(default_temperature_thresholds(True), legacy=True)
    assert manager.auto_select(61.0).fan_speed == 10
    assert manager.auto_select(200.0).fan_speed == 100
    assert manager.auto_select(0.0).fan_speed == 0


def test_returns_member_of_thresholds():
    thresholds = [TemperatureThreshold(70, 60, 100), TemperatureThreshold(40, 0, 0)]
    manager = ThresholdManager(thresholds)
    for temperature in (10.0, 45.0, 75.0, 65.0, 20.0):
        assert manager.auto_select(temperature) in manager.thresholds