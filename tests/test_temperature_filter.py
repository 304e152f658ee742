import pytest

from nbfc.temperature_filter import TemperatureFilter


def test_size_rounds_up():
    assert TemperatureFilter(1000, 3000).size == 3
    assert TemperatureFilter(1000, 3500).size == 4
    assert TemperatureFilter(5000, 1000).size == 1


@pytest.mark.parametrize("poll, span, name", [(0, 100, "poll_interval"), (100, 0, "timespan"), (-1, 10, "poll_interval")])
def test_invalid_arguments(poll, span, name):
    with pytest.raises(ValueError, match=name):
        TemperatureFilter(poll, span)


def test_first_reading_is_returned():
    f = TemperatureFilter(1000, 6000)
    assert f.filter(42.0) == pytest.approx(42.0)


def test_constant_input_gives_constant_output():
    f = TemperatureFilter(1000, 4000)
    results = [f.filter(55.0) for _ in range(10)]
    assert all(r == pytest.approx(55.0) for r in results)


def test_window_forgets_old_values():
    f = TemperatureFilter(1000, 3000)
    for _ in range(5):
        f.filter(90.0)
    for _ in range(f.size):
        result = f.filter(40.0)
    assert result == pytest.approx(40.0)


def test_output_stays_between_extremes():
    f = TemperatureFilter(500, 2000)
    readings = [30.0, 80.0, 45.0, 60.0, 35.0, 70.0]
    for value in readings:
        out = f.filter(value)
        assert min(readings) <= out <= max(readings)


def test_single_slot_returns_latest():
    f = TemperatureFilter(1000, 1000)
    f.filter(10.0)
    assert f.filter(70.0) == pytest.approx(70.0)