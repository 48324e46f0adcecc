import pytest

from chromaprint.moving_average import MovingAverage


def test_empty_average_is_zero():
    assert MovingAverage(4).average == 0


def test_constant_values_average_to_the_value():
    avg = MovingAverage(3)
    for _ in range(10):
        avg.add_value(42)
    assert avg.average == 42


def test_partial_window_uses_count_so_far():
    avg = MovingAverage(10)
    avg.add_value(6)
    assert avg.average == 6


def test_old_values_fall_out_of_window():
    avg = MovingAverage(2)
    avg.add_value(1000)
    avg.add_value(8)
    avg.add_value(8)
    assert avg.average == 8


def test_average_is_truncated():
    avg = MovingAverage(2)
    avg.add_value(4)
    avg.add_value(5)
    assert avg.average == 4


def test_negative_average_truncates_towards_zero():
    avg = MovingAverage(2)
    avg.add_value(-4)
    avg.add_value(-5)
    assert avg.average == -4


def test_average_stays_within_window_bounds():
    avg = MovingAverage(3)
    values = [3, 9, 1, 7, 5, 2, 8]
    for i, v in enumerate(values):
        avg.add_value(v)
        window = values[max(0, i - 2):i + 1]
        assert min(window) <= avg.average <= max(window)


def test_size_must_be_positive():
    with pytest.raises(ValueError):
        MovingAverage(0)