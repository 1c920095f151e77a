"""Pruebas de ScrollRangeCalculator."""

import pytest

from position_metrics import CharacterMetrics, PositionMetrics
from result_types import (
    LSD_EXACT_ZERO,
    LSD_UNBOUNDED,
    MSD_UNKNOWN,
    Position,
    ResultDescriptor,
)
from scroll_range import MAX_RIGHT_SCROLL, ScrollRangeCalculator, exponent_length


def make_calculator(width=10, char_width=1.0):
    # Con ancho 10 y carácter 1 caben 11 caracteres.
    metrics = CharacterMetrics(width, 0, char_width)
    return ScrollRangeCalculator(PositionMetrics(metrics))


def exact(init, msd, lsd, whole_len, negative=False):
    lsd_pos = Position.exact(lsd) if isinstance(lsd, int) else lsd
    return ResultDescriptor(init, Position.exact(msd), lsd_pos, whole_len, negative)


def test_exponent_length():
    assert exponent_length(0) == 0
    assert exponent_length(5) == 2
    assert exponent_length(40) == 3
    assert exponent_length(-5) == 3
    assert exponent_length(-31) == 4


def test_exact_zero_collapses_to_a_point():
    descriptor = ResultDescriptor(-1, MSD_UNKNOWN, LSD_EXACT_ZERO, 1)
    scroll_range = make_calculator().calculate(descriptor)
    assert not scroll_range.scrollable
    assert scroll_range.min_pos == scroll_range.max_pos == scroll_range.initial_pos == -1


def test_possibly_tiny_value_scrolls_far_right():
    descriptor = ResultDescriptor(9, MSD_UNKNOWN, LSD_UNBOUNDED, 1)
    scroll_range = make_calculator().calculate(descriptor)
    assert scroll_range.scrollable
    assert scroll_range.min_pos == scroll_range.initial_pos == 9
    assert scroll_range.max_pos == MAX_RIGHT_SCROLL
    assert scroll_range.max_char_pos == MAX_RIGHT_SCROLL


def test_repeating_fraction_is_unbounded():
    scroll_range = make_calculator().calculate(exact(9, 2, LSD_UNBOUNDED, 1))
    assert scroll_range.scrollable
    assert scroll_range.min_char_pos == -1
    assert scroll_range.min_pos == 9
    assert scroll_range.max_pos == MAX_RIGHT_SCROLL


def test_huge_exact_lsd_is_treated_as_unbounded():
    scroll_range = make_calculator().calculate(exact(9, 2, MAX_RIGHT_SCROLL + 1, 1))
    assert scroll_range.scrollable
    assert scroll_range.max_pos == MAX_RIGHT_SCROLL


def test_short_integer_is_static():
    scroll_range = make_calculator().calculate(exact(-1, 0, -1, 5))
    assert not scroll_range.scrollable
    assert scroll_range.min_char_pos == -5
    assert scroll_range.max_char_pos == -1
    assert scroll_range.min_pos == scroll_range.max_pos == scroll_range.initial_pos == -1


def test_few_trailing_zeroes_are_shown():
    # 1200000: último dígito distinto de cero en 10^5.
    scroll_range = make_calculator().calculate(exact(-1, 0, -6, 7))
    assert not scroll_range.scrollable
    assert scroll_range.max_char_pos == -1


def test_power_of_ten_reserves_positive_exponent():
    # 10^40 no es desplazable; se fija en la posición máxima.
    scroll_range = make_calculator().calculate(exact(-31, 0, -41, 41))
    assert not scroll_range.scrollable
    assert scroll_range.min_char_pos == -41
    assert scroll_range.max_char_pos == -38
    assert scroll_range.min_pos == scroll_range.max_pos == scroll_range.initial_pos == -38


def test_factorial_scrolls_to_last_nonzero_digit():
    # 30! = 265252859812191058636308480000000
    scroll_range = make_calculator().calculate(exact(-23, 0, -8, 33))
    assert scroll_range.scrollable
    assert scroll_range.min_char_pos == -33
    assert scroll_range.max_char_pos == -6
    assert scroll_range.min_pos == scroll_range.initial_pos == -23
    assert scroll_range.max_pos == -6


def test_tiny_exact_value_reserves_negative_exponent():
    # 3e-30
    scroll_range = make_calculator().calculate(exact(40, 31, 30, 1))
    assert not scroll_range.scrollable
    assert scroll_range.min_char_pos == 30
    assert scroll_range.max_char_pos == 34
    assert scroll_range.min_pos == scroll_range.max_pos == scroll_range.initial_pos == 34


@pytest.mark.parametrize("msd, expected", [(3, -1), (6, -1), (12, 11)])
def test_leading_zero_snapping(msd, expected):
    scroll_range = make_calculator().calculate(exact(9, msd, LSD_UNBOUNDED, 1))
    assert scroll_range.min_char_pos == expected


def test_negative_integer_counts_the_sign():
    scroll_range = make_calculator().calculate(exact(-6, 1, -1, 16, negative=True))
    assert scroll_range.scrollable
    assert scroll_range.min_char_pos == -16
    assert scroll_range.max_char_pos == -1
    assert scroll_range.min_pos == -6
    assert scroll_range.max_pos == -1


def test_pixel_positions_scale_with_char_width():
    scroll_range = make_calculator(width=25, char_width=2.5).calculate(exact(-23, 0, -8, 33))
    assert scroll_range.min_pos == -57
    assert scroll_range.max_pos == -15
    assert scroll_range.max_char_pos == -6


@pytest.mark.parametrize(
    "descriptor",
    [
        ResultDescriptor(-1, MSD_UNKNOWN, LSD_EXACT_ZERO, 1),
        ResultDescriptor(9, MSD_UNKNOWN, LSD_UNBOUNDED, 1),
        exact(9, 2, LSD_UNBOUNDED, 1),
        exact(-1, 0, -1, 5),
        exact(-31, 0, -41, 41),
        exact(-23, 0, -8, 33),
        exact(40, 31, 30, 1),
        exact(2, 0, 2, 1),
        exact(-6, 1, -1, 16, negative=True),
        exact(500, 0, -1, 1),
    ],
)
def test_range_invariants(descriptor):
    scroll_range = make_calculator().calculate(descriptor)
    assert scroll_range.min_pos <= scroll_range.initial_pos <= scroll_range.max_pos
    if not scroll_range.scrollable:
        assert scroll_range.min_pos == scroll_range.max_pos == scroll_range.initial_pos


def test_inconsistent_descriptors_are_rejected():
    with pytest.raises(ValueError):
        ResultDescriptor(0, LSD_UNBOUNDED, LSD_UNBOUNDED, 1)
    with pytest.raises(ValueError):
        ResultDescriptor(0, Position.exact(0), LSD_EXACT_ZERO, 1)
    with pytest.raises(ValueError):
        ResultDescriptor(0, Position.exact(0), LSD_UNBOUNDED, -1)


def test_descriptor_from_whole_part():
    descriptor = ResultDescriptor.from_whole_part(-1, Position.exact(1), Position.exact(-1), "-123")
    assert descriptor.negative
    assert descriptor.truncated_integer_part_length == 4
