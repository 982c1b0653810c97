"""
Tests for published range rounding.
"""

import pytest

from app.services.quote.money import MIN_RANGE_WIDTH, publishable_range, round_to_step


@pytest.mark.parametrize(
    "amount,expected",
    [
        (0, 0),
        (24, 0),
        (25, 50),  # halves round up
        (74, 50),
        (75, 100),
        (125, 150),
        (4250, 4250),
        (9999, 10000),
    ],
)
def test_round_to_step(amount, expected):
    assert round_to_step(amount) == expected


@pytest.mark.parametrize("amount", [-1, -25, -400])
def test_round_to_step_never_negative(amount):
    assert round_to_step(amount) == 0


def test_round_to_step_custom_step():
    assert round_to_step(149, step=100) == 100
    assert round_to_step(150, step=100) == 200


def test_publishable_range_enforces_minimum_width():
    assert publishable_range(0, 0) == (0, MIN_RANGE_WIDTH)
    assert publishable_range(600, 800) == (600, 1100)


def test_publishable_range_width_holds_after_rounding():
    low, high = publishable_range(1030, 1100)
    assert low == 1050
    assert high - low >= MIN_RANGE_WIDTH
    assert high % 50 == 0


def test_publishable_range_keeps_wide_ranges():
    assert publishable_range(2500, 4000) == (2500, 4000)


def test_publishable_range_clamps_negative_low():
    low, high = publishable_range(-300, 100)
    assert low == 0
    assert high == 500
