import pytest

from keyboard_qa.pricing import (
    UINT128_MAX,
    calculate_buy_price,
    calculate_sell_price,
    multiply_percentage,
)


def test_worked_example():
    assert calculate_buy_price(1, 10) == 240625


def test_first_key_is_free():
    assert calculate_buy_price(0, 1) == 0


def test_buy_and_sell_prices_match_across_same_supplies():
    # Buy 10 at supply 5 (reaching 15), then sell those 10 back.
    assert calculate_buy_price(5, 10) == calculate_sell_price(15, 10)


@pytest.mark.parametrize("supply", [1, 2, 7, 50, 1000])
def test_buying_in_parts_costs_the_same_as_at_once(supply):
    whole = calculate_buy_price(supply, 12)
    parts = calculate_buy_price(supply, 5) + calculate_buy_price(supply + 5, 7)
    assert whole == parts


def test_price_rises_with_supply():
    prices = [calculate_buy_price(supply, 1) for supply in range(1, 30)]
    assert prices == sorted(prices)
    assert len(set(prices)) == len(prices)


def test_buying_nothing_costs_nothing():
    assert calculate_buy_price(9, 0) == 0
    assert calculate_sell_price(9, 0) == 0


def test_selling_everything_matches_buying_from_zero():
    assert calculate_sell_price(1, 1) == calculate_buy_price(0, 1)


@pytest.mark.parametrize("amount", [0, 2, 5])
def test_empty_supply_underflows_unless_buying_one(amount):
    with pytest.raises(OverflowError):
        calculate_buy_price(0, amount)


def test_selling_more_than_supply_underflows():
    with pytest.raises(OverflowError):
        calculate_sell_price(3, 4)


def test_huge_supply_overflows():
    with pytest.raises(OverflowError):
        calculate_buy_price(2**64, 1)


def test_multiply_percentage():
    assert multiply_percentage(240625, 5) == 12031
    assert multiply_percentage(1234, 100) == 1234
    assert multiply_percentage(99, 0) == 0


def test_multiply_percentage_overflow():
    with pytest.raises(OverflowError):
        multiply_percentage(UINT128_MAX, 2)


def test_negative_inputs_rejected():
    with pytest.raises(ValueError):
        calculate_buy_price(-1, 1)
    with pytest.raises(ValueError):
        multiply_percentage(10, -5)


def test_percentage_is_thirty_two_bit():
    with pytest.raises(ValueError):
        multiply_percentage(10, 2**32)


def test_non_integers_rejected():
    with pytest.raises(TypeError):
        calculate_buy_price(1.5, 1)