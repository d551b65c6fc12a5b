"""Bonding-curve prices for keys, in 128-bit unsigned arithmetic."""

from __future__ import annotations

UINT128_MAX = 2**128 - 1
_UINT32_MAX = 2**32 - 1


def _uint(value: int, name: str, maximum: int = UINT128_MAX) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an integer, got {type(value).__name__}")
    if not 0 <= value <= maximum:
        raise ValueError(f"{name} out of range: {value}")
    return value


def _checked(result: int, op: str, a: int, b: int) -> int:
    if not 0 <= result <= UINT128_MAX:
        raise OverflowError(f"Cannot {op} with {a} and {b}")
    return result


def _add(a: int, b: int) -> int:
    return _checked(a + b, "Add", a, b)


def _sub(a: int, b: int) -> int:
    return _checked(a - b, "Sub", a, b)


def _mul(a: int, b: int) -> int:
    return _checked(a * b, "Mul", a, b)


def _calculate_price(supply: int, amount: int) -> int:
    """Price of `amount` keys starting at `supply`: the sum of squares over that range."""
    if supply == 0:
        sum1 = 0
    else:
        below = _sub(supply, 1)
        sum1 = _mul(_mul(below, supply), _add(_mul(2, below), 1)) // 6

    if supply == 0 and amount == 1:
        sum2 = 0
    else:
        top = _add(_sub(supply, 1), amount)
        sum2 = _mul(_mul(top, _add(supply, amount)), _add(_mul(top, 2), 1)) // 6

    summation = _sub(sum2, sum1)
    return _mul(summation, 1_000_000) // 1_600


def calculate_buy_price(supply_before_buy: int, buy_amount: int) -> int:
    """Price of buying `buy_amount` keys when `supply_before_buy` exist."""
    return _calculate_price(
        _uint(supply_before_buy, "supply_before_buy"), _uint(buy_amount, "buy_amount")
    )


def calculate_sell_price(supply_before_sell: int, sell_amount: int) -> int:
    """Price of selling `sell_amount` keys when `supply_before_sell` exist.

    Equal to the price of buying the same keys back from the lower supply.
    """
    supply = _uint(supply_before_sell, "supply_before_sell")
    amount = _uint(sell_amount, "sell_amount")
    return _calculate_price(_sub(supply, amount), amount)


def multiply_percentage(price: int, percentage: int) -> int:
    """`percentage` percent of `price`, rounded down."""
    price = _uint(price, "price")
    percentage = _uint(percentage, "percentage", _UINT32_MAX)
    return _mul(price, percentage) // 100