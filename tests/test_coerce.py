from decimal import Decimal

import pytest

from cotizaobra.core.coerce import to_number


@pytest.mark.parametrize("value", [0, 2, 3.5, -4, 1e6])
def test_numbers_pass_through(value):
    assert to_number(value) == value
    assert to_number(to_number(value)) == value


def test_numeric_text():
    assert to_number("12") == 12.0
    assert to_number(" 3.5 ") == 3.5
    assert to_number("1e3") == 1000.0
    assert to_number("-2") == -2.0


@pytest.mark.parametrize(
    "value",
    ["", "   ", None, "abc", "12,5", "1_000", "nan", "inf", "-Infinity",
     float("nan"), float("inf"), True, False, [], {}, object()],
)
def test_invalid_becomes_zero(value):
    assert to_number(value) == 0.0


def test_decimal():
    assert to_number(Decimal("19.99")) == pytest.approx(19.99)
    assert to_number(Decimal("NaN")) == 0.0
