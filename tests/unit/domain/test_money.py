from decimal import Decimal

import pytest

from homehive.domain.errors import InvalidMoneyError
from homehive.domain.value_objects.money import Money


def test_amount_is_quantized_to_cents():
    money = Money(amount="10.005", currency_code="USD")
    assert money.amount == Decimal("10.01")
    assert money.to_cents() == 1001


def test_zero_is_allowed():
    assert Money(amount=0, currency_code="USD").is_zero()


@pytest.mark.parametrize("amount", ["-1", "abc", "NaN", "Infinity"])
def test_invalid_amounts_are_rejected(amount):
    with pytest.raises(InvalidMoneyError):
        Money(amount=amount, currency_code="USD")


def test_currency_code_must_have_three_letters():
    with pytest.raises(InvalidMoneyError):
        Money(amount=Decimal("5"), currency_code="US")


def test_from_cents():
    assert Money.from_cents(12345, "MXN") == Money(amount=Decimal("123.45"), currency_code="MXN")
