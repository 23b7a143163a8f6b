from decimal import Decimal

import pytest

from expenses import money
from expenses.errors import InvalidAmountError


@pytest.mark.parametrize(
    "text,cents",
    [
        ("12.30", 1230),
        ("12.3", 1230),
        ("12", 1200),
        (" 7. ", 700),
        (".99", 99),
        ("+1.05", 105),
        ("-0.50", -50),
        ("0.005", 1),
        ("0.004", 0),
        ("2.675", 268),
        ("-2.675", -268),
        ("999999999999.99", money.MAX_MINOR_UNITS),
    ],
)
def test_parse_amount_rounds_half_up(text, cents):
    assert money.parse_amount(text) == cents


@pytest.mark.parametrize(
    "text",
    ["", "  ", "abc", "1,50", "1.2.3", "1e3", "NaN", "Infinity", "--1", ".", "1000000000000.00"],
)
def test_parse_amount_rejects_malformed(text):
    with pytest.raises(InvalidAmountError):
        money.parse_amount(text)


def test_parse_amount_rejects_non_strings():
    with pytest.raises(InvalidAmountError):
        money.parse_amount(12.3)


@pytest.mark.parametrize("text", ["12.30", "0.01", "-3.07", "1000.00", "5.5", "42"])
def test_wire_round_trip_normalizes_to_two_digits(text):
    expected = f"{Decimal(text):.2f}"
    assert money.format_amount(money.parse_amount(text)) == expected


@pytest.mark.parametrize(
    "cents,text",
    [(0, "0.00"), (5, "0.05"), (1230, "12.30"), (-5, "-0.05"), (-123456, "-1234.56")],
)
def test_format_amount(cents, text):
    assert money.format_amount(cents) == text


@pytest.mark.parametrize("cents", [1, 99, 1230, -50, money.MAX_MINOR_UNITS])
def test_storage_round_trip(cents):
    stored = money.encode(cents)
    assert isinstance(stored, Decimal)
    assert stored.as_tuple().exponent == -2
    assert money.decode(stored) == cents


def test_encode_rejects_non_integers_and_out_of_range():
    with pytest.raises(InvalidAmountError):
        money.encode(12.3)
    with pytest.raises(InvalidAmountError):
        money.encode(True)
    with pytest.raises(InvalidAmountError):
        money.encode(money.MAX_MINOR_UNITS + 1)


def test_decode_accepts_strings_and_whole_units():
    assert money.decode("12.30") == 1230
    assert money.decode(7) == 700
    with pytest.raises(InvalidAmountError):
        money.decode("twelve")
    with pytest.raises(InvalidAmountError):
        money.decode(Decimal("NaN"))


@pytest.mark.parametrize(
    "text,cents",
    [
        (".004" + "9" * 28, 0),
        ("0.005" + "0" * 27, 1),
        ("-1.004" + "9" * 26, -100),
    ],
)
def test_long_fractions_round_once_to_the_nearest_cent(text, cents):
    assert money.parse_amount(text) == cents


@pytest.mark.parametrize("text", ["١٢.٣٠", "12.٣٠", "１２.30"])
def test_only_ascii_digits_are_accepted(text):
    with pytest.raises(InvalidAmountError):
        money.parse_amount(text)
