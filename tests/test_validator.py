import pytest

from errors import ValidationError
from validator import AssetIdentifier, validate_address

from conftest import CA


def test_accepts_44_char_address():
    assert validate_address(CA) == AssetIdentifier(CA)


def test_accepts_43_char_address():
    assert validate_address(CA[:43]).address == CA[:43]


def test_strips_surrounding_whitespace():
    assert str(validate_address(f"  {CA}\n")) == CA


@pytest.mark.parametrize("text", ["", "abc", CA[:42], CA + "A", CA * 2])
def test_rejects_length_outside_window(text):
    with pytest.raises(ValidationError) as exc:
        validate_address(text)
    assert exc.value.length == len(text)


@pytest.mark.parametrize("text", [CA[:43] + "-", CA[:42] + "_x", CA[:20] + " " + CA[:23]])
def test_rejects_non_alphanumeric(text):
    with pytest.raises(ValidationError) as exc:
        validate_address(text)
    assert exc.value.length == len(text)
    assert "letters and digits" in exc.value.reason

