import pytest
from boxoffice.core.utils.text_utils import strip_text
from boxoffice.core.utils.validators import normalize_phone_or_none, blank_to_none


@pytest.mark.parametrize(
    "test, expected",
    [
        (" Angel ", "Angel"),
        ("", None),
        ("   ", None),
        ("\t \n", None),
        (None, None),
        ("  Blue   Note  ", "Blue   Note"),
        (" test ", "test"),
        (12, 12)
    ]
)
def test_text_utils(test, expected):
    assert strip_text(test) == expected


def test_normalize_phone_formats_e164():
    assert normalize_phone_or_none("+1 650-253-0000") == "+16502530000"


@pytest.mark.parametrize("value", [None, "", "   "])
def test_normalize_phone_blank_is_none(value):
    assert normalize_phone_or_none(value) is None


def test_normalize_phone_invalid_raises():
    with pytest.raises(ValueError):
        normalize_phone_or_none("not a phone")


@pytest.mark.parametrize("value, expected", [("", None), ("  ", None), ("a@b.io", "a@b.io"), (None, None)])
def test_blank_to_none(value, expected):
    assert blank_to_none(value) == expected
