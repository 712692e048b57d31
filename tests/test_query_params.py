import pytest

from app.shared.query_params import positive_int_or_default


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, 10),
        ("", 10),
        ("abc", 10),
        ("0", 10),
        ("-3", 10),
        ("2.5", 10),
        (" 7 ", 7),
        ("250", 250),
    ],
)
def test_positive_int_or_default(value, expected):
    assert positive_int_or_default(value, 10) == expected
