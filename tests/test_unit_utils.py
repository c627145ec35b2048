"""Tests for memory unit normalization."""

import pytest

from procsnitch.exceptions import MetricParseError
from procsnitch.util.unit_utils import to_mb


def test_kilobyte_suffix():
    assert to_mb("1024k") == 1.0


def test_gigabyte_suffix():
    assert to_mb("2g") == 2048.0


def test_megabyte_suffix_unchanged():
    assert to_mb("512m") == 512.0


def test_fractional_gigabytes():
    assert to_mb("1.5g") == 1536.0


def test_terabyte_suffix():
    assert to_mb("1t") == 1024.0 * 1024.0


def test_bare_number_is_kilobytes():
    """top prints small values as plain KiB."""
    assert to_mb("2048") == 2.0
    assert to_mb("512") == 0.5


def test_signed_value():
    assert to_mb("-1m") == -1.0


@pytest.mark.parametrize("field", ["abcm", "1.2.3g", "", "m", "12x"])
def test_malformed_field_raises(field):
    with pytest.raises(MetricParseError):
        to_mb(field)
