"""Tests for core validation utilities."""

from decimal import Decimal

import pytest

from shopledger.core.validators import (
    sanitize_html,
    validate_currency,
    validate_email,
    validate_person_name,
    validate_phone,
)


class TestValidateCurrency:
    """Test currency validation."""

    def test_quantizes_to_two_places(self):
        assert validate_currency("10") == Decimal("10.00")
        assert validate_currency(Decimal("10.5")) == Decimal("10.50")

    def test_negative_currency_fails(self):
        with pytest.raises(ValueError, match="cannot be negative"):
            validate_currency(Decimal("-10.00"))

    def test_negative_allowed_for_opening_balance(self):
        assert validate_currency("-250.00", allow_negative=True) == Decimal("-250.00")

    def test_exceeds_max_fails(self):
        with pytest.raises(ValueError, match="exceeds maximum"):
            validate_currency(Decimal("10000000000.00"))

    def test_invalid_format_fails(self):
        with pytest.raises(ValueError, match="Invalid currency format"):
            validate_currency("invalid")

    def test_infinity_fails(self):
        with pytest.raises(ValueError, match="Invalid currency format"):
            validate_currency("Infinity")

    def test_three_decimals_fail(self):
        with pytest.raises(ValueError, match="more than 2 decimal places"):
            validate_currency("1.005")


class TestValidatePersonName:
    def test_keeps_shop_punctuation(self):
        assert validate_person_name("Gupta & Sons") == "Gupta &amp; Sons"

    def test_empty_fails(self):
        with pytest.raises(ValueError, match="cannot be empty"):
            validate_person_name("   ")

    def test_too_short_fails(self):
        with pytest.raises(ValueError, match="at least 2 characters"):
            validate_person_name("A", "Customer name")


class TestValidatePhone:
    def test_valid_phone(self):
        assert validate_phone(" +91 98765-43210 ") == "+91 98765-43210"

    def test_empty_is_none(self):
        assert validate_phone("") is None
        assert validate_phone(None) is None

    def test_letters_rejected(self):
        with pytest.raises(ValueError, match="can only contain"):
            validate_phone("98765abc")

    def test_too_few_digits(self):
        with pytest.raises(ValueError, match="at least 5 digits"):
            validate_phone("12-3")


class TestSanitizeHtml:
    def test_strips_tags(self):
        assert sanitize_html("<script>alert(1)</script>Rice") == "alert(1)Rice"

    def test_escapes_quotes(self):
        assert sanitize_html('5" pipe') == "5&quot; pipe"

    def test_blank_is_none(self):
        assert sanitize_html("  ") is None
        assert sanitize_html(None) is None


class TestValidateEmail:
    def test_lowercases(self):
        assert validate_email(" Owner@Shop.IN ") == "owner@shop.in"

    def test_empty_is_none(self):
        assert validate_email("") is None

    def test_invalid(self):
        with pytest.raises(ValueError, match="Invalid email format"):
            validate_email("not-an-email")
