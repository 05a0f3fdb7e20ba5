"""Unit tests for checkout customer validation."""

import pytest

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.order import Address, CustomerInfo
from storefront.domain.service.customer_validation import (
    basic_errors,
    strict_errors,
    validate_customer,
)

VALID_GSTIN = "27AAPFU0939F1ZV"


def _strict_customer(**overrides) -> CustomerInfo:
    fields = dict(
        name="Asha Rao",
        email="asha@example.com",
        phone="98765 43210",
        tax_identifier=VALID_GSTIN,
        shipping_address=Address(street="12 MG Road", city="Pune"),
    )
    fields.update(overrides)
    return CustomerInfo(**fields)


class TestBasicRules:

    def test_valid(self):
        validate_customer(CustomerInfo(name="Asha", email="asha@example.com"))

    def test_blank_name(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_customer(CustomerInfo(name="   ", email="asha@example.com"))
        assert exc_info.value.errors == {"name": "Name is required"}

    def test_reports_every_failing_field(self):
        errors = basic_errors(CustomerInfo(name="", email=""))
        assert set(errors) == {"name", "email"}

    def test_message_lists_fields(self):
        with pytest.raises(ValidationError, match="Invalid customer details: name, email"):
            validate_customer(CustomerInfo(name="", email=""))

    def test_basic_rules_ignore_email_format(self):
        validate_customer(CustomerInfo(name="Asha", email="not-an-email"))


class TestStrictRules:

    def test_valid(self):
        validate_customer(_strict_customer(), strict=True)

    def test_lowercase_gstin_accepted(self):
        assert strict_errors(_strict_customer(tax_identifier=VALID_GSTIN.lower())) == {}

    def test_bad_email(self):
        errors = strict_errors(_strict_customer(email="asha@example"))
        assert errors == {"email": "Please enter a valid email address"}

    def test_missing_email_reported_once(self):
        errors = strict_errors(_strict_customer(email=""))
        assert errors["email"] == "Email is required"

    @pytest.mark.parametrize("phone", ["12345", "+91 98765 43210", "98765432100"])
    def test_phone_must_have_ten_digits(self, phone):
        errors = strict_errors(_strict_customer(phone=phone))
        assert errors == {"phone": "Please enter a valid 10-digit phone number"}

    def test_phone_required(self):
        assert strict_errors(_strict_customer(phone=""))["phone"] == "Phone number is required"

    def test_formatted_phone_accepted(self):
        assert strict_errors(_strict_customer(phone="(987) 654-3210")) == {}

    def test_address_required(self):
        errors = strict_errors(_strict_customer(shipping_address=None))
        assert errors == {"address": "Address is required"}

    def test_gstin_required(self):
        errors = strict_errors(_strict_customer(tax_identifier=""))
        assert errors == {"tax_identifier": "GST number is required"}

    def test_gstin_length(self):
        errors = strict_errors(_strict_customer(tax_identifier="27AAPFU0939F1Z"))
        assert errors == {"tax_identifier": "GST number must be exactly 15 characters"}

    def test_gstin_format(self):
        errors = strict_errors(_strict_customer(tax_identifier="AAAAAAAAAAAAAAA"))
        assert errors == {"tax_identifier": "Please enter a valid GST number format"}

    def test_errors_carried_on_exception(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_customer(_strict_customer(phone="1", tax_identifier=""), strict=True)
        assert set(exc_info.value.errors) == {"phone", "tax_identifier"}
