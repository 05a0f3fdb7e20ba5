"""Domain service: customer details validation.

Two rule sets exist.  The basic set is what the quick checkout form
enforces (name and email).  The strict set is the full customer-details
form: email format, a 10-digit phone number, a delivery address, and a
15-character GSTIN tax identifier.

All rules are evaluated before reporting, so the caller gets every
failing field at once rather than one at a time.
"""

from __future__ import annotations

import re

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.order import CustomerInfo

_EMAIL = re.compile(r"\S+@\S+\.\S+")
_NON_DIGIT = re.compile(r"\D")
_GSTIN = re.compile(r"^[0-9]{2}[A-Z]{5}[0-9]{4}[A-Z][1-9A-Z]Z[0-9A-Z]$")


def basic_errors(customer: CustomerInfo) -> dict[str, str]:
    errors: dict[str, str] = {}
    if not customer.name.strip():
        errors["name"] = "Name is required"
    if not customer.email.strip():
        errors["email"] = "Email is required"
    return errors


def strict_errors(customer: CustomerInfo) -> dict[str, str]:
    errors = basic_errors(customer)

    if "email" not in errors and not _EMAIL.search(customer.email):
        errors["email"] = "Please enter a valid email address"

    if not customer.phone.strip():
        errors["phone"] = "Phone number is required"
    elif len(_NON_DIGIT.sub("", customer.phone)) != 10:
        errors["phone"] = "Please enter a valid 10-digit phone number"

    address = customer.shipping_address
    if address is None or not address.street.strip():
        errors["address"] = "Address is required"

    gstin = customer.tax_identifier.strip().upper()
    if not gstin:
        errors["tax_identifier"] = "GST number is required"
    elif len(gstin) != 15:
        errors["tax_identifier"] = "GST number must be exactly 15 characters"
    elif not _GSTIN.match(gstin):
        errors["tax_identifier"] = "Please enter a valid GST number format"

    return errors


def validate_customer(customer: CustomerInfo, strict: bool = False) -> None:
    """Raise ``ValidationError`` listing every failing field."""
    errors = strict_errors(customer) if strict else basic_errors(customer)
    if errors:
        raise ValidationError.for_fields(errors)
