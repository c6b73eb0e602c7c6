from __future__ import annotations

import pytest

from crmdesk.core.errors import ValidationFailed
from crmdesk.services.validation import (
    ensure_valid,
    validate_activity,
    validate_company,
    validate_contact,
    validate_deal,
    validate_task,
)


@pytest.mark.unit
def test_contact_empty_email_is_required() -> None:
    errors = validate_contact({"first_name": "Jane", "last_name": "Doe", "email": ""})
    assert errors == {"email": "Email is required"}


@pytest.mark.unit
def test_contact_reports_every_missing_field() -> None:
    errors = validate_contact({})
    assert errors == {
        "first_name": "First name is required",
        "last_name": "Last name is required",
        "email": "Email is required",
    }


@pytest.mark.unit
@pytest.mark.parametrize("email", ["jane", "jane@", "jane@example", "jane @example.com"])
def test_contact_malformed_email(email: str) -> None:
    errors = validate_contact({"first_name": "Jane", "last_name": "Doe", "email": email})
    assert errors == {"email": "Email is invalid"}


@pytest.mark.unit
@pytest.mark.parametrize("phone", ["555-123-4567", "(555) 123-4567", "+5551234567", "555.123.456789"])
def test_contact_accepts_common_phone_formats(phone: str) -> None:
    form = {"first_name": "Jane", "last_name": "Doe", "email": "jane@example.com", "phone": phone}
    assert validate_contact(form) == {}


@pytest.mark.unit
def test_contact_rejects_bad_phone_and_type() -> None:
    form = {
        "first_name": "Jane",
        "last_name": "Doe",
        "email": "jane@example.com",
        "phone": "12-ab",
        "type": "reseller",
    }
    errors = validate_contact(form)
    assert errors["phone"] == "Phone number is invalid"
    assert errors["type"] == "Type must be one of: lead, customer, partner, vendor"


@pytest.mark.unit
def test_partial_contact_checks_only_given_fields() -> None:
    assert validate_contact({"phone": "555-123-4567"}, partial=True) == {}
    assert validate_contact({"email": ""}, partial=True) == {"email": "Email is required"}


@pytest.mark.unit
def test_company_required_fields_and_website() -> None:
    errors = validate_company({"name": "Acme", "website": "acme.com"})
    assert errors == {
        "industry": "Industry is required",
        "size": "Company size is required",
        "location": "Location is required",
        "website": "Please enter a valid URL (including http:// or https://)",
    }

    ok = {"name": "Acme", "industry": "Tech", "size": "51-200", "location": "Berlin",
          "website": "https://acme.com"}
    assert validate_company(ok) == {}


@pytest.mark.unit
def test_task_due_date_checks() -> None:
    assert validate_task({"title": "Call Jane"}) == {"due_date": "Due date is required"}
    assert validate_task({"title": "Call Jane", "due_date": "soon"}) == {"due_date": "Invalid date format"}
    assert validate_task({"title": "Call Jane", "due_date": "2026-10-20"}) == {}


@pytest.mark.unit
def test_task_rejects_unknown_priority() -> None:
    errors = validate_task({"title": "x", "due_date": "2026-10-20", "priority": "critical"})
    assert errors == {"priority": "Priority must be one of: low, medium, high, urgent"}


@pytest.mark.unit
def test_deal_required_fields_share_one_message() -> None:
    errors = validate_deal({"name": "Renewal"})
    assert errors == {
        "company": "Please fill in all required fields",
        "value": "Please fill in all required fields",
    }


@pytest.mark.unit
def test_activity_requires_title() -> None:
    assert validate_activity({"type": "call"}) == {"title": "Title is required"}


@pytest.mark.unit
def test_ensure_valid_raises_with_all_errors() -> None:
    ensure_valid({})

    with pytest.raises(ValidationFailed) as exc_info:
        ensure_valid({"email": "Email is required", "last_name": "Last name is required"})

    assert exc_info.value.errors == {
        "email": "Email is required",
        "last_name": "Last name is required",
    }
    assert exc_info.value.user_message == "Please fix the errors in the form"
