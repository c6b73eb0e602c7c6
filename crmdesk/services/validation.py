from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from datetime import date, datetime
from enum import StrEnum
from typing import Any

from crmdesk.core.errors import ValidationFailed
from crmdesk.schemas.common import (
    ActivityType,
    ContactStatus,
    ContactType,
    DealStage,
    TaskCategory,
    TaskPriority,
    TaskStatus,
)

EMAIL_RE = re.compile(r"\S+@\S+\.\S+")
PHONE_RE = re.compile(r"^[+]?[(]?[0-9]{3}[)]?[-\s.]?[0-9]{3}[-\s.]?[0-9]{4,6}$")
URL_RE = re.compile(r"^(http|https)://[^ \"]+$")

Validator = Callable[..., dict[str, str]]


def _blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


class _Rules:
    """Collects messages for one form; in partial mode absent keys are skipped."""

    def __init__(self, form: Mapping[str, Any], partial: bool) -> None:
        self.form = form
        self.partial = partial
        self.errors: dict[str, str] = {}

    def checks(self, field: str) -> bool:
        return not self.partial or field in self.form

    def required(self, field: str, message: str) -> bool:
        if self.checks(field) and _blank(self.form.get(field)):
            self.errors[field] = message
            return False
        return True

    def pattern(self, field: str, regex: re.Pattern[str], message: str) -> None:
        if field in self.errors or not self.checks(field):
            return
        value = self.form.get(field)
        if not _blank(value) and not regex.search(str(value).strip()):
            self.errors[field] = message

    def choice(self, field: str, enum_cls: type[StrEnum], label: str) -> None:
        if field in self.errors or not self.checks(field):
            return
        value = self.form.get(field)
        if _blank(value) or isinstance(value, enum_cls):
            return
        if str(value).strip().lower() not in {member.value for member in enum_cls}:
            allowed = ", ".join(member.value for member in enum_cls)
            self.errors[field] = f"{label} must be one of: {allowed}"


def _parse_date(value: Any) -> date | None:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip()[:10])
    except ValueError:
        return None


def validate_contact(form: Mapping[str, Any], partial: bool = False) -> dict[str, str]:
    rules = _Rules(form, partial)
    rules.required("first_name", "First name is required")
    rules.required("last_name", "Last name is required")
    if rules.required("email", "Email is required"):
        rules.pattern("email", EMAIL_RE, "Email is invalid")
    rules.pattern("phone", PHONE_RE, "Phone number is invalid")
    rules.choice("type", ContactType, "Type")
    rules.choice("status", ContactStatus, "Status")
    return rules.errors


def validate_company(form: Mapping[str, Any], partial: bool = False) -> dict[str, str]:
    rules = _Rules(form, partial)
    rules.required("name", "Company name is required")
    rules.required("industry", "Industry is required")
    rules.required("size", "Company size is required")
    rules.required("location", "Location is required")
    rules.pattern("website", URL_RE, "Please enter a valid URL (including http:// or https://)")
    return rules.errors


def validate_task(form: Mapping[str, Any], partial: bool = False) -> dict[str, str]:
    rules = _Rules(form, partial)
    rules.required("title", "Title is required")
    if rules.required("due_date", "Due date is required") and rules.checks("due_date"):
        if _parse_date(form.get("due_date")) is None:
            rules.errors["due_date"] = "Invalid date format"
    rules.choice("priority", TaskPriority, "Priority")
    rules.choice("category", TaskCategory, "Category")
    rules.choice("status", TaskStatus, "Status")
    return rules.errors


def validate_deal(form: Mapping[str, Any], partial: bool = False) -> dict[str, str]:
    rules = _Rules(form, partial)
    for field in ("name", "company", "value"):
        rules.required(field, "Please fill in all required fields")
    rules.choice("stage", DealStage, "Stage")
    return rules.errors


def validate_activity(form: Mapping[str, Any], partial: bool = False) -> dict[str, str]:
    rules = _Rules(form, partial)
    rules.required("title", "Title is required")
    rules.choice("type", ActivityType, "Type")
    return rules.errors


def ensure_valid(errors: dict[str, str]) -> None:
    """Abort submission with every failing field at once."""
    if errors:
        raise ValidationFailed(errors)
